"""
Проверка декларативных критериев наград по статистике пользователя
"""

import enum
import logging
from typing import Iterable, List, Optional

from cyclehub.services.stats import UserStats

logger = logging.getLogger(__name__)


class CriteriaType(str, enum.Enum):
    TOTAL_DISTANCE = "totalDistance"
    ROUTES_CREATED = "routesCreated"
    REPORTS_SUBMITTED = "reportsSubmitted"
    REVIEWS_WRITTEN = "reviewsWritten"
    RIDES_COMPLETED = "ridesCompleted"


# Тип критерия -> поле UserStats
STATS_FIELDS = {
    CriteriaType.TOTAL_DISTANCE: "total_distance",
    CriteriaType.ROUTES_CREATED: "routes_created",
    CriteriaType.REPORTS_SUBMITTED: "reports_submitted",
    CriteriaType.REVIEWS_WRITTEN: "reviews_written",
    CriteriaType.RIDES_COMPLETED: "rides_completed",
}


def parse_criteria_type(value: str) -> Optional[CriteriaType]:
    try:
        return CriteriaType(value)
    except ValueError:
        return None


def qualifies(stats: UserStats, criteria_type: str, threshold: float) -> bool:
    """Критерий выполнен, если stats[поле] >= threshold. Неизвестный тип - никогда"""
    kind = parse_criteria_type(criteria_type)
    if kind is None:
        logger.warning(f"Неизвестный тип критерия награды: '{criteria_type}', пропускаем")
        return False
    return getattr(stats, STATS_FIELDS[kind]) >= threshold


def evaluate(stats: UserStats, candidates: Iterable) -> List:
    """Подмножество кандидатов, чей порог достигнут. Порядок каталога сохраняется"""
    return [
        reward for reward in candidates
        if qualifies(stats, reward.criteria_type, reward.criteria_threshold)
    ]
