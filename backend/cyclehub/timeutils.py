"""
Работа со временем: все даты в UTC, сравнение по полуночи UTC
"""

from datetime import datetime, timezone
from typing import Optional


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def as_utc(value: Optional[datetime]) -> Optional[datetime]:
    """SQLite возвращает naive datetime - считаем такие значения UTC"""
    if value is None:
        return None
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def utc_day_diff(earlier: datetime, later: datetime) -> int:
    """Разница в календарных днях между двумя моментами (полночь UTC)"""
    return (as_utc(later).date() - as_utc(earlier).date()).days
