"""
Награды: каталог и движок выдачи достижений
"""

import logging
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Optional

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from cyclehub.errors import NotFoundError, ConflictError
from cyclehub.models.reward import Reward, user_achievements
from cyclehub.models.user import User
from cyclehub.pagination import fetch_page, paginate_result
from cyclehub.schemas.common import PaginationParams
from cyclehub.schemas.reward import RewardCreate, RewardUpdate
from cyclehub.services.criteria import evaluate
from cyclehub.services.stats import compute_user_stats

logger = logging.getLogger(__name__)


@dataclass
class GrantResult:
    granted: List[Reward] = field(default_factory=list)
    total_achievements: int = 0


async def check_and_grant(db: AsyncSession, user_id: int) -> GrantResult:
    """
    Проверяет активные награды и выдает новые достигнутые.

    Уже полученные награды отсеиваются до проверки критериев - повторный
    вызов без новой активности ничего не выдает. Пользователь сохраняется
    один раз в конце, если что-то было выдано.
    """
    user = await db.get(User, user_id, populate_existing=True)
    if user is None:
        raise NotFoundError("User not found")

    stats = await compute_user_stats(db, user_id)

    result = await db.execute(
        select(Reward).where(Reward.is_active == True).order_by(Reward.id)
    )
    active_rewards = result.scalars().all()

    earned_ids = {reward.id for reward in user.achievements}
    candidates = [reward for reward in active_rewards if reward.id not in earned_ids]

    granted = []
    for reward in evaluate(stats, candidates):
        # Новая строка user_achievements
        user.achievements.append(reward)
        user.total_points = (user.total_points or 0) + reward.points_awarded
        granted.append(reward)
        logger.info(f"Пользователь {user_id} получил награду '{reward.name}' (+{reward.points_awarded})")

    if granted:
        await db.commit()

    return GrantResult(granted=granted, total_achievements=len(user.achievements))


async def grant_rewards_best_effort(db: AsyncSession, user_id: int) -> Optional[GrantResult]:
    """
    Проверка наград как побочный эффект другой операции (поездка, отзыв, отчет).

    Ошибка логируется и не пробрасывается: основная операция уже сохранена.
    """
    try:
        return await check_and_grant(db, user_id)
    except Exception:
        logger.exception(f"Проверка наград для пользователя {user_id} не удалась, пропускаем")
        await db.rollback()
        return None


async def create_reward(db: AsyncSession, data: RewardCreate) -> Reward:
    reward = Reward(
        name=data.name,
        description=data.description,
        icon=data.icon,
        category=data.category.value,
        criteria_type=data.criteria.type.value,
        criteria_threshold=data.criteria.threshold,
        points_awarded=data.points_awarded,
        tier=data.tier.value,
    )
    db.add(reward)
    try:
        await db.commit()
    except IntegrityError:
        await db.rollback()
        raise ConflictError(f"Reward '{data.name}' already exists")
    await db.refresh(reward)
    return reward


async def list_rewards(db: AsyncSession, params: PaginationParams,
                       category: Optional[str] = None, tier: Optional[str] = None):
    query = select(Reward).where(Reward.is_active == True)
    if category:
        query = query.where(Reward.category == category)
    if tier:
        query = query.where(Reward.tier == tier)

    items, total = await fetch_page(db, query, Reward, params,
                                    allowed_sort=("name", "points_awarded", "created_at"))
    return paginate_result(items, total, params)


async def get_reward(db: AsyncSession, reward_id: int) -> Reward:
    # Деактивированные награды остаются доступными по ID для тех, кто их получил
    reward = await db.get(Reward, reward_id)
    if reward is None:
        raise NotFoundError("Reward not found")
    return reward


async def update_reward(db: AsyncSession, reward_id: int, data: RewardUpdate) -> Reward:
    reward = await get_reward(db, reward_id)

    update_data = data.model_dump(exclude_unset=True, exclude={"criteria"})
    for field_name, value in update_data.items():
        setattr(reward, field_name, getattr(value, "value", value))
    if data.criteria is not None:
        reward.criteria_type = data.criteria.type.value
        reward.criteria_threshold = data.criteria.threshold

    try:
        await db.commit()
    except IntegrityError:
        await db.rollback()
        raise ConflictError("Reward name already in use")
    await db.refresh(reward)
    return reward


async def deactivate_reward(db: AsyncSession, reward_id: int) -> None:
    """Удаление = деактивация. Уже выданные достижения остаются"""
    reward = await get_reward(db, reward_id)
    reward.is_active = False
    await db.commit()
    logger.info(f"Награда {reward_id} деактивирована")


async def earned_by_ids(db: AsyncSession, rewards: Iterable[Reward]) -> Dict[int, List[int]]:
    """ID получателей для каждой награды: один запрос к user_achievements"""
    reward_ids = [reward.id for reward in rewards]
    earners = {reward_id: [] for reward_id in reward_ids}
    if not reward_ids:
        return earners

    rows = await db.execute(
        select(user_achievements.c.reward_id, user_achievements.c.user_id)
        .where(user_achievements.c.reward_id.in_(reward_ids))
        .order_by(user_achievements.c.earned_at, user_achievements.c.user_id)
    )
    for reward_id, user_id in rows:
        earners[reward_id].append(user_id)
    return earners
