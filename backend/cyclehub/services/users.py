"""
Профили пользователей, статистика профиля и модерация аккаунтов
"""

import logging
from typing import Optional

from sqlalchemy import select, func, or_
from sqlalchemy.ext.asyncio import AsyncSession

from cyclehub.constants import RideStatus
from cyclehub.errors import NotFoundError, ForbiddenError, BadRequestError
from cyclehub.models.ride import Ride
from cyclehub.models.user import User
from cyclehub.pagination import fetch_page, paginate_result
from cyclehub.schemas.common import PaginationParams
from cyclehub.schemas.user import UserUpdate, UserStatsResponse
from cyclehub.services.stats import compute_user_stats
from cyclehub.services.streak import display_streak

logger = logging.getLogger(__name__)


async def get_user(db: AsyncSession, user_id: int) -> User:
    user = await db.get(User, user_id, populate_existing=True)
    if user is None:
        raise NotFoundError("User not found")
    return user


async def list_users(db: AsyncSession, params: PaginationParams, role: Optional[str] = None,
                     search: Optional[str] = None, is_active: Optional[bool] = None):
    query = select(User)
    if role:
        query = query.where(User.role == role)
    if search:
        query = query.where(or_(User.first_name.ilike(f"%{search}%"), User.last_name.ilike(f"%{search}%")))
    if is_active is not None:
        query = query.where(User.is_active == is_active)

    items, total = await fetch_page(db, query, User, params,
                                    allowed_sort=("total_points", "total_distance", "created_at"))
    return paginate_result(items, total, params)


async def update_user(db: AsyncSession, user_id: int, data: UserUpdate, requester: User) -> User:
    if user_id != requester.id and not requester.is_admin:
        raise ForbiddenError("You can only update your own profile")

    user = await get_user(db, user_id)
    update_data = data.model_dump(exclude_unset=True)
    if not requester.is_admin:
        update_data.pop("role", None)

    for field, value in update_data.items():
        setattr(user, field, getattr(value, "value", value))

    await db.commit()
    return await get_user(db, user_id)


async def get_user_stats(db: AsyncSession, user_id: int) -> UserStatsResponse:
    """Статистика профиля: счетчики агрегатора плюс CO2, очки и серия для показа"""
    user = await get_user(db, user_id)
    stats = await compute_user_stats(db, user_id)

    co2_saved = await db.scalar(
        select(func.coalesce(func.sum(Ride.co2_saved), 0)).where(
            Ride.user_id == user_id,
            Ride.status == RideStatus.COMPLETED.value,
            Ride.is_active == True,
        )
    )

    return UserStatsResponse(
        total_distance=stats.total_distance,
        total_points=user.total_points or 0,
        routes_created=stats.routes_created,
        reports_submitted=stats.reports_submitted,
        reviews_written=stats.reviews_written,
        rides_completed=stats.rides_completed,
        co2_saved=round(float(co2_saved or 0), 2),
        achievement_count=len(user.achievements),
        member_since=user.created_at,
        current_streak=display_streak(user.last_ride_date, user.current_streak),
        longest_streak=user.longest_streak or 0,
    )


async def set_user_active(db: AsyncSession, user_id: int, active: bool) -> User:
    """Деактивация (кроме админов) / реактивация. Деактивация отзывает refresh токен"""
    user = await get_user(db, user_id)
    if not active:
        if user.is_admin:
            raise BadRequestError("Cannot deactivate an admin account")
        user.refresh_token_hash = None
    user.is_active = active
    await db.commit()
    logger.info(f"Пользователь {user_id} {'реактивирован' if active else 'деактивирован'}")
    return await get_user(db, user_id)
