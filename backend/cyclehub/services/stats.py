"""
Агрегатор статистики пользователя для проверки наград
"""

from dataclasses import dataclass, asdict

from sqlalchemy import select, func
from sqlalchemy.ext.asyncio import AsyncSession

from cyclehub.constants import RideStatus
from cyclehub.errors import NotFoundError
from cyclehub.models.user import User
from cyclehub.models.route import Route, Review
from cyclehub.models.report import Report
from cyclehub.models.ride import Ride


@dataclass(frozen=True)
class UserStats:
    total_distance: float = 0.0
    routes_created: int = 0
    reports_submitted: int = 0
    reviews_written: int = 0
    rides_completed: int = 0

    def as_dict(self):
        return asdict(self)


async def compute_user_stats(db: AsyncSession, user_id: int) -> UserStats:
    """
    Снимок статистики пользователя. Только чтение.

    total_distance берется из пользователя (копится при завершении поездок),
    остальное - подсчеты по таблицам: активные маршруты автора, все отчеты,
    все отзывы, завершенные и не удаленные поездки.
    """
    user = await db.get(User, user_id, populate_existing=True)
    if user is None:
        raise NotFoundError("User not found")

    routes_created = await db.scalar(
        select(func.count(Route.id)).where(Route.created_by == user_id, Route.is_active == True)
    )
    reports_submitted = await db.scalar(
        select(func.count(Report.id)).where(Report.reported_by == user_id)
    )
    reviews_written = await db.scalar(
        select(func.count(Review.id)).where(Review.reviewer_id == user_id)
    )
    rides_completed = await db.scalar(
        select(func.count(Ride.id)).where(
            Ride.user_id == user_id,
            Ride.status == RideStatus.COMPLETED.value,
            Ride.is_active == True,
        )
    )

    return UserStats(
        total_distance=user.total_distance or 0.0,
        routes_created=routes_created or 0,
        reports_submitted=reports_submitted or 0,
        reviews_written=reviews_written or 0,
        rides_completed=rides_completed or 0,
    )
