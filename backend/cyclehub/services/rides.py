"""
Жизненный цикл поездки: active -> completed | cancelled
"""

import logging
from typing import Optional

from sqlalchemy import select, update, func
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from cyclehub.constants import RideStatus, POINTS, CO2_PER_KM
from cyclehub.errors import NotFoundError, ForbiddenError, BadRequestError, ConflictError
from cyclehub.models.ride import Ride
from cyclehub.models.route import Route
from cyclehub.models.user import User
from cyclehub.pagination import fetch_page, paginate_result
from cyclehub.schemas.common import PaginationParams
from cyclehub.schemas.ride import RideStatsResponse
from cyclehub.services.rewards import grant_rewards_best_effort
from cyclehub.services.streak import update_streak
from cyclehub.timeutils import utcnow, as_utc

logger = logging.getLogger(__name__)


def compute_trip_metrics(distance: float, started_at, completed_at) -> dict:
    """Метрики завершенной поездки: минуты, км, кг CO2, очки"""
    elapsed = (as_utc(completed_at) - as_utc(started_at)).total_seconds() / 60
    return {
        "duration": max(round(elapsed, 2), 0.0),
        "distance": distance,
        "co2_saved": round(distance * CO2_PER_KM, 2),
        "points_earned": POINTS.RIDE_COMPLETED,
    }


async def _load_ride(db: AsyncSession, ride_id: int) -> Ride:
    result = await db.execute(
        select(Ride).where(Ride.id == ride_id).execution_options(populate_existing=True)
    )
    ride = result.scalar_one_or_none()
    if ride is None or not ride.is_active:
        raise NotFoundError("Ride not found")
    return ride


async def _load_owned_active_ride(db: AsyncSession, ride_id: int, requester_id: int, action: str) -> Ride:
    ride = await _load_ride(db, ride_id)
    if ride.user_id != requester_id:
        raise ForbiddenError(f"Not authorized to {action} this ride")
    if ride.status != RideStatus.ACTIVE.value:
        if action == "cancel":
            raise BadRequestError("Only active rides can be cancelled")
        raise BadRequestError("Ride is not active")
    return ride


async def get_active_ride(db: AsyncSession, user_id: int) -> Optional[Ride]:
    result = await db.execute(
        select(Ride).where(
            Ride.user_id == user_id,
            Ride.status == RideStatus.ACTIVE.value,
            Ride.is_active == True,
        )
    )
    return result.scalar_one_or_none()


async def start_ride(db: AsyncSession, user_id: int, route_id: int) -> Ride:
    """
    Начать поездку.

    Проверка активной поездки - для понятной ошибки; настоящая гарантия -
    уникальный частичный индекс uq_rides_one_active_per_user.
    """
    if await get_active_ride(db, user_id) is not None:
        raise ConflictError("You already have an active ride")

    route = await db.get(Route, route_id)
    if route is None or not route.is_active:
        raise NotFoundError("Route not found")

    ride = Ride(
        user_id=user_id,
        route_id=route_id,
        status=RideStatus.ACTIVE.value,
        started_at=utcnow(),
    )
    db.add(ride)
    try:
        await db.commit()
    except IntegrityError:
        await db.rollback()
        raise ConflictError("You already have an active ride")

    logger.info(f"Пользователь {user_id} начал поездку {ride.id} по маршруту {route_id}")
    return await _load_ride(db, ride.id)


async def complete_ride(db: AsyncSession, ride_id: int, requester_id: int) -> Ride:
    """
    Завершить поездку: метрики считаются один раз, счетчики пользователя
    увеличиваются атомарно, затем проверяются награды.
    """
    ride = await _load_owned_active_ride(db, ride_id, requester_id, "complete")

    # Маршрут мог быть мягко удален - он все равно доступен по ID
    route = await db.get(Route, ride.route_id)
    distance = route.distance if route is not None else 0.0

    now = utcnow()
    metrics = compute_trip_metrics(distance, ride.started_at, now)
    ride.status = RideStatus.COMPLETED.value
    ride.completed_at = now
    ride.duration = metrics["duration"]
    ride.distance = metrics["distance"]
    ride.co2_saved = metrics["co2_saved"]
    ride.points_earned = metrics["points_earned"]

    user = await db.get(User, requester_id, populate_existing=True)
    streak = update_streak(user.last_ride_date, user.current_streak or 0, user.longest_streak or 0, now)

    await db.execute(
        update(User)
        .where(User.id == requester_id)
        .values(
            total_points=User.total_points + metrics["points_earned"],
            total_distance=User.total_distance + distance,
            current_streak=streak.current_streak,
            longest_streak=streak.longest_streak,
            last_ride_date=streak.last_ride_date,
        )
    )
    await db.commit()
    logger.info(
        f"Поездка {ride_id} завершена: {distance} км за {metrics['duration']} мин, "
        f"CO2 {metrics['co2_saved']} кг"
    )

    await grant_rewards_best_effort(db, requester_id)

    return await _load_ride(db, ride_id)


async def cancel_ride(db: AsyncSession, ride_id: int, requester_id: int) -> Ride:
    """Отменить активную поездку. Без метрик и очков"""
    ride = await _load_owned_active_ride(db, ride_id, requester_id, "cancel")
    ride.status = RideStatus.CANCELLED.value
    await db.commit()
    logger.info(f"Поездка {ride_id} отменена")
    return await _load_ride(db, ride_id)


async def get_ride(db: AsyncSession, ride_id: int, requester_id: int) -> Ride:
    ride = await _load_ride(db, ride_id)
    if ride.user_id != requester_id:
        raise ForbiddenError("Not authorized to view this ride")
    return ride


async def list_rides(db: AsyncSession, user_id: int, params: PaginationParams, status: Optional[str] = None):
    query = select(Ride).where(Ride.user_id == user_id, Ride.is_active == True)
    if status:
        query = query.where(Ride.status == status)

    items, total = await fetch_page(db, query, Ride, params,
                                    allowed_sort=("started_at", "completed_at", "distance", "duration"))
    return paginate_result(items, total, params)


async def get_ride_stats(db: AsyncSession, user_id: int) -> RideStatsResponse:
    """Суммы по завершенным поездкам пользователя"""
    result = await db.execute(
        select(
            func.count(Ride.id),
            func.coalesce(func.sum(Ride.distance), 0),
            func.coalesce(func.sum(Ride.co2_saved), 0),
            func.coalesce(func.sum(Ride.duration), 0),
        ).where(
            Ride.user_id == user_id,
            Ride.status == RideStatus.COMPLETED.value,
            Ride.is_active == True,
        )
    )
    count, distance, co2, duration = result.one()
    return RideStatsResponse(
        rides_completed=count or 0,
        total_distance=round(float(distance), 2),
        total_co2_saved=round(float(co2), 2),
        total_duration=round(float(duration), 2),
    )
