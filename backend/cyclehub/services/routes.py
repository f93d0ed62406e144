"""
Маршруты: создание, предпросмотр, поиск, мягкое удаление
"""

import logging
import math
from typing import Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from cyclehub.errors import NotFoundError, ForbiddenError
from cyclehub.models.route import Route
from cyclehub.models.user import User
from cyclehub.pagination import fetch_page, paginate_result
from cyclehub.schemas.common import PaginationParams
from cyclehub.schemas.route import RouteCreate, RouteUpdate, PointCoordinate
from cyclehub.services import openroute

logger = logging.getLogger(__name__)

EARTH_RADIUS_KM = 6371
# Средняя скорость для оценки времени без сервиса маршрутизации
FALLBACK_SPEED_KMH = 15


def haversine_km(start: PointCoordinate, end: PointCoordinate) -> float:
    """Расстояние по прямой между двумя точками, км (2 знака)"""
    d_lat = math.radians(end.lat - start.lat)
    d_lng = math.radians(end.lng - start.lng)
    a = (
        math.sin(d_lat / 2) ** 2
        + math.cos(math.radians(start.lat)) * math.cos(math.radians(end.lat)) * math.sin(d_lng / 2) ** 2
    )
    c = 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))
    return round(EARTH_RADIUS_KM * c, 2)


async def preview_route(start: PointCoordinate, end: PointCoordinate) -> dict:
    """Предпросмотр: данные ORS или оценка по прямой, если сервис недоступен"""
    ors_data = await openroute.get_directions([[start.lng, start.lat], [end.lng, end.lat]])
    if ors_data:
        return ors_data

    distance = haversine_km(start, end)
    return {
        "distance": distance,
        "duration": round(distance / FALLBACK_SPEED_KMH * 60, 1),
        "elevation_gain": 0,
        "polyline": "",
    }


async def create_route(db: AsyncSession, data: RouteCreate, user_id: int) -> Route:
    route = Route(
        created_by=user_id,
        title=data.title,
        description=data.description,
        start_lat=data.start_point.lat,
        start_lng=data.start_point.lng,
        start_name=data.start_point.name,
        end_lat=data.end_point.lat,
        end_lng=data.end_point.lng,
        end_name=data.end_point.name,
        waypoints=[wp.model_dump() for wp in data.waypoints],
        distance=data.distance,
        estimated_duration=data.estimated_duration,
        difficulty=data.difficulty.value,
        surface_type=data.surface_type.value,
        elevation_gain=data.elevation_gain,
        polyline=data.polyline,
        tags=[tag.strip().lower() for tag in data.tags if tag.strip()],
        city=data.city.strip(),
        country=data.country.strip(),
    )

    # Polyline уже есть (например, из предпросмотра) - ORS не вызываем
    if not data.polyline:
        coordinates = (
            [[data.start_point.lng, data.start_point.lat]]
            + [[wp.lng, wp.lat] for wp in data.waypoints]
            + [[data.end_point.lng, data.end_point.lat]]
        )
        ors_data = await openroute.get_directions(coordinates)
        if ors_data:
            route.distance = ors_data["distance"]
            route.estimated_duration = ors_data["duration"]
            route.elevation_gain = ors_data["elevation_gain"]
            route.polyline = ors_data["polyline"]

    db.add(route)
    await db.commit()
    await db.refresh(route)

    logger.info(f"Пользователь {user_id} создал маршрут {route.id} ({route.distance} км)")
    return route


async def list_routes(db: AsyncSession, params: PaginationParams,
                      difficulty: Optional[str] = None,
                      surface_type: Optional[str] = None,
                      min_distance: Optional[float] = None,
                      max_distance: Optional[float] = None,
                      min_rating: Optional[float] = None,
                      is_verified: Optional[bool] = None,
                      city: Optional[str] = None,
                      search: Optional[str] = None,
                      created_by: Optional[int] = None):
    """Список активных маршрутов с фильтрацией и пагинацией"""
    query = select(Route).where(Route.is_active == True)

    if difficulty:
        query = query.where(Route.difficulty == difficulty)
    if surface_type:
        query = query.where(Route.surface_type == surface_type)
    if min_distance is not None:
        query = query.where(Route.distance >= min_distance)
    if max_distance is not None:
        query = query.where(Route.distance <= max_distance)
    if min_rating is not None:
        query = query.where(Route.average_rating >= min_rating)
    if is_verified:
        query = query.where(Route.is_verified == True)
    if city:
        query = query.where(Route.city.ilike(f"%{city}%"))
    if search:
        query = query.where(
            Route.title.ilike(f"%{search}%") | Route.description.ilike(f"%{search}%")
        )
    if created_by:
        query = query.where(Route.created_by == created_by)

    items, total = await fetch_page(db, query, Route, params,
                                    allowed_sort=("distance", "average_rating", "title", "created_at"))
    return paginate_result(items, total, params)


async def get_route(db: AsyncSession, route_id: int) -> Route:
    route = await db.get(Route, route_id)
    if route is None or not route.is_active:
        raise NotFoundError("Route not found")
    return route


def _check_owner(route: Route, user: User, action: str):
    if route.created_by != user.id and not user.is_admin:
        raise ForbiddenError(f"You can only {action} your own routes")


async def update_route(db: AsyncSession, route_id: int, data: RouteUpdate, user: User) -> Route:
    route = await get_route(db, route_id)
    _check_owner(route, user, "update")

    update_data = data.model_dump(exclude_unset=True)
    for field, value in update_data.items():
        setattr(route, field, getattr(value, "value", value))

    await db.commit()
    await db.refresh(route)
    return route


async def delete_route(db: AsyncSession, route_id: int, user: User) -> None:
    """Мягкое удаление: маршрут пропадает из списков и статистики, но доступен по ID поездкам"""
    route = await get_route(db, route_id)
    _check_owner(route, user, "delete")
    route.is_active = False
    await db.commit()
    logger.info(f"Маршрут {route_id} удален пользователем {user.id}")


async def verify_route(db: AsyncSession, route_id: int) -> Route:
    route = await get_route(db, route_id)
    route.is_verified = True
    await db.commit()
    await db.refresh(route)
    return route
