"""
API endpoints для поездок
"""

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession
from typing import Optional

from cyclehub.constants import RideStatus
from cyclehub.database import get_db
from cyclehub.models.user import User
from cyclehub.pagination import pagination_params
from cyclehub.schemas.common import ok, PaginationParams
from cyclehub.schemas.ride import RideStart, RideResponse
from cyclehub.security import get_current_user
from cyclehub.services import rides as ride_service

router = APIRouter()


@router.get("/stats")
async def get_ride_stats(
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    """Суммарная статистика завершенных поездок текущего пользователя"""
    stats = await ride_service.get_ride_stats(db, user.id)
    return ok({"stats": stats})


@router.get("/active")
async def get_active_ride(
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    """Текущая активная поездка (или null)"""
    ride = await ride_service.get_active_ride(db, user.id)
    return ok({"ride": RideResponse.model_validate(ride) if ride else None})


@router.get("/")
async def list_rides(
    status: Optional[RideStatus] = Query(None),
    params: PaginationParams = Depends(pagination_params),
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    """История поездок текущего пользователя"""
    result = await ride_service.list_rides(db, user.id, params, status.value if status else None)
    result["items"] = [RideResponse.model_validate(ride) for ride in result["items"]]
    return ok(result)


@router.get("/{ride_id}")
async def get_ride(
    ride_id: int,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    ride = await ride_service.get_ride(db, ride_id, user.id)
    return ok({"ride": RideResponse.model_validate(ride)})


@router.post("/start", status_code=201)
async def start_ride(
    ride_data: RideStart,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    """Начать поездку по маршруту. Вторая активная поездка - 409"""
    ride = await ride_service.start_ride(db, user.id, ride_data.route_id)
    return ok({"ride": RideResponse.model_validate(ride)}, "Ride started successfully")


@router.patch("/{ride_id}/complete")
async def complete_ride(
    ride_id: int,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    """Завершить поездку: метрики, очки, серия и проверка наград"""
    ride = await ride_service.complete_ride(db, ride_id, user.id)
    return ok({"ride": RideResponse.model_validate(ride)}, "Ride completed successfully")


@router.patch("/{ride_id}/cancel")
async def cancel_ride(
    ride_id: int,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    ride = await ride_service.cancel_ride(db, ride_id, user.id)
    return ok({"ride": RideResponse.model_validate(ride)}, "Ride cancelled")
