"""
API endpoints для маршрутов
"""

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession
from typing import Optional

from cyclehub.constants import Difficulty, SurfaceType
from cyclehub.database import get_db
from cyclehub.models.user import User
from cyclehub.pagination import pagination_params
from cyclehub.schemas.common import ok, PaginationParams
from cyclehub.schemas.route import (
    RouteCreate, RouteUpdate, RouteResponse, RoutePreviewRequest, RoutePreviewResponse,
)
from cyclehub.security import get_current_user, require_admin
from cyclehub.services import routes as route_service

router = APIRouter()


@router.post("/preview", dependencies=[Depends(get_current_user)])
async def preview_route(request: RoutePreviewRequest):
    """Предпросмотр маршрута между двумя точками без сохранения"""
    preview = await route_service.preview_route(request.start_point, request.end_point)
    return ok({"preview": RoutePreviewResponse(**preview)})


@router.post("/", status_code=201)
async def create_route(
    route_data: RouteCreate,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    """Создать маршрут"""
    route = await route_service.create_route(db, route_data, user.id)
    return ok({"route": RouteResponse.model_validate(route)}, "Route created successfully")


@router.get("/")
async def list_routes(
    difficulty: Optional[Difficulty] = Query(None),
    surface_type: Optional[SurfaceType] = Query(None),
    min_distance: Optional[float] = Query(None, ge=0),
    max_distance: Optional[float] = Query(None, ge=0),
    min_rating: Optional[float] = Query(None, ge=0, le=5),
    is_verified: Optional[bool] = Query(None),
    city: Optional[str] = Query(None, max_length=100),
    search: Optional[str] = Query(None, max_length=100),
    created_by: Optional[int] = Query(None),
    params: PaginationParams = Depends(pagination_params),
    db: AsyncSession = Depends(get_db)
):
    """Список маршрутов с фильтрами"""
    result = await route_service.list_routes(
        db, params,
        difficulty=difficulty.value if difficulty else None,
        surface_type=surface_type.value if surface_type else None,
        min_distance=min_distance,
        max_distance=max_distance,
        min_rating=min_rating,
        is_verified=is_verified,
        city=city,
        search=search,
        created_by=created_by,
    )
    result["items"] = [RouteResponse.model_validate(route) for route in result["items"]]
    return ok(result)


@router.get("/{route_id}")
async def get_route(route_id: int, db: AsyncSession = Depends(get_db)):
    route = await route_service.get_route(db, route_id)
    return ok({"route": RouteResponse.model_validate(route)})


@router.put("/{route_id}")
async def update_route(
    route_id: int,
    route_update: RouteUpdate,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    route = await route_service.update_route(db, route_id, route_update, user)
    return ok({"route": RouteResponse.model_validate(route)}, "Route updated successfully")


@router.delete("/{route_id}")
async def delete_route(
    route_id: int,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    await route_service.delete_route(db, route_id, user)
    return ok(None, "Route deleted successfully")


@router.patch("/{route_id}/verify", dependencies=[Depends(require_admin)])
async def verify_route(route_id: int, db: AsyncSession = Depends(get_db)):
    """Отметка маршрута как проверенного (только админ)"""
    route = await route_service.verify_route(db, route_id)
    return ok({"route": RouteResponse.model_validate(route)}, "Route verified")
