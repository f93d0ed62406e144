"""
API endpoints для пользователей
"""

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession
from typing import Optional

from cyclehub.constants import Role
from cyclehub.database import get_db
from cyclehub.models.user import User
from cyclehub.pagination import pagination_params
from cyclehub.schemas.common import ok, PaginationParams
from cyclehub.schemas.user import UserUpdate, UserResponse, AchievementResponse
from cyclehub.security import get_current_user, require_admin
from cyclehub.services import users as user_service

router = APIRouter()


@router.get("/", dependencies=[Depends(require_admin)])
async def list_users(
    role: Optional[Role] = Query(None),
    search: Optional[str] = Query(None, max_length=100),
    is_active: Optional[bool] = Query(None),
    params: PaginationParams = Depends(pagination_params),
    db: AsyncSession = Depends(get_db)
):
    """Список пользователей (только админ)"""
    result = await user_service.list_users(
        db, params, role=role.value if role else None, search=search, is_active=is_active,
    )
    result["items"] = [UserResponse.model_validate(user) for user in result["items"]]
    return ok(result)


@router.get("/{user_id}", dependencies=[Depends(get_current_user)])
async def get_user(user_id: int, db: AsyncSession = Depends(get_db)):
    user = await user_service.get_user(db, user_id)
    return ok({"user": UserResponse.model_validate(user)})


@router.get("/{user_id}/stats", dependencies=[Depends(get_current_user)])
async def get_user_stats(user_id: int, db: AsyncSession = Depends(get_db)):
    """Статистика профиля с актуальной серией"""
    stats = await user_service.get_user_stats(db, user_id)
    return ok({"stats": stats})


@router.get("/{user_id}/achievements", dependencies=[Depends(get_current_user)])
async def get_user_achievements(user_id: int, db: AsyncSession = Depends(get_db)):
    user = await user_service.get_user(db, user_id)
    achievements = [AchievementResponse.model_validate(reward) for reward in user.achievements]
    return ok({"achievements": achievements, "count": len(achievements)})


@router.put("/{user_id}")
async def update_user(
    user_id: int,
    user_update: UserUpdate,
    requester: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    user = await user_service.update_user(db, user_id, user_update, requester)
    return ok({"user": UserResponse.model_validate(user)}, "Profile updated successfully")


@router.patch("/{user_id}/deactivate", dependencies=[Depends(require_admin)])
async def deactivate_user(user_id: int, db: AsyncSession = Depends(get_db)):
    user = await user_service.set_user_active(db, user_id, False)
    return ok({"user": UserResponse.model_validate(user)}, "User deactivated")


@router.patch("/{user_id}/reactivate", dependencies=[Depends(require_admin)])
async def reactivate_user(user_id: int, db: AsyncSession = Depends(get_db)):
    user = await user_service.set_user_active(db, user_id, True)
    return ok({"user": UserResponse.model_validate(user)}, "User reactivated")
