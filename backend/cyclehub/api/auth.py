"""
API endpoints для аутентификации
"""

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from cyclehub.database import get_db
from cyclehub.models.user import User
from cyclehub.schemas.common import ok
from cyclehub.schemas.user import UserRegister, UserLogin, RefreshRequest, UserResponse
from cyclehub.security import get_current_user
from cyclehub.services import auth as auth_service

router = APIRouter()


def _session_payload(session: dict) -> dict:
    return {
        "user": UserResponse.model_validate(session["user"]),
        "access_token": session["access_token"],
        "refresh_token": session["refresh_token"],
        "token_type": "bearer",
    }


@router.post("/register", status_code=201)
async def register(user_data: UserRegister, db: AsyncSession = Depends(get_db)):
    """Регистрация нового пользователя"""
    session = await auth_service.register(db, user_data)
    return ok(_session_payload(session), "User registered successfully")


@router.post("/login")
async def login(credentials: UserLogin, db: AsyncSession = Depends(get_db)):
    """Вход в систему"""
    session = await auth_service.login(db, credentials)
    return ok(_session_payload(session), "Login successful")


@router.post("/refresh")
async def refresh(body: RefreshRequest, db: AsyncSession = Depends(get_db)):
    """Обмен refresh токена на новую пару"""
    session = await auth_service.refresh(db, body.refresh_token)
    return ok(_session_payload(session), "Token refreshed")


@router.post("/logout")
async def logout(
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    await auth_service.logout(db, user)
    return ok(None, "Logged out successfully")


@router.get("/me")
async def get_me(
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    """Получение информации о текущем пользователе"""
    me = await auth_service.get_me(db, user.id)
    return ok({"user": UserResponse.model_validate(me)})
