"""
Регистрация, вход и ротация refresh токенов
"""

import logging

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from cyclehub.errors import ConflictError, UnauthorizedError, ForbiddenError, NotFoundError
from cyclehub.models.user import User
from cyclehub.schemas.user import UserRegister, UserLogin
from cyclehub.security import (
    hash_secret, verify_secret, create_access_token, create_refresh_token, decode_token,
)

logger = logging.getLogger(__name__)


async def _issue_tokens(db: AsyncSession, user: User) -> dict:
    """Новая пара токенов. Хранится только хэш refresh токена"""
    access_token = create_access_token(user)
    refresh_token = create_refresh_token(user)
    user.refresh_token_hash = hash_secret(refresh_token)
    await db.commit()
    return {"user": user, "access_token": access_token, "refresh_token": refresh_token}


async def register(db: AsyncSession, data: UserRegister) -> dict:
    email = data.email.strip().lower()
    existing = await db.scalar(select(User).where(User.email == email))
    if existing is not None:
        raise ConflictError("An account with this email already exists")

    user = User(
        first_name=data.first_name.strip(),
        last_name=data.last_name.strip(),
        email=email,
        password_hash=hash_secret(data.password),
        achievements=[],
    )
    db.add(user)
    await db.flush()
    logger.info(f"Зарегистрирован пользователь {user.id} ({email})")
    return await _issue_tokens(db, user)


async def login(db: AsyncSession, data: UserLogin) -> dict:
    user = await db.scalar(select(User).where(User.email == data.email.strip().lower()))
    if user is None:
        raise UnauthorizedError("Invalid email or password")
    if not user.is_active:
        raise ForbiddenError("Your account has been deactivated. Contact an administrator.")
    if not verify_secret(user.password_hash, data.password):
        raise UnauthorizedError("Invalid email or password")

    return await _issue_tokens(db, user)


async def refresh(db: AsyncSession, token: str) -> dict:
    """Ротация: старый refresh токен перестает работать после использования"""
    payload = decode_token(token, "refresh")
    if payload is None:
        raise UnauthorizedError("Invalid or expired refresh token")

    user = await db.get(User, int(payload["sub"]), populate_existing=True)
    if user is None or not user.is_active:
        raise UnauthorizedError("User not found or deactivated")
    if not user.refresh_token_hash:
        raise UnauthorizedError("Refresh token has been revoked")
    if not verify_secret(user.refresh_token_hash, token):
        raise UnauthorizedError("Invalid refresh token")

    return await _issue_tokens(db, user)


async def logout(db: AsyncSession, user: User) -> None:
    user.refresh_token_hash = None
    await db.commit()


async def get_me(db: AsyncSession, user_id: int) -> User:
    user = await db.get(User, user_id, populate_existing=True)
    if user is None:
        raise NotFoundError("User not found")
    return user
