"""
Токены JWT, хэширование паролей и зависимости текущего пользователя
"""

import secrets
from datetime import timedelta
from typing import Optional, Dict, Any

import jwt
from fastapi import Depends
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from sqlalchemy.ext.asyncio import AsyncSession
from werkzeug.security import generate_password_hash, check_password_hash

from cyclehub.config import settings
from cyclehub.database import get_db
from cyclehub.errors import UnauthorizedError, ForbiddenError
from cyclehub.models.user import User
from cyclehub.timeutils import utcnow

bearer_scheme = HTTPBearer(auto_error=False)


def hash_secret(value: str) -> str:
    return generate_password_hash(value)


def verify_secret(hashed: Optional[str], value: str) -> bool:
    if not hashed:
        return False
    return check_password_hash(hashed, value)


def _encode(payload: Dict[str, Any], secret: str, ttl: timedelta) -> str:
    now = utcnow()
    payload = dict(payload, iat=int(now.timestamp()), exp=int((now + ttl).timestamp()))
    return jwt.encode(payload, secret, algorithm=settings.ALGORITHM)


def create_access_token(user: User) -> str:
    return _encode(
        {"sub": str(user.id), "role": user.role, "type": "access"},
        settings.SECRET_KEY,
        timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES),
    )


def create_refresh_token(user: User) -> str:
    return _encode(
        # jti делает каждый refresh токен уникальным, даже выпущенный в ту же секунду
        {"sub": str(user.id), "type": "refresh", "jti": secrets.token_urlsafe(16)},
        settings.REFRESH_SECRET_KEY,
        timedelta(days=settings.REFRESH_TOKEN_EXPIRE_DAYS),
    )


def decode_token(token: str, token_type: str = "access") -> Optional[Dict[str, Any]]:
    secret = settings.SECRET_KEY if token_type == "access" else settings.REFRESH_SECRET_KEY
    try:
        payload = jwt.decode(token, secret, algorithms=[settings.ALGORITHM])
    except jwt.PyJWTError:
        return None
    if payload.get("type") != token_type:
        return None
    return payload


async def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    db: AsyncSession = Depends(get_db),
) -> User:
    """Dependency: пользователь из Bearer access токена"""
    if credentials is None:
        raise UnauthorizedError("Access denied. No token provided.")

    payload = decode_token(credentials.credentials, "access")
    if payload is None:
        raise UnauthorizedError("Invalid or expired token.")

    user = await db.get(User, int(payload["sub"]))
    if user is None or not user.is_active:
        raise UnauthorizedError("User not found or deactivated")
    return user


async def require_admin(user: User = Depends(get_current_user)) -> User:
    """Dependency: только для администраторов"""
    if not user.is_admin:
        raise ForbiddenError("Admin access required")
    return user
