"""
Pydantic схемы для пользователей и аутентификации
"""

from pydantic import BaseModel, Field, ConfigDict
from typing import List, Optional
from datetime import datetime

from cyclehub.constants import Role


EMAIL_PATTERN = r"^\S+@\S+\.\S+$"


class UserRegister(BaseModel):
    """Схема регистрации"""
    first_name: str = Field(..., min_length=1, max_length=50)
    last_name: str = Field(..., min_length=1, max_length=50)
    email: str = Field(..., max_length=100, pattern=EMAIL_PATTERN)
    password: str = Field(..., min_length=8, max_length=128)


class UserLogin(BaseModel):
    email: str = Field(..., max_length=100)
    password: str = Field(..., min_length=1, max_length=128)


class RefreshRequest(BaseModel):
    refresh_token: str = Field(..., min_length=1)


class UserUpdate(BaseModel):
    """Редактируемые поля профиля. Счетчики, серия, email и пароль сюда не входят"""
    first_name: Optional[str] = Field(None, min_length=1, max_length=50)
    last_name: Optional[str] = Field(None, min_length=1, max_length=50)
    bio: Optional[str] = Field(None, max_length=500)
    city: Optional[str] = Field(None, max_length=100)
    country: Optional[str] = Field(None, max_length=100)
    role: Optional[Role] = None


class AchievementResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    description: str
    icon: str
    category: str
    tier: str
    points_awarded: int


class UserResponse(BaseModel):
    """Публичное представление пользователя (без хэшей)"""
    model_config = ConfigDict(from_attributes=True)

    id: int
    first_name: str
    last_name: str
    email: str
    role: str
    bio: Optional[str]
    city: Optional[str]
    country: Optional[str]
    total_distance: float
    total_points: int
    current_streak: int
    longest_streak: int
    last_ride_date: Optional[datetime]
    achievements: List[AchievementResponse] = []
    is_active: bool
    created_at: datetime


class UserStatsResponse(BaseModel):
    total_distance: float
    total_points: int
    routes_created: int
    reports_submitted: int
    reviews_written: int
    rides_completed: int
    co2_saved: float
    achievement_count: int
    member_since: Optional[datetime]
    current_streak: int
    longest_streak: int


class TokenPair(BaseModel):
    access_token: str
    refresh_token: str
    token_type: str = "bearer"
