"""
Pydantic схемы для маршрутов и отзывов
"""

from pydantic import BaseModel, Field, ConfigDict
from typing import List, Optional, Dict, Any
from datetime import datetime

from cyclehub.constants import Difficulty, SurfaceType


class PointCoordinate(BaseModel):
    """Координата точки маршрута"""
    lat: float = Field(..., ge=-90, le=90, description="Широта")
    lng: float = Field(..., ge=-180, le=180, description="Долгота")


class Waypoint(PointCoordinate):
    name: str = Field("", max_length=200)


class RouteCreate(BaseModel):
    """Схема для создания маршрута"""
    title: str = Field(..., min_length=1, max_length=100, description="Название маршрута")
    description: str = Field(..., min_length=1, max_length=2000, description="Описание маршрута")

    start_point: Waypoint = Field(..., description="Стартовая точка")
    end_point: Waypoint = Field(..., description="Конечная точка")
    waypoints: List[Waypoint] = Field(default_factory=list, max_length=50, description="Промежуточные точки")

    distance: float = Field(..., ge=0, description="Длина в км (заменяется данными сервиса маршрутизации)")
    estimated_duration: Optional[float] = Field(None, ge=0, description="Ожидаемое время в минутах")
    difficulty: Difficulty
    surface_type: SurfaceType = SurfaceType.PAVED
    elevation_gain: float = Field(0, ge=0)
    polyline: str = Field("", description="Если передан - сервис маршрутизации не вызывается")
    tags: List[str] = Field(default_factory=list, max_length=20)
    city: str = Field("", max_length=100)
    country: str = Field("", max_length=100)


class RouteUpdate(BaseModel):
    """Схема для обновления маршрута. Рейтинг, отзывы и флаги не редактируются"""
    title: Optional[str] = Field(None, min_length=1, max_length=100)
    description: Optional[str] = Field(None, min_length=1, max_length=2000)
    distance: Optional[float] = Field(None, ge=0)
    estimated_duration: Optional[float] = Field(None, ge=0)
    difficulty: Optional[Difficulty] = None
    surface_type: Optional[SurfaceType] = None
    tags: Optional[List[str]] = Field(None, max_length=20)
    city: Optional[str] = Field(None, max_length=100)
    country: Optional[str] = Field(None, max_length=100)


class RoutePreviewRequest(BaseModel):
    start_point: PointCoordinate
    end_point: PointCoordinate


class RoutePreviewResponse(BaseModel):
    distance: float
    duration: float
    elevation_gain: float
    polyline: str


class RouteResponse(BaseModel):
    """Схема для возврата данных маршрута"""
    model_config = ConfigDict(from_attributes=True)

    id: int
    created_by: int
    title: str
    description: str

    start_lat: float
    start_lng: float
    start_name: Optional[str]
    end_lat: float
    end_lng: float
    end_name: Optional[str]
    waypoints: Optional[List[Dict[str, Any]]]

    distance: float
    estimated_duration: Optional[float]
    difficulty: str
    surface_type: Optional[str]
    elevation_gain: Optional[float]
    polyline: Optional[str]
    tags: Optional[List[str]]
    city: Optional[str]
    country: Optional[str]

    average_rating: float
    review_count: int

    is_verified: bool
    is_active: bool

    created_at: datetime
    updated_at: Optional[datetime]


class RouteSummary(BaseModel):
    """Краткие данные маршрута для вложения в поездку"""
    model_config = ConfigDict(from_attributes=True)

    id: int
    title: str
    distance: float


class ReviewCreate(BaseModel):
    """Схема для создания отзыва о маршруте"""
    route_id: int = Field(..., ge=1)
    rating: int = Field(..., ge=1, le=5, description="Оценка от 1 до 5")
    title: str = Field(..., min_length=1, max_length=100)
    comment: str = Field(..., min_length=1, max_length=1500, description="Комментарий")
    safety_score: Optional[int] = Field(None, ge=1, le=5)
    scenery_score: Optional[int] = Field(None, ge=1, le=5)
    difficulty_accuracy: str = Field("accurate", pattern="^(easier|accurate|harder)$")


class ReviewUpdate(BaseModel):
    rating: Optional[int] = Field(None, ge=1, le=5)
    title: Optional[str] = Field(None, min_length=1, max_length=100)
    comment: Optional[str] = Field(None, min_length=1, max_length=1500)
    safety_score: Optional[int] = Field(None, ge=1, le=5)
    scenery_score: Optional[int] = Field(None, ge=1, le=5)
    difficulty_accuracy: Optional[str] = Field(None, pattern="^(easier|accurate|harder)$")


class ReviewResponse(BaseModel):
    """Схема для возврата отзыва"""
    model_config = ConfigDict(from_attributes=True)

    id: int
    route_id: int
    reviewer_id: int
    rating: int
    title: str
    comment: str
    safety_score: Optional[int]
    scenery_score: Optional[int]
    difficulty_accuracy: Optional[str]
    is_edited: bool
    created_at: datetime
    updated_at: Optional[datetime]
