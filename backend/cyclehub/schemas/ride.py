"""
Pydantic схемы для поездок
"""

from pydantic import BaseModel, Field, ConfigDict
from typing import Optional
from datetime import datetime

from cyclehub.schemas.route import RouteSummary


class RideStart(BaseModel):
    route_id: int = Field(..., ge=1, description="Маршрут поездки")


class RideResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    user_id: int
    route_id: int
    route: Optional[RouteSummary]
    status: str
    started_at: datetime
    completed_at: Optional[datetime]
    duration: Optional[float]
    distance: Optional[float]
    co2_saved: Optional[float]
    points_earned: Optional[int]
    created_at: datetime


class RideStatsResponse(BaseModel):
    rides_completed: int
    total_distance: float
    total_co2_saved: float
    total_duration: float
