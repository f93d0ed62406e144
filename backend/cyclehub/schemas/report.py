"""
Pydantic схемы для отчетов об опасностях
"""

from pydantic import BaseModel, Field, ConfigDict
from typing import List, Optional
from datetime import datetime

from cyclehub.constants import ReportCategory, ReportSeverity, ReportStatus, ConfirmationStatus


class ReportCreate(BaseModel):
    title: str = Field(..., min_length=1, max_length=150)
    description: str = Field(..., min_length=1, max_length=2000)
    route_id: Optional[int] = Field(None, ge=1)
    category: ReportCategory
    severity: ReportSeverity
    lat: float = Field(..., ge=-90, le=90)
    lng: float = Field(..., ge=-180, le=180)
    address: str = Field("", max_length=300)
    image_url: str = Field("", max_length=500)


class ReportUpdate(BaseModel):
    """Редактирование автором, пока отчет open. Статус и заметки админа не входят"""
    title: Optional[str] = Field(None, min_length=1, max_length=150)
    description: Optional[str] = Field(None, min_length=1, max_length=2000)
    category: Optional[ReportCategory] = None
    severity: Optional[ReportSeverity] = None
    lat: Optional[float] = Field(None, ge=-90, le=90)
    lng: Optional[float] = Field(None, ge=-180, le=180)
    address: Optional[str] = Field(None, max_length=300)
    image_url: Optional[str] = Field(None, max_length=500)


class ReportConfirm(BaseModel):
    status: ConfirmationStatus


class ReportStatusUpdate(BaseModel):
    status: ReportStatus
    admin_notes: Optional[str] = Field(None, max_length=1000)


class ConfirmationResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    user_id: int
    status: str
    created_at: datetime
    updated_at: Optional[datetime]


class ReportResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    reported_by: int
    route_id: Optional[int]
    title: str
    description: str
    category: str
    severity: str
    lat: float
    lng: float
    address: Optional[str]
    status: str
    image_url: Optional[str]
    admin_notes: Optional[str]
    resolved_at: Optional[datetime]
    confirmations: List[ConfirmationResponse] = []
    created_at: datetime
    updated_at: Optional[datetime]
