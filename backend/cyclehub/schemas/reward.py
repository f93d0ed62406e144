"""
Pydantic схемы для наград
"""

from pydantic import BaseModel, Field, ConfigDict
from typing import List, Optional
from datetime import datetime

from cyclehub.constants import RewardCategory, RewardTier
from cyclehub.services.criteria import CriteriaType


class Criteria(BaseModel):
    """Декларативный критерий: принимаются только известные типы"""
    type: CriteriaType
    threshold: int = Field(..., ge=1)


class CriteriaResponse(BaseModel):
    """В ответе тип - строка: в базе может оказаться тип, которого нет в CriteriaType"""
    type: str
    threshold: int


class RewardCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=100)
    description: str = Field(..., min_length=1, max_length=500)
    icon: str = Field(..., min_length=1, max_length=100)
    category: RewardCategory
    criteria: Criteria
    points_awarded: int = Field(0, ge=0)
    tier: RewardTier


class RewardUpdate(BaseModel):
    """earned_by не редактируется"""
    name: Optional[str] = Field(None, min_length=1, max_length=100)
    description: Optional[str] = Field(None, min_length=1, max_length=500)
    icon: Optional[str] = Field(None, min_length=1, max_length=100)
    category: Optional[RewardCategory] = None
    criteria: Optional[Criteria] = None
    points_awarded: Optional[int] = Field(None, ge=0)
    tier: Optional[RewardTier] = None
    is_active: Optional[bool] = None


class RewardResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    description: str
    icon: str
    category: str
    criteria: CriteriaResponse
    points_awarded: int
    tier: str
    earned_by_ids: List[int] = []
    is_active: bool
    created_at: datetime


class GrantResponse(BaseModel):
    granted: List[RewardResponse]
    total_achievements: int
