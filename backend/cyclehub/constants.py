"""
Константы предметной области: роли, перечисления, очки, коэффициенты
"""

import enum


class Role(str, enum.Enum):
    CYCLIST = "cyclist"
    ADMIN = "admin"


class Difficulty(str, enum.Enum):
    EASY = "easy"
    MODERATE = "moderate"
    HARD = "hard"
    EXPERT = "expert"


class SurfaceType(str, enum.Enum):
    PAVED = "paved"
    GRAVEL = "gravel"
    MIXED = "mixed"
    TRAIL = "trail"


class RideStatus(str, enum.Enum):
    ACTIVE = "active"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


class ReportCategory(str, enum.Enum):
    POTHOLE = "pothole"
    CONSTRUCTION = "construction"
    POOR_LIGHTING = "poor_lighting"
    TRAFFIC_HAZARD = "traffic_hazard"
    FLOODING = "flooding"
    OBSTRUCTION = "obstruction"
    DANGEROUS_INTERSECTION = "dangerous_intersection"
    OTHER = "other"


class ReportSeverity(str, enum.Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"


class ReportStatus(str, enum.Enum):
    OPEN = "open"
    UNDER_REVIEW = "under_review"
    RESOLVED = "resolved"
    DISMISSED = "dismissed"


class ConfirmationStatus(str, enum.Enum):
    STILL_EXISTS = "still_exists"
    RESOLVED = "resolved"


class RewardCategory(str, enum.Enum):
    DISTANCE = "distance"
    ROUTES = "routes"
    REPORTS = "reports"
    REVIEWS = "reviews"
    STREAK = "streak"
    SPECIAL = "special"


class RewardTier(str, enum.Enum):
    BRONZE = "bronze"
    SILVER = "silver"
    GOLD = "gold"
    PLATINUM = "platinum"


# Очки за действия пользователя
class POINTS:
    REPORT_SUBMITTED = 5
    REPORT_CONFIRMED = 2
    REVIEW_WRITTEN = 10
    RIDE_COMPLETED = 10


# кг CO2 на километр, сэкономленные поездкой на велосипеде вместо автомобиля
CO2_PER_KM = 0.21

# Количество подтверждений "resolved" для автоматического закрытия отчета
AUTO_RESOLVE_THRESHOLD = 3

AUTO_RESOLVE_NOTE = "Auto-resolved by community confirmations."

# Допустимые переходы статуса отчета (resolved/dismissed - терминальные)
REPORT_TRANSITIONS = {
    ReportStatus.OPEN: {ReportStatus.UNDER_REVIEW, ReportStatus.RESOLVED, ReportStatus.DISMISSED},
    ReportStatus.UNDER_REVIEW: {ReportStatus.RESOLVED, ReportStatus.DISMISSED},
    ReportStatus.RESOLVED: set(),
    ReportStatus.DISMISSED: set(),
}
