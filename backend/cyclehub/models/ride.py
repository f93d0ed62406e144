"""
Модель поездки по маршруту
"""

from sqlalchemy import Column, Integer, String, DateTime, Boolean, Float, ForeignKey, Index, text
from sqlalchemy.orm import relationship
from cyclehub.database import Base
from cyclehub.constants import RideStatus
from cyclehub.timeutils import utcnow


class Ride(Base):
    __tablename__ = "rides"
    __table_args__ = (
        # Не больше одной активной поездки на пользователя - гарантия на уровне БД
        Index(
            "uq_rides_one_active_per_user",
            "user_id",
            unique=True,
            sqlite_where=text("status = 'active'"),
            postgresql_where=text("status = 'active'"),
        ),
        Index("ix_rides_user_created", "user_id", "created_at"),
    )

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False)
    route_id = Column(Integer, ForeignKey("routes.id"), nullable=False, index=True)

    # active -> completed | cancelled
    status = Column(String(20), nullable=False, default=RideStatus.ACTIVE.value)
    started_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)
    completed_at = Column(DateTime(timezone=True))

    # Заполняются один раз при завершении
    duration = Column(Float)  # минуты
    distance = Column(Float)  # км
    co2_saved = Column(Float)  # кг
    points_earned = Column(Integer)

    is_active = Column(Boolean, nullable=False, default=True)

    created_at = Column(DateTime(timezone=True), default=utcnow)
    updated_at = Column(DateTime(timezone=True), default=utcnow, onupdate=utcnow)

    # Связи
    user = relationship("User", back_populates="rides")
    route = relationship("Route", lazy="selectin")

    def __repr__(self):
        return f"<Ride(id={self.id}, user_id={self.user_id}, status='{self.status}')>"

    @property
    def is_completed(self):
        """Проверяет, завершена ли поездка"""
        return self.status == RideStatus.COMPLETED.value
