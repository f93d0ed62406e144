"""
Модель пользователя
"""

from sqlalchemy import Column, Integer, String, Text, DateTime, Boolean, Float
from sqlalchemy.orm import relationship
from cyclehub.database import Base
from cyclehub.constants import Role
from cyclehub.timeutils import utcnow


class User(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    first_name = Column(String(50), nullable=False)
    last_name = Column(String(50), nullable=False)
    email = Column(String(100), unique=True, index=True, nullable=False)
    password_hash = Column(String(255), nullable=False)
    role = Column(String(20), nullable=False, default=Role.CYCLIST.value)
    bio = Column(Text, default="")
    city = Column(String(100), default="")
    country = Column(String(100), default="")

    # Накопительные счетчики (меняются только поездками и наградами)
    total_distance = Column(Float, nullable=False, default=0.0)
    total_points = Column(Integer, nullable=False, default=0)

    # Серия поездок по дням
    current_streak = Column(Integer, nullable=False, default=0)
    longest_streak = Column(Integer, nullable=False, default=0)
    last_ride_date = Column(DateTime(timezone=True))

    # Хэш текущего refresh токена (ротация при каждом обновлении)
    refresh_token_hash = Column(String(255))
    is_active = Column(Boolean, nullable=False, default=True)

    created_at = Column(DateTime(timezone=True), default=utcnow)
    updated_at = Column(DateTime(timezone=True), default=utcnow, onupdate=utcnow)

    # Связи с другими таблицами
    achievements = relationship(
        "Reward",
        secondary="user_achievements",
        lazy="selectin",
        order_by="Reward.id",
    )
    routes = relationship("Route", back_populates="creator")
    rides = relationship("Ride", back_populates="user")

    @property
    def is_admin(self):
        return self.role == Role.ADMIN.value

    def __repr__(self):
        return f"<User(id={self.id}, email='{self.email}', role='{self.role}')>"
