"""
Модель веломаршрута и отзывов о нем
"""

from sqlalchemy import Column, Integer, String, Text, DateTime, Boolean, Float, ForeignKey, JSON, UniqueConstraint, Index
from sqlalchemy.orm import relationship
from cyclehub.database import Base
from cyclehub.constants import SurfaceType
from cyclehub.timeutils import utcnow


class Route(Base):
    __tablename__ = "routes"
    __table_args__ = (
        Index("ix_routes_active_created", "is_active", "created_at"),
    )

    id = Column(Integer, primary_key=True, index=True)
    created_by = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)

    # Основная информация
    title = Column(String(100), nullable=False)
    description = Column(Text, nullable=False)

    # Начало, конец и промежуточные точки
    start_lat = Column(Float, nullable=False)
    start_lng = Column(Float, nullable=False)
    start_name = Column(String(200), default="")
    end_lat = Column(Float, nullable=False)
    end_lng = Column(Float, nullable=False)
    end_name = Column(String(200), default="")
    waypoints = Column(JSON, default=list)
    # Структура waypoints:
    # [{"lat": 7.29, "lng": 80.63, "name": "Kandy Lake"}, ...]

    # Метаданные маршрута (distance - из сервиса маршрутизации или от пользователя)
    distance = Column(Float, nullable=False)
    estimated_duration = Column(Float)
    difficulty = Column(String(20), nullable=False)
    surface_type = Column(String(20), default=SurfaceType.PAVED.value)
    elevation_gain = Column(Float, default=0)
    polyline = Column(Text, default="")
    tags = Column(JSON, default=list)
    city = Column(String(100), default="")
    country = Column(String(100), default="")

    # Производные поля - только через пересчет по отзывам
    average_rating = Column(Float, nullable=False, default=0.0)
    review_count = Column(Integer, nullable=False, default=0)

    # Флаги
    is_verified = Column(Boolean, nullable=False, default=False)
    is_active = Column(Boolean, nullable=False, default=True)

    created_at = Column(DateTime(timezone=True), default=utcnow)
    updated_at = Column(DateTime(timezone=True), default=utcnow, onupdate=utcnow)

    # Связи
    creator = relationship("User", back_populates="routes")
    reviews = relationship("Review", back_populates="route", cascade="all, delete-orphan")

    def __repr__(self):
        return f"<Route(id={self.id}, title='{self.title}', distance={self.distance})>"


class Review(Base):
    __tablename__ = "reviews"
    __table_args__ = (
        UniqueConstraint("route_id", "reviewer_id", name="uq_reviews_route_reviewer"),
    )

    id = Column(Integer, primary_key=True, index=True)
    route_id = Column(Integer, ForeignKey("routes.id"), nullable=False, index=True)
    reviewer_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)

    rating = Column(Integer, nullable=False)  # 1-5
    title = Column(String(100), nullable=False)
    comment = Column(Text, nullable=False)
    safety_score = Column(Integer)
    scenery_score = Column(Integer)
    difficulty_accuracy = Column(String(20), default="accurate")
    is_edited = Column(Boolean, nullable=False, default=False)

    created_at = Column(DateTime(timezone=True), default=utcnow)
    updated_at = Column(DateTime(timezone=True), default=utcnow, onupdate=utcnow)

    # Связи
    route = relationship("Route", back_populates="reviews")

    def __repr__(self):
        return f"<Review(route_id={self.route_id}, rating={self.rating})>"
