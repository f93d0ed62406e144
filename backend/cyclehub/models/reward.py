"""
Модель награды (достижения) и связь пользователь-награда
"""

from sqlalchemy import Column, Integer, String, Text, DateTime, Boolean, ForeignKey, Table
from cyclehub.database import Base
from cyclehub.timeutils import utcnow


# Одна строка = награда выдана пользователю. Составной первичный ключ
# не дает выдать одну награду дважды.
# Получатели награды читаются запросом к этой таблице (services/rewards.py).
user_achievements = Table(
    "user_achievements",
    Base.metadata,
    Column("user_id", Integer, ForeignKey("users.id"), primary_key=True),
    Column("reward_id", Integer, ForeignKey("rewards.id"), primary_key=True),
    Column("earned_at", DateTime(timezone=True), default=utcnow),
)


class Reward(Base):
    __tablename__ = "rewards"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(100), unique=True, nullable=False)
    description = Column(Text, nullable=False)
    icon = Column(String(100), nullable=False)
    category = Column(String(20), nullable=False)

    # Декларативный критерий: {type, threshold}
    criteria_type = Column(String(50), nullable=False, index=True)
    criteria_threshold = Column(Integer, nullable=False)

    points_awarded = Column(Integer, nullable=False, default=0)
    tier = Column(String(20), nullable=False)

    # Мягкое удаление: неактивные награды не участвуют в проверке,
    # но у получивших они остаются
    is_active = Column(Boolean, nullable=False, default=True)

    created_at = Column(DateTime(timezone=True), default=utcnow)
    updated_at = Column(DateTime(timezone=True), default=utcnow, onupdate=utcnow)

    @property
    def criteria(self):
        return {"type": self.criteria_type, "threshold": self.criteria_threshold}

    def __repr__(self):
        return f"<Reward(id={self.id}, name='{self.name}', criteria={self.criteria_type}>={self.criteria_threshold})>"
