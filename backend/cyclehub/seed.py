"""
Начальное заполнение базы: администратор и каталог наград
Запуск: python -m cyclehub.seed (повторный запуск ничего не дублирует)
"""

import asyncio
import logging

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from cyclehub.config import settings
from cyclehub.constants import Role, RewardCategory, RewardTier
from cyclehub.database import engine, init_models, AsyncSessionLocal
from cyclehub.models.reward import Reward
from cyclehub.models.user import User
from cyclehub.security import hash_secret
from cyclehub.services.criteria import CriteriaType

logger = logging.getLogger(__name__)

# По одной награде на каждый тип критерия
DEFAULT_REWARDS = [
    {
        "name": "First 50 km",
        "description": "Ride a total of 50 km",
        "icon": "road",
        "category": RewardCategory.DISTANCE,
        "criteria_type": CriteriaType.TOTAL_DISTANCE,
        "criteria_threshold": 50,
        "points_awarded": 25,
        "tier": RewardTier.BRONZE,
    },
    {
        "name": "Trailblazer",
        "description": "Create your first route",
        "icon": "map",
        "category": RewardCategory.ROUTES,
        "criteria_type": CriteriaType.ROUTES_CREATED,
        "criteria_threshold": 1,
        "points_awarded": 10,
        "tier": RewardTier.BRONZE,
    },
    {
        "name": "Road Guardian",
        "description": "Submit 5 hazard reports",
        "icon": "shield",
        "category": RewardCategory.REPORTS,
        "criteria_type": CriteriaType.REPORTS_SUBMITTED,
        "criteria_threshold": 5,
        "points_awarded": 20,
        "tier": RewardTier.SILVER,
    },
    {
        "name": "Critic",
        "description": "Write 3 route reviews",
        "icon": "star",
        "category": RewardCategory.REVIEWS,
        "criteria_type": CriteriaType.REVIEWS_WRITTEN,
        "criteria_threshold": 3,
        "points_awarded": 15,
        "tier": RewardTier.BRONZE,
    },
    {
        "name": "Regular Rider",
        "description": "Complete 10 rides",
        "icon": "bike",
        "category": RewardCategory.SPECIAL,
        "criteria_type": CriteriaType.RIDES_COMPLETED,
        "criteria_threshold": 10,
        "points_awarded": 30,
        "tier": RewardTier.SILVER,
    },
]


async def seed_admin(db: AsyncSession) -> User:
    """Создает администратора или повышает существующего пользователя"""
    email = settings.ADMIN_EMAIL.lower()
    user = await db.scalar(select(User).where(User.email == email))
    if user is None:
        user = User(
            first_name="Admin",
            last_name="User",
            email=email,
            password_hash=hash_secret(settings.ADMIN_PASSWORD),
            role=Role.ADMIN.value,
            achievements=[],
        )
        db.add(user)
        logger.info(f"Создан администратор {email}")
    elif user.role != Role.ADMIN.value:
        user.role = Role.ADMIN.value
        logger.info(f"Пользователь {email} повышен до администратора")
    else:
        logger.info(f"Администратор уже существует: {email}")
    await db.commit()
    return user


async def seed_rewards(db: AsyncSession) -> int:
    """Добавляет недостающие награды каталога, возвращает количество новых"""
    existing = set((await db.execute(select(Reward.name))).scalars().all())
    created = 0
    for item in DEFAULT_REWARDS:
        if item["name"] in existing:
            continue
        db.add(Reward(
            name=item["name"],
            description=item["description"],
            icon=item["icon"],
            category=item["category"].value,
            criteria_type=item["criteria_type"].value,
            criteria_threshold=item["criteria_threshold"],
            points_awarded=item["points_awarded"],
            tier=item["tier"].value,
        ))
        created += 1
    await db.commit()
    logger.info(f"Наград добавлено: {created}")
    return created


async def seed():
    await init_models()
    async with AsyncSessionLocal() as db:
        await seed_admin(db)
        await seed_rewards(db)
    await engine.dispose()


if __name__ == "__main__":
    logging.basicConfig(level=settings.LOG_LEVEL)
    asyncio.run(seed())
