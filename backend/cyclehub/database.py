"""
Настройка подключения к базе данных
SQLAlchemy + асинхронный драйвер (aiosqlite по умолчанию, asyncpg для PostgreSQL)
"""

import logging

from sqlalchemy import event
from sqlalchemy.ext.asyncio import create_async_engine, AsyncSession, async_sessionmaker
from sqlalchemy.orm import declarative_base
from cyclehub.config import settings

logger = logging.getLogger(__name__)

IS_SQLITE = settings.DATABASE_URL.startswith("sqlite")

# Создаем асинхронный движок БД
engine = create_async_engine(
    settings.DATABASE_URL,
    echo=settings.DEBUG,  # Логирование SQL запросов в режиме отладки
    future=True
)

if IS_SQLITE:
    @event.listens_for(engine.sync_engine, "connect")
    def _enable_sqlite_foreign_keys(dbapi_connection, connection_record):
        # SQLite по умолчанию не проверяет внешние ключи
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()

# Фабрика сессий. Объекты остаются читаемыми после commit -
# в async нельзя лениво перечитать атрибуты при сериализации ответа
AsyncSessionLocal = async_sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False
)

# Базовый класс для моделей
Base = declarative_base()


async def init_models(drop: bool = False):
    """Создает таблицы всех моделей (drop=True - пересоздает с нуля)"""
    # Модели регистрируются в metadata при импорте
    from cyclehub.models import user, reward, route, ride, report  # noqa: F401

    async with engine.begin() as conn:
        if drop:
            await conn.run_sync(Base.metadata.drop_all)
        await conn.run_sync(Base.metadata.create_all)
    logger.info(f"Таблицы готовы: {', '.join(sorted(Base.metadata.tables))}")


async def get_db():
    """Dependency для получения сессии БД"""
    async with AsyncSessionLocal() as session:
        try:
            yield session
        except Exception:
            await session.rollback()
            raise
        finally:
            await session.close()
