import logging
from typing import AsyncGenerator

from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine
from sqlalchemy.orm import sessionmaker

from config.settings import settings

logger = logging.getLogger(__name__)

# Асинхронный движок SQLAlchemy для работы с базой данных
engine = create_async_engine(
    settings.DATABASE_URL,
    echo=settings.DB_ECHO,
    future=True,
)

# Фабрика сессий
async_session_factory = sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False,
    autoflush=False
)

async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """
    Функция-генератор для получения сессии базы данных
    Используется как Dependency в FastAPI, одна сессия на запрос
    """
    async with async_session_factory() as session:
        try:
            yield session
        except Exception as e:
            logger.debug(f"Откат сессии после ошибки: {e}")
            await session.rollback()
            raise
        finally:
            await session.close()
