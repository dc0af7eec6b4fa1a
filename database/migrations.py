import logging

from config.settings import settings
from .db import engine
from .models import Base

logger = logging.getLogger(__name__)

async def create_tables():
    """Создаем все таблицы в базе данных"""
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

async def drop_tables():
    """Удаляем все таблицы из базы данных"""
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)

async def recreate_tables():
    """Пересоздаем все таблицы"""
    await drop_tables()
    await create_tables()

async def init_db():
    if settings.FORCE_DB_RECREATE:
        logger.warning("Принудительное пересоздание таблиц (FORCE_DB_RECREATE=True)")
        await recreate_tables()
    else:
        await create_tables()
    logger.info("Таблицы базы данных готовы")
