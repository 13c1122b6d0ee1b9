"""
Управление подключением к базе данных.

Пул соединений PostgreSQL через asyncpg. Пул создаётся один раз
при старте и передаётся репозиториям через AppContext.
"""

import asyncpg

from config import get_logger

logger = get_logger(__name__)


async def create_pool(database_url: str) -> asyncpg.Pool:
    """Создать пул соединений"""
    try:
        pool = await asyncpg.create_pool(database_url)
        logger.info("✅ Пул соединений создан")
        return pool
    except Exception as e:
        logger.error(f"❌ Ошибка создания пула соединений: {e}")
        raise


async def close_pool(pool: asyncpg.Pool):
    """Закрыть пул соединений"""
    if pool:
        await pool.close()
        logger.info("🔒 Пул соединений закрыт")


async def init_db(database_url: str) -> asyncpg.Pool:
    """Создать пул и таблицы"""
    pool = await create_pool(database_url)

    from .models import create_tables
    await create_tables(pool)

    logger.info("✅ База данных инициализирована")
    return pool
