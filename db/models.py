"""
Модели базы данных (SQL схемы).

Содержит CREATE TABLE и миграции.
"""

import asyncpg
from config import get_logger

logger = get_logger(__name__)


async def create_tables(pool: asyncpg.Pool):
    """Создание всех таблиц и применение миграций"""
    async with pool.acquire() as conn:
        # ═══════════════════════════════════════════════════════════
        # МАТЕРИАЛЫ (подкаст / аудирование / чтение)
        # ═══════════════════════════════════════════════════════════
        await conn.execute('''
            CREATE TABLE IF NOT EXISTS content_sessions (
                id SERIAL PRIMARY KEY,
                slug TEXT NOT NULL UNIQUE,

                -- Контент
                title TEXT NOT NULL,
                body TEXT NOT NULL,
                questions JSONB NOT NULL DEFAULT '[]',
                image_url TEXT DEFAULT '',
                topic TEXT DEFAULT NULL,

                -- Аудио
                audio_url TEXT DEFAULT '',
                audio_storage_path TEXT DEFAULT NULL,
                audio_provider TEXT DEFAULT NULL,

                -- Классификация
                content_type TEXT NOT NULL DEFAULT 'podcast',
                level TEXT NOT NULL DEFAULT 'B1',
                status TEXT NOT NULL DEFAULT 'draft',

                -- Временные метки
                created_at TIMESTAMP DEFAULT NOW(),
                updated_at TIMESTAMP DEFAULT NOW()
            )
        ''')

        # ═══════════════════════════════════════════════════════════
        # МИГРАЦИИ ДЛЯ СУЩЕСТВУЮЩИХ ТАБЛИЦ
        # ═══════════════════════════════════════════════════════════
        migrations = [
            'ALTER TABLE content_sessions ADD COLUMN IF NOT EXISTS audio_storage_path TEXT DEFAULT NULL',
            'ALTER TABLE content_sessions ADD COLUMN IF NOT EXISTS audio_provider TEXT DEFAULT NULL',
            'ALTER TABLE content_sessions ADD COLUMN IF NOT EXISTS topic TEXT DEFAULT NULL',
            'ALTER TABLE content_sessions ADD COLUMN IF NOT EXISTS level TEXT NOT NULL DEFAULT \'B1\'',
            'ALTER TABLE content_sessions ADD COLUMN IF NOT EXISTS content_type TEXT NOT NULL DEFAULT \'podcast\'',
        ]

        for migration in migrations:
            try:
                await conn.execute(migration)
            except Exception as e:
                # Игнорируем ошибки "колонка уже существует"
                if 'already exists' not in str(e).lower():
                    logger.warning(f"Миграция пропущена: {e}")

        await conn.execute('''
            CREATE INDEX IF NOT EXISTS idx_content_sessions_type_level
            ON content_sessions(content_type, level, created_at DESC)
        ''')

        # ═══════════════════════════════════════════════════════════
        # РЕВИЗИИ (история правок)
        # ═══════════════════════════════════════════════════════════
        await conn.execute('''
            CREATE TABLE IF NOT EXISTS content_revisions (
                id SERIAL PRIMARY KEY,
                session_id INTEGER NOT NULL REFERENCES content_sessions(id) ON DELETE CASCADE,
                field TEXT NOT NULL,
                old_value TEXT,
                new_value TEXT,
                editor TEXT NOT NULL DEFAULT 'admin',
                created_at TIMESTAMP DEFAULT NOW()
            )
        ''')

        await conn.execute('''
            CREATE INDEX IF NOT EXISTS idx_content_revisions_session
            ON content_revisions(session_id, created_at)
        ''')

        # ═══════════════════════════════════════════════════════════
        # МАТЕРИАЛЫ АДМИНА
        # ═══════════════════════════════════════════════════════════
        await conn.execute('''
            CREATE TABLE IF NOT EXISTS custom_contents (
                id SERIAL PRIMARY KEY,
                slug TEXT NOT NULL UNIQUE,

                title TEXT NOT NULL,
                body TEXT NOT NULL,
                questions JSONB NOT NULL DEFAULT '[]',

                audio_url TEXT DEFAULT '',
                audio_storage_path TEXT DEFAULT NULL,

                content_type TEXT NOT NULL DEFAULT 'reading',
                level TEXT NOT NULL DEFAULT 'B1',
                status TEXT NOT NULL DEFAULT 'draft',
                submitted_by BIGINT DEFAULT NULL,

                created_at TIMESTAMP DEFAULT NOW(),
                updated_at TIMESTAMP DEFAULT NOW()
            )
        ''')

        # ═══════════════════════════════════════════════════════════
        # РОТАЦИЯ ГОЛОСОВ (одна строка, id = 1)
        # ═══════════════════════════════════════════════════════════
        await conn.execute('''
            CREATE TABLE IF NOT EXISTS voice_rotation_state (
                id INTEGER PRIMARY KEY DEFAULT 1,
                voice_index INTEGER NOT NULL DEFAULT 0,
                cached_voices JSONB NOT NULL DEFAULT '[]',
                updated_at TIMESTAMP DEFAULT NOW(),
                CONSTRAINT voice_rotation_singleton CHECK (id = 1)
            )
        ''')

        logger.info("✅ Таблицы созданы")
