"""
Запросы для материалов админа (таблица custom_contents).
"""

from typing import Optional, Union

import asyncpg

from config import get_logger
from core.helpers import generate_slug
from core.types import (
    ContentStatus, ContentType, CustomContent, Level, Question, StorageRef,
    classify_storage_ref, questions_from_json, questions_to_json, storage_ref_to_db,
)
from .sessions import transition_status

logger = get_logger(__name__)


def _row_to_custom(row) -> CustomContent:
    return CustomContent(
        id=row['id'],
        slug=row['slug'],
        title=row['title'],
        body=row['body'],
        questions=questions_from_json(row['questions']),
        status=ContentStatus(row['status']),
        content_type=ContentType(row['content_type']),
        level=Level(row['level']),
        audio_url=row['audio_url'] or '',
        audio_ref=classify_storage_ref(row['audio_storage_path']),
        submitted_by=row['submitted_by'],
        created_at=row['created_at'],
        updated_at=row['updated_at'],
    )


class CustomContentRepository:
    """Хранилище материалов, присланных админом"""

    def __init__(self, pool: asyncpg.Pool):
        self.pool = pool

    async def create_custom(self, title: str, body: str, questions: list[Question],
                            level: Level, audio_url: str = '',
                            audio_ref: Optional[StorageRef] = None,
                            submitted_by: int = None) -> CustomContent:
        """Создать черновик (с аудио — listening, без — reading)"""
        content_type = ContentType.LISTENING if audio_ref else ContentType.READING
        slug = generate_slug('custom')
        async with self.pool.acquire() as conn:
            row = await conn.fetchrow('''
                INSERT INTO custom_contents
                (slug, title, body, questions, audio_url, audio_storage_path,
                 content_type, level, status, submitted_by)
                VALUES ($1, $2, $3, $4::jsonb, $5, $6, $7, $8, $9, $10)
                RETURNING *
            ''', slug, title, body, questions_to_json(questions), audio_url or '',
                storage_ref_to_db(audio_ref), content_type.value, level.value,
                ContentStatus.DRAFT.value, submitted_by)

        logger.info(f"📝 Материал админа создан: {slug}")
        return _row_to_custom(row)

    async def get_custom_by_id(self, content_id: int) -> Optional[CustomContent]:
        async with self.pool.acquire() as conn:
            row = await conn.fetchrow('SELECT * FROM custom_contents WHERE id = $1', content_id)
        return _row_to_custom(row) if row else None

    async def get_custom_by_slug(self, slug: str) -> Optional[CustomContent]:
        async with self.pool.acquire() as conn:
            row = await conn.fetchrow('SELECT * FROM custom_contents WHERE slug = $1', slug)
        return _row_to_custom(row) if row else None

    async def update_custom_status(self, ident: Union[int, str],
                                   new_status: ContentStatus) -> Optional[CustomContent]:
        """Сменить статус (тот же граф переходов, что и у материалов)"""
        async with self.pool.acquire() as conn:
            async with conn.transaction():
                row = await transition_status(conn, 'custom_contents', ident, new_status)

        if row is None:
            return None
        logger.info(f"🔄 Материал админа {row['slug']}: статус → {new_status.value}")
        return _row_to_custom(row)
