"""
Запросы для материалов (таблицы content_sessions, content_revisions).
"""

from typing import Optional, Union

import asyncpg

from config import get_logger
from core.errors import ValidationError
from core.helpers import generate_slug
from core.types import (
    ContentSession, ContentStatus, ContentType, Level, NewContent, Question, Revision,
    EDITABLE_FIELDS, check_transition, classify_storage_ref, questions_from_json,
    questions_to_json, storage_ref_to_db,
)

logger = get_logger(__name__)


def _row_to_session(row) -> ContentSession:
    """Преобразовать строку БД в ContentSession"""
    return ContentSession(
        id=row['id'],
        slug=row['slug'],
        title=row['title'],
        body=row['body'],
        questions=questions_from_json(row['questions']),
        status=ContentStatus(row['status']),
        content_type=ContentType(row['content_type']),
        level=Level(row['level']),
        image_url=row['image_url'] or '',
        audio_url=row['audio_url'] or '',
        audio_ref=classify_storage_ref(row['audio_storage_path']),
        topic=row['topic'],
        audio_provider=row['audio_provider'],
        created_at=row['created_at'],
        updated_at=row['updated_at'],
    )


def _row_to_revision(row) -> Revision:
    return Revision(
        id=row['id'],
        session_id=row['session_id'],
        field=row['field'],
        old_value=row['old_value'],
        new_value=row['new_value'],
        editor=row['editor'],
        created_at=row['created_at'],
    )


async def transition_status(conn, table: str, ident: Union[int, str],
                            new_status: ContentStatus):
    """Сменить статус строки в table (внутри транзакции)

    Returns:
        Обновлённая строка или None, если строки нет

    Raises:
        InvalidTransition: если текущий статус не допускает перехода
    """
    column = 'id' if isinstance(ident, int) else 'slug'
    row = await conn.fetchrow(
        f'SELECT id, status FROM {table} WHERE {column} = $1 FOR UPDATE', ident
    )
    if row is None:
        return None

    check_transition(ContentStatus(row['status']), new_status)

    return await conn.fetchrow(f'''
        UPDATE {table} SET status = $1, updated_at = NOW()
        WHERE id = $2 AND status = $3
        RETURNING *
    ''', new_status.value, row['id'], row['status'])


def _field_to_text(field: str, value) -> Optional[str]:
    """Значение поля в виде строки для ревизии"""
    if value is None:
        return None
    if field == 'questions':
        return questions_to_json(value)
    return str(value)


class ContentRepository:
    """Хранилище материалов"""

    def __init__(self, pool: asyncpg.Pool):
        self.pool = pool

    async def create(self, content: NewContent) -> ContentSession:
        """Создать черновик (status = draft)"""
        slug = generate_slug(content.content_type.value)
        async with self.pool.acquire() as conn:
            row = await conn.fetchrow('''
                INSERT INTO content_sessions
                (slug, title, body, questions, image_url, topic,
                 audio_url, audio_storage_path, audio_provider,
                 content_type, level, status)
                VALUES ($1, $2, $3, $4::jsonb, $5, $6, $7, $8, $9, $10, $11, $12)
                RETURNING *
            ''', slug, content.title, content.body, questions_to_json(content.questions),
                content.image_url or '', content.topic,
                content.audio_url or '', storage_ref_to_db(content.audio_ref), content.audio_provider,
                content.content_type.value, content.level.value, ContentStatus.DRAFT.value)

        logger.info(f"📝 Черновик создан: {slug}")
        return _row_to_session(row)

    async def get_by_id(self, session_id: int) -> Optional[ContentSession]:
        async with self.pool.acquire() as conn:
            row = await conn.fetchrow('SELECT * FROM content_sessions WHERE id = $1', session_id)
        return _row_to_session(row) if row else None

    async def get_by_slug(self, slug: str) -> Optional[ContentSession]:
        async with self.pool.acquire() as conn:
            row = await conn.fetchrow('SELECT * FROM content_sessions WHERE slug = $1', slug)
        return _row_to_session(row) if row else None

    async def list_by_type_and_level(self, content_type: ContentType, level: Level,
                                     limit: int = 10, offset: int = 0) -> list[ContentSession]:
        """Материалы по типу и уровню (новые первыми)"""
        async with self.pool.acquire() as conn:
            rows = await conn.fetch('''
                SELECT * FROM content_sessions
                WHERE content_type = $1 AND level = $2
                ORDER BY created_at DESC, id DESC
                LIMIT $3 OFFSET $4
            ''', content_type.value, level.value, limit, offset)
        return [_row_to_session(row) for row in rows]

    async def count_by_type_and_level(self, content_type: ContentType, level: Level) -> int:
        async with self.pool.acquire() as conn:
            return await conn.fetchval(
                'SELECT COUNT(*) FROM content_sessions WHERE content_type = $1 AND level = $2',
                content_type.value, level.value
            )

    async def update_status(self, ident: Union[int, str],
                            new_status: ContentStatus) -> Optional[ContentSession]:
        """Сменить статус (compare-and-set)

        Args:
            ident: id или slug материала
            new_status: новый статус

        Returns:
            Обновлённый материал или None (нет такого / статус уже сменился)

        Raises:
            InvalidTransition: переход не разрешён графом статусов
        """
        async with self.pool.acquire() as conn:
            async with conn.transaction():
                row = await transition_status(conn, 'content_sessions', ident, new_status)

        if row is None:
            return None
        logger.info(f"🔄 Материал {row['slug']}: статус → {new_status.value}")
        return _row_to_session(row)

    async def update(self, slug: str, fields: dict, editor: str) -> Optional[ContentSession]:
        """Изменить поля материала и записать ревизии (одна транзакция)

        Args:
            slug: слаг материала
            fields: {поле: новое значение}, только EDITABLE_FIELDS
            editor: кто редактирует

        Returns:
            Обновлённый материал или None, если материала нет

        Raises:
            ValidationError: недопустимое поле или значение
        """
        unknown = [name for name in fields if name not in EDITABLE_FIELDS]
        if unknown:
            raise ValidationError(f"Поля нельзя редактировать: {', '.join(unknown)}")
        if 'questions' in fields:
            if not all(isinstance(q, Question) for q in fields['questions']):
                raise ValidationError("questions должен быть списком Question")
        for name in ('title', 'body'):
            if name in fields and not str(fields[name] or '').strip():
                raise ValidationError(f"Поле {name} не может быть пустым")

        async with self.pool.acquire() as conn:
            async with conn.transaction():
                row = await conn.fetchrow(
                    'SELECT * FROM content_sessions WHERE slug = $1 FOR UPDATE', slug
                )
                if row is None:
                    return None

                current = _row_to_session(row)
                changed = {}
                for name, value in fields.items():
                    old_text = _field_to_text(name, getattr(current, name))
                    new_text = _field_to_text(name, value)
                    if old_text != new_text:
                        changed[name] = (value, old_text, new_text)

                if not changed:
                    return current

                for name, (value, old_text, new_text) in changed.items():
                    if name == 'questions':
                        await conn.execute(
                            'UPDATE content_sessions SET questions = $1::jsonb WHERE id = $2',
                            new_text, current.id
                        )
                    else:
                        await conn.execute(
                            f'UPDATE content_sessions SET {name} = $1 WHERE id = $2',
                            value, current.id
                        )
                    await conn.execute('''
                        INSERT INTO content_revisions (session_id, field, old_value, new_value, editor)
                        VALUES ($1, $2, $3, $4, $5)
                    ''', current.id, name, old_text, new_text, editor)

                row = await conn.fetchrow(
                    'UPDATE content_sessions SET updated_at = NOW() WHERE id = $1 RETURNING *',
                    current.id
                )

        logger.info(f"✏️ Материал {slug} изменён ({editor}): {', '.join(changed)}")
        return _row_to_session(row)

    async def list_revisions(self, session_id: int) -> list[Revision]:
        """История правок материала (по времени)"""
        async with self.pool.acquire() as conn:
            rows = await conn.fetch('''
                SELECT * FROM content_revisions
                WHERE session_id = $1
                ORDER BY created_at, id
            ''', session_id)
        return [_row_to_revision(row) for row in rows]
