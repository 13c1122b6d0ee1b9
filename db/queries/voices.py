"""
Запросы для ротации голосов (таблица voice_rotation_state, одна строка).
"""

import json
from typing import Optional

import asyncpg

from config import get_logger
from core.types import VoiceRotationState

logger = get_logger(__name__)


def _row_to_state(row) -> VoiceRotationState:
    cached = row['cached_voices']
    if isinstance(cached, str):
        cached = json.loads(cached)
    return VoiceRotationState(
        voice_index=row['voice_index'],
        cached_voices=list(cached or []),
        updated_at=row['updated_at'],
    )


class VoiceRotationRepository:
    """Указатель ротации голосов"""

    def __init__(self, pool: asyncpg.Pool):
        self.pool = pool

    async def get_or_create_state(self) -> VoiceRotationState:
        """Получить состояние (создаётся с индексом 0 при первом обращении)"""
        async with self.pool.acquire() as conn:
            await conn.execute('''
                INSERT INTO voice_rotation_state (id, voice_index, cached_voices)
                VALUES (1, 0, '[]'::jsonb)
                ON CONFLICT (id) DO NOTHING
            ''')
            row = await conn.fetchrow('SELECT * FROM voice_rotation_state WHERE id = 1')
        return _row_to_state(row)

    async def update_state(self, next_index: int,
                           cached_voices: Optional[list[str]] = None) -> None:
        """Сохранить следующий индекс (и, если передан, кэш голосов)"""
        async with self.pool.acquire() as conn:
            if cached_voices is None:
                await conn.execute('''
                    UPDATE voice_rotation_state
                    SET voice_index = $1, updated_at = NOW()
                    WHERE id = 1
                ''', next_index)
            else:
                await conn.execute('''
                    UPDATE voice_rotation_state
                    SET voice_index = $1, cached_voices = $2::jsonb, updated_at = NOW()
                    WHERE id = 1
                ''', next_index, json.dumps(cached_voices))
