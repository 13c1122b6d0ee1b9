"""
Общие фикстуры и подделки для тестов (без Telegram, PostgreSQL и внешних API).

Запуск: python -m pytest tests -v
"""

import os
import sys
from dataclasses import replace
from datetime import datetime, timezone
from unittest.mock import AsyncMock, MagicMock

import pytest

# Добавляем путь к проекту
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from config import Settings  # noqa: E402
from core.types import (  # noqa: E402
    ContentSession, ContentStatus, ContentType, Level, Question, VoiceRotationState,
    check_transition,
)


def make_question(n: int = 1, correct: int = 0, **overrides) -> Question:
    data = dict(
        text=f"سؤال {n}؟",
        options=[f"خيار {n}-{i}" for i in range(4)],
        correct_answer=correct,
        explanation=f"شرح {n}",
    )
    data.update(overrides)
    return Question(**data)


def make_questions(count: int = 5) -> list[Question]:
    return [make_question(i, correct=i % 4) for i in range(1, count + 1)]


def llm_question(n: int = 1, letter: str = "A") -> dict:
    """Вопрос в формате ответа LLM"""
    return {
        "question": f"سؤال {n}؟",
        "options": [f"خيار {n}-{i}" for i in range(4)],
        "correctAnswer": letter,
        "explanation": f"شرح {n}",
    }


def llm_payload(**overrides) -> dict:
    """Корректный JSON-ответ LLM"""
    data = {
        "podcastTitle": "رِحْلَةٌ إِلَى البَحْرِ",
        "podcastContent": "ذَهَبَ أَحْمَدُ إِلَى البَحْرِ مَعَ عَائِلَتِهِ.",
        "questions": [llm_question(i, "ABCD"[i % 4]) for i in range(1, 6)],
        "imageUrl": "https://images.example.com/sea.jpg",
    }
    data.update(overrides)
    return data


def make_session(**overrides) -> ContentSession:
    now = datetime(2024, 5, 1, 10, 0, tzinfo=timezone.utc)
    data = dict(
        id=7,
        slug="podcast-1714557600000-abcd1234",
        title="رِحْلَةٌ إِلَى البَحْرِ",
        body="ذَهَبَ أَحْمَدُ إِلَى البَحْرِ.",
        questions=make_questions(),
        status=ContentStatus.DRAFT,
        content_type=ContentType.PODCAST,
        level=Level.B1,
        image_url="https://images.example.com/sea.jpg",
        audio_url="",
        audio_ref=None,
        created_at=now,
        updated_at=now,
    )
    data.update(overrides)
    return ContentSession(**data)


class FakeContentRepository:
    """Репозиторий материалов в памяти (тот же граф статусов)"""

    def __init__(self, items=()):
        self.items = {item.id: item for item in items}

    def _find(self, ident):
        if isinstance(ident, int):
            return self.items.get(ident)
        return next((i for i in self.items.values() if i.slug == ident), None)

    async def get_by_id(self, session_id):
        return self.items.get(session_id)

    async def get_by_slug(self, slug):
        return self._find(slug)

    async def update_status(self, ident, new_status):
        item = self._find(ident)
        if item is None:
            return None
        check_transition(item.status, new_status)
        updated = replace(item, status=new_status)
        self.items[item.id] = updated
        return updated

    async def count_by_type_and_level(self, content_type, level):
        return len(self._matching(content_type, level))

    async def list_by_type_and_level(self, content_type, level, limit=10, offset=0):
        return self._matching(content_type, level)[offset:offset + limit]

    def _matching(self, content_type, level):
        return [i for i in self.items.values() if i.content_type == content_type and i.level == level]


class FakeVoiceRepository:
    """Состояние ротации голосов в памяти"""

    def __init__(self, voice_index: int = 0, cached_voices=None):
        self.state = VoiceRotationState(voice_index=voice_index, cached_voices=list(cached_voices or []))
        self.updates = []

    async def get_or_create_state(self):
        return replace(self.state, cached_voices=list(self.state.cached_voices))

    async def update_state(self, next_index, cached_voices=None):
        self.updates.append((next_index, cached_voices))
        self.state.voice_index = next_index
        if cached_voices is not None:
            self.state.cached_voices = list(cached_voices)


@pytest.fixture
def settings(tmp_path):
    return Settings(
        bot_token="123456:TEST-token",
        admin_chat_id=42,
        channel_id="@arabic_channel",
        public_base_url="https://bot.example.com",
        media_dir=tmp_path / "media",
    )


@pytest.fixture
def bot():
    return AsyncMock()


@pytest.fixture
def callback_query():
    query = MagicMock()
    query.answer = AsyncMock()
    query.message.edit_reply_markup = AsyncMock()
    return query
