"""
Типы данных: материалы, вопросы, ревизии, ссылки на аудио.

Все проверки делаются при создании объектов из внешних данных
(ответ LLM, строка БД, ввод админа). Дальше по коду данные считаются валидными.
"""

import json
from dataclasses import dataclass, field, asdict
from datetime import datetime
from enum import Enum
from typing import Optional, Union

from config import ANSWER_LETTERS, OPTIONS_PER_QUESTION
from .errors import InvalidTransition, ValidationError


class ContentType(str, Enum):
    """Тип материала"""
    PODCAST = "podcast"
    LISTENING = "listening"
    READING = "reading"

    @property
    def has_audio(self) -> bool:
        return self is not ContentType.READING


class Level(str, Enum):
    """Уровень CEFR"""
    A1 = "A1"
    A2 = "A2"
    B1 = "B1"
    B2 = "B2"


class ContentStatus(str, Enum):
    """Статус материала в цикле согласования"""
    DRAFT = "draft"
    APPROVED = "approved"
    REJECTED = "rejected"
    POSTED = "posted"


# Разрешённые переходы статуса
ALLOWED_TRANSITIONS: dict[ContentStatus, set[ContentStatus]] = {
    ContentStatus.DRAFT: {ContentStatus.APPROVED, ContentStatus.REJECTED},
    ContentStatus.APPROVED: {ContentStatus.POSTED},
    ContentStatus.REJECTED: set(),
    ContentStatus.POSTED: set(),
}


def check_transition(current: ContentStatus, new: ContentStatus) -> None:
    """Проверяет переход статуса

    Raises:
        InvalidTransition: если переход не разрешён
    """
    if new not in ALLOWED_TRANSITIONS[ContentStatus(current)]:
        raise InvalidTransition(ContentStatus(current).value, ContentStatus(new).value)


def parse_enum(enum_cls, value, field_name: str):
    """Значение перечисления из строки или ValidationError"""
    try:
        return enum_cls(value)
    except ValueError:
        raise ValidationError(f"Недопустимое значение {field_name}: {value!r}")


# ==================== ССЫЛКИ НА АУДИО ====================

@dataclass(frozen=True)
class StorageKey:
    """Ключ объекта в хранилище (новые записи)"""
    key: str


@dataclass(frozen=True)
class LegacyUrl:
    """Полный URL из старых записей"""
    url: str


StorageRef = Union[StorageKey, LegacyUrl]


def classify_storage_ref(value: Optional[str]) -> Optional[StorageRef]:
    """Определяет вид ссылки на аудио по значению из БД"""
    if not value:
        return None
    if value.startswith("http://") or value.startswith("https://"):
        return LegacyUrl(value)
    return StorageKey(value)


def storage_ref_to_db(ref: Optional[StorageRef]) -> Optional[str]:
    if ref is None:
        return None
    if isinstance(ref, StorageKey):
        return ref.key
    return ref.url


# ==================== ВОПРОСЫ ====================

@dataclass
class Question:
    """Вопрос с выбором ответа (correct_answer — индекс 0..3)"""
    text: str
    options: list[str]
    correct_answer: int
    explanation: str = ""

    def __post_init__(self):
        if not isinstance(self.text, str) or not self.text.strip():
            raise ValidationError("Пустой текст вопроса")
        if not isinstance(self.options, list) or len(self.options) != OPTIONS_PER_QUESTION:
            raise ValidationError(
                f"Ожидалось {OPTIONS_PER_QUESTION} варианта ответа, получено "
                f"{len(self.options) if isinstance(self.options, list) else type(self.options).__name__}"
            )
        if not all(isinstance(o, str) and o.strip() for o in self.options):
            raise ValidationError("Пустой вариант ответа")
        if not isinstance(self.correct_answer, int) or not 0 <= self.correct_answer < OPTIONS_PER_QUESTION:
            raise ValidationError(f"Неверный индекс правильного ответа: {self.correct_answer!r}")
        if self.explanation is None:
            self.explanation = ""

    @classmethod
    def from_llm(cls, data: dict) -> "Question":
        """Вопрос из ответа LLM (правильный ответ — буква A-D)"""
        if not isinstance(data, dict):
            raise ValidationError("Вопрос должен быть объектом")
        return cls(
            text=data.get("question", ""),
            options=data.get("options"),
            correct_answer=answer_letter_to_index(data.get("correctAnswer")),
            explanation=data.get("explanation") or "",
        )

    @classmethod
    def from_dict(cls, data: dict) -> "Question":
        """Вопрос из сохранённого JSON"""
        return cls(
            text=data.get("text", ""),
            options=data.get("options"),
            correct_answer=data.get("correct_answer"),
            explanation=data.get("explanation") or "",
        )

    def to_dict(self) -> dict:
        return asdict(self)


def answer_letter_to_index(letter) -> int:
    """'A'..'D' → 0..3

    Raises:
        ValidationError: для любой другой буквы
    """
    if not isinstance(letter, str):
        raise ValidationError(f"Неверная буква ответа: {letter!r}")
    normalized = letter.strip().upper()
    if normalized not in ANSWER_LETTERS:
        raise ValidationError(f"Неверная буква ответа: {letter!r}")
    return ANSWER_LETTERS.index(normalized)


def questions_to_json(questions: list[Question]) -> str:
    return json.dumps([q.to_dict() for q in questions], ensure_ascii=False)


def questions_from_json(value) -> list[Question]:
    if not value:
        return []
    data = json.loads(value) if isinstance(value, str) else value
    return [Question.from_dict(item) for item in data]


# ==================== МАТЕРИАЛЫ ====================

@dataclass
class GeneratedContent:
    """Результат генерации LLM (до озвучки и сохранения)"""
    title: str
    body: str
    questions: list[Question]
    topic: Optional[str] = None
    image_url: str = ""


@dataclass
class NewContent:
    """Данные для создания черновика"""
    title: str
    body: str
    questions: list[Question]
    content_type: ContentType
    level: Level
    image_url: str = ""
    audio_url: str = ""
    audio_ref: Optional[StorageRef] = None
    topic: Optional[str] = None
    audio_provider: Optional[str] = None


@dataclass
class ContentSession:
    """Сохранённый материал"""
    id: int
    slug: str
    title: str
    body: str
    questions: list[Question]
    status: ContentStatus
    content_type: ContentType
    level: Level
    image_url: str = ""
    audio_url: str = ""
    audio_ref: Optional[StorageRef] = None
    topic: Optional[str] = None
    audio_provider: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    is_custom = False


@dataclass
class CustomContent:
    """Материал, присланный админом (текст и, возможно, аудио)"""
    id: int
    slug: str
    title: str
    body: str
    questions: list[Question]
    status: ContentStatus
    content_type: ContentType
    level: Level
    audio_url: str = ""
    audio_ref: Optional[StorageRef] = None
    submitted_by: Optional[int] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    is_custom = True

    @property
    def image_url(self) -> str:
        return ""


# Поля, которые разрешено редактировать у материала
EDITABLE_FIELDS = ("title", "body", "image_url", "topic", "questions")


@dataclass
class Revision:
    """Запись об изменении поля материала"""
    id: int
    session_id: int
    field: str
    old_value: Optional[str]
    new_value: Optional[str]
    editor: str
    created_at: Optional[datetime] = None


@dataclass
class VoiceRotationState:
    """Указатель ротации голосов и кэш списка голосов"""
    voice_index: int = 0
    cached_voices: list[str] = field(default_factory=list)
    updated_at: Optional[datetime] = None
