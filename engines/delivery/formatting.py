"""
Форматирование сообщений: превью для админа, пост в канал, опросы-викторины.

Разметка — HTML, пользовательский текст экранируется.
"""

from dataclasses import dataclass
from html import escape

from config import (
    POLL_EXPLANATION_LIMIT,
    POLL_OPTION_LIMIT,
    POLL_QUESTION_LIMIT,
)
from core.helpers import truncate
from locales import t

OPTION_LETTERS = "abcd"


def format_questions(questions, mark_correct: bool = True) -> str:
    """Вопросы с вариантами a)..d), ✅ у правильного и пояснением"""
    blocks = []
    for i, q in enumerate(questions, start=1):
        lines = [t('preview.question', n=i, text=escape(q.text))]
        for idx, option in enumerate(q.options):
            mark = " ✅" if mark_correct and idx == q.correct_answer else ""
            lines.append(f"   {OPTION_LETTERS[idx]}) {escape(option)}{mark}")
        if q.explanation:
            lines.append(t('preview.explanation', text=escape(q.explanation)))
        blocks.append("\n".join(lines))
    return "\n\n".join(blocks)


def format_preview(item, demo_url: str = None) -> str:
    """Текст превью материала для админа"""
    header = t('preview.custom_header') if item.is_custom else t('preview.header')
    meta = t(
        'preview.meta',
        type=t(f'content_types.{item.content_type.value}'),
        level=item.level.value,
        status=t(f'statuses.{item.status.value}'),
    )

    parts = [
        header,
        meta,
        t('preview.title', title=escape(item.title)),
        f"{t('preview.body')}\n{escape(item.body)}",
    ]
    if item.questions:
        parts.append(format_questions(item.questions))
    if demo_url:
        parts.append(t('preview.demo_link', url=escape(demo_url)))
    return "\n\n".join(parts)


def format_channel_text(item) -> str:
    """Текст поста в канал (заголовок и текст)"""
    return f"{t('channel.title', title=escape(item.title))}\n\n{escape(item.body)}"


def format_caption_title(item, limit: int = 200) -> str:
    """Заголовок для подписи к аудио или фото (обрезан, затем экранирован)"""
    return escape(truncate(item.title, limit))


@dataclass
class QuizPoll:
    """Параметры опроса-викторины (уже обрезаны под лимиты Telegram)

    Текст опроса отправляется без разметки (parse_mode=None), поэтому не экранируется.
    """
    question: str
    options: list[str]
    correct_option_id: int
    explanation: str


def build_quiz_polls(questions) -> list[QuizPoll]:
    """Опросы по вопросам материала"""
    return [
        QuizPoll(
            question=truncate(q.text, POLL_QUESTION_LIMIT),
            options=[truncate(option, POLL_OPTION_LIMIT) for option in q.options],
            correct_option_id=q.correct_answer,
            explanation=truncate(q.explanation, POLL_EXPLANATION_LIMIT),
        )
        for q in questions
    ]
