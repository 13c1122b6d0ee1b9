"""
Модуль конфигурации бота.

Содержит:
- settings.py: переменные окружения, константы контента, логирование
"""

from .settings import (
    # Окружение
    Settings,
    validate_env,

    # Логирование
    setup_logging,
    get_logger,

    # Пути
    BASE_DIR,
    LOCALES_DIR,
    DEFAULT_MEDIA_DIR,

    # Контент
    CONTENT_TYPES,
    CEFR_LEVELS,
    QUESTIONS_PER_CONTENT,
    OPTIONS_PER_QUESTION,
    ANSWER_LETTERS,
    GENERATION_TEMPERATURE,
    RETRY_TEMPERATURE,
    CHARS_PER_SECOND,

    # Лимиты Telegram
    MESSAGE_CHUNK_SIZE,
    CAPTION_LIMIT,
    POLL_QUESTION_LIMIT,
    POLL_OPTION_LIMIT,
    POLL_EXPLANATION_LIMIT,
    BROWSE_PAGE_SIZE,
    CUSTOM_MIN_CHARS,

    # TTS
    AUDIO_PROVIDERS,
    ELEVENLABS_MODEL,
    ELEVENLABS_VOICES,
    LAHAJATI_FALLBACK_VOICES,
)

__all__ = [
    'Settings',
    'validate_env',
    'setup_logging',
    'get_logger',
    'BASE_DIR',
    'LOCALES_DIR',
    'DEFAULT_MEDIA_DIR',
    'CONTENT_TYPES',
    'CEFR_LEVELS',
    'QUESTIONS_PER_CONTENT',
    'OPTIONS_PER_QUESTION',
    'ANSWER_LETTERS',
    'GENERATION_TEMPERATURE',
    'RETRY_TEMPERATURE',
    'CHARS_PER_SECOND',
    'MESSAGE_CHUNK_SIZE',
    'CAPTION_LIMIT',
    'POLL_QUESTION_LIMIT',
    'POLL_OPTION_LIMIT',
    'POLL_EXPLANATION_LIMIT',
    'BROWSE_PAGE_SIZE',
    'CUSTOM_MIN_CHARS',
    'AUDIO_PROVIDERS',
    'ELEVENLABS_MODEL',
    'ELEVENLABS_VOICES',
    'LAHAJATI_FALLBACK_VOICES',
]
