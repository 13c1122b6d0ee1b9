"""
Настройки бота: токены, константы контента, логирование.

Все значения читаются из переменных окружения один раз — в Settings.from_env().
Константы (типы контента, уровни, лимиты Telegram) — на уровне модуля.
"""

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

# ============= ПУТИ =============

BASE_DIR = Path(__file__).resolve().parent.parent
LOCALES_DIR = BASE_DIR / "locales"
DEFAULT_MEDIA_DIR = BASE_DIR / "media"

# ============= ЛОГИРОВАНИЕ =============

LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'


def setup_logging(level: str = None) -> None:
    """Настройка логирования (вызывается один раз при старте)"""
    level = (level or os.getenv("LOG_LEVEL", "INFO")).upper()
    logging.basicConfig(level=getattr(logging, level, logging.INFO), format=LOG_FORMAT)


def get_logger(name: str) -> logging.Logger:
    """Получить логгер модуля"""
    return logging.getLogger(name)


# ============= КОНТЕНТ =============

CONTENT_TYPES = {
    "podcast": {"emoji": "🎙️", "name": "بُودْكَاسْت", "min_words": 80, "has_audio": True},
    "listening": {"emoji": "🎧", "name": "اِسْتِمَاع", "min_words": 50, "has_audio": True},
    "reading": {"emoji": "📖", "name": "قِرَاءَة", "min_words": 100, "has_audio": False},
}

CEFR_LEVELS = ["A1", "A2", "B1", "B2"]

# Количество вопросов в одном материале
QUESTIONS_PER_CONTENT = 5
OPTIONS_PER_QUESTION = 4
ANSWER_LETTERS = ["A", "B", "C", "D"]

# Температуры генерации: основная попытка и повтор
GENERATION_TEMPERATURE = 0.7
RETRY_TEMPERATURE = 0.8

# Грубая оценка длительности аудио: ~10 символов в секунду
CHARS_PER_SECOND = 10

# ============= ЛИМИТЫ TELEGRAM =============

MESSAGE_CHUNK_SIZE = 4000
CAPTION_LIMIT = 1024
POLL_QUESTION_LIMIT = 300
POLL_OPTION_LIMIT = 100
POLL_EXPLANATION_LIMIT = 200

# Пагинация списков в админ-меню
BROWSE_PAGE_SIZE = 10

# Минимальная длина текста, который админ присылает как свой материал
CUSTOM_MIN_CHARS = 80

# ============= TTS =============

AUDIO_PROVIDERS = ("elevenlabs", "lahajati")

ELEVENLABS_MODEL = "eleven_multilingual_v2"

# Подобранные голоса с поддержкой арабского
ELEVENLABS_VOICES = [
    "pNInz6obpgDQGcFmaJgB",  # Adam
    "21m00Tcm4TlvDq8ikWAM",  # Rachel
    "EXAVITQu4vr4xnSDxMaL",  # Bella
    "ErXwobaYiN019PkySvjV",  # Antoni
]

LAHAJATI_FALLBACK_VOICES = [
    "jUF5KnZcKN9kJxvxtRJCzTlj",  # أميمة
    "OZuzezjpgHq0hkOVaqrnde3v",  # رزاق
    "xKcZnBxPAaPGv5lHHVErx1xT",  # نرمين
    "nDM7BdvJn4eYlchiz4EgPyZi",  # عصوم
]


# ============= ПЕРЕМЕННЫЕ ОКРУЖЕНИЯ =============

def _int_or_none(value: Optional[str]) -> Optional[int]:
    if value is None or value.strip() == "":
        return None
    try:
        return int(value)
    except ValueError:
        return None


@dataclass
class Settings:
    """Конфигурация процесса (собирается один раз при старте)"""

    bot_token: Optional[str] = None
    admin_chat_id: Optional[int] = None
    channel_id: Optional[str] = None
    webhook_secret: Optional[str] = None

    anthropic_api_key: Optional[str] = None
    llm_base_url: str = "https://api.anthropic.com/v1/messages"
    llm_model: str = "claude-sonnet-4-20250514"

    elevenlabs_api_key: Optional[str] = None
    lahajati_api_key: Optional[str] = None
    audio_provider: str = "lahajati"

    database_url: Optional[str] = None

    storage_backend: str = "local"
    audio_bucket: Optional[str] = None
    aws_region: str = "us-east-1"
    deployment_env: Optional[str] = None
    media_dir: Path = field(default_factory=lambda: DEFAULT_MEDIA_DIR)

    public_base_url: str = "http://localhost:8080"
    default_image_url: str = ""

    schedule_time: str = "09:00"
    schedule_content_type: str = "podcast"
    schedule_level: str = "B1"

    web_host: str = "0.0.0.0"
    web_port: int = 8080

    @classmethod
    def from_env(cls) -> "Settings":
        """Собрать настройки из переменных окружения"""
        bucket = os.getenv("AUDIO_BUCKET") or None
        deployment_env = os.getenv("DEPLOYMENT_ENV") or None

        # S3, если задано явно или есть бакет в облачном окружении
        backend = os.getenv("STORAGE_BACKEND")
        if not backend:
            backend = "s3" if bucket and deployment_env else "local"

        return cls(
            bot_token=os.getenv("TELEGRAM_BOT_TOKEN") or None,
            admin_chat_id=_int_or_none(os.getenv("TELEGRAM_ADMIN_CHAT_ID")),
            channel_id=os.getenv("TELEGRAM_CHANNEL_ID") or None,
            webhook_secret=os.getenv("TELEGRAM_WEBHOOK_SECRET") or None,
            anthropic_api_key=os.getenv("ANTHROPIC_API_KEY") or None,
            llm_base_url=os.getenv("LLM_BASE_URL", "https://api.anthropic.com/v1/messages"),
            llm_model=os.getenv("LLM_MODEL", "claude-sonnet-4-20250514"),
            elevenlabs_api_key=os.getenv("ELEVENLABS_API_KEY") or None,
            lahajati_api_key=os.getenv("LAHAJATI_API_KEY") or None,
            audio_provider=os.getenv("AUDIO_PROVIDER", "lahajati").lower(),
            database_url=os.getenv("DATABASE_URL") or None,
            storage_backend=backend.lower(),
            audio_bucket=bucket,
            aws_region=os.getenv("AWS_REGION", "us-east-1"),
            deployment_env=deployment_env,
            media_dir=Path(os.getenv("MEDIA_DIR", str(DEFAULT_MEDIA_DIR))),
            public_base_url=os.getenv("PUBLIC_BASE_URL", "http://localhost:8080").rstrip("/"),
            default_image_url=os.getenv("DEFAULT_IMAGE_URL", ""),
            schedule_time=os.getenv("SCHEDULE_TIME", "09:00"),
            schedule_content_type=os.getenv("SCHEDULE_CONTENT_TYPE", "podcast"),
            schedule_level=os.getenv("SCHEDULE_LEVEL", "B1"),
            web_host=os.getenv("WEB_HOST", "0.0.0.0"),
            web_port=_int_or_none(os.getenv("PORT")) or 8080,
        )

    @property
    def telegram_configured(self) -> bool:
        """Есть всё, чтобы слать превью админу и публиковать в канал"""
        return bool(self.bot_token and self.admin_chat_id and self.channel_id)

    @property
    def secondary_audio_provider(self) -> Optional[str]:
        """Запасной TTS-провайдер (если для него есть ключ)"""
        for provider in AUDIO_PROVIDERS:
            if provider == self.audio_provider:
                continue
            if provider == "elevenlabs" and self.elevenlabs_api_key:
                return provider
            if provider == "lahajati" and self.lahajati_api_key:
                return provider
        return None


REQUIRED_ENV = {
    "TELEGRAM_BOT_TOKEN": "bot_token",
    "DATABASE_URL": "database_url",
}

RECOMMENDED_ENV = {
    "TELEGRAM_ADMIN_CHAT_ID": "admin_chat_id",
    "TELEGRAM_CHANNEL_ID": "channel_id",
    "ANTHROPIC_API_KEY": "anthropic_api_key",
}


def validate_env(settings: Settings) -> tuple[list[str], list[str]]:
    """Проверка переменных окружения

    Returns:
        (missing_required, missing_recommended)
    """
    missing_required = [name for name, attr in REQUIRED_ENV.items() if not getattr(settings, attr)]
    missing_recommended = [name for name, attr in RECOMMENDED_ENV.items() if not getattr(settings, attr)]
    return missing_required, missing_recommended
