"""
Ядро бота: общие компоненты.

Содержит:
- errors.py: исключения
- types.py: материалы, вопросы, статусы, ссылки на аудио
- helpers.py: слаги, оценка длительности, разбивка текста
- storage.py: StorageGateway — хранилище аудио (S3 / локальная папка)
- context.py: AppContext — зависимости процесса
"""

from .errors import (
    BotError,
    ConfigurationError,
    ProviderError,
    ValidationError,
    GenerationError,
    StorageError,
    InvalidTransition,
)

from .types import (
    ContentType,
    Level,
    ContentStatus,
    Question,
    GeneratedContent,
    NewContent,
    ContentSession,
    CustomContent,
    Revision,
    VoiceRotationState,
    StorageKey,
    LegacyUrl,
    StorageRef,
    classify_storage_ref,
    check_transition,
)

from .helpers import (
    slugify_title,
    generate_slug,
    estimate_duration,
    split_message,
)

from .storage import StorageGateway, StoredAudio, create_storage
from .context import AppContext

__all__ = [
    # errors
    'BotError',
    'ConfigurationError',
    'ProviderError',
    'ValidationError',
    'GenerationError',
    'StorageError',
    'InvalidTransition',
    # types
    'ContentType',
    'Level',
    'ContentStatus',
    'Question',
    'GeneratedContent',
    'NewContent',
    'ContentSession',
    'CustomContent',
    'Revision',
    'VoiceRotationState',
    'StorageKey',
    'LegacyUrl',
    'StorageRef',
    'classify_storage_ref',
    'check_transition',
    # helpers
    'slugify_title',
    'generate_slug',
    'estimate_duration',
    'split_message',
    # storage
    'StorageGateway',
    'StoredAudio',
    'create_storage',
    # context
    'AppContext',
]
