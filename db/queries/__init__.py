"""
Репозитории для работы с базой данных.

Модули:
- sessions.py: таблицы content_sessions, content_revisions
- custom.py: таблица custom_contents
- voices.py: таблица voice_rotation_state
"""

from .sessions import ContentRepository, transition_status
from .custom import CustomContentRepository
from .voices import VoiceRotationRepository

__all__ = [
    'ContentRepository',
    'transition_status',
    'CustomContentRepository',
    'VoiceRotationRepository',
]
