"""
Модуль работы с базой данных.

Содержит:
- connection.py: пул соединений PostgreSQL
- models.py: описание таблиц (SQL schemas)
- queries/: репозитории
    - sessions.py: ContentRepository (материалы и ревизии)
    - custom.py: CustomContentRepository (материалы админа)
    - voices.py: VoiceRotationRepository (ротация голосов)
"""

from .connection import (
    create_pool,
    close_pool,
    init_db,
)

from .models import create_tables

__all__ = [
    'create_pool',
    'close_pool',
    'init_db',
    'create_tables',
]
