"""
Клиенты для внешних API.

Содержит:
- claude.py: ClaudeClient для работы с Claude API
- tts.py: ElevenLabsClient и LahajatiClient для синтеза речи
"""

from .claude import ClaudeClient
from .tts import ElevenLabsClient, LahajatiClient

__all__ = [
    'ClaudeClient',
    'ElevenLabsClient',
    'LahajatiClient',
]
