"""
Движки бота.

Содержит:
- content/: генерация текста и вопросов (LLM)
- audio/: озвучка (TTS) и сохранение аудио
- delivery/: превью для админа, согласование, публикация в канал
- workflow.py: сценарий генерация → озвучка → сохранение → превью
- integration.py: подключение роутеров
"""

from .integration import setup_routers, get_commands_list
from .workflow import ContentWorkflow

__all__ = [
    'setup_routers',
    'get_commands_list',
    'ContentWorkflow',
]
