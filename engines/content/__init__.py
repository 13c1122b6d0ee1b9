"""
Генерация материалов через LLM.

Содержит:
- prompts.py: арабские промпты (материал, вопросы по тексту)
- generator.py: ContentGenerator, разбор и проверка ответа
"""

from .generator import ContentGenerator, parse_content_response, parse_questions

__all__ = [
    'ContentGenerator',
    'parse_content_response',
    'parse_questions',
]
