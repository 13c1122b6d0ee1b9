"""
Веб-часть бота.

Содержит:
- app.py: create_web_app, ключи приложения
- webhook.py: POST /webhooks/telegram
- demo.py: GET /demo/{slug} (страница материала)
"""

from .app import create_web_app, WEBHOOK_PATH

__all__ = [
    'create_web_app',
    'WEBHOOK_PATH',
]
