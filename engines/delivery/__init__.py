"""
Доставка материалов: превью для админа, согласование, публикация в канал.

Содержит:
- callbacks.py: варианты данных inline-кнопок
- keyboards.py: inline-клавиатуры
- formatting.py: тексты превью, поста и опросов
- controller.py: DeliveryController
- handlers.py: admin_router (обработчики команд и кнопок)
"""

from .controller import DeliveryController
from .callbacks import decode_callback

__all__ = [
    'DeliveryController',
    'decode_callback',
]
