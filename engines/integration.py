"""
Интеграция движков в основной бот.

Этот файл содержит функцию для подключения всех роутеров.
Вызывается в bot.py после создания диспетчера:

    from engines.integration import setup_routers
    setup_routers(dp)
"""

from aiogram import Dispatcher

from config import get_logger

logger = get_logger(__name__)


def setup_routers(dp: Dispatcher):
    """Подключает все роутеры движков к диспетчеру

    Args:
        dp: Dispatcher aiogram
    """
    # Роутер админа (меню, согласование, материалы админа)
    from .delivery.handlers import admin_router
    dp.include_router(admin_router)
    logger.info("✓ Подключен admin_router (/menu, /edit, /publish)")

    logger.info("✅ Все роутеры движков подключены")


def get_commands_list() -> list:
    """Возвращает список команд для регистрации в боте"""
    return [
        ("menu", "قَائِمَةُ إِنْشَاءِ المُحْتَوَى"),
        ("edit", "تَعْدِيلُ مُحْتَوًى: /edit slug field value"),
        ("publish", "إِعَادَةُ نَشْرِ مُحْتَوًى مُؤَكَّدٍ: /publish slug"),
    ]
