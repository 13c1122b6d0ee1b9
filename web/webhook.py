"""
Вебхук Telegram: POST /webhooks/telegram

Тело запроса проверяется и превращается в aiogram Update,
дальше обработку ведёт диспетчер. Ответ всегда HTTP 200:
{"ok": true} или {"ok": false, "error": "..."}.
"""

import hmac
import json
import traceback

from aiogram.types import Update
from aiohttp import web
from pydantic import ValidationError as PydanticValidationError

from config import get_logger

logger = get_logger(__name__)

SECRET_HEADER = "X-Telegram-Bot-Api-Secret-Token"


def _reply(ok: bool, error: str = None) -> web.Response:
    payload = {"ok": True} if ok else {"ok": False, "error": error}
    return web.json_response(payload, status=200)


async def telegram_webhook(request: web.Request) -> web.Response:
    """Приём обновления от Telegram"""
    from .app import BOT_KEY, CTX_KEY, DP_KEY

    ctx = request.app[CTX_KEY]
    secret = ctx.settings.webhook_secret
    if secret and not hmac.compare_digest(request.headers.get(SECRET_HEADER, ""), secret):
        logger.warning("⚠️ Вебхук: неверный секрет")
        return _reply(False, "forbidden")

    try:
        data = await request.json()
    except (json.JSONDecodeError, UnicodeDecodeError) as e:
        logger.warning(f"⚠️ Вебхук: некорректный JSON: {e}")
        return _reply(False, "invalid json")

    bot = request.app[BOT_KEY]
    try:
        update = Update.model_validate(data, context={"bot": bot})
    except PydanticValidationError as e:
        logger.warning(f"⚠️ Вебхук: некорректное обновление: {e.error_count()} ошибок")
        return _reply(False, "invalid update")

    try:
        await request.app[DP_KEY].feed_update(bot, update)
    except Exception as e:
        logger.error(f"❌ Вебхук: ошибка обработки {update.update_id}: {e}\n{traceback.format_exc()}")
        return _reply(False, str(e) or type(e).__name__)

    return _reply(True)
