"""
Веб-приложение (aiohttp).

Маршруты:
- POST /webhooks/telegram — обновления Telegram
- GET  /demo/{slug}       — публичная страница материала
- GET  /media/...         — аудио локального хранилища
- GET  /health            — проверка живости
"""

from aiohttp import web

from config import get_logger
from .demo import demo_page
from .webhook import telegram_webhook

logger = get_logger(__name__)

CTX_KEY = web.AppKey("ctx", object)
DP_KEY = web.AppKey("dp", object)
BOT_KEY = web.AppKey("bot", object)

WEBHOOK_PATH = "/webhooks/telegram"


async def health(request: web.Request) -> web.Response:
    return web.json_response({"ok": True})


def create_web_app(ctx, dp=None, bot=None) -> web.Application:
    """Собрать aiohttp-приложение"""
    app = web.Application()
    app[CTX_KEY] = ctx
    app[DP_KEY] = dp
    app[BOT_KEY] = bot

    app.router.add_post(WEBHOOK_PATH, telegram_webhook)
    app.router.add_get("/demo/{slug}", demo_page)
    app.router.add_get("/health", health)

    if ctx.settings.storage_backend != "s3":
        media_dir = ctx.settings.media_dir
        media_dir.mkdir(parents=True, exist_ok=True)
        app.router.add_static("/media/", media_dir)
        logger.info(f"📁 /media/ → {media_dir}")

    return app
