"""
Arabic Content Bot — Telegram-бот арабских учебных материалов

Генерирует подкасты, аудирование и тексты для чтения (уровни A1–B2),
озвучивает их, показывает превью админу и после одобрения публикует в канал.
"""

import asyncio
import sys

from aiogram import Bot, Dispatcher
from aiogram.client.default import DefaultBotProperties
from aiogram.enums import ParseMode
from aiogram.types import BotCommand
from aiohttp import web
from apscheduler.schedulers.asyncio import AsyncIOScheduler

from config import (
    Settings,
    setup_logging,
    get_logger,
    validate_env,
    ELEVENLABS_VOICES,
    LAHAJATI_FALLBACK_VOICES,
)
from core import AppContext, ContentType, Level, ValidationError, create_storage
from core.types import parse_enum
from clients import ClaudeClient, ElevenLabsClient, LahajatiClient
from db import init_db, close_pool
from db.queries import ContentRepository, CustomContentRepository, VoiceRotationRepository
from engines import setup_routers, get_commands_list, ContentWorkflow
from engines.audio import AudioSynthesizer
from engines.content import ContentGenerator
from engines.delivery import DeliveryController
from web import create_web_app, WEBHOOK_PATH

setup_logging()
logger = get_logger(__name__)


# ==================== СБОРКА ЗАВИСИМОСТЕЙ ====================

def build_tts_providers(settings: Settings) -> dict:
    """TTS-клиенты, для которых есть ключи"""
    providers = {}
    if settings.elevenlabs_api_key:
        providers["elevenlabs"] = ElevenLabsClient(settings.elevenlabs_api_key)
    if settings.lahajati_api_key:
        providers["lahajati"] = LahajatiClient(settings.lahajati_api_key)
    if not providers:
        logger.warning("⚠️ Нет ключей TTS: аудио не будет создаваться")
    return providers


def build_context(settings: Settings, pool, bot: Bot) -> AppContext:
    """Собрать все компоненты бота"""
    storage = create_storage(settings)
    repo = ContentRepository(pool)
    custom_repo = CustomContentRepository(pool)
    voice_repo = VoiceRotationRepository(pool)

    llm = ClaudeClient(
        api_key=settings.anthropic_api_key,
        base_url=settings.llm_base_url,
        model=settings.llm_model,
    )
    generator = ContentGenerator(llm, default_image_url=settings.default_image_url)
    synthesizer = AudioSynthesizer(
        storage=storage,
        voice_repo=voice_repo,
        providers=build_tts_providers(settings),
        default_provider=settings.audio_provider,
        secondary_provider=settings.secondary_audio_provider,
        elevenlabs_voices=ELEVENLABS_VOICES,
        lahajati_fallback_voices=LAHAJATI_FALLBACK_VOICES,
    )
    delivery = DeliveryController(bot, settings, repo, custom_repo, storage)
    workflow = ContentWorkflow(generator, synthesizer, repo, custom_repo, storage, delivery)

    return AppContext(
        settings=settings,
        repo=repo,
        custom_repo=custom_repo,
        voice_repo=voice_repo,
        storage=storage,
        generator=generator,
        synthesizer=synthesizer,
        delivery=delivery,
        workflow=workflow,
        bot=bot,
        pool=pool,
    )


# ==================== ПЛАНИРОВЩИК ====================

async def scheduled_generation(ctx: AppContext):
    """Ежедневная генерация материала по расписанию"""
    settings = ctx.settings
    try:
        content_type = parse_enum(ContentType, settings.schedule_content_type, "SCHEDULE_CONTENT_TYPE")
        level = parse_enum(Level, settings.schedule_level.upper(), "SCHEDULE_LEVEL")
    except ValidationError as e:
        logger.error(f"❌ Неверные настройки расписания: {e}")
        return
    logger.info(f"⏰ Плановая генерация: {content_type.value} {level.value}")
    await ctx.workflow.run_safely(content_type, level)


def parse_schedule_time(value: str) -> tuple[int, int]:
    """'HH:MM' -> (hour, minute), при ошибке 09:00"""
    try:
        hour, minute = (int(part) for part in value.split(":", 1))
        if 0 <= hour < 24 and 0 <= minute < 60:
            return hour, minute
    except ValueError:
        pass
    logger.warning(f"⚠️ Неверный SCHEDULE_TIME '{value}', используем 09:00")
    return 9, 0


# ==================== ЗАПУСК ====================

async def main():
    settings = Settings.from_env()

    missing_required, missing_recommended = validate_env(settings)
    if missing_required:
        logger.error(f"❌ Не заданы обязательные переменные: {', '.join(missing_required)}")
        sys.exit(1)
    if missing_recommended:
        logger.warning(f"⚠️ Не заданы переменные: {', '.join(missing_recommended)}")

    pool = await init_db(settings.database_url)

    bot = Bot(token=settings.bot_token, default=DefaultBotProperties(parse_mode=ParseMode.HTML))
    ctx = build_context(settings, pool, bot)

    dp = Dispatcher(ctx=ctx)
    setup_routers(dp)

    await bot.set_my_commands([
        BotCommand(command=command, description=description)
        for command, description in get_commands_list()
    ])

    scheduler = AsyncIOScheduler()
    hour, minute = parse_schedule_time(settings.schedule_time)
    scheduler.add_job(scheduled_generation, 'cron', hour=hour, minute=minute, args=[ctx])
    scheduler.start()
    logger.info(f"⏰ Расписание: {hour:02d}:{minute:02d}")

    app = create_web_app(ctx, dp, bot)
    runner = web.AppRunner(app)
    await runner.setup()
    site = web.TCPSite(runner, settings.web_host, settings.web_port)
    await site.start()
    logger.info(f"🌐 Веб-сервер: {settings.web_host}:{settings.web_port}")

    use_webhook = settings.public_base_url.startswith("https://")
    try:
        if use_webhook:
            webhook_url = f"{settings.public_base_url}{WEBHOOK_PATH}"
            await bot.set_webhook(
                webhook_url,
                secret_token=settings.webhook_secret,
                drop_pending_updates=False,
            )
            logger.info(f"🚀 Бот запущен (webhook: {webhook_url})")
            await asyncio.Event().wait()
        else:
            await bot.delete_webhook(drop_pending_updates=False)
            logger.info("🚀 Бот запущен (polling)")
            await dp.start_polling(bot)
    finally:
        scheduler.shutdown(wait=False)
        await ctx.drain()
        await runner.cleanup()
        await bot.session.close()
        await close_pool(pool)
        logger.info("👋 Бот остановлен")


if __name__ == "__main__":
    try:
        asyncio.run(main())
    except KeyboardInterrupt:
        pass
