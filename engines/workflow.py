"""
Сценарий создания материала.

ContentWorkflow.run: генерация → озвучка → сохранение → превью админу.
ContentWorkflow.run_custom: текст админа → вопросы → (аудио) → сохранение → превью.

run_safely / run_custom_safely — для фоновых задач и планировщика:
ошибки логируются и отправляются админу, наружу не выходят.
"""

import traceback
from typing import Optional

from config import get_logger
from core.errors import BotError, ProviderError
from core.helpers import truncate
from core.types import ContentType, Level, NewContent, StorageKey
from locales import t

logger = get_logger(__name__)

CUSTOM_TITLE_LIMIT = 80


def custom_title(text: str) -> str:
    """Заголовок материала админа — первая непустая строка текста"""
    for line in (text or "").splitlines():
        if line.strip():
            return truncate(line.strip(), CUSTOM_TITLE_LIMIT)
    return truncate((text or "").strip(), CUSTOM_TITLE_LIMIT)


class ContentWorkflow:
    """Последовательность шагов создания материала"""

    def __init__(self, generator, synthesizer, repo, custom_repo, storage, delivery):
        self.generator = generator
        self.synthesizer = synthesizer
        self.repo = repo
        self.custom_repo = custom_repo
        self.storage = storage
        self.delivery = delivery

    async def run(self, content_type: ContentType, level: Level, topic: Optional[str] = None):
        """Создать материал и отправить превью

        Raises:
            GenerationError: LLM не справился
            ProviderError: не удалось озвучить материал с аудио
        """
        logger.info(f"🚀 Создание материала: {content_type.value} {level.value}")

        # Шаг 1: текст и вопросы
        content = await self.generator.generate(content_type, level, topic)

        # Шаг 2: озвучка (подкаст и аудирование)
        audio_url, audio_ref, audio_provider = "", None, None
        if content_type.has_audio:
            audio = await self.synthesizer.synthesize_with_fallback(content.body, content.title)
            if not audio.success:
                raise ProviderError(audio.provider or "tts", audio.message)
            audio_url = audio.audio_url
            audio_ref = StorageKey(audio.filename)
            audio_provider = audio.provider

        # Шаг 3: черновик в БД
        session = await self.repo.create(NewContent(
            title=content.title,
            body=content.body,
            questions=content.questions,
            content_type=content_type,
            level=level,
            image_url=content.image_url,
            audio_url=audio_url,
            audio_ref=audio_ref,
            topic=content.topic,
            audio_provider=audio_provider,
        ))

        # Шаг 4: превью админу
        await self.delivery.send_preview(session)
        logger.info(f"✅ Материал готов: {session.slug}")
        return session

    async def run_custom(self, text: str, level: Level = Level.B1,
                         audio: Optional[bytes] = None, submitted_by: int = None):
        """Материал из текста админа (аудио — по желанию)

        Raises:
            ValidationError: пустой текст
            GenerationError: вопросы не сгенерированы
            StorageError: не удалось сохранить аудио
        """
        title = custom_title(text)
        questions = await self.generator.generate_questions_from_text(text, level)

        audio_url, audio_ref = "", None
        if audio:
            stored = await self.storage.upload(audio, title)
            audio_url, audio_ref = stored.url, StorageKey(stored.key)

        item = await self.custom_repo.create_custom(
            title=title,
            body=text.strip(),
            questions=questions,
            level=level,
            audio_url=audio_url,
            audio_ref=audio_ref,
            submitted_by=submitted_by,
        )
        await self.delivery.send_preview(item)
        return item

    async def _report_failure(self, what: str, error: Exception) -> None:
        logger.error(f"❌ {what}: {error}\n{traceback.format_exc()}")
        message = str(error) if isinstance(error, BotError) else type(error).__name__
        await self.delivery.notify_admin(t('messages.generation_failed', error=truncate(message, 300)))

    async def run_safely(self, content_type: ContentType, level: Level, topic: Optional[str] = None):
        """run() без исключений (для планировщика и фоновых задач)"""
        try:
            return await self.run(content_type, level, topic)
        except Exception as e:
            await self._report_failure(f"Создание {content_type.value} {level.value} не удалось", e)
            return None

    async def run_custom_safely(self, text: str, level: Level = Level.B1,
                                audio: Optional[bytes] = None, submitted_by: int = None):
        """run_custom() без исключений"""
        try:
            return await self.run_custom(text, level, audio, submitted_by)
        except Exception as e:
            await self._report_failure("Материал админа не создан", e)
            return None
