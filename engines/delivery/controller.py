"""
Доставка и согласование материалов.

DeliveryController:
- send_preview: превью админу (аудио, текст, вопросы, кнопки)
- approve / reject: смена статуса по нажатию кнопки админом
- publish: публикация в канал (фото/текст, аудио, опросы-викторины)

Без токена бота, чата админа или канала все операции — no-op.
"""

import traceback
from math import ceil
from typing import Optional

from aiogram.types import BufferedInputFile, CallbackQuery

from config import get_logger, CAPTION_LIMIT, BROWSE_PAGE_SIZE
from core.errors import InvalidTransition, StorageError
from core.helpers import split_message
from core.types import ContentStatus, ContentType, Level
from locales import t
from .formatting import build_quiz_polls, format_caption_title, format_channel_text, format_preview
from .keyboards import kb_approval, kb_browse_page, kb_handled

logger = get_logger(__name__)


class DeliveryController:
    """Превью для админа и публикация в канал"""

    def __init__(self, bot, settings, repo, custom_repo, storage):
        self.bot = bot
        self.settings = settings
        self.repo = repo
        self.custom_repo = custom_repo
        self.storage = storage

    # ==================== ОБЩЕЕ ====================

    @property
    def configured(self) -> bool:
        return bool(self.bot and self.settings.admin_chat_id and self.settings.channel_id)

    def is_admin(self, chat_id: Optional[int]) -> bool:
        return chat_id is not None and chat_id == self.settings.admin_chat_id

    def demo_url(self, item) -> Optional[str]:
        if item.is_custom:
            return None
        return f"{self.settings.public_base_url}/demo/{item.slug}"

    async def notify_admin(self, text: str) -> None:
        """Служебное сообщение админу"""
        if not self.configured:
            logger.warning(f"⚠️ Telegram не настроен, сообщение админу пропущено: {text[:100]}")
            return
        try:
            await self.bot.send_message(self.settings.admin_chat_id, text)
        except Exception as e:
            logger.error(f"Failed to notify admin: {e}")

    async def _load_audio(self, item, filename: str):
        """Аудио материала для отправки (файл из хранилища или URL)"""
        if item.audio_ref is not None:
            data = await self.storage.download(item.audio_ref)
            return BufferedInputFile(data, filename=filename)
        return item.audio_url or None

    async def _send_chunks(self, chat_id, text: str, reply_markup=None) -> None:
        """Длинный текст частями, клавиатура — на последней части"""
        chunks = split_message(text)
        for i, chunk in enumerate(chunks):
            is_last = i == len(chunks) - 1
            await self.bot.send_message(chat_id, chunk, reply_markup=reply_markup if is_last else None)

    # ==================== ПРЕВЬЮ ====================

    async def send_preview(self, item) -> bool:
        """Отправить превью материала админу

        Returns:
            True если превью отправлено
        """
        if not self.configured:
            logger.warning(f"⚠️ Telegram не настроен, превью {item.slug} не отправлено")
            return False

        chat_id = self.settings.admin_chat_id
        text = format_preview(item, self.demo_url(item))
        keyboard = kb_approval(item)

        try:
            if item.content_type.has_audio and (item.audio_ref or item.audio_url):
                try:
                    audio = await self._load_audio(item, "preview.mp3")
                    if len(text) <= CAPTION_LIMIT:
                        await self.bot.send_audio(chat_id, audio, caption=text,
                                                  title=item.title, reply_markup=keyboard)
                        logger.info(f"✅ Превью с аудио отправлено: {item.slug}")
                        return True
                    await self.bot.send_audio(chat_id, audio, title=item.title,
                                              caption=t('channel.audio_caption', title=format_caption_title(item)))
                except Exception as e:
                    logger.error(f"❌ Не удалось отправить аудио {item.slug}, отправляем текст: {e}")

            await self._send_chunks(chat_id, text, keyboard)
            logger.info(f"✅ Превью отправлено: {item.slug}")
            return True
        except Exception as e:
            logger.error(f"❌ Ошибка отправки превью {item.slug}: {e}\n{traceback.format_exc()}")
            return False

    # ==================== СОГЛАСОВАНИЕ ====================

    async def _update_status(self, item_or_id, custom: bool, status: ContentStatus):
        if custom:
            return await self.custom_repo.update_custom_status(item_or_id, status)
        return await self.repo.update_status(item_or_id, status)

    async def _replace_keyboard(self, query: CallbackQuery, status: ContentStatus) -> None:
        if query.message is None:
            return
        try:
            await query.message.edit_reply_markup(reply_markup=kb_handled(status))
        except Exception as e:
            logger.warning(f"Не удалось обновить кнопки: {e}")

    async def _decide(self, query: CallbackQuery, content_id: int, custom: bool,
                      status: ContentStatus):
        """Общая часть approve / reject: смена статуса, тост, замена кнопок"""
        if not self.configured:
            await query.answer(t('toasts.config_missing'), show_alert=True)
            return None

        try:
            item = await self._update_status(content_id, custom, status)
        except InvalidTransition as e:
            logger.info(f"ℹ️ Повторное нажатие: материал {content_id} уже {e.current}")
            await query.answer(t('toasts.already_handled', status=t(f'statuses.{e.current}')))
            return None

        if item is None:
            await query.answer(t('toasts.not_found'), show_alert=True)
            return None

        await query.answer(t(f'toasts.{status.value}'))
        await self._replace_keyboard(query, status)
        return item

    async def approve(self, query: CallbackQuery, content_id: int, custom: bool = False):
        """Админ подтвердил: approved → публикация → posted

        Returns:
            Материал после публикации или None (не найден / уже обработан)
        """
        item = await self._decide(query, content_id, custom, ContentStatus.APPROVED)
        if item is None:
            return None

        logger.info(f"✅ Материал {item.slug} подтверждён, публикуем")
        return await self.publish_approved(item)

    async def publish_approved(self, item):
        """Публикация подтверждённого материала и перевод в posted

        Используется после approve и командой /publish для повторной попытки,
        если прошлая публикация не удалась (материал остался в approved).

        Returns:
            Материал (posted при успехе, approved при ошибке публикации)

        Raises:
            InvalidTransition: материал не в статусе approved
        """
        if item.status is not ContentStatus.APPROVED:
            raise InvalidTransition(item.status.value, ContentStatus.POSTED.value)

        if not await self.publish(item):
            await self.notify_admin(t('messages.publish_failed', error=item.slug))
            return item

        try:
            posted = await self._update_status(item.id, item.is_custom, ContentStatus.POSTED)
        except InvalidTransition as e:
            logger.warning(f"⚠️ Не удалось отметить {item.slug} опубликованным: {e}")
            return item
        return posted or item

    async def reject(self, query: CallbackQuery, content_id: int, custom: bool = False):
        """Админ отклонил: draft → rejected"""
        item = await self._decide(query, content_id, custom, ContentStatus.REJECTED)
        if item is not None:
            logger.info(f"❌ Материал {item.slug} отклонён")
        return item

    # ==================== ПУБЛИКАЦИЯ ====================

    async def _send_text(self, chat_id, item) -> None:
        await self._send_chunks(chat_id, format_channel_text(item))

    async def _send_photo_post(self, chat_id, item) -> None:
        text = format_channel_text(item)
        if len(text) <= CAPTION_LIMIT:
            await self.bot.send_photo(chat_id, item.image_url, caption=text)
            return
        await self.bot.send_photo(chat_id, item.image_url,
                                  caption=t('channel.title', title=format_caption_title(item)))
        await self._send_chunks(chat_id, text)

    async def _send_audio(self, chat_id, item) -> None:
        audio = await self._load_audio(item, "content.mp3")
        if audio is None:
            raise StorageError(f"У материала {item.slug} нет аудио")
        await self.bot.send_audio(chat_id, audio, title=item.title,
                                  caption=t('channel.audio_caption', title=format_caption_title(item)))

    async def publish(self, item) -> bool:
        """Опубликовать материал в канал

        podcast — фото с подписью (или текст без картинки), аудио, опросы
        listening — аудио и опросы
        reading — текст и опросы

        Returns:
            True если основная часть поста отправлена (ошибки опросов не учитываются)
        """
        if not self.configured:
            logger.warning(f"⚠️ Telegram не настроен, публикация {item.slug} пропущена")
            return False

        chat_id = self.settings.channel_id
        primary_ok = True

        if item.content_type is ContentType.PODCAST:
            steps = [self._send_photo_post if item.image_url else self._send_text, self._send_audio]
        elif item.content_type is ContentType.LISTENING:
            steps = [self._send_audio]
        else:
            steps = [self._send_text]

        for step in steps:
            try:
                await step(chat_id, item)
            except Exception as e:
                primary_ok = False
                logger.error(f"❌ Ошибка публикации {item.slug} ({step.__name__}): {e}")

        for i, poll in enumerate(build_quiz_polls(item.questions), start=1):
            try:
                await self.bot.send_poll(
                    chat_id,
                    question=poll.question,
                    options=poll.options,
                    type="quiz",
                    correct_option_id=poll.correct_option_id,
                    explanation=poll.explanation or None,
                    is_anonymous=True,
                    question_parse_mode=None,
                    explanation_parse_mode=None,
                )
            except Exception as e:
                logger.error(f"❌ Не удалось отправить опрос {i} для {item.slug}: {e}")

        if primary_ok:
            logger.info(f"📢 Опубликовано в канал: {item.slug}")
        return primary_ok

    # ==================== ПРОСМОТР ====================

    async def browse_page(self, content_type: ContentType, level: Level, page: int = 0):
        """Текст и клавиатура страницы списка материалов"""
        total = await self.repo.count_by_type_and_level(content_type, level)
        type_label = t(f'content_types.{content_type.value}')
        if not total:
            return t('messages.browse_empty', type=type_label, level=level.value), \
                kb_browse_page([], content_type, level, 0, 1)

        pages = ceil(total / BROWSE_PAGE_SIZE)
        page = max(0, min(page, pages - 1))
        items = await self.repo.list_by_type_and_level(
            content_type, level, limit=BROWSE_PAGE_SIZE, offset=page * BROWSE_PAGE_SIZE
        )
        text = t('messages.browse_list', type=type_label, level=level.value,
                 page=page + 1, pages=pages, total=total)
        return text, kb_browse_page(items, content_type, level, page, pages)
