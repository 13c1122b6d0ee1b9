"""
Обработчики Telegram для админа.

Содержит:
- /start, /menu — меню создания материалов
- Кнопки подтверждения / отказа (approve_, reject_, custom_)
- Создание материала (create_<type>_<level>)
- Просмотр списков (browse_, view_, menu_)
- /edit — правка материала с записью ревизий
- /publish — повторная публикация подтверждённого материала
- Текст или аудио от админа — материал админа
"""

import traceback
from io import BytesIO

from aiogram import Router, F
from aiogram.filters import Command, CommandObject
from aiogram.types import Message, CallbackQuery

from config import get_logger, CUSTOM_MIN_CHARS
from core.context import AppContext
from core.errors import InvalidTransition, ValidationError
from core.types import EDITABLE_FIELDS, ContentStatus
from locales import t
from .callbacks import (
    AlreadyHandledCallback,
    ApproveCallback,
    BrowseCallback,
    CreateCallback,
    CustomDecisionCallback,
    MenuCallback,
    RejectCallback,
    ViewCallback,
)
from .keyboards import kb_browse_menu, kb_main_menu

logger = get_logger(__name__)

# Создаём роутер для админа
admin_router = Router(name="admin")

# Поля, которые можно менять командой /edit (questions меняются только из кода)
EDIT_COMMAND_FIELDS = tuple(f for f in EDITABLE_FIELDS if f != "questions")


def _chat_id(event) -> int:
    if isinstance(event, CallbackQuery):
        return event.message.chat.id if event.message else event.from_user.id
    return event.chat.id


async def _ensure_admin(event, ctx: AppContext) -> bool:
    """Проверка, что событие пришло из чата админа"""
    if ctx.delivery.is_admin(_chat_id(event)):
        return True
    if isinstance(event, CallbackQuery):
        await event.answer(t('toasts.not_admin'), show_alert=True)
    else:
        await event.answer(t('toasts.not_admin'))
    return False


# ==================== КОМАНДЫ ====================

@admin_router.message(Command("start", "menu"))
async def cmd_menu(message: Message, ctx: AppContext):
    """Команды /start и /menu — меню создания"""
    if not await _ensure_admin(message, ctx):
        return
    await message.answer(t('messages.menu'), reply_markup=kb_main_menu())


@admin_router.message(Command("edit"))
async def cmd_edit(message: Message, command: CommandObject, ctx: AppContext):
    """Команда /edit <slug> <поле> <значение>"""
    if not await _ensure_admin(message, ctx):
        return

    parts = (command.args or "").split(maxsplit=2)
    if len(parts) < 3 or parts[1] not in EDIT_COMMAND_FIELDS:
        await message.answer(t('messages.edit_usage'))
        return

    slug, field, value = parts
    editor = f"telegram:{message.from_user.id}" if message.from_user else "telegram"
    try:
        updated = await ctx.repo.update(slug, {field: value}, editor)
    except ValidationError as e:
        await message.answer(t('toasts.error', error=str(e)))
        return
    except Exception as e:
        logger.error(f"Ошибка в cmd_edit: {e}\n{traceback.format_exc()}")
        await message.answer(t('toasts.error', error=type(e).__name__))
        return

    if updated is None:
        await message.answer(t('toasts.not_found'))
        return
    await message.answer(t('messages.edit_done', slug=slug, field=field))


@admin_router.message(Command("publish"))
async def cmd_publish(message: Message, command: CommandObject, ctx: AppContext):
    """Команда /publish <slug> — повторная публикация подтверждённого материала"""
    if not await _ensure_admin(message, ctx):
        return

    slug = (command.args or "").strip()
    if not slug:
        await message.answer(t('messages.publish_usage'))
        return

    try:
        item = await ctx.repo.get_by_slug(slug) or await ctx.custom_repo.get_custom_by_slug(slug)
        if item is None:
            await message.answer(t('toasts.not_found'))
            return
        result = await ctx.delivery.publish_approved(item)
    except InvalidTransition as e:
        await message.answer(t('messages.publish_not_approved', status=t(f'statuses.{e.current}')))
        return
    except Exception as e:
        logger.error(f"Ошибка в cmd_publish: {e}\n{traceback.format_exc()}")
        await message.answer(t('toasts.error', error=type(e).__name__))
        return

    if result.status is ContentStatus.POSTED:
        await message.answer(t('messages.publish_done', slug=slug))


# ==================== СОГЛАСОВАНИЕ ====================

@admin_router.callback_query(ApproveCallback.filter())
async def on_approve(callback: CallbackQuery, callback_data: ApproveCallback, ctx: AppContext):
    """Кнопка «تأكيد»"""
    if not await _ensure_admin(callback, ctx):
        return
    try:
        await ctx.delivery.approve(callback, callback_data.content_id)
    except Exception as e:
        logger.error(f"Ошибка в on_approve: {e}\n{traceback.format_exc()}")
        await callback.answer(t('toasts.error', error=type(e).__name__), show_alert=True)


@admin_router.callback_query(RejectCallback.filter())
async def on_reject(callback: CallbackQuery, callback_data: RejectCallback, ctx: AppContext):
    """Кнопка «رفض»"""
    if not await _ensure_admin(callback, ctx):
        return
    try:
        await ctx.delivery.reject(callback, callback_data.content_id)
    except Exception as e:
        logger.error(f"Ошибка в on_reject: {e}\n{traceback.format_exc()}")
        await callback.answer(t('toasts.error', error=type(e).__name__), show_alert=True)


@admin_router.callback_query(CustomDecisionCallback.filter())
async def on_custom_decision(callback: CallbackQuery, callback_data: CustomDecisionCallback,
                             ctx: AppContext):
    """Кнопки под материалом админа"""
    if not await _ensure_admin(callback, ctx):
        return
    try:
        if callback_data.action == "approve":
            await ctx.delivery.approve(callback, callback_data.content_id, custom=True)
        elif callback_data.action == "reject":
            await ctx.delivery.reject(callback, callback_data.content_id, custom=True)
        else:
            await callback.answer()
    except Exception as e:
        logger.error(f"Ошибка в on_custom_decision: {e}\n{traceback.format_exc()}")
        await callback.answer(t('toasts.error', error=type(e).__name__), show_alert=True)


@admin_router.callback_query(AlreadyHandledCallback.filter())
async def on_already_handled(callback: CallbackQuery, callback_data: AlreadyHandledCallback):
    """Нажатие на кнопку уже обработанного материала"""
    await callback.answer(t('toasts.already_handled', status=t(f'statuses.{callback_data.status}')))


# ==================== СОЗДАНИЕ ====================

@admin_router.callback_query(CreateCallback.filter())
async def on_create(callback: CallbackQuery, callback_data: CreateCallback, ctx: AppContext):
    """Кнопка create_<type>_<level>: генерация в фоне"""
    if not await _ensure_admin(callback, ctx):
        return

    content_type, level = callback_data.content_type, callback_data.level
    type_label = t(f'content_types.{content_type.value}')
    await callback.answer(t('toasts.creating', type=type_label, level=level.value))

    ctx.spawn(ctx.workflow.run_safely(content_type, level))
    await callback.message.answer(t('messages.creating', type=type_label, level=level.value))


# ==================== ПРОСМОТР ====================

@admin_router.callback_query(MenuCallback.filter())
async def on_menu(callback: CallbackQuery, callback_data: MenuCallback, ctx: AppContext):
    """Навигация между меню"""
    if not await _ensure_admin(callback, ctx):
        return
    if callback_data.section == "browse":
        await callback.message.edit_text(t('messages.browse_menu'), reply_markup=kb_browse_menu())
    else:
        await callback.message.edit_text(t('messages.menu'), reply_markup=kb_main_menu())
    await callback.answer()


@admin_router.callback_query(BrowseCallback.filter())
async def on_browse(callback: CallbackQuery, callback_data: BrowseCallback, ctx: AppContext):
    """Страница списка материалов"""
    if not await _ensure_admin(callback, ctx):
        return
    try:
        text, keyboard = await ctx.delivery.browse_page(
            callback_data.content_type, callback_data.level, callback_data.page
        )
        await callback.message.edit_text(text, reply_markup=keyboard)
        await callback.answer()
    except Exception as e:
        logger.error(f"Ошибка в on_browse: {e}\n{traceback.format_exc()}")
        await callback.answer(t('toasts.error', error=type(e).__name__), show_alert=True)


@admin_router.callback_query(ViewCallback.filter())
async def on_view(callback: CallbackQuery, callback_data: ViewCallback, ctx: AppContext):
    """Повторно показать превью материала"""
    if not await _ensure_admin(callback, ctx):
        return
    item = await ctx.repo.get_by_id(callback_data.content_id)
    if item is None:
        await callback.answer(t('toasts.not_found'), show_alert=True)
        return
    await callback.answer()
    await ctx.delivery.send_preview(item)


# ==================== МАТЕРИАЛ АДМИНА ====================

@admin_router.message(F.audio | F.voice)
async def on_custom_audio(message: Message, ctx: AppContext):
    """Аудио с текстом в подписи — материал для аудирования"""
    if not await _ensure_admin(message, ctx):
        return

    text = (message.caption or "").strip()
    if len(text) < CUSTOM_MIN_CHARS:
        await message.answer(t('messages.custom_audio_needs_caption'))
        return

    file_id = message.audio.file_id if message.audio else message.voice.file_id
    buffer = BytesIO()
    try:
        await message.bot.download(file_id, destination=buffer)
    except Exception as e:
        logger.error(f"Не удалось скачать аудио админа: {e}")
        await message.answer(t('toasts.error', error=type(e).__name__))
        return

    await message.answer(t('messages.custom_received'))
    ctx.spawn(ctx.workflow.run_custom_safely(
        text, audio=buffer.getvalue(), submitted_by=message.from_user.id if message.from_user else None
    ))


@admin_router.message(F.text & ~F.text.startswith("/"))
async def on_custom_text(message: Message, ctx: AppContext):
    """Длинный текст от админа — материал для чтения"""
    if not ctx.delivery.is_admin(message.chat.id):
        return

    text = message.text.strip()
    if len(text) < CUSTOM_MIN_CHARS:
        await message.answer(t('messages.custom_too_short', min=CUSTOM_MIN_CHARS))
        return

    await message.answer(t('messages.custom_received'))
    ctx.spawn(ctx.workflow.run_custom_safely(
        text, submitted_by=message.from_user.id if message.from_user else None
    ))
