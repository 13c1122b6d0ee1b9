"""
Тест обработчиков админа (сообщения и контекст подменены).
"""

from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock

from aiogram.types import CallbackQuery

from core.errors import InvalidTransition, ValidationError
from engines.delivery.handlers import (
    EDIT_COMMAND_FIELDS, cmd_edit, cmd_menu, cmd_publish, on_create, on_custom_text,
)
from engines.delivery.callbacks import CreateCallback
from core.types import ContentStatus, ContentType, Level
from locales import t
from tests.conftest import make_session


def _ctx(admin_chat_id: int = 42):
    delivery = MagicMock()
    delivery.is_admin.side_effect = lambda chat_id: chat_id == admin_chat_id
    return SimpleNamespace(delivery=delivery, repo=AsyncMock(), custom_repo=AsyncMock(),
                           workflow=MagicMock(), spawn=MagicMock())


def _message(text: str = "", chat_id: int = 42):
    message = MagicMock()
    message.text = text
    message.chat.id = chat_id
    message.from_user.id = 1001
    message.answer = AsyncMock()
    return message


def test_edit_fields_exclude_questions():
    assert "questions" not in EDIT_COMMAND_FIELDS
    assert set(EDIT_COMMAND_FIELDS) == {"title", "body", "image_url", "topic"}


async def test_menu_for_admin_only():
    ctx = _ctx()
    stranger = _message(chat_id=7)
    await cmd_menu(stranger, ctx)
    stranger.answer.assert_awaited_once_with(t('toasts.not_admin'))

    admin = _message()
    await cmd_menu(admin, ctx)
    assert admin.answer.await_args.args[0] == t('messages.menu')


async def test_edit_usage_on_bad_args():
    ctx = _ctx()
    message = _message("/edit slug")
    await cmd_edit(message, SimpleNamespace(args="slug"), ctx)
    message.answer.assert_awaited_once_with(t('messages.edit_usage'))
    ctx.repo.update.assert_not_awaited()


async def test_edit_updates_with_editor():
    ctx = _ctx()
    message = _message()
    await cmd_edit(message, SimpleNamespace(args="podcast-1-ab title عُنْوَانٌ جَدِيدٌ"), ctx)

    ctx.repo.update.assert_awaited_once_with("podcast-1-ab", {"title": "عُنْوَانٌ جَدِيدٌ"}, "telegram:1001")
    message.answer.assert_awaited_once_with(t('messages.edit_done', slug="podcast-1-ab", field="title"))


async def test_edit_missing_and_invalid():
    ctx = _ctx()
    ctx.repo.update.return_value = None
    message = _message()
    await cmd_edit(message, SimpleNamespace(args="nope body نص"), ctx)
    message.answer.assert_awaited_once_with(t('toasts.not_found'))

    ctx.repo.update.side_effect = ValidationError("Поле body не может быть пустым")
    message = _message()
    await cmd_edit(message, SimpleNamespace(args="slug body x"), ctx)
    assert "body" in message.answer.await_args.args[0]


async def test_custom_text_ignores_strangers():
    ctx = _ctx()
    message = _message("نَصٌّ " * 30, chat_id=7)
    await on_custom_text(message, ctx)
    message.answer.assert_not_awaited()
    ctx.spawn.assert_not_called()


async def test_custom_text_too_short():
    ctx = _ctx()
    message = _message("قَصِيرٌ")
    await on_custom_text(message, ctx)
    assert message.answer.await_count == 1
    ctx.spawn.assert_not_called()


async def test_custom_text_starts_workflow():
    ctx = _ctx()
    text = "نَصٌّ " * 30
    message = _message(text)
    await on_custom_text(message, ctx)
    ctx.workflow.run_custom_safely.assert_called_once_with(text.strip(), submitted_by=1001)
    ctx.spawn.assert_called_once()


async def test_create_spawns_generation():
    ctx = _ctx()
    callback = MagicMock(spec=CallbackQuery)
    callback.message = MagicMock()
    callback.message.chat.id = 42
    callback.answer = AsyncMock()
    callback.message.answer = AsyncMock()
    data = CreateCallback(content_type=ContentType.LISTENING, level=Level.A2)

    await on_create(callback, data, ctx)

    ctx.workflow.run_safely.assert_called_once_with(ContentType.LISTENING, Level.A2)
    ctx.spawn.assert_called_once()
    callback.answer.assert_awaited_once()
    callback.message.answer.assert_awaited_once()


# ==================== ПОВТОРНАЯ ПУБЛИКАЦИЯ ====================

async def test_publish_usage_without_slug():
    ctx = _ctx()
    message = _message("/publish")
    await cmd_publish(message, SimpleNamespace(args=None), ctx)
    message.answer.assert_awaited_once_with(t('messages.publish_usage'))


async def test_publish_approved_item():
    ctx = _ctx()
    item = make_session(status=ContentStatus.APPROVED)
    ctx.repo.get_by_slug.return_value = item
    ctx.delivery.publish_approved = AsyncMock(return_value=make_session(status=ContentStatus.POSTED))
    message = _message()

    await cmd_publish(message, SimpleNamespace(args=item.slug), ctx)

    ctx.delivery.publish_approved.assert_awaited_once_with(item)
    message.answer.assert_awaited_once_with(t('messages.publish_done', slug=item.slug))


async def test_publish_falls_back_to_custom_content():
    ctx = _ctx()
    ctx.repo.get_by_slug.return_value = None
    ctx.custom_repo.get_custom_by_slug.return_value = None
    message = _message()

    await cmd_publish(message, SimpleNamespace(args="custom-1-aa"), ctx)

    ctx.custom_repo.get_custom_by_slug.assert_awaited_once_with("custom-1-aa")
    message.answer.assert_awaited_once_with(t('toasts.not_found'))


async def test_publish_not_approved():
    ctx = _ctx()
    ctx.repo.get_by_slug.return_value = make_session()
    ctx.delivery.publish_approved = AsyncMock(side_effect=InvalidTransition("draft", "posted"))
    message = _message()

    await cmd_publish(message, SimpleNamespace(args="podcast-1-ab"), ctx)

    message.answer.assert_awaited_once_with(
        t('messages.publish_not_approved', status=t('statuses.draft'))
    )
