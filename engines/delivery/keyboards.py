"""
Inline-клавиатуры админа.
"""

from aiogram.types import InlineKeyboardMarkup, InlineKeyboardButton

from config import CEFR_LEVELS
from core.helpers import truncate
from core.types import ContentStatus, ContentType, Level
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


def kb_approval(item) -> InlineKeyboardMarkup:
    """Кнопки подтверждения / отказа под превью"""
    if item.is_custom:
        approve = CustomDecisionCallback(action="approve", content_id=item.id)
        reject = CustomDecisionCallback(action="reject", content_id=item.id)
    else:
        approve = ApproveCallback(content_id=item.id)
        reject = RejectCallback(content_id=item.id)

    return InlineKeyboardMarkup(inline_keyboard=[[
        InlineKeyboardButton(text=t('buttons.approve'), callback_data=approve.pack()),
        InlineKeyboardButton(text=t('buttons.reject'), callback_data=reject.pack()),
    ]])


def kb_handled(status: ContentStatus) -> InlineKeyboardMarkup:
    """Одна неактивная кнопка вместо подтверждения / отказа"""
    return InlineKeyboardMarkup(inline_keyboard=[[
        InlineKeyboardButton(
            text=t(f'buttons.{status.value}'),
            callback_data=AlreadyHandledCallback(status=status.value).pack()
        )
    ]])


def _type_level_grid(make_callback) -> list[list[InlineKeyboardButton]]:
    """Сетка тип × уровень (по два уровня в ряд)"""
    rows = []
    for content_type in ContentType:
        label = t(f'content_types.{content_type.value}')
        for i in range(0, len(CEFR_LEVELS), 2):
            rows.append([
                InlineKeyboardButton(
                    text=f"{label} - {level}",
                    callback_data=make_callback(content_type, Level(level)).pack()
                )
                for level in CEFR_LEVELS[i:i + 2]
            ])
    return rows


def kb_main_menu() -> InlineKeyboardMarkup:
    """Главное меню: создание материала"""
    rows = _type_level_grid(lambda ct, lvl: CreateCallback(content_type=ct, level=lvl))
    rows.append([
        InlineKeyboardButton(text=t('buttons.browse'), callback_data=MenuCallback(section="browse").pack())
    ])
    return InlineKeyboardMarkup(inline_keyboard=rows)


def kb_browse_menu() -> InlineKeyboardMarkup:
    """Меню просмотра: выбор типа и уровня"""
    rows = _type_level_grid(lambda ct, lvl: BrowseCallback(content_type=ct, level=lvl, page=0))
    rows.append([
        InlineKeyboardButton(text=t('buttons.back'), callback_data=MenuCallback(section="main").pack())
    ])
    return InlineKeyboardMarkup(inline_keyboard=rows)


STATUS_ICONS = {
    ContentStatus.DRAFT: "📝",
    ContentStatus.APPROVED: "✅",
    ContentStatus.REJECTED: "❌",
    ContentStatus.POSTED: "📢",
}


def kb_browse_page(items: list, content_type: ContentType, level: Level,
                   page: int, pages: int) -> InlineKeyboardMarkup:
    """Страница списка материалов с навигацией"""
    rows = [
        [InlineKeyboardButton(
            text=f"{STATUS_ICONS.get(item.status, '')} {truncate(item.title, 40)}",
            callback_data=ViewCallback(content_id=item.id).pack()
        )]
        for item in items
    ]

    nav = []
    if page > 0:
        nav.append(InlineKeyboardButton(
            text=t('buttons.prev'),
            callback_data=BrowseCallback(content_type=content_type, level=level, page=page - 1).pack()
        ))
    if page + 1 < pages:
        nav.append(InlineKeyboardButton(
            text=t('buttons.next'),
            callback_data=BrowseCallback(content_type=content_type, level=level, page=page + 1).pack()
        ))
    if nav:
        rows.append(nav)

    rows.append([
        InlineKeyboardButton(text=t('buttons.back'), callback_data=MenuCallback(section="browse").pack())
    ])
    return InlineKeyboardMarkup(inline_keyboard=rows)
