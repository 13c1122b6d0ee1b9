"""
Данные inline-кнопок.

Каждый вид кнопки — отдельный класс CallbackData, строка разбирается
один раз (фильтром роутера или decode_callback) в типизированный объект.

Форматы:
    approve_<id>, reject_<id>
    custom_approve_<id>, custom_reject_<id>
    already_<status>
    create_<type>_<level>
    browse_<type>_<level>_<page>
    view_<id>
    menu_main, menu_browse
"""

from typing import Optional

from aiogram.filters.callback_data import CallbackData

from core.types import ContentType, Level


class ApproveCallback(CallbackData, prefix="approve", sep="_"):
    content_id: int


class RejectCallback(CallbackData, prefix="reject", sep="_"):
    content_id: int


class CustomDecisionCallback(CallbackData, prefix="custom", sep="_"):
    action: str  # approve / reject
    content_id: int


class AlreadyHandledCallback(CallbackData, prefix="already", sep="_"):
    status: str


class CreateCallback(CallbackData, prefix="create", sep="_"):
    content_type: ContentType
    level: Level


class BrowseCallback(CallbackData, prefix="browse", sep="_"):
    content_type: ContentType
    level: Level
    page: int = 0


class ViewCallback(CallbackData, prefix="view", sep="_"):
    content_id: int


class MenuCallback(CallbackData, prefix="menu", sep="_"):
    section: str  # main / browse


CALLBACK_VARIANTS = (
    ApproveCallback,
    RejectCallback,
    CustomDecisionCallback,
    AlreadyHandledCallback,
    CreateCallback,
    BrowseCallback,
    ViewCallback,
    MenuCallback,
)


def decode_callback(data: str) -> Optional[CallbackData]:
    """Разобрать строку кнопки в один из вариантов (или None)"""
    if not data:
        return None
    for variant in CALLBACK_VARIANTS:
        try:
            return variant.unpack(data)
        except (ValueError, TypeError):
            continue
    return None
