"""
Тест кнопок: форматы callback_data, разбор, клавиатуры.
"""

import pytest

from core.types import ContentStatus, ContentType, CustomContent, Level
from engines.delivery.callbacks import (
    AlreadyHandledCallback, ApproveCallback, BrowseCallback, CreateCallback,
    CustomDecisionCallback, MenuCallback, RejectCallback, ViewCallback, decode_callback,
)
from engines.delivery.keyboards import kb_approval, kb_browse_page, kb_handled, kb_main_menu
from tests.conftest import make_questions, make_session


@pytest.mark.parametrize("data,expected", [
    ("approve_12", ApproveCallback(content_id=12)),
    ("reject_12", RejectCallback(content_id=12)),
    ("custom_approve_3", CustomDecisionCallback(action="approve", content_id=3)),
    ("custom_reject_3", CustomDecisionCallback(action="reject", content_id=3)),
    ("already_posted", AlreadyHandledCallback(status="posted")),
    ("create_listening_A2", CreateCallback(content_type=ContentType.LISTENING, level=Level.A2)),
    ("browse_reading_B2_3", BrowseCallback(content_type=ContentType.READING, level=Level.B2, page=3)),
    ("view_5", ViewCallback(content_id=5)),
    ("menu_main", MenuCallback(section="main")),
])
def test_decode_known(data, expected):
    assert decode_callback(data) == expected


@pytest.mark.parametrize("data", [
    "", "approve_abc", "approve", "create_video_B1", "create_podcast_C1", "unknown_1",
])
def test_decode_unknown(data):
    assert decode_callback(data) is None


def test_pack_formats():
    assert CreateCallback(content_type=ContentType.PODCAST, level=Level.B1).pack() == "create_podcast_B1"
    assert BrowseCallback(content_type=ContentType.PODCAST, level=Level.A1).pack() == "browse_podcast_A1_0"


def test_kb_approval_regular_and_custom():
    regular = kb_approval(make_session(id=9))
    assert [b.callback_data for b in regular.inline_keyboard[0]] == ["approve_9", "reject_9"]

    custom = CustomContent(
        id=4, slug="custom-1-aa", title="t", body="b", questions=make_questions(),
        status=ContentStatus.DRAFT, content_type=ContentType.READING, level=Level.B1,
    )
    buttons = kb_approval(custom).inline_keyboard[0]
    assert [b.callback_data for b in buttons] == ["custom_approve_4", "custom_reject_4"]


def test_kb_handled():
    keyboard = kb_handled(ContentStatus.APPROVED)
    assert len(keyboard.inline_keyboard) == 1
    assert keyboard.inline_keyboard[0][0].callback_data == "already_approved"


def test_main_menu_covers_all_types_and_levels():
    data = {b.callback_data for row in kb_main_menu().inline_keyboard for b in row}
    for content_type in ContentType:
        for level in Level:
            assert f"create_{content_type.value}_{level.value}" in data
    assert "menu_browse" in data


def test_browse_page_navigation():
    items = [make_session(id=i, title=f"t{i}") for i in range(3)]

    first = kb_browse_page(items, ContentType.PODCAST, Level.B1, page=0, pages=2)
    data = [b.callback_data for row in first.inline_keyboard for b in row]
    assert data[:3] == ["view_0", "view_1", "view_2"]
    assert "browse_podcast_B1_1" in data
    assert "browse_podcast_B1_-1" not in data
    assert data[-1] == "menu_browse"

    last = kb_browse_page(items, ContentType.PODCAST, Level.B1, page=1, pages=2)
    data = [b.callback_data for row in last.inline_keyboard for b in row]
    assert "browse_podcast_B1_0" in data
    assert "browse_podcast_B1_2" not in data
