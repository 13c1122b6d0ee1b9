"""
Тест веб-части: вебхук Telegram и страница превью.
"""

from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock

import pytest
from aiohttp import test_utils

from core.types import ContentStatus
from web import create_web_app
from web.demo import render_demo_page
from tests.conftest import FakeContentRepository, make_question, make_session

UPDATE = {
    "update_id": 1001,
    "message": {
        "message_id": 5,
        "date": 1714557600,
        "chat": {"id": 42, "type": "private"},
        "text": "/menu",
    },
}


@pytest.fixture
def dp():
    dispatcher = MagicMock()
    dispatcher.feed_update = AsyncMock()
    return dispatcher


def _app(settings, dp, items=()):
    ctx = SimpleNamespace(settings=settings, repo=FakeContentRepository(items))
    return create_web_app(ctx, dp, MagicMock())


# ==================== СТРАНИЦА ПРЕВЬЮ ====================

def test_render_demo_page():
    item = make_session(
        title="<script>alert(1)</script>",
        audio_url="https://cdn.example.com/a.mp3",
        status=ContentStatus.POSTED,
        questions=[make_question(1, correct=1)],
    )
    html = render_demo_page(item)

    assert '<html lang="ar" dir="rtl">' in html
    assert "<script>alert(1)</script>" not in html
    assert "&lt;script&gt;" in html
    assert "status-posted" in html
    assert '<source src="https://cdn.example.com/a.mp3"' in html
    assert html.count('class="option correct"') == 1
    assert "💡 شرح 1" in html


def test_render_demo_page_without_audio():
    html = render_demo_page(make_session(audio_url="", questions=[]))
    assert "<audio" not in html
    assert 'class="questions"' not in html


async def test_demo_found(settings, dp):
    item = make_session(slug="podcast-1-ab")
    async with test_utils.TestClient(test_utils.TestServer(_app(settings, dp, [item]))) as client:
        resp = await client.get("/demo/podcast-1-ab")
        assert resp.status == 200
        assert resp.content_type == "text/html"
        assert item.title in await resp.text()


async def test_demo_not_found(settings, dp):
    async with test_utils.TestClient(test_utils.TestServer(_app(settings, dp))) as client:
        resp = await client.get("/demo/missing")
        assert resp.status == 404
        assert 'dir="rtl"' in await resp.text()


async def test_demo_error(settings, dp):
    repo = MagicMock()
    repo.get_by_slug = AsyncMock(side_effect=RuntimeError("db down"))
    app = create_web_app(SimpleNamespace(settings=settings, repo=repo), dp, MagicMock())
    async with test_utils.TestClient(test_utils.TestServer(app)) as client:
        resp = await client.get("/demo/any")
        assert resp.status == 500


async def test_health(settings, dp):
    async with test_utils.TestClient(test_utils.TestServer(_app(settings, dp))) as client:
        resp = await client.get("/health")
        assert (await resp.json()) == {"ok": True}


def test_media_dir_created(settings, dp):
    _app(settings, dp)
    assert settings.media_dir.is_dir()


# ==================== ВЕБХУК ====================

async def test_webhook_feeds_update(settings, dp):
    async with test_utils.TestClient(test_utils.TestServer(_app(settings, dp))) as client:
        resp = await client.post("/webhooks/telegram", json=UPDATE)
        assert resp.status == 200
        assert await resp.json() == {"ok": True}

    dp.feed_update.assert_awaited_once()
    update = dp.feed_update.await_args.args[1]
    assert update.update_id == 1001
    assert update.message.text == "/menu"


async def test_webhook_invalid_json(settings, dp):
    async with test_utils.TestClient(test_utils.TestServer(_app(settings, dp))) as client:
        resp = await client.post("/webhooks/telegram", data="not json",
                                 headers={"Content-Type": "application/json"})
        assert resp.status == 200
        body = await resp.json()
        assert body["ok"] is False
    dp.feed_update.assert_not_awaited()


async def test_webhook_invalid_update(settings, dp):
    async with test_utils.TestClient(test_utils.TestServer(_app(settings, dp))) as client:
        resp = await client.post("/webhooks/telegram", json={"message": {}})
        assert resp.status == 200
        assert (await resp.json())["ok"] is False
    dp.feed_update.assert_not_awaited()


async def test_webhook_secret(settings, dp):
    settings.webhook_secret = "s3cret"
    async with test_utils.TestClient(test_utils.TestServer(_app(settings, dp))) as client:
        resp = await client.post("/webhooks/telegram", json=UPDATE)
        assert (await resp.json())["ok"] is False

        resp = await client.post("/webhooks/telegram", json=UPDATE,
                                 headers={"X-Telegram-Bot-Api-Secret-Token": "s3cret"})
        assert (await resp.json())["ok"] is True
    dp.feed_update.assert_awaited_once()


async def test_webhook_handler_error(settings, dp):
    dp.feed_update.side_effect = RuntimeError("boom")
    async with test_utils.TestClient(test_utils.TestServer(_app(settings, dp))) as client:
        resp = await client.post("/webhooks/telegram", json=UPDATE)
        assert resp.status == 200
        assert await resp.json() == {"ok": False, "error": "boom"}
