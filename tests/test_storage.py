"""
Тест хранилища аудио: ключи объектов, локальный бэкенд, S3 с подменённым клиентом.
"""

from datetime import datetime, timezone
from unittest.mock import MagicMock

import pytest
from botocore.exceptions import ClientError

from core.errors import StorageError
from core.storage import LocalBackend, S3Backend, StorageGateway, build_audio_key, create_storage
from core.types import LegacyUrl, StorageKey

MOMENT = datetime(2024, 3, 5, 7, 8, 9, 123000, tzinfo=timezone.utc)


def test_build_audio_key():
    key = build_audio_key("Morning News", MOMENT)
    assert key == "audio/2024/03/morning-news-2024-03-05T07-08-09.123Z.mp3"


def test_build_audio_key_arabic_title():
    key = build_audio_key("أَخْبَارُ الصَّبَاحِ", MOMENT)
    assert key == "audio/2024/03/--2024-03-05T07-08-09.123Z.mp3"


async def test_local_round_trip(tmp_path):
    gateway = StorageGateway(LocalBackend(tmp_path, "http://localhost:8080/"))

    stored = await gateway.upload(b"ID3-audio", "Morning News", now=MOMENT)

    assert stored.key == "audio/2024/03/morning-news-2024-03-05T07-08-09.123Z.mp3"
    assert stored.url == f"http://localhost:8080/media/{stored.key}"
    assert await gateway.exists(stored.key)
    assert await gateway.download(StorageKey(stored.key)) == b"ID3-audio"

    assert await gateway.delete(stored.key) is True
    assert not await gateway.exists(stored.key)
    assert await gateway.delete(stored.key) is False


async def test_upload_empty_data(tmp_path):
    gateway = StorageGateway(LocalBackend(tmp_path, "http://localhost:8080"))
    with pytest.raises(StorageError):
        await gateway.upload(b"", "title")


async def test_local_missing_file(tmp_path):
    gateway = StorageGateway(LocalBackend(tmp_path, "http://localhost:8080"))
    with pytest.raises(StorageError):
        await gateway.download(StorageKey("audio/2024/01/missing.mp3"))


async def test_local_rejects_path_traversal(tmp_path):
    backend = LocalBackend(tmp_path / "media", "http://localhost:8080")
    with pytest.raises(StorageError):
        await backend.put("../outside.mp3", b"x")


def test_url_for_refs(tmp_path):
    gateway = StorageGateway(LocalBackend(tmp_path, "https://bot.example.com"))
    assert gateway.url_for(StorageKey("audio/a.mp3")) == "https://bot.example.com/media/audio/a.mp3"
    assert gateway.url_for(LegacyUrl("https://old.example.com/a.mp3")) == "https://old.example.com/a.mp3"


def _client_error(code: str, operation: str) -> ClientError:
    return ClientError({"Error": {"Code": code, "Message": code}}, operation)


async def test_s3_put_and_url():
    client = MagicMock()
    backend = S3Backend("arabic-audio", "eu-central-1", client=client)
    gateway = StorageGateway(backend)

    stored = await gateway.upload(b"mp3", "News", now=MOMENT)

    client.put_object.assert_called_once()
    kwargs = client.put_object.call_args.kwargs
    assert kwargs["Bucket"] == "arabic-audio"
    assert kwargs["Key"] == stored.key
    assert kwargs["ContentType"] == "audio/mpeg"
    assert stored.url == f"https://arabic-audio.s3.eu-central-1.amazonaws.com/{stored.key}"


def test_s3_url_default_region():
    backend = S3Backend("arabic-audio", client=MagicMock())
    assert backend.url_for("audio/x.mp3") == "https://arabic-audio.s3.amazonaws.com/audio/x.mp3"


async def test_s3_exists_not_found():
    client = MagicMock()
    client.head_object.side_effect = _client_error("404", "HeadObject")
    backend = S3Backend("arabic-audio", client=client)
    assert await backend.exists("audio/x.mp3") is False


async def test_s3_exists_other_error():
    client = MagicMock()
    client.head_object.side_effect = _client_error("403", "HeadObject")
    backend = S3Backend("arabic-audio", client=client)
    with pytest.raises(StorageError) as exc:
        await backend.exists("audio/x.mp3")
    assert isinstance(exc.value.__cause__, ClientError)


async def test_s3_put_error_wrapped():
    client = MagicMock()
    client.put_object.side_effect = _client_error("AccessDenied", "PutObject")
    gateway = StorageGateway(S3Backend("arabic-audio", client=client))
    with pytest.raises(StorageError):
        await gateway.upload(b"mp3", "News")


def test_s3_requires_bucket():
    with pytest.raises(StorageError):
        S3Backend("", client=MagicMock())


def test_create_storage_local(settings):
    gateway = create_storage(settings)
    assert isinstance(gateway.backend, LocalBackend)
    assert gateway.backend.url_for("k.mp3") == "https://bot.example.com/media/k.mp3"


async def test_s3_delete_reports_result():
    client = MagicMock()
    gateway = StorageGateway(S3Backend("arabic-audio", client=client))

    assert await gateway.delete("audio/x.mp3") is True
    client.delete_object.assert_called_once_with(Bucket="arabic-audio", Key="audio/x.mp3")

    client.reset_mock()
    client.head_object.side_effect = _client_error("404", "HeadObject")
    assert await gateway.delete("audio/x.mp3") is False
    client.delete_object.assert_not_called()
