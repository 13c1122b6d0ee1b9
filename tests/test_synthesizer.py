"""
Тест озвучки: выбор голоса, ротация Lahajati, запасной провайдер.
"""

import random
from unittest.mock import AsyncMock

import pytest

from core.errors import ProviderError
from core.storage import StoredAudio
from engines.audio import AudioSynthesizer, pick_next_voice
from tests.conftest import FakeVoiceRepository


def test_pick_next_voice():
    voices = ["v1", "v2", "v3"]
    assert pick_next_voice(voices, 0) == ("v1", 1)
    assert pick_next_voice(voices, 2) == ("v3", 0)
    # Индекс за пределами списка (список голосов сократился)
    assert pick_next_voice(voices, 7) == ("v2", 2)
    with pytest.raises(ValueError):
        pick_next_voice([], 0)


def _storage():
    storage = AsyncMock()
    storage.upload.return_value = StoredAudio(url="https://cdn/audio/a.mp3", key="audio/a.mp3")
    return storage


def _lahajati(voices=("v1", "v2", "v3")):
    client = AsyncMock()
    client.list_voices.return_value = list(voices)
    client.synthesize.return_value = b"mp3-bytes"
    return client


async def test_lahajati_rotation_caches_voices():
    voice_repo = FakeVoiceRepository()
    client = _lahajati()
    synthesizer = AudioSynthesizer(_storage(), voice_repo, {"lahajati": client}, default_provider="lahajati")

    first = await synthesizer.synthesize("نص", "title")
    second = await synthesizer.synthesize("نص", "title")

    assert first.success and second.success
    assert (first.voice_id, second.voice_id) == ("v1", "v2")
    # Список голосов запрошен один раз, дальше берётся из кэша
    client.list_voices.assert_awaited_once()
    assert voice_repo.updates == [(1, ["v1", "v2", "v3"]), (2, None)]


async def test_lahajati_rotation_visits_every_voice_once():
    voices = ["v1", "v2", "v3", "v4"]
    voice_repo = FakeVoiceRepository(voice_index=2, cached_voices=voices)
    client = _lahajati(voices)
    synthesizer = AudioSynthesizer(_storage(), voice_repo, {"lahajati": client})

    used = [(await synthesizer.synthesize("نص", "title")).voice_id for _ in voices]

    assert sorted(used) == voices
    assert used == ["v3", "v4", "v1", "v2"]
    # Следующий круг начинается с того же голоса
    assert (await synthesizer.synthesize("نص", "title")).voice_id == "v3"
    client.list_voices.assert_not_awaited()


async def test_lahajati_fallback_pool_not_cached():
    voice_repo = FakeVoiceRepository(voice_index=1)
    client = _lahajati()
    client.list_voices.side_effect = ProviderError("lahajati", "down", 503)
    synthesizer = AudioSynthesizer(
        _storage(), voice_repo, {"lahajati": client},
        lahajati_fallback_voices=["f1", "f2"],
    )

    result = await synthesizer.synthesize("نص", "title")

    assert result.success
    assert result.voice_id == "f2"
    assert voice_repo.updates == [(0, None)]
    assert voice_repo.state.cached_voices == []


async def test_success_result_fields():
    storage = _storage()
    synthesizer = AudioSynthesizer(storage, FakeVoiceRepository(), {"lahajati": _lahajati()})

    result = await synthesizer.synthesize("x" * 95, "عنوان")

    assert result.audio_url == "https://cdn/audio/a.mp3"
    assert result.filename == "audio/a.mp3"
    assert result.duration_estimate == 10
    assert result.provider == "lahajati"
    assert result.audio_base64 == "bXAzLWJ5dGVz"
    storage.upload.assert_awaited_once_with(b"mp3-bytes", "عنوان")


async def test_elevenlabs_random_voice():
    client = AsyncMock()
    client.synthesize.return_value = b"mp3"
    synthesizer = AudioSynthesizer(
        _storage(), FakeVoiceRepository(), {"elevenlabs": client},
        default_provider="elevenlabs", elevenlabs_voices=["e1", "e2"], rng=random.Random(1),
    )

    result = await synthesizer.synthesize("نص", "title")

    assert result.success
    assert result.voice_id in ("e1", "e2")


async def test_provider_not_configured():
    synthesizer = AudioSynthesizer(_storage(), FakeVoiceRepository(), {}, default_provider="elevenlabs")
    result = await synthesizer.synthesize("نص", "title")
    assert not result.success
    assert "not configured" in result.message


async def test_failure_never_raises():
    client = _lahajati()
    client.synthesize.side_effect = ProviderError("lahajati", "quota", 429)
    synthesizer = AudioSynthesizer(_storage(), FakeVoiceRepository(), {"lahajati": client})

    result = await synthesizer.synthesize("نص", "title")

    assert not result.success
    assert "quota" in result.message


async def test_storage_failure_never_raises():
    storage = _storage()
    storage.upload.side_effect = RuntimeError("disk full")
    synthesizer = AudioSynthesizer(storage, FakeVoiceRepository(), {"lahajati": _lahajati()})

    result = await synthesizer.synthesize("نص", "title")

    assert not result.success
    assert "disk full" in result.message


async def test_fallback_to_secondary_provider():
    lahajati = _lahajati()
    lahajati.synthesize.side_effect = ProviderError("lahajati", "down", 503)
    elevenlabs = AsyncMock()
    elevenlabs.synthesize.return_value = b"mp3"
    synthesizer = AudioSynthesizer(
        _storage(), FakeVoiceRepository(),
        {"lahajati": lahajati, "elevenlabs": elevenlabs},
        default_provider="lahajati", secondary_provider="elevenlabs",
        elevenlabs_voices=["e1"],
    )

    result = await synthesizer.synthesize_with_fallback("نص", "title")

    assert result.success
    assert result.provider == "elevenlabs"
    elevenlabs.synthesize.assert_awaited_once_with("نص", "e1")


async def test_no_fallback_without_secondary():
    lahajati = _lahajati()
    lahajati.synthesize.side_effect = ProviderError("lahajati", "down", 503)
    synthesizer = AudioSynthesizer(_storage(), FakeVoiceRepository(), {"lahajati": lahajati})

    result = await synthesizer.synthesize_with_fallback("نص", "title")

    assert not result.success
    assert lahajati.synthesize.await_count == 1
