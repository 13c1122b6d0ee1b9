"""
Клиенты TTS-провайдеров.

Содержит:
- ElevenLabsClient: синтез речи через ElevenLabs (модель eleven_multilingual_v2)
- LahajatiClient: синтез речи и список голосов Lahajati ("absolute control")

Оба клиента возвращают байты MP3 целиком или бросают ProviderError.
"""

import asyncio

import aiohttp

from config import get_logger, ELEVENLABS_MODEL
from core.errors import ConfigurationError, ProviderError

logger = get_logger(__name__)


class ElevenLabsClient:
    """Клиент ElevenLabs Text-to-Speech"""

    name = "elevenlabs"
    BASE_URL = "https://api.elevenlabs.io/v1"

    def __init__(self, api_key: str, model_id: str = ELEVENLABS_MODEL, timeout: int = 120):
        self.api_key = api_key
        self.model_id = model_id
        self.timeout = aiohttp.ClientTimeout(total=timeout)

    async def synthesize(self, text: str, voice_id: str) -> bytes:
        """Озвучить текст голосом voice_id

        Raises:
            ConfigurationError: нет ключа
            ProviderError: ошибка API
        """
        if not self.api_key:
            raise ConfigurationError("ELEVENLABS_API_KEY не установлен")

        url = f"{self.BASE_URL}/text-to-speech/{voice_id}"
        headers = {
            "Accept": "audio/mpeg",
            "Content-Type": "application/json",
            "xi-api-key": self.api_key,
        }
        payload = {
            "text": text,
            "model_id": self.model_id,
            "voice_settings": {
                "stability": 0.5,
                "similarity_boost": 0.75,
            },
        }

        try:
            async with aiohttp.ClientSession(timeout=self.timeout) as session:
                async with session.post(url, headers=headers, json=payload) as resp:
                    if resp.status != 200:
                        error = await resp.text()
                        logger.error(f"ElevenLabs API error: {resp.status} - {error[:300]}")
                        raise ProviderError(self.name, error[:200], resp.status)
                    return await resp.read()
        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            logger.error(f"ElevenLabs API exception: {e}")
            raise ProviderError(self.name, str(e) or type(e).__name__) from e


class LahajatiClient:
    """Клиент Lahajati (арабские голоса, режим absolute control)"""

    name = "lahajati"
    BASE_URL = "https://lahajati.ai/api/v1"

    def __init__(self, api_key: str, timeout: int = 120):
        self.api_key = api_key
        self.timeout = aiohttp.ClientTimeout(total=timeout)

    def _headers(self, accept: str) -> dict:
        if not self.api_key:
            raise ConfigurationError("LAHAJATI_API_KEY не установлен")
        return {
            "Authorization": f"Bearer {self.api_key}",
            "Accept": accept,
        }

    async def list_voices(self) -> list[str]:
        """Список id голосов absolute control

        Raises:
            ProviderError: ошибка API или пустой список
        """
        headers = self._headers("application/json")
        try:
            async with aiohttp.ClientSession(timeout=aiohttp.ClientTimeout(total=30)) as session:
                async with session.get(f"{self.BASE_URL}/voices-absolute-control", headers=headers) as resp:
                    if resp.status != 200:
                        error = await resp.text()
                        raise ProviderError(self.name, error[:200], resp.status)
                    data = await resp.json()
        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            raise ProviderError(self.name, str(e) or type(e).__name__) from e

        voices = []
        for item in (data or {}).get("data") or []:
            if isinstance(item, dict) and item.get("id_voice"):
                voices.append(str(item["id_voice"]))
        if not voices:
            raise ProviderError(self.name, "пустой список голосов")

        logger.info(f"🎙 Lahajati: получено {len(voices)} голосов")
        return voices

    async def synthesize(self, text: str, voice_id: str) -> bytes:
        """Озвучить текст голосом voice_id

        Raises:
            ConfigurationError: нет ключа
            ProviderError: ошибка API
        """
        headers = self._headers("audio/mpeg")
        headers["Content-Type"] = "application/json"
        payload = {
            "text": text,
            "id_voice": voice_id,
            "input_mode": "0",
        }

        try:
            async with aiohttp.ClientSession(timeout=self.timeout) as session:
                async with session.post(f"{self.BASE_URL}/text-to-speech-absolute-control",
                                        headers=headers, json=payload) as resp:
                    if resp.status != 200:
                        error = await resp.text()
                        logger.error(f"Lahajati API error: {resp.status} - {error[:300]}")
                        raise ProviderError(self.name, error[:200], resp.status)
                    return await resp.read()
        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            logger.error(f"Lahajati API exception: {e}")
            raise ProviderError(self.name, str(e) or type(e).__name__) from e
