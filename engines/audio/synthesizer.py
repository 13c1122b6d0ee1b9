"""
Синтез речи и сохранение аудио.

AudioSynthesizer:
- выбирает голос (ElevenLabs — случайный из пула, Lahajati — по кругу)
- озвучивает текст у провайдера, целиком буферизуя MP3
- сохраняет файл через StorageGateway
- никогда не бросает исключений: ошибки возвращаются в AudioResult
"""

import base64
import random
from dataclasses import dataclass
from typing import Optional

from config import (
    get_logger,
    ELEVENLABS_VOICES,
    LAHAJATI_FALLBACK_VOICES,
)
from core.errors import BotError
from core.helpers import estimate_duration

logger = get_logger(__name__)


@dataclass
class AudioResult:
    """Результат озвучки"""
    success: bool
    audio_url: str = ""
    audio_base64: str = ""
    filename: str = ""              # ключ объекта в хранилище
    duration_estimate: int = 0      # секунды
    message: str = ""
    voice_id: Optional[str] = None
    provider: Optional[str] = None


def pick_next_voice(voices: list[str], index: int) -> tuple[str, int]:
    """Голос по индексу и следующий индекс (по модулю числа голосов)"""
    if not voices:
        raise ValueError("Пустой список голосов")
    position = index % len(voices)
    return voices[position], (position + 1) % len(voices)


class AudioSynthesizer:
    """Озвучка текста через TTS-провайдеров"""

    def __init__(self, storage, voice_repo, providers: dict,
                 default_provider: str = "lahajati",
                 secondary_provider: Optional[str] = None,
                 elevenlabs_voices: list[str] = None,
                 lahajati_fallback_voices: list[str] = None,
                 rng: random.Random = None):
        """
        Args:
            storage: StorageGateway
            voice_repo: VoiceRotationRepository
            providers: {имя провайдера: клиент с synthesize(text, voice_id)}
            default_provider: основной провайдер
            secondary_provider: запасной провайдер (или None)
        """
        self.storage = storage
        self.voice_repo = voice_repo
        self.providers = providers
        self.default_provider = default_provider
        self.secondary_provider = secondary_provider
        self.elevenlabs_voices = elevenlabs_voices or ELEVENLABS_VOICES
        self.lahajati_fallback_voices = lahajati_fallback_voices or LAHAJATI_FALLBACK_VOICES
        self.rng = rng or random.Random()

    # ==================== ВЫБОР ГОЛОСА ====================

    async def _next_lahajati_voice(self, client) -> str:
        """Следующий голос Lahajati по кругу (список голосов кэшируется в БД)"""
        state = await self.voice_repo.get_or_create_state()
        voices = state.cached_voices
        refreshed = None

        if not voices:
            try:
                voices = await client.list_voices()
                refreshed = voices
            except BotError as e:
                logger.warning(f"⚠️ Не удалось получить голоса Lahajati ({e}), используем запасной пул")
                voices = self.lahajati_fallback_voices

        voice_id, next_index = pick_next_voice(voices, state.voice_index)
        await self.voice_repo.update_state(next_index, refreshed)
        return voice_id

    async def select_voice(self, provider: str, client) -> str:
        if provider == "lahajati":
            return await self._next_lahajati_voice(client)
        return self.rng.choice(self.elevenlabs_voices)

    # ==================== СИНТЕЗ ====================

    async def synthesize(self, text: str, title: str, voice_id: str = None,
                         provider: str = None) -> AudioResult:
        """Озвучить текст и сохранить аудио

        Args:
            text: текст для озвучки
            title: заголовок (для ключа в хранилище)
            voice_id: конкретный голос (иначе выбирается по политике провайдера)
            provider: провайдер (иначе основной)

        Returns:
            AudioResult (success=False при любой ошибке)
        """
        provider = provider or self.default_provider
        client = self.providers.get(provider)
        if client is None:
            logger.warning(f"⚠️ TTS-провайдер не настроен: {provider}")
            return AudioResult(success=False, provider=provider,
                               message=f"TTS provider not configured: {provider}")

        try:
            voice_id = voice_id or await self.select_voice(provider, client)
            logger.info(f"🎙 Озвучка ({provider}, голос {voice_id}): {len(text)} символов")

            audio = await client.synthesize(text, voice_id)
            stored = await self.storage.upload(audio, title)
        except Exception as e:
            logger.error(f"❌ Ошибка озвучки ({provider}): {e}")
            return AudioResult(success=False, provider=provider, voice_id=voice_id,
                               message=f"Audio generation failed: {e}")

        duration = estimate_duration(text)
        logger.info(f"✅ Аудио готово: {stored.key} (~{duration} сек)")
        return AudioResult(
            success=True,
            audio_url=stored.url,
            audio_base64=base64.b64encode(audio).decode("ascii"),
            filename=stored.key,
            duration_estimate=duration,
            message=f"Audio generated via {provider} ({voice_id})",
            voice_id=voice_id,
            provider=provider,
        )

    async def synthesize_with_fallback(self, text: str, title: str,
                                       voice_id: str = None) -> AudioResult:
        """Основной провайдер, при неудаче — запасной (если настроен)"""
        result = await self.synthesize(text, title, voice_id=voice_id)
        if result.success or not self.secondary_provider:
            return result
        if self.secondary_provider == result.provider:
            return result

        logger.warning(f"⚠️ {result.provider} не справился, пробуем {self.secondary_provider}")
        # Голос одного провайдера не подходит другому
        return await self.synthesize(text, title, provider=self.secondary_provider)
