"""
Клиент для работы с Claude API.

ClaudeClient - асинхронный клиент для генерации контента через Claude API.
Поддерживает:
- Генерацию текста по системному и пользовательскому промпту
- Генерацию JSON-объекта (вырезается из ответа и разбирается)
"""

import asyncio
import json

import aiohttp

from config import get_logger
from core.errors import ConfigurationError, ProviderError, ValidationError
from core.helpers import extract_json_object

logger = get_logger(__name__)

ANTHROPIC_VERSION = "2023-06-01"


class ClaudeClient:
    """Клиент для работы с Claude API"""

    def __init__(self, api_key: str, base_url: str = "https://api.anthropic.com/v1/messages",
                 model: str = "claude-sonnet-4-20250514", max_tokens: int = 4000,
                 timeout: int = 120):
        self.api_key = api_key
        self.base_url = base_url
        self.model = model
        self.max_tokens = max_tokens
        self.timeout = aiohttp.ClientTimeout(total=timeout)

    async def generate(self, system_prompt: str, user_prompt: str,
                       temperature: float = 0.7) -> str:
        """Базовый метод генерации текста через Claude API

        Args:
            system_prompt: системный промпт
            user_prompt: пользовательский промпт
            temperature: температура генерации

        Returns:
            Сгенерированный текст

        Raises:
            ConfigurationError: не задан ANTHROPIC_API_KEY
            ProviderError: API ответил ошибкой или не ответил
        """
        if not self.api_key:
            raise ConfigurationError("ANTHROPIC_API_KEY не установлен")

        headers = {
            "Content-Type": "application/json",
            "x-api-key": self.api_key,
            "anthropic-version": ANTHROPIC_VERSION,
        }

        payload = {
            "model": self.model,
            "max_tokens": self.max_tokens,
            "temperature": temperature,
            "system": system_prompt,
            "messages": [{"role": "user", "content": user_prompt}]
        }

        try:
            async with aiohttp.ClientSession(timeout=self.timeout) as session:
                async with session.post(self.base_url, headers=headers, json=payload) as resp:
                    if resp.status == 200:
                        data = await resp.json()
                        return data["content"][0]["text"]
                    error = await resp.text()
                    logger.error(f"Claude API error: {error}")
                    raise ProviderError("claude", error[:200], resp.status)
        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            logger.error(f"Claude API exception: {e}")
            raise ProviderError("claude", str(e) or type(e).__name__) from e
        except (KeyError, IndexError, TypeError) as e:
            logger.error(f"Claude API: неожиданный формат ответа: {e}")
            raise ProviderError("claude", f"неожиданный формат ответа: {e}") from e

    async def generate_json(self, system_prompt: str, user_prompt: str,
                            temperature: float = 0.7) -> dict:
        """Генерирует ответ и разбирает из него JSON-объект

        Raises:
            ProviderError: ошибка API
            ValidationError: в ответе нет корректного JSON-объекта
        """
        response = await self.generate(system_prompt, user_prompt, temperature)

        json_str = extract_json_object(response)
        if json_str is None:
            raise ValidationError("В ответе модели нет JSON-объекта")
        try:
            data = json.loads(json_str)
        except json.JSONDecodeError as e:
            logger.error(f"JSON parse error: {e}")
            raise ValidationError(f"Некорректный JSON в ответе модели: {e}") from e
        if not isinstance(data, dict):
            raise ValidationError("Ответ модели должен быть JSON-объектом")
        return data
