"""
Исключения бота.

Внешние границы (вебхук, страница превью, обработчики, задача планировщика)
ловят их, пишут в лог и отвечают админу тостом или HTML-страницей.
"""


class BotError(Exception):
    """Базовое исключение бота"""
    pass


class ConfigurationError(BotError):
    """Не хватает настроек (токен, чат админа, канал, API-ключ)"""
    pass


class ProviderError(BotError):
    """Внешний API (LLM, TTS) ответил ошибкой или не ответил"""

    def __init__(self, provider: str, message: str, status: int = None):
        self.provider = provider
        self.status = status
        super().__init__(f"{provider}: {message}" + (f" (HTTP {status})" if status else ""))


class ValidationError(BotError):
    """Данные не прошли проверку (ответ LLM, ввод админа)"""
    pass


class GenerationError(BotError):
    """Генерация контента не удалась даже после повтора"""
    pass


class StorageError(BotError):
    """Ошибка хранилища аудио"""
    pass


class InvalidTransition(BotError):
    """Недопустимый переход статуса материала"""

    def __init__(self, current: str, new: str):
        self.current = current
        self.new = new
        super().__init__(f"Переход {current} → {new} запрещён")
