"""
AppContext — все зависимости бота в одном объекте.

Собирается один раз в bot.py и передаётся в обработчики
(через данные диспетчера), веб-приложение и задачу планировщика.
"""

import asyncio
from dataclasses import dataclass, field
from typing import Any, Optional

from config import Settings, get_logger

logger = get_logger(__name__)


@dataclass
class AppContext:
    """Зависимости процесса"""
    settings: Settings
    repo: Any                   # ContentRepository
    custom_repo: Any            # CustomContentRepository
    voice_repo: Any             # VoiceRotationRepository
    storage: Any                # StorageGateway
    generator: Any              # ContentGenerator
    synthesizer: Any            # AudioSynthesizer
    delivery: Any               # DeliveryController
    workflow: Any               # ContentWorkflow
    bot: Optional[Any] = None
    pool: Optional[Any] = None
    tasks: set = field(default_factory=set)

    def spawn(self, coro) -> asyncio.Task:
        """Запустить фоновую задачу (ссылка хранится до завершения)"""
        task = asyncio.create_task(coro)
        self.tasks.add(task)
        task.add_done_callback(self.tasks.discard)
        return task

    async def drain(self) -> None:
        """Дождаться фоновых задач (при остановке)"""
        if not self.tasks:
            return
        logger.info(f"⏳ Ожидаем {len(self.tasks)} фоновых задач")
        await asyncio.gather(*self.tasks, return_exceptions=True)
