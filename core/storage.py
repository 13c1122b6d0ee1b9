"""
Хранилище аудиофайлов.

Ключ объекта: audio/{год}/{месяц}/{слаг}-{ISO-время}.mp3
Бэкенды:
- S3Backend: бакет S3 (boto3, блокирующие вызовы в отдельном потоке)
- LocalBackend: локальная папка, файлы раздаёт веб-приложение по /media/

Использование:
    from core.storage import create_storage

    storage = create_storage(settings)
    stored = await storage.upload(audio_bytes, "عنوان الحلقة")
    data = await storage.download(StorageKey(stored.key))
"""

import asyncio
from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional

import aiohttp
import boto3
from botocore.exceptions import BotoCoreError, ClientError

from config import get_logger
from .errors import StorageError
from .helpers import slugify_title
from .types import StorageRef, StorageKey, LegacyUrl

logger = get_logger(__name__)

AUDIO_CONTENT_TYPE = "audio/mpeg"


@dataclass
class StoredAudio:
    """Результат загрузки: публичный URL и ключ объекта"""
    url: str
    key: str


def build_audio_key(title_hint: str, now: Optional[datetime] = None) -> str:
    """Ключ объекта для аудио

    Args:
        title_hint: заголовок материала (для слага)
        now: момент загрузки (UTC), по умолчанию — текущий

    Returns:
        audio/{YYYY}/{MM}/{slug}-{timestamp}.mp3, в timestamp ':' заменены на '-'
    """
    now = now or datetime.now(timezone.utc)
    timestamp = now.astimezone(timezone.utc).strftime("%Y-%m-%dT%H:%M:%S")
    timestamp = f"{timestamp}.{now.microsecond // 1000:03d}Z".replace(":", "-")
    slug = slugify_title(title_hint)
    return f"audio/{now.year}/{now.month:02d}/{slug}-{timestamp}.mp3"


# ==================== БЭКЕНДЫ ====================

class S3Backend:
    """Бакет S3"""

    def __init__(self, bucket: str, region: str = "us-east-1", client=None):
        if not bucket:
            raise StorageError("Не задан бакет для аудио (AUDIO_BUCKET)")
        self.bucket = bucket
        self.region = region
        self.client = client or boto3.client("s3", region_name=region)

    def url_for(self, key: str) -> str:
        if self.region == "us-east-1":
            return f"https://{self.bucket}.s3.amazonaws.com/{key}"
        return f"https://{self.bucket}.s3.{self.region}.amazonaws.com/{key}"

    async def put(self, key: str, data: bytes) -> None:
        try:
            await asyncio.to_thread(
                self.client.put_object,
                Bucket=self.bucket,
                Key=key,
                Body=data,
                ContentType=AUDIO_CONTENT_TYPE,
            )
        except (BotoCoreError, ClientError) as exc:
            raise StorageError(f"Не удалось загрузить {key}: {exc}") from exc

    async def get(self, key: str) -> bytes:
        try:
            response = await asyncio.to_thread(self.client.get_object, Bucket=self.bucket, Key=key)
            return await asyncio.to_thread(response["Body"].read)
        except (BotoCoreError, ClientError) as exc:
            raise StorageError(f"Не удалось скачать {key}: {exc}") from exc

    async def exists(self, key: str) -> bool:
        try:
            await asyncio.to_thread(self.client.head_object, Bucket=self.bucket, Key=key)
            return True
        except ClientError as exc:
            code = exc.response.get("Error", {}).get("Code", "")
            if code in ("404", "NoSuchKey", "NotFound"):
                return False
            raise StorageError(f"Не удалось проверить {key}: {exc}") from exc
        except BotoCoreError as exc:
            raise StorageError(f"Не удалось проверить {key}: {exc}") from exc

    async def delete(self, key: str) -> bool:
        """True если объект существовал и удалён"""
        if not await self.exists(key):
            return False
        try:
            await asyncio.to_thread(self.client.delete_object, Bucket=self.bucket, Key=key)
        except (BotoCoreError, ClientError) as exc:
            raise StorageError(f"Не удалось удалить {key}: {exc}") from exc
        return True


class LocalBackend:
    """Локальная папка (файлы раздаются по {base_url}/media/{key})"""

    def __init__(self, root: Path, base_url: str):
        self.root = Path(root)
        self.base_url = base_url.rstrip("/")

    def _path(self, key: str) -> Path:
        path = (self.root / key).resolve()
        if self.root.resolve() not in path.parents:
            raise StorageError(f"Недопустимый ключ: {key}")
        return path

    def url_for(self, key: str) -> str:
        return f"{self.base_url}/media/{key}"

    async def put(self, key: str, data: bytes) -> None:
        path = self._path(key)

        def _write():
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_bytes(data)

        try:
            await asyncio.to_thread(_write)
        except OSError as exc:
            raise StorageError(f"Не удалось записать {key}: {exc}") from exc

    async def get(self, key: str) -> bytes:
        path = self._path(key)
        try:
            return await asyncio.to_thread(path.read_bytes)
        except OSError as exc:
            raise StorageError(f"Не удалось прочитать {key}: {exc}") from exc

    async def exists(self, key: str) -> bool:
        return await asyncio.to_thread(self._path(key).is_file)

    async def delete(self, key: str) -> bool:
        path = self._path(key)
        try:
            await asyncio.to_thread(path.unlink)
            return True
        except FileNotFoundError:
            return False
        except OSError as exc:
            raise StorageError(f"Не удалось удалить {key}: {exc}") from exc


# ==================== ШЛЮЗ ====================

class StorageGateway:
    """Загрузка, проверка, удаление и скачивание аудио"""

    def __init__(self, backend, download_timeout: int = 60):
        self.backend = backend
        self.download_timeout = download_timeout

    async def upload(self, data: bytes, title_hint: str, now: Optional[datetime] = None) -> StoredAudio:
        """Загружает аудио и возвращает URL и ключ

        Raises:
            StorageError: пустые данные или ошибка бэкенда
        """
        if not data:
            raise StorageError("Пустые аудиоданные")
        key = build_audio_key(title_hint, now)
        await self.backend.put(key, data)
        logger.info(f"💾 Аудио сохранено: {key} ({len(data)} байт)")
        return StoredAudio(url=self.backend.url_for(key), key=key)

    async def exists(self, key: str) -> bool:
        return await self.backend.exists(key)

    async def delete(self, key: str) -> bool:
        """Удаляет аудио, False если такого ключа не было"""
        deleted = await self.backend.delete(key)
        if deleted:
            logger.info(f"🗑 Аудио удалено: {key}")
        else:
            logger.warning(f"⚠️ Аудио для удаления не найдено: {key}")
        return deleted

    def url_for(self, ref: StorageRef) -> str:
        if isinstance(ref, LegacyUrl):
            return ref.url
        return self.backend.url_for(ref.key)

    async def download(self, ref: StorageRef) -> bytes:
        """Скачивает аудио по ссылке (ключ или старый URL)"""
        if isinstance(ref, StorageKey):
            return await self.backend.get(ref.key)

        timeout = aiohttp.ClientTimeout(total=self.download_timeout)
        try:
            async with aiohttp.ClientSession(timeout=timeout) as session:
                async with session.get(ref.url) as resp:
                    if resp.status != 200:
                        raise StorageError(f"Не удалось скачать {ref.url}: HTTP {resp.status}")
                    return await resp.read()
        except (aiohttp.ClientError, asyncio.TimeoutError) as exc:
            raise StorageError(f"Не удалось скачать {ref.url}: {exc}") from exc


def create_storage(settings) -> StorageGateway:
    """Выбор бэкенда по настройкам"""
    if settings.storage_backend == "s3":
        logger.info(f"☁️ Хранилище аудио: S3 ({settings.audio_bucket})")
        backend = S3Backend(settings.audio_bucket, settings.aws_region)
    else:
        logger.info(f"📁 Хранилище аудио: {settings.media_dir}")
        backend = LocalBackend(settings.media_dir, settings.public_base_url)
    return StorageGateway(backend)
