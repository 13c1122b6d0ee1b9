"""
Вспомогательные функции.

Содержит:
- slugify_title: слаг из заголовка для ключа в хранилище
- generate_slug: уникальный слаг материала
- estimate_duration: оценка длительности аудио
- truncate: обрезка текста под лимиты Telegram
- split_message: разбивка длинного текста на части
- extract_json_object: вырезать JSON-объект из ответа LLM
"""

import math
import re
import secrets
import time
from typing import Optional

from config import CHARS_PER_SECOND, MESSAGE_CHUNK_SIZE

_NON_SLUG_CHARS = re.compile(r"[^a-z0-9]+")

# Самая длинная сущность после html.escape: &#x27;
HTML_ENTITY_MAX_LEN = 6


def slugify_title(title: str, max_length: int = 50) -> str:
    """Слаг из заголовка: нижний регистр, всё кроме [a-z0-9] → '-'

    Арабский заголовок целиком превращается в '-', это ожидаемо:
    уникальность ключу даёт метка времени.
    """
    return _NON_SLUG_CHARS.sub("-", (title or "").lower())[:max_length]


def generate_slug(prefix: str, now_ms: Optional[int] = None) -> str:
    """Слаг материала: {prefix}-{миллисекунды}-{8 hex}"""
    if now_ms is None:
        now_ms = int(time.time() * 1000)
    return f"{prefix}-{now_ms}-{secrets.token_hex(4)}"


def estimate_duration(text: str) -> int:
    """Оценка длительности озвучки в секундах (~10 символов в секунду)"""
    return math.ceil(len(text or "") / CHARS_PER_SECOND)


def truncate(text: str, limit: int) -> str:
    """Обрезает текст до limit символов (с многоточием)"""
    text = text or ""
    if len(text) <= limit:
        return text
    return text[:limit - 1] + "…"


def _entity_safe_cut(text: str, cut: int) -> int:
    """Сдвигает точку разреза назад, если она попала внутрь HTML-сущности (&amp; и т.п.)"""
    amp = text.rfind("&", max(0, cut - HTML_ENTITY_MAX_LEN), cut)
    if amp > 0 and ";" not in text[amp:cut]:
        return amp
    return cut


def split_message(text: str, chunk_size: int = MESSAGE_CHUNK_SIZE) -> list[str]:
    """Разбивает текст на части не длиннее chunk_size

    Старается резать по переносу строки, HTML-сущности не разрывает.
    """
    text = text or ""
    if len(text) <= chunk_size:
        return [text]

    chunks = []
    while len(text) > chunk_size:
        cut = text.rfind("\n", 0, chunk_size)
        if cut <= 0:
            cut = _entity_safe_cut(text, chunk_size)
        chunks.append(text[:cut])
        text = text[cut:].lstrip("\n")
    if text:
        chunks.append(text)
    return chunks


def extract_json_object(response: str) -> Optional[str]:
    """Вырезает JSON-объект из ответа модели (между первой '{' и последней '}')"""
    if not response:
        return None
    start = response.find('{')
    end = response.rfind('}') + 1
    if start >= 0 and end > start:
        return response[start:end]
    return None
