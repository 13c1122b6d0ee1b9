"""
Модуль локализации бота.
Все тексты для админа, канала и страницы превью — на арабском (ar).
"""

import yaml
from pathlib import Path
from typing import Any

# Загружаем переводы при импорте модуля
_translations: dict[str, dict] = {}
_locales_dir = Path(__file__).parent

SUPPORTED_LANGUAGES = ['ar']
DEFAULT_LANGUAGE = 'ar'


def _load_translations():
    """Загрузить все файлы переводов"""
    global _translations
    for lang in SUPPORTED_LANGUAGES:
        file_path = _locales_dir / f"{lang}.yaml"
        if file_path.exists():
            with open(file_path, 'r', encoding='utf-8') as f:
                _translations[lang] = yaml.safe_load(f) or {}
        else:
            _translations[lang] = {}


def _get_nested(data: dict, keys: list[str]) -> Any:
    """Получить вложенное значение по списку ключей"""
    for key in keys:
        if isinstance(data, dict) and key in data:
            data = data[key]
        else:
            return None
    return data


def t(key: str, lang: str = DEFAULT_LANGUAGE, **kwargs) -> str:
    """
    Получить перевод по ключу.

    Args:
        key: Ключ перевода (например, 'toasts.approved')
        lang: Код языка
        **kwargs: Переменные для подстановки в строку

    Returns:
        Переведённая строка или ключ, если перевод не найден

    Example:
        t('toasts.creating', type='podcast', level='B1')
    """
    if not _translations:
        _load_translations()

    if lang not in SUPPORTED_LANGUAGES:
        lang = DEFAULT_LANGUAGE

    value = _get_nested(_translations.get(lang, {}), key.split('.'))
    if value is None:
        # Перевод не найден - возвращаем ключ
        return key

    if kwargs and isinstance(value, str):
        try:
            return value.format(**kwargs)
        except KeyError:
            return value
    return value


# Загружаем переводы при импорте
_load_translations()
