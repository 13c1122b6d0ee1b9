"""
Тест вспомогательных функций: слаги, длительность, разбивка текста.
"""

from core.helpers import (
    estimate_duration, extract_json_object, generate_slug, slugify_title,
    split_message, truncate,
)


def test_slugify_title():
    assert slugify_title("Hello World!") == "hello-world-"
    assert slugify_title("عنوان الحلقة") == "-"
    assert len(slugify_title("a" * 80)) == 50


def test_generate_slug_format_and_uniqueness():
    slug = generate_slug("podcast", now_ms=1714557600000)
    prefix, ms, suffix = slug.split("-")
    assert prefix == "podcast"
    assert ms == "1714557600000"
    assert len(suffix) == 8
    int(suffix, 16)

    # Одна и та же миллисекунда, разные слаги
    slugs = {generate_slug("podcast", now_ms=1) for _ in range(50)}
    assert len(slugs) == 50


def test_estimate_duration():
    assert estimate_duration("") == 0
    assert estimate_duration("x" * 10) == 1
    assert estimate_duration("x" * 11) == 2


def test_truncate():
    assert truncate("abc", 5) == "abc"
    assert truncate("abcdef", 4) == "abc…"
    assert len(truncate("x" * 500, 300)) == 300
    assert truncate(None, 3) == ""


def test_split_message_prefers_newlines():
    text = "a" * 10 + "\n" + "b" * 10
    assert split_message(text, chunk_size=15) == ["a" * 10, "b" * 10]


def test_split_message_hard_cut():
    chunks = split_message("x" * 25, chunk_size=10)
    assert chunks == ["x" * 10, "x" * 10, "x" * 5]


def test_split_message_short_text():
    assert split_message("مرحبا") == ["مرحبا"]


def test_extract_json_object():
    assert extract_json_object('Here you go: {"a": 1} thanks') == '{"a": 1}'
    assert extract_json_object("no json") is None
    assert extract_json_object("") is None


def test_split_message_keeps_html_entities_whole():
    text = "x" * 8 + "&amp;" + "y" * 5
    assert split_message(text, chunk_size=10) == ["x" * 8, "&amp;" + "y" * 5]

    # Разрез сразу после сущности не сдвигается
    text = "x" * 5 + "&amp;" + "y" * 10
    assert split_message(text, chunk_size=10)[0] == "x" * 5 + "&amp;"
