# File: doc_scout/utils.py
"""doc_scout.utils: Утилиты для URL (нормализация, исключения, домен) и очистки текста."""

from __future__ import annotations

import re
from typing import Iterator, List, Sequence, TypeVar
from urllib.parse import urlparse

from doc_scout.logger import logger

__all__: Sequence[str] = (
    "normalize_url",
    "is_excluded_url",
    "is_allowed_domain",
    "sanitize_ascii",
    "batched",
)

T = TypeVar("T")

_NON_PRINTABLE_ASCII_RE = re.compile(r"[^\x20-\x7E]")


def normalize_url(url: str, site_root: str) -> str:
    """Приводит ссылку к абсолютному URL.

    Убирает одну завершающую точку; ссылки со схемой http(s) остаются как есть,
    остальные приклеиваются к корню сайта. Регистр, query и percent-кодирование
    не трогаются.
    """
    cleaned = url[:-1] if url.endswith(".") else url
    if cleaned.startswith(("http://", "https://")):
        normalized = cleaned
    elif cleaned.startswith("/"):
        normalized = site_root.rstrip("/") + cleaned
    else:
        normalized = f"{site_root.rstrip('/')}/{cleaned}"
    logger.debug("Normalized URL: %s -> %s", url, normalized)
    return normalized


def is_excluded_url(url: str) -> bool:
    """PDF, RSS и ссылки с фрагментом не обходятся."""
    return url.endswith(".pdf") or ".rss" in url or "#" in url


def is_allowed_domain(url: str, domain: str) -> bool:
    """Проверяет, что хост URL совпадает с доменом или является его поддоменом."""
    host = (urlparse(url).hostname or "").lower()
    domain = domain.lower()
    return bool(host) and (host == domain or host.endswith("." + domain))


def sanitize_ascii(text: str) -> str:
    """Удаляет всё, что вне печатного ASCII (0x20–0x7E), включая переводы строк."""
    return _NON_PRINTABLE_ASCII_RE.sub("", text)


def batched(items: Sequence[T], size: int) -> Iterator[List[T]]:
    """Режет последовательность на пакеты фиксированного размера (последний может быть короче)."""
    if size < 1:
        raise ValueError("size must be >= 1")
    for start in range(0, len(items), size):
        yield list(items[start:start + size])
