# File: doc_scout/report/sink.py
"""doc_scout.report.sink: Буферизация записей и дозапись их в JSON-файл.

Записи копятся в памяти и сбрасываются на диск каждые ``save_every`` страниц
и при завершении обхода. Перед записью применяется второй, контентный фильтр.
Файл только дополняется: повторный запуск допишет дубликаты.
"""

from __future__ import annotations

import asyncio
import json
from pathlib import Path
from typing import Callable, List, Optional, Sequence, Tuple

from doc_scout.crawler.models import CrawlRecord
from doc_scout.logger import get_logger
from doc_scout.parser.page_filter import PGP_BEGIN, PGP_END

__all__: Sequence[str] = (
    "ContentSink",
    "rejection_reason",
    "escape_special_chars",
    "wrap_text",
)

logger = get_logger("sink")

_ESCAPES: Tuple[Tuple[str, str], ...] = (
    ("\\", "\\\\"),
    ('"', '\\"'),
    ("\b", "\\b"),
    ("\f", "\\f"),
    ("\n", "\\n"),
    ("\r", "\\r"),
    ("\t", "\\t"),
)

_CONTENT_FILTERS: Tuple[Tuple[str, Callable[[CrawlRecord], bool]], ...] = (
    ("pdf-url", lambda r: ".pdf" in r.url),
    ("browser-extension-url", lambda r: "chrome-extension://" in r.url),
    ("embedded-pdf", lambda r: "<embed" in r.text_content or "<object" in r.text_content),
    ("pgp-key", lambda r: PGP_BEGIN in r.text_content or PGP_END in r.text_content),
    ("non-ascii", lambda r: any(ord(ch) > 127 for ch in r.text_content)),
)


def rejection_reason(record: CrawlRecord) -> Optional[str]:
    """Имя первого сработавшего контентного фильтра или None."""
    for name, check in _CONTENT_FILTERS:
        if check(record):
            return name
    return None


def escape_special_chars(text: str) -> str:
    """Экранирует обратный слеш, кавычки и управляющие символы."""
    for raw, escaped in _ESCAPES:
        text = text.replace(raw, escaped)
    return text


def wrap_text(text: str, width: int = 80) -> str:
    """Режет каждый абзац на строки фиксированной ширины, сохраняя границы абзацев."""
    return "\n".join(
        "\n".join(paragraph[i:i + width] for i in range(0, len(paragraph), width)) if paragraph else ""
        for paragraph in text.split("\n")
    )


class ContentSink:
    """Буфер записей с периодическим сбросом в файл."""

    def __init__(self, output_path: Path | str, *, save_every: int = 10, wrap_width: int = 80) -> None:
        self.output_path = Path(output_path)
        self.save_every = save_every
        self.wrap_width = wrap_width
        self.written = 0
        self.dropped = 0
        self._buffer: List[CrawlRecord] = []
        self._lock = asyncio.Lock()

    @property
    def pending(self) -> int:
        return len(self._buffer)

    async def submit(self, record: CrawlRecord, page_count: int) -> None:
        """Кладёт запись в буфер; на каждой save_every-й странице сбрасывает его."""
        self._buffer.append(record)
        if page_count % self.save_every == 0:
            await self.flush()

    async def flush(self) -> int:
        """Фильтрует, сериализует и дописывает буфер в файл. Возвращает число записанных."""
        async with self._lock:
            batch, self._buffer = self._buffer, []
            if not batch:
                return 0
            kept: List[CrawlRecord] = []
            for record in batch:
                reason = rejection_reason(record)
                if reason:
                    self.dropped += 1
                    logger.info("Dropping %s at save time: %s", record.url, reason)
                else:
                    kept.append(record)
            if not kept:
                return 0
            payload = "".join(self._render(record) for record in kept)
            # the worker thread finishes the write even if this task is cancelled
            self.written += len(kept)
            try:
                await asyncio.to_thread(self._append, payload)
            except OSError:
                self.written -= len(kept)
                logger.exception("Error writing results to file %s", self.output_path)
                return 0
            logger.debug("Flushed %d records to %s", len(kept), self.output_path)
            return len(kept)

    def _render(self, record: CrawlRecord) -> str:
        fields = record.to_output()
        obj = {
            key: value if key in ("url", "pageType") else wrap_text(escape_special_chars(value), self.wrap_width)
            for key, value in fields.items()
        }
        return json.dumps(obj, ensure_ascii=False, indent=2) + "\n"

    def _append(self, payload: str) -> None:
        self.output_path.parent.mkdir(parents=True, exist_ok=True)
        with self.output_path.open("a", encoding="utf-8") as f:
            f.write(payload)
