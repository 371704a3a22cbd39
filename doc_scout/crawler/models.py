# doc_scout/crawler/models.py
"""
Data models for the DocScout crawler.
"""
from __future__ import annotations

import asyncio
import enum
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, FrozenSet, List, Optional, Set


@dataclass(frozen=True, slots=True)
class CrawlRecord:
    """One extracted documentation page, ready for the sink.

    Content fields hold serialized (JSON) text already reduced to printable ASCII.
    """

    url: str
    page_type: str
    title: str
    text_content: str
    table_content: str
    code_content: str
    image_content: str

    def to_output(self) -> Dict[str, str]:
        """Field names as written to the output file."""
        return {
            "url": self.url,
            "pageType": self.page_type,
            "title": self.title,
            "body": self.text_content,
            "code": self.code_content,
            "table": self.table_content,
            "images": self.image_content,
        }


class Verdict(str, enum.Enum):
    SKIP = "skip"
    NAVIGATE = "navigate"
    EXTRACT = "extract"


@dataclass(frozen=True, slots=True)
class PageVerdict:
    """Outcome of the page filter chain; *reason* names the predicate that matched."""

    action: Verdict
    reason: Optional[str] = None


class CrawlState:
    """Visited set and page counter shared by every branch of one crawl.

    :meth:`claim` is the only way to mark a URL; check, insert and increment
    happen under one lock.
    """

    def __init__(self) -> None:
        self._visited: Set[str] = set()
        self._page_count = 0
        self._lock = asyncio.Lock()

    async def claim(self, url: str) -> Optional[int]:
        """Return the new page count if *url* was unclaimed, else ``None``."""
        async with self._lock:
            if url in self._visited:
                return None
            self._visited.add(url)
            self._page_count += 1
            return self._page_count

    @property
    def visited(self) -> FrozenSet[str]:
        return frozenset(self._visited)

    @property
    def page_count(self) -> int:
        return self._page_count


@dataclass(slots=True)
class CrawlSummary:
    """What a finished crawl reports back to the caller."""

    pages_visited: int
    records: List[CrawlRecord] = field(default_factory=list)
    written: int = 0
    dropped: int = 0
    output_path: Optional[Path] = None
    duration: float = 0.0

    def to_dict(self) -> Dict[str, object]:
        return {
            "pages_visited": self.pages_visited,
            "records": len(self.records),
            "written": self.written,
            "dropped": self.dropped,
            "output_path": str(self.output_path) if self.output_path else None,
            "duration": round(self.duration, 3),
        }
