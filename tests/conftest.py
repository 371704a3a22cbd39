# File: tests/conftest.py
import asyncio
import json
from pathlib import Path
from typing import Dict, Iterable, List, Optional

import pytest

from doc_scout.config import CrawlerConfig

ROOT = "https://docs.example.com"


class FakeFetcher:
    """In-memory fetcher: serves *pages*, records calls and peak concurrency."""

    def __init__(
        self,
        pages: Dict[str, str],
        *,
        delay: float = 0.0,
        fail: Iterable[str] = (),
    ) -> None:
        self.pages = pages
        self.delay = delay
        self.fail = set(fail)
        self.calls: List[str] = []
        self.in_flight = 0
        self.max_in_flight = 0

    async def fetch(self, url: str) -> str:
        self.calls.append(url)
        self.in_flight += 1
        self.max_in_flight = max(self.max_in_flight, self.in_flight)
        try:
            await asyncio.sleep(self.delay)
            if url in self.fail:
                raise RuntimeError(f"boom: {url}")
            return self.pages.get(url, "")
        finally:
            self.in_flight -= 1


def html_page(
    body: str = "",
    *,
    title: str = "Doc",
    meta: Optional[Dict[str, str]] = None,
) -> str:
    """Build a full HTML document; *meta* maps meta name -> content."""
    metas = "".join(f'<meta name="{k}" content="{v}">' for k, v in (meta or {}).items())
    return f"<html><head><title>{title}</title>{metas}</head><body>{body}</body></html>"


def article(*paragraphs: str, links: Iterable[str] = ()) -> str:
    """Body of a regular documentation page with an article container and links."""
    ps = "".join(f"<p>{p}</p>" for p in paragraphs)
    anchors = "".join(f'<a href="{href}">{href}</a>' for href in links)
    return f'<div class="awsdocs-container">{ps}</div>{anchors}'


def read_records(path: Path) -> List[dict]:
    """Parse the sink output: a stream of concatenated JSON objects."""
    text = path.read_text(encoding="utf-8") if path.exists() else ""
    decoder = json.JSONDecoder()
    records, idx = [], 0
    while True:
        while idx < len(text) and text[idx].isspace():
            idx += 1
        if idx >= len(text):
            return records
        obj, idx = decoder.raw_decode(text, idx)
        records.append(obj)


@pytest.fixture()
def make_config(tmp_path):
    """Factory for CrawlerConfig pointed at a temp output directory."""

    def _make(**overrides) -> CrawlerConfig:
        values = {
            "root_url": ROOT,
            "output_dir": tmp_path / "data",
            "output_filename": "out.json",
            "max_depth": 2,
            "max_concurrent_crawls": 10,
            "page_type_rules": {r"/userguide/": "UserGuidePage", r"/devguide/": "DevGuidePage"},
            "crawl_timeout": 5.0,
            "save_every": 1000,
        }
        values.update(overrides)
        return CrawlerConfig(**values)

    return _make


@pytest.fixture()
def basic_config(make_config) -> CrawlerConfig:
    return make_config()
