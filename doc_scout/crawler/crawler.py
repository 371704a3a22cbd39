# === FILE: doc_scout/crawler/crawler.py ===
from __future__ import annotations

import asyncio
import contextlib
import logging
from typing import Awaitable, Callable, Iterable, List, Optional, Sequence, Tuple, TypeVar

from doc_scout.classifier import PageClassifier, UrlPatternClassifier
from doc_scout.config import CrawlerConfig
from doc_scout.crawler.fetcher import PageFetcher
from doc_scout.crawler.link_extractor import extract_links
from doc_scout.crawler.models import CrawlRecord, CrawlState, Verdict
from doc_scout.logger import get_logger
from doc_scout.parser.content_extractor import ContentExtractor, build_record
from doc_scout.parser.html_parser import parse_html
from doc_scout.parser.page_filter import PageFilter
from doc_scout.report.sink import ContentSink
from doc_scout.utils import batched, is_allowed_domain, is_excluded_url, normalize_url

__all__ = ("DocCrawler", "run_in_batches")

T = TypeVar("T")
R = TypeVar("R")


async def run_in_batches(
    items: Sequence[T],
    batch_size: int,
    worker: Callable[[T], Awaitable[List[R]]],
) -> List[R]:
    """Run *worker* over *items*, at most *batch_size* at a time.

    Each batch is gathered and fully joined before the next one starts. The cap
    applies to one call only: workers that call this again open their own
    batches, so nested levels are not bounded together.
    """
    results: List[R] = []
    for batch in batched(items, batch_size):
        for chunk in await asyncio.gather(*(worker(item) for item in batch)):
            results.extend(chunk)
    return results


class DocCrawler:
    """Рекурсивный обход документации с фильтрами, классификацией и извлечением контента.

    One instance serves one crawl; ``state`` can be shared to continue
    deduplicating across several entry points.
    """

    def __init__(
        self,
        config: CrawlerConfig,
        fetcher: PageFetcher,
        *,
        classifier: Optional[PageClassifier] = None,
        sink: Optional[ContentSink] = None,
        state: Optional[CrawlState] = None,
        page_filter: Optional[PageFilter] = None,
        extractor: Optional[ContentExtractor] = None,
    ) -> None:
        self.config = config
        self.fetcher = fetcher
        self.classifier = classifier or UrlPatternClassifier(config.page_type_rules)
        self.sink = sink
        self.state = state or CrawlState()
        self.page_filter = page_filter or PageFilter()
        self.extractor = extractor or ContentExtractor(config.content_selector, config.code_selector)
        self.logger = get_logger("crawler")
        self._fetch_slots: Optional[asyncio.Semaphore] = (
            asyncio.Semaphore(config.max_concurrent_fetches) if config.max_concurrent_fetches else None
        )

    async def crawl(self, url: Optional[str] = None, depth: int = 0) -> List[CrawlRecord]:
        """Crawl from *url* (the configured entry URL by default) down to ``max_depth``.

        Returns every record built in this subtree. Never raises for a single
        bad page.
        """
        url = url or self.config.start_url
        try:
            records, links = await self._visit(url, depth)
        except Exception as e:
            self.logger.error("Error processing URL %s: %s", url, e, exc_info=self.logger.isEnabledFor(logging.DEBUG))
            return []
        if not links:
            return records
        children = await run_in_batches(
            links,
            self.config.max_concurrent_crawls,
            lambda link: self.crawl(link, depth + 1),
        )
        return records + children

    async def scrape(self, urls: Iterable[str]) -> List[CrawlRecord]:
        """Extract a fixed list of pages without following their links."""

        async def _one(url: str) -> List[CrawlRecord]:
            try:
                records, _ = await self._visit(url, 0, follow_links=False)
                return records
            except Exception as e:
                self.logger.error("Error processing URL %s: %s", url, e)
                return []

        return await run_in_batches(list(urls), self.config.max_concurrent_crawls, _one)

    async def _visit(
        self, url: str, depth: int, *, follow_links: bool = True
    ) -> Tuple[List[CrawlRecord], List[str]]:
        """Process one URL; return its record (if any) and the links to crawl next."""
        if depth > self.config.max_depth or is_excluded_url(url):
            return [], []

        resolved = normalize_url(url, self.config.site_root)
        if is_excluded_url(resolved):
            return [], []
        if not is_allowed_domain(resolved, self.config.domain):
            self.logger.info("Skipping URL outside %s: %s", self.config.domain, resolved)
            return [], []

        page_count = await self.state.claim(resolved)
        if page_count is None:
            return [], []
        self.logger.info("Page Count: %d (depth %d) %s", page_count, depth, resolved)

        html = await self._fetch(resolved)
        if not html:
            return [], []

        soup = parse_html(html, self.config.html_parser)
        verdict = self.page_filter.evaluate(soup)
        if verdict.action is Verdict.SKIP:
            self.logger.info("Skipping page (%s): %s", verdict.reason, resolved)
            return [], []

        links = self._child_links(html, depth) if follow_links else []
        if verdict.action is Verdict.NAVIGATE:
            self.logger.info("Skipping scraping content (%s), following %d links: %s", verdict.reason, len(links), resolved)
            return [], links

        page_type = await self.classifier.classify(resolved)
        if page_type not in self.config.allowed_page_types:
            self.logger.info("Skipping page with unsupported type %s: %s", page_type, resolved)
            return [], []

        record = build_record(resolved, page_type, self.extractor.extract(soup))
        if self.sink is not None:
            await self.sink.submit(record, page_count)
        return [record], links

    def _child_links(self, html: str, depth: int) -> List[str]:
        if depth >= self.config.max_depth:
            return []
        return [link for link in extract_links(html) if link]

    async def _fetch(self, url: str) -> str:
        slot = self._fetch_slots if self._fetch_slots is not None else contextlib.nullcontext()
        async with slot:
            return await self.fetcher.fetch(url)
