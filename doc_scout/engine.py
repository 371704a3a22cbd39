# File: doc_scout/engine.py
"""doc_scout.engine: orchestration layer: сборка краулера, общий таймаут и финальный сброс результатов."""

from __future__ import annotations

import asyncio
import contextlib
import time
from typing import Awaitable, Callable, Iterable, List, Optional

from doc_scout.classifier import PageClassifier
from doc_scout.config import CrawlerConfig, load_config
from doc_scout.crawler.crawler import DocCrawler
from doc_scout.crawler.fetcher import Fetcher, PageFetcher
from doc_scout.crawler.models import CrawlRecord, CrawlState, CrawlSummary
from doc_scout.logger import logger
from doc_scout.report.sink import ContentSink

__all__ = ["Engine", "start_crawl", "start_scrape"]


def _prepare_output(cfg: CrawlerConfig) -> None:
    if not cfg.output_dir.exists():
        logger.info("Creating directory: %s", cfg.output_dir)
        cfg.output_dir.mkdir(parents=True, exist_ok=True)
    else:
        logger.info("Directory already exists: %s", cfg.output_dir)


async def _run(
    cfg: CrawlerConfig,
    job: Callable[[DocCrawler], Awaitable[List[CrawlRecord]]],
    fetcher: Optional[PageFetcher],
    classifier: Optional[PageClassifier],
) -> CrawlSummary:
    _prepare_output(cfg)
    sink = ContentSink(cfg.output_path, save_every=cfg.save_every, wrap_width=cfg.wrap_width)
    state = CrawlState()
    start = time.monotonic()
    fetcher_cm = Fetcher(cfg) if fetcher is None else contextlib.nullcontext(fetcher)

    async with fetcher_cm as active_fetcher:
        crawler = DocCrawler(cfg, active_fetcher, classifier=classifier, sink=sink, state=state)
        try:
            records = await asyncio.wait_for(job(crawler), timeout=cfg.crawl_timeout)
        except asyncio.TimeoutError:
            logger.error("Crawl did not finish within %s seconds", cfg.crawl_timeout)
            raise
        finally:
            await sink.flush()
            logger.info("Total pages crawled: %d", state.page_count)

    summary = CrawlSummary(
        pages_visited=state.page_count,
        records=records,
        written=sink.written,
        dropped=sink.dropped,
        output_path=cfg.output_path,
        duration=time.monotonic() - start,
    )
    logger.info(
        "Finished: %d pages, %d records, %d written, %d dropped in %.2f s",
        summary.pages_visited, len(records), summary.written, summary.dropped, summary.duration,
    )
    return summary


async def start_crawl(
    cfg: CrawlerConfig,
    *,
    fetcher: Optional[PageFetcher] = None,
    classifier: Optional[PageClassifier] = None,
) -> CrawlSummary:
    """Рекурсивный обход от entry_url; результаты дописываются в cfg.output_path."""
    logger.info("Starting crawl at %s (max depth %d)", cfg.start_url, cfg.max_depth)
    return await _run(cfg, lambda crawler: crawler.crawl(cfg.start_url, 0), fetcher, classifier)


async def start_scrape(
    cfg: CrawlerConfig,
    urls: Iterable[str],
    *,
    fetcher: Optional[PageFetcher] = None,
    classifier: Optional[PageClassifier] = None,
) -> CrawlSummary:
    """Извлечение заданного списка страниц без перехода по ссылкам."""
    targets = list(urls)
    logger.info("Starting scrape of %d URLs", len(targets))
    return await _run(cfg, lambda crawler: crawler.scrape(targets), fetcher, classifier)


class Engine:
    """Фасад для CLI и тестов: загрузка конфига и синхронный запуск обхода."""

    @staticmethod
    def load_config(path: Optional[str]) -> CrawlerConfig:
        """Загружает конфиг из YAML/JSON."""
        return load_config(path)

    def __init__(
        self,
        config: CrawlerConfig,
        *,
        fetcher: Optional[PageFetcher] = None,
        classifier: Optional[PageClassifier] = None,
    ) -> None:
        self.config = config
        self.fetcher = fetcher
        self.classifier = classifier

    def start_crawl(self) -> CrawlSummary:
        """Запускает обход в новом event loop и возвращает сводку."""
        try:
            return asyncio.run(start_crawl(self.config, fetcher=self.fetcher, classifier=self.classifier))
        except Exception as exc:
            logger.error("Crawl failed: %s", exc)
            raise

    def start_scrape(self, urls: Iterable[str]) -> CrawlSummary:
        try:
            return asyncio.run(
                start_scrape(self.config, urls, fetcher=self.fetcher, classifier=self.classifier)
            )
        except Exception as exc:
            logger.error("Scrape failed: %s", exc)
            raise
