# doc_scout/crawler/fetcher.py
"""
Fetcher module: HTTP GET with retry/backoff and per-request timeout.

The fetcher never raises for transport problems: any failure is logged and
reported as an empty string, which the crawler treats as "nothing to process".
"""
from __future__ import annotations

import asyncio
from typing import Optional, Protocol, Sequence

from aiohttp import ClientError, ClientSession, ClientTimeout, InvalidURL

from doc_scout.config import CrawlerConfig
from doc_scout.logger import get_logger

__all__ = ("PageFetcher", "Fetcher", "RETRY_STATUS")

RETRY_STATUS: Sequence[int] = tuple(range(500, 600)) + (429,)


class PageFetcher(Protocol):
    async def fetch(self, url: str) -> str:
        ...


class Fetcher:
    """Fetches HTML pages over aiohttp; owns its session when used as a context manager."""

    def __init__(
        self,
        config: CrawlerConfig,
        session: Optional[ClientSession] = None,
        retry_status: Sequence[int] = RETRY_STATUS,
    ) -> None:
        self.config = config
        self.session = session
        self._owns_session = session is None
        self._retry_status = retry_status
        self.logger = get_logger("fetcher")

    async def __aenter__(self) -> Fetcher:
        if self.session is None:
            self.session = ClientSession(
                timeout=ClientTimeout(total=self.config.timeout),
                headers={"User-Agent": self.config.user_agent},
                raise_for_status=False,
            )
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        if self._owns_session and self.session and not self.session.closed:
            await self.session.close()

    async def fetch(self, url: str) -> str:
        """
        Fetch *url* and return its HTML.

        Returns "" on 4xx, non-HTML content, invalid URL, timeout or when retries
        are exhausted.
        """
        if not self.session:
            raise RuntimeError("Session not initialized")

        attempts = 0
        while True:
            try:
                async with self.session.get(url) as resp:
                    if resp.status in self._retry_status:
                        raise ClientError(f"Retryable status {resp.status}")
                    if resp.status != 200:
                        self.logger.warning("Error fetching HTML for URL %s: HTTP %s", url, resp.status)
                        return ""
                    ctype = resp.headers.get("Content-Type", "").lower()
                    if "html" not in ctype:
                        self.logger.info("Skipping non-HTML response %s (%s)", url, ctype or "unknown")
                        return ""
                    return await resp.text(errors="replace")
            except (InvalidURL, ValueError) as e:
                self.logger.warning("Error fetching HTML for URL %s: invalid URL - %s", url, e)
                return ""
            except asyncio.TimeoutError:
                # no retry on timeout
                self.logger.warning("Error fetching HTML for URL %s: timed out", url)
                return ""
            except ClientError as e:
                attempts += 1
                if attempts > self.config.retry_times:
                    self.logger.warning("Error fetching HTML for URL %s: %s", url, e)
                    return ""
                # exponential backoff, cap at 60s
                backoff = min(self.config.retry_backoff * 2 ** (attempts - 1), 60)
                self.logger.debug("Retry %d/%d for %s after %.2f s", attempts, self.config.retry_times, url, backoff)
                await asyncio.sleep(backoff)
