from __future__ import annotations

import asyncio
import time
from collections import deque
from typing import Callable, Deque, List, Optional, Set, Tuple

from aiohttp import ClientSession

from site_harvest.config import CrawlConfig
from site_harvest.crawler.chunker import chunk_text
from site_harvest.crawler.endpoints import EndpointFetcher, discover_endpoints
from site_harvest.crawler.extractor import extract_links, extract_media, extract_text, parse_html
from site_harvest.crawler.fetcher import Fetcher
from site_harvest.crawler.models import FrontierEntry, PageRecord
from site_harvest.crawler.url_filters import is_login_page, is_tracking_url
from site_harvest.logger import logger

__all__ = ("VisitedSet", "AsyncCrawler", "PageOutcome")

PageOutcome = Tuple[PageRecord, List[FrontierEntry]]
AdmissionHook = Callable[[FrontierEntry], None]


class VisitedSet:
    """URLs admitted for fetching during one crawl, bounded by *limit*."""

    def __init__(self, limit: int) -> None:
        self.limit = limit
        self._urls: Set[str] = set()
        self._lock = asyncio.Lock()

    async def admit(self, url: str) -> bool:
        """Atomically add *url* unless it is already present or the set is full."""
        async with self._lock:
            if url in self._urls or len(self._urls) >= self.limit:
                return False
            self._urls.add(url)
            return True

    @property
    def full(self) -> bool:
        return len(self._urls) >= self.limit

    def __contains__(self, url: object) -> bool:
        return url in self._urls

    def __len__(self) -> int:
        return len(self._urls)


class AsyncCrawler:
    """Batched breadth-first crawler turning a site into text chunks and media links.

    Usage::

        async with AsyncCrawler(config) as crawler:
            pages = await crawler.crawl()

    *admission_hook*, if given, is called with every frontier entry at the
    moment it is admitted for fetching.
    """

    def __init__(self, config: CrawlConfig, admission_hook: Optional[AdmissionHook] = None) -> None:
        self.config = config
        self.start_url = config.start
        self.admission_hook = admission_hook
        self.visited = VisitedSet(config.max_pages)
        self.session: Optional[ClientSession] = None
        self._fetcher: Optional[Fetcher] = None
        self._endpoints: Optional[EndpointFetcher] = None

    async def __aenter__(self) -> AsyncCrawler:
        self.session = ClientSession(
            headers={"User-Agent": self.config.user_agent},
            raise_for_status=False,
        )
        self._fetcher = Fetcher(self.session, timeout=self.config.page_timeout)
        self._endpoints = EndpointFetcher(
            self.session,
            timeout=self.config.endpoint_timeout,
            limit=self.config.max_endpoints_per_page,
            concurrency=self.config.endpoint_concurrency,
        )
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        if self.session and not self.session.closed:
            await self.session.close()

    async def crawl(self) -> List[PageRecord]:
        if not self.session:
            raise RuntimeError("Session not initialized")
        logger.info("Crawl started: %s", self.start_url)
        start = time.monotonic()
        self.visited = VisitedSet(self.config.max_pages)
        queue: Deque[FrontierEntry] = deque([FrontierEntry(self.start_url, 0)])
        results: List[PageRecord] = []

        while queue and not self.visited.full:
            batch = [queue.popleft() for _ in range(min(self.config.concurrency, len(queue)))]
            outcomes = await asyncio.gather(
                *(self.crawl_page(entry) for entry in batch), return_exceptions=True
            )
            pending: List[FrontierEntry] = []
            for entry, outcome in zip(batch, outcomes):
                if isinstance(outcome, Exception):
                    logger.error("Unexpected error on %s: %r", entry.url, outcome)
                    continue
                if isinstance(outcome, BaseException):
                    raise outcome
                if outcome is None:
                    continue
                record, next_links = outcome
                results.append(record)
                pending.extend(link for link in next_links if link.url not in self.visited)
            queue.extend(pending)

        duration = time.monotonic() - start
        logger.info("Crawl finished: %d pages in %.2f s", len(results), duration)
        return results

    async def crawl_page(self, entry: FrontierEntry) -> Optional[PageOutcome]:
        """Crawl one frontier entry. Returns None if it was not admitted or the fetch failed."""
        if self._fetcher is None or self._endpoints is None:
            raise RuntimeError("Session not initialized")
        url, depth = entry.url, entry.depth
        if depth > self.config.max_depth:
            return None
        if is_login_page(url) or is_tracking_url(url):
            logger.debug("Skipped excluded URL %s", url)
            return None
        if not await self.visited.admit(url):
            return None
        if self.admission_hook is not None:
            self.admission_hook(entry)

        logger.info("Crawling %s (depth %d)", url, depth)
        page = await self._fetcher.fetch(url)
        if page is None:
            return None

        soup = parse_html(page.html)
        html_text = extract_text(soup)
        pdfs, images = extract_media(soup, url)
        api_texts = await self._endpoints.fetch_texts(discover_endpoints(page.html, url))

        full_text = "\n".join(part for part in (html_text, *api_texts) if part).strip()
        record = PageRecord(
            url=url,
            chunks=tuple(chunk_text(full_text, self.config.chunk_size)),
            pdfs=tuple(pdfs),
            images=tuple(images),
        )
        next_links = [FrontierEntry(link, depth + 1) for link in extract_links(soup, url, self.start_url)]
        return record, next_links
