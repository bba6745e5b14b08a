"""
Convenience wrapper for running a crawl.
"""
from typing import Any, Dict, List, Optional

from site_harvest.config import CrawlConfig
from site_harvest.crawler.crawler import AsyncCrawler
from site_harvest.crawler.models import PageRecord


async def start_crawl(cfg: CrawlConfig) -> List[PageRecord]:
    """
    Run AsyncCrawler inside its context and return the crawled pages.

    Parameters
    ----------
    cfg : CrawlConfig
        Crawl configuration.

    Returns
    -------
    List[PageRecord]
        Page records in batch order.
    """
    async with AsyncCrawler(cfg) as crawler:
        pages = await crawler.crawl()
    return pages


async def scrape_website(start_url: str, options: Optional[Dict[str, Any]] = None) -> List[PageRecord]:
    """Crawl *start_url* with optional ``max_pages``/``max_depth``/``concurrency`` overrides."""
    cfg = CrawlConfig(start_url=start_url, **(options or {}))
    return await start_crawl(cfg)

__all__ = ["start_crawl", "scrape_website"]
