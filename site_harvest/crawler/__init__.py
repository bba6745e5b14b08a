"""Crawler internals: frontier scheduling, page fetching and content extraction."""
from site_harvest.crawler.crawler import AsyncCrawler, VisitedSet
from site_harvest.crawler.models import CrawlResult, FrontierEntry, MediaLink, PageRecord

__all__ = ["AsyncCrawler", "VisitedSet", "CrawlResult", "FrontierEntry", "MediaLink", "PageRecord"]
