import asyncio
from collections.abc import AsyncIterator, Callable
from typing import Dict

import pytest
from aiohttp import web
from bs4 import BeautifulSoup

from site_harvest.config import CrawlConfig
from site_harvest.crawler.crawler import AsyncCrawler


async def serve_app(app: web.Application, port: int) -> AsyncIterator[str]:
    """Start *app* on *port*, yield base URL, ensure cleanup."""
    runner = web.AppRunner(app)
    await runner.setup()
    site = web.TCPSite(runner, "localhost", port)
    await site.start()
    try:
        yield f"http://localhost:{port}"
    finally:
        await runner.cleanup()


def html_app(pages: Dict[str, str], hits: Dict[str, int] | None = None) -> web.Application:
    """Build an app serving each ``path -> html`` entry of *pages* as text/html."""
    app = web.Application()

    def make_handler(path: str, body: str):
        async def handler(_):
            if hits is not None:
                hits[path] = hits.get(path, 0) + 1
            return web.Response(text=body, content_type="text/html")

        return handler

    for path, body in pages.items():
        app.router.add_get(path, make_handler(path, body))
    return app


async def run_crawler(config: CrawlConfig, **kwargs):
    """Run the crawler inside an overall timeout."""
    async with AsyncCrawler(config, **kwargs) as crawler:
        return await asyncio.wait_for(crawler.crawl(), timeout=20.0)


@pytest.fixture()
def make_config() -> Callable[..., CrawlConfig]:
    """Return a factory building CrawlConfig with short test timeouts."""

    def _make(start_url: str, **overrides) -> CrawlConfig:
        params = {
            "start_url": start_url,
            "page_timeout": 2.0,
            "endpoint_timeout": 2.0,
            "user_agent": "TestAgent/1.0",
        }
        params.update(overrides)
        return CrawlConfig(**params)

    return _make


@pytest.fixture()
def soup_of() -> Callable[[str], BeautifulSoup]:
    return lambda html: BeautifulSoup(html, "html.parser")
