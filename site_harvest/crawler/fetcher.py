"""
Fetcher module: time-boxed HTTP GET of HTML pages.
"""
from __future__ import annotations

import asyncio
from dataclasses import dataclass

from aiohttp import ClientError, ClientSession, ClientTimeout

from site_harvest.logger import logger


@dataclass(slots=True, frozen=True)
class FetchedPage:
    """Raw body of a fetched page."""

    url: str
    html: str


class Fetcher:
    """Single-attempt page fetcher. Failures are logged and reported as None."""

    def __init__(self, session: ClientSession, timeout: float = 15.0) -> None:
        self.session = session
        self.timeout = ClientTimeout(total=timeout)

    async def fetch(self, url: str) -> FetchedPage | None:
        """
        Fetch *url*. Returns FetchedPage on a 2xx response, None otherwise.
        """
        try:
            async with self.session.get(url, timeout=self.timeout) as resp:
                if not 200 <= resp.status < 300:
                    logger.warning("Failed %s: HTTP %s", url, resp.status)
                    return None
                text = await resp.text(errors="replace")
        except asyncio.TimeoutError:
            logger.warning("Failed %s: timed out", url)
            return None
        except (ClientError, LookupError) as e:
            logger.warning("Failed %s: %s", url, e)
            return None
        return FetchedPage(url, text)
