"""
Dynamic endpoint discovery and JSON text harvesting.

Client-side pages often load their real content from JSON endpoints whose
paths appear as string literals in the HTML or inline scripts. This module
finds such paths with a fixed pattern table, fetches them and collects the
longer string values from the decoded JSON.
"""
from __future__ import annotations

import asyncio
import json
import re
from typing import Any, Iterable, List, Optional, Pattern, Sequence
from urllib.parse import urlparse

from aiohttp import ClientError, ClientSession, ClientTimeout

from site_harvest.crawler.url_filters import resolve_url
from site_harvest.logger import logger

__all__: Sequence[str] = (
    "ENDPOINT_PATTERNS",
    "discover_endpoints",
    "extract_json_text",
    "decode_json_body",
    "EndpointFetcher",
)

_PATH_CHARS = r"[A-Za-z0-9/_-]"

#: Quoted string literals that look like API paths. Order matters only for
#: the order of the deduplicated result.
ENDPOINT_PATTERNS: Sequence[Pattern[str]] = tuple(
    re.compile(p)
    for p in (
        r"""["'](/api/[^"']+)["']""",
        rf"""["'](/{_PATH_CHARS}*Get{_PATH_CHARS}+)["']""",
        rf"""["'](/{_PATH_CHARS}*Fetch{_PATH_CHARS}+)["']""",
        rf"""["'](/{_PATH_CHARS}*detail{_PATH_CHARS}+)["']""",
        rf"""["'](/{_PATH_CHARS}*overview{_PATH_CHARS}+)["']""",
        rf"""["'](/Course/{_PATH_CHARS}+)["']""",
    )
)

MIN_JSON_TEXT_WORDS = 3


def discover_endpoints(html: str, page_url: str) -> List[str]:
    """Return same-origin absolute URLs of API-like paths quoted in *html*."""
    origin = urlparse(page_url).netloc
    found: dict[str, None] = {}
    for pattern in ENDPOINT_PATTERNS:
        for match in pattern.finditer(html):
            absolute = resolve_url(page_url, match.group(1))
            if absolute is None or urlparse(absolute).netloc != origin:
                continue
            found.setdefault(absolute, None)
    return list(found)


def extract_json_text(value: Any) -> List[str]:
    """Collect every string with more than three words from a decoded JSON value."""
    texts: List[str] = []
    _walk(value, texts)
    return texts


def _walk(value: Any, out: List[str]) -> None:
    if value is None or isinstance(value, (bool, int, float)):
        return
    if isinstance(value, str):
        text = value.strip()
        if len(text.split()) > MIN_JSON_TEXT_WORDS:
            out.append(text)
    elif isinstance(value, list):
        for item in value:
            _walk(item, out)
    elif isinstance(value, dict):
        for item in value.values():
            _walk(item, out)


def decode_json_body(body: str, content_type: str = "") -> Optional[Any]:
    """
    Decode *body* as JSON if it is JSON, by declared type or by a parse attempt.

    Returns None when the body is not JSON.
    """
    if "application/json" not in content_type.lower() and not body.lstrip().startswith(("{", "[", '"')):
        return None
    try:
        return json.loads(body)
    except ValueError:
        return None


class EndpointFetcher:
    """Fetch discovered endpoints and turn their JSON payloads into text fragments.

    At most *limit* endpoints are fetched per page and at most *concurrency*
    of them are in flight at once. Failures never propagate.
    """

    def __init__(
        self,
        session: ClientSession,
        *,
        timeout: float = 10.0,
        limit: int = 50,
        concurrency: int = 5,
    ) -> None:
        self.session = session
        self.timeout = ClientTimeout(total=timeout)
        self.limit = limit
        self.concurrency = concurrency

    async def fetch_texts(self, urls: Iterable[str]) -> List[str]:
        selected = list(urls)
        if len(selected) > self.limit:
            logger.debug("Endpoint cap reached: fetching %d of %d", self.limit, len(selected))
            selected = selected[: self.limit]
        if not selected:
            return []
        semaphore = asyncio.Semaphore(self.concurrency)

        async def _bounded(url: str) -> List[str]:
            async with semaphore:
                return await self.fetch_text(url)

        results = await asyncio.gather(*(_bounded(url) for url in selected))
        return [text for texts in results for text in texts]

    async def fetch_text(self, url: str) -> List[str]:
        try:
            async with self.session.get(url, timeout=self.timeout) as resp:
                if not 200 <= resp.status < 300:
                    logger.debug("Endpoint %s -> HTTP %s", url, resp.status)
                    return []
                content_type = resp.headers.get("Content-Type", "")
                body = await resp.text(errors="replace")
        except (ClientError, asyncio.TimeoutError, LookupError) as exc:
            logger.debug("Endpoint %s failed: %s", url, exc)
            return []
        data = decode_json_body(body, content_type)
        if data is None:
            return []
        return extract_json_text(data)
