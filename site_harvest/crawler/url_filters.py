"""
URL classification helpers: internal-link check and login/tracking filters.

All predicates are pure and never raise; a URL that cannot be parsed is
simply treated as "not a match".
"""
from __future__ import annotations

import re
from typing import Optional, Sequence
from urllib.parse import quote, urljoin, urlparse

__all__: Sequence[str] = (
    "resolve_url",
    "is_internal",
    "is_login_page",
    "is_tracking_url",
    "LOGIN_MARKERS",
    "TRACKING_MARKERS",
)

LOGIN_MARKERS: Sequence[str] = ("login", "signin", "auth", "account")
TRACKING_MARKERS: Sequence[str] = ("utm_", "ref=", "tracking", "gclid", "fbclid")

_WHITESPACE_RE = re.compile(r"\s")


def _encode_whitespace(link: str) -> str:
    return _WHITESPACE_RE.sub(lambda m: quote(m.group()), link)


def resolve_url(base: str, link: Optional[str]) -> Optional[str]:
    """
    Resolve *link* against *base*; return None if the result is not a usable URL.
    Whitespace inside the link is percent-encoded ("a b.pdf" -> "a%20b.pdf").
    """
    if link is None:
        return None
    raw = _encode_whitespace(link.strip())
    try:
        absolute = urljoin(base, raw)
        if not urlparse(absolute).hostname:
            return None
    except ValueError:
        return None
    return absolute


def is_internal(base: str, link: str) -> bool:
    """True if *link* resolves to the same hostname as *base*.

    Free text with embedded whitespace ("not a url") is never internal.
    """
    if link is None or _WHITESPACE_RE.search(link.strip()):
        return False
    absolute = resolve_url(base, link)
    if absolute is None:
        return False
    try:
        return urlparse(absolute).hostname == urlparse(base).hostname
    except ValueError:
        return False


def _contains_any(url: Optional[str], markers: Sequence[str]) -> bool:
    lowered = (url or "").lower()
    return any(marker in lowered for marker in markers)


def is_login_page(url: Optional[str]) -> bool:
    return _contains_any(url, LOGIN_MARKERS)


def is_tracking_url(url: Optional[str]) -> bool:
    return _contains_any(url, TRACKING_MARKERS)
