"""
Data models for the SiteHarvest crawler.
"""
from __future__ import annotations

from dataclasses import asdict, dataclass, field
from typing import Any, Dict, List, Tuple


@dataclass(slots=True, frozen=True)
class FrontierEntry:
    """A URL waiting to be crawled, with its link depth from the start URL."""

    url: str
    depth: int


@dataclass(slots=True, frozen=True)
class MediaLink:
    """A document or image referenced by a page."""

    name: str
    url: str


@dataclass(slots=True, frozen=True)
class PageRecord:
    """Text chunks plus document and image links of one crawled page."""

    url: str
    chunks: Tuple[str, ...] = field(default_factory=tuple)
    pdfs: Tuple[MediaLink, ...] = field(default_factory=tuple)
    images: Tuple[MediaLink, ...] = field(default_factory=tuple)

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        # asdict keeps tuples; JSON consumers expect lists
        return {key: list(value) if isinstance(value, tuple) else value for key, value in data.items()}


CrawlResult = List[PageRecord]
