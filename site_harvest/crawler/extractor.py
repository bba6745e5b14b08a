"""
Content extraction from parsed HTML: readable text, document/image links and
internal next-hop links.
"""
from __future__ import annotations

import copy
from typing import Iterable, List, Sequence, Tuple
from urllib.parse import urlparse

from bs4 import BeautifulSoup
from bs4.element import Tag

from site_harvest.crawler.models import MediaLink
from site_harvest.crawler.url_filters import is_internal, resolve_url

__all__: Sequence[str] = (
    "parse_html",
    "extract_text",
    "extract_media",
    "extract_links",
    "NOISE_TAGS",
    "IMAGE_EXTENSIONS",
)

NOISE_TAGS: Sequence[str] = ("script", "style", "nav", "header", "footer", "noscript", "form", "aside")
DOCUMENT_EXTENSIONS: Tuple[str, ...] = (".pdf",)
IMAGE_EXTENSIONS: Tuple[str, ...] = (".jpg", ".jpeg", ".png", ".gif", ".webp", ".svg")
MIN_PARAGRAPH_WORDS = 5


def parse_html(html: str) -> BeautifulSoup:
    return BeautifulSoup(html, "html.parser")


def _collapse(text: str) -> str:
    return " ".join(text.split())


def extract_text(soup: BeautifulSoup) -> str:
    """
    Return headings (h1-h3) followed by paragraphs longer than five words.

    Noise tags are stripped from a private copy, *soup* itself is untouched.
    """
    doc = copy.copy(soup)
    for element in doc(list(NOISE_TAGS)):
        element.decompose()

    parts: List[str] = []
    for heading in doc.find_all(["h1", "h2", "h3"]):
        text = _collapse(heading.get_text())
        if text:
            parts.append(text)
    for paragraph in doc.find_all("p"):
        text = _collapse(paragraph.get_text())
        if len(text.split()) > MIN_PARAGRAPH_WORDS:
            parts.append(text)
    return "\n".join(parts).strip()


def _attr_values(soup: BeautifulSoup, tag_name: str, attr: str) -> Iterable[str]:
    for tag in soup.find_all(tag_name, attrs={attr: True}):
        if not isinstance(tag, Tag):
            continue
        value = tag.get(attr)
        if isinstance(value, str) and value:
            yield value


def _media_link(absolute: str, placeholder: str) -> MediaLink:
    name = urlparse(absolute).path.rsplit("/", 1)[-1]
    return MediaLink(name=name or placeholder, url=absolute)


def extract_media(soup: BeautifulSoup, base_url: str) -> Tuple[List[MediaLink], List[MediaLink]]:
    """Return ``(pdfs, images)`` referenced by the page, as absolute URLs."""
    pdfs: List[MediaLink] = []
    for href in _attr_values(soup, "a", "href"):
        if not href.strip().lower().endswith(DOCUMENT_EXTENSIONS):
            continue
        absolute = resolve_url(base_url, href)
        if absolute is not None:
            pdfs.append(_media_link(absolute, "file.pdf"))

    images: List[MediaLink] = []
    for src in _attr_values(soup, "img", "src"):
        if not src.strip().lower().endswith(IMAGE_EXTENSIONS):
            continue
        absolute = resolve_url(base_url, src)
        if absolute is not None:
            images.append(_media_link(absolute, "image"))
    return pdfs, images


def extract_links(soup: BeautifulSoup, page_url: str, start_url: str) -> List[str]:
    """
    Resolve every anchor against *page_url* and keep those internal to *start_url*.

    Duplicates are kept; the frontier deduplicates on admission.
    """
    links: List[str] = []
    for href in _attr_values(soup, "a", "href"):
        absolute = resolve_url(page_url, href)
        if absolute is not None and is_internal(start_url, absolute):
            links.append(absolute)
    return links
