"""
JSON payload for a finished crawl.

The payload has the shape ``{"url": <start url>, "pages": [...]}`` and is what
gets uploaded to the retrieval index as ``website_content.json``.
"""
import json
from pathlib import Path
from typing import Any, Dict, Iterable

from site_harvest.crawler.models import PageRecord


def build_payload(start_url: str, pages: Iterable[PageRecord]) -> Dict[str, Any]:
    """Return the serialisable ``{url, pages}`` document for *pages*."""
    return {"url": start_url, "pages": [page.to_dict() for page in pages]}


def render_json(payload: Dict[str, Any], output_path: Path | str, *, pretty: bool = True) -> Path:
    """
    Save *payload* as JSON at *output_path*.

    :param payload: document produced by :func:`build_payload`
    :param output_path: path to the JSON file
    :return: Path of the saved file

    Example:
    ```python
    from site_harvest.report.json_report import build_payload, render_json
    path = render_json(build_payload(url, pages), 'reports/website_content.json')
    ```
    """
    output = Path(output_path)
    output.parent.mkdir(parents=True, exist_ok=True)

    with output.open('w', encoding='utf-8') as f:
        json.dump(payload, f, ensure_ascii=False, indent=2 if pretty else None)

    return output
