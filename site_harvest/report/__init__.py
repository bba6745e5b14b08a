"""site_harvest.report: serialisation of crawl results for the indexing step."""

from site_harvest.report.json_report import build_payload, render_json

__all__ = ["build_payload", "render_json"]
