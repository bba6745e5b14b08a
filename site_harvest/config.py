"""
Loading and validation of the SiteHarvest crawl configuration.
Pydantic describes the schema and checks the data.
"""
from __future__ import annotations

import errno
import json
import os
from pathlib import Path
from typing import Any, Union

import yaml
from pydantic import BaseModel, ConfigDict, Field, HttpUrl

__all__ = ("CrawlConfig", "load_config", "DEFAULT_USER_AGENT")

DEFAULT_USER_AGENT = "Mozilla/5.0 (compatible; SiteHarvest/0.1)"


class CrawlConfig(BaseModel):
    """Settings for a single crawl. Immutable once built."""
    model_config = ConfigDict(extra="forbid", frozen=True)

    start_url: HttpUrl = Field(..., description="Absolute URL the crawl starts from.")
    max_pages: int = Field(10, ge=1, description="Hard limit on admitted pages.")
    max_depth: int = Field(2, ge=0, description="Maximum link depth from start_url.")
    concurrency: int = Field(10, ge=1, description="Pages fetched per batch.")
    page_timeout: float = Field(15.0, gt=0, description="Timeout for one page request (seconds).")
    endpoint_timeout: float = Field(10.0, gt=0, description="Timeout for one endpoint request (seconds).")
    user_agent: str = Field(DEFAULT_USER_AGENT, min_length=1, description="User-Agent header.")
    chunk_size: int = Field(800, ge=1, description="Words per text chunk.")
    max_endpoints_per_page: int = Field(
        50, ge=0, description="Discovered endpoints fetched per page; the rest are ignored."
    )
    endpoint_concurrency: int = Field(5, ge=1, description="Endpoint requests in flight per page.")

    @property
    def start(self) -> str:
        """start_url as a plain string."""
        return str(self.start_url)


_DEFAULT_CFG = Path("configs/default.yaml")


def _read_yaml(path: Path) -> dict[str, Any]:
    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    except yaml.YAMLError as exc:
        raise ValueError(f"Invalid YAML in {path}: {exc}") from exc
    if not isinstance(data, dict):
        raise TypeError(f"Top level of YAML must be a mapping, got {type(data).__name__}")
    return data


def _read_json(path: Path) -> dict[str, Any]:
    try:
        data = json.loads(path.read_text(encoding="utf-8")) or {}
    except json.JSONDecodeError as exc:
        raise ValueError(f"Invalid JSON in {path}: {exc}") from exc
    if not isinstance(data, dict):
        raise TypeError(f"Top level of JSON must be a mapping, got {type(data).__name__}")
    return data


def load_config(path: Union[str, Path, None]) -> CrawlConfig:
    """
    Read YAML or JSON and return a validated CrawlConfig.
    Raises FileNotFoundError when the file does not exist.
    """
    if path is None:
        if not _DEFAULT_CFG.exists():
            raise FileNotFoundError(errno.ENOENT, os.strerror(errno.ENOENT), str(_DEFAULT_CFG))
        path_obj = _DEFAULT_CFG
    else:
        path_obj = Path(path).expanduser().resolve()
        if not path_obj.is_file():
            raise FileNotFoundError(errno.ENOENT, os.strerror(errno.ENOENT), str(path_obj))

    suffix = path_obj.suffix.lower()
    if suffix in (".yaml", ".yml"):
        data = _read_yaml(path_obj)
    elif suffix == ".json":
        data = _read_json(path_obj)
    else:
        raise ValueError(f"Unsupported config format: {suffix}")

    return CrawlConfig(**data)
