"""CLI tests (`site_harvest.cli`) using click.testing.CliRunner.
Cover the `crawl` and `config` commands, `--version` and error handling.
"""
import asyncio
import json

import pytest
from click.testing import CliRunner

import site_harvest.cli as cli_module
from site_harvest.cli import cli
from site_harvest.crawler.models import MediaLink, PageRecord

FAKE_PAGES = [
    PageRecord(
        url="https://uni.example/",
        chunks=("Welcome to the university",),
        pdfs=(MediaLink("report.pdf", "https://uni.example/report.pdf"),),
        images=(),
    )
]


@pytest.fixture(autouse=True)
def patch_start_crawl(monkeypatch):
    """Replace start_crawl with a coroutine returning fixed pages without network."""
    seen = []

    async def fake_crawl(cfg):
        seen.append(cfg)
        return FAKE_PAGES

    monkeypatch.setattr(cli_module, "start_crawl", fake_crawl)
    return seen


@pytest.fixture()
def cfg_file(tmp_path):
    path = tmp_path / "config.json"
    path.write_text(
        json.dumps({"start_url": "https://uni.example", "max_pages": 5, "max_depth": 1}),
        encoding="utf-8",
    )
    return path


def test_version_option():
    result = CliRunner().invoke(cli, ["--version"])
    assert result.exit_code == 0
    assert "SiteHarvest" in result.output


def test_show_config(cfg_file):
    result = CliRunner().invoke(cli, ["--config", str(cfg_file), "config"])
    assert result.exit_code == 0
    data = json.loads(result.output)
    assert data["start_url"] == "https://uni.example/"
    assert data["max_pages"] == 5


def test_show_config_with_limit(cfg_file):
    result = CliRunner().invoke(cli, ["--config", str(cfg_file), "--limit", "2", "config"])
    assert result.exit_code == 0
    assert json.loads(result.output)["max_pages"] == 2


def test_crawl_stdout(cfg_file, patch_start_crawl):
    result = CliRunner().invoke(cli, ["--config", str(cfg_file), "crawl"])
    assert result.exit_code == 0
    payload = json.loads(result.output)
    assert payload["url"] == "https://uni.example/"
    assert payload["pages"] == [
        {
            "url": "https://uni.example/",
            "chunks": ["Welcome to the university"],
            "pdfs": [{"name": "report.pdf", "url": "https://uni.example/report.pdf"}],
            "images": [],
        }
    ]
    assert patch_start_crawl[0].max_depth == 1


def test_crawl_url_and_limit_override(tmp_path, monkeypatch, patch_start_crawl):
    monkeypatch.chdir(tmp_path)
    result = CliRunner().invoke(
        cli, ["--limit", "3", "crawl", "--url", "https://other.example/start"]
    )
    assert result.exit_code == 0
    cfg = patch_start_crawl[0]
    assert cfg.start == "https://other.example/start"
    assert cfg.max_pages == 3
    assert json.loads(result.output)["url"] == "https://other.example/start"


def test_crawl_without_url_fails(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    result = CliRunner().invoke(cli, ["crawl"])
    assert result.exit_code == 1


def test_crawl_json_file(cfg_file, tmp_path):
    out = tmp_path / "reports" / "website_content.json"
    result = CliRunner().invoke(cli, ["--config", str(cfg_file), "crawl", "--json", str(out)])
    assert result.exit_code == 0
    data = json.loads(out.read_text(encoding="utf-8"))
    assert data["url"] == "https://uni.example/"
    assert data["pages"][0]["chunks"] == ["Welcome to the university"]


def test_crawl_timeout(monkeypatch, cfg_file):
    async def slow(cfg):
        await asyncio.sleep(2)
        return []

    monkeypatch.setattr(cli_module, "start_crawl", slow)

    result = CliRunner().invoke(cli, ["--config", str(cfg_file), "crawl", "--crawl-timeout", "0.2"])
    assert result.exit_code == 1


def test_bad_config_file(tmp_path):
    bad = tmp_path / "bad.yaml"
    bad.write_text("max_pages: 0\nstart_url: https://uni.example", encoding="utf-8")
    result = CliRunner().invoke(cli, ["--config", str(bad), "config"])
    assert result.exit_code == 1
