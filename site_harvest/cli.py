#!/usr/bin/env python3
"""
Command-line entry point for the SiteHarvest crawler.

Commands:
  crawl     Crawl a site and print/save the {url, pages} payload
  config    Show the effective configuration

Global options:
  --config PATH       Path to a YAML/JSON config (default: configs/default.yaml if present)
  --limit INT         Max pages to crawl (overrides max_pages)
  --log-level LEVEL   Logging level (DEBUG, INFO, ...)
  --log-file PATH     Log file (console only if omitted)
  --log-format FORMAT Logging format string

crawl options:
  --url URL           Start URL (overrides start_url)
  --json PATH         Save the payload to a file
  --pretty            Indent JSON output (2 spaces)
  --crawl-timeout SEC Abort the whole crawl after SEC seconds

Example:
  site-harvest --limit 20 crawl --url https://example.com --json website_content.json
"""
import asyncio
import json
import sys
from pathlib import Path
from typing import Any, Dict, Optional

import click
from pydantic import ValidationError

from site_harvest import __version__
from site_harvest.config import CrawlConfig, load_config
from site_harvest.logger import DEFAULT_FORMAT, init_logging
from site_harvest.report.json_report import build_payload, render_json
from site_harvest.scanner import start_crawl

CONTEXT_SETTINGS = dict(help_option_names=["--help", "-h"])
DEFAULT_CONFIG = Path("configs/default.yaml")


def print_error(message: str):
    click.secho(message, fg='red', err=True)
    sys.exit(1)


def _effective_config(ctx: click.Context, url: Optional[str]) -> CrawlConfig:
    cfg: Optional[CrawlConfig] = ctx.obj['config']
    limit: Optional[int] = ctx.obj['limit']
    if cfg is not None and url is None and limit is None:
        return cfg
    data: Dict[str, Any] = cfg.model_dump(mode='json') if cfg is not None else {}
    if url is not None:
        data['start_url'] = url
    if limit is not None:
        data['max_pages'] = limit
    if 'start_url' not in data:
        print_error('No start URL: pass --url or set start_url in the config')
    try:
        return CrawlConfig(**data)
    except ValidationError as e:
        print_error(f'Invalid configuration: {e}')


@click.group(context_settings=CONTEXT_SETTINGS)
@click.version_option(__version__, '--version', '-v', message='SiteHarvest, version %(version)s')
@click.option(
    '--config', '-c', 'config_path',
    default=None,
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help='Path to a YAML or JSON config file.'
)
@click.option(
    '--limit', '-l', 'limit',
    type=click.IntRange(min=1),
    default=None,
    help='Max pages to crawl (overrides max_pages)'
)
@click.option(
    '--log-level', 'log_level',
    default='INFO', show_default=True,
    type=click.Choice(['DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL']),
    help='Logging level'
)
@click.option(
    '--log-file', 'log_file',
    default=None,
    type=click.Path(writable=True, dir_okay=False, path_type=Path),
    help='Log file path (console only if omitted)'
)
@click.option(
    '--log-format', 'log_format',
    default=DEFAULT_FORMAT,
    show_default=True,
    help='Format string for log records'
)
@click.pass_context
def cli(ctx, config_path, limit, log_level, log_file, log_format):
    """SiteHarvest command group."""
    init_logging(
        level=log_level,
        log_file=str(log_file) if log_file else None,
        log_format=log_format
    )
    cfg = None
    if config_path is None and DEFAULT_CONFIG.is_file():
        config_path = DEFAULT_CONFIG
    if config_path is not None:
        try:
            cfg = load_config(config_path)
        except Exception as e:
            print_error(f'Failed to load configuration: {e}')
    ctx.ensure_object(dict)
    ctx.obj['config'] = cfg
    ctx.obj['limit'] = limit


@cli.command('crawl', context_settings=CONTEXT_SETTINGS)
@click.option('--url', '-u', 'url', default=None, help='Start URL (overrides start_url)')
@click.option(
    '--json', '-j', 'json_output',
    default=None,
    type=click.Path(writable=True, dir_okay=False, path_type=Path),
    help='Save the JSON payload to a file'
)
@click.option(
    '--pretty', is_flag=True,
    help='Indent JSON output (2 spaces)'
)
@click.option(
    '--crawl-timeout', 'crawl_timeout',
    type=float,
    default=None,
    help='Timeout for the whole crawl (seconds)'
)
@click.pass_context
def crawl(ctx, url, json_output, pretty, crawl_timeout):
    """Crawl a site and emit the {url, pages} payload."""
    cfg = _effective_config(ctx, url)
    try:
        if crawl_timeout:
            pages = asyncio.run(
                asyncio.wait_for(start_crawl(cfg), timeout=crawl_timeout)
            )
        else:
            pages = asyncio.run(start_crawl(cfg))
    except asyncio.TimeoutError:
        print_error(f'Crawl did not finish within {crawl_timeout} seconds')
    except Exception as e:
        print_error(f'Crawl failed: {e}')

    payload = build_payload(cfg.start, pages)

    if not json_output:
        indent = 2 if pretty else None
        click.echo(json.dumps(payload, ensure_ascii=False, indent=indent))
        return

    try:
        saved = render_json(payload, json_output, pretty=pretty)
        click.echo(f'JSON payload: {saved}')
    except OSError as e:
        print_error(f'Failed to save JSON: {e}')


@cli.command('config', context_settings=CONTEXT_SETTINGS)
@click.pass_context
def show_config(ctx):
    """Print the effective configuration as JSON."""
    cfg = ctx.obj['config']
    if cfg is None:
        print_error('No configuration loaded: pass --config or create configs/default.yaml')
    if ctx.obj['limit'] is not None:
        cfg = _effective_config(ctx, None)
    click.echo(cfg.model_dump_json(indent=2))


def main():
    cli(obj={})


if __name__ == "__main__":
    main()
