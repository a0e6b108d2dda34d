# === FILE: sitemap_scout/cli.py ===
#!/usr/bin/env python3
"""
Command-line entry point for SitemapScout.

Commands:
  extract   Fetch a sitemap or feed and print/save the URLs it publishes
  config    Show the effective configuration

Global options:
  --config PATH       Path to a YAML/JSON config (default: configs/default.yaml if present)
  --log-level LEVEL   Logging level (DEBUG, INFO, ...)
  --log-file PATH     Log file (stderr only if omitted)
  --log-format FORMAT Logging format string

extract options:
  --from-date VALUE   Keep only entries dated on or after VALUE
  --json PATH         Save a JSON report instead of printing
  --pretty            Print a JSON array (indent 2) instead of plain lines
  --timeout SEC       Timeout for the whole traversal (seconds)

Additionally:
  --version, -v       Show SitemapScout version

Example:
  sitemap-scout extract https://example.com/sitemap.xml --from-date 2024-01-01
"""
import asyncio
import json
import sys
from pathlib import Path

import click

from sitemap_scout import __version__
from sitemap_scout.config import load_config
from sitemap_scout.engine import extract_urls
from sitemap_scout.errors import InvalidLowerBoundError
from sitemap_scout.logger import DEFAULT_FORMAT, configure
from sitemap_scout.report import render_json

CONTEXT_SETTINGS = dict(help_option_names=["--help", "-h"])


def print_error(message: str):
    click.secho(message, fg='red', err=True)
    sys.exit(1)


@click.group(context_settings=CONTEXT_SETTINGS)
@click.version_option(__version__, '--version', '-v', message='SitemapScout, version %(version)s')
@click.option(
    '--config', '-c', 'config_path',
    default=None,
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help='Path to a YAML or JSON configuration file.'
)
@click.option(
    '--log-level', 'log_level',
    default='WARNING', show_default=True,
    type=click.Choice(['DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL']),
    help='Logging level'
)
@click.option(
    '--log-file', 'log_file',
    default=None,
    type=click.Path(writable=True, dir_okay=False, path_type=Path),
    help='Log file path (stderr only if omitted)'
)
@click.option(
    '--log-format', 'log_format',
    default=DEFAULT_FORMAT,
    show_default=True,
    help='Logging format string'
)
@click.pass_context
def cli(ctx, config_path, log_level, log_file, log_format):
    """SitemapScout command group."""
    configure(
        level=log_level,
        log_file=str(log_file) if log_file else None,
        log_format=log_format
    )
    try:
        cfg = load_config(config_path)
    except Exception as e:
        print_error(f'Failed to load configuration: {e}')
    ctx.ensure_object(dict)
    ctx.obj['config'] = cfg


@cli.command('extract', context_settings=CONTEXT_SETTINGS)
@click.argument('url')
@click.option(
    '--from-date', '-f', 'from_date',
    default=None,
    help='Lower bound: ISO/RFC 822 date, YYYYMMDD or epoch seconds/milliseconds'
)
@click.option(
    '--json', '-j', 'json_output',
    default=None,
    type=click.Path(writable=True, dir_okay=False, path_type=Path),
    help='Save a JSON report to this file'
)
@click.option(
    '--pretty', is_flag=True,
    help='Print a JSON array (indent 2) instead of one URL per line'
)
@click.option(
    '--timeout', 'scan_timeout',
    type=float,
    default=None,
    help='Timeout for the whole traversal (seconds)'
)
@click.pass_context
def extract(ctx, url, from_date, json_output, pretty, scan_timeout):
    """Extract URLs from a sitemap, sitemap index or feed."""
    cfg = ctx.obj['config']
    try:
        if scan_timeout:
            urls = asyncio.run(
                asyncio.wait_for(extract_urls(url, from_date, config=cfg), timeout=scan_timeout)
            )
        else:
            urls = asyncio.run(extract_urls(url, from_date, config=cfg))
    except InvalidLowerBoundError as e:
        print_error(str(e))
    except asyncio.TimeoutError:
        print_error(f'Traversal did not finish within {scan_timeout} seconds')

    if json_output:
        try:
            saved = render_json(urls, json_output)
        except OSError as e:
            print_error(f'Failed to save JSON: {e}')
        click.echo(f'JSON report: {saved} ({len(urls)} urls)')
        return

    if pretty:
        click.echo(json.dumps(urls, ensure_ascii=False, indent=2))
        return
    for found in urls:
        click.echo(found)


@cli.command('config', context_settings=CONTEXT_SETTINGS)
@click.pass_context
def show_config(ctx):
    """Show the effective configuration as JSON."""
    cfg = ctx.obj['config']
    click.echo(cfg.model_dump_json(indent=2))


if __name__ == "__main__":
    cli()
