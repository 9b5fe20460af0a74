# === FILE: pageripper/cli.py ===
#!/usr/bin/env python3
"""
Command-line entry point for PageRipper.

Commands:
  rip URL   Rip one page and print/save the report
  serve     Run the HTTP service
  count     Show how many pages have been ripped
  config    Show the current configuration

Common options:
  --config PATH       YAML/JSON config (default: configs/default.yaml when present)
  --log-level LEVEL   Logging level (DEBUG, INFO, ...)
  --log-file PATH     Log file (stdout only when omitted)
  --log-format FORMAT Logging format string, or "json"

Example:
  pageripper rip https://example.com --json report.json --pretty
"""
import asyncio
import sys
from pathlib import Path

import click

from pageripper import __version__
from pageripper.config import load_config
from pageripper.counter.store import open_counter_store
from pageripper.engine import start_rip
from pageripper.errors import RipperError
from pageripper.logger import configure
from pageripper.report.html_report import render_html
from pageripper.report.json_report import render_json
from pageripper.web import run_server

CONTEXT_SETTINGS = dict(help_option_names=["--help"])


def print_error(message: str):
    click.secho(message, fg='red', err=True)
    sys.exit(1)


async def read_usage_count(cfg) -> int:
    store = await open_counter_store(cfg.counter)
    try:
        return await store.read(cfg.counter.key) or 0
    finally:
        await store.close()


@click.group(context_settings=CONTEXT_SETTINGS)
@click.version_option(__version__, '--version', '-v', message='PageRipper, version %(version)s')
@click.option(
    '--config', '-c', 'config_path',
    default=None,
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help='Path to a YAML or JSON config file.'
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
    help='Log file (stdout when omitted)'
)
@click.option(
    '--log-format', 'log_format',
    default='%(asctime)s %(levelname)s %(message)s',
    show_default=True,
    help='Logging format string, or "json" for one JSON object per line'
)
@click.pass_context
def cli(ctx, config_path, log_level, log_file, log_format):
    """PageRipper command group."""
    configure(
        level=log_level,
        log_file=str(log_file) if log_file else None,
        log_format=log_format
    )
    try:
        cfg = load_config(config_path)
    except Exception as e:
        print_error(f'Could not load configuration: {e}')
    ctx.ensure_object(dict)
    ctx.obj['config'] = cfg


@cli.command('rip', context_settings=CONTEXT_SETTINGS)
@click.argument('target')
@click.option(
    '--json', '-j', 'json_output',
    default=None,
    type=click.Path(writable=True, dir_okay=False, path_type=Path),
    help='Save the JSON report to a file'
)
@click.option(
    '--html', '-h', 'html_output',
    default=None,
    type=click.Path(writable=True, dir_okay=False, path_type=Path),
    help='Save the HTML report to a file'
)
@click.option(
    '--template', '-t', 'template_dir',
    default=None,
    type=click.Path(exists=True, file_okay=False, path_type=Path),
    help='Directory with a report.html.j2 template'
)
@click.option(
    '--pretty', is_flag=True,
    help='Indent JSON output by 2'
)
@click.option(
    '--completion',
    type=click.Choice(['both', 'first']),
    default=None,
    help='Wait for both producers, or stop at the first one (overrides config)'
)
@click.pass_context
def rip(ctx, target, json_output, html_output, template_dir, pretty, completion):
    """Rip TARGET and report its links and hostnames."""
    cfg = ctx.obj['config']
    if completion:
        cfg = cfg.model_copy(update={'completion': completion})
    try:
        report = asyncio.run(start_rip(cfg, target))
    except RipperError as e:
        print_error(e.message)
    except Exception as e:
        print_error(f'Rip failed: {e}')

    # nothing to save: print to stdout
    if not json_output and not html_output:
        click.echo(report.json(pretty=pretty))
        return

    if json_output:
        try:
            saved_json = render_json(report, json_output, pretty=pretty)
            click.echo(f'JSON report: {saved_json}')
        except Exception as e:
            print_error(f'Could not save JSON: {e}')

    if html_output:
        try:
            saved_html = render_html(report, html_output, template_dir, target=target)
            click.echo(f'HTML report: {saved_html}')
        except Exception as e:
            print_error(f'Could not save HTML: {e}')


@cli.command('serve', context_settings=CONTEXT_SETTINGS)
@click.option('--host', default=None, help='Interface to bind (overrides config)')
@click.option('--port', '-p', type=int, default=None, help='Port to bind (overrides config)')
@click.pass_context
def serve(ctx, host, port):
    """Run the HTTP service."""
    run_server(ctx.obj['config'], host=host, port=port)


@cli.command('count', context_settings=CONTEXT_SETTINGS)
@click.pass_context
def count(ctx):
    """Show the global rip counter."""
    cfg = ctx.obj['config']
    try:
        value = asyncio.run(read_usage_count(cfg))
    except Exception as e:
        print_error(f'Could not read counter: {e}')
    click.echo(value)


@cli.command('config', context_settings=CONTEXT_SETTINGS)
@click.pass_context
def show_config(ctx):
    """Show the current configuration as JSON."""
    cfg = ctx.obj['config']
    click.echo(cfg.model_dump_json(indent=2))


if __name__ == "__main__":
    cli()
