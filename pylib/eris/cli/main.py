'''CLI: aggregate the feeds of an OPML file into an HTML page.'''

import asyncio
import logging
import sys
from dataclasses import replace
from pathlib import Path
from typing import NoReturn

import fire
import structlog
from dotenv import load_dotenv
from rich.console import Console
from rich.markup import escape

from eris.config import ErisConfig
from eris.opml import OPMLError, read_opml
from eris.render import write_html
from eris.runner import run

err_console = Console(stderr=True)


def _configure_logging(verbose: bool = False) -> None:
    '''Plain-traceback console logging on stderr; stdout carries the HTML.'''
    from structlog.contextvars import merge_contextvars
    from structlog.dev import ConsoleRenderer, plain_traceback, set_exc_info
    from structlog.processors import StackInfoRenderer, TimeStamper, add_log_level

    structlog.configure(
        processors=[
            merge_contextvars,
            add_log_level,
            StackInfoRenderer(),
            set_exc_info,
            TimeStamper(fmt='%Y-%m-%d %H:%M:%S', utc=False),
            ConsoleRenderer(exception_formatter=plain_traceback),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(logging.DEBUG if verbose else logging.INFO),
        logger_factory=structlog.PrintLoggerFactory(sys.stderr),
    )


def _fail(message: str) -> NoReturn:
    err_console.print(f'[bold red]{escape(message)}[/]', highlight=False, soft_wrap=True)
    sys.exit(1)


def _build_config(timeout: float | None = None, max_entries: int | None = None) -> ErisConfig:
    '''Build ErisConfig from env, with optional CLI overrides.'''
    cfg = ErisConfig.from_env()
    if timeout is not None:
        cfg = replace(cfg, timeout=float(timeout))
    if max_entries is not None:
        cfg = replace(cfg, max_entries=int(max_entries))
    return cfg


def aggregate(
    opml_file: str = '',
    output: str = '',
    timeout: float | None = None,
    max_entries: int | None = None,
    verbose: bool = False,
) -> None:
    '''
    Fetch every rss outline of an OPML file and write the newest entries as HTML.
    opml_file: OPML subscription list
    output: HTML file to write (default: stdout)
    timeout: overall deadline per feed in seconds (default 15, or ERIS_TIMEOUT)
    max_entries: entries to keep (default 250, or ERIS_MAX_ENTRIES)
    verbose: also log unreachable feeds
    '''
    _configure_logging(verbose)
    # fire turns a name such as 2024 into an int
    opml_file = '' if opml_file is None else str(opml_file)
    if not opml_file:
        _fail('Please specify an opml file to read feeds from.')
    try:
        config = _build_config(timeout, max_entries)
    except ValueError as e:
        _fail(f'Invalid configuration: {e}')
    try:
        urls = read_opml(Path(opml_file))
    except OSError as e:
        _fail(f'Could not open file {opml_file!r}: {e}')
    except OPMLError as e:
        _fail(f'Could not parse OPML: {e}')

    entries = asyncio.run(run(urls, config))

    try:
        if output:
            with Path(output).open('w', encoding='utf-8') as f:
                write_html(entries, f)
        else:
            write_html(entries, sys.stdout)
    except OSError as e:
        _fail(f'error writing html output: {e}')


def main() -> None:
    '''Eris: concurrent feed aggregator.'''
    load_dotenv()
    fire.Fire(aggregate)
