'''
Main pipeline: fetch every feed, dedupe, rank.
Called by the CLI; tests drive it with a mock transport.
'''

from collections.abc import Iterable

import httpx
import structlog

from eris.aggregator import gather_entries
from eris.config import ErisConfig
from eris.entry import Entry
from eris.fetchers import build_client
from eris.ranker import rank


async def run(
    urls: Iterable[str],
    config: ErisConfig | None = None,
    transport: httpx.AsyncBaseTransport | None = None,
) -> list[Entry]:
    '''
    Ranked, capped entries from all feeds in urls.
    Per-feed failures are logged and skipped; an empty result is not an error.
    '''
    config = config or ErisConfig()
    urls = list(urls)
    log = structlog.get_logger()
    log.info('run', feeds=len(urls), max_entries=config.max_entries)
    async with build_client(config, transport) as client:
        entries = await gather_entries(urls, client, timeout=config.timeout)
    return rank(entries.values(), limit=config.max_entries)
