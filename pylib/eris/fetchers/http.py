'''Feed fetching with httpx: one request per feed URL, results handed to a sink.'''

import asyncio
from typing import Protocol

import httpx
import structlog

from eris.config import CLIENT_TIMEOUT, ErisConfig
from eris.entry import Entry
from eris.feeds import FeedParseError, parse_feed
from eris.fetchers.transport import HostLimitedTransport

logger = structlog.get_logger()


class EntrySink(Protocol):
    '''Anything that accepts batches of parsed entries, e.g. Aggregator.'''

    async def send(self, entries: list[Entry]) -> None: ...


def build_client(
    config: ErisConfig | None = None,
    transport: httpx.AsyncBaseTransport | None = None,
) -> httpx.AsyncClient:
    '''
    Shared client for all feed fetches.

    transport: underlying transport (default: httpx's own); tests pass
      httpx.MockTransport. It is always wrapped in HostLimitedTransport.
    '''
    config = config or ErisConfig()
    return httpx.AsyncClient(
        transport=HostLimitedTransport(transport, per_host=config.conns_per_host),
        timeout=config.timeout,
        follow_redirects=True,
        headers={'User-Agent': config.user_agent},
    )


async def _download(client: httpx.AsyncClient, request: httpx.Request, log) -> bytes | None:
    '''Send request and read the body; None if the feed was skipped.'''
    try:
        response = await client.send(request, stream=True)
    except httpx.HTTPError as e:
        log.debug('feed unreachable', error=repr(e))
        return None
    try:
        if response.status_code != httpx.codes.OK:
            log.warning('non-OK status code', status=response.status_code, reason=response.reason_phrase)
            return None
        try:
            return await response.aread()
        except httpx.HTTPError as e:
            log.warning('error reading feed', error=str(e))
            return None
    finally:
        await response.aclose()


async def fetch_feed(
    client: httpx.AsyncClient,
    url: str,
    sink: EntrySink,
    timeout: float = CLIENT_TIMEOUT,
) -> None:
    '''
    Fetch and parse one feed, sending its entries to sink.

    timeout: overall deadline in seconds for the whole exchange, including
      waiting for a per-host slot and reading the body

    Every failure is contained here. Transport errors (DNS, refused
    connections, timeouts) are routine for a large subscription list and only
    show at debug level; everything else is a warning.
    '''
    log = logger.bind(url=url)
    try:
        request = client.build_request('GET', url)
    except httpx.InvalidURL as e:
        log.warning('error creating request', error=str(e))
        return
    try:
        raw_feed = await asyncio.wait_for(_download(client, request, log), timeout=timeout)
    except asyncio.TimeoutError:
        log.debug('feed timed out', timeout=timeout)
        return
    if raw_feed is None:
        return
    try:
        entries = parse_feed(raw_feed)
    except FeedParseError as e:
        log.warning('error gathering feed entries', error=str(e))
        return
    await sink.send(entries)
