'''
Fan-in of per-feed results.

One task per feed produces entry batches into a queue; a single consumer
task owns the link -> Entry map. Shutdown is two-phase: wait for every
producer before closing the queue, then wait for the consumer to drain it
before reading the map. The map has one writer, so no lock.
'''

import asyncio
from collections.abc import Iterable

import httpx
import structlog

from eris.config import CLIENT_TIMEOUT
from eris.entry import Entry
from eris.fetchers import fetch_feed

logger = structlog.get_logger()

_CLOSED = object()


class ChannelClosedError(RuntimeError):
    '''Raised when a batch is sent after the aggregator was closed.'''


class Aggregator:
    '''Single-consumer dedup of entry batches, keyed by link. Last write wins.'''

    def __init__(self) -> None:
        self._queue: asyncio.Queue = asyncio.Queue()
        self._entries: dict[str, Entry] = {}
        self._closed = False
        self._drained = False

    async def send(self, entries: list[Entry]) -> None:
        '''Hand one feed's entries to the consumer.'''
        if self._closed:
            raise ChannelClosedError('send on closed aggregator')
        await self._queue.put(entries)

    def close(self) -> None:
        '''No more sends. Call only once every producer has finished.'''
        if self._closed:
            return
        self._closed = True
        self._queue.put_nowait(_CLOSED)

    async def consume(self) -> None:
        '''Drain batches into the map until closed. Run as exactly one task.'''
        while True:
            batch = await self._queue.get()
            if batch is _CLOSED:
                break
            for entry in batch:
                self._entries[entry.link] = entry
        self._drained = True

    @property
    def entries(self) -> dict[str, Entry]:
        '''The deduplicated map; only available once consume() has returned.'''
        if not self._drained:
            raise RuntimeError('aggregator has not been drained')
        return self._entries


async def gather_entries(
    urls: Iterable[str],
    client: httpx.AsyncClient,
    timeout: float = CLIENT_TIMEOUT,
) -> dict[str, Entry]:
    '''
    Fetch every feed concurrently and return the deduplicated entries.

    One task per URL with no pool bound; the client's transport limits
    connections per host. timeout is the overall deadline for each feed.
    '''
    urls = list(urls)
    aggregator = Aggregator()
    consumer = asyncio.create_task(aggregator.consume())
    producers = [asyncio.create_task(fetch_feed(client, url, aggregator, timeout=timeout)) for url in urls]
    results = await asyncio.gather(*producers, return_exceptions=True)
    for url, result in zip(urls, results):
        if isinstance(result, Exception):
            logger.error('feed task failed', url=url, exc_info=result)
    aggregator.close()
    await consumer
    logger.info('feeds gathered', feeds=len(urls), entries=len(aggregator.entries))
    return aggregator.entries
