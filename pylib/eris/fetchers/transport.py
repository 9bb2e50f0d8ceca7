'''
httpx transport wrapper that caps concurrent connections per destination host.

httpx.Limits only bounds the pool as a whole. Feeds tend to cluster on a few
hosts, so each (scheme, host, port) gets its own semaphore. A slot is held
from request send until the response stream is closed.
'''

import asyncio
from collections import defaultdict
from collections.abc import AsyncIterator, Callable

import httpx


class _SlotReleasingStream(httpx.AsyncByteStream):
    '''Response stream that frees its host slot on close.'''

    def __init__(self, stream: httpx.AsyncByteStream, release: Callable[[], None]) -> None:
        self._stream = stream
        self._release = release
        self._released = False

    async def __aiter__(self) -> AsyncIterator[bytes]:
        async for chunk in self._stream:
            yield chunk

    async def aclose(self) -> None:
        try:
            await self._stream.aclose()
        finally:
            if not self._released:
                self._released = True
                self._release()


class HostLimitedTransport(httpx.AsyncBaseTransport):
    '''Wraps another async transport, allowing at most `per_host` in-flight requests per host.'''

    def __init__(self, transport: httpx.AsyncBaseTransport | None = None, per_host: int = 20) -> None:
        # Only the per-host cap applies; the pool itself is unbounded
        self._transport = transport or httpx.AsyncHTTPTransport(limits=httpx.Limits(max_connections=None))
        self.per_host = per_host
        self._slots: defaultdict[tuple[str, str, int | None], asyncio.Semaphore] = defaultdict(
            lambda: asyncio.Semaphore(self.per_host)
        )

    def slots_for(self, url: httpx.URL) -> asyncio.Semaphore:
        '''Semaphore guarding the host of url.'''
        return self._slots[(url.scheme, url.host, url.port)]

    async def handle_async_request(self, request: httpx.Request) -> httpx.Response:
        slots = self.slots_for(request.url)
        await slots.acquire()
        try:
            response = await self._transport.handle_async_request(request)
        except BaseException:
            slots.release()
            raise
        return httpx.Response(
            status_code=response.status_code,
            headers=response.headers,
            stream=_SlotReleasingStream(response.stream, slots.release),
            extensions=response.extensions,
        )

    async def aclose(self) -> None:
        await self._transport.aclose()
