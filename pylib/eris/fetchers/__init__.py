'''Concurrent feed fetching over httpx.'''

from eris.fetchers.http import EntrySink, build_client, fetch_feed
from eris.fetchers.transport import HostLimitedTransport

__all__ = [
    'EntrySink',
    'HostLimitedTransport',
    'build_client',
    'fetch_feed',
]
