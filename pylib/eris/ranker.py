'''Recency ranking of aggregated entries.'''

from collections.abc import Iterable

from eris.config import MAX_ENTRIES
from eris.entry import Entry


def rank(entries: Iterable[Entry], limit: int = MAX_ENTRIES) -> list[Entry]:
    '''
    Most recent first, at most `limit` entries.

    The sort is stable, so entries with equal times keep their input order.
    '''
    ranked = sorted(entries, key=lambda e: e.time, reverse=True)
    return ranked[:limit]
