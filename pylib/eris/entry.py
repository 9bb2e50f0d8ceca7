'''Normalized feed entry, shared by every dialect.'''

from dataclasses import dataclass
from datetime import datetime


@dataclass(frozen=True)
class Entry:
    '''A single feed entry after parsing. `time` is always timezone-aware.'''

    title: str
    link: str  # dedup key
    description: str
    time: datetime
