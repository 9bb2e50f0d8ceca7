'''
Run configuration. Defaults suit a personal OPML of a few hundred feeds;
each value can be overridden from the environment (or a .env file) and from
the command line.
'''

from __future__ import annotations

import os
from dataclasses import dataclass

USER_AGENT = 'eris (https://github.com/admacleod/eris)'
# Overall HTTP timeout in seconds; bounds time lost on servers with poor connections
CLIENT_TIMEOUT = 15.0
# Many feeds (podcasts especially) share a host, which resets us if we connect too fast
CONNS_PER_HOST = 20
# Maximum number of entries in the HTML output
MAX_ENTRIES = 250


def _env_number(name: str, default, cast):
    raw = os.environ.get(name, '').strip()
    if not raw:
        return default
    try:
        value = cast(raw)
    except ValueError as e:
        raise ValueError(f'{name} must be a number, got {raw!r}') from e
    if value <= 0:
        raise ValueError(f'{name} must be positive, got {raw!r}')
    return value


@dataclass
class ErisConfig:
    '''Configuration for one aggregation run.'''

    user_agent: str = USER_AGENT
    timeout: float = CLIENT_TIMEOUT
    conns_per_host: int = CONNS_PER_HOST
    max_entries: int = MAX_ENTRIES

    def __post_init__(self) -> None:
        for name in ('timeout', 'conns_per_host', 'max_entries'):
            value = getattr(self, name)
            if value <= 0:
                raise ValueError(f'{name} must be positive, got {value!r}')

    @classmethod
    def from_env(cls) -> ErisConfig:
        '''Build config from ERIS_* env vars.'''
        return cls(
            user_agent=os.environ.get('ERIS_USER_AGENT') or USER_AGENT,
            timeout=_env_number('ERIS_TIMEOUT', CLIENT_TIMEOUT, float),
            conns_per_host=_env_number('ERIS_CONNS_PER_HOST', CONNS_PER_HOST, int),
            max_entries=_env_number('ERIS_MAX_ENTRIES', MAX_ENTRIES, int),
        )
