'''
Free-form feed date parsing.

Feeds in the wild use a grab bag of RFC-822, RFC-1123 and RFC-3339 variants.
DATE_FORMATS is tried in order and the first match wins; several formats are
textual subsets of others, so the order is part of the contract.
'''

import re
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone


class DateParseError(ValueError):
    '''Raised when a non-empty date string matches none of DATE_FORMATS.'''

    def __init__(self, value: str):
        super().__init__(f'cannot parse date string: {value!r}')
        self.value = value


@dataclass(frozen=True)
class DateFormat:
    '''One accepted date layout.'''

    name: str
    layout: str  # strptime pattern, without fractional seconds or a trailing named zone
    zone: str  # 'named' (trailing abbreviation), 'numeric' (%z in layout) or 'none' (UTC)


DATE_FORMATS: tuple[DateFormat, ...] = (
    DateFormat('rfc822', '%d %b %y %H:%M', 'named'),
    DateFormat('rfc822z', '%d %b %y %H:%M %z', 'numeric'),
    DateFormat('rfc1123', '%a, %d %b %Y %H:%M:%S', 'named'),
    DateFormat('rfc1123z', '%a, %d %b %Y %H:%M:%S %z', 'numeric'),
    DateFormat('rfc3339', '%Y-%m-%dT%H:%M:%S%z', 'numeric'),
    DateFormat('rfc822-full-year', '%d %b %Y %H:%M:%S', 'named'),
    DateFormat('rfc822z-full-year', '%d %b %Y %H:%M:%S %z', 'numeric'),
    # strptime's %d also accepts an unpadded day
    DateFormat('rfc822z-unpadded-day', '%d %b %Y %H:%M:%S %z', 'numeric'),
    DateFormat('rfc1123-unpadded-day', '%a, %d %b %Y %H:%M:%S', 'named'),
    DateFormat('rfc1123z-unpadded-day', '%a, %d %b %Y %H:%M:%S %z', 'numeric'),
    DateFormat('iso-date', '%Y-%m-%d', 'none'),
    DateFormat('iso-space-no-zone', '%Y-%m-%d %H:%M:%S', 'none'),
)

# Zone abbreviations with a well-known offset. Any other abbreviation is
# accepted with a zero offset, keeping its name.
KNOWN_ZONES: dict[str, int] = {
    'UT': 0, 'UTC': 0, 'GMT': 0, 'Z': 0,
    'EST': -5, 'EDT': -4,
    'CST': -6, 'CDT': -5,
    'MST': -7, 'MDT': -6,
    'PST': -8, 'PDT': -7,
}

_NAMED_ZONE = re.compile(r'^(?P<stamp>.+?)\s+(?P<zone>Z|UT|[A-Z]{3,5})$')
# Fractional seconds of any precision, directly after HH:MM:SS
_FRACTION = re.compile(r'(?<=:\d\d:\d\d)[.,](\d+)')


def _zone(abbrev: str) -> timezone:
    hours = KNOWN_ZONES.get(abbrev)
    if hours == 0:
        return timezone.utc
    if hours is None:
        return timezone(timedelta(0), abbrev)
    return timezone(timedelta(hours=hours), abbrev)


def _split_fraction(value: str) -> tuple[str, int]:
    '''Remove fractional seconds, returning them as microseconds (truncated).'''
    m = _FRACTION.search(value)
    if not m:
        return value, 0
    micro = int(m[1][:6].ljust(6, '0'))
    return value[:m.start()] + value[m.end():], micro


def _try_format(fmt: DateFormat, value: str, microsecond: int) -> datetime | None:
    tz = timezone.utc
    if fmt.zone == 'named':
        m = _NAMED_ZONE.match(value)
        if not m:
            return None
        value, tz = m['stamp'], _zone(m['zone'])
    try:
        parsed = datetime.strptime(value, fmt.layout)
    except ValueError:
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=tz)
    return parsed.replace(microsecond=microsecond)


def parse_date(value: str) -> datetime | None:
    '''
    Parse a feed date into an aware datetime.

    Returns None when the (stripped) string is empty: the feed supplied no
    date, which callers treat differently from a bad one.
    Raises DateParseError when no format matches. Fractional seconds are
    accepted after the seconds field of any format, kept to microseconds.
    '''
    original = value.strip()
    if not original:
        return None
    value, microsecond = _split_fraction(original)
    for fmt in DATE_FORMATS:
        parsed = _try_format(fmt, value, microsecond)
        if parsed is not None:
            return parsed
    raise DateParseError(original)
