'''
Feed parsing: Atom, RSS and RDF documents to a flat list of Entry.

Parsing is lenient (lxml recover mode, declared charset honoured). Date
handling is strict per feed: an entry with no date is stamped with the parse
time, but one unparsable date rejects the whole feed.
'''

from collections.abc import Iterator
from datetime import datetime, timezone

from lxml import etree

from eris.dates import DateParseError, parse_date
from eris.entry import Entry
from eris.feeds.dialect import Dialect, detect_dialect, local_name


class FeedParseError(Exception):
    '''Raised when a feed document cannot be turned into entries.'''


class UnknownFeedTypeError(FeedParseError):
    '''Raised when the root element is not feed, rss or rdf.'''


def _xml_parser() -> etree.XMLParser:
    return etree.XMLParser(recover=True, resolve_entities=False, no_network=True)


def load_document(data: bytes):
    '''Parse raw bytes and return the root element.'''
    try:
        root = etree.fromstring(data, parser=_xml_parser())
    except etree.XMLSyntaxError as e:
        raise FeedParseError(f'unmarshaling unknown feed: {e}') from e
    if root is None:
        raise FeedParseError('unmarshaling unknown feed: no root element')
    return root


def _children(parent, name: str) -> Iterator:
    for child in parent:
        if local_name(child) == name:
            yield child


def _child(parent, name: str):
    return next(_children(parent, name), None)


def _text(parent, name: str) -> str:
    el = _child(parent, name)
    if el is None:
        return ''
    return ''.join(el.itertext())


def _atom_href(entry) -> str:
    links = list(_children(entry, 'link'))
    for link in links:
        if link.get('rel', 'alternate') == 'alternate' and link.get('href'):
            return link.get('href').strip()
    return links[0].get('href', '').strip() if links else ''


def _entry_time(raw: str, now: datetime, what: str) -> datetime:
    try:
        parsed = parse_date(raw)
    except DateParseError as e:
        raise FeedParseError(f'parse {what}: {e}') from e
    return now if parsed is None else parsed


def _parse_atom(root, now: datetime) -> list[Entry]:
    return [
        Entry(
            title=_text(entry, 'title').strip(),
            link=_atom_href(entry),
            description='',
            time=_entry_time(_text(entry, 'updated'), now, 'updated node for atom entry'),
        )
        for entry in _children(root, 'entry')
    ]


def _rss_items(root) -> Iterator:
    for channel in _children(root, 'channel'):
        yield from _children(channel, 'item')
    # RDF 1.0 puts items beside the channel, not inside it
    yield from _children(root, 'item')


def _rss_link(item) -> str:
    # Skip empty namespaced links such as atom:link rel="self"
    texts = (''.join(link.itertext()).strip() for link in _children(item, 'link'))
    return next((t for t in texts if t), '')


def _parse_rss(root, now: datetime) -> list[Entry]:
    return [
        Entry(
            title=_text(item, 'title').strip(),
            link=_rss_link(item),
            description=_text(item, 'description'),
            time=_entry_time(_text(item, 'pubDate'), now, 'pubDate node for rss item'),
        )
        for item in _rss_items(root)
    ]


def parse_feed(data: bytes, now: datetime | None = None) -> list[Entry]:
    '''
    Parse a feed document into entries.

    data: raw response body
    now: timestamp for entries without a date (default: current UTC time)

    Raises UnknownFeedTypeError for an unrecognized root element and
    FeedParseError for anything else that prevents parsing the whole feed.
    '''
    now = now or datetime.now(timezone.utc)
    root = load_document(data)
    dialect = detect_dialect(root)
    if dialect is Dialect.ATOM:
        return _parse_atom(root, now)
    if dialect in (Dialect.RSS, Dialect.RDF):
        return _parse_rss(root, now)
    raise UnknownFeedTypeError('unknown feed type')
