from datetime import datetime, timedelta, timezone

import pytest

from eris.feeds import Dialect, FeedParseError, UnknownFeedTypeError, detect_dialect, load_document, parse_feed

from conftest import ATOM_FEED, RDF_FEED, RSS_FEED


@pytest.mark.parametrize('doc, dialect', [
    (ATOM_FEED, Dialect.ATOM),
    (RSS_FEED, Dialect.RSS),
    (RDF_FEED, Dialect.RDF),
    (b'<RSS version="2.0"><channel/></RSS>', Dialect.RSS),
    (b'<Feed xmlns="http://www.w3.org/2005/Atom"/>', Dialect.ATOM),
    (b'<html><body>nope</body></html>', Dialect.UNKNOWN),
])
def test_detect_dialect(doc, dialect):
    assert detect_dialect(load_document(doc)) is dialect


def test_atom_entries(now):
    entries = parse_feed(ATOM_FEED, now=now)
    assert [(e.title, e.link) for e in entries] == [
        ('Atom one', 'https://atom.example/1'),
        ('Atom two', 'https://atom.example/2'),
        ('Atom three', 'https://atom.example/3'),
    ]
    assert entries[0].time == datetime(2024, 3, 1, 10, tzinfo=timezone.utc)
    assert entries[2].time == datetime(2024, 3, 5, 8, tzinfo=timezone.utc)
    assert all(e.description == '' for e in entries)


def test_atom_prefers_alternate_link(now):
    doc = b'''<feed xmlns="http://www.w3.org/2005/Atom"><entry>
      <title>t</title>
      <link rel="enclosure" href="https://cdn.example/a.mp3"/>
      <link rel="alternate" href="https://site.example/a"/>
      <updated>2024-01-01</updated>
    </entry></feed>'''
    [entry] = parse_feed(doc, now=now)
    assert entry.link == 'https://site.example/a'


def test_atom_missing_updated_uses_now(now):
    doc = b'''<feed xmlns="http://www.w3.org/2005/Atom">
      <entry><title>undated</title><link href="https://a.example/x"/></entry>
      <entry><title>blank</title><link href="https://a.example/y"/><updated>  </updated></entry>
    </feed>'''
    entries = parse_feed(doc, now=now)
    assert [e.time for e in entries] == [now, now]


def test_missing_date_defaults_to_current_time():
    doc = b'<rss><channel><item><title>x</title><link>https://a.example/x</link></item></channel></rss>'
    before = datetime.now(timezone.utc)
    [entry] = parse_feed(doc)
    after = datetime.now(timezone.utc)
    assert before - timedelta(seconds=1) <= entry.time <= after + timedelta(seconds=1)


def test_atom_bad_updated_rejects_whole_feed(now):
    doc = b'''<feed xmlns="http://www.w3.org/2005/Atom">
      <entry><title>good</title><link href="https://a.example/1"/><updated>2024-01-01</updated></entry>
      <entry><title>bad</title><link href="https://a.example/2"/><updated>yesterday-ish</updated></entry>
    </feed>'''
    with pytest.raises(FeedParseError, match='yesterday-ish'):
        parse_feed(doc, now=now)


def test_rss_items(now):
    entries = parse_feed(RSS_FEED, now=now)
    assert [(e.title, e.link) for e in entries] == [
        ('RSS one', 'https://rss.example/1'),
        ('RSS two', 'https://rss.example/2'),
    ]
    assert entries[0].description == 'First <b>item</b>'
    assert entries[0].time == datetime(2024, 3, 2, 9, tzinfo=timezone.utc)
    assert entries[1].time == datetime(2024, 3, 4, 9, tzinfo=timezone.utc)


def test_rss_bad_pubdate_rejects_whole_feed(now):
    doc = b'''<rss><channel>
      <item><title>a</title><link>https://a.example/1</link><pubDate>whenever</pubDate></item>
    </channel></rss>'''
    with pytest.raises(FeedParseError):
        parse_feed(doc, now=now)


def test_rss_link_skips_empty_namespaced_link(now):
    doc = b'''<rss xmlns:atom="http://www.w3.org/2005/Atom"><channel><item>
      <title>a</title>
      <atom:link href="https://a.example/self" rel="self"/>
      <link>
        https://a.example/1
      </link>
    </item></channel></rss>'''
    [entry] = parse_feed(doc, now=now)
    assert entry.link == 'https://a.example/1'


def test_rdf_items_beside_channel(now):
    [entry] = parse_feed(RDF_FEED, now=now)
    assert entry.title == 'RDF one'
    assert entry.link == 'https://rdf.example/1'
    assert entry.description == 'An RDF item'
    assert entry.time == now


def test_unknown_root_element():
    with pytest.raises(UnknownFeedTypeError, match='unknown feed type'):
        parse_feed(b'<html><head><title>Not a feed</title></head></html>')


def test_declared_charset_is_honoured(now):
    doc = (
        '<?xml version="1.0" encoding="ISO-8859-1"?>'
        '<rss><channel><item><title>Café</title><link>https://a.example/c</link></item></channel></rss>'
    ).encode('latin-1')
    [entry] = parse_feed(doc, now=now)
    assert entry.title == 'Café'


def test_truncated_document_is_recovered(now):
    doc = b'<rss><channel><item><title>x</title><link>https://a.example/x</link></item>'
    [entry] = parse_feed(doc, now=now)
    assert entry.link == 'https://a.example/x'


@pytest.mark.parametrize('doc', [b'', b'   ', b'plain text, no markup'])
def test_non_xml_fails(doc):
    with pytest.raises(FeedParseError):
        parse_feed(doc)
