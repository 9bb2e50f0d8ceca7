'''OPML subscription lists: extract feed URLs from (possibly nested) outlines.'''

from pathlib import Path

from lxml import etree

from eris.feeds.dialect import local_name


class OPMLError(Exception):
    '''Raised when a document is not valid OPML.'''


def _outlines(parent):
    return [child for child in parent if local_name(child) == 'outline']


def feed_urls(outlines) -> list[str]:
    '''
    xmlUrl of every outline with type="rss", at any depth, in document
    order. A matching outline is listed before its own children.
    '''
    urls: list[str] = []
    for outline in outlines:
        if outline.get('type') == 'rss':
            urls.append(outline.get('xmlUrl', ''))
        urls.extend(feed_urls(_outlines(outline)))
    return urls


def parse_opml(data: bytes) -> list[str]:
    '''Feed URLs from an OPML document. Raises OPMLError if malformed.'''
    parser = etree.XMLParser(resolve_entities=False, no_network=True)
    try:
        root = etree.fromstring(data, parser=parser)
    except etree.XMLSyntaxError as e:
        raise OPMLError(str(e)) from e
    if local_name(root) != 'opml':
        raise OPMLError(f'expected element type <opml> but have <{local_name(root)}>')
    urls: list[str] = []
    for body in root:
        if local_name(body) == 'body':
            urls.extend(feed_urls(_outlines(body)))
    return urls


def read_opml(path: Path) -> list[str]:
    '''Feed URLs from an OPML file. OSError propagates if it cannot be read.'''
    return parse_opml(Path(path).read_bytes())
