'''Feed dialect sniffing from the document root element.'''

from enum import Enum

from lxml import etree


class Dialect(Enum):
    '''Closed set of syndication dialects. UNKNOWN is never parsed.'''

    ATOM = 'atom'
    RSS = 'rss'
    RDF = 'rdf'
    UNKNOWN = 'unknown'


ROOT_NAMES: dict[str, Dialect] = {
    'feed': Dialect.ATOM,
    'rss': Dialect.RSS,
    'rdf': Dialect.RDF,
}


def local_name(element) -> str:
    '''Namespace-stripped tag name; empty for comments and processing instructions.'''
    if not isinstance(element.tag, str):
        return ''
    return etree.QName(element).localname


def detect_dialect(root) -> Dialect:
    '''Dialect from the root's local name, case-insensitive.'''
    return ROOT_NAMES.get(local_name(root).lower(), Dialect.UNKNOWN)
