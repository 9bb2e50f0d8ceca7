'''Feed dialect detection and parsing.'''

from eris.feeds.dialect import Dialect, detect_dialect
from eris.feeds.parser import FeedParseError, UnknownFeedTypeError, load_document, parse_feed

__all__ = [
    'Dialect',
    'FeedParseError',
    'UnknownFeedTypeError',
    'detect_dialect',
    'load_document',
    'parse_feed',
]
