'''Minimal HTML rendering of the ranked entries: one linked title per line.'''

from collections.abc import Iterable
from html import escape
from typing import TextIO
from urllib.parse import urlsplit

from eris.entry import Entry

HEADER = '''<!doctype html>
<meta charset="utf-8">
<meta name="viewport" content="width=device-width, initial-scale=1">
<title>Eris Feeds</title>
'''

SAFE_SCHEMES = {'', 'http', 'https', 'mailto'}


def _safe_href(link: str) -> str:
    '''Link for an href attribute; script-capable schemes are replaced with "#".'''
    try:
        scheme = urlsplit(link).scheme.lower()
    except ValueError:
        return '#'
    return link if scheme in SAFE_SCHEMES else '#'


def render_html(entries: Iterable[Entry]) -> str:
    '''Complete HTML document for entries, in the given order.'''
    lines = [
        f'<p><a href="{escape(_safe_href(e.link))}">{escape(e.title)}</a></p>\n'
        for e in entries
    ]
    return HEADER + ''.join(lines)


def write_html(entries: Iterable[Entry], stream: TextIO) -> None:
    stream.write(render_html(entries))
