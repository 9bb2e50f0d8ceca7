'''
Shared fixtures: sample feed documents and structlog reset.
'''
from datetime import datetime, timezone

import pytest
import structlog


ATOM_FEED = b'''<?xml version="1.0" encoding="utf-8"?>
<feed xmlns="http://www.w3.org/2005/Atom">
  <title>Example Atom</title>
  <entry>
    <title>Atom one</title>
    <link rel="alternate" href="https://atom.example/1"/>
    <updated>2024-03-01T10:00:00Z</updated>
  </entry>
  <entry>
    <title>Atom two</title>
    <link href="https://atom.example/2"/>
    <updated>2024-03-03T10:00:00Z</updated>
  </entry>
  <entry>
    <title>Atom three</title>
    <link href="https://atom.example/3"/>
    <updated>2024-03-05T10:00:00+02:00</updated>
  </entry>
</feed>
'''

RSS_FEED = b'''<?xml version="1.0" encoding="utf-8"?>
<rss version="2.0" xmlns:atom="http://www.w3.org/2005/Atom">
  <channel>
    <title>Example RSS</title>
    <atom:link href="https://rss.example/feed.xml" rel="self"/>
    <item>
      <title>RSS one</title>
      <link>https://rss.example/1</link>
      <description>First &lt;b&gt;item&lt;/b&gt;</description>
      <pubDate>Sat, 02 Mar 2024 09:00:00 GMT</pubDate>
    </item>
    <item>
      <title>RSS two</title>
      <link>https://rss.example/2</link>
      <description>Second item</description>
      <pubDate>Mon, 04 Mar 2024 09:00:00 +0000</pubDate>
    </item>
  </channel>
</rss>
'''

RDF_FEED = b'''<?xml version="1.0"?>
<rdf:RDF xmlns:rdf="http://www.w3.org/1999/02/22-rdf-syntax-ns#" xmlns="http://purl.org/rss/1.0/">
  <channel rdf:about="https://rdf.example/">
    <title>Example RDF</title>
  </channel>
  <item rdf:about="https://rdf.example/1">
    <title>RDF one</title>
    <link>https://rdf.example/1</link>
    <description>An RDF item</description>
  </item>
</rdf:RDF>
'''

FIXED_NOW = datetime(2024, 6, 1, 12, 0, tzinfo=timezone.utc)


@pytest.fixture(autouse=True)
def reset_structlog():
    '''CLI tests configure structlog globally; undo that after every test.'''
    yield
    structlog.reset_defaults()


@pytest.fixture
def now():
    return FIXED_NOW


def opml_document(*urls: str) -> bytes:
    '''OPML listing each url as an rss outline inside one folder.'''
    outlines = '\n'.join(f'      <outline type="rss" text="feed" xmlUrl="{u}"/>' for u in urls)
    return f'''<?xml version="1.0"?>
<opml version="2.0">
  <head><title>subs</title></head>
  <body>
    <outline text="folder">
{outlines}
    </outline>
  </body>
</opml>
'''.encode()
