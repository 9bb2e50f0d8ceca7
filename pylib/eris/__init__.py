'''Eris: concurrent feed aggregator. Reads an OPML subscription list, renders the newest entries as HTML.'''

__version__ = '0.1.0'
