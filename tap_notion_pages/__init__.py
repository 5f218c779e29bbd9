"""tap_notion_pages package: crawl Notion pages into line-oriented text.

Contents:
- tap.py: Tap entrypoint (configuration and stream discovery).
- client.py: NotionStream base class (auth, headers, pagination, parsing).
- streams.py: Notion transport streams and the `pages` output stream.
- source.py: The content source contract and its Notion API implementation.
- crawler.py: The recursive page/database crawler and the page registry.
- serializers/: Block and property serializer tables.
"""
