"""Remote content source used by the crawler.

`ContentSource` is the contract the crawler depends on. `NotionContentSource`
implements it with the Singer SDK transport streams from `streams.py`, which
take care of authentication, headers, cursor pagination and HTTP error
classification. Errors raised here propagate to the crawler, which downgrades
them to empty results.
"""

from __future__ import annotations

import typing as t

from . import streams

if t.TYPE_CHECKING:
    from singer_sdk import Tap


class ContentSource(t.Protocol):
    """What the crawler needs from a Notion workspace."""

    def list_children(self, block_id: str) -> list[dict]:
        """Return every child block of a block or page, in order."""

    def get_page(self, page_id: str) -> dict:
        """Return a page object including its properties and timestamps."""

    def query_database_rows(self, database_id: str) -> list[dict]:
        """Return every row (page object) of a database, in order."""


class NotionContentSource:
    """Fetches blocks, pages and database rows through the Notion REST API."""

    def __init__(self, tap: Tap) -> None:
        self.block_children = streams.BlockChildrenStream(tap)
        self.page_details = streams.PageDetailsStream(tap)
        self.database_rows = streams.DatabaseRowsStream(tap)

    def list_children(self, block_id: str) -> list[dict]:
        return list(self.block_children.request_records({"block_id": block_id}))

    def get_page(self, page_id: str) -> dict:
        for record in self.page_details.request_records({"page_id": page_id}):
            return record
        raise LookupError(f"Notion returned no page object for {page_id}")

    def query_database_rows(self, database_id: str) -> list[dict]:
        return list(self.database_rows.request_records({"database_id": database_id}))
