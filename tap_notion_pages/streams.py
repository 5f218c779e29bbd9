"""Stream classes for the Notion pages tap.

Two kinds of streams live here:

- Transport streams (`BlockChildrenStream`, `PageDetailsStream`,
  `DatabaseRowsStream`) wrap single Notion API endpoints. They inherit
  auth, headers and cursor pagination from `NotionStream` (see client.py) and
  are driven by `NotionContentSource` through `request_records(context)`,
  with the context filling the path placeholders. They are not exposed for
  discovery.
- `PagesStream`, the stream the tap exposes, which runs the crawler over the
  configured roots and emits one record per crawled page.
"""

from __future__ import annotations

import sys
import typing as t

from singer_sdk import typing as th  # JSON Schema typing helpers
from singer_sdk.streams import Stream

from . import crawler, source
from .client import NotionStream
from .serializers import default_property_table, rich_property_table

if sys.version_info >= (3, 12):
    from typing import override
else:
    from typing_extensions import override

if t.TYPE_CHECKING:
    from singer_sdk import Tap
    from singer_sdk.helpers.types import Context


# Notion objects are open-ended; transport streams only declare what they key on.
NOTION_OBJECT_SCHEMA = th.PropertiesList(
    th.Property("object", th.StringType),
    th.Property("id", th.StringType),
    th.Property("type", th.StringType),
    th.Property("has_children", th.BooleanType),
    th.Property("created_time", th.DateTimeType),
    th.Property("last_edited_time", th.DateTimeType),
    th.Property("properties", th.ObjectType()),
).to_dict()


class BlockChildrenStream(NotionStream):
    """Direct children of a block or page: GET /v1/blocks/{block_id}/children."""

    # Stream identifier used in log messages and request metrics
    name = "block_children"
    # Path template; `block_id` is filled from the request context
    path = "/blocks/{block_id}/children"
    # Field(s) that uniquely identify each record in the stream
    primary_keys: t.ClassVar[list[str]] = ["id"]
    # Transport only; never replicated incrementally
    replication_key = None
    schema = NOTION_OBJECT_SCHEMA


class PageDetailsStream(NotionStream):
    """Page metadata: GET /v1/pages/{page_id}.

    Returns a single page object including its properties and timestamps.
    """

    # Stream identifier used in log messages and request metrics
    name = "page_details"
    # Path template; `page_id` is filled from the request context
    path = "/pages/{page_id}"
    # Field(s) that uniquely identify each record in the stream
    primary_keys: t.ClassVar[list[str]] = ["id"]
    # Transport only; never replicated incrementally
    replication_key = None
    schema = NOTION_OBJECT_SCHEMA

    @override
    def get_url_params(self, context, next_page_token):  # type: ignore[override]
        """Return empty query parameters for this endpoint.

        GET /v1/pages/{page_id} returns a single object and rejects requests
        with `page_size` or `start_cursor` parameters.
        """
        return {}

    @override
    def parse_response(self, response):  # type: ignore[override]
        """Yield the page object, which is the whole response body."""
        yield response.json()


class DatabaseRowsStream(NotionStream):
    """Rows of a database: POST /v1/databases/{database_id}/query.

    Each row is a page object. No filter or sort is sent, so rows come back
    in the database's default order.
    """

    # Stream identifier used in log messages and request metrics
    name = "database_rows"
    # Path template; `database_id` is filled from the request context
    path = "/databases/{database_id}/query"
    # Database queries are POST requests with paging in the JSON body
    http_method = "POST"
    # Field(s) that uniquely identify each record in the stream
    primary_keys: t.ClassVar[list[str]] = ["id"]
    # Transport only; never replicated incrementally
    replication_key = None
    schema = NOTION_OBJECT_SCHEMA


class PagesStream(Stream):
    """Crawled pages rendered as text, one record per Notion page.

    Crawls every page in `root_page_ids` and every database in
    `database_ids`, following child pages and child databases. All roots
    share one registry, so a page reachable from several roots is emitted
    once, under the first root that reached it.
    """

    # Stream identifier used in Singer tap operations and output
    name = "pages"
    # Field(s) that uniquely identify each record in the stream
    primary_keys: t.ClassVar[list[str]] = ["id"]
    # No incremental sync field; every run crawls the configured roots in full
    replication_key = None

    schema = th.PropertiesList(
        th.Property("id", th.StringType, required=True, description="Notion page or database ID"),
        th.Property("title", th.StringType),
        th.Property("created_time", th.DateTimeType),
        th.Property("last_edited_time", th.DateTimeType),
        th.Property(
            "parent_id",
            th.StringType,
            description="Page or database the page was discovered under; null for roots",
        ),
        th.Property("lines", th.ArrayType(th.StringType), description="Rendered lines in document order"),
        th.Property("content", th.StringType, description="Rendered lines joined with newlines"),
        th.Property(
            "properties",
            th.ObjectType(additional_properties=th.StringType),
            description="Rendered page properties keyed by property name",
        ),
    ).to_dict()

    def __init__(self, tap: Tap, *args: t.Any, **kwargs: t.Any) -> None:
        super().__init__(tap, *args, **kwargs)
        self.content_source: source.ContentSource = source.NotionContentSource(tap)

    def build_crawler(self) -> crawler.Crawler:
        """Return a crawler configured from the tap settings."""
        properties = rich_property_table() if self.config.get("render_properties") else default_property_table()
        return crawler.Crawler(self.content_source, properties=properties, logger=self.logger)

    def crawl(self) -> crawler.PageRegistry:
        """Crawl every configured root into one registry."""
        page_crawler = self.build_crawler()
        registry = crawler.PageRegistry()

        # A failing root is logged and the remaining roots still run
        for page_id in self.config.get("root_page_ids") or []:
            self.logger.info("Crawling Notion page %s", page_id)
            try:
                page_crawler.crawl(page_id, registry=registry)
            except Exception:
                self.logger.exception("Crawling Notion page failed. [pageId: %s]", page_id)

        for database_id in self.config.get("database_ids") or []:
            self.logger.info("Crawling Notion database %s", database_id)
            try:
                page_crawler.crawl_database(database_id, registry=registry)
            except Exception:
                self.logger.exception("Crawling Notion database failed. [databaseId: %s]", database_id)

        self.logger.info("Crawled %d Notion pages", len(registry))
        return registry

    @override
    def get_records(self, context: Context | None) -> t.Iterable[dict]:
        """Crawl the configured roots and yield one record per page."""
        if not self.config.get("root_page_ids") and not self.config.get("database_ids"):
            self.logger.warning("Neither root_page_ids nor database_ids is configured; nothing to crawl.")
            return

        registry = self.crawl()
        if not any(page.lines for page in registry):
            self.logger.warning(
                "No content was rendered for any page. Check the auth token and that the "
                "pages are shared with the integration.",
            )

        for page in registry:
            yield page.to_record()
