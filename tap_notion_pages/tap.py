"""Singer Tap entrypoint for crawling Notion pages into text.

This module defines the TapNotionPages class, which is the entrypoint the
Singer SDK uses to run the tap. It declares:

- The tap name and configuration schema (settings users can provide).
- The list of streams exposed for discovery (just `pages`).

The crawling itself lives in `crawler.py`; `streams.PagesStream` wires it to
the Notion API through `source.NotionContentSource`.
"""

from __future__ import annotations

import sys

from singer_sdk import Tap
from singer_sdk import typing as th  # JSON schema typing helpers

from . import streams

if sys.version_info >= (3, 12):
    from typing import override
else:
    from typing_extensions import override


class TapNotionPages(Tap):
    """Singer Tap for Notion page content.

    Configuration is defined in `config_jsonschema` and includes:
    - auth_token (required): Notion integration token used for Bearer auth.
    - root_page_ids, database_ids: Where the crawl starts.
    - notion_version, page_size, user_agent (optional): Header/behavior tweaks.
    - render_properties (optional): Render page properties into each record.
    """

    name = "tap-notion-pages"

    config_jsonschema = th.PropertiesList(
        th.Property(
            "auth_token",
            th.StringType(nullable=False),
            required=True,
            secret=True,  # Integration token from Notion
            title="Auth Token",
            description="The Notion integration token (starts with 'secret_' or 'ntn_').",
        ),
        th.Property(
            "root_page_ids",
            th.ArrayType(th.StringType),
            title="Root Page IDs",
            description="Pages to crawl. Child pages and child databases are followed.",
        ),
        th.Property(
            "database_ids",
            th.ArrayType(th.StringType),
            title="Database IDs",
            description="Databases to crawl; every row is crawled as a page.",
        ),
        th.Property(
            "notion_version",
            th.StringType(nullable=True),
            title="Notion API Version",
            description="Override the Notion-Version header (default '2022-06-28').",
        ),
        th.Property(
            "page_size",
            th.IntegerType(nullable=True),
            description="Items per page for list and query endpoints (max 100).",
        ),
        th.Property(
            "user_agent",
            th.StringType(nullable=True),
            description=(
                "A custom User-Agent header to send with each request. Default is "
                "'<tap_name>/<tap_version>'"
            ),
        ),
        th.Property(
            "render_properties",
            th.BooleanType(nullable=True),
            default=False,
            description="Render page properties (e.g. database columns) as text into each record.",
        ),
    ).to_dict()

    @override
    def discover_streams(self) -> list[streams.PagesStream]:
        """Return the streams exposed by this tap."""
        return [streams.PagesStream(self)]


if __name__ == "__main__":
    TapNotionPages.cli()
