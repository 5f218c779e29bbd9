"""REST client handling and NotionStream base class.

This module defines the NotionStream class, a small specialization of the
Singer SDK's RESTStream tailored to the Notion API. The transport streams in
`streams.py` inherit from it and the content source in `source.py` drives
them to fetch block children, page objects and database rows.

It centralizes:

- Base URL and HTTP headers (including Notion-Version and optional User-Agent).
- Authentication using a Notion integration token (Bearer auth).
- Cursor pagination over the standard Notion envelope
  `{ "results": [...], "next_cursor": "..." }`.
- `page_size`/`start_cursor` handling for both GET (query string) and POST
  (JSON body) endpoints.
"""

from __future__ import annotations

import decimal
import sys
import typing as t

from singer_sdk.authenticators import BearerTokenAuthenticator
from singer_sdk.helpers.jsonpath import extract_jsonpath
from singer_sdk.streams import RESTStream

if sys.version_info >= (3, 12):
    from typing import override
else:
    from typing_extensions import override

if t.TYPE_CHECKING:
    import requests
    from singer_sdk.helpers.types import Context


DEFAULT_NOTION_VERSION = "2022-06-28"
# Notion rejects page_size values above 100
DEFAULT_PAGE_SIZE = 100


class NotionStream(RESTStream):
    """Base stream for the Notion API.

    Implements Notion-specific defaults for base URL, pagination, and headers.
    """

    # Most list endpoints return an envelope with `results` and `next_cursor`.
    records_jsonpath = "$.results[*]"
    next_page_token_jsonpath = "$.next_cursor"  # noqa: S105

    @override
    @property
    def url_base(self) -> str:
        """Return the Notion API base URL."""
        return "https://api.notion.com/v1"

    @override
    @property
    def authenticator(self) -> BearerTokenAuthenticator:
        """Return a new authenticator object using the Notion integration token."""
        return BearerTokenAuthenticator(token=self.config.get("auth_token", ""))

    @property
    @override
    def http_headers(self) -> dict:
        """Return the HTTP headers including Notion-Version and optional UA."""
        headers: dict[str, str] = {}
        headers["Notion-Version"] = self.config.get("notion_version") or DEFAULT_NOTION_VERSION
        user_agent = self.config.get("user_agent")
        if user_agent:
            headers["User-Agent"] = user_agent
        return headers

    @property
    def page_size(self) -> int:
        """Items per request, bounded by Notion's maximum."""
        return min(self.config.get("page_size") or DEFAULT_PAGE_SIZE, DEFAULT_PAGE_SIZE)

    @override
    def get_url_params(
        self,
        context: Context | None,
        next_page_token: t.Any | None,
    ) -> dict[str, t.Any]:
        """Return URL parameters for Notion list endpoints.

        For GET requests the cursor and page size travel in the query string:

        - First request: ?page_size=100
        - Subsequent requests: ?page_size=100&start_cursor=abc123

        POST endpoints (database queries) carry both in the JSON body
        instead, see `prepare_request_payload`.

        Args:
            context: The stream context.
            next_page_token: The next cursor value from the previous response, or None
                for the first request.

        Returns:
            A dictionary of URL query parameters.
        """
        params: dict[str, t.Any] = {}
        if self.http_method.upper() != "POST":
            if next_page_token:
                params["start_cursor"] = next_page_token
            params["page_size"] = self.page_size
        return params

    @override
    def prepare_request_payload(
        self,
        context: Context | None,
        next_page_token: t.Any | None,
    ) -> dict | None:
        """Prepare the JSON body for POST endpoints.

        GET endpoints send no payload.

        Args:
            context: The stream context.
            next_page_token: The next cursor value from the previous response.

        Returns:
            A dictionary with the JSON body for POST requests, else None.
        """
        if self.http_method.upper() != "POST":
            return None
        payload: dict[str, t.Any] = {"page_size": self.page_size}
        if next_page_token:
            payload["start_cursor"] = next_page_token
        return payload

    @override
    def parse_response(self, response: requests.Response) -> t.Iterable[dict]:
        """Parse the response and return an iterator of result records.

        Example:
            API response: {"results": [{"id": "1"}, {"id": "2"}], "next_cursor": "abc"}
            This method yields: {"id": "1"}, then {"id": "2"}

        Args:
            response: The HTTP ``requests.Response`` object.

        Yields:
            Each record from the source.
        """
        yield from extract_jsonpath(
            self.records_jsonpath,
            input=response.json(parse_float=decimal.Decimal),
        )
