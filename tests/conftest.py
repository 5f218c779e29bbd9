"""Shared fixtures: an in-memory Notion content source and block builders."""

from __future__ import annotations

import typing as t

import pytest

TIMESTAMP = "2024-01-15T10:30:00.000Z"


def rich_text(text: str, **annotations: bool) -> list[dict]:
    return [{"type": "text", "plain_text": text, "href": None, "annotations": annotations}]


def block(kind: str, block_id: str, text: str | None = None, has_children: bool = False, **payload: t.Any) -> dict:
    """Build a Notion block object of the given type."""
    body = dict(payload)
    if text is not None:
        body["rich_text"] = rich_text(text)
    return {
        "object": "block",
        "id": block_id,
        "type": kind,
        "has_children": has_children,
        "created_time": TIMESTAMP,
        "last_edited_time": TIMESTAMP,
        kind: body,
    }


def paragraph(block_id: str, text: str) -> dict:
    return block("paragraph", block_id, text)


def child_page(block_id: str, title: str, has_children: bool = True) -> dict:
    return block("child_page", block_id, has_children=has_children, title=title)


def child_database(block_id: str, title: str) -> dict:
    return block("child_database", block_id, title=title)


def page(page_id: str, title: str = "", **properties: dict) -> dict:
    """Build a Notion page object with a `title` property."""
    props: dict[str, dict] = {"title": {"id": "title", "type": "title", "title": rich_text(title) if title else []}}
    props.update(properties)
    return {
        "object": "page",
        "id": page_id,
        "created_time": TIMESTAMP,
        "last_edited_time": TIMESTAMP,
        "properties": props,
    }


class FakeSource:
    """Dict-backed content source recording every call.

    Ids listed in `failing` raise on any fetch, like a transport error would.
    """

    def __init__(
        self,
        pages: dict[str, dict] | None = None,
        children: dict[str, list[dict]] | None = None,
        databases: dict[str, list[dict]] | None = None,
        failing: t.Iterable[str] = (),
    ) -> None:
        self.pages = pages or {}
        self.children = children or {}
        self.databases = databases or {}
        self.failing = set(failing)
        self.calls: list[tuple[str, str]] = []

    def _check(self, operation: str, object_id: str) -> None:
        self.calls.append((operation, object_id))
        if object_id in self.failing:
            raise ConnectionError(f"{operation} failed for {object_id}")

    def list_children(self, block_id: str) -> list[dict]:
        self._check("children", block_id)
        return list(self.children.get(block_id, []))

    def get_page(self, page_id: str) -> dict:
        self._check("page", page_id)
        if page_id not in self.pages:
            raise LookupError(f"object_not_found: {page_id}")
        return self.pages[page_id]

    def query_database_rows(self, database_id: str) -> list[dict]:
        self._check("database", database_id)
        return list(self.databases.get(database_id, []))


@pytest.fixture
def source() -> FakeSource:
    return FakeSource()
