"""Recursive Notion page crawler.

The crawler walks a page's block tree through a `ContentSource`, rendering
each block to text with a serializer table and collecting one `Page` per
visited Notion page into a shared `PageRegistry`:

- `child_page` blocks start a new page, with indentation reset to zero.
- `child_database` blocks are expanded row by row, each row crawled as a page.
- Structural wrappers (tables, columns, synced blocks) are walked without
  adding indentation.

Remote failures never abort a crawl. A failed fetch is logged and treated as
an empty result, so whatever was already rendered still reaches the registry.
"""

from __future__ import annotations

import logging
import typing as t
from dataclasses import dataclass, field

from .serializers import SerializerTable, default_block_table, default_property_table

if t.TYPE_CHECKING:
    from .source import ContentSource

INDENT = "  "

# Containers whose children are rendered at the container's own depth
TRANSPARENT_CONTAINERS = frozenset({"table", "table_row", "column_list", "column", "synced_block"})


@dataclass
class Page:
    """A crawled Notion page and its rendered lines."""

    id: str
    title: str = ""
    created_time: str | None = None
    last_edited_time: str | None = None
    parent_id: str | None = None
    lines: list[str] = field(default_factory=list)
    properties: dict[str, str] = field(default_factory=dict)

    @property
    def text(self) -> str:
        return "\n".join(self.lines)

    def to_record(self) -> dict[str, t.Any]:
        return {
            "id": self.id,
            "title": self.title,
            "created_time": self.created_time,
            "last_edited_time": self.last_edited_time,
            "parent_id": self.parent_id,
            "lines": list(self.lines),
            "content": self.text,
            "properties": dict(self.properties),
        }


class PageRegistry:
    """Pages keyed by identifier; each identifier is initialized at most once."""

    def __init__(self) -> None:
        self._pages: dict[str, Page] = {}

    def add(self, page: Page) -> Page:
        """Insert `page` unless its id is already present; return the stored page."""
        return self._pages.setdefault(page.id, page)

    def merge(self, other: PageRegistry) -> PageRegistry:
        """Insert every page of `other` that is not already present."""
        if other is not self:
            for page in other:
                self.add(page)
        return self

    def get(self, page_id: str) -> Page | None:
        return self._pages.get(page_id)

    def __contains__(self, page_id: object) -> bool:
        return page_id in self._pages

    def __getitem__(self, page_id: str) -> Page:
        return self._pages[page_id]

    def __iter__(self) -> t.Iterator[Page]:
        return iter(self._pages.values())

    def __len__(self) -> int:
        return len(self._pages)

    def ids(self) -> list[str]:
        return list(self._pages)


@dataclass
class FetchResult:
    """Outcome of one remote call: the items fetched, or the error that occurred."""

    items: list[dict] = field(default_factory=list)
    error: Exception | None = None

    @property
    def ok(self) -> bool:
        return self.error is None


def indent(text: str, depth: int) -> str:
    """Indent every line of `text` by `depth` levels."""
    if depth <= 0:
        return text
    prefix = INDENT * depth
    return "\n".join(prefix + line for line in text.split("\n"))


def nesting_depth(block: dict, depth: int) -> int:
    """Depth at which the children of `block` are rendered."""
    kind = block.get("type")
    if kind == "child_page":
        return 0
    if kind in TRANSPARENT_CONTAINERS:
        return depth
    return depth + 1


def children_source_id(block: dict) -> str:
    """Identifier to fetch children from; synced copies read from their original."""
    if block.get("type") == "synced_block":
        synced_from = (block.get("synced_block") or {}).get("synced_from") or {}
        return synced_from.get("block_id") or block["id"]
    return block["id"]


def page_title(page: dict) -> str:
    """Title of a page object, taken from its title-type property."""
    for prop in (page.get("properties") or {}).values():
        if isinstance(prop, dict) and prop.get("type") == "title":
            return "".join(run.get("plain_text") or "" for run in prop.get("title") or [])
    return ""


class Crawler:
    """Crawl Notion pages and databases into a `PageRegistry`.

    Args:
        source: Remote content source used for every fetch.
        blocks: Block serializer table. Defaults to Markdown rendering.
        properties: Page property serializer table. Defaults to rendering
            nothing.
        logger: Logger for soft failures and progress messages.
    """

    def __init__(
        self,
        source: ContentSource,
        blocks: SerializerTable | None = None,
        properties: SerializerTable | None = None,
        logger: logging.Logger | None = None,
    ) -> None:
        self.source = source
        self.blocks = blocks if blocks is not None else default_block_table()
        self.properties = properties if properties is not None else default_property_table()
        self.logger = logger or logging.getLogger(__name__)

    def _fetch(self, description: str, object_id: str, fetch: t.Callable[[str], t.Any]) -> FetchResult:
        try:
            result = fetch(object_id)
            if result is None:
                return FetchResult()
            if isinstance(result, dict):
                return FetchResult(items=[result])
            # Sources may paginate lazily, so materialize inside the guard
            return FetchResult(items=list(result))
        except Exception as exc:  # noqa: BLE001
            self.logger.warning("Fetching Notion %s failed. [id: %s] %s", description, object_id, exc)
            return FetchResult(error=exc)

    def fetch_children(self, block_id: str) -> FetchResult:
        return self._fetch("block children", block_id, self.source.list_children)

    def fetch_page(self, page_id: str) -> FetchResult:
        return self._fetch("page", page_id, self.source.get_page)

    def fetch_database_rows(self, database_id: str) -> FetchResult:
        return self._fetch("database rows", database_id, self.source.query_database_rows)

    def walk(
        self,
        blocks: t.Iterable[dict],
        cursor: Page,
        registry: PageRegistry,
        depth: int = 0,
    ) -> PageRegistry:
        """Render `blocks` into `cursor` and recurse into their children.

        A block that fails to render or to expand is logged and skipped; its
        siblings are still visited.

        Args:
            blocks: Sibling blocks, in document order.
            cursor: Page receiving the rendered lines.
            registry: Shared registry; `cursor` is inserted if absent.
            depth: Indentation level for this list of siblings.

        Returns:
            The registry, including every page discovered under `blocks`.
        """
        registry.add(cursor)

        for block in blocks:
            kind = block.get("type") if isinstance(block, dict) else None
            if kind not in self.blocks:
                self.logger.debug("Skipping block without a known type. [block: %r]", block)
                continue

            try:
                self._visit(block, kind, cursor, registry, depth)
            except Exception:
                self.logger.exception("Visiting Notion block failed. [pageId: %s, blockId: %s]", cursor.id, block.get("id"))

        return registry

    def _visit(self, block: dict, kind: str, cursor: Page, registry: PageRegistry, depth: int) -> None:
        text = self.blocks.serialize(kind, block)
        if text is not None:
            cursor.lines.append(indent(text, depth))

        if kind == "child_database":
            self._expand_database(block, cursor, registry)
            return

        if kind == "child_page":
            if block["id"] in registry:
                self.logger.debug("Page already crawled, not walking it again. [id: %s]", block["id"])
                return
            next_cursor = Page(
                id=block["id"],
                title=(block.get("child_page") or {}).get("title") or "",
                created_time=block.get("created_time"),
                last_edited_time=block.get("last_edited_time"),
                parent_id=cursor.id,
            )
            if not block.get("has_children"):
                registry.add(next_cursor)
                return
        elif block.get("has_children"):
            next_cursor = cursor
        else:
            return

        children = self.fetch_children(children_source_id(block))
        registry.merge(self.walk(children.items, next_cursor, registry, nesting_depth(block, depth)))

    def _expand_database(self, block: dict, cursor: Page, registry: PageRegistry) -> None:
        registry.add(
            Page(
                id=block["id"],
                title=(block.get("child_database") or {}).get("title") or "",
                created_time=block.get("created_time"),
                last_edited_time=block.get("last_edited_time"),
                parent_id=cursor.id,
            )
        )
        registry.merge(self.crawl_database(block["id"], registry))

    def render_properties(self, page: dict) -> dict[str, str]:
        """Render a page object's properties with the property table.

        A property that fails to render is logged and left out.
        """
        rendered: dict[str, str] = {}
        for name, prop in (page.get("properties") or {}).items():
            kind = prop.get("type") if isinstance(prop, dict) else None
            if kind not in self.properties:
                continue
            try:
                text = self.properties.serialize(kind, prop)
            except Exception:
                self.logger.exception("Rendering page property failed. [pageId: %s, property: %s]", page.get("id"), name)
                continue
            if text is not None:
                rendered[name] = text
        return rendered

    def crawl(
        self,
        root_page_id: str,
        parent_id: str | None = None,
        registry: PageRegistry | None = None,
        page: dict | None = None,
    ) -> PageRegistry:
        """Crawl a page and everything below it.

        `page` is the page object when the caller already has it (database
        rows come back as full page objects); otherwise it is fetched. If the
        page metadata cannot be fetched the crawl continues with the
        requested id and empty metadata; if its blocks cannot be fetched the
        page is registered without lines.
        """
        registry = registry if registry is not None else PageRegistry()
        if root_page_id in registry:
            self.logger.debug("Page already crawled. [id: %s]", root_page_id)
            return registry

        if page is None:
            fetched = self.fetch_page(root_page_id)
            page = fetched.items[0] if fetched.items else {}

        # Notion returns the canonical (dashed) form of the id
        page_id = page.get("id") or root_page_id
        if page_id in registry:
            self.logger.debug("Page already crawled. [id: %s]", page_id)
            return registry

        cursor = Page(
            id=page_id,
            title=page_title(page),
            created_time=page.get("created_time"),
            last_edited_time=page.get("last_edited_time"),
            parent_id=parent_id,
            properties=self.render_properties(page),
        )
        root_blocks = self.fetch_children(page_id)

        return self.walk(root_blocks.items, cursor, registry)

    def crawl_database(self, database_id: str, registry: PageRegistry | None = None) -> PageRegistry:
        """Crawl every row of a database as a page whose parent is the database."""
        registry = registry if registry is not None else PageRegistry()
        rows = self.fetch_database_rows(database_id)

        for row in rows.items:
            row_id = row.get("id")
            if not row_id:
                continue
            try:
                registry.merge(self.crawl(row_id, parent_id=database_id, registry=registry, page=row))
            except Exception:
                self.logger.exception("Crawling database row failed. [databaseId: %s, rowId: %s]", database_id, row_id)

        return registry
