"""Block serializers.

Each serializer receives a Notion block object and returns one rendered
(Markdown-flavoured) text, or ``None`` when the block produces no output.
Container blocks whose content lives entirely in their children
(`column_list`, `column`, `table`, `synced_block`, ...) render nothing
themselves; the crawler walks into their children.
"""

from __future__ import annotations

import typing as t

from .rich_text import file_url, markdown_text, plain_text
from .table import Serializer, SerializerTable, build_table, no_output, silent_table

BLOCK_TYPES: tuple[str, ...] = (
    "audio",
    "bookmark",
    "breadcrumb",
    "bulleted_list_item",
    "callout",
    "child_database",
    "child_page",
    "code",
    "column",
    "column_list",
    "divider",
    "embed",
    "equation",
    "file",
    "heading_1",
    "heading_2",
    "heading_3",
    "image",
    "link_preview",
    "link_to_page",
    "numbered_list_item",
    "paragraph",
    "pdf",
    "quote",
    "synced_block",
    "table",
    "table_of_contents",
    "table_row",
    "template",
    "to_do",
    "toggle",
    "unsupported",
    "video",
)


def payload(block: dict) -> dict:
    """Return the kind-specific payload of a block."""
    return block.get(block.get("type", ""), None) or {}


def _text(block: dict) -> str:
    return markdown_text(payload(block).get("rich_text"))


def _caption(block: dict) -> str:
    return plain_text(payload(block).get("caption"))


def paragraph(block: dict) -> str | None:
    # Empty paragraphs are spacing in Notion, not content
    return _text(block) or None


def heading(level: int) -> Serializer:
    prefix = "#" * level

    def serialize(block: dict) -> str | None:
        return f"{prefix} {_text(block)}"

    return serialize


def bulleted_list_item(block: dict) -> str | None:
    return f"- {_text(block)}"


def numbered_list_item(block: dict) -> str | None:
    return f"1. {_text(block)}"


def to_do(block: dict) -> str | None:
    mark = "x" if payload(block).get("checked") else " "
    return f"- [{mark}] {_text(block)}"


def toggle(block: dict) -> str | None:
    return f"- {_text(block)}"


def quote(block: dict) -> str | None:
    return f"> {_text(block)}"


def callout(block: dict) -> str | None:
    icon = payload(block).get("icon") or {}
    emoji = icon.get("emoji") if icon.get("type") == "emoji" else None
    text = _text(block)
    return f"> {emoji} {text}" if emoji else f"> {text}"


def code(block: dict) -> str | None:
    data = payload(block)
    language = data.get("language") or ""
    if language == "plain text":
        language = ""
    body = plain_text(data.get("rich_text"))
    return f"```{language}\n{body}\n```"


def equation(block: dict) -> str | None:
    return f"$$\n{payload(block).get('expression') or ''}\n$$"


def divider(block: dict) -> str | None:
    return "---"


def image(block: dict) -> str | None:
    return f"![{_caption(block)}]({file_url(payload(block))})"


def media(block: dict) -> str | None:
    """Link rendering shared by audio, video, file and pdf blocks."""
    data = payload(block)
    url = file_url(data)
    label = _caption(block) or data.get("name") or url
    return f"[{label}]({url})"


def bookmark(block: dict) -> str | None:
    """Link rendering shared by bookmark, embed and link_preview blocks."""
    url = payload(block).get("url") or ""
    if not url:
        return None
    return f"[{_caption(block) or url}]({url})"


def link_to_page(block: dict) -> str | None:
    data = payload(block)
    target = data.get(data.get("type", ""), None)
    if not target:
        return None
    return f"[{target}](notion://{target})"


def table_row(block: dict) -> str | None:
    cells = payload(block).get("cells") or []
    rendered = [markdown_text(cell).replace("|", "\\|") for cell in cells]
    return "| " + " | ".join(rendered) + " |"


BLOCK_SERIALIZERS: t.Mapping[str, Serializer] = {
    "audio": media,
    "bookmark": bookmark,
    "breadcrumb": no_output,
    "bulleted_list_item": bulleted_list_item,
    "callout": callout,
    "child_database": no_output,
    "child_page": no_output,
    "code": code,
    "column": no_output,
    "column_list": no_output,
    "divider": divider,
    "embed": bookmark,
    "equation": equation,
    "file": media,
    "heading_1": heading(1),
    "heading_2": heading(2),
    "heading_3": heading(3),
    "image": image,
    "link_preview": bookmark,
    "link_to_page": link_to_page,
    "numbered_list_item": numbered_list_item,
    "paragraph": paragraph,
    "pdf": media,
    "quote": quote,
    "synced_block": no_output,
    "table": no_output,
    "table_of_contents": no_output,
    "table_row": table_row,
    "template": no_output,
    "to_do": to_do,
    "toggle": toggle,
    "unsupported": no_output,
    "video": media,
}


def silent_block_table() -> SerializerTable:
    """Block table that renders nothing; only document shape is crawled."""
    return silent_table(BLOCK_TYPES)


def default_block_table(overrides: t.Mapping[str, Serializer] | None = None) -> SerializerTable:
    """Markdown block table, optionally with some kinds overridden."""
    return build_table(BLOCK_TYPES, BLOCK_SERIALIZERS, overrides)
