"""Helpers for Notion rich text arrays and file objects."""

from __future__ import annotations

import typing as t


def plain_text(rich_text: t.Iterable[dict] | None) -> str:
    """Concatenate the plain text of every run, ignoring annotations."""
    if not rich_text:
        return ""
    return "".join(run.get("plain_text") or "" for run in rich_text)


def markdown_text(rich_text: t.Iterable[dict] | None) -> str:
    """Concatenate rich text runs, applying Markdown annotations.

    Links are applied first so that emphasis wraps the whole link.
    """
    if not rich_text:
        return ""

    parts: list[str] = []
    for run in rich_text:
        text = run.get("plain_text") or ""
        if not text:
            continue

        annotations = run.get("annotations") or {}
        if annotations.get("code"):
            text = f"`{text}`"
        if run.get("href"):
            text = f"[{text}]({run['href']})"
        if annotations.get("bold"):
            text = f"**{text}**"
        if annotations.get("italic"):
            text = f"_{text}_"
        if annotations.get("strikethrough"):
            text = f"~~{text}~~"
        parts.append(text)

    return "".join(parts)


def file_url(payload: dict) -> str:
    """Return the URL of a Notion file object (hosted or external)."""
    kind = payload.get("type")
    if kind in ("external", "file", "file_upload"):
        return (payload.get(kind) or {}).get("url") or ""
    return payload.get("url") or ""
