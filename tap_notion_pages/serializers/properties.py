"""Page property serializers.

Property serializers receive one property value object from a page's
`properties` mapping (e.g. ``{"type": "select", "select": {"name": "Done"}}``)
and return its text, or ``None`` when there is nothing to show. The default
property table renders nothing; `rich_property_table` renders every kind.
"""

from __future__ import annotations

import typing as t

from .rich_text import file_url, plain_text
from .table import Serializer, SerializerTable, build_table, silent_table

PROPERTY_TYPES: tuple[str, ...] = (
    "checkbox",
    "created_by",
    "created_time",
    "date",
    "email",
    "files",
    "formula",
    "last_edited_by",
    "last_edited_time",
    "multi_select",
    "number",
    "people",
    "phone_number",
    "relation",
    "rich_text",
    "rollup",
    "select",
    "status",
    "title",
    "unique_id",
    "url",
    "verification",
)


def _value(prop: dict) -> t.Any:
    return prop.get(prop.get("type", ""))


def _scalar(prop: dict) -> str | None:
    value = _value(prop)
    if value is None or value == "":
        return None
    return str(value)


def _user(user: dict | None) -> str:
    user = user or {}
    return user.get("name") or user.get("id") or ""


def _join(values: t.Iterable[str]) -> str | None:
    rendered = ", ".join(value for value in values if value)
    return rendered or None


def checkbox(prop: dict) -> str | None:
    return "true" if prop.get("checkbox") else "false"


def text(prop: dict) -> str | None:
    """Title and rich_text properties."""
    return plain_text(_value(prop)) or None


def select(prop: dict) -> str | None:
    """Select and status properties."""
    option = _value(prop) or {}
    return option.get("name") or None


def multi_select(prop: dict) -> str | None:
    return _join(option.get("name", "") for option in prop.get("multi_select") or [])


def date(prop: dict) -> str | None:
    value = prop.get("date") or {}
    start, end = value.get("start"), value.get("end")
    if not start:
        return None
    return f"{start} -> {end}" if end else start


def user(prop: dict) -> str | None:
    """created_by and last_edited_by properties."""
    return _user(_value(prop)) or None


def people(prop: dict) -> str | None:
    return _join(_user(person) for person in prop.get("people") or [])


def files(prop: dict) -> str | None:
    return _join(item.get("name") or file_url(item) for item in prop.get("files") or [])


def relation(prop: dict) -> str | None:
    return _join(item.get("id", "") for item in prop.get("relation") or [])


def computed(prop: dict) -> str | None:
    """Formula and rollup values carry their own inner type tag."""
    value = _value(prop) or {}
    inner = value.get(value.get("type", ""))
    if inner is None:
        return None
    if value.get("type") == "array":
        return _join(filter(None, (_describe(item) for item in inner)))
    if isinstance(inner, dict):
        return _describe({"type": "date", "date": inner}) if value.get("type") == "date" else None
    if isinstance(inner, bool):
        return "true" if inner else "false"
    return str(inner)


def _describe(prop: dict) -> str | None:
    serializer = PROPERTY_SERIALIZERS.get(prop.get("type", ""))
    return serializer(prop) if serializer else None


def unique_id(prop: dict) -> str | None:
    value = prop.get("unique_id") or {}
    number = value.get("number")
    if number is None:
        return None
    prefix = value.get("prefix")
    return f"{prefix}-{number}" if prefix else str(number)


def verification(prop: dict) -> str | None:
    value = prop.get("verification") or {}
    return value.get("state") or None


PROPERTY_SERIALIZERS: t.Mapping[str, Serializer] = {
    "checkbox": checkbox,
    "created_by": user,
    "created_time": _scalar,
    "date": date,
    "email": _scalar,
    "files": files,
    "formula": computed,
    "last_edited_by": user,
    "last_edited_time": _scalar,
    "multi_select": multi_select,
    "number": _scalar,
    "people": people,
    "phone_number": _scalar,
    "relation": relation,
    "rich_text": text,
    "rollup": computed,
    "select": select,
    "status": select,
    "title": text,
    "unique_id": unique_id,
    "url": _scalar,
    "verification": verification,
}


def default_property_table(overrides: t.Mapping[str, Serializer] | None = None) -> SerializerTable:
    """Property table where nothing renders unless overridden."""
    return build_table(PROPERTY_TYPES, silent_table(PROPERTY_TYPES), overrides)


def rich_property_table(overrides: t.Mapping[str, Serializer] | None = None) -> SerializerTable:
    """Property table rendering every property kind."""
    return build_table(PROPERTY_TYPES, PROPERTY_SERIALIZERS, overrides)
