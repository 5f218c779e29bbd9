"""Kind-keyed serializer tables.

A table maps every kind tag of a closed set (block types or property types)
to a function returning a text line, or ``None`` when the object produces no
output. Tables are checked for completeness when they are built so that a
missing serializer is reported at assembly time instead of silently dropping
content during a crawl.
"""

from __future__ import annotations

import typing as t
from collections.abc import Mapping

Serializer = t.Callable[[dict], t.Optional[str]]


class SerializerConfigError(ValueError):
    """Raised when a serializer table does not cover its kinds exactly."""


def no_output(_obj: dict) -> str | None:
    """Serializer that renders nothing."""
    return None


class SerializerTable(Mapping):
    """Immutable, exhaustive mapping from kind tag to serializer."""

    def __init__(self, kinds: t.Iterable[str], entries: Mapping[str, Serializer]) -> None:
        self._kinds = frozenset(kinds)

        missing = sorted(self._kinds - set(entries))
        if missing:
            raise SerializerConfigError(f"No serializer registered for: {', '.join(missing)}")

        unknown = sorted(set(entries) - self._kinds)
        if unknown:
            raise SerializerConfigError(f"Serializers registered for unknown kinds: {', '.join(unknown)}")

        not_callable = sorted(kind for kind, fn in entries.items() if not callable(fn))
        if not_callable:
            raise SerializerConfigError(f"Serializers are not callable for: {', '.join(not_callable)}")

        self._entries: dict[str, Serializer] = dict(entries)

    @property
    def kinds(self) -> frozenset[str]:
        return self._kinds

    def __getitem__(self, kind: str) -> Serializer:
        return self._entries[kind]

    def __iter__(self) -> t.Iterator[str]:
        return iter(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def __repr__(self) -> str:
        return f"{type(self).__name__}({len(self)} kinds)"

    def serialize(self, kind: str, obj: dict) -> str | None:
        """Render `obj` with the serializer registered for `kind`."""
        return self._entries[kind](obj)


def build_table(
    kinds: t.Iterable[str],
    base: Mapping[str, Serializer],
    *overrides: Mapping[str, Serializer] | None,
) -> SerializerTable:
    """Merge partial overrides onto a base mapping and validate the result.

    Later overrides win per kind. ``None`` overrides are ignored so callers
    can pass optional user configuration straight through.
    """
    merged: dict[str, Serializer] = dict(base)
    for override in overrides:
        if override:
            merged.update(override)
    return SerializerTable(kinds, merged)


def silent_table(kinds: t.Iterable[str]) -> SerializerTable:
    """Baseline table where every kind renders nothing."""
    kinds = tuple(kinds)
    return SerializerTable(kinds, {kind: no_output for kind in kinds})
