"""Serializer tables for Notion blocks and page properties."""

from .blocks import BLOCK_TYPES, default_block_table, silent_block_table
from .properties import PROPERTY_TYPES, default_property_table, rich_property_table
from .table import (
    Serializer,
    SerializerConfigError,
    SerializerTable,
    build_table,
    no_output,
    silent_table,
)

__all__ = [
    "BLOCK_TYPES",
    "PROPERTY_TYPES",
    "Serializer",
    "SerializerConfigError",
    "SerializerTable",
    "build_table",
    "default_block_table",
    "default_property_table",
    "no_output",
    "rich_property_table",
    "silent_block_table",
    "silent_table",
]
