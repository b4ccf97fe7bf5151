"""Schemas and the normalization engine that interprets them."""

from core.schema.builder import as_array, build_entity, coerce_value
from core.schema.types import Schema, SchemaEntry, SchemaType, define_schema

__all__ = [
    "Schema",
    "SchemaEntry",
    "SchemaType",
    "as_array",
    "build_entity",
    "coerce_value",
    "define_schema",
]
