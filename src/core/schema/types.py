"""Schema vocabulary: coercion kinds and schema entries.

Why an enum plus a free-form token:
- Tables written in code use `SchemaType` members directly.
- Tables loaded from documentation carry plain strings (`"Integer"`,
  `"short (boolean)"`); those are only resolved when the engine runs, so an
  unknown token surfaces as `UnknownSchemaTypeError` at build time.
"""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, field_validator

from core.errors import UnknownSchemaTypeError


class SchemaType(str, Enum):
    """Coercion kinds understood by `core.schema.builder`."""

    DATETIME = "datetime"
    DATE = "date"
    STRING = "string"
    LINK = "link"
    BOOLEAN = "boolean"
    SHORT_BOOLEAN = "short (boolean)"
    INTEGER = "integer"
    SHORT = "short"
    BYTE = "byte"
    INT = "int"
    DECIMAL = "decimal"
    LONG = "long"
    DOUBLE = "double"
    ARRAY = "array"
    LIST = "list"

    @classmethod
    def resolve(cls, token: "SchemaType | str", *, field: str | None = None) -> "SchemaType":
        """Map a raw token onto a member or raise `UnknownSchemaTypeError`."""

        if isinstance(token, cls):
            return token
        try:
            return cls(str(token).strip().lower())
        except ValueError:
            raise UnknownSchemaTypeError(token, field=field) from None


class SchemaEntry(BaseModel):
    """One `{name, type}` pair of an entity schema."""

    model_config = ConfigDict(frozen=True)

    name: str = Field(..., min_length=1, description="Wire field name, case sensitive.")
    type: str = Field(..., min_length=1, description="Coercion token, see `SchemaType`.")

    @field_validator("type", mode="before")
    @classmethod
    def _normalize_token(cls, value: object) -> object:
        if isinstance(value, SchemaType):
            return value.value
        if isinstance(value, str):
            return value.strip().lower()
        return value


Schema = tuple[SchemaEntry, ...]


def define_schema(*pairs: tuple[str, "SchemaType | str"]) -> Schema:
    """Build an immutable schema from `(name, type)` pairs."""

    return tuple(SchemaEntry(name=name, type=type_) for name, type_ in pairs)
