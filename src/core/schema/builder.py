"""Schema-driven normalization engine.

`build_entity` walks a flat schema against a raw wire record and returns a
dict of coerced values in schema order. It is the only place where Omeda
types are interpreted; entities only contribute schemas and field builders.

Field builders:
- A mapping `field name -> callable`. The callable receives keyword
  arguments `name`, `type`, `value` and `parent` (the whole raw record).
- A non-`None` return value is used verbatim and coercion is skipped for
  that field; `None` falls through to the coercion table.
"""

from __future__ import annotations

import math
import re
from datetime import date, datetime
from typing import Any, Callable, Mapping, Protocol

from dateutil import parser as date_parser

from core.schema.types import SchemaEntry, SchemaType

_INT_PREFIX = re.compile(r"^\s*([+-]?\d+)")


def _is_nan(value: Any) -> bool:
    return isinstance(value, float) and math.isnan(value)


class FieldBuilder(Protocol):
    def __call__(self, *, name: str, type: str, value: Any, parent: Mapping[str, Any]) -> Any: ...


def to_datetime(value: Any) -> datetime | None:
    if value is None:
        return None
    if isinstance(value, datetime):
        return value
    if isinstance(value, date):
        return datetime(value.year, value.month, value.day)
    if not isinstance(value, str) or not value.strip():
        return None
    try:
        return date_parser.parse(value)
    except (ValueError, OverflowError):
        return None


def to_string(value: Any) -> str | None:
    if not value or _is_nan(value):
        return None
    if value is True:
        return "true"
    trimmed = str(value).strip()
    return trimmed or None


def to_boolean(value: Any) -> bool | None:
    # Omeda sends string flags; "false" and "0" are truthy as strings.
    if value == "false" or value == "0":
        return False
    if value is None:
        return None
    if _is_nan(value):
        return False
    return bool(value)


def to_integer(value: Any) -> int | float | None:
    """Base-10 parse of the leading integer prefix; `nan` when there is none."""

    if value is None:
        return None
    if isinstance(value, bool):
        return math.nan
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        if math.isnan(value) or math.isinf(value):
            return math.nan
        return int(value)
    match = _INT_PREFIX.match(str(value))
    if match is None:
        return math.nan
    return int(match.group(1))


def to_number(value: Any) -> int | float | None:
    if value is None:
        return None
    if isinstance(value, bool):
        return int(value)
    if isinstance(value, (int, float)):
        return value
    if isinstance(value, str):
        text = value.strip()
        if not text:
            return 0
        try:
            return int(text)
        except ValueError:
            pass
        try:
            return float(text)
        except ValueError:
            return math.nan
    return math.nan


def to_list(value: Any) -> list[Any]:
    return value if isinstance(value, list) else []


COERCERS: dict[SchemaType, Callable[[Any], Any]] = {
    SchemaType.DATETIME: to_datetime,
    SchemaType.DATE: to_datetime,
    SchemaType.STRING: to_string,
    SchemaType.LINK: to_string,
    SchemaType.BOOLEAN: to_boolean,
    SchemaType.SHORT_BOOLEAN: to_boolean,
    SchemaType.INTEGER: to_integer,
    SchemaType.SHORT: to_integer,
    SchemaType.BYTE: to_integer,
    SchemaType.INT: to_integer,
    SchemaType.DECIMAL: to_number,
    SchemaType.LONG: to_number,
    SchemaType.DOUBLE: to_number,
    SchemaType.ARRAY: to_list,
    SchemaType.LIST: to_list,
}


def coerce_value(type_token: SchemaType | str, value: Any, *, field: str | None = None) -> Any:
    """Apply the coercion rule for `type_token` (raises on unknown tokens)."""

    return COERCERS[SchemaType.resolve(type_token, field=field)](value)


def build_entity(
    schema: tuple[SchemaEntry, ...] | list[SchemaEntry],
    obj: Any,
    builders: Mapping[str, FieldBuilder] | None = None,
) -> dict[str, Any]:
    """Normalize `obj` against `schema`, consulting `builders` per field."""

    # Nested arrays can carry stray scalars; those read as an empty record.
    record: Mapping[str, Any] = obj if isinstance(obj, Mapping) else {}
    data: dict[str, Any] = {}
    for entry in schema:
        value = record.get(entry.name)

        hook = builders.get(entry.name) if builders else None
        if hook is not None:
            built = hook(name=entry.name, type=entry.type, value=value, parent=record)
            if built is not None:
                data[entry.name] = built
                continue

        data[entry.name] = coerce_value(entry.type, value, field=entry.name)
    return data


def as_array(value: Any) -> list[Any]:
    """Wrap scalars in a list; `None` becomes an empty list."""

    if value is None:
        return []
    if isinstance(value, list):
        return value
    if isinstance(value, tuple):
        return list(value)
    return [value]
