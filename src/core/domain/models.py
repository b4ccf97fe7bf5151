"""Domain entities built from Omeda wire records.

Why thin shells:
- Every entity is a schema plus optional field builders; the coercion rules
  live once in `core.schema.builder`.
- Nested entities are built by field builders that instantiate the child
  entity class over each element of a sub-array.

Entities are value objects: fields are exposed as attributes (using the
wire names, e.g. `entity.DemographicType`), they cannot be mutated after
construction, and two entities are equal when their type and fields match.
"""

from __future__ import annotations

from typing import Any, ClassVar, Iterator, Mapping

from pydantic import BaseModel, ConfigDict, Field

from core.schema import tables
from core.schema.builder import FieldBuilder, as_array, build_entity, to_integer
from core.schema.types import Schema


class BuildInfo(BaseModel):
    """Package identity sent in the `user-agent` header."""

    model_config = ConfigDict(frozen=True)

    name: str = Field(default="omeda-client", min_length=1)
    version: str = Field(default="0.1.0", min_length=1)
    homepage: str = Field(default="https://github.com/omeda-client/omeda-client", min_length=1)

    @property
    def user_agent(self) -> str:
        return f"{self.name} v{self.version} (+{self.homepage})"


class OmedaEntity:
    """Base class: normalizes a raw record with `schema` and `builders`."""

    schema: ClassVar[Schema] = ()
    builders: ClassVar[Mapping[str, FieldBuilder]] = {}

    __slots__ = ("_data",)

    def __init__(self, obj: Mapping[str, Any] | None = None) -> None:
        object.__setattr__(self, "_data", build_entity(self.schema, obj, self.builders))

    def __getattr__(self, name: str) -> Any:
        if name == "_data":
            raise AttributeError(name)
        try:
            return self._data[name]
        except KeyError:
            raise AttributeError(f"{type(self).__name__} has no field '{name}'") from None

    def __setattr__(self, name: str, value: Any) -> None:
        raise AttributeError(f"{type(self).__name__} is immutable")

    def __delattr__(self, name: str) -> None:
        raise AttributeError(f"{type(self).__name__} is immutable")

    def __getitem__(self, name: str) -> Any:
        return self._data[name]

    def __iter__(self) -> Iterator[str]:
        return iter(self._data)

    def __eq__(self, other: object) -> bool:
        if type(other) is not type(self):
            return NotImplemented
        return self._data == other._data  # type: ignore[attr-defined]

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        fields = ", ".join(f"{k}={v!r}" for k, v in self._data.items())
        return f"{type(self).__name__}({fields})"

    def keys(self) -> list[str]:
        return list(self._data)

    def to_dict(self) -> dict[str, Any]:
        """Plain dict copy, nested entities included."""

        return {key: _unwrap(value) for key, value in self._data.items()}


def _unwrap(value: Any) -> Any:
    if isinstance(value, OmedaEntity):
        return value.to_dict()
    if isinstance(value, list):
        return [_unwrap(item) for item in value]
    return value


def nested(entity_cls: type[OmedaEntity]) -> FieldBuilder:
    """Field builder that maps each element of the field onto `entity_cls`."""

    def builder(*, name: str, type: str, value: Any, parent: Mapping[str, Any]) -> list[OmedaEntity]:
        return [entity_cls(obj) for obj in as_array(value)]

    return builder


# Demographic types that carry value ids: single choice, multiple choice and boolean.
CHOICE_DEMOGRAPHIC_TYPES = frozenset({1, 2, 5})


class BrandDemographicValueEntity(OmedaEntity):
    schema = tables.BRAND_DEMOGRAPHIC_VALUE


def _demographic_values(*, name: str, type: str, value: Any, parent: Mapping[str, Any]) -> list[OmedaEntity]:
    # Non-choice demographics come back with a single placeholder value (Id 0).
    if to_integer(parent.get("DemographicType")) not in CHOICE_DEMOGRAPHIC_TYPES:
        return []
    return [BrandDemographicValueEntity(obj) for obj in as_array(value)]


class BrandDemographicEntity(OmedaEntity):
    schema = tables.BRAND_DEMOGRAPHIC
    builders = {"DemographicValues": _demographic_values}


class BrandProductEntity(OmedaEntity):
    schema = tables.BRAND_PRODUCT


class CustomerEmailEntity(OmedaEntity):
    schema = tables.CUSTOMER_EMAIL


class ClickEntity(OmedaEntity):
    schema = tables.CLICK


class UnrealClickReasonEntity(OmedaEntity):
    schema = tables.UNREAL_CLICK_REASON


class UnrealClickEntity(OmedaEntity):
    schema = tables.UNREAL_CLICK
    builders = {"UnrealClicks": nested(UnrealClickReasonEntity)}


class LinkClickEntity(OmedaEntity):
    schema = tables.CLICK_LINK
    builders = {
        "clicks": nested(ClickEntity),
        "unrealClicks": nested(UnrealClickEntity),
    }
