"""
Statically declared schema types.

A schema is plain data: a closed union of scalar, list, set and object
descriptions. There is no "any" variant, so an open-typed field cannot be
declared. ``Ref`` names a registered object type and only exists until the
registry compiles the schema.
"""

from dataclasses import dataclass
from typing import TypeAlias
from enum import Enum


class ScalarKind(Enum):
    """Scalar wire types and the Python type each binds to."""

    INTEGER32 = "Integer32"
    INTEGER64 = "Integer64"
    FLOAT64 = "Float64"
    BOOLEAN = "Boolean"
    STRING = "String"
    TIMESTAMP = "Timestamp"


@dataclass(frozen=True)
class Scalar:
    kind: ScalarKind

    def __post_init__(self) -> None:
        if not isinstance(self.kind, ScalarKind):
            raise TypeError("kind must be a ScalarKind")

    def describe(self) -> str:
        return self.kind.value


@dataclass(frozen=True)
class Ref:
    """Reference to a registered ``ObjectOf`` by name."""

    name: str

    def describe(self) -> str:
        return self.name


@dataclass(frozen=True)
class ListOf:
    """
    Ordered collection; duplicates kept.

    ``min_items``/``max_items`` bound the element count of the array.
    """

    element: "SchemaType | Ref"
    min_items: int = 0
    max_items: int | None = None

    def __post_init__(self) -> None:
        _check_schema_type(self.element, "element")
        if self.min_items < 0:
            raise ValueError("min_items must be non-negative")
        if self.max_items is not None and self.max_items < self.min_items:
            raise ValueError("max_items must not be less than min_items")

    def describe(self) -> str:
        return f"List<{self.element.describe()}>"


@dataclass(frozen=True)
class SetOf:
    """Collection de-duplicated by value after binding."""

    element: "SchemaType | Ref"

    def __post_init__(self) -> None:
        _check_schema_type(self.element, "element")

    def describe(self) -> str:
        return f"Set<{self.element.describe()}>"


@dataclass(frozen=True)
class FieldSpec:
    """
    One declared member of an object type.

    ``name`` is the single accepted wire name; matching is exact and
    case-sensitive.
    """

    name: str
    type: "SchemaType | Ref"
    required: bool = True
    nullable: bool = False

    def __post_init__(self) -> None:
        if not isinstance(self.name, str) or not self.name:
            raise TypeError("field name must be a non-empty string")
        _check_schema_type(self.type, f"type of field {self.name!r}")


@dataclass(frozen=True)
class ObjectOf:
    """A named object type with an ordered, closed set of fields."""

    name: str
    fields: tuple[FieldSpec, ...]

    def __post_init__(self) -> None:
        if not isinstance(self.name, str) or not self.name:
            raise TypeError("object type name must be a non-empty string")
        object.__setattr__(self, "fields", tuple(self.fields))
        for spec in self.fields:
            if not isinstance(spec, FieldSpec):
                raise TypeError(
                    f"fields of {self.name} must be FieldSpec instances"
                )
        object.__setattr__(
            self, "_names", frozenset(spec.name for spec in self.fields)
        )

    def field_names(self) -> tuple[str, ...]:
        return tuple(spec.name for spec in self.fields)

    def declares(self, name: str) -> bool:
        return name in self._names  # type: ignore[attr-defined]

    def describe(self) -> str:
        return self.name


SchemaType: TypeAlias = Scalar | ListOf | SetOf | ObjectOf

_SCHEMA_CLASSES = (Scalar, ListOf, SetOf, ObjectOf, Ref)


def _check_schema_type(value: object, what: str) -> None:
    if not isinstance(value, _SCHEMA_CLASSES):
        raise TypeError(
            f"{what} must be a schema type, not {type(value).__name__}"
        )


def field(
    name: str,
    type: SchemaType | Ref,
    *,
    required: bool = True,
    nullable: bool = False,
) -> FieldSpec:
    """Declares a field; shorthand for ``FieldSpec``."""
    return FieldSpec(name, type, required=required, nullable=nullable)


INTEGER32 = Scalar(ScalarKind.INTEGER32)
INTEGER64 = Scalar(ScalarKind.INTEGER64)
FLOAT64 = Scalar(ScalarKind.FLOAT64)
BOOLEAN = Scalar(ScalarKind.BOOLEAN)
STRING = Scalar(ScalarKind.STRING)
TIMESTAMP = Scalar(ScalarKind.TIMESTAMP)
