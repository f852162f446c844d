"""
Schema registry and compilation.

Object types are registered once at startup. Compiling a root resolves every
``Ref``, checks the type graph is acyclic and at most ``max_depth`` object
levels deep, and freezes the registry. Violations raise ``SchemaError``.
"""

import logging
from collections.abc import Iterator
from collections.abc import Mapping
from dataclasses import dataclass
from dataclasses import replace
from types import MappingProxyType

from ._errors import SchemaError
from ._location import FieldPath
from ._schema import FieldSpec
from ._schema import ListOf
from ._schema import ObjectOf
from ._schema import Ref
from ._schema import Scalar
from ._schema import SchemaType
from ._schema import SetOf

logger = logging.getLogger(__name__)

MAX_SCHEMA_DEPTH = 10


@dataclass(frozen=True)
class CompiledSchema:
    """
    A fully resolved schema graph, safe to share across threads.

    ``depth`` is the longest chain of object levels from the root and
    ``types`` maps every reachable object type name to its resolved form.
    """

    root: SchemaType
    depth: int
    types: Mapping[str, ObjectOf]

    @property
    def root_name(self) -> str:
        return self.root.name if isinstance(self.root, ObjectOf) else "$"


class SchemaRegistry:
    """
    Holds the object types of an application.

    Built once, compiled, then read-only for the life of the process.
    """

    def __init__(self, *, max_depth: int = MAX_SCHEMA_DEPTH) -> None:
        if max_depth < 1:
            raise ValueError("max_depth must be positive")
        self.max_depth = max_depth
        self._types: dict[str, ObjectOf] = {}
        self._frozen = False

    def register(self, obj: ObjectOf) -> ObjectOf:
        """Adds a named object type; names must be unique."""
        if self._frozen:
            raise SchemaError(
                f"Cannot register {obj.name!r}: registry is frozen",
                hint="register every type before compiling",
            )
        if not isinstance(obj, ObjectOf):
            raise TypeError("only ObjectOf types can be registered")
        if obj.name in self._types:
            raise SchemaError(
                f"Type {obj.name!r} is already registered",
                hint="give each object type a unique name",
            )
        self._types[obj.name] = obj
        logger.debug(
            "Registered type %s with %d fields", obj.name, len(obj.fields)
        )
        return obj

    def define(self, name: str, *fields: FieldSpec) -> ObjectOf:
        """Declares and registers an object type in one step."""
        return self.register(ObjectOf(name, fields))

    def freeze(self) -> None:
        self._frozen = True

    @property
    def frozen(self) -> bool:
        return self._frozen

    def get(self, name: str) -> ObjectOf | None:
        return self._types.get(name)

    def __contains__(self, name: object) -> bool:
        return name in self._types

    def __iter__(self) -> Iterator[str]:
        return iter(self._types)

    def __len__(self) -> int:
        return len(self._types)

    def compile(self, root: str | SchemaType | Ref) -> CompiledSchema:
        """
        Resolves and validates the graph reachable from ``root``.

        ``root`` may be a registered type name, a ``Ref`` or any schema type.
        The registry is frozen afterwards.
        """
        if isinstance(root, str):
            root = Ref(root)

        compiler = _SchemaCompiler(self._types, self.max_depth)
        resolved, depth = compiler.resolve(root, ())
        self.freeze()

        schema = CompiledSchema(
            root=resolved,
            depth=depth,
            types=MappingProxyType(
                {name: obj for name, (obj, _) in compiler.resolved.items()}
            ),
        )
        logger.info(
            "Compiled schema %s: %d object types, depth %d",
            resolved.describe(),
            len(schema.types),
            depth,
        )
        return schema


class _SchemaCompiler:
    """Depth-first resolution with a visiting trail for cycle detection."""

    def __init__(self, types: Mapping[str, ObjectOf], max_depth: int) -> None:
        self.types = types
        self.max_depth = max_depth
        self.resolved: dict[str, tuple[ObjectOf, int]] = {}
        self._definitions: dict[str, ObjectOf] = {}

    def resolve(
        self, schema: SchemaType | Ref, trail: tuple[str, ...]
    ) -> tuple[SchemaType, int]:
        """Returns the resolved type and its depth in object levels."""
        if isinstance(schema, Scalar):
            return schema, 0
        elif isinstance(schema, ListOf | SetOf):
            element, depth = self.resolve(schema.element, trail)
            return replace(schema, element=element), depth
        elif isinstance(schema, Ref):
            target = self.types.get(schema.name)
            if target is None:
                raise SchemaError(
                    f"Unresolved type reference {schema.name!r}",
                    path=_trail_path(trail),
                    hint="register the type before compiling",
                )
            return self.resolve(target, trail)
        elif isinstance(schema, ObjectOf):
            return self._resolve_object(schema, trail)
        raise SchemaError(f"Unsupported schema type {type(schema).__name__}")

    def _resolve_object(
        self, obj: ObjectOf, trail: tuple[str, ...]
    ) -> tuple[ObjectOf, int]:
        name = obj.name
        if name in trail:
            cycle = " -> ".join((*trail[trail.index(name) :], name))
            raise SchemaError(
                f"Cyclic schema reference: {cycle}",
                hint="replace the back-reference with an identifier field",
            )

        known = self._definitions.get(name)
        if known is not None and known != obj:
            raise SchemaError(
                f"Conflicting definitions for type {name!r}",
                hint="declare each object type once and reference it by Ref",
            )

        cached = self.resolved.get(name)
        if cached is None:
            self._definitions[name] = obj
            cached = self._resolve_fields(obj, (*trail, name))
            self.resolved[name] = cached

        resolved, depth = cached
        if len(trail) + depth > self.max_depth:
            chain = " -> ".join((*trail, name))
            raise SchemaError(
                "Schema nesting too deep",
                expected=f"at most {self.max_depth} object levels",
                actual=f"{len(trail) + depth} levels via {chain}",
                hint="flatten the type hierarchy",
            )
        return resolved, depth

    def _resolve_fields(
        self, obj: ObjectOf, trail: tuple[str, ...]
    ) -> tuple[ObjectOf, int]:
        seen: set[str] = set()
        fields: list[FieldSpec] = []
        depth = 0
        for spec in obj.fields:
            if spec.name in seen:
                raise SchemaError(
                    f"Duplicate field name {spec.name!r} in type {obj.name!r}",
                    path=FieldPath(obj.name, (spec.name,)),
                    hint="each field has exactly one wire name",
                )
            seen.add(spec.name)
            field_type, field_depth = self.resolve(spec.type, trail)
            fields.append(replace(spec, type=field_type))
            depth = max(depth, field_depth)
        return ObjectOf(obj.name, tuple(fields)), depth + 1


def _trail_path(trail: tuple[str, ...]) -> FieldPath | None:
    if not trail:
        return None
    return FieldPath(trail[0], trail[1:])
