"""
Strict binder: maps a parsed value tree onto a compiled schema.

Binding is a single depth-first pass. The first violation raises and the
partially built result is discarded with the stack, so callers see either a
complete value or an error. No type coercion is ever attempted.
"""

import math
import re
from collections.abc import Iterator
from collections.abc import Mapping
from datetime import datetime
from datetime import timezone
from typing import Any

from ._config import DecodeConfig
from ._config import UnknownFieldPolicy
from ._errors import InvalidDateFormat
from ._errors import MissingRequiredField
from ._errors import NestingTooDeep
from ._errors import SchemaError
from ._errors import StringTooLong
from ._errors import TypeMismatch
from ._errors import UnexpectedNull
from ._errors import UnknownField
from ._guard import Deadline
from ._location import FieldPath
from ._profile import ProfileContext
from ._schema import ListOf
from ._schema import ObjectOf
from ._schema import Scalar
from ._schema import ScalarKind
from ._schema import SchemaType
from ._schema import SetOf
from ._values import MISSING
from ._values import ParseValue
from ._values import ValueKind

_INTEGER_RANGES = {
    ScalarKind.INTEGER32: (-(2**31), 2**31 - 1),
    ScalarKind.INTEGER64: (-(2**63), 2**63 - 1),
}
# longest decimal spelling of any Integer64, sign excluded
_MAX_INTEGER_DIGITS = 19

_TIMESTAMP_RE = re.compile(
    r"([0-9]{4})-([0-9]{2})-([0-9]{2})"
    r"T([0-9]{2}):([0-9]{2}):([0-9]{2})(?:\.([0-9]{3}))?Z"
)
_UTC_OFFSET_RE = re.compile(r".*T.*[+-][0-9]{2}:?[0-9]{2}")
_NUMERIC_TEXT_RE = re.compile(
    r"\s*[-+]?[0-9]+(?:\.[0-9]+)?(?:[eE][-+]?[0-9]+)?\s*"
)

TIMESTAMP_FORMAT = "YYYY-MM-DDTHH:mm:ss(.fff)?Z"


class BoundObject(Mapping[str, Any]):
    """
    Immutable result of binding one object type.

    Every declared field is a key; fields without a value map to ``None``.
    ``was_present`` tells an explicit ``null`` apart from an absent member.
    """

    __slots__ = ("_present", "_values", "type_name")

    def __init__(
        self, type_name: str, values: dict[str, Any], present: frozenset[str]
    ) -> None:
        self.type_name = type_name
        self._values = values
        self._present = present

    def __getitem__(self, name: str) -> Any:
        return self._values[name]

    def __iter__(self) -> Iterator[str]:
        return iter(self._values)

    def __len__(self) -> int:
        return len(self._values)

    def was_present(self, name: str) -> bool:
        """True when the member appeared in the input, even as null."""
        if name not in self._values:
            raise KeyError(name)
        return name in self._present

    def is_null(self, name: str) -> bool:
        """True when the member appeared in the input as an explicit null."""
        return self.was_present(name) and self._values[name] is None

    @property
    def present(self) -> frozenset[str]:
        return self._present

    def to_dict(self) -> dict[str, Any]:
        """Plain nested ``dict``/``list`` copy, absent fields omitted."""
        return {
            name: _plain(value)
            for name, value in self._values.items()
            if name in self._present
        }

    def __eq__(self, other: object) -> bool:
        if isinstance(other, BoundObject):
            return (
                self.type_name == other.type_name
                and self._values == other._values
                and self._present == other._present
            )
        if isinstance(other, Mapping):
            return dict(self.items()) == dict(other.items())
        return NotImplemented

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        return f"{self.type_name}({self._values!r})"


def _plain(value: Any) -> Any:
    if isinstance(value, BoundObject):
        return value.to_dict()
    if isinstance(value, list):
        return [_plain(item) for item in value]
    return value


def _mismatch_hint(value: ParseValue, expected: str) -> str | None:
    if value.kind is ValueKind.STRING:
        if _NUMERIC_TEXT_RE.fullmatch(value.payload):
            return "remove quotes around numeric value"
        if value.payload in ("true", "false"):
            return "use a bare true or false literal"
    elif value.kind in (ValueKind.OBJECT, ValueKind.ARRAY):
        return f"send a single {expected} value"
    return None


def _identity(value: Any) -> Any:
    """Hashable stand-in used to de-duplicate set elements by value."""
    if isinstance(value, BoundObject):
        return (
            value.type_name,
            tuple((name, _identity(item)) for name, item in value.items()),
            value.present,
        )
    if isinstance(value, list):
        return tuple(_identity(item) for item in value)
    return value


class Binder:
    """
    Binds ``ParseValue`` trees against compiled schema types.

    Holds only immutable configuration; ``bind`` keeps all state on the call
    stack, so one binder may serve many threads at once.
    """

    def __init__(self, config: DecodeConfig | None = None) -> None:
        self.config = config if config is not None else DecodeConfig()

    def bind(
        self,
        value: ParseValue,
        schema: SchemaType,
        path: FieldPath | None = None,
        deadline: Deadline | None = None,
    ) -> Any:
        """
        Validates ``value`` against ``schema`` and returns the typed result.

        Raises the first ``BindError``, ``NestingTooDeep``, ``StringTooLong``
        or ``Cancelled`` encountered; no partial result is returned.
        """
        if path is None:
            root = schema.name if isinstance(schema, ObjectOf) else "$"
            path = FieldPath(root)
        with ProfileContext("bind"):
            return self._bind(value, schema, path, 0, deadline)

    def _bind(
        self,
        value: ParseValue,
        schema: SchemaType,
        path: FieldPath,
        depth: int,
        deadline: Deadline | None,
    ) -> Any:
        if isinstance(schema, Scalar):
            return self._bind_scalar(value, schema, path)
        elif isinstance(schema, ObjectOf):
            return self._bind_object(value, schema, path, depth, deadline)
        elif isinstance(schema, ListOf):
            return self._bind_list(value, schema, path, depth, deadline)
        elif isinstance(schema, SetOf):
            return self._bind_set(value, schema, path, depth, deadline)
        raise SchemaError(
            "Cannot bind against unresolved schema type "
            f"{type(schema).__name__}",
            path=path,
            hint="compile the schema with SchemaRegistry.compile() first",
        )

    def _bind_object(
        self,
        value: ParseValue,
        schema: ObjectOf,
        path: FieldPath,
        depth: int,
        deadline: Deadline | None,
    ) -> BoundObject:
        with ProfileContext("bind_object"):
            if value.kind is not ValueKind.OBJECT:
                raise TypeMismatch(
                    "Type mismatch",
                    path=path,
                    position=value.position,
                    expected=f"object {schema.name}",
                    actual=value.describe(),
                )

            depth += 1
            max_depth = self.config.limits.max_nesting_depth
            if depth > max_depth:
                raise NestingTooDeep(
                    "Nesting too deep",
                    path=path,
                    position=value.position,
                    expected=f"at most {max_depth} object levels",
                    actual=f"{depth} levels",
                    hint="flatten the document structure",
                )
            if deadline is not None:
                deadline.check(path, value.position)

            members: dict[str, ParseValue] = value.payload
            values: dict[str, Any] = {}
            present: set[str] = set()

            for spec in schema.fields:
                name = spec.name
                member_path = path.child(name)
                member = members.get(name, MISSING)

                if member.kind is ValueKind.MISSING:
                    if spec.required:
                        raise MissingRequiredField(
                            f"Missing required field {name!r}",
                            path=member_path,
                            position=value.position,
                            expected=spec.type.describe(),
                            actual="no such member",
                            hint=f'add "{name}" to the {schema.name} object',
                        )
                    values[name] = None
                    continue

                present.add(name)
                if member.kind is ValueKind.NULL:
                    if not spec.nullable:
                        raise UnexpectedNull(
                            "Unexpected null",
                            path=member_path,
                            position=member.position,
                            expected=spec.type.describe(),
                            actual="null",
                            hint=(
                                "send a value"
                                if spec.required
                                else "omit the field instead of sending null"
                            ),
                        )
                    values[name] = None
                    continue

                values[name] = self._bind(
                    member, spec.type, member_path, depth, deadline
                )

            if (
                len(members) > len(present)
                and self.config.unknown_fields is UnknownFieldPolicy.REJECT
            ):
                self._reject_unknown(members, schema, path)

            return BoundObject(schema.name, values, frozenset(present))

    def _reject_unknown(
        self, members: dict[str, ParseValue], schema: ObjectOf, path: FieldPath
    ) -> None:
        for key, member in members.items():
            if schema.declares(key):
                continue
            hint = "remove the field or update the schema"
            folded = {name.casefold(): name for name in schema.field_names()}
            if key.casefold() in folded:
                hint = (
                    "field names are case-sensitive; "
                    f"did you mean {folded[key.casefold()]!r}?"
                )
            raise UnknownField(
                f"Unknown field {key!r}",
                path=path.child(key),
                position=member.position,
                expected=f"one of the fields of {schema.name}",
                actual=repr(key),
                hint=hint,
            )

    def _check_array(
        self, value: ParseValue, schema: ListOf | SetOf, path: FieldPath
    ) -> list[ParseValue]:
        if value.kind is not ValueKind.ARRAY:
            raise TypeMismatch(
                "Type mismatch",
                path=path,
                position=value.position,
                expected=schema.describe(),
                actual=value.describe(),
                hint=(
                    "wrap the value in [ ]; "
                    "single values are never promoted to lists"
                ),
            )
        return value.payload

    def _bind_list(
        self,
        value: ParseValue,
        schema: ListOf,
        path: FieldPath,
        depth: int,
        deadline: Deadline | None,
    ) -> list[Any]:
        elements = self._check_array(value, schema, path)

        count = len(elements)
        if count < schema.min_items or (
            schema.max_items is not None and count > schema.max_items
        ):
            bound = (
                f"between {schema.min_items} and {schema.max_items} items"
                if schema.max_items is not None
                else f"at least {schema.min_items} items"
            )
            raise TypeMismatch(
                "Collection size out of range",
                path=path,
                position=value.position,
                expected=f"{schema.describe()} with {bound}",
                actual=f"{count} items",
            )

        return self._bind_elements(
            elements, schema.element, path, depth, deadline
        )

    def _bind_set(
        self,
        value: ParseValue,
        schema: SetOf,
        path: FieldPath,
        depth: int,
        deadline: Deadline | None,
    ) -> list[Any]:
        elements = self._check_array(value, schema, path)
        bound = self._bind_elements(
            elements, schema.element, path, depth, deadline
        )

        seen: set[Any] = set()
        unique = []
        for item in bound:
            key = _identity(item)
            if key not in seen:
                seen.add(key)
                unique.append(item)
        return unique

    def _bind_elements(
        self,
        elements: list[ParseValue],
        element_type: Any,
        path: FieldPath,
        depth: int,
        deadline: Deadline | None,
    ) -> list[Any]:
        result = []
        for i, element in enumerate(elements):
            element_path = path.index(i)
            if deadline is not None:
                deadline.check(element_path, element.position)
            result.append(
                self._bind(element, element_type, element_path, depth, deadline)
            )
        return result

    def _bind_scalar(
        self, value: ParseValue, schema: Scalar, path: FieldPath
    ) -> Any:
        kind = schema.kind
        if kind in _INTEGER_RANGES:
            return self._bind_integer(value, kind, path)
        elif kind is ScalarKind.FLOAT64:
            return self._bind_float(value, path)
        elif kind is ScalarKind.BOOLEAN:
            return self._bind_boolean(value, path)
        elif kind is ScalarKind.STRING:
            return self._bind_string(value, path)
        return self._bind_timestamp(value, path)

    def _mismatch(
        self,
        value: ParseValue,
        expected: str,
        path: FieldPath,
        hint: str | None = None,
    ) -> TypeMismatch:
        if hint is None:
            hint = _mismatch_hint(value, expected)
        return TypeMismatch(
            "Type mismatch",
            path=path,
            position=value.position,
            expected=expected,
            actual=value.describe(),
            hint=hint,
        )

    def _bind_integer(
        self, value: ParseValue, kind: ScalarKind, path: FieldPath
    ) -> int:
        if value.kind is not ValueKind.NUMBER:
            raise self._mismatch(value, kind.value, path)
        if not value.is_integral:
            raise TypeMismatch(
                "Type mismatch",
                path=path,
                position=value.position,
                expected=f"{kind.value} without fractional part",
                actual=value.describe(),
                hint="send a whole number",
            )

        low, high = _INTEGER_RANGES[kind]
        text: str = value.payload
        if len(text.lstrip("-")) <= _MAX_INTEGER_DIGITS:
            number = int(text)
            if low <= number <= high:
                return number
        raise TypeMismatch(
            "Integer out of range",
            path=path,
            position=value.position,
            expected=f"{kind.value} between {low} and {high}",
            actual=value.describe(),
        )

    def _bind_float(self, value: ParseValue, path: FieldPath) -> float:
        if value.kind is not ValueKind.NUMBER:
            raise self._mismatch(value, ScalarKind.FLOAT64.value, path)
        number = float(value.payload)
        if math.isinf(number):
            raise TypeMismatch(
                "Number out of range",
                path=path,
                position=value.position,
                expected="a finite Float64",
                actual="a number beyond the Float64 range",
            )
        return number

    def _bind_boolean(self, value: ParseValue, path: FieldPath) -> bool:
        if value.kind is not ValueKind.BOOL:
            hint = None
            if value.kind is ValueKind.NUMBER:
                hint = "use a bare true or false literal"
            raise self._mismatch(value, ScalarKind.BOOLEAN.value, path, hint)
        return bool(value.payload)

    def _bind_string(self, value: ParseValue, path: FieldPath) -> str:
        if value.kind is not ValueKind.STRING:
            raise self._mismatch(value, ScalarKind.STRING.value, path)
        text: str = value.payload
        max_length = self.config.limits.max_string_length
        if len(text) > max_length:
            raise StringTooLong(
                "String too long",
                path=path,
                position=value.position,
                expected=f"at most {max_length} characters",
                actual=f"{len(text)} characters",
            )
        return text

    def _bind_timestamp(self, value: ParseValue, path: FieldPath) -> datetime:
        if value.kind is not ValueKind.STRING:
            raise TypeMismatch(
                "Type mismatch",
                path=path,
                position=value.position,
                expected=f"Timestamp string {TIMESTAMP_FORMAT}",
                actual=value.describe(),
                hint=(
                    "send timestamps as ISO-8601 UTC strings, "
                    "e.g. 2024-12-25T14:30:00Z"
                ),
            )

        text: str = value.payload
        match = _TIMESTAMP_RE.fullmatch(text)
        if match is None:
            hint = "use the form 2024-12-25T14:30:00Z"
            if _UTC_OFFSET_RE.match(text):
                hint = "convert to UTC and use the 'Z' designator"
            raise InvalidDateFormat(
                "Invalid date format",
                path=path,
                position=value.position,
                expected=TIMESTAMP_FORMAT,
                actual=value.describe(),
                hint=hint,
            )

        year, month, day, hour, minute, second, millis = match.groups()
        try:
            return datetime(
                int(year),
                int(month),
                int(day),
                int(hour),
                int(minute),
                int(second),
                int(millis or 0) * 1000,
                tzinfo=timezone.utc,
            )
        except ValueError as e:
            raise InvalidDateFormat(
                "Invalid calendar date or time",
                path=path,
                position=value.position,
                expected=f"a real instant in {TIMESTAMP_FORMAT}",
                actual=value.describe(),
            ) from e
