"""
In-memory JSON value tree.

Value is a closed tagged union: a ValueKind discriminant plus a payload whose
Python type is fixed by the kind. Trees are immutable once built; container
accessors hand out copies so callers can consume them freely.
"""

from __future__ import annotations

import math
from collections.abc import Iterable
from collections.abc import Mapping
from dataclasses import dataclass
from enum import Enum
from numbers import Real
from typing import Any

from ._profiling import ProfileContext

# Integral floats below this magnitude render without a fractional part
_INTEGRAL_LIMIT = 1e16


class ValueKind(Enum):
    """Discriminant of the Value tagged union."""

    STRING = "string"
    NUMBER = "number"
    BOOLEAN = "boolean"
    NULL = "null"
    ARRAY = "array"
    STRUCT = "struct"


@dataclass(frozen=True)
class EncodeConfig:
    """
    Configures JSON rendering with immutable settings.

    Output is always compact; these options only affect member order and the
    handling of numbers that JSON cannot represent.
    """

    sort_keys: bool = False
    allow_nan: bool = True

    def __post_init__(self) -> None:
        if not isinstance(self.sort_keys, bool):
            raise TypeError("sort_keys must be a boolean")
        if not isinstance(self.allow_nan, bool):
            raise TypeError("allow_nan must be a boolean")


def format_number(n: float) -> str:
    """
    Canonical decimal text of a number.

    Integral values print without a fractional part and negative zero keeps
    its sign; everything else uses the shortest representation that
    round-trips through float().
    """
    if math.isnan(n):
        return "NaN"
    if math.isinf(n):
        return "Infinity" if n > 0 else "-Infinity"
    if n == 0 and math.copysign(1.0, n) < 0:
        return "-0"
    if n.is_integer() and abs(n) < _INTEGRAL_LIMIT:
        return str(int(n))
    return repr(n)


def _quote(s: str) -> str:
    return '"' + s.replace("\\", "\\\\").replace('"', '\\"') + '"'


@dataclass(frozen=True, slots=True, eq=False, repr=False)
class Value:
    """
    A JSON value: string, number, boolean, null, array or struct.

    Build instances with the named constructors rather than the raw
    initializer, which does not copy or check the payload.
    """

    kind: ValueKind
    _payload: Any

    __hash__ = None  # type: ignore[assignment]

    @classmethod
    def string(cls, s: str) -> Value:
        if not isinstance(s, str):
            raise TypeError(f"expected str, not {type(s).__name__}")
        return cls(ValueKind.STRING, s)

    @classmethod
    def number(cls, n: float) -> Value:
        if isinstance(n, bool) or not isinstance(n, Real):
            raise TypeError(f"expected a real number, not {type(n).__name__}")
        return cls(ValueKind.NUMBER, float(n))

    @classmethod
    def boolean(cls, b: bool) -> Value:
        return TRUE if b else FALSE

    @classmethod
    def null(cls) -> Value:
        return NULL

    @classmethod
    def array(cls, items: Iterable[Value] = ()) -> Value:
        elements = tuple(items)
        for element in elements:
            if not isinstance(element, Value):
                raise TypeError(
                    f"array elements must be Value, not {type(element).__name__}"
                )
        return cls(ValueKind.ARRAY, elements)

    @classmethod
    def struct(cls, members: Mapping[str, Value] | None = None) -> Value:
        copied = dict(members or {})
        for key, member in copied.items():
            if not isinstance(key, str):
                raise TypeError(
                    f"keys must be strings, not {type(key).__name__}"
                )
            if not isinstance(member, Value):
                raise TypeError(
                    f"members must be Value, not {type(member).__name__}"
                )
        return cls(ValueKind.STRUCT, copied)

    def is_string(self) -> bool:
        return self.kind is ValueKind.STRING

    def is_number(self) -> bool:
        return self.kind is ValueKind.NUMBER

    def is_bool(self) -> bool:
        return self.kind is ValueKind.BOOLEAN

    def is_null(self) -> bool:
        return self.kind is ValueKind.NULL

    def is_array(self) -> bool:
        return self.kind is ValueKind.ARRAY

    def is_struct(self) -> bool:
        return self.kind is ValueKind.STRUCT

    def as_string(self) -> str | None:
        match self.kind:
            case ValueKind.STRING:
                return self._payload
            case _:
                return None

    def as_number(self) -> float | None:
        match self.kind:
            case ValueKind.NUMBER:
                return self._payload
            case _:
                return None

    def as_bool(self) -> bool | None:
        match self.kind:
            case ValueKind.BOOLEAN:
                return self._payload
            case _:
                return None

    def as_array(self) -> list[Value] | None:
        """Returns a new list of the elements, or None for other kinds."""
        match self.kind:
            case ValueKind.ARRAY:
                return list(self._payload)
            case _:
                return None

    def as_struct(self) -> dict[str, Value] | None:
        """Returns a new dict of the members, or None for other kinds."""
        match self.kind:
            case ValueKind.STRUCT:
                return dict(self._payload)
            case _:
                return None

    def __eq__(self, other: object) -> bool:
        """
        Structural equality, walked iteratively.

        A number and a string compare equal when the number's canonical text
        is the string.
        """
        if not isinstance(other, Value):
            return NotImplemented

        pending: list[tuple[Value, Value]] = [(self, other)]
        while pending:
            left, right = pending.pop()
            if left is right:
                continue
            if left.kind is not right.kind:
                if not _cross_equal(left, right):
                    return False
                continue
            match left.kind:
                case ValueKind.ARRAY:
                    items, others = left._payload, right._payload
                    if len(items) != len(others):
                        return False
                    pending.extend(zip(items, others, strict=True))
                case ValueKind.STRUCT:
                    members, others = left._payload, right._payload
                    if members.keys() != others.keys():
                        return False
                    pending.extend(
                        (member, others[key])
                        for key, member in members.items()
                    )
                case _:
                    if left._payload != right._payload:
                        return False
        return True

    def to_text(self, **kwargs: Any) -> str:
        """Renders the canonical compact JSON text of this value."""
        return render(self, EncodeConfig(**kwargs))

    def __str__(self) -> str:
        return render(self, _DEFAULT_ENCODE_CONFIG)

    def __repr__(self) -> str:
        match self.kind:
            case ValueKind.NULL:
                return "Value.null()"
            case ValueKind.ARRAY:
                return f"Value.array({list(self._payload)!r})"
            case _:
                return f"Value.{self.kind.name.lower()}({self._payload!r})"

    def to_python(self) -> Any:
        """Converts to plain dicts, lists, str, float, bool and None."""
        holder: list[Any] = [None]
        pending: list[tuple[Value, Any, Any]] = [(self, holder, 0)]
        while pending:
            value, parent, slot = pending.pop()
            match value.kind:
                case ValueKind.ARRAY:
                    items = value._payload
                    result: Any = [None] * len(items)
                    pending.extend(
                        (item, result, index)
                        for index, item in enumerate(items)
                    )
                case ValueKind.STRUCT:
                    result = {}
                    for key, member in value._payload.items():
                        result[key] = None
                        pending.append((member, result, key))
                case _:
                    result = value._payload
            parent[slot] = result
        return holder[0]


def _cross_equal(left: Value, right: Value) -> bool:
    if left.kind is ValueKind.STRING:
        left, right = right, left
    if left.kind is ValueKind.NUMBER and right.kind is ValueKind.STRING:
        return format_number(left._payload) == right._payload
    return False


def _render_number(n: float, config: EncodeConfig) -> str:
    if not config.allow_nan and not math.isfinite(n):
        msg = "Out of range float values are not JSON compliant"
        raise ValueError(msg)
    return format_number(n)


def render(value: Value, config: EncodeConfig) -> str:
    """
    Renders a value tree as compact JSON text.

    Uses an explicit work stack of values and literal fragments, so nesting
    depth is bounded by memory rather than the interpreter's recursion limit.
    """
    with ProfileContext("render"):
        out: list[str] = []
        stack: list[Value | str] = [value]
        while stack:
            item = stack.pop()
            if isinstance(item, str):
                out.append(item)
                continue

            match item.kind:
                case ValueKind.STRING:
                    out.append(_quote(item._payload))
                case ValueKind.NUMBER:
                    out.append(_render_number(item._payload, config))
                case ValueKind.BOOLEAN:
                    out.append("true" if item._payload else "false")
                case ValueKind.NULL:
                    out.append("null")
                case ValueKind.ARRAY:
                    items = item._payload
                    stack.append("]")
                    for index in range(len(items) - 1, -1, -1):
                        stack.append(items[index])
                        if index:
                            stack.append(",")
                    stack.append("[")
                case ValueKind.STRUCT:
                    pairs = list(item._payload.items())
                    if config.sort_keys:
                        pairs.sort(key=lambda pair: pair[0])
                    stack.append("}")
                    for index in range(len(pairs) - 1, -1, -1):
                        key, member = pairs[index]
                        stack.append(member)
                        stack.append(_quote(key) + ":")
                        if index:
                            stack.append(",")
                    stack.append("{")
        return "".join(out)


NULL = Value(ValueKind.NULL, None)
TRUE = Value(ValueKind.BOOLEAN, True)
FALSE = Value(ValueKind.BOOLEAN, False)

_DEFAULT_ENCODE_CONFIG = EncodeConfig()


__all__ = [
    "FALSE",
    "NULL",
    "TRUE",
    "EncodeConfig",
    "Value",
    "ValueKind",
    "format_number",
    "render",
]
