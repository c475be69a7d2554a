"""
Value to host value conversion.

construct(target, value) understands builtin scalars, typing generics,
unions, enums, fixed-width integers and any class exposing a
try_construct_from(value) classmethod. Every failure is a ConversionError so
composite conversions can propagate a child failure unchanged.
"""

from __future__ import annotations

import re
import types
from collections.abc import Callable
from collections.abc import Collection
from collections.abc import Iterable
from collections.abc import Mapping
from collections.abc import MutableMapping
from collections.abc import MutableSequence
from collections.abc import MutableSet
from collections.abc import Sequence
from collections.abc import Set
from dataclasses import dataclass
from decimal import Decimal
from enum import Enum
from typing import Annotated
from typing import Any
from typing import Union
from typing import get_args
from typing import get_origin

from ._errors import ConversionError
from ._errors import IntegerRangeError
from ._errors import KindMismatchError
from ._serialize import key_text
from ._values import Value
from ._values import ValueKind
from ._values import format_number

_NONE_TYPE = type(None)
_DECIMAL_TEXT = re.compile(r"-?[0-9]+(?:\.[0-9]+)?(?:[eE][+-]?[0-9]+)?")
_NON_FINITE_TEXT = ("NaN", "Infinity", "-Infinity")

_SEQUENCE_ORIGINS = (list, Sequence, MutableSequence, Collection, Iterable)
_SET_ORIGINS = (set, Set, MutableSet)
_MAPPING_ORIGINS = (dict, Mapping, MutableMapping)


@dataclass(frozen=True)
class IntWidth:
    """A fixed-width integer target for narrowing conversions."""

    bits: int
    signed: bool

    def __post_init__(self) -> None:
        if self.bits not in (8, 16, 32, 64, 128):
            raise ValueError("bits must be one of 8, 16, 32, 64, 128")

    @property
    def name(self) -> str:
        return f"{'i' if self.signed else 'u'}{self.bits}"

    @property
    def min(self) -> int:
        return -(1 << (self.bits - 1)) if self.signed else 0

    @property
    def max(self) -> int:
        return (1 << (self.bits - 1)) - 1 if self.signed else (1 << self.bits) - 1


I8 = IntWidth(8, signed=True)
I16 = IntWidth(16, signed=True)
I32 = IntWidth(32, signed=True)
I64 = IntWidth(64, signed=True)
I128 = IntWidth(128, signed=True)
U8 = IntWidth(8, signed=False)
U16 = IntWidth(16, signed=False)
U32 = IntWidth(32, signed=False)
U64 = IntWidth(64, signed=False)
U128 = IntWidth(128, signed=False)


def narrow(value: Value, width: IntWidth | None = None) -> int:
    """
    Converts a number, or a string holding one, to an int.

    Goes through the value's decimal text: a number uses its canonical
    rendering, a string its content. The text must denote an integer and,
    when a width is given, fit it.
    """
    if value.is_string():
        text = _require(value, ValueKind.STRING, Value.as_string)
    else:
        number = _require(value, ValueKind.NUMBER, Value.as_number)
        text = format_number(number)

    if _DECIMAL_TEXT.fullmatch(text) is None:
        raise IntegerRangeError(text, width)
    decimal = Decimal(text)
    if decimal != decimal.to_integral_value():
        raise IntegerRangeError(text, width)

    result = int(decimal)
    if width is not None and not width.min <= result <= width.max:
        raise IntegerRangeError(text, width)
    return result


def _require[R](
    value: Value, kind: ValueKind, accessor: Callable[[Value], R | None]
) -> R:
    result = accessor(value)
    if result is None:
        raise KindMismatchError(kind, value.kind)
    return result


def construct(target: Any, value: Value) -> Any:  # noqa: PLR0911, PLR0912
    """
    Builds an instance of target from a Value or raises ConversionError.

    Raises TypeError when target is not a type this module knows how to
    build, which is a programming error rather than bad input.
    """
    if target is Value:
        return value
    if target is Any or target is object:
        return value.to_python()
    if isinstance(target, IntWidth):
        return narrow(value, target)

    origin = get_origin(target)
    if origin is Annotated:
        base, *metadata = get_args(target)
        for meta in metadata:
            if isinstance(meta, IntWidth):
                return narrow(value, meta)
        return construct(base, value)
    if origin is Union or origin is types.UnionType:
        return _construct_union(target, value)
    if origin is not None:
        return _construct_generic(origin, get_args(target), value)

    if target is None or target is _NONE_TYPE:
        _require(value, ValueKind.NULL, _null_accessor)
        return None
    if target is bool:
        return _require(value, ValueKind.BOOLEAN, Value.as_bool)
    if target is int:
        return narrow(value)
    if target is float:
        return _require(value, ValueKind.NUMBER, Value.as_number)
    if target is str:
        return _require(value, ValueKind.STRING, Value.as_string)

    if isinstance(target, type):
        constructor = getattr(target, "try_construct_from", None)
        if constructor is not None:
            return constructor(value)
        if issubclass(target, Enum):
            return _construct_enum(target, value)
        if target in (list, tuple, set, frozenset, dict):
            return _construct_generic(target, (), value)

    raise TypeError(f"cannot construct {target!r} from a JSON value")


def _null_accessor(value: Value) -> bool | None:
    return True if value.is_null() else None


def _construct_union(target: Any, value: Value) -> Any:
    members = get_args(target)
    if value.is_null() and _NONE_TYPE in members:
        return None

    candidates = [member for member in members if member is not _NONE_TYPE]
    if len(candidates) == 1:
        return construct(candidates[0], value)

    for candidate in candidates:
        try:
            return construct(candidate, value)
        except ConversionError:
            continue
    raise ConversionError(
        f"{value.kind.value} matches no member of {target!r}"
    )


def _construct_enum(target: type[Enum], value: Value) -> Enum:
    try:
        return target(value.to_python())
    except ValueError as e:
        raise ConversionError(
            f"{value.to_text()} is not a valid {target.__name__}"
        ) from e


def _construct_items(item_type: Any, value: Value) -> list[Any]:
    items = _require(value, ValueKind.ARRAY, Value.as_array)
    result: list[Any] = []
    for index, item in enumerate(items):
        try:
            result.append(construct(item_type, item))
        except ConversionError as e:
            e.add_note(f"at index {index}")
            raise
    return result


def _construct_tuple(args: tuple[Any, ...], value: Value) -> tuple[Any, ...]:
    if not args:
        return tuple(_construct_items(Any, value))
    if len(args) == 2 and args[1] is Ellipsis:
        return tuple(_construct_items(args[0], value))

    items = _require(value, ValueKind.ARRAY, Value.as_array)
    if len(items) != len(args):
        raise ConversionError(
            f"expected an array of {len(args)} items, found {len(items)}"
        )
    result: list[Any] = []
    for index, (item_type, item) in enumerate(zip(args, items, strict=True)):
        try:
            result.append(construct(item_type, item))
        except ConversionError as e:
            e.add_note(f"at index {index}")
            raise
    return tuple(result)


def _construct_mapping(
    key_type: Any, value_type: Any, value: Value
) -> dict[Any, Any]:
    members = _require(value, ValueKind.STRUCT, Value.as_struct)
    result: dict[Any, Any] = {}
    for key, member in members.items():
        try:
            if key_type is str or key_type is Any:
                typed_key = key
            else:
                typed_key = _construct_key(key_type, key)
            result[typed_key] = construct(value_type, member)
        except ConversionError as e:
            e.add_note(f"in key {key!r}")
            raise
    return result


def _construct_key(key_type: Any, key: str) -> Any:
    """Reads a member name back into the key key_text() rendered it from."""
    if isinstance(key_type, type) and issubclass(key_type, Enum):
        for member in key_type:
            if key_text(member.value) == key:
                return member
        raise ConversionError(f"{key!r} is not a valid {key_type.__name__}")
    if key_type is bool:
        if key not in ("true", "false"):
            raise ConversionError(f"{key!r} is not a boolean key")
        return key == "true"
    if key_type is float:
        if key in _NON_FINITE_TEXT:
            return float(key)
        if _DECIMAL_TEXT.fullmatch(key) is None:
            raise ConversionError(f"{key!r} is not a number key")
        return float(key)
    return construct(key_type, Value.string(key))


def _construct_generic(
    origin: Any, args: tuple[Any, ...], value: Value
) -> Any:
    if origin is tuple:
        return _construct_tuple(args, value)

    item_type = args[0] if args else Any
    if origin in _SEQUENCE_ORIGINS:
        return _construct_items(item_type, value)
    if origin in _SET_ORIGINS:
        return set(_construct_items(item_type, value))
    if origin is frozenset:
        return frozenset(_construct_items(item_type, value))
    if origin in _MAPPING_ORIGINS:
        key_type, value_type = args if args else (str, Any)
        return _construct_mapping(key_type, value_type, value)

    raise TypeError(f"cannot construct {origin!r} from a JSON value")


__all__ = [
    "I8",
    "I16",
    "I32",
    "I64",
    "I128",
    "U8",
    "U16",
    "U32",
    "U64",
    "U128",
    "IntWidth",
    "construct",
    "narrow",
]
