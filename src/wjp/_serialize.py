"""
Host value to Value conversion.

serialize() is a singledispatch function: register an implementation for a
type you do not own, or give your own types a serialize() method.
"""

from __future__ import annotations

import math
from collections.abc import Iterable
from collections.abc import Mapping
from collections.abc import Set
from dataclasses import dataclass
from decimal import Decimal
from enum import Enum
from functools import singledispatch
from typing import Any
from typing import Generic
from typing import Protocol
from typing import TypeVar
from typing import runtime_checkable

from ._values import FALSE
from ._values import NULL
from ._values import TRUE
from ._values import Value
from ._values import format_number

T = TypeVar("T")
E = TypeVar("E")


@runtime_checkable
class Serializable(Protocol):
    """Anything that knows how to turn itself into a Value."""

    def serialize(self) -> Value: ...


@dataclass(frozen=True)
class Ok(Generic[T]):
    """Success side of an either value."""

    value: T


@dataclass(frozen=True)
class Err(Generic[E]):
    """Failure side of an either value."""

    error: E


type Either[T, E] = Ok[T] | Err[E]


@singledispatch
def serialize(obj: Any) -> Value:
    """
    Builds the Value representing a host value.

    Pure and deterministic. Raises TypeError for objects with no known
    representation; nested failures carry notes locating the offending item.
    """
    if isinstance(obj, Serializable):
        return obj.serialize()
    if isinstance(obj, Mapping):
        return _serialize_mapping(obj)
    if isinstance(obj, Iterable) and not isinstance(
        obj, bytes | bytearray | memoryview
    ):
        return _serialize_items(obj)

    msg = f"Object of type {type(obj).__name__} is not JSON serializable"
    raise TypeError(msg)


@serialize.register
def _(obj: Value) -> Value:
    return obj


@serialize.register(type(None))
def _(obj: None) -> Value:
    return NULL


@serialize.register
def _(obj: bool) -> Value:
    return TRUE if obj else FALSE


@serialize.register
def _(obj: int) -> Value:
    try:
        return Value.number(float(obj))
    except OverflowError:
        # Widening past float range: documented to yield an infinity
        return Value.number(math.copysign(math.inf, obj))


@serialize.register
def _(obj: float) -> Value:
    return Value.number(obj)


@serialize.register
def _(obj: Decimal) -> Value:
    return Value.number(float(obj))


@serialize.register
def _(obj: str) -> Value:
    return Value.string(obj)


@serialize.register
def _(obj: Enum) -> Value:
    return serialize(obj.value)


@serialize.register
def _(obj: Ok) -> Value:
    return serialize(obj.value)


@serialize.register
def _(obj: Err) -> Value:
    return serialize(obj.error)


@serialize.register
def _(obj: BaseException) -> Value:
    return Value.string(str(obj))


@serialize.register(list)
@serialize.register(tuple)
@serialize.register(Set)
def _serialize_items(obj: Iterable[Any]) -> Value:
    elements: list[Value] = []
    for index, item in enumerate(obj):
        try:
            elements.append(serialize(item))
        except TypeError as e:
            e.add_note(
                f"when serializing item {index} of {type(obj).__name__}"
            )
            raise
    return Value.array(elements)


@serialize.register(Mapping)
def _serialize_mapping(obj: Mapping[Any, Any]) -> Value:
    members: dict[str, Value] = {}
    for key, item in obj.items():
        try:
            members[key_text(key)] = serialize(item)
        except TypeError as e:
            e.add_note(f"when serializing {type(obj).__name__} key {key!r}")
            raise
    return Value.struct(members)


def key_text(key: Any) -> str:
    """Text form of a mapping key."""
    if isinstance(key, str):
        return key
    if isinstance(key, bool):
        return "true" if key else "false"
    if isinstance(key, Enum):
        return key_text(key.value)
    if isinstance(key, int):
        return str(key)
    if isinstance(key, float):
        return format_number(key)
    return str(key)


__all__ = [
    "Either",
    "Err",
    "Ok",
    "Serializable",
    "key_text",
    "serialize",
]
