"""
Field extraction for hand-written try_construct_from implementations.

    members = Fields.of(value)
    code = members.take_as("code", float)
    messages = members.take_as("messages", list[str])
    opt = members.take_optional("opt", bool)

take* methods remove the member they read, so a member cannot be consumed
twice and whatever is left over can be inspected afterwards.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from collections.abc import Mapping
from typing import Any

from ._construct import construct
from ._errors import ConversionError
from ._errors import InvalidFieldError
from ._errors import KindMismatchError
from ._errors import MissingFieldError
from ._errors import UnexpectedFieldError
from ._values import Value
from ._values import ValueKind

logger = logging.getLogger(__name__)


class Fields:
    """Consumable copy of a struct's members."""

    __slots__ = ("_members",)

    def __init__(self, members: Mapping[str, Value]) -> None:
        self._members = dict(members)

    @classmethod
    def of(cls, value: Value) -> Fields:
        members = value.as_struct()
        if members is None:
            raise KindMismatchError(ValueKind.STRUCT, value.kind)
        return cls(members)

    def __contains__(self, name: object) -> bool:
        return name in self._members

    def __len__(self) -> int:
        return len(self._members)

    def __repr__(self) -> str:
        return f"Fields({sorted(self._members)!r})"

    def _lookup(self, name: str, *, remove: bool) -> Value:
        try:
            if remove:
                return self._members.pop(name)
            return self._members[name]
        except KeyError:
            logger.debug("missing field %r", name)
            raise MissingFieldError(name) from None

    def get[T](self, name: str, accessor: Callable[[Value], T | None]) -> T:
        """Reads a member through accessor, leaving it in place."""
        value = self._lookup(name, remove=False)
        result = accessor(value)
        if result is None:
            raise InvalidFieldError(name, value.kind)
        return result

    def get_optional[T](
        self, name: str, accessor: Callable[[Value], T | None]
    ) -> T | None:
        value = self._members.get(name)
        return None if value is None else accessor(value)

    def take[T](self, name: str, accessor: Callable[[Value], T | None]) -> T:
        """Removes a member and reads it through accessor."""
        value = self._lookup(name, remove=True)
        result = accessor(value)
        if result is None:
            raise InvalidFieldError(name, value.kind)
        return result

    def take_as(self, name: str, target: Any) -> Any:
        """Removes a member and constructs target from it."""
        value = self._lookup(name, remove=True)
        try:
            return construct(target, value)
        except ConversionError as e:
            e.add_note(f"in field {name!r}")
            raise

    def take_optional(self, name: str, target: Any) -> Any:
        """Like take_as, but an absent or null member yields None."""
        value = self._members.pop(name, None)
        if value is None or value.is_null():
            return None
        try:
            return construct(target, value)
        except ConversionError as e:
            e.add_note(f"in field {name!r}")
            raise

    def take_with[T](self, name: str, func: Callable[[Value], T]) -> T:
        """
        Removes a member and converts it with func.

        Exceptions other than ConversionError raised by func are wrapped in
        one, chained to the original.
        """
        value = self._lookup(name, remove=True)
        try:
            return func(value)
        except ConversionError as e:
            e.add_note(f"in field {name!r}")
            raise
        except Exception as e:
            raise ConversionError(f"field {name!r}: {e}") from e

    def remaining(self) -> dict[str, Value]:
        """Members not taken yet."""
        return dict(self._members)

    def ensure_consumed(self) -> None:
        if self._members:
            raise UnexpectedFieldError(sorted(self._members))


__all__ = ["Fields"]
