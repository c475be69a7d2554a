"""
Json mixin tying parsing, serialization and construction together.

Dataclasses that inherit from Json get a struct serialization of their fields
and a matching try_construct_from driven by their type hints:

    @dataclass
    class Example(Json):
        code: float
        messages: list[str]
        opt: bool | None = None

    Example.deserialize('{"code":1,"messages":["a"]}')
"""

from __future__ import annotations

import dataclasses
import types
from typing import Any
from typing import ClassVar
from typing import Self
from typing import Union
from typing import get_args
from typing import get_origin
from typing import get_type_hints

from ._construct import construct
from ._fields import Fields
from ._parser import parse
from ._serialize import serialize
from ._values import Value


class Json:
    """
    Mixin giving a type to_json_text and deserialize.

    Non-dataclass subclasses must override serialize and try_construct_from.
    """

    # Leftover members fail construction instead of being ignored
    reject_unknown_fields: ClassVar[bool] = False

    def serialize(self) -> Value:
        if not dataclasses.is_dataclass(self):
            raise TypeError(
                f"{type(self).__name__} must implement serialize()"
            )
        members: dict[str, Value] = {}
        for field in dataclasses.fields(self):
            try:
                members[field.name] = serialize(getattr(self, field.name))
            except TypeError as e:
                e.add_note(f"in field {field.name!r}")
                raise
        return Value.struct(members)

    def to_json_text(self, **kwargs: Any) -> str:
        """Serializes to compact JSON text; kwargs build an EncodeConfig."""
        return serialize(self).to_text(**kwargs)

    @classmethod
    def try_construct_from(cls, value: Value) -> Self:
        if not dataclasses.is_dataclass(cls):
            raise TypeError(
                f"{cls.__name__} must implement try_construct_from()"
            )

        members = Fields.of(value)
        hints = get_type_hints(cls, include_extras=True)
        kwargs: dict[str, Any] = {}
        for field in dataclasses.fields(cls):
            if not field.init:
                continue
            name = field.name
            if name not in members and _has_default(field):
                continue
            if _is_optional(hints[name]):
                kwargs[name] = members.take_optional(name, hints[name])
            else:
                kwargs[name] = members.take_as(name, hints[name])

        if cls.reject_unknown_fields:
            members.ensure_consumed()
        return cls(**kwargs)

    @classmethod
    def deserialize(cls, source: str | bytes, **kwargs: Any) -> Self:
        """Parses source and constructs an instance; kwargs build a ParseConfig."""
        return cls.try_construct_from(parse(source, **kwargs))


def _has_default(field: dataclasses.Field[Any]) -> bool:
    return (
        field.default is not dataclasses.MISSING
        or field.default_factory is not dataclasses.MISSING
    )


def _is_optional(target: Any) -> bool:
    origin = get_origin(target)
    if origin is not Union and origin is not types.UnionType:
        return False
    return type(None) in get_args(target)


def deserialize(target: Any, source: str | bytes, **kwargs: Any) -> Any:
    """
    Parses source and constructs target from the result.

    Parse failures raise JSONDecodeError subclasses, conversion failures
    ConversionError subclasses; both are ParseError.
    """
    return construct(target, parse(source, **kwargs))


__all__ = ["Json", "deserialize"]
