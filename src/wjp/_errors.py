"""
Error types raised while parsing JSON text and converting JSON values.

Every failure derives from ParseError, so callers that do not care about the
kind of failure can catch a single type. Subclasses carry position or field
information for callers that do.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from ._construct import IntWidth
    from ._values import ValueKind

type Position = int


class ParseError(ValueError):
    """Catch-all failure for parsing and conversion, message optional."""

    def __init__(self, msg: str = "") -> None:
        if not isinstance(msg, str):
            raise TypeError("msg must be a string")
        self.msg = msg
        super().__init__(msg)


class JSONDecodeError(ParseError):
    """
    Handles JSON parsing failures with precise position and context information.

    Error state containing position, line/column numbers, and surrounding
    context to help users identify and fix JSON syntax issues. ``pos`` counts
    characters of ``doc``; ``byte_pos`` counts bytes of its UTF-8 encoding.
    """

    def __init__(
        self,
        msg: str,
        doc: str = "",
        pos: Position = 0,
        byte_pos: Position | None = None,
    ) -> None:
        if not isinstance(pos, int) or pos < 0:
            raise ValueError("pos must be a non-negative integer")

        self.doc = doc
        self.pos = pos
        self.byte_pos = pos if byte_pos is None else byte_pos

        # Compute line and column numbers from position
        self.lineno = doc.count("\n", 0, pos) + 1 if doc else 1
        self.colno = pos - doc.rfind("\n", 0, pos) if doc else pos + 1

        super().__init__(msg)
        self.args = (f"{msg} at line {self.lineno}, column {self.colno}",)


class UnexpectedByteError(JSONDecodeError):
    """A byte that does not fit the token expected at its position."""


class UnexpectedEndError(JSONDecodeError):
    """Input ended while a value or structural token was still expected."""


class UnterminatedStringError(UnexpectedEndError):
    """Input ended inside a string literal, possibly mid-escape."""


class InvalidEscapeError(JSONDecodeError):
    """Unknown or unsupported backslash escape in a string literal."""


class InvalidNumberError(JSONDecodeError):
    """Number literal that is not a well formed decimal."""


class NumberOutOfRangeError(InvalidNumberError):
    """Number literal whose magnitude does not fit a 64-bit float."""


class NestingTooDeepError(JSONDecodeError):
    """Containers nested deeper than the configured maximum."""


class InvalidEncodingError(JSONDecodeError):
    """Input that has no valid UTF-8 form."""


class ConversionError(ParseError):
    """Failure to build a host value from a JSON value."""


class KindMismatchError(ConversionError):
    def __init__(self, expected: ValueKind, actual: ValueKind) -> None:
        self.expected = expected
        self.actual = actual
        super().__init__(f"expected {expected.value}, found {actual.value}")


class MissingFieldError(ConversionError):
    def __init__(self, field: str) -> None:
        self.field = field
        super().__init__(f"missing field {field!r}")


class InvalidFieldError(ConversionError):
    def __init__(self, field: str, actual: ValueKind) -> None:
        self.field = field
        self.actual = actual
        super().__init__(f"field {field!r} has unexpected kind {actual.value}")


class UnexpectedFieldError(ConversionError):
    def __init__(self, fields: list[str]) -> None:
        self.fields = fields
        names = ", ".join(repr(name) for name in fields)
        super().__init__(f"unexpected fields: {names}")


class IntegerRangeError(ConversionError):
    """Number that is not integral or does not fit the target width."""

    def __init__(self, text: str, width: IntWidth | None = None) -> None:
        self.text = text
        self.width = width
        target = width.name if width is not None else "an integer"
        super().__init__(f"cannot narrow {text!r} to {target}")


__all__ = [
    "ConversionError",
    "IntegerRangeError",
    "InvalidEncodingError",
    "InvalidEscapeError",
    "InvalidFieldError",
    "InvalidNumberError",
    "JSONDecodeError",
    "KindMismatchError",
    "MissingFieldError",
    "NestingTooDeepError",
    "NumberOutOfRangeError",
    "ParseError",
    "UnexpectedByteError",
    "UnexpectedEndError",
    "UnexpectedFieldError",
    "UnterminatedStringError",
]
