"""
Single-pass JSON parser producing Value trees.

The parser walks a bounds-checked cursor over the UTF-8 bytes of the input
and keeps in-progress arrays and structs on an explicit stack, so nesting
depth is limited by memory rather than the interpreter's recursion limit.
"""

from __future__ import annotations

import logging
import math
import re
from dataclasses import dataclass
from enum import Enum
from typing import Any

from ._errors import InvalidEncodingError
from ._errors import InvalidEscapeError
from ._errors import InvalidNumberError
from ._errors import JSONDecodeError
from ._errors import NestingTooDeepError
from ._errors import NumberOutOfRangeError
from ._errors import UnexpectedByteError
from ._errors import UnexpectedEndError
from ._errors import UnterminatedStringError
from ._positions import BytePositionMapper
from ._profiling import ProfileContext
from ._values import FALSE
from ._values import NULL
from ._values import TRUE
from ._values import Value
from ._values import ValueKind

logger = logging.getLogger(__name__)

_QUOTE = ord('"')
_COMMA = ord(",")
_COLON = ord(":")
_MINUS = ord("-")
_LBRACE = ord("{")
_RBRACE = ord("}")
_LBRACKET = ord("[")
_RBRACKET = ord("]")
_DIGITS = frozenset(b"0123456789")
_HEX_DIGITS = frozenset(b"0123456789abcdefABCDEF")

# Bytes 9-13 and 32
_WHITESPACE = frozenset(b"\t\n\x0b\x0c\r ")
_NUMBER_DELIMITERS = _WHITESPACE | frozenset(b"\\,]}")

_ESCAPES = {
    ord('"'): b'"',
    ord("\\"): b"\\",
    ord("/"): b"/",
    ord("b"): b"\b",
    ord("f"): b"\f",
    ord("t"): b"\t",
    ord("r"): b"\r",
    ord("n"): b"\n",
}

_STRING_RUN = re.compile(rb'[^"\\]*')
_NUMBER_TEXT = re.compile(rb"[0-9]+(?:\.[0-9]*)?(?:[eE][+-]?[0-9]+)?")


class UnicodeEscapePolicy(Enum):
    """What the parser does with a \\uXXXX escape. Neither decodes it."""

    DROP = "drop"
    REJECT = "reject"


@dataclass(frozen=True)
class ParseConfig:
    """
    Configures JSON parsing behavior with immutable settings.

    max_depth=None leaves nesting bounded only by available memory.
    """

    unicode_escape: UnicodeEscapePolicy = UnicodeEscapePolicy.DROP
    max_depth: int | None = None

    def __post_init__(self) -> None:
        if not isinstance(self.unicode_escape, UnicodeEscapePolicy):
            raise TypeError("unicode_escape must be a UnicodeEscapePolicy")
        if self.max_depth is not None and (
            not isinstance(self.max_depth, int) or self.max_depth < 1
        ):
            raise ValueError("max_depth must be a positive integer or None")


@dataclass(slots=True)
class _Frame:
    """An array or struct still being filled; key is the member pending."""

    kind: ValueKind
    items: list[Value] | dict[str, Value]
    key: str = ""


class Parser:
    """
    Stack-driven scanner over an immutable byte buffer.

    Every byte read goes through _next_byte or _peek, which check the cursor
    against the buffer length first; running off the end raises
    UnexpectedEndError instead of IndexError.
    """

    def __init__(
        self, source: str | bytes, config: ParseConfig | None = None
    ) -> None:
        if isinstance(source, str):
            self._text = source
            self._data = _encode_strict(source)
        elif isinstance(source, bytes | bytearray | memoryview):
            self._data = bytes(source)
            self._text = _decode_strict(self._data)
        else:
            raise TypeError(
                "the JSON document must be str or bytes, "
                f"not {type(source).__name__}"
            )
        self.config = config or ParseConfig()
        self._index = 0
        self._length = len(self._data)
        self._mapper: BytePositionMapper | None = None

    def _is_eof(self) -> bool:
        return self._index >= self._length

    def _peek(self) -> int:
        if self._is_eof():
            raise self._error(
                UnexpectedEndError, "Unexpected end of input", self._index
            )
        return self._data[self._index]

    def _next_byte(self) -> int:
        byte = self._peek()
        self._index += 1
        return byte

    def _next_significant(self) -> int:
        byte = self._next_byte()
        while byte in _WHITESPACE:
            byte = self._next_byte()
        return byte

    def _error(
        self, cls: type[JSONDecodeError], msg: str, byte_pos: int
    ) -> JSONDecodeError:
        if self._mapper is None:
            self._mapper = BytePositionMapper(self._text)
        logger.debug("%s at byte %d", msg, byte_pos)
        return cls(
            msg, self._text, self._mapper.byte_to_char(byte_pos), byte_pos
        )

    def _unexpected(self, msg: str) -> JSONDecodeError:
        """Error for the byte just consumed."""
        return self._error(UnexpectedByteError, msg, self._index - 1)

    def parse(self) -> Value:
        """Parses the whole buffer as one JSON document."""
        with ProfileContext("parse", self._length):
            stack: list[_Frame] = []
            byte = self._next_significant()

            while True:
                if byte == _LBRACKET:
                    self._check_depth(stack)
                    byte = self._next_significant()
                    if byte != _RBRACKET:
                        stack.append(_Frame(ValueKind.ARRAY, []))
                        continue
                    value = Value(ValueKind.ARRAY, ())
                elif byte == _LBRACE:
                    self._check_depth(stack)
                    byte = self._next_significant()
                    if byte != _RBRACE:
                        if byte != _QUOTE:
                            raise self._unexpected(
                                "Expecting property name enclosed in double quotes"
                            )
                        frame = _Frame(ValueKind.STRUCT, {}, self._read_key())
                        stack.append(frame)
                        byte = self._next_significant()
                        continue
                    value = Value(ValueKind.STRUCT, {})
                else:
                    value = self._read_scalar(byte)

                while True:
                    if not stack:
                        self._expect_eof()
                        return value

                    frame = stack[-1]
                    if frame.kind is ValueKind.ARRAY:
                        frame.items.append(value)  # type: ignore[union-attr]
                        byte = self._next_significant()
                        if byte == _COMMA:
                            byte = self._next_significant()
                            break
                        if byte != _RBRACKET:
                            raise self._unexpected("Expecting ',' delimiter")
                        value = Value(ValueKind.ARRAY, tuple(frame.items))
                    else:
                        frame.items[frame.key] = value  # type: ignore[call-overload]
                        byte = self._next_significant()
                        if byte == _COMMA:
                            if self._next_significant() != _QUOTE:
                                raise self._unexpected(
                                    "Expecting property name enclosed in double quotes"
                                )
                            frame.key = self._read_key()
                            byte = self._next_significant()
                            break
                        if byte != _RBRACE:
                            raise self._unexpected("Expecting ',' delimiter")
                        value = Value(ValueKind.STRUCT, frame.items)
                    stack.pop()

    def _check_depth(self, stack: list[_Frame]) -> None:
        """Called with the opening bracket just consumed."""
        max_depth = self.config.max_depth
        if max_depth is not None and len(stack) >= max_depth:
            raise self._error(
                NestingTooDeepError,
                f"Nesting deeper than {max_depth} levels",
                self._index - 1,
            )

    def _read_scalar(self, byte: int) -> Value:
        if byte == _QUOTE:
            return Value(ValueKind.STRING, self._read_string())
        if byte in _DIGITS:
            return Value(ValueKind.NUMBER, self._read_number(self._index - 1))
        if byte == _MINUS:
            start = self._index
            if self._next_byte() not in _DIGITS:
                raise self._unexpected("Invalid number")
            return Value(ValueKind.NUMBER, -self._read_number(start))
        if byte == ord("t"):
            self._expect_literal(b"rue")
            return TRUE
        if byte == ord("f"):
            self._expect_literal(b"alse")
            return FALSE
        if byte == ord("n"):
            self._expect_literal(b"ull")
            return NULL
        raise self._unexpected("Expecting value")

    def _read_key(self) -> str:
        """Reads a member name whose opening quote was consumed, then ':'."""
        key = self._read_string()
        if self._next_significant() != _COLON:
            raise self._unexpected("Expecting ':' delimiter")
        return key

    def _read_string(self) -> str:
        """Reads a string literal whose opening quote was consumed."""
        start = self._index - 1
        with ProfileContext("read_string"):
            data = self._data
            parts: list[bytes] = []
            while True:
                end = _STRING_RUN.match(data, self._index).end()  # type: ignore[union-attr]
                if end > self._index:
                    parts.append(data[self._index : end])
                    self._index = end
                if self._is_eof():
                    raise self._error(
                        UnterminatedStringError,
                        "Unterminated string starting at",
                        start,
                    )
                if data[self._index] == _QUOTE:
                    self._index += 1
                    break

                self._index += 1
                if self._is_eof():
                    raise self._error(
                        UnterminatedStringError,
                        "Unterminated string starting at",
                        start,
                    )
                escaped = data[self._index]
                self._index += 1
                if escaped == ord("u"):
                    self._skip_unicode_escape()
                    continue
                replacement = _ESCAPES.get(escaped)
                if replacement is None:
                    raise self._error(
                        InvalidEscapeError, "Invalid \\escape", self._index - 2
                    )
                parts.append(replacement)

            # Splits only happen at ASCII bytes, so every part boundary is
            # a character boundary of the already validated input.
            return b"".join(parts).decode("utf-8")

    def _skip_unicode_escape(self) -> None:
        escape_start = self._index - 2
        if self.config.unicode_escape is UnicodeEscapePolicy.REJECT:
            raise self._error(
                InvalidEscapeError,
                "Unicode escapes are not supported",
                escape_start,
            )
        digits = self._data[self._index : self._index + 4]
        if len(digits) < 4:
            raise self._error(
                UnterminatedStringError,
                "Unterminated string starting at",
                escape_start,
            )
        if not all(digit in _HEX_DIGITS for digit in digits):
            raise self._error(
                InvalidEscapeError, "Invalid \\uXXXX escape", escape_start
            )
        self._index += 4

    def _read_number(self, start: int) -> float:
        """Reads an unsigned number whose first digit sits at start."""
        with ProfileContext("read_number"):
            data = self._data
            while (
                self._index < self._length
                and data[self._index] not in _NUMBER_DELIMITERS
            ):
                self._index += 1

            text = data[start : self._index]
            if _NUMBER_TEXT.fullmatch(text) is None:
                raise self._error(InvalidNumberError, "Invalid number", start)
            number = float(text)
            if not math.isfinite(number):
                raise self._error(
                    NumberOutOfRangeError, "Number out of range", start
                )
            return number

    def _expect_literal(self, rest: bytes) -> None:
        for expected in rest:
            if self._next_byte() != expected:
                raise self._unexpected("Invalid literal")

    def _expect_eof(self) -> None:
        while not self._is_eof():
            if self._data[self._index] not in _WHITESPACE:
                raise self._error(UnexpectedByteError, "Extra data", self._index)
            self._index += 1


def _encode_strict(text: str) -> bytes:
    try:
        return text.encode("utf-8")
    except UnicodeEncodeError as e:
        byte_pos = len(text[: e.start].encode("utf-8"))
        raise InvalidEncodingError(
            "Lone surrogate in document", text, e.start, byte_pos
        ) from e


def _decode_strict(data: bytes) -> str:
    try:
        return data.decode("utf-8")
    except UnicodeDecodeError as e:
        doc = data.decode("utf-8", errors="replace")
        pos = len(data[: e.start].decode("utf-8"))
        raise InvalidEncodingError(
            "Invalid UTF-8 in document", doc, pos, e.start
        ) from e


def parse(source: str | bytes, **kwargs: Any) -> Value:
    """
    Parses a JSON document into a Value tree.

    Accepts str or UTF-8 bytes; keyword arguments build a ParseConfig.
    """
    config = ParseConfig(**kwargs)
    return Parser(source, config).parse()


__all__ = ["ParseConfig", "Parser", "UnicodeEscapePolicy", "parse"]
