"""
Small, self-contained JSON codec built around an explicit value tree.

Text is parsed into immutable Value trees by an iterative parser, rendered
back as compact JSON text, and mapped to and from Python data through the
serialize/construct protocols. loads, dumps, load and dump offer the familiar
module-level surface on top of that.
"""

import logging
from typing import IO
from typing import Any

from ._codec import Json
from ._codec import deserialize
from ._construct import I8
from ._construct import I16
from ._construct import I32
from ._construct import I64
from ._construct import I128
from ._construct import U8
from ._construct import U16
from ._construct import U32
from ._construct import U64
from ._construct import U128
from ._construct import IntWidth
from ._construct import construct
from ._construct import narrow
from ._errors import ConversionError
from ._errors import IntegerRangeError
from ._errors import InvalidEncodingError
from ._errors import InvalidEscapeError
from ._errors import InvalidFieldError
from ._errors import InvalidNumberError
from ._errors import JSONDecodeError
from ._errors import KindMismatchError
from ._errors import MissingFieldError
from ._errors import NestingTooDeepError
from ._errors import NumberOutOfRangeError
from ._errors import ParseError
from ._errors import UnexpectedByteError
from ._errors import UnexpectedEndError
from ._errors import UnexpectedFieldError
from ._errors import UnterminatedStringError
from ._fields import Fields
from ._parser import ParseConfig
from ._parser import Parser
from ._parser import UnicodeEscapePolicy
from ._parser import parse
from ._profiling import HotPathStats
from ._profiling import clear_hot_path_stats
from ._profiling import get_hot_path_stats
from ._serialize import Either
from ._serialize import Err
from ._serialize import Ok
from ._serialize import Serializable
from ._serialize import serialize
from ._values import FALSE
from ._values import NULL
from ._values import TRUE
from ._values import EncodeConfig
from ._values import Value
from ._values import ValueKind
from ._values import format_number
from ._values import render

__version__ = "0.1.0"

logging.getLogger(__name__).addHandler(logging.NullHandler())


def loads(s: str | bytes, **kwargs: Any) -> Any:
    """
    Parses JSON text into plain Python objects.

    Numbers come back as float. Keyword arguments build a ParseConfig.
    """
    return parse(s, **kwargs).to_python()


def dumps(obj: Any, **kwargs: Any) -> str:
    """
    Serializes a Python object to compact JSON text.

    Keyword arguments build an EncodeConfig.
    """
    config = EncodeConfig(**kwargs)
    return render(serialize(obj), config)


def load(fp: IO[str] | IO[bytes], **kwargs: Any) -> Any:
    """
    Parses JSON from a file-like object.
    """
    if not hasattr(fp, "read"):
        raise TypeError("fp must have a read() method")

    return loads(fp.read(), **kwargs)


def dump(obj: Any, fp: IO[str], **kwargs: Any) -> None:
    """
    Serializes a Python object as JSON into a file-like object.
    """
    if not hasattr(fp, "write"):
        raise TypeError("fp must have a write() method")

    fp.write(dumps(obj, **kwargs))


__all__ = [
    "FALSE",
    "I8",
    "I16",
    "I32",
    "I64",
    "I128",
    "NULL",
    "TRUE",
    "U8",
    "U16",
    "U32",
    "U64",
    "U128",
    "ConversionError",
    "Either",
    "EncodeConfig",
    "Err",
    "Fields",
    "HotPathStats",
    "IntWidth",
    "IntegerRangeError",
    "InvalidEncodingError",
    "InvalidEscapeError",
    "InvalidFieldError",
    "InvalidNumberError",
    "JSONDecodeError",
    "Json",
    "KindMismatchError",
    "MissingFieldError",
    "NestingTooDeepError",
    "NumberOutOfRangeError",
    "Ok",
    "ParseConfig",
    "ParseError",
    "Parser",
    "Serializable",
    "UnexpectedByteError",
    "UnexpectedEndError",
    "UnexpectedFieldError",
    "UnicodeEscapePolicy",
    "UnterminatedStringError",
    "Value",
    "ValueKind",
    "clear_hot_path_stats",
    "construct",
    "deserialize",
    "dump",
    "dumps",
    "format_number",
    "get_hot_path_stats",
    "load",
    "loads",
    "narrow",
    "parse",
    "serialize",
]
