"""
Test documents for the wjp benchmarks.

Every generator is seeded, so a given document type is identical across
runs and libraries:
- small_struct: a handful of scalar members
- wide_struct: a > 10KB record with nested arrays of structs
- mixed_array: every value kind interleaved in one array
- nested_structure: structs nested eight levels deep with fan-out
- string_heavy: strings dense with escape sequences
- deep_array: a single value wrapped in hundreds of arrays
"""

import json
import random
import string
from collections.abc import Callable
from typing import Any

DOCUMENT_TYPES = (
    "small_struct",
    "wide_struct",
    "mixed_array",
    "nested_structure",
    "string_heavy",
    "deep_array",
)

_ESCAPES = ['\\"', "\\\\", "\\/", "\\b", "\\f", "\\n", "\\r", "\\t"]
_ESCAPE_PROBABILITY = 0.3
_DEEP_ARRAY_DEPTH = 500


def generate_test_data(data_type: str) -> str:
    """Returns the JSON text for one of DOCUMENT_TYPES."""
    generators: dict[str, Callable[[random.Random], Any]] = {
        "small_struct": _small_struct,
        "wide_struct": _wide_struct,
        "mixed_array": _mixed_array,
        "nested_structure": lambda rng: _nested(rng, 8),
        "string_heavy": _string_heavy,
    }
    if data_type == "deep_array":
        return "[" * _DEEP_ARRAY_DEPTH + '"core"' + "]" * _DEEP_ARRAY_DEPTH
    if data_type not in generators:
        raise ValueError(f"Unknown data type: {data_type}")

    document = generators[data_type](random.Random(data_type))
    return json.dumps(document, ensure_ascii=False)


def _small_struct(rng: random.Random) -> dict[str, Any]:
    return {
        "code": rng.randint(100, 599),
        "messages": [_word(rng, 9), _word(rng, 7)],
        "opt": None,
        "ratio": round(rng.random(), 4),
        "active": True,
    }


def _wide_struct(rng: random.Random) -> dict[str, Any]:
    return {
        "sensor": _word(rng, 12),
        "location": {
            "site": _word(rng, 10),
            "rack": rng.randint(1, 40),
            "coordinates": [rng.uniform(-90, 90), rng.uniform(-180, 180)],
        },
        "readings": [
            {
                "seq": i,
                "value": round(rng.uniform(-50.0, 150.0), 3),
                "unit": rng.choice(["C", "K", "F"]),
                "flags": [rng.random() < 0.5 for _ in range(4)],
                "note": f"sample {_word(rng, 16)}",
            }
            for i in range(80)
        ],
        "events": [
            {
                "kind": rng.choice(["start", "stop", "fault", "reset"]),
                "at": f"2024-{rng.randint(1, 12):02d}-{rng.randint(1, 28):02d}",
                "detail": None if rng.random() < 0.3 else _word(rng, 24),
            }
            for _ in range(40)
        ],
    }


def _mixed_array(rng: random.Random) -> list[Any]:
    makers: list[Callable[[int], Any]] = [
        lambda _: rng.randint(-1000, 1000),
        lambda _: round(rng.uniform(-100.0, 100.0), 3),
        lambda _: _word(rng, rng.randint(5, 30)),
        lambda _: rng.random() < 0.5,
        lambda _: None,
        lambda i: {"index": i, "label": _word(rng, 10), "tags": []},
    ]
    return [rng.choice(makers)(i) for i in range(300)]


def _nested(rng: random.Random, depth: int) -> dict[str, Any]:
    if depth <= 0:
        return {"leaf": _word(rng, 10)}

    return {
        "depth": depth,
        "label": _word(rng, 15),
        "children": [_nested(rng, depth - 1) for _ in range(3)],
    }


def _string_heavy(rng: random.Random) -> dict[str, Any]:
    # Contents are pre-escaped JSON fragments; json.dumps escapes them once
    # more, so the parser sees a double layer of backslashes.
    def escaped(length: int) -> str:
        pieces = []
        for _ in range(length):
            if rng.random() < _ESCAPE_PROBABILITY:
                pieces.append(rng.choice(_ESCAPES))
            else:
                pieces.append(rng.choice(string.ascii_letters + " "))
        return "".join(pieces)

    return {
        "lines": [escaped(50) for _ in range(100)],
        "paths": {
            f"file_{i}": f"C:\\Users\\{_word(rng, 8)}\\file_{i}.txt"
            for i in range(30)
        },
        "multibyte": [f"{_word(rng, 6)} \u00e9\u20ac\u4e2d" for _ in range(30)],
    }


def _word(rng: random.Random, length: int) -> str:
    return "".join(rng.choices(string.ascii_letters, k=length))
