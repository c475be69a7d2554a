"""
Benchmark suite for wjp.

Compares wjp parsing, rendering and typed construction against the standard
library json, orjson and ujson, and reports peak memory per document type.
Run with ``pytest benchmarks``.
"""
