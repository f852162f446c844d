"""
Benchmark suite for jstrict decoding performance.

Compares strict parsing against standard JSON libraries including:
- Python standard library json
- orjson (C-optimized)
- ujson (ultra-fast JSON)

Measures parsing speed, schema-bound decoding and memory usage.
"""
