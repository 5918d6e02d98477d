"""
Benchmark suite for jsonscan validation performance.

Compares validating a JSON object with jsonscan against fully decoding it
with:
- Python standard library json
- orjson (C-optimized)
- ujson (ultra-fast JSON)

Measures scanning speed and memory usage across different document shapes.
"""
