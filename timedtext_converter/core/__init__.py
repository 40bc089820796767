"""Core parsing, repair, normalization, and grouping modules.

WHY: The core package is the stable heart of the converter: the IR
dataclasses and the pure transformations that turn an untrusted model
response into a normalized Segment list. Formatters, the CLI and the
HTTP API all sit on top of it.

HOW: ir.py defines the data structures, timestamps.py parses and formats
clock strings, repair.py recovers records from broken JSON, normalizer.py
enforces the timing invariants, grouping.py builds caption cues, and
pipeline.py chains them together.

RULES:
- IR dataclasses are the contract; change with care
- No I/O, no network, no global mutable state in this package
- Input records are never mutated; new Segment values are returned
"""
