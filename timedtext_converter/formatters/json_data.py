"""JSON formatter: the normalized segments in their external shape.

WHY: Downstream tools (editors, players, re-import into this converter)
want the repaired timeline as data, not as a caption format. The output
reuses the {startTime, endTime, text} shape the model was asked for, so
a repaired response can be fed back through the pipeline unchanged.

HOW: Each segment becomes {startTime, endTime, text} with the selected
text. The list is validated with jsonschema against the bundled
segments_export schema, then serialized with two-space indentation and
non-ASCII characters kept as is.

RULES:
- Times use the hour-folding MM:SS.mmm clock
- Validate output against the schema before returning; raise on failure
- Output suffix: ".json"
- Media type: "application/json"
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import jsonschema

from timedtext_converter.core.ir import Segment, TextKind
from timedtext_converter.formatters.base import BaseFormatter

_SCHEMA_PATH = Path(__file__).resolve().parent.parent / "schemas" / "segments_export.schema.json"


def _load_schema() -> dict[str, Any]:
    """Load the segments export schema from the package data."""
    with open(_SCHEMA_PATH, encoding="utf-8") as f:
        return json.load(f)


_CACHED_SCHEMA: dict[str, Any] | None = None


def _get_schema() -> dict[str, Any]:
    global _CACHED_SCHEMA
    if _CACHED_SCHEMA is None:
        _CACHED_SCHEMA = _load_schema()
    return _CACHED_SCHEMA


def _segment_to_dict(segment: Segment, text_kind: TextKind) -> dict[str, str]:
    return {
        "startTime": segment.start_time,
        "endTime": segment.end_time,
        "text": segment.select_text(text_kind),
    }


class JSONFormatter(BaseFormatter):
    """Formatter that emits the repaired segment list as JSON."""

    name = "JSON"
    key = "json"
    suffix = ".json"
    media_type = "application/json"

    def render(self, segments: list[Segment], text_kind: TextKind = TextKind.ORIGINAL) -> str:
        """Serialize ``segments`` as a validated JSON array.

        Raises:
            jsonschema.ValidationError: If the generated data does not
                conform to the bundled export schema.
        """
        output = [_segment_to_dict(s, text_kind) for s in segments]
        jsonschema.validate(instance=output, schema=_get_schema())
        return json.dumps(output, indent=2, ensure_ascii=False)
