"""Plain text formatter: one paragraph per segment.

RULES:
- Selected texts joined by a blank line, no timing information
- A missing translation renders as an empty paragraph
- Output suffix: ".txt"
- Media type: "text/plain"
"""

from __future__ import annotations

from timedtext_converter.core.ir import Segment, TextKind
from timedtext_converter.formatters.base import BaseFormatter


class PlainTextFormatter(BaseFormatter):
    """Formatter that produces the bare transcript text for review and archival."""

    name = "Plain Text"
    key = "plain_text"
    suffix = ".txt"
    media_type = "text/plain"

    def render(self, segments: list[Segment], text_kind: TextKind = TextKind.ORIGINAL) -> str:
        return "\n\n".join(s.select_text(text_kind) for s in segments)
