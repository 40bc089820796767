"""LRC lyrics formatter.

WHY: Music players highlight lyrics line by line from a simple
``[MM:SS.CC]text`` list. Only start times matter; each line stays lit
until the next one begins.

RULES:
- One line per segment, no grouping
- Tags have hundredths precision, rounded on the total so a time like
  59.995s renders as [01:00.00]
- Line breaks inside a text collapse to a single space
- Output suffix: ".lrc"
"""

from __future__ import annotations

import re

from timedtext_converter.core.ir import Segment, TextKind
from timedtext_converter.core.timestamps import format_lrc_tag
from timedtext_converter.formatters.base import BaseFormatter

_NEWLINES_RE = re.compile(r"[\r\n]+")


class LRCFormatter(BaseFormatter):
    """Formatter that produces time-tagged LRC lyric lines."""

    name = "LRC Lyrics"
    key = "lrc"
    suffix = ".lrc"
    media_type = "text/plain"

    def render(self, segments: list[Segment], text_kind: TextKind = TextKind.ORIGINAL) -> str:
        lines = []
        for segment in segments:
            text = _NEWLINES_RE.sub(" ", segment.select_text(text_kind))
            lines.append(format_lrc_tag(segment.start_s) + text)
        return "\n".join(lines)
