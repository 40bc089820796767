"""SRT subtitle formatter.

WHY: SRT is the standard subtitle format accepted by every editor and
player. Word-level segments rendered one per cue flash by too fast to
read, so segments are grouped into cues first.

HOW: group_segments() splits the timeline into CueGroups. Each group
becomes one block: 1-based index, ``start --> end`` with comma
milliseconds, and the member texts joined with auto-spacing.

RULES:
- SRT indices are 1-based
- A cue spans [first member start, last member end]
- Blocks are separated by a blank line
- Line breaks inside a text collapse to a single space, so a cue never
  contains the blank line that ends it
- Output suffix: ".srt"
- Media type: "application/x-subrip"
"""

from __future__ import annotations

import re

from timedtext_converter.core.grouping import group_segments, join_with_auto_spacing
from timedtext_converter.core.ir import Segment, TextKind
from timedtext_converter.core.timestamps import format_srt_time
from timedtext_converter.formatters.base import BaseFormatter

_NEWLINES_RE = re.compile(r"[\r\n]+")


class SRTFormatter(BaseFormatter):
    """Formatter that produces grouped SRT caption blocks."""

    name = "SRT Subtitles"
    key = "srt"
    suffix = ".srt"
    media_type = "application/x-subrip"

    def render(self, segments: list[Segment], text_kind: TextKind = TextKind.ORIGINAL) -> str:
        lines: list[str] = []
        for i, group in enumerate(group_segments(segments, text_kind), 1):
            texts = [_NEWLINES_RE.sub(" ", s.select_text(text_kind)) for s in group.segments]
            lines.append(str(i))
            lines.append("{} --> {}".format(
                format_srt_time(group.start_s), format_srt_time(group.end_s),
            ))
            lines.append("".join(join_with_auto_spacing(texts)))
            lines.append("")
        return "\n".join(lines)
