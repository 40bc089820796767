"""WebVTT caption formatter with optional karaoke word tags.

WHY: Browsers play WebVTT natively, and its inline ``<MM:SS.mmm>`` tags
let a player highlight each word as it is spoken. Those tags only make
sense for word-level original text, so the formatter needs to know what
kind of data it was handed.

HOW: Segments are grouped into cues with group_segments(). Each cue has
a ``start --> end`` line and the member texts joined with auto-spacing.
In word mode, each member of an original-language cue is prefixed with
its own start tag.

Word mode comes from the ``granularity`` option. When no granularity is
given, more than VTT_WORD_MODE_MIN_SEGMENTS segments are taken to mean
word data, which is how older callers without the option behave.

RULES:
- Output always starts with the "WEBVTT" header and a blank line
- Times are MM:SS.mmm under one hour, HH:MM:SS.mmm above
- Word tags are never emitted for translated text
- Cue text is kept on one line and &, < and > are written as entities,
  so a text can neither end its cue nor open a tag
- Output suffix: ".vtt"
- Media type: "text/vtt"
"""

from __future__ import annotations

import re
from typing import Optional
from xml.sax.saxutils import escape

from timedtext_converter.config import parse_granularity
from timedtext_converter.core.grouping import group_segments, join_with_auto_spacing
from timedtext_converter.core.ir import Granularity, Segment, TextKind
from timedtext_converter.core.timestamps import format_vtt_time
from timedtext_converter.formatters.base import BaseFormatter
from timedtext_converter.presets import VTT_WORD_MODE_MIN_SEGMENTS

_NEWLINES_RE = re.compile(r"[\r\n]+")


def _cue_text(text: str) -> str:
    return escape(_NEWLINES_RE.sub(" ", text))


class VTTFormatter(BaseFormatter):
    """Formatter that produces grouped WebVTT cues."""

    name = "WebVTT"
    key = "vtt"
    suffix = ".vtt"
    media_type = "text/vtt"
    options = ("granularity",)

    def __init__(self, granularity: Optional[Granularity] = None) -> None:
        self.granularity = parse_granularity(granularity) if granularity is not None else None

    def _word_mode(self, segments: list[Segment]) -> bool:
        if self.granularity is None:
            return len(segments) > VTT_WORD_MODE_MIN_SEGMENTS
        return self.granularity == Granularity.WORD

    def render(self, segments: list[Segment], text_kind: TextKind = TextKind.ORIGINAL) -> str:
        word_tags = text_kind == TextKind.ORIGINAL and self._word_mode(segments)

        cues: list[str] = []
        for group in group_segments(segments, text_kind):
            texts = join_with_auto_spacing(
                [_cue_text(s.select_text(text_kind)) for s in group.segments]
            )
            if word_tags:
                texts = [
                    "<{}>{}".format(format_vtt_time(s.start_s), text)
                    for s, text in zip(group.segments, texts)
                ]
            cues.append("{} --> {}\n{}".format(
                format_vtt_time(group.start_s),
                format_vtt_time(group.end_s),
                "".join(texts),
            ))
        return "WEBVTT\n\n" + "\n\n".join(cues)
