"""TTML (Timed Text Markup Language) formatter.

WHY: Broadcast and streaming pipelines ingest TTML, and its nested
``<p>``/``<span>`` timing carries both the cue and the per-word spans
in one document.

HOW: Segments are grouped with group_segments(). Each group becomes a
``<p begin end>`` paragraph holding one ``<span begin end>`` per member.
Span text is auto-spaced, then XML-escaped. The document carries a
default caption style in its head.

RULES:
- Times are always fixed-hours HH:MM:SS.mmm
- & < > " ' are escaped in span text
- xml:lang comes from the ``language`` option (default from config)
- Output suffix: ".ttml"
- Media type: "application/ttml+xml"
"""

from __future__ import annotations

from typing import Optional
from xml.sax.saxutils import escape, quoteattr

from timedtext_converter import config
from timedtext_converter.core.grouping import group_segments, join_with_auto_spacing
from timedtext_converter.core.ir import Segment, TextKind
from timedtext_converter.core.timestamps import to_ttml_clock
from timedtext_converter.formatters.base import BaseFormatter

_XML_ENTITIES = {'"': "&quot;", "'": "&apos;"}

_DOCUMENT_TEMPLATE = """<?xml version="1.0" encoding="UTF-8"?>
<tt xmlns="http://www.w3.org/ns/ttml" xmlns:tts="http://www.w3.org/ns/ttml#styling" xml:lang={lang}>
  <head>
    <styling>
      <style xml:id="defaultCaption" tts:fontSize="10px" tts:fontFamily="SansSerif" tts:fontWeight="normal" tts:fontStyle="normal" tts:textDecoration="none" tts:color="white" tts:backgroundColor="black" tts:textAlign="center" />
    </styling>
  </head>
  <body>
    <div style="defaultCaption">
{body}
    </div>
  </body>
</tt>"""


def escape_xml(text: str) -> str:
    """Escape text for use as XML character data."""
    return escape(text, _XML_ENTITIES)


class TTMLFormatter(BaseFormatter):
    """Formatter that produces a styled TTML document."""

    name = "TTML"
    key = "ttml"
    suffix = ".ttml"
    media_type = "application/ttml+xml"
    options = ("language",)

    def __init__(self, language: Optional[str] = None) -> None:
        self.language = language or config.TTML_LANGUAGE

    def render(self, segments: list[Segment], text_kind: TextKind = TextKind.ORIGINAL) -> str:
        paragraphs: list[str] = []
        for group in group_segments(segments, text_kind):
            texts = join_with_auto_spacing([s.select_text(text_kind) for s in group.segments])
            spans = [
                '        <span begin="{}" end="{}">{}</span>'.format(
                    to_ttml_clock(s.start_s), to_ttml_clock(s.end_s), escape_xml(text),
                )
                for s, text in zip(group.segments, texts)
            ]
            paragraphs.append('      <p begin="{}" end="{}">\n{}\n      </p>'.format(
                to_ttml_clock(group.start_s), to_ttml_clock(group.end_s), "\n".join(spans),
            ))
        return _DOCUMENT_TEMPLATE.format(
            lang=quoteattr(self.language),
            body="\n".join(paragraphs),
        )
