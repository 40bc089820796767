"""Intermediate representation dataclasses for timed text.

WHY: Model responses arrive as loosely shaped dicts; any field may be
missing, null, a number instead of a string, or spelled differently.
Formatters need the opposite: well-typed segments with float timing that
is guaranteed to be ordered. Keeping the two shapes as separate types
makes it impossible to hand an unvalidated record to a formatter.

HOW: Five types form the model:
  RawRecord  : one untrusted input record, every field optional
  Segment    : one validated timed span produced by the normalizer
  CueGroup   : consecutive Segments rendered as one caption/paragraph
  Granularity: whether segments are whole lines or single words
  TextKind   : which text field an export renders

RULES:
- RawRecord is built only by RawRecord.from_dict and consumed only by the normalizer
- Segment times are float seconds, non-negative, quantized to milliseconds
- start_time / end_time are the external clock-string view (MM:SS.mmm)
- CueGroup is ephemeral, built per export call, never stored
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional

from timedtext_converter.core.timestamps import format_timestamp


class Granularity(str, Enum):
    """Segmentation granularity of a model response."""

    LINE = "line"
    WORD = "word"


class TextKind(str, Enum):
    """Which text field an exporter renders."""

    ORIGINAL = "original"
    TRANSLATED = "translated"


_START_KEYS = ("startTime", "start_time", "start")
_END_KEYS = ("endTime", "end_time", "end")
_TEXT_KEYS = ("text",)
_TRANSLATED_KEYS = ("translatedText", "translated_text")


def _first_present(data: Dict[str, Any], keys: tuple) -> Any:
    for key in keys:
        if key in data:
            return data[key]
    return None


@dataclass
class RawRecord:
    """A single untrusted segment record recovered from a model response.

    WHY: The model is asked for {startTime, endTime, text} but routinely
    returns numbers, nulls, alternative key names, or nothing at all for
    some fields. This type holds whatever was there without judging it.

    HOW: from_dict() pulls each field from the first matching key alias.
    Nested ``words`` lists become child RawRecords.

    RULES:
    - start / end: raw clock token (str, int, float) or None
    - text / translated_text: raw value of any type or None
    - words: child records, empty when absent or not a list
    """

    start: Any = None
    end: Any = None
    text: Any = None
    translated_text: Any = None
    words: List[RawRecord] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> RawRecord:
        """Build a RawRecord from a decoded JSON object.

        Non-dict entries inside a ``words`` list are skipped.
        """
        raw_words = data.get("words")
        words: List[RawRecord] = []
        if isinstance(raw_words, list):
            words = [cls.from_dict(w) for w in raw_words if isinstance(w, dict)]
        return cls(
            start=_first_present(data, _START_KEYS),
            end=_first_present(data, _END_KEYS),
            text=_first_present(data, _TEXT_KEYS),
            translated_text=_first_present(data, _TRANSLATED_KEYS),
            words=words,
        )


@dataclass
class Segment:
    """A timed text span with validated, ordered timing.

    WHY: Every formatter needs the same guarantees: start before end, no
    time travel between neighbours, no zero-length cues. The normalizer
    establishes them once and this type carries them.

    HOW: Created only by the normalizer (or derived from another Segment
    via dataclasses.replace, e.g. when merging translations).

    RULES:
    - start_s <= end_s, both >= 0, millisecond precision
    - text is always a str (empty when the source had none)
    - translated_text is None until a translation is merged
    - words holds child Segments (line mode with nested words only)
    """

    start_s: float
    end_s: float
    text: str
    translated_text: Optional[str] = None
    words: List[Segment] = field(default_factory=list)

    @property
    def start_time(self) -> str:
        return format_timestamp(self.start_s)

    @property
    def end_time(self) -> str:
        return format_timestamp(self.end_s)

    @property
    def duration_s(self) -> float:
        return self.end_s - self.start_s

    def select_text(self, kind: TextKind) -> str:
        """Return the text an export of ``kind`` renders for this segment."""
        if kind == TextKind.TRANSLATED:
            return self.translated_text or ""
        return self.text

    def to_dict(self) -> Dict[str, Any]:
        """Serialize to the external {startTime, endTime, text} shape."""
        data: Dict[str, Any] = {
            "startTime": self.start_time,
            "endTime": self.end_time,
            "text": self.text,
        }
        if self.translated_text is not None:
            data["translatedText"] = self.translated_text
        if self.words:
            data["words"] = [w.to_dict() for w in self.words]
        return data


@dataclass
class CueGroup:
    """Consecutive segments that render as one caption or paragraph.

    RULES:
    - segments is non-empty and keeps the input order
    - the span is [first.start_s, last.end_s]
    """

    segments: List[Segment] = field(default_factory=list)

    @property
    def start_s(self) -> float:
        return self.segments[0].start_s

    @property
    def end_s(self) -> float:
        return self.segments[-1].end_s

    def char_count(self, kind: TextKind) -> int:
        """Total length of the selected text across all members."""
        return sum(len(s.select_text(kind)) for s in self.segments)
