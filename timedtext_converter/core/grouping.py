"""Caption grouping: merge consecutive segments into readable cues.

WHY: Word-level data rendered one word per cue flashes unreadably fast,
and even line-level data benefits from joining short fragments that run
together. Grouping gives every cue-based format (SRT, VTT, TTML) the
same notion of where one caption ends and the next begins.

HOW: One greedy pass compares each segment with the last member of the
current group. A new group starts on a sentence end, on a long pause, or
once the group is long and a soft boundary (short pause or comma) shows
up. Otherwise the segment joins the current group.

RULES:
- Concatenating the groups reproduces the input exactly (no drops, no reorders)
- Thresholds come from presets.GROUPING_DEFAULTS and can be overridden
- Every boundary test is a named public predicate
"""

from __future__ import annotations

from typing import Dict, List, Optional, Sequence

from timedtext_converter.core.ir import CueGroup, Segment, TextKind
from timedtext_converter.presets import GROUPING_DEFAULTS

SENTENCE_END_CHARS = frozenset(".!?…。！？")
COMMA_CHARS = frozenset(",，、;；:：")

# Kana, CJK extension A, CJK unified ideographs, Hangul syllables
_CJK_RANGES = (
    (0x3040, 0x30FF),
    (0x3400, 0x4DBF),
    (0x4E00, 0x9FFF),
    (0xAC00, 0xD7AF),
)


def is_cjk_char(ch: str) -> bool:
    """True if ``ch`` is a character written without spaces between words."""
    if not ch:
        return False
    code = ord(ch[0])
    return any(lo <= code <= hi for lo, hi in _CJK_RANGES)


def ends_sentence(text: str) -> bool:
    text = text.strip()
    return bool(text) and text[-1] in SENTENCE_END_CHARS


def ends_comma(text: str) -> bool:
    text = text.strip()
    return bool(text) and text[-1] in COMMA_CHARS


def is_pause(gap: float, pause_gap: float = GROUPING_DEFAULTS["pause_gap"]) -> bool:
    return gap > pause_gap


def is_soft_boundary(
    char_count: int,
    gap: float,
    prev_text: str,
    max_chars: int = GROUPING_DEFAULTS["max_chars"],
    soft_gap: float = GROUPING_DEFAULTS["soft_gap"],
) -> bool:
    """A long cue may be cut at a short pause or after a comma."""
    return char_count > max_chars and (gap > soft_gap or ends_comma(prev_text))


def _boundary_text(segment: Segment, kind: TextKind) -> str:
    if kind == TextKind.TRANSLATED and segment.translated_text:
        return segment.translated_text
    return segment.text


def group_segments(
    segments: Sequence[Segment],
    text_kind: TextKind = TextKind.ORIGINAL,
    config: Optional[Dict] = None,
) -> List[CueGroup]:
    """Split ``segments`` into consecutive CueGroups.

    Args:
        segments: Normalized segments in timeline order.
        text_kind: Which text is measured and tested for punctuation.
        config: Optional overrides for GROUPING_DEFAULTS.

    Returns:
        Non-empty CueGroups covering every input segment in order.
    """
    cfg = dict(GROUPING_DEFAULTS)
    if config:
        cfg.update(config)

    groups: List[CueGroup] = []
    current: List[Segment] = []
    char_count = 0

    for segment in segments:
        if current:
            prev = current[-1]
            prev_text = _boundary_text(prev, text_kind)
            gap = segment.start_s - prev.end_s
            if (
                ends_sentence(prev_text)
                or is_pause(gap, cfg["pause_gap"])
                or is_soft_boundary(
                    char_count, gap, prev_text, cfg["max_chars"], cfg["soft_gap"]
                )
            ):
                groups.append(CueGroup(segments=current))
                current = []
                char_count = 0
        current.append(segment)
        char_count += len(segment.select_text(text_kind))

    if current:
        groups.append(CueGroup(segments=current))
    return groups


def join_with_auto_spacing(texts: Sequence[str]) -> List[str]:
    """Return ``texts`` with the separating spaces a reader expects.

    Each member except the last gets one trailing space, unless it already
    ends in whitespace or both sides of the boundary are CJK characters.
    """
    spaced: List[str] = []
    for i, text in enumerate(texts):
        if i == len(texts) - 1 or text[-1:].isspace():
            spaced.append(text)
            continue
        following = texts[i + 1].lstrip()
        if is_cjk_char(text[-1:]) and is_cjk_char(following[:1]):
            spaced.append(text)
        else:
            spaced.append(text + " ")
    return spaced
