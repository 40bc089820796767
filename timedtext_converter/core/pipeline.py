"""Pipeline glue: raw model response text in, normalized Segments out.

WHY: Every entry point (CLI, HTTP API, library callers) runs the same
sequence of repair, flatten, and normalize. Keeping it in one place means
a fix to the order of steps lands everywhere at once.

RULES:
- load_segments raises RepairError when nothing can be recovered
- merge_translations returns new Segments; its inputs are left untouched
"""

from __future__ import annotations

import dataclasses
import logging
from typing import Any, List, Sequence

from timedtext_converter.config import parse_granularity
from timedtext_converter.core.ir import Granularity, RawRecord, Segment
from timedtext_converter.core.normalizer import flatten_words, normalize_segments
from timedtext_converter.core.repair import repair_json

logger = logging.getLogger(__name__)


def load_segments(raw_text: str, granularity: Granularity = Granularity.LINE) -> List[Segment]:
    """Repair, flatten (word mode only), and normalize a raw model response.

    Raises:
        RepairError: If no record can be recovered from ``raw_text``.
        ValueError: If ``granularity`` is not a known name.
    """
    granularity = parse_granularity(granularity)
    records = repair_json(raw_text)
    if granularity == Granularity.WORD:
        records = flatten_words(records)
    return normalize_segments(records, granularity)


def _translated_value(item: Any) -> Any:
    if isinstance(item, dict):
        raw = RawRecord.from_dict(item)
        # A translation response may carry the translation in "text"
        return raw.translated_text if raw.translated_text is not None else raw.text
    return None


def merge_translations(segments: Sequence[Segment], records: Sequence[Any]) -> List[Segment]:
    """Pair translation records with segments by position.

    Each segment takes the ``translatedText`` of the record at the same
    index. Extra records are ignored; segments without a partner keep their
    current translated_text.
    """
    merged: List[Segment] = []
    for i, segment in enumerate(segments):
        value = _translated_value(records[i]) if i < len(records) else None
        if value is None:
            merged.append(dataclasses.replace(segment))
            continue
        merged.append(dataclasses.replace(segment, translated_text=str(value).strip()))

    if len(records) != len(segments):
        logger.warning(
            "Translation count mismatch: %d segments, %d translations",
            len(segments), len(records),
        )
    return merged
