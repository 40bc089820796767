"""Sequence normalizer: turns raw records into monotonic, well-formed Segments.

WHY: Model timestamps drift backwards, overlap, collapse to zero length,
or run for minutes. Every exporter assumes start <= end and a
non-decreasing timeline, so those guarantees are established once, here,
instead of being re-checked by each format.

HOW: A single forward pass keeps the previous start and end. Each record
is parsed and then repaired in a fixed order:
  1. backward jump: start before previous end by more than the tolerance
     snaps to the previous end
  2. causality: start before previous start snaps to the previous start
  3. duration: end <= start becomes start + min_duration
  4. end order: end before previous end snaps to the previous end
  5. ceiling: spans longer than max_duration are cut to clamp_duration
The repaired times are quantized to milliseconds and emitted as Segments.

RULES:
- Output length equals the number of mapping records in the input
- start_i >= start_{i-1} and end_i >= end_{i-1} for every emitted pair
- Overlaps within the tolerance are kept (natural speech overlaps)
- Input is never mutated
"""

from __future__ import annotations

import logging
from typing import Any, Dict, Iterable, List, Optional

from timedtext_converter.config import parse_granularity, resolve_normalize_config
from timedtext_converter.core.ir import Granularity, RawRecord, Segment
from timedtext_converter.core.timestamps import parse_timestamp, quantize

logger = logging.getLogger(__name__)


def _coerce_text(value: Any) -> str:
    if value is None:
        return ""
    return str(value).strip()


def _coerce_optional_text(value: Any) -> Optional[str]:
    if value is None:
        return None
    return str(value).strip()


def _nested_words(item: Any) -> list:
    if isinstance(item, RawRecord):
        return item.words
    if isinstance(item, dict):
        words = item.get("words")
        if isinstance(words, list):
            return words
    return []


def flatten_words(records: Iterable[Any]) -> List[Any]:
    """Replace each record that has a non-empty ``words`` list by its words.

    Used for word-granularity responses, where the model nests the word
    spans inside a line container. Records without words are kept as is.
    """
    flat: List[Any] = []
    for item in records:
        words = _nested_words(item)
        if words:
            flat.extend(words)
        else:
            flat.append(item)
    return flat


def _to_raw(item: Any) -> Optional[RawRecord]:
    if isinstance(item, RawRecord):
        return item
    if isinstance(item, dict):
        return RawRecord.from_dict(item)
    return None


def normalize_segments(
    records: Iterable[Any],
    granularity: Granularity = Granularity.LINE,
    config: Optional[Dict] = None,
) -> List[Segment]:
    """Repair the timing of ``records`` and return validated Segments.

    Args:
        records: Decoded record dicts (or RawRecords), in document order.
        granularity: Selects the repair preset (line or word).
        config: Optional overrides for the preset values
                (tolerance, min_duration, max_duration, clamp_duration).

    Returns:
        One Segment per mapping record, in input order.
    """
    granularity = parse_granularity(granularity)
    cfg = resolve_normalize_config(granularity, config)
    tolerance = cfg["tolerance"]
    min_duration = cfg["min_duration"]
    max_duration = cfg.get("max_duration")
    clamp_duration = cfg.get("clamp_duration", min_duration)

    segments: List[Segment] = []
    last_start = -1.0
    last_end = 0.0
    repairs = {"jump": 0, "causality": 0, "duration": 0, "end_order": 0, "clamp": 0}
    skipped = 0

    for item in records:
        raw = _to_raw(item)
        if raw is None:
            skipped += 1
            continue

        start = parse_timestamp(raw.start)
        end = parse_timestamp(raw.end)

        if start < last_end - tolerance:
            start = last_end
            repairs["jump"] += 1

        if start < last_start:
            start = last_start
            repairs["causality"] += 1

        if end <= start:
            end = start + min_duration
            repairs["duration"] += 1

        if end < last_end:
            end = last_end
            repairs["end_order"] += 1

        if max_duration is not None and end - start > max_duration:
            end = start + clamp_duration
            repairs["clamp"] += 1

        last_start = start
        last_end = end

        words: List[Segment] = []
        if granularity == Granularity.LINE and raw.words:
            words = normalize_segments(raw.words, Granularity.WORD)

        segments.append(Segment(
            start_s=quantize(start),
            end_s=quantize(end),
            text=_coerce_text(raw.text),
            translated_text=_coerce_optional_text(raw.translated_text),
            words=words,
        ))

    if skipped:
        logger.warning("Skipped %d non-object records", skipped)
    logger.debug(
        "Normalized %d %s segments, repairs: %s",
        len(segments), granularity.value, repairs,
    )
    return segments
