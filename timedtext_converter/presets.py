"""Timing-repair presets and caption-grouping thresholds.

WHY: Line-level and word-level responses need different repair limits: a
word can legitimately last 0.1s, a subtitle line cannot. The cue
grouping heuristics are tuning knobs, not logic. Centralizing them as
plain dicts lets callers pick a preset by granularity and override single
values without touching control flow.

HOW: Each normalize preset is a dict with the backward-jump tolerance, the
minimum duration applied to zero/negative spans, and the optional
max-duration ceiling with the fixed length a runaway span is cut back to.
NORMALIZE_PRESETS maps granularity names to presets. GROUPING_DEFAULTS
holds the pause and length thresholds used by the caption grouper.

RULES:
- Presets are frozen constants; never mutate them at runtime.
- Callers go through config.resolve_normalize_config(), which deep-copies.
- max_duration = None disables the ceiling clamp.
"""

from typing import Dict

# Phrase-level segments (subtitle/LRC mode)
NORMALIZE_LINE: Dict = {
    "tolerance": 0.1,
    "min_duration": 1.0,
    "max_duration": 30.0,
    "clamp_duration": 10.0,
}

# Token-level segments (karaoke/TTML mode)
NORMALIZE_WORD: Dict = {
    "tolerance": 0.2,
    "min_duration": 0.1,
    "max_duration": 5.0,
    "clamp_duration": 1.0,
}

NORMALIZE_PRESETS: Dict[str, Dict] = {
    "line": NORMALIZE_LINE,
    "word": NORMALIZE_WORD,
}

GROUPING_DEFAULTS: Dict = {
    # Gap that always starts a new cue
    "pause_gap": 0.8,
    # Accumulated characters after which a soft boundary may cut
    "max_chars": 45,
    # Gap that counts as a soft boundary once the cue is long
    "soft_gap": 0.3,
}

# More than this many flat segments is treated as word data by the VTT
# exporter when no granularity is passed explicitly.
VTT_WORD_MODE_MIN_SEGMENTS = 10
