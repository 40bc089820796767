"""Timed-Text Converter: repair, normalize, and export model-generated timed text.

WHY: Generative transcription models return timed segments whose JSON is
often truncated, whose clock strings vary from run to run ("01:05.300",
"00:01:05,300", "65.3", full-width digits), and whose timing regularly
runs backwards or collapses to zero length. Caption players reject that.
This package turns such a response into a clean, monotonic segment list
and renders it to the common caption and lyric formats.

HOW: Three-stage pipeline: repair (recover records from the raw text),
normalize (parse clocks, enforce ordering and durations), format (pluggable
exporters, some of which group segments into readable cues first). Each
stage is a pure function and independently testable.

RULES:
- All formatters consume the same normalized Segment list
- Adding a new output format = one new formatter module, no core changes
- RawRecord (untrusted input) and Segment (validated output) never mix
"""

__version__ = "0.1.0"
