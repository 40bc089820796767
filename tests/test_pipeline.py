"""End-to-end tests: raw response text through to exported files."""

import json

import pytest

from timedtext_converter.core.ir import Granularity, TextKind
from timedtext_converter.core.pipeline import load_segments, merge_translations
from timedtext_converter.core.repair import RepairError
from timedtext_converter.formatters import export


class TestLoadSegments:

    def test_line_mode_keeps_containers(self, word_response):
        segments = load_segments(word_response, Granularity.LINE)
        assert [s.text for s in segments] == ["Hello world", "Again"]
        assert [w.text for w in segments[0].words] == ["Hello", "world."]

    def test_word_mode_flattens(self, word_response):
        segments = load_segments(word_response, Granularity.WORD)
        assert [s.text for s in segments] == ["Hello", "world.", "Again"]

    def test_truncated_response(self, truncated_response):
        segments = load_segments(truncated_response)
        assert len(segments) == 1
        assert segments[0].start_time == "00:01.000"
        assert segments[0].end_time == "00:02.000"

    def test_unrepairable(self):
        with pytest.raises(RepairError):
            load_segments("The model refused to answer.")

    @pytest.mark.parametrize("digits", [400, 5000])
    def test_huge_integer_times_read_as_zero(self, digits):
        raw = '{"segments": [{"startTime": 1' + "0" * digits + ', "endTime": 2, "text": "x"}]}'
        segments = load_segments(raw)
        assert len(segments) == 1
        assert segments[0].start_s == 0.0
        assert segments[0].end_s == pytest.approx(2.0)

    def test_fenced_model_quirks(self):
        raw = (
            "```json\n"
            '{"segments": [\n'
            '  {"startTime": "００：０１．０００", "endTime": "00:00:02,500", "text": " a "},\n'
            '  // the model sometimes comments\n'
            '  {"startTime": "00:00:01", "endTime": "00:00:00", "text": null}\n'
            "]}\n"
            "```"
        )
        segments = load_segments(raw)
        assert segments[0].start_s == pytest.approx(1.0)
        assert segments[0].end_s == pytest.approx(2.5)
        assert segments[0].text == "a"
        # Backward jump clamped to the previous end, then given the minimum duration
        assert segments[1].start_s == pytest.approx(2.5)
        assert segments[1].end_s == pytest.approx(3.5)
        assert segments[1].text == ""


class TestMergeTranslations:

    def test_pairs_by_position(self, line_segments):
        records = [{"translatedText": "Hej där."}, {"text": "Hur mår du?"}]
        merged = merge_translations(line_segments, records)
        assert [s.translated_text for s in merged] == ["Hej där.", "Hur mår du?", None]
        assert [s.text for s in merged] == [s.text for s in line_segments]

    def test_inputs_untouched(self, line_segments):
        merge_translations(line_segments, [{"translatedText": "x"}])
        assert all(s.translated_text is None for s in line_segments)

    def test_extra_records_ignored(self, seg):
        merged = merge_translations([seg(0, 1, "a")], [{"translatedText": "A"}, {"translatedText": "B"}])
        assert len(merged) == 1
        assert merged[0].translated_text == "A"

    def test_translated_export(self, line_segments):
        records = [{"translatedText": t} for t in ("Hej där.", "Hur mår du?", "Bra, tack.")]
        merged = merge_translations(line_segments, records)
        content = export("json", merged, TextKind.TRANSLATED)
        assert [d["text"] for d in json.loads(content)] == ["Hej där.", "Hur mår du?", "Bra, tack."]


class TestEndToEnd:

    def test_word_response_to_every_format(self, word_response):
        segments = load_segments(word_response, Granularity.WORD)
        outputs = {
            key: export(key, segments, granularity=Granularity.WORD, language="en")
            for key in ("plain_text", "srt", "vtt", "lrc", "ttml", "json")
        }
        assert outputs["plain_text"] == "Hello\n\nworld.\n\nAgain"
        assert "<00:00.600>world." in outputs["vtt"]
        assert outputs["lrc"].startswith("[00:00.00]Hello\n[00:00.60]world.")
        assert len(json.loads(outputs["json"])) == 3
