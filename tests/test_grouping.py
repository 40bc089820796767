"""Tests for caption grouping and auto-spacing."""

import pytest

from timedtext_converter.core.grouping import (
    ends_comma,
    ends_sentence,
    group_segments,
    is_cjk_char,
    is_pause,
    is_soft_boundary,
    join_with_auto_spacing,
)
from timedtext_converter.core.ir import TextKind


def _group_texts(groups, kind=TextKind.ORIGINAL):
    return [[s.select_text(kind) for s in g.segments] for g in groups]


class TestPredicates:

    @pytest.mark.parametrize("text", ["Done.", "Really?", "Wow!", "终于。", "本当？", "wait… ", "ja！"])
    def test_sentence_ends(self, text):
        assert ends_sentence(text)

    @pytest.mark.parametrize("text", ["", "and", "well,", "   "])
    def test_not_sentence_ends(self, text):
        assert not ends_sentence(text)

    @pytest.mark.parametrize("text", ["so,", "然后，", "列举、", "first;", "note:"])
    def test_comma_class(self, text):
        assert ends_comma(text)

    def test_pause_threshold_is_exclusive(self):
        assert not is_pause(0.8)
        assert is_pause(0.81)

    def test_soft_boundary_needs_length(self):
        assert not is_soft_boundary(45, 0.5, "word")
        assert is_soft_boundary(46, 0.5, "word")
        assert is_soft_boundary(46, 0.0, "word,")
        assert not is_soft_boundary(46, 0.2, "word")

    @pytest.mark.parametrize("ch, expected", [
        ("中", True), ("あ", True), ("カ", True), ("한", True), ("㐀", True),
        ("a", False), ("1", False), ("", False), ("，", False),
    ])
    def test_cjk_chars(self, ch, expected):
        assert is_cjk_char(ch) is expected


class TestGroupSegments:

    def test_short_gap_merges(self, seg):
        groups = group_segments([seg(5, 7, "Hello"), seg(7.2, 9, "World")])
        assert len(groups) == 1
        assert groups[0].start_s == 5
        assert groups[0].end_s == 9

    def test_sentence_end_cuts(self, seg):
        groups = group_segments([seg(0, 1, "Hi."), seg(1, 2, "Next")])
        assert _group_texts(groups) == [["Hi."], ["Next"]]

    def test_pause_cuts(self, seg):
        groups = group_segments([seg(0, 1, "a"), seg(1.9, 2, "b")])
        assert len(groups) == 2

    def test_long_group_cuts_on_moderate_gap(self, seg):
        long_text = "x" * 46
        groups = group_segments([seg(0, 1, long_text), seg(1.4, 2, "y"), seg(2.0, 3, "z")])
        assert _group_texts(groups) == [[long_text], ["y", "z"]]

    def test_short_group_ignores_moderate_gap(self, seg):
        groups = group_segments([seg(0, 1, "a"), seg(1.4, 2, "b")])
        assert len(groups) == 1

    def test_long_group_cuts_on_comma(self, seg):
        groups = group_segments([seg(0, 1, "x" * 46 + ","), seg(1, 2, "y")])
        assert len(groups) == 2

    def test_translated_punctuation_falls_back_to_original(self, seg):
        segments = [seg(0, 1, "Hola.", None), seg(1, 2, "Adios", "Bye")]
        groups = group_segments(segments, TextKind.TRANSLATED)
        assert len(groups) == 2

    def test_translated_text_drives_cuts(self, seg):
        segments = [seg(0, 1, "Hola", "Hello."), seg(1, 2, "amigo", "friend")]
        assert len(group_segments(segments, TextKind.ORIGINAL)) == 1
        assert len(group_segments(segments, TextKind.TRANSLATED)) == 2

    def test_config_override(self, seg):
        groups = group_segments([seg(0, 1, "a"), seg(1.5, 2, "b")], config={"pause_gap": 2.0})
        assert len(groups) == 1

    def test_empty_input(self):
        assert group_segments([]) == []

    def test_completeness(self, word_segments, line_segments):
        for segments in (word_segments, line_segments):
            groups = group_segments(segments)
            flat = [s for g in groups for s in g.segments]
            assert flat == segments
            assert all(g.segments for g in groups)


class TestAutoSpacing:

    def test_latin_words_get_spaces(self):
        assert join_with_auto_spacing(["Hello", "world"]) == ["Hello ", "world"]

    def test_cjk_boundary_has_no_space(self):
        assert join_with_auto_spacing(["你好", "世界"]) == ["你好", "世界"]

    def test_mixed_boundary_gets_space(self):
        assert join_with_auto_spacing(["你好", "world", "世界"]) == ["你好 ", "world ", "世界"]

    def test_existing_whitespace_kept(self):
        assert join_with_auto_spacing(["a ", "b"]) == ["a ", "b"]

    def test_next_member_leading_space_ignored(self):
        assert join_with_auto_spacing(["日本", " 語"]) == ["日本", " 語"]

    def test_empty_members(self):
        assert join_with_auto_spacing([]) == []
        assert join_with_auto_spacing(["", "a"]) == [" ", "a"]
