"""
Unit tests for SRTFormatter

Tests timestamp formatting and cue layout.
"""

from burner.formatters import SRTFormatter, format_srt_timestamp
from burner.transcript import Segment, Word


def segment(*specs):
    return Segment(words=[Word(text=t, start=s, end=e) for t, s, e in specs])


class TestSRTTimestamp:
    """Test suite for format_srt_timestamp"""

    def test_hours_minutes_seconds_millis(self):
        assert format_srt_timestamp(3661.25) == "01:01:01,250"

    def test_zero(self):
        assert format_srt_timestamp(0) == "00:00:00,000"

    def test_rounds_to_nearest_millisecond(self):
        assert format_srt_timestamp(1.0004) == "00:00:01,000"
        assert format_srt_timestamp(1.0006) == "00:00:01,001"

    def test_negative_clamps_to_zero(self):
        assert format_srt_timestamp(-3.0) == "00:00:00,000"


class TestSRTFormatter:
    """Test suite for SRTFormatter"""

    def test_format_basic(self):
        """Test numbered cues separated by blank lines"""
        segments = [
            segment(("hi", 0.0, 0.3), ("there", 0.3, 0.6)),
            segment(("world", 2.0, 2.4)),
        ]

        content = SRTFormatter().format(segments)

        assert content == (
            "1\n00:00:00,000 --> 00:00:00,600\nHI THERE\n"
            "\n"
            "2\n00:00:02,000 --> 00:00:02,400\nWORLD\n"
        )

    def test_uppercase_disabled(self):
        content = SRTFormatter(uppercase=False).format([segment(("Hi", 0.0, 0.5))])
        assert "\nHi\n" in content

    def test_cjk_text_unchanged(self):
        content = SRTFormatter().format([segment(("你好", 0.0, 0.5), ("world", 0.5, 1.0))])
        assert "你好 WORLD" in content

    def test_long_segment_wraps_to_two_lines(self):
        words = [(f"w{i}", i * 0.1, i * 0.1 + 0.1) for i in range(7)]
        content = SRTFormatter(max_words_per_line=5).format([segment(*words)])

        assert "W0 W1 W2 W3\nW4 W5 W6" in content

    def test_literal_segment(self):
        content = SRTFormatter().format([Segment.literal("hello there", 1.0, 2.0)])
        assert content == "1\n00:00:01,000 --> 00:00:02,000\nHELLO THERE\n"

    def test_emoji_decoration(self):
        content = SRTFormatter(emoji=True).format([segment(("i", 0.0, 0.2), ("love", 0.2, 0.5))])
        assert "I LOVE ❤️" in content

    def test_empty_segments(self):
        assert SRTFormatter().format([]) == ""
