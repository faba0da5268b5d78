"""
Unit tests for gap filling and overlap resolution
"""

import copy

import pytest

from burner.segmenter import TranscriptSegmenter
from burner.timing import fill_gaps, resolve_overlaps, smooth_timing
from burner.transcript import Segment, Word


def seg(start, end, text="w"):
    return Segment(words=[Word(text=text, start=start, end=end)])


def bounds(segments):
    return [(round(s.start, 3), round(s.end, 3)) for s in segments]


class TestFillGaps:
    """Test suite for fill_gaps"""

    def test_bridges_short_pause(self):
        """Test that a 0.5s pause is bridged to 0.1s before the next start"""
        segments = fill_gaps([seg(0.0, 1.0), seg(1.5, 2.0)])

        assert segments[0].end == pytest.approx(1.4)
        assert segments[1].start == 1.5

    def test_leaves_tiny_gap(self):
        """Test that gaps at or below 0.2s are untouched"""
        segments = fill_gaps([seg(0.0, 1.0), seg(1.2, 2.0)])
        assert segments[0].end == 1.0

    def test_leaves_scene_break(self):
        """Test that gaps above max_gap are untouched"""
        segments = fill_gaps([seg(0.0, 1.0), seg(3.0, 4.0)], max_gap=1.5)
        assert segments[0].end == 1.0

    def test_gap_equal_to_max_gap_is_bridged(self):
        """Test that the upper bound is inclusive"""
        segments = fill_gaps([seg(0.0, 1.0), seg(2.5, 3.0)], max_gap=1.5)
        assert segments[0].end == pytest.approx(2.4)


class TestResolveOverlaps:
    """Test suite for resolve_overlaps"""

    def test_opens_gap_around_midpoint(self):
        """Test that an overlap becomes a 0.2s gap centred on its midpoint"""
        segments = resolve_overlaps([seg(0.0, 2.0), seg(1.0, 3.0)])

        assert segments[0].end == pytest.approx(1.4)
        assert segments[1].start == pytest.approx(1.6)

    def test_no_overlap_untouched(self):
        """Test that touching segments are left alone"""
        segments = resolve_overlaps([seg(0.0, 1.0), seg(1.0, 2.0)])
        assert bounds(segments) == [(0.0, 1.0), (1.0, 2.0)]

    def test_never_inverts(self):
        """Test that heavily overlapping segments keep end >= start"""
        segments = resolve_overlaps([seg(1.0, 1.1), seg(0.0, 5.0)])

        for s in segments:
            assert s.end >= s.start
            for w in s.words:
                assert w.end >= w.start


class TestSmoothTiming:
    """Test suite for the combined pass"""

    @pytest.fixture
    def messy(self):
        return [
            seg(0.0, 1.0, "a"),
            seg(1.4, 2.2, "b"),
            seg(2.0, 3.0, "c"),
            seg(3.05, 3.5, "d"),
            seg(6.0, 7.0, "e"),
            Segment(words=[Word(text="f", start=6.8, end=7.3), Word(text="g", start=7.3, end=8.0)]),
        ]

    def test_no_adjacent_overlap(self, messy):
        """Test that no adjacent pair overlaps after smoothing"""
        segments = smooth_timing(messy)

        for current, nxt in zip(segments, segments[1:]):
            assert current.end <= nxt.start + 1e-6

    def test_idempotent(self, messy):
        """Test that smoothing twice equals smoothing once"""
        once = smooth_timing(messy)
        snapshot = bounds(once)
        twice = smooth_timing(copy.deepcopy(once))

        assert bounds(twice) == snapshot

    def test_bounds_match_words(self, messy):
        """Test that segment bounds stay the min/max of their words"""
        for s in smooth_timing(messy):
            assert s.start == min(w.start for w in s.words)
            assert s.end == max(w.end for w in s.words)


class TestMultiWordOverlaps:
    """Test suite for overlaps whose leading words end before the new start"""

    @pytest.fixture
    def segments(self):
        words = [
            Word(text="so", start=0.0, end=0.1),
            Word(text="yeah", start=0.1, end=1.5),
            Word(text="a", start=1.0, end=1.05),
            Word(text="b", start=1.05, end=2.0),
        ]
        return TranscriptSegmenter(max_words=2).segment(words)

    def test_overlap_fully_removed(self, segments):
        """Test that a short leading word is moved along with the segment start"""
        smoothed = smooth_timing(segments)

        assert bounds(smoothed) == [(0.0, 1.15), (1.35, 2.0)]
        assert smoothed[0].end <= smoothed[1].start

    def test_idempotent(self, segments):
        once = smooth_timing(segments)
        snapshot = bounds(once)

        assert bounds(smooth_timing(copy.deepcopy(once))) == snapshot

    def test_words_never_invert(self, segments):
        for s in smooth_timing(segments):
            for w in s.words:
                assert w.end >= w.start
