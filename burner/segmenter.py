"""
Transcript Segmenter

Groups timestamped words into display segments and wraps segments into
at most two display lines.
"""

import logging
import math
from typing import List, Sequence, TypeVar

from burner.transcript import Segment, Word

logger = logging.getLogger(__name__)

T = TypeVar("T")

# Default words per segment for each subtitle mode
CAPTION_MAX_WORDS = 3
KARAOKE_MAX_WORDS = 10

DEFAULT_PAUSE_THRESHOLD = 0.5
DEFAULT_WORDS_PER_LINE = 5


class TranscriptSegmenter:
    """
    Greedy left-to-right word grouping.

    A segment closes when it reaches max_words, when the pause before the
    next word exceeds pause_threshold, or at the end of input.

    Example (pause_threshold=0.5, max_words=3):
        hi(0-0.3) there(0.3-0.6) world(2.0-2.4)
        -> [hi there] 0.0-0.6, [world] 2.0-2.4
    """

    def __init__(
        self,
        max_words: int = CAPTION_MAX_WORDS,
        pause_threshold: float = DEFAULT_PAUSE_THRESHOLD,
        start_offset: float = 0.0,
    ):
        """
        Initialize segmenter.

        Args:
            max_words: Maximum words per segment (2-3 for captions, up to 10 for karaoke)
            pause_threshold: Gap in seconds that forces a segment break
            start_offset: Seconds subtracted from every timestamp (clamped at 0)
        """
        if max_words < 1:
            raise ValueError("max_words must be at least 1")
        self.max_words = max_words
        self.pause_threshold = pause_threshold
        self.start_offset = start_offset

    def segment(self, words: Sequence[Word]) -> List[Segment]:
        """
        Split words into segments.

        Args:
            words: Canonical words in transcript order

        Returns:
            List of segments, each holding its own copies of the words
        """
        segments: List[Segment] = []
        current: List[Word] = []

        for i, word in enumerate(words):
            current.append(word.model_copy())

            is_last = i == len(words) - 1
            pause_follows = not is_last and (words[i + 1].start - word.end) > self.pause_threshold

            if len(current) >= self.max_words or pause_follows or is_last:
                segments.append(self._close(current))
                current = []

        logger.debug(f"Segmented {len(words)} words into {len(segments)} segments")
        return segments

    def _close(self, words: List[Word]) -> Segment:
        segment = Segment(words=words)
        if self.start_offset:
            segment = segment.shifted(self.start_offset)
        return segment


def split_into_lines(words: Sequence[T], max_words_per_line: int = DEFAULT_WORDS_PER_LINE) -> List[List[T]]:
    """
    Split a segment's words across at most two display lines.

    Words beyond twice the per-line budget are dropped; readability wins
    over completeness here.

    Args:
        words: Words (or word texts) of one segment
        max_words_per_line: Per-line word budget

    Returns:
        One or two lists of words
    """
    words = list(words)
    if len(words) <= max_words_per_line:
        return [words]

    words = words[: max_words_per_line * 2]
    midpoint = math.ceil(len(words) / 2)
    return [words[:midpoint], words[midpoint:]]
