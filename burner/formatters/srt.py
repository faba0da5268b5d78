"""
SRT (SubRip) Subtitle Formatter

Generates the plain subtitle track burned into the video when no styled
karaoke output is requested.
"""

import logging
from typing import Sequence

from burner.segmenter import DEFAULT_WORDS_PER_LINE, split_into_lines
from burner.text import prepare_words
from burner.transcript import Segment

logger = logging.getLogger(__name__)


def format_srt_timestamp(seconds: float) -> str:
    """
    Convert seconds to SRT timestamp format: HH:MM:SS,mmm

    The value is rounded to the nearest millisecond; negative values clamp
    to zero.

    Args:
        seconds: Time in seconds

    Returns:
        Formatted timestamp string, e.g. 3661.25 -> "01:01:01,250"
    """
    total_ms = max(0, int(round(seconds * 1000)))
    hours, remainder = divmod(total_ms, 3600 * 1000)
    minutes, remainder = divmod(remainder, 60 * 1000)
    secs, milliseconds = divmod(remainder, 1000)

    return f"{hours:02d}:{minutes:02d}:{secs:02d},{milliseconds:03d}"


class SRTFormatter:
    """
    Formats segments as SubRip (.srt) subtitle files.

    SRT Format Specification:
    - Sequential numbering starting from 1
    - Timestamps in HH:MM:SS,mmm format
    - Text content with UTF-8 encoding
    - Blank line between entries

    Example:
        1
        00:00:00,000 --> 00:00:00,600
        HI THERE

        2
        00:00:02,000 --> 00:00:02,400
        WORLD
    """

    def __init__(
        self,
        uppercase: bool = True,
        emoji: bool = False,
        max_words_per_line: int = DEFAULT_WORDS_PER_LINE,
    ):
        """
        Initialize SRT formatter.

        Args:
            uppercase: Upper-case Latin/Cyrillic cue text
            emoji: Decorate known words with emoji
            max_words_per_line: Per-line word budget for the two-line wrapper
        """
        self.uppercase = uppercase
        self.emoji = emoji
        self.max_words_per_line = max_words_per_line

    def format(self, segments: Sequence[Segment]) -> str:
        """
        Format segments as SRT subtitle file.

        Args:
            segments: Timed segments

        Returns:
            SRT formatted string
        """
        srt_entries = []
        idx = 1
        for segment in segments:
            text = self._cue_text(segment)
            if not text:
                continue
            start_time = format_srt_timestamp(segment.start)
            end_time = format_srt_timestamp(segment.end)
            srt_entries.append(f"{idx}\n{start_time} --> {end_time}\n{text}\n")
            idx += 1

        return "\n".join(srt_entries)

    def _cue_text(self, segment: Segment) -> str:
        texts = [w.text for w in segment.words] if segment.words else segment.display_text.split()
        texts = [t for t in prepare_words(texts, uppercase=self.uppercase, emoji=self.emoji) if t]
        lines = split_into_lines(texts, self.max_words_per_line)
        return "\n".join(" ".join(line) for line in lines if line)
