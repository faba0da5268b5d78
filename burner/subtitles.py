"""
Subtitle Asset Builder

Synchronous pipeline turning canonical words into a finished subtitle
file body: segmentation, timing correction, style resolution and
serialization.
"""

import logging
from dataclasses import dataclass
from typing import List, Sequence

from burner.formatters import AssFormatter, KaraokeMode, SRTFormatter
from burner.options import RenderOptions, SubtitleMode
from burner.segmenter import TranscriptSegmenter
from burner.styles import StyleProfile, resolve_style
from burner.timing import smooth_timing
from burner.transcript import Segment, Word

logger = logging.getLogger(__name__)


@dataclass
class SubtitleAsset:
    """Serialized subtitle track plus what the renderer needs to burn it."""

    content: str
    extension: str  # ".srt" or ".ass"
    profile: StyleProfile
    segments: List[Segment]

    @property
    def is_styled(self) -> bool:
        return self.extension == ".ass"


def build_segments(words: Sequence[Word], options: RenderOptions) -> List[Segment]:
    """Segment words and, unless disabled, smooth their timing."""
    segmenter = TranscriptSegmenter(
        max_words=options.effective_max_words,
        pause_threshold=options.pause_threshold,
        start_offset=options.start_offset,
    )
    segments = segmenter.segment(words)
    if options.fill_gaps:
        smooth_timing(segments, max_gap=options.max_gap)
    return segments


def build_subtitle_asset(
    words: Sequence[Word],
    options: RenderOptions,
    frame_width: int,
    frame_height: int,
) -> SubtitleAsset:
    """
    Build the subtitle track for a job.

    Args:
        words: Canonical words
        options: Job options
        frame_width: Video width in pixels
        frame_height: Video height in pixels

    Returns:
        SubtitleAsset with serialized content
    """
    segments = build_segments(words, options)
    profile = resolve_style(options.style, frame_width, frame_height, options.position.value)

    if options.mode == SubtitleMode.PLAIN:
        formatter = SRTFormatter(
            uppercase=options.uppercase,
            emoji=options.emoji,
            max_words_per_line=options.max_words_per_line,
        )
        content, extension = formatter.format(segments), ".srt"
    else:
        formatter = AssFormatter(
            profile,
            frame_width,
            frame_height,
            mode=KaraokeMode(options.mode.value),
            uppercase=options.uppercase,
            emoji=options.emoji,
            max_words_per_line=options.max_words_per_line,
            title=options.title,
        )
        content, extension = formatter.format(segments), ".ass"

    logger.info(
        f"Built {extension} subtitle asset: {len(segments)} segments, style {profile.name}",
        extra={
            "metadata": {
                "segments": len(segments),
                "mode": options.mode.value,
                "style": profile.name,
                "frame": f"{frame_width}x{frame_height}",
            }
        },
    )
    return SubtitleAsset(content=content, extension=extension, profile=profile, segments=segments)
