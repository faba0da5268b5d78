"""
Render Job Options

Per-job settings controlling segmentation, timing correction, styling and
the subtitle track format.
"""

from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field, field_validator

from burner.segmenter import CAPTION_MAX_WORDS, KARAOKE_MAX_WORDS
from burner.styles import DEFAULT_STYLE, Position


class SubtitleMode(str, Enum):
    """Subtitle track format"""

    PLAIN = "plain"  # SRT, styled through force_style
    KARAOKE = "karaoke"  # ASS, one cue per line with \k sweep
    WORD = "word"  # ASS, one cue per word


class RenderOptions(BaseModel):
    """
    Options for one subtitle burn job.

    Defaults reproduce the classic caption look: up to three words per
    cue, 0.5s pause breaks, white Arial text at the bottom of the frame.
    """

    source_url: str = Field(..., min_length=1, description="HTTP(S) URL of the source video")
    title: str = Field(default="video", description="Title used for the download filename")
    style: str = Field(default=DEFAULT_STYLE, description="Style name (modern, neon, fire, elegant)")
    mode: SubtitleMode = Field(default=SubtitleMode.PLAIN, description="Subtitle track format")
    position: Position = Field(default=Position.BOTTOM, description="Vertical subtitle position")

    uppercase: bool = Field(default=True, description="Upper-case Latin/Cyrillic text")
    emoji: bool = Field(default=False, description="Decorate known words with emoji")

    max_words: Optional[int] = Field(
        default=None, ge=1, le=20,
        description="Words per segment (default 3 for plain, 10 for karaoke modes)",
    )
    max_words_per_line: int = Field(default=5, ge=1, le=20, description="Per-line word budget")
    pause_threshold: float = Field(default=0.5, ge=0.0, description="Pause in seconds that forces a segment break")
    fill_gaps: bool = Field(default=True, description="Bridge short pauses and resolve overlaps")
    max_gap: float = Field(default=1.5, ge=0.0, description="Largest pause in seconds that is bridged")
    start_offset: float = Field(default=0.0, ge=0.0, description="Seconds subtracted from every timestamp")

    frame_width: Optional[int] = Field(default=None, gt=0, description="Frame width; probed when omitted")
    frame_height: Optional[int] = Field(default=None, gt=0, description="Frame height; probed when omitted")

    @field_validator("source_url")
    @classmethod
    def validate_source_url(cls, v):
        """Only HTTP(S) sources can be fetched"""
        v = v.strip()
        if not v.lower().startswith(("http://", "https://")):
            raise ValueError("source_url must be an http(s) URL")
        return v

    @field_validator("style")
    @classmethod
    def normalize_style(cls, v):
        """Style names are case-insensitive; unknown names are resolved later"""
        return (v or DEFAULT_STYLE).strip().lower()

    @property
    def effective_max_words(self) -> int:
        if self.max_words is not None:
            return self.max_words
        return CAPTION_MAX_WORDS if self.mode == SubtitleMode.PLAIN else KARAOKE_MAX_WORDS

    model_config = {
        "json_schema_extra": {
            "example": {
                "source_url": "https://example.com/video.mp4",
                "title": "My clip",
                "style": "neon",
                "mode": "word",
                "position": "bottom",
                "uppercase": True,
                "emoji": False,
            }
        }
    }
