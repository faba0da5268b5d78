"""
API Request Models

Pydantic models for validating incoming API requests.
"""

from typing import Any, List

from pydantic import AliasChoices, Field

from burner.options import RenderOptions


class RenderRequest(RenderOptions):
    """
    Subtitle burn request: a source video, its word-timed transcript and
    the job options.

    The transcript is a list of word objects (``text``/``word``, ``start``,
    ``end`` in seconds) or of segments carrying a nested ``words`` list.
    Individual entries are validated when the job is submitted; malformed
    words are dropped.
    """

    source_url: str = Field(
        ...,
        min_length=1,
        validation_alias=AliasChoices("source_url", "video_url", "videoUrl"),
        description="HTTP(S) URL of the source video",
    )
    transcript: List[Any] = Field(..., description="Word-timed transcript")

    def to_options(self) -> RenderOptions:
        """Job options without the transcript"""
        return RenderOptions(**self.model_dump(exclude={"transcript"}))

    model_config = {
        "json_schema_extra": {
            "example": {
                "videoUrl": "https://example.com/video.mp4",
                "title": "My clip",
                "style": "neon",
                "mode": "karaoke",
                "transcript": [
                    {"text": "hello", "start": 0.0, "end": 0.4},
                    {"text": "world", "start": 0.45, "end": 0.9},
                ],
            }
        }
    }
