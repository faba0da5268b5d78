"""
Transcript Data Structures

Canonical word and segment shapes shared by the segmenter, the timing
corrector and the subtitle formatters, plus the adapter that normalizes
raw transcript payloads into them.
"""

import logging
import math
from dataclasses import dataclass, field
from typing import Any, Iterable, List, Mapping, Optional

from pydantic import BaseModel, Field, field_validator

logger = logging.getLogger(__name__)

# Keys under which word text may arrive, in lookup order
TEXT_KEYS = ("text", "word", "Text", "Word")


class Word(BaseModel):
    """
    Word-level timestamp.

    Used for karaoke subtitles and high-precision timing.
    """

    text: str = Field(min_length=1, description="The word text")
    start: float = Field(ge=0.0, description="Word start time in seconds")
    end: float = Field(ge=0.0, description="Word end time in seconds")

    @field_validator("text")
    @classmethod
    def strip_text(cls, v):
        """Trim surrounding whitespace, rejecting blank words"""
        v = v.strip()
        if not v:
            raise ValueError("word text must not be blank")
        return v

    @field_validator("end")
    @classmethod
    def end_not_before_start(cls, v, info):
        """Ensure end time is not before start time"""
        if "start" in info.data and v < info.data["start"]:
            raise ValueError("end must not be before start")
        return v

    model_config = {
        "json_schema_extra": {
            "example": {"text": "Hello", "start": 0.0, "end": 0.5}
        }
    }


@dataclass
class Segment:
    """
    A time-bounded group of words displayed together as one subtitle unit.

    Word segments derive their bounds from their words, so the bounds are
    always the min start / max end of the constituent words. Literal
    segments (no words) carry explicit bounds.
    """

    words: List[Word] = field(default_factory=list)
    text: Optional[str] = None
    literal_start: float = 0.0
    literal_end: float = 0.0

    @classmethod
    def literal(cls, text: str, start: float, end: float) -> "Segment":
        return cls(text=text, literal_start=start, literal_end=end)

    @property
    def start(self) -> float:
        if self.words:
            return min(w.start for w in self.words)
        return self.literal_start

    @property
    def end(self) -> float:
        if self.words:
            return max(w.end for w in self.words)
        return self.literal_end

    @property
    def duration(self) -> float:
        return self.end - self.start

    @property
    def display_text(self) -> str:
        if self.words:
            return " ".join(w.text for w in self.words)
        return (self.text or "").strip()

    def set_start(self, value: float) -> None:
        """Move the segment start; words ending before value collapse onto it."""
        if not self.words:
            self.literal_start = min(value, self.literal_end)
            return
        for w in self.words:
            if w.start < value:
                w.start = value
                w.end = max(w.end, value)

    def set_end(self, value: float) -> None:
        """Move the segment end, extending the trailing word or clamping overlong ones.

        When shrinking, words that start after value collapse onto it.
        """
        if not self.words:
            self.literal_end = max(value, self.literal_start)
            return
        if value >= self.end:
            self.words[-1].end = value
            return
        for w in self.words:
            if w.end > value:
                w.end = value
                w.start = min(w.start, value)

    def shifted(self, offset: float) -> "Segment":
        """Return a copy with every timestamp moved back by offset, clamped at 0."""
        if not self.words:
            return Segment.literal(
                self.text or "",
                max(0.0, self.literal_start - offset),
                max(0.0, self.literal_end - offset),
            )
        return Segment(words=[
            Word(
                text=w.text,
                start=max(0.0, w.start - offset),
                end=max(0.0, w.end - offset),
            )
            for w in self.words
        ])


def _as_seconds(value: Any) -> Optional[float]:
    # bool is an int subclass; a True timestamp is malformed input
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return None
    value = float(value)
    if math.isnan(value) or math.isinf(value):
        return None
    return value


def _word_text(item: Mapping[str, Any]) -> str:
    for key in TEXT_KEYS:
        value = item.get(key)
        if isinstance(value, str) and value.strip():
            return value.strip()
    return ""


def _coerce_word(item: Any) -> Optional[Word]:
    if isinstance(item, Word):
        return item.model_copy()
    if not isinstance(item, Mapping):
        return None

    text = _word_text(item)
    start = _as_seconds(item.get("start"))
    end = _as_seconds(item.get("end"))
    if not text or start is None or end is None:
        return None
    if start < 0 or end < start:
        return None
    return Word(text=text, start=start, end=end)


def normalize_words(raw: Iterable[Any]) -> List[Word]:
    """
    Normalize a raw transcript into canonical words.

    Accepts flat word lists as well as segment-shaped payloads whose items
    carry a nested "words" list. Text is read from the first non-empty of
    text/word/Text/Word. Malformed entries are dropped silently.

    Args:
        raw: Iterable of dicts (or Word instances)

    Returns:
        List of valid Word objects in input order
    """
    words: List[Word] = []
    dropped = 0

    for item in raw or []:
        if isinstance(item, Mapping) and isinstance(item.get("words"), list):
            nested = normalize_words(item["words"])
            words.extend(nested)
            continue

        word = _coerce_word(item)
        if word is None:
            dropped += 1
            continue
        words.append(word)

    if dropped:
        logger.debug(f"Dropped {dropped} malformed transcript entries")

    return words
