"""
ASS (Advanced SubStation Alpha) Subtitle Formatter

Builds styled karaoke tracks as a typed document (script info, style
records, dialogue events) and serializes it in one place, so cue text
containing commas, braces or backslashes cannot corrupt the file.

Two karaoke modes are supported:
- karaoke: one event per segment, each word preceded by a \\k duration tag
  so the renderer sweeps the highlight across the line
- word: one event per word, the active word drawn in the active color and
  size, all other words in the base color and size
"""

import logging
from dataclasses import dataclass, field, fields
from enum import Enum
from typing import List, Optional, Sequence, Tuple

from burner.segmenter import DEFAULT_WORDS_PER_LINE, split_into_lines
from burner.styles import StyleProfile
from burner.text import prepare_words
from burner.transcript import Segment, Word

logger = logging.getLogger(__name__)

LINE_BREAK = "\\N"
RESET_TAG = "{\\r}"

# Word-stepping cues end this long before the next word starts
WORD_STEP_EPSILON = 0.01

STYLE_FORMAT = (
    "Name, Fontname, Fontsize, PrimaryColour, SecondaryColour, OutlineColour, "
    "BackColour, Bold, Italic, Underline, StrikeOut, ScaleX, ScaleY, Spacing, "
    "Angle, BorderStyle, Outline, Shadow, Alignment, MarginL, MarginR, MarginV, Encoding"
)
EVENT_FORMAT = "Layer, Start, End, Style, Name, MarginL, MarginR, MarginV, Effect, Text"


class KaraokeMode(str, Enum):
    """Styled track layouts"""

    KARAOKE = "karaoke"  # one cue per line, \k sweep
    WORD = "word"  # one cue per word, active word highlighted


def format_ass_timestamp(seconds: float) -> str:
    """
    Convert seconds to ASS timestamp format: H:MM:SS.cc

    Args:
        seconds: Time in seconds

    Returns:
        Formatted timestamp string, e.g. 3661.25 -> "1:01:01.25"
    """
    total_cs = _centiseconds(seconds)
    hours, remainder = divmod(total_cs, 360000)
    minutes, remainder = divmod(remainder, 6000)
    secs, centis = divmod(remainder, 100)
    return f"{hours}:{minutes:02d}:{secs:02d}.{centis:02d}"


def _centiseconds(seconds: float) -> int:
    return max(0, int(round(seconds * 100)))


def escape_text(text: str) -> str:
    """Escape ASS control characters in plain cue text."""
    return (
        text.replace("\\", "\\\\")
        .replace("{", "\\{")
        .replace("}", "\\}")
        .replace("\r\n", LINE_BREAK)
        .replace("\n", LINE_BREAK)
    )


def _field(value) -> str:
    # Structural fields are comma separated; commas and newlines would
    # shift every following column.
    if isinstance(value, bool):
        return "-1" if value else "0"
    return str(value).replace(",", " ").replace("\n", " ").replace("\r", " ")


@dataclass
class ScriptInfo:
    """[Script Info] header"""

    play_res_x: int
    play_res_y: int
    title: str = "Burned subtitles"
    script_type: str = "v4.00+"
    scaled_border_and_shadow: bool = True
    wrap_style: int = 0

    def lines(self) -> List[str]:
        return [
            "[Script Info]",
            f"Title: {_field(self.title)}",
            f"ScriptType: {self.script_type}",
            f"PlayResX: {self.play_res_x}",
            f"PlayResY: {self.play_res_y}",
            f"ScaledBorderAndShadow: {'yes' if self.scaled_border_and_shadow else 'no'}",
            f"WrapStyle: {self.wrap_style}",
        ]


@dataclass
class AssStyle:
    """One [V4+ Styles] record; field order is the Format line order."""

    name: str
    fontname: str
    fontsize: int
    primary_colour: str
    secondary_colour: str
    outline_colour: str
    back_colour: str
    bold: bool = True
    italic: bool = False
    underline: bool = False
    strikeout: bool = False
    scale_x: int = 100
    scale_y: int = 100
    spacing: int = 0
    angle: int = 0
    border_style: int = 1
    outline: int = 2
    shadow: int = 2
    alignment: int = 2
    margin_l: int = 0
    margin_r: int = 0
    margin_v: int = 0
    encoding: int = 1

    def to_line(self) -> str:
        return "Style: " + ",".join(_field(getattr(self, f.name)) for f in fields(self))


@dataclass
class AssEvent:
    """One [Events] Dialogue record; text may carry override tags."""

    start: float
    end: float
    text: str
    style: str = "Default"
    layer: int = 0
    name: str = ""
    margin_l: int = 0
    margin_r: int = 0
    margin_v: int = 0
    effect: str = ""

    def to_line(self) -> str:
        columns = [
            _field(self.layer),
            format_ass_timestamp(self.start),
            format_ass_timestamp(self.end),
            _field(self.style),
            _field(self.name),
            _field(self.margin_l),
            _field(self.margin_r),
            _field(self.margin_v),
            _field(self.effect),
        ]
        # Text is the last column and may legitimately contain commas
        text = self.text.replace("\r", "").replace("\n", LINE_BREAK)
        return "Dialogue: " + ",".join(columns) + "," + text


@dataclass
class AssDocument:
    """Complete ASS script."""

    script_info: ScriptInfo
    styles: List[AssStyle] = field(default_factory=list)
    events: List[AssEvent] = field(default_factory=list)

    def dumps(self) -> str:
        """Serialize the document."""
        out = self.script_info.lines()
        out += ["", "[V4+ Styles]", f"Format: {STYLE_FORMAT}"]
        out += [style.to_line() for style in self.styles]
        out += ["", "[Events]", f"Format: {EVENT_FORMAT}"]
        out += [event.to_line() for event in self.events]
        return "\n".join(out) + "\n"


class AssFormatter:
    """
    Formats segments as a styled ASS karaoke track.

    Example (word mode, second word active):
        Dialogue: 0,0:00:00.30,0:00:00.60,Default,,0,0,0,,{\\c&HFFFFFF&...\\fs39}HI{\\r} {\\c&H00D7FF&...\\fs45}THERE{\\r}
    """

    STYLE_NAME = "Default"

    def __init__(
        self,
        profile: StyleProfile,
        frame_width: int,
        frame_height: int,
        mode: KaraokeMode = KaraokeMode.WORD,
        uppercase: bool = True,
        emoji: bool = False,
        max_words_per_line: int = DEFAULT_WORDS_PER_LINE,
        title: str = "Burned subtitles",
    ):
        """
        Initialize ASS formatter.

        Args:
            profile: Resolved style profile
            frame_width: Canvas width (PlayResX)
            frame_height: Canvas height (PlayResY)
            mode: Karaoke layout (karaoke or word)
            uppercase: Upper-case Latin/Cyrillic words
            emoji: Decorate known words with emoji
            max_words_per_line: Per-line word budget for the two-line wrapper
            title: Script title
        """
        self.profile = profile
        self.frame_width = frame_width
        self.frame_height = frame_height
        self.mode = KaraokeMode(mode)
        self.uppercase = uppercase
        self.emoji = emoji
        self.max_words_per_line = max_words_per_line
        self.title = title

    def format(self, segments: Sequence[Segment]) -> str:
        """
        Format segments as an ASS script.

        Args:
            segments: Timed segments

        Returns:
            ASS formatted string
        """
        return self.build_document(segments).dumps()

    def build_document(self, segments: Sequence[Segment]) -> AssDocument:
        doc = AssDocument(
            script_info=ScriptInfo(
                play_res_x=self.frame_width,
                play_res_y=self.frame_height,
                title=self.title,
            ),
            styles=[self._style_record()],
        )

        for segment in segments:
            if self.mode == KaraokeMode.KARAOKE:
                doc.events.extend(self._karaoke_events(segment))
            else:
                doc.events.extend(self._word_events(segment))

        logger.debug(f"Built ASS document with {len(doc.events)} events ({self.mode.value} mode)")
        return doc

    def _style_record(self) -> AssStyle:
        p = self.profile
        if self.mode == KaraokeMode.KARAOKE:
            # \k sweeps from SecondaryColour to PrimaryColour
            primary, secondary = p.active_color, p.primary_color
        else:
            primary, secondary = p.primary_color, p.active_color

        return AssStyle(
            name=self.STYLE_NAME,
            fontname=p.font_family,
            fontsize=p.base_font_size,
            primary_colour=primary,
            secondary_colour=secondary,
            outline_colour=p.outline_color,
            back_colour=p.shadow_color,
            bold=p.bold,
            outline=p.outline_width,
            shadow=p.shadow_depth,
            alignment=p.alignment,
            margin_l=p.margin_left,
            margin_r=p.margin_right,
            margin_v=p.margin_vertical,
        )

    def _display_words(self, segment: Segment) -> List[Tuple[str, Optional[Word]]]:
        """Prepared (text, word) pairs within the two-line budget; empty texts dropped."""
        if not segment.words:
            texts = prepare_words(segment.display_text.split(), self.uppercase, self.emoji)
            text = " ".join(t for t in texts if t)
            return [(text, None)] if text else []

        kept = split_into_lines(segment.words, self.max_words_per_line)
        kept_words = [w for line in kept for w in line]
        texts = prepare_words([w.text for w in kept_words], self.uppercase, self.emoji)
        return [(t, w) for t, w in zip(texts, kept_words) if t]

    def _join_lines(self, parts: List[str]) -> str:
        lines = split_into_lines(parts, self.max_words_per_line)
        return LINE_BREAK.join(" ".join(line) for line in lines if line)

    def _karaoke_events(self, segment: Segment) -> List[AssEvent]:
        items = self._display_words(segment)
        if not items:
            return []

        start, end = segment.start, segment.end
        # Anchors in centiseconds: each word's highlight runs until the next
        # word starts; cumulative rounding keeps the sum equal to the cue length.
        anchors = [_centiseconds(start)]
        for _, word in items[1:]:
            anchors.append(max(anchors[-1], _centiseconds(word.start)))
        anchors.append(max(anchors[-1], _centiseconds(end)))

        parts = []
        for i, (text, _) in enumerate(items):
            duration = anchors[i + 1] - anchors[i]
            parts.append(f"{{\\k{duration}}}{escape_text(text)}")

        return [AssEvent(start=start, end=end, text=self._join_lines(parts), style=self.STYLE_NAME)]

    def _word_tag(self, active: bool) -> str:
        p = self.profile
        color = p.active_color if active else p.primary_color
        size = p.active_font_size if active else p.base_font_size
        bold = 1 if p.bold else 0
        return f"{{\\c{color}\\b{bold}\\shad{p.shadow_depth}\\4c{p.shadow_color}\\fs{size}}}"

    def _word_events(self, segment: Segment) -> List[AssEvent]:
        items = self._display_words(segment)
        if not items:
            return []

        if items[0][1] is None:
            text = f"{self._word_tag(False)}{escape_text(items[0][0])}{RESET_TAG}"
            return [AssEvent(start=segment.start, end=segment.end, text=text, style=self.STYLE_NAME)]

        events = []
        for j, (_, word) in enumerate(items):
            end = word.end
            if j < len(items) - 1:
                next_start = items[j + 1][1].start
                end = max(word.start, next_start - WORD_STEP_EPSILON)

            parts = [
                f"{self._word_tag(i == j)}{escape_text(text)}{RESET_TAG}"
                for i, (text, _) in enumerate(items)
            ]
            events.append(
                AssEvent(start=word.start, end=end, text=self._join_lines(parts), style=self.STYLE_NAME)
            )

        return events
