"""
Style Profile Resolver

Maps a style name and frame geometry to concrete typography, color and
margin parameters for the subtitle renderer.
"""

import logging
from enum import Enum
from typing import Dict, List, Tuple

from pydantic import BaseModel, Field

logger = logging.getLogger(__name__)

DEFAULT_STYLE = "modern"

# Font sizes scale with frame height
FONT_HEIGHT_DIVISOR = 28
ACTIVE_FONT_SCALE = 1.15

# Vertical margin as a share of frame height (top/bottom positions)
VERTICAL_MARGIN_RATIO = 0.10
# Horizontal margin as a share of frame width
HORIZONTAL_MARGIN_RATIO = 0.055


class Position(str, Enum):
    """Subtitle vertical position"""

    TOP = "top"
    CENTER = "center"
    BOTTOM = "bottom"


# ASS numpad alignment codes (bottom/middle/top, horizontally centred)
ALIGNMENT_CODES: Dict[Position, int] = {
    Position.BOTTOM: 2,
    Position.CENTER: 5,
    Position.TOP: 8,
}


def ass_color(rgb: str) -> str:
    """
    Encode an RGB hex color as an ASS color.

    ASS stores colors in blue-green-red byte order: "#FFD700" -> "&H00D7FF&".

    Args:
        rgb: Color as "#RRGGBB" or "RRGGBB"

    Returns:
        ASS color string "&HBBGGRR&"
    """
    value = rgb.lstrip("#")
    if len(value) != 6:
        raise ValueError(f"Expected #RRGGBB color, got '{rgb}'")
    int(value, 16)  # validate hex digits
    red, green, blue = value[0:2], value[2:4], value[4:6]
    return f"&H{blue}{green}{red}&".upper()


class Theme(BaseModel):
    """Named style definition (palette and outline/shadow treatment)."""

    font_family: str
    primary_color: str = Field(description="Base text color, #RRGGBB")
    active_color: str = Field(description="Highlighted word color, #RRGGBB")
    outline_color: str = Field(description="Outline color, #RRGGBB")
    shadow_color: str = Field(default="#000000", description="Shadow color, #RRGGBB")
    outline_width: int = Field(default=2, ge=0)
    shadow_depth: int = Field(default=3, ge=0)
    bold: bool = True


THEMES: Dict[str, Theme] = {
    "modern": Theme(
        font_family="Arial",
        primary_color="#FFFFFF",
        active_color="#FFD700",
        outline_color="#000000",
    ),
    "neon": Theme(
        font_family="Arial",
        primary_color="#FFFF00",
        active_color="#00FFFF",
        outline_color="#FF00FF",
    ),
    "fire": Theme(
        font_family="Arial",
        primary_color="#FF4500",
        active_color="#FFFFFF",
        outline_color="#FFD700",
    ),
    "elegant": Theme(
        font_family="Georgia",
        primary_color="#F5F5F5",
        active_color="#D4AF37",
        outline_color="#333333",
        shadow_color="#333333",
        outline_width=1,
        shadow_depth=1,
        bold=False,
    ),
}


class StyleProfile(BaseModel):
    """
    Resolved rendering parameters for one job.

    Colors are ASS-encoded ("&HBBGGRR&").
    """

    name: str
    font_family: str
    base_font_size: int = Field(gt=0)
    active_font_size: int = Field(gt=0)
    primary_color: str
    active_color: str
    outline_color: str
    shadow_color: str
    outline_width: int
    shadow_depth: int
    bold: bool
    alignment: int
    margin_left: int
    margin_right: int
    margin_vertical: int

    def to_force_style(self) -> str:
        """
        Render the profile as an ffmpeg subtitles-filter force_style value.

        Used when burning a plain SRT track, which carries no styling itself.
        """
        fields = [
            ("FontName", self.font_family),
            ("FontSize", self.base_font_size),
            ("PrimaryColour", self.primary_color),
            ("OutlineColour", self.outline_color),
            ("BackColour", self.shadow_color),
            ("Bold", -1 if self.bold else 0),
            ("Outline", self.outline_width),
            ("Shadow", self.shadow_depth),
            ("Alignment", self.alignment),
            ("MarginL", self.margin_left),
            ("MarginR", self.margin_right),
            ("MarginV", self.margin_vertical),
        ]
        return ",".join(f"{key}={value}" for key, value in fields)


def list_styles() -> List[str]:
    """Names of all known styles, default first."""
    return [DEFAULT_STYLE] + sorted(name for name in THEMES if name != DEFAULT_STYLE)


def resolve_position(position: str, frame_height: int) -> Tuple[int, int]:
    """
    Resolve a vertical position into an alignment code and vertical margin.

    Args:
        position: "top", "center" or "bottom" (unknown values mean bottom)
        frame_height: Frame height in pixels

    Returns:
        Tuple of (alignment_code, margin_vertical)
    """
    try:
        pos = Position(str(position).lower())
    except ValueError:
        logger.debug(f"Unknown subtitle position '{position}', using bottom")
        pos = Position.BOTTOM

    margin = 0 if pos == Position.CENTER else round(frame_height * VERTICAL_MARGIN_RATIO)
    return ALIGNMENT_CODES[pos], margin


def resolve_style(
    style_name: str,
    frame_width: int,
    frame_height: int,
    position: str = Position.BOTTOM.value,
) -> StyleProfile:
    """
    Resolve a style name and frame geometry into a StyleProfile.

    Unknown style names fall back to the default style; this never raises.

    Args:
        style_name: Theme name (modern, neon, fire, elegant)
        frame_width: Frame width in pixels
        frame_height: Frame height in pixels
        position: Vertical subtitle position

    Returns:
        StyleProfile with concrete sizes, colors and margins
    """
    name = (style_name or "").strip().lower()
    theme = THEMES.get(name)
    if theme is None:
        logger.debug(f"Unknown style '{style_name}', falling back to {DEFAULT_STYLE}")
        name = DEFAULT_STYLE
        theme = THEMES[DEFAULT_STYLE]

    base_size = max(1, round(frame_height / FONT_HEIGHT_DIVISOR))
    active_size = max(base_size, round(base_size * ACTIVE_FONT_SCALE))
    alignment, margin_v = resolve_position(position, frame_height)
    margin_h = round(frame_width * HORIZONTAL_MARGIN_RATIO)

    return StyleProfile(
        name=name,
        font_family=theme.font_family,
        base_font_size=base_size,
        active_font_size=active_size,
        primary_color=ass_color(theme.primary_color),
        active_color=ass_color(theme.active_color),
        outline_color=ass_color(theme.outline_color),
        shadow_color=ass_color(theme.shadow_color),
        outline_width=theme.outline_width,
        shadow_depth=theme.shadow_depth,
        bold=theme.bold,
        alignment=alignment,
        margin_left=margin_h,
        margin_right=margin_h,
        margin_vertical=margin_v,
    )
