"""
Styles Router - List available subtitle themes.
"""

from typing import List

from fastapi import APIRouter

from api.models.responses import StyleInfo
from burner.styles import DEFAULT_STYLE, THEMES, list_styles

router = APIRouter(prefix="/api")


@router.get("/styles", summary="List all styles", response_model=List[StyleInfo])
async def get_styles() -> List[StyleInfo]:
    """
    List the named themes a job can request.

    Unknown style names fall back to the default style.
    """
    return [
        StyleInfo(
            name=name,
            font_family=THEMES[name].font_family,
            primary_color=THEMES[name].primary_color,
            active_color=THEMES[name].active_color,
            outline_color=THEMES[name].outline_color,
            default=name == DEFAULT_STYLE,
        )
        for name in list_styles()
    ]
