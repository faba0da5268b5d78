"""
Subtitle track formatters.
"""

from burner.formatters.srt import SRTFormatter, format_srt_timestamp
from burner.formatters.ass import (
    AssDocument,
    AssEvent,
    AssFormatter,
    AssStyle,
    KaraokeMode,
    ScriptInfo,
    format_ass_timestamp,
)

__all__ = [
    "SRTFormatter",
    "format_srt_timestamp",
    "AssDocument",
    "AssEvent",
    "AssFormatter",
    "AssStyle",
    "KaraokeMode",
    "ScriptInfo",
    "format_ass_timestamp",
]
