"""
External renderer implementations and interfaces.
"""

from burner.renderers.base import MediaInfo, ProgressCallback, Renderer
from burner.renderers.ffmpeg import FFmpegRenderer

__all__ = [
    "MediaInfo",
    "ProgressCallback",
    "Renderer",
    "FFmpegRenderer",
]
