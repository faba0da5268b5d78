"""
Renderer Base Classes and Interfaces

Defines the interface of the external video renderer that burns a
subtitle asset into the source video.
"""

from abc import ABC, abstractmethod
from pathlib import Path
from typing import Callable, Optional, Tuple

from pydantic import BaseModel, Field

from burner.styles import StyleProfile

# Receives the renderer's completion fraction in [0, 1]
ProgressCallback = Callable[[float], None]


class MediaInfo(BaseModel):
    """Geometry and duration of a probed video."""

    width: int = Field(gt=0, description="Frame width in pixels")
    height: int = Field(gt=0, description="Frame height in pixels")
    duration: Optional[float] = Field(default=None, ge=0.0, description="Duration in seconds, if known")


class Renderer(ABC):
    """
    Abstract base class for subtitle renderers.

    The job pipeline only configures the renderer and listens to its
    progress; decoding, filtering and encoding stay inside the
    implementation.
    """

    @abstractmethod
    async def probe(self, source: Path) -> MediaInfo:
        """
        Inspect a downloaded source video.

        Raises:
            RenderError: If the source cannot be probed
        """

    @abstractmethod
    async def render(
        self,
        source: Path,
        subtitle: Path,
        output: Path,
        profile: StyleProfile,
        styled: bool,
        on_progress: Optional[ProgressCallback] = None,
    ) -> None:
        """
        Burn the subtitle asset into the source video.

        Args:
            source: Downloaded source video
            subtitle: Subtitle asset (.srt or .ass)
            output: Output video path
            profile: Resolved style (applied via force_style for plain tracks)
            styled: True when the asset is a styled ASS track
            on_progress: Called with completion fractions in [0, 1]

        Raises:
            RenderError: If the renderer fails
        """

    async def probe_frame_size(self, source: Path) -> Tuple[int, int]:
        info = await self.probe(source)
        return info.width, info.height
