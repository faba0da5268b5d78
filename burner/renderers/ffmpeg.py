"""
FFmpeg Renderer

Burns subtitles into video by running ffmpeg as a subprocess. Video is
re-encoded with the subtitle filter applied; audio is copied unchanged.
Progress is read from ffmpeg's machine-readable -progress stream.
"""

import asyncio
import json
import logging
from collections import deque
from pathlib import Path
from typing import List, Optional

from burner.errors import RenderError
from burner.renderers.base import MediaInfo, ProgressCallback, Renderer
from burner.styles import StyleProfile

logger = logging.getLogger(__name__)

STDERR_TAIL_LINES = 20


def escape_filter_value(value: str) -> str:
    """
    Escape a value for use inside an ffmpeg filtergraph option.

    Backslashes become forward slashes (Windows paths); the characters
    that separate options, filters and chains are backslash-escaped.
    """
    value = value.replace("\\", "/")
    for char in ("'", ":", ",", ";", "[", "]"):
        value = value.replace(char, "\\" + char)
    return value


def build_filter(subtitle: Path, profile: StyleProfile, styled: bool) -> str:
    """
    Build the video filter that draws the subtitle asset.

    Styled ASS tracks carry their own styles; plain SRT tracks get the
    resolved profile through force_style.
    """
    path = escape_filter_value(str(subtitle))
    if styled:
        return f"ass={path}"
    return f"subtitles={path}:force_style='{profile.to_force_style()}'"


def parse_progress_line(line: str, duration: Optional[float]) -> Optional[float]:
    """
    Translate one -progress key=value line into a completion fraction.

    Args:
        line: Line from ffmpeg's progress stream
        duration: Source duration in seconds (None if unknown)

    Returns:
        Fraction in [0, 1], or None if the line carries no progress
    """
    key, sep, value = line.strip().partition("=")
    if not sep:
        return None

    if key == "progress" and value == "end":
        return 1.0

    # out_time_ms is reported in microseconds, same as out_time_us
    if key in ("out_time_us", "out_time_ms") and duration:
        try:
            out_time = int(value) / 1_000_000
        except ValueError:
            return None
        return max(0.0, min(1.0, out_time / duration))

    return None


class FFmpegRenderer(Renderer):
    """
    Renderer backed by the ffmpeg/ffprobe command line tools.
    """

    def __init__(
        self,
        ffmpeg_binary: str = "ffmpeg",
        ffprobe_binary: str = "ffprobe",
        video_codec: str = "libx264",
        crf: int = 20,
    ):
        self.ffmpeg_binary = ffmpeg_binary
        self.ffprobe_binary = ffprobe_binary
        self.video_codec = video_codec
        self.crf = crf

    @classmethod
    def from_settings(cls, settings) -> "FFmpegRenderer":
        return cls(
            ffmpeg_binary=settings.ffmpeg_binary,
            ffprobe_binary=settings.ffprobe_binary,
            video_codec=settings.video_codec,
            crf=settings.crf,
        )

    def build_command(self, source: Path, video_filter: str, output: Path) -> List[str]:
        return [
            self.ffmpeg_binary,
            "-y",
            "-hide_banner",
            "-nostats",
            "-loglevel", "error",
            "-progress", "pipe:1",
            "-i", str(source),
            "-vf", video_filter,
            "-c:v", self.video_codec,
            "-crf", str(self.crf),
            "-c:a", "copy",
            str(output),
        ]

    async def _spawn(self, cmd: List[str]) -> asyncio.subprocess.Process:
        try:
            return await asyncio.create_subprocess_exec(
                *cmd,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
            )
        except FileNotFoundError as e:
            raise RenderError(f"Renderer executable not found: {cmd[0]}") from e

    async def probe(self, source: Path) -> MediaInfo:
        cmd = [
            self.ffprobe_binary,
            "-v", "error",
            "-select_streams", "v:0",
            "-show_entries", "stream=width,height:format=duration",
            "-of", "json",
            str(source),
        ]
        proc = await self._spawn(cmd)
        stdout, stderr = await proc.communicate()
        if proc.returncode != 0:
            tail = stderr.decode(errors="ignore").strip()
            raise RenderError(f"ffprobe failed for {source.name}: {tail}", proc.returncode, tail)

        try:
            data = json.loads(stdout.decode(errors="ignore") or "{}")
            stream = data["streams"][0]
            duration = data.get("format", {}).get("duration")
            return MediaInfo(
                width=int(stream["width"]),
                height=int(stream["height"]),
                duration=float(duration) if duration not in (None, "N/A") else None,
            )
        except (ValueError, KeyError, IndexError, TypeError) as e:
            raise RenderError(f"ffprobe returned no video stream for {source.name}") from e

    async def render(
        self,
        source: Path,
        subtitle: Path,
        output: Path,
        profile: StyleProfile,
        styled: bool,
        on_progress: Optional[ProgressCallback] = None,
    ) -> None:
        try:
            duration = (await self.probe(source)).duration
        except RenderError as e:
            logger.warning(f"Could not probe duration, progress will be coarse: {e.message}")
            duration = None

        cmd = self.build_command(source, build_filter(subtitle, profile, styled), output)
        logger.info(f"FFmpeg command: {' '.join(cmd)}")

        proc = await self._spawn(cmd)
        stderr_tail: deque = deque(maxlen=STDERR_TAIL_LINES)

        async def drain_stderr():
            async for raw in proc.stderr:
                line = raw.decode(errors="ignore").rstrip()
                if line:
                    stderr_tail.append(line)

        stderr_task = asyncio.create_task(drain_stderr())
        try:
            async for raw in proc.stdout:
                fraction = parse_progress_line(raw.decode(errors="ignore"), duration)
                if fraction is not None and on_progress is not None:
                    on_progress(fraction)
            returncode = await proc.wait()
            await stderr_task
        except asyncio.CancelledError:
            # Timeout or shutdown: do not leave an orphaned encoder behind
            if proc.returncode is None:
                proc.kill()
                await proc.wait()
            stderr_task.cancel()
            raise

        if returncode != 0:
            tail = " | ".join(stderr_tail)
            raise RenderError(f"FFmpeg exited with code {returncode}: {tail}", returncode, tail)

        logger.info(f"FFmpeg finished: {output.name}")
