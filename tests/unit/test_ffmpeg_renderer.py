"""
Unit tests for FFmpegRenderer

Command and filter construction, progress parsing, and subprocess handling
against small shell scripts standing in for ffmpeg/ffprobe.
"""

import asyncio
import stat
import sys
from pathlib import Path

import pytest

from burner.config import Settings
from burner.errors import RenderError
from burner.renderers import FFmpegRenderer
from burner.renderers.ffmpeg import build_filter, escape_filter_value, parse_progress_line
from burner.styles import resolve_style

posix_only = pytest.mark.skipif(sys.platform == "win32", reason="Requires a POSIX shell")

FAKE_FFPROBE = """#!/bin/sh
echo '{"streams": [{"width": 640, "height": 360}], "format": {"duration": "10.0"}}'
"""

FAKE_FFMPEG_OK = """#!/bin/sh
echo "frame=1"
echo "out_time_ms=5000000"
echo "progress=continue"
echo "out_time_ms=10000000"
echo "progress=end"
for last; do :; done
printf 'video' > "$last"
"""

FAKE_FFMPEG_FAIL = """#!/bin/sh
echo "Invalid data found when processing input" >&2
exit 1
"""


def write_script(path: Path, body: str) -> str:
    path.write_text(body)
    path.chmod(path.stat().st_mode | stat.S_IEXEC)
    return str(path)


@pytest.fixture
def profile():
    return resolve_style("modern", 1080, 1920)


class TestFilter:
    """Test suite for filtergraph construction"""

    def test_escape_filter_value(self):
        assert escape_filter_value("C:\\tmp\\a.ass") == "C\\:/tmp/a.ass"
        assert escape_filter_value("it's,[x]") == "it\\'s\\,\\[x\\]"

    def test_styled_track_uses_ass_filter(self, profile):
        assert build_filter(Path("temp/j_subtitles.ass"), profile, styled=True) == "ass=temp/j_subtitles.ass"

    def test_plain_track_uses_force_style(self, profile):
        video_filter = build_filter(Path("temp/j_subtitles.srt"), profile, styled=False)

        assert video_filter.startswith("subtitles=temp/j_subtitles.srt:force_style='")
        assert "FontName=Arial" in video_filter
        assert video_filter.endswith("'")


class TestProgressParsing:
    """Test suite for -progress stream parsing"""

    def test_out_time_fraction(self):
        assert parse_progress_line("out_time_ms=5000000\n", 10.0) == pytest.approx(0.5)

    def test_out_time_us(self):
        assert parse_progress_line("out_time_us=2500000", 10.0) == pytest.approx(0.25)

    def test_end_marker(self):
        assert parse_progress_line("progress=end", None) == 1.0

    def test_clamped(self):
        assert parse_progress_line("out_time_ms=20000000", 10.0) == 1.0
        assert parse_progress_line("out_time_ms=-5", 10.0) == 0.0

    @pytest.mark.parametrize("line,duration", [
        ("frame=12", 10.0),
        ("progress=continue", 10.0),
        ("out_time_ms=N/A", 10.0),
        ("out_time_ms=5000000", None),
        ("garbage", 10.0),
    ])
    def test_no_progress(self, line, duration):
        assert parse_progress_line(line, duration) is None


class TestCommand:
    """Test suite for command construction"""

    def test_build_command(self):
        renderer = FFmpegRenderer(video_codec="libx264", crf=20)
        cmd = renderer.build_command(Path("in.mp4"), "ass=sub.ass", Path("out.mp4"))

        assert cmd[0] == "ffmpeg"
        assert cmd[-1] == "out.mp4"
        assert cmd[cmd.index("-i") + 1] == "in.mp4"
        assert cmd[cmd.index("-vf") + 1] == "ass=sub.ass"
        assert cmd[cmd.index("-c:v") + 1] == "libx264"
        assert cmd[cmd.index("-crf") + 1] == "20"
        assert cmd[cmd.index("-c:a") + 1] == "copy"
        assert cmd[cmd.index("-progress") + 1] == "pipe:1"
        assert "-y" in cmd

    def test_from_settings(self):
        renderer = FFmpegRenderer.from_settings(Settings(ffmpeg_binary="/opt/ffmpeg", crf=18))

        assert renderer.ffmpeg_binary == "/opt/ffmpeg"
        assert renderer.crf == 18


class TestSubprocess:
    """Test suite for running the external tools"""

    def test_missing_executable(self, tmp_path, profile):
        renderer = FFmpegRenderer(
            ffmpeg_binary=str(tmp_path / "no-ffmpeg"),
            ffprobe_binary=str(tmp_path / "no-ffprobe"),
        )

        with pytest.raises(RenderError, match="executable not found"):
            asyncio.run(renderer.render(
                tmp_path / "in.mp4", tmp_path / "s.srt", tmp_path / "out.mp4", profile, styled=False
            ))

    @posix_only
    @pytest.mark.slow
    def test_probe(self, tmp_path):
        renderer = FFmpegRenderer(ffprobe_binary=write_script(tmp_path / "ffprobe", FAKE_FFPROBE))
        info = asyncio.run(renderer.probe(tmp_path / "in.mp4"))

        assert (info.width, info.height, info.duration) == (640, 360, 10.0)
        assert asyncio.run(renderer.probe_frame_size(tmp_path / "in.mp4")) == (640, 360)

    @posix_only
    @pytest.mark.slow
    def test_render_reports_progress(self, tmp_path, profile):
        renderer = FFmpegRenderer(
            ffmpeg_binary=write_script(tmp_path / "ffmpeg", FAKE_FFMPEG_OK),
            ffprobe_binary=write_script(tmp_path / "ffprobe", FAKE_FFPROBE),
        )
        fractions = []
        output = tmp_path / "out.mp4"

        asyncio.run(renderer.render(
            tmp_path / "in.mp4", tmp_path / "s.ass", output, profile, styled=True, on_progress=fractions.append
        ))

        assert fractions == [pytest.approx(0.5), 1.0, 1.0]
        assert output.read_text() == "video"

    @posix_only
    @pytest.mark.slow
    def test_render_failure_carries_stderr(self, tmp_path, profile):
        renderer = FFmpegRenderer(
            ffmpeg_binary=write_script(tmp_path / "ffmpeg", FAKE_FFMPEG_FAIL),
            ffprobe_binary=write_script(tmp_path / "ffprobe", FAKE_FFPROBE),
        )

        with pytest.raises(RenderError) as exc_info:
            asyncio.run(renderer.render(
                tmp_path / "in.mp4", tmp_path / "s.srt", tmp_path / "out.mp4", profile, styled=False
            ))

        assert exc_info.value.returncode == 1
        assert "Invalid data found" in exc_info.value.stderr_tail
        assert "exited with code 1" in exc_info.value.message
