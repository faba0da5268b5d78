"""
Shared test fixtures

In-process stand-ins for the fetcher and renderer so the job pipeline can
run without network access or ffmpeg.
"""

from pathlib import Path
from typing import List, Optional, Sequence

import pytest

from burner.config import Settings
from burner.errors import RenderError, SourceFetchError
from burner.jobs import JobRegistry
from burner.orchestrator import JobOrchestrator
from burner.renderers import MediaInfo, Renderer


class FakeFetcher:
    """Writes fixed bytes instead of downloading"""

    def __init__(self, payload: bytes = b"fake video", error: Optional[SourceFetchError] = None):
        self.payload = payload
        self.error = error
        self.calls: List[str] = []

    async def fetch(self, url: str, dest: Path) -> int:
        self.calls.append(url)
        if self.error is not None:
            raise self.error
        dest.write_bytes(self.payload)
        return len(self.payload)


class FakeRenderer(Renderer):
    """Reports scripted progress fractions and writes a dummy output file"""

    def __init__(
        self,
        fractions: Sequence[float] = (0.0, 0.5, 1.0),
        size=(1080, 1920),
        error: Optional[RenderError] = None,
        probe_error: Optional[RenderError] = None,
    ):
        self.fractions = list(fractions)
        self.size = size
        self.error = error
        self.probe_error = probe_error
        self.rendered: List[dict] = []
        self.progress_seen: List[int] = []

    async def probe(self, source: Path) -> MediaInfo:
        if self.probe_error is not None:
            raise self.probe_error
        return MediaInfo(width=self.size[0], height=self.size[1], duration=10.0)

    async def render(self, source, subtitle, output, profile, styled, on_progress=None) -> None:
        self.rendered.append({
            "source": source,
            "subtitle": subtitle,
            "subtitle_text": Path(subtitle).read_text(encoding="utf-8"),
            "output": output,
            "profile": profile,
            "styled": styled,
        })
        for fraction in self.fractions:
            if on_progress is not None:
                on_progress(fraction)
        if self.error is not None:
            raise self.error
        Path(output).write_bytes(b"rendered video")


@pytest.fixture
def settings(tmp_path):
    return Settings(
        temp_dir=tmp_path / "temp",
        output_dir=tmp_path / "output",
        cleanup_delay=0,
        fetch_timeout=5,
        render_timeout=5,
    )


@pytest.fixture
def fake_fetcher():
    return FakeFetcher()


@pytest.fixture
def fake_renderer():
    return FakeRenderer()


@pytest.fixture
def orchestrator(settings, fake_fetcher, fake_renderer):
    return JobOrchestrator(
        settings=settings,
        registry=JobRegistry(),
        fetcher=fake_fetcher,
        renderer=fake_renderer,
    )


@pytest.fixture
def sample_transcript():
    return [
        {"text": "hi", "start": 0.0, "end": 0.3},
        {"text": "there", "start": 0.3, "end": 0.6},
        {"text": "world", "start": 2.0, "end": 2.4},
    ]
