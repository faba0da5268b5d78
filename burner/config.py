"""
Service Configuration

Runtime settings for the job pipeline, read from BURNER_* environment
variables with sensible defaults for local development.
"""

import os
from pathlib import Path
from typing import Optional

from pydantic import BaseModel, Field

ENV_PREFIX = "BURNER_"


class Settings(BaseModel):
    """Job pipeline and renderer configuration."""

    temp_dir: Path = Field(default=Path("temp"), description="Directory for downloaded sources and subtitle assets")
    output_dir: Path = Field(default=Path("output"), description="Directory for rendered videos")

    # Janitor
    janitor_interval: float = Field(default=3600.0, gt=0, description="Seconds between janitor sweeps")
    job_retention: float = Field(default=3600.0, gt=0, description="Seconds a job record is kept after creation")

    # I/O bounds (0 disables the bound)
    fetch_timeout: float = Field(default=300.0, ge=0, description="Source download timeout in seconds")
    render_timeout: float = Field(default=3600.0, ge=0, description="Render timeout in seconds")
    cleanup_delay: float = Field(default=1.0, ge=0, description="Delay before temporary inputs are removed")

    # Renderer
    ffmpeg_binary: str = Field(default="ffmpeg", description="ffmpeg executable")
    ffprobe_binary: str = Field(default="ffprobe", description="ffprobe executable")
    video_codec: str = Field(default="libx264", description="Output video codec")
    crf: int = Field(default=20, ge=0, le=51, description="Constant rate factor for the video encoder")

    # Logging
    log_level: str = Field(default="INFO", description="Root log level")
    log_json: bool = Field(default=False, description="Emit JSON formatted logs")

    @classmethod
    def from_env(cls, environ: Optional[dict] = None) -> "Settings":
        """
        Build settings from environment variables.

        Every field can be overridden with BURNER_<FIELD_NAME>, e.g.
        BURNER_JOB_RETENTION=600.

        Args:
            environ: Mapping to read from (defaults to os.environ)

        Returns:
            Validated Settings instance
        """
        environ = os.environ if environ is None else environ
        values = {}
        for name in cls.model_fields:
            raw = environ.get(ENV_PREFIX + name.upper())
            if raw is not None and raw != "":
                values[name] = raw
        return cls(**values)

    def ensure_dirs(self) -> None:
        """Create working directories if they are missing."""
        self.temp_dir.mkdir(parents=True, exist_ok=True)
        self.output_dir.mkdir(parents=True, exist_ok=True)

    def timeout_or_none(self, value: float) -> Optional[float]:
        """Translate the 0-means-unbounded convention into asyncio/httpx terms."""
        return value if value > 0 else None


_settings: Optional[Settings] = None


def get_settings() -> Settings:
    """Get global settings instance"""
    global _settings
    if _settings is None:
        _settings = Settings.from_env()
    return _settings
