"""
Job Orchestrator

Runs each subtitle burn job through its stages:

    pending -> downloading -> preparing -> processing -> completed

Any stage may end in failed instead. Jobs run as independent asyncio
tasks; stages inside a job are strictly sequential. The first failure is
terminal for that job only.
"""

import asyncio
import logging
from pathlib import Path
from typing import Any, Awaitable, Callable, Dict, List, Mapping, Optional, Sequence, Set, Tuple, Union

from pydantic import ValidationError

from burner.config import Settings, get_settings
from burner.errors import (
    BurnerError,
    InternalError,
    JobNotFoundError,
    JobNotReadyError,
    JobValidationError,
    RenderError,
    SourceFetchError,
)
from burner.fetcher import SourceFetcher
from burner.jobs import Job, JobRegistry, JobState
from burner.options import RenderOptions
from burner.renderers import FFmpegRenderer, Renderer
from burner.subtitles import SubtitleAsset, build_subtitle_asset
from burner.transcript import Word, normalize_words

logger = logging.getLogger(__name__)

# Used when the caller gives no geometry and the source cannot be probed
DEFAULT_FRAME_SIZE: Tuple[int, int] = (1080, 1920)


class JobOrchestrator:
    """
    Owns the job registry and drives job pipelines.

    The fetcher and renderer are injected collaborators; tests replace
    them with fakes.
    """

    def __init__(
        self,
        settings: Optional[Settings] = None,
        registry: Optional[JobRegistry] = None,
        fetcher: Optional[SourceFetcher] = None,
        renderer: Optional[Renderer] = None,
    ):
        self.settings = settings or get_settings()
        self.registry = registry or JobRegistry()
        self.fetcher = fetcher or SourceFetcher(
            timeout=self.settings.timeout_or_none(self.settings.fetch_timeout)
        )
        self.renderer = renderer or FFmpegRenderer.from_settings(self.settings)
        self._tasks: Dict[str, asyncio.Task] = {}
        self._cleanup_tasks: Set[asyncio.Task] = set()

    # Submission

    def validate(
        self, transcript: Any, options: Union[RenderOptions, Mapping[str, Any]]
    ) -> Tuple[List[Word], RenderOptions]:
        """
        Validate a submission without creating a job.

        Raises:
            JobValidationError: Missing/malformed transcript or options
        """
        if not isinstance(options, RenderOptions):
            try:
                options = RenderOptions(**dict(options or {}))
            except ValidationError as e:
                raise JobValidationError(
                    "Invalid job options",
                    {"errors": [
                        {"field": ".".join(str(p) for p in err["loc"]), "message": err["msg"]}
                        for err in e.errors()
                    ]},
                ) from e

        if not isinstance(transcript, (list, tuple)) or not transcript:
            raise JobValidationError("Missing required field: transcript (non-empty list of words)")

        words = normalize_words(transcript)
        if not words:
            raise JobValidationError("Transcript contains no valid words")

        return words, options

    def submit(self, transcript: Any, options: Union[RenderOptions, Mapping[str, Any]]) -> str:
        """
        Validate a submission, create its job and start the pipeline.

        Must be called from a running event loop.

        Args:
            transcript: Raw word list (or segment list with nested words)
            options: RenderOptions or a mapping of its fields

        Returns:
            The new job id

        Raises:
            JobValidationError: Rejected before any job record exists
        """
        words, options = self.validate(transcript, options)
        loop = asyncio.get_running_loop()

        job = self.registry.create(title=options.title)
        task = loop.create_task(self._run(job, words, options), name=f"job-{job.id}")
        self._tasks[job.id] = task
        task.add_done_callback(lambda _t, job_id=job.id: self._tasks.pop(job_id, None))

        logger.info(
            f"Submitted job {job.id} for {options.title}",
            extra={"metadata": {"job_id": job.id, "words": len(words), "mode": options.mode.value}},
        )
        return job.id

    # Queries

    def get_job(self, job_id: str) -> Job:
        job = self.registry.get(job_id)
        if job is None:
            raise JobNotFoundError(job_id)
        return job

    def get_status(self, job_id: str) -> dict:
        """Status snapshot: job_id, status, progress and error if failed."""
        return self.get_job(job_id).to_status()

    def get_result(self, job_id: str) -> Path:
        """
        Path of the rendered video.

        Raises:
            JobNotFoundError: Unknown job
            JobNotReadyError: Job has not completed
        """
        job = self.get_job(job_id)
        if job.state != JobState.COMPLETED or job.output_path is None:
            raise JobNotReadyError(job_id, job.state.value)
        return job.output_path

    def list_jobs(self) -> List[Job]:
        return [job for _, job in self.registry.items()]

    async def wait(self, job_id: str) -> Job:
        """Wait for a job's pipeline to finish and return its record."""
        task = self._tasks.get(job_id)
        if task is not None:
            await asyncio.gather(task, return_exceptions=True)
        return self.get_job(job_id)

    async def shutdown(self) -> None:
        """Cancel in-flight pipelines, then let pending cleanups finish."""
        tasks = list(self._tasks.values())
        for task in tasks:
            task.cancel()
        if tasks:
            await asyncio.gather(*tasks, return_exceptions=True)
        # Includes the cleanups scheduled by the pipelines just cancelled
        if self._cleanup_tasks:
            await asyncio.gather(*list(self._cleanup_tasks), return_exceptions=True)
        logger.info(f"Orchestrator shut down ({len(tasks)} tasks cancelled)")

    # Pipeline

    async def _run(self, job: Job, words: Sequence[Word], options: RenderOptions) -> None:
        source = self.settings.temp_dir / f"{job.id}_input.mp4"
        output = self.settings.output_dir / f"{job.id}_output.mp4"
        job.temp_paths.append(source)

        try:
            self.settings.ensure_dirs()

            job.advance(JobState.DOWNLOADING)
            logger.info(f"Downloading video for job {job.id}")
            await self._bounded(
                self.fetcher.fetch(options.source_url, source),
                self.settings.fetch_timeout,
                lambda: SourceFetchError(
                    f"Failed to download video: timed out after {self.settings.fetch_timeout:g}s",
                    url=options.source_url,
                ),
            )

            job.advance(JobState.PREPARING)
            logger.info(f"Creating subtitle asset for job {job.id}")
            width, height = await self._frame_size(source, options)
            asset = self._prepare(words, options, width, height)
            subtitle = self.settings.temp_dir / f"{job.id}_subtitles{asset.extension}"
            job.temp_paths.append(subtitle)
            subtitle.write_text(asset.content, encoding="utf-8")

            job.advance(JobState.PROCESSING)
            logger.info(f"Rendering video for job {job.id}")
            await self._bounded(
                self.renderer.render(
                    source,
                    subtitle,
                    output,
                    asset.profile,
                    asset.is_styled,
                    on_progress=lambda fraction: self._on_render_progress(job, fraction),
                ),
                self.settings.render_timeout,
                lambda: RenderError(f"Render timed out after {self.settings.render_timeout:g}s"),
            )

            job.complete(output)
            logger.info(f"Job {job.id} finished successfully")

        except BurnerError as e:
            self._fail(job, e.message, output)
        except asyncio.CancelledError:
            self._fail(job, "Job cancelled by service shutdown", output)
            raise
        except Exception as e:
            logger.error(f"Job {job.id} failed unexpectedly: {e}", exc_info=True)
            self._fail(job, str(e) or type(e).__name__, output)
        finally:
            if self.registry.get(job.id) is not job:
                # Record was reaped mid-run; nothing can serve or delete the output now
                job.temp_paths.append(output)
            self._schedule_cleanup(job)

    async def _bounded(
        self,
        awaitable: Awaitable,
        timeout: float,
        on_timeout: Callable[[], BurnerError],
    ):
        if not timeout:
            return await awaitable
        try:
            return await asyncio.wait_for(awaitable, timeout)
        except asyncio.TimeoutError:
            raise on_timeout() from None

    async def _frame_size(self, source: Path, options: RenderOptions) -> Tuple[int, int]:
        if options.frame_width and options.frame_height:
            return options.frame_width, options.frame_height
        try:
            return await self.renderer.probe_frame_size(source)
        except RenderError as e:
            logger.warning(
                f"Could not probe frame size, using {DEFAULT_FRAME_SIZE[0]}x{DEFAULT_FRAME_SIZE[1]}: {e.message}"
            )
            return DEFAULT_FRAME_SIZE

    def _prepare(self, words: Sequence[Word], options: RenderOptions, width: int, height: int) -> SubtitleAsset:
        try:
            return build_subtitle_asset(words, options, width, height)
        except BurnerError:
            raise
        except Exception as e:
            raise InternalError(f"Failed to build subtitle asset: {e}") from e

    def _on_render_progress(self, job: Job, fraction: float) -> None:
        if job.report_render_fraction(fraction):
            logger.debug(f"Job {job.id} progress: {job.progress}%")

    def _fail(self, job: Job, message: str, output: Path) -> None:
        if job.state.is_terminal:
            return
        job.fail(message)
        # A failed job never exposes a partial artifact
        job.temp_paths.append(output)
        logger.error(
            f"Job {job.id} failed: {message}",
            extra={"metadata": {"job_id": job.id, "progress": job.progress}},
        )

    def _schedule_cleanup(self, job: Job) -> None:
        paths = list(job.temp_paths)
        job.temp_paths.clear()
        task = asyncio.get_running_loop().create_task(self._cleanup_later(job.id, paths))
        self._cleanup_tasks.add(task)
        task.add_done_callback(self._cleanup_tasks.discard)

    async def _cleanup_later(self, job_id: str, paths: List[Path]) -> None:
        await asyncio.sleep(self.settings.cleanup_delay)
        for path in paths:
            try:
                path.unlink(missing_ok=True)
                logger.debug(f"Cleaned up temporary file: {path}")
            except OSError as e:
                logger.warning(f"Failed to cleanup temporary file {path} for job {job_id}: {e}")


# Global orchestrator instance
_orchestrator: Optional[JobOrchestrator] = None


def get_orchestrator() -> JobOrchestrator:
    """Get global orchestrator instance"""
    global _orchestrator
    if _orchestrator is None:
        _orchestrator = JobOrchestrator()
    return _orchestrator
