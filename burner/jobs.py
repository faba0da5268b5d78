"""
In-memory Job Registry

Job records, the per-job state machine with monotonic progress, and the
thread-safe registry shared by submission, status polling and the janitor.
"""

import logging
import re
import threading
import uuid
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from pathlib import Path
from typing import Dict, Iterator, List, Optional, Tuple

from burner.errors import InvalidTransitionError

logger = logging.getLogger(__name__)


class JobState(str, Enum):
    """Job states; completed and failed are terminal"""

    PENDING = "pending"
    DOWNLOADING = "downloading"
    PREPARING = "preparing"
    PROCESSING = "processing"
    COMPLETED = "completed"
    FAILED = "failed"

    @property
    def is_terminal(self) -> bool:
        return self in (JobState.COMPLETED, JobState.FAILED)


# Progress floor applied on entering each state
STATE_PROGRESS: Dict[JobState, int] = {
    JobState.PENDING: 0,
    JobState.DOWNLOADING: 10,
    JobState.PREPARING: 30,
    JobState.PROCESSING: 40,
    JobState.COMPLETED: 100,
}

# Renderer completion fraction is mapped into this progress range
RENDER_PROGRESS_RANGE: Tuple[int, int] = (40, 90)

# Highest progress a non-completed job may report
MAX_INCOMPLETE_PROGRESS = 99

_STAGE_ORDER = [
    JobState.PENDING,
    JobState.DOWNLOADING,
    JobState.PREPARING,
    JobState.PROCESSING,
    JobState.COMPLETED,
]


def download_filename(title: str) -> str:
    """Build the download filename for a job title."""
    safe = re.sub(r"[^a-zA-Z0-9]", "_", title or "") or "video"
    return f"{safe}_with_subtitles.mp4"


@dataclass
class Job:
    """Represents a subtitle burn job"""

    id: str
    title: str = "video"
    state: JobState = JobState.PENDING
    progress: int = 0  # 0-100
    created_at: datetime = field(default_factory=datetime.now)
    completed_at: Optional[datetime] = None
    failed_at: Optional[datetime] = None
    error: Optional[str] = None
    output_path: Optional[Path] = None
    # Temporary inputs removed after the job finishes
    temp_paths: List[Path] = field(default_factory=list)

    @property
    def filename(self) -> str:
        return download_filename(self.title)

    def advance(self, state: JobState) -> None:
        """
        Move to the next pipeline stage and apply its progress floor.

        Stages only move forward; completed requires an output path.
        """
        if self.state.is_terminal:
            raise InvalidTransitionError(self.id, self.state.value, state.value)
        if state == JobState.FAILED or _STAGE_ORDER.index(state) <= _STAGE_ORDER.index(self.state):
            raise InvalidTransitionError(self.id, self.state.value, state.value)
        if state == JobState.COMPLETED and self.output_path is None:
            raise InvalidTransitionError(self.id, self.state.value, state.value)

        self.state = state
        if state == JobState.COMPLETED:
            self.progress = 100
            self.completed_at = datetime.now()
        else:
            self._raise_progress(STATE_PROGRESS[state])

    def complete(self, output_path: Path) -> None:
        self.output_path = output_path
        self.advance(JobState.COMPLETED)

    def fail(self, message: str) -> None:
        """Enter the failed state; progress is frozen where it was."""
        if self.state.is_terminal:
            raise InvalidTransitionError(self.id, self.state.value, JobState.FAILED.value)
        self.state = JobState.FAILED
        self.error = message or "Unknown error"
        self.failed_at = datetime.now()

    def report_progress(self, percent: float) -> bool:
        """
        Apply a progress report through the monotonic clamp.

        Returns:
            True if the reported value was accepted
        """
        if self.state.is_terminal:
            return False
        return self._raise_progress(int(percent))

    def report_render_fraction(self, fraction: float) -> bool:
        """Map a renderer completion fraction into the processing range."""
        low, high = RENDER_PROGRESS_RANGE
        fraction = max(0.0, min(1.0, fraction))
        return self.report_progress(round(low + (high - low) * fraction))

    def _raise_progress(self, value: int) -> bool:
        value = min(value, MAX_INCOMPLETE_PROGRESS)
        if value <= self.progress:
            return False
        self.progress = value
        return True

    def to_status(self) -> dict:
        status = {
            "job_id": self.id,
            "status": self.state.value,
            "progress": self.progress,
        }
        if self.error is not None:
            status["error"] = self.error
        return status


class JobRegistry:
    """
    Thread-safe id -> Job store.

    Exposes only get/set/delete/iterate; iteration works on a snapshot so
    the janitor can delete while status polls continue.
    """

    def __init__(self):
        self._jobs: Dict[str, Job] = {}
        self._lock = threading.Lock()

    def create(self, title: str = "video") -> Job:
        """Create and store a new pending job"""
        with self._lock:
            job_id = str(uuid.uuid4())
            while job_id in self._jobs:
                job_id = str(uuid.uuid4())
            job = Job(id=job_id, title=title)
            self._jobs[job_id] = job
        logger.info(f"Created job {job_id}")
        return job

    def get(self, job_id: str) -> Optional[Job]:
        with self._lock:
            return self._jobs.get(job_id)

    def set(self, job: Job) -> None:
        with self._lock:
            self._jobs[job.id] = job

    def delete(self, job_id: str) -> Optional[Job]:
        with self._lock:
            return self._jobs.pop(job_id, None)

    def items(self) -> Iterator[Tuple[str, Job]]:
        with self._lock:
            snapshot = list(self._jobs.items())
        return iter(snapshot)

    def __len__(self) -> int:
        with self._lock:
            return len(self._jobs)

    def __contains__(self, job_id: str) -> bool:
        with self._lock:
            return job_id in self._jobs
