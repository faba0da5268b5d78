"""
Exception Taxonomy

Application-specific exceptions raised by the core library. The HTTP layer
maps them to responses in api.utils.errors; the job pipeline turns them into
failed job records.
"""

from typing import Optional


class BurnerError(Exception):
    """Base class for all subtitle burner errors"""

    def __init__(self, message: str, details: Optional[dict] = None):
        self.message = message
        self.details = details or {}
        super().__init__(self.message)


class JobValidationError(BurnerError):
    """Raised when a submission is rejected before a job record exists"""


class TransientIOError(BurnerError):
    """Raised when an external I/O step (fetch or render) fails"""


class SourceFetchError(TransientIOError):
    """Raised when the source video cannot be downloaded"""

    def __init__(self, message: str, url: Optional[str] = None, status_code: Optional[int] = None):
        details = {"url": url}
        if status_code is not None:
            details["status_code"] = status_code
        self.url = url
        self.status_code = status_code
        super().__init__(message, details)


class RenderError(TransientIOError):
    """Raised when the external renderer exits with an error"""

    def __init__(self, message: str, returncode: Optional[int] = None, stderr_tail: str = ""):
        self.returncode = returncode
        self.stderr_tail = stderr_tail
        super().__init__(message, {"returncode": returncode, "stderr": stderr_tail})


class InternalError(BurnerError):
    """Raised for unexpected failures while building the subtitle asset"""


class JobNotFoundError(BurnerError):
    """Raised when a job id is unknown (never created or already reaped)"""

    def __init__(self, job_id: str):
        self.job_id = job_id
        super().__init__(f"Job {job_id} not found", {"job_id": job_id})


class JobNotReadyError(BurnerError):
    """Raised when a result is requested for a job that has not completed"""

    def __init__(self, job_id: str, state: str):
        self.job_id = job_id
        self.state = state
        super().__init__(
            f"Job {job_id} is not completed (state: {state})",
            {"job_id": job_id, "state": state},
        )


class InvalidTransitionError(BurnerError):
    """Raised when a job is asked to leave a terminal state"""

    def __init__(self, job_id: str, current: str, target: str):
        super().__init__(
            f"Job {job_id} cannot transition from {current} to {target}",
            {"job_id": job_id, "current": current, "target": target},
        )
