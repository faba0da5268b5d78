"""
API Response Models

Pydantic models for job submission, job status and style listings.
"""

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field

from burner.jobs import Job, JobState


class JobSubmitted(BaseModel):
    """Acknowledgement returned when a job is accepted"""

    job_id: str = Field(description="Opaque job identifier")
    status: JobState = Field(description="Initial job state")
    message: str = Field(default="Video processing started")

    model_config = {
        "json_schema_extra": {
            "example": {
                "job_id": "3f8c2a4e-6a1b-4c1e-9d7e-2b9f0c6e1a11",
                "status": "pending",
                "message": "Video processing started",
            }
        }
    }


class JobStatusResponse(BaseModel):
    """
    Job status snapshot.

    Progress never decreases and only reaches 100 once the job completed.
    """

    job_id: str = Field(description="Job identifier")
    status: JobState = Field(description="Current job state")
    progress: int = Field(ge=0, le=100, description="Progress percentage")
    error: Optional[str] = Field(default=None, description="Failure message (failed jobs only)")

    model_config = {
        "json_schema_extra": {
            "example": {
                "job_id": "3f8c2a4e-6a1b-4c1e-9d7e-2b9f0c6e1a11",
                "status": "processing",
                "progress": 65,
            }
        }
    }


class JobSummary(JobStatusResponse):
    """Job listing entry"""

    title: str = Field(description="Job title")
    filename: str = Field(description="Download filename")
    created_at: datetime = Field(description="Creation time")
    completed_at: Optional[datetime] = Field(default=None, description="Completion time")
    failed_at: Optional[datetime] = Field(default=None, description="Failure time")

    @classmethod
    def from_job(cls, job: Job) -> "JobSummary":
        return cls(
            job_id=job.id,
            status=job.state,
            progress=job.progress,
            error=job.error,
            title=job.title,
            filename=job.filename,
            created_at=job.created_at,
            completed_at=job.completed_at,
            failed_at=job.failed_at,
        )


class JobList(BaseModel):
    jobs: List[JobSummary] = Field(default_factory=list)


class StyleInfo(BaseModel):
    """Named theme available to jobs"""

    name: str = Field(description="Style name")
    font_family: str = Field(description="Font family")
    primary_color: str = Field(description="Text color (#RRGGBB)")
    active_color: str = Field(description="Highlight color (#RRGGBB)")
    outline_color: str = Field(description="Outline color (#RRGGBB)")
    default: bool = Field(default=False, description="Whether this is the fallback style")
