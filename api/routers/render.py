"""
Subtitle Burn API Router

Accepts burn jobs and exposes their status and rendered result.
"""

import logging

from fastapi import APIRouter, Depends, HTTPException, status
from fastapi.responses import FileResponse

from api.models.requests import RenderRequest
from api.models.responses import JobList, JobStatusResponse, JobSubmitted, JobSummary
from burner.orchestrator import JobOrchestrator, get_orchestrator

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api")


@router.post("/burn-subtitles", response_model=JobSubmitted, tags=["Jobs"])
async def submit_burn_job(
    request: RenderRequest,
    orchestrator: JobOrchestrator = Depends(get_orchestrator),
):
    """
    Submit a subtitle burn job.

    Returns immediately with a job_id that can be polled for status.

    **Response**:
    ```json
    {
        "job_id": "3f8c2a4e-...",
        "status": "pending",
        "message": "Video processing started"
    }
    ```
    """
    job_id = orchestrator.submit(request.transcript, request.to_options())
    job = orchestrator.get_job(job_id)

    return JobSubmitted(job_id=job.id, status=job.state)


@router.get("/task/{job_id}", response_model=JobStatusResponse, response_model_exclude_none=True, tags=["Jobs"])
async def get_job_status(
    job_id: str,
    orchestrator: JobOrchestrator = Depends(get_orchestrator),
):
    """
    Get the status of a burn job.

    **Response (failed)**:
    ```json
    {
        "job_id": "3f8c2a4e-...",
        "status": "failed",
        "progress": 10,
        "error": "Failed to download video: 404 Not Found"
    }
    ```
    """
    return JobStatusResponse(**orchestrator.get_status(job_id))


@router.get("/download/{job_id}", tags=["Jobs"])
async def download_result(
    job_id: str,
    orchestrator: JobOrchestrator = Depends(get_orchestrator),
):
    """
    Download the rendered video of a completed job.

    Unknown jobs return 404, jobs that have not completed return 409.
    """
    path = orchestrator.get_result(job_id)
    if not path.exists():
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail={"error": "file_not_found", "message": f"Video file for job {job_id} not found"},
        )

    job = orchestrator.get_job(job_id)
    logger.info(f"Serving result of job {job_id} as {job.filename}")
    return FileResponse(path, media_type="video/mp4", filename=job.filename)


@router.get("/jobs", response_model=JobList, tags=["Jobs"])
async def list_jobs(orchestrator: JobOrchestrator = Depends(get_orchestrator)):
    """
    List all known jobs (for debugging).
    """
    return JobList(jobs=[JobSummary.from_job(job) for job in orchestrator.list_jobs()])
