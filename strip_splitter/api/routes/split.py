from fastapi import APIRouter, HTTPException, status
from rq import Queue
import redis

from strip_splitter.config import settings
from strip_splitter.schemas.job import JobStatusResponse, SplitRequest, SplitSubmitResponse
from strip_splitter.schemas.split import ProcessSettings
from strip_splitter.services.job_service import get_job_service
from strip_splitter.worker.run_worker import QUEUE_NAME
from strip_splitter.worker.tasks import process_split_job

router = APIRouter(prefix="/split", tags=["Split"])


def get_queue() -> Queue:
    """Get RQ queue for job submission."""
    redis_client = redis.Redis.from_url(settings.redis_url)
    return Queue(QUEUE_NAME, connection=redis_client)


def resolve_settings(request: SplitRequest) -> ProcessSettings:
    """Fill the fields a request left out from the configured defaults."""
    defaults = settings.splitting
    return ProcessSettings(
        split_height=request.split_height or defaults.split_height,
        sensitivity=request.sensitivity if request.sensitivity is not None else defaults.sensitivity,
        scan_line_step=request.scan_line_step if request.scan_line_step is not None else defaults.scan_line_step,
        ignorable_border=(
            request.ignorable_border if request.ignorable_border is not None else defaults.ignorable_border
        ),
    )


@router.post(
    "",
    response_model=SplitSubmitResponse,
    status_code=status.HTTP_202_ACCEPTED,
)
async def submit_split(request: SplitRequest):
    """
    Submit a folder of images for splitting.

    The folder is processed asynchronously. Use the returned jobId to
    poll for progress and results or provide a webhookUrl for notification.
    """
    if not request.input_folder.strip():
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Input folder cannot be empty",
        )
    if not request.output_folder.strip():
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Output folder cannot be empty",
        )

    process_settings = resolve_settings(request)

    job_service = get_job_service()
    job = job_service.create_job(
        input_folder=request.input_folder,
        output_folder=request.output_folder,
        webhook_url=request.webhook_url,
    )

    queue = get_queue()
    queue.enqueue(
        process_split_job,
        job.id,
        request.input_folder,
        request.output_folder,
        process_settings.model_dump(),
        job_timeout=settings.job_timeout,
    )

    return SplitSubmitResponse(
        job_id=job.id,
        message=f"Folder submitted for splitting at {process_settings.split_height}px",
    )


@router.get(
    "/{job_id}",
    response_model=JobStatusResponse,
)
async def get_job_status(job_id: str):
    """
    Get the status, latest progress and result of a split job.
    """
    job = get_job_service().get_job(job_id)

    if job is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Job not found",
        )

    return JobStatusResponse(
        id=job.id,
        status=job.status,
        created_at=job.created_at,
        updated_at=job.updated_at,
        progress=job.progress,
        result=job.result,
        error=job.error,
    )


@router.delete(
    "/{job_id}",
    status_code=status.HTTP_204_NO_CONTENT,
)
async def delete_job(job_id: str):
    """Delete a job record."""
    if not get_job_service().delete_job(job_id):
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Job not found",
        )
