import logging

from strip_splitter.schemas.job import JobStatus
from strip_splitter.schemas.split import ProcessSettings
from strip_splitter.services.batch_service import BatchProcessingError, get_batch_service
from strip_splitter.services.job_service import get_job_service
from strip_splitter.services.webhook_service import get_webhook_service

logger = logging.getLogger(__name__)


def process_split_job(
    job_id: str,
    input_folder: str,
    output_folder: str,
    process_settings: dict,
) -> dict:
    """
    Split every image of a folder.

    This is the RQ task that runs in the worker process. Progress events
    are stored on the job record as they arrive.

    Args:
        job_id: The job identifier.
        input_folder: Folder holding the source images.
        output_folder: Folder receiving the segments.
        process_settings: ProcessSettings as a plain dict.

    Returns:
        Dictionary with job result or error.
    """
    job_service = get_job_service()
    batch_service = get_batch_service()
    webhook_service = get_webhook_service()

    job = job_service.update_status(job_id, JobStatus.PROCESSING)
    if job is None:
        logger.error(f"Job not found: {job_id}")
        return {"error": "Job not found"}

    try:
        result = batch_service.process_images(
            input_folder,
            output_folder,
            ProcessSettings.model_validate(process_settings),
            on_progress=lambda progress: job_service.update_progress(job_id, progress),
        )
    except BatchProcessingError as e:
        error_msg = str(e)
        logger.error(f"Split failed for job {job_id}: {error_msg}")
        job = job_service.update_status(job_id, JobStatus.FAILED, error=error_msg)
    except Exception as e:
        error_msg = f"Unexpected error: {e}"
        logger.exception(f"Split failed for job {job_id}")
        job = job_service.update_status(job_id, JobStatus.FAILED, error=error_msg)
    else:
        job = job_service.set_result(job_id, result)
        logger.info(f"Split finished for job {job_id}: {result.message}")

        if job:
            webhook_service.deliver(job)

        if not result.success:
            return {"error": result.message}

        return {
            "job_id": job_id,
            "status": "completed",
            "segments": len(result.output_files),
            "images": result.total_images,
        }

    if job:
        webhook_service.deliver(job)

    return {"error": error_msg}
