"""
RQ exception handlers.

Called when a task raises past its own error handling or the worker
kills it (for example on job timeout).
"""
import logging

from rq.job import Job

from strip_splitter.schemas.job import JobStatus
from strip_splitter.services.job_service import get_job_service

logger = logging.getLogger(__name__)

SPLIT_TASK = "strip_splitter.worker.tasks.process_split_job"


def describe_failure(*args) -> str:
    """
    Build an error message from the arguments RQ passes to a handler.

    RQ calls handlers with (job, exc_type, exc_value, traceback); the job
    is stripped by the caller.
    """
    for arg in args:
        if isinstance(arg, BaseException):
            return f"{type(arg).__name__}: {arg}"

    for arg in args:
        if isinstance(arg, type) and issubclass(arg, BaseException):
            return arg.__name__

    return "Job failed unexpectedly"


def handle_job_failure(job: Job, *args, **kwargs) -> bool:
    """
    Mark the split job behind a failed RQ job as failed.

    Args:
        job: The failed RQ job.
        *args: Exception info as passed by RQ.

    Returns:
        True so RQ's remaining handlers still run.
    """
    error_msg = describe_failure(*args)
    logger.error(f"Job {job.id} failed: {error_msg}")

    if job.func_name == SPLIT_TASK and job.args:
        _mark_job_failed(job.args[0], error_msg)

    return True


def _mark_job_failed(job_id: str, error_msg: str) -> None:
    """
    Mark a split job as failed.

    Args:
        job_id: The split job ID.
        error_msg: Error message to store.
    """
    job = get_job_service().update_status(job_id, JobStatus.FAILED, error=error_msg)
    if job is None:
        logger.warning(f"Cannot mark job {job_id} as failed: job not found")
    else:
        logger.info(f"Marked job {job_id} as failed: {error_msg}")
