import logging
import time
import uuid
from datetime import datetime, timezone

import redis

from strip_splitter.config import settings
from strip_splitter.schemas.job import Job, JobStatus
from strip_splitter.schemas.split import ProcessResult, ProgressUpdate

logger = logging.getLogger(__name__)

# Jobs with no update for longer than this are considered stale
STALE_PROCESSING_THRESHOLD_SECONDS = 900  # 15 minutes


def _now() -> datetime:
    return datetime.now(timezone.utc)


class JobService:
    """
    Service for managing split jobs in Redis.

    Handles job creation, status and progress updates, and result storage.
    """

    JOB_PREFIX = "split:job:"

    def __init__(self, redis_client: redis.Redis | None = None):
        """
        Initialize the job service.

        Args:
            redis_client: Redis client instance. Creates one if not provided.
        """
        self.redis = redis_client or redis.Redis.from_url(settings.redis_url)

    def _job_key(self, job_id: str) -> str:
        """Generate Redis key for a job."""
        return f"{self.JOB_PREFIX}{job_id}"

    def _serialize_job(self, job: Job) -> str:
        """Serialize a job to JSON for storage."""
        return job.model_dump_json()

    def _deserialize_job(self, data: str | bytes) -> Job:
        """Deserialize a job from JSON."""
        return Job.model_validate_json(data)

    def _store(self, job: Job) -> None:
        self.redis.setex(
            self._job_key(job.id),
            settings.job_result_ttl,
            self._serialize_job(job),
        )

    def create_job(
        self,
        input_folder: str,
        output_folder: str,
        webhook_url: str | None = None,
    ) -> Job:
        """
        Create a new split job.

        Args:
            input_folder: Folder holding the source images.
            output_folder: Folder receiving the segments.
            webhook_url: Optional webhook URL to call on completion.

        Returns:
            The created job.
        """
        now = _now()
        job = Job(
            id=str(uuid.uuid4()),
            status=JobStatus.PENDING,
            created_at=now,
            updated_at=now,
            input_folder=input_folder,
            output_folder=output_folder,
            webhook_url=webhook_url,
        )
        self._store(job)
        return job

    def get_job(self, job_id: str) -> Job | None:
        """
        Get a job by ID.

        Args:
            job_id: The job identifier.

        Returns:
            The job if found, None otherwise.
        """
        data = self.redis.get(self._job_key(job_id))
        if data is None:
            return None
        return self._deserialize_job(data)

    def update_status(
        self,
        job_id: str,
        status: JobStatus,
        error: str | None = None,
    ) -> Job | None:
        """
        Update a job's status.

        Args:
            job_id: The job identifier.
            status: New status.
            error: Optional error message (for failed status).

        Returns:
            The updated job, or None if not found.
        """
        job = self.get_job(job_id)
        if job is None:
            return None

        job.status = status
        job.updated_at = _now()
        if error:
            job.error = error

        self._store(job)
        return job

    def update_progress(self, job_id: str, progress: ProgressUpdate) -> Job:
        """
        Record the latest progress event of a job.

        Args:
            job_id: The job identifier.
            progress: Progress event.

        Returns:
            The updated job.

        Raises:
            LookupError: If the job no longer exists.
        """
        job = self.get_job(job_id)
        if job is None:
            raise LookupError(f"Job not found: {job_id}")

        job.progress = progress
        job.updated_at = _now()

        self._store(job)
        return job

    def set_result(self, job_id: str, result: ProcessResult) -> Job | None:
        """
        Set the result of a split job.

        A batch that found no image is stored as failed with the result's
        message as its error.

        Args:
            job_id: The job identifier.
            result: Batch result.

        Returns:
            The updated job, or None if not found.
        """
        job = self.get_job(job_id)
        if job is None:
            return None

        job.status = JobStatus.COMPLETED if result.success else JobStatus.FAILED
        job.updated_at = _now()
        job.result = result
        if not result.success:
            job.error = result.message

        self._store(job)
        return job

    def delete_job(self, job_id: str) -> bool:
        """
        Delete a job.

        Args:
            job_id: The job identifier.

        Returns:
            True if deleted, False if not found.
        """
        return self.redis.delete(self._job_key(job_id)) > 0

    def cleanup_stale_processing_jobs(self) -> list[str]:
        """
        Clean up jobs stuck in "processing" status.

        This handles cases where the worker crashed mid-batch
        and the job status was never updated to failed.

        Returns:
            List of job IDs that were cleaned up.
        """
        cleaned = []
        pattern = f"{self.JOB_PREFIX}*"
        now = time.time()

        for key in self.redis.scan_iter(pattern):
            try:
                data = self.redis.get(key)
                if data is None:
                    continue

                job = self._deserialize_job(data)

                if job.status == JobStatus.PROCESSING:
                    age_seconds = now - job.updated_at.timestamp()

                    if age_seconds > STALE_PROCESSING_THRESHOLD_SECONDS:
                        logger.warning(
                            f"Cleaning up stale processing job {job.id} "
                            f"(stuck for {age_seconds:.0f}s)"
                        )
                        self.update_status(
                            job.id,
                            JobStatus.FAILED,
                            error="Job timed out - worker may have crashed",
                        )
                        cleaned.append(job.id)

            except (redis.RedisError, ValueError) as e:
                logger.error(f"Error checking job {key}: {e}")

        return cleaned


# Singleton instance
_job_service: JobService | None = None


def get_job_service() -> JobService:
    """Get or create the job service singleton."""
    global _job_service
    if _job_service is None:
        _job_service = JobService()
    return _job_service
