"""
RQ worker entry point.

Marks jobs left in "processing" by a previous crash as failed, then
starts the RQ worker.
"""
import logging

from redis import Redis
from rq import Worker

from strip_splitter.config import settings
from strip_splitter.services.job_service import get_job_service
from strip_splitter.worker.handlers import handle_job_failure

QUEUE_NAME = "default"


def cleanup_stale_jobs() -> None:
    """Fail any jobs stuck in processing from previous runs."""
    print("[STARTUP] Checking for stale processing jobs...", flush=True)
    cleaned = get_job_service().cleanup_stale_processing_jobs()

    if cleaned:
        print(f"[STARTUP] Failed stale jobs: {cleaned}", flush=True)
    else:
        print("[STARTUP] No stale processing jobs found", flush=True)


def main():
    """Run the RQ worker."""
    logging.basicConfig(
        level=logging.DEBUG if settings.debug else logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    cleanup_stale_jobs()

    redis_conn = Redis.from_url(settings.redis_url)

    worker = Worker(
        queues=[QUEUE_NAME],
        connection=redis_conn,
        exception_handlers=[handle_job_failure],
    )

    worker.work()


if __name__ == "__main__":
    main()
