import logging

import httpx

from strip_splitter.config import settings
from strip_splitter.schemas.job import Job

logger = logging.getLogger(__name__)


class WebhookService:
    """Posts the final state of a job to its webhook URL."""

    def __init__(
        self,
        timeout: int | None = None,
        max_retries: int | None = None,
        transport: httpx.BaseTransport | None = None,
    ):
        """
        Initialize the webhook service.

        Args:
            timeout: Request timeout in seconds.
            max_retries: Maximum number of delivery attempts.
            transport: Optional httpx transport (used by tests).
        """
        self.timeout = timeout or settings.webhook_timeout
        self.max_retries = max_retries or settings.webhook_max_retries
        self.transport = transport

    @staticmethod
    def build_payload(job: Job) -> dict:
        return {
            "jobId": job.id,
            "status": job.status.value,
            "inputFolder": job.input_folder,
            "outputFolder": job.output_folder,
            "result": job.result.model_dump(by_alias=True) if job.result else None,
            "error": job.error,
        }

    def deliver(self, job: Job) -> bool:
        """
        Deliver a notification for a finished job.

        Delivery failures are logged; they never change the job outcome.

        Args:
            job: The finished job.

        Returns:
            True if delivered (or no webhook configured), False otherwise.
        """
        if not job.webhook_url:
            return True

        payload = self.build_payload(job)

        with httpx.Client(timeout=self.timeout, transport=self.transport) as client:
            for attempt in range(1, self.max_retries + 1):
                try:
                    response = client.post(job.webhook_url, json=payload)
                    response.raise_for_status()
                except httpx.HTTPStatusError as e:
                    logger.warning(
                        f"Webhook for job {job.id} rejected (attempt {attempt}): "
                        f"HTTP {e.response.status_code}"
                    )
                    continue
                except httpx.RequestError as e:
                    logger.warning(f"Webhook for job {job.id} failed (attempt {attempt}): {e}")
                    continue

                logger.info(f"Webhook delivered for job {job.id}")
                return True

        logger.error(f"Webhook delivery failed for job {job.id} after {self.max_retries} attempts")
        return False


# Singleton instance
_webhook_service: WebhookService | None = None


def get_webhook_service() -> WebhookService:
    """Get or create the webhook service singleton."""
    global _webhook_service
    if _webhook_service is None:
        _webhook_service = WebhookService()
    return _webhook_service
