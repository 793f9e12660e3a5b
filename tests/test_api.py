import unittest
from unittest.mock import MagicMock, patch

import redis
from fastapi.testclient import TestClient

from strip_splitter.api.routes.health import get_redis_client
from strip_splitter.config import settings
from strip_splitter.main import app
from strip_splitter.schemas.job import JobStatus
from strip_splitter.schemas.split import ProgressUpdate
from strip_splitter.services.job_service import JobService
from strip_splitter.worker.tasks import process_split_job
from tests.support import FakeRedis


class TestSplitRoutes(unittest.TestCase):

    def setUp(self):
        self.job_service = JobService(redis_client=FakeRedis())
        self.queue = MagicMock()
        self.patches = [
            patch("strip_splitter.api.routes.split.get_job_service", return_value=self.job_service),
            patch("strip_splitter.api.routes.split.get_queue", return_value=self.queue),
        ]
        for p in self.patches:
            p.start()
        self.client = TestClient(app)

    def tearDown(self):
        for p in self.patches:
            p.stop()

    def test_submit_queues_job(self):
        response = self.client.post(
            "/split",
            json={
                "inputFolder": "/data/in",
                "outputFolder": "/data/out",
                "splitHeight": 800,
                "sensitivity": 75,
                "scanLineStep": 4,
                "ignorableBorder": 0,
            },
        )

        self.assertEqual(response.status_code, 202)
        job_id = response.json()["jobId"]
        self.assertEqual(self.job_service.get_job(job_id).status, JobStatus.PENDING)

        args, kwargs = self.queue.enqueue.call_args
        self.assertEqual(
            args,
            (
                process_split_job,
                job_id,
                "/data/in",
                "/data/out",
                {"split_height": 800, "sensitivity": 75, "scan_line_step": 4, "ignorable_border": 0},
            ),
        )
        self.assertEqual(kwargs["job_timeout"], settings.job_timeout)

    def test_submit_fills_defaults(self):
        response = self.client.post("/split", json={"inputFolder": "/in", "outputFolder": "/out"})

        self.assertEqual(response.status_code, 202)
        queued_settings = self.queue.enqueue.call_args[0][4]
        self.assertEqual(queued_settings, settings.splitting.model_dump())

    def test_submit_rejects_bad_settings(self):
        response = self.client.post(
            "/split",
            json={"inputFolder": "/in", "outputFolder": "/out", "sensitivity": 150},
        )
        self.assertEqual(response.status_code, 422)

        response = self.client.post(
            "/split",
            json={"inputFolder": "/in", "outputFolder": "/out", "splitHeight": 0},
        )
        self.assertEqual(response.status_code, 422)
        self.queue.enqueue.assert_not_called()

    def test_submit_rejects_blank_folder(self):
        response = self.client.post("/split", json={"inputFolder": " ", "outputFolder": "/out"})

        self.assertEqual(response.status_code, 400)
        self.queue.enqueue.assert_not_called()

    def test_get_job_status(self):
        job = self.job_service.create_job("/in", "/out")
        self.job_service.update_status(job.id, JobStatus.PROCESSING)
        self.job_service.update_progress(
            job.id,
            ProgressUpdate(current=1, total=2, percentage=50.0, message="Processing image 1/2"),
        )

        response = self.client.get(f"/split/{job.id}")

        self.assertEqual(response.status_code, 200)
        body = response.json()
        self.assertEqual(body["status"], "processing")
        self.assertEqual(body["progress"]["percentage"], 50.0)
        self.assertIn("createdAt", body)

    def test_unknown_job(self):
        self.assertEqual(self.client.get("/split/missing").status_code, 404)
        self.assertEqual(self.client.delete("/split/missing").status_code, 404)

    def test_delete_job(self):
        job = self.job_service.create_job("/in", "/out")

        self.assertEqual(self.client.delete(f"/split/{job.id}").status_code, 204)
        self.assertIsNone(self.job_service.get_job(job.id))


class TestHealthRoute(unittest.TestCase):

    def tearDown(self):
        app.dependency_overrides.clear()

    def check(self, redis_client):
        app.dependency_overrides[get_redis_client] = lambda: redis_client
        return TestClient(app).get("/health").json()

    def test_healthy(self):
        self.assertEqual(self.check(MagicMock()), {"status": "healthy", "redis": "healthy"})

    def test_redis_down(self):
        client = MagicMock()
        client.ping.side_effect = redis.ConnectionError("refused")

        self.assertEqual(self.check(client)["redis"], "unhealthy")


if __name__ == "__main__":
    unittest.main()
