"""
Integration tests for the burn job API

Tests the full HTTP workflow: submit, poll, download. The pipeline runs
against in-process fetcher and renderer fakes.
"""

import time

import pytest
from fastapi.testclient import TestClient

import api.main as main
import burner.orchestrator as orchestrator_module
from burner.errors import SourceFetchError
from burner.jobs import JobRegistry
from burner.orchestrator import JobOrchestrator
from conftest import FakeFetcher, FakeRenderer

URL = "https://example.com/video.mp4"


@pytest.fixture
def service(monkeypatch, settings):
    """Patch the global orchestrator and return a factory for clients."""

    def make(fetcher=None, renderer=None):
        orchestrator = JobOrchestrator(
            settings=settings,
            registry=JobRegistry(),
            fetcher=fetcher or FakeFetcher(),
            renderer=renderer or FakeRenderer(),
        )
        monkeypatch.setattr(orchestrator_module, "_orchestrator", orchestrator)
        monkeypatch.setattr(main, "settings", settings)
        return orchestrator

    return make


@pytest.fixture
def client(service):
    service()
    with TestClient(main.app) as client:
        yield client


def wait_for_terminal(client, job_id, timeout=5.0):
    deadline = time.monotonic() + timeout
    seen = []
    while time.monotonic() < deadline:
        body = client.get(f"/api/task/{job_id}").json()
        seen.append(body["progress"])
        if body["status"] in ("completed", "failed"):
            return body, seen
        time.sleep(0.01)
    raise AssertionError(f"Job {job_id} did not finish in {timeout}s")


class TestBurnEndpoint:
    """Test suite for /api/burn-subtitles"""

    def test_submit_returns_job_id(self, client, sample_transcript):
        response = client.post(
            "/api/burn-subtitles",
            json={"source_url": URL, "transcript": sample_transcript},
        )

        assert response.status_code == 200
        data = response.json()
        assert data["job_id"]
        assert data["status"] == "pending"
        assert data["message"] == "Video processing started"

    def test_full_workflow(self, client, sample_transcript):
        """Test submit, poll until completed, then download"""
        response = client.post(
            "/api/burn-subtitles",
            json={"videoUrl": URL, "transcript": sample_transcript, "title": "My clip", "style": "fire"},
        )
        job_id = response.json()["job_id"]

        status, seen = wait_for_terminal(client, job_id)

        assert status == {"job_id": job_id, "status": "completed", "progress": 100}
        assert seen == sorted(seen)

        download = client.get(f"/api/download/{job_id}")
        assert download.status_code == 200
        assert download.content == b"rendered video"
        assert "My_clip_with_subtitles.mp4" in download.headers["content-disposition"]

    def test_missing_transcript(self, client):
        response = client.post("/api/burn-subtitles", json={"source_url": URL})

        assert response.status_code == 422
        assert response.json()["error"] == "validation_error"

    def test_empty_transcript(self, client):
        response = client.post("/api/burn-subtitles", json={"source_url": URL, "transcript": []})

        assert response.status_code == 422
        data = response.json()
        assert data["error"] == "validation_error"
        assert "transcript" in data["message"]

    def test_non_http_url(self, client, sample_transcript):
        response = client.post(
            "/api/burn-subtitles",
            json={"source_url": "file:///etc/passwd", "transcript": sample_transcript},
        )

        assert response.status_code == 422

    def test_failed_job_reports_error(self, service, sample_transcript):
        service(fetcher=FakeFetcher(error=SourceFetchError("Failed to download video: 404 Not Found", url=URL)))

        with TestClient(main.app) as client:
            job_id = client.post(
                "/api/burn-subtitles",
                json={"source_url": URL, "transcript": sample_transcript},
            ).json()["job_id"]
            status, _ = wait_for_terminal(client, job_id)

            assert status["status"] == "failed"
            assert status["error"] == "Failed to download video: 404 Not Found"
            assert 10 <= status["progress"] <= 99
            assert client.get(f"/api/download/{job_id}").status_code == 409


class TestJobEndpoints:
    """Test suite for status, download and listing"""

    def test_unknown_job_status(self, client):
        response = client.get("/api/task/does-not-exist")

        assert response.status_code == 404
        assert response.json()["error"] == "job_not_found"

    def test_unknown_job_download(self, client):
        assert client.get("/api/download/does-not-exist").status_code == 404

    def test_download_before_completion(self, service):
        orchestrator = service()
        job = orchestrator.registry.create(title="pending")

        with TestClient(main.app) as client:
            response = client.get(f"/api/download/{job.id}")

        assert response.status_code == 409
        assert response.json()["error"] == "job_not_ready"

    def test_list_jobs(self, service):
        orchestrator = service()
        job = orchestrator.registry.create(title="clip")

        with TestClient(main.app) as client:
            jobs = client.get("/api/jobs").json()["jobs"]

        assert [j["job_id"] for j in jobs] == [job.id]
        assert jobs[0]["filename"] == "clip_with_subtitles.mp4"


class TestServiceEndpoints:
    """Test suite for styles, health and root"""

    def test_styles(self, client):
        styles = client.get("/api/styles").json()

        assert [s["name"] for s in styles][0] == "modern"
        assert {s["name"] for s in styles} == {"modern", "neon", "fire", "elegant"}
        assert [s["name"] for s in styles if s["default"]] == ["modern"]

    def test_health(self, client):
        data = client.get("/health").json()

        assert data["status"] == "healthy"
        assert data["version"] == "1.0.0"

    def test_root(self, client):
        assert client.get("/").json()["status"] == "operational"

    def test_docs(self, client):
        assert client.get("/docs").status_code == 200
