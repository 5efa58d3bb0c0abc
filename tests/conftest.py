"""
Pytest configuration and shared fixtures.
"""

import pytest
from typing import Dict, List, Optional, Set

from fastapi.testclient import TestClient

from jobtracker.board import BoardController
from jobtracker.client import Job, JobStoreClient
from jobtracker.errors import NetworkError, NotFound
from jobtracker.schema import Status
from jobtracker.server import create_app
from jobtracker.store import JobStore


class FakeJobStore:
    """In-memory job store with failure injection, for board tests."""

    def __init__(self, jobs: Optional[List[Job]] = None):
        self.jobs: Dict[str, Job] = {job.id: job for job in (jobs or [])}
        self.fail_on: Set[str] = set()
        self.calls: List[tuple] = []
        self.on_update = None
        self._next_id = 100

    def _maybe_fail(self, operation: str) -> None:
        if operation in self.fail_on:
            raise NetworkError(f"simulated {operation} failure")

    def list_jobs(self) -> List[Job]:
        self.calls.append(("list",))
        self._maybe_fail("list")
        return list(self.jobs.values())

    def create_job(self, candidate) -> Job:
        self.calls.append(("create", dict(candidate)))
        self._maybe_fail("create")
        self._next_id += 1
        job = Job(
            id=f"job-{self._next_id}",
            title=candidate["title"],
            company=candidate["company"],
            status=Status(candidate.get("status", "Applied")),
        )
        self.jobs[job.id] = job
        return job

    def update_job(self, job_id: str, patch) -> Job:
        self.calls.append(("update", job_id, dict(patch)))
        if self.on_update is not None:
            self.on_update(job_id, patch)
        self._maybe_fail("update")
        if job_id not in self.jobs:
            raise NotFound(f"Job not found: {job_id}")
        job = self.jobs[job_id]
        updated = Job(id=job.id, title=job.title, company=job.company, status=Status(patch["status"]))
        self.jobs[job_id] = updated
        return updated

    def delete_job(self, job_id: str) -> None:
        self.calls.append(("delete", job_id))
        self._maybe_fail("delete")
        if job_id not in self.jobs:
            raise NotFound(f"Job not found: {job_id}")
        del self.jobs[job_id]


@pytest.fixture
def frontend_job() -> Job:
    """The single job the board starts with in the reference scenario."""
    return Job(id="1", title="Frontend Dev", company="Tech Co", status=Status.APPLIED)


@pytest.fixture
def sample_jobs(frontend_job) -> List[Job]:
    """One job per column except Rejected."""
    return [
        frontend_job,
        Job(id="2", title="Backend Dev", company="Data Inc", status=Status.INTERVIEWING),
        Job(id="3", title="SRE", company="Cloud Ltd", status=Status.OFFER),
    ]


@pytest.fixture
def fake_store(sample_jobs) -> FakeJobStore:
    return FakeJobStore(sample_jobs)


@pytest.fixture
def board(fake_store) -> BoardController:
    """Board loaded from the fake store."""
    controller = BoardController(fake_store)
    controller.load_initial()
    fake_store.calls.clear()
    return controller


@pytest.fixture
def valid_candidate() -> Dict[str, str]:
    return {"title": "Frontend Dev", "company": "Tech Co", "status": "Applied"}


@pytest.fixture
def database_url(tmp_path) -> str:
    """URL of a fresh SQLite database file."""
    return f"sqlite:///{tmp_path / 'data' / 'jobs.db'}"


@pytest.fixture
def store(database_url) -> JobStore:
    job_store = JobStore.from_url(database_url)
    yield job_store
    job_store.engine.dispose()


@pytest.fixture
def api(store) -> TestClient:
    """HTTP test client for the API backed by a real SQLite store."""
    return TestClient(create_app(store))


@pytest.fixture
def http_client(api) -> JobStoreClient:
    """The real job store client, talking to the API in-process."""
    return JobStoreClient(base_url="http://testserver", session=api)


@pytest.fixture
def fake_store_factory():
    """Build fake stores seeded with arbitrary jobs."""
    return FakeJobStore
