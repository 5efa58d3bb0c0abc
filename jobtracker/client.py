"""HTTP client for the job store API.

Maps transport failures and error status codes onto the shared error
taxonomy so callers only deal with JobTrackerError subclasses.
"""

from dataclasses import dataclass
from typing import Any, Dict, List, Mapping, Optional

import requests

from .env import DEFAULT_TIMEOUT, api_url
from .errors import JobTrackerError, NetworkError, NotFound, StoreUnavailable, ValidationError
from .logger import get_logger
from .retry import exponential_backoff
from .schema import Status

logger = get_logger()


@dataclass
class Job:
    """Client-side copy of a job record."""

    id: str
    title: str
    company: str
    status: Status

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Job":
        try:
            return cls(
                id=str(data["_id"]),
                title=data["title"],
                company=data["company"],
                status=Status(data["status"]),
            )
        except (KeyError, TypeError, ValueError) as e:
            raise ValidationError(f"Malformed job record from server: {data!r}") from e

    def to_dict(self) -> Dict[str, Any]:
        return {
            "_id": self.id,
            "title": self.title,
            "company": self.company,
            "status": self.status.value,
        }


def _error_message(resp) -> str:
    try:
        body = resp.json()
    except ValueError:
        return resp.text or f"HTTP {resp.status_code}"
    if isinstance(body, dict) and body.get("error"):
        return str(body["error"])
    return f"HTTP {resp.status_code}"


class JobStoreClient:
    """
    Talks to the job store over HTTP/JSON.

    Args:
        base_url: API root (default: JOBTRACKER_API_URL or http://localhost:5000)
        timeout: Per-request timeout in seconds
        retries: Extra attempts for listing jobs on network errors; writes are
            never retried
        session: Object with a requests-compatible ``request`` method
    """

    def __init__(
        self,
        base_url: Optional[str] = None,
        timeout: float = DEFAULT_TIMEOUT,
        retries: int = 0,
        session=None,
    ):
        self.base_url = api_url(base_url)
        self.timeout = timeout
        self.retries = retries
        if session is None:
            session = requests.Session()
            session.headers.update({"Content-Type": "application/json"})
        self.session = session

    def _request(self, operation: str, method: str, path: str, payload: Optional[dict] = None):
        url = f"{self.base_url}{path}"
        logger.record_store_call(operation)
        try:
            resp = self.session.request(method, url, json=payload, timeout=self.timeout)
        except requests.exceptions.Timeout as e:
            logger.record_store_failure(operation, "Timeout")
            logger.warning("Job store request timed out", method=method, url=url)
            raise NetworkError(f"Request timed out: {method} {url}") from e
        except requests.exceptions.RequestException as e:
            logger.record_store_failure(operation, "RequestException")
            logger.warning("Job store unreachable", method=method, url=url, error=str(e))
            raise NetworkError(f"Request failed: {method} {url}: {e}") from e

        status = resp.status_code
        if status < 400:
            try:
                return resp.json()
            except ValueError as e:
                logger.record_store_failure(operation, "InvalidJSON")
                raise NetworkError(f"Invalid JSON from {method} {url}") from e

        message = _error_message(resp)
        if status == 404:
            error: JobTrackerError = NotFound(message)
        elif status == 400:
            error = ValidationError(message)
        elif status >= 500:
            error = StoreUnavailable(message)
        else:
            error = NetworkError(f"Unexpected HTTP {status}: {message}")
        logger.record_store_failure(operation, f"HTTPError_{status}")
        logger.warning("Job store request failed", method=method, url=url, status=status, error=message)
        raise error

    def list_jobs(self) -> List[Job]:
        fetch = exponential_backoff(
            max_retries=self.retries,
            base_delay=0.5,
            max_delay=5.0,
            exceptions=(NetworkError,),
            on_retry=lambda attempt, e, delay: logger.info(
                "Retrying job list", attempt=attempt, delay=delay, error=str(e)
            ),
        )(self._request)
        data = fetch("list", "GET", "/jobs")
        if not isinstance(data, list):
            raise ValidationError("Expected a list of jobs from server")
        return [Job.from_dict(item) for item in data]

    def create_job(self, candidate: Mapping[str, Any]) -> Job:
        return Job.from_dict(self._request("create", "POST", "/jobs", dict(candidate)))

    def update_job(self, job_id: str, patch: Mapping[str, Any]) -> Job:
        return Job.from_dict(self._request("update", "PATCH", f"/jobs/{job_id}", dict(patch)))

    def delete_job(self, job_id: str) -> None:
        self._request("delete", "DELETE", f"/jobs/{job_id}")
