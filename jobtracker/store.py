"""
Job Store.

Responsibilities:
- CRUD operations over the jobs table.
- Validation of candidates and patches before anything is written.
- Translating database failures into StoreUnavailable.

Non-Responsibilities:
- No HTTP concerns (status codes live in the API layer).
- No board or column logic.

Invariant:
Every stored job has a unique id and a status from the closed enumeration.
"""

from typing import Any, Dict, List

from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError

from .database import Job, create_db_engine, get_session_factory, init_database, new_job_id
from .errors import NotFound, StoreUnavailable, ValidationError
from .logger import get_logger
from .schema import normalize_candidate, validate_candidate, validate_patch

logger = get_logger()


class JobStore:
    """Sole source of truth for job records."""

    def __init__(self, engine: Engine):
        self.engine = engine
        self._session_factory = get_session_factory(engine)

    @classmethod
    def from_url(cls, database_url: str) -> "JobStore":
        """Open the database at the URL and make sure the schema exists."""
        engine = create_db_engine(database_url)
        init_database(engine)
        return cls(engine)

    def list_jobs(self) -> List[Dict[str, Any]]:
        try:
            with self._session_factory() as session:
                jobs = session.query(Job).order_by(Job.created_at, Job.id).all()
                return [job.to_dict() for job in jobs]
        except SQLAlchemyError as e:
            logger.error("Listing jobs failed", error=str(e))
            raise StoreUnavailable(f"Database unavailable: {e}") from e

    def create_job(self, candidate: Any) -> Dict[str, Any]:
        errors = validate_candidate(candidate)
        if errors:
            logger.warning("Rejected job candidate", errors=errors)
            raise ValidationError(errors)

        fields = normalize_candidate(candidate)
        job = Job(id=new_job_id(), **fields)
        try:
            with self._session_factory() as session:
                session.add(job)
                session.commit()
                record = job.to_dict()
        except SQLAlchemyError as e:
            logger.error("Creating job failed", error=str(e))
            raise StoreUnavailable(f"Database unavailable: {e}") from e

        logger.info("Job created", job_id=record["_id"], status=record["status"])
        return record

    def update_job(self, job_id: str, patch: Any) -> Dict[str, Any]:
        errors = validate_patch(patch)
        if errors:
            logger.warning("Rejected job patch", job_id=job_id, errors=errors)
            raise ValidationError(errors)

        try:
            with self._session_factory() as session:
                job = session.get(Job, job_id)
                if job is None:
                    raise NotFound(f"Job not found: {job_id}")
                for field, value in patch.items():
                    setattr(job, field, value)
                session.commit()
                record = job.to_dict()
        except SQLAlchemyError as e:
            logger.error("Updating job failed", job_id=job_id, error=str(e))
            raise StoreUnavailable(f"Database unavailable: {e}") from e

        logger.info("Job updated", job_id=job_id, status=record["status"])
        return record

    def delete_job(self, job_id: str) -> None:
        try:
            with self._session_factory() as session:
                job = session.get(Job, job_id)
                if job is None:
                    raise NotFound(f"Job not found: {job_id}")
                session.delete(job)
                session.commit()
        except SQLAlchemyError as e:
            logger.error("Deleting job failed", job_id=job_id, error=str(e))
            raise StoreUnavailable(f"Database unavailable: {e}") from e

        logger.info("Job deleted", job_id=job_id)
