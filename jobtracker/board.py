"""Board logic: the cached job list, drag state, and reconciliation with the store.

Every mutation runs as a two-phase operation: apply to the local cache,
commit to the store, and on failure apply a compensating rollback. Moves
and removals are optimistic; additions wait for the store because only the
store can assign an id.

The controller is single-threaded. Calls run to completion one at a time,
so the cache is never mutated concurrently.
"""

from dataclasses import dataclass, replace
from typing import Callable, Dict, List, Optional, Protocol, Union

from .client import Job
from .errors import JobTrackerError
from .logger import get_logger
from .schema import DEFAULT_STATUS, STATUSES, Status

logger = get_logger()

BACKEND_UNKNOWN = "unknown"
BACKEND_ONLINE = "online"
BACKEND_OFFLINE = "offline"


class JobStoreAPI(Protocol):
    def list_jobs(self) -> List[Job]: ...
    def create_job(self, candidate: Dict[str, str]) -> Job: ...
    def update_job(self, job_id: str, patch: Dict[str, str]) -> Job: ...
    def delete_job(self, job_id: str) -> None: ...


@dataclass(frozen=True)
class ColumnTarget:
    """Dropped onto empty space in a status column."""

    status: Status

    def __post_init__(self):
        object.__setattr__(self, "status", Status(self.status))


@dataclass(frozen=True)
class JobTarget:
    """Dropped onto another job card."""

    job_id: str


DropTarget = Union[ColumnTarget, JobTarget]


@dataclass(frozen=True)
class Notification:
    level: str
    message: str


class BoardController:
    def __init__(self, store: JobStoreAPI, notify: Optional[Callable[[Notification], None]] = None):
        self.store = store
        self.jobs: List[Job] = []
        self.active_drag_id: Optional[str] = None
        self.backend_status: str = BACKEND_UNKNOWN
        self.notifications: List[Notification] = []
        self._notify = notify

    # -------------------- queries --------------------
    def find(self, job_id: str) -> Optional[Job]:
        for job in self.jobs:
            if job.id == job_id:
                return job
        return None

    def _index_of(self, job_id: str) -> int:
        for idx, job in enumerate(self.jobs):
            if job.id == job_id:
                return idx
        return -1

    @property
    def active_job(self) -> Optional[Job]:
        """The job shown in the drag overlay, if any."""
        if self.active_drag_id is None:
            return None
        return self.find(self.active_drag_id)

    def columns_view(self) -> Dict[Status, List[Job]]:
        """Group the cache into the four status columns, in board order."""
        columns: Dict[Status, List[Job]] = {status: [] for status in STATUSES}
        for job in self.jobs:
            columns[job.status].append(job)
        return columns

    # -------------------- notifications --------------------
    def _error(self, message: str) -> None:
        note = Notification("error", message)
        self.notifications.append(note)
        if self._notify is not None:
            self._notify(note)

    def drain_notifications(self) -> List[Notification]:
        """Return pending notifications and clear them; they are transient."""
        pending, self.notifications = self.notifications, []
        return pending

    # -------------------- loading --------------------
    def load_initial(self) -> None:
        try:
            jobs = self.store.list_jobs()
        except JobTrackerError as e:
            self.jobs = []
            self.backend_status = BACKEND_OFFLINE
            logger.error("Loading jobs failed; backend offline", error_type=type(e).__name__, error=str(e))
            self._error(f"Backend offline: {e}")
            return
        self.jobs = list(jobs)
        self.backend_status = BACKEND_ONLINE
        logger.info("Jobs loaded", count=len(self.jobs))

    # -------------------- two-phase mutation --------------------
    def _two_phase(
        self,
        label: str,
        apply: Callable[[], None],
        commit: Callable[[], object],
        rollback: Callable[[], None],
    ) -> bool:
        """Apply locally, commit remotely, compensate on failure.

        Returns True when the store accepted the change.
        """
        apply()
        try:
            commit()
        except JobTrackerError as e:
            rollback()
            logger.record_rollback()
            logger.warning(f"{label} failed; local change rolled back", error_type=type(e).__name__, error=str(e))
            self._error(f"{label} failed: {e}")
            return False
        return True

    # -------------------- drag and drop --------------------
    def begin_drag(self, job_id: str) -> None:
        self.active_drag_id = job_id

    def resolve_status(self, job_id: str, target: Optional[DropTarget]) -> Optional[Status]:
        """Status a drop would give the dragged job, or None when the drop is a no-op.

        A column drop uses the column's status. A drop onto another job uses
        that job's status, never the dragged job's own.
        """
        if target is None:
            return None
        if self.find(job_id) is None:
            return None
        if isinstance(target, ColumnTarget):
            return target.status
        if isinstance(target, JobTarget):
            if target.job_id == job_id:
                return None
            over = self.find(target.job_id)
            return over.status if over is not None else None
        raise TypeError(f"Unsupported drop target: {target!r}")

    def end_drag(self, job_id: str, target: Optional[DropTarget]) -> bool:
        """Finish a drag. Returns True when a status change was committed."""
        self.active_drag_id = None

        new_status = self.resolve_status(job_id, target)
        if new_status is None:
            return False
        return self.move_job(job_id, new_status)

    def move_job(self, job_id: str, new_status: Status) -> bool:
        new_status = Status(new_status)
        job = self.find(job_id)
        if job is None or job.status == new_status:
            return False
        previous = job.status

        def apply():
            self._set_status(job_id, new_status)

        def commit():
            self.store.update_job(job_id, {"status": new_status.value})

        def rollback():
            current = self.find(job_id)
            # A later change owns the job now; leave it alone
            if current is not None and current.status == new_status:
                self._set_status(job_id, previous)

        ok = self._two_phase(f"Moving '{job.title}' to {new_status.value}", apply, commit, rollback)
        if ok:
            logger.info("Job moved", job_id=job_id, old_status=previous.value, new_status=new_status.value)
        return ok

    def _set_status(self, job_id: str, status: Status) -> None:
        self.jobs = [replace(j, status=status) if j.id == job_id else j for j in self.jobs]

    # -------------------- add / remove --------------------
    def add_job(self, title: str, company: str, status: Status = DEFAULT_STATUS) -> Optional[Job]:
        """Create a job on the store, then cache the record it returns."""
        candidate = {"title": title, "company": company, "status": Status(status).value}
        try:
            created = self.store.create_job(candidate)
        except JobTrackerError as e:
            logger.warning("Adding job failed", error_type=type(e).__name__, error=str(e))
            self._error(f"Adding '{title}' failed: {e}")
            return None
        self.jobs = self.jobs + [created]
        logger.info("Job added", job_id=created.id)
        return created

    def remove_job(self, job_id: str) -> bool:
        index = self._index_of(job_id)
        if index < 0:
            return self._remove_uncached(job_id)
        removed = self.jobs[index]

        def apply():
            self.jobs = [j for j in self.jobs if j.id != job_id]

        def commit():
            self.store.delete_job(job_id)

        def rollback():
            if self.find(job_id) is None:
                jobs = list(self.jobs)
                jobs.insert(min(index, len(jobs)), removed)
                self.jobs = jobs

        ok = self._two_phase(f"Removing '{removed.title}'", apply, commit, rollback)
        if ok:
            logger.info("Job removed", job_id=job_id)
        return ok

    def _remove_uncached(self, job_id: str) -> bool:
        """Delete a job the cache does not hold; nothing to apply or roll back."""
        try:
            self.store.delete_job(job_id)
        except JobTrackerError as e:
            logger.warning("Removing job failed", job_id=job_id, error_type=type(e).__name__, error=str(e))
            self._error(f"Removing job {job_id} failed: {e}")
            return False
        logger.info("Job removed", job_id=job_id)
        return True
