"""Job record stores.

A store persists SearchJob records and enforces the job state machine:
``pending -> running -> completed | failed``. Readers always get snapshots,
never the stored object itself.
"""

import copy
import logging
import threading
from datetime import datetime, timezone
from functools import lru_cache
from typing import Dict, List, Optional, Protocol

from places_search.core.config import get_settings
from places_search.models import JobStatus, Place, Progress, SearchJob

logger = logging.getLogger(__name__)


class JobStateError(RuntimeError):
    """Raised when a transition is attempted from the wrong job status."""


class JobStore(Protocol):
    def create(self, job: SearchJob) -> SearchJob: ...

    def get(self, job_id: str) -> Optional[SearchJob]: ...

    def list_for_owner(self, owner: str) -> List[SearchJob]: ...

    def mark_running(self, job_id: str, progress: Progress) -> bool: ...

    def update_progress(self, job_id: str, progress: Progress) -> None: ...

    def mark_completed(self, job_id: str, results: List[Place], progress: Progress) -> None: ...

    def mark_failed(self, job_id: str, error_message: str) -> None: ...

    def delete(self, job_id: str) -> bool: ...

    def delete_older_than(self, cutoff: datetime) -> int: ...


class InMemoryJobStore:
    """Process-local store used when no database is configured."""

    def __init__(self) -> None:
        self._jobs: Dict[str, SearchJob] = {}
        self._lock = threading.Lock()

    def create(self, job: SearchJob) -> SearchJob:
        with self._lock:
            if job.id in self._jobs:
                raise ValueError(f"job {job.id} already exists")
            self._jobs[job.id] = copy.deepcopy(job)
        logger.debug("Created job %s", job.id)
        return copy.deepcopy(job)

    def get(self, job_id: str) -> Optional[SearchJob]:
        with self._lock:
            job = self._jobs.get(job_id)
            return copy.deepcopy(job) if job is not None else None

    def list_for_owner(self, owner: str) -> List[SearchJob]:
        with self._lock:
            jobs = [copy.deepcopy(job) for job in self._jobs.values() if job.owner == owner]
        return sorted(jobs, key=lambda job: job.created_at, reverse=True)

    def mark_running(self, job_id: str, progress: Progress) -> bool:
        with self._lock:
            job = self._jobs.get(job_id)
            if job is None or job.status is not JobStatus.PENDING:
                return False
            job.status = JobStatus.RUNNING
            job.progress = copy.deepcopy(progress)
            return True

    def update_progress(self, job_id: str, progress: Progress) -> None:
        with self._lock:
            job = self._running_job(job_id)
            job.progress = copy.deepcopy(progress)

    def mark_completed(self, job_id: str, results: List[Place], progress: Progress) -> None:
        with self._lock:
            job = self._running_job(job_id)
            job.results = list(results)
            job.total_found = len(results)
            job.progress = copy.deepcopy(progress)
            job.status = JobStatus.COMPLETED
            job.completed_at = datetime.now(timezone.utc)

    def mark_failed(self, job_id: str, error_message: str) -> None:
        with self._lock:
            job = self._running_job(job_id)
            job.results = []
            job.total_found = 0
            job.error_message = error_message
            job.status = JobStatus.FAILED
            job.completed_at = datetime.now(timezone.utc)

    def delete(self, job_id: str) -> bool:
        with self._lock:
            return self._jobs.pop(job_id, None) is not None

    def delete_older_than(self, cutoff: datetime) -> int:
        with self._lock:
            expired = [job_id for job_id, job in self._jobs.items() if job.created_at < cutoff]
            for job_id in expired:
                del self._jobs[job_id]
        return len(expired)

    def _running_job(self, job_id: str) -> SearchJob:
        job = self._jobs.get(job_id)
        if job is None:
            raise JobStateError(f"job {job_id} does not exist")
        if job.status is not JobStatus.RUNNING:
            raise JobStateError(f"job {job_id} is {job.status.value}, expected running")
        return job


@lru_cache(maxsize=1)
def get_job_store() -> JobStore:
    """Return the process-wide store: PostgreSQL when DATABASE_URL is set."""
    settings = get_settings()
    if settings.database_url:
        from places_search.core.db import PostgresJobStore

        store = PostgresJobStore()
        store.init_schema()
        return store
    logger.warning("Using in-memory job store; jobs are lost on restart.")
    return InMemoryJobStore()
