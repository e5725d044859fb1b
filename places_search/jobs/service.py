"""Create, read and remove search jobs; hand new jobs to a background executor."""

import logging
from concurrent.futures import Executor
from datetime import datetime, timedelta, timezone
from typing import Any, Callable, List, Optional

from places_search.core.store import JobStore
from places_search.models import SearchJob

logger = logging.getLogger(__name__)


class ValidationError(ValueError):
    """Raised when a submission is rejected before any job is created."""


def _parse_result_cap(value: Any, default: int) -> int:
    if value is None or value == "":
        return default
    if isinstance(value, int) and not isinstance(value, bool):
        cap = value
    elif isinstance(value, str) and value.strip().isdigit():
        cap = int(value)
    else:
        raise ValidationError("resultCap must be a positive integer")
    if cap <= 0:
        raise ValidationError("resultCap must be a positive integer")
    return cap


def purge_expired(store: JobStore, retention_days: int) -> int:
    """Delete jobs created more than ``retention_days`` ago and return how many went."""
    cutoff = datetime.now(timezone.utc) - timedelta(days=retention_days)
    removed = store.delete_older_than(cutoff)
    logger.info("Purged %d jobs created before %s", removed, cutoff.isoformat())
    return removed


class JobService:
    def __init__(
        self,
        store: JobStore,
        executor: Executor,
        runner: Callable[[str], Any],
        default_result_cap: int = 1000,
    ) -> None:
        self._store = store
        self._executor = executor
        self._runner = runner
        self._default_result_cap = default_result_cap

    def submit(
        self,
        owner: Optional[str],
        query: Optional[str],
        location_scope: Optional[str] = None,
        result_cap: Any = None,
    ) -> str:
        """Persist a pending job, schedule its run and return the id without waiting."""
        owner = str(owner).strip() if owner is not None else ""
        query = str(query).strip() if query is not None else ""
        missing = [name for name, value in (("query", query), ("owner", owner)) if not value]
        if missing:
            raise ValidationError(f"missing fields: {', '.join(missing)}")

        cap = _parse_result_cap(result_cap, self._default_result_cap)
        location = str(location_scope).strip() if location_scope is not None else ""

        job = SearchJob(owner=owner, query=query, result_cap=cap, location_scope=location or None)
        self._store.create(job)
        logger.info("Queueing search job %s: query=%r location=%r cap=%d", job.id, query, job.location_scope, cap)
        self._executor.submit(self._runner, job.id)
        return job.id

    def get_status(self, job_id: str) -> Optional[SearchJob]:
        return self._store.get(job_id)

    def list_for_owner(self, owner: str) -> List[SearchJob]:
        return self._store.list_for_owner(owner)

    def delete_job(self, job_id: str) -> bool:
        deleted = self._store.delete(job_id)
        if deleted:
            logger.info("Deleted job %s", job_id)
        return deleted

    def purge_expired(self, retention_days: int) -> int:
        return purge_expired(self._store, retention_days)
