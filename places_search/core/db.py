"""PostgreSQL persistence for search jobs."""

import logging
import uuid
from contextlib import contextmanager
from datetime import datetime
from typing import Any, Dict, List, Optional

import psycopg2
from psycopg2 import extras, pool

from places_search.core.config import get_settings
from places_search.core.store import JobStateError
from places_search.models import JobStatus, Place, Progress, SearchJob

logger = logging.getLogger(__name__)

_connection_pool: Optional[pool.SimpleConnectionPool] = None


def init_pool(minconn: int = 1, maxconn: int = 5) -> pool.SimpleConnectionPool:
    """Initialise and return the shared connection pool."""
    global _connection_pool
    if _connection_pool is None:
        settings = get_settings()
        if not settings.database_url:
            raise RuntimeError("DATABASE_URL is required for database connections")
        _connection_pool = pool.SimpleConnectionPool(
            minconn,
            maxconn,
            dsn=settings.database_url,
            connect_timeout=10,
        )
        logger.info("Database connection pool initialised")
    return _connection_pool


@contextmanager
def get_connection():
    """Context manager yielding a pooled connection."""
    pg_pool = init_pool()
    conn = pg_pool.getconn()
    try:
        yield conn
    finally:
        pg_pool.putconn(conn)


_CREATE_TABLE = """
CREATE TABLE IF NOT EXISTS search_jobs (
    id UUID PRIMARY KEY,
    owner TEXT NOT NULL,
    query TEXT NOT NULL,
    location_scope TEXT,
    result_cap INTEGER NOT NULL CHECK (result_cap > 0),
    status TEXT NOT NULL DEFAULT 'pending',
    progress JSONB NOT NULL DEFAULT '{}'::jsonb,
    results JSONB NOT NULL DEFAULT '[]'::jsonb,
    total_found INTEGER NOT NULL DEFAULT 0,
    error_message TEXT,
    created_at TIMESTAMPTZ NOT NULL DEFAULT NOW(),
    completed_at TIMESTAMPTZ
);
CREATE INDEX IF NOT EXISTS search_jobs_owner_created_idx ON search_jobs (owner, created_at DESC);
"""

_INSERT_JOB = """
INSERT INTO search_jobs (
    id,
    owner,
    query,
    location_scope,
    result_cap,
    status,
    progress,
    results,
    total_found,
    created_at
) VALUES (
    %(id)s,
    %(owner)s,
    %(query)s,
    %(location_scope)s,
    %(result_cap)s,
    %(status)s,
    %(progress)s,
    %(results)s,
    %(total_found)s,
    %(created_at)s
);
"""

_SELECT_COLUMNS = """
SELECT id, owner, query, location_scope, result_cap, status, progress, results,
       total_found, error_message, created_at, completed_at
FROM search_jobs
"""

_MARK_RUNNING = """
UPDATE search_jobs SET status = 'running', progress = %(progress)s
WHERE id = %(id)s AND status = 'pending';
"""

_UPDATE_PROGRESS = """
UPDATE search_jobs SET progress = %(progress)s
WHERE id = %(id)s AND status = 'running';
"""

_MARK_COMPLETED = """
UPDATE search_jobs SET
    status = 'completed',
    progress = %(progress)s,
    results = %(results)s,
    total_found = %(total_found)s,
    completed_at = NOW()
WHERE id = %(id)s AND status = 'running';
"""

_MARK_FAILED = """
UPDATE search_jobs SET
    status = 'failed',
    results = '[]'::jsonb,
    total_found = 0,
    error_message = %(error_message)s,
    completed_at = NOW()
WHERE id = %(id)s AND status = 'running';
"""


def _is_uuid(job_id: str) -> bool:
    try:
        uuid.UUID(str(job_id))
    except ValueError:
        return False
    return True


def _row_to_job(row: Dict[str, Any]) -> SearchJob:
    return SearchJob(
        id=str(row["id"]),
        owner=row["owner"],
        query=row["query"],
        location_scope=row.get("location_scope"),
        result_cap=row["result_cap"],
        status=JobStatus(row["status"]),
        progress=Progress.from_dict(row.get("progress")),
        results=[Place.from_dict(item) for item in row.get("results") or []],
        total_found=row.get("total_found") or 0,
        error_message=row.get("error_message"),
        created_at=row["created_at"],
        completed_at=row.get("completed_at"),
    )


class PostgresJobStore:
    """Job store backed by the ``search_jobs`` table."""

    def init_schema(self) -> None:
        with get_connection() as conn:
            with conn.cursor() as cur:
                cur.execute(_CREATE_TABLE)
            conn.commit()
        logger.info("search_jobs schema ensured")

    def create(self, job: SearchJob) -> SearchJob:
        params = {
            "id": job.id,
            "owner": job.owner,
            "query": job.query,
            "location_scope": job.location_scope,
            "result_cap": job.result_cap,
            "status": job.status.value,
            "progress": extras.Json(job.progress.to_dict()),
            "results": extras.Json([place.to_dict() for place in job.results]),
            "total_found": job.total_found,
            "created_at": job.created_at,
        }
        self._execute(_INSERT_JOB, params)
        logger.debug("Inserted job %s", job.id)
        return job

    def get(self, job_id: str) -> Optional[SearchJob]:
        if not _is_uuid(job_id):
            return None
        rows = self._fetch(_SELECT_COLUMNS + " WHERE id = %(id)s", {"id": job_id})
        return _row_to_job(rows[0]) if rows else None

    def list_for_owner(self, owner: str) -> List[SearchJob]:
        rows = self._fetch(
            _SELECT_COLUMNS + " WHERE owner = %(owner)s ORDER BY created_at DESC",
            {"owner": owner},
        )
        return [_row_to_job(row) for row in rows]

    def mark_running(self, job_id: str, progress: Progress) -> bool:
        return self._execute(_MARK_RUNNING, {"id": job_id, "progress": extras.Json(progress.to_dict())}) == 1

    def update_progress(self, job_id: str, progress: Progress) -> None:
        updated = self._execute(_UPDATE_PROGRESS, {"id": job_id, "progress": extras.Json(progress.to_dict())})
        self._require_running(job_id, updated)

    def mark_completed(self, job_id: str, results: List[Place], progress: Progress) -> None:
        params = {
            "id": job_id,
            "progress": extras.Json(progress.to_dict()),
            "results": extras.Json([place.to_dict() for place in results]),
            "total_found": len(results),
        }
        self._require_running(job_id, self._execute(_MARK_COMPLETED, params))

    def mark_failed(self, job_id: str, error_message: str) -> None:
        updated = self._execute(_MARK_FAILED, {"id": job_id, "error_message": error_message})
        self._require_running(job_id, updated)

    def delete(self, job_id: str) -> bool:
        if not _is_uuid(job_id):
            return False
        return self._execute("DELETE FROM search_jobs WHERE id = %(id)s;", {"id": job_id}) > 0

    def delete_older_than(self, cutoff: datetime) -> int:
        return self._execute("DELETE FROM search_jobs WHERE created_at < %(cutoff)s;", {"cutoff": cutoff})

    @staticmethod
    def _require_running(job_id: str, rowcount: int) -> None:
        if rowcount != 1:
            raise JobStateError(f"job {job_id} is not running")

    @staticmethod
    def _execute(sql: str, params: Dict[str, Any]) -> int:
        with get_connection() as conn:
            try:
                with conn.cursor() as cur:
                    cur.execute(sql, params)
                    rowcount = cur.rowcount
                conn.commit()
            except psycopg2.Error:
                conn.rollback()
                raise
        return rowcount

    @staticmethod
    def _fetch(sql: str, params: Dict[str, Any]) -> List[Dict[str, Any]]:
        with get_connection() as conn:
            try:
                with conn.cursor(cursor_factory=extras.RealDictCursor) as cur:
                    cur.execute(sql, params)
                    rows = cur.fetchall()
            finally:
                conn.rollback()
        return [dict(row) for row in rows]
