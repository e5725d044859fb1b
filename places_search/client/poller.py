"""Client that polls the job API, tracks the active job and exports results."""

from __future__ import annotations

import argparse
import logging
import random
import string
import threading
import time
from pathlib import Path
from typing import Any, Dict, List, Optional

import requests

from places_search.client import export
from places_search.core.config import get_settings
from places_search.models import JobStatus, SearchJob

logger = logging.getLogger(__name__)

_BASE36 = string.digits + string.ascii_lowercase
_EXPORTERS = {"csv": export.write_csv, "json": export.write_json, "xlsx": export.write_xlsx}


def new_session_id() -> str:
    suffix = "".join(random.choice(_BASE36) for _ in range(9))
    return f"session_{int(time.time() * 1000)}_{suffix}"


def get_session_id(path: str) -> str:
    """Return the persisted session id, creating it on first use."""
    session_file = Path(path).expanduser()
    if session_file.exists():
        stored = session_file.read_text(encoding="utf-8").strip()
        if stored:
            return stored
    session_id = new_session_id()
    session_file.parent.mkdir(parents=True, exist_ok=True)
    session_file.write_text(session_id, encoding="utf-8")
    logger.info("Created session id %s at %s", session_id, session_file)
    return session_id


class JobPoller:
    """Keeps a local copy of one owner's jobs, refreshed on a fixed interval.

    Each refresh replaces the cache wholesale. A failed refresh keeps the
    previous cache.
    """

    def __init__(
        self,
        api_url: Optional[str] = None,
        owner: Optional[str] = None,
        interval: Optional[float] = None,
        http: Optional[requests.Session] = None,
        session_file: Optional[str] = None,
    ) -> None:
        settings = get_settings()
        self.api_url = (api_url or settings.api_url).rstrip("/")
        self.interval = settings.poll_interval if interval is None else interval
        self.owner = owner or get_session_id(session_file or settings.session_file)
        self._http = http or requests.Session()
        self._jobs: List[SearchJob] = []
        self._selected_job_id: Optional[str] = None
        self._lock = threading.Lock()
        self._stop_event = threading.Event()
        self._thread: Optional[threading.Thread] = None

    # ---------- Polling ----------

    @property
    def jobs(self) -> List[SearchJob]:
        with self._lock:
            return list(self._jobs)

    def refresh(self) -> bool:
        try:
            response = self._http.get(f"{self.api_url}/jobs", params={"owner": self.owner}, timeout=10)
            response.raise_for_status()
            jobs = [SearchJob.from_dict(item) for item in response.json().get("data", [])]
        except (requests.RequestException, ValueError, KeyError) as exc:
            logger.warning("Refreshing jobs for %s failed: %s", self.owner, exc)
            return False

        with self._lock:
            self._jobs = jobs
        return True

    def start(self) -> None:
        if self._thread is not None and self._thread.is_alive():
            return
        self._stop_event.clear()
        self.refresh()
        self._thread = threading.Thread(target=self._loop, name="job-poller", daemon=True)
        self._thread.start()

    def stop(self) -> None:
        self._stop_event.set()
        if self._thread is not None:
            self._thread.join(timeout=self.interval + 1)
            self._thread = None

    def _loop(self) -> None:
        while not self._stop_event.wait(self.interval):
            self.refresh()

    # ---------- Selection ----------

    def select(self, job_id: Optional[str]) -> None:
        self._selected_job_id = job_id

    @property
    def active_job(self) -> Optional[SearchJob]:
        """Selected job, else newest pending/running job, else newest job."""
        jobs = self.jobs
        if self._selected_job_id is not None:
            for job in jobs:
                if job.id == self._selected_job_id:
                    return job
        for job in jobs:
            if job.status.is_active:
                return job
        return jobs[0] if jobs else None

    # ---------- API calls ----------

    def submit(self, query: str, location: Optional[str] = None, result_cap: Optional[int] = None) -> str:
        body: Dict[str, Any] = {"query": query, "owner": self.owner}
        if location:
            body["locationScope"] = location
        if result_cap is not None:
            body["resultCap"] = result_cap

        response = self._http.post(f"{self.api_url}/jobs", json=body, timeout=10)
        if response.status_code == 400:
            raise ValueError(response.json().get("error", "invalid search"))
        response.raise_for_status()
        job_id = response.json()["data"]["jobId"]

        self.select(job_id)
        self.refresh()
        return job_id

    def fetch(self, job_id: str) -> Optional[SearchJob]:
        response = self._http.get(f"{self.api_url}/jobs/{job_id}", timeout=10)
        if response.status_code == 404:
            return None
        response.raise_for_status()
        return SearchJob.from_dict(response.json()["data"])

    def delete(self, job_id: str) -> bool:
        response = self._http.delete(f"{self.api_url}/jobs/{job_id}", timeout=10)
        if response.status_code == 404:
            return False
        response.raise_for_status()
        if self._selected_job_id == job_id:
            self._selected_job_id = None
        self.refresh()
        return True

    def export(self, job: SearchJob, fmt: str, path: Optional[str] = None, only_with_phone: bool = False) -> Path:
        writer = _EXPORTERS[fmt]
        return writer(job, path or export.export_filename(job, fmt), only_with_phone=only_with_phone)


def _parse_cli_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Watch search jobs and export finished ones.")
    parser.add_argument("query", nargs="?", help="Submit a new search before watching")
    parser.add_argument("--location", default=None, help="City, state or country for the new search")
    parser.add_argument("--max-results", dest="max_results", type=int, default=None)
    parser.add_argument("--api-url", dest="api_url", default=None)
    parser.add_argument("--format", dest="fmt", choices=sorted(_EXPORTERS), default=None, help="Export the job when it completes")
    parser.add_argument("--only-with-phone", dest="only_with_phone", action="store_true")
    return parser.parse_args()


def main() -> None:
    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s - %(message)s")
    args = _parse_cli_args()
    poller = JobPoller(api_url=args.api_url)

    if args.query:
        job_id = poller.submit(args.query, args.location, args.max_results)
        logger.info("Submitted job %s as %s", job_id, poller.owner)

    poller.start()
    try:
        while True:
            job = poller.active_job
            if job is None:
                logger.info("No jobs for %s", poller.owner)
                return
            progress = job.progress
            logger.info(
                "%s [%s] %d%% %s (%d/%d cities) results=%d",
                job.query,
                job.status.value,
                progress.percentage,
                progress.current_city or "-",
                progress.city_index,
                progress.total_cities,
                progress.current_result_count,
            )
            if job.status is JobStatus.FAILED:
                logger.error("Job %s failed: %s", job.id, job.error_message)
                raise SystemExit(1)
            if job.status is JobStatus.COMPLETED:
                if args.fmt:
                    path = poller.export(job, args.fmt, only_with_phone=args.only_with_phone)
                    logger.info("Exported %d results to %s", job.total_found, path)
                return
            time.sleep(poller.interval)
    except KeyboardInterrupt:
        logger.info("Stopped watching")
    finally:
        poller.stop()


if __name__ == "__main__":
    main()
