import time
from datetime import datetime, timedelta, timezone

import pytest
import requests

from places_search.client import poller as poller_module
from places_search.client.poller import JobPoller, get_session_id
from places_search.models import JobStatus, SearchJob


class DummyResponse:
    def __init__(self, status_code=200, payload=None):
        self.status_code = status_code
        self._payload = payload or {}

    def raise_for_status(self):
        if self.status_code >= 400:
            raise requests.HTTPError(f"status {self.status_code}")

    def json(self):
        return self._payload


class DummyHttp:
    def __init__(self):
        self.jobs = []
        self.calls = []
        self.fail = False
        self.post_response = DummyResponse(202, {"data": {"jobId": "new-job", "status": "pending"}})

    def get(self, url, params=None, timeout=None):
        self.calls.append(("GET", url, params))
        if self.fail:
            raise requests.ConnectionError("api down")
        if url.endswith("/jobs"):
            return DummyResponse(200, {"data": [job.to_dict() for job in self.jobs]})
        job_id = url.rsplit("/", 1)[-1]
        for job in self.jobs:
            if job.id == job_id:
                return DummyResponse(200, {"data": job.to_dict()})
        return DummyResponse(404, {"error": "job not found"})

    def post(self, url, json=None, timeout=None):
        self.calls.append(("POST", url, json))
        return self.post_response

    def delete(self, url, timeout=None):
        self.calls.append(("DELETE", url, None))
        job_id = url.rsplit("/", 1)[-1]
        before = len(self.jobs)
        self.jobs = [job for job in self.jobs if job.id != job_id]
        return DummyResponse(200 if len(self.jobs) < before else 404)


def make_job(job_id, status, minutes_ago):
    return SearchJob(
        id=job_id,
        owner="session_1",
        query=f"query {job_id}",
        result_cap=10,
        status=status,
        created_at=datetime.now(timezone.utc) - timedelta(minutes=minutes_ago),
    )


@pytest.fixture
def http():
    return DummyHttp()


@pytest.fixture
def poller(http):
    return JobPoller(api_url="http://api.local/", owner="session_1", interval=0.01, http=http)


def test_session_id_is_created_once(tmp_path):
    path = tmp_path / "nested" / "session_id"

    first = get_session_id(str(path))
    second = get_session_id(str(path))

    assert first == second
    assert first.startswith("session_")
    assert len(first.rsplit("_", 1)[-1]) == 9
    assert path.read_text(encoding="utf-8") == first


def test_owner_defaults_to_session_id(tmp_path, http):
    path = tmp_path / "session_id"
    path.write_text("session_123_abcdefghi", encoding="utf-8")

    poller = JobPoller(api_url="http://api.local", http=http, session_file=str(path))

    assert poller.owner == "session_123_abcdefghi"


def test_refresh_replaces_cache(poller, http):
    http.jobs = [make_job("a", JobStatus.COMPLETED, 5)]
    assert poller.refresh() is True
    assert [job.id for job in poller.jobs] == ["a"]

    http.jobs = [make_job("b", JobStatus.RUNNING, 1)]
    poller.refresh()
    assert [job.id for job in poller.jobs] == ["b"]
    assert http.calls[0] == ("GET", "http://api.local/jobs", {"owner": "session_1"})


def test_failed_refresh_keeps_cache(poller, http):
    http.jobs = [make_job("a", JobStatus.COMPLETED, 5)]
    poller.refresh()

    http.fail = True
    assert poller.refresh() is False
    assert [job.id for job in poller.jobs] == ["a"]


def test_active_job_priority(poller, http):
    assert poller.active_job is None

    http.jobs = [
        make_job("newest-done", JobStatus.COMPLETED, 1),
        make_job("running", JobStatus.RUNNING, 5),
        make_job("old-done", JobStatus.FAILED, 10),
    ]
    poller.refresh()
    assert poller.active_job.id == "running"

    poller.select("old-done")
    assert poller.active_job.id == "old-done"

    poller.select("gone")
    assert poller.active_job.id == "running"

    http.jobs = [make_job("newest-done", JobStatus.COMPLETED, 1), make_job("old-done", JobStatus.FAILED, 10)]
    poller.select(None)
    poller.refresh()
    assert poller.active_job.id == "newest-done"


def test_submit_selects_new_job(poller, http):
    http.jobs = [make_job("new-job", JobStatus.PENDING, 0), make_job("other", JobStatus.RUNNING, 0)]

    job_id = poller.submit("dentista", location="GO", result_cap=50)

    assert job_id == "new-job"
    assert poller.active_job.id == "new-job"
    method, url, body = http.calls[0]
    assert (method, url) == ("POST", "http://api.local/jobs")
    assert body == {"query": "dentista", "owner": "session_1", "locationScope": "GO", "resultCap": 50}


def test_submit_validation_error(poller, http):
    http.post_response = DummyResponse(400, {"error": "missing fields: query"})
    with pytest.raises(ValueError, match="missing fields"):
        poller.submit("")


def test_fetch_and_delete(poller, http):
    http.jobs = [make_job("a", JobStatus.COMPLETED, 1)]
    poller.select("a")

    assert poller.fetch("a").status is JobStatus.COMPLETED
    assert poller.fetch("missing") is None
    assert poller.delete("a") is True
    assert poller.active_job is None
    assert poller.delete("a") is False


def test_start_polls_until_stopped(poller, http):
    poller.start()
    deadline = time.monotonic() + 2
    while len(http.calls) < 3 and time.monotonic() < deadline:
        time.sleep(0.01)
    poller.stop()

    assert len(http.calls) >= 3
    calls_after_stop = len(http.calls)
    time.sleep(0.05)
    assert len(http.calls) == calls_after_stop


def test_export_uses_exporters(poller, tmp_path, monkeypatch):
    job = make_job("a", JobStatus.COMPLETED, 1)
    written = []
    monkeypatch.setitem(
        poller_module._EXPORTERS, "csv", lambda job, path, only_with_phone=False: written.append((path, only_with_phone)) or path
    )

    poller.export(job, "csv", str(tmp_path / "a.csv"), only_with_phone=True)

    assert written == [(str(tmp_path / "a.csv"), True)]
