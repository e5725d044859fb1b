from datetime import datetime, timedelta, timezone

import pytest

from places_search.core.store import InMemoryJobStore
from places_search.jobs.service import JobService, ValidationError
from places_search.models import JobStatus, SearchJob


class DummyExecutor:
    def __init__(self):
        self.submitted = []

    def submit(self, fn, *args):
        self.submitted.append((fn, args))


@pytest.fixture
def executor():
    return DummyExecutor()


@pytest.fixture
def service(executor):
    return JobService(InMemoryJobStore(), executor, runner=lambda job_id: None, default_result_cap=1000)


def test_submit_creates_pending_job_and_schedules_it(service, executor):
    job_id = service.submit(owner="session_1", query=" dentista ", location_scope="GO", result_cap=50)

    job = service.get_status(job_id)
    assert job.status is JobStatus.PENDING
    assert job.query == "dentista"
    assert job.location_scope == "GO"
    assert job.result_cap == 50
    assert executor.submitted[0][1] == (job_id,)


def test_submit_defaults(service):
    job = service.get_status(service.submit(owner="session_1", query="pizza", location_scope="  "))
    assert job.result_cap == 1000
    assert job.location_scope is None


@pytest.mark.parametrize(
    "kwargs",
    [
        {"owner": "session_1", "query": ""},
        {"owner": "session_1", "query": "   "},
        {"owner": None, "query": "pizza"},
        {"owner": "", "query": "pizza"},
        {"owner": "session_1", "query": "pizza", "result_cap": 0},
        {"owner": "session_1", "query": "pizza", "result_cap": -5},
        {"owner": "session_1", "query": "pizza", "result_cap": "bad"},
        {"owner": "session_1", "query": "pizza", "result_cap": 2.5},
        {"owner": "session_1", "query": "pizza", "result_cap": True},
    ],
)
def test_submit_rejects_invalid_input(service, executor, kwargs):
    with pytest.raises(ValidationError):
        service.submit(**kwargs)
    assert executor.submitted == []
    assert service.list_for_owner("session_1") == []


def test_submit_accepts_numeric_string_cap(service):
    job = service.get_status(service.submit(owner="session_1", query="pizza", result_cap="25"))
    assert job.result_cap == 25


def test_get_status_unknown_job(service):
    assert service.get_status("unknown") is None


def test_list_and_delete(service):
    first = service.submit(owner="session_1", query="pizza")
    second = service.submit(owner="session_1", query="sushi")
    service.submit(owner="session_2", query="tacos")

    listed = [job.id for job in service.list_for_owner("session_1")]
    assert set(listed) == {first, second}

    assert service.delete_job(first) is True
    assert service.delete_job(first) is False
    assert [job.id for job in service.list_for_owner("session_1")] == [second]


def test_purge_expired(executor):
    store = InMemoryJobStore()
    service = JobService(store, executor, runner=lambda job_id: None)
    old = SearchJob(
        owner="session_1",
        query="pizza",
        result_cap=10,
        created_at=datetime.now(timezone.utc) - timedelta(days=30),
    )
    store.create(old)
    service.submit(owner="session_1", query="sushi")

    assert service.purge_expired(7) == 1
    assert store.get(old.id) is None
