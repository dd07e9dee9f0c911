from __future__ import annotations

import pytest
import requests

from hrms_lite.client.api_client import HrmsApiClient
from hrms_lite.client.resilience import ApiError, ServiceUnavailableError


class FakeResponse:
    def __init__(self, status_code: int, body=None):
        self.status_code = status_code
        self._body = body

    @property
    def ok(self) -> bool:
        return self.status_code < 400

    def json(self):
        if self._body is None:
            raise ValueError("no json")
        return self._body


class FakeSession:
    """Replays queued responses; a queued exception is raised instead."""

    def __init__(self, *responses):
        self.queue = list(responses)
        self.calls: list[tuple[str, str]] = []
        self.health_calls = 0

    def request(self, method, url, **_kwargs):
        self.calls.append((method, url))
        item = self.queue.pop(0)
        if isinstance(item, Exception):
            raise item
        return item

    def get(self, url, **_kwargs):
        self.health_calls += 1
        return FakeResponse(200, {"success": True})


class FakeMonotonic:
    def __init__(self):
        self.now = 1000.0

    def __call__(self):
        return self.now


def _client(session, sleeps, clock=None):
    return HrmsApiClient(
        "http://hrms.test/api",
        session=session,
        sleep=sleeps.append,
        clock=clock or FakeMonotonic(),
    )


def test_health_url_drops_api_prefix():
    assert _client(FakeSession(), []).health_url == "http://hrms.test/health"


def test_success_unwraps_envelope():
    session = FakeSession(FakeResponse(200, {"success": True, "data": [1, 2], "pagination": {"currentPage": 1}}))
    sleeps: list[float] = []

    resp = _client(session, sleeps).get_employees(page=1, search="")

    assert resp.data == [1, 2]
    assert resp.pagination == {"currentPage": 1}
    assert session.calls == [("GET", "http://hrms.test/api/employees")]
    assert sleeps == []


def test_retries_after_gateway_errors_and_wakes_host_once():
    ok = FakeResponse(200, {"success": True, "data": [{"id": 7}]})
    session = FakeSession(FakeResponse(502), requests.ConnectionError("refused"), ok)
    sleeps: list[float] = []

    resp = _client(session, sleeps).get_today_attendance()

    assert resp.data == [{"id": 7}]
    assert sleeps == [3.0, 7.0]
    assert session.health_calls == 1


def test_gives_up_after_all_retries():
    session = FakeSession(*[FakeResponse(500) for _ in range(4)])
    sleeps: list[float] = []

    with pytest.raises(ServiceUnavailableError) as exc:
        _client(session, sleeps).get_today_attendance()

    assert exc.value.status == 500
    assert sleeps == [3.0, 7.0, 12.0]
    assert len(session.calls) == 4


def test_client_errors_are_not_retried():
    body = {"success": False, "message": "Validation failed", "errors": [{"field": "name", "message": "bad"}]}
    session = FakeSession(FakeResponse(400, body))
    sleeps: list[float] = []

    with pytest.raises(ApiError) as exc:
        _client(session, sleeps).create_employee({"name": "x"})

    assert not isinstance(exc.value, ServiceUnavailableError)
    assert exc.value.status == 400
    assert exc.value.errors == [{"field": "name", "message": "bad"}]
    assert sleeps == []


def test_wake_up_is_throttled():
    session = FakeSession()
    clock = FakeMonotonic()
    client = _client(session, [], clock)

    client.wake_up()
    clock.now += 30
    client.wake_up()
    clock.now += 31
    client.wake_up()

    assert session.health_calls == 2


def test_writes_are_not_resent_after_server_error():
    session = FakeSession(FakeResponse(500), FakeResponse(201, {"success": True, "data": {"id": 2}}))
    sleeps: list[float] = []

    with pytest.raises(ServiceUnavailableError) as exc:
        _client(session, sleeps).create_employee({"name": "Jane Smith"})

    assert exc.value.status == 500
    assert session.calls == [("POST", "http://hrms.test/api/employees")]
    assert session.health_calls == 1
    assert sleeps == []


def test_writes_are_not_resent_after_read_timeout():
    session = FakeSession(requests.ReadTimeout("slow"))
    sleeps: list[float] = []

    with pytest.raises(ServiceUnavailableError):
        _client(session, sleeps).delete_employee(3)

    assert len(session.calls) == 1
    assert sleeps == []


def test_writes_are_retried_when_connection_failed():
    ok = FakeResponse(201, {"success": True, "data": {"id": 7}, "message": "Attendance marked successfully"})
    session = FakeSession(requests.ConnectionError("refused"), ok)
    sleeps: list[float] = []

    resp = _client(session, sleeps).mark_attendance(employee_id=1, date="2025-06-10", status="Present")

    assert resp.data == {"id": 7}
    assert sleeps == [3.0]
    assert len(session.calls) == 2
