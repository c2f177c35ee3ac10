"""Tests for the log recorder API and service."""

import uuid
from datetime import UTC, datetime, timedelta

import pytest

from app.models.log_entry import LogEntry
from app.services.log_service import LogService

BASE = "/api/v1/logs"
T0 = datetime(2026, 3, 1, 12, 0, 0, tzinfo=UTC)


@pytest.fixture
def ids():
    return {
        "integration": uuid.uuid4(),
        "execution": uuid.uuid4(),
        "task": uuid.uuid4(),
    }


def _entry(db_session, ids, level="info", message="step done", minutes=0, **extra):
    entry = LogEntry(
        integration_id=extra.pop("integration_id", ids["integration"]),
        execution_id=extra.pop("execution_id", ids["execution"]),
        task_id=extra.pop("task_id", None),
        level=level,
        message=message,
        timestamp=T0 + timedelta(minutes=minutes),
        **extra,
    )
    db_session.add(entry)
    db_session.commit()
    return entry


class TestCreateLog:
    def test_create_applies_defaults(self, client, ids):
        response = client.post(
            BASE,
            json={
                "executionId": str(ids["execution"]),
                "integrationId": str(ids["integration"]),
                "message": "Connected to source",
            },
        )
        assert response.status_code == 201
        data = response.json()["data"]
        assert data["level"] == "info"
        assert data["source"] == "system"
        assert data["context"] == {}
        assert data["details"] is None
        assert data["taskId"] is None

    def test_create_task_level_entry_with_details(self, client, ids):
        response = client.post(
            BASE,
            json={
                "executionId": str(ids["execution"]),
                "integrationId": str(ids["integration"]),
                "taskId": str(ids["task"]),
                "level": "error",
                "message": "Load failed",
                "details": {"message": "Timeout", "attempt": 2, "hosts": ["a", "b"]},
                "source": "loader",
            },
        )
        assert response.status_code == 201
        data = response.json()["data"]
        assert data["taskId"] == str(ids["task"])
        assert data["details"] == {"message": "Timeout", "attempt": 2, "hosts": ["a", "b"]}

    def test_message_is_required(self, client, ids):
        response = client.post(
            BASE,
            json={"executionId": str(ids["execution"]), "integrationId": str(ids["integration"])},
        )
        assert response.status_code == 400
        assert response.json()["errors"][0]["field"] == "message"

    def test_unknown_level_is_rejected(self, client, ids):
        response = client.post(
            BASE,
            json={
                "executionId": str(ids["execution"]),
                "integrationId": str(ids["integration"]),
                "message": "x",
                "level": "fatal",
            },
        )
        assert response.status_code == 400


class TestExecutionAndTaskLogs:
    def test_execution_logs_are_chronological(self, client, db_session, ids):
        _entry(db_session, ids, message="second", minutes=2)
        _entry(db_session, ids, message="first", minutes=1)
        _entry(db_session, ids, message="other run", execution_id=uuid.uuid4())

        body = client.get(f"{BASE}/execution/{ids['execution']}").json()

        assert [item["message"] for item in body["data"]] == ["first", "second"]
        assert body["pagination"] == {"total": 2, "page": 1, "limit": 100, "pages": 1}

    def test_execution_logs_descending(self, client, db_session, ids):
        _entry(db_session, ids, message="second", minutes=2)
        _entry(db_session, ids, message="first", minutes=1)

        data = client.get(
            f"{BASE}/execution/{ids['execution']}", params={"sortOrder": "desc"}
        ).json()["data"]

        assert [item["message"] for item in data] == ["second", "first"]

    def test_filter_by_level_and_task(self, client, db_session, ids):
        _entry(db_session, ids, level="error", message="task failure", task_id=ids["task"])
        _entry(db_session, ids, level="error", message="run failure")
        _entry(db_session, ids, level="info", message="task info", task_id=ids["task"])

        data = client.get(
            f"{BASE}/execution/{ids['execution']}",
            params={"level": "error", "taskId": str(ids["task"])},
        ).json()["data"]

        assert [item["message"] for item in data] == ["task failure"]

    def test_level_all_means_no_filter(self, client, db_session, ids):
        _entry(db_session, ids, level="error")
        _entry(db_session, ids, level="debug")

        body = client.get(f"{BASE}/execution/{ids['execution']}", params={"level": "all"}).json()

        assert body["pagination"]["total"] == 2

    def test_search_matches_message_and_details_message(self, client, db_session, ids):
        _entry(db_session, ids, message="Connection RESET")
        _entry(db_session, ids, message="failure", details={"message": "connection refused"})
        _entry(db_session, ids, message="all good", details={"rows": 10})

        data = client.get(
            f"{BASE}/execution/{ids['execution']}", params={"search": "connection"}
        ).json()["data"]

        assert sorted(item["message"] for item in data) == ["Connection RESET", "failure"]

    def test_task_logs(self, client, db_session, ids):
        _entry(db_session, ids, message="in task", task_id=ids["task"])
        _entry(db_session, ids, message="execution level")

        data = client.get(f"{BASE}/task/{ids['task']}").json()["data"]

        assert [item["message"] for item in data] == ["in task"]

    def test_pagination(self, client, db_session, ids):
        for minute in range(5):
            _entry(db_session, ids, message=f"line {minute}", minutes=minute)

        body = client.get(
            f"{BASE}/execution/{ids['execution']}", params={"page": 2, "limit": 2}
        ).json()

        assert [item["message"] for item in body["data"]] == ["line 2", "line 3"]
        assert body["pagination"]["pages"] == 3


class TestIntegrationLogs:
    def test_integration_logs_newest_first(self, client, db_session, ids):
        _entry(db_session, ids, message="old", minutes=1)
        _entry(db_session, ids, message="new", minutes=5)

        data = client.get(f"{BASE}/integration/{ids['integration']}").json()["data"]

        assert [item["message"] for item in data] == ["new", "old"]

    def test_date_range(self, client, db_session, ids):
        for minute in (0, 10, 20):
            _entry(db_session, ids, message=f"at {minute}", minutes=minute)

        data = client.get(
            f"{BASE}/integration/{ids['integration']}",
            params={
                "startDate": (T0 + timedelta(minutes=5)).isoformat(),
                "endDate": (T0 + timedelta(minutes=15)).isoformat(),
            },
        ).json()["data"]

        assert [item["message"] for item in data] == ["at 10"]

    def test_recent_errors(self, client, db_session, ids):
        _entry(db_session, ids, level="error", message="older error", minutes=1)
        _entry(db_session, ids, level="error", message="newer error", minutes=2)
        _entry(db_session, ids, level="warning", message="just a warning", minutes=3)

        response = client.get(f"{BASE}/integration/{ids['integration']}/errors")

        assert response.status_code == 200
        data = response.json()["data"]
        assert [item["message"] for item in data] == ["newer error", "older error"]

    def test_recent_errors_limit(self, client, db_session, ids):
        for minute in range(3):
            _entry(db_session, ids, level="error", minutes=minute)

        data = client.get(
            f"{BASE}/integration/{ids['integration']}/errors", params={"limit": 1}
        ).json()["data"]

        assert len(data) == 1

    def test_level_distribution(self, client, db_session, ids):
        for _ in range(3):
            _entry(db_session, ids, level="info")
        _entry(db_session, ids, level="warning")
        _entry(db_session, ids, level="error", integration_id=uuid.uuid4())

        data = client.get(f"{BASE}/integration/{ids['integration']}/distribution").json()["data"]

        assert data == {"debug": 0, "info": 3, "warning": 1, "error": 0}

    def test_level_distribution_for_unknown_integration(self, client):
        data = client.get(f"{BASE}/integration/{uuid.uuid4()}/distribution").json()["data"]
        assert data == {"debug": 0, "info": 0, "warning": 0, "error": 0}


class TestLogHousekeeping:
    def test_delete_older_than(self, db_session, ids):
        _entry(db_session, ids, message="stale", minutes=0)
        _entry(db_session, ids, message="fresh", minutes=60)
        _entry(db_session, ids, message="other", minutes=0, integration_id=uuid.uuid4())

        deleted = LogService(db_session).delete_older_than(
            ids["integration"], T0 + timedelta(minutes=30)
        )

        assert deleted == 1
        remaining = db_session.query(LogEntry).order_by(LogEntry.message).all()
        assert [entry.message for entry in remaining] == ["fresh", "other"]

    def test_clear_for_integration(self, db_session, ids):
        _entry(db_session, ids)
        _entry(db_session, ids)
        _entry(db_session, ids, integration_id=uuid.uuid4())

        assert LogService(db_session).clear_for_integration(ids["integration"]) == 2
        assert db_session.query(LogEntry).count() == 1
