"""Tests for the integration registry API and service."""

import uuid

import pytest

from app.core.errors import DuplicateKeyError, NotFoundError
from app.models.execution import Execution
from app.models.log_entry import LogEntry
from app.models.shared import utc_now
from app.models.task import Task
from app.schemas.integration import IntegrationCreate, IntegrationUpdate
from app.services.integration_service import IntegrationService, derive_integration_status
from tests.conftest import integration_payload

BASE = "/api/v1/integrations"


def _create(client, **overrides):
    response = client.post(BASE, json=integration_payload(**overrides))
    assert response.status_code == 201, response.text
    return response.json()["data"]


class TestCreateIntegration:
    def test_create_returns_envelope_with_defaults(self, client):
        response = client.post(BASE, json=integration_payload())
        assert response.status_code == 201
        body = response.json()
        assert body["status"] == "success"
        assert body["message"] == "Integration created successfully"
        data = body["data"]
        assert data["name"] == "Customer API Sync"
        assert data["status"] == "inactive"
        assert data["healthScore"] == 100
        assert data["config"] == {}
        assert data["lastExecution"] is None
        assert data["owner"] is None
        uuid.UUID(data["id"])

    def test_name_is_trimmed(self, client):
        data = _create(client, name="   Padded Name   ")
        assert data["name"] == "Padded Name"

    def test_tags_are_trimmed_and_deduplicated(self, client):
        data = _create(client, tags=[" etl ", "etl", "finance", ""])
        assert data["tags"] == ["etl", "finance"]

    def test_duplicate_name_conflicts(self, client):
        _create(client)
        response = client.post(BASE, json=integration_payload())
        assert response.status_code == 409
        body = response.json()
        assert body["status"] == "error"
        assert body["message"] == (
            "Duplicate value: name with value Customer API Sync already exists"
        )

    def test_short_name_is_rejected(self, client):
        response = client.post(BASE, json=integration_payload(name="ab"))
        assert response.status_code == 400
        body = response.json()
        assert body["message"] == "Validation error"
        assert body["errors"][0]["field"] == "name"

    def test_unknown_type_is_rejected(self, client):
        response = client.post(BASE, json=integration_payload(type="FTP"))
        assert response.status_code == 400
        assert response.json()["errors"][0]["field"] == "type"

    def test_health_score_out_of_range_is_rejected(self, client):
        response = client.post(BASE, json=integration_payload(healthScore=101))
        assert response.status_code == 400
        assert response.json()["errors"][0]["field"] == "healthScore"

    def test_custom_frequency_required_for_custom(self, client):
        response = client.post(BASE, json=integration_payload(frequency="custom"))
        assert response.status_code == 400
        assert "customFrequency" in response.json()["errors"][0]["message"]

    def test_custom_frequency_accepted(self, client):
        data = _create(client, frequency="custom", customFrequency="0 */4 * * *")
        assert data["frequency"] == "custom"
        assert data["customFrequency"] == "0 */4 * * *"

    def test_missing_source_is_rejected(self, client):
        payload = integration_payload()
        del payload["source"]
        response = client.post(BASE, json=payload)
        assert response.status_code == 400
        assert response.json()["errors"][0]["field"] == "source"


class TestListIntegrations:
    @pytest.fixture
    def seeded(self, client):
        _create(client, name="Alpha Sync", type="API", status="active", tags=["crm"])
        _create(client, name="Beta Loader", type="DATABASE", status="error", tags=["finance"])
        _create(
            client,
            name="Gamma Files",
            type="FILE",
            status="active",
            tags=["finance", "files"],
            description="Nightly CSV drop",
        )

    def test_pagination_metadata(self, client, seeded):
        response = client.get(BASE, params={"page": 2, "limit": 2})
        assert response.status_code == 200
        body = response.json()
        assert body["pagination"] == {"total": 3, "page": 2, "limit": 2, "pages": 2}
        assert len(body["data"]) == 1

    def test_default_sort_is_most_recently_updated_first(self, client, seeded):
        names = [item["name"] for item in client.get(BASE).json()["data"]]
        assert names == ["Gamma Files", "Beta Loader", "Alpha Sync"]

    def test_sort_by_name_defaults_to_ascending(self, client, seeded):
        names = [item["name"] for item in client.get(BASE, params={"sortBy": "name"}).json()["data"]]
        assert names == ["Alpha Sync", "Beta Loader", "Gamma Files"]

    def test_sort_by_camel_case_column(self, client, seeded):
        client.put(f"{BASE}/{_find(client, 'Beta Loader')}", json={"healthScore": 10})
        response = client.get(BASE, params={"sortBy": "healthScore", "sortOrder": "asc"})
        assert response.json()["data"][0]["name"] == "Beta Loader"

    def test_invalid_sort_order_is_rejected(self, client, seeded):
        response = client.get(BASE, params={"sortBy": "name", "sortOrder": "sideways"})
        assert response.status_code == 400

    def test_filter_by_status(self, client, seeded):
        data = client.get(BASE, params={"status": "active"}).json()["data"]
        assert {item["name"] for item in data} == {"Alpha Sync", "Gamma Files"}

    def test_status_all_means_no_filter(self, client, seeded):
        assert client.get(BASE, params={"status": "all"}).json()["pagination"]["total"] == 3

    def test_filter_by_type(self, client, seeded):
        data = client.get(BASE, params={"type": "DATABASE"}).json()["data"]
        assert [item["name"] for item in data] == ["Beta Loader"]

    def test_tags_match_any(self, client, seeded):
        data = client.get(BASE, params={"tags": "crm,files", "sortBy": "name"}).json()["data"]
        assert [item["name"] for item in data] == ["Alpha Sync", "Gamma Files"]

    def test_tags_do_not_match_substrings(self, client, seeded):
        assert client.get(BASE, params={"tags": "fin"}).json()["pagination"]["total"] == 0

    def test_search_is_case_insensitive_over_text_fields(self, client, seeded):
        data = client.get(BASE, params={"search": "csv"}).json()["data"]
        assert [item["name"] for item in data] == ["Gamma Files"]

    def test_limit_above_maximum_is_rejected(self, client):
        assert client.get(BASE, params={"limit": 5000}).status_code == 400


def _find(client, name):
    for item in client.get(BASE, params={"limit": 100}).json()["data"]:
        if item["name"] == name:
            return item["id"]
    raise AssertionError(name)


class TestGetUpdateDelete:
    def test_get_by_id(self, client):
        created = _create(client)
        response = client.get(f"{BASE}/{created['id']}")
        assert response.status_code == 200
        assert response.json()["data"]["id"] == created["id"]

    def test_get_missing_returns_404(self, client):
        response = client.get(f"{BASE}/{uuid.uuid4()}")
        assert response.status_code == 404
        assert response.json() == {"status": "error", "message": "Integration not found"}

    def test_malformed_id_is_a_validation_error(self, client):
        response = client.get(f"{BASE}/not-a-uuid")
        assert response.status_code == 400

    def test_update_merges_fields_and_restamps(self, client):
        created = _create(client)
        response = client.put(
            f"{BASE}/{created['id']}",
            json={"description": "Updated", "config": {"retries": 2}},
        )
        assert response.status_code == 200
        data = response.json()["data"]
        assert data["description"] == "Updated"
        assert data["config"] == {"retries": 2}
        assert data["name"] == created["name"]
        assert data["updatedAt"] >= created["updatedAt"]

    def test_update_ignores_id_in_body(self, client):
        created = _create(client)
        response = client.put(
            f"{BASE}/{created['id']}", json={"id": str(uuid.uuid4()), "owner": "ops"}
        )
        assert response.status_code == 200
        assert response.json()["data"]["id"] == created["id"]

    def test_update_requires_a_field(self, client):
        created = _create(client)
        response = client.put(f"{BASE}/{created['id']}", json={})
        assert response.status_code == 400

    def test_update_rejects_null_name(self, client):
        created = _create(client)
        response = client.put(f"{BASE}/{created['id']}", json={"name": None})
        assert response.status_code == 400
        assert "name cannot be null" in response.json()["errors"][0]["message"]

    def test_update_cannot_clear_custom_frequency_while_custom(self, client):
        created = _create(client, frequency="custom", customFrequency="0 */6 * * *")
        response = client.put(f"{BASE}/{created['id']}", json={"customFrequency": None})

        assert response.status_code == 400
        assert response.json()["errors"][0]["field"] == "customFrequency"
        stored = client.get(f"{BASE}/{created['id']}").json()["data"]
        assert stored["frequency"] == "custom"
        assert stored["customFrequency"] == "0 */6 * * *"

    def test_update_can_clear_custom_frequency_when_leaving_custom(self, client):
        created = _create(client, frequency="custom", customFrequency="0 */6 * * *")
        response = client.put(
            f"{BASE}/{created['id']}", json={"frequency": "hourly", "customFrequency": None}
        )

        assert response.status_code == 200
        assert response.json()["data"]["frequency"] == "hourly"
        assert response.json()["data"]["customFrequency"] is None

    def test_update_to_custom_uses_stored_custom_frequency(self, client):
        created = _create(client, frequency="custom", customFrequency="0 */6 * * *")
        client.put(f"{BASE}/{created['id']}", json={"frequency": "daily"})
        response = client.put(f"{BASE}/{created['id']}", json={"frequency": "custom"})
        assert response.status_code == 200
        assert response.json()["data"]["customFrequency"] == "0 */6 * * *"

    def test_update_to_custom_without_custom_frequency_is_rejected(self, client):
        created = _create(client)
        response = client.put(f"{BASE}/{created['id']}", json={"frequency": "custom"})
        assert response.status_code == 400
        assert response.json()["errors"][0]["field"] == "customFrequency"

    def test_update_to_taken_name_conflicts(self, client):
        _create(client, name="First One")
        second = _create(client, name="Second One")
        response = client.put(f"{BASE}/{second['id']}", json={"name": "First One"})
        assert response.status_code == 409

    def test_update_missing_returns_404(self, client):
        response = client.put(f"{BASE}/{uuid.uuid4()}", json={"owner": "ops"})
        assert response.status_code == 404

    def test_delete(self, client):
        created = _create(client)
        response = client.delete(f"{BASE}/{created['id']}")
        assert response.status_code == 200
        assert response.json() == {
            "status": "success",
            "message": "Integration deleted successfully",
        }
        assert client.get(f"{BASE}/{created['id']}").status_code == 404

    def test_delete_missing_returns_404(self, client):
        assert client.delete(f"{BASE}/{uuid.uuid4()}").status_code == 404

    def test_delete_keeps_owned_records_by_default(self, client, db_session):
        created = _create(client)
        client.post("/api/v1/tasks", json={
            "name": "Extract", "integrationId": created["id"], "type": "extract"
        })
        client.post(f"/api/v1/executions/integration/{created['id']}")

        client.delete(f"{BASE}/{created['id']}")

        integration_id = uuid.UUID(created["id"])
        assert db_session.query(Task).filter(Task.integration_id == integration_id).count() == 1
        assert (
            db_session.query(Execution).filter(Execution.integration_id == integration_id).count()
            == 1
        )

    def test_cascading_delete_removes_owned_records(self, client, db_session):
        created = _create(client)
        client.post("/api/v1/tasks", json={
            "name": "Extract", "integrationId": created["id"], "type": "extract"
        })
        execution = client.post(f"/api/v1/executions/integration/{created['id']}").json()["data"]
        client.post("/api/v1/logs", json={
            "executionId": execution["id"],
            "integrationId": created["id"],
            "message": "started",
        })

        response = client.delete(f"{BASE}/{created['id']}", params={"cascade": "true"})
        assert response.status_code == 200

        integration_id = uuid.UUID(created["id"])
        assert db_session.query(Task).filter(Task.integration_id == integration_id).count() == 0
        assert (
            db_session.query(Execution).filter(Execution.integration_id == integration_id).count()
            == 0
        )
        assert (
            db_session.query(LogEntry).filter(LogEntry.integration_id == integration_id).count()
            == 0
        )


class TestStatusAndStats:
    def test_set_status(self, client):
        created = _create(client)
        response = client.patch(f"{BASE}/{created['id']}/status", json={"status": "error"})
        assert response.status_code == 200
        assert response.json()["data"]["status"] == "error"

    def test_set_status_rejects_unknown_value(self, client):
        created = _create(client)
        response = client.patch(f"{BASE}/{created['id']}/status", json={"status": "broken"})
        assert response.status_code == 400

    def test_set_status_missing_returns_404(self, client):
        response = client.patch(f"{BASE}/{uuid.uuid4()}/status", json={"status": "active"})
        assert response.status_code == 404

    def test_stats_overview(self, client):
        _create(client, name="One API", type="API", status="active", frequency="daily")
        _create(client, name="Two API", type="API", status="error", frequency="hourly")
        _create(client, name="Three DB", type="DATABASE", status="active", frequency="daily")

        response = client.get(f"{BASE}/stats/overview")
        assert response.status_code == 200
        data = response.json()["data"]
        assert data["total"] == 3
        assert data["byStatus"] == {"active": 2, "inactive": 0, "error": 1, "warning": 0}
        assert data["byType"] == [
            {"type": "API", "count": 2},
            {"type": "DATABASE", "count": 1},
        ]
        assert data["byFrequency"] == [
            {"frequency": "daily", "count": 2},
            {"frequency": "hourly", "count": 1},
        ]

    def test_stats_on_empty_store(self, client):
        data = client.get(f"{BASE}/stats/overview").json()["data"]
        assert data["total"] == 0
        assert data["byStatus"] == {"active": 0, "inactive": 0, "error": 0, "warning": 0}
        assert data["byType"] == []


class TestIntegrationService:
    def test_create_duplicate_raises(self, db_session):
        service = IntegrationService(db_session)
        service.create(IntegrationCreate(**integration_payload()))
        with pytest.raises(DuplicateKeyError):
            service.create(IntegrationCreate(**integration_payload()))

    def test_get_missing_raises(self, db_session):
        with pytest.raises(NotFoundError):
            IntegrationService(db_session).get(uuid.uuid4())

    def test_update_missing_raises(self, db_session):
        with pytest.raises(NotFoundError):
            IntegrationService(db_session).update(uuid.uuid4(), IntegrationUpdate(owner="ops"))

    def test_reconcile_is_idempotent(self, db_session):
        service = IntegrationService(db_session)
        integration = service.create(IntegrationCreate(**integration_payload(status="active")))
        execution = Execution(
            integration_id=integration.id,
            start_time=utc_now(),
            end_time=utc_now(),
            status="failed",
        )
        db_session.add(execution)
        db_session.commit()

        first = service.reconcile_from_execution(execution)
        snapshot = (first.status, first.last_execution_status, first.last_execution_end_time)
        second = service.reconcile_from_execution(execution)

        assert snapshot[0] == "error"
        assert (second.status, second.last_execution_status, second.last_execution_end_time) == (
            snapshot
        )

    def test_reconcile_tolerates_deleted_integration(self, db_session):
        execution = Execution(integration_id=uuid.uuid4(), start_time=utc_now(), status="completed")
        db_session.add(execution)
        db_session.commit()
        assert IntegrationService(db_session).reconcile_from_execution(execution) is None


class TestDeriveIntegrationStatus:
    @pytest.mark.parametrize(
        ("current", "outcome", "expected"),
        [
            ("active", "failed", "error"),
            ("warning", "failed", "error"),
            ("active", "warning", "warning"),
            ("error", "warning", "warning"),
            ("error", "completed", "active"),
            ("warning", "completed", "warning"),
            ("inactive", "completed", "inactive"),
            ("active", "cancelled", "active"),
            ("error", "running", "error"),
        ],
    )
    def test_transitions(self, current, outcome, expected):
        assert derive_integration_status(current, outcome) == expected
