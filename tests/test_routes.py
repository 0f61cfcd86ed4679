"""
Tests for the HTTP routes, with the habit service swapped for one backed by
the in-memory store and a pinned clock (2024-06-12)
"""
import pytest
from fastapi.testclient import TestClient

from lifedash.core.dependencies import get_habit_service
from lifedash.main import app
from tests.conftest import completed

HEADERS = {"X-User-Id": "u1"}


@pytest.fixture
def client(service):
    app.dependency_overrides[get_habit_service] = lambda: service
    yield TestClient(app)
    app.dependency_overrides.clear()


def create(client, **body):
    body.setdefault("name", "Read")
    response = client.post("/habits", json=body, headers=HEADERS)
    assert response.status_code == 201
    return response.json()


class TestHealth:

    def test_health_check(self, client):
        response = client.get("/health")
        assert response.status_code == 200
        assert response.json()["status"] == "ok"


class TestHabitRoutes:
    """Tests for the /habits endpoints."""

    def test_missing_owner_header(self, client):
        assert client.get("/habits").status_code == 401

    def test_create_habit(self, client):
        habit = create(client, name="Exercise", active_days=[1, 2, 3, 4, 5])
        assert habit["name"] == "Exercise"
        assert habit["active_days"] == [1, 2, 3, 4, 5]
        assert habit["history"] == []

    @pytest.mark.parametrize("body", [
        {"name": "Read", "active_days": []},
        {"name": "Read", "active_days": [7]},
        {"name": "   "},
        {},
    ])
    def test_create_habit_validation(self, client, body):
        assert client.post("/habits", json=body, headers=HEADERS).status_code == 422

    def test_cycle_today(self, client):
        habit = create(client)
        response = client.post(f"/habits/{habit['id']}/cycle", headers=HEADERS)
        assert response.status_code == 200
        assert response.json()["history"] == [{"date": "2024-06-12", "status": "completed"}]

    def test_cycle_specific_date(self, client):
        habit = create(client)
        response = client.post(f"/habits/{habit['id']}/cycle", json={"date": "2024-06-10"}, headers=HEADERS)
        assert response.json()["history"][0]["date"] == "2024-06-10"

    def test_cycle_future_date(self, client):
        habit = create(client)
        response = client.post(f"/habits/{habit['id']}/cycle", json={"date": "2024-06-20"}, headers=HEADERS)
        assert response.status_code == 400

    def test_cycle_unknown_habit(self, client):
        assert client.post("/habits/missing/cycle", headers=HEADERS).status_code == 404

    def test_other_owner_gets_404(self, client):
        habit = create(client)
        response = client.post(f"/habits/{habit['id']}/cycle", headers={"X-User-Id": "u2"})
        assert response.status_code == 404

    def test_update_active_days(self, client):
        habit = create(client)
        response = client.put(f"/habits/{habit['id']}/active-days", json={"active_days": [6, 0]}, headers=HEADERS)
        assert response.status_code == 200
        assert response.json()["active_days"] == [0, 6]

    def test_update_active_days_empty(self, client):
        habit = create(client)
        response = client.put(f"/habits/{habit['id']}/active-days", json={"active_days": []}, headers=HEADERS)
        assert response.status_code == 422

    def test_reset(self, client, store):
        record = store.create({"user_id": "u1", "name": "Read", "history": [completed("2024-06-11")]})
        response = client.post(f"/habits/{record['id']}/reset", headers=HEADERS)
        assert response.status_code == 200
        assert response.json()["history"] == []
        assert response.json()["tracking_start_date"] == "2024-06-12"

    def test_mark_missed(self, client):
        create(client)
        response = client.post("/habits/mark-missed", headers=HEADERS)
        assert response.json() == {"status": "success", "updated": 1}

    def test_list_overview(self, client, store):
        store.create({"user_id": "u1", "name": "Read", "history": [completed("2024-06-11")]})
        response = client.get("/habits", headers=HEADERS)
        assert response.status_code == 200

        [item] = response.json()
        assert item["habit"]["name"] == "Read"
        assert item["streak"] == 1
        assert item["today_status"] is None
        assert len(item["weekly"]) == 7
        assert item["success_rate"]["rate"] == 50

    def test_analytics(self, client, store):
        store.create({"user_id": "u1", "name": "Read", "history": [completed("2024-06-12")]})
        response = client.get("/habits/analytics", params={"week_offset": -1}, headers=HEADERS)
        assert response.status_code == 200
        body = response.json()
        assert body["today"]["completed"] == 1
        assert body["week"][0]["date"] == "2024-06-03"

    def test_delete(self, client):
        habit = create(client)
        assert client.delete(f"/habits/{habit['id']}", headers=HEADERS).status_code == 200
        assert client.get("/habits", headers=HEADERS).json() == []
        assert client.delete(f"/habits/{habit['id']}", headers=HEADERS).status_code == 404
