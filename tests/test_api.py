"""
Tests for the HTTP API using FastAPI's TestClient.
"""

import sys
import os

import pytest
from fastapi.testclient import TestClient

# Add project root to path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from league_scheduler.main import app
from league_scheduler.api import routes
from league_scheduler.core.errors import PersistenceFailure
from league_scheduler.services.game_store import InMemoryGameStore
from league_scheduler.services.locks import DivisionLockRegistry
from league_scheduler.services.regeneration import ScheduleRegenerationService

CONFIG = {
    "weekday": "Tuesday",
    "start_time": "18:00",
    "end_time": "20:00",
    "start_date": "2024-01-02",
    "week_count": 10,
    "blackouts": [{"start": "2024-02-13", "end": "2024-02-13", "label": "Presidents week"}],
    "location_id": "gym-1",
}


@pytest.fixture
def store():
    return InMemoryGameStore()


@pytest.fixture
def client(store):
    service = ScheduleRegenerationService(game_store=store, locks=DivisionLockRegistry(timeout_s=0.05))
    app.dependency_overrides[routes.get_service] = lambda: service
    yield TestClient(app)
    app.dependency_overrides.clear()


def test_health(client):
    response = client.get("/api/health")
    assert response.status_code == 200
    assert response.json()["status"] == "healthy"


def test_validate_reports_violations(client):
    response = client.post("/api/schedule/validate", json={**CONFIG, "start_time": "21:00"})
    assert response.status_code == 200
    body = response.json()
    assert body["is_valid"] is False
    assert [v["code"] for v in body["violations"]] == ["time_range_inverted"]


def test_preview_returns_slots(client):
    response = client.post("/api/schedule/preview", json=CONFIG)
    assert response.status_code == 200
    body = response.json()
    assert body["total_weeks"] == 10
    assert body["slots"][0]["date"] == "2024-01-02"
    assert body["slots"][0]["day"] == "Tuesday"
    assert body["slots"][-1]["date"] == "2024-03-05"


def test_preview_with_byes(client):
    response = client.post("/api/schedule/preview?include_byes=true", json=CONFIG)
    slots = response.json()["slots"]
    assert len(slots) == 11
    assert slots[6]["is_bye"] is True
    assert slots[6]["week_number"] is None


def test_invalid_config_maps_to_422(client):
    response = client.post("/api/schedule/preview", json={**CONFIG, "week_count": 0})
    assert response.status_code == 422
    body = response.json()
    assert body["error"] == "INVALID_CONFIG"
    assert body["violations"][0]["code"] == "week_count_out_of_range"


def test_regenerate_persists_and_is_idempotent(client, store):
    first = client.post("/api/divisions/div-1/schedule/regenerate", json=CONFIG)
    assert first.status_code == 200
    assert first.json()["created"] == 10
    assert len(store.list_games_for_division("div-1")) == 10

    second = client.post("/api/divisions/div-1/schedule/regenerate", json=CONFIG)
    assert second.json()["created"] == 0
    assert second.json()["updated"] == 0


def test_persistence_failure_maps_to_503(client, store, monkeypatch):
    def reject(create, update, delete):
        raise PersistenceFailure.for_division("div-1", RuntimeError("boom"))

    monkeypatch.setattr(store, "apply_batch", reject)
    response = client.post("/api/divisions/div-1/schedule/regenerate", json=CONFIG)
    assert response.status_code == 503
    assert response.json()["error"] == "PERSISTENCE_FAILURE"


def test_conflict_check(client):
    games = [
        {"id": "a", "division_id": "d1", "date": "2024-01-09", "start_time": "18:00",
         "end_time": "20:00", "location_id": "gym-1"},
        {"id": "b", "division_id": "d2", "date": "2024-01-09", "start_time": "19:00",
         "end_time": "21:00", "location_id": "gym-1"},
    ]
    response = client.post("/api/schedule/conflicts", json={"games": games})
    assert response.status_code == 200
    body = response.json()
    assert body["total_conflicts"] == 1
    assert body["conflicts"][0]["overlap"] == "19:00 - 20:00"


def test_progress(client):
    client.post("/api/divisions/div-1/schedule/regenerate", json=CONFIG)
    response = client.post("/api/divisions/div-1/schedule/progress", json=CONFIG)
    assert response.status_code == 200
    body = response.json()
    assert body["total_weeks"] == 10
    assert body["scheduled_weeks"] == 10
    assert body["status"] == "complete"


def test_async_regeneration_queues_task(client, monkeypatch):
    calls = []

    class FakeTask:
        id = "task-123"

    class FakeTaskFn:
        def delay(self, division_id, payload):
            calls.append((division_id, payload))
            return FakeTask()

    monkeypatch.setattr(routes, "regenerate_schedule_task", FakeTaskFn())
    response = client.post("/api/divisions/div-1/schedule/regenerate/async", json=CONFIG)

    assert response.status_code == 200
    assert response.json()["task_id"] == "task-123"
    assert calls[0][0] == "div-1"
    assert calls[0][1]["weekday"] == "Tuesday"
    assert calls[0][1]["start_date"] == "2024-01-02"
