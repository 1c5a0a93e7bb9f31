"""Tests for the tracker HTTP API."""

from __future__ import annotations

import pytest
from fastapi.testclient import TestClient

from botguard.api.server import create_app
from botguard.errors import StoreError
from botguard.scoring.models import ReputationState
from botguard.storage.memory import MemoryStore
from botguard.tracker import IdentityTracker

IP = "198.51.100.7"
RESET_KEY = "s3cret"


class BrokenStore(MemoryStore):
    def save(self, identity: str, state: ReputationState) -> None:
        raise StoreError("primary unreachable")


@pytest.fixture
def client(tracker) -> TestClient:
    app = create_app(config={"server": {"reset_key": RESET_KEY}}, tracker=tracker)
    return TestClient(app)


def _url(operation: str, identity: str = IP) -> str:
    return f"/trackers/{identity}/{operation}"


class TestOperations:
    def test_record_violation(self, client):
        response = client.post(_url("record-violation"))
        assert response.status_code == 200
        data = response.json()
        assert data["count"] == 1
        assert data["status"] == "temp-1"
        assert data["ttlSeconds"] == 600

    def test_check_locale(self, client):
        client.post(_url("check-locale"), json={"path": "/en-jp"})
        response = client.post(_url("check-locale"), json={"path": "/fr-fr"})
        assert response.status_code == 200
        data = response.json()
        assert data["violation"] is True
        assert data["count"] == 2
        assert data["multiLangRule"] is False

    def test_track_behavior(self, client):
        response = client.post(_url("track-behavior"), json={"path": "/products/tee"})
        data = response.json()
        assert data == {
            "count": 0,
            "requestCount": 1,
            "uniquePaths": 1,
            "violations": {"rate_limit": False, "path_diversity": False},
            "action": "ALLOW",
        }

    def test_rate_limit(self, client):
        results = [client.post(_url("rate-limit")).json()["allowed"] for _ in range(11)]
        assert results == [True] * 10 + [False]

    def test_update_score(self, client):
        response = client.post(_url("update-score"), json={"scoreToAdd": 75})
        assert response.json() == {"newScore": 75.0, "action": "TEMP_BLOCK"}

        response = client.post(_url("update-score"), json={"scoreToAdd": 0})
        assert response.json()["action"] == "PERMANENT_BLOCK"

    def test_update_score_with_thresholds(self, client):
        body = {"scoreToAdd": 12, "config": {"thresholds": {"challenge": 10, "block": 50}}}
        response = client.post(_url("update-score"), json=body)
        assert response.json()["action"] == "CHALLENGE"

    def test_inspect(self, client):
        response = client.post(_url("inspect"), json={"path": "/", "country": "JP"})
        data = response.json()
        assert data["action"] == "ALLOW"
        assert data["counters"]["rate_limit"] == 1

    def test_get_state(self, client):
        client.post(_url("check-locale"), json={"path": "/en-jp"})
        response = client.get(_url("get-state"))
        assert response.status_code == 200
        data = response.json()
        assert data["score"] == 0
        assert data["hasStrike"] is False
        assert list(data["localeRegions"]) == ["en-jp"]
        assert "rateWindow" in data


class TestErrors:
    def test_unknown_operation(self, client):
        assert client.post(_url("list-high-count")).status_code == 404

    def test_malformed_json(self, client):
        response = client.post(
            _url("check-locale"),
            content="{not json",
            headers={"Content-Type": "application/json"},
        )
        assert response.status_code == 400

    def test_missing_field(self, client):
        response = client.post(_url("update-score"), json={"score": 5})
        assert response.status_code == 400

    @pytest.mark.parametrize("config", [
        {"thresholds": {"block": "abc"}},
        {"thresholds": 5},
        {"thresholds": {"challenge": [10]}},
    ])
    def test_malformed_threshold_overrides(self, client, config):
        response = client.post(_url("update-score"), json={"scoreToAdd": 10, "config": config})
        assert response.status_code == 400
        assert client.get(_url("get-state")).json()["score"] == 0

    def test_reset_requires_key(self, client):
        assert client.post(_url("reset-state")).status_code == 401
        assert client.post(_url("reset-state"), params={"key": "wrong"}).status_code == 401

    def test_reset_with_key(self, client):
        client.post(_url("update-score"), json={"scoreToAdd": 30})
        response = client.post(_url("reset-state"), params={"key": RESET_KEY})
        assert response.status_code == 200
        assert response.json() == {"reset": True, "existed": True}
        assert client.get(_url("get-state")).json()["score"] == 0

    def test_reset_refused_without_configured_key(self, tracker):
        client = TestClient(create_app(config={}, tracker=tracker))
        assert client.post(_url("reset-state"), params={"key": ""}).status_code == 401

    def test_store_failure_is_internal_error(self, sink, clock):
        tracker = IdentityTracker(BrokenStore(), sink=sink, clock=clock)
        client = TestClient(create_app(config={}, tracker=tracker))
        response = client.post(_url("update-score"), json={"scoreToAdd": 80})
        assert response.status_code == 500
        assert "action" not in response.json()
