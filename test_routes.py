"""Tests for the HTTP API."""

import pytest
from fastapi.testclient import TestClient

from runcaster.app import create_app
from runcaster.config import Config


@pytest.fixture
def client(store, splitter):
    config = Config(admin_address="0xadmin")
    app = create_app(config, store=store, splitter=splitter)
    with TestClient(app) as test_client:
        yield test_client


def test_health(client):
    assert client.get("/health").json() == {"status": "healthy"}


def test_allocate_endpoint(client):
    participants = [{"address": f"0x{i}", "progress": 10 - i} for i in range(10)]

    response = client.post("/v1/rewards/allocate", json=participants)

    assert response.status_code == 200
    shares = [entry["shareBasisPoints"] for entry in response.json()]
    assert shares == [5000, 1500, 1500] + [285] * 7


def test_allocate_endpoint_empty(client):
    response = client.post("/v1/rewards/allocate", json=[])

    assert response.status_code == 200
    assert response.json() == []


def test_missing_challenge_is_404(client):
    response = client.get("/v1/challenges/missing")

    assert response.status_code == 404
    assert "missing" in response.json()["detail"]


def test_join_and_list_participants(client, store):
    challenge = store.add_challenge(id="c1")

    joined = client.post(
        "/v1/challenges/c1/join",
        json={"fid": 42, "userAddress": "0xaaa", "transactionHash": "0xtx"},
    )
    assert joined.status_code == 200
    assert joined.json()["has_paid"] is True

    listed = client.get("/v1/challenges/c1/participants", params={"paidOnly": True}).json()
    assert [p["user_address"] for p in listed] == ["0xaaa"]

    assert client.get("/v1/challenges/c1/joined", params={"fid": 42}).json() == {"joined": True}
    assert store.challenges[challenge["id"]]["is_active"] is True


def test_progress_update(client, store):
    challenge = store.add_challenge(id="c1")
    row = store.add_participant(challenge["id"], "0xaaa", progress=0.0)

    response = client.post(f"/v1/participants/{row['id']}/progress", json={"progress": 7.5})

    assert response.status_code == 200
    assert response.json()["current_progress"] == 7.5


def test_preview_and_distribute(client, store, splitter):
    store.add_challenge(id="c1", split_address="0xpool")
    store.add_participant("c1", "0xaaa", progress=5.0)

    preview = client.get("/v1/challenges/c1/allocation")
    assert preview.status_code == 200
    assert preview.json()["totalBasisPoints"] == 5000
    assert splitter.calls == []

    distributed = client.post("/v1/challenges/c1/distribute")
    assert distributed.status_code == 200
    assert distributed.json()["closed"] is True
    assert [name for name, _ in splitter.calls] == ["update", "distribute"]


def test_distribute_without_participants_is_409(client, store):
    store.add_challenge(id="c1")

    response = client.post("/v1/challenges/c1/distribute")

    assert response.status_code == 409


def test_pace_endpoint(client):
    response = client.get("/v1/pace", params={"distance": 5, "duration": 27.5, "type": "run"})

    assert response.json() == {"pace": "5:30/km"}


def test_community_stats_endpoint(client, store):
    store.activities = [{
        "id": "a1",
        "fid": 1,
        "user_address": "0xaaa",
        "type": "bike",
        "distance": 12.0,
        "duration": 30.0,
        "created_at": "2026-10-16T08:00:00+00:00",
        "is_public": True,
    }]

    stats = client.get("/v1/stats/community").json()

    assert stats["activitiesCount"] == 1
    assert stats["bikeCount"] == 1
    assert stats["totalDistance"] == 12.0


def test_pace_endpoint_speed_for_rides(client):
    response = client.get("/v1/pace", params={"distance": 30, "duration": 3600, "type": "bike", "unit": "seconds"})

    assert response.json() == {"pace": "30.0 km/h"}


def test_close_challenge(client, store, splitter):
    store.add_challenge(id="c1")

    response = client.post("/v1/challenges/c1/close")

    assert response.status_code == 200
    assert response.json()["is_active"] is False
    assert store.challenges["c1"]["is_active"] is False
    assert splitter.calls == []


def test_close_missing_challenge_is_404(client):
    response = client.post("/v1/challenges/missing/close")

    assert response.status_code == 404


def test_list_challenges_active_only_by_default(client, store):
    store.add_challenge(id="open", created_at="2026-10-02T00:00:00+00:00")
    store.add_challenge(id="closed", is_active=False, created_at="2026-10-03T00:00:00+00:00")

    active = client.get("/v1/challenges").json()
    everything = client.get("/v1/challenges", params={"activeOnly": False}).json()

    assert [c["id"] for c in active] == ["open"]
    assert [c["id"] for c in everything] == ["closed", "open"]
