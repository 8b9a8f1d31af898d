"""Tests for the Supabase store and splits relay HTTP clients."""

import asyncio
import json
from datetime import datetime, timezone

import httpx
import pytest

from runcaster.datasources import SupabaseDataSource, SplitsRelaySplitter
from runcaster.datasources import http as http_module

SUPABASE_URL = "https://project.supabase.co"
SERVICE_KEY = "service-key"


class Recorder:
    """MockTransport handler that records requests and replays responses."""

    def __init__(self, *responses: httpx.Response):
        self.requests: list[httpx.Request] = []
        self.responses = list(responses)

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        return self.responses.pop(0)


def run_with_store(recorder: Recorder, call):
    async def go():
        store = SupabaseDataSource(SUPABASE_URL, SERVICE_KEY, transport=httpx.MockTransport(recorder))
        try:
            return await call(store)
        finally:
            await store.close()
    return asyncio.run(go())


def test_get_challenge_builds_filter_and_auth_headers():
    recorder = Recorder(httpx.Response(200, json=[{"id": "c1", "title": "Weekly 20K"}]))

    row = run_with_store(recorder, lambda s: s.get_challenge("c1"))

    request = recorder.requests[0]
    assert row["title"] == "Weekly 20K"
    assert request.method == "GET"
    assert request.url.path == "/rest/v1/challenges"
    assert request.url.params["id"] == "eq.c1"
    assert request.headers["apikey"] == SERVICE_KEY
    assert request.headers["authorization"] == f"Bearer {SERVICE_KEY}"


def test_get_missing_challenge_returns_none():
    recorder = Recorder(httpx.Response(200, json=[]))

    assert run_with_store(recorder, lambda s: s.get_challenge("nope")) is None


def test_paid_participants_are_ordered_by_progress():
    recorder = Recorder(httpx.Response(200, json=[]))

    run_with_store(recorder, lambda s: s.list_participants("c1", paid_only=True))

    params = recorder.requests[0].url.params
    assert params["challenge_id"] == "eq.c1"
    assert params["has_paid"] == "eq.true"
    assert params["order"] == "current_progress.desc"


def test_ended_challenges_window_filters():
    recorder = Recorder(httpx.Response(200, json=[]))
    after = datetime(2026, 10, 11, tzinfo=timezone.utc)
    before = datetime(2026, 10, 12, tzinfo=timezone.utc)

    run_with_store(recorder, lambda s: s.list_ended_challenges(after, before))

    params = recorder.requests[0].url.params
    assert params.get_list("end_date") == [
        "lt.2026-10-12T00:00:00+00:00",
        "gte.2026-10-11T00:00:00+00:00",
    ]
    assert params["is_active"] == "eq.true"
    assert params["split_address"] == "not.is.null"


def test_update_challenge_returns_representation():
    recorder = Recorder(httpx.Response(200, json=[{"id": "c1", "is_active": False}]))

    row = run_with_store(recorder, lambda s: s.update_challenge("c1", {"is_active": False}))

    request = recorder.requests[0]
    assert row == {"id": "c1", "is_active": False}
    assert request.method == "PATCH"
    assert request.headers["prefer"] == "return=representation"
    assert json.loads(request.content) == {"is_active": False}


def test_insert_participant_posts_a_row_list():
    recorder = Recorder(httpx.Response(201, json=[{"id": "p1", "fid": 7}]))

    row = run_with_store(recorder, lambda s: s.insert_participant({"fid": 7}))

    assert row["id"] == "p1"
    assert json.loads(recorder.requests[0].content) == [{"fid": 7}]


def test_count_participants_reads_content_range():
    recorder = Recorder(httpx.Response(200, headers={"Content-Range": "*/3"}))

    count = run_with_store(recorder, lambda s: s.count_participants("c1", 7))

    request = recorder.requests[0]
    assert count == 3
    assert request.method == "HEAD"
    assert request.headers["prefer"] == "count=exact"


def test_rate_limit_is_retried(monkeypatch):
    monkeypatch.setattr(http_module, "RATE_LIMIT_DELAY", 0)
    recorder = Recorder(
        httpx.Response(429),
        httpx.Response(200, json=[{"id": "c1"}]),
    )

    row = run_with_store(recorder, lambda s: s.get_challenge("c1"))

    assert row == {"id": "c1"}
    assert len(recorder.requests) == 2


def test_server_error_is_raised():
    recorder = Recorder(httpx.Response(500, text="boom"))

    with pytest.raises(httpx.HTTPStatusError):
        run_with_store(recorder, lambda s: s.list_challenges())


def test_splits_relay_payloads():
    recorder = Recorder(
        httpx.Response(200, json={"splitAddress": "0xnew"}),
        httpx.Response(200, json={"txHash": "0x1"}),
        httpx.Response(200, json={"txHash": "0x2"}),
    )
    recipients = [{"address": "0xaaa", "percentAllocation": 5000}]

    async def go():
        splitter = SplitsRelaySplitter(
            "https://relay.test",
            api_key="relay-key",
            transport=httpx.MockTransport(recorder),
        )
        try:
            address = await splitter.create_split(recipients, controller="0xadmin")
            await splitter.update_split("0xpool", recipients, controller="0xadmin")
            await splitter.distribute_token("0xpool", token="0xusdc")
            return address
        finally:
            await splitter.close()

    assert asyncio.run(go()) == "0xnew"

    create, update, distribute = recorder.requests
    assert create.url.path == "/splits/create"
    assert create.headers["authorization"] == "Bearer relay-key"
    assert json.loads(update.content) == {
        "splitAddress": "0xpool",
        "recipients": recipients,
        "distributorFee": 0,
        "controller": "0xadmin",
    }
    assert json.loads(distribute.content) == {"splitAddress": "0xpool", "token": "0xusdc"}
