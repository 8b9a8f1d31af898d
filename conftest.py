"""Shared fixtures: in-memory stand-ins for the store and splitter."""

import uuid
from datetime import datetime
from typing import Any, Optional

import httpx
import pytest

from runcaster.datasources import ChallengeStore, PayoutSplitter


class InMemoryStore(ChallengeStore):
    """Challenge store keeping rows in dicts."""

    def __init__(self):
        self.challenges: dict[str, dict] = {}
        self.participants: dict[str, dict] = {}
        self.activities: list[dict] = []

    def add_challenge(self, **fields) -> dict:
        row = {
            "id": fields.pop("id", str(uuid.uuid4())),
            "title": "Weekly 20K",
            "description": "",
            "activity_type": "run",
            "target_value": 20,
            "target_unit": "km",
            "start_date": "2026-10-05T00:00:00+00:00",
            "end_date": "2026-10-11T23:59:59.999000+00:00",
            "entry_fee": 1,
            "split_address": "0xsplit",
            "is_active": True,
            "created_at": "2026-10-01T00:00:00+00:00",
        }
        row.update(fields)
        self.challenges[row["id"]] = row
        return row

    def add_participant(self, challenge_id: str, address: str, progress: float, paid: bool = True) -> dict:
        row = {
            "id": str(uuid.uuid4()),
            "challenge_id": challenge_id,
            "fid": len(self.participants) + 1,
            "user_address": address,
            "joined_at": "2026-10-06T00:00:00+00:00",
            "current_progress": progress,
            "has_paid": paid,
            "transaction_hash": "0xtx" if paid else None,
        }
        self.participants[row["id"]] = row
        return row

    async def insert_challenge(self, data: dict[str, Any]) -> dict:
        return self.add_challenge(**data)

    async def update_challenge(self, challenge_id: str, data: dict[str, Any]) -> Optional[dict]:
        row = self.challenges.get(challenge_id)
        if row is None:
            return None
        row.update(data)
        return row

    async def get_challenge(self, challenge_id: str) -> Optional[dict]:
        return self.challenges.get(challenge_id)

    async def list_challenges(self, active_only: bool = True) -> list[dict]:
        rows = [r for r in self.challenges.values() if r["is_active"] or not active_only]
        return sorted(rows, key=lambda r: r["created_at"], reverse=True)

    async def list_ended_challenges(self, ended_after: datetime, ended_before: datetime) -> list[dict]:
        return [
            r for r in self.challenges.values()
            if r["is_active"]
            and r["split_address"]
            and ended_after <= datetime.fromisoformat(r["end_date"]) < ended_before
        ]

    async def insert_participant(self, data: dict[str, Any]) -> dict:
        row = {"id": str(uuid.uuid4()), "joined_at": "2026-10-06T00:00:00+00:00", **data}
        self.participants[row["id"]] = row
        return row

    async def update_participant(self, participant_id: str, data: dict[str, Any]) -> Optional[dict]:
        row = self.participants.get(participant_id)
        if row is None:
            return None
        row.update(data)
        return row

    async def list_participants(self, challenge_id: str, paid_only: bool = False) -> list[dict]:
        rows = [r for r in self.participants.values() if r["challenge_id"] == challenge_id]
        if paid_only:
            rows = [r for r in rows if r["has_paid"]]
            rows.sort(key=lambda r: r["current_progress"], reverse=True)
        return rows

    async def list_participations(self, fid: int) -> list[dict]:
        return [
            {**r, "challenges": self.challenges.get(r["challenge_id"])}
            for r in self.participants.values()
            if r["fid"] == fid
        ]

    async def count_participants(self, challenge_id: str, fid: int) -> int:
        return sum(
            1 for r in self.participants.values()
            if r["challenge_id"] == challenge_id and r["fid"] == fid
        )

    async def list_public_activities(self, limit: Optional[int] = None) -> list[dict]:
        rows = [a for a in self.activities if a.get("is_public", True)]
        rows.sort(key=lambda a: a["created_at"], reverse=True)
        return rows[:limit] if limit is not None else rows


class RecordingSplitter(PayoutSplitter):
    """Splitter that records calls and can be told to fail for some splits."""

    def __init__(self):
        self.calls: list[tuple[str, dict]] = []
        self.failing: set[str] = set()

    def _check(self, split_address: str) -> None:
        if split_address in self.failing:
            request = httpx.Request("POST", "https://relay.test/splits/update")
            response = httpx.Response(500, request=request)
            raise httpx.HTTPStatusError("relay error", request=request, response=response)

    async def create_split(self, recipients: list[dict[str, Any]], controller: str) -> str:
        self.calls.append(("create", {"recipients": recipients, "controller": controller}))
        return f"0xsplit{len(self.calls)}"

    async def update_split(self, split_address: str, recipients: list[dict[str, Any]], controller: str) -> dict:
        self._check(split_address)
        self.calls.append(("update", {
            "split_address": split_address,
            "recipients": recipients,
            "controller": controller,
        }))
        return {"status": "ok"}

    async def distribute_token(self, split_address: str, token: str) -> dict:
        self._check(split_address)
        self.calls.append(("distribute", {"split_address": split_address, "token": token}))
        return {"status": "ok"}


@pytest.fixture
def store() -> InMemoryStore:
    return InMemoryStore()


@pytest.fixture
def splitter() -> RecordingSplitter:
    return RecordingSplitter()
