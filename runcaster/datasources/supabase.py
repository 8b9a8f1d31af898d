"""Supabase (PostgREST) implementation of the challenge store."""

import logging
from datetime import datetime
from typing import Any, Optional

import httpx

from .base import ChallengeStore
from .http import send_with_retries, REQUEST_TIMEOUT

logger = logging.getLogger(__name__)

REST_PATH = "/rest/v1"

CHALLENGES_TABLE = "challenges"
PARTICIPANTS_TABLE = "challenge_participants"
ACTIVITIES_TABLE = "activities"


def _eq(value: Any) -> str:
    """Build a PostgREST equality filter."""
    if isinstance(value, bool):
        value = "true" if value else "false"
    return f"eq.{value}"


def _parse_content_range(header: Optional[str]) -> int:
    """Extract the total count from a Content-Range header like '0-4/5' or '*/0'."""
    if not header or "/" not in header:
        return 0
    total = header.rsplit("/", 1)[1]
    return int(total) if total.isdigit() else 0


class SupabaseDataSource(ChallengeStore):
    """
    Challenge store backed by the Supabase REST interface.
    
    Uses the service key for both the apikey and bearer headers, so the
    caller has admin access to the tables.
    """

    def __init__(
        self,
        supabase_url: str,
        service_key: str,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """
        Initialize Supabase data source.
        
        Args:
            supabase_url: Project URL, e.g. https://xyz.supabase.co
            service_key: Service role key
            transport: Optional transport override for the HTTP client
        """
        self.supabase_url = supabase_url.rstrip("/")
        self.service_key = service_key
        self._transport = transport
        self._client: Optional[httpx.AsyncClient] = None

    async def _get_client(self) -> httpx.AsyncClient:
        """Get or create the HTTP client."""
        if self._client is None:
            self._client = httpx.AsyncClient(
                base_url=self.supabase_url + REST_PATH,
                headers={
                    "apikey": self.service_key,
                    "Authorization": f"Bearer {self.service_key}",
                    "Content-Type": "application/json",
                },
                timeout=REQUEST_TIMEOUT,
                transport=self._transport,
            )
        return self._client

    async def _make_request(
        self,
        method: str,
        table: str,
        params: Optional[Any] = None,
        json: Optional[Any] = None,
        prefer: Optional[str] = None,
    ) -> httpx.Response:
        """Send a request against a table endpoint."""
        client = await self._get_client()
        headers = {"Prefer": prefer} if prefer else None
        return await send_with_retries(
            client, method, f"/{table}", params=params, json=json, headers=headers
        )

    async def _select(self, table: str, params: list[tuple[str, str]]) -> list[dict]:
        response = await self._make_request("GET", table, params=params)
        data = response.json()
        return data if data else []

    async def _insert(self, table: str, data: dict[str, Any]) -> dict:
        response = await self._make_request(
            "POST", table, json=[data], prefer="return=representation"
        )
        rows = response.json()
        return rows[0]

    async def _update(self, table: str, row_id: str, data: dict[str, Any]) -> Optional[dict]:
        response = await self._make_request(
            "PATCH",
            table,
            params=[("id", _eq(row_id))],
            json=data,
            prefer="return=representation",
        )
        rows = response.json()
        return rows[0] if rows else None

    async def insert_challenge(self, data: dict[str, Any]) -> dict:
        row = await self._insert(CHALLENGES_TABLE, data)
        logger.info(f"Created challenge {row.get('id')}: {row.get('title')}")
        return row

    async def update_challenge(self, challenge_id: str, data: dict[str, Any]) -> Optional[dict]:
        return await self._update(CHALLENGES_TABLE, challenge_id, data)

    async def get_challenge(self, challenge_id: str) -> Optional[dict]:
        rows = await self._select(
            CHALLENGES_TABLE,
            [("select", "*"), ("id", _eq(challenge_id))],
        )
        return rows[0] if rows else None

    async def list_challenges(self, active_only: bool = True) -> list[dict]:
        params = [("select", "*")]
        if active_only:
            params.append(("is_active", _eq(True)))
        params.append(("order", "created_at.desc"))
        return await self._select(CHALLENGES_TABLE, params)

    async def list_ended_challenges(
        self,
        ended_after: datetime,
        ended_before: datetime,
    ) -> list[dict]:
        return await self._select(
            CHALLENGES_TABLE,
            [
                ("select", "*"),
                ("is_active", _eq(True)),
                ("end_date", f"lt.{ended_before.isoformat()}"),
                ("end_date", f"gte.{ended_after.isoformat()}"),
                ("split_address", "not.is.null"),
            ],
        )

    async def insert_participant(self, data: dict[str, Any]) -> dict:
        return await self._insert(PARTICIPANTS_TABLE, data)

    async def update_participant(self, participant_id: str, data: dict[str, Any]) -> Optional[dict]:
        return await self._update(PARTICIPANTS_TABLE, participant_id, data)

    async def list_participants(
        self,
        challenge_id: str,
        paid_only: bool = False,
    ) -> list[dict]:
        params = [("select", "*"), ("challenge_id", _eq(challenge_id))]
        if paid_only:
            params.append(("has_paid", _eq(True)))
            params.append(("order", "current_progress.desc"))
        return await self._select(PARTICIPANTS_TABLE, params)

    async def list_participations(self, fid: int) -> list[dict]:
        return await self._select(
            PARTICIPANTS_TABLE,
            [("select", "*,challenges:challenge_id(*)"), ("fid", _eq(fid))],
        )

    async def count_participants(self, challenge_id: str, fid: int) -> int:
        response = await self._make_request(
            "HEAD",
            PARTICIPANTS_TABLE,
            params=[
                ("select", "*"),
                ("challenge_id", _eq(challenge_id)),
                ("fid", _eq(fid)),
            ],
            prefer="count=exact",
        )
        return _parse_content_range(response.headers.get("content-range"))

    async def list_public_activities(self, limit: Optional[int] = None) -> list[dict]:
        params = [
            ("select", "*"),
            ("is_public", _eq(True)),
            ("order", "created_at.desc"),
        ]
        if limit is not None:
            params.append(("limit", str(limit)))
        return await self._select(ACTIVITIES_TABLE, params)

    async def close(self) -> None:
        """Close the HTTP client."""
        if self._client is not None:
            await self._client.aclose()
            self._client = None
