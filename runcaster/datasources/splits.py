"""HTTP relay implementation of the payout splitter."""

import logging
from typing import Any, Optional

import httpx

from .base import PayoutSplitter
from .http import send_with_retries, REQUEST_TIMEOUT

logger = logging.getLogger(__name__)

# Splits are created without a distributor incentive
DISTRIBUTOR_FEE = 0


class SplitsRelaySplitter(PayoutSplitter):
    """
    Payout splitter that forwards split operations to a signing relay.
    
    The relay holds the controller key and submits the transactions on
    chain; this client only describes what to send.
    """

    def __init__(
        self,
        relay_url: str,
        api_key: str = "",
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """
        Initialize the relay client.
        
        Args:
            relay_url: Base URL of the splits relay
            api_key: Bearer token for the relay, if it requires one
            transport: Optional transport override for the HTTP client
        """
        self.relay_url = relay_url.rstrip("/")
        self.api_key = api_key
        self._transport = transport
        self._client: Optional[httpx.AsyncClient] = None

    async def _get_client(self) -> httpx.AsyncClient:
        """Get or create the HTTP client."""
        if self._client is None:
            headers = {"Content-Type": "application/json"}
            if self.api_key:
                headers["Authorization"] = f"Bearer {self.api_key}"
            self._client = httpx.AsyncClient(
                base_url=self.relay_url,
                headers=headers,
                timeout=REQUEST_TIMEOUT,
                transport=self._transport,
            )
        return self._client

    async def _make_request(self, endpoint: str, payload: dict) -> dict:
        client = await self._get_client()
        response = await send_with_retries(client, "POST", endpoint, json=payload)
        data = response.json()
        return data if data else {}

    async def create_split(self, recipients: list[dict[str, Any]], controller: str) -> str:
        payload = {
            "recipients": recipients,
            "distributorFee": DISTRIBUTOR_FEE,
            "controller": controller,
        }
        data = await self._make_request("/splits/create", payload)
        split_address = data["splitAddress"]
        logger.info(f"Split created with address: {split_address}")
        return split_address

    async def update_split(
        self,
        split_address: str,
        recipients: list[dict[str, Any]],
        controller: str,
    ) -> dict:
        payload = {
            "splitAddress": split_address,
            "recipients": recipients,
            "distributorFee": DISTRIBUTOR_FEE,
            "controller": controller,
        }
        logger.info(f"Updating split {split_address} with {len(recipients)} recipients")
        return await self._make_request("/splits/update", payload)

    async def distribute_token(self, split_address: str, token: str) -> dict:
        payload = {
            "splitAddress": split_address,
            "token": token,
        }
        logger.info(f"Distributing {token} from split {split_address}")
        return await self._make_request("/splits/distribute", payload)

    async def close(self) -> None:
        """Close the HTTP client."""
        if self._client is not None:
            await self._client.aclose()
            self._client = None
