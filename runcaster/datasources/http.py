"""Shared HTTP request handling for the external collaborators."""

import asyncio
import logging
from typing import Any, Optional

import httpx

logger = logging.getLogger(__name__)

REQUEST_TIMEOUT = 30.0
MAX_RETRIES = 5
RETRY_DELAY = 2.0
RATE_LIMIT_DELAY = 0.5


async def send_with_retries(
    client: httpx.AsyncClient,
    method: str,
    url: str,
    params: Optional[Any] = None,
    json: Optional[Any] = None,
    headers: Optional[dict[str, str]] = None,
    retry_count: int = 0,
) -> httpx.Response:
    """
    Send a request, retrying timeouts and rate limits.
    
    Args:
        client: HTTP client with base_url set
        method: HTTP method
        url: Path relative to the client's base_url
        params: Query parameters
        json: JSON body
        headers: Extra headers for this request
        retry_count: Current retry attempt
        
    Returns:
        The successful response
        
    Raises:
        httpx.TimeoutException: after MAX_RETRIES timeouts
        httpx.HTTPStatusError: on any other non-2xx response
    """
    try:
        response = await client.request(
            method,
            url,
            params=params,
            json=json,
            headers=headers,
            timeout=REQUEST_TIMEOUT,
        )
        response.raise_for_status()
        return response

    except httpx.TimeoutException as e:
        if retry_count < MAX_RETRIES:
            logger.warning(
                f"{method} {url} timed out (attempt {retry_count + 1}/{MAX_RETRIES}). "
                f"Retrying in {RETRY_DELAY}s..."
            )
            await asyncio.sleep(RETRY_DELAY)
            return await send_with_retries(
                client, method, url, params, json, headers, retry_count + 1
            )
        logger.error(f"{method} {url} failed after {MAX_RETRIES} retries: {e}")
        raise

    except httpx.HTTPStatusError as e:
        # Handle rate limiting (429 Too Many Requests)
        if e.response.status_code == 429 and retry_count < MAX_RETRIES:
            logger.warning(
                f"Rate limited (429) on {url} (attempt {retry_count + 1}/{MAX_RETRIES}). "
                f"Retrying in {RATE_LIMIT_DELAY}s..."
            )
            await asyncio.sleep(RATE_LIMIT_DELAY)
            return await send_with_retries(
                client, method, url, params, json, headers, retry_count + 1
            )

        logger.error(f"HTTP error {e.response.status_code} for {method} {url}: {e.response.text}")
        raise
