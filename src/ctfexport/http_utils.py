"""HTTP utilities for the Contentful Management API with retry logic."""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Final, Mapping

import httpx

from ctfexport.config import (
    CTFEXPORT_FETCH_BACKOFF_S,
    CTFEXPORT_FETCH_MAX_RETRIES,
    CTFEXPORT_FETCH_TIMEOUT_S,
    CTFEXPORT_USER_AGENT,
)
from ctfexport.exceptions import AuthenticationError, FetchError, NotFoundError, RateLimitError

logger = logging.getLogger(__name__)

RETRY_STATUS_CODES: Final[frozenset[int]] = frozenset({429, 500, 502, 503, 504})

AUTH_STATUS_CODES: Final[frozenset[int]] = frozenset({401, 403})


def build_client(token: str) -> httpx.AsyncClient:
    """Create an ``httpx.AsyncClient`` authenticated with a management token."""
    return httpx.AsyncClient(
        timeout=httpx.Timeout(CTFEXPORT_FETCH_TIMEOUT_S),
        headers={
            "Authorization": f"Bearer {token}",
            "User-Agent": CTFEXPORT_USER_AGENT,
            "Content-Type": "application/vnd.contentful.management.v1+json",
        },
        follow_redirects=True,
    )


async def fetch_json(
    url: str,
    *,
    token: str,
    params: Mapping[str, Any] | None = None,
    client: httpx.AsyncClient | None = None,
    on_404: type[Exception] | None = None,
    on_404_message: str | None = None,
) -> Any:
    """GET a JSON resource with retry logic for transient failures.

    Args:
        url: The URL to fetch.
        token: Management token used when a new client has to be created.
        params: Optional query parameters.
        client: Optional shared client for connection pooling. If not
            provided, a new client is created for this request.
        on_404: Exception class to raise on 404. Defaults to NotFoundError.
        on_404_message: Custom error message for 404 responses.

    Returns:
        The decoded JSON body.

    Raises:
        NotFoundError (or custom on_404 exception): If the resource is missing.
        AuthenticationError: If the token is rejected.
        RateLimitError: If still rate limited after all retries.
        FetchError: If the request fails after all retries.
    """
    last_exc: Exception | None = None
    not_found_exc_class = on_404 or NotFoundError

    async def do_fetch(http_client: httpx.AsyncClient) -> Any:
        nonlocal last_exc

        for attempt in range(CTFEXPORT_FETCH_MAX_RETRIES + 1):
            try:
                response = await http_client.get(url, params=params)

                if response.status_code == 404:
                    raise not_found_exc_class(on_404_message or f"Resource not found at {url}")

                if response.status_code in AUTH_STATUS_CODES:
                    raise AuthenticationError(
                        f"HTTP {response.status_code} from {url}: check your management token"
                    )

                if response.status_code == 429:
                    last_exc = RateLimitError(f"Rate limited by {url}")
                elif response.status_code in RETRY_STATUS_CODES:
                    last_exc = FetchError(f"HTTP {response.status_code} from {url}")
                else:
                    response.raise_for_status()
                    try:
                        return response.json()
                    except ValueError as exc:
                        raise FetchError(f"Invalid JSON from {url}") from exc
            except (httpx.RequestError, httpx.HTTPStatusError) as exc:
                last_exc = exc

            if attempt < CTFEXPORT_FETCH_MAX_RETRIES:
                backoff = CTFEXPORT_FETCH_BACKOFF_S * (2**attempt)
                logger.debug("Retrying %s in %.2fs after %s", url, backoff, last_exc)
                await asyncio.sleep(backoff)

        if isinstance(last_exc, RateLimitError):
            raise last_exc
        raise FetchError(f"Failed to fetch {url}: {last_exc}")

    if client is not None:
        return await do_fetch(client)

    async with build_client(token) as new_client:
        return await do_fetch(new_client)
