"""Remote store client for ClinicSync.

The remote store is a single JSON document at a fixed URL. It is read with
GET and replaced wholesale with PUT. The server has no logic beyond storing
and returning the blob.

Every attempt is bounded by a wall-clock timeout. Failed attempts are
retried with a linearly growing delay (0s, step, 2*step, ...) up to a fixed
number of attempts, after which a single RetriesExhausted is raised. A GET
answered with 404 raises RemoteNotInitialized immediately.

This client is stateless: it never touches the local replica or sync state.

CRITICAL: This module must have NO Qt/PySide6 dependencies.
"""

from __future__ import annotations

import asyncio
import json
import logging
from typing import Any, Awaitable, Callable, Dict, Optional

import httpx
from uuid6 import uuid7

from .errors import (
    HttpError,
    OfflineError,
    ParseError,
    RemoteNotInitialized,
    RequestTimeout,
    RetriesExhausted,
    TransportError,
)
from .models import Snapshot

logger = logging.getLogger(__name__)

__all__ = ["RemoteStoreClient", "backoff_delay"]

CACHE_BUST_PARAM = "_cb"

NO_CACHE_HEADERS = {
    "Cache-Control": "no-cache, no-store, must-revalidate",
    "Pragma": "no-cache",
    "Accept": "application/json",
}


def backoff_delay(attempt: int, step: float) -> float:
    """Delay before a 1-based attempt: 0 for the first, then step * (attempt - 1)."""
    return max(0.0, step * (attempt - 1))


class RemoteStoreClient:
    """Bounded-time GET/PUT of the shared remote document.

    Attributes:
        url: URL of the remote document
        timeout: Per-attempt deadline in seconds
        max_attempts: Attempts per call before giving up
        backoff_step: Delay increment between attempts in seconds
    """

    def __init__(
        self,
        url: str,
        timeout: float = 15.0,
        max_attempts: int = 3,
        backoff_step: float = 2.0,
        is_online: Optional[Callable[[], bool]] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        sleep: Callable[[float], Awaitable[Any]] = asyncio.sleep,
    ) -> None:
        """Initialize the client.

        Args:
            url: URL of the remote document. Empty means no remote is
                configured, which behaves like being offline.
            timeout: Per-attempt deadline in seconds
            max_attempts: Attempts per call (at least 1)
            backoff_step: Delay increment between attempts in seconds
            is_online: Connectivity probe; None means assume online
            transport: Custom httpx transport (used by tests)
            sleep: Coroutine used for backoff delays
        """
        if max_attempts < 1:
            raise ValueError("max_attempts must be at least 1")
        self.url = url
        self.timeout = timeout
        self.max_attempts = max_attempts
        self.backoff_step = backoff_step
        self._is_online = is_online
        self._transport = transport
        self._sleep = sleep

    def is_online(self) -> bool:
        """Check whether a request may be attempted at all."""
        if not self.url:
            return False
        if self._is_online is None:
            return True
        return bool(self._is_online())

    async def fetch_snapshot(self) -> Snapshot:
        """Fetch the remote document.

        Raises:
            OfflineError: The device is offline; nothing was attempted
            RemoteNotInitialized: The document does not exist yet
            RetriesExhausted: Every attempt failed
        """
        document = await self._with_retry("GET", self._get_once)
        return Snapshot.from_document(document)

    async def put_snapshot(self, snapshot: Snapshot) -> None:
        """Replace the remote document.

        Raises:
            OfflineError: The device is offline; nothing was attempted
            RetriesExhausted: Every attempt failed
        """
        body = json.dumps(snapshot.to_document()).encode("utf-8")

        async def put_once(client: httpx.AsyncClient) -> None:
            await self._put_once(client, body)

        await self._with_retry("PUT", put_once)

    async def _with_retry(
        self,
        method: str,
        attempt_fn: Callable[[httpx.AsyncClient], Awaitable[Any]],
    ) -> Any:
        if not self.is_online():
            raise OfflineError()

        last_error: Optional[TransportError] = None
        async with httpx.AsyncClient(
            transport=self._transport,
            headers=NO_CACHE_HEADERS,
            timeout=httpx.Timeout(self.timeout),
        ) as client:
            for attempt in range(1, self.max_attempts + 1):
                delay = backoff_delay(attempt, self.backoff_step)
                if delay > 0:
                    await self._sleep(delay)
                try:
                    return await attempt_fn(client)
                except RemoteNotInitialized:
                    raise
                except TransportError as e:
                    last_error = e
                    logger.warning(
                        f"{method} {self.url} failed (attempt {attempt}/{self.max_attempts}): {e}"
                    )

        raise RetriesExhausted(self.max_attempts, last_error) from last_error

    async def _send(
        self, client: httpx.AsyncClient, method: str, **kwargs: Any
    ) -> httpx.Response:
        params = {CACHE_BUST_PARAM: uuid7().hex}
        try:
            return await asyncio.wait_for(
                client.request(method, self.url, params=params, **kwargs),
                timeout=self.timeout,
            )
        except (asyncio.TimeoutError, httpx.TimeoutException) as e:
            raise RequestTimeout(self.url, self.timeout) from e
        except httpx.HTTPError as e:
            raise TransportError(f"Connection to {self.url} failed: {e}") from e

    async def _get_once(self, client: httpx.AsyncClient) -> Dict[str, Any]:
        response = await self._send(client, "GET")
        if response.status_code == 404:
            raise RemoteNotInitialized()
        if not response.is_success:
            raise HttpError(response.status_code, response.reason_phrase)

        try:
            document = response.json()
        except ValueError as e:
            raise ParseError(f"Response from {self.url} is not valid JSON: {e}") from e

        if document is None:
            raise RemoteNotInitialized()
        if not isinstance(document, dict):
            raise ParseError(
                f"Expected a JSON object from {self.url}, got {type(document).__name__}"
            )
        return document

    async def _put_once(self, client: httpx.AsyncClient, body: bytes) -> None:
        response = await self._send(
            client,
            "PUT",
            content=body,
            headers={"Content-Type": "application/json"},
        )
        if not response.is_success:
            raise HttpError(response.status_code, response.reason_phrase)
