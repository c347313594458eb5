"""Error taxonomy for the sync engine.

Transport errors are retried inside the remote client and surface to the
orchestrator as a single RetriesExhausted. RemoteNotInitialized is a signal
rather than a failure: the remote document does not exist yet and should be
created by a push. StorageFailure is never retried.

CRITICAL: This module must have NO Qt/PySide6 dependencies.
"""

from __future__ import annotations

from typing import Optional

__all__ = [
    "SyncError",
    "TransportError",
    "OfflineError",
    "RequestTimeout",
    "HttpError",
    "ParseError",
    "RetriesExhausted",
    "RemoteNotInitialized",
    "StorageFailure",
]


class SyncError(Exception):
    """Base class for all sync engine errors."""


class TransportError(SyncError):
    """A remote request could not be completed."""


class OfflineError(TransportError):
    """The device is known to be offline; no request was attempted."""

    def __init__(self, message: str = "Device is offline") -> None:
        super().__init__(message)


class RequestTimeout(TransportError):
    """A request was aborted after exceeding its deadline."""

    def __init__(self, url: str, timeout: float) -> None:
        self.url = url
        self.timeout = timeout
        super().__init__(f"Request to {url} timed out after {timeout}s")


class HttpError(TransportError):
    """The remote answered with a non-success status code."""

    def __init__(self, status_code: int, reason: str = "") -> None:
        self.status_code = status_code
        self.reason = reason
        message = f"HTTP {status_code}"
        if reason:
            message += f": {reason}"
        super().__init__(message)


class ParseError(TransportError):
    """The response body is not a valid snapshot document."""


class RetriesExhausted(TransportError):
    """Every allowed attempt failed.

    The error of the final attempt is chained as ``__cause__`` and is also
    available as ``last_error``.
    """

    def __init__(self, attempts: int, last_error: Optional[Exception] = None) -> None:
        self.attempts = attempts
        self.last_error = last_error
        message = f"Remote request failed after {attempts} attempt(s)"
        if last_error is not None:
            message += f": {last_error}"
        super().__init__(message)


class RemoteNotInitialized(SyncError):
    """The remote document does not exist yet."""

    def __init__(self, message: str = "Remote document is not initialized") -> None:
        super().__init__(message)


class StorageFailure(SyncError):
    """The local persistence medium is unavailable or full."""
