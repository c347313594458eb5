"""Sync event notification.

Collaborators (views, status indicators) subscribe to "sync completed" and
"sync failed". Events carry no payload; handlers re-read the local replica.

CRITICAL: This module must have NO Qt/PySide6 dependencies. A GUI can
forward these callbacks to its own signal mechanism.
"""

from __future__ import annotations

import logging
from typing import Callable, List

logger = logging.getLogger(__name__)

__all__ = ["SyncEvents"]

Handler = Callable[[], None]


class SyncEvents:
    """Fire-and-forget notifier for sync outcomes."""

    def __init__(self) -> None:
        self._complete_handlers: List[Handler] = []
        self._failed_handlers: List[Handler] = []

    def on_sync_complete(self, handler: Handler) -> Callable[[], None]:
        """Subscribe to successful syncs.

        Returns:
            Callable that removes the subscription
        """
        return self._subscribe(self._complete_handlers, handler)

    def on_sync_failed(self, handler: Handler) -> Callable[[], None]:
        """Subscribe to failed syncs.

        Returns:
            Callable that removes the subscription
        """
        return self._subscribe(self._failed_handlers, handler)

    def emit_complete(self) -> None:
        self._emit("sync_complete", self._complete_handlers)

    def emit_failed(self) -> None:
        self._emit("sync_failed", self._failed_handlers)

    @staticmethod
    def _subscribe(handlers: List[Handler], handler: Handler) -> Callable[[], None]:
        handlers.append(handler)

        def unsubscribe() -> None:
            if handler in handlers:
                handlers.remove(handler)

        return unsubscribe

    @staticmethod
    def _emit(name: str, handlers: List[Handler]) -> None:
        # Copy so a handler may unsubscribe itself during delivery
        for handler in list(handlers):
            try:
                handler()
            except Exception:
                logger.exception(f"Handler {handler!r} for {name} raised")
