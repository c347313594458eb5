"""Sync orchestrator for ClinicSync.

Owns the pull/push protocol against the shared remote document:

- pull: fetch the remote snapshot, merge it into the local replica with the
  remote side authoritative, and replace reference lists with the remote ones.
  If the remote document does not exist yet, push instead (bootstrap).
- push: fetch the remote snapshot if possible, merge with the local side
  authoritative, upload the result and store it locally.

Only one pull or push runs at a time. A call that finds the busy-lock held
returns False immediately without touching the network or the replica.

No failure here is fatal: callers get False and the app keeps working from
the local replica.

CRITICAL: This module must have NO Qt/PySide6 dependencies.
"""

from __future__ import annotations

import logging
import threading
from contextlib import contextmanager
from datetime import datetime, timezone
from typing import Callable, Dict, Iterator, Optional

from .errors import RemoteNotInitialized, StorageFailure, TransportError
from .events import SyncEvents
from .merge import merge_named
from .models import MERGEABLE_COLLECTIONS, REFERENCE_LISTS, Collection, Snapshot, SyncState
from .remote import RemoteStoreClient
from .store import ReplicaStore

logger = logging.getLogger(__name__)

__all__ = ["BusyLock", "SyncOrchestrator"]


class BusyLock:
    """Non-reentrant, try-acquire-only lock guarding one sync at a time."""

    def __init__(self, state: Optional[SyncState] = None) -> None:
        self._lock = threading.Lock()
        self._state = state

    @property
    def held(self) -> bool:
        return self._lock.locked()

    @contextmanager
    def attempt(self) -> Iterator[bool]:
        """Try to take the lock without waiting.

        Yields:
            True if the lock was taken; it is released when the block exits
            by any path. False if it was already held.
        """
        acquired = self._lock.acquire(blocking=False)
        if not acquired:
            yield False
            return
        if self._state is not None:
            self._state.in_progress = True
        try:
            yield True
        finally:
            if self._state is not None:
                self._state.in_progress = False
            self._lock.release()


def _utc_now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


class SyncOrchestrator:
    """Coordinates the local replica, the remote store and sync events.

    Attributes:
        store: Local replica store
        remote: Remote document client; the only caller of it is this class
        events: Notifier for sync outcomes
        state: Busy flag and last successful sync time
    """

    def __init__(
        self,
        store: ReplicaStore,
        remote: RemoteStoreClient,
        events: Optional[SyncEvents] = None,
        clock: Callable[[], str] = _utc_now_iso,
    ) -> None:
        self.store = store
        self.remote = remote
        self.events = events if events is not None else SyncEvents()
        self.state = SyncState()
        self._lock = BusyLock(self.state)
        self._clock = clock

    @property
    def busy(self) -> bool:
        return self._lock.held

    async def pull(self) -> bool:
        """Bring remote changes into the local replica.

        Returns:
            True if the replica now reflects the remote document
        """
        bootstrap = False
        with self._lock.attempt() as acquired:
            if not acquired:
                logger.debug("Pull skipped: a sync is already in progress")
                return False

            logger.info("Starting pull")
            try:
                snapshot = await self.remote.fetch_snapshot()
            except RemoteNotInitialized:
                logger.info("Remote document not initialized; bootstrapping with a push")
                bootstrap = True
            except TransportError as e:
                logger.warning(f"Pull failed: {e}")
                self.events.emit_failed()
                return False
            else:
                try:
                    self._apply_pull(snapshot)
                except StorageFailure as e:
                    logger.error(f"Pull could not write the local replica: {e}")
                    self.events.emit_failed()
                    return False
                self._mark_synced()
                logger.info("Pull complete")
                self.events.emit_complete()
                return True

        # The lock is released before bootstrapping; push takes it again
        if bootstrap:
            return await self.push()
        return False

    async def push(self) -> bool:
        """Publish the local replica to the remote document.

        Returns:
            True if the merged state was uploaded
        """
        with self._lock.attempt() as acquired:
            if not acquired:
                logger.debug("Push skipped: a sync is already in progress")
                return False

            logger.info("Starting push")
            remote_view = await self._fetch_for_push()

            merged: Dict[str, Collection] = {}
            for name in MERGEABLE_COLLECTIONS:
                merged[name] = merge_named(
                    name, self.store.get(name), remote_view.collection(name)
                )
            reference = {name: self.store.get(name) for name in REFERENCE_LISTS}
            outgoing = Snapshot(collections=merged, reference=reference)

            try:
                await self.remote.put_snapshot(outgoing)
            except TransportError as e:
                logger.warning(f"Push failed: {e}")
                self.events.emit_failed()
                return False

            # Re-read after the upload: writes made while it was in flight win
            try:
                for name, uploaded in merged.items():
                    current = self.store.get(name)
                    self.store.set(name, merge_named(name, current, uploaded))
            except StorageFailure as e:
                logger.error(f"Push uploaded but could not update the local replica: {e}")
                self.events.emit_failed()
                return False

            self._mark_synced()
            logger.info("Push complete")
            self.events.emit_complete()
            return True

    async def _fetch_for_push(self) -> Snapshot:
        """Best-effort read of the remote; an empty view if it fails."""
        try:
            return await self.remote.fetch_snapshot()
        except RemoteNotInitialized:
            logger.info("Remote document not initialized; pushing local state as-is")
        except TransportError as e:
            logger.warning(f"Pre-push fetch failed, pushing against an empty remote: {e}")
        return Snapshot()

    def _apply_pull(self, snapshot: Snapshot) -> None:
        for name in MERGEABLE_COLLECTIONS:
            merged = merge_named(name, snapshot.collection(name), self.store.get(name))
            self.store.set(name, merged)
        for name in REFERENCE_LISTS:
            if name in snapshot.reference:
                self.store.set(name, snapshot.reference[name])

    def _mark_synced(self) -> None:
        self.state.last_sync_at = self._clock()
