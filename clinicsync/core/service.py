"""Data access API for ClinicSync collaborators.

Views and forms read and write collections through DataService. Writes are
optimistic: they land in the local replica immediately, and propagation to
the remote document is requested afterwards and allowed to fail without
rolling the local change back. Collaborators never call the remote client
directly.

CRITICAL: This module must have NO Qt/PySide6 dependencies.
"""

from __future__ import annotations

import logging
from typing import Any, Callable, List, Optional

from uuid6 import uuid7

from .config import Config
from .events import SyncEvents
from .models import REFERENCE_LISTS, Collection, Record, SyncState
from .remote import RemoteStoreClient
from .store import ReplicaStore
from .sync import SyncOrchestrator
from .validation import (
    ValidationError,
    validate_collection_key,
    validate_mergeable_key,
    validate_record,
    validate_record_id,
)

logger = logging.getLogger(__name__)

__all__ = ["DataService", "build_service", "new_record_id"]


def new_record_id() -> str:
    """Generate a new time-ordered record id (UUID7 hex)."""
    return uuid7().hex


class DataService:
    """Read/write/notify surface over the local replica and the orchestrator."""

    def __init__(self, store: ReplicaStore, orchestrator: SyncOrchestrator) -> None:
        self.store = store
        self.orchestrator = orchestrator

    @property
    def events(self) -> SyncEvents:
        return self.orchestrator.events

    @property
    def sync_state(self) -> SyncState:
        return self.orchestrator.state

    # ===== Reads =====

    def read(self, collection: str) -> Collection:
        """Get every record (or reference entry) in a collection."""
        validate_collection_key(collection)
        return self.store.get(collection)

    def get(self, collection: str, record_id: str) -> Optional[Record]:
        """Get one record by id, or None."""
        validate_mergeable_key(collection)
        for record in self.store.get(collection):
            if record.get("id") == record_id:
                return record
        return None

    def filter(self, collection: str, **criteria: Any) -> List[Record]:
        """Get records whose fields equal all given values.

        String comparisons on ``email`` are case-insensitive.
        """
        validate_mergeable_key(collection)

        def matches(record: Record) -> bool:
            for field_name, expected in criteria.items():
                actual = record.get(field_name)
                if (
                    field_name == "email"
                    and isinstance(actual, str)
                    and isinstance(expected, str)
                ):
                    if actual.lower() != expected.lower():
                        return False
                elif actual != expected:
                    return False
            return True

        return [r for r in self.store.get(collection) if matches(r)]

    # ===== Local writes =====

    def write(self, collection: str, record: Record) -> None:
        """Upsert a record by id in the local replica.

        Raises:
            ValidationError: If the collection or record is invalid
            StorageFailure: If the replica cannot be written
        """
        validate_mergeable_key(collection)
        validate_record(collection, record)

        records = self.store.get(collection)
        for index, existing in enumerate(records):
            if existing.get("id") == record["id"]:
                records[index] = dict(record)
                break
        else:
            records.append(dict(record))
        self.store.set(collection, records)

    def delete(self, collection: str, record_id: str) -> None:
        """Remove a record from the local replica.

        Merging is a union, so the record comes back on the next pull if the
        remote document still holds it.

        Raises:
            ValidationError: If the collection or id is invalid
            StorageFailure: If the replica cannot be written
        """
        validate_mergeable_key(collection)
        validate_record_id(record_id)
        records = self.store.get(collection)
        remaining = [r for r in records if r.get("id") != record_id]
        if len(remaining) == len(records):
            logger.debug(f"delete: no record {record_id} in {collection}")
            return
        self.store.set(collection, remaining)

    def replace_reference(self, name: str, entries: list) -> None:
        """Replace a reference list (specialties, areas, hospitals) locally."""
        validate_collection_key(name)
        if name not in REFERENCE_LISTS:
            raise ValidationError("collection", f"'{name}' is not a reference list")
        if not isinstance(entries, list):
            raise ValidationError(name, "must be a list")
        self.store.set(name, entries)

    # ===== Sync =====

    async def request_pull(self) -> bool:
        """Ask for a pull; False if one is running or it failed."""
        return await self.orchestrator.pull()

    async def request_push(self) -> bool:
        """Ask for a push; False if one is running or it failed."""
        return await self.orchestrator.push()

    async def save(self, collection: str, record: Record) -> bool:
        """Optimistically write a record, then request a push.

        Returns:
            Result of the push; the local write stands either way
        """
        self.write(collection, record)
        return await self.request_push()

    async def remove(self, collection: str, record_id: str) -> bool:
        """Delete a record locally, then request a push."""
        self.delete(collection, record_id)
        return await self.request_push()

    def on_sync_complete(self, handler: Callable[[], None]) -> Callable[[], None]:
        return self.events.on_sync_complete(handler)

    def on_sync_failed(self, handler: Callable[[], None]) -> Callable[[], None]:
        return self.events.on_sync_failed(handler)

    def close(self) -> None:
        self.store.close()


def build_service(
    config: Config,
    is_online: Optional[Callable[[], bool]] = None,
    **remote_options: Any,
) -> DataService:
    """Wire a complete engine from configuration.

    Args:
        config: Application configuration
        is_online: Connectivity probe passed to the remote client
        **remote_options: Extra RemoteStoreClient arguments (e.g. transport)

    Returns:
        Ready-to-use DataService
    """
    sync_config = config.get_sync_config()
    store = ReplicaStore(config.get_database_file(), key_prefix=config.get_key_prefix())
    remote = RemoteStoreClient(
        sync_config["remote_url"],
        timeout=sync_config["request_timeout_seconds"],
        max_attempts=sync_config["max_attempts"],
        backoff_step=sync_config["backoff_step_seconds"],
        is_online=is_online,
        **remote_options,
    )
    if not sync_config["remote_url"]:
        logger.info("No remote_url configured; running from the local replica only")
    return DataService(store, SyncOrchestrator(store, remote))
