"""Merge utilities for ClinicSync.

Collections are unioned by record id. Records from the authoritative side
overlay the other side, so the authoritative value wins a conflict, except
where a per-collection guard applies.

The only guard is on the doctor lifecycle: ``pending`` is an initial state,
so an authoritative ``pending`` never downgrades an ``active`` doctor. The
rest of the authoritative record is still accepted.

There are no timestamps or version vectors on records; which side is
authoritative depends on the sync direction (remote on pull, local on push).

CRITICAL: This module must have NO Qt/PySide6 dependencies.
"""

from __future__ import annotations

import logging
from typing import Callable, Dict, Iterator, Optional

from .models import DOCTORS, Collection, DoctorStatus, Record

logger = logging.getLogger(__name__)

__all__ = ["merge_collections", "merge_named", "guard_doctor_status", "MERGE_GUARDS"]

# Called with (incoming authoritative record, existing record); returns the record to keep
MergeGuard = Callable[[Record, Record], Record]


def guard_doctor_status(incoming: Record, existing: Record) -> Record:
    """Accept the incoming doctor but refuse an active -> pending regression."""
    if (
        existing.get("status") == DoctorStatus.ACTIVE.value
        and incoming.get("status") == DoctorStatus.PENDING.value
    ):
        logger.debug(
            f"Keeping doctor {incoming.get('id')} active; ignoring pending status"
        )
        kept = dict(incoming)
        kept["status"] = DoctorStatus.ACTIVE.value
        return kept
    return incoming


MERGE_GUARDS: Dict[str, MergeGuard] = {
    DOCTORS: guard_doctor_status,
}


def _identifiable(records: Collection) -> Iterator[Record]:
    """Yield records that are objects with a string id; skip the rest."""
    for record in records:
        if isinstance(record, dict) and isinstance(record.get("id"), str):
            yield record
        else:
            logger.warning(f"Skipping record without a string id: {record!r}")


def merge_collections(
    authoritative: Collection,
    other: Collection,
    guard: Optional[MergeGuard] = None,
) -> Collection:
    """Union two collections by id.

    Starts from ``other`` and overlays every record of ``authoritative``.
    The output keeps the order of ``other`` followed by ids only present in
    ``authoritative``. Entries that are not objects with a string
    ``id`` are skipped. Neither input is modified.

    Args:
        authoritative: Records that win conflicts
        other: Records that lose conflicts
        guard: Optional per-collection conflict guard

    Returns:
        New collection containing every id from both inputs
    """
    merged: Dict[str, Record] = {}
    for record in _identifiable(other):
        merged[record["id"]] = record

    for record in _identifiable(authoritative):
        record_id = record["id"]
        existing = merged.get(record_id)
        if existing is not None and guard is not None:
            merged[record_id] = guard(record, existing)
        else:
            merged[record_id] = record

    return [dict(record) for record in merged.values()]


def merge_named(
    collection: str, authoritative: Collection, other: Collection
) -> Collection:
    """Merge using whichever guard is registered for the collection."""
    return merge_collections(authoritative, other, MERGE_GUARDS.get(collection))
