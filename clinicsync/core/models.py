"""Data model for the sync engine.

Records are plain JSON-serializable dicts carrying a string ``id``. This
module names the collections that are synchronized, the status enumerations
records move through, and the two containers the engine passes around:
the remote Snapshot and the process-wide SyncState.

CRITICAL: This module must have NO Qt/PySide6 dependencies.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional

Record = Dict[str, Any]
Collection = List[Record]


class DoctorStatus(Enum):
    """Lifecycle of a doctor account: pending -> active -> {suspended, rejected}."""

    PENDING = "pending"
    ACTIVE = "active"
    REJECTED = "rejected"
    SUSPENDED = "suspended"


class SubscriptionStatus(Enum):
    FREE = "free"
    ACTIVE = "active"
    EXPIRED = "expired"


class AppointmentStatus(Enum):
    BOOKED = "booked"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


class AdminRole(Enum):
    ADMIN = "admin"
    SUPER_ADMIN = "super_admin"


class AdminActionType(Enum):
    APPROVE_DOCTOR = "approve_doctor"
    REJECT_DOCTOR = "reject_doctor"
    SUSPEND_DOCTOR = "suspend_doctor"
    ACTIVATE_DOCTOR = "activate_doctor"


# Collection names as they appear in the remote document
DOCTORS = "doctors"
APPOINTMENTS = "appointments"
FEEDBACKS = "feedbacks"
ADMINS = "admins"
ADMIN_ACTIONS = "adminActions"

SPECIALTIES = "specialties"
AREAS = "areas"
HOSPITALS = "hospitals"

# Merged by id on every sync
MERGEABLE_COLLECTIONS = (DOCTORS, APPOINTMENTS, FEEDBACKS, ADMINS, ADMIN_ACTIONS)

# Static lookup tables, replaced wholesale by the authoritative side
REFERENCE_LISTS = (SPECIALTIES, AREAS, HOSPITALS)

ALL_COLLECTIONS = MERGEABLE_COLLECTIONS + REFERENCE_LISTS

# Allowed values per status-like field, used by validation
STATUS_FIELDS: Dict[str, Dict[str, type]] = {
    DOCTORS: {"status": DoctorStatus, "subscriptionStatus": SubscriptionStatus},
    APPOINTMENTS: {"status": AppointmentStatus},
    ADMINS: {"role": AdminRole},
    ADMIN_ACTIONS: {"actionType": AdminActionType},
}


@dataclass
class Snapshot:
    """The full remote document.

    Attributes:
        collections: Mergeable collections keyed by name
        reference: Wholesale-replace reference lists keyed by name. A list
            missing here was absent from the document.
    """

    collections: Dict[str, Collection] = field(default_factory=dict)
    reference: Dict[str, list] = field(default_factory=dict)

    def collection(self, name: str) -> Collection:
        """Get a mergeable collection, empty if the document lacks it."""
        return self.collections.get(name) or []

    @classmethod
    def from_document(cls, document: Dict[str, Any]) -> "Snapshot":
        """Build a Snapshot from a decoded JSON document.

        Absent or null collections become empty collections. Entries that are
        not objects with an ``id`` are dropped.
        """
        collections: Dict[str, Collection] = {}
        for name in MERGEABLE_COLLECTIONS:
            value = document.get(name)
            if not isinstance(value, list):
                collections[name] = []
                continue
            collections[name] = [
                r for r in value if isinstance(r, dict) and isinstance(r.get("id"), str)
            ]

        reference: Dict[str, list] = {}
        for name in REFERENCE_LISTS:
            value = document.get(name)
            if isinstance(value, list):
                reference[name] = value

        return cls(collections=collections, reference=reference)

    def to_document(self) -> Dict[str, Any]:
        """Serialize to the wire document (one key per collection)."""
        document: Dict[str, Any] = {}
        for name in MERGEABLE_COLLECTIONS:
            document[name] = self.collection(name)
        for name in REFERENCE_LISTS:
            if name in self.reference:
                document[name] = self.reference[name]
        return document


@dataclass
class SyncState:
    """Process-wide sync status, written only by the orchestrator.

    Attributes:
        in_progress: True while a pull or push holds the busy-lock
        last_sync_at: ISO timestamp of the last successful sync, or None
    """

    in_progress: bool = False
    last_sync_at: Optional[str] = None
