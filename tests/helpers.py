"""Test helpers for ClinicSync tests.

Provides an in-memory stand-in for the remote store client and factories
for sample records.
"""

from __future__ import annotations

import asyncio
import copy
from typing import Any, Dict, List, Optional

from clinicsync.core.errors import RemoteNotInitialized, RetriesExhausted
from clinicsync.core.models import Snapshot


class FakeRemote:
    """In-memory remote document with call counters and failure switches.

    Attributes:
        document: Stored document, or None when not initialized
        fetch_calls: Number of fetch_snapshot calls
        put_calls: Number of put_snapshot calls
        fail_fetch: Make fetch_snapshot raise RetriesExhausted
        fail_put: Make put_snapshot raise RetriesExhausted
        gate: If set, fetch_snapshot waits on it before answering
        put_gate: If set, put_snapshot waits on it before storing
    """

    def __init__(self, document: Optional[Dict[str, Any]] = None) -> None:
        self.document = copy.deepcopy(document)
        self.fetch_calls = 0
        self.put_calls = 0
        self.fail_fetch = False
        self.fail_put = False
        self.gate: Optional[asyncio.Event] = None
        self.put_gate: Optional[asyncio.Event] = None

    async def fetch_snapshot(self) -> Snapshot:
        self.fetch_calls += 1
        if self.gate is not None:
            await self.gate.wait()
        if self.fail_fetch:
            raise RetriesExhausted(3, ConnectionError("unreachable"))
        if self.document is None:
            raise RemoteNotInitialized()
        return Snapshot.from_document(copy.deepcopy(self.document))

    async def put_snapshot(self, snapshot: Snapshot) -> None:
        self.put_calls += 1
        if self.put_gate is not None:
            await self.put_gate.wait()
        if self.fail_put:
            raise RetriesExhausted(3, ConnectionError("unreachable"))
        self.document = copy.deepcopy(snapshot.to_document())

    @property
    def network_calls(self) -> int:
        return self.fetch_calls + self.put_calls


def make_doctor(doc_id: str, status: str = "active", **fields: Any) -> Dict[str, Any]:
    """Build a doctor record."""
    record = {
        "id": doc_id,
        "fullName": f"Doctor {doc_id}",
        "email": f"{doc_id}@duhok.med",
        "specialty": "Cardiology",
        "clinicName": "Vajeen Hospital",
        "workingDays": ["Sunday", "Monday"],
        "timeSlots": ["16:00", "16:20"],
        "status": status,
        "subscriptionStatus": "free",
        "createdAt": "2026-01-01T00:00:00+00:00",
    }
    record.update(fields)
    return record


def make_appointment(app_id: str, **fields: Any) -> Dict[str, Any]:
    """Build an appointment record."""
    record = {
        "id": app_id,
        "doctorId": "doc_001",
        "doctorName": "Karwan Ali",
        "clinicName": "Vajeen Private Hospital",
        "patientName": "Aram",
        "patientPhone": "0750 000 0000",
        "appointmentDate": "2026-03-01",
        "appointmentTime": "16:00",
        "status": "booked",
        "createdAt": "2026-02-01T10:00:00+00:00",
    }
    record.update(fields)
    return record


def ids(collection: List[Dict[str, Any]]) -> List[str]:
    """Get the ids of a collection in order."""
    return [record["id"] for record in collection]
