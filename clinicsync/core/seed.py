"""Default records seeded into a fresh local replica.

Seeding happens only for collections whose storage key is entirely absent.
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Dict, List

from .models import ADMINS, AREAS, DOCTORS, HOSPITALS, SPECIALTIES

__all__ = ["default_records"]

DEFAULT_SPECIALTIES = [
    "General Practice",
    "Cardiology",
    "Pediatrics",
    "Dermatology",
    "Orthopedics",
    "Gynecology",
    "Dentistry",
    "Ophthalmology",
    "Internal Medicine",
    "Psychiatry",
]

DEFAULT_AREAS = [
    "Masike",
    "KRO",
    "Gre-Base",
    "Malta",
    "Shakhke",
    "Nohadra",
    "Azadi",
    "Zirka",
]

DEFAULT_HOSPITALS = [
    {"name": "Azadi Teaching Hospital", "area": "Azadi", "coords": "36.8617, 42.9924"},
    {"name": "Vajeen Hospital", "area": "KRO", "coords": "36.8583, 42.9833"},
    {"name": "Duhok Emergency Hospital", "area": "Azadi", "coords": "36.8642, 43.0011"},
    {"name": "Zheen International Hospital", "area": "Masike", "coords": "36.8710, 42.9550"},
    {"name": "Hevi Pediatrics Hospital", "area": "Gre-Base", "coords": "36.8550, 43.0100"},
]

# (id, name, email, phone, specialty, clinic, bio, working days, time slots)
_DEMO_DOCTORS = [
    (
        "doc_001", "Karwan Ali", "karwan@duhok.med", "0750 445 1234",
        "Cardiology", "Vajeen Private Hospital",
        "Senior cardiologist specializing in interventional procedures and heart failure management.",
        ["Sunday", "Monday", "Tuesday", "Wednesday"],
        ["16:00", "16:30", "17:00", "17:30", "18:00", "18:30"],
    ),
    (
        "doc_002", "Ahmed Zibari", "ahmed@duhok.med", "0750 112 3344",
        "Pediatrics", "Zheen International Hospital",
        "Expert in pediatric infectious diseases and general childhood wellness.",
        ["Monday", "Tuesday", "Wednesday", "Thursday"],
        ["09:00", "09:30", "10:00", "10:30", "11:00"],
    ),
    (
        "doc_003", "Shervan Bamerni", "shervan@duhok.med", "0751 998 7766",
        "Dermatology", "SMC Medical Center",
        "Clinical dermatologist specializing in skin cancer screening and laser dermatology.",
        ["Saturday", "Sunday", "Monday", "Tuesday"],
        ["17:00", "17:30", "18:00", "18:30", "19:00"],
    ),
    (
        "doc_004", "Azad Duski", "azad@duhok.med", "0750 221 5566",
        "Orthopedics", "Duhok Specialist Center",
        "Consultant orthopedic surgeon with a focus on sports injuries and joint replacement.",
        ["Sunday", "Monday", "Wednesday"],
        ["16:00", "17:00", "18:00", "19:00"],
    ),
    (
        "doc_005", "Helin Duhoki", "helin@duhok.med", "0750 778 9900",
        "Dentistry", "Zheen Dental Clinic",
        "Expert in cosmetic dentistry, dental implants, and pediatric oral health.",
        ["Monday", "Tuesday", "Wednesday", "Thursday", "Saturday"],
        ["09:00", "10:00", "11:00", "16:00", "17:00", "18:00"],
    ),
]


def default_records() -> Dict[str, List[Any]]:
    """Build the seed data, stamped with the current time.

    Returns:
        Dict mapping collection name to its default contents
    """
    now = datetime.now(timezone.utc).isoformat()

    admins = [
        {
            "id": "admin_001",
            "fullName": "Duhok Admin",
            "email": "admin@docbooking.duhok",
            "passwordHash": "admin123",
            "role": "super_admin",
            "createdAt": now,
        }
    ]

    doctors = []
    for doc_id, name, email, phone, specialty, clinic, bio, days, slots in _DEMO_DOCTORS:
        doctors.append({
            "id": doc_id,
            "fullName": name,
            "email": email,
            "passwordHash": "pass123",
            "phoneNumber": phone,
            "specialty": specialty,
            "clinicName": clinic,
            "bio": bio,
            "workingDays": list(days),
            "timeSlots": list(slots),
            "status": "active",
            "subscriptionStatus": "active",
            "createdAt": now,
        })

    return {
        ADMINS: admins,
        DOCTORS: doctors,
        SPECIALTIES: list(DEFAULT_SPECIALTIES),
        AREAS: list(DEFAULT_AREAS),
        HOSPITALS: [dict(h) for h in DEFAULT_HOSPITALS],
    }
