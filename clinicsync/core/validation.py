"""Input validation for the sync engine.

All validators raise ValidationError with descriptive messages.

CRITICAL: This module must have NO Qt/PySide6 dependencies.
"""

from __future__ import annotations

from typing import Any, Dict

from .models import ALL_COLLECTIONS, MERGEABLE_COLLECTIONS, STATUS_FIELDS

__all__ = [
    "ValidationError",
    "validate_collection_key",
    "validate_mergeable_key",
    "validate_record_id",
    "validate_record",
    "validate_document",
]

MAX_RECORD_ID_LENGTH = 200


class ValidationError(ValueError):
    """Validation error with field and message attributes."""

    def __init__(self, field: str, message: str) -> None:
        self.field = field
        self.message = message
        super().__init__(f"{field}: {message}")

    def __str__(self) -> str:
        return f"{self.field}: {self.message}"

    def __repr__(self) -> str:
        return f"ValidationError(field='{self.field}', message='{self.message}')"


def validate_collection_key(key: str) -> None:
    """Validate that key names a known collection or reference list."""
    if not isinstance(key, str):
        raise ValidationError("collection", f"must be a string, got {type(key).__name__}")
    if key not in ALL_COLLECTIONS:
        raise ValidationError("collection", f"unknown collection '{key}'")


def validate_mergeable_key(key: str) -> None:
    """Validate that key names a collection of identifiable records."""
    validate_collection_key(key)
    if key not in MERGEABLE_COLLECTIONS:
        raise ValidationError(
            "collection", f"'{key}' is a reference list, not a record collection"
        )


def validate_record_id(record_id: Any, field_name: str = "id") -> None:
    """Validate a record id (non-empty string)."""
    if not isinstance(record_id, str):
        raise ValidationError(
            field_name, f"must be a string, got {type(record_id).__name__}"
        )
    if not record_id.strip():
        raise ValidationError(field_name, "cannot be empty")
    if len(record_id) > MAX_RECORD_ID_LENGTH:
        raise ValidationError(
            field_name, f"cannot exceed {MAX_RECORD_ID_LENGTH} characters"
        )


def validate_record(key: str, record: Any) -> None:
    """Validate a record destined for the given collection.

    Checks the id and, for collections with enumerated fields, that any
    present status value is one of the allowed values.
    """
    if not isinstance(record, dict):
        raise ValidationError("record", f"must be an object, got {type(record).__name__}")
    validate_record_id(record.get("id"))

    for field_name, enum_type in STATUS_FIELDS.get(key, {}).items():
        value = record.get(field_name)
        if value is None:
            continue
        allowed = [member.value for member in enum_type]
        if value not in allowed:
            raise ValidationError(
                field_name, f"must be one of {', '.join(allowed)}, got '{value}'"
            )


def validate_document(document: Any) -> Dict[str, Any]:
    """Validate a remote document: an object whose known keys hold arrays."""
    if not isinstance(document, dict):
        raise ValidationError(
            "document", f"must be a JSON object, got {type(document).__name__}"
        )
    for key in ALL_COLLECTIONS:
        value = document.get(key)
        if value is not None and not isinstance(value, list):
            raise ValidationError(key, "must be an array")
    return document
