"""Validation of inbound synchronization requests.

Runs before any tracker call. A request is rejected when a required field is
absent; string fields count as absent when empty. ``items`` only counts as
absent when missing or null: an empty list is a valid (vacuously successful)
batch.
"""

from __future__ import annotations

import logging
from typing import Any

from pydantic import ValidationError as PydanticValidationError

from storysync.models import SyncRequest
from storysync.sync.errors import StorySyncError

logger = logging.getLogger(__name__)

MISSING_FIELDS_MESSAGE = "Missing fields"

# Wire name -> accepted aliases (first entry is the canonical name)
REQUIRED_STRING_FIELDS: dict[str, tuple[str, ...]] = {
    "trackerBaseUrl": ("trackerBaseUrl", "jiraUrl"),
    "username": ("username",),
    "apiToken": ("apiToken",),
    "projectKey": ("projectKey",),
}
ITEMS_FIELD: tuple[str, ...] = ("items", "stories")
ITERATION_FIELD: tuple[str, ...] = ("iterationId", "sprintId")


class ValidationError(StorySyncError):
    """The inbound request is malformed."""

    def __init__(self, message: str, missing: list[str] | None = None) -> None:
        super().__init__(message)
        self.missing = missing or []


def _lookup(payload: dict[str, Any], names: tuple[str, ...]) -> Any:
    for name in names:
        value = payload.get(name)
        if value is not None and value != "":
            return value
    return None


def missing_fields(payload: dict[str, Any]) -> list[str]:
    """Return the canonical names of required fields absent from payload."""
    missing = [name for name, aliases in REQUIRED_STRING_FIELDS.items() if not _lookup(payload, aliases)]
    if _lookup(payload, ITEMS_FIELD) is None:
        missing.append(ITEMS_FIELD[0])
    return missing


def validate_sync_request(payload: Any) -> SyncRequest:
    """Validate a decoded request body and build a SyncRequest.

    Args:
        payload: Decoded JSON body.

    Returns:
        The parsed SyncRequest.

    Raises:
        ValidationError: If a required field is absent or has the wrong shape.
    """
    if not isinstance(payload, dict):
        raise ValidationError("Request body must be a JSON object")

    missing = missing_fields(payload)
    if missing:
        raise ValidationError(f"{MISSING_FIELDS_MESSAGE}: {', '.join(missing)}", missing=missing)

    items = _lookup(payload, ITEMS_FIELD)
    if not isinstance(items, list) or not all(isinstance(i, dict) for i in items):
        raise ValidationError("items must be a list of objects")

    try:
        return SyncRequest.model_validate(
            {
                "tracker_base_url": _lookup(payload, REQUIRED_STRING_FIELDS["trackerBaseUrl"]),
                "credentials": {"username": payload["username"], "token": payload["apiToken"]},
                "project_key": payload["projectKey"],
                "items": items,
                "iteration_id": _lookup(payload, ITERATION_FIELD),
            }
        )
    except PydanticValidationError as e:
        fields = sorted({".".join(str(p) for p in err["loc"]) for err in e.errors()})
        raise ValidationError(f"Invalid fields: {', '.join(fields)}") from e


def check_sync_request(payload: Any) -> tuple[SyncRequest | None, str | None]:
    """Validate a request body, returning ``(request, None)`` or ``(None, error)``."""
    try:
        return validate_sync_request(payload), None
    except ValidationError as e:
        logger.info(f"Rejected sync request: {e}")
        return None, str(e)
