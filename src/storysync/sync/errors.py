"""Error taxonomy and remote error shapes for tracker synchronization.

The tracker reports failures in a handful of JSON shapes. Instead of probing
arbitrary fields at the point of failure, each error body is classified once
into one of the variants below, and every variant knows how to render the
single human-readable message returned to the caller.

Precedence when classifying:
    1. ``errors.description``: structured per-field description
    2. ``errorMessages``: list of messages, joined with ", "
    3. the transport or HTTP failure message
    4. the literal "Unknown error"
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

UNKNOWN_ERROR_MESSAGE = "Unknown error"


@dataclass(frozen=True)
class StructuredDescription:
    """Tracker body carried ``{"errors": {"description": ...}}``."""

    description: str

    @property
    def message(self) -> str:
        return self.description


@dataclass(frozen=True)
class MessageList:
    """Tracker body carried ``{"errorMessages": [...]}``."""

    messages: tuple[str, ...]

    @property
    def message(self) -> str:
        return ", ".join(self.messages)


@dataclass(frozen=True)
class TransportFailure:
    """No usable body; the network or HTTP layer described the failure."""

    detail: str

    @property
    def message(self) -> str:
        return self.detail


@dataclass(frozen=True)
class UnknownFailure:
    """Nothing usable was reported at all."""

    @property
    def message(self) -> str:
        return UNKNOWN_ERROR_MESSAGE


RemoteError = StructuredDescription | MessageList | TransportFailure | UnknownFailure


def classify_remote_error(body: Any, transport_message: str | None = None) -> RemoteError:
    """Classify a tracker error body into a known remote error shape.

    Args:
        body: Decoded JSON error body, or None when the response had none.
        transport_message: Message from the HTTP/network layer, if any.

    Returns:
        The first matching RemoteError variant.
    """
    if isinstance(body, dict):
        errors = body.get("errors")
        if isinstance(errors, dict):
            description = errors.get("description")
            if description:
                return StructuredDescription(str(description))

        messages = body.get("errorMessages")
        if isinstance(messages, list):
            joined = tuple(str(m) for m in messages)
            if ", ".join(joined):
                return MessageList(joined)

    if transport_message:
        return TransportFailure(transport_message)

    return UnknownFailure()


# =============================================================================
# Exceptions
# =============================================================================


class StorySyncError(Exception):
    """Base exception for storysync errors."""


class TrackerClientError(StorySyncError):
    """A tracker call failed.

    Carries the classified remote error so the caller-facing message can be
    rendered without re-inspecting the response.
    """

    def __init__(
        self,
        message: str,
        remote_error: RemoteError | None = None,
        status_code: int | None = None,
    ) -> None:
        super().__init__(message)
        self.status_code = status_code
        if remote_error is None:
            remote_error = classify_remote_error(None, message)
        self.remote_error = remote_error

    @property
    def user_message(self) -> str:
        """Human-readable message for the batch result."""
        return self.remote_error.message


class TransportError(TrackerClientError):
    """The tracker could not be reached or did not answer in time."""


class RemoteCreateError(TrackerClientError):
    """Issue creation was rejected by the tracker."""


class RemoteAttachError(TrackerClientError):
    """Attaching a created issue to an iteration was rejected by the tracker."""
