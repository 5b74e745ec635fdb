"""Issue tracker synchronization module."""

from storysync.sync.errors import (
    RemoteAttachError,
    RemoteCreateError,
    RemoteError,
    StorySyncError,
    TrackerClientError,
    TransportError,
    classify_remote_error,
)
from storysync.sync.synchronizer import BatchSynchronizer, SyncStats, derive_summary
from storysync.sync.tracker_client import TrackerClient

__all__ = [
    "BatchSynchronizer",
    "RemoteAttachError",
    "RemoteCreateError",
    "RemoteError",
    "StorySyncError",
    "SyncStats",
    "TrackerClient",
    "TrackerClientError",
    "TransportError",
    "classify_remote_error",
    "derive_summary",
]
