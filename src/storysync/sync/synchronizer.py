"""Batch synchronization of work items into the tracker.

Items are processed strictly in order. The first failing item stops the
batch: earlier items stay created in the tracker (there is no rollback) and
later items are never attempted. The caller only learns that the batch failed
and why, not which item failed.

There is no retry and no idempotency key, so resubmitting a batch after a
partial failure creates duplicates of the items that already went through.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

import httpx

from storysync.config import TrackerConfig
from storysync.models import SyncRequest, SyncResult, WorkItem
from storysync.sync.errors import TrackerClientError
from storysync.sync.tracker_client import TrackerClient

logger = logging.getLogger(__name__)

DEFAULT_SUMMARY = "User Story"
SUMMARY_MAX_LENGTH = 250


def derive_summary(
    item: WorkItem,
    max_length: int = SUMMARY_MAX_LENGTH,
    fallback: str = DEFAULT_SUMMARY,
) -> str:
    """Build the issue summary for a work item.

    "As {actor}, {content}" when the item names an actor, the bare content
    otherwise, the fallback when that comes out empty. Truncated to max_length.
    """
    text = f"As {item.actor}, {item.content}" if item.actor else item.content
    return (text or fallback)[:max_length]


@dataclass
class SyncStats:
    """Statistics for one batch."""

    issues_created: int = 0
    issues_attached: int = 0
    items_failed: int = 0


class BatchSynchronizer:
    """Replicates a batch of work items into the tracker.

    Handles:
    - Summary derivation per item
    - Sequential issue creation
    - Optional iteration attachment of each created issue
    - Short-circuit on the first failure with a single extracted message
    """

    def __init__(
        self,
        config: TrackerConfig | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """Initialize the synchronizer.

        The synchronizer holds no per-batch state, so one instance can serve
        concurrent batches.

        Args:
            config: Tracker settings applied to every batch.
            transport: Optional httpx transport handed to each TrackerClient.
        """
        self.config = config or TrackerConfig()
        self._transport = transport

    def _make_client(self, request: SyncRequest) -> TrackerClient:
        return TrackerClient(
            base_url=request.tracker_base_url,
            credentials=request.credentials,
            config=self.config,
            transport=self._transport,
        )

    async def synchronize(self, request: SyncRequest, stats: SyncStats | None = None) -> SyncResult:
        """Synchronize one batch.

        Args:
            request: A validated sync request.
            stats: Optional counters filled in for this batch only.

        Returns:
            SyncResult: success, or the first failure's message.
        """
        if stats is None:
            stats = SyncStats()
        logger.info(
            f"Syncing {len(request.items)} item(s) to project {request.project_key}"
            + (f" (iteration {request.iteration_id})" if request.iteration_id else "")
        )

        async with self._make_client(request) as client:
            for position, item in enumerate(request.items, start=1):
                try:
                    await self._sync_item(client, request, item, stats)
                except TrackerClientError as e:
                    stats.items_failed += 1
                    message = e.user_message
                    logger.warning(
                        f"Item {position}/{len(request.items)} failed ({type(e).__name__}): {message}; "
                        f"stopping batch after {stats.issues_created} created issue(s)"
                    )
                    return SyncResult.failed(message)

        logger.info(f"Batch complete: {stats.issues_created} created, {stats.issues_attached} attached")
        return SyncResult.ok()

    async def _sync_item(self, client: TrackerClient, request: SyncRequest, item: WorkItem, stats: SyncStats) -> None:
        """Create one issue and attach it to the iteration if requested."""
        summary = derive_summary(
            item,
            max_length=self.config.summary_max_length,
            fallback=self.config.fallback_summary,
        )
        issue = await client.create_issue(request.project_key, summary)
        if not client.dry_run:
            stats.issues_created += 1

        if request.iteration_id and issue.id:
            await client.attach_to_iteration(request.iteration_id, issue.id)
            stats.issues_attached += 1
