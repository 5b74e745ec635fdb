"""Tracker REST API client for issue creation.

This module provides an async HTTP client for the issue tracker operations
used by batch synchronization: creating an issue in a project and attaching
an issue to an iteration (sprint). Credentials are supplied per batch by the
caller; nothing is read from the environment.
"""

from __future__ import annotations

import base64
import logging
from typing import Any

import httpx

from storysync.config import TrackerConfig
from storysync.models import CreatedIssue, Credentials
from storysync.sync.errors import (
    RemoteAttachError,
    RemoteCreateError,
    TrackerClientError,
    TransportError,
    classify_remote_error,
)

logger = logging.getLogger(__name__)

MAX_REDIRECTS = 5


def basic_auth_header(credentials: Credentials) -> str:
    """Build the Basic Authorization value for ``username:token``."""
    raw = f"{credentials.username}:{credentials.token}"
    return "Basic " + base64.b64encode(raw.encode()).decode()


class TrackerClient:
    """Async tracker REST client scoped to a single batch.

    The Authorization header is computed once at construction and reused for
    every call. No retries are performed: a failed call raises immediately.
    """

    def __init__(
        self,
        base_url: str,
        credentials: Credentials,
        config: TrackerConfig | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """Initialize the tracker client.

        Args:
            base_url: Tracker instance URL (e.g., https://company.atlassian.net).
            credentials: Username and API token for the batch.
            config: Tracker settings (timeouts, endpoint paths, dry run).
            transport: Optional httpx transport, used to stub the tracker in tests.
        """
        self.base_url = base_url.rstrip("/")
        self.config = config or TrackerConfig()
        self.dry_run = self.config.dry_run
        self._transport = transport

        # Never log these headers
        self._headers = {
            "Accept": "application/json",
            "Content-Type": "application/json",
            "Authorization": basic_auth_header(credentials),
        }

        self._client: httpx.AsyncClient | None = None

    async def __aenter__(self) -> TrackerClient:
        """Open the batch-scoped HTTP session.

        Redirects are followed (an http:// base URL upgraded to https, a moved
        instance). Whatever the final response is, only a 2xx counts as success.
        """
        self._client = httpx.AsyncClient(
            base_url=self.base_url,
            headers=self._headers,
            timeout=self.config.timeout,
            follow_redirects=True,
            max_redirects=MAX_REDIRECTS,
            transport=self._transport,
        )
        return self

    async def __aexit__(self, exc_type: object, exc_val: object, exc_tb: object) -> None:
        """Close the HTTP session."""
        if self._client is not None:
            await self._client.aclose()
        self._client = None

    @property
    def client(self) -> httpx.AsyncClient:
        """The open HTTP session of this batch."""
        if self._client is None:
            raise RuntimeError("TrackerClient must be used as async context manager")
        return self._client

    async def _post(
        self,
        endpoint: str,
        payload: dict[str, Any],
        error_cls: type[TrackerClientError],
    ) -> httpx.Response:
        """POST a JSON payload and map failures onto the error taxonomy.

        Args:
            endpoint: API endpoint relative to the base URL.
            payload: JSON body.
            error_cls: Exception raised when the tracker rejects the call.

        Returns:
            The successful httpx.Response.

        Raises:
            TransportError: On timeouts and network failures.
            error_cls: On any non-2xx response.
        """
        try:
            response = await self.client.post(endpoint, json=payload)
        except httpx.TimeoutException as e:
            raise TransportError(f"Request to {endpoint} timed out after {self.config.timeout}s") from e
        except httpx.HTTPError as e:
            raise TransportError(str(e) or f"Request to {endpoint} failed") from e

        if not response.is_success:
            logger.debug(f"Tracker error {response.status_code} for {endpoint}: {response.text[:200]}")
            try:
                body = response.json()
            except ValueError:
                body = None
            message = f"Request failed with status code {response.status_code}"
            raise error_cls(
                message,
                remote_error=classify_remote_error(body, message),
                status_code=response.status_code,
            )

        return response

    # =========================================================================
    # Issue Operations
    # =========================================================================

    async def create_issue(self, project_key: str, summary: str) -> CreatedIssue:
        """Create an issue in a project.

        Args:
            project_key: Target project key (e.g., "PROJ").
            summary: Issue summary, already derived and truncated.

        Returns:
            CreatedIssue with the tracker-assigned id, or an empty one in dry run.

        Raises:
            RemoteCreateError: If the tracker rejects the issue.
            TransportError: If the tracker is unreachable.
        """
        if self.dry_run:
            logger.info(f"[DRY RUN] Would create {self.config.issue_type} in {project_key}: {summary!r}")
            return CreatedIssue()

        payload = {
            "fields": {
                "project": {"key": project_key},
                "summary": summary,
                "issuetype": {"name": self.config.issue_type},
            }
        }
        response = await self._post(self.config.create_issue_path, payload, RemoteCreateError)

        try:
            data = response.json()
        except ValueError:
            data = {}
        if not isinstance(data, dict):
            data = {}

        issue = CreatedIssue(id=data.get("id"), key=data.get("key"))
        logger.info(f"Created issue {issue.key or issue.id or '<unknown>'} in {project_key}")
        return issue

    async def attach_to_iteration(self, iteration_id: str, issue_id: str) -> None:
        """Attach an existing issue to an iteration.

        Args:
            iteration_id: Tracker iteration (sprint) id.
            issue_id: Tracker issue id returned by create_issue.

        Raises:
            RemoteAttachError: If the tracker rejects the attach.
            TransportError: If the tracker is unreachable.
        """
        if self.dry_run:
            logger.info(f"[DRY RUN] Would attach issue {issue_id} to iteration {iteration_id}")
            return

        endpoint = self.config.attach_issue_path.format(iteration_id=iteration_id)
        await self._post(endpoint, {"issues": [issue_id]}, RemoteAttachError)
        logger.info(f"Attached issue {issue_id} to iteration {iteration_id}")
