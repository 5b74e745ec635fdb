"""Shared fixtures: an in-memory tracker behind httpx.MockTransport."""

from __future__ import annotations

import json
from typing import Any

import httpx
import pytest

CREATE_PATH = "/rest/api/3/issue"


class FakeTracker:
    """Records every call and answers like a Jira-style tracker."""

    def __init__(self) -> None:
        self.requests: list[httpx.Request] = []
        self.fail_create_at: int | None = None  # 1-indexed create call to reject
        self.create_error: tuple[int, Any] = (400, {"errorMessages": ["Field 'summary' cannot be empty"]})
        self.attach_error: tuple[int, Any] | None = None
        self.return_ids = True
        self.raise_on_create: Exception | None = None
        self._next_id = 10000

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if request.url.path.endswith(CREATE_PATH):
            if self.raise_on_create is not None:
                raise self.raise_on_create
            if self.fail_create_at == len(self.create_calls):
                status_code, body = self.create_error
                return httpx.Response(status_code, json=body)
            self._next_id += 1
            body = {"id": str(self._next_id), "key": f"PROJ-{self._next_id - 10000}"} if self.return_ids else {}
            return httpx.Response(201, json=body)
        if "/sprint/" in request.url.path:
            if self.attach_error is not None:
                status_code, body = self.attach_error
                return httpx.Response(status_code, json=body)
            return httpx.Response(204)
        return httpx.Response(404, json={"errorMessages": ["Not found"]})

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handler)

    @property
    def create_calls(self) -> list[httpx.Request]:
        return [r for r in self.requests if r.url.path.endswith(CREATE_PATH)]

    @property
    def attach_calls(self) -> list[httpx.Request]:
        return [r for r in self.requests if "/sprint/" in r.url.path]

    def created_summaries(self) -> list[str]:
        return [json.loads(r.content)["fields"]["summary"] for r in self.create_calls]


@pytest.fixture
def fake_tracker() -> FakeTracker:
    return FakeTracker()


@pytest.fixture
def request_body() -> dict[str, Any]:
    """A valid /api/sync body with three items."""
    return {
        "trackerBaseUrl": "https://tracker.example.com",
        "username": "pm@example.com",
        "apiToken": "secret-token",
        "projectKey": "PROJ",
        "items": [
            {"content": "Plan the sprint", "status": "draft", "actor": "PM"},
            {"content": "Export the report as PDF", "status": "draft"},
            {"content": "Invite team members", "status": "approved", "actor": "Admin"},
        ],
    }
