"""Core data models for storysync."""

from __future__ import annotations

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator


class WorkItem(BaseModel):
    """A locally-authored unit of work to replicate into the tracker."""

    model_config = ConfigDict(extra="ignore")

    content: str = ""
    status: str = ""  # Informational only, never sent to the tracker
    actor: str | None = None

    @field_validator("content", "status", mode="before")
    @classmethod
    def _none_as_empty(cls, value: object) -> object:
        return "" if value is None else value


class Credentials(BaseModel):
    """Tracker account used for the whole batch."""

    username: str
    token: str

    def __repr__(self) -> str:
        # Never leak the token through logs or tracebacks
        return f"Credentials(username={self.username!r}, token='***')"

    __str__ = __repr__


class SyncRequest(BaseModel):
    """A batch of work items bound for one tracker project."""

    model_config = ConfigDict(populate_by_name=True)

    tracker_base_url: str = Field(validation_alias=AliasChoices("tracker_base_url", "trackerBaseUrl", "jiraUrl"))
    credentials: Credentials
    project_key: str = Field(validation_alias=AliasChoices("project_key", "projectKey"))
    items: list[WorkItem] = Field(validation_alias=AliasChoices("items", "stories"))
    iteration_id: str | None = Field(
        default=None,
        validation_alias=AliasChoices("iteration_id", "iterationId", "sprintId"),
    )

    @field_validator("iteration_id", mode="before")
    @classmethod
    def _stringify_iteration(cls, value: object) -> object:
        # Sprint ids usually arrive as JSON numbers; empty or 0 means "no iteration"
        if value is None or value == "" or value == 0:
            return None
        if isinstance(value, int) and not isinstance(value, bool):
            return str(value)
        return value


class CreatedIssue(BaseModel):
    """Identifier assigned by the tracker to a freshly created issue."""

    id: str | None = None
    key: str | None = None

    @field_validator("id", mode="before")
    @classmethod
    def _stringify_id(cls, value: object) -> object:
        if isinstance(value, int) and not isinstance(value, bool):
            return str(value)
        return value


class SyncResult(BaseModel):
    """Aggregate outcome of one batch."""

    success: bool
    error_message: str | None = None

    @classmethod
    def ok(cls) -> SyncResult:
        return cls(success=True)

    @classmethod
    def failed(cls, message: str) -> SyncResult:
        return cls(success=False, error_message=message)
