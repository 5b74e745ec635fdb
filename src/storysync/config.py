"""Configuration management for storysync."""

from __future__ import annotations

from pathlib import Path

import yaml
from pydantic import BaseModel, Field

DEFAULT_CONFIG_PATH = Path(".storysync/config.yaml")


class TrackerConfig(BaseModel):
    """Remote tracker settings shared by every batch."""

    timeout: float = Field(default=10.0, description="Per-call timeout in seconds")
    create_issue_path: str = Field(default="/rest/api/3/issue", description="Issue creation endpoint")
    attach_issue_path: str = Field(
        default="/rest/agile/1.0/sprint/{iteration_id}/issue",
        description="Iteration attach endpoint; {iteration_id} is substituted per batch",
    )
    issue_type: str = Field(default="Story", description="Issue type name sent on creation")
    summary_max_length: int = Field(default=250, description="Summaries are truncated to this many characters")
    fallback_summary: str = Field(default="User Story", description="Summary used when an item has no text")
    dry_run: bool = Field(default=False, description="Log operations without executing")


class ServerConfig(BaseModel):
    """HTTP proxy settings."""

    host: str = "127.0.0.1"
    port: int = 4000
    cors_origins: list[str] = Field(default_factory=lambda: ["*"])
    log_level: str = "info"


class Config(BaseModel):
    """storysync configuration."""

    tracker: TrackerConfig = Field(default_factory=TrackerConfig)
    server: ServerConfig = Field(default_factory=ServerConfig)

    @classmethod
    def load(cls, config_path: Path | None = None) -> Config:
        """Load configuration from file or use defaults."""
        if config_path is None:
            config_path = DEFAULT_CONFIG_PATH

        if config_path.exists():
            with config_path.open() as f:
                data = yaml.safe_load(f) or {}
            return cls.model_validate(data)

        return cls()

    def save(self, config_path: Path) -> None:
        """Save configuration to file."""
        config_path.parent.mkdir(parents=True, exist_ok=True)
        with config_path.open("w") as f:
            yaml.dump(self.model_dump(), f, default_flow_style=False)
