"""Configuration models.

Defines the application configuration, which selects the persistence
backend, the change transport and the local actor identity.
"""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, Field, field_validator

DEFAULT_STATE_KEY = "kanban-board-data"


class StorageConfig(BaseModel):
    """Persistence configuration."""

    backend: Literal["sqlite", "json", "memory"] = Field(default="sqlite")
    path: str | None = Field(
        default=None,
        description="Database file (sqlite) or directory (json); "
        "defaults to the user data dir",
    )
    state_key: str = Field(default=DEFAULT_STATE_KEY)

    @field_validator("state_key")
    @classmethod
    def validate_state_key(cls, v: str) -> str:
        """Reject blank keys and keys that are not safe file names."""
        if not v or not v.strip():
            raise ValueError("state_key cannot be empty")
        if "/" in v or "\\" in v:
            raise ValueError("state_key cannot contain path separators")
        return v.strip()


class TransportConfig(BaseModel):
    """Change broadcast configuration."""

    kind: Literal["none", "log", "webhook"] = Field(default="log")
    url: str | None = Field(default=None, description="Webhook URL")
    timeout: float = Field(default=10.0, gt=0)
    token: str | None = Field(default=None, description="Bearer token for webhook")


class AuthConfig(BaseModel):
    """Identity configuration."""

    actor: str | None = Field(default=None, description="Local actor id")


class OutputConfig(BaseModel):
    """Output configuration."""

    color: bool = Field(default=True)


class AppConfig(BaseModel):
    """Main taskboard configuration."""

    storage: StorageConfig = Field(default_factory=StorageConfig)
    transport: TransportConfig = Field(default_factory=TransportConfig)
    auth: AuthConfig = Field(default_factory=AuthConfig)
    output: OutputConfig = Field(default_factory=OutputConfig)
