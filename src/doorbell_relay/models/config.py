"""Configuration models for the alert relay."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator


class ListenerConfig(BaseModel):
    """UDP trigger listener endpoint."""

    model_config = ConfigDict(frozen=True)

    host: str = "127.0.0.1"
    port: int = Field(default=7070, ge=0, le=65535)  # 0 binds an ephemeral port


class SnapshotConfig(BaseModel):
    """Location of the latest snapshot written by the sensing device."""

    model_config = ConfigDict(frozen=True)

    path: str = "/tmp/visitor.jpg"
    attachment_name: str = "snapshot.jpg"
    content_type: str = "image/jpeg"
    read_timeout_s: float = Field(default=5.0, gt=0)

    @field_validator("attachment_name")
    @classmethod
    def _validate_attachment_name(cls, value: str) -> str:
        if not value or "/" in value:
            raise ValueError("attachment_name must be a bare file name")
        return value


class WebhookConfig(BaseModel):
    """Outbound webhook settings.

    The URL embeds a secret token, so it is usually supplied through
    ``url_env`` rather than inline.
    """

    model_config = ConfigDict(frozen=True)

    url: str | None = None
    url_env: str | None = "DOORBELL_WEBHOOK_URL"
    username: str = "Doorbell Security"
    footer_label: str = "Doorbell"
    request_timeout_s: float = Field(default=10.0, gt=0)

    @model_validator(mode="after")
    def _validate_url_source(self) -> WebhookConfig:
        if not self.url and not self.url_env:
            raise ValueError("webhook requires either url or url_env")
        if self.url and not self.url.startswith(("http://", "https://")):
            raise ValueError("webhook.url must be an http(s) URL")
        return self


class HealthConfig(BaseModel):
    """Health endpoint configuration."""

    model_config = ConfigDict(frozen=True)

    enabled: bool = True
    host: str = "0.0.0.0"
    port: int = Field(default=8080, ge=1, le=65535)


class RelayConfig(BaseModel):
    """Root configuration. Built once at startup and never mutated."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    version: int = 1
    listener: ListenerConfig = Field(default_factory=ListenerConfig)
    snapshot: SnapshotConfig = Field(default_factory=SnapshotConfig)
    webhook: WebhookConfig = Field(default_factory=WebhookConfig)
    health: HealthConfig = Field(default_factory=HealthConfig)

    @field_validator("version", mode="before")
    @classmethod
    def _validate_version(cls, value: Any) -> Any:
        if value != 1:
            raise ValueError(f"Unsupported config version: {value}")
        return value
