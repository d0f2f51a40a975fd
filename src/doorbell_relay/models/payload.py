"""Outbound notification payload models.

Two shapes are sent to the webhook:
- CompositePayload: embed metadata plus the snapshot bytes as a file part
- TextPayload: a single ``content`` string
"""

from __future__ import annotations

from typing import TypeAlias

from pydantic import BaseModel, ConfigDict, Field


class EmbedImage(BaseModel):
    model_config = ConfigDict(frozen=True)

    url: str


class EmbedFooter(BaseModel):
    model_config = ConfigDict(frozen=True)

    text: str


class Embed(BaseModel):
    """A single rich embed describing the alert."""

    model_config = ConfigDict(frozen=True)

    title: str
    description: str
    color: int
    image: EmbedImage
    footer: EmbedFooter


class CompositePayload(BaseModel):
    """Embed metadata with an attached snapshot image."""

    model_config = ConfigDict(frozen=True)

    username: str
    embeds: list[Embed] = Field(min_length=1, max_length=1)
    attachment_name: str
    attachment_content_type: str = "image/jpeg"
    attachment: bytes = Field(repr=False)

    def metadata(self) -> dict[str, object]:
        """Return the JSON document sent as the ``payload_json`` part."""
        return self.model_dump(mode="json", include={"username", "embeds"})


class TextPayload(BaseModel):
    """Minimal text-only payload."""

    model_config = ConfigDict(frozen=True)

    content: str = Field(min_length=1)

    def metadata(self) -> dict[str, object]:
        return {"content": self.content}


NotificationPayload: TypeAlias = CompositePayload | TextPayload
