"""Notification payload assembly. Pure data, no I/O."""

from __future__ import annotations

from collections.abc import Callable
from datetime import datetime

from doorbell_relay.models.alert import AlertStyle
from doorbell_relay.models.config import SnapshotConfig, WebhookConfig
from doorbell_relay.models.payload import (
    CompositePayload,
    Embed,
    EmbedFooter,
    EmbedImage,
    TextPayload,
)
from doorbell_relay.snapshot import Snapshot

REASON_CAMERA_UNREACHABLE = "Camera unreachable"


class PayloadBuilder:
    """Builds composite (embed + image) and text-only payloads."""

    def __init__(
        self,
        webhook: WebhookConfig,
        snapshot: SnapshotConfig,
        clock: Callable[[], datetime] = datetime.now,
    ) -> None:
        self._username = webhook.username
        self._footer_label = webhook.footer_label
        self._attachment_name = snapshot.attachment_name
        self._content_type = snapshot.content_type
        self._clock = clock

    def composite(self, style: AlertStyle, text: str, snapshot: Snapshot) -> CompositePayload:
        """Embed titled by category, described by the trigger text, with the image attached."""
        embed = Embed(
            title=style.title,
            description=text,
            color=style.color,
            image=EmbedImage(url=f"attachment://{self._attachment_name}"),
            footer=EmbedFooter(text=self._footer_text()),
        )
        return CompositePayload(
            username=self._username,
            embeds=[embed],
            attachment_name=self._attachment_name,
            attachment_content_type=self._content_type,
            attachment=snapshot.data,
        )

    def text_only(self, text: str, reason: str) -> TextPayload:
        """Text-only alert stating the trigger and why no snapshot is attached."""
        return TextPayload(content=f"⚠️ **Alert:** {text}\n(Camera snapshot failed: {reason})")

    def _footer_text(self) -> str:
        return f"{self._footer_label} • {self._clock().strftime('%H:%M:%S')}"
