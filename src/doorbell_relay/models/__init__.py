"""Data models for the alert relay."""

from doorbell_relay.models.alert import AlertStyle, TriggerMessage
from doorbell_relay.models.config import (
    HealthConfig,
    ListenerConfig,
    RelayConfig,
    SnapshotConfig,
    WebhookConfig,
)
from doorbell_relay.models.enums import AlertCategory, AlertState, FailureReason
from doorbell_relay.models.payload import CompositePayload, NotificationPayload, TextPayload

__all__ = [
    "AlertCategory",
    "AlertState",
    "AlertStyle",
    "CompositePayload",
    "FailureReason",
    "HealthConfig",
    "ListenerConfig",
    "NotificationPayload",
    "RelayConfig",
    "SnapshotConfig",
    "TextPayload",
    "TriggerMessage",
    "WebhookConfig",
]
