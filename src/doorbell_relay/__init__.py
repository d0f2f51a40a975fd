"""Doorbell alert relay: UDP triggers to webhook notifications."""

__version__ = "0.1.0"

# Export commonly used types
from doorbell_relay.errors import DeliveryError, RelayError
from doorbell_relay.models.alert import AlertStyle, TriggerMessage
from doorbell_relay.models.enums import AlertCategory
from doorbell_relay.models.payload import CompositePayload, TextPayload

__all__ = [
    "AlertCategory",
    "AlertStyle",
    "CompositePayload",
    "DeliveryError",
    "RelayError",
    "TextPayload",
    "TriggerMessage",
    "__version__",
]
