"""Centralized enums for type safety and IDE support."""

from enum import StrEnum


class AlertCategory(StrEnum):
    """Semantic classification of a trigger message."""

    MOTION = "motion"
    TAMPER = "tamper"
    UNLOCK = "unlock"
    BUTTON_PRESS = "button_press"
    GENERIC = "generic"


class AlertState(StrEnum):
    """Per-alert delivery states.

    DELIVERED, FALLBACK_FAILED and ABANDONED are terminal. Nothing is persisted
    past process memory.
    """

    RECEIVED = "received"
    CLASSIFIED = "classified"
    IMAGE_PRESENT = "image_present"
    IMAGE_ABSENT = "image_absent"
    COMPOSITE_SEND_ATTEMPTED = "composite_send_attempted"
    COMPOSITE_SEND_FAILED = "composite_send_failed"
    FALLBACK_SEND_ATTEMPTED = "fallback_send_attempted"
    DELIVERED = "delivered"
    FALLBACK_FAILED = "fallback_failed"
    # Non-network failure of the composite send; logged, never retried
    ABANDONED = "abandoned"

    @property
    def is_terminal(self) -> bool:
        return self in (AlertState.DELIVERED, AlertState.FALLBACK_FAILED, AlertState.ABANDONED)


class FailureReason(StrEnum):
    """Why a single webhook send attempt failed."""

    CONNECTION = "connection"
    TIMEOUT = "timeout"
    HTTP_STATUS = "http_status"
    INVALID_PAYLOAD = "invalid_payload"
    UNEXPECTED = "unexpected"

    @property
    def is_network(self) -> bool:
        """True for transport-level failures that warrant a text-only fallback."""
        return self in (FailureReason.CONNECTION, FailureReason.TIMEOUT)
