"""Error hierarchy and per-attempt result values for the alert relay."""

from __future__ import annotations

from dataclasses import dataclass

from doorbell_relay.models.enums import FailureReason


class RelayError(Exception):
    """Base exception for relay errors.

    Compatible with error-as-value pattern: instances can be returned as values
    instead of raised. Preserves stack traces via exception chaining.
    """

    def __init__(self, message: str, cause: Exception | None = None) -> None:
        super().__init__(message)
        self.cause = cause
        self.__cause__ = cause


class ListenerBindError(RelayError):
    """The trigger listener could not bind its UDP endpoint. Fatal."""

    def __init__(self, host: str, port: int, cause: Exception) -> None:
        super().__init__(f"Cannot bind trigger listener to {host}:{port}: {cause}", cause=cause)
        self.host = host
        self.port = port


class DeliveryError(RelayError):
    """A single webhook send attempt failed."""

    def __init__(
        self,
        reason: FailureReason,
        detail: str,
        cause: Exception | None = None,
        status: int | None = None,
    ) -> None:
        super().__init__(f"Webhook delivery failed ({reason}): {detail}", cause=cause)
        self.reason = reason
        self.detail = detail
        self.status = status

    @property
    def is_network(self) -> bool:
        return self.reason.is_network


@dataclass(frozen=True)
class Delivered:
    """A webhook send attempt succeeded."""

    status: int


DeliveryResult = Delivered | DeliveryError
