"""Interface definitions for alert relay components."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from doorbell_relay.errors import DeliveryResult
    from doorbell_relay.models.payload import NotificationPayload


class Shutdownable(ABC):
    """Async shutdown interface for managed components."""

    @abstractmethod
    async def shutdown(self, timeout: float | None = None) -> None:
        """Release resources and stop background work."""
        raise NotImplementedError


class Notifier(Shutdownable, ABC):
    """Delivers notification payloads to an external service."""

    @abstractmethod
    async def send(self, payload: NotificationPayload) -> DeliveryResult:
        """Send one payload.

        Must not raise for delivery failures: returns Delivered or a
        DeliveryError describing why the attempt failed.
        """
        raise NotImplementedError

    @abstractmethod
    async def ping(self) -> bool:
        """Health check. Returns True if the destination is reachable."""
        raise NotImplementedError
