"""Mock notifier for testing."""

from __future__ import annotations

import asyncio
from collections.abc import Iterable

from doorbell_relay.errors import Delivered, DeliveryError, DeliveryResult
from doorbell_relay.models.enums import FailureReason
from doorbell_relay.models.payload import NotificationPayload


class MockNotifier:
    """Mock implementation of Notifier interface for testing.

    Tracks all sent payloads in a list for test assertions. Outcomes are
    scripted per call; once the script runs out every send succeeds.
    """

    def __init__(
        self,
        outcomes: Iterable[DeliveryResult] = (),
        delay_s: float = 0.0,
    ) -> None:
        """Initialize mock notifier.

        Args:
            outcomes: Results returned by successive send() calls
            delay_s: Artificial delay before returning
        """
        self._outcomes = list(outcomes)
        self.delay_s = delay_s
        self.sent_payloads: list[NotificationPayload] = []
        self.shutdown_called = False

    @classmethod
    def failing(cls, reason: FailureReason, times: int = 1) -> MockNotifier:
        return cls([DeliveryError(reason, f"simulated {reason}") for _ in range(times)])

    async def send(self, payload: NotificationPayload) -> DeliveryResult:
        """Record the payload and return the next scripted outcome."""
        self.sent_payloads.append(payload)
        if self.delay_s > 0:
            await asyncio.sleep(self.delay_s)
        if self._outcomes:
            return self._outcomes.pop(0)
        return Delivered(status=204)

    async def ping(self) -> bool:
        return True

    async def shutdown(self, timeout: float | None = None) -> None:
        """Cleanup resources (no-op for mock)."""
        _ = timeout
        self.shutdown_called = True
