"""Mock implementations for testing."""

from tests.doorbell_relay.mocks.notifier import MockNotifier

__all__ = ["MockNotifier"]
