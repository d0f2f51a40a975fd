"""Outbound notifiers."""

from doorbell_relay.notifiers.webhook import WebhookNotifier

__all__ = ["WebhookNotifier"]
