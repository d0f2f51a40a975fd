"""Health check endpoint."""

from doorbell_relay.health.server import HealthServer

__all__ = ["HealthServer"]
