"""HTTP health check endpoint."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from aiohttp import web

if TYPE_CHECKING:
    from doorbell_relay.interfaces import Notifier
    from doorbell_relay.listener import TriggerListener
    from doorbell_relay.pipeline import AlertPipeline

logger = logging.getLogger(__name__)


class HealthServer:
    """HTTP server for health checks.

    Provides /health endpoint returning component status.
    """

    def __init__(
        self,
        host: str = "0.0.0.0",
        port: int = 8080,
    ) -> None:
        """Initialize health server.

        Args:
            host: Host to bind to
            port: Port to bind to
        """
        self.host = host
        self.port = port

        # Components to check (set via set_components)
        self._listener: TriggerListener | None = None
        self._notifier: Notifier | None = None
        self._pipeline: AlertPipeline | None = None

        # Server state
        self._app: web.Application | None = None
        self._runner: web.AppRunner | None = None
        self._site: web.TCPSite | None = None

        logger.info("HealthServer initialized: %s:%d", host, port)

    def set_components(
        self,
        *,
        listener: TriggerListener | None = None,
        notifier: Notifier | None = None,
        pipeline: AlertPipeline | None = None,
    ) -> None:
        """Set components to check."""
        self._listener = listener
        self._notifier = notifier
        self._pipeline = pipeline

    async def start(self) -> None:
        """Start HTTP server."""
        self._app = web.Application()
        self._app.router.add_get("/health", self._health_handler)

        self._runner = web.AppRunner(self._app)
        await self._runner.setup()

        self._site = web.TCPSite(self._runner, self.host, self.port)
        await self._site.start()

        logger.info("HealthServer started: http://%s:%d/health", self.host, self.port)

    async def stop(self) -> None:
        """Stop HTTP server."""
        if self._runner:
            await self._runner.cleanup()

        self._app = None
        self._runner = None
        self._site = None

        logger.info("HealthServer stopped")

    async def _health_handler(self, request: web.Request) -> web.Response:
        """Handle GET /health request."""
        health_data = await self.compute_health()
        return web.json_response(health_data)

    async def compute_health(self) -> dict[str, Any]:
        """Compute health status and return JSON data."""
        checks = {
            "listener": self._check_listener(),
            "webhook": await self._check_webhook(),
        }
        return {
            "status": self._compute_status(checks),
            "checks": checks,
            "in_flight": self._pipeline.in_flight if self._pipeline else 0,
            "counters": self._pipeline.stats.as_dict() if self._pipeline else {},
        }

    def _check_listener(self) -> bool:
        if self._listener is None:
            return False
        return self._listener.is_listening

    async def _check_webhook(self) -> bool:
        if self._notifier is None:
            return True

        try:
            return await self._notifier.ping()
        except Exception as e:
            logger.warning("Webhook health check failed: %s", e, exc_info=True)
            return False

    def _compute_status(self, checks: dict[str, bool]) -> str:
        """Listener down is unhealthy; an unreachable webhook only degrades."""
        if not checks["listener"]:
            return "unhealthy"
        if not checks["webhook"]:
            return "degraded"
        return "healthy"
