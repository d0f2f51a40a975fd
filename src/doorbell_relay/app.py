"""Main application that wires all components together."""

from __future__ import annotations

import asyncio
import logging
import signal
from pathlib import Path

from doorbell_relay.config import load_config, resolve_webhook_url
from doorbell_relay.health import HealthServer
from doorbell_relay.listener import TriggerListener
from doorbell_relay.models.config import RelayConfig
from doorbell_relay.notifiers import WebhookNotifier
from doorbell_relay.payloads import PayloadBuilder
from doorbell_relay.pipeline import AlertPipeline
from doorbell_relay.snapshot import SnapshotReader

logger = logging.getLogger(__name__)

_SHUTDOWN_GRACE_S = 15.0


class Application:
    """Main application that orchestrates all components.

    Handles component creation, lifecycle, and graceful shutdown.
    """

    def __init__(self, config_path: Path) -> None:
        """Initialize application with config file path.

        Args:
            config_path: Path to YAML config file
        """
        self._config_path = config_path
        self._config: RelayConfig | None = None

        # Components (created in _create_components)
        self._notifier: WebhookNotifier | None = None
        self._pipeline: AlertPipeline | None = None
        self._listener: TriggerListener | None = None
        self._health_server: HealthServer | None = None

        # Shutdown state
        self._shutdown_event = asyncio.Event()
        self._shutdown_started = False

    async def run(self) -> None:
        """Run the application.

        Loads config, binds the listener, and runs until shutdown signal.

        Raises:
            ConfigError: If the config or webhook URL is invalid
            ListenerBindError: If the trigger endpoint cannot be bound
        """
        logger.info("Starting doorbell relay...")

        self._config = load_config(self._config_path)
        logger.info("Config loaded from %s", self._config_path)

        self._create_components(self._config)
        assert self._listener is not None

        try:
            await self._listener.start()
        except Exception:
            await self.shutdown()
            raise

        self._setup_signal_handlers()

        if self._health_server:
            try:
                await self._health_server.start()
            except OSError as exc:
                logger.warning("Health endpoint unavailable, continuing without it: %s", exc)
                await self._health_server.stop()
                self._health_server = None

        logger.info("Snapshot path: %s", self._config.snapshot.path)
        logger.info("Application started. Waiting for triggers...")

        # Wait for shutdown signal
        await self._shutdown_event.wait()

        # Graceful shutdown
        await self.shutdown()

    def _create_components(self, config: RelayConfig) -> None:
        """Create all components based on config."""
        webhook_url = resolve_webhook_url(config.webhook)
        self._notifier = WebhookNotifier(webhook_url, timeout_s=config.webhook.request_timeout_s)
        self._pipeline = AlertPipeline(
            snapshot_reader=SnapshotReader(config.snapshot),
            payload_builder=PayloadBuilder(config.webhook, config.snapshot),
            notifier=self._notifier,
        )
        self._listener = TriggerListener(config.listener)
        self._listener.register_callback(self._pipeline.on_trigger)

        if config.health.enabled:
            self._health_server = HealthServer(host=config.health.host, port=config.health.port)
            self._health_server.set_components(
                listener=self._listener,
                notifier=self._notifier,
                pipeline=self._pipeline,
            )

        logger.info("All components created")

    def _setup_signal_handlers(self) -> None:
        """Set up signal handlers for graceful shutdown."""
        loop = asyncio.get_running_loop()

        for sig in (signal.SIGINT, signal.SIGTERM):
            loop.add_signal_handler(sig, self._handle_signal, sig)

    def _handle_signal(self, sig: signal.Signals) -> None:
        """Handle shutdown signal."""
        if self._shutdown_started:
            logger.warning("Shutdown already in progress, ignoring signal")
            return

        logger.info("Received signal %s, initiating shutdown...", sig.name)
        self.request_shutdown()

    def request_shutdown(self) -> None:
        """Ask a running application to stop."""
        self._shutdown_started = True
        self._shutdown_event.set()

    async def shutdown(self) -> None:
        """Graceful shutdown of all components."""
        logger.info("Shutting down application...")

        # Stop accepting triggers first, then let in-flight alerts finish.
        if self._listener:
            await self._listener.shutdown()

        if self._pipeline:
            await self._pipeline.drain(timeout=_SHUTDOWN_GRACE_S)

        if self._health_server:
            await self._health_server.stop()

        if self._notifier:
            await self._notifier.shutdown()

        logger.info("Application shutdown complete")

    @property
    def config(self) -> RelayConfig:
        if self._config is None:
            raise RuntimeError("Config not loaded")
        return self._config

    @property
    def listener(self) -> TriggerListener | None:
        return self._listener

    @property
    def pipeline(self) -> AlertPipeline | None:
        return self._pipeline
