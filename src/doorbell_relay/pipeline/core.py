"""AlertPipeline orchestrator - classify, attach snapshot, deliver, fall back."""

from __future__ import annotations

import asyncio
import logging
from dataclasses import asdict, dataclass

from pydantic import ValidationError

from doorbell_relay.classifier import classify
from doorbell_relay.errors import Delivered, DeliveryError
from doorbell_relay.interfaces import Notifier
from doorbell_relay.logging_setup import reset_sender, set_sender
from doorbell_relay.models.alert import TriggerMessage
from doorbell_relay.models.enums import AlertState
from doorbell_relay.payloads import REASON_CAMERA_UNREACHABLE, PayloadBuilder
from doorbell_relay.snapshot import Snapshot, SnapshotMissing, SnapshotReader

logger = logging.getLogger(__name__)


@dataclass
class PipelineStats:
    """In-memory delivery counters. Reset on restart."""

    received: int = 0
    delivered: int = 0
    fallback_delivered: int = 0
    failed: int = 0

    def as_dict(self) -> dict[str, int]:
        return asdict(self)


class AlertPipeline:
    """Runs each trigger through the delivery state machine in its own task.

    Implements error-as-value pattern: snapshot reads and send attempts return
    a result or an error value, and the pipeline matches on them to decide
    whether a text-only fallback is sent. No failure escapes a task, so one
    alert never affects the listener or any other alert in flight.
    """

    def __init__(
        self,
        snapshot_reader: SnapshotReader,
        payload_builder: PayloadBuilder,
        notifier: Notifier,
    ) -> None:
        self._snapshot = snapshot_reader
        self._builder = payload_builder
        self._notifier = notifier
        self.stats = PipelineStats()

        # Track in-flight processing
        self._tasks: set[asyncio.Task[AlertState]] = set()

    @property
    def in_flight(self) -> int:
        return len(self._tasks)

    def on_trigger(self, message: TriggerMessage) -> None:
        """Callback for the listener: schedule one independent pipeline task.

        Must be called from the event loop thread.
        """
        loop = asyncio.get_running_loop()
        task = loop.create_task(self.process(message))
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)
        task.add_done_callback(self._log_task_exception)

    def _log_task_exception(self, task: asyncio.Task[AlertState]) -> None:
        """Log unexpected task exceptions."""
        try:
            exc = task.exception()
        except asyncio.CancelledError:
            return
        if exc is not None:
            self.stats.failed += 1
            logger.error("Alert processing failed: %s", exc, exc_info=exc)

    async def drain(self, timeout: float | None = None) -> None:
        """Wait for in-flight alerts to finish, cancelling stragglers after timeout."""
        if not self._tasks:
            return
        pending = set(self._tasks)
        _, still_pending = await asyncio.wait(pending, timeout=timeout)
        if still_pending:
            logger.warning("Cancelling %d alert(s) still in flight at shutdown", len(still_pending))
            for task in still_pending:
                task.cancel()
            await asyncio.gather(*still_pending, return_exceptions=True)

    async def process(self, message: TriggerMessage) -> AlertState:
        """Deliver one alert and return its terminal state."""
        token = set_sender(message.sender)
        try:
            return await self._process(message)
        finally:
            reset_sender(token)

    async def _process(self, message: TriggerMessage) -> AlertState:
        self.stats.received += 1
        logger.info("Alert received: %r", message.text)

        style = classify(message.text)
        logger.debug("Alert classified: category=%s title=%s", style.category, style.title)

        snapshot = await self._snapshot.read()
        match snapshot:
            case SnapshotMissing() as missing:
                logger.info(
                    "No snapshot for alert (%s): path=%s; sending text-only alert",
                    missing.reason,
                    missing.path,
                )
                return await self._send_fallback(message, missing.reason)
            case Snapshot() as image:
                pass
            case _:
                raise TypeError(f"Unexpected snapshot result type: {type(snapshot).__name__}")

        try:
            payload = self._builder.composite(style, message.text, image)
        except ValidationError as exc:
            logger.error("Composite payload invalid, alert abandoned: %s", exc)
            self.stats.failed += 1
            return AlertState.ABANDONED

        result = await self._notifier.send(payload)
        match result:
            case Delivered():
                self.stats.delivered += 1
                logger.info(
                    "Alert delivered with snapshot: category=%s bytes=%d",
                    style.category,
                    len(image.data),
                )
                return AlertState.DELIVERED
            case DeliveryError() as err if err.is_network:
                logger.warning("Snapshot alert send failed (%s), sending text-only alert", err)
                return await self._send_fallback(message, REASON_CAMERA_UNREACHABLE)
            case DeliveryError() as err:
                self.stats.failed += 1
                logger.error("Snapshot alert send failed, not retrying: %s", err)
                return AlertState.ABANDONED
            case _:
                raise TypeError(f"Unexpected delivery result type: {type(result).__name__}")

    async def _send_fallback(self, message: TriggerMessage, reason: str) -> AlertState:
        payload = self._builder.text_only(message.text, reason)
        result = await self._notifier.send(payload)
        match result:
            case Delivered():
                self.stats.fallback_delivered += 1
                logger.info("Text-only alert delivered: reason=%s", reason)
                return AlertState.DELIVERED
            case DeliveryError() as err:
                self.stats.failed += 1
                logger.error("Text-only alert send failed, alert dropped: %s", err)
                return AlertState.FALLBACK_FAILED
            case _:
                raise TypeError(f"Unexpected delivery result type: {type(result).__name__}")
