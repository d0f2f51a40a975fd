"""UDP trigger listener."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable

from doorbell_relay.errors import ListenerBindError
from doorbell_relay.interfaces import Shutdownable
from doorbell_relay.models.alert import TriggerMessage
from doorbell_relay.models.config import ListenerConfig

logger = logging.getLogger(__name__)

TriggerCallback = Callable[[TriggerMessage], None]


class _TriggerProtocol(asyncio.DatagramProtocol):
    def __init__(self, callback: TriggerCallback) -> None:
        self._callback = callback

    def datagram_received(self, data: bytes, addr: tuple[str, int]) -> None:
        host, port = addr[0], addr[1]
        text = data.decode("utf-8", errors="replace").strip()
        if not text:
            logger.info("Ignoring empty trigger datagram from %s:%d", host, port)
            return
        logger.debug("UDP trigger from %s:%d: %s", host, port, text)
        message = TriggerMessage(text=text, sender_host=host, sender_port=port)
        try:
            self._callback(message)
        except Exception:
            logger.exception("Trigger callback failed for datagram from %s:%d", host, port)

    def error_received(self, exc: Exception) -> None:
        logger.warning("Trigger listener socket error: %s", exc)


class TriggerListener(Shutdownable):
    """Receives one trigger message per datagram and hands it to a callback.

    Stateless between messages: no acknowledgement is sent, and nothing is
    deduplicated or rate limited. The callback must return quickly; long work
    belongs in a task it schedules.
    """

    def __init__(self, config: ListenerConfig) -> None:
        self.host = config.host
        self.port = config.port
        self._callback: TriggerCallback | None = None
        self._transport: asyncio.DatagramTransport | None = None

    def register_callback(self, callback: TriggerCallback) -> None:
        """Register callback invoked for every non-empty trigger message."""
        self._callback = callback

    @property
    def is_listening(self) -> bool:
        return self._transport is not None and not self._transport.is_closing()

    @property
    def address(self) -> tuple[str, int] | None:
        """Bound (host, port), useful when configured with port 0."""
        if self._transport is None:
            return None
        sockname = self._transport.get_extra_info("sockname")
        return str(sockname[0]), int(sockname[1])

    async def start(self) -> None:
        """Bind the UDP endpoint.

        Raises:
            ListenerBindError: If the address cannot be bound
        """
        if self._callback is None:
            raise RuntimeError("register_callback() must be called before start()")
        if self.is_listening:
            return

        loop = asyncio.get_running_loop()
        callback = self._callback
        try:
            transport, _ = await loop.create_datagram_endpoint(
                lambda: _TriggerProtocol(callback),
                local_addr=(self.host, self.port),
            )
        except OSError as exc:
            raise ListenerBindError(self.host, self.port, exc) from exc

        self._transport = transport
        bound = self.address
        logger.info("Trigger listener bound on %s:%d", *(bound or (self.host, self.port)))

    async def shutdown(self, timeout: float | None = None) -> None:
        """Stop accepting datagrams."""
        _ = timeout
        if self._transport is not None:
            self._transport.close()
            self._transport = None
            logger.info("Trigger listener closed")
