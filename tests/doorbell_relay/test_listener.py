"""Tests for the UDP trigger listener using loopback sockets."""

from __future__ import annotations

import logging
import socket

import pytest

from doorbell_relay.errors import ListenerBindError
from doorbell_relay.listener import TriggerListener
from doorbell_relay.models.alert import TriggerMessage
from doorbell_relay.models.config import ListenerConfig
from tests.doorbell_relay.helpers import wait_until


def _send(port: int, data: bytes) -> None:
    with socket.socket(socket.AF_INET, socket.SOCK_DGRAM) as sock:
        sock.sendto(data, ("127.0.0.1", port))


async def _started_listener(received: list[TriggerMessage]) -> tuple[TriggerListener, int]:
    listener = TriggerListener(ListenerConfig(host="127.0.0.1", port=0))
    listener.register_callback(received.append)
    await listener.start()
    address = listener.address
    assert address is not None
    return listener, address[1]


class TestTriggerListener:
    """Datagram decoding and dispatch."""

    @pytest.mark.asyncio
    async def test_datagram_becomes_trimmed_message(self) -> None:
        """Each datagram is decoded, trimmed and passed on with its sender."""
        # Given: A bound listener
        received: list[TriggerMessage] = []
        listener, port = await _started_listener(received)

        # When: The device sends a trigger with surrounding whitespace
        _send(port, b"  Motion Detected at Front Door\n")

        # Then: One trimmed message arrives
        await wait_until(lambda: len(received) == 1)
        assert received[0].text == "Motion Detected at Front Door"
        assert received[0].sender_host == "127.0.0.1"
        assert received[0].sender_port > 0
        assert set(received[0].model_dump()) == {"text", "sender_host", "sender_port"}
        await listener.shutdown()

    @pytest.mark.asyncio
    async def test_each_datagram_is_one_message(self) -> None:
        received: list[TriggerMessage] = []
        listener, port = await _started_listener(received)

        for text in (b"Doorbell Button Pressed", b"Door Unlocked by RFID", b"Doorbell Button Pressed"):
            _send(port, text)

        # No deduplication
        await wait_until(lambda: len(received) == 3)
        assert [m.text for m in received].count("Doorbell Button Pressed") == 2
        await listener.shutdown()

    @pytest.mark.asyncio
    async def test_empty_datagram_ignored(self) -> None:
        received: list[TriggerMessage] = []
        listener, port = await _started_listener(received)

        _send(port, b"   \n")
        _send(port, b"Tamper!!")

        await wait_until(lambda: len(received) == 1)
        assert received[0].text == "Tamper!!"
        await listener.shutdown()

    @pytest.mark.asyncio
    async def test_invalid_utf8_is_replaced(self) -> None:
        received: list[TriggerMessage] = []
        listener, port = await _started_listener(received)

        _send(port, b"Motion \xff Detected")

        await wait_until(lambda: len(received) == 1)
        assert received[0].text == "Motion � Detected"
        await listener.shutdown()

    @pytest.mark.asyncio
    async def test_trigger_text_logged_at_debug_only(
        self, caplog: pytest.LogCaptureFixture
    ) -> None:
        """The pipeline owns the INFO line for a trigger; the listener stays quiet."""
        received: list[TriggerMessage] = []
        listener, port = await _started_listener(received)

        with caplog.at_level(logging.DEBUG, logger="doorbell_relay.listener"):
            _send(port, b"Doorbell Button Pressed")
            await wait_until(lambda: len(received) == 1)
        await listener.shutdown()

        mentions = [r for r in caplog.records if "Doorbell Button Pressed" in r.getMessage()]
        assert [r.levelno for r in mentions] == [logging.DEBUG]

    @pytest.mark.asyncio
    async def test_callback_error_does_not_stop_listener(self) -> None:
        """A failing callback is logged and the next datagram still arrives."""
        received: list[TriggerMessage] = []

        def callback(message: TriggerMessage) -> None:
            if message.text == "bad":
                raise RuntimeError("boom")
            received.append(message)

        listener = TriggerListener(ListenerConfig(host="127.0.0.1", port=0))
        listener.register_callback(callback)
        await listener.start()
        assert listener.address is not None
        port = listener.address[1]

        _send(port, b"bad")
        _send(port, b"good")

        await wait_until(lambda: len(received) == 1)
        assert listener.is_listening
        await listener.shutdown()


class TestTriggerListenerLifecycle:
    """Bind and shutdown."""

    @pytest.mark.asyncio
    async def test_bind_conflict_is_fatal_error(self) -> None:
        """Binding an address already in use raises ListenerBindError."""
        # Given: A port already bound by another socket
        with socket.socket(socket.AF_INET, socket.SOCK_DGRAM) as blocker:
            blocker.bind(("127.0.0.1", 0))
            port = blocker.getsockname()[1]
            listener = TriggerListener(ListenerConfig(host="127.0.0.1", port=port))
            listener.register_callback(lambda _m: None)

            # When/Then: Starting fails with a bind error
            with pytest.raises(ListenerBindError) as exc_info:
                await listener.start()

        assert exc_info.value.port == port
        assert not listener.is_listening

    @pytest.mark.asyncio
    async def test_start_requires_callback(self) -> None:
        listener = TriggerListener(ListenerConfig(host="127.0.0.1", port=0))

        with pytest.raises(RuntimeError, match="register_callback"):
            await listener.start()

    @pytest.mark.asyncio
    async def test_shutdown_stops_listening(self) -> None:
        received: list[TriggerMessage] = []
        listener, _ = await _started_listener(received)
        assert listener.is_listening

        await listener.shutdown()

        assert not listener.is_listening
        assert listener.address is None
