"""Shared pytest fixtures for doorbell relay tests."""

from __future__ import annotations

import asyncio
import socket
import sys
from collections.abc import AsyncGenerator
from pathlib import Path

# Add src to sys.path for imports
src_path = Path(__file__).parent.parent.parent / "src"
if str(src_path.resolve()) not in sys.path:
    sys.path.insert(0, str(src_path.resolve()))

import pytest
import pytest_asyncio
from aiohttp import web

from doorbell_relay.models.config import SnapshotConfig, WebhookConfig
from doorbell_relay.payloads import PayloadBuilder
from tests.doorbell_relay.helpers import FIXED_NOW, FakeWebhook, RecordedRequest


@pytest.fixture
def snapshot_path(tmp_path: Path) -> Path:
    """Path of the snapshot file (not created)."""
    return tmp_path / "visitor.jpg"


@pytest.fixture
def snapshot_config(snapshot_path: Path) -> SnapshotConfig:
    return SnapshotConfig(path=str(snapshot_path), read_timeout_s=2.0)


@pytest.fixture
def webhook_config() -> WebhookConfig:
    return WebhookConfig(url="http://127.0.0.1:8123/webhook", username="Doorbell Security")


@pytest.fixture
def payload_builder(webhook_config: WebhookConfig, snapshot_config: SnapshotConfig) -> PayloadBuilder:
    return PayloadBuilder(webhook_config, snapshot_config, clock=lambda: FIXED_NOW)



async def _record(request: web.Request) -> RecordedRequest:
    recorded = RecordedRequest(method=request.method, content_type=request.content_type)
    if request.method != "POST":
        return recorded
    if request.content_type == "application/json":
        recorded.json_body = await request.json()
        return recorded
    reader = await request.multipart()
    async for part in reader:
        if part.filename:
            data = await part.read()
            content_type = part.headers.get("Content-Type", "")
            recorded.files[part.name or ""] = (part.filename, content_type, bytes(data))
        else:
            recorded.form[part.name or ""] = await part.text()
    return recorded


@pytest_asyncio.fixture
async def fake_webhook() -> AsyncGenerator[FakeWebhook, None]:
    """Run a webhook endpoint on an ephemeral loopback port."""
    requests: list[RecordedRequest] = []
    holder: dict[str, FakeWebhook] = {}

    async def handler(request: web.Request) -> web.Response:
        hook = holder["hook"]
        requests.append(await _record(request))
        if hook.delay_s:
            await asyncio.sleep(hook.delay_s)
        if request.method == "GET":
            if hook.status >= 400:
                return web.Response(status=hook.status)
            return web.json_response({"id": "1", "name": "doorbell"})
        return web.Response(status=hook.status)

    app = web.Application()
    app.router.add_route("*", "/webhook", handler)
    runner = web.AppRunner(app)
    await runner.setup()
    site = web.TCPSite(runner, "127.0.0.1", 0)
    await site.start()
    host, port = runner.addresses[0][:2]
    holder["hook"] = FakeWebhook(url=f"http://{host}:{port}/webhook", requests=requests)
    try:
        yield holder["hook"]
    finally:
        await runner.cleanup()


def _free_port(kind: socket.SocketKind) -> int:
    with socket.socket(socket.AF_INET, kind) as sock:
        sock.bind(("127.0.0.1", 0))
        return int(sock.getsockname()[1])


@pytest.fixture
def unused_udp_port() -> int:
    """Return a loopback UDP port that was free a moment ago."""
    return _free_port(socket.SOCK_DGRAM)


@pytest.fixture
def unused_tcp_port() -> int:
    """Return a loopback TCP port that was free a moment ago."""
    return _free_port(socket.SOCK_STREAM)


@pytest.fixture
def refused_url(unused_tcp_port: int) -> str:
    """Webhook URL on a loopback TCP port with nothing listening."""
    return f"http://127.0.0.1:{unused_tcp_port}/webhook"
