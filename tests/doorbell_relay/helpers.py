"""Shared test constants and helpers."""

from __future__ import annotations

import asyncio
from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any

JPEG_BYTES = b"\xff\xd8\xff\xe0\x00\x10JFIF\x00fake-jpeg-body\xff\xd9"
FIXED_NOW = datetime(2025, 3, 14, 18, 30, 5)


@dataclass
class RecordedRequest:
    method: str
    content_type: str
    json_body: dict[str, Any] | None = None
    form: dict[str, Any] = field(default_factory=dict)
    files: dict[str, tuple[str, str, bytes]] = field(default_factory=dict)


@dataclass
class FakeWebhook:
    """Local aiohttp server standing in for the chat webhook."""

    url: str
    requests: list[RecordedRequest]
    status: int = 204
    delay_s: float = 0.0

    @property
    def posts(self) -> list[RecordedRequest]:
        return [request for request in self.requests if request.method == "POST"]


async def wait_until(predicate: Callable[[], bool], timeout: float = 3.0) -> None:
    """Poll until predicate() is true or fail the test."""
    loop = asyncio.get_running_loop()
    deadline = loop.time() + timeout
    while not predicate():
        if loop.time() > deadline:
            raise AssertionError("condition not met before timeout")
        await asyncio.sleep(0.01)
