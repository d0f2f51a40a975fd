"""Webhook notifier (Discord-style execute-webhook endpoint)."""

from __future__ import annotations

import asyncio
import json
import logging

import aiohttp

from doorbell_relay.errors import Delivered, DeliveryError, DeliveryResult
from doorbell_relay.interfaces import Notifier
from doorbell_relay.models.enums import FailureReason
from doorbell_relay.models.payload import CompositePayload, NotificationPayload, TextPayload

logger = logging.getLogger(__name__)

_PAYLOAD_JSON_FIELD = "payload_json"
_FILE_FIELD = "file"


def build_form(payload: CompositePayload) -> aiohttp.FormData:
    """Encode a composite payload as multipart form data.

    aiohttp sets the multipart Content-Type and boundary when the form is sent.
    """
    form = aiohttp.FormData()
    form.add_field(
        _FILE_FIELD,
        payload.attachment,
        filename=payload.attachment_name,
        content_type=payload.attachment_content_type,
    )
    form.add_field(
        _PAYLOAD_JSON_FIELD,
        json.dumps(payload.metadata(), ensure_ascii=False),
        content_type="application/json",
    )
    return form


class WebhookNotifier(Notifier):
    """POST alerts to a webhook URL.

    Composite payloads go out as multipart/form-data, text-only payloads as a
    JSON body. Each attempt is bounded by ``timeout_s``; failures come back as
    DeliveryError values rather than exceptions.
    """

    def __init__(self, url: str, timeout_s: float = 10.0) -> None:
        self._url = url
        self._timeout_s = float(timeout_s)
        self._session: aiohttp.ClientSession | None = None
        self._shutdown_called = False

    async def send(self, payload: NotificationPayload) -> DeliveryResult:
        """Send one payload and report the outcome."""
        if self._shutdown_called:
            return DeliveryError(FailureReason.UNEXPECTED, "notifier has been shut down")

        try:
            match payload:
                case CompositePayload():
                    request_kwargs: dict[str, object] = {"data": build_form(payload)}
                case TextPayload():
                    request_kwargs = {"json": payload.metadata()}
                case _:
                    raise TypeError(f"Unsupported payload type: {type(payload).__name__}")
        except (TypeError, ValueError) as exc:
            return DeliveryError(FailureReason.INVALID_PAYLOAD, str(exc), cause=exc)

        session = await self._get_session()
        try:
            async with session.post(self._url, **request_kwargs) as response:
                if response.status >= 400:
                    details = await response.text()
                    logger.debug("Webhook error details: %s", details)
                    return DeliveryError(
                        FailureReason.HTTP_STATUS,
                        f"HTTP {response.status}",
                        status=response.status,
                    )
                await response.read()
                return Delivered(status=response.status)
        except asyncio.TimeoutError as exc:
            return DeliveryError(FailureReason.TIMEOUT, "webhook request timed out", cause=exc)
        except aiohttp.ClientConnectionError as exc:
            return DeliveryError(FailureReason.CONNECTION, str(exc) or type(exc).__name__, cause=exc)
        except aiohttp.InvalidURL as exc:
            return DeliveryError(FailureReason.INVALID_PAYLOAD, f"invalid URL: {exc}", cause=exc)
        except aiohttp.ClientError as exc:
            return DeliveryError(FailureReason.UNEXPECTED, str(exc) or type(exc).__name__, cause=exc)

    async def ping(self) -> bool:
        """Health check - GET the webhook URL, which answers with its metadata."""
        if self._shutdown_called:
            return False

        session = await self._get_session()
        try:
            async with session.get(self._url) as response:
                if response.status >= 400:
                    return False
                await response.read()
        except (aiohttp.ClientError, asyncio.TimeoutError) as exc:
            logger.warning("Webhook ping failed: %s", exc)
            return False
        return True

    async def shutdown(self, timeout: float | None = None) -> None:
        """Cleanup resources - close HTTP session."""
        _ = timeout
        if self._shutdown_called:
            return
        self._shutdown_called = True

        if self._session and not self._session.closed:
            await self._session.close()

    async def _get_session(self) -> aiohttp.ClientSession:
        if self._session is None or self._session.closed:
            timeout = aiohttp.ClientTimeout(total=self._timeout_s)
            self._session = aiohttp.ClientSession(timeout=timeout)
        return self._session
