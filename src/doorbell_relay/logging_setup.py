from __future__ import annotations

import contextvars
import json
import logging
import logging.config
import os

_CURRENT_SENDER: contextvars.ContextVar[str] = contextvars.ContextVar(
    "doorbell_relay_sender", default="-"
)
_STANDARD_LOGRECORD_ATTRS = {
    "name",
    "msg",
    "message",
    "asctime",
    "args",
    "levelname",
    "levelno",
    "pathname",
    "filename",
    "module",
    "exc_info",
    "exc_text",
    "stack_info",
    "lineno",
    "funcName",
    "created",
    "msecs",
    "relativeCreated",
    "thread",
    "threadName",
    "processName",
    "process",
    "taskName",
}


class _SenderFilter(logging.Filter):
    def filter(self, record: logging.LogRecord) -> bool:
        if not hasattr(record, "sender") or getattr(record, "sender") in (None, ""):
            record.sender = _CURRENT_SENDER.get()
        return True


class _JsonExtraFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        base = super().format(record)
        extras = _extract_extras(record)
        if not extras:
            return base
        extras_json = json.dumps(extras, indent=2, default=str, sort_keys=True)
        return f"{base}\n{extras_json}"


def _extract_extras(record: logging.LogRecord) -> dict[str, object]:
    extras: dict[str, object] = {}
    for key, value in record.__dict__.items():
        if key in _STANDARD_LOGRECORD_ATTRS:
            continue
        if key == "sender":
            continue
        extras[key] = value
    return extras


def set_sender(sender: str | None) -> contextvars.Token[str]:
    """Bind the `sender` value injected into log records for the current task."""
    return _CURRENT_SENDER.set(sender or "-")


def reset_sender(token: contextvars.Token[str]) -> None:
    _CURRENT_SENDER.reset(token)


def _install_sender_filter() -> None:
    root = logging.getLogger()
    for handler in root.handlers:
        if any(isinstance(f, _SenderFilter) for f in handler.filters):
            continue
        handler.addFilter(_SenderFilter())


def configure_logging(*, log_level: str = "INFO") -> None:
    """Configure root logging with a consistent format.

    Format includes the trigger `sender` plus `module:lineno`. Each pipeline
    task binds its own sender, so concurrent alerts log under their origin.
    """
    console_level_name = str(log_level).upper()
    default_console_fmt = (
        "%(asctime)s %(levelname)s [%(sender)s] "
        "%(module)s %(pathname)s:%(lineno)d %(message)s"
    )
    console_fmt = os.getenv("CONSOLE_LOG_FORMAT", default_console_fmt)

    logging.config.dictConfig(
        {
            "version": 1,
            "disable_existing_loggers": False,
            "formatters": {
                "default": {
                    "()": "doorbell_relay.logging_setup._JsonExtraFormatter",
                    "format": console_fmt,
                }
            },
            "handlers": {
                "console": {
                    "class": "logging.StreamHandler",
                    "level": console_level_name,
                    "formatter": "default",
                    "stream": "ext://sys.stdout",
                }
            },
            "root": {"level": "DEBUG", "handlers": ["console"]},
        }
    )

    _install_sender_filter()
    logging.captureWarnings(True)

    # Reduce noisy third-party logs by default.
    logging.getLogger("aiohttp.access").setLevel(logging.WARNING)
    logging.getLogger("asyncio").setLevel(logging.WARNING)
