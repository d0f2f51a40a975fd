"""CLI entrypoint for the doorbell alert relay."""

from __future__ import annotations

import asyncio
import socket
import sys
from pathlib import Path
from urllib.parse import urlsplit

from dotenv import load_dotenv

load_dotenv()

import fire  # type: ignore[import-untyped]

from doorbell_relay.app import Application
from doorbell_relay.config import ConfigError, load_config, resolve_webhook_url
from doorbell_relay.errors import ListenerBindError
from doorbell_relay.logging_setup import configure_logging


def setup_logging(level: str = "INFO") -> None:
    """Configure logging for CLI."""
    configure_logging(log_level=level)


class DoorbellRelay:
    """Doorbell relay CLI - UDP triggers to webhook alerts."""

    def run(self, config: str, log_level: str = "INFO") -> None:
        """Run the relay as a long-lived service.

        Args:
            config: Path to YAML config file
            log_level: Logging level (DEBUG, INFO, WARNING, ERROR)
        """
        setup_logging(log_level)

        app = Application(Path(config))

        try:
            asyncio.run(app.run())
        except ConfigError as e:
            print(f"✗ Config invalid: {e}", file=sys.stderr)
            sys.exit(1)
        except ListenerBindError as e:
            print(f"✗ {e}", file=sys.stderr)
            sys.exit(1)
        except KeyboardInterrupt:
            pass  # Handled by signal handlers

    def validate(self, config: str) -> None:
        """Validate config file without running.

        Args:
            config: Path to YAML config file
        """
        config_path = Path(config)

        try:
            cfg = load_config(config_path)
            webhook_url = resolve_webhook_url(cfg.webhook)
        except ConfigError as e:
            print(f"✗ Config invalid: {e}", file=sys.stderr)
            sys.exit(1)

        print(f"✓ Config valid: {config_path}")
        print(f"  Listener: udp://{cfg.listener.host}:{cfg.listener.port}")
        print(f"  Snapshot: {cfg.snapshot.path}")
        # Webhook URLs carry a token; only show the host.
        print(f"  Webhook host: {urlsplit(webhook_url).hostname}")
        print(f"  Webhook timeout: {cfg.webhook.request_timeout_s}s")
        health = f"{cfg.health.host}:{cfg.health.port}" if cfg.health.enabled else "disabled"
        print(f"  Health: {health}")

    def trigger(self, message: str, host: str = "127.0.0.1", port: int = 7070) -> None:
        """Send one trigger datagram, as the sensing device would.

        Args:
            message: Trigger text, e.g. "Motion Detected at Front Door"
            host: Listener address
            port: Listener port
        """
        with socket.socket(socket.AF_INET, socket.SOCK_DGRAM) as sock:
            sock.sendto(str(message).encode("utf-8"), (host, int(port)))
        print(f"Sent to {host}:{port}: {message}")


def main() -> None:
    """Main CLI entrypoint."""
    # Strip --help/-h when it's the only arg so Fire shows its commands list
    if len(sys.argv) == 2 and sys.argv[1] in ("--help", "-h"):
        sys.argv.pop()
    fire.Fire(DoorbellRelay)


if __name__ == "__main__":
    main()
