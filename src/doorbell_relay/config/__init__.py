"""Configuration loading and validation."""

from doorbell_relay.config.loader import (
    ConfigError,
    ConfigErrorCode,
    load_config,
    load_config_from_dict,
    resolve_env_var,
    resolve_webhook_url,
)

__all__ = [
    "ConfigError",
    "ConfigErrorCode",
    "load_config",
    "load_config_from_dict",
    "resolve_env_var",
    "resolve_webhook_url",
]
