"""Trigger message and alert presentation models."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict

from doorbell_relay.models.enums import AlertCategory

# Discord-style integer colors
COLOR_RED = 15158332
COLOR_GREEN = 5763719


class TriggerMessage(BaseModel):
    """Inbound text received from the sensing device."""

    model_config = ConfigDict(frozen=True)

    text: str
    sender_host: str
    sender_port: int

    @property
    def sender(self) -> str:
        return f"{self.sender_host}:{self.sender_port}"


class AlertStyle(BaseModel):
    """Display title and color associated with an alert category."""

    model_config = ConfigDict(frozen=True)

    category: AlertCategory
    title: str
    color: int
