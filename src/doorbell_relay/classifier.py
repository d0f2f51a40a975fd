"""Trigger text classification.

Rules are evaluated in order against the lower-cased message; the first
match wins and unmatched text falls through to GENERIC.
"""

from __future__ import annotations

from collections.abc import Callable

from doorbell_relay.models.alert import COLOR_GREEN, COLOR_RED, AlertStyle
from doorbell_relay.models.enums import AlertCategory

Predicate = Callable[[str], bool]


def _contains(*keywords: str) -> Predicate:
    return lambda text: any(keyword in text for keyword in keywords)


CLASSIFICATION_RULES: tuple[tuple[Predicate, AlertCategory], ...] = (
    (_contains("motion"), AlertCategory.MOTION),
    (_contains("tamper"), AlertCategory.TAMPER),
    (_contains("unlocked"), AlertCategory.UNLOCK),
    (_contains("button", "pressed"), AlertCategory.BUTTON_PRESS),
)

ALERT_STYLES: dict[AlertCategory, AlertStyle] = {
    AlertCategory.MOTION: AlertStyle(
        category=AlertCategory.MOTION, title="📸 Motion Detected", color=COLOR_RED
    ),
    AlertCategory.TAMPER: AlertStyle(
        category=AlertCategory.TAMPER, title="⚠️ Tamper Alert!", color=COLOR_RED
    ),
    AlertCategory.UNLOCK: AlertStyle(
        category=AlertCategory.UNLOCK, title="🔓 Door Unlocked", color=COLOR_GREEN
    ),
    AlertCategory.BUTTON_PRESS: AlertStyle(
        category=AlertCategory.BUTTON_PRESS, title="🔔 Doorbell Ring", color=COLOR_RED
    ),
    AlertCategory.GENERIC: AlertStyle(
        category=AlertCategory.GENERIC, title="🚨 Security Alert", color=COLOR_RED
    ),
}


def classify_category(text: str) -> AlertCategory:
    """Map trigger text to its alert category."""
    lowered = text.lower()
    for predicate, category in CLASSIFICATION_RULES:
        if predicate(lowered):
            return category
    return AlertCategory.GENERIC


def classify(text: str) -> AlertStyle:
    """Map trigger text to the category's display title and color."""
    return ALERT_STYLES[classify_category(text)]
