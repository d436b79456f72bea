"""Business constants read from the ``[custom]`` section of domain.toml."""

from typing import Any

from protean.utils.globals import current_domain

DEFAULTS = {
    "FREE_DELIVERY_THRESHOLD": 500.0,
    "FLAT_DELIVERY_FEE": 50.0,
    "MAX_QUANTITY": 99,
    "MIN_ORDER_AMOUNT": 10.0,
    "CURRENCY": "NPR",
    "ORDER_NUMBER_PREFIX": "QC",
    "DELIVERY_MINUTES": 60,
    "CANCEL_WINDOW_MINUTES": 5,
    "MAX_RECENT_SEARCHES": 10,
    "TRENDING_SEARCHES": [],
}


def custom_setting(name: str) -> Any:
    """Return a configured business constant, falling back to the built-in default."""
    custom = current_domain.config.get("custom") or {}
    return custom.get(name, DEFAULTS[name])
