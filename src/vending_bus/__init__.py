"""Top-level package for vending-bus."""

from __future__ import annotations

from importlib import import_module
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from .config import DEFAULT_CONFIG, load_config
    from .events import (
        EventKind,
        LowStockWarning,
        PublishSubscribeService,
        Refill,
        Sale,
        StockOk,
    )
    from .exceptions import (
        ConfigValidationError,
        InvalidArgumentError,
        InvalidSubscriptionError,
        VendingBusError,
    )
    from .logging_utils import configure_logging
    from .machine import INITIAL_STOCK_LEVEL, LOW_STOCK_THRESHOLD, Machine
    from .subscribers import (
        LowStockWarningSubscriber,
        RefillSubscriber,
        SaleSubscriber,
        StockOkSubscriber,
        Subscriber,
    )
    from .wiring import VendingSystem, build_from_config, build_vending_system

_EXPORTS: dict[str, str] = {
    "DEFAULT_CONFIG": ".config",
    "load_config": ".config",
    "EventKind": ".events",
    "LowStockWarning": ".events",
    "PublishSubscribeService": ".events",
    "Refill": ".events",
    "Sale": ".events",
    "StockOk": ".events",
    "ConfigValidationError": ".exceptions",
    "InvalidArgumentError": ".exceptions",
    "InvalidSubscriptionError": ".exceptions",
    "VendingBusError": ".exceptions",
    "configure_logging": ".logging_utils",
    "INITIAL_STOCK_LEVEL": ".machine",
    "LOW_STOCK_THRESHOLD": ".machine",
    "Machine": ".machine",
    "LowStockWarningSubscriber": ".subscribers",
    "RefillSubscriber": ".subscribers",
    "SaleSubscriber": ".subscribers",
    "StockOkSubscriber": ".subscribers",
    "Subscriber": ".subscribers",
    "VendingSystem": ".wiring",
    "build_from_config": ".wiring",
    "build_vending_system": ".wiring",
}

__all__ = sorted(_EXPORTS)


def __getattr__(name: str) -> Any:
    """Lazily import symbols so the dispatch core loads without config/logging extras."""
    module_name = _EXPORTS.get(name)
    if module_name is None:
        raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
    return getattr(import_module(module_name, __name__), name)
