"""Event model and publish/subscribe dispatch engine."""

from .bus import Handler, PublishSubscribeService
from .domain import (
    Event,
    EventKind,
    LowStockWarning,
    MachineEvent,
    Refill,
    Sale,
    StockOk,
)

__all__ = [
    "Event",
    "EventKind",
    "Handler",
    "LowStockWarning",
    "MachineEvent",
    "PublishSubscribeService",
    "Refill",
    "Sale",
    "StockOk",
]
