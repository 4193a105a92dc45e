"""Composition root: machines, subscribers and the service they share."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field
import logging
from typing import Any

from .events.bus import PublishSubscribeService
from .events.domain import EventKind
from .machine import Machine
from .subscribers import (
    LowStockWarningSubscriber,
    RefillSubscriber,
    SaleSubscriber,
    StockOkSubscriber,
    Subscriber,
)

LOGGER = logging.getLogger(__name__)


@dataclass
class VendingSystem:
    """A wired service together with the state its subscribers act on."""

    service: PublishSubscribeService
    machines: list[Machine]
    subscribers: dict[EventKind, Subscriber] = field(default_factory=dict)

    def machine(self, machine_id: str) -> Machine:
        """Return the first machine with ``machine_id``."""
        for machine in self.machines:
            if machine.id == machine_id:
                return machine
        raise KeyError(machine_id)


def build_vending_system(
    machine_ids: Iterable[str],
    *,
    strict: bool = True,
    alert_sink: logging.Logger | None = None,
) -> VendingSystem:
    """Create machines at initial stock and subscribe one handler per kind.

    Args:
        machine_ids: Identifiers of the machines to create
        strict: Reject handlers registered for kinds they cannot handle
        alert_sink: Logger receiving low-stock / stock-ok alerts
    """
    machines = [Machine(machine_id) for machine_id in machine_ids]
    subscribers: dict[EventKind, Subscriber] = {
        EventKind.SALE: SaleSubscriber(machines),
        EventKind.REFILL: RefillSubscriber(machines),
        EventKind.LOW_STOCK_WARNING: LowStockWarningSubscriber(machines, alert_sink),
        EventKind.STOCK_OK: StockOkSubscriber(machines, alert_sink),
    }

    service = PublishSubscribeService(strict=strict)
    for kind, subscriber in subscribers.items():
        service.subscribe(kind, subscriber)

    LOGGER.info(
        "system.wired",
        extra={"event": "system.wired", "machines": len(machines), "strict": strict},
    )
    return VendingSystem(service=service, machines=machines, subscribers=subscribers)


def build_from_config(config: dict[str, Any]) -> VendingSystem:
    """Build a system from a validated config dict (see ``load_config``)."""
    return build_vending_system(
        config["fleet"]["machine_ids"],
        strict=config["bus"]["strict_subscriptions"],
    )
