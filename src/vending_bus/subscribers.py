"""Subscribers that apply machine events to shared stock state.

Usage:
    machines = [Machine("001"), Machine("002")]
    service = PublishSubscribeService()
    service.subscribe(EventKind.SALE, SaleSubscriber(machines))
    service.subscribe(EventKind.LOW_STOCK_WARNING, LowStockWarningSubscriber(machines))

    service.publish(Sale(8, "002"))
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Callable, Sequence
import logging
from typing import ClassVar

from .events.domain import (
    Event,
    EventKind,
    LowStockWarning,
    Refill,
    Sale,
    StockOk,
)
from .machine import Machine, find_machines

LOGGER = logging.getLogger(__name__)

Emit = Callable[[Event], None]


class Subscriber(ABC):
    """Base class for handlers bound to a fixed collection of machines.

    ``handles`` names the event kinds a subscriber can process; strict
    services refuse to register it under any other kind.
    """

    handles: ClassVar[frozenset[EventKind]] = frozenset()

    def __init__(self, machines: Sequence[Machine]) -> None:
        self.machines = machines

    @abstractmethod
    def handle(self, event: Event, emit: Emit) -> None:
        """Process one event, scheduling follow-up events through ``emit``."""

    def __repr__(self) -> str:
        return f"{type(self).__name__}(machines={len(self.machines)})"


class SaleSubscriber(Subscriber):
    handles = frozenset({EventKind.SALE})

    def handle(self, event: Sale, emit: Emit) -> None:
        for machine in find_machines(self.machines, event.machine_id):
            if machine.sell(event.quantity):
                emit(LowStockWarning(machine.id))


class RefillSubscriber(Subscriber):
    handles = frozenset({EventKind.REFILL})

    def handle(self, event: Refill, emit: Emit) -> None:
        for machine in find_machines(self.machines, event.machine_id):
            if machine.refill(event.quantity):
                emit(StockOk(machine.id))


class _AlertSubscriber(Subscriber):
    """Terminal observer that writes one record per event to a log sink."""

    alert_event: ClassVar[str]
    alert_level: ClassVar[int] = logging.INFO

    def __init__(
        self, machines: Sequence[Machine], sink: logging.Logger | None = None
    ) -> None:
        super().__init__(machines)
        self.sink = sink or LOGGER

    def handle(self, event: Event, emit: Emit) -> None:  # noqa: ARG002
        self.sink.log(
            self.alert_level,
            self.alert_event,
            extra={"event": self.alert_event, **event.describe()},
        )


class LowStockWarningSubscriber(_AlertSubscriber):
    handles = frozenset({EventKind.LOW_STOCK_WARNING})
    alert_event = "machine.stock.low"
    alert_level = logging.WARNING


class StockOkSubscriber(_AlertSubscriber):
    handles = frozenset({EventKind.STOCK_OK})
    alert_event = "machine.stock.ok"
