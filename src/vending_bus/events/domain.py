"""Immutable machine events carried by the publish/subscribe service."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, ClassVar, Union


class EventKind(str, Enum):
    """Discriminant tag used to key the subscription registry."""

    SALE = "sale"
    REFILL = "refill"
    LOW_STOCK_WARNING = "stock_low"
    STOCK_OK = "stock_ok"


class MachineEvent:
    """Common surface of every event: a kind tag and the machine it concerns."""

    kind: ClassVar[EventKind]
    machine_id: str

    def describe(self) -> dict[str, Any]:
        """Return flat fields suitable for structured log records."""
        fields: dict[str, Any] = {
            "kind": self.kind.value,
            "machine_id": self.machine_id,
        }
        quantity = getattr(self, "quantity", None)
        if quantity is not None:
            fields["quantity"] = quantity
        return fields


@dataclass(frozen=True)
class Sale(MachineEvent):
    quantity: int
    machine_id: str

    kind: ClassVar[EventKind] = EventKind.SALE


@dataclass(frozen=True)
class Refill(MachineEvent):
    quantity: int
    machine_id: str

    kind: ClassVar[EventKind] = EventKind.REFILL


@dataclass(frozen=True)
class LowStockWarning(MachineEvent):
    machine_id: str

    kind: ClassVar[EventKind] = EventKind.LOW_STOCK_WARNING


@dataclass(frozen=True)
class StockOk(MachineEvent):
    machine_id: str

    kind: ClassVar[EventKind] = EventKind.STOCK_OK


Event = Union[Sale, Refill, LowStockWarning, StockOk]
