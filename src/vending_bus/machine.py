"""Vending machine stock state with edge-triggered threshold detection."""

from __future__ import annotations

from collections.abc import Iterable

from .exceptions import InvalidArgumentError

LOW_STOCK_THRESHOLD = 3
INITIAL_STOCK_LEVEL = 10


def _require_amount(amount: int, operation: str) -> None:
    if isinstance(amount, bool) or not isinstance(amount, int):
        raise InvalidArgumentError(
            f"{operation} amount must be an integer, got {type(amount).__name__}."
        )
    if amount < 0:
        raise InvalidArgumentError(f"{operation} amount must be at least 0, got {amount}.")


class Machine:
    """Mutable stock level for a single machine.

    Mutators report transitions across ``LOW_STOCK_THRESHOLD`` rather than
    the current level, so subscribers fire a warning once per crossing.
    """

    def __init__(self, machine_id: str) -> None:
        self.id = machine_id
        self.stock_level = INITIAL_STOCK_LEVEL

    @property
    def is_low_stock(self) -> bool:
        return self.stock_level < LOW_STOCK_THRESHOLD

    def sell(self, amount: int) -> bool:
        """Remove stock, floored at zero.

        Returns True only when this call moved the machine from OK to low.
        """
        _require_amount(amount, "sale")
        was_low = self.is_low_stock
        self.stock_level = max(0, self.stock_level - amount)
        return not was_low and self.is_low_stock

    def refill(self, amount: int) -> bool:
        """Add stock.

        Returns True only when this call moved the machine from low to OK.
        """
        _require_amount(amount, "refill")
        was_low = self.is_low_stock
        self.stock_level += amount
        return was_low and not self.is_low_stock

    def __repr__(self) -> str:
        return f"Machine(id={self.id!r}, stock_level={self.stock_level})"


def find_machines(machines: Iterable[Machine], machine_id: str) -> list[Machine]:
    """Return every machine whose id matches, in collection order."""
    return [machine for machine in machines if machine.id == machine_id]
