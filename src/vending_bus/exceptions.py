"""Domain exception hierarchy for the vending event bus."""

from __future__ import annotations


class VendingBusError(RuntimeError):
    """Base class for all domain-level vending bus errors."""


class InvalidArgumentError(VendingBusError, ValueError):
    """Raised when a stock mutator receives a negative or non-integer amount."""


class InvalidSubscriptionError(VendingBusError):
    """Raised when a handler cannot be registered for the requested event kind."""


class ConfigValidationError(VendingBusError):
    """Raised when configuration cannot be validated safely."""
