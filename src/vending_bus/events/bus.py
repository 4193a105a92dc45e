"""Synchronous publish/subscribe service with breadth-first cascades.

Usage:
    service = PublishSubscribeService()

    # Subscribe handlers; each exposes handle(event, emit)
    service.subscribe(EventKind.SALE, SaleSubscriber(machines))
    service.subscribe("stock_low", LowStockWarningSubscriber(machines))

    # Publish events; follow-up events emitted by handlers are dispatched
    # before publish() returns
    service.publish(Sale(8, "002"))
"""

from __future__ import annotations

from collections import deque
from collections.abc import Callable, Iterable
import logging
import threading
from typing import Protocol

from ..exceptions import InvalidSubscriptionError
from .domain import Event, EventKind

LOGGER = logging.getLogger(__name__)


class Handler(Protocol):
    def handle(
        self, event: Event, emit: Callable[[Event], None]
    ) -> None: ...


class PublishSubscribeService:
    """In-process event bus draining a single FIFO queue.

    Events emitted while handling another event are appended to the tail
    of the queue, so dispatch proceeds level by level: the published
    events first, then what they caused, then what that caused.

    The registry is keyed by event kind; each bucket keeps insertion order
    and is indexed by handler identity, so equal-but-distinct handlers are
    tracked separately and ``unsubscribe`` needs no kind.
    """

    def __init__(self, strict: bool = True) -> None:
        self.strict = strict
        self._buckets: dict[EventKind, dict[int, Handler]] = {}
        self._queue: deque[Event] = deque()
        self._dispatching = False
        self._lock = threading.RLock()

    @property
    def is_dispatching(self) -> bool:
        with self._lock:
            return self._dispatching

    @property
    def pending(self) -> int:
        """Number of events queued but not yet dispatched."""
        with self._lock:
            return len(self._queue)

    def subscribers(self, kind: EventKind | str) -> tuple[Handler, ...]:
        """Return the handlers registered for ``kind`` in dispatch order."""
        event_kind = self._coerce_kind(kind)
        with self._lock:
            return tuple(self._buckets.get(event_kind, {}).values())

    def subscribe(self, kind: EventKind | str, handler: Handler) -> None:
        """Register a handler for an event kind.

        Registering the same handler twice for one kind is a no-op. Safe to
        call from inside a handler: the handler is not offered the event
        currently being dispatched, only events dequeued afterwards.

        Args:
            kind: Event kind, as an ``EventKind`` or its string value
            handler: Object exposing ``handle(event, emit)``

        Raises:
            InvalidSubscriptionError: Unknown kind, missing ``handle``, or
                (strict mode) a handler that does not declare ``kind`` in
                its ``handles`` set.
        """
        event_kind = self._coerce_kind(kind)
        self._validate(event_kind, handler)
        with self._lock:
            bucket = self._buckets.setdefault(event_kind, {})
            if id(handler) in bucket:
                LOGGER.debug(
                    "bus.subscribe.duplicate",
                    extra={"event": "bus.subscribe.duplicate", "kind": event_kind.value},
                )
                return
            bucket[id(handler)] = handler
        LOGGER.debug(
            "bus.subscribed",
            extra={
                "event": "bus.subscribed",
                "kind": event_kind.value,
                "handler": type(handler).__name__,
            },
        )

    def unsubscribe(self, handler: Handler) -> int:
        """Remove a handler from every kind it is registered under.

        Takes effect immediately, including for handlers still waiting
        their turn on the event being dispatched.

        Returns:
            Number of kinds the handler was removed from
        """
        removed = 0
        with self._lock:
            for bucket in self._buckets.values():
                if bucket.pop(id(handler), None) is not None:
                    removed += 1
        if removed:
            LOGGER.debug(
                "bus.unsubscribed",
                extra={
                    "event": "bus.unsubscribed",
                    "handler": type(handler).__name__,
                    "kinds": removed,
                },
            )
        return removed

    def publish(self, event: Event) -> None:
        """Publish an event and dispatch the resulting cascade.

        When called from inside a handler the event is only queued; the
        outer call keeps draining until nothing is left.
        """
        self.publish_batch((event,))

    def publish_batch(self, events: Iterable[Event]) -> None:
        """Queue several events, then drain them as one breadth-first level."""
        # Materialise first so a failing iterable leaves the queue untouched.
        batch = list(events)
        with self._lock:
            self._queue.extend(batch)
            if self._dispatching:
                return
            self._drain()

    def clear(self, kind: EventKind | str | None = None) -> None:
        """Clear subscribers.

        Args:
            kind: Specific kind to clear, or None for all
        """
        with self._lock:
            if kind is None:
                self._buckets.clear()
            else:
                self._buckets.pop(self._coerce_kind(kind), None)

    def _emit(self, event: Event) -> None:
        self._queue.append(event)

    def _drain(self) -> None:
        self._dispatching = True
        try:
            while self._queue:
                self._dispatch(self._queue.popleft())
        except Exception as exc:
            LOGGER.warning(
                "bus.dispatch.aborted",
                extra={
                    "event": "bus.dispatch.aborted",
                    "error_type": type(exc).__name__,
                    "error": str(exc),
                    "dropped": len(self._queue),
                },
            )
            raise
        finally:
            # Undelivered events are discarded; the next publish starts idle.
            self._queue.clear()
            self._dispatching = False

    def _dispatch(self, event: Event) -> None:
        bucket = self._buckets.get(event.kind)
        if not bucket:
            LOGGER.debug(
                "bus.dispatch.no_subscribers",
                extra={"event": "bus.dispatch.no_subscribers", **event.describe()},
            )
            return

        # Handlers added during this event wait for the next one; handlers
        # removed during it are skipped if not yet visited.
        for key, handler in list(bucket.items()):
            if key not in self._buckets.get(event.kind, {}):
                continue
            handler.handle(event, self._emit)

    def _validate(self, kind: EventKind, handler: Handler) -> None:
        if not callable(getattr(handler, "handle", None)):
            raise InvalidSubscriptionError(
                f"{type(handler).__name__} does not implement handle(event, emit)."
            )
        if not self.strict:
            return
        handles = getattr(handler, "handles", frozenset())
        if kind not in handles:
            raise InvalidSubscriptionError(
                f"{type(handler).__name__} cannot handle {kind.value!r} events."
            )

    @staticmethod
    def _coerce_kind(kind: EventKind | str) -> EventKind:
        try:
            return EventKind(kind)
        except ValueError as exc:
            raise InvalidSubscriptionError(f"Unknown event kind {kind!r}.") from exc
