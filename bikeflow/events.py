"""Minimal event emitter with explicit subscription handles."""

from __future__ import annotations

from typing import Callable, Dict, List


class Subscription:
    """Handle returned by :meth:`EventEmitter.on`; call ``unsubscribe`` to detach."""

    def __init__(self, emitter: "EventEmitter", event: str, handler: Callable):
        self._emitter = emitter
        self.event = event
        self.handler = handler
        self.active = True

    def unsubscribe(self) -> None:
        if self.active:
            self._emitter._remove(self)
            self.active = False


class EventEmitter:
    def __init__(self):
        self._handlers: Dict[str, List[Subscription]] = {}

    def on(self, event: str, handler: Callable) -> Subscription:
        subscription = Subscription(self, event, handler)
        self._handlers.setdefault(event, []).append(subscription)
        return subscription

    def emit(self, event: str, *args) -> int:
        """Run every handler for ``event`` in subscription order; returns how many ran."""
        # Copy so handlers may unsubscribe while the event is dispatched.
        subscriptions = list(self._handlers.get(event, ()))
        for subscription in subscriptions:
            subscription.handler(*args)
        return len(subscriptions)

    def listener_count(self, event: str) -> int:
        return len(self._handlers.get(event, ()))

    def _remove(self, subscription: Subscription) -> None:
        handlers = self._handlers.get(subscription.event, [])
        if subscription in handlers:
            handlers.remove(subscription)
