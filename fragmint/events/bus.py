"""Vault event bus - async publish/subscribe keyed by event type and parent id."""

from __future__ import annotations

import logging
from collections import deque
from typing import Awaitable, Callable, NamedTuple

from ..types import VaultEvent

logger = logging.getLogger(__name__)

Handler = Callable[[VaultEvent], Awaitable[None]]


class Subscription(NamedTuple):
    key: str
    parent_id: int | None
    handler: Handler

    def matches(self, event: VaultEvent) -> bool:
        if self.parent_id is not None and event.parent_id != self.parent_id:
            return False
        if self.key in ("*", event.type):
            return True
        return self.key.endswith(":*") and event.type.startswith(self.key[:-1])


class EventBus:
    """
    Delivers vault events to async handlers.

    A subscription key is an event type ('fragment:minted'), a type prefix
    ('set:*') or '*'. ``on_parent`` further narrows delivery to the events of
    one parent asset. Handlers run in subscription order; a failing handler is
    logged and does not stop delivery to the others.
    """

    def __init__(self, debug_mode: bool = False, history_size: int = 100) -> None:
        self._subscriptions: list[Subscription] = []
        self._recent: deque[VaultEvent] | None = deque(maxlen=history_size) if debug_mode else None

    def on(self, key: str, handler: Handler) -> None:
        self._subscriptions.append(Subscription(key, None, handler))

    def on_all(self, handler: Handler) -> None:
        self.on("*", handler)

    def on_parent(self, parent_id: int, handler: Handler, key: str = "*") -> None:
        self._subscriptions.append(Subscription(key, parent_id, handler))

    def off(self, key: str, handler: Handler) -> None:
        self._subscriptions = [
            s for s in self._subscriptions if not (s.key == key and s.handler == handler)
        ]

    @property
    def recent_events(self) -> list[VaultEvent]:
        return list(self._recent) if self._recent is not None else []

    async def emit(self, event: VaultEvent) -> None:
        if self._recent is not None:
            self._recent.append(event)
        for sub in [s for s in self._subscriptions if s.matches(event)]:
            try:
                await sub.handler(event)
            except Exception:
                logger.exception("Event handler error for %s (%s)", event.type, sub.key)
