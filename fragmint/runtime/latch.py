"""Reentrancy latch - one boolean guard per operation class."""

from __future__ import annotations

import logging

from ..errors import ReentrantCallError

logger = logging.getLogger(__name__)


class ReentrancyLatch:
    """
    Rejects nested entry into the same operation class.

    Receiver hooks run by the ownership registry can call back into the vault
    while an operation is half-way through; the latch turns such a call into a
    ``ReentrantCallError`` instead of letting it observe intermediate state.
    The latch is released on every exit path.
    """

    def __init__(self, operation: str) -> None:
        self.operation = operation
        self._held = False

    @property
    def held(self) -> bool:
        return self._held

    def __enter__(self) -> ReentrancyLatch:
        if self._held:
            logger.warning("Rejected re-entrant %s call", self.operation)
            raise ReentrantCallError(self.operation)
        self._held = True
        return self

    def __exit__(self, exc_type, exc, tb) -> bool:
        self._held = False
        return False
