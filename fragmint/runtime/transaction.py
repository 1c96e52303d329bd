"""
Transaction runtime - serialized, all-or-nothing vault operations.

Every public vault operation runs inside a transaction:

- top-level operations from different asyncio tasks are serialized by one lock
- participants write through a shared journal, which logs one undo step per
  mutation; a failed transaction replays its own steps newest first
- events are buffered and only reach the bus once the outermost transaction
  commits, so an aborted operation is never observable
- a call that re-enters the vault from a receiver hook on the same task opens
  a nested transaction; its undo steps and events fold into the parent
- a call made from another task while a transaction it inherited is still
  open is rejected, since it could never acquire the lock
"""

from __future__ import annotations

import asyncio
import logging
from contextlib import asynccontextmanager
from contextvars import ContextVar, Token
from typing import Any, AsyncIterator, Callable, Protocol, runtime_checkable

from ..errors import ReentrantCallError
from ..events import EventBus
from ..types import VaultEvent

logger = logging.getLogger(__name__)

Undo = Callable[[], None]


class Transaction:
    """Undo steps plus the events recorded so far."""

    def __init__(self, operation: str, parent: Transaction | None = None) -> None:
        self.operation = operation
        self.parent = parent
        self.task = asyncio.current_task()
        self.depth = 0 if parent is None else parent.depth + 1
        self.events: list[VaultEvent] = []
        self.undo: list[Undo] = []
        self.closed = False

    @property
    def root(self) -> Transaction:
        tx = self
        while tx.parent is not None:
            tx = tx.parent
        return tx

    def record(self, event: VaultEvent) -> None:
        self.events.append(event)

    def rollback(self) -> None:
        while self.undo:
            self.undo.pop()()

    def fold(self) -> None:
        """Hand committed work to the parent, which now owns its undo."""
        assert self.parent is not None
        self.parent.events.extend(self.events)
        self.parent.undo.extend(self.undo)


class Journal:
    """
    Undo log of the transaction open in the current context.

    Writes made while no transaction is open (or from a task that inherited a
    transaction which has since committed) are not journaled, so a
    participant used on its own behaves like a plain object.
    """

    def __init__(self) -> None:
        self._active: ContextVar[Transaction | None] = ContextVar(
            f"fragmint_transaction_{id(self):x}", default=None
        )
        self.recorded = 0

    @property
    def current(self) -> Transaction | None:
        return self._active.get()

    def record(self, undo: Undo) -> None:
        tx = self._active.get()
        if tx is None or tx.root.closed:
            return
        tx.undo.append(undo)
        self.recorded += 1

    def activate(self, tx: Transaction) -> Token:
        return self._active.set(tx)

    def deactivate(self, token: Token) -> None:
        self._active.reset(token)


@runtime_checkable
class Journaled(Protocol):
    def attach_journal(self, journal: Journal) -> None: ...


class Sequencer:
    """Orders vault operations and makes each one atomic."""

    def __init__(self, bus: EventBus, journal: Journal | None = None) -> None:
        self._bus = bus
        self.journal = journal or Journal()
        self._lock = asyncio.Lock()

    def enlist(self, participant: Any) -> bool:
        """Route ``participant``'s writes through this sequencer's journal."""
        if isinstance(participant, Journaled):
            participant.attach_journal(self.journal)
            return True
        return False

    @property
    def current(self) -> Transaction | None:
        return self.journal.current

    def record(self, event: VaultEvent) -> None:
        tx = self.journal.current
        if tx is None:
            raise RuntimeError("events can only be recorded inside a transaction")
        tx.record(event)

    @asynccontextmanager
    async def transaction(self, operation: str = "transaction") -> AsyncIterator[Transaction]:
        outer = self.journal.current
        if outer is not None and not outer.root.closed:
            if outer.task is not asyncio.current_task():
                logger.warning(
                    "Rejected %s from another task while %s is in progress",
                    operation, outer.operation,
                )
                raise ReentrantCallError(operation)
            tx = Transaction(operation, parent=outer)
            token = self.journal.activate(tx)
            try:
                yield tx
            except BaseException:
                tx.rollback()
                raise
            finally:
                self.journal.deactivate(token)
            tx.fold()
            return

        async with self._lock:
            tx = Transaction(operation)
            token = self.journal.activate(tx)
            try:
                yield tx
            except BaseException:
                tx.rollback()
                logger.debug("Transaction %s rolled back", operation)
                raise
            finally:
                tx.closed = True
                self.journal.deactivate(token)
        for event in tx.events:
            await self._bus.emit(event)
