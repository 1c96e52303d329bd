"""BurnLedger - destroys complete sets and remembers who destroyed them."""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass, field
from functools import partial
from typing import Callable, Protocol, runtime_checkable

from ..errors import AlreadyBurnedError
from ..providers import OwnershipRegistry
from ..runtime import Journal
from ..types import BurnRecord
from .fragments import FragmentRegistry

logger = logging.getLogger(__name__)


@runtime_checkable
class BurnerLookup(Protocol):
    """Read-only view of burn records handed to the fusion side."""

    def burner_of(self, parent_id: int) -> str | None: ...


@dataclass
class BurnState:
    records: dict[int, BurnRecord] = field(default_factory=dict)
    burned_by: set[tuple[int, str]] = field(default_factory=set)


class BurnLedger:
    """
    Verifies and burns complete fragment sets.

    The "already burned" guard is keyed on (parent id, caller), not on the
    parent id alone. The burn record itself is the canonical destroyer.
    """

    def __init__(
        self,
        fragments: FragmentRegistry,
        tokens: OwnershipRegistry,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self._fragments = fragments
        self._tokens = tokens
        self._clock = clock
        self._state = BurnState()
        self.journal = Journal()

    def attach_journal(self, journal: Journal) -> None:
        self.journal = journal

    async def burn_set(self, parent_id: int, identity: str) -> BurnRecord:
        if (parent_id, identity) in self._state.burned_by:
            raise AlreadyBurnedError(parent_id, identity)
        self._fragments.verify_set(parent_id, identity)

        state = self._state
        record = BurnRecord(parent_id=parent_id, burner=identity, timestamp=self._clock())
        previous = state.records.get(parent_id)
        state.burned_by.add((parent_id, identity))
        state.records[parent_id] = record
        self.journal.record(partial(self._unburn, parent_id, identity, previous))

        for fragment_id in self._fragments.fragment_ids(parent_id):
            await self._tokens.burn(fragment_id)
        logger.info("Parent %d burned by %s", parent_id, identity)
        return record

    # -- Reads --

    def burner_of(self, parent_id: int) -> str | None:
        record = self._state.records.get(parent_id)
        return record.burner if record else None

    def burn_record(self, parent_id: int) -> BurnRecord | None:
        return self._state.records.get(parent_id)

    def has_burned(self, parent_id: int, identity: str) -> bool:
        return (parent_id, identity) in self._state.burned_by

    @property
    def burned_count(self) -> int:
        return len(self._state.records)

    # -- Undo steps --

    def _unburn(self, parent_id: int, identity: str, previous: BurnRecord | None) -> None:
        self._state.burned_by.discard((parent_id, identity))
        if previous is None:
            del self._state.records[parent_id]
        else:
            self._state.records[parent_id] = previous
