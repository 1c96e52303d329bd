"""AllocationPool - parent ids that still accept fragment mints."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from functools import partial
from typing import Iterable

from ..errors import EntropyRangeError, PoolExhaustedError, UnknownParentError
from ..providers import EntropySource
from ..runtime import Journal

logger = logging.getLogger(__name__)


@dataclass
class PoolState:
    ids: list[int] = field(default_factory=list)
    index: dict[int, int] = field(default_factory=dict)
    requests: int = 0


class AllocationPool:
    """
    Flat list of parent ids plus a reverse index (parent id -> list slot).

    Selection asks the entropy source for a slot, salted with a request counter
    that only ever grows. Removal swaps the target with the last element and
    pops, so neither operation (nor undoing it) depends on pool size.
    """

    def __init__(self, parent_ids: Iterable[int], entropy: EntropySource) -> None:
        ids = list(parent_ids)
        self._entropy = entropy
        self._state = PoolState(ids=ids, index={pid: i for i, pid in enumerate(ids)})
        self.journal = Journal()

    def attach_journal(self, journal: Journal) -> None:
        self.journal = journal

    @property
    def parent_ids(self) -> list[int]:
        return list(self._state.ids)

    @property
    def requests(self) -> int:
        return self._state.requests

    def __len__(self) -> int:
        return len(self._state.ids)

    def __contains__(self, parent_id: object) -> bool:
        return parent_id in self._state.index

    def allocate(self) -> int:
        state = self._state
        if not state.ids:
            raise PoolExhaustedError()
        state.requests += 1
        self.journal.record(self._unrequest)
        slot = self._entropy.next_index(len(state.ids), state.requests)
        if not 0 <= slot < len(state.ids):
            raise EntropyRangeError(slot, len(state.ids))
        return state.ids[slot]

    def remove(self, parent_id: int) -> None:
        state = self._state
        if parent_id not in state.index:
            raise UnknownParentError(parent_id)
        slot = state.index.pop(parent_id)
        last = state.ids.pop()
        if last != parent_id:
            state.ids[slot] = last
            state.index[last] = slot
        self.journal.record(partial(self._reinsert, parent_id, slot))
        logger.debug("Parent %d left the pool, %d remaining", parent_id, len(state.ids))

    # -- Undo steps --

    def _unrequest(self) -> None:
        self._state.requests -= 1

    def _reinsert(self, parent_id: int, slot: int) -> None:
        state = self._state
        if slot < len(state.ids):
            moved = state.ids[slot]
            state.index[moved] = len(state.ids)
            state.ids.append(moved)
            state.ids[slot] = parent_id
        else:
            state.ids.append(parent_id)
        state.index[parent_id] = slot
