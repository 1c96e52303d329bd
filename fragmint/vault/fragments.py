"""FragmentRegistry - position assignment, fragment lookups and set verification."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from functools import partial
from typing import Callable, Iterable

from ..errors import (
    FragmentNotFoundError,
    IncompleteSetError,
    NonexistentParentError,
    NotOwnerOfAllError,
    UnknownParentError,
)
from ..providers import OwnershipRegistry
from ..runtime import Journal
from ..types import FRAGMENTS_PER_SET, Fragment

logger = logging.getLogger(__name__)


@dataclass
class FragmentState:
    minted: dict[int, int] = field(default_factory=dict)
    fragments: dict[int, Fragment] = field(default_factory=dict)
    slots: dict[tuple[int, int], int] = field(default_factory=dict)
    next_fragment_id: int = 1


class FragmentRegistry:
    """
    Owns the fragment <-> (parent, position) associations and the per-parent
    minted count. Token ownership lives in the ownership registry; this class
    only asks it to mint and answers who holds what through it.

    Fragment records outlive a burn so that historical lookups keep working.
    """

    def __init__(
        self,
        parent_ids: Iterable[int],
        tokens: OwnershipRegistry,
        on_complete: Callable[[int], None] | None = None,
    ) -> None:
        self._tokens = tokens
        self._on_complete = on_complete
        self._state = FragmentState(minted={pid: 0 for pid in parent_ids})
        self.journal = Journal()

    def attach_journal(self, journal: Journal) -> None:
        self.journal = journal

    # -- Mutations --

    async def mint_fragment(self, parent_id: int, owner: str) -> Fragment:
        """Assign the next position of ``parent_id`` and mint it to ``owner``."""
        state = self._state
        if parent_id not in state.minted:
            raise UnknownParentError(parent_id)
        minted = state.minted[parent_id]
        if minted >= FRAGMENTS_PER_SET:
            raise RuntimeError(f"parent id {parent_id} already has {minted} fragments")

        fragment = Fragment(
            fragment_id=state.next_fragment_id,
            parent_id=parent_id,
            position=minted + 1,
        )
        state.next_fragment_id += 1
        state.fragments[fragment.fragment_id] = fragment
        state.slots[(parent_id, fragment.position)] = fragment.fragment_id
        state.minted[parent_id] = fragment.position
        self.journal.record(partial(self._unassign, fragment))
        logger.debug(
            "Fragment %d assigned to parent %d at position %d",
            fragment.fragment_id, parent_id, fragment.position,
        )

        if fragment.position == FRAGMENTS_PER_SET and self._on_complete is not None:
            self._on_complete(parent_id)

        await self._tokens.mint(owner, fragment.fragment_id)
        return fragment

    # -- Verification --

    def verify_set(self, parent_id: int, identity: str) -> bool:
        minted = self.minted_count(parent_id)
        if minted == 0:
            raise NonexistentParentError(parent_id)
        if minted < FRAGMENTS_PER_SET:
            raise IncompleteSetError(parent_id, minted)
        for fragment_id in self.fragment_ids(parent_id):
            if self._tokens.owner_of(fragment_id) != identity:
                raise NotOwnerOfAllError(parent_id, fragment_id, identity)
        return True

    # -- Reads --

    def knows(self, parent_id: int) -> bool:
        return parent_id in self._state.minted

    def minted_count(self, parent_id: int) -> int:
        return self._state.minted.get(parent_id, 0)

    def remaining(self, parent_id: int) -> int:
        if parent_id not in self._state.minted:
            raise UnknownParentError(parent_id)
        return FRAGMENTS_PER_SET - self._state.minted[parent_id]

    def is_complete(self, parent_id: int) -> bool:
        return self.minted_count(parent_id) == FRAGMENTS_PER_SET

    def fragment(self, fragment_id: int) -> Fragment:
        try:
            return self._state.fragments[fragment_id]
        except KeyError:
            raise FragmentNotFoundError(fragment_id) from None

    def parent_of(self, fragment_id: int) -> int:
        return self.fragment(fragment_id).parent_id

    def fragment_ids(self, parent_id: int) -> list[int]:
        """Fragment ids of ``parent_id`` ordered by position."""
        slots = self._state.slots
        return [
            slots[(parent_id, position)]
            for position in range(1, self.minted_count(parent_id) + 1)
        ]

    # -- Undo steps --

    def _unassign(self, fragment: Fragment) -> None:
        state = self._state
        del state.fragments[fragment.fragment_id]
        del state.slots[(fragment.parent_id, fragment.position)]
        state.minted[fragment.parent_id] = fragment.position - 1
        state.next_fragment_id = fragment.fragment_id
