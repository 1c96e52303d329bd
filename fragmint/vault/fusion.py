"""FusionController - turns a burned set into a single new asset."""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass, field
from functools import partial
from typing import Callable

from ..errors import (
    AlreadyFusedError,
    FusionCapReachedError,
    FusionNotFoundError,
    NotBurnerError,
    SetNotBurnedError,
)
from ..providers import OwnershipRegistry
from ..runtime import Journal
from ..types import FusionRecord
from .burn import BurnerLookup

logger = logging.getLogger(__name__)


@dataclass
class FusionState:
    records: dict[int, FusionRecord] = field(default_factory=dict)
    by_parent: dict[int, int] = field(default_factory=dict)
    next_fusion_id: int = 1


class FusionController:
    """
    Each guard can be called on its own for introspection; ``fuse`` composes
    them and only writes once all three pass.
    """

    def __init__(
        self,
        burns: BurnerLookup,
        tokens: OwnershipRegistry,
        max_fusions: int,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self._burns = burns
        self._tokens = tokens
        self._max_fusions = max_fusions
        self._clock = clock
        self._state = FusionState()
        self.journal = Journal()

    def attach_journal(self, journal: Journal) -> None:
        self.journal = journal

    @property
    def max_fusions(self) -> int:
        return self._max_fusions

    @property
    def fusion_count(self) -> int:
        return len(self._state.records)

    # -- Guards --

    def verify_eligibility(self, parent_id: int, identity: str) -> bool:
        burner = self._burns.burner_of(parent_id)
        if burner is None:
            raise SetNotBurnedError(parent_id)
        if burner != identity:
            raise NotBurnerError(parent_id, identity, burner)
        return True

    def verify_not_fused(self, parent_id: int) -> bool:
        fusion_id = self._state.by_parent.get(parent_id)
        if fusion_id is not None:
            raise AlreadyFusedError(parent_id, fusion_id)
        return True

    def verify_capacity(self) -> bool:
        if self.fusion_count >= self._max_fusions:
            raise FusionCapReachedError(self._max_fusions)
        return True

    # -- Mutation --

    async def fuse(self, parent_id: int, identity: str) -> FusionRecord:
        # Capacity first: every call past the cap reports the cap.
        self.verify_capacity()
        self.verify_eligibility(parent_id, identity)
        self.verify_not_fused(parent_id)

        state = self._state
        record = FusionRecord(
            fusion_id=state.next_fusion_id,
            parent_id=parent_id,
            fuser=identity,
            timestamp=self._clock(),
        )
        state.next_fusion_id += 1
        state.by_parent[parent_id] = record.fusion_id
        state.records[record.fusion_id] = record
        self.journal.record(partial(self._unfuse, record))

        await self._tokens.mint(identity, record.fusion_id)
        logger.info(
            "Parent %d fused into asset %d by %s (%d/%d)",
            parent_id, record.fusion_id, identity, self.fusion_count, self._max_fusions,
        )
        return record

    # -- Reads --

    def fusion_record(self, fusion_id: int) -> FusionRecord:
        try:
            return self._state.records[fusion_id]
        except KeyError:
            raise FusionNotFoundError(fusion_id) from None

    def fusion_id_of(self, parent_id: int) -> int | None:
        return self._state.by_parent.get(parent_id)

    # -- Undo steps --

    def _unfuse(self, record: FusionRecord) -> None:
        state = self._state
        del state.records[record.fusion_id]
        del state.by_parent[record.parent_id]
        state.next_fusion_id = record.fusion_id
