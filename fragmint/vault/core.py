"""
FragmentVault - the public face of the fragment lifecycle.

Lifecycle of a parent id:

    allocating (0-3 minted) -> complete (4 minted) -> burned -> fused

Usage:

    vault = FragmentVault(VaultConfig(parent_ids=[1, 2, 3]))
    fragment = await vault.mint("alice")
    ...
    await vault.burn_fragment_set(fragment.parent_id, "alice")
    fusion = await vault.fuse_fragment_set(fragment.parent_id, "alice")

Every mutating call is atomic: it commits all of its writes (including those
made in ownership registries that journal their writes) or none, and
its events are published only after it commits.
"""

from __future__ import annotations

import logging
import time
from typing import Callable

from ..config import VaultConfig
from ..errors import UnknownParentError
from ..events import EventBus
from ..providers import (
    EntropySource,
    InMemoryOwnershipRegistry,
    OwnershipRegistry,
    SeededEntropySource,
    WeakEntropySource,
)
from ..runtime import ReentrancyLatch, Sequencer
from ..types import (
    BurnRecord,
    Fragment,
    FragmentMintedEvent,
    FusionRecord,
    ParentRetiredEvent,
    ParentState,
    SetBurnedEvent,
    SetFusedEvent,
)
from .burn import BurnLedger
from .fragments import FragmentRegistry
from .fusion import FusionController
from .pool import AllocationPool

logger = logging.getLogger(__name__)


def entropy_from_config(config: VaultConfig) -> EntropySource:
    if config.entropy == "seeded":
        return SeededEntropySource(config.entropy_seed)  # type: ignore[arg-type]
    return WeakEntropySource()


class FragmentVault:
    """Wires the pool, fragment registry, burn ledger and fusion controller."""

    def __init__(
        self,
        config: VaultConfig,
        *,
        entropy: EntropySource | None = None,
        fragment_tokens: OwnershipRegistry | None = None,
        fusion_tokens: OwnershipRegistry | None = None,
        bus: EventBus | None = None,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self.config = config
        self.bus = bus or EventBus(debug_mode=config.debug_events)
        self.fragment_tokens = fragment_tokens or InMemoryOwnershipRegistry("fragments")
        self.fusion_tokens = fusion_tokens or InMemoryOwnershipRegistry("fusions")
        self._clock = clock
        self._parent_ids = tuple(config.parent_ids)

        self._pool = AllocationPool(self._parent_ids, entropy or entropy_from_config(config))
        self._fragments = FragmentRegistry(
            self._parent_ids, self.fragment_tokens, on_complete=self._pool.remove
        )
        self._burns = BurnLedger(self._fragments, self.fragment_tokens, clock=clock)
        self._fusions = FusionController(
            self._burns, self.fusion_tokens, config.fusion_cap, clock=clock
        )

        self._sequencer = Sequencer(self.bus)
        self.journal = self._sequencer.journal
        for controller in (self._pool, self._fragments, self._burns, self._fusions):
            self._sequencer.enlist(controller)
        for registry in (self.fragment_tokens, self.fusion_tokens):
            if not self._sequencer.enlist(registry):
                logger.warning(
                    "%s does not journal its writes; they are not rolled back on failure",
                    type(registry).__name__,
                )

        self._mint_latch = ReentrancyLatch("mint")
        self._burn_latch = ReentrancyLatch("burn")
        self._fuse_latch = ReentrancyLatch("fuse")

    @classmethod
    def from_config(cls, config: VaultConfig | dict, **collaborators) -> FragmentVault:
        if isinstance(config, dict):
            config = VaultConfig.from_dict(config)
        return cls(config, **collaborators)

    # ==================== Operations ====================

    async def mint(self, caller: str) -> Fragment:
        """Mint one fragment of a pseudo-randomly chosen parent id to ``caller``."""
        async with self._sequencer.transaction("mint"):
            with self._mint_latch:
                parent_id = self._pool.allocate()
                fragment = await self._fragments.mint_fragment(parent_id, caller)
                self._sequencer.record(
                    FragmentMintedEvent(
                        owner=caller,
                        fragment_id=fragment.fragment_id,
                        parent_id=parent_id,
                        position=fragment.position,
                    )
                )
                if parent_id not in self._pool:
                    logger.info("Parent %d fully minted and retired from the pool", parent_id)
                    self._sequencer.record(
                        ParentRetiredEvent(parent_id=parent_id, timestamp=self._clock())
                    )
        return fragment

    def verify_fragment_set(self, parent_id: int, caller: str) -> bool:
        return self._fragments.verify_set(parent_id, caller)

    async def burn_fragment_set(self, parent_id: int, caller: str) -> BurnRecord:
        async with self._sequencer.transaction("burn"):
            with self._burn_latch:
                record = await self._burns.burn_set(parent_id, caller)
                self._sequencer.record(SetBurnedEvent(burner=caller, parent_id=parent_id))
        return record

    async def fuse_fragment_set(self, parent_id: int, caller: str) -> FusionRecord:
        async with self._sequencer.transaction("fuse"):
            with self._fuse_latch:
                record = await self._fusions.fuse(parent_id, caller)
                self._sequencer.record(
                    SetFusedEvent(
                        fuser=caller,
                        parent_id=parent_id,
                        fusion_id=record.fusion_id,
                        timestamp=record.timestamp,
                    )
                )
        return record

    # ==================== Fusion guards ====================

    def verify_fusion_address(self, parent_id: int, caller: str) -> bool:
        return self._fusions.verify_eligibility(parent_id, caller)

    def verify_fusion_set(self, parent_id: int) -> bool:
        return self._fusions.verify_not_fused(parent_id)

    def verify_fusion_max(self) -> bool:
        return self._fusions.verify_capacity()

    # ==================== Reads ====================

    @property
    def parent_ids(self) -> list[int]:
        return list(self._parent_ids)

    def available_parent_ids(self) -> list[int]:
        return self._pool.parent_ids

    def remaining_fragments(self, parent_id: int) -> int:
        return self._fragments.remaining(parent_id)

    def fragment(self, fragment_id: int) -> Fragment:
        return self._fragments.fragment(fragment_id)

    def parent_of(self, fragment_id: int) -> int:
        return self._fragments.parent_of(fragment_id)

    def fragment_ids_of(self, parent_id: int) -> list[int]:
        return self._fragments.fragment_ids(parent_id)

    def burner_of(self, parent_id: int) -> str | None:
        return self._burns.burner_of(parent_id)

    def burn_record(self, parent_id: int) -> BurnRecord | None:
        return self._burns.burn_record(parent_id)

    def fusion_record(self, fusion_id: int) -> FusionRecord:
        return self._fusions.fusion_record(fusion_id)

    def fusion_id_of(self, parent_id: int) -> int | None:
        return self._fusions.fusion_id_of(parent_id)

    @property
    def fusion_count(self) -> int:
        return self._fusions.fusion_count

    @property
    def max_fusions(self) -> int:
        return self._fusions.max_fusions

    def parent_state(self, parent_id: int) -> ParentState:
        if not self._fragments.knows(parent_id):
            raise UnknownParentError(parent_id)
        if self._fusions.fusion_id_of(parent_id) is not None:
            return "fused"
        if self._burns.burn_record(parent_id) is not None:
            return "burned"
        if self._fragments.is_complete(parent_id):
            return "complete"
        return "allocating"
