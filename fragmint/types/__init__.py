"""Core type definitions - re-exported from sub-modules."""

from .events import (
    FragmentMintedEvent, ParentRetiredEvent, SetBurnedEvent, SetFusedEvent, VaultEvent,
)
from .ledger import FRAGMENTS_PER_SET, BurnRecord, Fragment, FusionRecord, ParentState

__all__ = [
    "FRAGMENTS_PER_SET",
    "BurnRecord",
    "Fragment",
    "FusionRecord",
    "ParentState",
    "FragmentMintedEvent",
    "ParentRetiredEvent",
    "SetBurnedEvent",
    "SetFusedEvent",
    "VaultEvent",
]
