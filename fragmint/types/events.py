"""Event types."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass
class FragmentMintedEvent:
    owner: str
    fragment_id: int
    parent_id: int
    position: int
    type: str = "fragment:minted"


@dataclass
class ParentRetiredEvent:
    parent_id: int
    timestamp: float
    type: str = "parent:retired"


@dataclass
class SetBurnedEvent:
    burner: str
    parent_id: int
    type: str = "set:burned"


@dataclass
class SetFusedEvent:
    fuser: str
    parent_id: int
    fusion_id: int
    timestamp: float
    type: str = "set:fused"


VaultEvent = FragmentMintedEvent | ParentRetiredEvent | SetBurnedEvent | SetFusedEvent
