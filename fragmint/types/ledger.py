"""Ledger record types."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Literal

FRAGMENTS_PER_SET = 4

ParentState = Literal["allocating", "complete", "burned", "fused"]


@dataclass(frozen=True)
class Fragment:
    fragment_id: int
    parent_id: int
    position: int


@dataclass(frozen=True)
class BurnRecord:
    parent_id: int
    burner: str
    timestamp: float


@dataclass(frozen=True)
class FusionRecord:
    fusion_id: int
    parent_id: int
    fuser: str
    timestamp: float
