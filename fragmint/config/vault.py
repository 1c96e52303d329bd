"""
Vault configuration

The initial parent id set is fixed for the vault's lifetime; the fusion cap
defaults to its size.
"""

from __future__ import annotations

from collections import Counter
from typing import Any, Literal

from pydantic import BaseModel, Field, field_validator, model_validator


class VaultConfig(BaseModel):
    """Fragment vault configuration."""

    parent_ids: list[int] = Field(..., min_length=1, description="Initial parent asset ids")
    max_fusions: int | None = Field(
        None, ge=0, description="Global fusion cap, defaults to the number of parent ids"
    )
    entropy: Literal["weak", "seeded"] = Field("weak", description="Entropy source kind")
    entropy_seed: int | None = Field(None, description="Seed for the seeded entropy source")
    debug_events: bool = Field(False, description="Keep recent events on the bus")

    @field_validator("parent_ids")
    @classmethod
    def _check_parent_ids(cls, value: list[int]) -> list[int]:
        negative = [pid for pid in value if pid < 0]
        if negative:
            raise ValueError(f"parent ids must be non-negative: {negative}")
        dupes = sorted(pid for pid, n in Counter(value).items() if n > 1)
        if dupes:
            raise ValueError(f"duplicate parent ids: {dupes}")
        return value

    @model_validator(mode="after")
    def _check_seed(self) -> VaultConfig:
        if self.entropy == "seeded" and self.entropy_seed is None:
            raise ValueError("entropy_seed is required when entropy is 'seeded'")
        return self

    @property
    def fusion_cap(self) -> int:
        return len(self.parent_ids) if self.max_fusions is None else self.max_fusions

    def to_dict(self) -> dict[str, Any]:
        return self.model_dump(exclude_none=True)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> VaultConfig:
        return cls.model_validate(data)
