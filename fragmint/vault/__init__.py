"""FragmentVault - allocation, burn and fusion of four-piece fragment sets."""

from .burn import BurnerLookup, BurnLedger
from .core import FragmentVault, entropy_from_config
from .fragments import FragmentRegistry
from .fusion import FusionController
from .pool import AllocationPool

__all__ = [
    "AllocationPool",
    "BurnerLookup",
    "BurnLedger",
    "FragmentRegistry",
    "FragmentVault",
    "FusionController",
    "entropy_from_config",
]
