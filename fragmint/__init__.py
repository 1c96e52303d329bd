"""
fragmint - four-piece fragment sets, burn and fusion
=====================================================

Each parent asset id is split into four fragment tokens handed out at random.
Whoever collects and burns all four of a parent's fragments may fuse them,
once, into a new asset.

## Where to find things

- **Vault**: `FragmentVault` (`fragmint.vault.core`), the public operations
  `mint`, `burn_fragment_set`, `fuse_fragment_set` and the read accessors.
- **Controllers**: `AllocationPool`, `FragmentRegistry`, `BurnLedger`,
  `FusionController` (`fragmint.vault`).
- **Collaborators**: ownership registries and entropy sources
  (`fragmint.providers`).
- **Runtime**: transactions and reentrancy latches (`fragmint.runtime`).
- **Events**: `EventBus` (`fragmint.events`), event types in `fragmint.types`.

```python
from fragmint import FragmentVault, VaultConfig

vault = FragmentVault(VaultConfig(parent_ids=[1, 2, 3]))
fragment = await vault.mint("alice")
```
"""

from fragmint.config import VaultConfig
from fragmint.errors import FragmintError
from fragmint.events import EventBus
from fragmint.types import BurnRecord, Fragment, FusionRecord
from fragmint.vault import FragmentVault

__all__ = [
    "BurnRecord",
    "EventBus",
    "Fragment",
    "FragmentVault",
    "FragmintError",
    "FusionRecord",
    "VaultConfig",
]
