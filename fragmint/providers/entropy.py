"""
Entropy sources for parent id selection.

The vault only ever asks for an index in ``[0, bound)``. The default
``WeakEntropySource`` is predictable and must not be used where selection
fairness matters; plug in a verifiable source through the same protocol.
"""

from __future__ import annotations

import hashlib
import itertools
import random
import time
from typing import Callable, Protocol, runtime_checkable


@runtime_checkable
class EntropySource(Protocol):
    def next_index(self, bound: int, salt: int) -> int:
        """Return an index in ``[0, bound)``."""
        ...


def _check_bound(bound: int) -> None:
    if bound <= 0:
        raise ValueError(f"bound must be positive, got {bound}")


class WeakEntropySource:
    """Hash of the clock, a process nonce and the salt. Not secure."""

    def __init__(self, clock: Callable[[], int] = time.time_ns) -> None:
        self._clock = clock
        self._nonce = itertools.count()

    def next_index(self, bound: int, salt: int) -> int:
        _check_bound(bound)
        material = f"{self._clock()}:{next(self._nonce)}:{salt}".encode()
        digest = hashlib.sha256(material).digest()
        return int.from_bytes(digest, "big") % bound


class SeededEntropySource:
    """Deterministic source for tests and simulations."""

    def __init__(self, seed: int) -> None:
        self._rng = random.Random(seed)

    def next_index(self, bound: int, salt: int) -> int:
        _check_bound(bound)
        return self._rng.randrange(bound)
