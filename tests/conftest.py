"""
Pytest Configuration and Fixtures
"""

import pytest

from fragmint.config import VaultConfig
from fragmint.events import EventBus
from fragmint.providers import InMemoryOwnershipRegistry
from fragmint.runtime import Sequencer
from fragmint.vault import FragmentVault


class ScriptedEntropy:
    """Returns scripted pool slots in order, then ``default`` forever."""

    def __init__(self, slots=(), default: int = 0):
        self._slots = list(slots)
        self.default = default
        self.calls: list[tuple[int, int]] = []

    def next_index(self, bound: int, salt: int) -> int:
        self.calls.append((bound, salt))
        return self._slots.pop(0) if self._slots else self.default


class FakeClock:
    """Monotonic fake clock: 1000.0, 1001.0, ..."""

    def __init__(self, start: float = 1000.0, step: float = 1.0):
        self.now = start
        self.step = step

    def __call__(self) -> float:
        value = self.now
        self.now += self.step
        return value


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def scripted_entropy():
    """Factory for scripted entropy sources."""
    return ScriptedEntropy


@pytest.fixture
def fragment_tokens() -> InMemoryOwnershipRegistry:
    return InMemoryOwnershipRegistry("fragments")


@pytest.fixture
def fusion_tokens() -> InMemoryOwnershipRegistry:
    return InMemoryOwnershipRegistry("fusions")


@pytest.fixture
def sequencer() -> Sequencer:
    """Bare sequencer for driving a single component inside transactions."""
    return Sequencer(EventBus())


@pytest.fixture
def make_vault(clock):
    """
    Build a vault over parent ids 1, 2, 3 by default.

    ``slots`` scripts the pool slots picked by successive mints; afterwards
    slot 0 is always chosen. With the default pool and no script, mints fill
    parent 1 (fragments 1-4), then parent 3 (5-8), then parent 2 (9-12).
    """

    def _make(parent_ids=(1, 2, 3), slots=(), **kwargs) -> FragmentVault:
        config_fields = {
            key: kwargs.pop(key)
            for key in ("max_fusions", "debug_events")
            if key in kwargs
        }
        config = VaultConfig(parent_ids=list(parent_ids), **config_fields)
        kwargs.setdefault("entropy", ScriptedEntropy(slots))
        kwargs.setdefault("clock", clock)
        return FragmentVault(config, **kwargs)

    return _make


@pytest.fixture
def vault(make_vault) -> FragmentVault:
    return make_vault()
