from .entropy import EntropySource, SeededEntropySource, WeakEntropySource
from .ownership import InMemoryOwnershipRegistry, OwnershipRegistry, ReceiverHook

__all__ = [
    "EntropySource",
    "SeededEntropySource",
    "WeakEntropySource",
    "InMemoryOwnershipRegistry",
    "OwnershipRegistry",
    "ReceiverHook",
]
