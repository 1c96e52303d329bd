from .latch import ReentrancyLatch
from .transaction import Journal, Journaled, Sequencer, Transaction

__all__ = ["Journal", "Journaled", "ReentrancyLatch", "Sequencer", "Transaction"]
