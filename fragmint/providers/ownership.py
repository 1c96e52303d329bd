"""
Ownership registry - exclusive-owner token substrate.

The vault consumes this interface for fragment tokens and fusion assets and
never tracks ownership itself. Owners may register a receiver hook that runs
whenever a token is minted or transferred to them; the hook may call back into
the vault, and raising from it rejects the receipt.
"""

from __future__ import annotations

import logging
from functools import partial
from typing import Awaitable, Callable, Protocol, runtime_checkable

from ..errors import NotTokenOwnerError, TokenAlreadyExistsError, TokenNotFoundError
from ..runtime import Journal

logger = logging.getLogger(__name__)

# hook(owner, token_id, previous_owner); previous_owner is None on mint
ReceiverHook = Callable[[str, int, str | None], Awaitable[None]]


@runtime_checkable
class OwnershipRegistry(Protocol):
    async def mint(self, owner: str, token_id: int) -> None: ...

    async def burn(self, token_id: int) -> None: ...

    async def transfer(self, sender: str, recipient: str, token_id: int) -> None: ...

    def owner_of(self, token_id: int) -> str: ...


class InMemoryOwnershipRegistry:
    """Dict-backed registry with receiver hooks; every write is journaled."""

    def __init__(self, name: str = "tokens") -> None:
        self.name = name
        self._owners: dict[int, str] = {}
        self._receivers: dict[str, ReceiverHook] = {}
        self.journal = Journal()

    def attach_journal(self, journal: Journal) -> None:
        self.journal = journal

    # -- Hooks --

    def register_receiver(self, owner: str, hook: ReceiverHook) -> None:
        self._receivers[owner] = hook

    def unregister_receiver(self, owner: str) -> None:
        self._receivers.pop(owner, None)

    async def _notify(self, owner: str, token_id: int, previous: str | None) -> None:
        hook = self._receivers.get(owner)
        if hook is not None:
            await hook(owner, token_id, previous)

    # -- Mutations --

    async def mint(self, owner: str, token_id: int) -> None:
        if token_id in self._owners:
            raise TokenAlreadyExistsError(self.name, token_id)
        self._owners[token_id] = owner
        self.journal.record(partial(self._owners.pop, token_id, None))
        logger.debug("%s: minted %d to %s", self.name, token_id, owner)
        try:
            await self._notify(owner, token_id, None)
        except Exception:
            self._owners.pop(token_id, None)
            raise

    async def burn(self, token_id: int) -> None:
        if token_id not in self._owners:
            raise TokenNotFoundError(self.name, token_id)
        owner = self._owners.pop(token_id)
        self.journal.record(partial(self._owners.__setitem__, token_id, owner))
        logger.debug("%s: burned %d", self.name, token_id)

    async def transfer(self, sender: str, recipient: str, token_id: int) -> None:
        if self.owner_of(token_id) != sender:
            raise NotTokenOwnerError(self.name, token_id, sender)
        self._owners[token_id] = recipient
        self.journal.record(partial(self._owners.__setitem__, token_id, sender))
        try:
            await self._notify(recipient, token_id, sender)
        except Exception:
            self._owners[token_id] = sender
            raise

    # -- Reads --

    def owner_of(self, token_id: int) -> str:
        try:
            return self._owners[token_id]
        except KeyError:
            raise TokenNotFoundError(self.name, token_id) from None

    def exists(self, token_id: int) -> bool:
        return token_id in self._owners

    def balance_of(self, owner: str) -> int:
        return sum(1 for o in self._owners.values() if o == owner)

    def tokens_of(self, owner: str) -> list[int]:
        return sorted(t for t, o in self._owners.items() if o == owner)

    def __len__(self) -> int:
        return len(self._owners)
