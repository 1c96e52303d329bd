"""Unit tests for the in-memory ownership registry."""

import pytest

from fragmint.errors import NotTokenOwnerError, TokenAlreadyExistsError, TokenNotFoundError
from fragmint.providers import InMemoryOwnershipRegistry, OwnershipRegistry
from fragmint.runtime import Journaled


@pytest.fixture
def registry():
    return InMemoryOwnershipRegistry("test")


class TestMintAndBurn:
    @pytest.mark.asyncio
    async def test_mint_sets_owner(self, registry):
        await registry.mint("alice", 1)
        assert registry.owner_of(1) == "alice"
        assert registry.exists(1)
        assert registry.balance_of("alice") == 1

    @pytest.mark.asyncio
    async def test_duplicate_mint(self, registry):
        await registry.mint("alice", 1)
        with pytest.raises(TokenAlreadyExistsError) as exc_info:
            await registry.mint("bob", 1)
        assert exc_info.value.registry == "test"
        assert registry.owner_of(1) == "alice"

    @pytest.mark.asyncio
    async def test_burn_removes_token(self, registry):
        await registry.mint("alice", 1)
        await registry.burn(1)
        assert not registry.exists(1)
        with pytest.raises(TokenNotFoundError):
            registry.owner_of(1)

    @pytest.mark.asyncio
    async def test_burn_missing(self, registry):
        with pytest.raises(TokenNotFoundError):
            await registry.burn(5)


class TestTransfer:
    @pytest.mark.asyncio
    async def test_transfer(self, registry):
        await registry.mint("alice", 1)
        await registry.transfer("alice", "bob", 1)
        assert registry.owner_of(1) == "bob"
        assert registry.tokens_of("alice") == []

    @pytest.mark.asyncio
    async def test_transfer_by_non_owner(self, registry):
        await registry.mint("alice", 1)
        with pytest.raises(NotTokenOwnerError) as exc_info:
            await registry.transfer("bob", "carol", 1)
        assert exc_info.value.identity == "bob"


class TestReceivers:
    @pytest.mark.asyncio
    async def test_hook_called_on_mint_and_transfer(self, registry):
        calls = []

        async def hook(owner, token_id, previous):
            calls.append((owner, token_id, previous))

        registry.register_receiver("bob", hook)
        await registry.mint("bob", 1)
        await registry.mint("alice", 2)
        await registry.transfer("alice", "bob", 2)
        assert calls == [("bob", 1, None), ("bob", 2, "alice")]

    @pytest.mark.asyncio
    async def test_rejecting_hook_undoes_mint(self, registry):
        async def reject(owner, token_id, previous):
            raise PermissionError("no")

        registry.register_receiver("bob", reject)
        with pytest.raises(PermissionError):
            await registry.mint("bob", 1)
        assert not registry.exists(1)

    @pytest.mark.asyncio
    async def test_rejecting_hook_undoes_transfer(self, registry):
        async def reject(owner, token_id, previous):
            raise PermissionError("no")

        await registry.mint("alice", 1)
        registry.register_receiver("bob", reject)
        with pytest.raises(PermissionError):
            await registry.transfer("alice", "bob", 1)
        assert registry.owner_of(1) == "alice"


class TestJournal:
    @pytest.mark.asyncio
    async def test_rollback_reverts_mint_burn_and_transfer(self, registry, sequencer):
        sequencer.enlist(registry)
        await registry.mint("alice", 1)
        await registry.mint("alice", 2)
        with pytest.raises(RuntimeError):
            async with sequencer.transaction():
                await registry.mint("alice", 3)
                await registry.burn(1)
                await registry.transfer("alice", "bob", 2)
                raise RuntimeError("abort")
        assert registry.tokens_of("alice") == [1, 2]
        assert registry.tokens_of("bob") == []
        assert len(registry) == 2

    @pytest.mark.asyncio
    async def test_hook_burning_its_own_token_is_undone_in_order(self, registry, sequencer):
        sequencer.enlist(registry)

        async def burn_on_receipt(owner, token_id, previous):
            await registry.burn(token_id)

        registry.register_receiver("alice", burn_on_receipt)
        with pytest.raises(RuntimeError):
            async with sequencer.transaction():
                await registry.mint("alice", 1)
                assert not registry.exists(1)
                raise RuntimeError("abort")
        assert not registry.exists(1)

    def test_satisfies_protocols(self, registry):
        assert isinstance(registry, OwnershipRegistry)
        assert isinstance(registry, Journaled)
