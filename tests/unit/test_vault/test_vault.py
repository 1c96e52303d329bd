"""Unit tests for the FragmentVault facade."""

import pytest

from fragmint.config import VaultConfig
from fragmint.errors import (
    AlreadyBurnedError,
    FusionNotFoundError,
    IncompleteSetError,
    NotBurnerError,
    PoolExhaustedError,
    SetNotBurnedError,
    UnknownParentError,
)
from fragmint.providers import SeededEntropySource, WeakEntropySource
from fragmint.vault import FragmentVault


async def mint_n(vault, caller, n):
    return [await vault.mint(caller) for _ in range(n)]


class TestMint:
    @pytest.mark.asyncio
    async def test_mint_assigns_fragment_to_caller(self, vault):
        fragment = await vault.mint("alice")
        assert fragment.fragment_id == 1
        assert fragment.parent_id == 1
        assert fragment.position == 1
        assert vault.fragment_tokens.owner_of(1) == "alice"
        assert vault.remaining_fragments(1) == 3

    @pytest.mark.asyncio
    async def test_parent_leaves_pool_only_when_full(self, vault):
        await mint_n(vault, "alice", 3)
        assert 1 in vault.available_parent_ids()
        await vault.mint("alice")
        assert 1 not in vault.available_parent_ids()
        assert sorted(vault.available_parent_ids()) == [2, 3]

    @pytest.mark.asyncio
    async def test_pool_exhausted_after_all_fragments(self, vault):
        fragments = await mint_n(vault, "alice", 12)
        assert vault.available_parent_ids() == []
        with pytest.raises(PoolExhaustedError):
            await vault.mint("alice")
        for parent_id in (1, 2, 3):
            positions = sorted(f.position for f in fragments if f.parent_id == parent_id)
            assert positions == [1, 2, 3, 4]

    @pytest.mark.asyncio
    async def test_minted_count_invariant_with_random_entropy(self, make_vault):
        vault = make_vault(parent_ids=range(10, 20), entropy=SeededEntropySource(3))
        for _ in range(40):
            await vault.mint("alice")
            for parent_id in vault.parent_ids:
                remaining = vault.remaining_fragments(parent_id)
                assert 0 <= remaining <= 4
                assert (parent_id in vault.available_parent_ids()) == (remaining > 0)
        assert vault.available_parent_ids() == []

    @pytest.mark.asyncio
    async def test_weak_entropy_default_works(self):
        vault = FragmentVault(VaultConfig(parent_ids=[5, 6]))
        fragment = await vault.mint("alice")
        assert fragment.parent_id in (5, 6)


class TestBurnAndFuse:
    @pytest.mark.asyncio
    async def test_full_lifecycle(self, vault):
        await mint_n(vault, "alice", 4)
        assert vault.parent_state(1) == "complete"
        assert vault.verify_fragment_set(1, "alice") is True

        record = await vault.burn_fragment_set(1, "alice")
        assert record.burner == "alice"
        assert vault.burner_of(1) == "alice"
        assert vault.burn_record(1) == record
        assert vault.parent_state(1) == "burned"
        assert vault.fragment_tokens.balance_of("alice") == 0

        assert vault.verify_fusion_address(1, "alice") is True
        assert vault.verify_fusion_set(1) is True
        assert vault.verify_fusion_max() is True

        fusion = await vault.fuse_fragment_set(1, "alice")
        assert fusion.fusion_id == 1
        assert vault.fusion_id_of(1) == 1
        assert vault.fusion_record(1) == fusion
        assert vault.fusion_tokens.owner_of(1) == "alice"
        assert vault.parent_state(1) == "fused"
        assert vault.fusion_count == 1

    @pytest.mark.asyncio
    async def test_burn_incomplete_set(self, vault):
        await mint_n(vault, "alice", 2)
        with pytest.raises(IncompleteSetError):
            await vault.burn_fragment_set(1, "alice")
        assert vault.parent_state(1) == "allocating"

    @pytest.mark.asyncio
    async def test_second_burn_rejected(self, vault):
        await mint_n(vault, "alice", 4)
        await vault.burn_fragment_set(1, "alice")
        with pytest.raises(AlreadyBurnedError):
            await vault.burn_fragment_set(1, "alice")

    @pytest.mark.asyncio
    async def test_fusion_guards_read_only(self, vault):
        with pytest.raises(SetNotBurnedError):
            vault.verify_fusion_address(1, "alice")
        await mint_n(vault, "alice", 4)
        await vault.burn_fragment_set(1, "alice")
        with pytest.raises(NotBurnerError):
            vault.verify_fusion_address(1, "bob")
        assert vault.fusion_count == 0

    def test_max_fusions_defaults_to_parent_count(self, vault):
        assert vault.max_fusions == 3

    def test_max_fusions_override(self, make_vault):
        assert make_vault(max_fusions=1).max_fusions == 1


class TestReads:
    @pytest.mark.asyncio
    async def test_fragment_lookups(self, vault):
        await mint_n(vault, "alice", 5)
        assert vault.fragment_ids_of(1) == [1, 2, 3, 4]
        assert vault.fragment_ids_of(3) == [5]
        assert vault.parent_of(5) == 3
        assert vault.fragment(2).position == 2

    def test_parent_state_unknown(self, vault):
        with pytest.raises(UnknownParentError):
            vault.parent_state(99)

    def test_remaining_unknown(self, vault):
        with pytest.raises(UnknownParentError):
            vault.remaining_fragments(99)

    def test_fusion_record_missing(self, vault):
        with pytest.raises(FusionNotFoundError):
            vault.fusion_record(1)
        assert vault.fusion_id_of(1) is None

    def test_parent_ids_is_initial_set(self, make_vault):
        vault = make_vault(parent_ids=[7, 3, 5])
        assert vault.parent_ids == [7, 3, 5]
        assert all(vault.parent_state(pid) == "allocating" for pid in (3, 5, 7))


class TestFromConfig:
    def test_from_dict(self):
        vault = FragmentVault.from_config(
            {"parent_ids": [1, 2], "entropy": "seeded", "entropy_seed": 9}
        )
        assert vault.parent_ids == [1, 2]
        assert vault.max_fusions == 2

    def test_from_model_with_collaborators(self, fragment_tokens):
        vault = FragmentVault.from_config(
            VaultConfig(parent_ids=[1]), entropy=WeakEntropySource(), fragment_tokens=fragment_tokens
        )
        assert vault.fragment_tokens is fragment_tokens
