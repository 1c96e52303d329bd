"""Structured error hierarchy for the fragment vault."""

from __future__ import annotations

from .types import FRAGMENTS_PER_SET


class FragmintError(Exception):
    """
    Base of every error the vault raises on purpose.

    ``code`` is a stable tag for callers that branch on the failure kind;
    subclasses also carry the ids involved as attributes.
    """

    def __init__(self, code: str, message: str) -> None:
        super().__init__(message)
        self.code = code


# -- Allocation --


class PoolExhaustedError(FragmintError):
    def __init__(self) -> None:
        super().__init__("POOL_EXHAUSTED", "No parent ids left with fragment capacity")


class UnknownParentError(FragmintError):
    def __init__(self, parent_id: int) -> None:
        super().__init__("UNKNOWN_PARENT", f"Parent id {parent_id} is not part of this vault")
        self.parent_id = parent_id


class EntropyRangeError(FragmintError):
    def __init__(self, index: int, bound: int) -> None:
        super().__init__(
            "ENTROPY_OUT_OF_RANGE", f"Entropy source returned index {index} outside [0, {bound})"
        )
        self.index = index
        self.bound = bound


# -- Fragments and burning --


class FragmentNotFoundError(FragmintError):
    def __init__(self, fragment_id: int) -> None:
        super().__init__("FRAGMENT_NOT_FOUND", f"Fragment {fragment_id} was never minted")
        self.fragment_id = fragment_id


class NonexistentParentError(FragmintError):
    def __init__(self, parent_id: int) -> None:
        super().__init__("NONEXISTENT_PARENT", f"No fragments minted for parent id {parent_id}")
        self.parent_id = parent_id


class IncompleteSetError(FragmintError):
    def __init__(self, parent_id: int, minted: int) -> None:
        super().__init__(
            "INCOMPLETE_SET",
            f"Parent id {parent_id} has only {minted} of {FRAGMENTS_PER_SET} fragments minted",
        )
        self.parent_id = parent_id
        self.minted = minted


class NotOwnerOfAllError(FragmintError):
    def __init__(self, parent_id: int, fragment_id: int, identity: str) -> None:
        super().__init__(
            "NOT_OWNER_OF_ALL",
            f'"{identity}" does not own fragment {fragment_id} of parent id {parent_id}',
        )
        self.parent_id = parent_id
        self.fragment_id = fragment_id
        self.identity = identity


class AlreadyBurnedError(FragmintError):
    def __init__(self, parent_id: int, identity: str) -> None:
        super().__init__(
            "ALREADY_BURNED", f'"{identity}" already burned the set of parent id {parent_id}'
        )
        self.parent_id = parent_id
        self.identity = identity


# -- Fusion --


class SetNotBurnedError(FragmintError):
    def __init__(self, parent_id: int) -> None:
        super().__init__("SET_NOT_BURNED", f"The set of parent id {parent_id} has not been burned")
        self.parent_id = parent_id


class NotBurnerError(FragmintError):
    def __init__(self, parent_id: int, identity: str, burner: str) -> None:
        super().__init__(
            "NOT_BURNER", f'"{identity}" did not burn parent id {parent_id} (burner: "{burner}")'
        )
        self.parent_id = parent_id
        self.identity = identity
        self.burner = burner


class AlreadyFusedError(FragmintError):
    def __init__(self, parent_id: int, fusion_id: int | None = None) -> None:
        super().__init__("ALREADY_FUSED", f"Parent id {parent_id} has already been fused")
        self.parent_id = parent_id
        self.fusion_id = fusion_id


class FusionCapReachedError(FragmintError):
    def __init__(self, max_fusions: int) -> None:
        super().__init__("FUSION_CAP_REACHED", f"All {max_fusions} fusion assets have been minted")
        self.max_fusions = max_fusions


class FusionNotFoundError(FragmintError):
    def __init__(self, fusion_id: int) -> None:
        super().__init__("FUSION_NOT_FOUND", f"Fusion asset {fusion_id} does not exist")
        self.fusion_id = fusion_id


# -- Execution --


class ReentrantCallError(FragmintError):
    def __init__(self, operation: str) -> None:
        super().__init__("REENTRANT_CALL", f'Re-entrant "{operation}" call rejected')
        self.operation = operation


# -- Ownership registry --


class TokenError(FragmintError):
    def __init__(self, code: str, registry: str, token_id: int, message: str) -> None:
        super().__init__(code, message)
        self.registry = registry
        self.token_id = token_id


class TokenNotFoundError(TokenError):
    def __init__(self, registry: str, token_id: int) -> None:
        super().__init__(
            "TOKEN_NOT_FOUND", registry, token_id, f"Token {token_id} does not exist in {registry}"
        )


class TokenAlreadyExistsError(TokenError):
    def __init__(self, registry: str, token_id: int) -> None:
        super().__init__(
            "TOKEN_EXISTS", registry, token_id, f"Token {token_id} already exists in {registry}"
        )


class NotTokenOwnerError(TokenError):
    def __init__(self, registry: str, token_id: int, identity: str) -> None:
        super().__init__(
            "NOT_TOKEN_OWNER",
            registry,
            token_id,
            f'"{identity}" does not own token {token_id} in {registry}',
        )
        self.identity = identity
