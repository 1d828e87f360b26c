"""A caching state layer on top of a state reader, with transactional nesting."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any, TypeVar

from .errors import OutOfRangeContractAddressError, StateError
from .state_api import State, StateReader

_K = TypeVar("_K")
_V = TypeVar("_V")

_MAX_NONCE = 2**64 - 1


def _subtract_mappings(lhs: Mapping[_K, _V], rhs: Mapping[_K, _V]) -> dict[_K, _V]:
    """Entries of `lhs` that are missing from `rhs` or hold a different value there."""
    missing = object()
    return {key: value for key, value in lhs.items() if rhs.get(key, missing) != value}


@dataclass
class CommitmentStateDiff:
    """Uncommitted changes induced on StarkNet contracts."""

    address_to_class_hash: dict[int, int] = field(default_factory=dict)
    address_to_nonce: dict[int, int] = field(default_factory=dict)
    storage_updates: dict[int, dict[int, int]] = field(default_factory=dict)
    class_hash_to_compiled_class_hash: dict[int, int] = field(default_factory=dict)


def storage_view_to_nested(storage_view: Mapping[tuple[int, int], int]) -> dict[int, dict[int, int]]:
    """Group a flat `(address, key) -> value` mapping by contract address."""
    nested: dict[int, dict[int, int]] = {}
    for (address, key), value in storage_view.items():
        nested.setdefault(address, {})[key] = value
    return nested


@dataclass
class _StateCache:
    # Initial values, read before any write (per cell).
    nonce_initial_values: dict[int, int] = field(default_factory=dict)
    class_hash_initial_values: dict[int, int] = field(default_factory=dict)
    storage_initial_values: dict[tuple[int, int], int] = field(default_factory=dict)
    compiled_class_hash_initial_values: dict[int, int] = field(default_factory=dict)
    # Writes.
    nonce_writes: dict[int, int] = field(default_factory=dict)
    class_hash_writes: dict[int, int] = field(default_factory=dict)
    storage_writes: dict[tuple[int, int], int] = field(default_factory=dict)
    compiled_class_hash_writes: dict[int, int] = field(default_factory=dict)

    @staticmethod
    def _lookup(writes: Mapping, initial: Mapping, key: Any) -> Any:
        if key in writes:
            return writes[key]
        return initial.get(key)

    def storage_at(self, contract_address: int, key: int) -> int | None:
        cell = (contract_address, key)
        return self._lookup(self.storage_writes, self.storage_initial_values, cell)

    def nonce_at(self, contract_address: int) -> int | None:
        return self._lookup(self.nonce_writes, self.nonce_initial_values, contract_address)

    def class_hash_at(self, contract_address: int) -> int | None:
        return self._lookup(
            self.class_hash_writes, self.class_hash_initial_values, contract_address
        )

    def compiled_class_hash(self, class_hash: int) -> int | None:
        return self._lookup(
            self.compiled_class_hash_writes, self.compiled_class_hash_initial_values, class_hash
        )

    def storage_updates(self) -> dict[tuple[int, int], int]:
        return _subtract_mappings(self.storage_writes, self.storage_initial_values)

    def class_hash_updates(self) -> dict[int, int]:
        return _subtract_mappings(self.class_hash_writes, self.class_hash_initial_values)

    def nonce_updates(self) -> dict[int, int]:
        return _subtract_mappings(self.nonce_writes, self.nonce_initial_values)


class CachedState(State):
    """Caches reads from an underlying reader and holds writes in memory."""

    def __init__(self, state: StateReader) -> None:
        self.state = state
        self._cache = _StateCache()
        self._class_hash_to_class: dict[int, Any] = {}

    def count_actual_state_changes(self) -> tuple[int, int, int]:
        """Return (storage updates, modified contracts, class hash updates)."""
        storage_updates = self._cache.storage_updates()
        class_hash_updates = self._cache.class_hash_updates()
        modified_contracts = {address for address, _ in storage_updates}
        modified_contracts.update(class_hash_updates)
        return len(storage_updates), len(modified_contracts), len(class_hash_updates)

    # Reading.

    def get_storage_at(self, contract_address: int, key: int) -> int:
        value = self._cache.storage_at(contract_address, key)
        if value is None:
            value = self.state.get_storage_at(contract_address, key)
            self._cache.storage_initial_values[(contract_address, key)] = value
        return value

    def get_nonce_at(self, contract_address: int) -> int:
        nonce = self._cache.nonce_at(contract_address)
        if nonce is None:
            nonce = self.state.get_nonce_at(contract_address)
            self._cache.nonce_initial_values[contract_address] = nonce
        return nonce

    def get_class_hash_at(self, contract_address: int) -> int:
        class_hash = self._cache.class_hash_at(contract_address)
        if class_hash is None:
            class_hash = self.state.get_class_hash_at(contract_address)
            self._cache.class_hash_initial_values[contract_address] = class_hash
        return class_hash

    def get_compiled_contract_class(self, class_hash: int) -> Any:
        if class_hash not in self._class_hash_to_class:
            self._class_hash_to_class[class_hash] = self.state.get_compiled_contract_class(
                class_hash
            )
        return self._class_hash_to_class[class_hash]

    def get_compiled_class_hash(self, class_hash: int) -> int:
        compiled = self._cache.compiled_class_hash(class_hash)
        if compiled is None:
            compiled = self.state.get_compiled_class_hash(class_hash)
            self._cache.compiled_class_hash_initial_values[class_hash] = compiled
        return compiled

    # Writing.

    def set_storage_at(self, contract_address: int, key: int, value: int) -> None:
        self._cache.storage_writes[(contract_address, key)] = value

    def increment_nonce(self, contract_address: int) -> None:
        current_nonce = self.get_nonce_at(contract_address)
        if not 0 <= current_nonce <= _MAX_NONCE:
            raise StateError(f"Nonce {current_nonce:#x} is out of range.")
        self._cache.nonce_writes[contract_address] = current_nonce + 1

    def set_class_hash_at(self, contract_address: int, class_hash: int) -> None:
        if contract_address == 0:
            raise OutOfRangeContractAddressError()
        self._cache.class_hash_writes[contract_address] = class_hash

    def set_contract_class(self, class_hash: int, contract_class: Any) -> None:
        self._class_hash_to_class[class_hash] = contract_class

    def set_compiled_class_hash(self, class_hash: int, compiled_class_hash: int) -> None:
        self._cache.compiled_class_hash_writes[class_hash] = compiled_class_hash

    def to_state_diff(self) -> CommitmentStateDiff:
        return CommitmentStateDiff(
            address_to_class_hash=self._cache.class_hash_updates(),
            address_to_nonce=self._cache.nonce_updates(),
            storage_updates=storage_view_to_nested(self._cache.storage_updates()),
            class_hash_to_compiled_class_hash=dict(self._cache.compiled_class_hash_writes),
        )


class TransactionalState(CachedState):
    """A cached state layered over a parent cached state.

    Changes stay local until `commit` moves them into the parent.
    """

    state: CachedState

    def __init__(self, state: CachedState) -> None:
        super().__init__(state)

    def commit(self) -> None:
        """Move the writes made through this state into the parent state."""
        child_cache = self._cache
        parent = self.state
        parent_cache = parent._cache
        parent_cache.nonce_writes.update(child_cache.nonce_writes)
        parent_cache.class_hash_writes.update(child_cache.class_hash_writes)
        parent_cache.storage_writes.update(child_cache.storage_writes)
        parent_cache.compiled_class_hash_writes.update(child_cache.compiled_class_hash_writes)
        parent._class_hash_to_class.update(self._class_hash_to_class)
        self._discard()

    def abort(self) -> None:
        """Discard the changes made through this state."""
        self._discard()

    def _discard(self) -> None:
        self._cache = _StateCache()
        self._class_hash_to_class = {}