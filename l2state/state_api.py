"""Abstract interfaces for reading and writing StarkNet global state."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from .cached_state import CommitmentStateDiff


class StateReader(ABC):
    """Read-only access to StarkNet global state.

    Reads may mutate the reader (for example, to cache values), which is why
    a writable `State` is also a `StateReader`.
    """

    @abstractmethod
    def get_storage_at(self, contract_address: int, key: int) -> int:
        """Storage value under `key` of the contract; 0 when uninitialized."""

    @abstractmethod
    def get_nonce_at(self, contract_address: int) -> int:
        """Nonce of the contract; 0 when uninitialized."""

    @abstractmethod
    def get_class_hash_at(self, contract_address: int) -> int:
        """Class hash of the contract; 0 when uninitialized."""

    @abstractmethod
    def get_compiled_contract_class(self, class_hash: int) -> Any:
        """Contract class declared under `class_hash`.

        Raises UndeclaredClassHashError when the class is not declared.
        """

    @abstractmethod
    def get_compiled_class_hash(self, class_hash: int) -> int:
        """Compiled class hash of the given class hash."""


class State(StateReader):
    """Read and write access to StarkNet global state."""

    @abstractmethod
    def set_storage_at(self, contract_address: int, key: int, value: int) -> None:
        """Set the storage value under `key` of the contract."""

    @abstractmethod
    def increment_nonce(self, contract_address: int) -> None:
        """Increment the nonce of the contract."""

    @abstractmethod
    def set_class_hash_at(self, contract_address: int, class_hash: int) -> None:
        """Assign the contract address to the given class hash."""

    @abstractmethod
    def set_contract_class(self, class_hash: int, contract_class: Any) -> None:
        """Store the contract class under the given class hash."""

    @abstractmethod
    def set_compiled_class_hash(self, class_hash: int, compiled_class_hash: int) -> None:
        """Store the compiled class hash under the given class hash."""

    @abstractmethod
    def to_state_diff(self) -> CommitmentStateDiff:
        """Uncommitted changes made through this state."""