import pytest

from l2state.cached_state import (
    CachedState,
    CommitmentStateDiff,
    TransactionalState,
    storage_view_to_nested,
)
from l2state.errors import OutOfRangeContractAddressError, StateError, UndeclaredClassHashError
from l2state.state_api import StateReader

TEST_CLASS_HASH = 0x110
TEST_EMPTY_CONTRACT_CLASS_HASH = 0x112


class DictStateReader(StateReader):
    def __init__(
        self,
        storage_view=None,
        address_to_nonce=None,
        address_to_class_hash=None,
        class_hash_to_class=None,
        class_hash_to_compiled_class_hash=None,
    ):
        self.storage_view = storage_view or {}
        self.address_to_nonce = address_to_nonce or {}
        self.address_to_class_hash = address_to_class_hash or {}
        self.class_hash_to_class = class_hash_to_class or {}
        self.class_hash_to_compiled_class_hash = class_hash_to_compiled_class_hash or {}
        self.storage_reads = 0

    def get_storage_at(self, contract_address, key):
        self.storage_reads += 1
        return self.storage_view.get((contract_address, key), 0)

    def get_nonce_at(self, contract_address):
        return self.address_to_nonce.get(contract_address, 0)

    def get_class_hash_at(self, contract_address):
        return self.address_to_class_hash.get(contract_address, 0)

    def get_compiled_contract_class(self, class_hash):
        try:
            return self.class_hash_to_class[class_hash]
        except KeyError:
            raise UndeclaredClassHashError(class_hash) from None

    def get_compiled_class_hash(self, class_hash):
        return self.class_hash_to_compiled_class_hash.get(class_hash, 0)


def test_get_uninitialized_storage_value():
    state = CachedState(DictStateReader())
    assert state.get_storage_at(0x1, 0x10) == 0


def test_get_and_set_storage_value():
    address0, address1 = 0x100, 0x200
    key0, key1 = 0x10, 0x20
    val0, val1 = 0x1, 0x5
    state = CachedState(
        DictStateReader(storage_view={(address0, key0): val0, (address1, key1): val1})
    )
    assert state.get_storage_at(address0, key0) == val0
    assert state.get_storage_at(address1, key1) == val1

    state.set_storage_at(address0, key0, 0xA)
    assert state.get_storage_at(address0, key0) == 0xA
    assert state.get_storage_at(address1, key1) == val1

    state.set_storage_at(address1, key1, 0x7)
    assert state.get_storage_at(address0, key0) == 0xA
    assert state.get_storage_at(address1, key1) == 0x7


def test_storage_reads_are_cached():
    reader = DictStateReader(storage_view={(0x100, 0x10): 0x1})
    state = CachedState(reader)
    state.get_storage_at(0x100, 0x10)
    state.get_storage_at(0x100, 0x10)
    assert reader.storage_reads == 1


def test_cast_between_storage_mapping_types():
    assert storage_view_to_nested({}) == {}

    address0, address1 = 0x100, 0x200
    key0, key1 = 0x10, 0x20
    storage_map = {
        (address0, key0): 0x1,
        (address0, key1): 0x5,
        (address1, key0): 0xA,
    }
    expected = {address0: {key0: 0x1, key1: 0x5}, address1: {key0: 0xA}}
    assert storage_view_to_nested(storage_map) == expected


def test_get_uninitialized_nonce():
    state = CachedState(DictStateReader())
    assert state.get_nonce_at(0x1) == 0


def test_get_and_increment_nonce():
    address1, address2 = 0x100, 0x200
    state = CachedState(DictStateReader(address_to_nonce={address1: 0x1, address2: 0x1}))
    assert state.get_nonce_at(address1) == 0x1
    assert state.get_nonce_at(address2) == 0x1

    state.increment_nonce(address1)
    assert state.get_nonce_at(address1) == 0x2
    assert state.get_nonce_at(address2) == 0x1

    state.increment_nonce(address1)
    assert state.get_nonce_at(address1) == 0x3
    assert state.get_nonce_at(address2) == 0x1

    state.increment_nonce(address2)
    assert state.get_nonce_at(address1) == 0x3
    assert state.get_nonce_at(address2) == 0x2


def test_increment_out_of_range_nonce_fails():
    state = CachedState(DictStateReader(address_to_nonce={0x100: 2**64}))
    with pytest.raises(StateError):
        state.increment_nonce(0x100)


def test_get_contract_class():
    contract_class = "test_contract_class"
    state = CachedState(DictStateReader(class_hash_to_class={TEST_CLASS_HASH: contract_class}))
    assert state.get_compiled_contract_class(TEST_CLASS_HASH) == contract_class

    with pytest.raises(UndeclaredClassHashError) as info:
        state.get_compiled_contract_class(0x101)
    assert info.value.class_hash == 0x101


def test_set_contract_class_overrides_reader():
    state = CachedState(DictStateReader())
    state.set_contract_class(0x42, "declared_class")
    assert state.get_compiled_contract_class(0x42) == "declared_class"


def test_get_uninitialized_class_hash_value():
    state = CachedState(DictStateReader())
    assert state.get_class_hash_at(0x1) == 0


def test_set_and_get_contract_hash():
    state = CachedState(DictStateReader())
    state.set_class_hash_at(0x1, 0x10)
    assert state.get_class_hash_at(0x1) == 0x10


def test_cannot_set_class_hash_to_uninitialized_contract():
    state = CachedState(DictStateReader())
    with pytest.raises(OutOfRangeContractAddressError):
        state.set_class_hash_at(0, 0x100)


def test_compiled_class_hash_read_and_write():
    state = CachedState(DictStateReader(class_hash_to_compiled_class_hash={0x10: 0x20}))
    assert state.get_compiled_class_hash(0x10) == 0x20
    state.set_compiled_class_hash(0x10, 0x30)
    assert state.get_compiled_class_hash(0x10) == 0x30


def test_cached_state_state_diff_conversion():
    address0, address1, address2 = 0x100, 0x200, 0x300
    key_x, key_y = 0x10, 0x20
    val0, val1, val2 = 0x1, 0x5, 0x6
    storage_initial_values = {
        (address0, key_x): val0,
        (address1, key_y): val1,
        (address2, key_x): val2,
        (address2, key_y): val2,
    }
    reader = DictStateReader(
        storage_view=storage_initial_values,
        address_to_class_hash={address0: TEST_CLASS_HASH},
        class_hash_to_class={TEST_CLASS_HASH: "test_contract_class"},
    )
    state = CachedState(reader)
    # Populate the initial values in the cache.
    for address, key in storage_initial_values:
        state.get_storage_at(address, key)
    state.get_class_hash_at(address0)

    state.set_compiled_class_hash(TEST_EMPTY_CONTRACT_CLASS_HASH, 1)
    state.set_storage_at(address1, key_y, val1)

    new_value = 0x12345678
    state.set_storage_at(address2, key_y, new_value)
    state.increment_nonce(address2)
    new_class_hash = 0x11111111
    state.set_class_hash_at(address2, new_class_hash)

    expected = CommitmentStateDiff(
        address_to_class_hash={address2: new_class_hash},
        address_to_nonce={address2: 1},
        storage_updates={address2: {key_y: new_value}},
        class_hash_to_compiled_class_hash={TEST_EMPTY_CONTRACT_CLASS_HASH: 1},
    )
    assert state.to_state_diff() == expected


def test_count_actual_state_changes():
    state = CachedState(DictStateReader())
    state.set_class_hash_at(0x100, 0x10)
    state.set_storage_at(0x100, 0x10, 0x1)
    assert state.count_actual_state_changes() == (1, 1, 1)


def test_transactional_commit_moves_writes_to_parent():
    parent = CachedState(DictStateReader(storage_view={(0x100, 0x10): 0x1}))
    child = TransactionalState(parent)
    child.set_storage_at(0x100, 0x10, 0x9)
    child.increment_nonce(0x100)
    child.set_class_hash_at(0x100, 0x10)
    child.set_contract_class(0x10, "child_class")
    child.set_compiled_class_hash(0x10, 0x77)

    assert parent.get_storage_at(0x100, 0x10) == 0x1
    child.commit()

    assert parent.get_storage_at(0x100, 0x10) == 0x9
    assert parent.get_nonce_at(0x100) == 1
    assert parent.get_class_hash_at(0x100) == 0x10
    assert parent.get_compiled_contract_class(0x10) == "child_class"
    assert parent.get_compiled_class_hash(0x10) == 0x77


def test_transactional_reads_through_parent():
    parent = CachedState(DictStateReader())
    parent.set_storage_at(0x100, 0x10, 0x3)
    child = TransactionalState(parent)
    assert child.get_storage_at(0x100, 0x10) == 0x3


def test_transactional_abort_leaves_parent_untouched():
    parent = CachedState(DictStateReader(storage_view={(0x100, 0x10): 0x1}))
    child = TransactionalState(parent)
    child.set_storage_at(0x100, 0x10, 0x9)
    child.abort()
    assert parent.get_storage_at(0x100, 0x10) == 0x1
    assert parent.to_state_diff() == CommitmentStateDiff()