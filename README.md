# l2state

Tools for following the state of layer-2 contracts while transactions run, and for
working out what those transactions cost on L1. Addresses, keys, values, nonces and
class hashes are plain Python integers.

## Modules

- **`l2state.state_api`** defines the abstract interfaces. `StateReader` has
  `get_storage_at`, `get_nonce_at`, `get_class_hash_at`, `get_compiled_contract_class` and
  `get_compiled_class_hash`. `State` adds `set_storage_at`, `increment_nonce`,
  `set_class_hash_at`, `set_contract_class`, `set_compiled_class_hash` and
  `to_state_diff`.
- **`l2state.cached_state`**
  - `CachedState(reader)` is a `State` on top of any `StateReader`. On the first read of a
    storage cell, nonce, class hash or compiled class hash it asks the reader, then keeps
    that initial value. Writes are kept apart from those reads.
  - `to_state_diff()` returns a `CommitmentStateDiff`. Its class hash, nonce and storage
    entries hold only values that differ from the initial reads; storage is grouped by
    contract address. Its `class_hash_to_compiled_class_hash` holds every compiled class
    hash set through the state.
  - `count_actual_state_changes()` returns `(storage updates, modified contracts, class
    hash updates)`.
  - `increment_nonce` raises `StateError` when the current nonce does not fit in 64 bits.
    `set_class_hash_at` raises `OutOfRangeContractAddressError` for address 0.
  - `TransactionalState(parent)` is a `CachedState` over a parent `CachedState`.
    `commit()` merges its writes and contract classes into the parent; `abort()` throws
    them away.
  - `storage_view_to_nested` turns a flat `{(address, key): value}` mapping into
    `{address: {key: value}}`.
- **`l2state.gas_usage`**: `calculate_tx_gas_usage` estimates the L1 gas a transaction adds
  to a batch from its L2-to-L1 message payload lengths, the number of modified contracts
  and storage changes, an optional L1 handler payload size and the number of class
  updates. `get_message_segment_length`, `get_onchain_data_segment_length`,
  `get_consumed_message_to_l2_emissions_cost` and `get_log_message_to_l1_emissions_cost`
  give the parts.
- **`l2state.eth_gas_constants`** holds the Ethereum gas costs used above.
- **`l2state.fee_utils`**
  - `extract_l1_gas_and_vm_usage` splits the `"l1_gas_usage"` entry from the other
    resources. It raises `KeyError` when that entry is missing.
  - `calculate_l1_gas_by_vm_usage` returns the heaviest resource weighted by its fee cost.
    It raises `CairoResourcesNotContainedInFeeCostsError` when a used resource has no fee
    cost.
  - `calculate_tx_fee(resources, vm_resource_fee_costs, gas_price)` rounds the total L1 gas
    up and multiplies it by the gas price.
- **`l2state.os_usage`**
  - `ExecutionResources` holds steps, memory holes and builtin counts. It supports `+` and
    multiplication by an integer.
  - `load_os_resources()` returns the built-in `OsResources` table.
  - `get_additional_os_resources(syscall_counter, tx_type)` adds up what the OS spends on
    the named syscalls and on the transaction type (`"Declare"`, `"DeployAccount"`,
    `"InvokeFunction"`, `"L1Handler"`). Unknown names raise `KeyError`.
- **`l2state.errors`**: `StateError` and its subclasses `OutOfRangeContractAddressError`,
  `UnavailableContractAddressError`, `UndeclaredClassHashError` and `StateReadError`.
  `CairoResourcesNotContainedInFeeCostsError` is a separate `Exception`.

## Example

```python
from l2state.cached_state import CachedState, TransactionalState
from l2state.errors import UndeclaredClassHashError
from l2state.fee_utils import calculate_tx_fee
from l2state.gas_usage import calculate_tx_gas_usage
from l2state.state_api import StateReader


class EmptyReader(StateReader):
    def get_storage_at(self, contract_address, key):
        return 0

    def get_nonce_at(self, contract_address):
        return 0

    def get_class_hash_at(self, contract_address):
        return 0

    def get_compiled_contract_class(self, class_hash):
        raise UndeclaredClassHashError(class_hash)

    def get_compiled_class_hash(self, class_hash):
        return 0


state = CachedState(EmptyReader())
child = TransactionalState(state)
child.set_storage_at(0x100, 0x10, 0xA)
child.commit()

print(state.to_state_diff().storage_updates)   # {256: {16: 10}}

gas = calculate_tx_gas_usage([0, 1, 2, 3], 7, 11, 4, 0)
fee = calculate_tx_fee({"l1_gas_usage": gas, "n_steps": 1800}, {"n_steps": 1.0}, 100)
```

## What it does not do

The package keeps state in memory only; persistent storage comes from whatever
`StateReader` you supply. It does not execute contracts or syscalls: the syscall and
transaction names in `l2state.os_usage` are only keys into the resource table. There is
no command-line program.

## Running the tests

```
pip install -e .[test]
pytest
```