"""Resources the OS spends on syscalls and transactions, beyond their own execution."""

from __future__ import annotations

from collections import Counter
from collections.abc import Mapping
from dataclasses import dataclass, field
from functools import cache
from typing import Any


@dataclass
class ExecutionResources:
    """Cairo VM execution resources: steps, memory holes and builtin usage."""

    n_steps: int = 0
    n_memory_holes: int = 0
    builtin_instance_counter: dict[str, int] = field(default_factory=dict)

    def __add__(self, other: ExecutionResources) -> ExecutionResources:
        if not isinstance(other, ExecutionResources):
            return NotImplemented
        builtins = Counter(self.builtin_instance_counter)
        for name, count in other.builtin_instance_counter.items():
            builtins[name] += count
        return ExecutionResources(
            n_steps=self.n_steps + other.n_steps,
            n_memory_holes=self.n_memory_holes + other.n_memory_holes,
            builtin_instance_counter=dict(builtins),
        )

    def __mul__(self, factor: int) -> ExecutionResources:
        if not isinstance(factor, int):
            return NotImplemented
        return ExecutionResources(
            n_steps=self.n_steps * factor,
            n_memory_holes=self.n_memory_holes * factor,
            builtin_instance_counter={
                name: count * factor for name, count in self.builtin_instance_counter.items()
            },
        )

    __rmul__ = __mul__

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> ExecutionResources:
        return cls(
            n_steps=data["n_steps"],
            n_memory_holes=data["n_memory_holes"],
            builtin_instance_counter=dict(data["builtin_instance_counter"]),
        )


@dataclass
class OsResources:
    """Per-syscall and per-transaction-type OS resources."""

    execute_syscalls: dict[str, ExecutionResources]
    execute_txs_inner: dict[str, ExecutionResources]

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> OsResources:
        return cls(
            execute_syscalls={
                name: ExecutionResources.from_dict(value)
                for name, value in data["execute_syscalls"].items()
            },
            execute_txs_inner={
                name: ExecutionResources.from_dict(value)
                for name, value in data["execute_txs_inner"].items()
            },
        )

    def syscall_resources(self, syscall_name: str) -> ExecutionResources:
        try:
            return self.execute_syscalls[syscall_name]
        except KeyError:
            raise KeyError(f"OS resources of syscall {syscall_name!r} are unknown.") from None

    def tx_resources(self, tx_type: str) -> ExecutionResources:
        try:
            return self.execute_txs_inner[tx_type]
        except KeyError:
            raise KeyError(f"OS resources of transaction type {tx_type!r} are unknown.") from None


def _res(n_steps: int, **builtins: int) -> dict[str, Any]:
    return {"builtin_instance_counter": builtins, "n_memory_holes": 0, "n_steps": n_steps}


_OS_RESOURCES_DATA: dict[str, dict[str, dict[str, Any]]] = {
    "execute_syscalls": {
        "CallContract": _res(690, range_check=19),
        "DelegateCall": _res(712, range_check=19),
        "DelegateL1Handler": _res(691, range_check=15),
        "Deploy": _res(936, pedersen=7, range_check=18),
        "EmitEvent": _res(19),
        "GetBlockNumber": _res(40),
        "GetBlockTimestamp": _res(38),
        "GetCallerAddress": _res(32),
        "GetContractAddress": _res(36),
        "GetExecutionInfo": _res(29),
        "GetSequencerAddress": _res(34),
        "GetTxInfo": _res(29),
        "GetTxSignature": _res(44),
        "LibraryCall": _res(679, range_check=19),
        "LibraryCallL1Handler": _res(658, range_check=15),
        "ReplaceClass": _res(73),
        "SendMessageToL1": _res(84),
        "StorageRead": _res(44),
        "StorageWrite": _res(46),
    },
    "execute_txs_inner": {
        "Declare": _res(2703, pedersen=15, range_check=63),
        "DeployAccount": _res(3612, pedersen=23, range_check=83),
        "InvokeFunction": _res(3363, pedersen=16, range_check=80),
        "L1Handler": _res(1068, pedersen=11, range_check=17),
    },
}


@cache
def load_os_resources() -> OsResources:
    """Return the built-in OS resources table."""
    return OsResources.from_dict(_OS_RESOURCES_DATA)


def get_additional_os_resources(
    syscall_counter: Mapping[str, int], tx_type: str
) -> ExecutionResources:
    """Resources the OS needs to run the given syscalls and the transaction itself.

    Includes the fee transfer performed at the end of every transaction.
    """
    os_resources = load_os_resources()
    total = ExecutionResources()
    for syscall_name, count in syscall_counter.items():
        total = total + os_resources.syscall_resources(syscall_name) * count
    return total + os_resources.tx_resources(tx_type)