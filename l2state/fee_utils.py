"""Fee calculation from execution resources."""

import math
from collections.abc import Mapping

from .errors import CairoResourcesNotContainedInFeeCostsError

GAS_USAGE = "l1_gas_usage"


def extract_l1_gas_and_vm_usage(resources: Mapping[str, int]) -> tuple[int, dict[str, int]]:
    """Split the L1 gas usage entry from the Cairo VM resources."""
    vm_resource_usage = dict(resources)
    try:
        l1_gas_usage = vm_resource_usage.pop(GAS_USAGE)
    except KeyError:
        raise KeyError(f"Resources mapping does not have the key {GAS_USAGE!r}.") from None
    return l1_gas_usage, vm_resource_usage


def calculate_l1_gas_by_vm_usage(
    vm_resource_fee_costs: Mapping[str, float], vm_resource_usage: Mapping[str, int]
) -> float:
    """Return the heaviest Cairo resource weight in terms of L1 gas.

    The size of a proof is determined by the (normalized) largest segment.
    """
    if not set(vm_resource_usage) <= set(vm_resource_fee_costs):
        raise CairoResourcesNotContainedInFeeCostsError()
    return max(
        (cost * vm_resource_usage.get(name, 0) for name, cost in vm_resource_fee_costs.items()),
        default=math.nan,
    )


def calculate_tx_fee(
    resources: Mapping[str, int], vm_resource_fee_costs: Mapping[str, float], gas_price: int
) -> int:
    """Fee to charge: (L1 gas usage + L1 gas of the VM resources), rounded up, times gas price."""
    l1_gas_usage, vm_resources = extract_l1_gas_and_vm_usage(resources)
    l1_gas_by_vm_usage = calculate_l1_gas_by_vm_usage(vm_resource_fee_costs, vm_resources)
    total = l1_gas_usage + l1_gas_by_vm_usage
    gas_units = 0 if math.isnan(total) or total <= 0 else math.ceil(total)
    return gas_units * gas_price