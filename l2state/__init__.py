"""Cached layer-2 contract state, L1 gas usage estimation and fee calculation."""

__version__ = "0.1.0"
__all__ = [
    "cached_state",
    "errors",
    "eth_gas_constants",
    "fee_utils",
    "gas_usage",
    "os_usage",
    "state_api",
]