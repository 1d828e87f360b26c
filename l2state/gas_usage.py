"""Estimation of the L1 gas a transaction adds to a batch."""

from collections.abc import Sequence
from typing import Optional

from . import eth_gas_constants as gas

# Felts written for each updated class (through a deploy or a class replacement).
CLASS_UPDATE_SIZE = 1
# to_address, from_address, payload_size.
L2_TO_L1_MSG_HEADER_SIZE = 3
# from_address, to_address, nonce, selector, payload_size.
L1_TO_L2_MSG_HEADER_SIZE = 5
N_DEFAULT_TOPICS = 1
CONSUMED_MSG_TO_L2_N_TOPICS = 3
CONSUMED_MSG_TO_L2_ENCODED_DATA_SIZE = (L1_TO_L2_MSG_HEADER_SIZE + 1) - CONSUMED_MSG_TO_L2_N_TOPICS
LOG_MSG_TO_L1_N_TOPICS = 2
LOG_MSG_TO_L1_ENCODED_DATA_SIZE = (L2_TO_L1_MSG_HEADER_SIZE + 1) - LOG_MSG_TO_L1_N_TOPICS


def calculate_tx_gas_usage(
    l2_to_l1_payloads_length: Sequence[int],
    n_modified_contracts: int,
    n_storage_changes: int,
    l1_handler_payload_size: Optional[int],
    n_class_updates: int,
) -> int:
    """Estimate the L1 gas used by StarkNet's state update and the verifier for a transaction."""
    message_segment_length = get_message_segment_length(
        l2_to_l1_payloads_length, l1_handler_payload_size
    )
    onchain_data_segment_length = get_onchain_data_segment_length(
        n_modified_contracts, n_storage_changes, n_class_updates
    )
    n_l2_to_l1_messages = len(l2_to_l1_payloads_length)
    n_l1_to_l2_messages = int(l1_handler_payload_size is not None)

    starknet_gas_usage = (
        message_segment_length * gas.GAS_PER_MEMORY_WORD
        + n_l2_to_l1_messages * gas.GAS_PER_ZERO_TO_NONZERO_STORAGE_SET
        # Refunds for consumed messages are ignored: they cannot pay for the current execution.
        + n_l1_to_l2_messages * gas.GAS_PER_COUNTER_DECREASE
        + get_consumed_message_to_l2_emissions_cost(l1_handler_payload_size)
        + get_log_message_to_l1_emissions_cost(l2_to_l1_payloads_length)
    )
    sharp_gas_usage = (
        message_segment_length * gas.SHARP_GAS_PER_MEMORY_WORD
        + onchain_data_segment_length * gas.SHARP_GAS_PER_MEMORY_WORD
    )
    return starknet_gas_usage + sharp_gas_usage


def get_onchain_data_segment_length(
    n_modified_contracts: int, n_storage_changes: int, n_class_updates: int
) -> int:
    """Number of felts a transaction adds to the data availability segment."""
    return (
        n_modified_contracts * 2
        + n_class_updates * CLASS_UPDATE_SIZE
        + n_storage_changes * 2
    )


def get_message_segment_length(
    l2_to_l1_payloads_length: Sequence[int], l1_handler_payload_size: Optional[int]
) -> int:
    """Number of felts a transaction adds to the output messages segment."""
    length = sum(L2_TO_L1_MSG_HEADER_SIZE + payload for payload in l2_to_l1_payloads_length)
    if l1_handler_payload_size is not None:
        length += L1_TO_L2_MSG_HEADER_SIZE + l1_handler_payload_size
    return length


def get_consumed_message_to_l2_emissions_cost(l1_handler_payload_size: Optional[int]) -> int:
    """Cost of the ConsumedMessageToL2 event emitted by an L1 handler."""
    if l1_handler_payload_size is None:
        return 0
    return _event_emission_cost(
        CONSUMED_MSG_TO_L2_N_TOPICS,
        CONSUMED_MSG_TO_L2_ENCODED_DATA_SIZE + l1_handler_payload_size,
    )


def get_log_message_to_l1_emissions_cost(l2_to_l1_payloads_length: Sequence[int]) -> int:
    """Cost of the LogMessageToL1 events for the given message payload lengths."""
    return sum(
        _event_emission_cost(LOG_MSG_TO_L1_N_TOPICS, LOG_MSG_TO_L1_ENCODED_DATA_SIZE + length)
        for length in l2_to_l1_payloads_length
    )


def _event_emission_cost(n_topics: int, data_length: int) -> int:
    return (
        gas.GAS_PER_LOG
        + (n_topics + N_DEFAULT_TOPICS) * gas.GAS_PER_LOG_TOPIC
        + data_length * gas.GAS_PER_LOG_DATA_WORD
    )