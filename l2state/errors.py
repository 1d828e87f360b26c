"""Exceptions raised by state access and fee calculation."""


class StateError(Exception):
    """Base class for errors raised while reading or writing state."""


class OutOfRangeContractAddressError(StateError):
    """Raised when a class hash is assigned to the zero contract address."""

    def __init__(self) -> None:
        super().__init__("Cannot deploy contract at address 0.")


class UnavailableContractAddressError(StateError):
    """Raised when a contract address is already taken."""

    def __init__(self, address: object) -> None:
        self.address = address
        super().__init__(f"Requested {address!r} is unavailable for deployment.")


class UndeclaredClassHashError(StateError):
    """Raised when a class hash has no declared contract class."""

    def __init__(self, class_hash: object) -> None:
        self.class_hash = class_hash
        super().__init__(f"Class with hash {class_hash!r} is not declared.")


class StateReadError(StateError):
    """Raised for unexpected failures while reading from state."""

    def __init__(self, reason: str) -> None:
        self.reason = reason
        super().__init__(f"Failed to read from state: {reason}.")


class CairoResourcesNotContainedInFeeCostsError(Exception):
    """Raised when a used Cairo resource has no fee cost."""

    def __init__(self) -> None:
        super().__init__("Cairo resource names must be contained in fee cost dict.")