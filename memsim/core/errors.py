"""Exceptions raised by the cache hierarchy engine.

Resolution of a single address never fails; everything here is raised
either when a hierarchy is built or when a run is set up.
"""


class SimulationError(Exception):
    """Base class for all simulator errors."""


class ConfigurationError(SimulationError, ValueError):
    """Cache geometry or cost table cannot describe a valid cache."""


class AllocationError(SimulationError):
    """The requested address stream is empty or has a non-positive size."""


class AddressRangeError(SimulationError, IndexError):
    """An address falls outside the configured address space."""

    def __init__(self, address: int, size: int):
        super().__init__(f"address {address} out of range [0, {size - 1}]")
        self.address = address
        self.size = size


__all__ = ["SimulationError", "ConfigurationError", "AllocationError", "AddressRangeError"]
