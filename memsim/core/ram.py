"""Main memory backing the hierarchy.

Byte-addressable and always hits; the hierarchy only asks it for whole
blocks on a full miss. It counts those fetches so a run can report how
much traffic reached memory.

Parameters:
- MainMemory(size_bytes, block_size)
- fetch_block(address) -> base address of the block fetched
- reset() -> clears the fetch counter
"""


class MainMemory:
    def __init__(self, size_bytes: int = 0x1000, block_size: int = 16):
        self.size = int(size_bytes)
        self.block_size = int(block_size)
        self.block_reads = 0

    def _check_addr(self, address: int) -> int:
        if not isinstance(address, int):
            raise TypeError(f"address must be int, got {type(address).__name__}")
        if address < 0 or address >= self.size:
            raise IndexError(f"address {address} out of range [0, {self.size - 1}]")
        return address

    def fetch_block(self, address: int) -> int:
        """Read the block holding `address`; returns its base address."""
        a = self._check_addr(address)
        self.block_reads += 1
        return (a // self.block_size) * self.block_size

    def reset(self):
        self.block_reads = 0
