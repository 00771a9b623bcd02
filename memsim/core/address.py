"""Address decomposition.

    block_addr  = address // block_size
    set_index   = block_addr % num_sets
    tag         = address // (num_sets * block_size)
    word_offset = (address // word_size) % words_per_line
    byte_offset = address % word_size

`compose` is the exact inverse of `decode` for a given geometry.
"""

from typing import NamedTuple

from memsim.core.config import LevelGeometry


class DecodedAddress(NamedTuple):
    tag: int
    set_index: int
    word_offset: int
    byte_offset: int


def block_number(address: int, geometry: LevelGeometry) -> int:
    return address // geometry.block_size


def decode(address: int, geometry: LevelGeometry) -> DecodedAddress:
    """Split `address` into (tag, set_index, word_offset, byte_offset)."""
    bs = geometry.block_size
    set_index = (address // bs) % geometry.num_sets
    tag = address // (geometry.num_sets * bs)
    word_offset = (address // geometry.word_size) % geometry.words_per_line
    byte_offset = address % geometry.word_size
    return DecodedAddress(tag, set_index, word_offset, byte_offset)


def block_base(tag: int, set_index: int, geometry: LevelGeometry) -> int:
    """First byte address of the block identified by (tag, set_index)."""
    return (tag * geometry.num_sets + set_index) * geometry.block_size


def compose(decoded: DecodedAddress, geometry: LevelGeometry) -> int:
    """Rebuild the address that `decode` split apart."""
    return (
        block_base(decoded.tag, decoded.set_index, geometry)
        + decoded.word_offset * geometry.word_size
        + decoded.byte_offset
    )


__all__ = ["DecodedAddress", "block_number", "decode", "block_base", "compose"]
