# mtree - combiner.py
# Copyright (C) 2025 The Axiom Contributors
# This program is licensed under the Peer Production License (PPL).
# See the LICENSE file for full details.
"""The two-input rule that turns a pair of child hashes into a parent hash.

Both hashes are expanded into single-bit vectors, XOR-ed bit by bit, and the
resulting vector is hashed again. How the bit vector is laid out as bytes
before hashing is selected by `BitEncoding`; a tree and every proof checked
against it must use the same encoding.
"""

from __future__ import annotations

import enum

import numpy as np
import numpy.typing as npt

from mtree.constants import HASH_BYTES
from mtree.hash_engine import HashEngine, Shake256Engine


class BitEncoding(str, enum.Enum):
    """How the XOR bit vector is serialized before it is hashed."""

    PACKED = "packed"  # eight bits per byte, most significant first
    BYTE_PER_BIT = "byte_per_bit"  # one 0x00/0x01 byte per bit


def expand_bits(value: bytes) -> npt.NDArray[np.uint8]:
    """Return the bits of `value` as an array of 0/1 values.

    Bytes are walked from the tail toward the head, each byte's bits from
    least to most significant, and the array is filled from its end backwards.
    The result is therefore most-significant-bit first in storage order, which
    is exactly what `numpy.unpackbits` produces.
    """
    return np.unpackbits(np.frombuffer(value, dtype=np.uint8))


def serialize_bits(bits: npt.NDArray[np.uint8], encoding: BitEncoding) -> bytes:
    """Lay out a bit vector as hash input bytes."""
    if encoding is BitEncoding.PACKED:
        return np.packbits(bits).tobytes()
    if encoding is BitEncoding.BYTE_PER_BIT:
        return bits.astype(np.uint8).tobytes()
    raise ValueError(f"unsupported bit encoding: {encoding!r}")


class Combiner:
    """Produces one parent hash from two child hashes of equal width."""

    __slots__ = ("engine", "hash_bytes", "encoding")

    def __init__(
        self,
        engine: HashEngine | None = None,
        hash_bytes: int = HASH_BYTES,
        encoding: BitEncoding = BitEncoding.PACKED,
    ) -> None:
        """Initialize the combiner.

        Args:
            engine: Hash engine used on the XOR vector. Defaults to SHAKE256.
            hash_bytes: Width of both inputs and of the output.
            encoding: Serialization of the XOR vector.

        """
        if hash_bytes <= 0:
            raise ValueError(f"hash width must be positive, got {hash_bytes=}")
        self.engine: HashEngine = engine or Shake256Engine()
        self.hash_bytes = hash_bytes
        self.encoding = BitEncoding(encoding)

    def __repr__(self) -> str:
        return (
            f"Combiner(engine={self.engine.name!r}, "
            f"hash_bytes={self.hash_bytes}, encoding={self.encoding.value!r})"
        )

    def leaf_hash(self, data: bytes) -> bytes:
        """Hash one raw input block into a leaf value."""
        return self.engine.hash(data, self.hash_bytes)

    def xor_bits(self, left: bytes, right: bytes) -> npt.NDArray[np.uint8]:
        """Return the elementwise XOR of the bit expansions of both hashes."""
        if len(left) != len(right):
            raise ValueError(
                f"cannot combine hashes of unequal width ({len(left)} != {len(right)})",
            )
        if len(left) != self.hash_bytes:
            raise ValueError(
                f"expected {self.hash_bytes}-byte hashes, got {len(left)} bytes",
            )
        return np.bitwise_xor(expand_bits(left), expand_bits(right))

    def combine(self, left: bytes, right: bytes) -> bytes:
        """Return the parent hash of `left` and `right`."""
        payload = serialize_bits(self.xor_bits(left, right), self.encoding)
        return self.engine.hash(payload, self.hash_bytes)
