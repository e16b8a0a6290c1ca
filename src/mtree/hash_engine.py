# mtree - hash_engine.py
# Copyright (C) 2025 The Axiom Contributors
# This program is licensed under the Peer Production License (PPL).
# See the LICENSE file for full details.
"""Extendable-output hash engines used for leaves and node combination."""

from __future__ import annotations

import hashlib
from typing import Final, Protocol

from mtree.constants import SHAKE128, SHAKE256
from mtree.errors import ConfigurationError


class HashEngine(Protocol):
    """Anything that maps bytes to a digest of a requested length."""

    name: str

    def hash(self, data: bytes, length: int) -> bytes:
        """Return exactly `length` bytes of digest for `data`."""
        ...


def _check_length(length: int) -> None:
    if length <= 0:
        raise ValueError(f"output length must be positive, got {length=}")


class Shake256Engine:
    """FIPS 202 SHAKE256."""

    __slots__ = ()

    name = SHAKE256

    def hash(self, data: bytes, length: int) -> bytes:
        """Return `length` bytes of SHAKE256 output for `data`."""
        _check_length(length)
        return hashlib.shake_256(data).digest(length)


class Shake128Engine:
    """FIPS 202 SHAKE128."""

    __slots__ = ()

    name = SHAKE128

    def hash(self, data: bytes, length: int) -> bytes:
        """Return `length` bytes of SHAKE128 output for `data`."""
        _check_length(length)
        return hashlib.shake_128(data).digest(length)


ENGINES: Final[dict[str, HashEngine]] = {
    SHAKE256: Shake256Engine(),
    SHAKE128: Shake128Engine(),
}


def get_engine(name: str) -> HashEngine:
    """Return the registered engine called `name`."""
    try:
        return ENGINES[name]
    except KeyError:
        raise ConfigurationError(
            f"unknown hash engine {name!r}, expected one of {sorted(ENGINES)}",
        ) from None
