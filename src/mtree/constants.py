"""Defining constants related to the Merkle tree."""

# mtree - constants.py
# Copyright (C) 2025 The Axiom Contributors
# This program is licensed under the Peer Production License (PPL).
# See the LICENSE file for full details.

from typing import Final

# --- Hash Width Constants ---
HASH_BYTES: Final[int] = 16  # 128-bit output, as in FIPS 202 SHAKE256 usage
HASH_BITS: Final[int] = HASH_BYTES * 8
MIN_HASH_BITS: Final[int] = 128
assert HASH_BITS >= MIN_HASH_BITS, "Hash width must be at least 128 bits for security."

# --- Engine Constants ---
SHAKE128: Final[str] = "shake128"
SHAKE256: Final[str] = "shake256"
DEFAULT_ENGINE: Final[str] = SHAKE256

# --- Environment Overrides ---
ENV_PREFIX: Final[str] = "MTREE_"
ENV_HASH_BYTES: Final[str] = ENV_PREFIX + "HASH_BYTES"
ENV_ENGINE: Final[str] = ENV_PREFIX + "ENGINE"
ENV_BIT_ENCODING: Final[str] = ENV_PREFIX + "BIT_ENCODING"

# --- Logging ---
LOG_FORMAT: Final[str] = (
    "[%(name)s] %(asctime)s | %(levelname)s | %(filename)s:%(lineno)s >>> %(message)s"
)
