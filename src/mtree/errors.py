# mtree - errors.py
# Copyright (C) 2025 The Axiom Contributors
# This program is licensed under the Peer Production License (PPL).
# See the LICENSE file for full details.
"""Errors raised while building and querying Merkle trees."""

from __future__ import annotations


class MerkleError(Exception):
    """Merkle Error."""

    __slots__ = ()


class ConfigurationError(MerkleError, ValueError):
    """Raised when a tree cannot be built from the given shape or settings."""

    __slots__ = ()


class BoundsError(MerkleError, IndexError):
    """Raised when a leaf index falls outside the leaf layer."""

    __slots__ = ()
