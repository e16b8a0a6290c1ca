"""Shared fixtures: seeded test data and prebuilt trees."""

from __future__ import annotations

import random
from collections.abc import Callable
from typing import Final

import pytest

from mtree.tree import MerkleTree, build_tree

TEXT_BYTES: Final[int] = 256


def random_blocks(count: int, seed: int = 0, size: int = TEXT_BYTES) -> list[bytes]:
    """Return `count` reproducible pseudo-random blocks of `size` bytes."""
    rng = random.Random(seed)
    return [rng.randbytes(size) for _ in range(count)]


@pytest.fixture
def make_blocks() -> Callable[..., list[bytes]]:
    """Provide the seeded block generator."""
    return random_blocks


@pytest.fixture
def abcd_inputs() -> list[bytes]:
    """Four one-letter blocks."""
    return [b"A", b"B", b"C", b"D"]


@pytest.fixture
def abcd_tree(abcd_inputs: list[bytes]) -> MerkleTree:
    """A 4-leaf tree over A, B, C, D."""
    return build_tree(4, abcd_inputs)


@pytest.fixture
def random_tree() -> MerkleTree:
    """An 8-leaf tree over random 256-byte blocks."""
    return build_tree(8, random_blocks(8, seed=1234))
