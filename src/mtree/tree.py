# mtree - tree.py
# Copyright (C) 2025 The Axiom Contributors
# This program is licensed under the Peer Production License (PPL).
# See the LICENSE file for full details.
"""A fixed-shape Merkle tree engine for generating inclusion proofs.

The tree lives in a flat array of `2 * leaf_count - 1` nodes. Indices
`0..leaf_count-1` hold the leaves, every following layer is appended right
after the one below it, and the last index holds the root. Children are never
stored: each node only knows its parent and its neighbours inside its own
layer.
"""

from __future__ import annotations

import bisect
import logging
import sys
from dataclasses import dataclass
from typing import TYPE_CHECKING

from mtree.combiner import Combiner
from mtree.config import TreeConfig
from mtree.constants import LOG_FORMAT
from mtree.errors import BoundsError, ConfigurationError

if TYPE_CHECKING:
    from collections.abc import Sequence

logger = logging.getLogger("mtree.tree")
if not logger.handlers:
    stdout_handler = logging.StreamHandler(stream=sys.stdout)
    stdout_handler.setFormatter(logging.Formatter(LOG_FORMAT))
    logger.addHandler(stdout_handler)
    logger.setLevel(logging.INFO)
    logger.propagate = False

_BYTES_TYPES = (bytes, bytearray, memoryview)


@dataclass(frozen=True)
class Node:
    """One slot of the implicit tree array."""

    index: int
    hash: bytes
    prev_sibling: int | None = None
    next_sibling: int | None = None
    parent: int | None = None

    @property
    def is_root(self) -> bool:
        """Return True for the only node without a parent."""
        return self.parent is None


def is_power_of_two(value: int) -> bool:
    """Return True if `value` is 1, 2, 4, 8, ..."""
    return value >= 1 and value & (value - 1) == 0


def layer_bounds(leaf_count: int) -> tuple[tuple[int, int], ...]:
    """Return the `(start, stop)` index range of every layer, leaves first."""
    bounds: list[tuple[int, int]] = []
    start, width = 0, leaf_count
    while width >= 1:
        bounds.append((start, start + width))
        start += width
        width //= 2
    return tuple(bounds)


def _check_leaf_count(leaf_count: int) -> int:
    if isinstance(leaf_count, bool) or not isinstance(leaf_count, int):
        message = f"leaf count must be an integer, got {leaf_count!r}"
        logger.error(message)
        raise ConfigurationError(message)
    if not is_power_of_two(leaf_count):
        message = f"leaf count must be a power of two >= 1, got {leaf_count}"
        logger.error(message)
        raise ConfigurationError(message)
    return leaf_count


class MerkleTree:
    """A cryptographic tool for creating verifiable proofs of inclusion."""

    def __init__(
        self,
        data: Sequence[bytes],
        config: TreeConfig | None = None,
    ) -> None:
        """Initialize the MerkleTree from a list of raw input blocks.

        Every block is hashed into a leaf. The number of blocks must be a
        power of two.
        """
        self.config: TreeConfig = config or TreeConfig()
        self.combiner: Combiner = self.config.combiner()
        self.leaf_count: int = _check_leaf_count(len(data))
        self.node_count: int = 2 * self.leaf_count - 1
        self.layer_bounds = layer_bounds(self.leaf_count)
        self._layer_starts = [start for start, _ in self.layer_bounds]

        self.nodes: tuple[Node, ...] = self._build(data)
        self.root: bytes = self.nodes[-1].hash
        logger.info(
            f"Built Merkle tree with {self.leaf_count} leaves and "
            f"{self.node_count} nodes. Root: {self.root.hex()}",
        )

    def __len__(self) -> int:
        return self.node_count

    def __repr__(self) -> str:
        return (
            f"MerkleTree(leaf_count={self.leaf_count}, "
            f"root={self.root.hex()!r}, config={self.config!r})"
        )

    @property
    def depth(self) -> int:
        """Number of layers below the root, i.e. the length of every path."""
        return len(self.layer_bounds) - 1

    @property
    def leaves(self) -> tuple[Node, ...]:
        """The leaf layer, in index order."""
        return self.nodes[: self.leaf_count]

    def _build(self, data: Sequence[bytes]) -> tuple[Node, ...]:
        """Hash the leaves, then fill the inner layers bottom-up."""
        hashes: list[bytes] = []
        for i, block in enumerate(data):
            if not isinstance(block, _BYTES_TYPES):
                message = (
                    f"leaf input {i} must be bytes, got {type(block).__name__}"
                )
                logger.error(message)
                raise ConfigurationError(message)
            hashes.append(self.combiner.leaf_hash(bytes(block)))

        parents: list[int | None] = [None] * self.node_count
        prevs: list[int | None] = [None] * self.node_count
        nexts: list[int | None] = [None] * self.node_count
        self._link_layer(prevs, nexts, *self.layer_bounds[0])

        # `child` walks the layer being consumed, `free` the layer being built.
        # Layers are contiguous, so `child` runs into the new layer on its own.
        child = 0
        free = self.leaf_count
        for start, stop in self.layer_bounds[1:]:
            self._link_layer(prevs, nexts, start, stop)
            while free < stop:
                parents[child] = free
                parents[child + 1] = free
                hashes.append(
                    self.combiner.combine(hashes[child], hashes[child + 1]),
                )
                child += 2
                free += 1
            logger.debug(f"Filled layer [{start}, {stop}).")

        assert child == self.node_count - 1, "every non-root node needs a parent"

        return tuple(
            Node(
                index=i,
                hash=hashes[i],
                prev_sibling=prevs[i],
                next_sibling=nexts[i],
                parent=parents[i],
            )
            for i in range(self.node_count)
        )

    @staticmethod
    def _link_layer(
        prevs: list[int | None],
        nexts: list[int | None],
        start: int,
        stop: int,
    ) -> None:
        """Chain the nodes of one layer; the ends stay unlinked."""
        for i in range(start, stop):
            prevs[i] = i - 1 if i > start else None
            nexts[i] = i + 1 if i < stop - 1 else None

    def position_in_layer(self, index: int) -> int:
        """Return the offset of node `index` from the first node of its layer."""
        if not 0 <= index < self.node_count:
            raise BoundsError(
                f"node index {index} out of range [0, {self.node_count})",
            )
        layer = bisect.bisect_right(self._layer_starts, index) - 1
        return index - self._layer_starts[layer]

    def find_path(self, leaf_index: int) -> list[bytes]:
        """Generate the proof of inclusion for the leaf at `leaf_index`.

        The proof is the list of sibling hashes, leaf level first.
        """
        if isinstance(leaf_index, bool) or not isinstance(leaf_index, int):
            raise BoundsError(f"leaf index must be an integer, got {leaf_index!r}")
        if not 0 <= leaf_index < self.leaf_count:
            raise BoundsError(
                f"leaf index {leaf_index} out of range [0, {self.leaf_count})",
            )

        path: list[bytes] = []
        node = self.nodes[leaf_index]
        while node.parent is not None:
            if self.position_in_layer(node.index) % 2 == 1:
                sibling = node.prev_sibling
            else:
                sibling = node.next_sibling
            assert sibling is not None, f"node {node.index} has no sibling"
            path.append(self.nodes[sibling].hash)
            node = self.nodes[node.parent]
        return path

    def locate_leaf(self, raw_input: bytes) -> int | None:
        """Return the index of the first leaf built from `raw_input`, if any."""
        if not isinstance(raw_input, _BYTES_TYPES):
            raise ConfigurationError(
                f"leaf input must be bytes, got {type(raw_input).__name__}",
            )
        target = self.combiner.leaf_hash(bytes(raw_input))
        for node in self.leaves:
            if node.hash == target:
                return node.index
        logger.debug("No leaf matches the given input.")
        return None

    def verify_leaf(self, leaf_index: int) -> bool:
        """Check that the stored path of a leaf leads back to the stored root."""
        return verify_path(
            self.find_path(leaf_index),
            self.nodes[leaf_index].hash,
            self.root,
            self.combiner,
        )

    @staticmethod
    def verify_proof(
        proof: Sequence[bytes],
        leaf_hash: bytes,
        root: bytes,
        combiner: Combiner | None = None,
    ) -> bool:
        """Verify a proof without needing the entire tree."""
        return verify_path(proof, leaf_hash, root, combiner)


def build_tree(
    leaf_count: int,
    raw_inputs: Sequence[bytes],
    config: TreeConfig | None = None,
) -> MerkleTree:
    """Build a tree of `leaf_count` leaves from `raw_inputs`.

    Raises:
        ConfigurationError: If `leaf_count` is not a power of two, or if
            `raw_inputs` does not hold exactly `leaf_count` blocks.

    """
    _check_leaf_count(leaf_count)
    if len(raw_inputs) != leaf_count:
        message = f"expected {leaf_count} leaf inputs, got {len(raw_inputs)}"
        logger.error(message)
        raise ConfigurationError(message)
    return MerkleTree(raw_inputs, config)


def find_path(tree: MerkleTree, leaf_index: int) -> list[bytes]:
    """Return the sibling path of a leaf, leaf level first."""
    return tree.find_path(leaf_index)


def locate_leaf(tree: MerkleTree, raw_input: bytes) -> int | None:
    """Return the index of the leaf built from `raw_input`, or None."""
    return tree.locate_leaf(raw_input)


def reconstruct_root(
    path: Sequence[bytes],
    leaf_hash: bytes,
    combiner: Combiner | None = None,
) -> bytes:
    """Recompute a root from a leaf hash and its sibling path.

    Each step combines the path element first and the running hash second.
    No tree instance is involved.
    """
    combiner = combiner or Combiner()
    current = leaf_hash
    for sibling in path:
        current = combiner.combine(sibling, current)
    return current


def verify_path(
    path: Sequence[bytes],
    leaf_hash: bytes,
    root: bytes,
    combiner: Combiner | None = None,
) -> bool:
    """Return True if `path` and `leaf_hash` lead to `root`.

    Hashes of the wrong width never verify.
    """
    combiner = combiner or Combiner()
    width = combiner.hash_bytes
    if len(leaf_hash) != width or any(len(h) != width for h in path):
        logger.debug(f"Proof rejected: expected {width}-byte hashes.")
        return False
    return reconstruct_root(path, leaf_hash, combiner) == root
