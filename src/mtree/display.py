# mtree - display.py
# Copyright (C) 2025 The Axiom Contributors
# This program is licensed under the Peer Production License (PPL).
# See the LICENSE file for full details.
"""Human-readable rendering of hashes, nodes, trees and paths."""

from __future__ import annotations

import logging
import sys
from typing import TYPE_CHECKING

from mtree.constants import LOG_FORMAT

if TYPE_CHECKING:
    from collections.abc import Sequence

    from mtree.tree import MerkleTree, Node

logger = logging.getLogger("mtree.display")
if not logger.handlers:
    stdout_handler = logging.StreamHandler(stream=sys.stdout)
    stdout_handler.setFormatter(logging.Formatter(LOG_FORMAT))
    logger.addHandler(stdout_handler)
    logger.setLevel(logging.INFO)
    logger.propagate = False


def to_hex(value: bytes) -> str:
    """Return `value` as upper-case hex."""
    return value.hex().upper()


def _link(value: int | None) -> str:
    return "-" if value is None else str(value)


def format_node(node: Node) -> str:
    """Return one line: hash, index, previous, next and parent node."""
    return "\t".join(
        (
            to_hex(node.hash),
            str(node.index),
            _link(node.prev_sibling),
            _link(node.next_sibling),
            _link(node.parent),
        ),
    )


def format_tree(tree: MerkleTree) -> str:
    """Return a table of every node, leaves first, root last."""
    header = "\t".join(("hash", "index", "prev", "next", "parent"))
    lines = [
        f"Merkle tree with {tree.leaf_count} leaves and {tree.node_count} nodes",
        header,
    ]
    lines.extend(format_node(node) for node in tree.nodes)
    lines.append(f"root: {to_hex(tree.root)}")
    return "\n".join(lines)


def format_path(path: Sequence[bytes]) -> str:
    """Return the path one hash per line, leaf level first."""
    return "\n".join(f"{level}: {to_hex(h)}" for level, h in enumerate(path))


def log_tree(tree: MerkleTree, level: int = logging.INFO) -> None:
    """Write the table of `tree` to the module logger."""
    for line in format_tree(tree).splitlines():
        logger.log(level, line)
