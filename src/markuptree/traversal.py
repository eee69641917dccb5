"""Depth-first traversal over a node tree.

Every call to traverse() returns a fresh generator holding its own stack, so
separate traversals never share state and an abandoned generator needs no
cleanup.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Iterator

    from .node import Node


def traverse(root: Node) -> Iterator[tuple[Node, int]]:
    """Yield (node, depth) pairs in pre-order, starting with root at depth 1."""
    # Stack of (children, next index, depth of those children)
    yield root, 1
    stack: list[tuple[list[Node], int, int]] = [(root.children, 0, 2)]
    while stack:
        children, index, depth = stack[-1]
        if index >= len(children):
            stack.pop()
            continue
        stack[-1] = (children, index + 1, depth)
        child = children[index]
        yield child, depth
        if child.children:
            stack.append((child.children, 0, depth + 1))


def descendants(node: Node) -> Iterator[Node]:
    """Yield the strict descendants of node in document order."""
    walker = traverse(node)
    next(walker)
    for child, _depth in walker:
        yield child
