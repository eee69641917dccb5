from __future__ import annotations

from typing import TYPE_CHECKING, Any

from .constants import TAG_NAME_PATTERN, TEXT_NODE

if TYPE_CHECKING:
    from collections.abc import Iterator, Sequence

    from .selector import Matcher


class AmbiguousTextError(ValueError):
    """Raised when set_text() cannot tell which child carries the text."""


class Node:
    """Represents a markup node.
    - kind: tag name, e.g. 'div', 'p'. '#text' marks a text node.
    - properties: dict of lower-cased attribute names to values (elements only)
    - children: list of child Nodes in document order
    - text: payload of a text node (None for elements)
    - parent: reference to the enclosing Node (or None for a root)

    Create nodes through create_node() and create_text_node().
    """

    __slots__ = ("children", "kind", "parent", "properties", "text")

    kind: str
    properties: dict[str, str]
    children: list[Node]
    text: str | None
    parent: Node | None

    def __init__(self, kind: str, text: str | None = None) -> None:
        self.kind = kind
        self.properties = {}
        self.children = []
        self.text = text
        self.parent = None

    @property
    def is_text(self) -> bool:
        return self.kind == TEXT_NODE

    def __repr__(self) -> str:
        if self.kind == TEXT_NODE:
            return f"Node(#text='{(self.text or '')[:30]}')"
        return f"Node(<{self.kind}>, children={len(self.children)})"

    # ----------------
    # Tree structure
    # ----------------

    def append_child(self, child: Node) -> tuple[Node, Node | None]:
        """Append child as the last child of this node.

        A child that already has a parent is removed from it first, so the
        node is moved rather than shared.

        Returns:
            The appended child and its previous parent (or None)

        """
        if self.kind == TEXT_NODE:
            msg = "text nodes cannot have children"
            raise TypeError(msg)
        if self._would_create_circular_reference(child):
            msg = f"Adding {child.kind} as child of {self.kind} would create circular reference"
            raise ValueError(msg)
        old_parent = child.parent
        if old_parent is not None:
            old_parent.remove_child(child)
        child.parent = self
        self.children.append(child)
        return child, old_parent

    def _would_create_circular_reference(self, child: Node) -> bool:
        """Check if child is this node or one of its ancestors."""
        current: Node | None = self
        while current is not None:
            if current is child:
                return True
            current = current.parent
        return False

    def remove_child(self, child: Node) -> bool:
        """Remove a child node and clear its parent link.

        Returns:
            True if the child was found, False otherwise

        """
        for index, candidate in enumerate(self.children):
            if candidate is child:
                del self.children[index]
                child.parent = None
                return True
        return False

    # ----------------
    # Properties
    # ----------------

    def set_property(self, key: str, value: str) -> None:
        if not isinstance(key, str) or not isinstance(value, str):
            msg = f"property key and value must be strings, got {type(key).__name__} and {type(value).__name__}"
            raise TypeError(msg)
        if self.kind == TEXT_NODE:
            msg = "text nodes cannot carry properties"
            raise TypeError(msg)
        self.properties[key.lower()] = value

    def get_property(self, key: str) -> str | None:
        return self.properties.get(key.lower())

    def get_properties(self) -> Iterator[tuple[str, str]]:
        return iter(list(self.properties.items()))

    # ----------------
    # Classes (derived from the "class" property)
    # ----------------

    def get_classes(self) -> Iterator[str]:
        return iter((self.get_property("class") or "").split())

    def has_class(self, class_name: str) -> bool:
        _check_class_name(class_name)
        return class_name in (self.get_property("class") or "").split()

    def add_class(self, class_name: str) -> None:
        """Add a class to this node unless it is already present."""
        _check_class_name(class_name)
        if self.has_class(class_name):
            return
        current = self.get_property("class")
        self.set_property("class", f"{current} {class_name}" if current else class_name)

    def remove_class(self, class_name: str) -> None:
        """Remove every occurrence of a class from this node."""
        _check_class_name(class_name)
        current = self.get_property("class")
        if current is None:
            return
        kept = [c for c in current.split() if c != class_name]
        self.set_property("class", " ".join(kept))

    # ----------------
    # Text
    # ----------------

    def get_text(self) -> str:
        """Return the text of this node.

        For a text node this is its payload; for an element it is the text of
        every descendant text node, concatenated in document order.
        """
        if self.kind == TEXT_NODE:
            return self.text or ""
        return "".join(child.get_text() for child in self.children)

    def set_text(self, text: str) -> None:
        """Set the text of this node.

        - A text node has its payload replaced.
        - An element without children gets a new text node child.
        - An element whose only child is a text node has that child's payload replaced.

        Any other element shape raises AmbiguousTextError.
        """
        if not isinstance(text, str):
            msg = f"text must be a string, got {type(text).__name__}"
            raise TypeError(msg)
        if self.kind == TEXT_NODE:
            self.text = text
        elif not self.children:
            self.append_child(create_text_node(text))
        elif len(self.children) == 1 and self.children[0].kind == TEXT_NODE:
            self.children[0].text = text
        else:
            msg = f"unable to set text of <{self.kind}>: it has {len(self.children)} children"
            raise AmbiguousTextError(msg)

    # ----------------
    # Traversal, selectors and serialization
    # ----------------

    def traverse(self) -> Iterator[tuple[Node, int]]:
        """Yield (node, depth) pairs over this subtree, depth-first, root first at depth 1."""
        from .traversal import traverse

        return traverse(self)

    def matches(self, matcher: Matcher | Any) -> bool:
        from .selector import matches

        return matches(self, matcher)

    def query_selector(self, selector: str | Sequence[Matcher | Any]) -> Node | None:
        """Return the first descendant matching the selector, or None."""
        from .selector import query_selector

        return query_selector(self, selector)

    def query_selector_all(self, selector: str | Sequence[Matcher | Any]) -> list[Node]:
        """Return all descendants matching the selector in document order."""
        from .selector import query_selector_all

        return query_selector_all(self, selector)

    def dump(self, html: bool = False, pretty: bool = False) -> str:
        """Serialize this subtree to markup."""
        from .serialize import to_markup

        return to_markup(self, html=html, pretty=pretty)


def _check_class_name(class_name: object) -> None:
    if not isinstance(class_name, str):
        msg = f"class name must be a string, got {type(class_name).__name__}"
        raise TypeError(msg)


def create_node(kind: str) -> Node:
    """Create a detached element node (or an empty text node for '#text')."""
    if not isinstance(kind, str):
        msg = f"node kind must be a string, got {type(kind).__name__}"
        raise TypeError(msg)
    if kind == TEXT_NODE:
        return Node(kind, text="")
    if not TAG_NAME_PATTERN.fullmatch(kind):
        msg = f"illegal tag name for node: {kind!r}"
        raise ValueError(msg)
    return Node(kind)


def create_text_node(text: str) -> Node:
    """Create a detached text node holding the given text."""
    if not isinstance(text, str):
        msg = f"cannot create a text node from {type(text).__name__}"
        raise TypeError(msg)
    return Node(TEXT_NODE, text=text)
