# Selector support for markuptree
# Supports descendant chains of simple selectors: tag, #id and .class segments

from __future__ import annotations

import re
from collections.abc import Mapping, Sequence
from typing import TYPE_CHECKING, Any, Union

from .traversal import descendants

if TYPE_CHECKING:
    from collections.abc import Callable

    from .node import Node


class SelectorError(ValueError):
    """Raised when a selector is invalid."""


_TYPE_PATTERN = re.compile(r"^[A-Za-z0-9_-]+")
_ID_PATTERN = re.compile(r"#([A-Za-z0-9_-]+)")
_CLASS_PATTERN = re.compile(r"\.([A-Za-z0-9_-]+)")

_MATCHER_KEYS = frozenset({"type", "id", "classes", "parent"})


class NodeMatcher:
    """Structural constraints on a single node.

    Every constraint left as None is ignored, so NodeMatcher() matches any node.
    """

    __slots__ = ("classes", "id", "parent", "type")

    type: str | None
    id: str | None
    classes: tuple[str, ...] | None
    parent: Matcher | None

    def __init__(
        self,
        type: str | None = None,  # noqa: A002
        id: str | None = None,  # noqa: A002
        classes: Sequence[str] | None = None,
        parent: Matcher | Mapping[str, Any] | Callable[[Node], Any] | None = None,
    ) -> None:
        self.type = type
        self.id = id
        self.classes = tuple(classes) if classes is not None else None
        self.parent = as_matcher(parent) if parent is not None else None

    def __repr__(self) -> str:
        parts = [f"{name}={getattr(self, name)!r}" for name in ("type", "id", "classes", "parent")]
        return f"NodeMatcher({', '.join(p for p in parts if not p.endswith('=None'))})"

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, NodeMatcher):
            return NotImplemented
        return (
            self.type == other.type
            and self.id == other.id
            and self.classes == other.classes
            and self.parent == other.parent
        )

    __hash__ = None  # type: ignore[assignment]

    def matches(self, node: Node) -> bool:
        if self.type is not None and self.type != node.kind:
            return False
        if self.id is not None and self.id != node.get_property("id"):
            return False
        if self.classes is not None:
            for class_name in self.classes:
                if not node.has_class(class_name):
                    return False
        if self.parent is not None:
            if node.parent is None:
                return False
            return self.parent.matches(node.parent)
        return True


class PredicateMatcher:
    """Free-form predicate over a single node."""

    __slots__ = ("func",)

    func: Callable[[Node], Any]

    def __init__(self, func: Callable[[Node], Any]) -> None:
        if not callable(func):
            msg = f"predicate must be callable, got {type(func).__name__}"
            raise TypeError(msg)
        self.func = func

    def __repr__(self) -> str:
        return f"PredicateMatcher({self.func!r})"

    def matches(self, node: Node) -> bool:
        return bool(self.func(node))


Matcher = Union[NodeMatcher, PredicateMatcher]


def as_matcher(criteria: Any) -> Matcher:
    """Coerce matcher criteria into a Matcher.

    Accepts a Matcher, a mapping with any of the keys type/id/classes/parent,
    or a callable taking a node and returning a truthy value.
    """
    if isinstance(criteria, (NodeMatcher, PredicateMatcher)):
        return criteria
    if isinstance(criteria, Mapping):
        unknown = set(criteria) - _MATCHER_KEYS
        if unknown:
            msg = f"unknown matcher keys: {', '.join(sorted(map(str, unknown)))}"
            raise TypeError(msg)
        return NodeMatcher(**criteria)
    if callable(criteria):
        return PredicateMatcher(criteria)
    msg = f"invalid matcher criteria: {type(criteria).__name__}"
    raise TypeError(msg)


def matches(node: Node, matcher: Any) -> bool:
    """Check whether a node satisfies a matcher (or matcher criteria)."""
    return as_matcher(matcher).matches(node)


def compile_selector(selector: str) -> list[NodeMatcher]:
    """Compile a selector string into matchers, one per descendant level.

    Each whitespace-separated token may hold a tag name, an #id and any
    number of .class segments, e.g. "div#main .item span.label.small".
    """
    if not isinstance(selector, str):
        msg = f"selector must be a string, got {type(selector).__name__}"
        raise TypeError(msg)
    compiled: list[NodeMatcher] = []
    for token in selector.split():
        type_match = _TYPE_PATTERN.match(token)
        id_match = _ID_PATTERN.search(token)
        classes = _CLASS_PATTERN.findall(token)
        compiled.append(
            NodeMatcher(
                type=type_match.group(0) if type_match else None,
                id=id_match.group(1) if id_match else None,
                classes=classes or None,
            )
        )
    if not compiled:
        msg = f"Empty selector: {selector!r}"
        raise SelectorError(msg)
    return compiled


def _prepare(selector: Any) -> list[Matcher]:
    if isinstance(selector, str):
        return list(compile_selector(selector))
    if not isinstance(selector, Sequence):
        msg = f"invalid selector: {type(selector).__name__}"
        raise TypeError(msg)
    prepared = [as_matcher(item) for item in selector]
    if not prepared:
        msg = "Empty selector"
        raise SelectorError(msg)
    return prepared


def query_selector(node: Node, selector: Any) -> Node | None:
    """Return the first node found below node that matches the selector."""
    chain = _prepare(selector)

    def _search(stage: int, start: Node) -> Node | None:
        if stage == len(chain):
            return start
        matcher = chain[stage]
        for candidate in descendants(start):
            if matcher.matches(candidate):
                found = _search(stage + 1, candidate)
                if found is not None:
                    return found
        return None

    return _search(0, node)


def query_selector_all(node: Node, selector: Any) -> list[Node]:
    """Return every node below node that matches the selector.

    Results are unique and ordered by first discovery.
    """
    chain = _prepare(selector)
    results: list[Node] = []
    seen: set[int] = set()

    def _search(stage: int, start: Node) -> None:
        if stage == len(chain):
            if id(start) not in seen:
                seen.add(id(start))
                results.append(start)
            return
        matcher = chain[stage]
        for candidate in descendants(start):
            if matcher.matches(candidate):
                _search(stage + 1, candidate)

    _search(0, node)
    return results
