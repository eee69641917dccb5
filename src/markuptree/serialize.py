"""Markup serialization for markuptree nodes."""

from __future__ import annotations

from typing import TYPE_CHECKING

from .constants import HTML_DOCTYPE, TEXT_NODE, VOID_ELEMENTS

if TYPE_CHECKING:
    from .node import Node


def _escape_property_value(value: str) -> str:
    return value.replace("\\", "\\\\").replace('"', '\\"')


def serialize_start_tag(node: Node) -> str:
    """Render "<name" plus every property, without the closing bracket."""
    parts: list[str] = ["<", node.kind]
    for key, value in node.get_properties():
        parts.extend([" ", key, '="', _escape_property_value(value), '"'])
    return "".join(parts)


def serialize_end_tag(name: str) -> str:
    return f"</{name}>"


def to_markup(node: Node, html: bool = False, pretty: bool = False) -> str:
    """Convert a node and its subtree to markup.

    html: apply HTML rules (void elements, doctype before a root <html>).
    pretty: put elements and text runs on their own lines.
    """
    parts: list[str] = []
    _node_to_markup(node, html, pretty, parts)
    if html and node.kind == "html" and node.parent is None:
        # A document carrying the doctype ends at </html>, without the pretty newline
        if pretty:
            parts.pop()
        return HTML_DOCTYPE + "".join(parts)
    return "".join(parts)


def _node_to_markup(node: Node, html: bool, pretty: bool, parts: list[str]) -> None:
    # Text node
    if node.kind == TEXT_NODE:
        parts.append(node.text or "")
        if pretty and node.parent is not None and len(node.parent.children) > 1:
            parts.append("\n")
        return

    parts.append(serialize_start_tag(node))

    # Void elements
    if html and node.kind in VOID_ELEMENTS:
        parts.append(" />")
        if pretty:
            parts.append("\n")
        return

    parts.append(">")
    children = node.children
    if pretty and not (len(children) == 1 and children[0].kind == TEXT_NODE):
        parts.append("\n")
    for child in children:
        _node_to_markup(child, html, pretty, parts)
    parts.append(serialize_end_tag(node.kind))
    if pretty:
        parts.append("\n")


def to_tree_format(node: Node) -> str:
    """Render a subtree as an indented listing, one block per node.

    Each node shows its tag and depth, then either its text (text nodes) or
    its properties and classes (elements). Useful when debugging a parse.
    """
    lines: list[str] = []
    for current, depth in node.traverse():
        indent = "\t" * (depth - 1)
        lines.append(f"{indent}{current.kind}")
        lines.append(f"{indent} level: {depth}")
        if current.kind == TEXT_NODE:
            lines.append(f"{indent} text: {current.get_text()!r}")
            continue
        lines.append(f"{indent} properties:")
        lines.extend(f"{indent}  {key}={value}" for key, value in current.get_properties())
        lines.append(f"{indent} classes:")
        lines.extend(f"{indent}  {class_name}" for class_name in current.get_classes())
    return "\n".join(lines)
