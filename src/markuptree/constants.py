"""Markup constants.

Element names are kept in lists for a stable iteration order; the frozen
sets below are what the serializer and parser use for lookups.

Usage:
    from markuptree.constants import VOID_ELEMENTS, TEXT_NODE
"""

import re

# Tag name reserved for text nodes
TEXT_NODE = "#text"

# Tag names accepted by create_node()
TAG_NAME_PATTERN = re.compile(r"[A-Za-z0-9:]+")

# HTML elements that never carry children or an end tag
VOID_ELEMENT_NAMES = [
    "area",
    "base",
    "br",
    "col",
    "command",
    "embed",
    "hr",
    "img",
    "input",
    "keygen",
    "link",
    "meta",
    "param",
    "source",
    "track",
    "wbr",
]

VOID_ELEMENTS = frozenset(VOID_ELEMENT_NAMES)

# Whitespace as understood by the parser and the selector compiler
WHITESPACE = " \t\n\r\f\v"

HTML_DOCTYPE = "<!DOCTYPE html>\n"
