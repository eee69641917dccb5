"""Markup parser entry point.

A recursive-descent reader: each call to ``_parse_level`` consumes one text
run or one element (with all of its children) and returns the new cursor.
Malformed markup aborts the parse with MalformedMarkupError; nothing is
repaired.
"""

from __future__ import annotations

import logging
import re
from typing import TYPE_CHECKING, Any

from .constants import TEXT_NODE, WHITESPACE
from .node import create_node, create_text_node

if TYPE_CHECKING:
    from collections.abc import Iterator

    from .node import Node

logger = logging.getLogger(__name__)

_DOCTYPE_PATTERN = re.compile(r"<!DOCTYPE.*?>", re.IGNORECASE | re.DOTALL)
_COMMENT_PATTERN = re.compile(r"<!--.*?-->", re.DOTALL)

# Tag name ends at whitespace, '>' or '/'
_TAG_NAME_END = re.compile(r"[ \t\n\r\f\v>/]")
# Closing tag name and bare attribute values end at whitespace or '>'
_WORD_END = re.compile(r"[ \t\n\r\f\v>]")
# Attribute name ends at whitespace, '>', '=' or a self-closing "/>"
_PROPERTY_NAME_END = re.compile(r"[ \t\n\r\f\v>=]|/(?=>)")


class MalformedMarkupError(ValueError):
    """Raised when the markup is structurally invalid.

    Carries the offset into the parsed text and the matching 1-based line and
    column, when known.
    """

    message: str
    offset: int | None
    line: int | None
    column: int | None

    def __init__(self, message: str, offset: int | None = None, source: str | None = None) -> None:
        self.message = message
        self.offset = offset
        self.line = None
        self.column = None
        if offset is not None and source is not None:
            self.line = source.count("\n", 0, offset) + 1
            self.column = offset - (source.rfind("\n", 0, offset) + 1) + 1
        super().__init__(str(self))

    def __str__(self) -> str:
        if self.line is not None and self.column is not None:
            return f"({self.line},{self.column}): {self.message}"
        return self.message


class ParseTrace:
    """Collects human-readable notes about the steps a parse took.

    Each note is also logged at DEBUG level.
    """

    __slots__ = ("lines",)

    lines: list[str]

    def __init__(self) -> None:
        self.lines = []

    def append(self, message: str) -> None:
        self.lines.append(message)
        logger.debug(message)

    def __iter__(self) -> Iterator[str]:
        return iter(self.lines)

    def __len__(self) -> int:
        return len(self.lines)

    def __str__(self) -> str:
        return "\n".join(self.lines)


class ParserOpts:
    """Parser options.

    lenient_end_tags: only check that the characters after "</" start with
        the open tag's name, then skip one character without looking at it.
        By default the end tag must be exactly the tag name, optionally
        followed by whitespace, and then '>'.
    """

    __slots__ = ("lenient_end_tags",)

    def __init__(self, lenient_end_tags: bool = False) -> None:
        self.lenient_end_tags = bool(lenient_end_tags)


def strip_html_noise(text: str) -> str:
    """Remove doctype declarations and comments before an HTML parse."""
    text = _DOCTYPE_PATTERN.sub("", text)
    return _COMMENT_PATTERN.sub("", text)


class _Reader:
    __slots__ = ("length", "opts", "text", "trace")

    def __init__(self, text: str, opts: ParserOpts, trace: ParseTrace | None) -> None:
        self.text = text
        self.length = len(text)
        self.opts = opts
        self.trace = trace

    def _debug(self, message: str) -> None:
        if self.trace is not None:
            self.trace.append(message)

    def _error(self, message: str, offset: int) -> MalformedMarkupError:
        return MalformedMarkupError(message, offset, self.text)

    # Cursor primitives. A search that finds nothing returns the end of input.

    def _skip(self, idx: int) -> int:
        text = self.text
        while idx < self.length and text[idx] in WHITESPACE:
            idx += 1
        return idx

    def _to_start(self, idx: int) -> int:
        found = self.text.find("<", idx)
        return self.length if found == -1 else found

    def _search(self, pattern: re.Pattern[str], idx: int) -> int:
        found = pattern.search(self.text, idx)
        return self.length if found is None else found.start()

    def _read_value(self, idx: int) -> tuple[str, int]:
        """Read a quoted or bare attribute value; return it and the cursor after it."""
        if idx >= self.length:
            raise self._error("unexpected end of input in attribute value", idx)
        quote = self.text[idx]
        if quote not in "'\"":
            end = self._search(_WORD_END, idx)
            return self.text[idx:end], end
        end = self.text.find(quote, idx + 1)
        if end == -1:
            raise self._error(f"unterminated attribute value, expected {quote}", idx)
        return self.text[idx + 1 : end], end + 1

    def run(self) -> Node:
        wrapper = create_node("root")
        idx = self._skip(0)
        while idx < self.length:
            idx = self._skip(self._parse_level(idx, wrapper))

        for child in wrapper.children:
            if child.kind != TEXT_NODE:
                wrapper.remove_child(child)
                return child
        raise self._error("no root element found", idx)

    def _parse_level(self, idx: int, parent: Node) -> int:
        text = self.text
        self._debug(f"parse level at {idx} under <{parent.kind}>")
        idx = self._skip(idx)
        start = self._to_start(idx)

        if start != idx:
            end = start
            while end > idx and text[end - 1] in WHITESPACE:
                end -= 1
            content = text[idx:end]
            # Whitespace separating text from a following start tag is kept as one space
            if end < start and start < self.length and not text.startswith("</", start):
                content += " "
            parent.append_child(create_text_node(content))
            self._debug(f"added text node to <{parent.kind}>")
            return end

        if text.startswith("/", start + 1):
            raise self._error("malformed XML: expecting tag start, found tag end", start)
        name_end = self._search(_TAG_NAME_END, start + 1)
        name = text[start + 1 : name_end]
        try:
            node = create_node(name)
        except ValueError as exc:
            raise self._error(f"malformed XML: illegal tag name {name!r}", start) from exc
        if node.kind == TEXT_NODE:
            raise self._error(f"malformed XML: illegal tag name {name!r}", start)
        parent.append_child(node)
        self._debug(f"found tag: {name}")

        idx = name_end
        while True:
            idx = self._skip(idx)
            if idx >= self.length:
                raise self._error(f"unexpected end of input in start tag <{name}>", start)
            if text[idx] == ">":
                break
            if text.startswith("/>", idx):
                self._debug(f"tag <{name}> is self-closing")
                return idx + 2
            prop_end = self._search(_PROPERTY_NAME_END, idx)
            prop = text[idx:prop_end]
            if not prop:
                raise self._error(f"malformed XML: expecting attribute name in <{name}>", idx)
            self._debug(f"found property name: {prop}")
            if prop_end < self.length and text[prop_end] == "=":
                value, idx = self._read_value(prop_end + 1)
            else:
                value, idx = prop, prop_end
            node.set_property(prop, value)

        self._debug(f"found the end of the start tag <{name}>")
        idx = self._skip(idx + 1)
        while not text.startswith("</", idx):
            if idx >= self.length:
                raise self._error(f"unexpected end of input, expected </{name}>", idx)
            idx = self._skip(self._parse_level(idx, node))

        self._debug(f"found end of children of <{name}>")
        return self._read_end_tag(idx + 2, name)

    def _read_end_tag(self, idx: int, name: str) -> int:
        text = self.text
        if self.opts.lenient_end_tags:
            found = text[idx : idx + len(name)]
            if found != name:
                raise self._error(f"malformed XML: wrong tag end found, expected {name}, got {found}", idx)
            self._debug(f"end of tag <{name}>")
            return idx + len(name) + 1

        found_end = self._search(_WORD_END, idx)
        found = text[idx:found_end]
        if found != name:
            raise self._error(f"malformed XML: wrong tag end found, expected {name}, got {found}", idx)
        idx = self._skip(found_end)
        if idx >= self.length or text[idx] != ">":
            raise self._error(f"malformed XML: unterminated end tag </{name}>", idx)
        self._debug(f"end of tag <{name}>")
        return idx + 1


def _normalize_html(root: Node) -> Node:
    """Make sure an HTML document is rooted at <html> with a <head>."""
    if root.kind == "html":
        return root
    html = create_node("html")
    html.append_child(create_node("head"))
    if root.kind == "body":
        html.append_child(root)
    else:
        body, _ = html.append_child(create_node("body"))
        body.append_child(root)
    return html


class MarkupParser:
    __slots__ = ("debug", "html", "opts", "root", "trace")

    debug: bool
    html: bool
    opts: ParserOpts
    root: Node
    trace: ParseTrace | None

    def __init__(
        self,
        text: str | bytes,
        *,
        html: bool = False,
        debug: bool = False,
        opts: ParserOpts | None = None,
        trace: ParseTrace | None = None,
    ) -> None:
        self.html = bool(html)
        self.debug = bool(debug)
        self.opts = opts or ParserOpts()
        if trace is None and self.debug:
            trace = ParseTrace()
        self.trace = trace

        if isinstance(text, (bytes, bytearray)):
            text = bytes(text).decode("utf-8")
        elif not isinstance(text, str):
            msg = f"markup must be str or bytes, got {type(text).__name__}"
            raise TypeError(msg)

        if self.html:
            text = strip_html_noise(text)
        root = _Reader(text, self.opts, self.trace).run()
        self.root = _normalize_html(root) if self.html else root

    def query_selector(self, selector: Any) -> Node | None:
        """Query the document for the first match. Delegates to root.query_selector()."""
        return self.root.query_selector(selector)

    def query_selector_all(self, selector: Any) -> list[Node]:
        """Query the document for all matches. Delegates to root.query_selector_all()."""
        return self.root.query_selector_all(selector)

    def to_markup(self, pretty: bool = False) -> str:
        """Serialize the document, using HTML rules if it was parsed as HTML."""
        return self.root.dump(html=self.html, pretty=pretty)

    def to_text(self) -> str:
        return self.root.get_text()


def parse(text: str | bytes, html: bool = False, *, opts: ParserOpts | None = None) -> Node:
    """Parse markup and return the root node."""
    return MarkupParser(text, html=html, opts=opts).root


def parse_with_trace(
    text: str | bytes, html: bool = False, *, opts: ParserOpts | None = None
) -> tuple[Node, ParseTrace]:
    """Parse markup and return the root node along with the parse trace."""
    trace = ParseTrace()
    parser = MarkupParser(text, html=html, opts=opts, trace=trace)
    return parser.root, trace
