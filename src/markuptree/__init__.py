from .node import AmbiguousTextError, Node, create_node, create_text_node
from .parser import MalformedMarkupError, MarkupParser, ParserOpts, ParseTrace, parse, parse_with_trace
from .selector import (
    NodeMatcher,
    PredicateMatcher,
    SelectorError,
    compile_selector,
    matches,
    query_selector,
    query_selector_all,
)
from .serialize import to_markup, to_tree_format
from .traversal import traverse

__all__ = [
    "AmbiguousTextError",
    "MalformedMarkupError",
    "MarkupParser",
    "Node",
    "NodeMatcher",
    "ParseTrace",
    "ParserOpts",
    "PredicateMatcher",
    "SelectorError",
    "compile_selector",
    "create_node",
    "create_text_node",
    "matches",
    "parse",
    "parse_with_trace",
    "query_selector",
    "query_selector_all",
    "to_markup",
    "to_tree_format",
    "traverse",
]
