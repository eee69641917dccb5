"""Command-line driver: parse a markup file and print the result.

Usage:
    python -m markuptree page.html --html --pretty
    python -m markuptree feed.xml --tree
    python -m markuptree page.html --html --select "div.post a"
"""

from __future__ import annotations

import argparse
import pathlib
import sys

from .parser import MalformedMarkupError, MarkupParser
from .selector import SelectorError
from .serialize import to_tree_format


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="markuptree",
        description="Parse an XML or HTML file and print it back",
    )
    parser.add_argument("path", type=pathlib.Path, help="Markup file to read")
    parser.add_argument("--html", action="store_true", help="Use HTML parsing and rendering rules")
    parser.add_argument("--pretty", action="store_true", help="Pretty-print the serialized markup")
    parser.add_argument("--tree", action="store_true", help="Print the node tree listing instead of markup")
    parser.add_argument(
        "--select",
        metavar="SELECTOR",
        help='Print every node matching a selector such as "div#main .item" instead of the whole document',
    )
    parser.add_argument("--trace", action="store_true", help="Print the parse trace to stderr")
    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> int:
    args = parse_args(argv)
    text = args.path.read_text(encoding="utf-8")

    try:
        document = MarkupParser(text, html=args.html, debug=args.trace)
    except MalformedMarkupError as exc:
        print(f"{args.path}: {exc}", file=sys.stderr)
        return 1
    if document.trace is not None:
        print(document.trace, file=sys.stderr)

    if args.select:
        try:
            nodes = document.query_selector_all(args.select)
        except SelectorError as exc:
            print(f"invalid selector: {exc}", file=sys.stderr)
            return 1
    else:
        nodes = [document.root]

    for node in nodes:
        if args.tree:
            print(to_tree_format(node))
        else:
            markup = node.dump(html=args.html, pretty=args.pretty)
            print(markup, end="" if markup.endswith("\n") else "\n")
    return 0


if __name__ == "__main__":
    sys.exit(main())
