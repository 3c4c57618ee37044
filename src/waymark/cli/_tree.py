"""``waymark tree`` — print the merged decision tree of a router.

Example output::

    (root) -> Home
    └── article
        └── {int} -> Article
            └── edit -> ArticleEdit
"""

import argparse
import sys
import typing
from typing import Any

from waymark.cli._resolve import resolve_or_exit
from waymark.routing.decision import DecisionNode
from waymark.routing.template import Constant, Modifier


def run_tree(args: argparse.Namespace) -> None:
    router = resolve_or_exit(args)
    root = router.tree
    if root is None:
        print("No decision tree (not a sum type).", file=sys.stderr)
        raise SystemExit(1)
    for line in format_tree(root):
        print(line)


def format_tree(root: DecisionNode) -> list[str]:
    """Render *root* and its descendants as indented lines."""
    lines = [_label(root)]
    _format_children(root, "", lines)
    return lines


def _format_children(node: DecisionNode, prefix: str, lines: list[str]) -> None:
    children = node.children
    for i, child in enumerate(children):
        last = i == len(children) - 1
        lines.append(f"{prefix}{'└── ' if last else '├── '}{_label(child)}")
        _format_children(child, prefix + ("    " if last else "│   "), lines)


def _label(node: DecisionNode) -> str:
    head = node.head
    if head is None:
        text = "(root)"
    elif isinstance(head, Constant):
        text = head.value or '""'
    else:
        star = "*" if head.modifier is Modifier.REST else ""
        text = f"{{{star}{_type_label(head.annotation)}}}"
    if node.terminal is not None:
        text = f"{text} -> {node.terminal[1].name}"
    return text


def _type_label(annotation: Any) -> str:
    if isinstance(annotation, (type, typing.NewType)):
        return annotation.__name__
    return repr(annotation)
