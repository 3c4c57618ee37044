"""Waymark CLI — inspect routers and try paths against them.

Entry point registered as ``waymark`` in ``pyproject.toml``::

    [project.scripts]
    waymark = "waymark.cli:main"
"""

import argparse
import sys


def main(argv: list[str] | None = None) -> None:
    """CLI entry point for the ``waymark`` command."""
    parser = argparse.ArgumentParser(
        prog="waymark",
        description="Waymark — typed, bidirectional URL routing.",
    )
    subparsers = parser.add_subparsers(dest="command")

    # -- waymark routes ---------------------------------------------------
    routes_parser = subparsers.add_parser("routes", help="List endpoint variants and their paths")
    routes_parser.add_argument("target", help="Import string (e.g. myapp.pages:Page)")

    # -- waymark tree -----------------------------------------------------
    tree_parser = subparsers.add_parser("tree", help="Print the merged decision tree")
    tree_parser.add_argument("target", help="Import string (e.g. myapp.pages:Page)")

    # -- waymark decode ---------------------------------------------------
    decode_parser = subparsers.add_parser("decode", help="Decode a path into an endpoint")
    decode_parser.add_argument("target", help="Import string (e.g. myapp.pages:Page)")
    decode_parser.add_argument("path", help="Path to decode (e.g. article/42)")

    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        sys.exit(0)

    if args.command == "routes":
        from waymark.cli._routes import run_routes

        run_routes(args)
    elif args.command == "tree":
        from waymark.cli._tree import run_tree

        run_tree(args)
    elif args.command == "decode":
        from waymark.cli._decode import run_decode

        run_decode(args)
