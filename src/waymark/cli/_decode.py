"""``waymark decode`` — decode a path with a router and print the endpoint."""

import argparse
import sys

from waymark.cli._resolve import resolve_or_exit


def run_decode(args: argparse.Namespace) -> None:
    """Print the decoded endpoint's repr, or exit 1 when no route matches."""
    router = resolve_or_exit(args)
    endpoint = router.parse(args.path)
    if endpoint is None:
        print(f"No route matches {args.path!r}", file=sys.stderr)
        raise SystemExit(1)
    print(repr(endpoint))
