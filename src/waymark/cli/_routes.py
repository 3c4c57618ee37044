"""``waymark routes`` — list endpoint variants and their effective templates."""

import argparse

from waymark.cli._resolve import resolve_or_exit


def run_routes(args: argparse.Namespace) -> None:
    """Print a VARIANT / PATH table for the resolved router."""
    router = resolve_or_exit(args)
    rows = router.routes
    if not rows:
        print("No endpoint variants (not a sum type).")
        return

    width = max(max(len(name) for name, _ in rows), 7)  # "VARIANT" header
    fmt = f"{{:<{width}}}  {{}}"
    print(fmt.format("VARIANT", "PATH"))
    print("-" * min(width + 2 + max(len(path) for _, path in rows), 80))
    for name, path in rows:
        print(fmt.format(name, path or "/"))
