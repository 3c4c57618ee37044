"""Router resolution — turns ``"module:attribute"`` into an EndpointRouter.

Shared by every subcommand. The attribute may be an ``EndpointRouter``
instance or an endpoint type (class, union or ``type`` alias), from which a
router is inferred.
"""

import argparse
import importlib
import sys
from typing import Any

from waymark.errors import ConfigurationError
from waymark.router import EndpointRouter, infer


def resolve_router(import_string: str) -> EndpointRouter[Any, Any, Any]:
    """Resolve an import string to a router.

    Accepts ``"module:attribute"``; the attribute defaults to ``"Page"``
    when omitted (``"myapp.pages"`` resolves to ``myapp.pages.Page``).

    Raises:
        ModuleNotFoundError: If the module cannot be imported.
        AttributeError: If the attribute does not exist on the module.
        ConfigurationError: If the endpoint type cannot be routed.

    """
    module_path, _, attr_name = import_string.partition(":")
    if not attr_name:
        attr_name = "Page"

    module = importlib.import_module(module_path)
    obj = getattr(module, attr_name)

    if isinstance(obj, EndpointRouter):
        return obj
    return infer(obj)


def resolve_or_exit(args: argparse.Namespace) -> EndpointRouter[Any, Any, Any]:
    """Resolve ``args.target``, printing the error and exiting 1 on failure."""
    try:
        return resolve_router(args.target)
    except (ModuleNotFoundError, AttributeError, ConfigurationError) as exc:
        print(f"Error: {exc}", file=sys.stderr)
        raise SystemExit(1) from exc
