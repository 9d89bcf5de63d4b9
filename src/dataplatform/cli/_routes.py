"""``dataplatform routes``: list registered routes.

Prints the route table in registration order, which is also the order
requests are matched in.
"""

import argparse
import sys

from dataplatform.cli._resolve import resolve_app
from dataplatform.errors import ConfigurationError
from dataplatform.routing.resolve import Unresolved


def _describe(handler: object) -> str:
    if isinstance(handler, Unresolved):
        return f"{handler.ref} ({handler.reason.lower()})"
    owner = getattr(handler, "__self__", None)
    name = getattr(handler, "__name__", repr(handler))
    if owner is not None:
        return f"{type(owner).__name__}.{name}"
    return name


def run_routes(args: argparse.Namespace) -> None:
    """List registered routes for an App.

    Resolves ``args.app``, freezes it, and prints a table of METHOD, PATH
    and HANDLER.
    """
    try:
        app, _ = resolve_app(args.app)
    except (ModuleNotFoundError, AttributeError, TypeError, ConfigurationError) as exc:
        print(f"Error: {exc}", file=sys.stderr)
        raise SystemExit(1) from exc

    routes = app.router.routes
    if not routes:
        print("No routes registered.")
        return

    rows = [(route.method, route.path, _describe(route.handler)) for route in routes]

    max_method = max(6, *(len(r[0]) for r in rows))  # "METHOD" header
    max_path = max(4, *(len(r[1]) for r in rows))  # "PATH" header

    fmt = f"{{:<{max_method}}}  {{:<{max_path}}}  {{}}"
    print(fmt.format("METHOD", "PATH", "HANDLER"))
    sep_len = max_method + max_path + 4 + max(len(r[2]) for r in rows)
    print("-" * min(sep_len, 80))
    for row in rows:
        print(fmt.format(*row))
