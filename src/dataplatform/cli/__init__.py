"""dataplatform CLI: serve the API and inspect its routes.

Entry point registered as ``dataplatform`` in ``pyproject.toml``::

    [project.scripts]
    dataplatform = "dataplatform.cli:main"
"""

import argparse
import sys

DEFAULT_APP = "dataplatform.main:create_app"


def main(argv: list[str] | None = None) -> None:
    """CLI entry point for the ``dataplatform`` command."""
    parser = argparse.ArgumentParser(
        prog="dataplatform",
        description="HTTP application shell for the data platform.",
    )
    subparsers = parser.add_subparsers(dest="command")

    # -- dataplatform run ---------------------------------------------------
    run_parser = subparsers.add_parser("run", help="Start the HTTP server")
    run_parser.add_argument(
        "app",
        nargs="?",
        default=DEFAULT_APP,
        help=f"Import string of an App or app factory (default: {DEFAULT_APP})",
    )
    run_parser.add_argument("--host", default=None, help="Bind host address")
    run_parser.add_argument("--port", type=int, default=None, help="Bind port number")
    run_parser.add_argument(
        "--workers",
        type=int,
        default=None,
        help="Worker process count (default: server.workers from config)",
    )
    run_parser.add_argument(
        "--reload",
        action="store_true",
        help="Restart on code changes (development)",
    )

    # -- dataplatform routes ------------------------------------------------
    routes_parser = subparsers.add_parser("routes", help="List registered routes")
    routes_parser.add_argument(
        "app",
        nargs="?",
        default=DEFAULT_APP,
        help=f"Import string of an App or app factory (default: {DEFAULT_APP})",
    )

    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        sys.exit(0)

    if args.command == "run":
        from dataplatform.cli._run import run_server

        run_server(args)
    elif args.command == "routes":
        from dataplatform.cli._routes import run_routes

        run_routes(args)
