"""``dataplatform run``: serve an App over HTTP.

Resolves an import string to an App, configures logging from the app's
config and hands over to uvicorn.
"""

import argparse
import logging
import sys

from dataplatform.cli._resolve import resolve_app
from dataplatform.errors import ConfigurationError

LOG_FORMAT = "%(asctime)s %(levelname)-8s %(name)s: %(message)s"


def run_server(args: argparse.Namespace) -> None:
    """Start the server for ``args.app``.

    CLI flags override the app's ``server`` config section.
    """
    try:
        app, is_factory = resolve_app(args.app)
    except (ModuleNotFoundError, AttributeError, TypeError, ConfigurationError) as exc:
        print(f"Error: {exc}", file=sys.stderr)
        raise SystemExit(1) from exc

    server = app.config.server
    logging.basicConfig(level=server.log_level.upper(), format=LOG_FORMAT)

    from dataplatform.server.serve import run_server as serve

    serve(
        app,
        args.host or server.host,
        args.port or server.port,
        workers=args.workers if args.workers is not None else server.workers,
        reload=args.reload,
        log_level=server.log_level,
        app_path=args.app,
        factory=is_factory,
    )
