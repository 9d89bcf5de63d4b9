"""HTTP server: serves an App over uvicorn.

uvicorn takes either a live ASGI callable or an import string. Reload and
multi-worker mode need the import string, so it is forwarded when known.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from dataplatform.app import App

logger = logging.getLogger("dataplatform.server")


def run_server(
    app: App,
    host: str,
    port: int,
    *,
    workers: int = 1,
    reload: bool = False,
    log_level: str = "info",
    app_path: str | None = None,
    factory: bool = False,
) -> None:
    """Start uvicorn with the given App.

    Args:
        app: The live application. Served directly when no import string
            is needed.
        host: Bind host address.
        port: Bind port number.
        workers: Worker process count. Values above 1 require *app_path*.
        reload: Restart on code changes (development). Requires *app_path*.
        log_level: uvicorn log level (``debug``, ``info``, ``warning``...).
        app_path: ``"module:attribute"`` import string of the app.
        factory: Whether *app_path* names a factory rather than an App.
    """
    import uvicorn

    needs_import_string = reload or workers > 1
    if needs_import_string and app_path is None:
        logger.warning(
            "Reload and multiple workers need an import string; serving a single worker"
        )
        reload, workers = False, 1
        needs_import_string = False

    target: object = app_path if needs_import_string else app
    logger.info(
        "Serving %s on http://%s:%d (workers=%d, reload=%s)",
        app.config.app.name,
        host,
        port,
        workers,
        reload,
    )
    uvicorn.run(
        target,
        host=host,
        port=port,
        workers=workers if not reload else None,
        reload=reload,
        log_level=log_level,
        factory=factory and needs_import_string,
    )
