"""Handler reference resolution.

A route handler is registered either as a callable or as a
``"Controller@method"`` string naming an operation on a registered
controller instance. Strings are resolved exactly once, when the app
freezes, so dispatch never looks names up again.

A string that names nothing does not abort startup. It resolves to an
``Unresolved`` marker that the dispatcher answers with a 500, keeping
misconfigured references visible at request time as well as in the
startup log.
"""

import logging
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

from dataplatform._internal.types import Handler
from dataplatform.errors import ConfigurationError

logger = logging.getLogger("dataplatform.routing")

CONTROLLER_NOT_FOUND = "Controller not found"
METHOD_NOT_FOUND = "Method not found"


@dataclass(frozen=True, slots=True)
class Unresolved:
    """A handler reference that could not be bound at startup."""

    ref: str
    reason: str


def parse_ref(ref: str) -> tuple[str, str]:
    """Split ``"Controller@method"`` into its two names.

    Raises ``ConfigurationError`` if *ref* is not of that shape.
    """
    controller, sep, method = ref.partition("@")
    if not sep or not controller or not method or "@" in method:
        msg = f"Handler reference {ref!r} must look like 'Controller@method'."
        raise ConfigurationError(msg)
    return controller, method


def check_ref(handler: Any) -> None:
    """Validate a handler at registration time.

    Callables are accepted as-is. Strings must parse as references.
    Anything else raises ``ConfigurationError``.
    """
    if isinstance(handler, str):
        parse_ref(handler)
        return
    if not callable(handler):
        msg = f"Route handler must be callable or 'Controller@method', got {handler!r}"
        raise ConfigurationError(msg)


def resolve_handler(
    handler: Handler | str,
    controllers: Mapping[str, object],
) -> Handler | Unresolved:
    """Bind a handler reference to a callable.

    Callables pass through unchanged. For strings, the controller is looked
    up in *controllers* and the method fetched from it. Names starting with
    an underscore are never exposed as operations.
    """
    if not isinstance(handler, str):
        return handler

    controller_name, method_name = parse_ref(handler)
    controller = controllers.get(controller_name)
    if controller is None:
        logger.warning("Route handler %r: controller %r is not registered", handler, controller_name)
        return Unresolved(handler, CONTROLLER_NOT_FOUND)

    operation = None if method_name.startswith("_") else getattr(controller, method_name, None)
    if operation is None or not callable(operation):
        logger.warning(
            "Route handler %r: %s has no operation %r",
            handler,
            type(controller).__name__,
            method_name,
        )
        return Unresolved(handler, METHOD_NOT_FOUND)

    return operation
