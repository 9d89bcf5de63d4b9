"""App import resolution: resolves ``"module:attribute"`` strings to App instances.

Shared by ``dataplatform run`` and ``dataplatform routes``.
"""

import importlib

from dataplatform.app import App


def resolve_app(import_string: str) -> tuple[App, bool]:
    """Resolve an import string to an App instance.

    Accepts ``"module:attribute"``. When the attribute is omitted it
    defaults to ``"app"``. If the attribute is a callable rather than an
    App it is treated as a factory and called with no arguments.

    Returns:
        The App, and whether it came from a factory.

    Raises:
        ModuleNotFoundError: If the module cannot be imported.
        AttributeError: If the attribute does not exist on the module.
        TypeError: If the resolved object is not an App, or a factory
            raised or returned something else.
    """
    module_path, _, attr_name = import_string.partition(":")
    if not attr_name:
        attr_name = "app"

    module = importlib.import_module(module_path)
    obj = getattr(module, attr_name)

    is_factory = callable(obj) and not isinstance(obj, App)
    if is_factory:
        try:
            obj = obj()
        except Exception as exc:
            msg = f"Factory function {import_string!r} raised an error: {exc}"
            raise TypeError(msg) from exc

    if not isinstance(obj, App):
        kind = type(obj).__name__
        msg = f"{import_string!r} resolved to {kind}, not a dataplatform.App instance"
        raise TypeError(msg)

    return obj, is_factory
