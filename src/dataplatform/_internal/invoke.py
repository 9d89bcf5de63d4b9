"""Invoke helper: call a handler and report how it went.

Handler failures are values, not exceptions: ``invoke`` always returns
either ``Success`` or ``Failure`` so the dispatcher can match on the
outcome instead of wrapping every call site in ``try``.

Usage::

    from dataplatform._internal.invoke import Failure, Success, invoke

    match invoke(handler, "42"):
        case Success(value):
            ...
        case Failure(error):
            ...
"""

import inspect
from dataclasses import dataclass
from typing import Any, TypeAlias

from dataplatform._internal.types import Handler


@dataclass(frozen=True, slots=True)
class Success:
    """The handler returned normally."""

    value: Any


@dataclass(frozen=True, slots=True)
class Failure:
    """The handler raised a recoverable error."""

    error: Exception

    @property
    def message(self) -> str:
        return str(self.error)


Outcome: TypeAlias = Success | Failure


def invoke(handler: Handler, *args: str) -> Outcome:
    """Call *handler* with positional *args* and capture the outcome.

    Only ``Exception`` subclasses are captured. ``KeyboardInterrupt``,
    ``SystemExit`` and other process-level signals propagate.

    Handlers are synchronous. An awaitable return value is closed and
    reported as a ``Failure``.
    """
    try:
        result = handler(*args)
    except Exception as exc:
        return Failure(exc)

    if inspect.isawaitable(result):
        close = getattr(result, "close", None)
        if close is not None:
            close()
        name = getattr(handler, "__qualname__", repr(handler))
        msg = f"Handler {name} returned an awaitable; handlers must be synchronous"
        return Failure(TypeError(msg))

    return Success(result)
