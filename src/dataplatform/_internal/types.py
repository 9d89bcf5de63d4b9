"""Shared type aliases used across dataplatform modules."""

from collections.abc import Callable
from typing import Any, TypeAlias

# Route handler, called with path parameters as positional strings
Handler: TypeAlias = Callable[..., Any]

# What a route may be registered with: a callable, or "Controller@method"
HandlerRef: TypeAlias = Handler | str

# Lifecycle hook: sync or async, no arguments
Hook: TypeAlias = Callable[[], Any]
