"""Genro Navigation - client-side navigation pipeline for Python.

Drives every route transition of a single-page application: resolves the
views matched to the destination, runs named middleware that may redirect
or abort, fetches per-view data before the view is committed, and signals
the loading indicator, the layout and the scroll position.

Public exports:
    - ``RouteDescriptor`` / ``RouteTable``: route definitions and matching
    - ``ViewDefinition``: validated view capabilities
    - ``MiddlewareRegistry``: middleware table built once at startup
    - ``Continue`` / ``Redirect``: middleware outcomes
    - ``NavigationGuard``: before/after navigation hooks
    - ``Navigator``: history-aware driver
    - ``scroll_behavior``: scroll policy

Built-in middleware (logging, allow) are registered on first import.

Example::

    from genro_navigation import (
        LayoutState, LoadingBar, MiddlewareRegistry, NavigationGuard,
        Navigator, RouteDescriptor, ViewDefinition,
    )

    home = ViewDefinition(name="home", layout="default")
    registry = MiddlewareRegistry().use("logging").freeze()
    guard = NavigationGuard(registry, LoadingBar(), LayoutState(),
                            global_middleware=["logging"])
    navigator = Navigator([RouteDescriptor("/", name="home", views=home)], guard)
    await navigator.push("/")
"""

from importlib import import_module

__version__ = "0.1.0"

from .core import (
    CONTINUE,
    Continue,
    LayoutSetter,
    LayoutState,
    LoadingBar,
    LoadingIndicator,
    MiddlewareChain,
    MiddlewareRegistry,
    NavigationContext,
    NavigationGuard,
    NavigationResult,
    Navigator,
    Redirect,
    RouteDescriptor,
    RouteState,
    RouteTable,
    START,
    ViewDefinition,
    collect_middleware,
    inject_data,
    merge_data,
    resolve_components,
    scroll_behavior,
)
from .exceptions import (
    ConfigurationError,
    DataFetchFailure,
    NavigationError,
    ResolutionFailure,
    RouteNotFound,
)

# Import built-in middleware to trigger registration (lazy to avoid cycles)
for _middleware in ("logging", "allow"):
    import_module(f"{__name__}.middleware.{_middleware}")
del _middleware

__all__ = [
    "CONTINUE",
    "Continue",
    "LayoutSetter",
    "LayoutState",
    "LoadingBar",
    "LoadingIndicator",
    "MiddlewareChain",
    "MiddlewareRegistry",
    "NavigationContext",
    "NavigationGuard",
    "NavigationResult",
    "Navigator",
    "Redirect",
    "RouteDescriptor",
    "RouteState",
    "RouteTable",
    "START",
    "ViewDefinition",
    "collect_middleware",
    "inject_data",
    "merge_data",
    "resolve_components",
    "scroll_behavior",
    "ConfigurationError",
    "DataFetchFailure",
    "NavigationError",
    "ResolutionFailure",
    "RouteNotFound",
]
