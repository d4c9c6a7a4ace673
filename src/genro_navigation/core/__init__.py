"""Core runtime aggregator for Genro Navigation.

Exposes the pipeline building blocks from a single module.

Public API:
    - ``RouteDescriptor``, ``RouteState``, ``RouteTable``: route definitions and matching
    - ``ViewDefinition``: validated view capabilities
    - ``MiddlewareRegistry``: name -> middleware handler table
    - ``MiddlewareChain``, ``collect_middleware``: sequential middleware execution
    - ``Continue``, ``Redirect``: middleware outcomes
    - ``resolve_components``: lazy view resolution
    - ``inject_data``, ``merge_data``: async data step
    - ``NavigationGuard``, ``NavigationResult``: before/after hooks
    - ``scroll_behavior``: scroll policy
    - ``Navigator``: history-aware driver

Importing this module performs only imports; it does not register middleware
or build any registry.
"""

from .chain import MiddlewareChain, collect_middleware
from .context import NavigationContext
from .data import DEFAULT_DATA_KEY, inject_data, merge_data
from .guard import NavigationGuard, NavigationResult
from .location import START, RouteDescriptor, RouteState, RouteTable
from .navigator import Navigator
from .outcome import CONTINUE, Continue, Redirect
from .registry import MiddlewareRegistry, middleware_name
from .resolver import is_loader, resolve_component, resolve_components
from .scroll import scroll_behavior
from .signals import LayoutSetter, LayoutState, LoadingBar, LoadingIndicator
from .view import ViewDefinition

__all__ = [
    "CONTINUE",
    "Continue",
    "DEFAULT_DATA_KEY",
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
    "is_loader",
    "merge_data",
    "middleware_name",
    "resolve_component",
    "resolve_components",
    "scroll_behavior",
]
