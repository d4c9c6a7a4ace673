# Copyright 2025 Softwell S.r.l. - All Rights Reserved
# SPDX-License-Identifier: Apache-2.0
"""Exceptions for Genro Navigation.

This module defines the exceptions raised by the navigation pipeline.
"""

from typing import Any

__all__ = [
    "NavigationError",
    "ConfigurationError",
    "ResolutionFailure",
    "DataFetchFailure",
    "RouteNotFound",
]


class NavigationError(Exception):
    """Base class for failures that stop a navigation from completing."""


class ConfigurationError(NavigationError):
    """Raised when a view references a middleware that is not registered.

    This is a fatal configuration problem: it is raised before any
    middleware of the navigation runs and is never recovered internally.

    Attributes:
        name: The middleware name that could not be found.
    """

    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__(f"Undefined middleware [{name}]")


class ResolutionFailure(NavigationError):
    """Raised when a deferred view loader fails.

    The original exception is available as ``__cause__``.

    Attributes:
        reference: The loader (or reference) that failed.
    """

    def __init__(self, reference: Any) -> None:
        self.reference = reference
        label = getattr(reference, "__name__", None) or repr(reference)
        super().__init__(f"Unable to resolve view '{label}'")


class DataFetchFailure(NavigationError):
    """Raised when a view's ``async_data`` hook fails.

    No partial data is merged when this is raised.

    Attributes:
        view_name: Name of the view whose hook failed.
    """

    def __init__(self, view_name: str | None) -> None:
        self.view_name = view_name
        super().__init__(f"async_data failed for view '{view_name or '<anonymous>'}'")


class RouteNotFound(NavigationError):
    """Raised when a location does not match any route.

    Attributes:
        location: The path or name that could not be matched.
    """

    def __init__(self, location: str) -> None:
        self.location = location
        super().__init__(f"Route '{location}' not found")
