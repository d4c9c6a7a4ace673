"""Middleware contract definitions for Genro Navigation.

A middleware is any callable ``handler(to, from_)`` returning ``None``,
``Continue`` or ``Redirect(payload)`` (or an awaitable of those). Plain
functions are enough for application middleware; ``BaseMiddleware`` adds
validated configuration for reusable, built-in ones.

``BaseMiddleware``
    Base class for class-based middleware. Provides:
        - Configuration helpers storing options on the instance
        - ``enabled`` switch checked before ``handle()`` runs
        - ``flags`` strings (``"enabled,before:off"``) parsed into booleans

    Required class attributes:
        - ``middleware_code``: name the middleware is registered under
        - ``middleware_description``: human-readable description

    Constructor signature: ``BaseMiddleware(**config)``

    Key methods:
        - ``configure(**config)``: Define accepted configuration parameters
        - ``configuration()``: Read the current configuration
        - ``handle(to, from_)``: The navigation check itself

Example::

    from genro_navigation import Redirect
    from genro_navigation.middleware._base_middleware import BaseMiddleware

    class MaintenanceMiddleware(BaseMiddleware):
        middleware_code = "maintenance"
        middleware_description = "Sends every navigation to the maintenance page"

        def configure(self, enabled: bool = True, target: str = "/maintenance"):
            pass  # Storage handled by wrapper

        def handle(self, to, from_):
            target = self.configuration()["target"]
            if to.path != target:
                return Redirect(target)
"""

from __future__ import annotations

import inspect
from collections.abc import Callable
from functools import wraps
from typing import Any

from pydantic import validate_call

from genro_navigation.core.outcome import CONTINUE, Continue, Redirect

__all__ = ["BaseMiddleware"]


def _wrap_configure(original_configure: Callable) -> Callable:
    """Wrap a middleware's configure() to handle flags, validation, defaults and storage."""
    validated = validate_call(original_configure)
    defaults = {
        name: param.default
        for name, param in inspect.signature(original_configure).parameters.items()
        if name != "self" and param.default is not inspect.Parameter.empty
    }

    @wraps(original_configure)
    def wrapper(self: BaseMiddleware, *, flags: str | None = None, **kwargs: Any) -> None:
        if flags:
            kwargs.update(self._parse_flags(flags))

        validated(self, **kwargs)

        # First call seeds the declared defaults
        if not self._config:
            self._config.update(defaults)
        self._config.update(kwargs)

    return wrapper


class BaseMiddleware:
    """Configurable navigation middleware.

    Subclass this to create reusable middleware. Define the configuration
    schema in ``configure()`` and the check itself in ``handle()``.
    """

    __slots__ = ("name", "_config")

    # Subclasses MUST define these class attributes
    middleware_code: str = ""
    middleware_description: str = ""

    def __init_subclass__(cls, **kwargs: Any) -> None:
        super().__init_subclass__(**kwargs)
        if "configure" in cls.__dict__:
            cls.configure = _wrap_configure(cls.__dict__["configure"])  # type: ignore[method-assign]

    def __init__(self, **config: Any) -> None:
        self.name = self.middleware_code
        self._config: dict[str, Any] = {}
        self.configure(**config)

    def configuration(self) -> dict[str, Any]:
        """Return a copy of the current configuration."""
        return dict(self._config)

    @property
    def enabled(self) -> bool:
        return bool(self._config.get("enabled", True))

    def _parse_flags(self, flags: str) -> dict[str, bool]:
        """Parse flag string like "enabled,before:off" into boolean dict."""
        mapping: dict[str, bool] = {}
        for chunk in flags.split(","):
            chunk = chunk.strip()
            if not chunk:
                continue
            if ":" in chunk:
                name, value = chunk.split(":", 1)
                mapping[name.strip()] = value.strip().lower() != "off"
            else:
                mapping[chunk] = True
        return mapping

    def __call__(self, to: Any, from_: Any) -> Any:
        if not self.enabled:
            return CONTINUE
        return self.handle(to, from_)

    def __repr__(self) -> str:
        return f"<{type(self).__name__} {self.name!r}>"

    # =========================================================================
    # METHODS TO OVERRIDE IN CUSTOM MIDDLEWARE
    # =========================================================================

    def configure(self, *, flags: str | None = None) -> None:
        """Override to define accepted configuration parameters.

        Define the options as method parameters with defaults. The wrapper
        added by __init_subclass__ handles:
            - Parsing ``flags`` (e.g. "enabled,before:off") into booleans
            - Pydantic validation via @validate_call
            - Seeding declared defaults and storing the values

        Example::

            def configure(self, enabled: bool = True, target: str = "/"):
                pass  # Storage is handled by the wrapper
        """
        if flags:
            self._config.update(self._parse_flags(flags))

    def handle(self, to: Any, from_: Any) -> Continue | Redirect | None:
        """Override to inspect the navigation.

        Args:
            to: Destination RouteState.
            from_: Source RouteState.

        Returns:
            None or Continue to proceed, Redirect(payload) to stop the chain.
            May be a coroutine function.
        """
        return CONTINUE
