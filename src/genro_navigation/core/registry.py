# Copyright 2025 Softwell S.r.l.
# Licensed under the Apache License, Version 2.0

"""Middleware registry for Genro Navigation.

``MiddlewareRegistry`` maps bare middleware names to handlers. It is built
once at startup from an explicit registration table and frozen before the
first navigation.

Loading modules
---------------
``MiddlewareRegistry.load(module_set)`` accepts ``(identifier, module)``
pairs (or a mapping). Identifiers lose a leading ``./`` and a trailing
``.py``/``.js``, so ``"./check-auth.py"`` registers ``check-auth``. The
handler is the module's ``default`` attribute (``"default"`` key for mapping
modules). A module without a callable default is registered as undefined:
any navigation referencing it fails with ``ConfigurationError``. When two
identifiers reduce to the same name (``"./auth.js"`` and ``"auth.py"``), the
last one wins.

Built-in middleware
-------------------
``MiddlewareRegistry.register_builtin(cls)`` records a ``BaseMiddleware``
subclass globally under its ``middleware_code``. ``registry.use(code,
**config)`` instantiates it on a given registry.

Example::

    from genro_navigation import MiddlewareRegistry, Redirect

    registry = MiddlewareRegistry()

    @registry.register(name="guest")
    def guest(to, from_):
        if to.meta.get("members_only"):
            return Redirect("/login")

    registry.use("logging").freeze()
"""

from __future__ import annotations

import re
from collections.abc import Callable, Iterable, Iterator, Mapping
from types import MappingProxyType
from typing import Any

from genro_navigation.exceptions import ConfigurationError
from genro_navigation.middleware._base_middleware import BaseMiddleware

__all__ = ["MiddlewareRegistry", "middleware_name"]

_BUILTIN_MIDDLEWARE: dict[str, type[BaseMiddleware]] = {}

_DECORATION = re.compile(r"(^\./)|(\.(py|js)$)")


def middleware_name(identifier: str) -> str:
    """Strip path-prefix and extension decoration from a module identifier."""
    return _DECORATION.sub("", identifier)


class MiddlewareRegistry:
    """Name -> handler mapping, immutable once frozen."""

    __slots__ = ("_handlers", "_frozen")

    def __init__(self, handlers: Mapping[str, Any] | None = None) -> None:
        self._handlers: dict[str, Callable | None] = {}
        self._frozen = False
        for name, handler in (handlers or {}).items():
            self.register(handler, name=name)

    # ------------------------------------------------------------------
    # Built-in registration
    # ------------------------------------------------------------------
    @classmethod
    def register_builtin(
        cls, middleware_class: type[BaseMiddleware], name: str | None = None
    ) -> None:
        """Register a middleware class globally.

        Args:
            middleware_class: A BaseMiddleware subclass with middleware_code defined.
            name: Optional override name. If provided, overwrites any existing
                  registration. If not provided, uses middleware_code and raises
                  if already registered with a different class.

        Raises:
            TypeError: If middleware_class is not a BaseMiddleware subclass.
            ValueError: If middleware_code is missing or name collision occurs.
        """
        if not isinstance(middleware_class, type) or not issubclass(
            middleware_class, BaseMiddleware
        ):
            raise TypeError("middleware_class must be a BaseMiddleware subclass")
        if not getattr(middleware_class, "middleware_code", None):
            raise ValueError(
                f"Middleware {middleware_class.__name__} not following standards: "
                "missing middleware_code"
            )
        code = name or middleware_class.middleware_code
        if name is None:
            existing = _BUILTIN_MIDDLEWARE.get(code)
            if existing is not None and existing is not middleware_class:
                raise ValueError(f"Middleware '{code}' already registered")
        _BUILTIN_MIDDLEWARE[code] = middleware_class

    @classmethod
    def available_middleware(cls) -> dict[str, type[BaseMiddleware]]:
        """Return a copy of the global built-in registry."""
        return dict(_BUILTIN_MIDDLEWARE)

    # ------------------------------------------------------------------
    # Construction
    # ------------------------------------------------------------------
    @classmethod
    def load(
        cls,
        module_set: Iterable[tuple[str, Any]] | Mapping[str, Any],
        *,
        freeze: bool = True,
    ) -> MiddlewareRegistry:
        """Build a registry from ``(identifier, module)`` pairs.

        Args:
            module_set: Pairs or mapping of identifier -> module.
            freeze: Freeze the registry after loading (default True).

        Returns:
            The new registry.
        """
        pairs = module_set.items() if isinstance(module_set, Mapping) else module_set
        handlers: dict[str, Callable | None] = {}
        for identifier, module in pairs:
            if isinstance(module, Mapping):
                handler = module.get("default")
            else:
                handler = getattr(module, "default", None)
            handlers[middleware_name(identifier)] = handler if callable(handler) else None
        registry = cls()
        for name, handler in handlers.items():
            registry._store(name, handler)
        if freeze:
            registry.freeze()
        return registry

    def register(
        self, handler: Any = None, *, name: str | None = None, **config: Any
    ) -> Any:
        """Register a handler, or return a decorator when called without one.

        Args:
            handler: A callable ``(to, from_)`` or a BaseMiddleware subclass
                (instantiated with ``config``).
            name: Registration name. Defaults to ``middleware_code`` for
                middleware classes and ``__name__`` for functions.
            **config: Configuration for middleware classes.

        Returns:
            The handler (so the method works as a decorator).

        Raises:
            RuntimeError: If the registry is frozen.
            TypeError: If handler is not callable.
            ValueError: If the name is already registered.
        """
        if handler is None:
            return lambda func: self.register(func, name=name, **config)
        if isinstance(handler, type) and issubclass(handler, BaseMiddleware):
            instance = handler(**config)
            self._store(name or handler.middleware_code, instance)
            return handler
        if not callable(handler):
            raise TypeError(f"Middleware handler must be callable, got {type(handler).__name__}")
        if config:
            raise TypeError("Configuration is only accepted for BaseMiddleware subclasses")
        label = getattr(handler, "middleware_code", None) or getattr(handler, "__name__", "")
        self._store(name or label, handler)
        return handler

    def use(self, code: str, *, name: str | None = None, **config: Any) -> MiddlewareRegistry:
        """Instantiate a built-in middleware on this registry.

        Returns:
            self (for method chaining).

        Raises:
            ValueError: If ``code`` is not a registered built-in.
        """
        middleware_class = _BUILTIN_MIDDLEWARE.get(code)
        if middleware_class is None:
            available = ", ".join(sorted(_BUILTIN_MIDDLEWARE)) or "none"
            raise ValueError(
                f"Unknown middleware '{code}'. Register it first. Available middleware: {available}"
            )
        self._store(name or code, middleware_class(**config))
        return self

    def _store(self, name: str, handler: Callable | None) -> None:
        if self._frozen:
            raise RuntimeError("Middleware registry is frozen")
        if not name:
            raise ValueError("Middleware name must be a non-empty string")
        if name in self._handlers:
            raise ValueError(f"Middleware '{name}' already registered")
        self._handlers[name] = handler

    def freeze(self) -> MiddlewareRegistry:
        """Forbid further registrations. Returns self."""
        self._frozen = True
        return self

    @property
    def frozen(self) -> bool:
        return self._frozen

    # ------------------------------------------------------------------
    # Lookup
    # ------------------------------------------------------------------
    def resolve(self, reference: str | Callable) -> Callable:
        """Return the handler for a name; callables are returned unchanged.

        Raises:
            ConfigurationError: If the name is unknown or has no callable default.
        """
        if callable(reference):
            return reference
        handler = self._handlers.get(reference)
        if handler is None:
            raise ConfigurationError(reference)
        return handler

    def get(self, name: str, default: Any = None) -> Any:
        return self._handlers.get(name, default)

    def names(self) -> list[str]:
        """Return registered names in registration order."""
        return list(self._handlers)

    @property
    def handlers(self) -> Mapping[str, Callable | None]:
        """Read-only view of the name -> handler mapping."""
        return MappingProxyType(self._handlers)

    def __contains__(self, name: object) -> bool:
        return name in self._handlers

    def __iter__(self) -> Iterator[str]:
        return iter(self._handlers)

    def __len__(self) -> int:
        return len(self._handlers)

    def __repr__(self) -> str:
        state = "frozen" if self._frozen else "open"
        return f"<MiddlewareRegistry {state} {self.names()!r}>"
