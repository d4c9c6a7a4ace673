"""Logging middleware for Genro Navigation.

Logs every navigation passing through the chain and always lets it continue.

Configuration
-------------
Accepted keys:
    - ``enabled``: Gate the middleware entirely (default True)
    - ``before``: Log the "navigate" message (default True)
    - ``log``: Use logger.info() when the logger has handlers (default True)
    - ``print``: Always use print() (default False)

Example::

    from genro_navigation import MiddlewareRegistry, NavigationGuard

    registry = MiddlewareRegistry().use("logging", flags="print").freeze()
    guard = NavigationGuard(registry, bar, layout, global_middleware=["logging"])
"""

from __future__ import annotations

import logging
from typing import Any

from genro_navigation.core.outcome import CONTINUE
from genro_navigation.core.registry import MiddlewareRegistry
from genro_navigation.middleware._base_middleware import BaseMiddleware


class LoggingMiddleware(BaseMiddleware):
    """Logging middleware with configurable sink."""

    middleware_code = "logging"
    middleware_description = "Logs navigations"

    __slots__ = ("_logger",)

    def __init__(self, *, logger: logging.Logger | None = None, **cfg: Any):
        self._logger = logger or logging.getLogger("genro_navigation")
        super().__init__(**cfg)

    def configure(  # type: ignore[override]
        self,
        enabled: bool = True,
        before: bool = True,
        log: bool = True,
        print: bool = False,  # noqa: A002 - shadowing builtin intentionally
    ):
        """Configure logging middleware options.

        Args:
            enabled: Enable/disable the middleware entirely.
            before: Log "navigate {from} -> {to}" when the middleware runs.
            log: Use logger.info() when handlers available.
            print: Always use print() instead of logger.
        """
        pass  # Storage is handled by the wrapper

    def _emit(self, message: str, *, cfg: dict[str, Any]) -> None:
        """Emit a log message via configured sink."""
        if cfg.get("print"):
            print(message)
            return
        if cfg.get("log"):
            logger = self._logger
            has_handlers = getattr(logger, "hasHandlers", None) or getattr(
                logger, "has_handlers", None
            )
            can_log = callable(has_handlers) and has_handlers()
            if can_log:
                logger.info(message)
            else:
                print(message)

    def handle(self, to, from_):
        cfg = self.configuration()
        if cfg.get("before", True):
            source = getattr(from_, "full_path", from_)
            target = getattr(to, "full_path", to)
            self._emit(f"navigate {source} -> {target}", cfg=cfg)
        return CONTINUE


MiddlewareRegistry.register_builtin(LoggingMiddleware)
