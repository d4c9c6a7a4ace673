# Copyright 2025 Softwell S.r.l.
# Licensed under the Apache License, Version 2.0

"""Middleware chain executor.

``collect_middleware(global_middleware, views)``
    Effective middleware sequence: global defaults in declared order, then
    every view's middleware outer to inner, flattened.

``MiddlewareChain.run(middleware, to, from_, on_complete=None)``
    Looks every name up front (an unknown name raises ``ConfigurationError``
    before any handler runs), then consumes the sequence as a stack built
    from its reverse, so handlers run left to right, strictly one at a time.

    - A handler returning ``Redirect(payload)`` stops the chain: the loading
      indicator is finished and ``on_complete(payload)`` is called.
    - When the stack runs out, ``on_complete()`` is called with no arguments.

    ``run`` returns what ``on_complete`` returns (awaited when needed), or
    the final outcome when no callback is given.

Example::

    chain = MiddlewareChain(registry, indicator=bar)
    outcome = await chain.run(["logging", "guest"], to, from_)
    if isinstance(outcome, Redirect):
        ...
"""

from __future__ import annotations

import inspect
import logging
from collections.abc import Callable, Iterable, Sequence
from typing import TYPE_CHECKING, Any

from .outcome import CONTINUE, Continue, Redirect, as_outcome

if TYPE_CHECKING:
    from .registry import MiddlewareRegistry
    from .signals import LoadingIndicator
    from .view import ViewDefinition

__all__ = ["MiddlewareChain", "collect_middleware"]

logger = logging.getLogger("genro_navigation.chain")


def collect_middleware(
    global_middleware: Iterable[str | Callable], views: Iterable[ViewDefinition]
) -> list[str | Callable]:
    """Return global middleware followed by each view's middleware, outer to inner."""
    middleware = list(global_middleware)
    for view in views:
        middleware.extend(view.middleware)
    return middleware


class MiddlewareChain:
    """Sequential executor with a single abort point."""

    __slots__ = ("_registry", "_indicator")

    def __init__(
        self, registry: MiddlewareRegistry, indicator: LoadingIndicator | None = None
    ) -> None:
        self._registry = registry
        self._indicator = indicator

    async def run(
        self,
        middleware: Sequence[str | Callable],
        to: Any,
        from_: Any,
        on_complete: Callable[..., Any] | None = None,
    ) -> Any:
        """Run ``middleware`` for one navigation.

        Args:
            middleware: Names or handlers, in execution order.
            to: Destination RouteState.
            from_: Source RouteState.
            on_complete: Terminal callback, called once with no arguments
                or with the redirect payload.

        Returns:
            ``on_complete``'s result, or the final outcome if no callback.

        Raises:
            ConfigurationError: If a name has no registered handler.
            TypeError: If a handler returns an unexpected value.
        """
        handlers = [(ref, self._registry.resolve(ref)) for ref in middleware]
        stack = list(reversed(handlers))
        outcome: Continue | Redirect = CONTINUE
        while stack:
            label, handler = stack.pop()
            logger.debug("middleware %r for %s", label, getattr(to, "full_path", to))
            result = handler(to, from_)
            if inspect.isawaitable(result):
                result = await result
            outcome = as_outcome(result, label)
            if isinstance(outcome, Redirect):
                logger.debug(
                    "middleware %r stopped navigation with %r (%d skipped)",
                    label,
                    outcome.payload,
                    len(stack),
                )
                if self._indicator is not None:
                    self._indicator.finish()
                break

        if on_complete is None:
            return outcome
        args = (outcome.payload,) if isinstance(outcome, Redirect) else ()
        completed = on_complete(*args)
        if inspect.isawaitable(completed):
            completed = await completed
        return completed
