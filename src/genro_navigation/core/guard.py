# Copyright 2025 Softwell S.r.l.
# Licensed under the Apache License, Version 2.0

"""Navigation guard orchestrator.

``NavigationGuard`` glues the resolver, the middleware chain and the data
step into the host router's before/after navigation hooks. Everything it
touches is injected: the middleware registry, the loading indicator, the
layout setter, the application store and the UI scheduler.

Before navigation
-----------------
1. resolve the destination's view references (outermost first);
2. no views matched: proceed at once (no indicator, no middleware);
3. unless the innermost view sets ``loading=False``, schedule
   ``indicator.start()`` on the next UI tick;
4. run global middleware, then every view's middleware;
5. on completion without payload: set the layout from the innermost view
   (``""`` when unset), run the data step, proceed;
6. on completion with a payload: hand it back untouched (no layout change,
   no data fetch).

After navigation
----------------
Wait for one UI tick, then ``indicator.finish()``.

Scheduler
---------
``next_tick(callback)`` defers a callback to the next UI update. The default
uses ``loop.call_soon`` of the running event loop.

Example::

    guard = NavigationGuard(
        registry,
        LoadingBar(),
        LayoutState(),
        store=app_store,
        global_middleware=["logging"],
    )
    result = await guard.guard(to, from_)
    if result.aborted:
        ...
    await guard.after_each(to, from_)
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable, Iterable
from dataclasses import dataclass, field, replace
from typing import Any

from .chain import MiddlewareChain, collect_middleware
from .context import NavigationContext
from .data import DEFAULT_DATA_KEY, inject_data
from .location import RouteState
from .outcome import CONTINUE, Continue, Redirect
from .registry import MiddlewareRegistry
from .resolver import resolve_components
from .signals import LayoutSetter, LoadingIndicator
from .view import ViewDefinition

__all__ = ["NavigationGuard", "NavigationResult"]

logger = logging.getLogger("genro_navigation.guard")


@dataclass(frozen=True)
class NavigationResult:
    """What the before-navigation hook decided.

    Attributes:
        outcome: ``Continue`` or ``Redirect(payload)``.
        views: Resolved views, outermost first (empty when aborted).
        data: Merged data of the innermost view, or None when it has no
            ``async_data`` hook.
        pending_start: Indicator start still waiting for its tick, if any.
    """

    outcome: Continue | Redirect = CONTINUE
    views: tuple[ViewDefinition, ...] = ()
    data: dict[str, Any] | None = None
    pending_start: _DeferredStart | None = field(default=None, compare=False, repr=False)

    @classmethod
    def proceed(
        cls, views: Iterable[ViewDefinition] = (), data: dict[str, Any] | None = None
    ) -> NavigationResult:
        return cls(CONTINUE, tuple(views), data)

    @classmethod
    def redirect(cls, payload: Any) -> NavigationResult:
        return cls(Redirect(payload))

    @property
    def aborted(self) -> bool:
        return isinstance(self.outcome, Redirect)

    @property
    def payload(self) -> Any:
        """Redirect payload, or None when the navigation proceeds."""
        return self.outcome.payload if isinstance(self.outcome, Redirect) else None

    @property
    def innermost(self) -> ViewDefinition | None:
        return self.views[-1] if self.views else None


class _DeferredStart:
    """Indicator start scheduled for the next tick, cancellable until then."""

    __slots__ = ("_indicator", "cancelled")

    def __init__(self, indicator: LoadingIndicator) -> None:
        self._indicator = indicator
        self.cancelled = False

    def __call__(self) -> None:
        if not self.cancelled:
            self._indicator.start()

    def cancel(self) -> None:
        self.cancelled = True


def _call_soon(callback: Callable[[], None]) -> None:
    asyncio.get_running_loop().call_soon(callback)


class NavigationGuard:
    """Before/after navigation hooks with injected collaborators."""

    __slots__ = (
        "registry",
        "indicator",
        "layout",
        "store",
        "global_middleware",
        "data_key",
        "_next_tick",
        "_chain",
    )

    def __init__(
        self,
        registry: MiddlewareRegistry,
        indicator: LoadingIndicator,
        layout: LayoutSetter,
        *,
        store: Any = None,
        global_middleware: Iterable[str | Callable] = (),
        next_tick: Callable[[Callable[[], None]], Any] | None = None,
        data_key: str = DEFAULT_DATA_KEY,
    ) -> None:
        self.registry = registry
        self.indicator = indicator
        self.layout = layout
        self.store = store
        self.global_middleware = tuple(global_middleware)
        self.data_key = data_key
        self._next_tick = next_tick or _call_soon
        self._chain = MiddlewareChain(registry, indicator)

    async def before_each(self, to: RouteState, from_: RouteState) -> NavigationResult:
        """Run the before-navigation pipeline for ``to``.

        Raises:
            ConfigurationError: If a referenced middleware is not registered.
            ResolutionFailure: If a view loader fails.
            DataFetchFailure: If the innermost view's ``async_data`` fails.
        """
        views = await resolve_components(to.views())
        if not views:
            return NavigationResult.proceed()

        innermost = views[-1]
        deferred: _DeferredStart | None = None
        if innermost.loading is not False:
            deferred = _DeferredStart(self.indicator)
            self._next_tick(deferred)

        middleware = collect_middleware(self.global_middleware, views)

        async def complete(*args: Any) -> NavigationResult:
            if args:
                return NavigationResult.redirect(args[0])
            self.layout.set_layout(innermost.layout or "")
            context = NavigationContext(to, from_, self.store)
            data = await inject_data(innermost, context, data_key=self.data_key)
            return NavigationResult.proceed(views, data)

        try:
            result: NavigationResult = await self._chain.run(middleware, to, from_, complete)
        except BaseException:
            if deferred is not None:
                deferred.cancel()
            raise
        if deferred is None:
            return result
        if result.aborted:
            deferred.cancel()
            return result
        return replace(result, pending_start=deferred)

    async def after_each(self, to: RouteState, from_: RouteState) -> None:
        """Finish the loading indicator once the UI has flushed the new view."""
        loop = asyncio.get_running_loop()
        flushed = loop.create_future()

        def settle() -> None:
            if not flushed.done():
                flushed.set_result(None)

        self._next_tick(settle)
        await flushed
        self.indicator.finish()

    async def guard(self, to: RouteState, from_: RouteState) -> NavigationResult:
        """``before_each`` wrapped in a safety net that stops the indicator on failure."""
        try:
            return await self.before_each(to, from_)
        except Exception:
            logger.warning("navigation to %s failed", to.full_path)
            self.indicator.finish()
            raise
