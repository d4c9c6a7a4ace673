# Copyright 2025 Softwell S.r.l.
# Licensed under the Apache License, Version 2.0

"""Navigator - minimal host router driving the navigation guard.

``Navigator`` resolves locations against a ``RouteTable``, runs the guard,
follows redirects and commits the destination. It also keeps the history
stack and the scroll positions saved for each visited location.

Redirect payloads
-----------------
- a path string or location mapping: navigate there instead
- ``False`` or ``None``: abort, the current route is kept
- an exception instance: raised to the caller

A route declaring ``redirect`` is followed before its guard runs. More than
``max_redirects`` consecutive hops raise ``NavigationError``.

Overlapping navigations
-----------------------
Each navigation takes a ticket. When its guard finishes after a newer
navigation has started, it is dropped silently: nothing is committed and
``None`` is returned, and its pending indicator start is cancelled.
Whichever navigation completes last settles the loading indicator.

Example::

    navigator = Navigator(routes, guard)
    await navigator.push("/admin/items/42")
    navigator.current.params  # {"slug": "42"}
    navigator.result.data     # merged async data of the innermost view
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable, Mapping
from typing import Any

from genro_navigation.exceptions import NavigationError

from .guard import NavigationGuard, NavigationResult
from .location import START, RouteDescriptor, RouteState, RouteTable
from .scroll import scroll_behavior

__all__ = ["Navigator"]

logger = logging.getLogger("genro_navigation.navigator")

Location = str | Mapping[str, Any]


class Navigator:
    """History-aware driver for a ``NavigationGuard``.

    Attributes:
        routes: The compiled route table.
        guard: The navigation guard.
        current: The committed route (``START`` before the first navigation).
        history: Committed routes, oldest first.
        result: Guard result of the last committed navigation.
        scroll_target: Scroll target computed for the last commit.
    """

    __slots__ = (
        "routes",
        "guard",
        "max_redirects",
        "current",
        "history",
        "result",
        "scroll_target",
        "_scroll_behavior",
        "_saved_positions",
        "_ticket",
        "_in_flight",
    )

    def __init__(
        self,
        routes: RouteTable | Iterable[RouteDescriptor],
        guard: NavigationGuard,
        *,
        max_redirects: int = 10,
        scroll: Callable[..., Mapping[str, Any]] = scroll_behavior,
    ) -> None:
        self.routes = routes if isinstance(routes, RouteTable) else RouteTable(routes)
        self.guard = guard
        self.max_redirects = max_redirects
        self.current: RouteState = START
        self.history: list[RouteState] = []
        self.result: NavigationResult | None = None
        self.scroll_target: Mapping[str, Any] | None = None
        self._scroll_behavior = scroll
        self._saved_positions: dict[str, Mapping[str, Any]] = {}
        self._ticket = 0
        self._in_flight = 0

    async def push(self, location: Location) -> NavigationResult | None:
        """Navigate to ``location``, adding a history entry."""
        return await self._navigate(location, mode="push")

    async def replace(self, location: Location) -> NavigationResult | None:
        """Navigate to ``location``, replacing the current history entry."""
        return await self._navigate(location, mode="replace")

    async def back(self) -> NavigationResult | None:
        """Return to the previous history entry, restoring its scroll position.

        Returns:
            The guard result, or None if there is no previous entry.
        """
        if len(self.history) < 2:
            return None
        previous = self.history[-2]
        saved = self._saved_positions.get(previous.full_path)
        return await self._navigate(previous.full_path, mode="back", saved_position=saved)

    def save_position(self, position: Mapping[str, Any]) -> None:
        """Record the scroll position reported by the UI for the current route."""
        self._saved_positions[self.current.full_path] = dict(position)

    async def _navigate(
        self,
        location: Location,
        *,
        mode: str,
        saved_position: Mapping[str, Any] | None = None,
    ) -> NavigationResult | None:
        self._ticket += 1
        ticket = self._ticket
        self._in_flight += 1
        try:
            return await self._run(location, ticket, mode=mode, saved_position=saved_position)
        finally:
            self._in_flight -= 1

    async def _run(
        self,
        location: Location,
        ticket: int,
        *,
        mode: str,
        saved_position: Mapping[str, Any] | None,
    ) -> NavigationResult | None:
        from_ = self.current
        for _hop in range(self.max_redirects + 1):
            to = self.routes.resolve(location)
            if to.redirect is not None:
                logger.debug("route %s redirects to %r", to.full_path, to.redirect)
                location = to.redirect
                saved_position = None
                continue

            result = await self.guard.guard(to, from_)
            if ticket != self._ticket:
                logger.debug("navigation to %s superseded", to.full_path)
                if result.pending_start is not None:
                    result.pending_start.cancel()
                if self._in_flight == 1:
                    self.guard.indicator.finish()
                return None
            if not result.aborted:
                await self._commit(to, from_, result, mode=mode, saved_position=saved_position)
                return result

            payload = result.payload
            if payload is None or payload is False:
                logger.debug("navigation to %s aborted", to.full_path)
                return result
            if isinstance(payload, BaseException):
                raise payload
            logger.debug("navigation to %s redirected to %r", to.full_path, payload)
            location = payload
            saved_position = None
            if mode == "back":
                mode = "push"

        raise NavigationError(
            f"Too many redirects (more than {self.max_redirects}) navigating from {from_.full_path}"
        )

    async def _commit(
        self,
        to: RouteState,
        from_: RouteState,
        result: NavigationResult,
        *,
        mode: str,
        saved_position: Mapping[str, Any] | None,
    ) -> None:
        if mode == "back":
            self.history.pop()
        elif mode == "replace" and self.history:
            self.history[-1] = to
        else:
            self.history.append(to)
        self.current = to
        self.result = result
        self.scroll_target = self._scroll_behavior(to, from_, saved_position, result.views)
        logger.debug("navigated %s -> %s", from_.full_path, to.full_path)
        await self.guard.after_each(to, from_)
