# Copyright 2025 Softwell S.r.l.
# Licensed under the Apache License, Version 2.0

"""NavigationContext - read-only bundle handed to ``async_data`` hooks.

The context exposes the destination route's fields directly (``path``,
``name``, ``params``, ``query``, ``hash``, ``full_path``, ``meta``) plus
the source route as ``from_`` and the shared application state as ``store``.

Example::

    async def load_item(ctx):
        item = await ctx.store.api.get_item(ctx.params["slug"])
        return {"item": item, "came_from": ctx.from_.path}
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from .location import RouteState

__all__ = ["NavigationContext"]


class NavigationContext:
    """Destination route fields, source route and store access."""

    __slots__ = ("_to", "_from", "_store")

    def __init__(self, to: RouteState, from_: RouteState, store: Any = None) -> None:
        self._to = to
        self._from = from_
        self._store = store

    @property
    def to(self) -> RouteState:
        return self._to

    @property
    def from_(self) -> RouteState:
        return self._from

    @property
    def store(self) -> Any:
        return self._store

    @property
    def path(self) -> str:
        return self._to.path

    @property
    def name(self) -> str | None:
        return self._to.name

    @property
    def params(self) -> Mapping[str, str]:
        return self._to.params

    @property
    def query(self) -> Mapping[str, str]:
        return self._to.query

    @property
    def hash(self) -> str:
        return self._to.hash

    @property
    def full_path(self) -> str:
        return self._to.full_path

    @property
    def meta(self) -> Mapping[str, Any]:
        return self._to.meta

    def as_dict(self) -> dict[str, Any]:
        """Return the destination fields spread with ``from`` and ``store``."""
        return {
            "path": self.path,
            "name": self.name,
            "params": dict(self.params),
            "query": dict(self.query),
            "hash": self.hash,
            "full_path": self.full_path,
            "meta": dict(self.meta),
            "from": self._from,
            "store": self._store,
        }

    def __repr__(self) -> str:
        return f"NavigationContext(to={self._to.full_path!r}, from_={self._from.full_path!r})"
