# Copyright 2025 Softwell S.r.l.
# Licensed under the Apache License, Version 2.0

"""Route descriptors, route state and path matching.

``RouteDescriptor``
    Immutable record of a path pattern, a symbolic name and the view
    references shown for it. Descriptors may nest through ``children``:
    a child path without a leading ``/`` is appended to its parent's path.

``RouteState``
    A resolved location: path, params, query, hash and the chain of matched
    descriptors, outermost first. ``views()`` flattens their view references
    in the same order.

``RouteTable``
    Compiles descriptors once and resolves locations (strings like
    ``"/admin/items/42?tab=info#notes"`` or mappings with ``path`` or
    ``name``/``params``) into ``RouteState`` instances.

Pattern syntax
--------------
- ``static`` segments match literally
- ``:param`` matches exactly one segment, stored under ``params["param"]``
- ``*`` matches the remaining path, stored under ``params["pathMatch"]``

Example::

    from genro_navigation import RouteDescriptor, RouteTable

    table = RouteTable([
        RouteDescriptor("/", name="home", views=Home),
        RouteDescriptor("/items/:slug", name="item", views=load_item),
    ])
    state = table.resolve("/items/red-shoes?tab=info")
    state.params  # {"slug": "red-shoes"}
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any
from urllib.parse import parse_qsl, quote, unquote, urlencode, urlsplit

from genro_navigation.exceptions import RouteNotFound

__all__ = ["RouteDescriptor", "RouteState", "RouteTable", "START"]

_EMPTY: Mapping[str, Any] = MappingProxyType({})


@dataclass(frozen=True)
class RouteDescriptor:
    """Static mapping from a path pattern to one or more view references."""

    path: str
    views: Any = ()
    name: str | None = None
    children: Any = ()
    meta: Mapping[str, Any] = field(default_factory=dict)
    redirect: str | Mapping[str, Any] | None = None

    def __post_init__(self) -> None:
        views = self.views
        if not isinstance(views, (tuple, list)):
            views = (views,)
        object.__setattr__(self, "views", tuple(views))
        object.__setattr__(self, "children", tuple(self.children or ()))
        object.__setattr__(self, "meta", MappingProxyType(dict(self.meta or {})))


@dataclass(frozen=True)
class RouteState:
    """A resolved navigation location."""

    path: str = "/"
    name: str | None = None
    params: Mapping[str, str] = field(default_factory=lambda: _EMPTY)
    query: Mapping[str, str] = field(default_factory=lambda: _EMPTY)
    hash: str = ""
    full_path: str = "/"
    meta: Mapping[str, Any] = field(default_factory=lambda: _EMPTY)
    matched: tuple[RouteDescriptor, ...] = ()

    def views(self) -> tuple[Any, ...]:
        """Return the view references of every matched descriptor, outer to inner."""
        return tuple(view for record in self.matched for view in record.views)

    @property
    def redirect(self) -> str | Mapping[str, Any] | None:
        """Redirect declared by the innermost matched descriptor, if any."""
        return self.matched[-1].redirect if self.matched else None

    def __str__(self) -> str:
        return self.full_path


START = RouteState()


@dataclass(frozen=True)
class _CompiledRoute:
    segments: tuple[str, ...]
    chain: tuple[RouteDescriptor, ...]

    @property
    def record(self) -> RouteDescriptor:
        return self.chain[-1]

    def match(self, parts: list[str]) -> dict[str, str] | None:
        params: dict[str, str] = {}
        for index, segment in enumerate(self.segments):
            if segment == "*":
                params["pathMatch"] = "/".join(parts[index:])
                return params
            if index >= len(parts):
                return None
            if segment.startswith(":"):
                params[segment[1:]] = unquote(parts[index])
            elif segment != parts[index]:
                return None
        if len(parts) != len(self.segments):
            return None
        return params

    def build(self, params: Mapping[str, Any]) -> str:
        parts = []
        for segment in self.segments:
            if segment == "*":
                parts.append(str(params.get("pathMatch", "")))
            elif segment.startswith(":"):
                key = segment[1:]
                if key not in params:
                    raise ValueError(
                        f"Missing param '{key}' for route '{self.record.name}'"
                    )
                parts.append(quote(str(params[key]), safe=""))
            else:
                parts.append(segment)
        return "/" + "/".join(part for part in parts if part)


class RouteTable:
    """Ordered collection of compiled routes.

    Children are compiled before their parent so that the most specific
    pattern wins when both could match.
    """

    __slots__ = ("_routes", "_by_name")

    def __init__(self, routes: Iterable[RouteDescriptor]) -> None:
        self._routes: list[_CompiledRoute] = []
        self._by_name: dict[str, _CompiledRoute] = {}
        for record in routes:
            self._add(record, parent_path="", chain=())

    def _add(
        self, record: RouteDescriptor, *, parent_path: str, chain: tuple[RouteDescriptor, ...]
    ) -> None:
        if record.path.startswith("/") or not parent_path:
            full_path = record.path
        else:
            full_path = f"{parent_path.rstrip('/')}/{record.path}"
        chain = (*chain, record)
        for child in record.children:
            self._add(child, parent_path=full_path, chain=chain)
        compiled = _CompiledRoute(_split(full_path), chain)
        self._routes.append(compiled)
        if record.name:
            if record.name in self._by_name:
                raise ValueError(f"Duplicate route name: {record.name!r}")
            self._by_name[record.name] = compiled

    def __len__(self) -> int:
        return len(self._routes)

    def names(self) -> list[str]:
        """Return route names in declaration order."""
        return list(self._by_name)

    def resolve(self, location: str | Mapping[str, Any] | RouteState) -> RouteState:
        """Resolve a location into a ``RouteState``.

        Args:
            location: A path string (with optional query and fragment), a
                mapping with ``path`` or ``name`` (plus optional ``params``,
                ``query`` and ``hash``), or an existing RouteState.

        Returns:
            The resolved RouteState.

        Raises:
            RouteNotFound: If no route matches.
        """
        if isinstance(location, RouteState):
            location = location.full_path
        if isinstance(location, str):
            split = urlsplit(location)
            path = split.path or "/"
            query = dict(parse_qsl(split.query, keep_blank_values=True))
            fragment = f"#{split.fragment}" if split.fragment else ""
            return self._match_path(path, query, fragment, label=location)

        query = dict(location.get("query") or {})
        fragment = location.get("hash") or ""
        if fragment and not fragment.startswith("#"):
            fragment = f"#{fragment}"
        name = location.get("name")
        if name is not None:
            compiled = self._by_name.get(name)
            if compiled is None:
                raise RouteNotFound(name)
            params = {k: str(v) for k, v in (location.get("params") or {}).items()}
            path = compiled.build(params)
            return self._state(compiled, path, params, query, fragment)
        return self._match_path(location.get("path") or "/", query, fragment, label=str(location))

    def _match_path(
        self, path: str, query: dict[str, str], fragment: str, *, label: str
    ) -> RouteState:
        parts = list(_split(path))
        for compiled in self._routes:
            params = compiled.match(parts)
            if params is not None:
                return self._state(compiled, path, params, query, fragment)
        raise RouteNotFound(label)

    def _state(
        self,
        compiled: _CompiledRoute,
        path: str,
        params: dict[str, str],
        query: dict[str, str],
        fragment: str,
    ) -> RouteState:
        meta: dict[str, Any] = {}
        for record in compiled.chain:
            meta.update(record.meta)
        full_path = path
        if query:
            full_path = f"{full_path}?{urlencode(query)}"
        full_path += fragment
        return RouteState(
            path=path,
            name=compiled.record.name,
            params=MappingProxyType(params),
            query=MappingProxyType(query),
            hash=fragment,
            full_path=full_path,
            meta=MappingProxyType(meta),
            matched=compiled.chain,
        )


def _split(path: str) -> tuple[str, ...]:
    return tuple(part for part in path.split("/") if part)
