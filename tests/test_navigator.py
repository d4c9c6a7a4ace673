# Copyright 2025 Softwell S.r.l.
# Licensed under the Apache License, Version 2.0

"""Tests for the Navigator driver."""

from __future__ import annotations

import asyncio

import pytest

from genro_navigation import (
    LayoutState,
    LoadingBar,
    MiddlewareRegistry,
    NavigationError,
    NavigationGuard,
    Navigator,
    Redirect,
    RouteDescriptor,
    RouteNotFound,
    ViewDefinition,
)


def immediate(callback):
    callback()


def members_only(to, from_):
    if to.meta.get("members_only"):
        return Redirect({"name": "login", "query": {"next": to.path}})


def _navigator(*routes, middleware=None, global_middleware=("members",), **kwargs):
    registry = MiddlewareRegistry({"members": members_only, **(middleware or {})}).freeze()
    guard = NavigationGuard(
        registry,
        LoadingBar(),
        LayoutState(),
        global_middleware=global_middleware,
        next_tick=immediate,
    )
    default_routes = (
        RouteDescriptor("/", name="home", views=ViewDefinition(name="home", layout="basic")),
        RouteDescriptor("/login", name="login", views=ViewDefinition(name="login", layout="auth")),
        RouteDescriptor(
            "/admin",
            name="admin",
            views=ViewDefinition(name="admin", layout="admin"),
            meta={"members_only": True},
        ),
    )
    return Navigator(routes or default_routes, guard, **kwargs)


@pytest.mark.asyncio
async def test_push_commits_route():
    navigator = _navigator()
    result = await navigator.push("/")

    assert navigator.current.name == "home"
    assert navigator.result is result
    assert navigator.guard.layout.layout == "basic"
    assert navigator.guard.indicator.running is False
    assert navigator.scroll_target == {"x": 0, "y": 0}
    assert [state.name for state in navigator.history] == ["home"]


@pytest.mark.asyncio
async def test_middleware_redirect_is_followed():
    navigator = _navigator()
    await navigator.push("/")
    await navigator.push("/admin")

    assert navigator.current.name == "login"
    assert dict(navigator.current.query) == {"next": "/admin"}
    assert navigator.guard.layout.layout == "auth"
    assert [state.name for state in navigator.history] == ["home", "login"]


@pytest.mark.asyncio
async def test_abort_keeps_current_route():
    navigator = _navigator(
        RouteDescriptor("/", views=ViewDefinition()),
        RouteDescriptor("/locked", views=ViewDefinition(middleware="deny")),
        middleware={"deny": lambda to, from_: Redirect(False)},
    )
    await navigator.push("/")
    result = await navigator.push("/locked")

    assert result is not None and result.aborted
    assert navigator.current.path == "/"
    assert len(navigator.history) == 1
    assert navigator.guard.indicator.running is False


@pytest.mark.asyncio
async def test_exception_payload_is_raised():
    error = PermissionError("nope")
    navigator = _navigator(
        RouteDescriptor("/fail", views=ViewDefinition(middleware="fail")),
        middleware={"fail": lambda to, from_: Redirect(error)},
    )
    with pytest.raises(PermissionError):
        await navigator.push("/fail")


@pytest.mark.asyncio
async def test_redirect_loop_is_bounded():
    navigator = _navigator(
        RouteDescriptor("/a", views=ViewDefinition(middleware="to_b")),
        RouteDescriptor("/b", views=ViewDefinition(middleware="to_a")),
        middleware={
            "to_b": lambda to, from_: Redirect("/b"),
            "to_a": lambda to, from_: Redirect("/a"),
        },
        max_redirects=3,
    )
    with pytest.raises(NavigationError, match="Too many redirects"):
        await navigator.push("/a")


@pytest.mark.asyncio
async def test_descriptor_redirect():
    navigator = _navigator(
        RouteDescriptor("/old", redirect="/new"),
        RouteDescriptor("/new", name="new", views=ViewDefinition()),
    )
    await navigator.push("/old")
    assert navigator.current.name == "new"


@pytest.mark.asyncio
async def test_unknown_location():
    with pytest.raises(RouteNotFound):
        await _navigator().push("/missing")


@pytest.mark.asyncio
async def test_replace_swaps_history_entry():
    navigator = _navigator()
    await navigator.push("/")
    await navigator.replace("/login")
    assert [state.name for state in navigator.history] == ["login"]


@pytest.mark.asyncio
async def test_back_restores_saved_position():
    navigator = _navigator(
        RouteDescriptor("/list", name="list", views=ViewDefinition()),
        RouteDescriptor("/detail", name="detail", views=ViewDefinition()),
    )
    await navigator.push("/list")
    navigator.save_position({"x": 0, "y": 640})
    await navigator.push("/detail")

    await navigator.back()

    assert navigator.current.name == "list"
    assert navigator.scroll_target == {"x": 0, "y": 640}
    assert [state.name for state in navigator.history] == ["list"]


@pytest.mark.asyncio
async def test_back_without_history():
    navigator = _navigator()
    await navigator.push("/")
    assert await navigator.back() is None


@pytest.mark.asyncio
async def test_hash_scroll_target():
    navigator = _navigator()
    await navigator.push("/login#form")
    assert navigator.scroll_target == {"selector": "#form"}


@pytest.mark.asyncio
async def test_async_data_available_after_commit():
    async def load(ctx):
        return {"slug": ctx.params["slug"]}

    navigator = _navigator(
        RouteDescriptor("/items/:slug", views=ViewDefinition(data={"x": 1}, async_data=load)),
    )
    await navigator.push("/items/hat")
    assert navigator.result.data == {"x": 1, "slug": "hat"}


@pytest.mark.asyncio
async def test_superseded_navigation_is_dropped():
    release = asyncio.Event()

    async def slow(to, from_):
        await release.wait()

    navigator = _navigator(
        RouteDescriptor("/slow", name="slow", views=ViewDefinition(middleware="slow")),
        RouteDescriptor("/fast", name="fast", views=ViewDefinition()),
        middleware={"slow": slow},
    )

    pending = asyncio.ensure_future(navigator.push("/slow"))
    await asyncio.sleep(0)
    await navigator.push("/fast")
    release.set()
    stale = await pending

    assert stale is None
    assert navigator.current.name == "fast"
    assert [state.name for state in navigator.history] == ["fast"]
    assert navigator.guard.indicator.running is False


@pytest.mark.asyncio
async def test_superseded_navigation_does_not_leave_indicator_running():
    release = asyncio.Event()

    async def load_slow():
        await release.wait()
        return ViewDefinition(name="slow")

    registry = MiddlewareRegistry().freeze()
    guard = NavigationGuard(registry, LoadingBar(), LayoutState())
    navigator = Navigator(
        [
            RouteDescriptor("/slow", name="slow", views=load_slow),
            RouteDescriptor("/fast", name="fast", views=ViewDefinition(name="fast")),
        ],
        guard,
    )

    pending = asyncio.ensure_future(navigator.push("/slow"))
    await asyncio.sleep(0)
    await navigator.push("/fast")
    assert guard.indicator.running is False

    release.set()
    assert await pending is None
    for _ in range(5):
        await asyncio.sleep(0)

    assert navigator.current.name == "fast"
    assert guard.indicator.running is False
