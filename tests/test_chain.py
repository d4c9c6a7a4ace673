# Copyright 2025 Softwell S.r.l.
# Licensed under the Apache License, Version 2.0

"""Tests for the middleware chain executor."""

from __future__ import annotations

import pytest

from genro_navigation import (
    CONTINUE,
    ConfigurationError,
    Continue,
    LoadingBar,
    MiddlewareChain,
    MiddlewareRegistry,
    Redirect,
    RouteState,
    ViewDefinition,
    collect_middleware,
)

TO = RouteState(path="/admin", full_path="/admin")
FROM = RouteState()


def _recording_registry(calls: list[str], **outcomes):
    """Registry of handlers appending their name; ``outcomes`` maps name -> result."""
    registry = MiddlewareRegistry()
    for name in ("a", "b", "c", "d"):

        def handler(to, from_, _name=name):
            calls.append(_name)
            return outcomes.get(_name)

        registry.register(handler, name=name)
    return registry.freeze()


def test_collect_middleware_order():
    views = [
        ViewDefinition(middleware=["outer1", "outer2"]),
        ViewDefinition(),
        ViewDefinition(middleware="inner"),
    ]
    assert collect_middleware(["g1", "g2"], views) == ["g1", "g2", "outer1", "outer2", "inner"]


def test_collect_middleware_does_not_mutate_globals():
    defaults = ["g"]
    collect_middleware(defaults, [ViewDefinition(middleware="x")])
    assert defaults == ["g"]


@pytest.mark.asyncio
async def test_runs_in_order_and_completes_without_arguments():
    calls: list[str] = []
    completions: list[tuple] = []
    chain = MiddlewareChain(_recording_registry(calls))

    await chain.run(["a", "b", "c"], TO, FROM, lambda *args: completions.append(args))

    assert calls == ["a", "b", "c"]
    assert completions == [()]


@pytest.mark.asyncio
async def test_redirect_skips_remaining_middleware():
    calls: list[str] = []
    completions: list[tuple] = []
    chain = MiddlewareChain(_recording_registry(calls, b=Redirect("/login")))

    await chain.run(["a", "b", "c", "d"], TO, FROM, lambda *args: completions.append(args))

    assert calls == ["a", "b"]
    assert completions == [("/login",)]


@pytest.mark.asyncio
async def test_redirect_payload_is_forwarded_unchanged():
    payload = {"name": "login", "query": {"next": "/admin"}}
    calls: list[str] = []
    chain = MiddlewareChain(_recording_registry(calls, a=Redirect(payload)))

    received = await chain.run(["a"], TO, FROM, lambda *args: args)

    assert received[0] is payload


@pytest.mark.asyncio
async def test_unknown_name_raises_before_any_handler():
    calls: list[str] = []
    chain = MiddlewareChain(_recording_registry(calls))

    with pytest.raises(ConfigurationError, match=r"Undefined middleware \[missing\]"):
        await chain.run(["a", "b", "missing"], TO, FROM, lambda *args: None)

    assert calls == []


@pytest.mark.asyncio
async def test_indicator_finished_before_completion_on_abort():
    events: list[str] = []
    bar = LoadingBar()
    bar.subscribe(lambda running: events.append("start" if running else "finish"))
    bar.start()
    chain = MiddlewareChain(_recording_registry([], a=Redirect(False)), indicator=bar)

    await chain.run(["a", "b"], TO, FROM, lambda *args: events.append(f"complete{args}"))

    assert events == ["start", "finish", "complete(False,)"]


@pytest.mark.asyncio
async def test_indicator_untouched_without_abort():
    bar = LoadingBar()
    bar.start()
    chain = MiddlewareChain(_recording_registry([]), indicator=bar)

    await chain.run(["a"], TO, FROM, lambda *args: None)

    assert bar.running is True


@pytest.mark.asyncio
async def test_async_handlers_run_one_at_a_time():
    events: list[str] = []

    async def slow(to, from_):
        events.append("slow:start")
        events.append("slow:end")
        return CONTINUE

    async def fast(to, from_):
        events.append("fast")

    registry = MiddlewareRegistry({"slow": slow, "fast": fast}).freeze()
    outcome = await MiddlewareChain(registry).run(["slow", "fast"], TO, FROM)

    assert events == ["slow:start", "slow:end", "fast"]
    assert isinstance(outcome, Continue)


@pytest.mark.asyncio
async def test_handlers_can_be_given_directly():
    seen: list[str] = []

    def inline(to, from_):
        seen.append(to.path)

    outcome = await MiddlewareChain(MiddlewareRegistry()).run([inline], TO, FROM)

    assert seen == ["/admin"]
    assert outcome == CONTINUE


@pytest.mark.asyncio
async def test_returns_outcome_without_callback():
    chain = MiddlewareChain(_recording_registry([], c=Redirect("/x")))
    assert await chain.run(["a", "c"], TO, FROM) == Redirect("/x")
    assert await chain.run([], TO, FROM) == CONTINUE


@pytest.mark.asyncio
async def test_async_completion_is_awaited():
    async def complete(*args):
        return "done"

    assert await MiddlewareChain(MiddlewareRegistry()).run([], TO, FROM, complete) == "done"


@pytest.mark.asyncio
async def test_unexpected_return_value():
    registry = MiddlewareRegistry({"bad": lambda to, from_: "/login"}).freeze()
    with pytest.raises(TypeError, match="bad"):
        await MiddlewareChain(registry).run(["bad"], TO, FROM)


@pytest.mark.asyncio
async def test_same_chain_is_reusable():
    calls: list[str] = []
    chain = MiddlewareChain(_recording_registry(calls))
    sequence = ["a", "b"]

    await chain.run(sequence, TO, FROM)
    await chain.run(sequence, TO, FROM)

    assert calls == ["a", "b", "a", "b"]
    assert sequence == ["a", "b"]
