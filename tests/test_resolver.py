# Copyright 2025 Softwell S.r.l.
# Licensed under the Apache License, Version 2.0

"""Tests for view resolution."""

from __future__ import annotations

import asyncio
from types import SimpleNamespace

import pytest

from genro_navigation import ResolutionFailure, ViewDefinition, resolve_components
from genro_navigation.core.resolver import is_loader

A = ViewDefinition(name="A")
B = ViewDefinition(name="B")
C = ViewDefinition(name="C")


async def lazy_a():
    await asyncio.sleep(0.01)
    return A


async def lazy_c():
    return C


def test_is_loader():
    assert is_loader(lazy_a)
    assert is_loader(lambda: A)
    assert not is_loader(A)
    assert not is_loader({"layout": "x"})
    assert not is_loader(SimpleNamespace)
    assert not is_loader(asyncio)


@pytest.mark.asyncio
async def test_resolution_preserves_order():
    views = await resolve_components([lazy_a, B, lazy_c])
    assert [v.name for v in views] == ["A", "B", "C"]
    assert views[1] is B


@pytest.mark.asyncio
async def test_empty_sequence():
    assert await resolve_components([]) == []


@pytest.mark.asyncio
async def test_sync_loader_and_module_style_result():
    views = await resolve_components([lambda: SimpleNamespace(default={"layout": "admin"})])
    assert views[0].layout == "admin"


@pytest.mark.asyncio
async def test_loaders_run_concurrently():
    started: list[str] = []
    release = asyncio.Event()

    async def first():
        started.append("first")
        await release.wait()
        return A

    async def second():
        started.append("second")
        release.set()
        return B

    views = await asyncio.wait_for(resolve_components([first, second]), timeout=1)
    assert started == ["first", "second"]
    assert [v.name for v in views] == ["A", "B"]


@pytest.mark.asyncio
async def test_failing_loader_fails_whole_resolution():
    boom = RuntimeError("chunk missing")

    async def broken():
        raise boom

    with pytest.raises(ResolutionFailure) as excinfo:
        await resolve_components([lazy_c, broken])
    assert excinfo.value.__cause__ is boom
    assert excinfo.value.reference is broken
    assert "broken" in str(excinfo.value)


@pytest.mark.asyncio
async def test_loader_returning_invalid_view():
    with pytest.raises(ResolutionFailure):
        await resolve_components([lambda: {"loading": "maybe"}])
