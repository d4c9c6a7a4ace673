# Copyright 2025 Softwell S.r.l.
# Licensed under the Apache License, Version 2.0

"""Tests for route descriptors and RouteTable matching."""

from __future__ import annotations

import pytest

from genro_navigation import RouteDescriptor, RouteNotFound, RouteState, RouteTable, ViewDefinition

HOME = ViewDefinition(name="home")
ADMIN = ViewDefinition(name="admin")
ITEMS = ViewDefinition(name="items")
EDIT = ViewDefinition(name="edit")


def _table():
    return RouteTable(
        [
            RouteDescriptor("/", name="home", views=HOME),
            RouteDescriptor(
                "/admin",
                name="admin",
                views=ADMIN,
                meta={"section": "admin"},
                children=[
                    RouteDescriptor("items", name="adminItems", views=ITEMS),
                    RouteDescriptor(
                        "items/:slug", name="adminItemsEdit", views=EDIT, meta={"edit": True}
                    ),
                ],
            ),
            RouteDescriptor("/docs/*", name="docs", views=HOME),
        ]
    )


def test_descriptor_normalises_fields():
    record = RouteDescriptor("/x", views=HOME, children=[])
    assert record.views == (HOME,)
    assert record.children == ()
    with pytest.raises(TypeError):
        record.meta["a"] = 1  # type: ignore[index]


def test_root_path():
    state = _table().resolve("/")
    assert state.name == "home"
    assert state.views() == (HOME,)


def test_nested_routes_match_outer_to_inner():
    state = _table().resolve("/admin/items")
    assert state.name == "adminItems"
    assert [record.name for record in state.matched] == ["admin", "adminItems"]
    assert state.views() == (ADMIN, ITEMS)
    assert state.meta["section"] == "admin"


def test_params_query_and_hash():
    state = _table().resolve("/admin/items/red%20shoes?tab=info&page=2#notes")
    assert state.name == "adminItemsEdit"
    assert dict(state.params) == {"slug": "red shoes"}
    assert dict(state.query) == {"tab": "info", "page": "2"}
    assert state.hash == "#notes"
    assert state.full_path == "/admin/items/red%20shoes?tab=info&page=2#notes"
    assert state.meta == {"section": "admin", "edit": True}


def test_parent_route_alone():
    state = _table().resolve("/admin")
    assert state.views() == (ADMIN,)


def test_catch_all():
    state = _table().resolve("/docs/guide/intro")
    assert state.params["pathMatch"] == "guide/intro"


def test_named_location():
    state = _table().resolve(
        {"name": "adminItemsEdit", "params": {"slug": 7}, "query": {"q": "x"}, "hash": "top"}
    )
    assert state.path == "/admin/items/7"
    assert state.full_path == "/admin/items/7?q=x#top"


def test_path_location_mapping():
    assert _table().resolve({"path": "/admin"}).name == "admin"


def test_route_state_is_accepted():
    state = _table().resolve("/admin/items")
    assert _table().resolve(state).name == "adminItems"


def test_missing_param_for_named_route():
    with pytest.raises(ValueError, match="slug"):
        _table().resolve({"name": "adminItemsEdit"})


def test_unknown_path_and_name():
    with pytest.raises(RouteNotFound):
        _table().resolve("/nowhere")
    with pytest.raises(RouteNotFound) as excinfo:
        _table().resolve({"name": "ghost"})
    assert excinfo.value.location == "ghost"


def test_duplicate_names_rejected():
    with pytest.raises(ValueError, match="Duplicate route name"):
        RouteTable([RouteDescriptor("/a", name="x"), RouteDescriptor("/b", name="x")])


def test_start_state():
    state = RouteState()
    assert state.full_path == "/"
    assert state.views() == ()
    assert state.redirect is None
    assert str(state) == "/"
