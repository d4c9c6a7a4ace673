# Copyright 2025 Softwell S.r.l.
# Licensed under the Apache License, Version 2.0

"""ViewDefinition - validated capability bundle of a routed view.

A view exposes a few optional capabilities consumed by the navigation
pipeline. They are validated once, when the definition is built, so the
pipeline never probes objects for attributes while navigating.

Fields
------
- ``name``: label used in logs and errors.
- ``middleware``: ordered tuple of middleware names (or handlers). A single
  string is normalised to a one-element tuple.
- ``async_data``: async callable receiving a ``NavigationContext`` and
  returning a mapping (or a bare value, wrapped by the data step).
- ``data``: callable returning the view's static data. A plain mapping is
  accepted and turned into a factory returning a fresh copy.
- ``layout``: layout identifier set on the application before the view
  is shown. ``None`` means "default layout".
- ``loading``: when False the loading indicator is not started.
- ``scroll_to_top``: when False the scroll position is left untouched.
- ``meta``: free-form metadata.
- ``component``: the object the definition was built from, for the view layer.

Example::

    from genro_navigation import ViewDefinition

    async def load(ctx):
        return {"user": ctx.params["id"]}

    profile = ViewDefinition(
        name="profile",
        middleware="logging",
        async_data=load,
        layout="dashboard",
    )

    # Objects following the camelCase module contract are accepted too
    profile = ViewDefinition.from_object(module, meta_title="Profile")
"""

from __future__ import annotations

import inspect
from collections.abc import Callable, Mapping
from types import MappingProxyType
from typing import Any

from genro_toolbox import dictExtract
from pydantic import BaseModel, ConfigDict, Field, field_validator

__all__ = ["ViewDefinition", "VIEW_FIELDS"]

# Attribute name on a view object -> field name on ViewDefinition.
VIEW_FIELDS: dict[str, str] = {
    "name": "name",
    "middleware": "middleware",
    "asyncData": "async_data",
    "async_data": "async_data",
    "data": "data",
    "layout": "layout",
    "loading": "loading",
    "scrollToTop": "scroll_to_top",
    "scroll_to_top": "scroll_to_top",
    "meta": "meta",
}

# Positional arguments the pipeline passes to each callable field.
_CALL_ARGS: dict[str, tuple[Any, ...]] = {"data": (), "async_data": (None,)}


class ViewDefinition(BaseModel):
    """Optional-field schema of a view as seen by the navigation pipeline."""

    model_config = ConfigDict(
        frozen=True,
        arbitrary_types_allowed=True,
        populate_by_name=True,
        extra="forbid",
    )

    name: str | None = None
    middleware: tuple[str | Callable[..., Any], ...] = ()
    async_data: Callable[..., Any] | None = Field(default=None, alias="asyncData")
    data: Callable[[], Mapping[str, Any]] | None = None
    layout: str | None = None
    loading: bool = True
    scroll_to_top: bool = Field(default=True, alias="scrollToTop")
    meta: Mapping[str, Any] = Field(default_factory=dict)
    component: Any = None

    @field_validator("middleware", mode="before")
    @classmethod
    def _normalise_middleware(cls, value: Any) -> Any:
        if value is None:
            return ()
        if isinstance(value, str) or callable(value):
            return (value,)
        return tuple(value)

    @field_validator("data", mode="before")
    @classmethod
    def _normalise_data(cls, value: Any) -> Any:
        if isinstance(value, Mapping):
            frozen = dict(value)
            return lambda: dict(frozen)
        return value

    @field_validator("meta", mode="before")
    @classmethod
    def _default_meta(cls, value: Any) -> Any:
        return {} if value is None else value

    @field_validator("meta", mode="after")
    @classmethod
    def _freeze_meta(cls, value: Mapping[str, Any]) -> Mapping[str, Any]:
        return MappingProxyType(dict(value))

    @classmethod
    def from_object(cls, source: Any, **options: Any) -> ViewDefinition:
        """Build a definition from a mapping, module or plain object.

        A ``default`` attribute (or key) is unwrapped first, the way a module
        exporting its view as default is used. Known attributes are read once;
        missing ones keep their defaults. ``meta_*`` options are folded into
        ``meta``; other options override the probed fields.

        Args:
            source: A ViewDefinition, mapping, module or object.
            **options: Field overrides and ``meta_*`` entries.

        Returns:
            A validated ViewDefinition.

        Raises:
            pydantic.ValidationError: If a field has the wrong type.
            ValueError: If a class exposes ``data`` or ``asyncData`` as an
                instance method, which cannot be called without an instance.
        """
        if isinstance(source, ViewDefinition):
            if not options:
                return source
            fields = {key: getattr(source, key) for key in source.model_fields_set}
            fields["component"] = source.component
        else:
            source = _unwrap_default(source)
            fields = _probe_fields(source)
            fields.setdefault("component", source)
        meta_options = dictExtract(options, "meta_", slice_prefix=True, pop=True)
        if meta_options:
            fields["meta"] = {**dict(fields.get("meta") or {}), **meta_options}
        fields.update(options)
        return cls.model_validate(fields)

    def static_data(self) -> dict[str, Any]:
        """Return a fresh copy of the view's static data."""
        if self.data is None:
            return {}
        return dict(self.data())

    def __repr__(self) -> str:
        return f"ViewDefinition(name={self.name!r})"


def _unwrap_default(source: Any) -> Any:
    if isinstance(source, Mapping):
        default = source.get("default")
        return default if default is not None else source
    default = getattr(source, "default", None)
    return default if default is not None else source


def _probe_fields(source: Any) -> dict[str, Any]:
    fields: dict[str, Any] = {}
    if isinstance(source, Mapping):
        for key, field_name in VIEW_FIELDS.items():
            if key in source and source[key] is not None:
                fields[field_name] = source[key]
        return fields
    for key, field_name in VIEW_FIELDS.items():
        value = getattr(source, key, None)
        if value is not None:
            fields[field_name] = value
    if isinstance(source, type):
        _check_class_callables(source, fields)
    if "name" not in fields:
        label = getattr(source, "__name__", None)
        if isinstance(label, str):
            fields["name"] = label
    return fields


def _check_class_callables(source: type, fields: dict[str, Any]) -> None:
    for field_name, args in _CALL_ARGS.items():
        value = fields.get(field_name)
        if not callable(value) or isinstance(value, Mapping):
            continue
        try:
            signature = inspect.signature(value)
        except (TypeError, ValueError):
            continue
        try:
            signature.bind(*args)
        except TypeError:
            raise ValueError(
                f"{source.__name__}.{field_name} must be a staticmethod or classmethod "
                f"accepting {len(args)} argument(s)"
            ) from None
