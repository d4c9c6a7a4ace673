# Copyright 2025 Softwell S.r.l.
# Licensed under the Apache License, Version 2.0

"""AllowMiddleware - capability gate for navigations.

Routes may require capabilities through ``meta["allow_rule"]``; the rule is
evaluated against the capabilities the application store declares. A
navigation that does not satisfy the rule is redirected to the configured
``fallback`` (``False`` aborts it).

Capabilities come from ``store.capabilities`` (a set, or a comma-separated
string). A store without capabilities satisfies only routes without a rule.

Usage::

    from genro_navigation import MiddlewareRegistry, RouteDescriptor

    registry = MiddlewareRegistry().use("allow", fallback="/unavailable").freeze()
    routes = [
        RouteDescriptor("/pay", views=Pay, meta={"allow_rule": "stripe|paypal"}),
    ]
    guard = NavigationGuard(registry, bar, layout, store=store,
                            global_middleware=["allow"])

Rule syntax (on route meta allow_rule):
    - ``|`` : OR (store must have at least one)
    - ``&`` : AND (store must have all)
    - ``!`` : NOT (store must not have)
    - ``()`` : grouping

NOTE: Comma is NOT allowed in allow_rule. Use ``|`` for OR, ``&`` for AND.
"""

from __future__ import annotations

from typing import Any

from genro_toolbox import tags_match

from genro_navigation.core.outcome import CONTINUE, Redirect
from genro_navigation.core.registry import MiddlewareRegistry

from ._base_middleware import BaseMiddleware

__all__ = ["AllowMiddleware"]


class AllowMiddleware(BaseMiddleware):
    """Redirect navigations whose route rule the store's capabilities do not satisfy."""

    middleware_code = "allow"
    middleware_description = "Capability-based navigation gate"

    __slots__ = ("store",)

    def __init__(self, *, store: Any = None, **cfg: Any):
        self.store = store
        super().__init__(**cfg)

    def configure(  # type: ignore[override]
        self,
        enabled: bool = True,
        fallback: str | bool = False,
        meta_key: str = "allow_rule",
    ):
        """Configure the capability gate.

        Args:
            enabled: Enable/disable the middleware entirely.
            fallback: Redirect target when the rule fails (False aborts).
            meta_key: Route meta key holding the rule.
        """
        pass  # Storage handled by wrapper

    def capabilities(self) -> set[str]:
        """Return the capabilities currently declared by the store."""
        values = getattr(self.store, "capabilities", None) or set()
        if isinstance(values, str):
            return {v.strip() for v in values.split(",") if v.strip()}
        return set(values)

    def handle(self, to, from_):
        cfg = self.configuration()
        rule = to.meta.get(cfg["meta_key"], "")
        if not rule:
            return CONTINUE
        if "," in rule:
            raise ValueError(
                f"Comma not allowed in allow_rule: {rule!r}. "
                "Use '|' for OR (e.g., 'stripe|paypal') or '&' for AND (e.g., 'redis&jwt')."
            )
        if tags_match(rule, self.capabilities()):
            return CONTINUE
        return Redirect(cfg["fallback"])


MiddlewareRegistry.register_builtin(AllowMiddleware)
