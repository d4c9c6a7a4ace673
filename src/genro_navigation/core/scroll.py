"""Scroll policy.

``scroll_behavior(to, from_, saved_position, views=None)`` decides where the
page scrolls after a navigation, in order of precedence:

1. a saved position (history traversal), even an empty one, is returned
   unchanged;
2. a fragment on the destination targets the matching element:
   ``{"selector": "#section"}``;
3. an innermost view with ``scroll_to_top=False`` keeps the position: ``{}``;
4. otherwise the origin ``{"x": 0, "y": 0}``.

The function is pure. When ``views`` is not given, the destination's
matched references are inspected; deferred loaders are not invoked and
count as "scroll to top".
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from typing import Any

from .location import RouteState
from .resolver import is_loader
from .view import ViewDefinition

__all__ = ["scroll_behavior"]


def scroll_behavior(
    to: RouteState,
    from_: RouteState | None,
    saved_position: Mapping[str, Any] | None,
    views: Sequence[Any] | None = None,
) -> Mapping[str, Any]:
    """Return the scroll target for a navigation to ``to``."""
    if saved_position is not None:
        return saved_position

    if to.hash:
        return {"selector": to.hash}

    candidates = to.views() if views is None else views
    if candidates and not _scrolls_to_top(candidates[-1]):
        return {}

    return {"x": 0, "y": 0}


def _scrolls_to_top(view: Any) -> bool:
    if isinstance(view, ViewDefinition):
        return view.scroll_to_top
    if is_loader(view):
        return True
    return ViewDefinition.from_object(view).scroll_to_top
