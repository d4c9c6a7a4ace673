"""Data injection step.

Before a view is committed its optional ``async_data`` hook is awaited and
the result is laid over the view's static data: keys from the hook win.

Every navigation starts again from the view's static baseline
(``view.static_data()``), so visiting the same route twice never
accumulates data from the previous visit. The view itself is never mutated:
the merged mapping is returned to the caller.

A result that is not a mapping is wrapped as ``{data_key: result}``; a
``None`` result adds nothing.
"""

from __future__ import annotations

import asyncio
import inspect
import logging
from collections.abc import Mapping
from typing import Any

from genro_navigation.exceptions import DataFetchFailure

from .context import NavigationContext
from .view import ViewDefinition

__all__ = ["DEFAULT_DATA_KEY", "inject_data", "merge_data"]

DEFAULT_DATA_KEY = "data"

logger = logging.getLogger("genro_navigation.data")


def merge_data(
    static: Mapping[str, Any], result: Any, data_key: str = DEFAULT_DATA_KEY
) -> dict[str, Any]:
    """Overlay an ``async_data`` result on static data, returning a new dict."""
    merged = dict(static)
    if result is None:
        return merged
    if not isinstance(result, Mapping):
        result = {data_key: result}
    merged.update(result)
    return merged


async def inject_data(
    view: ViewDefinition,
    context: NavigationContext,
    *,
    data_key: str = DEFAULT_DATA_KEY,
) -> dict[str, Any] | None:
    """Fetch and merge the view's async data.

    Args:
        view: The innermost resolved view.
        context: Navigation context passed to the hook.
        data_key: Key used to wrap non-mapping results.

    Returns:
        The merged data, or None when the view has no ``async_data`` hook.

    Raises:
        DataFetchFailure: If the hook raises; nothing is merged.
    """
    if view.async_data is None:
        return None
    try:
        result = view.async_data(context)
        if inspect.isawaitable(result):
            result = await result
    except asyncio.CancelledError:
        raise
    except Exception as exc:
        logger.debug("async_data of %r failed: %s", view.name, exc)
        raise DataFetchFailure(view.name) from exc
    return merge_data(view.static_data(), result, data_key)
