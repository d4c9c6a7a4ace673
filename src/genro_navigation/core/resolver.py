"""Component resolver: turns view references into ``ViewDefinition`` objects.

A view reference is either concrete (a ``ViewDefinition``, a mapping, a
module or any object accepted by ``ViewDefinition.from_object``) or a
deferred loader: a zero-argument callable returning a concrete reference,
directly or through an awaitable.

All loaders of one navigation run concurrently; the result keeps the input
order, which mirrors the matched route segments (outermost first). A failing
loader fails the whole resolution: no partial list is ever returned.
"""

from __future__ import annotations

import asyncio
import inspect
import logging
from collections.abc import Mapping, Sequence
from types import ModuleType
from typing import Any

from genro_navigation.exceptions import ResolutionFailure

from .view import ViewDefinition

__all__ = ["is_loader", "resolve_component", "resolve_components"]

logger = logging.getLogger("genro_navigation.resolver")


def is_loader(reference: Any) -> bool:
    """Return True when ``reference`` is a deferred loader rather than a view."""
    if isinstance(reference, (ViewDefinition, Mapping, ModuleType, type)):
        return False
    return callable(reference)


async def resolve_component(reference: Any) -> ViewDefinition:
    """Resolve one view reference.

    Raises:
        ResolutionFailure: If the loader raises or returns an invalid view.
    """
    if not is_loader(reference):
        return ViewDefinition.from_object(reference)
    try:
        loaded = reference()
        if inspect.isawaitable(loaded):
            loaded = await loaded
        return ViewDefinition.from_object(loaded)
    except asyncio.CancelledError:
        raise
    except Exception as exc:
        logger.debug("view loader %r failed: %s", reference, exc)
        raise ResolutionFailure(reference) from exc


async def resolve_components(references: Sequence[Any]) -> list[ViewDefinition]:
    """Resolve every reference concurrently, preserving order.

    Args:
        references: View references, outermost first.

    Returns:
        The concrete view definitions in the same order.

    Raises:
        ResolutionFailure: If any loader fails.
    """
    if not references:
        return []
    return list(await asyncio.gather(*(resolve_component(ref) for ref in references)))
