# Copyright 2025 Softwell S.r.l.
# Licensed under the Apache License, Version 2.0

"""UI signals consumed by the navigation pipeline.

The pipeline never reaches into a global application object: the loading
indicator and the layout setter are handed to it explicitly.

``LoadingIndicator``
    ``start()`` and ``finish()``, fire-and-forget. Both must be safe to call
    in any state (finishing a stopped indicator is a no-op).

``LayoutSetter``
    ``set_layout(name)`` selects the application-wide layout.

``LoadingBar`` and ``LayoutState`` are the default in-memory
implementations; they keep their state and log transitions.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from collections.abc import Callable

__all__ = ["LoadingIndicator", "LayoutSetter", "LoadingBar", "LayoutState"]

logger = logging.getLogger("genro_navigation.signals")


class LoadingIndicator(ABC):
    """Global loading indicator driven by navigations."""

    @abstractmethod
    def start(self) -> None:
        """Show the indicator."""
        ...

    @abstractmethod
    def finish(self) -> None:
        """Hide the indicator. Must be idempotent."""
        ...


class LayoutSetter(ABC):
    """Receiver of the layout chosen by the destination view."""

    @abstractmethod
    def set_layout(self, name: str) -> None:
        """Select the application layout (empty string means default)."""
        ...


class LoadingBar(LoadingIndicator):
    """In-memory loading indicator.

    Attributes:
        running: True between ``start()`` and ``finish()``.
    """

    __slots__ = ("running", "_listeners")

    def __init__(self) -> None:
        self.running = False
        self._listeners: list[Callable[[bool], None]] = []

    def subscribe(self, listener: Callable[[bool], None]) -> None:
        """Call ``listener(running)`` on every state change."""
        self._listeners.append(listener)

    def start(self) -> None:
        if self.running:
            return
        self.running = True
        logger.debug("loading started")
        self._notify()

    def finish(self) -> None:
        if not self.running:
            return
        self.running = False
        logger.debug("loading finished")
        self._notify()

    def _notify(self) -> None:
        for listener in self._listeners:
            listener(self.running)


class LayoutState(LayoutSetter):
    """In-memory layout holder.

    Attributes:
        layout: Current layout name ("" for the default layout).
    """

    __slots__ = ("layout",)

    def __init__(self, layout: str = "") -> None:
        self.layout = layout

    def set_layout(self, name: str) -> None:
        if name != self.layout:
            logger.debug("layout %r -> %r", self.layout, name)
        self.layout = name
