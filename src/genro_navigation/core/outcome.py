"""Middleware outcomes.

A middleware handler answers each navigation with one of two values:

- ``Continue``: let the next middleware run (``None`` means the same).
- ``Redirect(payload)``: stop the chain. The payload is handed unchanged to
  the host router, which reads a location as a redirect, ``False`` as an
  abort and an exception as a failed navigation.

``CONTINUE`` is the shared ``Continue`` instance.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

__all__ = ["Continue", "Redirect", "CONTINUE", "as_outcome"]


@dataclass(frozen=True)
class Continue:
    """Proceed with the next middleware."""


@dataclass(frozen=True)
class Redirect:
    """Abort the chain, forwarding ``payload`` to the host router."""

    payload: Any = False


CONTINUE = Continue()


def as_outcome(result: Any, label: Any = None) -> Continue | Redirect:
    """Normalise a handler return value into an outcome.

    Raises:
        TypeError: If ``result`` is not None, Continue or Redirect.
    """
    if result is None:
        return CONTINUE
    if isinstance(result, (Continue, Redirect)):
        return result
    raise TypeError(
        f"Middleware {label!r} returned {type(result).__name__}; "
        "expected None, Continue or Redirect"
    )
