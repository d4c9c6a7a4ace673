"""Middleware package for Genro Navigation.

This package contains built-in middleware.

Note: Do not import concrete middleware here to keep imports side-effect free.
Concrete middleware modules (logging, allow) self-register when imported
via the main genro_navigation package.
"""

__all__: list[str] = []
