"""Utilities for rendering templated documentation guides into HTML.

This package exposes the CLI entry points used by ``guides render`` and
``guides check``, along with the parser and renderer they are built on.

Exports
-------
- ``app``: Cyclopts application entry for subcommands.
- ``main``: Convenience function that invokes the Cyclopts app.

Examples
--------
>>> from guide_pages import main
>>> main()  # doctest: +SKIP
>>> from guide_pages import app
>>> app.name[0]
'guides'
"""

from __future__ import annotations

from .cli import app, main

__all__ = ["app", "main"]
