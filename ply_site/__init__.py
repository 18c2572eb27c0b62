"""Render directory trees of Markdown and Jinja layouts into static sites.

This package exposes the ``ply`` CLI and the :class:`Site` builder it drives.

Exports
-------
- ``app``: Cyclopts application entry for subcommands.
- ``main``: Convenience function that invokes the Cyclopts app.
- ``Site``: The build pipeline for one configuration.
- ``SiteConfig`` / ``build_site_config``: Build options.

Examples
--------
>>> from ply_site import main
>>> main(["build", "site", "public"])  # doctest: +SKIP
"""

from __future__ import annotations

from .cli import app, main
from .config import SiteConfig, build_site_config
from .site import Site

__all__ = ["Site", "SiteConfig", "app", "build_site_config", "main"]
