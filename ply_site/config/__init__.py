"""Build options for ply sites.

The primary entry point is :func:`build_site_config`, which layers explicit
overrides (usually CLI flags) over an optional ``ply.yaml`` file and the
defaults declared on :class:`SiteConfig`.

Examples
--------
>>> from pathlib import Path
>>> from ply_site.config import build_site_config
>>> config = build_site_config(Path("site"), Path("public"), pretty_urls=True)
>>> config.pretty_urls
True
>>> config.keep_links
False
"""

from .loader import build_site_config, load_site_config
from .models import OPTION_NAMES, SiteConfig

__all__ = ["OPTION_NAMES", "SiteConfig", "build_site_config", "load_site_config"]
