"""Load and validate site configuration YAML for guide builds.

This subpackage parses the project's ``guides.yaml`` file and produces typed
dataclasses (:class:`SiteConfig`, :class:`LinkConfig`, :class:`ThemeConfig`)
that the page renderer and batch generator consume. The primary entry point
is :func:`load_site_config`, which checks that both link base URLs are
present, applies defaults, and anchors relative paths at the config file.

Examples
--------
>>> from pathlib import Path
>>> from guide_pages.config import load_site_config
>>> site = load_site_config(Path("config/guides.yaml"))  # doctest: +SKIP
>>> site.source_dir.name  # doctest: +SKIP
'guides'
"""

from .loader import load_site_config
from .models import LinkConfig, SiteConfig, SiteConfigError, ThemeConfig

__all__ = [
    "LinkConfig",
    "SiteConfig",
    "SiteConfigError",
    "ThemeConfig",
    "load_site_config",
]
