"""Typed dataclasses describing guide site configuration structures."""

from __future__ import annotations

import dataclasses as dc
from pathlib import Path


class SiteConfigError(ValueError):
    """Raised when the site configuration is invalid or incomplete."""


@dc.dataclass(frozen=True, slots=True)
class LinkConfig:
    """Base URLs used to resolve ``example_file`` and ``repo_url`` references."""

    example_base_url: str
    repo_base_url: str


@dc.dataclass(slots=True)
class ThemeConfig:
    """Visual theming applied to generated guide pages."""

    site_name: str = "Guides"
    banner_eyebrow: str = "Guide"
    page_title_suffix: str = "Guides"
    footer_note: str = ""


@dc.dataclass(slots=True)
class SiteConfig:
    """Fully resolved settings for one guide build.

    Attributes
    ----------
    links : LinkConfig
        Base URLs for symbolic references.
    theme : ThemeConfig
        Banner and title text shared by every page.
    source_dir : Path
        Directory scanned for ``*.guide`` files.
    output_dir : Path
        Directory receiving rendered HTML.
    filename_prefix : str
        Prefix prepended to each output file name.
    index_output : Path | None
        Where the guide index is written; ``None`` disables it.
    highlight : bool
        Highlight code with Pygments instead of emitting escaped text.
    pygments_style : str
        Pygments style used when ``highlight`` is enabled.
    """

    links: LinkConfig
    theme: ThemeConfig = dc.field(default_factory=ThemeConfig)
    source_dir: Path = Path("guides")
    output_dir: Path = Path("public/guides")
    filename_prefix: str = ""
    index_output: Path | None = Path("public/guides/index.html")
    highlight: bool = False
    pygments_style: str = "monokai"


__all__ = ["LinkConfig", "SiteConfig", "SiteConfigError", "ThemeConfig"]
