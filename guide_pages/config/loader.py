"""Load site configuration YAML into typed dataclasses."""

from __future__ import annotations

import typing as typ
from pathlib import Path

from ruamel.yaml import YAML

from .helpers import (
    _build_theme_config,
    _optional_str,
    _parse_bool,
    _require_url,
    _resolve_path,
)
from .models import LinkConfig, SiteConfig, SiteConfigError


def load_site_config(path: Path) -> SiteConfig:
    """Load the YAML configuration describing a guide build.

    Parameters
    ----------
    path : Path
        Filesystem path to the YAML configuration file (for example,
        ``config/guides.yaml``). Relative paths inside the file are resolved
        against the file's directory.

    Returns
    -------
    SiteConfig
        Parsed configuration with link bases, theme, and build paths.

    Raises
    ------
    FileNotFoundError
        If the configuration file does not exist at ``path``.
    TypeError
        If the top-level YAML structure (or one of its sections) is not a
        mapping.
    SiteConfigError
        If ``links.example_base_url`` or ``links.repo_base_url`` is missing or
        empty, or a typed option has the wrong type.
    YAMLError
        If the YAML content cannot be parsed by the underlying loader.

    Examples
    --------
    >>> from pathlib import Path
    >>> from guide_pages.config import load_site_config
    >>> config = load_site_config(Path("config/guides.yaml"))  # doctest: +SKIP
    >>> config.links.repo_base_url  # doctest: +SKIP
    'https://github.com/diesel-rs/diesel/blob/2.2.x'
    """
    if not path.exists():
        msg = f"Configuration file '{path}' not found."
        raise FileNotFoundError(msg)

    loader = YAML(typ="safe")
    loader.version = (1, 2)
    with path.open("r", encoding="utf-8") as handle:
        loaded = loader.load(handle) or {}
    if not isinstance(loaded, dict):
        msg = "Top-level YAML structure must be a mapping."
        raise TypeError(msg)
    raw: dict[str, typ.Any] = dict(loaded)
    defaults = _section(raw, "defaults")
    links_raw = _section(raw, "links")
    theme_raw = _section(raw, "theme")

    base_dir = path.parent
    links = LinkConfig(
        example_base_url=_require_url(links_raw, "example_base_url"),
        repo_base_url=_require_url(links_raw, "repo_base_url"),
    )
    index_raw = defaults.get("index_output", "public/guides/index.html")
    index_output = (
        _resolve_path(index_raw, base_dir) if _optional_str(index_raw) else None
    )

    return SiteConfig(
        links=links,
        theme=_build_theme_config(theme_raw),
        source_dir=_resolve_path(defaults.get("source_dir", "guides"), base_dir),
        output_dir=_resolve_path(
            defaults.get("output_dir", "public/guides"), base_dir
        ),
        filename_prefix=str(defaults.get("filename_prefix") or ""),
        index_output=index_output,
        highlight=_parse_bool(defaults.get("highlight", False), key="highlight"),
        pygments_style=defaults.get("pygments_style", "monokai"),
    )


def _section(raw: typ.Mapping[str, typ.Any], key: str) -> dict[str, typ.Any]:
    """Return the mapping stored under ``key``, treating a missing key as empty."""
    value = raw.get(key) or {}
    if not isinstance(value, dict):
        msg = f"'{key}' must be a mapping."
        raise TypeError(msg)
    return dict(value)


__all__ = ["load_site_config"]
