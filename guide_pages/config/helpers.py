"""Utility helpers shared by the guide configuration loader."""

from __future__ import annotations

import typing as typ
from pathlib import Path

from .models import SiteConfigError, ThemeConfig


def _optional_str(value: object | None) -> str | None:
    """Return a stripped string value or None when empty."""
    if value is None:
        return None
    text = str(value).strip()
    return text or None


def _require_url(section: typ.Mapping[str, typ.Any], key: str) -> str:
    """Return a non-empty URL from ``section`` or raise SiteConfigError."""
    value = _optional_str(section.get(key))
    if not value:
        msg = f"'links.{key}' must be a non-empty URL."
        raise SiteConfigError(msg)
    return value


def _resolve_path(value: object, base_dir: Path) -> Path:
    """Return ``value`` as a Path, anchoring relative paths at ``base_dir``."""
    path = Path(str(value)).expanduser()
    if path.is_absolute():
        return path
    return base_dir / path


def _parse_bool(value: object, *, key: str) -> bool:
    """Accept YAML booleans only, rejecting truthy strings like ``"no"``."""
    match value:
        case bool():
            return value
        case None:
            return False
        case _:
            msg = f"'{key}' must be true or false, got {value!r}."
            raise SiteConfigError(msg)


def _build_theme_config(payload: typ.Mapping[str, typ.Any]) -> ThemeConfig:
    """Build a ThemeConfig instance from the provided mapping payload."""
    base = ThemeConfig()
    return ThemeConfig(
        site_name=payload.get("site_name", base.site_name),
        banner_eyebrow=payload.get("banner_eyebrow", base.banner_eyebrow),
        page_title_suffix=payload.get("page_title_suffix", base.page_title_suffix),
        footer_note=payload.get("footer_note", base.footer_note),
    )


__all__ = [
    "_build_theme_config",
    "_optional_str",
    "_parse_bool",
    "_require_url",
    "_resolve_path",
]
