"""Build and render the guide index landing page.

This module takes the guides rendered during a build and produces
``public/guides/index.html`` (or the configured output path) listing each one
with its summary. Entries keep the order the generator rendered them in,
which is the sorted order of the guide source files.

>>> from pathlib import Path
>>> from guide_pages.config import LinkConfig, SiteConfig
>>> from guide_pages.guide_index import GuideIndexBuilder
>>> links = LinkConfig("https://ex.invalid", "https://repo.invalid")
>>> site = SiteConfig(links=links)
>>> GuideIndexBuilder(site).run([])  # doctest: +SKIP
PosixPath('public/guides/index.html')
"""

from __future__ import annotations

import dataclasses as dc
import os
import typing as typ
from pathlib import Path

from jinja2 import Environment, FileSystemLoader

from ._constants import INDEX_TEMPLATE

if typ.TYPE_CHECKING:  # pragma: no cover - import for type hints only
    import collections.abc as cabc

    from .config import SiteConfig


@dc.dataclass(frozen=True, slots=True)
class IndexEntry:
    """One rendered guide listed on the index page."""

    title: str
    output_path: Path
    summary: str | None = None


class GuideIndexBuilder:
    """Render a landing page enumerating rendered guides."""

    def __init__(
        self, site_config: SiteConfig, *, templates_dir: Path | None = None
    ) -> None:
        """Initialize the guide index builder.

        Parameters
        ----------
        site_config : SiteConfig
            Parsed site configuration; ``index_output`` selects the target
            file and ``theme`` supplies the banner text.
        templates_dir : Path, optional
            Directory containing the Jinja templates. Defaults to the
            ``guide_pages/templates`` directory when ``None``.
        """
        self.site_config = site_config
        self.templates_dir = templates_dir or Path(__file__).parent / "templates"
        self.env = Environment(
            loader=FileSystemLoader(str(self.templates_dir)),
            autoescape=True,
            trim_blocks=True,
            lstrip_blocks=True,
            keep_trailing_newline=True,
        )
        self.template = self.env.get_template(INDEX_TEMPLATE)

    def run(self, entries: cabc.Sequence[IndexEntry]) -> Path | None:
        """Render the index HTML file, returning its path or None when disabled."""
        output_path = self.site_config.index_output
        if output_path is None:
            return None
        output_path.parent.mkdir(parents=True, exist_ok=True)
        html = self.render(entries)
        output_path.write_text(html, encoding="utf-8")
        return output_path

    def render(self, entries: cabc.Sequence[IndexEntry]) -> str:
        """Return the index HTML for ``entries`` without writing it."""
        index_output = self.site_config.index_output
        relative_to = (
            index_output.parent if index_output else self.site_config.output_dir
        )
        context = {
            "theme": self.site_config.theme,
            "entries": [
                {
                    "title": entry.title,
                    "summary": entry.summary,
                    "href": _relativize(entry.output_path, relative_to),
                }
                for entry in entries
            ],
        }
        html = self.template.render(**context)
        if not html.endswith("\n"):
            html += "\n"
        return html


def _relativize(target: Path, relative_to: Path) -> str:
    """Return the POSIX-relative path from ``relative_to`` to ``target``."""
    try:
        # Path.relative_to rejects non-parent relationships; relpath does not.
        rel_path = Path(os.path.relpath(target, start=relative_to))
    except ValueError:  # pragma: no cover - different drives
        return target.as_posix()
    return rel_path.as_posix()


__all__ = ["GuideIndexBuilder", "IndexEntry"]
