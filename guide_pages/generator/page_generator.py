"""High-level orchestration for guide page generation.

This module discovers ``*.guide`` sources, renders each one independently
with :class:`~guide_pages.generator.page_renderer.PageRenderer`, and writes
the HTML plus the guide index. A guide that fails to parse or render is
recorded in the returned :class:`BuildReport` and the remaining guides still
render.

Example
-------
>>> from pathlib import Path
>>> from guide_pages.config import load_site_config
>>> from guide_pages.generator import GuideGenerator
>>> config = load_site_config(Path("config/guides.yaml"))  # doctest: +SKIP
>>> report = GuideGenerator(config).run()  # doctest: +SKIP
>>> report.written  # doctest: +SKIP
[PosixPath('public/guides/all_about_inserts.html'), ...]
"""

from __future__ import annotations

import dataclasses as dc
import logging
import typing as typ
from pathlib import Path

from guide_pages._constants import GUIDE_SUFFIX, OUTPUT_FILENAME_TEMPLATE
from guide_pages.content_model import load_document
from guide_pages.errors import GuideError
from guide_pages.guide_index import GuideIndexBuilder, IndexEntry

from .page_renderer import PageRenderer

if typ.TYPE_CHECKING:
    from guide_pages.config import SiteConfig

    from .models import RenderedPage

logger = logging.getLogger(__name__)


@dc.dataclass(frozen=True, slots=True)
class BuildFailure:
    """A guide that could not be rendered, with the error that stopped it."""

    source: Path
    error: GuideError

    def describe(self) -> str:
        """Return ``source:line: message`` for user-facing reports."""
        return str(self.error)


@dc.dataclass(slots=True)
class BuildReport:
    """Outcome of rendering every guide in the source directory.

    Attributes
    ----------
    written : list[Path]
        HTML files produced (or that would be produced, for a check run),
        in source order.
    failures : list[BuildFailure]
        Guides that failed, in source order.
    index_path : Path | None
        Rendered guide index, when one was written.
    """

    written: list[Path] = dc.field(default_factory=list)
    failures: list[BuildFailure] = dc.field(default_factory=list)
    index_path: Path | None = None

    @property
    def ok(self) -> bool:
        """Return True when every guide rendered."""
        return not self.failures


class GuideGenerator:
    """Render every guide under the configured source directory."""

    def __init__(
        self,
        config: SiteConfig,
        *,
        templates_dir: Path | None = None,
        source_dir: Path | None = None,
        output_dir: Path | None = None,
    ) -> None:
        """Initialize the generator with configuration and optional overrides.

        Parameters
        ----------
        config : SiteConfig
            Site configuration describing link bases, theme, and paths.
        templates_dir : Path, optional
            Directory containing Jinja templates; defaults to the package
            templates.
        source_dir : Path, optional
            Override for the directory scanned for ``*.guide`` files.
        output_dir : Path, optional
            Override for the HTML output directory.
        """
        self.config = config
        self.source_dir = source_dir or config.source_dir
        self.output_dir = output_dir or config.output_dir
        self.renderer = PageRenderer(config, templates_dir=templates_dir)
        self.index_builder = GuideIndexBuilder(config, templates_dir=templates_dir)

    def discover(self) -> list[Path]:
        """Return guide sources in the source directory, sorted by name.

        Raises
        ------
        FileNotFoundError
            If the source directory does not exist.
        """
        if not self.source_dir.is_dir():
            msg = f"Guide source directory '{self.source_dir}' not found."
            raise FileNotFoundError(msg)
        return sorted(self.source_dir.glob(f"*{GUIDE_SUFFIX}"))

    def run(self) -> BuildReport:
        """Render every guide to disk and write the guide index.

        Returns
        -------
        BuildReport
            Written paths, per-guide failures, and the index path.

        Notes
        -----
        Side effects include creating the output directory and writing one
        HTML file per successfully rendered guide plus the index page.
        """
        report = BuildReport()
        entries: list[IndexEntry] = []
        self.output_dir.mkdir(parents=True, exist_ok=True)
        for source in self.discover():
            page = self._render_source(source, report)
            if page is None:
                continue
            output_path = self.output_path_for(source)
            try:
                output_path.write_text(page.html, encoding="utf-8")
            except OSError as exc:
                error = GuideError(f"cannot write {output_path}: {exc}")
                self._record_failure(source, error, report)
                continue
            logger.debug("rendered %s -> %s", source, output_path)
            report.written.append(output_path)
            entries.append(
                IndexEntry(
                    title=page.title, output_path=output_path, summary=page.summary
                )
            )
        report.index_path = self.index_builder.run(entries)
        return report

    def check(self) -> BuildReport:
        """Parse and render every guide without writing anything."""
        report = BuildReport()
        for source in self.discover():
            if self._render_source(source, report) is not None:
                report.written.append(self.output_path_for(source))
        return report

    def output_path_for(self, source: Path) -> Path:
        """Return where the HTML for ``source`` is written."""
        filename = OUTPUT_FILENAME_TEMPLATE.format(
            prefix=self.config.filename_prefix, stem=source.stem
        )
        return self.output_dir / filename

    def _render_source(
        self, source: Path, report: BuildReport
    ) -> RenderedPage | None:
        """Render one guide, recording failures on ``report`` instead of raising."""
        try:
            document = load_document(source)
            return self.renderer.render(document)
        except GuideError as exc:
            exc.locate(source=str(source))
            error = exc
        except (OSError, UnicodeDecodeError) as exc:
            error = GuideError(f"cannot read guide: {exc}")
        self._record_failure(source, error, report)
        return None

    @staticmethod
    def _record_failure(source: Path, error: GuideError, report: BuildReport) -> None:
        """Locate ``error`` at ``source``, log it, and append it to ``report``."""
        error.locate(source=str(source))
        logger.warning("failed to render %s", error)
        report.failures.append(BuildFailure(source=source, error=error))


__all__ = ["BuildFailure", "BuildReport", "GuideGenerator"]
