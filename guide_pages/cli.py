"""Cyclopts CLI entrypoint for rendering guide pages.

The ``guides`` console script defined here renders every ``*.guide`` source
into static HTML and writes the guide index, or validates the sources without
writing anything. Typical usage involves running ``guides render`` locally or
in CI and ``guides check`` as a pre-commit guard.

Examples
--------
Render all guides for the default configuration:

>>> from guide_pages.cli import main
>>> main()  # doctest: +SKIP

Render into a custom directory:

>>> from guide_pages.cli import app
>>> app(["render", "--output-dir", "dist"])  # doctest: +SKIP
"""

from __future__ import annotations

import logging
import sys
import typing as typ
from pathlib import Path

import cyclopts
from cyclopts import App, Parameter

from .config import load_site_config
from .generator import BuildReport, GuideGenerator

DEFAULT_CONFIG = Path("config/guides.yaml")

app = App(name="guides", config=cyclopts.config.Env("INPUT_", command=False))  # type: ignore[unknown-argument]


def _format_path(path: Path) -> str:
    """Return a cwd-relative path when possible, otherwise the absolute path."""
    if path.is_absolute():
        try:
            return str(path.relative_to(Path.cwd()))
        except ValueError:  # pragma: no cover - fallback for different roots
            return str(path)
    return str(path)


def _configure_logging(*, verbose: bool) -> None:
    """Send library logging to stderr; DEBUG when ``verbose`` is set."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )


def _build_generator(
    config: Path, source_dir: Path | None, output_dir: Path | None
) -> GuideGenerator:
    site_config = load_site_config(config)
    return GuideGenerator(site_config, source_dir=source_dir, output_dir=output_dir)


def _report_failures(report: BuildReport) -> None:
    """Print each failure to stderr and exit non-zero when any guide failed."""
    for failure in report.failures:
        print(f"error: {failure.describe()}", file=sys.stderr)
    if not report.ok:
        raise SystemExit(1)


ConfigOption = typ.Annotated[
    Path, Parameter(help="Path to site config", env_var="INPUT_CONFIG")
]
SourceDirOption = typ.Annotated[
    Path | None,
    Parameter(help="Override the guide source folder", env_var="INPUT_SOURCE_DIR"),
]
OutputDirOption = typ.Annotated[
    Path | None,
    Parameter(help="Override the output folder", env_var="INPUT_OUTPUT_DIR"),
]
VerboseOption = typ.Annotated[bool, Parameter(help="Enable debug logging")]


@app.command(help="Render every guide source into static HTML pages.")
def render(
    *,
    config: ConfigOption = DEFAULT_CONFIG,
    source_dir: SourceDirOption = None,
    output_dir: OutputDirOption = None,
    verbose: VerboseOption = False,
) -> None:
    """Render guides and the guide index for the requested configuration.

    Parameters
    ----------
    config : Path, optional
        Path to the ``guides.yaml`` configuration file (overridable via
        ``INPUT_CONFIG``).
    source_dir : Path or None, optional
        Override the directory scanned for ``*.guide`` files.
    output_dir : Path or None, optional
        Override the directory receiving rendered HTML.
    verbose : bool, optional
        Log each rendered guide at DEBUG level.

    Raises
    ------
    SystemExit
        With status 1 when at least one guide failed; the others are still
        written.
    """
    _configure_logging(verbose=verbose)
    generator = _build_generator(config, source_dir, output_dir)
    report = generator.run()
    for path in report.written:
        print(f"wrote {_format_path(path)}")
    if report.index_path:
        print(f"wrote {_format_path(report.index_path)}")
    _report_failures(report)


@app.command(help="Parse and render every guide without writing files.")
def check(
    *,
    config: ConfigOption = DEFAULT_CONFIG,
    source_dir: SourceDirOption = None,
    verbose: VerboseOption = False,
) -> None:
    """Validate guides, reporting every parse or link error.

    Parameters
    ----------
    config : Path, optional
        Path to the ``guides.yaml`` configuration file.
    source_dir : Path or None, optional
        Override the directory scanned for ``*.guide`` files.
    verbose : bool, optional
        Log each checked guide at DEBUG level.
    """
    _configure_logging(verbose=verbose)
    generator = _build_generator(config, source_dir, None)
    report = generator.check()
    for path in report.written:
        print(f"ok {_format_path(path)}")
    _report_failures(report)


def main() -> None:
    """Invoke the Cyclopts application that powers the ``guides`` console command.

    Examples
    --------
    >>> main()  # doctest: +SKIP
    """
    app()


if __name__ == "__main__":  # pragma: no cover - manual invocation helper
    main()
