"""Compose a parsed guide into a complete HTML page.

:class:`PageRenderer` walks a :class:`~guide_pages.content_model.Document`
block by block, renders prose through the Markdown inliner, code examples
through :class:`~guide_pages.generator.renderer.HtmlContentRenderer`, and
hands the resulting block models to the ``guide_page.jinja`` template, which
adds the banner, contents list, and footer.

Rendering is pure: the same document always produces byte-identical HTML,
so the output never includes timestamps or generated identifiers.

Example
-------
>>> from guide_pages.config import LinkConfig, SiteConfig
>>> from guide_pages.content_model import parse_document
>>> from guide_pages.generator import PageRenderer
>>> links = LinkConfig("https://ex.invalid", "https://repo.invalid")
>>> config = SiteConfig(links=links)
>>> page = PageRenderer(config).render(parse_document("title: Hello\\n"))
>>> "<h1 class=\\"banner__title\\">Hello</h1>" in page.html
True
"""

from __future__ import annotations

import re
import typing as typ
from pathlib import Path

from jinja2 import Environment, FileSystemLoader

from guide_pages._constants import PAGE_TEMPLATE
from guide_pages.content_model import (
    Block,
    CodeExample,
    Document,
    Heading,
    LinkDefinition,
    Prose,
)
from guide_pages.errors import GuideError

from .link_resolver import LinkResolver
from .markdown_inliner import MarkdownInliner, collect_references
from .models import BlockModel, RenderedPage
from .renderer import HtmlContentRenderer

if typ.TYPE_CHECKING:
    import collections.abc as cabc

    from guide_pages.config import SiteConfig

TOC_LEVELS = (2, 3)


class PageRenderer:
    """Render guide documents into themed HTML pages."""

    def __init__(
        self, config: SiteConfig, *, templates_dir: Path | None = None
    ) -> None:
        """Initialize the renderer with configuration and template context.

        Parameters
        ----------
        config : SiteConfig
            Site configuration providing link bases, theme, and highlighting
            options.
        templates_dir : Path, optional
            Directory containing Jinja templates; defaults to the package
            templates.
        """
        self.config = config
        default_templates = Path(__file__).resolve().parents[1] / "templates"
        self.templates_dir = templates_dir or default_templates
        self.resolver = LinkResolver.from_config(config.links)
        self.inliner = MarkdownInliner(
            self.resolver,
            highlight=config.highlight,
            pygments_style=config.pygments_style,
        )
        self.code_renderer = HtmlContentRenderer(
            config.pygments_style, highlight=config.highlight
        )
        self.env = Environment(
            loader=FileSystemLoader(str(self.templates_dir)),
            autoescape=True,
            trim_blocks=True,
            lstrip_blocks=True,
            keep_trailing_newline=True,
        )
        self.template = self.env.get_template(PAGE_TEMPLATE)

    def render(self, document: Document) -> RenderedPage:
        """Render ``document`` into a :class:`RenderedPage`.

        Parameters
        ----------
        document : Document
            Parsed guide.

        Returns
        -------
        RenderedPage
            Final HTML plus the title and summary used by the guide index.

        Raises
        ------
        UnresolvedReferenceError
            If a link definition, source link, or prose link target cannot be
            resolved.
        DanglingReferenceError
            If prose uses a reference-style link with no definition anywhere
            in the document.

        Notes
        -----
        Errors raised while rendering a block are annotated with the
        document source and that block's line before propagating.
        """
        references = collect_references(document, self.resolver)
        used_anchors: set[str] = set()
        blocks: list[BlockModel] = []
        for index, block in enumerate(document.blocks):
            try:
                model = self._build_block(index, block, references, used_anchors)
            except GuideError as exc:
                exc.locate(source=document.source, line=block.line)
                raise
            if model is not None:
                blocks.append(model)

        context = {
            "document": document,
            "blocks": blocks,
            "toc_items": _toc_items(blocks),
            "theme": self.config.theme,
            "html_title": self._format_page_title(document),
            "pygments_css": self.code_renderer.stylesheet,
        }
        html = self.template.render(**context)
        if not html.endswith("\n"):
            html += "\n"
        return RenderedPage(
            title=document.title,
            html=html,
            summary=document.summary,
            source=document.source,
        )

    def _build_block(
        self,
        index: int,
        block: Block,
        references: cabc.Mapping[str, str],
        used_anchors: set[str],
    ) -> BlockModel | None:
        """Return the template model for one block, or None for link definitions."""
        match block:
            case Heading(level=level, text=text):
                base = _slugify(text) or f"section-{index}"
                anchor = _unique_anchor(base, used_anchors)
                return BlockModel(
                    index=index, kind="heading", text=text, level=level, anchor=anchor
                )
            case Prose(markdown=text):
                return BlockModel(
                    index=index,
                    kind="prose",
                    html=self.inliner.render(text, references),
                )
            case CodeExample(label=label, language=language, code=code):
                source_url = (
                    self.resolver.resolve_target(block.source_link)
                    if block.source_link is not None
                    else None
                )
                return BlockModel(
                    index=index,
                    kind="code",
                    html=self.code_renderer.code_block(code, language),
                    label=label,
                    language=language,
                    source_url=source_url,
                )
            case LinkDefinition():
                return None
        msg = f"unsupported block {block!r}"  # pragma: no cover - exhaustive match
        raise TypeError(msg)

    def _format_page_title(self, document: Document) -> str:
        """Compose the HTML title using the guide title and configured theme."""
        theme = self.config.theme
        suffix = " ".join(
            part for part in (theme.site_name, theme.page_title_suffix) if part
        )
        return f"{document.title} | {suffix}" if suffix else document.title


def _toc_items(blocks: cabc.Sequence[BlockModel]) -> list[dict[str, typ.Any]]:
    """Return contents entries for second- and third-level headings."""
    return [
        {"label": block.text, "anchor": block.anchor, "level": block.level}
        for block in blocks
        if block.kind == "heading" and block.level in TOC_LEVELS
    ]


def _slugify(value: str) -> str:
    """Convert a string into a lowercase hyphen-separated slug."""
    return re.sub(r"[^a-z0-9]+", "-", value.lower()).strip("-")


def _unique_anchor(base: str, used: set[str]) -> str:
    """Return a unique anchor, appending numeric suffixes and mutating ``used``."""
    candidate = base
    suffix = 2
    while candidate in used:
        candidate = f"{base}-{suffix}"
        suffix += 1
    used.add(candidate)
    return candidate


__all__ = ["PageRenderer"]
