"""Render prose blocks from Markdown into HTML fragments.

Prose is converted with Python-Markdown. Two extensions are layered on top:
:class:`~guide_pages.generator.link_resolver.LinkResolverExtension` rewrites
symbolic link targets, and :class:`StrictReferenceExtension` turns a
reference-style link without a definition into a
:class:`~guide_pages.errors.DanglingReferenceError` instead of leaving the
brackets in the output.

Reference definitions are shared across a whole document, so a ``link``
block at the end of a guide (or a ``[label]: url`` line in another prose
block) satisfies references anywhere else. :func:`collect_references` builds
that map before any prose is rendered.
"""

from __future__ import annotations

import re
import typing as typ
from html import escape

from markdown import Markdown
from markdown.extensions import Extension
from markdown.inlinepatterns import (
    REFERENCE_RE,
    ReferenceInlineProcessor,
    ShortReferenceInlineProcessor,
)

from guide_pages.content_model import LinkDefinition, Prose
from guide_pages.errors import DanglingReferenceError, GuideError

from .link_resolver import LinkResolver, LinkResolverExtension
from .renderer import CODEHILITE_OPEN_TAG

if typ.TYPE_CHECKING:
    import collections.abc as cabc
    from xml.etree.ElementTree import Element

    from guide_pages.content_model import Document

CODE_BLOCK_PATTERN = re.compile(
    r"^([`~]{3,})[ ]*([A-Za-z0-9_+#.-]+)?[^\n]*\n.*?(?<=\n)\1[ ]*$",
    re.MULTILINE | re.DOTALL,
)
FENCED_INDENT_PATTERN = re.compile(r"^[ ]{1,3}([`~]{3,})", re.MULTILINE)
FENCE_LABEL_PATTERN = re.compile(
    r"^([`~]{3,})([A-Za-z0-9_+#.-]+)?(,[^\r\n]+)$", re.MULTILINE
)
FENCE_PATTERN = re.compile(r"^[ ]{0,3}([`~]{3,})")
REFERENCE_DEFINITION_PATTERN = re.compile(r"^[ ]{0,3}\[([^\[\]]*)\]:[ ]*(\S+)")


def collect_references(document: Document, resolver: LinkResolver) -> dict[str, str]:
    """Return every reference definition in ``document`` keyed by lower-cased label.

    Parameters
    ----------
    document : Document
        Parsed guide whose ``link`` blocks and prose ``[label]: url`` lines
        should be gathered.
    resolver : LinkResolver
        Resolver used to expand symbolic targets.

    Returns
    -------
    dict[str, str]
        Mapping of label to resolved URL. Later definitions override earlier
        ones, matching Python-Markdown's own behaviour within a block.

    Raises
    ------
    UnresolvedReferenceError
        If a definition points at an empty or malformed reference. The error
        is located at the defining block's line.
    """
    references: dict[str, str] = {}
    for block in document.blocks:
        match block:
            case LinkDefinition(id=label, target=target, line=line):
                try:
                    resolved = resolver.resolve_target(target)
                except GuideError as exc:
                    exc.locate(source=document.source, line=line)
                    raise
                references[_normalize_label(label)] = resolved
            case Prose(markdown=text, line=line):
                for label, target in _prose_definitions(text):
                    try:
                        resolved = resolver.resolve_text(target) or target
                    except GuideError as exc:
                        exc.locate(source=document.source, line=line)
                        raise
                    references[_normalize_label(label)] = resolved
            case _:
                continue
    return references


def _prose_definitions(text: str) -> cabc.Iterator[tuple[str, str]]:
    """Yield ``(label, target)`` pairs from definition lines outside code fences."""
    fence: str | None = None
    for line in text.splitlines():
        fence_match = FENCE_PATTERN.match(line)
        if fence_match:
            marker = fence_match.group(1)
            if fence is None:
                fence = marker[0] * 3
            elif marker.startswith(fence):
                fence = None
            continue
        if fence is not None or line.startswith(("    ", "\t")):
            continue
        match = REFERENCE_DEFINITION_PATTERN.match(line)
        if match and match.group(1).strip():
            yield match.group(1).strip(), match.group(2).lstrip("<").rstrip(">")


class StrictReferenceInlineProcessor(ReferenceInlineProcessor):
    """Full reference links (``[text][label]``) that fail on unknown labels."""

    def handleMatch(  # noqa: N802
        self, m: re.Match[str], data: str
    ) -> tuple[Element | None, int | None, int | None]:
        text, index, handled = self.getText(data, m.end(0))
        if handled:
            label_match = self.RE_LINK.match(data, pos=index)
            if label_match:
                label = label_match.group(1) or text
                _require_definition(self.md, self.NEWLINE_CLEANUP_RE.sub(" ", label))
        return super().handleMatch(m, data)


class StrictShortReferenceInlineProcessor(ShortReferenceInlineProcessor):
    """Short reference links (``[label]``) that fail on unknown labels."""

    def handleMatch(  # noqa: N802
        self, m: re.Match[str], data: str
    ) -> tuple[Element | None, int | None, int | None]:
        text, _index, handled = self.getText(data, m.end(0))
        if handled:
            _require_definition(self.md, self.NEWLINE_CLEANUP_RE.sub(" ", text))
        return super().handleMatch(m, data)


def _require_definition(md: Markdown, label: str) -> None:
    """Raise DanglingReferenceError when ``label`` has no stored definition."""
    cleaned = label.strip()
    if cleaned and _normalize_label(cleaned) not in md.references:
        raise DanglingReferenceError(cleaned)


def _normalize_label(label: str) -> str:
    """Return the lookup key Python-Markdown uses for a reference label."""
    return " ".join(label.split()).lower()


class StrictReferenceExtension(Extension):
    """Replace Python-Markdown's lenient reference patterns with strict ones."""

    def extendMarkdown(self, md: Markdown) -> None:  # type: ignore[override]  # noqa: N802
        """Re-register the reference patterns under their default names."""
        md.inlinePatterns.register(
            StrictReferenceInlineProcessor(REFERENCE_RE, md), "reference", 170
        )
        md.inlinePatterns.register(
            StrictShortReferenceInlineProcessor(REFERENCE_RE, md),
            "short_reference",
            130,
        )


class MarkdownInliner:
    """Convert prose Markdown into HTML with resolved, validated links."""

    def __init__(
        self,
        resolver: LinkResolver,
        *,
        highlight: bool = False,
        pygments_style: str = "monokai",
    ) -> None:
        """Initialize the inliner.

        Parameters
        ----------
        resolver : LinkResolver
            Resolver used for ``example_file:``/``repo_url:`` link targets.
        highlight : bool, optional
            When True, fenced code inside prose is highlighted with Pygments
            through the ``codehilite`` extension.
        pygments_style : str, optional
            Pygments style used when ``highlight`` is enabled.
        """
        self.resolver = resolver
        self.highlight = highlight
        self.pygments_style = pygments_style

    def render(
        self, text: str, references: cabc.Mapping[str, str] | None = None
    ) -> str:
        """Render ``text`` into an HTML fragment.

        Parameters
        ----------
        text : str
            Markdown source of one prose block.
        references : Mapping[str, str], optional
            Document-wide reference definitions from :func:`collect_references`.

        Returns
        -------
        str
            HTML fragment; empty when ``text`` is blank.

        Raises
        ------
        DanglingReferenceError
            If a reference-style link names a label with no definition.
        UnresolvedReferenceError
            If a symbolic link target cannot be resolved.
        """
        normalized = self._normalize_fenced_blocks(text)
        if not normalized.strip():
            return ""
        md = self._build_markdown()
        for label, url in (references or {}).items():
            md.references[_normalize_label(label)] = (url, None)
        html = md.convert(normalized)
        if self.highlight:
            html = self._annotate_codehilite(html, normalized)
        return html

    def _build_markdown(self) -> Markdown:
        extensions: list[Extension | str] = [
            "fenced_code",
            "tables",
            "sane_lists",
            StrictReferenceExtension(),
            LinkResolverExtension(self.resolver),
        ]
        extension_configs: dict[str, dict[str, typ.Any]] = {}
        if self.highlight:
            extensions.insert(1, "codehilite")
            extension_configs["codehilite"] = {
                "linenums": False,
                "guess_lang": False,
                "css_class": "codehilite",
                "pygments_style": self.pygments_style,
            }
        return Markdown(
            extensions=extensions,
            extension_configs=extension_configs,
        )

    def _annotate_codehilite(self, html: str, source_markdown: str) -> str:
        """Attach language metadata to each highlighted block in converted markdown."""
        languages = [
            match.group(2) or "text"
            for match in CODE_BLOCK_PATTERN.finditer(source_markdown)
        ]
        if not languages:
            return html
        lang_iter = iter(languages)

        def _repl(match: re.Match[str]) -> str:
            lang = next(lang_iter, "text")
            return (
                f'<div class="codehilite" data-language="{escape(lang, quote=True)}">'
            )

        return CODEHILITE_OPEN_TAG.sub(_repl, html, len(languages))

    @staticmethod
    def _normalize_fenced_blocks(text: str) -> str:
        """Drop fence indentation and Rust-style ``rust,no_run`` attributes."""
        without_indent = FENCED_INDENT_PATTERN.sub(r"\1", text)

        def _strip_labels(match: re.Match[str]) -> str:
            fence, language, _extras = match.groups()
            label = language or ""
            return f"{fence}{label}"

        return FENCE_LABEL_PATTERN.sub(_strip_labels, without_indent)


__all__ = [
    "MarkdownInliner",
    "StrictReferenceExtension",
    "collect_references",
]
