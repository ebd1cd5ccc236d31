"""Render code example bodies as escaped or syntax-highlighted HTML."""

from __future__ import annotations

import re
from html import escape

from pygments import highlight
from pygments.formatters.html import HtmlFormatter
from pygments.lexers import get_lexer_by_name
from pygments.util import ClassNotFound

CODEHILITE_OPEN_TAG = re.compile(r'<div class="codehilite">')


class HtmlContentRenderer:
    """Render code snippets with consistent markup and language metadata.

    By default code is emitted verbatim with HTML special characters escaped.
    Pygments highlighting is opt-in; either way the wrapper carries a
    ``data-language`` attribute so downstream tooling can highlight later.
    """

    def __init__(
        self, pygments_style: str = "monokai", *, highlight: bool = False
    ) -> None:
        """Initialize a renderer.

        Parameters
        ----------
        pygments_style : str, optional
            Name of the Pygments style used for syntax highlighting. Defaults to
            ``"monokai"``.
        highlight : bool, optional
            Highlight code with Pygments instead of emitting escaped text.
        """
        self.pygments_style = pygments_style
        self.highlight = highlight
        self._formatter = HtmlFormatter(style=pygments_style, cssclass="codehilite")

    @property
    def stylesheet(self) -> str:
        """Return the CSS used for highlighted code blocks, or ``""`` when plain."""
        if not self.highlight:
            return ""
        return self._formatter.get_style_defs(".codehilite")

    def code_block(self, code: str, language: str | None = None) -> str:
        """Render ``code`` into HTML tagged with its language.

        Parameters
        ----------
        code : str
            Source snippet. It is never parsed or validated.
        language : str, optional
            Language tag; defaults to ``"text"``. When highlighting, unknown
            tags fall back to the plain-text lexer.

        Returns
        -------
        str
            ``<div class="codehilite" data-language="...">`` wrapping a
            ``<pre>`` block.
        """
        lang = language or "text"
        if not self.highlight:
            safe_lang = escape(lang, quote=True)
            return (
                f'<div class="codehilite" data-language="{safe_lang}">'
                f'<pre><code class="language-{safe_lang}">'
                f"{escape(code, quote=False)}</code></pre></div>"
            )
        try:
            lexer = get_lexer_by_name(lang)
        except ClassNotFound:
            lexer = get_lexer_by_name("text")
        html = highlight(code, lexer, self._formatter)
        return self._attach_language_attribute(html, lang)

    @staticmethod
    def _attach_language_attribute(html: str, language: str) -> str:
        """Add a single language attribute to an already highlighted block."""
        safe_lang = escape(language or "text", quote=True)

        def _repl(match: re.Match[str]) -> str:
            return f'<div class="codehilite" data-language="{safe_lang}">'

        return CODEHILITE_OPEN_TAG.sub(_repl, html, 1)


__all__ = ["HtmlContentRenderer"]
