r"""Parse guide sources into an ordered sequence of typed blocks.

A guide source is line oriented. Directives start in column zero and block
bodies are indented underneath them::

    title: All About Inserts
    summary: Inserting, batching and upserting rows.

    h2: Inserting a single row

    markdown:
        Use [`insert_into`][insert-docs] to build an `INSERT` statement.

    code rust: Inserting one user
        source: example_file("all_about_inserts/src/lib.rs", 52, 64)
        insert_into(users).values(&new_user).execute(conn)?;

    link insert-docs: repo_url("diesel/src/query_builder/functions.rs")

The parser returns a :class:`Document` whose ``blocks`` preserve reading
order. Bodies are dedented, trailing blank lines are trimmed, and prose made
only of whitespace is dropped. Code bodies are opaque text.

Example
-------
>>> from guide_pages.content_model import Heading, parse_document
>>> doc = parse_document("title: Intro\nh2: Setup\n")
>>> doc.title, doc.blocks[0] == Heading(level=2, text="Setup", line=2)
('Intro', True)
"""

from __future__ import annotations

import dataclasses as dc
import re
import textwrap
import typing as typ
from pathlib import Path

from .errors import ParseError
from .references import LinkReference, ReferenceSyntaxError, parse_reference

TITLE_PATTERN = re.compile(r"^title:(.*)$")
SUMMARY_PATTERN = re.compile(r"^summary:(.*)$")
HEADING_PATTERN = re.compile(r"^h([1-6]):\s*(.*?)\s*$")
MARKDOWN_PATTERN = re.compile(r"^markdown:\s*$")
CODE_PATTERN = re.compile(
    r"^code(?:\s+([A-Za-z0-9_+#.-]+)(?:,[^\s:]*)?)?:\s*(.*?)\s*$"
)
LINK_PATTERN = re.compile(r"^link\s+([^:]*[^\s:])\s*:\s*(.*?)\s*$")
SOURCE_PATTERN = re.compile(r"^source:\s*(.*?)\s*$")
COMMENT_PREFIX = "#"
BYTE_ORDER_MARK = "\ufeff"


@dc.dataclass(frozen=True, slots=True)
class Heading:
    """Standalone heading between prose blocks."""

    level: int
    text: str
    line: int = 0


@dc.dataclass(frozen=True, slots=True)
class Prose:
    """Markdown-flavoured narrative text."""

    markdown: str
    line: int = 0


@dc.dataclass(frozen=True, slots=True)
class CodeExample:
    """Illustrative code shown in a framed panel.

    Attributes
    ----------
    label : str
        Caption displayed above the code.
    language : str
        Language tag kept as metadata for downstream highlighting.
    code : str
        Snippet text, never interpreted.
    source_link : LinkReference | str | None
        Where the full file lives, either symbolic or a literal URL.
    line : int
        1-based line of the ``code`` directive.
    """

    label: str
    language: str
    code: str
    source_link: LinkReference | str | None = None
    line: int = 0


@dc.dataclass(frozen=True, slots=True)
class LinkDefinition:
    """Document-wide target for reference-style Markdown links."""

    id: str
    target: LinkReference | str
    line: int = 0


Block = Heading | Prose | CodeExample | LinkDefinition


@dc.dataclass(frozen=True, slots=True)
class Document:
    """Parsed guide: a title and its blocks in reading order."""

    title: str
    blocks: tuple[Block, ...]
    summary: str | None = None
    source: str | None = None


@dc.dataclass(slots=True)
class _OpenBlock:
    """Directive whose indented body is still being collected."""

    kind: typ.Literal["markdown", "code"]
    line: int
    language: str = "text"
    label: str = ""
    body: list[str] = dc.field(default_factory=list)


class _DocumentBuilder:
    """Accumulate blocks line by line and enforce the grammar."""

    def __init__(self, source: str | None) -> None:
        self.source = source
        self.title: str | None = None
        self.summary: str | None = None
        self.blocks: list[Block] = []
        self.open_block: _OpenBlock | None = None

    def error(self, message: str, line: int) -> ParseError:
        return ParseError(message, source=self.source, line=line)

    def feed(self, raw_line: str, number: int) -> None:
        """Consume one source line."""
        line = raw_line.rstrip("\r\n")
        if not line.strip():
            if self.open_block is not None:
                self.open_block.body.append("")
            return
        if line[0] in " \t":
            if self.open_block is None:
                msg = "indented line outside of a 'markdown:' or 'code:' block"
                raise self.error(msg, number)
            self.open_block.body.append(line)
            return

        self.close()
        if line.startswith(COMMENT_PREFIX):
            return
        self._directive(line, number)

    def _directive(self, line: str, number: int) -> None:
        """Dispatch a column-zero line to the matching directive handler."""
        if match := TITLE_PATTERN.match(line):
            self._set_title(match.group(1).strip(), number)
        elif match := SUMMARY_PATTERN.match(line):
            if self.summary is not None:
                raise self.error("duplicate 'summary:' directive", number)
            self.summary = match.group(1).strip() or None
        elif match := HEADING_PATTERN.match(line):
            text = match.group(2)
            if not text:
                raise self.error("heading directive has no text", number)
            level = int(match.group(1))
            self.blocks.append(Heading(level=level, text=text, line=number))
        elif MARKDOWN_PATTERN.match(line):
            self.open_block = _OpenBlock(kind="markdown", line=number)
        elif match := CODE_PATTERN.match(line):
            self.open_block = _OpenBlock(
                kind="code",
                line=number,
                language=(match.group(1) or "text").lower(),
                label=match.group(2),
            )
        elif match := LINK_PATTERN.match(line):
            target = self._target(match.group(2), number)
            if target is None:
                msg = f"link '{match.group(1)}' has no target"
                raise self.error(msg, number)
            self.blocks.append(
                LinkDefinition(id=match.group(1), target=target, line=number)
            )
        else:
            directive = (line.split(":", 1)[0].split() or [line])[0]
            if directive in {"code", "link"}:
                msg = f"malformed '{directive}' directive: {line!r}"
            else:
                msg = f"unrecognised block type '{directive}'"
            raise self.error(msg, number)

    def _set_title(self, title: str, number: int) -> None:
        if self.title is not None:
            raise self.error("duplicate 'title:' directive", number)
        if not title:
            raise self.error("'title:' directive has no text", number)
        self.title = title

    def _target(self, text: str, number: int) -> LinkReference | str | None:
        """Parse a link target, converting reference syntax errors to ParseError."""
        if not text:
            return None
        try:
            reference = parse_reference(text)
        except ReferenceSyntaxError as exc:
            raise self.error(str(exc), number) from exc
        return reference if reference is not None else text

    def close(self) -> None:
        """Turn the open block, if any, into a finished Block."""
        block = self.open_block
        if block is None:
            return
        self.open_block = None
        body = list(block.body)
        first_line = block.line + 1
        while body and not body[0]:
            body.pop(0)
            first_line += 1
        while body and not body[-1]:
            body.pop()
        text = textwrap.dedent("\n".join(body))

        if block.kind == "markdown":
            if text.strip():
                self.blocks.append(Prose(markdown=text, line=block.line))
            return

        source_link: LinkReference | str | None = None
        lines = text.split("\n")
        if lines and (match := SOURCE_PATTERN.match(lines[0])):
            source_link = self._target(match.group(1), first_line)
            if source_link is None:
                raise self.error("'source:' line has no target", first_line)
            lines = lines[1:]
        code = textwrap.dedent("\n".join(lines)).strip("\n")
        if not code.strip():
            raise self.error("code block has no body", block.line)
        self.blocks.append(
            CodeExample(
                label=block.label,
                language=block.language,
                code=code,
                source_link=source_link,
                line=block.line,
            )
        )

    def build(self) -> Document:
        self.close()
        if self.title is None:
            raise self.error("document has no 'title:' directive", 1)
        return Document(
            title=self.title,
            blocks=tuple(self.blocks),
            summary=self.summary,
            source=self.source,
        )


def parse_document(text: str, *, source: str | None = None) -> Document:
    """Parse guide source text into a :class:`Document`.

    Parameters
    ----------
    text : str
        Raw guide source.
    source : str, optional
        Name used in error messages (typically the file path).

    Returns
    -------
    Document
        Title, optional summary, and blocks in source order.

    Raises
    ------
    ParseError
        If a line matches no directive, an indented line has no open block,
        the title is missing or duplicated, a code block is empty, or a link
        target is malformed. The error names the offending line.
    """
    builder = _DocumentBuilder(source)
    text = text.removeprefix(BYTE_ORDER_MARK)
    for number, line in enumerate(text.splitlines(), start=1):
        builder.feed(line, number)
    return builder.build()


def load_document(path: Path) -> Document:
    """Read a UTF-8 guide file and parse it, naming ``path`` in errors."""
    text = path.read_text(encoding="utf-8-sig")
    return parse_document(text, source=str(path))


__all__ = [
    "Block",
    "CodeExample",
    "Document",
    "Heading",
    "LinkDefinition",
    "Prose",
    "load_document",
    "parse_document",
]
