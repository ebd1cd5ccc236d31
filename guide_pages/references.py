r"""Symbolic link references embedded in guide sources.

Guides point at files in the examples tree and the source repository with
``example_file(...)`` and ``repo_url(...)`` references instead of hard-coded
URLs. This module parses those references into :class:`LinkReference` values;
turning them into URLs is the job of
:class:`guide_pages.generator.link_resolver.LinkResolver`.

Two spellings are accepted. The call form is used in directive fields::

    example_file("all_about_inserts/src/lib.rs", 12, 30)
    repo_url('diesel/src/query_builder/mod.rs')

The scheme form fits inside Markdown link targets::

    [the schema](example_file:getting_started_step_1/src/schema.rs#L1-L8)

Example
-------
>>> from guide_pages.references import parse_reference
>>> ref = parse_reference('example_file("src/lib.rs", 3, 9)')
>>> (ref.kind.value, ref.path, ref.start_line, ref.end_line)
('example_file', 'src/lib.rs', 3, 9)
>>> parse_reference("https://docs.rs/diesel") is None
True
"""

from __future__ import annotations

import dataclasses as dc
import enum
import re

CALL_PATTERN = re.compile(
    r"""^(?P<kind>example_file|repo_url)\(\s*"""
    r"""(?P<quote>["'])(?P<path>[^"']*)(?P=quote)\s*"""
    r"""(?:,\s*(?P<start>\d+)\s*(?:,\s*(?P<end>\d+)\s*)?)?\)$"""
)
CALL_PREFIX_PATTERN = re.compile(r"^(example_file|repo_url)\s*\(")
SCHEME_PATTERN = re.compile(r"^(?P<kind>example_file|repo_url):(?P<path>\S*)$")
LINE_FRAGMENT_PATTERN = re.compile(r"#L(?P<start>\d+)(?:-L(?P<end>\d+))?$")


class ReferenceKind(enum.StrEnum):
    """Which base URL a reference is resolved against."""

    EXAMPLE_FILE = "example_file"
    REPO_URL = "repo_url"


class ReferenceSyntaxError(ValueError):
    """Raised when text looks like a reference but cannot be parsed."""


@dc.dataclass(frozen=True, slots=True)
class LinkReference:
    """A symbolic pointer to a file resolved at render time.

    Attributes
    ----------
    kind : ReferenceKind
        ``EXAMPLE_FILE`` for the examples tree, ``REPO_URL`` for the source
        repository.
    path : str
        Path relative to the chosen base URL. May be empty; the resolver
        rejects empty paths.
    start_line : int, optional
        First highlighted line, 1-based.
    end_line : int, optional
        Last highlighted line; only meaningful with ``start_line``.
    """

    kind: ReferenceKind
    path: str
    start_line: int | None = None
    end_line: int | None = None

    @property
    def fragment(self) -> str:
        """Return the ``#L<start>-L<end>`` fragment, or ``""`` without a range."""
        if self.start_line is None:
            return ""
        if self.end_line is None or self.end_line == self.start_line:
            return f"#L{self.start_line}"
        return f"#L{self.start_line}-L{self.end_line}"


def parse_reference(text: str) -> LinkReference | None:
    """Parse ``text`` into a :class:`LinkReference`.

    Parameters
    ----------
    text : str
        Candidate reference in call form (``example_file("path", 1, 4)``) or
        scheme form (``example_file:path#L1-L4``).

    Returns
    -------
    LinkReference | None
        The parsed reference, or ``None`` when ``text`` is not a reference
        at all (for example a literal ``https://`` URL).

    Raises
    ------
    ReferenceSyntaxError
        If ``text`` starts like a reference but is malformed, or names a line
        range that ends before it starts.
    """
    stripped = text.strip()
    match = CALL_PATTERN.match(stripped)
    if match:
        start = match.group("start")
        end = match.group("end")
        return _build_reference(
            match.group("kind"),
            match.group("path"),
            int(start) if start else None,
            int(end) if end else None,
        )
    if CALL_PREFIX_PATTERN.match(stripped):
        msg = (
            f"malformed reference {stripped!r}; "
            "expected name(\"path\"[, start[, end]])"
        )
        raise ReferenceSyntaxError(msg)

    match = SCHEME_PATTERN.match(stripped)
    if match:
        return _build_reference(match.group("kind"), match.group("path"), None, None)
    return None


def _build_reference(
    kind: str, path: str, start: int | None, end: int | None
) -> LinkReference:
    """Validate line numbers and split a trailing ``#L..`` fragment off ``path``."""
    if start is None:
        fragment = LINE_FRAGMENT_PATTERN.search(path)
        if fragment:
            path = path[: fragment.start()]
            start = int(fragment.group("start"))
            end_text = fragment.group("end")
            end = int(end_text) if end_text else None
    if start is not None and start < 1:
        msg = f"line numbers start at 1, got {start}"
        raise ReferenceSyntaxError(msg)
    if start is not None and end is not None and end < start:
        msg = f"line range ends before it starts ({start}-{end})"
        raise ReferenceSyntaxError(msg)
    return LinkReference(
        kind=ReferenceKind(kind), path=path.strip(), start_line=start, end_line=end
    )


__all__ = [
    "LinkReference",
    "ReferenceKind",
    "ReferenceSyntaxError",
    "parse_reference",
]
