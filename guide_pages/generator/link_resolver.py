"""Resolve ``example_file``/``repo_url`` references into absolute URLs."""

from __future__ import annotations

import typing as typ

from markdown.extensions import Extension
from markdown.treeprocessors import Treeprocessor

from guide_pages.errors import UnresolvedReferenceError
from guide_pages.references import (
    LinkReference,
    ReferenceKind,
    ReferenceSyntaxError,
    parse_reference,
)

if typ.TYPE_CHECKING:
    from xml.etree.ElementTree import Element

    from markdown import Markdown

    from guide_pages.config import LinkConfig
else:  # pragma: no cover - type-checking fallback
    Markdown = typ.Any
    Element = typ.Any
    LinkConfig = typ.Any


class LinkResolver:
    """Turn symbolic link references into concrete URLs.

    Both base URLs come from configuration; the resolver never assumes a
    particular host. Paths are joined to their base with exactly one slash.
    """

    def __init__(self, example_base_url: str, repo_base_url: str) -> None:
        self.example_base_url = example_base_url.rstrip("/")
        self.repo_base_url = repo_base_url.rstrip("/")

    @classmethod
    def from_config(cls, links: LinkConfig) -> LinkResolver:
        """Build a resolver from the ``links`` section of the site config."""
        return cls(links.example_base_url, links.repo_base_url)

    def resolve(self, reference: LinkReference) -> str:
        """Return the absolute URL for ``reference``.

        Parameters
        ----------
        reference : LinkReference
            Parsed ``example_file`` or ``repo_url`` reference.

        Returns
        -------
        str
            ``{base}/{path}`` with an ``#L<start>-L<end>`` fragment when the
            reference carries a line range.

        Raises
        ------
        UnresolvedReferenceError
            If the reference path is empty.
        """
        path = reference.path.strip().lstrip("/")
        if not path:
            msg = f"{reference.kind.value} reference has an empty path"
            raise UnresolvedReferenceError(msg)
        base = (
            self.example_base_url
            if reference.kind is ReferenceKind.EXAMPLE_FILE
            else self.repo_base_url
        )
        return f"{base}/{path}{reference.fragment}"

    def resolve_target(self, target: LinkReference | str) -> str:
        """Resolve a reference, or pass a literal URL through after validation."""
        if isinstance(target, LinkReference):
            return self.resolve(target)
        url = target.strip()
        if not url:
            msg = "link target is empty"
            raise UnresolvedReferenceError(msg)
        return url

    def resolve_text(self, text: str) -> str | None:
        """Resolve ``text`` when it is a reference; return None for other URLs."""
        try:
            reference = parse_reference(text)
        except ReferenceSyntaxError as exc:
            raise UnresolvedReferenceError(str(exc)) from exc
        if reference is None:
            return None
        return self.resolve(reference)


class LinkResolverExtension(Extension):
    """Rewrite ``example_file:``/``repo_url:`` hrefs in rendered prose.

    Guides write symbolic targets directly in Markdown links, for example
    ``[schema](example_file:getting_started_step_1/src/schema.rs)``. Adding
    this extension to a ``markdown.Markdown`` instance replaces those hrefs
    with the absolute URLs produced by :class:`LinkResolver`.
    """

    def __init__(self, resolver: LinkResolver) -> None:
        super().__init__()
        self.resolver = resolver

    def extendMarkdown(self, md: Markdown) -> None:  # type: ignore[override]  # noqa: N802
        """Register the reference treeprocessor on the Markdown instance."""
        processor = LinkResolverTreeprocessor(md, self.resolver)
        md.treeprocessors.register(processor, "guide_link_references", 15)


class LinkResolverTreeprocessor(Treeprocessor):
    """Replace symbolic anchor targets with resolved URLs."""

    def __init__(self, md: Markdown, resolver: LinkResolver) -> None:
        super().__init__(md)
        self.resolver = resolver

    def run(self, root: Element) -> Element:
        """Rewrite every ``<a>`` whose href is a symbolic reference."""
        for element in root.iter("a"):
            href = element.get("href")
            if not href:
                continue
            resolved = self.resolver.resolve_text(href)
            if resolved:
                element.set("href", resolved)
        return root


__all__ = [
    "LinkResolver",
    "LinkResolverExtension",
    "LinkResolverTreeprocessor",
]
