"""Shared dataclasses used by the page rendering pipeline."""

from __future__ import annotations

import dataclasses as dc


@dc.dataclass(slots=True)
class BlockModel:
    """Structured data passed to the guide page template for one block.

    Attributes
    ----------
    index : int
        Position of the block in the source document (0-based).
    kind : str
        ``"heading"``, ``"prose"`` or ``"code"``.
    html : str
        Rendered HTML for prose and code blocks; empty for headings.
    text : str
        Heading text (escaped by the template).
    level : int
        Heading level; 0 for non-heading blocks.
    anchor : str
        Unique ``id`` for headings; empty otherwise.
    label : str
        Caption for code examples.
    language : str
        Language tag for code examples.
    source_url : str | None
        Resolved "view source" link for code examples.
    """

    index: int
    kind: str
    html: str = ""
    text: str = ""
    level: int = 0
    anchor: str = ""
    label: str = ""
    language: str = ""
    source_url: str | None = None


@dc.dataclass(frozen=True, slots=True)
class RenderedPage:
    """Terminal artefact of rendering one guide."""

    title: str
    html: str
    summary: str | None = None
    source: str | None = None


__all__ = ["BlockModel", "RenderedPage"]
