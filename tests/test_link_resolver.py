"""Tests for symbolic link references and their resolution to URLs."""

from __future__ import annotations

import pytest
from markdown import Markdown

from guide_pages.config import LinkConfig
from guide_pages.errors import UnresolvedReferenceError
from guide_pages.generator import LinkResolver, LinkResolverExtension
from guide_pages.references import (
    LinkReference,
    ReferenceKind,
    ReferenceSyntaxError,
    parse_reference,
)

EXAMPLE_BASE = "https://github.com/diesel-rs/diesel/tree/2.2.x/examples"
REPO_BASE = "https://github.com/diesel-rs/diesel/blob/2.2.x"


@pytest.fixture
def resolver() -> LinkResolver:
    """Return a resolver whose bases carry trailing slashes."""
    return LinkResolver(f"{EXAMPLE_BASE}/", f"{REPO_BASE}/")


@pytest.mark.parametrize(
    ("text", "expected"),
    [
        (
            'example_file("p/src/lib.rs", 3, 9)',
            LinkReference(ReferenceKind.EXAMPLE_FILE, "p/src/lib.rs", 3, 9),
        ),
        (
            "repo_url('diesel/src/lib.rs')",
            LinkReference(ReferenceKind.REPO_URL, "diesel/src/lib.rs"),
        ),
        (
            "example_file:p/src/lib.rs#L4-L8",
            LinkReference(ReferenceKind.EXAMPLE_FILE, "p/src/lib.rs", 4, 8),
        ),
        (
            "repo_url:diesel/src/lib.rs#L12",
            LinkReference(ReferenceKind.REPO_URL, "diesel/src/lib.rs", 12),
        ),
    ],
)
def test_parse_reference_forms(text: str, expected: LinkReference) -> None:
    """Both the call form and the scheme form should parse."""
    assert parse_reference(text) == expected


def test_parse_reference_ignores_plain_urls() -> None:
    """Ordinary URLs are not references."""
    assert parse_reference("https://docs.rs/diesel") is None
    assert parse_reference("#local-anchor") is None


@pytest.mark.parametrize(
    "text",
    [
        'example_file("p", 9, 3)',
        'example_file("p", 0)',
        "repo_url(unquoted)",
        'example_file("p", "3")',
        'example_file("a.rs", 3)" , "b.rs")',
    ],
)
def test_parse_reference_rejects_malformed_calls(text: str) -> None:
    """Text that starts like a reference but is malformed should raise."""
    with pytest.raises(ReferenceSyntaxError):
        parse_reference(text)


@pytest.mark.parametrize(
    ("reference", "expected"),
    [
        (
            LinkReference(ReferenceKind.EXAMPLE_FILE, "p/src/lib.rs", 3, 9),
            f"{EXAMPLE_BASE}/p/src/lib.rs#L3-L9",
        ),
        (
            LinkReference(ReferenceKind.EXAMPLE_FILE, "p/src/lib.rs", 3),
            f"{EXAMPLE_BASE}/p/src/lib.rs#L3",
        ),
        (
            LinkReference(ReferenceKind.EXAMPLE_FILE, "p/src/lib.rs", 5, 5),
            f"{EXAMPLE_BASE}/p/src/lib.rs#L5",
        ),
        (
            LinkReference(ReferenceKind.REPO_URL, "/diesel/src/lib.rs"),
            f"{REPO_BASE}/diesel/src/lib.rs",
        ),
    ],
)
def test_resolve_joins_with_single_slash(
    resolver: LinkResolver, reference: LinkReference, expected: str
) -> None:
    """Resolved URLs use exactly one slash and the expected line fragment."""
    assert resolver.resolve(reference) == expected


def test_resolve_rejects_empty_path(resolver: LinkResolver) -> None:
    """An empty path cannot produce a useful URL."""
    with pytest.raises(UnresolvedReferenceError, match="empty path"):
        resolver.resolve(LinkReference(ReferenceKind.REPO_URL, ""))


def test_resolve_target_passes_literal_urls(resolver: LinkResolver) -> None:
    """Literal URLs are returned unchanged; blank ones are rejected."""
    assert resolver.resolve_target(" https://docs.rs ") == "https://docs.rs"
    with pytest.raises(UnresolvedReferenceError):
        resolver.resolve_target("   ")


def test_resolve_text_wraps_syntax_errors(resolver: LinkResolver) -> None:
    """Malformed references found in prose become UnresolvedReferenceError."""
    assert resolver.resolve_text("https://docs.rs") is None
    with pytest.raises(UnresolvedReferenceError):
        resolver.resolve_text('repo_url("p", 4, 1)')


def test_from_config_uses_link_section() -> None:
    """Resolvers built from LinkConfig use its base URLs."""
    resolver = LinkResolver.from_config(LinkConfig(EXAMPLE_BASE, REPO_BASE))
    reference = LinkReference(ReferenceKind.EXAMPLE_FILE, "x.rs")
    assert resolver.resolve(reference) == f"{EXAMPLE_BASE}/x.rs"


def test_extension_rewrites_symbolic_hrefs(resolver: LinkResolver) -> None:
    """The Markdown extension rewrites scheme-form hrefs and leaves others."""
    md = Markdown(extensions=[LinkResolverExtension(resolver)])
    html = md.convert(
        "[schema](example_file:p/src/schema.rs#L1-L8) and [docs](https://docs.rs)"
    )
    assert f'href="{EXAMPLE_BASE}/p/src/schema.rs#L1-L8"' in html
    assert 'href="https://docs.rs"' in html
