"""Tests for prose rendering through the Markdown inliner.

The inliner converts one prose block at a time, so these tests cover the
behaviour that spans blocks too: definitions collected from ``link`` blocks
and other prose feed reference-style links, and a reference with no
definition anywhere fails loudly with the missing label.
"""

from __future__ import annotations

import pytest
from bs4 import BeautifulSoup

from guide_pages.content_model import Prose, parse_document
from guide_pages.errors import DanglingReferenceError, UnresolvedReferenceError
from guide_pages.generator import LinkResolver, MarkdownInliner, collect_references

EXAMPLE_BASE = "https://example.invalid/examples"
REPO_BASE = "https://example.invalid/repo"


@pytest.fixture
def resolver() -> LinkResolver:
    """Return a resolver with fixed, non-routable bases."""
    return LinkResolver(EXAMPLE_BASE, REPO_BASE)


@pytest.fixture
def inliner(resolver: LinkResolver) -> MarkdownInliner:
    """Return a plain (non-highlighting) inliner."""
    return MarkdownInliner(resolver)


def test_paragraphs_and_inline_links(inliner: MarkdownInliner) -> None:
    """Blank lines split paragraphs and inline links keep their URL."""
    html = inliner.render("First [site](http://e).\n\nSecond.")
    soup = BeautifulSoup(html, "html.parser")
    paragraphs = soup.find_all("p")
    assert len(paragraphs) == 2, f"Expected two paragraphs, got {html!r}"
    anchor = soup.find("a")
    assert anchor is not None
    assert anchor["href"] == "http://e"


def test_inline_code_is_verbatim(inliner: MarkdownInliner) -> None:
    """Inline code content is escaped but otherwise left untouched."""
    html = inliner.render("Use `a<b && *not emphasis* [x]` here.")
    assert "<code>a&lt;b &amp;&amp; *not emphasis* [x]</code>" in html, html
    assert "<em>" not in html


def test_setext_underline_is_level_two_heading(inliner: MarkdownInliner) -> None:
    """A ``---`` underline turns the preceding line into an h2."""
    html = inliner.render("Conclusion\n----------\n\nDone.")
    soup = BeautifulSoup(html, "html.parser")
    heading = soup.find("h2")
    assert heading is not None, f"Expected an h2 in {html!r}"
    assert heading.get_text() == "Conclusion"


def test_reference_definition_in_same_block(inliner: MarkdownInliner) -> None:
    """Definitions in the block itself satisfy its references."""
    html = inliner.render("See [the docs][docs].\n\n[docs]: https://docs.rs\n")
    assert 'href="https://docs.rs"' in html
    assert "[docs]" not in html


def test_dangling_reference_names_label(inliner: MarkdownInliner) -> None:
    """A reference with no definition raises with the missing label."""
    with pytest.raises(DanglingReferenceError) as excinfo:
        inliner.render("See [the docs][missing-label].")
    assert excinfo.value.label == "missing-label"
    assert "missing-label" in str(excinfo.value)


def test_dangling_short_reference(inliner: MarkdownInliner) -> None:
    """Short ``[label]`` references are validated as well."""
    with pytest.raises(DanglingReferenceError) as excinfo:
        inliner.render("Read [upsert] first.")
    assert excinfo.value.label == "upsert"


def test_scheme_links_in_prose_are_resolved(inliner: MarkdownInliner) -> None:
    """Prose links may point at example files symbolically."""
    html = inliner.render("[schema](example_file:demo/src/schema.rs#L2-L4)")
    assert f'href="{EXAMPLE_BASE}/demo/src/schema.rs#L2-L4"' in html


def test_empty_prose_renders_nothing(inliner: MarkdownInliner) -> None:
    """Whitespace-only text produces an empty fragment."""
    assert inliner.render("  \n\n ") == ""


def test_references_shared_across_blocks(
    inliner: MarkdownInliner, resolver: LinkResolver
) -> None:
    """Link blocks and prose definitions apply to every prose block."""
    document = parse_document(
        "title: T\n"
        "markdown:\n"
        "    Uses [insert docs][insert] and [Upsert].\n"
        "markdown:\n"
        "    [upsert]: repo_url:diesel/src/upsert.rs\n"
        'link insert: example_file("inserts/src/lib.rs", 4, 9)\n'
    )
    references = collect_references(document, resolver)
    assert references == {
        "insert": f"{EXAMPLE_BASE}/inserts/src/lib.rs#L4-L9",
        "upsert": f"{REPO_BASE}/diesel/src/upsert.rs",
    }
    first_prose = document.blocks[0]
    assert isinstance(first_prose, Prose)
    html = inliner.render(first_prose.markdown, references)
    soup = BeautifulSoup(html, "html.parser")
    hrefs = [anchor["href"] for anchor in soup.find_all("a")]
    assert hrefs == [
        f"{EXAMPLE_BASE}/inserts/src/lib.rs#L4-L9",
        f"{REPO_BASE}/diesel/src/upsert.rs",
    ]


def test_later_definitions_override_earlier(resolver: LinkResolver) -> None:
    """When a label is defined twice the last definition wins."""
    document = parse_document(
        "title: T\nlink docs: https://old.invalid\nlink DOCS: https://new.invalid\n"
    )
    assert collect_references(document, resolver) == {"docs": "https://new.invalid"}


def test_unresolvable_definition_is_located(resolver: LinkResolver) -> None:
    """Definitions that resolve to nothing report the defining block's line."""
    document = parse_document(
        "title: T\nmarkdown:\n    text\nlink empty: repo_url('')\n", source="g.guide"
    )
    with pytest.raises(UnresolvedReferenceError) as excinfo:
        collect_references(document, resolver)
    assert excinfo.value.line == 4
    assert excinfo.value.source == "g.guide"


def test_definitions_inside_fences_are_ignored(resolver: LinkResolver) -> None:
    """Bracketed lines inside fenced code are code, not definitions."""
    document = parse_document(
        "title: T\nmarkdown:\n    ```toml\n    [package]: not-a-link\n    ```\n"
    )
    assert collect_references(document, resolver) == {}


def test_highlighted_fences_carry_language(resolver: LinkResolver) -> None:
    """With highlighting on, fenced code gets codehilite markup and a language."""
    inliner = MarkdownInliner(resolver, highlight=True)
    html = inliner.render("```rust,no_run\nfn main() {}\n```\n")
    assert '<div class="codehilite" data-language="rust">' in html, html


def test_link_block_labels_with_spaces(
    inliner: MarkdownInliner, resolver: LinkResolver
) -> None:
    """A ``link`` id containing spaces satisfies the matching reference."""
    document = parse_document(
        "title: T\n"
        "markdown:\n"
        "    See [Insert  Docs] and [the guide][insert docs].\n"
        "link insert docs: repo_url('diesel/src/insert.rs')\n"
    )
    references = collect_references(document, resolver)
    assert references == {"insert docs": f"{REPO_BASE}/diesel/src/insert.rs"}
    prose = document.blocks[0]
    assert isinstance(prose, Prose)
    soup = BeautifulSoup(inliner.render(prose.markdown, references), "html.parser")
    hrefs = [anchor["href"] for anchor in soup.find_all("a")]
    assert hrefs == [f"{REPO_BASE}/diesel/src/insert.rs"] * 2


def test_highlighted_tilde_fences_keep_their_language(
    resolver: LinkResolver,
) -> None:
    """Tilde and backtick fences are labelled in document order."""
    inliner = MarkdownInliner(resolver, highlight=True)
    html = inliner.render(
        "~~~python\nprint(1)\n~~~\n\n```rust\nfn main() {}\n```\n"
    )
    soup = BeautifulSoup(html, "html.parser")
    languages = [div.get("data-language") for div in soup.select("div.codehilite")]
    assert languages == ["python", "rust"], html
