"""Utilities for resolving, rendering, and generating guide pages."""

from .link_resolver import LinkResolver, LinkResolverExtension
from .markdown_inliner import MarkdownInliner, collect_references
from .models import BlockModel, RenderedPage
from .page_generator import BuildFailure, BuildReport, GuideGenerator
from .page_renderer import PageRenderer
from .renderer import HtmlContentRenderer

__all__ = [
    "BlockModel",
    "BuildFailure",
    "BuildReport",
    "GuideGenerator",
    "HtmlContentRenderer",
    "LinkResolver",
    "LinkResolverExtension",
    "MarkdownInliner",
    "PageRenderer",
    "RenderedPage",
    "collect_references",
]
