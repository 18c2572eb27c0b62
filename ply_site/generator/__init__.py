"""Utilities for rendering Markdown bodies and rewriting their links."""

from .link_rewriter import rewrite_markdown_links, rewrite_target
from .renderer import HtmlContentRenderer, find_first_heading

__all__ = [
    "HtmlContentRenderer",
    "find_first_heading",
    "rewrite_markdown_links",
    "rewrite_target",
]
