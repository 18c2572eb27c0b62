"""Helpers for rewriting internal ``.md`` links in rendered HTML."""

from __future__ import annotations

import re
from urllib.parse import urlsplit

from ply_site._constants import HTML_SUFFIX, MARKDOWN_SUFFIX

MARKDOWN_HREF_PATTERN = re.compile(r'(<a[^>]*href=")([^"]+\.md)("[^>]*>)')


def _is_absolute_url(target: str) -> bool | None:
    """Return whether ``target`` has a scheme, or None when it cannot be parsed."""
    try:
        parsed = urlsplit(target)
    except ValueError:
        return None
    return bool(parsed.scheme)


def rewrite_target(target: str, *, pretty_urls: bool = False) -> str | None:
    """Return the rewritten link target, or None when it must stay untouched.

    >>> rewrite_target("../guide/setup.md")
    '../guide/setup.html'
    >>> rewrite_target("setup.md", pretty_urls=True)
    'setup'
    >>> rewrite_target("https://example.com/x.md") is None
    True
    """
    if not target.endswith(MARKDOWN_SUFFIX):
        return None
    absolute = _is_absolute_url(target)
    if absolute is None or absolute:
        return None
    rewritten = target.removesuffix(MARKDOWN_SUFFIX)
    if not pretty_urls:
        rewritten += HTML_SUFFIX
    return rewritten


def rewrite_markdown_links(html: str, *, pretty_urls: bool = False) -> str:
    """Point every relative ``.md`` anchor in ``html`` at its rendered page.

    Absolute URLs (anything with a scheme) and targets that fail to parse are
    left byte-identical. Applying the rewrite twice is the same as applying it
    once, because no rewritten target ends in ``.md``.
    """

    def _repl(match: re.Match[str]) -> str:
        before, target, after = match.groups()
        rewritten = rewrite_target(target, pretty_urls=pretty_urls)
        if rewritten is None:
            return match.group(0)
        return f"{before}{rewritten}{after}"

    return MARKDOWN_HREF_PATTERN.sub(_repl, html)


__all__ = ["MARKDOWN_HREF_PATTERN", "rewrite_markdown_links", "rewrite_target"]
