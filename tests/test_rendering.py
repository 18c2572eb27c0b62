"""Unit tests for Markdown rendering, heading detection and link rewriting."""

from __future__ import annotations

import pytest
from bs4 import BeautifulSoup

from ply_site.generator import (
    HtmlContentRenderer,
    find_first_heading,
    rewrite_markdown_links,
)


@pytest.mark.parametrize(
    ("markdown", "expected"),
    [
        ("# My Post\n\nBody", "My Post"),
        ("Intro line\n\n### Third level ###\n", "Third level"),
        ("My Post\n=======\n\ntext", "My Post"),
        ("Subtitle\n---\n", "Subtitle"),
        ("#Tight\n", "Tight"),
        ("Just a paragraph.\n- a list item\n", ""),
        ("", ""),
    ],
)
def test_find_first_heading(markdown: str, expected: str) -> None:
    assert find_first_heading(markdown) == expected


def test_first_heading_wins_over_later_ones() -> None:
    assert find_first_heading("Top\n===\n\n# Later\n") == "Top"


def test_markdown_renders_tables_and_highlighted_code() -> None:
    renderer = HtmlContentRenderer()
    html = renderer.markdown(
        "| a | b |\n|---|---|\n| 1 | 2 |\n\n```python\nprint('hi')\n```\n"
    )
    soup = BeautifulSoup(html, "html.parser")
    assert soup.find("table") is not None, "expected the tables extension"
    assert soup.select_one("div.codehilite") is not None, "expected codehilite"
    assert ".codehilite" in renderer.stylesheet


def test_blank_markdown_renders_empty() -> None:
    assert HtmlContentRenderer().markdown("  \n") == ""


def test_relative_markdown_links_are_rewritten() -> None:
    html = (
        '<p><a href="guide.md">Guide</a> and '
        '<a class="x" href="../docs/setup.md" title="t">Setup</a></p>'
    )
    assert rewrite_markdown_links(html) == (
        '<p><a href="guide.html">Guide</a> and '
        '<a class="x" href="../docs/setup.html" title="t">Setup</a></p>'
    )


def test_pretty_urls_drop_the_extension() -> None:
    html = '<a href="guide.md">Guide</a>'
    assert rewrite_markdown_links(html, pretty_urls=True) == '<a href="guide">Guide</a>'


@pytest.mark.parametrize(
    "html",
    [
        '<a href="http://example.com/x.md">x</a>',
        '<a href="mailto:someone.md">mail</a>',
        '<a href="http://[broken.md">broken</a>',
        '<a href="guide.md#usage">anchor</a>',
        '<img src="diagram.md">',
    ],
)
def test_links_left_untouched(html: str) -> None:
    assert rewrite_markdown_links(html) == html


@pytest.mark.parametrize("pretty_urls", [False, True])
def test_rewriting_is_idempotent(pretty_urls: bool) -> None:  # noqa: FBT001
    html = '<a href="a.md">a</a><a href="https://x.org/b.md">b</a><a href="a.md">again</a>'
    once = rewrite_markdown_links(html, pretty_urls=pretty_urls)
    assert rewrite_markdown_links(once, pretty_urls=pretty_urls) == once
    assert 'href="a.md"' not in once
    assert 'href="https://x.org/b.md"' in once
