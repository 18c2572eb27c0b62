"""Render Markdown bodies into HTML with syntax-highlighted code blocks."""

from __future__ import annotations

import re

from markdown import Markdown
from pygments.formatters.html import HtmlFormatter

from ply_site._constants import DEFAULT_PYGMENTS_STYLE

FENCED_INDENT_PATTERN = re.compile(r"^[ ]{1,3}([`~]{3,})", re.MULTILINE)
HEADING_PATTERN = re.compile(
    r"^[ \t]{0,3}#{1,6}[ \t]*(?P<atx>[^\n#][^\n]*?)[ \t#]*$"
    r"|^[ \t]{0,3}(?P<setext>\S[^\n]*?)[ \t]*\r?\n[ \t]{0,3}(?:=+|-+)[ \t]*$",
    re.MULTILINE,
)


def find_first_heading(markdown_text: str) -> str:
    """Return the text of the first ATX or Setext heading, or ``""``.

    The search runs over raw Markdown, so closing hashes on ATX headings are
    dropped and a text line underlined with ``=`` or ``-`` counts as a heading.

    >>> find_first_heading("intro\\n\\n## Usage ##\\n")
    'Usage'
    >>> find_first_heading("My Post\\n=======\\n")
    'My Post'
    >>> find_first_heading("no headings here")
    ''
    """
    match = HEADING_PATTERN.search(markdown_text)
    if match is None:
        return ""
    heading = match.group("atx") or match.group("setext") or ""
    return heading.strip()


class HtmlContentRenderer:
    """Render Markdown into HTML with consistent extensions and styling."""

    def __init__(self, pygments_style: str = DEFAULT_PYGMENTS_STYLE) -> None:
        """Initialize a renderer with the Pygments style used by ``codehilite``.

        Parameters
        ----------
        pygments_style : str, optional
            Name of the Pygments style used for syntax highlighting. Defaults to
            ``"monokai"``.
        """
        self.pygments_style = pygments_style
        self._formatter = HtmlFormatter(style=pygments_style, cssclass="codehilite")

    @property
    def stylesheet(self) -> str:
        """Return the CSS used for highlighted code blocks."""
        return self._formatter.get_style_defs(".codehilite")

    def markdown(self, text: str) -> str:
        """Render ``text`` into HTML; blank input renders to an empty string."""
        normalized = FENCED_INDENT_PATTERN.sub(r"\1", text)
        if not normalized.strip():
            return ""
        md = Markdown(
            extensions=["fenced_code", "codehilite", "tables", "sane_lists"],
            extension_configs={
                "codehilite": {
                    "linenums": False,
                    "guess_lang": False,
                    "css_class": "codehilite",
                    "pygments_style": self.pygments_style,
                }
            },
        )
        return md.convert(normalized)


__all__ = ["HEADING_PATTERN", "HtmlContentRenderer", "find_first_heading"]
