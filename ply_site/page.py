"""Pages: one rendered output document each.

A :class:`Page` is created for every Markdown file found in the target tree.
Its identity (path, name, title, tags) is fixed at construction; the rendered
HTML is produced lazily and only lives for the duration of the render pass.
:class:`DataPage` is the variant synthesized by ``template_write``: it has an
identity and a ``data`` payload but no Markdown source.

Example
-------
>>> page = Page(site, site.target_root / "blog" / "post.md")  # doctest: +SKIP
>>> page.title, page.url  # doctest: +SKIP
('My Post', 'blog/post.html')
"""

from __future__ import annotations

import collections.abc as cabc
import typing as typ

from ._constants import INDEX_TARGET
from .frontmatter import Metadata, split_metadata
from .generator import find_first_heading, rewrite_markdown_links
from .layout import apply_layouts
from .paths import PagePath, normalize_url

if typ.TYPE_CHECKING:
    from pathlib import Path

    from .site import Site


class _BasePage:
    """Identity and site queries shared by real and data-only pages."""

    site: Site
    path: PagePath
    name: str
    title: str
    meta: Metadata
    tags: list[str]

    @property
    def url(self) -> str:
        """Return the site-relative URL of the rendered file."""
        return self.path.url

    @property
    def dir(self) -> str:
        """Return the URL of the directory holding the rendered file."""
        return normalize_url(self.path.rel_dir)

    @property
    def dir_parts(self) -> dict[str, str]:
        """Return ancestor directory URLs mapped to their names (breadcrumbs)."""
        return self.path.url_dir_parts

    @property
    def url_dir_parts(self) -> dict[str, str]:
        """Alias of :attr:`dir_parts`, named after :attr:`PagePath.url_dir_parts`."""
        return self.path.url_dir_parts

    @property
    def site_root(self) -> str:
        """Return the relative URL from this page back to the site root."""
        return self.path.url_to_root

    @property
    def sitemap(self) -> list[Page]:
        """Return every page of the site in discovery order."""
        return self.site.pages

    @property
    def sitemap_reversed(self) -> list[Page]:
        """Return every page of the site in reverse discovery order."""
        return list(reversed(self.site.pages))

    def rel(self, path: str) -> str:
        """Return a URL from this page to ``path`` (measured from the site root)."""
        return self.path.url_rel_to(path)

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.url!r})"


class Page(_BasePage):
    """A Markdown document rendered to HTML and wrapped by its layouts."""

    def __init__(self, site: Site, abs_src: Path) -> None:
        """Derive the page identity and register its tags with ``site``.

        Raises
        ------
        InvalidPathError
            If ``abs_src`` is not absolute.
        MetadataDecodeError
            If the front matter is not a YAML mapping.
        MetadataTypeError
            If ``title`` is not a string or ``tags`` is not a list of strings.
        """
        self.site = site
        self.path = PagePath.from_source(
            site.target_root, abs_src, pretty_urls=site.config.pretty_urls
        )
        self.name = _page_name(self.path)
        self.meta, body = self._read_source()
        self.title = (
            self.meta.get_str("title") or find_first_heading(body) or self.name
        )
        self.tags: list[str] = []
        self._content: str | None = None
        self._register_tags()

    def _read_source(self) -> tuple[Metadata, str]:
        text = self.path.abs_src.read_text(encoding="utf-8")
        return split_metadata(text, source=self.path.abs_src)

    def _register_tags(self) -> None:
        for tag in self.meta.get_str_list("tags"):
            self.tags.append(tag)
            self.site.tags.setdefault(tag, []).append(self)

    @property
    def content(self) -> str:
        """Return the page's working HTML, rendering the Markdown on first use.

        Inside a layout this is the output of the layouts applied so far, so a
        parent layout receives its child's output as ``page.content``.
        """
        if self._content is None:
            _meta, body = self._read_source()
            html = self.site.renderer.markdown(body)
            if not self.site.config.keep_links:
                html = rewrite_markdown_links(
                    html, pretty_urls=self.site.config.pretty_urls
                )
            self._content = html
        return self._content

    @content.setter
    def content(self, value: str) -> None:
        self._content = value

    def resolve(self) -> str:
        """Return the final HTML for this page and drop the working buffer.

        Raises
        ------
        TemplateExecutionError
            If any applicable layout fails to render.
        """
        try:
            return apply_layouts(self)
        finally:
            self._content = None


class DataPage(_BasePage):
    """Page identity for a file produced by a template, carrying ``data``."""

    def __init__(self, site: Site, abs_target: Path, data: typ.Any = None) -> None:  # noqa: ANN401
        self.site = site
        self.path = PagePath.from_target(site.target_root, abs_target)
        self.name = _page_name(self.path)
        self.meta = Metadata(source=self.path.rel)
        self.tags = []
        self.data = data
        title = data.get("title") if isinstance(data, cabc.Mapping) else None
        self.title = title if isinstance(title, str) and title else self.name

    @property
    def content(self) -> str:
        """Data pages have no Markdown body."""
        return ""


def _page_name(path: PagePath) -> str:
    """Return the display name used when a page has no title.

    A target named ``index.html`` keeps its full name, including the
    ``x/index.html`` outputs of pretty URLs; any other target drops its
    extension.
    """
    if path.abs.name == INDEX_TARGET:
        return INDEX_TARGET
    return path.abs.stem


__all__ = ["DataPage", "Page"]
