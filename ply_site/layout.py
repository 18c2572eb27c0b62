"""Directory-scoped Jinja layouts and their innermost-first composition.

Every ``ply.template`` file is compiled into a :class:`Layout` bound to its
directory. A page is wrapped by the layout of its own directory first, then by
the layout of each ancestor up to the target root, so each layout sees the
output of the layouts below it as ``page.content``.

Layout files are plain Jinja2 source. The context holds ``page`` (the page
being rendered), ``site``, ``data`` (the payload of a ``template_write`` call,
otherwise ``None``) and ``pygments_css``; the functions of
:mod:`ply_site.template_functions` are available as globals.

Example
-------
A root ``ply.template`` such as::

    <html><title>{{ page.title }}</title><body>{{ page.content }}</body></html>

wraps every page of the site, after any layout closer to the page has run.
"""

from __future__ import annotations

import threading
import typing as typ

from jinja2 import DictLoader, Environment, TemplateError

from .errors import PlyError, TemplateExecutionError
from .paths import is_site_root
from .template_functions import TemplateFunctions

if typ.TYPE_CHECKING:
    from pathlib import Path

    from .page import DataPage, Page
    from .site import Site


class Layout:
    """A compiled layout template bound to one directory of the target tree.

    The compiled set is mutable: ``template_import`` registers named
    sub-templates while a page renders. Rendering and registration share one
    re-entrant lock, so two pages never render the same layout at once.
    """

    def __init__(self, site: Site, path: Path) -> None:
        """Read and compile the layout file at ``path``.

        Raises
        ------
        TemplateExecutionError
            If the template source has a syntax error.
        OSError
            If the file cannot be read.
        """
        self.site = site
        self.path = path
        self.directory = path.parent
        self._sources: dict[str, str] = {}
        self._lock = threading.RLock()
        self.env = Environment(
            loader=DictLoader(self._sources),
            autoescape=False,
            keep_trailing_newline=True,
            trim_blocks=True,
            lstrip_blocks=True,
        )
        self.env.globals.update(TemplateFunctions(self).as_globals())
        self.name = str(path)
        self._sources[self.name] = path.read_text(encoding="utf-8")
        try:
            self.template = self.env.get_template(self.name)
        except TemplateError as exc:
            raise TemplateExecutionError(path, "<compile>", str(exc)) from exc

    def define(self, name: str, source: str) -> None:
        """Register ``source`` as the named sub-template ``name``."""
        with self._lock:
            self._sources[name] = source

    def render(self, page: Page | DataPage, name: str | None = None) -> str:
        """Render this layout (or its sub-template ``name``) for ``page``.

        Raises
        ------
        TemplateExecutionError
            If Jinja fails to compile or render the template, or a template
            function fails with an error that is neither a ``PlyError`` nor an
            ``OSError``. Those two propagate unchanged.
        """
        context = {
            "page": page,
            "site": self.site,
            "data": getattr(page, "data", None),
            "pygments_css": self.site.renderer.stylesheet,
        }
        with self._lock:
            try:
                template = self.template if name is None else self.env.get_template(name)
                return template.render(context)
            except (PlyError, OSError):
                raise
            except Exception as exc:  # noqa: BLE001
                reason = (
                    str(exc)
                    if isinstance(exc, TemplateError)
                    else f"{type(exc).__name__}: {exc}"
                )
                raise TemplateExecutionError(self.path, page.url, reason) from exc

    def __repr__(self) -> str:
        return f"Layout({self.path!s})"


def apply_layouts(page: Page) -> str:
    """Wrap ``page`` in every layout from its directory up to the target root.

    Starting at the directory holding the page's output file, each registered
    layout renders with the page and its output becomes ``page.content`` for
    the next (more general) layout. The walk stops once the target root has
    been processed.
    """
    site = page.site
    directory = page.path.abs_dir
    while True:
        layout = site.templates.get(directory)
        if layout is not None:
            page.content = layout.render(page)
        if is_site_root(site.target_root, directory):
            break
        directory = directory.parent
    return page.content


__all__ = ["Layout", "apply_layouts"]
