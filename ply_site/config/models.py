"""Typed dataclasses describing a site build."""

from __future__ import annotations

import dataclasses as dc
from pathlib import Path

from ply_site._constants import DEFAULT_IGNORE, DEFAULT_PYGMENTS_STYLE


@dc.dataclass(frozen=True, slots=True)
class SiteConfig:
    """Options fixed for the duration of one build.

    Attributes
    ----------
    source : Path
        Directory holding the Markdown sources, layouts and static assets.
    target : Path
        Output directory. May equal ``source`` only when ``in_place`` is set,
        and must never be nested inside it.
    pretty_urls : bool
        Write ``x.md`` to ``x/index.html`` instead of ``x.html``.
    keep_links : bool
        Leave ``.md`` link targets in rendered HTML untouched.
    include_markdown : bool
        Keep the ``.md`` sources in the output tree after rendering.
    include_templates : bool
        Keep ``ply.template`` layout files in the output tree.
    allow_template_writes : bool
        Permit templates to create extra files with ``template_write``.
    in_place : bool
        Allow ``target`` to equal ``source`` and render next to the sources.
    ignore : tuple[str, ...]
        Regular expressions matched against the absolute path of every entry
        during the source copy; matching entries are skipped.
    pygments_style : str
        Pygments style used for highlighted code blocks.
    """

    source: Path
    target: Path
    pretty_urls: bool = False
    keep_links: bool = False
    include_markdown: bool = False
    include_templates: bool = False
    allow_template_writes: bool = False
    in_place: bool = False
    ignore: tuple[str, ...] = DEFAULT_IGNORE
    pygments_style: str = DEFAULT_PYGMENTS_STYLE


OPTION_NAMES = frozenset(
    field.name for field in dc.fields(SiteConfig) if field.name not in {"source", "target"}
)


__all__ = ["OPTION_NAMES", "SiteConfig"]
