"""Cyclopts CLI entrypoint for building ply sites.

The ``ply`` console script renders a directory of Markdown documents and
``ply.template`` layouts into static HTML. Options can come from flags,
``PLY_*`` environment variables, or a YAML file passed with ``--config``;
flags win over the file, which wins over the defaults.

Examples
--------
Build ``site/`` into ``public/`` with pretty URLs:

>>> from ply_site.cli import app
>>> app(["build", "site", "public", "--pretty-urls"])  # doctest: +SKIP

Render in place, next to the sources:

>>> from ply_site.cli import main
>>> main(["build", "site", "--in-place"])  # doctest: +SKIP
"""

from __future__ import annotations

import sys
import typing as typ
from pathlib import Path

import cyclopts
from cyclopts import App, Parameter

from .config import build_site_config
from .errors import PlyError
from .site import Site

app = App(name="ply", config=cyclopts.config.Env("PLY_", command=False))  # type: ignore[unknown-argument]


def _format_path(path: Path) -> str:
    """Return a cwd-relative path when possible, otherwise the absolute path."""
    if path.is_absolute():
        try:
            return str(path.relative_to(Path.cwd()))
        except ValueError:  # pragma: no cover - fallback for different roots
            return str(path)
    return str(path)


@app.command(help="Render Markdown pages and layouts into a static site.")
def build(
    source: typ.Annotated[
        Path | None, Parameter(help="Directory holding the site sources")
    ] = None,
    target: typ.Annotated[
        Path | None,
        Parameter(help="Output directory; defaults to the source (needs --in-place)"),
    ] = None,
    *,
    config: typ.Annotated[
        Path | None, Parameter(help="YAML file with build options")
    ] = None,
    pretty_urls: typ.Annotated[
        bool | None, Parameter(help="Write x.md to x/index.html")
    ] = None,
    keep_links: typ.Annotated[
        bool | None, Parameter(help="Do not rewrite links to .md files")
    ] = None,
    include_markdown: typ.Annotated[
        bool | None, Parameter(help="Keep .md sources in the output")
    ] = None,
    include_templates: typ.Annotated[
        bool | None, Parameter(help="Keep ply.template files in the output")
    ] = None,
    allow_template_writes: typ.Annotated[
        bool | None, Parameter(help="Let templates create files with template_write")
    ] = None,
    in_place: typ.Annotated[
        bool | None, Parameter(help="Allow the target to be the source directory")
    ] = None,
    ignore: typ.Annotated[
        list[str] | None,
        Parameter(help="Regex of source paths to skip (replaces the dotfile default)"),
    ] = None,
    pygments_style: typ.Annotated[
        str | None, Parameter(help="Pygments style for highlighted code")
    ] = None,
) -> None:
    """Build the site described by the arguments and print each written file.

    Parameters
    ----------
    source : Path or None, optional
        Source directory; may instead come from the ``source`` key of the
        config file.
    target : Path or None, optional
        Output directory. Defaults to the source, which needs ``in_place``.
    config : Path or None, optional
        YAML file whose keys mirror the long option names.
    pretty_urls : bool or None, optional
        Write ``x.md`` to ``x/index.html``. Like every flag below, ``None``
        defers to the config file or the default.
    keep_links : bool or None, optional
        Leave links to ``.md`` files untouched.
    include_markdown : bool or None, optional
        Keep Markdown sources in the output.
    include_templates : bool or None, optional
        Keep layout files in the output.
    allow_template_writes : bool or None, optional
        Permit ``template_write`` calls.
    in_place : bool or None, optional
        Render next to the sources when the target is the source directory.
    ignore : list[str] or None, optional
        Ignore patterns for the source copy.
    pygments_style : str or None, optional
        Pygments style name.

    Raises
    ------
    PlyError
        On any invalid option, page, or layout.
    """
    site_config = build_site_config(
        source,
        target,
        config_path=config,
        pretty_urls=pretty_urls,
        keep_links=keep_links,
        include_markdown=include_markdown,
        include_templates=include_templates,
        allow_template_writes=allow_template_writes,
        in_place=in_place,
        ignore=ignore,
        pygments_style=pygments_style,
    )
    for path in Site(site_config).build():
        print(f"wrote {_format_path(path)}")


def main(tokens: list[str] | None = None) -> None:
    """Invoke the Cyclopts application that powers the ``ply`` console command.

    Build failures are printed to stderr and end the process with status 1.

    Examples
    --------
    >>> main(["build", "site", "public"])  # doctest: +SKIP
    """
    try:
        app(tokens)
    except (PlyError, OSError) as exc:
        print(f"error: {exc}", file=sys.stderr)
        raise SystemExit(1) from exc


if __name__ == "__main__":  # pragma: no cover - manual invocation helper
    main()
