"""Build a static site from a tree of Markdown documents and layouts.

:class:`Site` runs the whole pipeline for one :class:`SiteConfig`:

1. copy the source tree into the target tree (skipping ignored entries) and
   overlay the ``ply.local`` override directory;
2. walk the target tree once, turning ``*.md`` files into pages and
   ``ply.template`` files into layouts;
3. render every page through its layouts and write the HTML;
4. remove the Markdown sources and layout files from the output.

Any error aborts the build immediately. Files already written stay in place.

Example
-------
>>> from pathlib import Path
>>> from ply_site.config import SiteConfig
>>> site = Site(SiteConfig(Path("site"), Path("public")))  # doctest: +SKIP
>>> site.build()  # doctest: +SKIP
[PosixPath('/work/public/index.html'), ...]
"""

from __future__ import annotations

import re
import shutil
import typing as typ
from pathlib import Path

from ._constants import LAYOUT_FILENAME, LOCAL_OVERRIDE_DIR, MARKDOWN_SUFFIX
from .errors import ConfigurationError, DuplicateTargetError
from .generator import HtmlContentRenderer
from .layout import Layout
from .page import DataPage, Page
from .template_functions import RegexCache

if typ.TYPE_CHECKING:
    import collections.abc as cabc

    from .config import SiteConfig


class Site:
    """Registries and orchestration for one build."""

    def __init__(self, config: SiteConfig) -> None:
        """Resolve the roots, validate them and prepare empty registries.

        Raises
        ------
        ConfigurationError
            If either root is nested inside the other, the target equals
            the source without ``in_place``, or an ignore pattern is not a
            valid regular expression.
        """
        self.config = config
        self.source_root = config.source.resolve()
        self.target_root = config.target.resolve()
        if self.target_root != self.source_root and self.target_root.is_relative_to(
            self.source_root
        ):
            msg = (
                f"Target {self.target_root} must not be inside source "
                f"{self.source_root}; it would be copied into itself."
            )
            raise ConfigurationError(msg)
        if self.source_root != self.target_root and self.source_root.is_relative_to(
            self.target_root
        ):
            msg = (
                f"Source {self.source_root} must not be inside target "
                f"{self.target_root}; cleanup would delete the sources."
            )
            raise ConfigurationError(msg)
        if self.target_root == self.source_root and not config.in_place:
            msg = (
                f"Target {self.target_root} is the source directory; "
                "enable in_place to render next to the sources."
            )
            raise ConfigurationError(msg)

        self.ignore_patterns = _compile_patterns(config.ignore)
        self.ignore_patterns.extend(
            [
                _exact_path_pattern(self.target_root),
                _exact_path_pattern(self.source_root / LOCAL_OVERRIDE_DIR),
            ]
        )
        self.pages: list[Page] = []
        self.tags: dict[str, list[Page]] = {}
        self.templates: dict[Path, Layout] = {}
        self.generated: list[Path] = []
        self.regex_cache = RegexCache()
        self.renderer = HtmlContentRenderer(config.pygments_style)
        self._targets: dict[Path, Page] = {}

    @property
    def in_place(self) -> bool:
        """Return True when pages are rendered next to their sources."""
        return self.source_root == self.target_root

    def build(self) -> list[Path]:
        """Run the full pipeline and return every file written.

        Returns
        -------
        list[Path]
            Rendered pages in discovery order, followed by files created by
            ``template_write``.
        """
        if not self.in_place:
            self.copy_source()
        self.discover()
        written = [self.write_page(page) for page in self.pages]
        self.clean()
        return [*written, *self.generated]

    def copy_source(self) -> None:
        """Copy the source tree into the target tree, then apply overrides.

        Ignore patterns are searched in the absolute, ``/``-separated path of
        every entry; a matching directory is skipped with all its contents.
        """
        shutil.copytree(
            self.source_root,
            self.target_root,
            ignore=self._ignored_names,
            dirs_exist_ok=True,
        )
        overrides = self.source_root / LOCAL_OVERRIDE_DIR
        if overrides.is_dir():
            shutil.copytree(overrides, self.target_root, dirs_exist_ok=True)

    def _ignored_names(self, directory: str, names: list[str]) -> set[str]:
        base = Path(directory)
        return {
            name
            for name in names
            if any(
                pattern.search((base / name).as_posix())
                for pattern in self.ignore_patterns
            )
        }

    def discover(self) -> None:
        """Register every page and layout found in the target tree.

        Files are visited in lexical path order, so ``pages`` follows the
        order of a depth-first walk of the tree.
        """
        for entry in _walk_files(self.target_root):
            if entry.name == LAYOUT_FILENAME:
                self.templates[entry.parent] = Layout(self, entry)
            elif entry.suffix == MARKDOWN_SUFFIX:
                self.add_page(Page(self, entry))

    def add_page(self, page: Page) -> None:
        """Append ``page`` to the sitemap.

        Raises
        ------
        DuplicateTargetError
            If another page already renders to the same output file.
        """
        existing = self._targets.get(page.path.abs)
        if existing is not None:
            msg = (
                f"{page.path.abs_src} and {existing.path.abs_src} both render "
                f"to {page.url}"
            )
            raise DuplicateTargetError(msg)
        self._targets[page.path.abs] = page
        self.pages.append(page)

    def data_page(self, abs_target: Path, data: typ.Any = None) -> DataPage:  # noqa: ANN401
        """Return a data-only page for a file produced by a template."""
        return DataPage(self, abs_target, data)

    def write_page(self, page: Page) -> Path:
        """Render ``page`` through its layouts and write the result."""
        html = page.resolve()
        output_path = page.path.abs
        output_path.parent.mkdir(parents=True, exist_ok=True)
        output_path.write_text(html, encoding="utf-8")
        return output_path

    def clean(self) -> list[Path]:
        """Remove Markdown sources and layout files from the output tree.

        Nothing is removed for an in-place build, where those files are the
        sources themselves.
        """
        removed: list[Path] = []
        if self.in_place:
            return removed
        for entry in _walk_files(self.target_root):
            if (
                entry.suffix == MARKDOWN_SUFFIX and not self.config.include_markdown
            ) or (entry.name == LAYOUT_FILENAME and not self.config.include_templates):
                entry.unlink()
                removed.append(entry)
        return removed


def _walk_files(root: Path) -> list[Path]:
    """Return every file below ``root`` in lexical path order."""
    return sorted(entry for entry in root.rglob("*") if entry.is_file())


def _compile_patterns(patterns: cabc.Iterable[str]) -> list[re.Pattern[str]]:
    compiled: list[re.Pattern[str]] = []
    for pattern in patterns:
        try:
            compiled.append(re.compile(pattern))
        except re.error as exc:
            msg = f"Invalid ignore pattern {pattern!r}: {exc}"
            raise ConfigurationError(msg) from exc
    return compiled


def _exact_path_pattern(path: Path) -> re.Pattern[str]:
    return re.compile(f"^{re.escape(path.as_posix())}$")


__all__ = ["Site"]
