"""Map source documents to their output identity inside the target root.

A :class:`PagePath` is computed once per Markdown document and never changes
afterwards. It records where the rendered HTML is written, the site-relative
path and URL used by templates, and the chain of ancestor directories used to
build breadcrumbs.

Examples
--------
>>> from pathlib import Path
>>> path = PagePath.from_source(Path("/site"), Path("/site/blog/post.md"))
>>> path.url
'blog/post.html'
>>> dict(path.dir_parts)
{'blog': 'blog'}
>>> path.url_to_root
'..'
"""

from __future__ import annotations

import dataclasses as dc
import os
import typing as typ
from pathlib import Path

from ._constants import HTML_SUFFIX, INDEX_SOURCE, INDEX_TARGET, MARKDOWN_SUFFIX
from .errors import InvalidPathError, OutOfRootError

if typ.TYPE_CHECKING:
    import collections.abc as cabc


def target_path_for(source: Path, *, pretty_urls: bool = False) -> Path:
    """Return the HTML output path for the Markdown document at ``source``.

    Rules are checked in order: ``index.md`` becomes ``index.html``; a name
    ending in ``.html.md`` loses only its ``.md``; pretty URLs turn ``x.md``
    into ``x/index.html``; everything else swaps ``.md`` for ``.html``.
    """
    name = source.name
    if name == INDEX_SOURCE:
        return source.with_name(INDEX_TARGET)
    stem = name.removesuffix(MARKDOWN_SUFFIX)
    if stem.endswith(HTML_SUFFIX):
        return source.with_name(stem)
    if pretty_urls:
        return source.with_name(stem) / INDEX_TARGET
    return source.with_name(stem + HTML_SUFFIX)


def normalize_url(path: str | os.PathLike[str]) -> str:
    """Return ``path`` with platform separators replaced by ``/``."""
    text = os.fspath(path)
    if os.sep != "/":
        text = text.replace(os.sep, "/")
    return text


def relative_path(start: Path, target: Path) -> Path:
    """Return the path leading from directory ``start`` to ``target``.

    Raises
    ------
    InvalidPathError
        If the two paths share no common anchor (for example, different
        drives), so no relative path exists.
    """
    try:
        return target.relative_to(start, walk_up=True)
    except ValueError as exc:
        msg = f"no relative path from {start} to {target}"
        raise InvalidPathError(msg) from exc


def resolve_within(root: Path, base_dir: Path, path: str) -> Path:
    """Resolve ``path`` against ``base_dir`` and clamp it to ``root``.

    The join is textual (a leading ``/`` does not reset to the filesystem
    root) and ``..`` segments are collapsed without touching the disk, so the
    check happens before any read or write.

    Raises
    ------
    OutOfRootError
        If the normalized result is neither ``root`` nor inside it.
    """
    joined = Path(os.path.normpath(f"{base_dir}{os.sep}{path}"))
    if joined != root and not joined.is_relative_to(root):
        raise OutOfRootError(path, root)
    return joined


@dc.dataclass(frozen=True, slots=True)
class PagePath:
    """Target identity of one document, relative to the site's target root."""

    target_root: Path
    abs_src: Path
    abs: Path
    rel: Path
    abs_dir: Path
    rel_dir: Path
    dir_parts: dict[str, str]
    rel_to_root: Path

    @classmethod
    def from_source(
        cls, target_root: Path, abs_src: Path, *, pretty_urls: bool = False
    ) -> PagePath:
        """Compute the identity of the Markdown document at ``abs_src``.

        Raises
        ------
        InvalidPathError
            If ``abs_src`` is not absolute.
        """
        if not abs_src.is_absolute():
            msg = f"{abs_src} must be an absolute path"
            raise InvalidPathError(msg)
        return cls.from_target(
            target_root,
            target_path_for(abs_src, pretty_urls=pretty_urls),
            abs_src=abs_src,
        )

    @classmethod
    def from_target(
        cls, target_root: Path, abs_target: Path, *, abs_src: Path | None = None
    ) -> PagePath:
        """Build an identity directly from an output path (no ``.md`` mapping)."""
        if not abs_target.is_absolute():
            msg = f"{abs_target} must be an absolute path"
            raise InvalidPathError(msg)
        abs_dir = abs_target.parent
        rel_dir = relative_path(target_root, abs_dir)
        return cls(
            target_root=target_root,
            abs_src=abs_src or abs_target,
            abs=abs_target,
            rel=relative_path(target_root, abs_target),
            abs_dir=abs_dir,
            rel_dir=rel_dir,
            dir_parts=_ancestor_parts(rel_dir),
            rel_to_root=relative_path(abs_dir, target_root),
        )

    def rel_to(self, other: str | os.PathLike[str]) -> Path:
        """Return the path from this document's directory to ``other``.

        ``other`` is measured from the target root, so templates can link to
        a site path without hard-coding how deep the current page lives.
        """
        return relative_path(self.abs_dir, self.target_root / other)

    def url_rel_to(self, other: str | os.PathLike[str]) -> str:
        """Return :meth:`rel_to` as a ``/``-separated URL."""
        return normalize_url(self.rel_to(other))

    @property
    def url(self) -> str:
        """Return the site-relative URL of the output file."""
        return normalize_url(self.rel)

    @property
    def url_to_root(self) -> str:
        """Return the URL leading from this document back to the site root."""
        return normalize_url(self.rel_to_root)

    @property
    def url_dir_parts(self) -> dict[str, str]:
        """Return :attr:`dir_parts` keyed by URL instead of filesystem path."""
        return {normalize_url(path): name for path, name in self.dir_parts.items()}

    def __str__(self) -> str:
        return self.url


def _ancestor_parts(rel_dir: Path) -> dict[str, str]:
    """Map every ancestor directory in ``rel_dir`` to its last segment."""
    parts: dict[str, str] = {}
    segments: cabc.Sequence[str] = rel_dir.parts
    for index, segment in enumerate(segments):
        parts[os.fspath(Path(*segments[: index + 1]))] = segment
    return parts


def is_site_root(target_root: Path, directory: Path) -> bool:
    """Return True when ``directory`` is the target root (or above it)."""
    rel = relative_path(target_root, directory)
    return rel == Path() or rel.parts[0] == ".."


__all__ = [
    "PagePath",
    "is_site_root",
    "normalize_url",
    "relative_path",
    "resolve_within",
    "target_path_for",
]
