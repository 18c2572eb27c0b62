"""Shared fixtures for building throwaway sites under ``tmp_path``."""

from __future__ import annotations

import typing as typ
from textwrap import dedent

import pytest

from ply_site.config import SiteConfig
from ply_site.site import Site

if typ.TYPE_CHECKING:
    import collections.abc as cabc
    from pathlib import Path

WriteTree = typ.Callable[["Path", "cabc.Mapping[str, str]"], "Path"]


@pytest.fixture
def write_tree() -> WriteTree:
    """Return a helper that writes ``{relative_path: text}`` below a root."""

    def _write(root: Path, files: cabc.Mapping[str, str]) -> Path:
        root.mkdir(parents=True, exist_ok=True)
        for rel, text in files.items():
            path = root / rel
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text(dedent(text), encoding="utf-8")
        return root

    return _write


@pytest.fixture
def source_dir(tmp_path: Path) -> Path:
    """Return the (not yet created) source directory of a test site."""
    return tmp_path / "src"


@pytest.fixture
def target_dir(tmp_path: Path) -> Path:
    """Return the (not yet created) output directory of a test site."""
    return tmp_path / "out"


@pytest.fixture
def make_site(
    source_dir: Path, target_dir: Path, write_tree: WriteTree
) -> typ.Callable[..., Site]:
    """Return a factory writing ``files`` to the source and creating a Site.

    Extra keyword arguments are passed to :class:`SiteConfig`.
    """

    def _make(files: cabc.Mapping[str, str], **options: typ.Any) -> Site:  # noqa: ANN401
        write_tree(source_dir, files)
        return Site(SiteConfig(source_dir, target_dir, **options))

    return _make


@pytest.fixture
def in_place_site(
    tmp_path: Path, write_tree: WriteTree
) -> typ.Callable[..., Site]:
    """Return a factory for a site rendered in place (source == target)."""

    def _make(files: cabc.Mapping[str, str], **options: typ.Any) -> Site:  # noqa: ANN401
        root = write_tree(tmp_path / "site", files)
        return Site(SiteConfig(root, root, in_place=True, **options))

    return _make
