"""Tests for the copy, discover, render and clean phases of a build."""

from __future__ import annotations

import typing as typ

import pytest

from ply_site.config import SiteConfig
from ply_site.errors import (
    ConfigurationError,
    DuplicateTargetError,
    MetadataDecodeError,
)
from ply_site.site import Site

if typ.TYPE_CHECKING:
    from pathlib import Path

    from conftest import WriteTree

SiteFactory = typ.Callable[..., Site]


def _files(root: Path) -> list[str]:
    return sorted(
        path.relative_to(root).as_posix() for path in root.rglob("*") if path.is_file()
    )


def test_target_inside_source_is_rejected(source_dir: Path) -> None:
    source_dir.mkdir()
    with pytest.raises(ConfigurationError, match="must not be inside"):
        Site(SiteConfig(source_dir, source_dir / "public"))


def test_source_inside_target_is_rejected(tmp_path: Path, write_tree: WriteTree) -> None:
    source = write_tree(tmp_path / "out" / "src", {"index.md": "# Home\n"})

    with pytest.raises(ConfigurationError, match="must not be inside target"):
        Site(SiteConfig(source, tmp_path / "out"))

    assert (source / "index.md").read_text(encoding="utf-8") == "# Home\n"
    assert not (source / "index.html").exists()


def test_same_directory_needs_in_place(source_dir: Path) -> None:
    with pytest.raises(ConfigurationError, match="enable in_place"):
        Site(SiteConfig(source_dir, source_dir))


def test_invalid_ignore_pattern_is_rejected(source_dir: Path, target_dir: Path) -> None:
    with pytest.raises(ConfigurationError, match="Invalid ignore pattern"):
        Site(SiteConfig(source_dir, target_dir, ignore=("(unclosed",)))


def test_build_copies_renders_and_cleans(make_site: SiteFactory) -> None:
    site = make_site(
        {
            "ply.template": "{{ page.content }}",
            "index.md": "# Home\n",
            "blog/post.md": "# Post\n",
            "css/site.css": "body {}",
        }
    )
    written = site.build()

    assert _files(site.target_root) == ["blog/post.html", "css/site.css", "index.html"]
    assert written == [
        site.target_root / "blog" / "post.html",
        site.target_root / "index.html",
    ], "pages are written in lexical discovery order"
    assert (site.source_root / "index.md").exists(), "sources stay untouched"


def test_include_flags_keep_sources(make_site: SiteFactory) -> None:
    site = make_site(
        {"ply.template": "{{ page.content }}", "index.md": "x\n"},
        include_markdown=True,
        include_templates=True,
    )
    site.build()
    assert _files(site.target_root) == ["index.html", "index.md", "ply.template"]


def test_clean_reports_removed_files(make_site: SiteFactory) -> None:
    site = make_site({"ply.template": "{{ page.content }}", "a/b.md": "x\n"})
    site.copy_source()
    site.discover()

    removed = site.clean()

    assert sorted(path.relative_to(site.target_root).as_posix() for path in removed) == [
        "a/b.md",
        "ply.template",
    ]


def test_in_place_build_keeps_sources(in_place_site: SiteFactory) -> None:
    site = in_place_site({"ply.template": "<{{ page.content }}>", "index.md": "x\n"})
    assert site.in_place

    site.build()

    assert _files(site.target_root) == ["index.html", "index.md", "ply.template"]
    assert site.clean() == []


def test_dotfiles_are_ignored_by_default(make_site: SiteFactory) -> None:
    site = make_site(
        {
            ".git/config": "[core]",
            ".hidden.md": "secret\n",
            "docs/.draft.md": "draft\n",
            "docs/page.md": "page\n",
        }
    )
    site.build()
    assert _files(site.target_root) == ["docs/page.html"]


def test_custom_ignore_replaces_default(make_site: SiteFactory) -> None:
    site = make_site(
        {
            ".well-known/security.txt": "contact",
            "drafts/wip.md": "wip\n",
            "index.md": "x\n",
        },
        ignore=(r"/drafts$",),
    )
    site.build()
    assert _files(site.target_root) == [".well-known/security.txt", "index.html"]


def test_local_overrides_are_overlaid(make_site: SiteFactory) -> None:
    site = make_site(
        {
            "settings.txt": "shared",
            "index.md": "x\n",
            "ply.local/settings.txt": "local",
            "ply.local/extra/.env": "KEY=1",
        }
    )
    site.build()

    root = site.target_root
    assert (root / "settings.txt").read_text(encoding="utf-8") == "local"
    assert (root / "extra" / ".env").exists(), "overrides are copied unfiltered"
    assert not (root / "ply.local").exists()


def test_duplicate_targets_are_rejected(make_site: SiteFactory) -> None:
    site = make_site({"feed.md": "a\n", "feed.html.md": "b\n"})
    with pytest.raises(DuplicateTargetError, match="feed.html"):
        site.build()


def test_pretty_url_collision_is_rejected(make_site: SiteFactory) -> None:
    site = make_site({"blog.md": "a\n", "blog/index.md": "b\n"}, pretty_urls=True)
    with pytest.raises(DuplicateTargetError):
        site.build()


def test_bad_page_aborts_before_any_output(make_site: SiteFactory) -> None:
    site = make_site({"a.md": "fine\n", "b.md": "---\n- not a mapping\n---\n"})

    with pytest.raises(MetadataDecodeError):
        site.build()

    assert not list(site.target_root.rglob("*.html"))


def test_rebuild_produces_identical_output(make_site: SiteFactory) -> None:
    site_files = {
        "ply.template": "<main>{{ page.content }}</main>",
        "index.md": "# Home\n",
        "blog/post.md": "[home](../index.md)\n",
    }
    first_site = make_site(site_files)
    first = first_site.build()
    snapshot = {
        path: path.read_text(encoding="utf-8") for path in first_site.target_root.rglob("*.html")
    }

    second_site = Site(first_site.config)
    second = second_site.build()

    assert second == first
    assert {
        path: path.read_text(encoding="utf-8")
        for path in second_site.target_root.rglob("*.html")
    } == snapshot
    assert 'href="../index.html"' in snapshot[first_site.target_root / "blog" / "post.html"]


def test_generated_files_are_reported(make_site: SiteFactory) -> None:
    site = make_site(
        {
            "gallery/ply.template": (
                "{{ template_import('item.tmpl', 'item') }}"
                "{% for name in ['a', 'b'] %}"
                "{{ template_write('item', name + '.html', {'title': name}) }}"
                "{% endfor %}{{ page.content }}"
            ),
            "gallery/item.tmpl": "<h1>{{ page.title }}</h1>",
            "gallery/index.md": "list\n",
        },
        allow_template_writes=True,
    )
    written = site.build()

    gallery = site.target_root / "gallery"
    assert written == [gallery / "index.html", gallery / "a.html", gallery / "b.html"]
    assert (gallery / "b.html").read_text(encoding="utf-8") == "<h1>b</h1>"
