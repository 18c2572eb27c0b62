"""Functions exposed to layout templates as Jinja globals.

Each :class:`Layout` gets its own :class:`TemplateFunctions`, so relative
paths given to these functions resolve against the directory holding that
layout's ``ply.template``. Every resolved path is clamped to the target root:
``include("../../etc/passwd")`` raises :class:`~ply_site.errors.OutOfRootError`
before anything is read.

Examples
--------
Inside a layout::

    {% for path, name in list_files("photos").items() %}
      <img src="photos/{{ path }}" alt="{{ name }}">
    {% endfor %}
    {{ template_import("partials/card.tmpl", "card") }}
    {% include "card" %}
"""

from __future__ import annotations

import collections.abc as cabc
import datetime as dt
import fnmatch
import posixpath
import re
import threading
import typing as typ

from ._constants import HTML_SUFFIX, MARKDOWN_SUFFIX
from .errors import ConfigurationError
from .frontmatter import dump_yaml, load_yaml_mapping
from .paths import resolve_within

if typ.TYPE_CHECKING:
    from pathlib import Path

    from .layout import Layout

_LISTING_EXCLUDED_SUFFIXES = frozenset({MARKDOWN_SUFFIX, HTML_SUFFIX, ".template"})


class RegexCache:
    """Compile-once cache of regular expressions keyed by pattern text."""

    def __init__(self) -> None:
        self._patterns: dict[str, re.Pattern[str]] = {}
        self._lock = threading.Lock()

    def compile(self, pattern: str) -> re.Pattern[str]:
        """Return the compiled ``pattern``; ``re.error`` propagates."""
        with self._lock:
            compiled = self._patterns.get(pattern)
            if compiled is None:
                compiled = re.compile(pattern)
                self._patterns[pattern] = compiled
            return compiled

    def __len__(self) -> int:
        return len(self._patterns)


class TemplateFunctions:
    """Site-aware helpers bound to one layout."""

    def __init__(self, layout: Layout) -> None:
        self.layout = layout
        self.site = layout.site

    def as_globals(self) -> dict[str, cabc.Callable[..., typ.Any]]:
        """Return the mapping registered on the layout's Jinja environment."""
        return {
            "path_base": posixpath.basename,
            "path_dir": posixpath.dirname,
            "path_rel": path_rel,
            "path_match": path_match,
            "list_files": self.list_files,
            "has_page": self.has_page,
            "has_file": self.has_file,
            "has_file_or_page": self.has_file_or_page,
            "include": self.include,
            "template_import": self.template_import,
            "template_write": self.template_write,
            "yaml_read": self.yaml_read,
            "yaml_write": self.yaml_write,
            "regex_match": self.regex_match,
            "regex_replace_all": self.regex_replace_all,
            "regex_find": self.regex_find,
            "regex_find_submatch": self.regex_find_submatch,
            "strings_join": strings_join,
            "strings_split": strings_split,
            "array": array,
            "time_now": time_now,
            "time_format": time_format,
            "time_parse": time_parse,
        }

    def resolve(self, path: str) -> Path:
        """Resolve ``path`` against the layout directory, clamped to the root."""
        return resolve_within(self.site.target_root, self.layout.directory, path)

    def list_files(
        self, path: str = ".", recursive: bool = False, dirs: bool = False  # noqa: FBT001, FBT002
    ) -> dict[str, str]:
        """Return ``{relative_path: name}`` for entries below ``path``.

        Pages, rendered HTML and layout files are skipped. Without
        ``recursive`` only direct children are listed; ``dirs`` lists
        directories instead of files.
        """
        root = self.resolve(path)
        root.stat()
        entries = root.rglob("*") if recursive else root.iterdir()
        listing: dict[str, str] = {}
        for entry in sorted(entries):
            if entry.is_dir() != dirs or entry.suffix in _LISTING_EXCLUDED_SUFFIXES:
                continue
            listing[entry.relative_to(root).as_posix()] = entry.name
        return listing

    def has_page(self, url: str) -> bool:
        """Return True when a page of the site is published at ``url``."""
        return any(page.url == url for page in self.site.pages)

    def has_file(self, path: str) -> bool:
        """Return True when ``path`` exists in the target tree."""
        return self.resolve(path).exists()

    def has_file_or_page(self, path: str) -> bool:
        return self.has_file(path) or self.has_page(path)

    def include(self, path: str) -> str:
        """Return the text of the file at ``path``."""
        return self.resolve(path).read_text(encoding="utf-8")

    def template_import(self, path: str, name: str) -> str:
        """Register the file at ``path`` as the sub-template ``name``.

        Returns an empty string so the call can sit in an expression tag.
        """
        self.layout.define(name, self.include(path))
        return ""

    def template_write(self, name: str, path: str, data: typ.Any = None) -> str:  # noqa: ANN401
        """Render sub-template ``name`` for a data page and write it to ``path``.

        Raises
        ------
        ConfigurationError
            If the site does not allow templates to write files.
        OutOfRootError
            If ``path`` escapes the target root.
        """
        if not self.site.config.allow_template_writes:
            msg = (
                f"{self.layout.path}: template_write({name!r}, {path!r}) needs "
                "template writes to be allowed"
            )
            raise ConfigurationError(msg)
        target = self.resolve(path)
        output = self.layout.render(self.site.data_page(target, data), name)
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_text(output, encoding="utf-8")
        self.site.generated.append(target)
        return ""

    def yaml_read(self, path: str) -> dict[str, typ.Any]:
        """Decode the YAML mapping stored at ``path``."""
        target = self.resolve(path)
        return load_yaml_mapping(target.read_text(encoding="utf-8"), source=target)

    def yaml_write(self, path: str, data: cabc.Mapping[str, typ.Any]) -> str:
        """Encode ``data`` as YAML into ``path``."""
        self.resolve(path).write_text(dump_yaml(data), encoding="utf-8")
        return ""

    def regex_match(self, pattern: str, text: str) -> bool:
        return self.site.regex_cache.compile(pattern).search(text) is not None

    def regex_replace_all(self, pattern: str, text: str, replacement: str) -> str:
        return self.site.regex_cache.compile(pattern).sub(replacement, text)

    def regex_find(self, pattern: str, text: str) -> str:
        """Return the leftmost match of ``pattern`` in ``text`` or ``""``."""
        match = self.site.regex_cache.compile(pattern).search(text)
        return match.group(0) if match else ""

    def regex_find_submatch(self, pattern: str, text: str) -> list[str]:
        """Return ``[match, group1, ...]`` for the leftmost match, or ``[]``.

        Groups that did not participate in the match are reported as ``""``.
        """
        match = self.site.regex_cache.compile(pattern).search(text)
        if match is None:
            return []
        return [match.group(0), *(group or "" for group in match.groups())]


def path_rel(base: str, target: str) -> str:
    """Return ``target`` relative to ``base`` using ``/`` separators."""
    return posixpath.relpath(target, base)


def path_match(pattern: str, name: str) -> bool:
    """Return True when ``name`` matches the shell-style ``pattern``."""
    return fnmatch.fnmatchcase(name, pattern)


def strings_join(items: cabc.Iterable[object], sep: str) -> str:
    return sep.join(str(item) for item in items)


def strings_split(text: str, sep: str) -> list[str]:
    return text.split(sep)


def array(*items: object) -> list[object]:
    return list(items)


def time_now() -> dt.datetime:
    """Return the current local time as a timezone-aware datetime."""
    return dt.datetime.now().astimezone()


def time_format(value: dt.datetime, fmt: str) -> str:
    """Format ``value`` with a ``strftime`` pattern."""
    return value.strftime(fmt)


def time_parse(fmt: str, value: str) -> dt.datetime:
    """Parse ``value`` with a ``strptime`` pattern; ``ValueError`` propagates."""
    return dt.datetime.strptime(value, fmt)  # noqa: DTZ007 - naive by contract


__all__ = [
    "RegexCache",
    "TemplateFunctions",
    "array",
    "path_match",
    "path_rel",
    "strings_join",
    "strings_split",
    "time_format",
    "time_now",
    "time_parse",
]
