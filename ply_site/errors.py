"""Exception hierarchy raised while building a site.

Every error derives from :class:`PlyError` so the CLI can report any build
failure uniformly. Each class also inherits the closest builtin so callers
catching ``ValueError`` or ``TypeError`` keep working.
"""

from __future__ import annotations

import typing as typ

if typ.TYPE_CHECKING:
    from pathlib import Path


class PlyError(Exception):
    """Base class for all site build failures."""


class InvalidPathError(PlyError, ValueError):
    """Raised when a path is not absolute or no relative path can be formed."""


class ConfigurationError(PlyError, ValueError):
    """Raised when the site options are inconsistent or disallowed."""


class DuplicateTargetError(ConfigurationError):
    """Raised when two source documents resolve to the same output file."""


class OutOfRootError(PlyError, ValueError):
    """Raised when a template path resolves outside the target root."""

    def __init__(self, path: str, root: Path) -> None:
        self.path = path
        self.root = root
        super().__init__(f"{path} is not inside {root}")


class MetadataDecodeError(PlyError, ValueError):
    """Raised when a front-matter block or YAML file cannot be decoded."""

    def __init__(self, path: Path | str, reason: str) -> None:
        self.path = path
        super().__init__(f"{path}: invalid metadata: {reason}")


class MetadataTypeError(PlyError, TypeError):
    """Raised when a metadata field has the wrong shape."""

    def __init__(self, path: Path | str, reason: str) -> None:
        self.path = path
        super().__init__(f"{path}: {reason}")


class TemplateExecutionError(PlyError, RuntimeError):
    """Raised when a layout fails to compile or render."""

    def __init__(self, template: Path, page: Path | str, reason: str) -> None:
        self.template = template
        self.page = page
        super().__init__(f"{template} (rendering {page}): {reason}")


__all__ = [
    "ConfigurationError",
    "DuplicateTargetError",
    "InvalidPathError",
    "MetadataDecodeError",
    "MetadataTypeError",
    "OutOfRootError",
    "PlyError",
    "TemplateExecutionError",
]
