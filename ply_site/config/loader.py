"""Load optional YAML config files and merge them with CLI overrides."""

from __future__ import annotations

import typing as typ
from pathlib import Path

from ruamel.yaml import YAML
from ruamel.yaml.error import YAMLError

from ply_site.errors import ConfigurationError

from .models import OPTION_NAMES, SiteConfig

_BOOL_OPTIONS = frozenset(
    {
        "pretty_urls",
        "keep_links",
        "include_markdown",
        "include_templates",
        "allow_template_writes",
        "in_place",
    }
)


def load_site_config(path: Path) -> dict[str, typ.Any]:
    """Read build options from a YAML mapping.

    Parameters
    ----------
    path : Path
        Filesystem path to the YAML file (for example, ``ply.yaml``).

    Returns
    -------
    dict[str, Any]
        Option values keyed by :class:`SiteConfig` field name. ``source`` and
        ``target`` are returned as paths resolved against the file's
        directory when present.

    Raises
    ------
    FileNotFoundError
        If the configuration file does not exist at ``path``.
    ConfigurationError
        If the YAML cannot be parsed, the top level is not a mapping, a key is
        unknown, or a value has the wrong type.

    Examples
    --------
    >>> from pathlib import Path
    >>> load_site_config(Path("ply.yaml"))  # doctest: +SKIP
    {'pretty_urls': True}
    """
    if not path.exists():
        msg = f"Configuration file '{path}' not found."
        raise FileNotFoundError(msg)

    loader = YAML(typ="safe")
    loader.version = (1, 2)
    try:
        with path.open("r", encoding="utf-8") as handle:
            loaded = loader.load(handle) or {}
    except YAMLError as exc:
        msg = f"{path}: {exc}"
        raise ConfigurationError(msg) from exc
    if not isinstance(loaded, dict):
        msg = f"{path}: top-level YAML structure must be a mapping."
        raise ConfigurationError(msg)

    options: dict[str, typ.Any] = {}
    for key, value in loaded.items():
        match key:
            case "source" | "target":
                options[key] = path.parent / str(value)
            case "ignore":
                options[key] = _parse_ignore(path, value)
            case name if name in _BOOL_OPTIONS:
                if not isinstance(value, bool):
                    msg = f"{path}: '{name}' must be true or false."
                    raise ConfigurationError(msg)
                options[name] = value
            case name if name in OPTION_NAMES:
                options[name] = str(value)
            case _:
                msg = f"{path}: unknown option '{key}'."
                raise ConfigurationError(msg)
    return options


def _parse_ignore(path: Path, value: object) -> tuple[str, ...]:
    match value:
        case str():
            return (value,)
        case list() if all(isinstance(item, str) for item in value):
            return tuple(value)
        case _:
            msg = f"{path}: 'ignore' must be a pattern or a list of patterns."
            raise ConfigurationError(msg)


def build_site_config(
    source: Path | None = None,
    target: Path | None = None,
    *,
    config_path: Path | None = None,
    **overrides: typ.Any,  # noqa: ANN401 - option values vary by field
) -> SiteConfig:
    """Merge defaults, an optional config file, and explicit overrides.

    Overrides whose value is ``None`` are treated as "not given", so CLI flags
    left unset fall through to the file and then to the dataclass defaults.
    The target defaults to the source, which needs ``in_place`` to build.

    Raises
    ------
    ConfigurationError
        If no source directory is given on the command line or in the file.
    """
    options: dict[str, typ.Any] = {}
    if config_path is not None:
        options.update(load_site_config(config_path))
    if source is not None:
        options["source"] = source
    if target is not None:
        options["target"] = target
    for key, value in overrides.items():
        if key not in OPTION_NAMES:
            msg = f"unknown option '{key}'."
            raise ConfigurationError(msg)
        if value is not None:
            options[key] = tuple(value) if key == "ignore" else value

    if "source" not in options:
        msg = "A source directory is required."
        raise ConfigurationError(msg)
    options.setdefault("target", options["source"])
    return SiteConfig(**options)


__all__ = ["build_site_config", "load_site_config"]
