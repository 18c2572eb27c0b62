r"""Split Markdown documents into YAML front matter and body text.

A document may open with a block fenced by three or more dashes. The block is
decoded with ruamel.yaml and exposed as :class:`Metadata`, a read-only mapping
whose typed accessors check field shapes once, at the boundary, instead of at
every use site.

Example
-------
>>> meta, body = split_metadata("---\ntitle: Home\n---\n# Welcome\n")
>>> meta.get_str("title")
'Home'
>>> body
'# Welcome\n'
>>> split_metadata("# No fence\n")[1]
'# No fence\n'
"""

from __future__ import annotations

import collections.abc as cabc
import io
import re
import typing as typ

from ruamel.yaml import YAML
from ruamel.yaml.error import YAMLError

from .errors import MetadataDecodeError, MetadataTypeError

if typ.TYPE_CHECKING:
    from pathlib import Path

FRONT_MATTER_PATTERN = re.compile(
    r"\A-{3,}[ \t]*\r?\n(?P<meta>.*?)^-{3,}\s*(?P<body>.*)\Z",
    re.DOTALL | re.MULTILINE,
)


def _safe_yaml() -> YAML:
    loader = YAML(typ="safe")
    loader.version = (1, 2)
    return loader


class Metadata(cabc.Mapping[str, typ.Any]):
    """Front-matter values with typed accessors.

    Values keep the plain Python types produced by the YAML loader (``str``,
    ``int``, ``float``, ``bool``, ``list``, ``dict`` or ``None``). Jinja
    templates read them with attribute or item syntax (``page.meta.author``).
    """

    __slots__ = ("_data", "source")

    def __init__(
        self,
        data: cabc.Mapping[str, typ.Any] | None = None,
        *,
        source: Path | str = "<string>",
    ) -> None:
        self._data: dict[str, typ.Any] = dict(data or {})
        self.source = source

    def __getitem__(self, key: str) -> typ.Any:  # noqa: ANN401 - YAML values
        return self._data[key]

    def __iter__(self) -> cabc.Iterator[str]:
        return iter(self._data)

    def __len__(self) -> int:
        return len(self._data)

    def __repr__(self) -> str:
        return f"Metadata({self._data!r})"

    def get_str(self, key: str, default: str | None = None) -> str | None:
        """Return the string stored under ``key`` or ``default`` when absent.

        Raises
        ------
        MetadataTypeError
            If the value is present but not a string.
        """
        value = self._data.get(key)
        if value is None:
            return default
        if not isinstance(value, str):
            msg = f'metadata "{key}" must be a string, but was {type(value).__name__}'
            raise MetadataTypeError(self.source, msg)
        return value

    def get_str_list(self, key: str) -> list[str]:
        """Return the list of strings stored under ``key`` (empty when absent).

        Raises
        ------
        MetadataTypeError
            If the value is not a list, or any element is not a string.
        """
        value = self._data.get(key)
        if value is None:
            return []
        if not isinstance(value, list):
            msg = (
                f'metadata "{key}" must be a list of strings, '
                f"but was {type(value).__name__}"
            )
            raise MetadataTypeError(self.source, msg)
        for item in value:
            if not isinstance(item, str):
                msg = (
                    f'every entry of "{key}" must be a string, '
                    f"but found {type(item).__name__}"
                )
                raise MetadataTypeError(self.source, msg)
        return list(value)


def load_yaml_mapping(text: str, *, source: Path | str) -> dict[str, typ.Any]:
    """Decode ``text`` as a YAML mapping; an empty document yields ``{}``.

    Raises
    ------
    MetadataDecodeError
        If the YAML is malformed or its top level is not a mapping.
    """
    try:
        loaded = _safe_yaml().load(text)
    except YAMLError as exc:
        raise MetadataDecodeError(source, str(exc)) from exc
    if loaded is None:
        return {}
    if not isinstance(loaded, dict):
        msg = f"expected a mapping, got {type(loaded).__name__}"
        raise MetadataDecodeError(source, msg)
    return loaded


def dump_yaml(data: cabc.Mapping[str, typ.Any]) -> str:
    """Encode ``data`` as a block-style YAML document."""
    dumper = YAML(typ="safe")
    dumper.default_flow_style = False
    stream = io.StringIO()
    dumper.dump(dict(data), stream)
    return stream.getvalue()


def split_metadata(
    text: str, *, source: Path | str = "<string>"
) -> tuple[Metadata, str]:
    """Return the front matter and body of a Markdown document.

    Parameters
    ----------
    text : str
        Raw document text.
    source : Path or str, optional
        Where the text came from; used in error messages.

    Returns
    -------
    tuple[Metadata, str]
        Decoded metadata and the remaining Markdown body. Without a leading
        fence the metadata is empty and the body is ``text`` unchanged.

    Raises
    ------
    MetadataDecodeError
        If a fenced block is present but is not a YAML mapping.
    """
    match = FRONT_MATTER_PATTERN.match(text)
    if match is None:
        return Metadata(source=source), text
    data = load_yaml_mapping(match.group("meta"), source=source)
    return Metadata(data, source=source), match.group("body")


def join_metadata(meta: cabc.Mapping[str, typ.Any], body: str) -> str:
    """Rebuild a document from a metadata mapping and a Markdown body."""
    return f"---\n{dump_yaml(meta)}---\n{body}"


__all__ = [
    "FRONT_MATTER_PATTERN",
    "Metadata",
    "dump_yaml",
    "join_metadata",
    "load_yaml_mapping",
    "split_metadata",
]
