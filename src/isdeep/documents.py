"""
Loading and dumping YAML/JSON documents for merging.

Files ending in ``.json`` are parsed with ``json``; anything else is read
as YAML with ``yaml.safe_load``. YAML anchors and aliases come back as
shared (or even cyclic) references, which the merge engine preserves.
An empty document counts as an empty mapping.
"""

import collections.abc as _abc
import json as _json
import logging as _logging
import pathlib as _pathlib
import typing as _typing

import yaml as _yaml

import isdeep._merge as _merge
import isdeep._types as _types
import isdeep.errors as _errors

_logger = _logging.getLogger(__name__)

FORMATS = ("yaml", "json")
"""Output formats understood by dump_document()."""


class DocumentError(_errors.DeepMergeError):
    """Raised when a document cannot be read, parsed or written."""

    def __init__(self, source: _typing.Any, reason: str) -> None:
        self.source = source
        self.reason = reason
        super().__init__(f"{source}: {reason}")


def load_document(path: _pathlib.Path) -> _typing.Any:
    """
    Load one YAML or JSON document.

    Args:
        path: File to read.

    Returns:
        The parsed document, ``{}`` for an empty file.

    Raises:
        DocumentError: If the file cannot be read or parsed.
    """
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as e:
        raise DocumentError(path, e.strerror or str(e)) from e
    except UnicodeDecodeError as e:
        raise DocumentError(path, f"invalid UTF-8: {e}") from e

    if not text.strip():
        return {}

    if path.suffix.lower() == ".json":
        try:
            return _json.loads(text)
        except _json.JSONDecodeError as e:
            raise DocumentError(path, f"invalid JSON: {e}") from e

    try:
        data = _yaml.safe_load(text)
    except _yaml.YAMLError as e:
        raise DocumentError(path, f"invalid YAML: {e}") from e
    return {} if data is None else data


def merge_documents(
    paths: _abc.Iterable[_pathlib.Path],
    strategy: _types.StrategySpec | None = None,
) -> _typing.Any:
    """
    Load documents and merge them left to right (later files win).

    The loaded documents belong to this function, so they are merged in
    place without copying.

    Raises:
        DocumentError: If any file cannot be loaded.
        UnsupportedSourceTypeError: If two documents do not fit together
            (e.g. a mapping followed by a list).
        ValueError: If ``paths`` is empty.
    """
    paths = list(paths)
    if not paths:
        raise ValueError("At least one document is required")

    result = load_document(paths[0])
    for path in paths[1:]:
        _logger.debug("Merging %s", path)
        result = _merge.deep_merge_inplace(result, load_document(path), strategy)
    return result


def dump_document(value: _typing.Any, output_format: str = "yaml") -> str:
    """
    Serialize a merged value.

    Args:
        value: The value to serialize.
        output_format: "yaml" or "json".

    Raises:
        DocumentError: If the value cannot be serialized (e.g. a cycle in
            JSON output).
        ValueError: If the format is unknown.
    """
    if output_format == "json":
        try:
            return _json.dumps(value, indent=2, ensure_ascii=False, default=str) + "\n"
        except ValueError as e:
            raise DocumentError("<output>", str(e)) from e
    if output_format == "yaml":
        return _yaml.safe_dump(
            value,
            sort_keys=False,
            allow_unicode=True,
            default_flow_style=False,
        )
    raise ValueError(f"Unknown output format {output_format!r}, expected one of {FORMATS}")
