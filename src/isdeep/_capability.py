"""
Mergeable capability: who can merge with whom.

Compatibility is decided per value at every recursion step, not by a
static type check, so custom types can take part in a merge by
implementing one of the protocols below:

- Mergeable: the value decides itself whether it absorbs an incoming
  value, and how.
- SupportsToMapping / SupportsToSequence: an incoming value that is not a
  Mapping or Sequence but can present itself as one.

Strings and bytes are never treated as sequences.
"""

from __future__ import annotations

import collections.abc as _abc
import typing as _typing

import isdeep._types as _types
import isdeep.errors as _errors

_TEXT_TYPES = (str, bytes, bytearray)


@_typing.runtime_checkable
class Mergeable(_typing.Protocol):
    """
    A value that knows how to merge another value into itself.

    ``merge_with`` should merge in place and return ``self``. Returning a
    different object is allowed; the engine then stores the returned
    object in the parent slot instead.

    Example:
        >>> class Counter:
        ...     def __init__(self, n): self.n = n
        ...     def is_mergeable_with(self, other): return isinstance(other, Counter)
        ...     def merge_with(self, other, *, strategy=None):
        ...         self.n += other.n
        ...         return self
    """

    def is_mergeable_with(self, other: _typing.Any) -> bool: ...

    def merge_with(
        self,
        other: _typing.Any,
        *,
        strategy: _types.StrategySpec | None = None,
    ) -> _typing.Any: ...


@_typing.runtime_checkable
class SupportsToMapping(_typing.Protocol):
    """An object that can present itself as a Mapping."""

    def to_mapping(self) -> _abc.Mapping[_typing.Any, _typing.Any]: ...


@_typing.runtime_checkable
class SupportsToSequence(_typing.Protocol):
    """An object that can present itself as a Sequence."""

    def to_sequence(self) -> _abc.Sequence[_typing.Any]: ...


def is_mapping(value: _typing.Any) -> bool:
    """Check if a value is a Mapping."""
    return isinstance(value, _abc.Mapping)


def is_sequence(value: _typing.Any) -> bool:
    """Check if a value is a Sequence other than str/bytes."""
    return isinstance(value, _abc.Sequence) and not isinstance(value, _TEXT_TYPES)


def as_mapping(value: _typing.Any) -> _abc.Mapping[_typing.Any, _typing.Any]:
    """
    Normalize an incoming value to a Mapping.

    Raises:
        UnsupportedSourceTypeError: If the value is not a Mapping and has no
            usable ``to_mapping()`` adapter.
    """
    if is_mapping(value):
        return _typing.cast(_abc.Mapping[_typing.Any, _typing.Any], value)
    if isinstance(value, SupportsToMapping):
        converted = value.to_mapping()
        if is_mapping(converted):
            return converted
    raise _errors.UnsupportedSourceTypeError(value, "a mapping")


def as_sequence(value: _typing.Any) -> _abc.Sequence[_typing.Any]:
    """
    Normalize an incoming value to a Sequence.

    Raises:
        UnsupportedSourceTypeError: If the value is not a Sequence (or is a
            string) and has no usable ``to_sequence()`` adapter.
    """
    if is_sequence(value):
        return _typing.cast(_abc.Sequence[_typing.Any], value)
    if isinstance(value, SupportsToSequence):
        converted = value.to_sequence()
        if is_sequence(converted):
            return converted
    raise _errors.UnsupportedSourceTypeError(value, "a sequence")


def is_mergeable(existing: _typing.Any, incoming: _typing.Any) -> bool:
    """
    Decide whether ``incoming`` is merged into ``existing`` or replaces it.

    Args:
        existing: The value currently held by the target.
        incoming: The value arriving from the source.

    Returns:
        True if a recursive merge should be attempted.
    """
    if isinstance(existing, Mergeable):
        return bool(existing.is_mergeable_with(incoming))
    if isinstance(existing, _abc.MutableMapping):
        return is_mapping(incoming) or isinstance(incoming, SupportsToMapping)
    if isinstance(existing, _abc.MutableSequence):
        return is_sequence(incoming) or isinstance(incoming, SupportsToSequence)
    return False
