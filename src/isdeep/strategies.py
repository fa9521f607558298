"""
Sequence merge strategies.

A strategy decides how two sequences combine when a merge meets a list on
both sides. Any callable ``(base, incoming) -> list`` works as a strategy;
the built-ins below are immutable, so a single instance can be shared
freely between threads.

Strategies are pure: they never mutate their arguments and always return
a new list. The merge engine owns clearing and refilling the target.

Example:
    >>> UNION([1, 2, 3], [2, 3, 4])
    [1, 2, 3, 4]
    >>> KeyBased("id")([{"id": 1, "v": 1}], [{"id": 1, "v": 2}])
    [{'id': 1, 'v': 2}]
"""

from __future__ import annotations

import collections.abc as _abc
import dataclasses as _dataclasses
import logging as _logging
import types as _types
import typing as _typing

import isdeep._capability as _capability
import isdeep._merge as _merge
import isdeep.constants as _constants
import isdeep.errors as _errors

_logger = _logging.getLogger(__name__)


@_dataclasses.dataclass(frozen=True, slots=True)
class SequenceStrategy:
    """Base class for built-in strategies."""

    @property
    def name(self) -> str:
        """Name accepted by ``from_name()``."""
        raise NotImplementedError

    def __call__(
        self,
        base: _abc.Sequence[_typing.Any],
        incoming: _abc.Sequence[_typing.Any],
    ) -> list[_typing.Any]:
        raise NotImplementedError


@_dataclasses.dataclass(frozen=True, slots=True)
class Replace(SequenceStrategy):
    """Incoming sequence replaces base entirely."""

    @property
    def name(self) -> str:
        return "replace"

    def __call__(
        self,
        base: _abc.Sequence[_typing.Any],
        incoming: _abc.Sequence[_typing.Any],
    ) -> list[_typing.Any]:
        return list(incoming)


@_dataclasses.dataclass(frozen=True, slots=True)
class Concat(SequenceStrategy):
    """Append incoming to base. Preserves duplicates and order."""

    @property
    def name(self) -> str:
        return "concat"

    def __call__(
        self,
        base: _abc.Sequence[_typing.Any],
        incoming: _abc.Sequence[_typing.Any],
    ) -> list[_typing.Any]:
        return [*base, *incoming]


@_dataclasses.dataclass(frozen=True, slots=True)
class Union(SequenceStrategy):
    """
    Combine sequences without duplicates.

    Uses ``==`` for equality, so unhashable elements such as dicts are
    supported. Order is preserved from base, then new elements from
    incoming are appended; the first occurrence wins its position.
    """

    @property
    def name(self) -> str:
        return "union"

    def __call__(
        self,
        base: _abc.Sequence[_typing.Any],
        incoming: _abc.Sequence[_typing.Any],
    ) -> list[_typing.Any]:
        result: list[_typing.Any] = []
        for item in (*base, *incoming):
            if item not in result:
                result.append(item)
        return result


@_dataclasses.dataclass(frozen=True, slots=True)
class KeyBased(SequenceStrategy):
    """
    Merge sequences of mappings by a key field.

    Incoming mappings whose key value matches a base mapping are deep
    merged into a copy of it (using the currently configured strategy for
    any nested sequences); everything else is appended.

    Without an explicit key, the first of ``candidates`` present in the
    first base element is used. If no key can be found (empty base, first
    element not a mapping, no candidate present) the result is the plain
    concatenation.

    Only the first base element per key value is matched. Later base
    elements with the same key value are kept as they are.

    Example:
        >>> strategy = KeyBased("name")
        >>> strategy(
        ...     [{"name": "web", "port": 80}, {"name": "db", "port": 5432}],
        ...     [{"name": "web", "port": 8080}, {"name": "cache", "port": 6379}],
        ... )
        [{'name': 'web', 'port': 8080}, {'name': 'db', 'port': 5432}, {'name': 'cache', 'port': 6379}]

    Args:
        key: Field used to match elements. None means auto-detect.
        candidates: Fields tried in order when auto-detecting.
    """

    key: _abc.Hashable | None = None
    candidates: tuple[_abc.Hashable, ...] = _constants.DEFAULT_KEY_CANDIDATES

    @property
    def name(self) -> str:
        if self.key is None:
            return _constants.KEY_STRATEGY_PREFIX
        return f"{_constants.KEY_STRATEGY_PREFIX}:{self.key}"

    def __call__(
        self,
        base: _abc.Sequence[_typing.Any],
        incoming: _abc.Sequence[_typing.Any],
    ) -> list[_typing.Any]:
        key = self.key if self.key is not None else self.detect_key(base)
        if key is None:
            _logger.debug("No merge key found in base sequence, concatenating")
            return CONCAT(base, incoming)

        result = list(base)
        slots = _index_by_key(result, key)
        for element in incoming:
            position = _find_slot(slots, element, key)
            if position is not None and _capability.is_mergeable(result[position], element):
                result[position] = _merge.merge_detached(result[position], element)
            else:
                result.append(element)
        return result

    def detect_key(self, base: _abc.Sequence[_typing.Any]) -> _abc.Hashable | None:
        """Return the first candidate present in the first base element, if any."""
        if not base or not _capability.is_mapping(base[0]):
            return None
        first = base[0]
        for candidate in self.candidates:
            if candidate in first:
                return candidate
        return None


def _key_value(element: _typing.Any, key: _abc.Hashable) -> _typing.Any:
    """Key value of a mapping element, or None for anything unmatchable."""
    if not _capability.is_mapping(element):
        return None
    return element.get(key)


def _index_by_key(
    elements: list[_typing.Any],
    key: _abc.Hashable,
) -> dict[_typing.Any, int]:
    """Map each key value to the position of the first element holding it."""
    slots: dict[_typing.Any, int] = {}
    for position, element in enumerate(elements):
        value = _key_value(element, key)
        if value is None:
            continue
        try:
            slots.setdefault(value, position)
        except TypeError:
            # unhashable key values are not indexed
            continue
    return slots


def _find_slot(
    slots: dict[_typing.Any, int],
    element: _typing.Any,
    key: _abc.Hashable,
) -> int | None:
    value = _key_value(element, key)
    if value is None:
        return None
    try:
        return slots.get(value)
    except TypeError:
        return None


REPLACE = Replace()
"""Incoming replaces base."""

CONCAT = Concat()
"""Base followed by incoming (initial default)."""

UNION = Union()
"""Base followed by incoming elements not already present."""

KEY_BASED: _abc.Mapping[str, KeyBased] = _types.MappingProxyType(
    {
        "detect": KeyBased(),
        "id": KeyBased("id"),
        "name": KeyBased("name"),
        "key": KeyBased("key"),
        "host": KeyBased("host"),
    }
)
"""Predefined KeyBased instances for common keys."""

_BY_NAME: dict[str, SequenceStrategy] = {
    REPLACE.name: REPLACE,
    CONCAT.name: CONCAT,
    UNION.name: UNION,
    _constants.KEY_STRATEGY_PREFIX: KEY_BASED["detect"],
}


def available_names() -> tuple[str, ...]:
    """Names of the built-in strategies, as accepted by ``from_name()``."""
    return tuple(_BY_NAME)


def from_name(spec: str) -> SequenceStrategy:
    """
    Look up a built-in strategy by name.

    Accepts ``replace``, ``concat``, ``union``, ``key`` (auto-detected key)
    and ``key:<field>``. Names are case-insensitive; the field is not.

    Raises:
        UnknownStrategyError: If the name matches no built-in strategy.
    """
    name, separator, field = spec.strip().partition(":")
    name = name.lower()
    if separator:
        if name == _constants.KEY_STRATEGY_PREFIX and field:
            return KeyBased(field)
        raise _errors.UnknownStrategyError(spec, available_names())
    if name not in _BY_NAME:
        raise _errors.UnknownStrategyError(spec, available_names())
    return _BY_NAME[name]
