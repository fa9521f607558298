"""
Cycle-safe structural deep copy.

Dicts and lists are rebuilt here: the empty result is registered under
the source's identity before any child is visited, so a child that refers
back to an ancestor resolves to the (still filling) copy of that ancestor.
Every other value goes through ``copy.deepcopy`` with the same memo, which
lets ``__deepcopy__`` hooks of user types join the bookkeeping.
"""

from __future__ import annotations

import copy as _copy
import typing as _typing

import isdeep._tracker as _tracker


def deep_copy(value: _typing.Any) -> _typing.Any:
    """
    Return an independent structural clone of ``value``.

    Shared references inside ``value`` stay shared in the clone, and
    cycles are reproduced instead of followed forever.

    Example:
        >>> data = {"name": "a"}
        >>> data["self"] = data
        >>> clone = deep_copy(data)
        >>> clone["self"] is clone
        True
    """
    with _tracker.scope() as tracker:
        return copy_value(value, tracker)


def copy_value(value: _typing.Any, tracker: _tracker.IdentityTracker) -> _typing.Any:
    """Copy one value within an existing tracker scope."""
    found, previous = tracker.copy_of(value)
    if found:
        return previous
    if _rebuilds(value, dict):
        return _copy_dict(value, tracker)
    if _rebuilds(value, list):
        return _copy_list(value, tracker)
    return _copy.deepcopy(value, tracker.memo)


def _rebuilds(value: _typing.Any, kind: type) -> bool:
    """Containers of ``kind`` are rebuilt here unless they bring their own hook."""
    return isinstance(value, kind) and getattr(value, "__deepcopy__", None) is None


def _empty_like(source: _typing.Any) -> _typing.Any:
    """
    Allocate an empty container of the same type as ``source``.

    A shallow copy keeps the type, instance attributes and
    ``defaultdict.default_factory``; its items are then dropped.
    """
    result = _copy.copy(source)
    result.clear()
    return result


def _copy_dict(
    source: dict[_typing.Any, _typing.Any],
    tracker: _tracker.IdentityTracker,
) -> dict[_typing.Any, _typing.Any]:
    result = _empty_like(source)
    tracker.remember_copy(source, result)
    for key, child in source.items():
        result[key] = copy_value(child, tracker)
    return _typing.cast(dict[_typing.Any, _typing.Any], result)


def _copy_list(
    source: list[_typing.Any],
    tracker: _tracker.IdentityTracker,
) -> list[_typing.Any]:
    result = _empty_like(source)
    tracker.remember_copy(source, result)
    for child in source:
        result.append(copy_value(child, tracker))
    return _typing.cast(list[_typing.Any], result)
