"""
Recursive deep merge.

``deep_merge_inplace`` walks the target and the incoming value in
lockstep and mutates the target; ``deep_merge`` does the same on a deep
copy of the target and leaves both arguments untouched.

Mapping rules, for each incoming key in order:
- key missing in target: the incoming value is inserted as is (not copied)
- both values mergeable: merged recursively, in place
- otherwise: the incoming value replaces the existing one

Sequences are combined by a strategy (see ``isdeep.strategies``); the
target list is then cleared and refilled, so references to it held
elsewhere see the merged content.

Each target is entered at most once per call. Meeting it again (a cycle,
or the same object reachable through two paths) leaves it as it is.
"""

from __future__ import annotations

import collections.abc as _abc
import logging as _logging
import typing as _typing

import isdeep._capability as _capability
import isdeep._clone as _clone
import isdeep._tracker as _tracker
import isdeep._types as _types
import isdeep.config as _config
import isdeep.errors as _errors

_logger = _logging.getLogger(__name__)


def deep_merge(
    target: _typing.Any,
    incoming: _typing.Any,
    strategy: _types.StrategySpec | None = None,
) -> _typing.Any:
    """
    Return a deep copy of ``target`` with ``incoming`` merged into it.

    Neither argument is modified. Values taken from ``incoming`` for keys
    the target does not have are not copied, so the result may share them
    with ``incoming``.

    Args:
        target: Mapping, sequence or Mergeable value (lower priority).
        incoming: Value to merge in (higher priority).
        strategy: Sequence strategy for this call. None uses the configured
            one (see ``isdeep.config``).

    Returns:
        The merged value.

    Raises:
        UnsupportedSourceTypeError: If ``incoming`` does not fit the target.
        UnsupportedTargetTypeError: If ``target`` cannot be merged into.

    Example:
        >>> deep_merge({"x": {"a": 1, "b": 2}}, {"x": {"b": 3, "c": 4}})
        {'x': {'a': 1, 'b': 3, 'c': 4}}
    """
    with _tracker.scope() as tracker:
        base = _clone.copy_value(target, tracker)
        return merge_value(base, incoming, strategy, tracker)


def merge_detached(
    target: _typing.Any,
    incoming: _typing.Any,
    strategy: _types.StrategySpec | None = None,
) -> _typing.Any:
    """
    Like ``deep_merge``, but under a tracker of its own.

    Copies and visits recorded by an enclosing call are not seen, so an
    element reachable from several places in the enclosing call is copied
    and merged afresh each time.
    """
    with _tracker.scope(fresh=True) as tracker:
        base = _clone.copy_value(target, tracker)
        return merge_value(base, incoming, strategy, tracker)


def deep_merge_inplace(
    target: _typing.Any,
    incoming: _typing.Any,
    strategy: _types.StrategySpec | None = None,
) -> _typing.Any:
    """
    Merge ``incoming`` into ``target`` and return ``target``.

    Mutation is incremental: if a later key fails, keys merged before it
    stay merged. Merge into a ``deep_copy`` and swap if you need all or
    nothing.

    Args:
        target: Mapping, sequence or Mergeable value to update.
        incoming: Value to merge in.
        strategy: Sequence strategy for this call.

    Returns:
        ``target`` itself (or whatever a Mergeable target's ``merge_with``
        returned).
    """
    with _tracker.scope() as tracker:
        return merge_value(target, incoming, strategy, tracker)


def merge_value(
    target: _typing.Any,
    incoming: _typing.Any,
    strategy: _types.StrategySpec | None,
    tracker: _tracker.IdentityTracker,
) -> _typing.Any:
    """Merge within an existing tracker scope, dispatching on the target."""
    if isinstance(target, _capability.Mergeable):
        return target.merge_with(incoming, strategy=strategy)
    if isinstance(target, _abc.MutableMapping):
        return _merge_mapping(target, incoming, strategy, tracker)
    if isinstance(target, _abc.MutableSequence):
        return _merge_sequence(target, incoming, strategy, tracker)
    raise _errors.UnsupportedTargetTypeError(target)


def _merge_mapping(
    target: _abc.MutableMapping[_typing.Any, _typing.Any],
    incoming: _typing.Any,
    strategy: _types.StrategySpec | None,
    tracker: _tracker.IdentityTracker,
) -> _abc.MutableMapping[_typing.Any, _typing.Any]:
    if not tracker.visit(target):
        return target
    source = _capability.as_mapping(incoming)

    for key, value in list(source.items()):
        if key not in target:
            target[key] = value
            continue
        existing = target[key]
        if _capability.is_mergeable(existing, value):
            merged = merge_value(existing, value, strategy, tracker)
            if merged is not existing:
                target[key] = merged
        else:
            if existing is not None and _kind(existing) != _kind(value):
                _logger.debug(
                    "Replacing %s with %s at key %r",
                    type(existing).__name__,
                    type(value).__name__,
                    key,
                )
            target[key] = value
    return target


def _merge_sequence(
    target: _abc.MutableSequence[_typing.Any],
    incoming: _typing.Any,
    strategy: _types.StrategySpec | None,
    tracker: _tracker.IdentityTracker,
) -> _abc.MutableSequence[_typing.Any]:
    if not tracker.visit(target):
        return target
    source = _capability.as_sequence(incoming)
    effective = _config.resolve_strategy(strategy)

    merged = effective(list(target), list(source))
    target.clear()
    target.extend(merged)
    return target


def _kind(value: _typing.Any) -> str:
    """Coarse kind of a value, used to spot structural replacements."""
    if _capability.is_mapping(value):
        return "mapping"
    if _capability.is_sequence(value):
        return "sequence"
    return "scalar"
