"""
Which sequence strategy applies when a merge call does not name one.

Precedence (highest to lowest):
1. Strategy passed to the merge call
2. Override held by the calling thread
3. Process-wide default (initially read from Settings, "concat" unless
   ISDEEP_SEQUENCE_STRATEGY says otherwise)

``set_default_sequence_strategy()`` updates the process-wide default and
also installs the strategy as the calling thread's override, so other
threads that already hold an override keep theirs.

The override lives in a ``threading.local`` and ends with its thread. The
process default is a single module attribute; assigning it needs no lock.
"""

from __future__ import annotations

import contextlib as _contextlib
import logging as _logging
import threading as _threading
import typing as _typing

import isdeep._types as _types
import isdeep.errors as _errors
import isdeep.settings as _settings
import isdeep.strategies as _strategies

_logger = _logging.getLogger(__name__)

_thread_state = _threading.local()
_process_default: _types.SequenceStrategyFn | None = None


def _coerce(strategy: _types.StrategySpec) -> _types.SequenceStrategyFn:
    """Turn a strategy name or callable into a callable strategy."""
    if isinstance(strategy, str):
        return _strategies.from_name(strategy)
    if not callable(strategy):
        raise _errors.StrategyNotCallableError(strategy)
    return strategy


def _thread_override() -> _types.SequenceStrategyFn | None:
    return _typing.cast(
        "_types.SequenceStrategyFn | None",
        getattr(_thread_state, "override", None),
    )


def get_default_sequence_strategy() -> _types.SequenceStrategyFn:
    """Return the process-wide default, loading it from Settings on first use."""
    global _process_default
    if _process_default is None:
        _process_default = _settings.Settings().build_sequence_strategy()
        _logger.debug("Loaded default sequence strategy %r from settings", _process_default)
    return _process_default


def set_default_sequence_strategy(strategy: _types.StrategySpec) -> None:
    """
    Set the process-wide default strategy and this thread's override.

    Args:
        strategy: A callable ``(base, incoming) -> list`` or the name of a
            built-in strategy (see ``strategies.from_name``).

    Raises:
        StrategyNotCallableError: If ``strategy`` is neither a name nor callable.
        UnknownStrategyError: If ``strategy`` is an unknown name.
    """
    global _process_default
    resolved = _coerce(strategy)
    _process_default = resolved
    _thread_state.override = resolved
    _logger.debug("Default sequence strategy set to %r", resolved)


def get_effective_sequence_strategy() -> _types.SequenceStrategyFn:
    """Return this thread's override if set, else the process-wide default."""
    override = _thread_override()
    if override is not None:
        return override
    return get_default_sequence_strategy()


def reset_sequence_strategy(*, include_process_default: bool = False) -> None:
    """
    Drop this thread's override.

    Args:
        include_process_default: Also forget the process-wide default, so it
            is read from Settings again on next use.
    """
    global _process_default
    _thread_state.override = None
    if include_process_default:
        _process_default = None


@_contextlib.contextmanager
def sequence_strategy(
    strategy: _types.StrategySpec,
) -> _typing.Iterator[_types.SequenceStrategyFn]:
    """
    Temporarily override the strategy for the calling thread.

    The previous override (or its absence) is restored on exit. The
    process-wide default is not touched.

    Example:
        >>> with sequence_strategy("union"):
        ...     deep_merge({"x": [1, 2]}, {"x": [2, 3]})
        {'x': [1, 2, 3]}
    """
    previous = _thread_override()
    resolved = _coerce(strategy)
    _thread_state.override = resolved
    try:
        yield resolved
    finally:
        _thread_state.override = previous


def resolve_strategy(
    override: _types.StrategySpec | None = None,
) -> _types.SequenceStrategyFn:
    """
    Pick the strategy for one merge of two sequences.

    Raises:
        StrategyNotCallableError: If the override is not callable.
    """
    if override is None:
        return get_effective_sequence_strategy()
    return _coerce(override)
