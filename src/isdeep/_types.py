"""
Type aliases for isdeep.

- SequenceStrategyFn: any callable combining two sequences into a new list
- StrategySpec: a strategy callable or the name of a built-in strategy
"""

from __future__ import annotations

import collections.abc as _abc
import typing as _typing

SequenceStrategyFn: _typing.TypeAlias = _typing.Callable[
    [_abc.Sequence[_typing.Any], _abc.Sequence[_typing.Any]],
    list[_typing.Any],
]

StrategySpec: _typing.TypeAlias = SequenceStrategyFn | str
