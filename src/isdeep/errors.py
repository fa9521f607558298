"""
Exception types raised by isdeep.

All errors derive from DeepMergeError. The type errors also derive from
TypeError so callers that only care about "wrong kind of value" can catch
the builtin.
"""

import typing as _typing


class DeepMergeError(Exception):
    """Base class for all isdeep errors."""

    pass


class UnsupportedSourceTypeError(DeepMergeError, TypeError):
    """Raised when an incoming value cannot be merged into the target."""

    def __init__(self, value: _typing.Any, expected: str) -> None:
        self.value = value
        self.expected = expected
        super().__init__(
            f"Unsupported type of source: ({type(value).__name__}), expected {expected}"
        )


class UnsupportedTargetTypeError(DeepMergeError, TypeError):
    """Raised when the merge target has no way to absorb another value."""

    def __init__(self, target: _typing.Any) -> None:
        self.target = target
        super().__init__(f"No merge methods in receiver ({type(target).__name__})")


class StrategyNotCallableError(DeepMergeError, TypeError):
    """Raised when a sequence strategy is not callable."""

    def __init__(self, strategy: _typing.Any) -> None:
        self.strategy = strategy
        super().__init__(
            f"Sequence strategy must be callable, got {type(strategy).__name__}"
        )


class UnknownStrategyError(DeepMergeError, ValueError):
    """Raised when a strategy name does not match any built-in strategy."""

    def __init__(self, name: str, available: _typing.Iterable[str]) -> None:
        self.name = name
        self.available = tuple(available)
        super().__init__(
            f"Unknown sequence strategy {name!r}. "
            f"Available: {', '.join(self.available)}, key:<field>"
        )
