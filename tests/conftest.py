"""
Shared pytest fixtures for isdeep tests.

This file is automatically loaded by pytest. Fixtures defined here are
available to all test files without explicit imports.
"""

import os as _os
import typing as _typing

import pytest as _pytest

import isdeep

# Environment keys that should be cleared for isolated tests
ENV_KEYS_TO_CLEAR = [
    "ISDEEP_SEQUENCE_STRATEGY",
    "ISDEEP_ENV_FILE",
]


def clean_env() -> dict[str, str]:
    """Return environment dict with isdeep keys removed."""
    return {k: v for k, v in _os.environ.items() if k not in ENV_KEYS_TO_CLEAR}


# =============================================================================
# Isolation
# =============================================================================


@_pytest.fixture(autouse=True)
def _isolated_strategy_config(
    monkeypatch: _pytest.MonkeyPatch,
) -> _typing.Iterator[None]:
    """Every test starts from the built-in default strategy (concat)."""
    for key in ENV_KEYS_TO_CLEAR:
        monkeypatch.delenv(key, raising=False)
    isdeep.reset_sequence_strategy(include_process_default=True)
    yield
    isdeep.reset_sequence_strategy(include_process_default=True)


# =============================================================================
# Custom value types
# =============================================================================


class MappingAdapter:
    """Not a Mapping, but can present itself as one."""

    def __init__(self, data: dict[str, _typing.Any]) -> None:
        self._data = data

    def to_mapping(self) -> dict[str, _typing.Any]:
        return self._data


class SequenceAdapter:
    """Not a Sequence, but can present itself as one."""

    def __init__(self, items: list[_typing.Any]) -> None:
        self._items = items

    def to_sequence(self) -> list[_typing.Any]:
        return self._items


class Tally:
    """A Mergeable scalar-like value: merging adds counts."""

    def __init__(self, count: int) -> None:
        self.count = count

    def is_mergeable_with(self, other: _typing.Any) -> bool:
        return isinstance(other, (Tally, int))

    def merge_with(self, other: _typing.Any, *, strategy: _typing.Any = None) -> "Tally":
        self.count += other.count if isinstance(other, Tally) else other
        return self

    def __eq__(self, other: object) -> bool:
        return isinstance(other, Tally) and other.count == self.count

    def __repr__(self) -> str:
        return f"Tally({self.count})"


@_pytest.fixture
def mapping_adapter() -> type[MappingAdapter]:
    return MappingAdapter


@_pytest.fixture
def sequence_adapter() -> type[SequenceAdapter]:
    return SequenceAdapter


@_pytest.fixture
def tally() -> type[Tally]:
    return Tally
