"""Tests for sequence strategy configuration."""

import threading as _threading
import typing as _typing

import pydantic as _pydantic
import pytest as _pytest

import isdeep
import isdeep.config as config
import isdeep.strategies as strategies


def _run_in_thread(func: _typing.Callable[[], _typing.Any]) -> _typing.Any:
    """Run func on a fresh thread and return its result."""
    results: list[_typing.Any] = []
    thread = _threading.Thread(target=lambda: results.append(func()))
    thread.start()
    thread.join()
    return results[0]


class TestDefaults:
    """Process-wide default."""

    def test_initial_default_is_concat(self) -> None:
        """Without configuration, sequences are concatenated."""
        assert isdeep.get_effective_sequence_strategy() == strategies.CONCAT

    def test_default_from_environment(self, monkeypatch: _pytest.MonkeyPatch) -> None:
        """ISDEEP_SEQUENCE_STRATEGY selects the initial default."""
        monkeypatch.setenv("ISDEEP_SEQUENCE_STRATEGY", "key:service")
        isdeep.reset_sequence_strategy(include_process_default=True)

        assert isdeep.get_default_sequence_strategy() == strategies.KeyBased("service")

    def test_invalid_environment_fails_loudly(self, monkeypatch: _pytest.MonkeyPatch) -> None:
        """A bad strategy name in the environment is not silently ignored."""
        monkeypatch.setenv("ISDEEP_SEQUENCE_STRATEGY", "shuffle")
        isdeep.reset_sequence_strategy(include_process_default=True)

        with _pytest.raises(_pydantic.ValidationError):
            isdeep.get_effective_sequence_strategy()

    def test_uses_global_strategy_when_not_specified(self) -> None:
        """The configured default applies to calls without an override."""
        isdeep.set_default_sequence_strategy(isdeep.REPLACE)

        assert isdeep.deep_merge({"x": [1, 2]}, {"x": [3]}) == {"x": [3]}

    def test_local_strategy_overrides_global(self) -> None:
        """A per-call strategy wins over the configured one."""
        isdeep.set_default_sequence_strategy(isdeep.REPLACE)

        result = isdeep.deep_merge({"x": [1, 2]}, {"x": [3]}, strategy=isdeep.CONCAT)

        assert result == {"x": [1, 2, 3]}

    def test_set_by_name(self) -> None:
        """Names are accepted by the setter."""
        isdeep.set_default_sequence_strategy("union")

        assert isdeep.get_effective_sequence_strategy() == strategies.UNION

    def test_rejects_non_callable(self) -> None:
        """Non-callables are refused."""
        with _pytest.raises(isdeep.StrategyNotCallableError):
            isdeep.set_default_sequence_strategy(3.14)  # type: ignore[arg-type]

    def test_rejects_unknown_name(self) -> None:
        """Unknown names are refused and the default is unchanged."""
        with _pytest.raises(isdeep.UnknownStrategyError):
            isdeep.set_default_sequence_strategy("shuffle")

        assert isdeep.get_effective_sequence_strategy() == strategies.CONCAT


class TestThreadOverride:
    """Per-thread overrides shadow the process default."""

    def test_is_thread_local(self) -> None:
        """Another thread's setting does not change this thread's strategy."""
        isdeep.set_default_sequence_strategy(isdeep.REPLACE)

        def other() -> _typing.Any:
            isdeep.set_default_sequence_strategy(isdeep.CONCAT)
            return isdeep.deep_merge({"x": [1]}, {"x": [2]})

        assert _run_in_thread(other) == {"x": [1, 2]}
        assert isdeep.get_effective_sequence_strategy() == strategies.REPLACE

    def test_new_thread_sees_process_default(self) -> None:
        """Threads without an override fall back to the process default."""
        isdeep.set_default_sequence_strategy(isdeep.UNION)

        assert _run_in_thread(isdeep.get_effective_sequence_strategy) == strategies.UNION

    def test_reset_drops_override_only(self) -> None:
        """After reset the process default applies again."""
        isdeep.set_default_sequence_strategy(isdeep.UNION)

        def other() -> _typing.Any:
            isdeep.set_default_sequence_strategy(isdeep.REPLACE)
            return None

        _run_in_thread(other)
        assert isdeep.get_effective_sequence_strategy() == strategies.UNION

        isdeep.reset_sequence_strategy()
        assert isdeep.get_effective_sequence_strategy() == strategies.REPLACE

    def test_context_manager_restores_previous(self) -> None:
        """sequence_strategy() is temporary."""
        isdeep.set_default_sequence_strategy(isdeep.UNION)

        with isdeep.sequence_strategy("replace") as active:
            assert active == strategies.REPLACE
            assert isdeep.get_effective_sequence_strategy() == strategies.REPLACE

        assert isdeep.get_effective_sequence_strategy() == strategies.UNION
        assert isdeep.get_default_sequence_strategy() == strategies.UNION

    def test_context_manager_restores_after_error(self) -> None:
        """The override is removed even when the body raises."""
        with _pytest.raises(RuntimeError):
            with isdeep.sequence_strategy(isdeep.REPLACE):
                raise RuntimeError("boom")

        assert isdeep.get_effective_sequence_strategy() == strategies.CONCAT

    def test_context_manager_is_invisible_to_other_threads(self) -> None:
        """A temporary override belongs to its thread."""
        with isdeep.sequence_strategy(isdeep.REPLACE):
            seen = _run_in_thread(isdeep.get_effective_sequence_strategy)

        assert seen == strategies.CONCAT


class TestResolveStrategy:
    """resolve_strategy() precedence."""

    def test_explicit_override_wins(self) -> None:
        """An explicit strategy is returned as is."""
        isdeep.set_default_sequence_strategy(isdeep.REPLACE)

        assert config.resolve_strategy(isdeep.UNION) == strategies.UNION

    def test_none_means_effective(self) -> None:
        """None falls back to the effective strategy."""
        with isdeep.sequence_strategy(isdeep.UNION):
            assert config.resolve_strategy(None) == strategies.UNION

    def test_plain_callable_passes(self) -> None:
        """Functions are valid strategies."""

        def keep_base(base: _typing.Any, incoming: _typing.Any) -> list[_typing.Any]:
            return list(base)

        assert config.resolve_strategy(keep_base) is keep_base
