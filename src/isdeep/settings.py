"""
Settings configuration using pydantic-settings.

Loads configuration from:
1. Constructor arguments (highest precedence)
2. Environment variables with ISDEEP_ prefix
3. .env file named by ISDEEP_ENV_FILE (if it exists)
4. Field defaults

Example:
  ISDEEP_SEQUENCE_STRATEGY=union
  ISDEEP_SEQUENCE_STRATEGY=key:service_id
"""

import os as _os
import pathlib as _pathlib
import typing as _typing

import pydantic as _pydantic
import pydantic_settings as _pydantic_settings

import isdeep._types as _types
import isdeep.constants as _constants
import isdeep.strategies as _strategies


def _get_env_file() -> str | None:
    """Determine which .env file to load.

    Only an explicit ISDEEP_ENV_FILE is honored; a library must not pick up
    whatever .env happens to sit in the caller's working directory.
    """
    if env_file := _os.environ.get(f"{_constants.ENV_PREFIX}ENV_FILE"):
        if _pathlib.Path(env_file).exists():
            return env_file
    return None


class Settings(_pydantic_settings.BaseSettings):
    """
    isdeep configuration settings.

    All settings can be overridden via environment variables with the
    ISDEEP_ prefix.
    """

    model_config = _pydantic_settings.SettingsConfigDict(
        env_prefix=_constants.ENV_PREFIX,
        env_file=_get_env_file(),
        env_file_encoding="utf-8",
        extra="ignore",
    )

    sequence_strategy: str = _pydantic.Field(
        default=_constants.DEFAULT_SEQUENCE_STRATEGY,
        description=(
            "Initial process-wide sequence strategy: replace, concat, union, "
            "key or key:<field>"
        ),
    )

    @_pydantic.field_validator("sequence_strategy")
    @classmethod
    def _validate_sequence_strategy(cls, value: str) -> str:
        """Reject names that do not resolve to a built-in strategy."""
        _strategies.from_name(value)
        return value.strip()

    @classmethod
    def construct_without_dotenv(cls, **kwargs: _typing.Any) -> "Settings":
        """Create Settings from environment variables only, without loading .env file.

        Useful for test isolation.
        """
        return cls(_env_file=None, **kwargs)  # type: ignore[call-arg]

    def build_sequence_strategy(self) -> _types.SequenceStrategyFn:
        """Return the strategy named by ``sequence_strategy``."""
        return _strategies.from_name(self.sequence_strategy)
