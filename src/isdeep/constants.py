"""
Shared constants for isdeep.

This module provides a single source of truth for default values
that are used across multiple modules.
"""

DEFAULT_SEQUENCE_STRATEGY = "concat"
"""Name of the initial process-wide sequence strategy."""

DEFAULT_KEY_CANDIDATES: tuple[str, ...] = ("id", "name", "key", "env", "host")
"""Keys tried in order when KeyBased has to detect the match key itself."""

KEY_STRATEGY_PREFIX = "key"
"""Strategy name prefix for key-based merging ("key" or "key:<field>")."""

ENV_PREFIX = "ISDEEP_"
"""Prefix for environment variables read by Settings."""
