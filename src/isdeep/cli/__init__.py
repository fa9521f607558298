"""
Command-line interface for isdeep.

Entry point: isdeep
"""

from isdeep.cli.main import cli

__all__ = ["cli"]
