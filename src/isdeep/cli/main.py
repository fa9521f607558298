"""
Main CLI entry point for isdeep.

Provides the command-line interface using Click:
- merge: deep-merge YAML/JSON documents and print the result
- strategies: list the built-in sequence strategies
"""

import logging as _logging
import pathlib as _pathlib
import typing as _typing

import click as _click

import isdeep
import isdeep.config as config
import isdeep.documents as documents
import isdeep.errors as errors
import isdeep.strategies as strategies

# Custom Click context settings for better help formatting
CONTEXT_SETTINGS: dict[str, _typing.Any] = {
    "help_option_names": ["-h", "--help"],
    "max_content_width": 100,
}


def _fail(message: str) -> _typing.NoReturn:
    """Print an error to stderr and exit with status 1."""
    _click.echo(f"Error: {message}", err=True)
    raise SystemExit(1)


@_click.group(context_settings=CONTEXT_SETTINGS)
@_click.version_option(isdeep.__version__, "-v", "--version", prog_name="isdeep")
@_click.option(
    "--verbose",
    is_flag=True,
    help="Enable debug logging on stderr",
)
def cli(verbose: bool) -> None:
    """isdeep - deep copy and deep merge for nested data.

    Merge YAML or JSON documents from the command line.
    """
    if verbose:
        _logging.basicConfig(
            level=_logging.DEBUG,
            format="%(levelname)s %(name)s: %(message)s",
        )


@cli.command()
@_click.argument(
    "files",
    nargs=-1,
    required=True,
    type=_click.Path(exists=True, dir_okay=False, path_type=_pathlib.Path),
)
@_click.option(
    "-s",
    "--strategy",
    "strategy_name",
    type=str,
    default=None,
    help="Sequence strategy: replace, concat, union, key or key:<field> "
    "(default: ISDEEP_SEQUENCE_STRATEGY or concat)",
)
@_click.option(
    "-f",
    "--format",
    "output_format",
    type=_click.Choice(documents.FORMATS),
    default="yaml",
    show_default=True,
    help="Output format",
)
def merge(
    files: tuple[_pathlib.Path, ...],
    strategy_name: str | None,
    output_format: str,
) -> None:
    """Merge FILES left to right (later files win) and print the result."""
    try:
        strategy = strategies.from_name(strategy_name) if strategy_name else None
        result = documents.merge_documents(files, strategy=strategy)
        output = documents.dump_document(result, output_format)
    except errors.DeepMergeError as e:
        _fail(str(e))
    except ValueError as e:
        # pydantic ValidationError from a bad ISDEEP_SEQUENCE_STRATEGY
        _fail(str(e))
    _click.echo(output, nl=False)


@cli.command("strategies")
def list_strategies() -> None:
    """List the built-in sequence strategies."""
    try:
        effective = config.get_effective_sequence_strategy()
    except ValueError as e:
        _fail(str(e))
    for name in strategies.available_names():
        marker = "*" if getattr(effective, "name", None) == name else " "
        _click.echo(f"{marker} {name}")
    _click.echo("  key:<field>")
