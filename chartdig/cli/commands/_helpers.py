"""Shared helpers for CLI commands."""

from __future__ import annotations

from typing import TYPE_CHECKING, TypeVar

import typer

from chartdig.core.result import Err, Result
from chartdig.output.errors import extract_error_exit_code, print_extract_error
from chartdig.services.errors import ExtractError

if TYPE_CHECKING:
    from chartdig.cli.context import CLIContext

T = TypeVar("T")


def exit_on_error(result: Result[T, ExtractError], ctx: CLIContext) -> None:
    """Print the error and exit with its code if result is Err, otherwise return."""
    if isinstance(result, Err):
        print_extract_error(result.error, ctx.console)
        raise typer.Exit(code=extract_error_exit_code(result.error))


def pick(flag: T | None, configured: T) -> T:
    """Command-line value when given, else the configured one."""
    return configured if flag is None else flag
