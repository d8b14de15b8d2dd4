"""Shared helpers for CLI commands."""

from __future__ import annotations

from collections.abc import Iterable
from typing import NoReturn, TypeVar

import typer

from relflow.core.errors import ErrorCode
from relflow.core.result import Err, Result
from relflow.output.console import ConsoleProtocol, Style
from relflow.release.errors import ReleaseError

T = TypeVar("T")


def print_release_error(error: ReleaseError, console: ConsoleProtocol) -> None:
    console.error(error.message)
    if error.hint:
        console.print(f"hint: {error.hint}", Style.DIM)


def exit_on_error(
    result: Result[T, ReleaseError],
    console: ConsoleProtocol,
    error_code: ErrorCode = ErrorCode.USER_ERROR,
) -> T:
    """Print the error and exit if result is Err, otherwise return its value."""
    if isinstance(result, Err):
        print_release_error(result.error, console)
        raise typer.Exit(code=int(error_code))
    return result.value


def exit_with_errors(errors: Iterable[ReleaseError], console: ConsoleProtocol) -> NoReturn:
    for error in errors:
        print_release_error(error, console)
    raise typer.Exit(code=int(ErrorCode.USER_ERROR))
