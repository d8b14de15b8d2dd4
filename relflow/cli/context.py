from __future__ import annotations

from dataclasses import dataclass

import typer

from relflow.core.config import Config, load_config_or_default
from relflow.core.errors import ErrorCode
from relflow.core.repo import AppRepo, detect_repo
from relflow.core.result import Err
from relflow.output.console import ConsoleProtocol, RichConsole
from relflow.release.requirements import Requirements


@dataclass(frozen=True, slots=True)
class CLIContext:
    repo: AppRepo
    config: Config
    console: ConsoleProtocol


@dataclass(frozen=True, slots=True)
class ReleaseSession:
    """Context plus preflight results, handed from the app callback to commands."""

    ctx: CLIContext
    requirements: Requirements


def build_context() -> CLIContext:
    repo_result = detect_repo()
    if isinstance(repo_result, Err):
        typer.echo(f"error: {repo_result.error.message}", err=True)
        raise typer.Exit(code=int(ErrorCode.USER_ERROR))

    repo = repo_result.value
    config_result = load_config_or_default(repo.config_path)
    if isinstance(config_result, Err):
        typer.echo(f"error: {config_result.error.message}", err=True)
        raise typer.Exit(code=int(ErrorCode.USER_ERROR))

    return CLIContext(
        repo=repo,
        config=config_result.value,
        console=RichConsole(),
    )
