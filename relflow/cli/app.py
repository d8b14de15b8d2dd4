from __future__ import annotations

import os
from pathlib import Path

import typer

from relflow import __version__
from relflow.cli.commands._helpers import exit_with_errors
from relflow.cli.commands.release_cmd import begin, continue_, status
from relflow.cli.context import ReleaseSession, build_context
from relflow.core.errors import ErrorCode
from relflow.core.repo import is_repo_root
from relflow.core.result import Err
from relflow.git.repository import Repository
from relflow.release.requirements import check_requirements


APP_USAGE = "usage: relflow [--repo PATH] {begin <version-name> <version-code> | continue | status}"

app = typer.Typer(
    add_completion=False,
    no_args_is_help=False,
    rich_markup_mode="rich",
)


# Commands
app.command()(begin)
app.command("continue")(continue_)
app.command()(status)


@app.callback(invoke_without_command=True)
def _main(  # pyright: ignore[reportUnusedFunction]
    ctx: typer.Context,
    version: bool = typer.Option(False, "--version", help="Show version and exit."),
    repo: Path | None = typer.Option(
        None,
        "--repo",
        help="App repository root (overrides auto detection)",
    ),
) -> None:
    if version:
        typer.echo(__version__)
        raise typer.Exit(code=0)

    if ctx.invoked_subcommand is None:
        typer.echo(APP_USAGE, err=True)
        typer.echo("Run 'relflow --help' for details.", err=True)
        raise typer.Exit(code=int(ErrorCode.USER_ERROR))

    if repo is not None:
        try:
            root = repo.expanduser().resolve()
        except OSError as e:
            typer.echo(f"error: invalid --repo: {e}", err=True)
            raise typer.Exit(code=int(ErrorCode.USER_ERROR))

        if not root.is_dir() or not is_repo_root(root):
            typer.echo(f"error: --repo '{root}' is not a git repository", err=True)
            raise typer.Exit(code=int(ErrorCode.USER_ERROR))

        os.environ["RELFLOW_REPO"] = str(root)

    cli_ctx = build_context()
    requirements = check_requirements(
        repo_root=cli_ctx.repo.root,
        config=cli_ctx.config,
        git_config=Repository(cli_ctx.repo.root),
    )
    if isinstance(requirements, Err):
        exit_with_errors(requirements.error, cli_ctx.console)

    ctx.obj = ReleaseSession(ctx=cli_ctx, requirements=requirements.value)


def dispatch(argv: list[str] | None = None) -> int:
    """Run the CLI and return the process exit code.

    Usage errors (unknown command, bad option) exit with the same code as
    every other failure.
    """
    try:
        app(args=argv, prog_name="relflow")
    except SystemExit as e:
        return _exit_code(e.code)
    return int(ErrorCode.OK)


def _exit_code(code: object) -> int:
    if code is None:
        return int(ErrorCode.OK)
    if isinstance(code, int):
        return int(ErrorCode.OK) if code == 0 else int(ErrorCode.USER_ERROR)
    typer.echo(str(code), err=True)
    return int(ErrorCode.USER_ERROR)


def main() -> None:
    raise SystemExit(dispatch())
