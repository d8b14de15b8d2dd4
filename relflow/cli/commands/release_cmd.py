from __future__ import annotations

from typing import cast

import typer

from relflow.cli.commands._helpers import exit_on_error
from relflow.cli.context import ReleaseSession
from relflow.git.repository import Repository
from relflow.output.console import Style
from relflow.release.collaborators import ReleaseTools
from relflow.release.controller import ReleaseController
from relflow.release.gh import GhPublisher
from relflow.release.marker import FileStageStore
from relflow.release.model import Stage
from relflow.release.tools import CommandBuilder, CommandPackager, WeblateClient
from relflow.release.vcs import GitVcs


def _session(ctx: typer.Context) -> ReleaseSession:
    return cast(ReleaseSession, ctx.obj)


def build_controller(session: ReleaseSession) -> ReleaseController:
    ctx = session.ctx
    root = ctx.repo.root
    config = ctx.config
    tools = ReleaseTools(
        vcs=GitVcs(repo=Repository(root), remote=config.repository.remote, console=ctx.console),
        builder=CommandBuilder(repo_root=root, build=config.build, console=ctx.console),
        translations=WeblateClient(
            repo_root=root,
            translation=config.translation,
            api_key=session.requirements.api_key,
            console=ctx.console,
        ),
        packager=CommandPackager(
            repo_root=root, command=config.publish.package_command, console=ctx.console
        ),
        publisher=GhPublisher(repo_root=root, console=ctx.console),
    )
    return ReleaseController(
        repo_root=root,
        config=config,
        store=FileStageStore(ctx.repo.marker_path),
        tools=tools,
        console=ctx.console,
    )


def begin(
    ctx: typer.Context,
    version_name: str | None = typer.Argument(None, help="Version name, e.g. 4.2.0"),
    version_code: str | None = typer.Argument(None, help="Version code, e.g. 142"),
) -> None:
    """Start a release from the main branch: sync, branch, bump and build."""
    session = _session(ctx)
    controller = build_controller(session)
    exit_on_error(controller.begin(version_name, version_code), session.ctx.console)


def continue_(ctx: typer.Context) -> None:
    """Finish a built release: commit, tag, package and draft it on GitHub."""
    session = _session(ctx)
    controller = build_controller(session)
    exit_on_error(controller.continue_release(), session.ctx.console)


def status(ctx: typer.Context) -> None:
    """Show the stage of the release in progress, if any."""
    session = _session(ctx)
    console = session.ctx.console
    controller = build_controller(session)
    current = exit_on_error(controller.status(), console)

    console.print(f"marker: {current.marker}", Style.DIM)
    console.print(f"branch: {current.branch or 'detached HEAD'}", Style.DIM)
    if current.stage is Stage.NONE:
        console.print("no release in progress")
        return

    console.print(f"stage: {current.stage}")
    if current.descriptor is not None:
        d = current.descriptor
        console.print(f"release: {d.version_name} ({d.version_code}) on {d.branch}")
    if current.stage is Stage.STAGE_1:
        console.info("next: relflow continue")
    else:
        console.warning("previous run stopped mid-stage; inspect the repository before retrying")
