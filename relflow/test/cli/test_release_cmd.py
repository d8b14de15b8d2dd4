from __future__ import annotations

from pathlib import Path
from types import SimpleNamespace
from typing import cast

import pytest
import typer

from relflow.cli.context import CLIContext, ReleaseSession
from relflow.core.config import Config
from relflow.core.repo import AppRepo
from relflow.output.console import MockConsole
from relflow.release.controller import ReleaseController
from relflow.release.marker import FileStageStore
from relflow.release.model import Stage
from relflow.release.requirements import Requirements
from relflow.test.fakes import FakeToolbox


def _session(tmp_path: Path) -> ReleaseSession:
    (tmp_path / ".git").mkdir(exist_ok=True)
    gradle = tmp_path / "app" / "build.gradle"
    gradle.parent.mkdir(parents=True, exist_ok=True)
    gradle.write_text("versionCode 141\nversionName '4.1.0'\n", encoding="utf-8")
    return ReleaseSession(
        ctx=CLIContext(repo=AppRepo(root=tmp_path), config=Config(), console=MockConsole()),
        requirements=Requirements(api_key="k"),
    )


def _typer_ctx(session: ReleaseSession) -> typer.Context:
    return cast(typer.Context, SimpleNamespace(obj=session))


def _console(session: ReleaseSession) -> MockConsole:
    return cast(MockConsole, session.ctx.console)


def _patch_controller(
    monkeypatch: pytest.MonkeyPatch, toolbox: FakeToolbox
) -> None:
    import relflow.cli.commands.release_cmd as release_cmd

    def fake_build_controller(session: ReleaseSession) -> ReleaseController:
        return ReleaseController(
            repo_root=session.ctx.repo.root,
            config=session.ctx.config,
            store=FileStageStore(session.ctx.repo.marker_path),
            tools=toolbox.tools(),
            console=session.ctx.console,
        )

    monkeypatch.setattr(release_cmd, "build_controller", fake_build_controller)


def test_begin_without_arguments_prints_usage(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    import relflow.cli.commands.release_cmd as release_cmd

    session = _session(tmp_path)
    toolbox = FakeToolbox.create()
    _patch_controller(monkeypatch, toolbox)

    with pytest.raises(typer.Exit) as exc:
        release_cmd.begin(_typer_ctx(session), None, None)

    assert exc.value.exit_code == 1
    assert _console(session).find("usage: relflow begin")
    assert not session.ctx.repo.marker_path.exists()
    assert toolbox.log.calls == []


def test_begin_writes_marker_file(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    import relflow.cli.commands.release_cmd as release_cmd

    session = _session(tmp_path)
    _patch_controller(monkeypatch, FakeToolbox.create())

    release_cmd.begin(_typer_ctx(session), "4.2.0", "142")

    assert session.ctx.repo.marker_path.read_text(encoding="utf-8") == "1\n"
    assert not _console(session).has_error()


def test_continue_without_release_exits_1(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    import relflow.cli.commands.release_cmd as release_cmd

    session = _session(tmp_path)
    _patch_controller(monkeypatch, FakeToolbox.create())

    with pytest.raises(typer.Exit) as exc:
        release_cmd.continue_(_typer_ctx(session))

    assert exc.value.exit_code == 1
    console = _console(session)
    assert console.has_error()
    assert console.find("hint: Start a release first")


def test_malformed_marker_exits_1(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    import relflow.cli.commands.release_cmd as release_cmd

    session = _session(tmp_path)
    session.ctx.repo.marker_path.write_text("garbage\n", encoding="utf-8")
    toolbox = FakeToolbox.create()
    _patch_controller(monkeypatch, toolbox)

    with pytest.raises(typer.Exit) as exc:
        release_cmd.begin(_typer_ctx(session), "4.2.0", "142")

    assert exc.value.exit_code == 1
    assert _console(session).find("malformed stage marker")
    assert session.ctx.repo.marker_path.read_text(encoding="utf-8") == "garbage\n"
    assert toolbox.log.calls == []


def test_status_without_release(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    import relflow.cli.commands.release_cmd as release_cmd

    session = _session(tmp_path)
    _patch_controller(monkeypatch, FakeToolbox.create())

    release_cmd.status(_typer_ctx(session))

    console = _console(session)
    assert console.find("no release in progress")
    assert console.find(str(session.ctx.repo.marker_path))


@pytest.mark.parametrize(
    ("stage", "expected"),
    [(Stage.STAGE_1, "info: next: relflow continue"), (Stage.STAGE_2, "warning: previous run")],
)
def test_status_in_progress(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch, stage: Stage, expected: str
) -> None:
    import relflow.cli.commands.release_cmd as release_cmd

    session = _session(tmp_path)
    FileStageStore(session.ctx.repo.marker_path).write(stage)
    _patch_controller(monkeypatch, FakeToolbox.create(branch="release/4.1.0"))

    release_cmd.status(_typer_ctx(session))

    console = _console(session)
    assert console.find(f"stage: {stage}")
    assert console.find("release: 4.1.0 (141) on release/4.1.0")
    assert console.find(expected)


def test_build_controller_wires_file_store(tmp_path: Path) -> None:
    from relflow.cli.commands.release_cmd import build_controller

    session = _session(tmp_path)

    controller = build_controller(session)

    assert controller.build_config.path == tmp_path / "app" / "build.gradle"
    assert controller.staging_dir == tmp_path / "build" / "release-staging"
