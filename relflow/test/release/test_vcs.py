from __future__ import annotations

from pathlib import Path

import pytest

import relflow.git.repository as repository_mod
from relflow.core.result import Err, Ok, Result
from relflow.git.repository import Repository
from relflow.output.console import MockConsole
from relflow.platform.process import ProcessError
from relflow.release.vcs import GitVcs


class StreamingGit:
    def __init__(self) -> None:
        self.calls: list[list[str]] = []
        self.fail: set[str] = set()

    def __call__(
        self, cmd: list[str], cwd: Path, env: dict[str, str] | None = None
    ) -> Result[None, ProcessError]:
        args = cmd[3:]
        self.calls.append(args)
        if args[0] in self.fail:
            return Err(ProcessError(tuple(cmd), 1, "", ""))
        return Ok(None)


@pytest.fixture
def git(monkeypatch: pytest.MonkeyPatch) -> StreamingGit:
    fake = StreamingGit()
    monkeypatch.setattr(repository_mod, "run_streaming", fake)
    return fake


def _vcs(tmp_path: Path, console: MockConsole) -> GitVcs:
    return GitVcs(repo=Repository(tmp_path), remote="upstream", console=console)


def test_echoes_what_it_runs(tmp_path: Path, git: StreamingGit) -> None:
    console = MockConsole()
    vcs = _vcs(tmp_path, console)

    vcs.pull()
    vcs.create_branch("release/4.2.0")
    vcs.commit_all("Release 4.2.0")
    vcs.push_branch("release/4.2.0")
    vcs.create_signed_tag("v4.2.0", "Release 4.2.0")
    vcs.push_tags()

    assert console.commands == [
        "git pull --ff-only",
        "git checkout -b release/4.2.0",
        "git add -A",
        "git commit -m 'Release 4.2.0'",
        "git push -u upstream release/4.2.0",
        "git tag -s v4.2.0 -m 'Release 4.2.0'",
        "git push upstream --tags",
    ]
    assert len(git.calls) == 7
    assert ["push", "-u", "upstream", "release/4.2.0"] in git.calls
    assert ["push", "upstream", "--tags"] in git.calls


def test_git_failure_becomes_command_failed(tmp_path: Path, git: StreamingGit) -> None:
    git.fail.add("pull")

    result = _vcs(tmp_path, MockConsole()).pull()

    assert isinstance(result, Err)
    assert result.error.kind == "command_failed"
    assert result.error.message == "git pull failed"
    assert result.error.hint == "pull failed (exit 1)"


def test_tag_failure_mentions_signing(tmp_path: Path, git: StreamingGit) -> None:
    git.fail.add("tag")

    result = _vcs(tmp_path, MockConsole()).create_signed_tag("v4.2.0", "Release 4.2.0")

    assert isinstance(result, Err)
    assert result.error.hint is not None
    assert "failed to create tag v4.2.0 (exit 1)" in result.error.hint
    assert "user.signingkey" in result.error.hint
