"""Tests for git/repository.py."""

from __future__ import annotations

from pathlib import Path

import pytest

import relflow.git.repository as repository_mod
from relflow.core.result import Err, Ok, Result
from relflow.git.repository import Repository
from relflow.platform.process import ProcessError


class FakeGit:
    """Records git invocations and answers queries from a table."""

    def __init__(self) -> None:
        self.queries: list[list[str]] = []
        self.streamed: list[list[str]] = []
        self.answers: dict[str, Result[str, ProcessError]] = {}
        self.fail_streaming: set[str] = set()

    def run(
        self,
        cmd: list[str],
        cwd: Path,
        env: dict[str, str] | None = None,
        *,
        timeout: float | None = None,
    ) -> Result[str, ProcessError]:
        args = cmd[3:]
        self.queries.append(args)
        return self.answers.get(args[0], Ok(""))

    def run_streaming(
        self,
        cmd: list[str],
        cwd: Path,
        env: dict[str, str] | None = None,
    ) -> Result[None, ProcessError]:
        args = cmd[3:]
        self.streamed.append(args)
        if args[0] in self.fail_streaming:
            return Err(ProcessError(tuple(cmd), 1, "", ""))
        return Ok(None)


@pytest.fixture
def git(monkeypatch: pytest.MonkeyPatch) -> FakeGit:
    fake = FakeGit()
    monkeypatch.setattr(repository_mod, "run_process", fake.run)
    monkeypatch.setattr(repository_mod, "run_streaming", fake.run_streaming)
    return fake


def _failed(stderr: str, returncode: int = 128) -> Err[ProcessError]:
    return Err(ProcessError(("git",), returncode, "", stderr))


class TestQueries:
    def test_exists(self, tmp_path: Path) -> None:
        assert Repository(tmp_path).exists() is False
        (tmp_path / ".git").mkdir()
        assert Repository(tmp_path).exists() is True

    def test_current_branch(self, tmp_path: Path, git: FakeGit) -> None:
        git.answers["rev-parse"] = Ok("master\n")
        assert Repository(tmp_path).current_branch() == "master"
        assert git.queries == [["rev-parse", "--abbrev-ref", "HEAD"]]

    def test_current_branch_detached(self, tmp_path: Path, git: FakeGit) -> None:
        git.answers["rev-parse"] = Ok("HEAD\n")
        assert Repository(tmp_path).current_branch() is None

    def test_current_branch_error(self, tmp_path: Path, git: FakeGit) -> None:
        git.answers["rev-parse"] = _failed("fatal: not a git repository")
        assert Repository(tmp_path).current_branch() is None

    def test_has_changes(self, tmp_path: Path, git: FakeGit) -> None:
        git.answers["status"] = Ok(" M app/build.gradle\n")
        result = Repository(tmp_path).has_changes()
        assert isinstance(result, Ok) and result.value is True

    def test_clean_tree(self, tmp_path: Path, git: FakeGit) -> None:
        git.answers["status"] = Ok("")
        result = Repository(tmp_path).has_changes()
        assert isinstance(result, Ok) and result.value is False

    def test_status_error(self, tmp_path: Path, git: FakeGit) -> None:
        git.answers["status"] = _failed("fatal: not a git repository")

        result = Repository(tmp_path).has_changes()

        assert isinstance(result, Err)
        assert result.error.command == "status"
        assert "not a git repository" in result.error.message

    def test_config_get(self, tmp_path: Path, git: FakeGit) -> None:
        git.answers["config"] = Ok("secret-key\n")

        result = Repository(tmp_path).config_get("weblate.key")

        assert isinstance(result, Ok)
        assert result.value == "secret-key"
        assert git.queries == [["config", "--get", "weblate.key"]]

    def test_config_get_unset(self, tmp_path: Path, git: FakeGit) -> None:
        git.answers["config"] = _failed("", returncode=1)

        result = Repository(tmp_path).config_get("weblate.key")

        assert isinstance(result, Ok)
        assert result.value is None

    def test_config_get_error(self, tmp_path: Path, git: FakeGit) -> None:
        git.answers["config"] = _failed("fatal: bad config line 3", returncode=128)

        result = Repository(tmp_path).config_get("weblate.key")

        assert isinstance(result, Err)
        assert "bad config" in result.error.message


class TestMutations:
    def test_release_sequence(self, tmp_path: Path, git: FakeGit) -> None:
        repo = Repository(tmp_path)

        assert isinstance(repo.pull_ff(), Ok)
        assert isinstance(repo.create_branch("release/4.2.0"), Ok)
        assert isinstance(repo.commit_all("Release 4.2.0"), Ok)
        assert isinstance(repo.push_branch("origin", "release/4.2.0"), Ok)
        assert isinstance(repo.create_signed_tag("v4.2.0", "Release 4.2.0"), Ok)
        assert isinstance(repo.push_tags("origin"), Ok)

        assert git.streamed == [
            ["pull", "--ff-only"],
            ["checkout", "-b", "release/4.2.0"],
            ["add", "-A"],
            ["commit", "-m", "Release 4.2.0"],
            ["push", "-u", "origin", "release/4.2.0"],
            ["tag", "-s", "v4.2.0", "-m", "Release 4.2.0"],
            ["push", "origin", "--tags"],
        ]
        assert git.queries == []

    def test_commit_stops_when_add_fails(self, tmp_path: Path, git: FakeGit) -> None:
        git.fail_streaming.add("add")

        result = Repository(tmp_path).commit_all("Release 4.2.0")

        assert isinstance(result, Err)
        assert result.error.message == "git add failed (exit 1)"
        assert git.streamed == [["add", "-A"]]

    def test_tag_failure(self, tmp_path: Path, git: FakeGit) -> None:
        git.fail_streaming.add("tag")

        result = Repository(tmp_path).create_signed_tag("v4.2.0", "Release 4.2.0")

        assert isinstance(result, Err)
        assert result.error.command == "tag -s"
        assert "v4.2.0" in result.error.message


def test_commands_target_repository_path(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    seen: list[list[str]] = []

    def fake_streaming(
        cmd: list[str], cwd: Path, env: dict[str, str] | None = None
    ) -> Result[None, ProcessError]:
        seen.append(cmd)
        return Ok(None)

    monkeypatch.setattr(repository_mod, "run_streaming", fake_streaming)

    Repository(tmp_path).pull_ff()

    assert seen == [["git", "-C", str(tmp_path), "pull", "--ff-only"]]
