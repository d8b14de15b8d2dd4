"""Tests for relflow.core.repo module."""

from __future__ import annotations

from pathlib import Path

import pytest

from relflow.core.repo import AppRepo, detect_repo, find_repo_upward, is_repo_root
from relflow.core.result import Err, Ok


class TestAppRepo:
    def test_paths_for_plain_checkout(self, tmp_path: Path) -> None:
        (tmp_path / ".git").mkdir()
        repo = AppRepo(root=tmp_path)

        assert repo.config_path == tmp_path / "relflow.toml"
        assert repo.git_dir == tmp_path / ".git"
        assert repo.marker_path == tmp_path / ".git" / "relflow-stage"

    def test_git_dir_follows_gitdir_file(self, tmp_path: Path) -> None:
        main_git = tmp_path / "main" / ".git" / "worktrees" / "wt"
        main_git.mkdir(parents=True)
        worktree = tmp_path / "wt"
        worktree.mkdir()
        (worktree / ".git").write_text(f"gitdir: {main_git}\n", encoding="utf-8")

        repo = AppRepo(root=worktree)

        assert repo.git_dir == main_git
        assert repo.marker_path == main_git / "relflow-stage"

    def test_relative_gitdir(self, tmp_path: Path) -> None:
        (tmp_path / "modules" / "app").mkdir(parents=True)
        sub = tmp_path / "app"
        sub.mkdir()
        (sub / ".git").write_text("gitdir: ../modules/app\n", encoding="utf-8")

        repo = AppRepo(root=sub)

        assert repo.git_dir == (tmp_path / "modules" / "app").resolve()


class TestDetection:
    def test_is_repo_root(self, tmp_path: Path) -> None:
        assert not is_repo_root(tmp_path)
        (tmp_path / ".git").mkdir()
        assert is_repo_root(tmp_path)

    def test_find_upward(self, tmp_path: Path) -> None:
        (tmp_path / ".git").mkdir()
        nested = tmp_path / "app" / "src" / "main"
        nested.mkdir(parents=True)

        assert find_repo_upward(nested) == tmp_path

    def test_detect_from_start_dir(
        self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.delenv("RELFLOW_REPO", raising=False)
        (tmp_path / ".git").mkdir()
        nested = tmp_path / "app"
        nested.mkdir()

        result = detect_repo(start_dir=nested)

        assert isinstance(result, Ok)
        assert result.value.root == tmp_path.resolve()

    def test_detect_from_env(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        (tmp_path / ".git").mkdir()
        monkeypatch.setenv("RELFLOW_REPO", str(tmp_path))

        result = detect_repo(start_dir=Path("/"))

        assert isinstance(result, Ok)
        assert result.value.root == tmp_path.resolve()

    def test_env_must_point_at_repository(
        self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.setenv("RELFLOW_REPO", str(tmp_path))

        result = detect_repo()

        assert isinstance(result, Err)
        assert "RELFLOW_REPO" in result.error.message
