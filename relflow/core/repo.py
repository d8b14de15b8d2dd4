"""Repository detection and paths.

The repository is the git checkout of the mobile app being released. It is
identified by the presence of a ``.git`` entry (a directory, or a file for
linked worktrees) and is searched upward from the working directory.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from .config import CONFIG_FILE_NAME
from .result import Err, Ok, Result

__all__ = [
    "AppRepo",
    "RepoError",
    "STAGE_MARKER_NAME",
    "detect_repo",
    "find_repo_upward",
    "is_repo_root",
]

STAGE_MARKER_NAME = "relflow-stage"


@dataclass(frozen=True)
class RepoError:
    """Error when the repository cannot be detected."""

    message: str
    searched_from: Path | None = None


@dataclass(frozen=True, slots=True)
class AppRepo:
    """A detected app repository.

    The root contains:
    - .git (directory, or gitdir file for worktrees)
    - relflow.toml (optional)
    """

    root: Path

    @property
    def config_path(self) -> Path:
        """Path to relflow.toml."""
        return self.root / CONFIG_FILE_NAME

    @property
    def git_dir(self) -> Path:
        """Path to the git control directory.

        Follows the ``gitdir:`` pointer when ``.git`` is a file.
        """
        dot_git = self.root / ".git"
        if dot_git.is_file():
            try:
                text = dot_git.read_text(encoding="utf-8").strip()
            except OSError:
                return dot_git
            if text.startswith("gitdir:"):
                target = Path(text[len("gitdir:") :].strip())
                return target if target.is_absolute() else (self.root / target).resolve()
        return dot_git

    @property
    def marker_path(self) -> Path:
        """Path to the release stage marker file."""
        return self.git_dir / STAGE_MARKER_NAME

    def __str__(self) -> str:
        return str(self.root)


def is_repo_root(path: Path) -> bool:
    """Check if a path is a git repository root."""
    return (path / ".git").exists()


def find_repo_upward(start: Path) -> Path | None:
    """Search upward from start directory for a repository root."""
    for parent in (start, *start.parents):
        if is_repo_root(parent):
            return parent
    return None


def detect_repo(
    *,
    start_dir: Path | None = None,
    env_var: str = "RELFLOW_REPO",
) -> Result[AppRepo, RepoError]:
    """Detect the app repository root.

    Detection order:
    1. RELFLOW_REPO environment variable (if set, it must be valid)
    2. Search upward from start_dir (or cwd) for a .git entry
    """
    env_value = os.environ.get(env_var)
    if env_value:
        env_path = Path(env_value).expanduser().resolve()
        if env_path.is_dir() and is_repo_root(env_path):
            return Ok(AppRepo(root=env_path))
        return Err(
            RepoError(
                message=f"${env_var} is set to '{env_value}' but it is not a git repository",
                searched_from=env_path if env_path.is_dir() else None,
            )
        )

    search_start = (start_dir or Path.cwd()).resolve()
    found = find_repo_upward(search_start)
    if found is None:
        return Err(
            RepoError(
                message="Could not find a git repository (.git not found)",
                searched_from=search_start,
            )
        )
    return Ok(AppRepo(root=found))
