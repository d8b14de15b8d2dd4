"""Git repository abstraction.

This module provides the Repository class for the git operations a release
needs. All operations return Result types.

Usage:
    repo = Repository(Path("/path/to/app"))

    match repo.current_branch():
        case "master":
            repo.create_branch("release/4.2.0")
        case other:
            print(f"not on master: {other}")
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from relflow.core.result import Err, Ok, Result
from relflow.platform.process import ProcessError
from relflow.platform.process import run as run_process
from relflow.platform.process import run_streaming

_GIT_TIMEOUT_SECONDS = 30.0

__all__ = [
    "GitError",
    "Repository",
]


@dataclass(frozen=True, slots=True)
class GitError:
    """Error from a git operation.

    Attributes:
        command: The git command that failed
        message: Error message
        returncode: Process return code
    """

    command: str
    message: str
    returncode: int = 1


class Repository:
    """Git repository abstraction.

    Queries capture output and use a short timeout. Commands that may talk to
    a remote or ask for a signing passphrase stream to the terminal and have
    no timeout.

    Attributes:
        path: Path to the repository root
    """

    def __init__(self, path: Path) -> None:
        self.path = path

    def exists(self) -> bool:
        """Check if this is a valid git repository."""
        return (self.path / ".git").exists()

    def current_branch(self) -> str | None:
        """Get current branch name.

        Returns None if detached HEAD or error.
        """
        result = self._run(["rev-parse", "--abbrev-ref", "HEAD"])
        match result:
            case Ok(stdout):
                branch = stdout.strip()
                return None if branch == "HEAD" else branch
            case Err(_):
                return None

    def has_changes(self) -> Result[bool, GitError]:
        """True if the working tree has staged, unstaged or untracked changes."""
        result = self._run(["status", "--porcelain"])
        match result:
            case Err(e):
                return Err(_git_error("status", e, "git status failed"))
            case Ok(stdout):
                return Ok(stdout.strip() != "")

    def config_get(self, key: str) -> Result[str | None, GitError]:
        """Read a git config value.

        Returns Ok(None) when the key is unset (git exits 1 without output).
        """
        result = self._run(["config", "--get", key])
        match result:
            case Err(e) if e.returncode == 1 and not e.stderr.strip():
                return Ok(None)
            case Err(e):
                return Err(_git_error(f"config --get {key}", e, "git config failed"))
            case Ok(stdout):
                value = stdout.strip()
                return Ok(value or None)

    def pull_ff(self) -> Result[None, GitError]:
        """Pull with fast-forward only."""
        return self._stream(["pull", "--ff-only"], "pull failed")

    def create_branch(self, branch: str) -> Result[None, GitError]:
        """Create and check out a new branch from HEAD."""
        return self._stream(["checkout", "-b", branch], f"failed to create branch {branch}")

    def commit_all(self, message: str) -> Result[None, GitError]:
        """Stage every change (including untracked files) and commit."""
        added = self._stream(["add", "-A"], "git add failed")
        if isinstance(added, Err):
            return added
        return self._stream(["commit", "-m", message], "git commit failed")

    def push_branch(self, remote: str, branch: str) -> Result[None, GitError]:
        """Push a branch and set its upstream."""
        return self._stream(["push", "-u", remote, branch], f"failed to push {branch}")

    def create_signed_tag(self, tag: str, message: str) -> Result[None, GitError]:
        """Create a GPG-signed annotated tag at HEAD."""
        return self._stream(["tag", "-s", tag, "-m", message], f"failed to create tag {tag}")

    def push_tags(self, remote: str) -> Result[None, GitError]:
        return self._stream(["push", remote, "--tags"], "failed to push tags")

    def _run(self, args: list[str]) -> Result[str, ProcessError]:
        """Run a git query in this repository."""
        return run_process(
            ["git", "-C", str(self.path), *args], cwd=self.path, timeout=_GIT_TIMEOUT_SECONDS
        )

    def _stream(self, args: list[str], message: str) -> Result[None, GitError]:
        result = run_streaming(["git", "-C", str(self.path), *args], cwd=self.path)
        if isinstance(result, Err):
            return Err(_git_error(" ".join(args[:2]), result.error, message))
        return Ok(None)


def _git_error(command: str, error: ProcessError, fallback: str) -> GitError:
    return GitError(
        command=command,
        message=error.detail or f"{fallback} (exit {error.returncode})",
        returncode=error.returncode,
    )
