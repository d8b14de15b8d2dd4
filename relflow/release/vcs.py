from __future__ import annotations

from relflow.core.result import Err, Ok, Result
from relflow.git.repository import GitError, Repository
from relflow.output.console import ConsoleProtocol
from relflow.release.errors import ReleaseError


def _failed(error: GitError, message: str) -> Err[ReleaseError]:
    return Err(ReleaseError(kind="command_failed", message=message, hint=error.message))


class GitVcs:
    """``Vcs`` backed by the git CLI.

    Each mutating command is echoed to the console before it runs.
    """

    def __init__(self, *, repo: Repository, remote: str, console: ConsoleProtocol) -> None:
        self._repo = repo
        self._remote = remote
        self._console = console

    def current_branch(self) -> str | None:
        return self._repo.current_branch()

    def pull(self) -> Result[None, ReleaseError]:
        self._console.command(["git", "pull", "--ff-only"])
        result = self._repo.pull_ff()
        if isinstance(result, Err):
            return _failed(result.error, "git pull failed")
        return Ok(None)

    def create_branch(self, branch: str) -> Result[None, ReleaseError]:
        self._console.command(["git", "checkout", "-b", branch])
        result = self._repo.create_branch(branch)
        if isinstance(result, Err):
            return _failed(result.error, f"failed to create branch: {branch}")
        return Ok(None)

    def has_changes(self) -> Result[bool, ReleaseError]:
        result = self._repo.has_changes()
        if isinstance(result, Err):
            return _failed(result.error, "failed to check git status")
        return Ok(result.value)

    def commit_all(self, message: str) -> Result[None, ReleaseError]:
        self._console.command(["git", "add", "-A"])
        self._console.command(["git", "commit", "-m", message])
        result = self._repo.commit_all(message)
        if isinstance(result, Err):
            return _failed(result.error, "git commit failed")
        return Ok(None)

    def push_branch(self, branch: str) -> Result[None, ReleaseError]:
        self._console.command(["git", "push", "-u", self._remote, branch])
        result = self._repo.push_branch(self._remote, branch)
        if isinstance(result, Err):
            return _failed(result.error, f"failed to push branch: {branch}")
        return Ok(None)

    def create_signed_tag(self, tag: str, message: str) -> Result[None, ReleaseError]:
        self._console.command(["git", "tag", "-s", tag, "-m", message])
        result = self._repo.create_signed_tag(tag, message)
        if isinstance(result, Err):
            return Err(
                ReleaseError(
                    kind="command_failed",
                    message=f"failed to create signed tag: {tag}",
                    hint=f"{result.error.message}; check user.signingkey and gpg-agent",
                )
            )
        return Ok(None)

    def push_tags(self) -> Result[None, ReleaseError]:
        self._console.command(["git", "push", self._remote, "--tags"])
        result = self._repo.push_tags(self._remote)
        if isinstance(result, Err):
            return _failed(result.error, "failed to push tags")
        return Ok(None)
