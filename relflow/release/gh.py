from __future__ import annotations

from collections.abc import Sequence
from pathlib import Path

from relflow.core.result import Err, Ok, Result
from relflow.output.console import ConsoleProtocol
from relflow.platform.process import run_streaming
from relflow.release.errors import ReleaseError

GH_TOOL = "gh"


def draft_release_command(
    *, tag: str, title: str, notes_file: Path, artifacts: Sequence[Path]
) -> list[str]:
    return [
        GH_TOOL,
        "release",
        "create",
        tag,
        "--draft",
        "--verify-tag",
        "--title",
        title,
        "--notes-file",
        str(notes_file),
        *(str(a) for a in artifacts),
    ]


class GhPublisher:
    """``ReleasePublisher`` creating GitHub release drafts with ``gh``."""

    def __init__(self, *, repo_root: Path, console: ConsoleProtocol) -> None:
        self._root = repo_root
        self._console = console

    def create_draft(
        self,
        *,
        tag: str,
        title: str,
        notes_file: Path,
        artifacts: Sequence[Path],
    ) -> Result[None, ReleaseError]:
        cmd = draft_release_command(
            tag=tag, title=title, notes_file=notes_file, artifacts=artifacts
        )
        self._console.command(cmd)
        result = run_streaming(cmd, cwd=self._root)
        if isinstance(result, Err):
            e = result.error
            return Err(
                ReleaseError(
                    kind="command_failed",
                    message=f"failed to create release draft: {tag}",
                    hint=e.detail or "Check `gh auth status` and that the tag was pushed.",
                )
            )
        return Ok(None)
