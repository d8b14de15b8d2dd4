"""Command-line adapters for the build, translation and packaging tools."""

from __future__ import annotations

from collections.abc import Sequence
from pathlib import Path

from relflow.core.config import BuildConfig, TranslationConfig
from relflow.core.result import Err, Ok, Result
from relflow.output.console import ConsoleProtocol
from relflow.platform.process import run_streaming
from relflow.release.errors import ReleaseError

ARTIFACT_PLACEHOLDER = "{artifact}"
WLC_TOOL = "wlc"


def _run_step(
    *,
    cmd: list[str],
    cwd: Path,
    console: ConsoleProtocol,
    message: str,
    echo: Sequence[str] | None = None,
) -> Result[None, ReleaseError]:
    console.command(echo if echo is not None else cmd)
    result = run_streaming(cmd, cwd=cwd)
    if isinstance(result, Err):
        e = result.error
        return Err(
            ReleaseError(
                kind="command_failed",
                message=message,
                hint=e.detail or f"exit {e.returncode}, see the output above",
            )
        )
    return Ok(None)


class CommandBuilder:
    """``Builder`` running the configured build wrapper commands."""

    def __init__(self, *, repo_root: Path, build: BuildConfig, console: ConsoleProtocol) -> None:
        self._root = repo_root
        self._build = build
        self._console = console

    def build(self) -> Result[None, ReleaseError]:
        return _run_step(
            cmd=list(self._build.command),
            cwd=self._root,
            console=self._console,
            message="build failed",
        )

    def update_listings(self) -> Result[None, ReleaseError]:
        return _run_step(
            cmd=list(self._build.listing_command),
            cwd=self._root,
            console=self._console,
            message="translation listing update failed",
        )

    def clean(self) -> Result[None, ReleaseError]:
        return _run_step(
            cmd=list(self._build.clean_command),
            cwd=self._root,
            console=self._console,
            message="build clean failed",
        )


class WeblateClient:
    """``TranslationClient`` driving the Weblate ``wlc`` CLI."""

    def __init__(
        self,
        *,
        repo_root: Path,
        translation: TranslationConfig,
        api_key: str,
        console: ConsoleProtocol,
    ) -> None:
        self._root = repo_root
        self._translation = translation
        self._api_key = api_key
        self._console = console

    def _cmd(self, action: str, *, key: str) -> list[str]:
        return [
            WLC_TOOL,
            "--url",
            self._translation.url,
            "--key",
            key,
            action,
            self._translation.component,
        ]

    def push(self) -> Result[None, ReleaseError]:
        return _run_step(
            cmd=self._cmd("push", key=self._api_key),
            echo=self._cmd("push", key="***"),
            cwd=self._root,
            console=self._console,
            message=f"translation push failed: {self._translation.component}",
        )


def expand_artifact_command(template: Sequence[str], artifact: Path) -> list[str]:
    """Substitute the artifact path; append it when no placeholder is present."""
    if not any(ARTIFACT_PLACEHOLDER in arg for arg in template):
        return [*template, str(artifact)]
    return [arg.replace(ARTIFACT_PLACEHOLDER, str(artifact)) for arg in template]


class CommandPackager:
    """``ArtifactPackager`` running one configured command per artifact."""

    def __init__(
        self, *, repo_root: Path, command: Sequence[str], console: ConsoleProtocol
    ) -> None:
        self._root = repo_root
        self._command = tuple(command)
        self._console = console

    def package(self, artifact: Path) -> Result[None, ReleaseError]:
        return _run_step(
            cmd=expand_artifact_command(self._command, artifact),
            cwd=self._root,
            console=self._console,
            message=f"packaging failed: {artifact.name}",
        )
