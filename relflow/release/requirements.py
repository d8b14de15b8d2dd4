"""Preflight checks run before any command is dispatched."""

from __future__ import annotations

import shutil
from collections.abc import Callable
from dataclasses import dataclass
from pathlib import Path
from typing import Protocol

from relflow.core.config import Config
from relflow.core.result import Err, Ok, Result
from relflow.git.repository import GitError
from relflow.release.errors import ReleaseError
from relflow.release.gh import GH_TOOL
from relflow.release.tools import WLC_TOOL

GIT_TOOL = "git"

_INSTALL_HINTS: dict[str, str] = {
    GIT_TOOL: "Install git: https://git-scm.com/downloads",
    WLC_TOOL: "Install the Weblate client: pipx install wlc",
    GH_TOOL: "Install GitHub CLI: https://cli.github.com/",
}

Which = Callable[[str], str | None]


class ConfigReader(Protocol):
    def config_get(self, key: str) -> Result[str | None, GitError]: ...


@dataclass(frozen=True, slots=True)
class Requirements:
    """What the preflight resolved for later steps."""

    api_key: str


def required_tools(config: Config) -> tuple[str, ...]:
    tools = [GIT_TOOL, WLC_TOOL, GH_TOOL]
    packager = config.publish.package_command[0]
    if packager not in tools:
        tools.append(packager)
    return tuple(tools)


def _tool_available(tool: str, *, repo_root: Path, which: Which) -> bool:
    if "/" in tool:
        path = Path(tool)
        return (path if path.is_absolute() else repo_root / path).is_file()
    return which(tool) is not None


def check_requirements(
    *,
    repo_root: Path,
    config: Config,
    git_config: ConfigReader,
    which: Which = shutil.which,
) -> Result[Requirements, tuple[ReleaseError, ...]]:
    """Verify external clients are on PATH and the API key is configured.

    Every problem is reported, not only the first one.
    """
    missing = [
        tool
        for tool in required_tools(config)
        if not _tool_available(tool, repo_root=repo_root, which=which)
    ]
    problems: list[ReleaseError] = [
        ReleaseError(
            kind="tool_missing",
            message=f"{tool}: missing",
            hint=_INSTALL_HINTS.get(tool, f"Install {tool} and make sure it is on PATH."),
        )
        for tool in missing
    ]

    # Without git there is no config to read the key from.
    if GIT_TOOL in missing:
        return Err(tuple(problems))

    key_name = config.translation.api_key_config
    key_hint = (
        f"Create an API key at {config.translation.url.rstrip('/').removesuffix('/api')}"
        f"/accounts/profile/#api and run: git config {key_name} <key>"
    )
    api_key = git_config.config_get(key_name)
    if isinstance(api_key, Err):
        problems.append(
            ReleaseError(
                kind="credential_missing",
                message=f"failed to read git config {key_name}",
                hint=api_key.error.message,
            )
        )
    elif api_key.value is None:
        problems.append(
            ReleaseError(
                kind="credential_missing",
                message=f"translation API key not configured ({key_name})",
                hint=key_hint,
            )
        )

    if problems or isinstance(api_key, Err) or api_key.value is None:
        return Err(tuple(problems))
    return Ok(Requirements(api_key=api_key.value))
