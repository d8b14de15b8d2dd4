"""Narrow interfaces for the external tools a release drives.

The controller depends only on these protocols. Production implementations
live in ``vcs``, ``tools`` and ``gh``; tests substitute in-memory fakes.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from pathlib import Path
from typing import Protocol

from relflow.core.result import Result
from relflow.release.errors import ReleaseError


class Vcs(Protocol):
    def current_branch(self) -> str | None: ...

    def pull(self) -> Result[None, ReleaseError]: ...

    def create_branch(self, branch: str) -> Result[None, ReleaseError]: ...

    def has_changes(self) -> Result[bool, ReleaseError]: ...

    def commit_all(self, message: str) -> Result[None, ReleaseError]: ...

    def push_branch(self, branch: str) -> Result[None, ReleaseError]: ...

    def create_signed_tag(self, tag: str, message: str) -> Result[None, ReleaseError]: ...

    def push_tags(self) -> Result[None, ReleaseError]: ...


class Builder(Protocol):
    def build(self) -> Result[None, ReleaseError]:
        """Full clean build including tests and release assembly."""
        ...

    def update_listings(self) -> Result[None, ReleaseError]:
        """Regenerate translation listing files."""
        ...

    def clean(self) -> Result[None, ReleaseError]: ...


class TranslationClient(Protocol):
    def push(self) -> Result[None, ReleaseError]:
        """Have the translation platform push pending changes upstream."""
        ...


class ArtifactPackager(Protocol):
    def package(self, artifact: Path) -> Result[None, ReleaseError]: ...


class ReleasePublisher(Protocol):
    def create_draft(
        self,
        *,
        tag: str,
        title: str,
        notes_file: Path,
        artifacts: Sequence[Path],
    ) -> Result[None, ReleaseError]: ...


@dataclass(frozen=True, slots=True)
class ReleaseTools:
    """Every collaborator the controller needs, bundled for injection."""

    vcs: Vcs
    builder: Builder
    translations: TranslationClient
    packager: ArtifactPackager
    publisher: ReleasePublisher
