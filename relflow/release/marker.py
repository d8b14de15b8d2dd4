"""Persisted release stage marker.

The marker is a single integer (0, 1 or 2) in a file inside the git control
directory. Its absence means no release is in progress. It is the only state
relflow keeps between runs.
"""

from __future__ import annotations

from pathlib import Path
from typing import Protocol

from relflow.core.result import Err, Ok, Result
from relflow.platform.files import atomic_write_text
from relflow.release.errors import ReleaseError
from relflow.release.model import Stage

__all__ = ["FileStageStore", "StageStore", "stale_marker_hint"]


class StageStore(Protocol):
    """Where the current release stage lives."""

    def read(self) -> Result[Stage, ReleaseError]: ...

    def write(self, stage: Stage) -> Result[None, ReleaseError]: ...

    def clear(self) -> Result[None, ReleaseError]: ...

    def describe(self) -> str:
        """Human-readable location, used in operator hints."""
        ...


def stale_marker_hint(store: StageStore) -> str:
    return f"If no release is actually in progress, delete {store.describe()} and retry."


class FileStageStore:
    """Stage marker backed by a file holding a single integer."""

    def __init__(self, path: Path) -> None:
        self.path = path

    def describe(self) -> str:
        return str(self.path)

    def read(self) -> Result[Stage, ReleaseError]:
        try:
            text = self.path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return Ok(Stage.NONE)
        except OSError as e:
            return Err(
                ReleaseError(
                    kind="io_failed",
                    message=f"failed to read stage marker: {e}",
                    hint=str(self.path),
                )
            )

        raw = text.strip()
        stage = Stage.from_marker(int(raw)) if raw.isascii() and raw.isdigit() else None
        if stage is None:
            return Err(
                ReleaseError(
                    kind="invalid_state",
                    message=f"malformed stage marker: {raw!r}",
                    hint=stale_marker_hint(self),
                )
            )
        return Ok(stage)

    def write(self, stage: Stage) -> Result[None, ReleaseError]:
        value = stage.marker_value
        if value is None:
            return self.clear()

        try:
            atomic_write_text(self.path, f"{value}\n", encoding="utf-8")
        except OSError as e:
            return Err(
                ReleaseError(
                    kind="io_failed",
                    message=f"failed to write stage marker: {e}",
                    hint=str(self.path),
                )
            )
        return Ok(None)

    def clear(self) -> Result[None, ReleaseError]:
        try:
            self.path.unlink(missing_ok=True)
        except OSError as e:
            return Err(
                ReleaseError(
                    kind="io_failed",
                    message=f"failed to remove stage marker: {e}",
                    hint=str(self.path),
                )
            )
        return Ok(None)
