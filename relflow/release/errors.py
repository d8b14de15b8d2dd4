"""Error types for the release workflow."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Literal

ReleaseErrorKind = Literal[
    "invalid_input",
    "tool_missing",
    "credential_missing",
    "invalid_state",
    "wrong_branch",
    "build_config",
    "command_failed",
    "io_failed",
]


@dataclass(frozen=True, slots=True)
class ReleaseError:
    """Canonical release error payload.

    ``message`` says what went wrong; ``hint`` (optional) says what the
    operator can do about it, or carries the failing tool's stderr.
    """

    kind: ReleaseErrorKind
    message: str
    hint: str | None = None
