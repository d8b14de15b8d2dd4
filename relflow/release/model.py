from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum

from relflow.core.result import Err, Ok, Result
from relflow.release.errors import ReleaseError

RELEASE_BRANCH_PREFIX = "release/"
TAG_PREFIX = "v"

_VERSION_NAME_RE = re.compile(r"^[0-9A-Za-z][0-9A-Za-z._+-]*$")

USAGE = "usage: relflow begin <version-name> <version-code>"


class Stage(Enum):
    """Checkpoint of an in-progress release.

    ``NONE`` means no marker file: no release is in progress.
    """

    NONE = None
    STAGE_0 = 0
    STAGE_1 = 1
    STAGE_2 = 2

    @property
    def marker_value(self) -> int | None:
        return self.value

    @classmethod
    def from_marker(cls, value: int) -> Stage | None:
        for stage in cls:
            if stage.value is not None and stage.value == value:
                return stage
        return None

    def __str__(self) -> str:
        if self is Stage.NONE:
            return "none"
        return f"stage {self.value}"


@dataclass(frozen=True, slots=True)
class ReleaseDescriptor:
    """Identifies one release attempt. Derived, never persisted."""

    version_name: str
    version_code: int

    @property
    def branch(self) -> str:
        return f"{RELEASE_BRANCH_PREFIX}{self.version_name}"

    @property
    def tag(self) -> str:
        return f"{TAG_PREFIX}{self.version_name}"

    @property
    def commit_message(self) -> str:
        return f"Release {self.version_name}"


def parse_descriptor(
    version_name: str | None, version_code: str | None
) -> Result[ReleaseDescriptor, ReleaseError]:
    """Validate raw command-line inputs into a descriptor."""
    name = (version_name or "").strip()
    code = (version_code or "").strip()
    if not name or not code:
        return Err(
            ReleaseError(
                kind="invalid_input",
                message=USAGE,
                hint="Both the version name (e.g. 4.2.0) and version code (e.g. 142) are required.",
            )
        )

    if _VERSION_NAME_RE.match(name) is None:
        return Err(
            ReleaseError(
                kind="invalid_input",
                message=f"invalid version name: {name!r}",
                hint="Use letters, digits, '.', '-', '_' or '+', e.g. 4.2.0",
            )
        )

    if not (code.isascii() and code.isdigit()) or int(code) <= 0:
        return Err(
            ReleaseError(
                kind="invalid_input",
                message=f"invalid version code: {code!r}",
                hint="The version code must be a positive integer, e.g. 142",
            )
        )

    return Ok(ReleaseDescriptor(version_name=name, version_code=int(code)))
