from __future__ import annotations

from pathlib import Path

from relflow.core.result import Err, Ok, Result
from relflow.platform.files import atomic_write_text
from relflow.release.errors import ReleaseError


def render_notes(template: str, *, placeholder: str, version_name: str) -> str:
    return template.replace(placeholder, version_name)


def notes_path_for_version(staging_dir: Path, version_name: str) -> Path:
    return staging_dir / f"release-notes-{version_name}.md"


def write_release_notes(
    *,
    template_path: Path,
    placeholder: str,
    staging_dir: Path,
    version_name: str,
) -> Result[Path, ReleaseError]:
    """Render the release-notes template into the staging directory."""
    try:
        template = template_path.read_text(encoding="utf-8")
    except OSError as e:
        return Err(
            ReleaseError(
                kind="io_failed",
                message=f"failed to read release notes template: {e}",
                hint=str(template_path),
            )
        )

    path = notes_path_for_version(staging_dir, version_name)
    content = render_notes(template, placeholder=placeholder, version_name=version_name)
    try:
        atomic_write_text(path, content, encoding="utf-8")
    except OSError as e:
        return Err(
            ReleaseError(
                kind="io_failed",
                message=f"failed to write release notes: {e}",
                hint=str(path),
            )
        )

    return Ok(path)
