from __future__ import annotations

import shutil
from collections.abc import Sequence
from pathlib import Path

from relflow.core.result import Err, Ok, Result
from relflow.platform.files import reset_dir
from relflow.release.errors import ReleaseError


def find_artifacts(*, repo_root: Path, patterns: Sequence[str]) -> list[Path]:
    """Expand glob patterns (relative to the repo root) into files, in order."""
    found: list[Path] = []
    seen: set[Path] = set()
    for pattern in patterns:
        for path in sorted(repo_root.glob(pattern)):
            if path.is_file() and path not in seen:
                seen.add(path)
                found.append(path)
    return found


def staged_name(artifact: Path, version_name: str) -> str:
    # app-release.apk -> app-release-4.2.0.apk
    return f"{artifact.stem}-{version_name}{artifact.suffix}"


def stage_artifacts(
    *,
    repo_root: Path,
    patterns: Sequence[str],
    staging_dir: Path,
    version_name: str,
) -> Result[list[Path], ReleaseError]:
    """Copy build outputs into a fresh staging directory.

    Returns:
        Ok(staged paths) in pattern order.
    """
    sources = find_artifacts(repo_root=repo_root, patterns=patterns)
    if not sources:
        return Err(
            ReleaseError(
                kind="invalid_state",
                message="no build artifacts found",
                hint=f"patterns: {', '.join(patterns)}",
            )
        )

    targets: dict[str, Path] = {}
    for src in sources:
        name = staged_name(src, version_name)
        if name in targets:
            return Err(
                ReleaseError(
                    kind="invalid_state",
                    message=f"two artifacts would be staged as {name}",
                    hint=f"{targets[name]} and {src}",
                )
            )
        targets[name] = src

    staged: list[Path] = []
    try:
        reset_dir(staging_dir)
        for name, src in targets.items():
            dst = staging_dir / name
            shutil.copy2(src, dst)
            staged.append(dst)
    except OSError as e:
        return Err(
            ReleaseError(
                kind="io_failed",
                message=f"failed to stage artifacts: {e}",
                hint=str(staging_dir),
            )
        )

    return Ok(staged)


def collect_release_assets(
    *, staging_dir: Path, staged: Sequence[Path]
) -> Result[list[Path], ReleaseError]:
    """Staged artifacts followed by every file packaging added beside them.

    Packaging commands such as ``gpg --detach-sign`` write sidecar files
    (``app-release-4.2.0.apk.asc``) into the staging directory; those are
    attached to the release too.
    """
    known = set(staged)
    try:
        produced = sorted(
            p for p in staging_dir.iterdir() if p.is_file() and p not in known
        )
    except OSError as e:
        return Err(
            ReleaseError(
                kind="io_failed",
                message=f"failed to list packaged artifacts: {e}",
                hint=str(staging_dir),
            )
        )
    return Ok([*staged, *produced])
