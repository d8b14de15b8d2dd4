"""Release workflow controller.

A release runs in two commands separated by a manual step::

    begin     NONE -> STAGE_0 -> (sync, branch, bump, build) -> STAGE_1
    (operator edits changelogs / store listings on the release branch)
    continue  STAGE_1 -> STAGE_2 -> (commit, tag, package, draft) -> NONE

The stage marker is written before each stage's work starts. Any failure
aborts immediately and leaves the marker where it is: nothing is rolled back
and the operator decides how to recover. Running ``continue`` again after a
failure inside it is refused (the marker reads STAGE_2, not STAGE_1), so no
step is ever silently skipped.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from relflow.core.config import Config
from relflow.core.result import Err, Ok, Result
from relflow.output.console import ConsoleProtocol, Style
from relflow.platform.files import remove_tree
from relflow.release.artifacts import collect_release_assets, stage_artifacts
from relflow.release.build_config import BuildConfigFile
from relflow.release.collaborators import ReleaseTools
from relflow.release.errors import ReleaseError
from relflow.release.marker import StageStore, stale_marker_hint
from relflow.release.model import ReleaseDescriptor, Stage, parse_descriptor
from relflow.release.notes import write_release_notes


@dataclass(frozen=True, slots=True)
class ReleaseStatus:
    stage: Stage
    marker: str
    branch: str | None
    descriptor: ReleaseDescriptor | None


class ReleaseController:
    def __init__(
        self,
        *,
        repo_root: Path,
        config: Config,
        store: StageStore,
        tools: ReleaseTools,
        console: ConsoleProtocol,
    ) -> None:
        self._root = repo_root
        self._config = config
        self._store = store
        self._tools = tools
        self._console = console

    @property
    def build_config(self) -> BuildConfigFile:
        return BuildConfigFile(self._root / self._config.build.config_file)

    @property
    def staging_dir(self) -> Path:
        return self._root / self._config.publish.staging_dir

    # ------------------------------------------------------------------
    # begin
    # ------------------------------------------------------------------

    def begin(
        self, version_name: str | None, version_code: str | None
    ) -> Result[ReleaseDescriptor, ReleaseError]:
        parsed = parse_descriptor(version_name, version_code)
        if isinstance(parsed, Err):
            return parsed
        desc = parsed.value

        stage = self._store.read()
        if isinstance(stage, Err):
            return stage
        if stage.value is not Stage.NONE:
            return Err(
                ReleaseError(
                    kind="invalid_state",
                    message=f"a release is already in progress ({stage.value})",
                    hint=stale_marker_hint(self._store),
                )
            )

        main_branch = self._config.repository.main_branch
        on_main = self._require_branch(main_branch)
        if isinstance(on_main, Err):
            return on_main

        current = self.build_config.read_version()
        if isinstance(current, Err):
            return current
        if desc.version_code <= current.value.code:
            return Err(
                ReleaseError(
                    kind="invalid_input",
                    message=(
                        f"version code must increase: {desc.version_code} "
                        f"<= current {current.value.code}"
                    ),
                    hint=f"current version is {current.value.name} ({current.value.code})",
                )
            )

        started = self._store.write(Stage.STAGE_0)
        if isinstance(started, Err):
            return started
        self._console.print(
            f"release {desc.version_name} ({desc.version_code}): {Stage.STAGE_0}", Style.DIM
        )

        self._step("Pushing pending translations")
        pushed = self._tools.translations.push()
        if isinstance(pushed, Err):
            return pushed

        self._step(f"Pulling latest {main_branch}")
        pulled = self._tools.vcs.pull()
        if isinstance(pulled, Err):
            return pulled

        self._step(f"Creating {desc.branch}")
        branched = self._tools.vcs.create_branch(desc.branch)
        if isinstance(branched, Err):
            return branched

        self._step("Updating version")
        bumped = self.build_config.write_version(name=desc.version_name, code=desc.version_code)
        if isinstance(bumped, Err):
            return bumped
        self._console.print(
            f"{self._config.build.config_file}: versionName '{desc.version_name}', "
            f"versionCode {desc.version_code}",
            Style.DIM,
        )

        self._step("Building and testing")
        built = self._tools.builder.build()
        if isinstance(built, Err):
            return built

        checkpoint = self._store.write(Stage.STAGE_1)
        if isinstance(checkpoint, Err):
            return checkpoint

        self._console.newline()
        self._console.success(f"release {desc.version_name} built on {desc.branch}")
        self._console.info(
            "update the changelog and store listings, then run: relflow continue"
        )
        return Ok(desc)

    # ------------------------------------------------------------------
    # continue
    # ------------------------------------------------------------------

    def continue_release(self) -> Result[ReleaseDescriptor, ReleaseError]:
        stage = self._store.read()
        if isinstance(stage, Err):
            return stage
        if stage.value is not Stage.STAGE_1:
            hint = (
                "Start a release first: relflow begin <version-name> <version-code>"
                if stage.value is Stage.NONE
                else stale_marker_hint(self._store)
            )
            return Err(
                ReleaseError(
                    kind="invalid_state",
                    message=f"continue requires {Stage.STAGE_1} (current: {stage.value})",
                    hint=hint,
                )
            )

        fields = self.build_config.read_version()
        if isinstance(fields, Err):
            return fields
        desc = ReleaseDescriptor(version_name=fields.value.name, version_code=fields.value.code)

        on_branch = self._require_branch(desc.branch)
        if isinstance(on_branch, Err):
            return on_branch

        started = self._store.write(Stage.STAGE_2)
        if isinstance(started, Err):
            return started
        self._console.print(
            f"release {desc.version_name} ({desc.version_code}): {Stage.STAGE_2}", Style.DIM
        )

        self._step("Updating translation listings")
        listed = self._tools.builder.update_listings()
        if isinstance(listed, Err):
            return listed

        self._step("Committing release changes")
        committed = self._commit_changes(desc)
        if isinstance(committed, Err):
            return committed

        self._step(f"Pushing {desc.branch}")
        pushed = self._tools.vcs.push_branch(desc.branch)
        if isinstance(pushed, Err):
            return pushed

        self._step(f"Tagging {desc.tag}")
        tagged = self._tools.vcs.create_signed_tag(desc.tag, desc.commit_message)
        if isinstance(tagged, Err):
            return tagged
        tags_pushed = self._tools.vcs.push_tags()
        if isinstance(tags_pushed, Err):
            return tags_pushed

        self._step("Staging artifacts")
        staged = stage_artifacts(
            repo_root=self._root,
            patterns=self._config.build.artifacts,
            staging_dir=self.staging_dir,
            version_name=desc.version_name,
        )
        if isinstance(staged, Err):
            return staged
        artifacts = staged.value
        for artifact in artifacts:
            self._console.print(f"staged {artifact.name}", Style.DIM)

        self._step("Packaging artifacts")
        for artifact in artifacts:
            packaged = self._tools.packager.package(artifact)
            if isinstance(packaged, Err):
                return packaged
        assets = collect_release_assets(staging_dir=self.staging_dir, staged=artifacts)
        if isinstance(assets, Err):
            return assets
        for extra in assets.value[len(artifacts) :]:
            self._console.print(f"packaged {extra.name}", Style.DIM)

        self._step("Rendering release notes")
        notes = write_release_notes(
            template_path=self._root / self._config.publish.notes_template,
            placeholder=self._config.publish.version_placeholder,
            staging_dir=self.staging_dir,
            version_name=desc.version_name,
        )
        if isinstance(notes, Err):
            return notes

        self._step(f"Drafting GitHub release {desc.tag}")
        drafted = self._tools.publisher.create_draft(
            tag=desc.tag,
            title=desc.version_name,
            notes_file=notes.value,
            artifacts=assets.value,
        )
        if isinstance(drafted, Err):
            return drafted

        self._step("Cleaning up")
        removed = self._remove_staging()
        if isinstance(removed, Err):
            return removed
        cleaned = self._tools.builder.clean()
        if isinstance(cleaned, Err):
            return cleaned

        finished = self._store.clear()
        if isinstance(finished, Err):
            return finished

        self._console.newline()
        self._console.success(f"release {desc.version_name} drafted as {desc.tag}")
        self._console.info("review and publish the draft on GitHub")
        return Ok(desc)

    # ------------------------------------------------------------------
    # status
    # ------------------------------------------------------------------

    def status(self) -> Result[ReleaseStatus, ReleaseError]:
        """Read-only view of the current release state."""
        stage = self._store.read()
        if isinstance(stage, Err):
            return stage

        descriptor: ReleaseDescriptor | None = None
        if stage.value is not Stage.NONE:
            fields = self.build_config.read_version()
            if isinstance(fields, Ok):
                descriptor = ReleaseDescriptor(
                    version_name=fields.value.name, version_code=fields.value.code
                )

        return Ok(
            ReleaseStatus(
                stage=stage.value,
                marker=self._store.describe(),
                branch=self._tools.vcs.current_branch(),
                descriptor=descriptor,
            )
        )

    # ------------------------------------------------------------------

    def _step(self, title: str) -> None:
        self._console.header(title)

    def _require_branch(self, expected: str) -> Result[None, ReleaseError]:
        branch = self._tools.vcs.current_branch()
        if branch != expected:
            return Err(
                ReleaseError(
                    kind="wrong_branch",
                    message=f"must be on {expected} (current: {branch or 'detached HEAD'})",
                    hint=f"git checkout {expected}",
                )
            )
        return Ok(None)

    def _commit_changes(self, desc: ReleaseDescriptor) -> Result[None, ReleaseError]:
        dirty = self._tools.vcs.has_changes()
        if isinstance(dirty, Err):
            return dirty
        if not dirty.value:
            self._console.print("nothing to commit", Style.DIM)
            return Ok(None)
        return self._tools.vcs.commit_all(desc.commit_message)

    def _remove_staging(self) -> Result[None, ReleaseError]:
        try:
            remove_tree(self.staging_dir)
        except OSError as e:
            return Err(
                ReleaseError(
                    kind="io_failed",
                    message=f"failed to remove staged artifacts: {e}",
                    hint=str(self.staging_dir),
                )
            )
        return Ok(None)
