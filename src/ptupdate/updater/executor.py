"""Upgrade executor.

Runs the upgrade path as a linear sequence of steps:
1. confirm - ask the operator (bare enter means yes)
2. extractor re-check and permission check - nothing is touched on failure
3. tempdir - create the private workspace
4. download, extract, install - each stops the run on a non-zero exit code
5. cleanup - always attempted once the workspace exists

There is no rollback: a failed install can leave the directory partially
updated, and files missing from the new bundle are never deleted.
"""

import logging
import shutil
import tempfile
from dataclasses import dataclass
from enum import Enum
from pathlib import Path

from ptupdate.capabilities import Capabilities
from ptupdate.config import WORKSPACE_PREFIX, UpdaterConfig
from ptupdate.errors import (
    ExtractionError,
    InstallError,
    MissingCapabilityError,
    NetworkError,
    PreconditionError,
    StepError,
    UpdaterError,
    WorkspaceError,
)
from ptupdate.reporter import Reporter
from ptupdate.updater.probe import EnvironmentProber
from ptupdate.updater.remote import RemoteArtifact

logger = logging.getLogger(__name__)


class UpgradeState(str, Enum):
    """Terminal state of an upgrade attempt."""

    SUCCESS = "success"
    ABORTED = "aborted"
    FAILED = "failed"


class UpgradeStep(str, Enum):
    """Steps of the upgrade path, named as they appear in failure reasons."""

    CONFIRM = "confirm"
    EXTRACTOR_CHECK = "extract-tool"
    PERMISSION = "permission"
    TEMPDIR = "tempdir"
    DOWNLOAD = "download"
    EXTRACT = "extract"
    INSTALL = "install"


_STEP_BY_ERROR: dict[type[StepError], UpgradeStep] = {
    NetworkError: UpgradeStep.DOWNLOAD,
    ExtractionError: UpgradeStep.EXTRACT,
    InstallError: UpgradeStep.INSTALL,
}


@dataclass
class UpgradeOutcome:
    """Result of one upgrade attempt."""

    state: UpgradeState
    exit_code: int = 0
    step: UpgradeStep | None = None
    error: str | None = None
    workspace: Path | None = None
    # Set when the workspace could not be removed; never changes the state
    cleanup_error: str | None = None

    @property
    def reason(self) -> str | None:
        """Failure reason as '<step>:<code>', e.g. 'install:13'."""
        if self.state != UpgradeState.FAILED or self.step is None:
            return None
        return f"{self.step.value}:{self.exit_code}"

    @property
    def success(self) -> bool:
        return self.state == UpgradeState.SUCCESS


class UpgradeExecutor:
    """Downloads, extracts and installs a release into the working directory."""

    def __init__(
        self,
        config: UpdaterConfig,
        capabilities: Capabilities,
        reporter: Reporter,
        prober: EnvironmentProber | None = None,
    ):
        self.config = config
        self.capabilities = capabilities
        self.reporter = reporter
        self.prober = prober or EnvironmentProber(capabilities, config.executable_path)

    def run(self, artifact: RemoteArtifact) -> UpgradeOutcome:
        """Run the upgrade path for artifact.

        KeyboardInterrupt is not handled here; it propagates after the
        workspace cleanup has been attempted.
        """
        if not self.config.assume_yes and not self.reporter.confirm("Do you want to perform upgrade?"):
            self.reporter.info("Aborted.")
            return UpgradeOutcome(UpgradeState.ABORTED, step=UpgradeStep.CONFIRM)
        self.reporter.info()

        try:
            self.prober.check_extractor()
        except MissingCapabilityError as e:
            return self._fail(UpgradeStep.EXTRACTOR_CHECK, e)

        try:
            self.prober.check_writable(self.config.working_dir)
        except PreconditionError as e:
            return self._fail(UpgradeStep.PERMISSION, e)

        try:
            workspace = Path(tempfile.mkdtemp(prefix=WORKSPACE_PREFIX))
        except OSError as e:
            error = WorkspaceError(f"can't create temporary directory: {e}", exit_code=e.errno or 1)
            return self._fail(UpgradeStep.TEMPDIR, error)
        logger.debug("Created workspace %s", workspace)

        try:
            outcome = self._run_steps(artifact, workspace)
        finally:
            cleanup_error = self._cleanup(workspace)

        outcome.workspace = workspace
        outcome.cleanup_error = cleanup_error
        return outcome

    def _run_steps(self, artifact: RemoteArtifact, workspace: Path) -> UpgradeOutcome:
        try:
            archive = self._download(artifact, workspace)
            bundle = self._extract(archive, workspace)
            self._install(bundle)
        except StepError as e:
            return self._fail(_STEP_BY_ERROR[type(e)], e)
        return UpgradeOutcome(UpgradeState.SUCCESS)

    def _download(self, artifact: RemoteArtifact, workspace: Path) -> Path:
        http = self.capabilities.http
        archive = workspace / artifact.filename

        self.reporter.action(f"Downloading '{artifact.filename}'...")
        self.reporter.info()
        result = http.download(artifact.url, archive)
        if not result.ok:
            raise NetworkError(result.returncode, tool=http.name)
        return archive

    def _extract(self, archive: Path, workspace: Path) -> Path:
        extractor = self.capabilities.extractor
        bundle_dir = self.config.bundle_dir

        self.reporter.info()
        self.reporter.action(f"Using {extractor.name} to extract '{archive.name}':")
        self.reporter.info()
        result = extractor.extract(archive, bundle_dir, workspace)
        if not result.ok:
            raise ExtractionError(result.returncode, tool=extractor.name)
        self.reporter.success("Done!")
        self.reporter.info()
        return workspace / bundle_dir

    def _install(self, bundle: Path) -> None:
        copier = self.capabilities.copier
        target = self.config.working_dir

        self.reporter.action(f"Copying extracted files to '{target}'...")
        self.reporter.info()
        result = copier.merge_copy(bundle, target)
        if not result.ok:
            raise InstallError(result.returncode, tool=copier.name)
        self.reporter.success("Successful!")
        self.reporter.info()

    def _cleanup(self, workspace: Path) -> str | None:
        self.reporter.action("Cleaning up...")
        try:
            shutil.rmtree(workspace)
        except OSError as e:
            message = f"can't remove temporary directory '{workspace}': {e.strerror or e}"
            self.reporter.error(message)
            return message
        self.reporter.info("Done!")
        return None

    def _fail(self, step: UpgradeStep, error: UpdaterError) -> UpgradeOutcome:
        lines = list(error.lines)
        if isinstance(error, StepError):
            lines.append(f"{step.value} step failed with exit code {error.exit_code}")
        self.reporter.error(*lines)
        logger.debug("Upgrade failed at %s: %s", step.value, error)
        return UpgradeOutcome(
            UpgradeState.FAILED,
            exit_code=error.exit_code,
            step=step,
            error=str(error),
        )
