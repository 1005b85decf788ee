"""The update workflow: probe, compare versions, optionally upgrade.

Control flow is strictly sequential:
EnvironmentProber -> LocalVersionReader + RemoteResolver -> normalize both
-> decide -> UpgradeExecutor (only when the remote release is newer).
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any

from ptupdate.capabilities import Capabilities, build_capabilities
from ptupdate.config import TERMS_URL, UpdaterConfig
from ptupdate.errors import ExecutionError, UpdaterError, VersionFormatError
from ptupdate.reporter import Reporter
from ptupdate.updater.executor import UpgradeExecutor, UpgradeOutcome, UpgradeState
from ptupdate.updater.local import LocalVersionReader
from ptupdate.updater.probe import EnvironmentProber
from ptupdate.updater.remote import RemoteResolver
from ptupdate.version import UpdateDecision, decide, normalize_version

logger = logging.getLogger(__name__)


class UpdateStatus(str, Enum):
    """Overall result of an updater run."""

    UP_TO_DATE = "up_to_date"
    UPGRADED = "upgraded"
    ABORTED = "aborted"
    FAILED = "failed"


_STATUS_BY_STATE = {
    UpgradeState.SUCCESS: UpdateStatus.UPGRADED,
    UpgradeState.ABORTED: UpdateStatus.ABORTED,
    UpgradeState.FAILED: UpdateStatus.FAILED,
}


@dataclass
class UpdateResult:
    """Result of one workflow run."""

    status: UpdateStatus
    exit_code: int = 0
    local_version: str | None = None
    remote_version: str | None = None
    decision: UpdateDecision | None = None
    outcome: UpgradeOutcome | None = None
    error: str | None = None


class UpdateWorkflow:
    """Checks for a newer Platform Tools release and installs it on request.

    Every collaborator can be injected; by default they are built from the
    config.
    """

    def __init__(
        self,
        config: UpdaterConfig | None = None,
        capabilities: Capabilities | None = None,
        reporter: Reporter | None = None,
        local_reader: LocalVersionReader | None = None,
    ):
        self.config = config or UpdaterConfig.from_env()
        self.capabilities = capabilities or build_capabilities(self.config.backend)
        self.reporter = reporter or Reporter(self.config.program_name)
        self.local_reader = local_reader or LocalVersionReader(timeout=self.config.command_timeout)
        self.prober = EnvironmentProber(self.capabilities, self.config.executable_path)
        self.resolver = RemoteResolver(self.capabilities.http)
        self.executor = UpgradeExecutor(self.config, self.capabilities, self.reporter, self.prober)

    def __call__(self) -> int:
        return self.run().exit_code

    def run(self) -> UpdateResult:
        """Run the workflow, reporting any failure to the operator."""
        try:
            return self._run()
        except UpdaterError as e:
            self.reporter.error(*e.lines)
            logger.debug("Update failed: %s", e)
            return UpdateResult(UpdateStatus.FAILED, exit_code=e.exit_code, error=str(e))

    def _run(self) -> UpdateResult:
        self.prober.check_all()

        local_version = self.local_reader.read(self.config.executable_path)
        artifact = self.resolver.resolve(self.config.download_url)

        try:
            local_norm = normalize_version(local_version)
        except VersionFormatError as e:
            raise ExecutionError(
                f"can't understand local version '{local_version}' of '{self.config.executable_name}'"
            ) from e

        decision = decide(local_norm, artifact.normalized_version)
        result = UpdateResult(
            UpdateStatus.UP_TO_DATE,
            local_version=local_version,
            remote_version=artifact.version,
            decision=decision,
        )

        if decision == UpdateDecision.UP_TO_DATE:
            self.reporter.info("Your Platform Tools version looks recent enough.")
            self._print_versions(local_version, artifact.version)
            return result

        self._print_upgrade_notice(local_version, artifact.version)
        outcome = self.executor.run(artifact)
        result.status = _STATUS_BY_STATE[outcome.state]
        result.exit_code = outcome.exit_code
        result.outcome = outcome
        result.error = outcome.error
        return result

    def _print_versions(self, local_version: str, remote_version: str) -> None:
        self.reporter.info(f"Local version:   {local_version}")
        self.reporter.info(f"Remote version:  {remote_version}")

    def _print_upgrade_notice(self, local_version: str, remote_version: str) -> None:
        info = self.reporter.info
        info("Newer version found!")
        info()
        info("!!! THIS TOOL IS PROVIDED 'AS IS' AND WITHOUT WARRANTY OF ANY KIND")
        info()
        info("You should read and accept the terms and conditions for Android SDK")
        info("(This is not legal advice! Ask a professional if unsure)")
        info()
        info(f"You can find it here: <{TERMS_URL}>")
        info()
        self._print_versions(local_version, remote_version)
        info()


def update_pt(reporter: Reporter | None = None, **overrides: Any) -> int:
    """Run the updater as an embedded command and return its exit code.

    Keyword arguments override UpdaterConfig fields; the download URL is
    still taken from SDK_PT_LATEST_DL_LINK unless overridden.
    """
    config = UpdaterConfig.from_env(**overrides)
    return UpdateWorkflow(config, reporter=reporter)()
