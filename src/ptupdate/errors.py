"""Error taxonomy for the updater.

Every error carries the exit code the process should finish with and the
diagnostic lines shown to the operator. Errors are raised where a failure is
detected and turned into results at the workflow boundary.
"""


class UpdaterError(Exception):
    """Base class for all updater failures."""

    exit_code: int = 1

    def __init__(self, *lines: str, exit_code: int | None = None):
        self.lines = list(lines)
        if exit_code is not None:
            self.exit_code = exit_code
        super().__init__(lines[0] if lines else type(self).__name__)


class MissingCapabilityError(UpdaterError):
    """Raised when a required external tool is not installed."""

    exit_code = 127

    def __init__(self, capability: str, *lines: str):
        self.capability = capability
        super().__init__(*lines)


class PreconditionError(UpdaterError):
    """Raised when the working directory cannot be updated."""


class ExecutionError(UpdaterError):
    """Raised when the local executable cannot report its version."""


class StepError(UpdaterError):
    """A failed upgrade step, reported with the failing tool's exit code."""

    step: str = "step"

    def __init__(self, code: int, *lines: str, tool: str | None = None):
        if tool is not None:
            lines = (f"{tool} exited with code '{code}'", *lines)
        super().__init__(*lines, exit_code=code)


class NetworkError(StepError):
    """Raised when the remote artifact cannot be resolved or downloaded."""

    step = "download"


class ExtractionError(StepError):
    """Raised when the downloaded archive cannot be extracted."""

    step = "extract"


class InstallError(StepError):
    """Raised when copying the new bundle into place fails.

    The working directory may be partially updated when this is raised.
    """

    step = "install"


class WorkspaceError(UpdaterError):
    """Raised when the temporary workspace cannot be created."""


class VersionFormatError(ValueError):
    """Raised when a version string has no parseable major component."""
