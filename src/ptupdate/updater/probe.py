"""Pre-flight checks for tools and the local installation."""

import logging
import os
from pathlib import Path

from ptupdate.capabilities import Capabilities, Capability
from ptupdate.errors import MissingCapabilityError, PreconditionError

logger = logging.getLogger(__name__)


class EnvironmentProber:
    """Verifies that an update can be attempted before anything is touched.

    Probes in order: archive extractor, network client, local executable.
    Nothing is modified; failures raise with the diagnostics to show.
    """

    def __init__(self, capabilities: Capabilities, executable: Path):
        self.capabilities = capabilities
        self.executable = executable

    def check_all(self) -> None:
        self.check_extractor()
        self._require(self.capabilities.http, "is required for this script to work")
        self.check_executable()

    def check_extractor(self) -> None:
        """Check the archive extractor; called again right before an upgrade."""
        self._require(self.capabilities.extractor, "is required to perform upgrade")

    def check_executable(self) -> None:
        path = self.executable
        if not (path.is_file() and os.access(path, os.X_OK)):
            raise PreconditionError(f"can't find or execute '{path.name}' in current directory")
        logger.debug("Found executable %s", path)

    def check_writable(self, directory: Path) -> None:
        if not os.access(directory, os.W_OK):
            raise PreconditionError(
                "you don't have permission to write into this directory",
                "no actions have been performed",
            )

    def _require(self, capability: Capability, purpose: str) -> None:
        if capability.is_available():
            logger.debug("Capability %s is available", capability.name)
            return
        raise MissingCapabilityError(
            capability.name,
            f"'{capability.name}' {purpose}",
            "please install it with your package manager and try again",
        )
