"""Read the version of the installed tools."""

import logging
import subprocess
from pathlib import Path

from ptupdate.errors import ExecutionError

logger = logging.getLogger(__name__)


def version_token(output: str) -> str | None:
    """Get the last word of the first non-empty line.

    ``fastboot version 34.0.5-10900879`` yields ``34.0.5-10900879``.
    """
    for line in output.splitlines():
        words = line.split()
        if words:
            return words[-1]
    return None


class LocalVersionReader:
    """Asks the local executable for its version."""

    def __init__(self, timeout: float = 30.0):
        self.timeout = timeout

    def read(self, executable: Path) -> str:
        """Run ``<executable> --version`` and extract the version token.

        Raises:
            ExecutionError: If the command cannot run, fails, or prints nothing.
        """
        cmd = [str(executable), "--version"]
        logger.debug("+ %s", " ".join(cmd))
        try:
            proc = subprocess.run(
                cmd,
                capture_output=True,
                text=True,
                timeout=self.timeout,
                cwd=executable.parent,
            )
        except subprocess.TimeoutExpired as e:
            raise ExecutionError(f"'{executable.name} --version' timed out") from e
        except OSError as e:
            raise ExecutionError(f"can't run '{executable.name}': {e.strerror or e}") from e

        if proc.returncode != 0:
            raise ExecutionError(
                f"'{executable.name} --version' exited with code '{proc.returncode}'",
                exit_code=proc.returncode if proc.returncode > 0 else 1,
            )

        token = version_token(proc.stdout)
        if token is None:
            raise ExecutionError(f"'{executable.name} --version' printed no version")
        logger.debug("Local version token: %s", token)
        return token
