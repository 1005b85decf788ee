"""Capabilities backed by system tools: curl, unzip and cp.

Exit codes of the tools are passed through unchanged.
"""

import logging
import shlex
import shutil
import subprocess
from pathlib import Path

from ptupdate.capabilities.interface import (
    ArchiveExtractor,
    CommandResult,
    HeaderResponse,
    HttpClient,
    TreeCopier,
)

logger = logging.getLogger(__name__)

# Shell conventions for a command that cannot be started
EXIT_NOT_FOUND = 127
EXIT_NOT_EXECUTABLE = 126


def run_command(cmd: list[str], capture: bool = True) -> CommandResult:
    """Run a command and return its exit code and output.

    With capture=False the tool writes straight to the terminal, which keeps
    progress meters visible.
    """
    logger.debug("+ %s", shlex.join(cmd))
    try:
        proc = subprocess.run(cmd, capture_output=capture, text=True, check=False)
    except FileNotFoundError as e:
        return CommandResult(EXIT_NOT_FOUND, stderr=str(e))
    except OSError as e:
        return CommandResult(EXIT_NOT_EXECUTABLE, stderr=str(e))

    if proc.returncode != 0:
        logger.debug("%s exited with %d: %s", cmd[0], proc.returncode, (proc.stderr or "").strip())
    return CommandResult(proc.returncode, proc.stdout or "", proc.stderr or "")


def parse_header_block(raw: str) -> dict[str, str]:
    """Parse an HTTP header block into a dict with lower-cased names.

    Only the last response is kept when the block holds several.
    """
    headers: dict[str, str] = {}
    for line in raw.splitlines():
        line = line.strip()
        if line.upper().startswith("HTTP/"):
            headers = {}
            continue
        name, sep, value = line.partition(":")
        if sep and name:
            headers[name.strip().lower()] = value.strip()
    return headers


class _SystemTool:
    binary: str

    @property
    def name(self) -> str:
        return self.binary

    def is_available(self) -> bool:
        return shutil.which(self.binary) is not None


class CurlClient(_SystemTool, HttpClient):
    """HTTP client using curl."""

    binary = "curl"

    def fetch_headers(self, url: str) -> HeaderResponse:
        result = run_command([self.binary, "-qsSI", url])
        if not result.ok:
            return HeaderResponse(result.returncode, error=result.stderr.strip())
        return HeaderResponse(0, headers=parse_header_block(result.stdout))

    def download(self, url: str, dest: Path) -> CommandResult:
        return run_command([self.binary, "-q", "-L", "-f", "-o", str(dest), url], capture=False)


class UnzipExtractor(_SystemTool, ArchiveExtractor):
    """Archive extractor using unzip."""

    binary = "unzip"

    def extract(self, archive: Path, member_prefix: str, dest: Path) -> CommandResult:
        pattern = f"{member_prefix.rstrip('/')}/*"
        return run_command([self.binary, "-qo", str(archive), pattern, "-d", str(dest)])


class CpCopier(_SystemTool, TreeCopier):
    """Tree copier using GNU cp's update mode."""

    binary = "cp"

    def merge_copy(self, source: Path, dest: Path) -> CommandResult:
        if not source.is_dir():
            return CommandResult(1, stderr=f"cannot stat '{source}': No such directory")
        entries = sorted(str(p) for p in source.iterdir())
        if not entries:
            return CommandResult(0)
        return run_command([self.binary, "-rfu", "-t", str(dest), *entries])
