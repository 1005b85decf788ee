"""Capability interfaces for the external operations an upgrade needs.

The updater never talks to the network, an archive or the filesystem tree
directly; it goes through these interfaces so that backends can be swapped
and tests can substitute fakes.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from pathlib import Path


@dataclass
class CommandResult:
    """Result of an external operation, in process exit-code terms."""

    returncode: int
    stdout: str = ""
    stderr: str = ""

    @property
    def ok(self) -> bool:
        return self.returncode == 0


@dataclass
class HeaderResponse:
    """Response headers of a header-only request."""

    returncode: int
    # Header names are lower-cased
    headers: dict[str, str] = field(default_factory=dict)
    error: str = ""

    @property
    def ok(self) -> bool:
        return self.returncode == 0

    def get(self, name: str) -> str | None:
        """Look up a header case-insensitively."""
        return self.headers.get(name.lower())


class Capability(ABC):
    """An external capability that may or may not be installed."""

    @property
    @abstractmethod
    def name(self) -> str:
        """Tool name used in diagnostics (e.g., 'curl')."""
        ...

    @abstractmethod
    def is_available(self) -> bool:
        """Check if the capability can be used on this machine."""
        ...


class HttpClient(Capability):
    """Fetches headers and downloads files."""

    @abstractmethod
    def fetch_headers(self, url: str) -> HeaderResponse:
        """Issue a header-only request without following redirects."""
        ...

    @abstractmethod
    def download(self, url: str, dest: Path) -> CommandResult:
        """Download url to dest, following redirects."""
        ...


class ArchiveExtractor(Capability):
    """Extracts archive members below a top-level directory."""

    @abstractmethod
    def extract(self, archive: Path, member_prefix: str, dest: Path) -> CommandResult:
        """Extract members of archive under member_prefix into dest.

        Existing files in dest are overwritten.
        """
        ...


class TreeCopier(Capability):
    """Merges a directory tree into another one."""

    @abstractmethod
    def merge_copy(self, source: Path, dest: Path) -> CommandResult:
        """Recursively copy the contents of source into dest.

        Existing files are overwritten unless the destination is newer.
        Files in dest that are absent from source are left alone.
        """
        ...


@dataclass
class Capabilities:
    """The set of capabilities one updater run uses."""

    http: HttpClient
    extractor: ArchiveExtractor
    copier: TreeCopier
