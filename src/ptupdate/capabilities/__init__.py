"""Swappable backends for network, archive and copy operations."""

from ptupdate.capabilities.interface import (
    ArchiveExtractor,
    Capabilities,
    Capability,
    CommandResult,
    HeaderResponse,
    HttpClient,
    TreeCopier,
)
from ptupdate.capabilities.native import HttpxClient, ShutilCopier, ZipfileExtractor
from ptupdate.capabilities.system import CpCopier, CurlClient, UnzipExtractor


def build_capabilities(backend: str = "system") -> Capabilities:
    """Create the capability set for a backend name."""
    if backend == "system":
        return Capabilities(http=CurlClient(), extractor=UnzipExtractor(), copier=CpCopier())
    if backend == "native":
        return Capabilities(http=HttpxClient(), extractor=ZipfileExtractor(), copier=ShutilCopier())
    raise ValueError(f"Unknown backend: {backend}")


__all__ = [
    "Capability",
    "Capabilities",
    "HttpClient",
    "ArchiveExtractor",
    "TreeCopier",
    "CommandResult",
    "HeaderResponse",
    "CurlClient",
    "UnzipExtractor",
    "CpCopier",
    "HttpxClient",
    "ZipfileExtractor",
    "ShutilCopier",
    "build_capabilities",
]
