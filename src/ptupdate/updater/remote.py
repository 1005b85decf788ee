"""Resolve the latest release artifact from its download link.

The download link redirects once to a versioned filename, e.g.
``platform-tools-latest-linux.zip`` -> ``platform-tools_r34.0.1-linux.zip``.
Only the headers of that single hop are inspected.
"""

import logging
from urllib.parse import urlsplit

from pydantic import BaseModel

from ptupdate.capabilities import HttpClient
from ptupdate.errors import NetworkError, VersionFormatError
from ptupdate.version import normalize_version, version_from_filename

logger = logging.getLogger(__name__)


class RemoteArtifact(BaseModel):
    """The release a download link currently points to."""

    url: str
    location: str
    filename: str
    version: str

    @property
    def normalized_version(self) -> int:
        return normalize_version(self.version)


def filename_from_location(location: str) -> str:
    """Get the last path segment of a redirect target."""
    path = urlsplit(location.strip()).path
    return path.rstrip("/").rsplit("/", 1)[-1]


class RemoteResolver:
    """Resolves a download link to a RemoteArtifact."""

    def __init__(self, http: HttpClient):
        self.http = http

    def resolve(self, url: str) -> RemoteArtifact:
        """Resolve url through its redirect.

        Raises:
            NetworkError: If the request fails, no redirect is returned, or
                the redirect target carries no version.
        """
        response = self.http.fetch_headers(url)
        if not response.ok:
            lines = [response.error] if response.error else []
            raise NetworkError(response.returncode, *lines, tool=self.http.name)

        location = response.get("location")
        if not location:
            raise NetworkError(1, f"no redirect received from '{url}'")

        filename = filename_from_location(location)
        try:
            version = version_from_filename(filename)
            normalize_version(version)
        except VersionFormatError as e:
            raise NetworkError(1, f"unexpected release filename '{filename}'") from e

        logger.debug("Resolved %s -> %s (version %s)", url, location, version)
        return RemoteArtifact(url=url, location=location, filename=filename, version=version)
