"""Tests for resolving the remote release."""

import pytest
from conftest import LATEST_URL, RELEASE_FILENAME, RELEASE_LOCATION, FakeHttp

from ptupdate.capabilities import HttpxClient
from ptupdate.errors import NetworkError
from ptupdate.updater import RemoteArtifact, RemoteResolver
from ptupdate.updater.remote import filename_from_location
from ptupdate.version import normalize_version


class TestFilenameFromLocation:
    """Tests for filename_from_location()."""

    @pytest.mark.parametrize(
        ("location", "expected"),
        [
            (RELEASE_LOCATION, RELEASE_FILENAME),
            (f"{RELEASE_LOCATION}?token=abc#frag", RELEASE_FILENAME),
            (f"/android/repository/{RELEASE_FILENAME}", RELEASE_FILENAME),
            (f" {RELEASE_LOCATION}\r", RELEASE_FILENAME),
            (RELEASE_FILENAME, RELEASE_FILENAME),
        ],
    )
    def test_last_segment(self, location: str, expected: str) -> None:
        assert filename_from_location(location) == expected


class TestRemoteResolver:
    """Tests for RemoteResolver.resolve()."""

    def test_resolves_redirect(self) -> None:
        http = FakeHttp()

        artifact = RemoteResolver(http).resolve(LATEST_URL)

        assert http.head_calls == [LATEST_URL]
        assert artifact == RemoteArtifact(
            url=LATEST_URL,
            location=RELEASE_LOCATION,
            filename=RELEASE_FILENAME,
            version="r34.0.1",
        )
        assert artifact.normalized_version == normalize_version("34.0.1")

    def test_transport_failure_carries_code(self) -> None:
        with pytest.raises(NetworkError) as exc_info:
            RemoteResolver(FakeHttp(head_code=6)).resolve(LATEST_URL)

        error = exc_info.value
        assert error.exit_code == 6
        assert error.lines[0] == "fake-http exited with code '6'"
        assert "could not resolve host" in error.lines[1]

    def test_malformed_url_with_httpx(self) -> None:
        with pytest.raises(NetworkError) as exc_info:
            RemoteResolver(HttpxClient()).resolve("http://[::1")

        assert exc_info.value.exit_code == 3
        assert exc_info.value.lines[0] == "httpx exited with code '3'"

    def test_missing_location(self) -> None:
        with pytest.raises(NetworkError) as exc_info:
            RemoteResolver(FakeHttp(location=None)).resolve(LATEST_URL)

        assert exc_info.value.exit_code == 1
        assert "no redirect" in exc_info.value.lines[0]

    def test_unversioned_location(self) -> None:
        http = FakeHttp(location="https://dl.example.com/platform-tools-latest-linux.zip")

        with pytest.raises(NetworkError) as exc_info:
            RemoteResolver(http).resolve(LATEST_URL)

        assert "unexpected release filename" in exc_info.value.lines[0]
