"""Pytest configuration and fixtures."""

import io
import shutil
import sys
from pathlib import Path

import pytest
from rich.console import Console

from ptupdate.capabilities import (
    ArchiveExtractor,
    Capabilities,
    CommandResult,
    HeaderResponse,
    HttpClient,
    TreeCopier,
)
from ptupdate.config import UpdaterConfig
from ptupdate.reporter import Reporter

LATEST_URL = "https://dl.example.com/android/repository/platform-tools-latest-linux.zip"
RELEASE_FILENAME = "platform-tools_r34.0.1-linux.zip"
RELEASE_LOCATION = f"https://dl.example.com/android/repository/{RELEASE_FILENAME}"


def pytest_collection_modifyitems(config, items):
    """Skip tests that execute shell scripts on Windows."""
    if sys.platform != "win32":
        return

    skip_posix = pytest.mark.skip(reason="needs a POSIX shell")
    for item in items:
        if "posix" in item.keywords:
            item.add_marker(skip_posix)


def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line("markers", "posix: test runs shell scripts")


def write_fastboot(directory: Path, version_line: str, exit_code: int = 0) -> Path:
    """Create an executable fastboot stand-in printing version_line."""
    script = directory / "fastboot"
    script.write_text(
        "#!/bin/sh\n"
        f"echo '{version_line}'\n"
        "echo 'Installed as /opt/platform-tools/fastboot'\n"
        f"exit {exit_code}\n"
    )
    script.chmod(0o755)
    return script


class FakeHttp(HttpClient):
    """HTTP client that answers from memory and records every call."""

    def __init__(
        self,
        location: str | None = RELEASE_LOCATION,
        head_code: int = 0,
        download_code: int = 0,
        available: bool = True,
        probe_log: list[str] | None = None,
    ):
        self.location = location
        self.head_code = head_code
        self.download_code = download_code
        self.available = available
        self.probe_log = probe_log if probe_log is not None else []
        self.head_calls: list[str] = []
        self.downloads: list[tuple[str, Path]] = []

    @property
    def name(self) -> str:
        return "fake-http"

    def is_available(self) -> bool:
        self.probe_log.append(self.name)
        return self.available

    def fetch_headers(self, url: str) -> HeaderResponse:
        self.head_calls.append(url)
        if self.head_code:
            return HeaderResponse(self.head_code, error="could not resolve host")
        headers = {"content-type": "text/html"}
        if self.location is not None:
            headers["location"] = self.location
        return HeaderResponse(0, headers=headers)

    def download(self, url: str, dest: Path) -> CommandResult:
        self.downloads.append((url, dest))
        if self.download_code:
            return CommandResult(self.download_code)
        dest.write_bytes(b"PK fake archive")
        return CommandResult(0)


class FakeExtractor(ArchiveExtractor):
    """Extractor that lays out a fixed bundle instead of reading the archive."""

    def __init__(self, code: int = 0, available: bool = True, probe_log: list[str] | None = None):
        self.code = code
        self.available = available
        self.probe_log = probe_log if probe_log is not None else []
        self.calls: list[tuple[Path, str, Path]] = []

    @property
    def name(self) -> str:
        return "fake-unzip"

    def is_available(self) -> bool:
        self.probe_log.append(self.name)
        return self.available

    def extract(self, archive: Path, member_prefix: str, dest: Path) -> CommandResult:
        self.calls.append((archive, member_prefix, dest))
        if self.code:
            return CommandResult(self.code)
        bundle = dest / member_prefix
        (bundle / "lib64").mkdir(parents=True)
        (bundle / "fastboot").write_text("new fastboot")
        (bundle / "adb").write_text("new adb")
        (bundle / "lib64" / "libc++.so").write_text("new lib")
        return CommandResult(0)


class FakeCopier(TreeCopier):
    """Copier that merges with shutil, or fails with a fixed code."""

    def __init__(self, code: int = 0):
        self.code = code
        self.calls: list[tuple[Path, Path]] = []

    @property
    def name(self) -> str:
        return "fake-cp"

    def is_available(self) -> bool:
        return True

    def merge_copy(self, source: Path, dest: Path) -> CommandResult:
        self.calls.append((source, dest))
        if self.code:
            return CommandResult(self.code)
        shutil.copytree(source, dest, dirs_exist_ok=True)
        return CommandResult(0)


class Output:
    """Reporter wired to in-memory consoles."""

    def __init__(self, answers: list[str] | None = None):
        self.stdout = io.StringIO()
        self.stderr = io.StringIO()
        self.prompts: list[str] = []
        self._answers = list(answers or [])
        self.reporter = Reporter(
            "update-pt",
            console=Console(file=self.stdout, width=200, highlight=False, soft_wrap=True),
            err_console=Console(file=self.stderr, width=200, highlight=False, soft_wrap=True),
            ask=self._ask,
        )

    def _ask(self, prompt: str) -> str:
        self.prompts.append(prompt)
        if not self._answers:
            raise EOFError
        return self._answers.pop(0)

    @property
    def out(self) -> str:
        return self.stdout.getvalue()

    @property
    def err(self) -> str:
        return self.stderr.getvalue()


@pytest.fixture
def tool_dir(tmp_path: Path) -> Path:
    """A Platform Tools directory with fastboot reporting r33.0.3."""
    directory = tmp_path / "platform-tools"
    directory.mkdir()
    write_fastboot(directory, "fastboot version r33.0.3")
    (directory / "adb").write_text("old adb")
    (directory / "stale-tool").write_text("only in the old release")
    return directory


@pytest.fixture
def config(tool_dir: Path) -> UpdaterConfig:
    return UpdaterConfig(download_url=LATEST_URL, working_dir=tool_dir)


@pytest.fixture
def probe_log() -> list[str]:
    return []


@pytest.fixture
def capabilities(probe_log: list[str]) -> Capabilities:
    return Capabilities(
        http=FakeHttp(probe_log=probe_log),
        extractor=FakeExtractor(probe_log=probe_log),
        copier=FakeCopier(),
    )


@pytest.fixture
def output() -> Output:
    return Output()
