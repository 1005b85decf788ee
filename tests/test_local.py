"""Tests for reading the local fastboot version."""

import subprocess
from pathlib import Path
from unittest.mock import patch

import pytest
from conftest import write_fastboot

from ptupdate.errors import ExecutionError
from ptupdate.updater import LocalVersionReader
from ptupdate.updater.local import version_token


class TestVersionToken:
    """Tests for version_token()."""

    def test_last_word_of_first_line(self) -> None:
        output = "fastboot version 34.0.5-10900879\nInstalled as /opt/fastboot\n"
        assert version_token(output) == "34.0.5-10900879"

    def test_skips_leading_blank_lines(self) -> None:
        assert version_token("\n   \nfastboot version r33.0.3\n") == "r33.0.3"

    def test_empty_output(self) -> None:
        assert version_token("") is None


@pytest.mark.posix
class TestLocalVersionReader:
    """Tests for LocalVersionReader.read() against a real script."""

    def test_reads_version(self, tool_dir: Path) -> None:
        assert LocalVersionReader().read(tool_dir / "fastboot") == "r33.0.3"

    def test_failing_command(self, tmp_path: Path) -> None:
        executable = write_fastboot(tmp_path, "fastboot: error", exit_code=3)

        with pytest.raises(ExecutionError) as exc_info:
            LocalVersionReader().read(executable)

        assert exc_info.value.exit_code == 3

    def test_no_output(self, tmp_path: Path) -> None:
        executable = tmp_path / "fastboot"
        executable.write_text("#!/bin/sh\nexit 0\n")
        executable.chmod(0o755)

        with pytest.raises(ExecutionError) as exc_info:
            LocalVersionReader().read(executable)

        assert "printed no version" in exc_info.value.lines[0]

    def test_missing_executable(self, tmp_path: Path) -> None:
        with pytest.raises(ExecutionError):
            LocalVersionReader().read(tmp_path / "fastboot")

    def test_timeout(self, tool_dir: Path) -> None:
        with patch(
            "ptupdate.updater.local.subprocess.run",
            side_effect=subprocess.TimeoutExpired(cmd="fastboot", timeout=1),
        ):
            with pytest.raises(ExecutionError) as exc_info:
                LocalVersionReader(timeout=1).read(tool_dir / "fastboot")

        assert "timed out" in exc_info.value.lines[0]
