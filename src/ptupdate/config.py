"""Updater configuration.

All settings are passed explicitly into the workflow. The download link
override is read from the environment by ``UpdaterConfig.from_env``.
"""

import os
import platform
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Final

# Environment variable overriding the download link
DOWNLOAD_URL_ENV: Final = "SDK_PT_LATEST_DL_LINK"

DOWNLOAD_URL_TEMPLATE: Final = (
    "https://dl.google.com/android/repository/platform-tools-latest-{os}.zip"
)

# Official release notes and SDK license terms
RELEASE_NOTES_URL: Final = "https://developer.android.com/studio/releases/platform-tools"
TERMS_URL: Final = "https://developer.android.com/studio/terms"

DEFAULT_EXECUTABLE: Final = "fastboot"
DEFAULT_BUNDLE_DIR: Final = "platform-tools"
DEFAULT_PROGRAM_NAME: Final = "update-pt"
WORKSPACE_PREFIX: Final = "update_pt."

BACKENDS: Final = ("system", "native")


def default_download_url() -> str:
    """Get the latest-release URL for the running platform."""
    system = platform.system().lower()
    if system == "darwin":
        os_name = "darwin"
    elif system == "windows":
        os_name = "windows"
    else:
        os_name = "linux"
    return DOWNLOAD_URL_TEMPLATE.format(os=os_name)


@dataclass(frozen=True)
class UpdaterConfig:
    """Configuration for one updater run."""

    download_url: str = field(default_factory=default_download_url)
    working_dir: Path = field(default_factory=Path.cwd)

    # Version oracle, also marks the directory as a Platform Tools install
    executable_name: str = DEFAULT_EXECUTABLE

    # Top-level directory inside the release archive
    bundle_dir: str = DEFAULT_BUNDLE_DIR

    # "system" shells out to curl/unzip/cp, "native" uses httpx/zipfile/shutil
    backend: str = "system"

    # Skip the confirmation prompt
    assume_yes: bool = False

    # Seconds to wait for `fastboot --version`
    command_timeout: float = 30.0

    program_name: str = DEFAULT_PROGRAM_NAME

    def __post_init__(self) -> None:
        if self.backend not in BACKENDS:
            raise ValueError(f"Unknown backend '{self.backend}', expected one of {BACKENDS}")
        if not self.download_url:
            raise ValueError("download_url must not be empty")

    @property
    def executable_path(self) -> Path:
        return self.working_dir / self.executable_name

    @classmethod
    def from_env(cls, environ: dict[str, str] | None = None, **overrides: Any) -> "UpdaterConfig":
        """Build a config from the environment, then apply explicit overrides.

        Overrides set to None are ignored so CLI options can be passed through
        unconditionally.
        """
        env = os.environ if environ is None else environ
        values: dict[str, Any] = {}

        url = env.get(DOWNLOAD_URL_ENV)
        if url:
            values["download_url"] = url

        values.update({k: v for k, v in overrides.items() if v is not None})
        if "working_dir" in values:
            values["working_dir"] = Path(values["working_dir"])
        return cls(**values)
