"""Version normalization and update decision.

Platform Tools versions show up in two shapes: ``r34.0.1`` in release
filenames and ``34.0.5-10900879`` in ``fastboot --version`` output. Both are
reduced to a single integer so that one comparison decides whether an upgrade
is available.
"""

import logging
import re
from enum import Enum
from typing import Final

from ptupdate.errors import VersionFormatError

logger = logging.getLogger(__name__)

# Width of each version component in the normalized integer
COMPONENT_BASE: Final = 1_000_000

_LEADING_DIGITS = re.compile(r"\d+")


class UpdateDecision(str, Enum):
    """Outcome of comparing local and remote versions."""

    UP_TO_DATE = "up_to_date"
    UPGRADE_AVAILABLE = "upgrade_available"


def _leading_int(field: str) -> int | None:
    match = _LEADING_DIGITS.match(field)
    return int(match.group()) if match else None


def parse_version(version: str) -> tuple[int, int, int]:
    """Split a version string into its (major, minor, patch) triple.

    One leading tag character (``r``, ``v``) and everything from the first
    hyphen onward are ignored. Missing minor/patch components count as 0.

    Raises:
        VersionFormatError: If no major component can be parsed, or a
            component does not fit in the normalized encoding.
    """
    text = version.strip()
    if text and not text[0].isdigit():
        text = text[1:]
    text = text.split("-", 1)[0]

    fields = text.split(".")[:3]
    major = _leading_int(fields[0])
    if major is None:
        raise VersionFormatError(f"cannot parse version '{version}'")

    rest = [_leading_int(f) or 0 for f in fields[1:]]
    rest += [0] * (2 - len(rest))
    triple = (major, rest[0], rest[1])

    if any(part >= COMPONENT_BASE for part in triple):
        raise VersionFormatError(f"version component out of range in '{version}'")
    return triple


def normalize_version(version: str) -> int:
    """Convert a version string into a comparable integer.

    ``normalize_version("r34.0.1") == normalize_version("34.0.1-linux")``
    """
    major, minor, patch = parse_version(version)
    return (major * COMPONENT_BASE + minor) * COMPONENT_BASE + patch


def version_from_filename(filename: str) -> str:
    """Extract the version token from a release filename.

    ``platform-tools_r34.0.1-linux.zip`` yields ``r34.0.1``.
    """
    if "_" not in filename:
        raise VersionFormatError(f"no version in filename '{filename}'")
    return filename.split("_", 1)[1].split("-", 1)[0]


def decide(local_norm: int, remote_norm: int) -> UpdateDecision:
    """Decide whether the remote release should replace the local one."""
    if local_norm < remote_norm:
        return UpdateDecision.UPGRADE_AVAILABLE
    if local_norm > remote_norm:
        logger.debug("Local version %d is newer than remote %d", local_norm, remote_norm)
    return UpdateDecision.UP_TO_DATE
