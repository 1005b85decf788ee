"""Self-update workflow for a Platform Tools directory.

The workflow can:
- Check the local fastboot version against the latest release
- Download and extract the release into a temporary workspace
- Merge the new files into the installation directory
"""

from ptupdate.updater.executor import UpgradeExecutor, UpgradeOutcome, UpgradeState, UpgradeStep
from ptupdate.updater.local import LocalVersionReader
from ptupdate.updater.probe import EnvironmentProber
from ptupdate.updater.remote import RemoteArtifact, RemoteResolver
from ptupdate.updater.workflow import UpdateResult, UpdateStatus, UpdateWorkflow, update_pt

__all__ = [
    "EnvironmentProber",
    "LocalVersionReader",
    "RemoteArtifact",
    "RemoteResolver",
    "UpgradeExecutor",
    "UpgradeOutcome",
    "UpgradeState",
    "UpgradeStep",
    "UpdateResult",
    "UpdateStatus",
    "UpdateWorkflow",
    "update_pt",
]
