"""ptupdate - keep an Android SDK Platform Tools directory up to date."""

__version__ = "0.1.0"

from ptupdate.updater import UpdateWorkflow, update_pt  # noqa: E402

__all__ = ["__version__", "UpdateWorkflow", "update_pt"]
