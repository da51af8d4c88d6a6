"""Dialog components for Seedbed."""

from .folder_picker import QtFolderPicker
from .repo_picker_dialog import RepoPickerDialog

__all__ = [
    "QtFolderPicker",
    "RepoPickerDialog",
]
