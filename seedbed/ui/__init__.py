"""UI components for Seedbed."""

from .dialogs import QtFolderPicker, RepoPickerDialog

__all__ = ["QtFolderPicker", "RepoPickerDialog"]
