"""Folder selection backed by QFileDialog."""

from pathlib import Path

from PySide6.QtWidgets import QFileDialog, QWidget


class QtFolderPicker:
    """Modal directory chooser used by the wizard."""

    def __init__(self, parent: QWidget | None = None) -> None:
        self._parent = parent

    def __call__(
        self, title: str, description: str, initial_value: str = ""
    ) -> str | None:
        """Show the chooser. Returns None if the user cancelled."""
        start = initial_value.strip() or str(Path.home())
        # QFileDialog has no description area; the title carries the intent
        path = QFileDialog.getExistingDirectory(
            self._parent,
            title,
            start,
            QFileDialog.Option.ShowDirsOnly,
        )
        return path or None
