"""Form for initializing a brand-new repository."""

import logging

from PySide6.QtCore import QObject, Signal

from seedbed.core.async_op import AsyncOperation
from seedbed.core.scheduler import Scheduler
from seedbed.core.utils import is_blank
from seedbed.core.workers import Executor

from .collaborators import FolderPicker, WizardCollaborators, pick_folder

logger = logging.getLogger(__name__)

NAME_REQUIRED_MESSAGE = "Repository name is required"
CREATE_FALLBACK_MESSAGE = "Failed to create repository"

# Passed to the backend when no parent directory is given
CURRENT_DIRECTORY = "."


class CreateRepoForm(QObject):
    """Collects a name and parent directory and initializes the repository."""

    changed = Signal()
    created = Signal(object)  # Repo

    def __init__(
        self,
        collaborators: WizardCollaborators,
        executor: Executor,
        scheduler: Scheduler,
        folder_picker: FolderPicker | None = None,
        parent: QObject | None = None,
    ) -> None:
        super().__init__(parent)
        self._collaborators = collaborators
        self._folder_picker = folder_picker
        self._name = ""
        self._parent_path = ""
        self._validation_error = ""

        self._init = AsyncOperation(
            executor,
            scheduler,
            name="init_repo",
            fallback_message=CREATE_FALLBACK_MESSAGE,
            parent=self,
        )
        self._init.changed.connect(self.changed)
        self._init.succeeded.connect(self.created)

    @property
    def name(self) -> str:
        return self._name

    @property
    def parent_path(self) -> str:
        return self._parent_path

    @property
    def busy(self) -> bool:
        """Check if initialization is in flight."""
        return self._init.is_loading

    @property
    def error(self) -> str:
        return self._validation_error or self._init.error

    @property
    def can_create(self) -> bool:
        return not is_blank(self._name) and not self._init.is_loading

    def set_name(self, name: str) -> None:
        if self._init.is_loading:
            return
        self._name = name
        self.changed.emit()

    def set_parent_path(self, path: str) -> None:
        if self._init.is_loading:
            return
        self._parent_path = path
        self.changed.emit()

    def browse_parent(self) -> bool:
        """Pick the parent directory with the folder picker."""
        if self._init.is_loading:
            return False
        path = pick_folder(
            self._folder_picker,
            "Select Parent Directory",
            "Choose where to create the new repository",
            self._parent_path,
        )
        if path is None:
            return False
        self.set_parent_path(path)
        return True

    def create_repo(self) -> bool:
        """Validate the inputs and start initialization.

        Returns True if the backend was called.
        """
        if self._init.is_loading:
            return False

        if is_blank(self._name):
            self._validation_error = NAME_REQUIRED_MESSAGE
            self.changed.emit()
            return False

        self._validation_error = ""
        parent = self._parent_path.strip() or CURRENT_DIRECTORY
        name = self._name.strip()
        logger.info(f"Creating repository {name!r} in {parent}")
        self._init.run(self._collaborators.init_repo, parent, name)
        return True

    def clear_error(self) -> None:
        self._validation_error = ""
        self._init.clear_error()
        self.changed.emit()

    def shutdown(self) -> None:
        self._init.reset()
