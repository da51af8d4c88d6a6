"""Browser over repositories found on the local machine."""

import logging

from PySide6.QtCore import QObject, Signal

from seedbed.core.async_op import AsyncOperation
from seedbed.core.scheduler import Scheduler
from seedbed.core.workers import Executor
from seedbed.models.repository import DirectoryEntry

from .collaborators import FolderPicker, WizardCollaborators, pick_folder

logger = logging.getLogger(__name__)

DEFAULT_VISIBLE_LIMIT = 3

LIST_FAILED_MESSAGE = "Failed to load repositories"
REGISTER_FALLBACK_MESSAGE = "Failed to register repository"


class LocalRepoBrowser(QObject):
    """Offers local repositories and registers the chosen one."""

    changed = Signal()
    registered = Signal(object)  # Repo

    def __init__(
        self,
        collaborators: WizardCollaborators,
        executor: Executor,
        scheduler: Scheduler,
        folder_picker: FolderPicker | None = None,
        visible_limit: int = DEFAULT_VISIBLE_LIMIT,
        parent: QObject | None = None,
    ) -> None:
        super().__init__(parent)
        self._collaborators = collaborators
        self._folder_picker = folder_picker
        self._visible_limit = visible_limit

        self._expanded = False
        self._has_searched = False
        self._loaded = False

        self._listing = AsyncOperation(
            executor,
            scheduler,
            name="list_local_repos",
            describe_error=lambda exc: LIST_FAILED_MESSAGE,
            parent=self,
        )
        self._register = AsyncOperation(
            executor,
            scheduler,
            name="register_repo",
            fallback_message=REGISTER_FALLBACK_MESSAGE,
            parent=self,
        )
        self._listing.changed.connect(self.changed)
        self._listing.succeeded.connect(self._on_loaded)
        self._listing.failed.connect(self._on_load_failed)
        self._register.changed.connect(self.changed)
        self._register.succeeded.connect(self.registered)

    @property
    def entries(self) -> list[DirectoryEntry]:
        """All candidates from the last load; empty on error."""
        return list(self._listing.data or [])

    @property
    def visible_entries(self) -> list[DirectoryEntry]:
        """Candidates currently shown."""
        entries = self.entries
        if self._expanded:
            return entries
        return entries[: self._visible_limit]

    @property
    def hidden_count(self) -> int:
        """Number of candidates hidden behind "show more"."""
        if self._expanded:
            return 0
        return max(0, len(self.entries) - self._visible_limit)

    @property
    def expanded(self) -> bool:
        return self._expanded

    @property
    def can_expand(self) -> bool:
        """Check if there are more candidates than the collapsed view shows."""
        return len(self.entries) > self._visible_limit

    @property
    def has_searched(self) -> bool:
        """Check if a load has finished, successfully or not."""
        return self._has_searched

    @property
    def is_loading(self) -> bool:
        return self._listing.is_loading

    @property
    def loading_elapsed(self) -> int:
        return self._listing.elapsed

    @property
    def is_registering(self) -> bool:
        return self._register.is_loading

    @property
    def busy(self) -> bool:
        """Check if a registration is in flight."""
        return self._register.is_loading

    @property
    def error(self) -> str:
        return self._register.error or self._listing.error

    def activate(self) -> None:
        """Load candidates unless a load succeeded or is running."""
        if self._loaded or self._listing.is_loading:
            return
        self.load_candidates()

    def load_candidates(self) -> None:
        """Search the machine for repositories."""
        self._register.clear_error()
        self._listing.run(self._collaborators.list_local_repos)

    def toggle_expanded(self) -> None:
        """Show all candidates, or collapse back to the first few."""
        self._expanded = not self._expanded
        self.changed.emit()

    def select(self, entry: DirectoryEntry) -> bool:
        """Register a listed repository."""
        return self._register_path(str(entry.path))

    def browse_manually(self) -> bool:
        """Let the user pick any folder and register it.

        Cancelling the picker changes nothing. Returns True if a
        registration was started.
        """
        if self._register.is_loading:
            return False
        path = pick_folder(
            self._folder_picker,
            "Select Git Repository",
            "Choose an existing git repository",
        )
        if path is None:
            return False
        return self._register_path(path)

    def clear_error(self) -> None:
        self._listing.clear_error()
        self._register.clear_error()

    def shutdown(self) -> None:
        """Drop in-flight results and stop timers."""
        self._listing.reset()
        self._register.reset()

    def _register_path(self, path: str) -> bool:
        if self._register.is_loading:
            return False
        self._listing.clear_error()
        logger.info(f"Registering repository {path}")
        self._register.run(self._collaborators.register_repo, path)
        return True

    def _on_loaded(self, entries: object) -> None:
        self._loaded = True
        self._has_searched = True

    def _on_load_failed(self, message: str) -> None:
        self._has_searched = True
