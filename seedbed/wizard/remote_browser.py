"""GitHub organization browser: search, select, choose destination, clone."""

import logging
from enum import Enum

from PySide6.QtCore import QObject, Signal

from seedbed.core.async_op import AsyncOperation
from seedbed.core.debounce import DEFAULT_DEBOUNCE_MS, DebouncedQuery
from seedbed.core.github_service import (
    GitHubAuthError,
    GitHubCliMissingError,
    GitHubCommandError,
)
from seedbed.core.scheduler import Scheduler
from seedbed.core.utils import is_blank
from seedbed.core.workers import Executor
from seedbed.models.repository import RemoteRepoEntry

from .collaborators import FolderPicker, WizardCollaborators, pick_folder

logger = logging.getLogger(__name__)

CLI_MISSING_MESSAGE = (
    "GitHub CLI (gh) is not installed. Please install it from https://cli.github.com/"
)
AUTH_FAILED_MESSAGE = (
    'GitHub authentication failed: {message}. Run "gh auth login" to authenticate.'
)
COMMAND_FAILED_MESSAGE = "Failed to list repositories: {message}"
LIST_FALLBACK_MESSAGE = "Failed to load repositories"
CLONE_FALLBACK_MESSAGE = "Failed to clone repository"


class RemotePhase(Enum):
    """Sub-stage of the GitHub browser."""

    BROWSING = "browsing"
    CHOOSING_DESTINATION = "choosing_destination"


def describe_listing_error(exc: Exception) -> str:
    """Map a listing failure to the message shown to the user."""
    if isinstance(exc, GitHubCliMissingError):
        return CLI_MISSING_MESSAGE
    if isinstance(exc, GitHubAuthError):
        return AUTH_FAILED_MESSAGE.format(message=exc.message)
    if isinstance(exc, GitHubCommandError):
        return COMMAND_FAILED_MESSAGE.format(message=exc.message)
    return LIST_FALLBACK_MESSAGE


def join_destination(destination: str, name: str) -> str:
    """Append a repository name to a destination directory."""
    if destination.endswith("/"):
        return f"{destination}{name}"
    return f"{destination}/{name}"


class RemoteRepoBrowser(QObject):
    """Lists one organization's repositories and clones the chosen one."""

    changed = Signal()
    cloned = Signal(object)  # Project

    def __init__(
        self,
        collaborators: WizardCollaborators,
        organization: str,
        executor: Executor,
        scheduler: Scheduler,
        folder_picker: FolderPicker | None = None,
        debounce_ms: int = DEFAULT_DEBOUNCE_MS,
        parent: QObject | None = None,
    ) -> None:
        super().__init__(parent)
        self._collaborators = collaborators
        self._organization = organization
        self._folder_picker = folder_picker

        self._phase = RemotePhase.BROWSING
        self._selected: RemoteRepoEntry | None = None
        self._destination = ""

        self._query = DebouncedQuery(scheduler, debounce_ms, parent=self)
        self._query.value_changed.connect(self.search)

        self._listing = AsyncOperation(
            executor,
            scheduler,
            name="list_org_repos",
            describe_error=describe_listing_error,
            parent=self,
        )
        self._clone = AsyncOperation(
            executor,
            scheduler,
            name="clone_and_create_project",
            fallback_message=CLONE_FALLBACK_MESSAGE,
            parent=self,
        )
        self._listing.changed.connect(self.changed)
        self._clone.changed.connect(self.changed)
        self._clone.succeeded.connect(self._on_cloned)

    @property
    def organization(self) -> str:
        return self._organization

    @property
    def phase(self) -> RemotePhase:
        return self._phase

    @property
    def query_text(self) -> str:
        """The search text as typed."""
        return self._query.text

    @property
    def repos(self) -> list[RemoteRepoEntry]:
        """The listing for the most recent search; empty on error."""
        return list(self._listing.data or [])

    @property
    def is_loading(self) -> bool:
        return self._listing.is_loading

    @property
    def is_cloning(self) -> bool:
        return self._clone.is_loading

    @property
    def busy(self) -> bool:
        """Check if a clone is in flight."""
        return self._clone.is_loading

    @property
    def error(self) -> str:
        """Inline error of the current phase."""
        if self._phase is RemotePhase.CHOOSING_DESTINATION:
            return self._clone.error
        return self._listing.error

    @property
    def selected(self) -> RemoteRepoEntry | None:
        return self._selected

    @property
    def destination(self) -> str:
        return self._destination

    @property
    def target_path(self) -> str:
        """Full clone path, or empty if not yet determined."""
        destination = self._destination.strip()
        if self._selected is None or not destination:
            return ""
        return join_destination(destination, self._selected.name)

    @property
    def can_clone(self) -> bool:
        return (
            self._selected is not None
            and not is_blank(self._destination)
            and not self._clone.is_loading
        )

    def activate(self) -> None:
        """Load the unfiltered listing when the stage is shown."""
        self.search(self._query.value)

    def set_query(self, text: str) -> None:
        """Feed a keystroke into the debounced search."""
        self._query.set_text(text)

    def search(self, query: str) -> None:
        """Fetch the listing for a stable query."""
        logger.debug(f"Searching {self._organization} for {query!r}")
        self._listing.run(
            self._collaborators.list_org_repos, self._organization, query or None
        )

    def retry(self) -> None:
        """Repeat the search for the current stable query."""
        self.search(self._query.value)

    def select(self, entry: RemoteRepoEntry) -> bool:
        """Pick a repository and move on to choosing its destination."""
        if self._clone.is_loading:
            return False
        self._selected = entry
        self._phase = RemotePhase.CHOOSING_DESTINATION
        self._clone.clear_error()
        self.changed.emit()
        return True

    def deselect(self) -> bool:
        """Return to the repository list."""
        if self._clone.is_loading:
            return False
        self._selected = None
        self._phase = RemotePhase.BROWSING
        self._clone.clear_error()
        self.changed.emit()
        return True

    def set_destination(self, path: str) -> bool:
        """Set the directory the repository is cloned into."""
        if self._clone.is_loading:
            return False
        self._destination = path
        self.changed.emit()
        return True

    def browse_destination(self) -> bool:
        """Ask the folder picker for a destination.

        Returns True if a folder was chosen.
        """
        if self._clone.is_loading:
            return False
        path = pick_folder(
            self._folder_picker,
            "Select Clone Destination",
            "Choose where to clone the repository",
            self._destination,
        )
        if path is None:
            return False
        return self.set_destination(path)

    def confirm_clone(self) -> bool:
        """Clone the selected repository into the destination.

        Does nothing unless can_clone is True. Returns whether a clone was
        started; completion is reported through the cloned signal.
        """
        if not self.can_clone:
            return False

        full_name = f"{self._organization}/{self._selected.name}"
        target = self.target_path
        logger.info(f"Cloning {full_name} into {target}")
        self._clone.run(self._collaborators.clone_and_create_project, full_name, target)
        return True

    def clear_error(self) -> None:
        self._listing.clear_error()
        self._clone.clear_error()

    def shutdown(self) -> None:
        """Cancel timers and drop in-flight results."""
        self._query.cancel()
        self._listing.reset()
        self._clone.reset()

    def _on_cloned(self, project: object) -> None:
        self.cloned.emit(project)
