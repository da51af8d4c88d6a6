"""Top-level state machine of the repository wizard."""

import logging

from PySide6.QtCore import QObject, Signal

from seedbed.core.scheduler import QtScheduler, Scheduler
from seedbed.core.workers import Executor, ThreadExecutor
from seedbed.models.config import AppConfig
from seedbed.models.result import (
    Cancelled,
    ProjectFromClone,
    RepoSelected,
    Stage,
    WorkflowResult,
)

from .collaborators import FolderPicker, WizardCollaborators
from .create_form import CreateRepoForm
from .local_browser import LocalRepoBrowser
from .remote_browser import RemoteRepoBrowser
from .stages import STAGE_ACTIONS, Action, Effect, next_transition

logger = logging.getLogger(__name__)


class WizardController(QObject):
    """Drives the wizard from the options screen to exactly one result.

    Every open() starts a new session with fresh sub-controllers. Results
    arriving for an older session are ignored. Once a result is produced
    the controller ignores all further actions until reopened.
    """

    stage_changed = Signal(object)  # Stage
    changed = Signal()
    resolved = Signal(object)  # WorkflowResult

    def __init__(
        self,
        collaborators: WizardCollaborators,
        config: AppConfig | None = None,
        executor: Executor | None = None,
        scheduler: Scheduler | None = None,
        folder_picker: FolderPicker | None = None,
        parent: QObject | None = None,
    ) -> None:
        super().__init__(parent)
        self._collaborators = collaborators
        self._config = config or AppConfig()
        self._executor = executor or ThreadExecutor(self)
        self._scheduler = scheduler or QtScheduler(self)
        self._folder_picker = folder_picker

        self._session = 0
        self._stage = Stage.OPTIONS
        self._result: WorkflowResult | None = None
        self._local: LocalRepoBrowser | None = None
        self._create: CreateRepoForm | None = None
        self._remote: RemoteRepoBrowser | None = None

        self.open()

    @property
    def organization(self) -> str:
        return self._config.github_org

    @property
    def session(self) -> int:
        """Counter identifying the current open() call."""
        return self._session

    @property
    def stage(self) -> Stage:
        return self._stage

    @property
    def result(self) -> WorkflowResult | None:
        return self._result

    @property
    def is_resolved(self) -> bool:
        return self._result is not None

    @property
    def local_browser(self) -> LocalRepoBrowser:
        return self._local

    @property
    def create_form(self) -> CreateRepoForm:
        return self._create

    @property
    def remote_browser(self) -> RemoteRepoBrowser | None:
        """The GitHub browser, present only while that stage is active."""
        return self._remote

    @property
    def busy(self) -> bool:
        """Check if the active stage has a side-effecting call in flight."""
        active = self._active()
        return active is not None and active.busy

    @property
    def error(self) -> str:
        """Inline error of the active stage."""
        active = self._active()
        return active.error if active is not None else ""

    def set_folder_picker(self, folder_picker: FolderPicker | None) -> None:
        """Replace the folder picker. Takes effect from the next open()."""
        self._folder_picker = folder_picker

    def open(self) -> bool:
        """Start a new session on the options screen.

        Refused while a registration, initialization or clone is in
        flight, so its result is still delivered to the current session.
        Returns whether a new session was started.
        """
        if self.busy:
            logger.debug(f"Not reopening session {self._session} while busy")
            return False

        self._teardown()
        for sub in (self._local, self._create):
            if sub is not None:
                sub.deleteLater()

        self._session += 1
        session = self._session

        self._stage = Stage.OPTIONS
        self._result = None

        self._local = LocalRepoBrowser(
            self._collaborators,
            self._executor,
            self._scheduler,
            folder_picker=self._folder_picker,
            visible_limit=self._config.local_visible_limit,
            parent=self,
        )
        self._local.changed.connect(self.changed)
        self._local.registered.connect(
            lambda repo: self._finish(session, RepoSelected(repo))
        )

        self._create = CreateRepoForm(
            self._collaborators,
            self._executor,
            self._scheduler,
            folder_picker=self._folder_picker,
            parent=self,
        )
        self._create.changed.connect(self.changed)
        self._create.created.connect(
            lambda repo: self._finish(session, RepoSelected(repo))
        )

        logger.debug(f"Wizard session {session} opened")
        self.stage_changed.emit(self._stage)
        self.changed.emit()
        return True

    def close(self) -> None:
        """Stop timers and drop in-flight results of the current session."""
        self._teardown()

    def choose(self, stage: Stage) -> bool:
        """Enter one of the sub-stages from the options screen."""
        action = STAGE_ACTIONS.get(stage)
        if action is None:
            return False
        return self.dispatch(action)

    def back(self) -> bool:
        """Return to the options screen."""
        return self.dispatch(Action.BACK)

    def cancel(self) -> bool:
        """Dismiss the wizard with a Cancelled result."""
        return self.dispatch(Action.CANCEL)

    def dispatch(self, action: Action) -> bool:
        """Apply a user action. Returns whether it took effect."""
        if self._result is not None:
            return False

        transition = next_transition(self._stage, action, self.busy)
        if transition is None:
            logger.debug(f"Ignoring {action.value} in stage {self._stage.value}")
            return False

        if transition.effect is Effect.ENTER_STAGE:
            self._enter(transition.target)
        elif transition.effect is Effect.LEAVE_STAGE:
            self._leave()
        elif transition.effect is Effect.RESOLVE_CANCELLED:
            self._finish(self._session, Cancelled())
        return True

    def _active(self) -> LocalRepoBrowser | CreateRepoForm | RemoteRepoBrowser | None:
        if self._stage is Stage.EXISTING_LOCAL:
            return self._local
        if self._stage is Stage.CREATE_NEW:
            return self._create
        if self._stage is Stage.GITHUB_CLONE:
            return self._remote
        return None

    def _enter(self, stage: Stage) -> None:
        self._stage = stage

        if stage is Stage.EXISTING_LOCAL:
            self._local.clear_error()
            self._local.activate()
        elif stage is Stage.CREATE_NEW:
            self._create.clear_error()
        elif stage is Stage.GITHUB_CLONE:
            self._remote = self._make_remote_browser()
            self._remote.activate()

        self.stage_changed.emit(stage)
        self.changed.emit()

    def _leave(self) -> None:
        if self._stage is Stage.GITHUB_CLONE:
            self._drop_remote_browser()
        else:
            active = self._active()
            if active is not None:
                active.clear_error()

        self._stage = Stage.OPTIONS
        self.stage_changed.emit(self._stage)
        self.changed.emit()

    def _make_remote_browser(self) -> RemoteRepoBrowser:
        session = self._session
        browser = RemoteRepoBrowser(
            self._collaborators,
            self._config.github_org,
            self._executor,
            self._scheduler,
            folder_picker=self._folder_picker,
            debounce_ms=self._config.search_debounce_ms,
            parent=self,
        )
        browser.changed.connect(self.changed)
        browser.cloned.connect(
            lambda project: self._finish(session, ProjectFromClone(project))
        )
        return browser

    def _drop_remote_browser(self) -> None:
        if self._remote is not None:
            self._remote.shutdown()
            self._remote.deleteLater()
            self._remote = None

    def _finish(self, session: int, result: WorkflowResult) -> None:
        """Resolve the workflow, at most once per session."""
        if session != self._session:
            logger.debug(f"Ignoring result of closed session {session}")
            return
        if self._result is not None:
            logger.warning(f"Wizard already resolved, ignoring {result.kind.value}")
            return

        self._result = result
        logger.info(f"Wizard resolved: {result.kind.value}")
        self._teardown()
        self.changed.emit()
        self.resolved.emit(result)

    def _teardown(self) -> None:
        """Shut down every sub-controller of the current session."""
        self._drop_remote_browser()
        for sub in (self._local, self._create):
            if sub is not None:
                sub.shutdown()
