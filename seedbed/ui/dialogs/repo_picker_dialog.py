"""Dialog rendering the repository wizard."""

from PySide6.QtCore import Qt
from PySide6.QtGui import QCloseEvent, QShowEvent
from PySide6.QtWidgets import (
    QDialog,
    QDialogButtonBox,
    QFormLayout,
    QHBoxLayout,
    QLabel,
    QLineEdit,
    QListWidget,
    QListWidgetItem,
    QPushButton,
    QStackedWidget,
    QVBoxLayout,
    QWidget,
)

from seedbed.core.async_op import loading_hint, loading_message
from seedbed.core.utils import safe_slot
from seedbed.models.result import Cancelled, Stage, WorkflowResult
from seedbed.wizard.controller import WizardController
from seedbed.wizard.remote_browser import RemotePhase

DEFAULT_TITLE = "Select Repository"
DEFAULT_DESCRIPTION = "Choose or create a git repository"

STAGE_PAGES = {
    Stage.OPTIONS: 0,
    Stage.EXISTING_LOCAL: 1,
    Stage.CREATE_NEW: 2,
    Stage.GITHUB_CLONE: 3,
}


def _set_text_quietly(edit: QLineEdit, text: str) -> None:
    """Update a line edit without echoing the change back to the controller."""
    if edit.text() != text:
        edit.blockSignals(True)
        edit.setText(text)
        edit.blockSignals(False)


class RepoPickerDialog(QDialog):
    """Dialog for selecting, creating or cloning a repository."""

    def __init__(
        self,
        controller: WizardController,
        title: str = DEFAULT_TITLE,
        description: str = DEFAULT_DESCRIPTION,
        parent: QWidget | None = None,
    ) -> None:
        super().__init__(parent)
        self._controller = controller
        self._title = title
        self._description = description

        self._setup_ui()
        self._connect_signals()
        self._refresh()

    def _setup_ui(self) -> None:
        """Set up the UI."""
        self.setWindowTitle(self._title)
        self.setMinimumWidth(500)

        layout = QVBoxLayout(self)
        layout.setSpacing(16)

        description = QLabel(self._description)
        description.setWordWrap(True)
        layout.addWidget(description)

        self._pages = QStackedWidget()
        self._pages.addWidget(self._build_options_page())
        self._pages.addWidget(self._build_existing_page())
        self._pages.addWidget(self._build_new_page())
        self._pages.addWidget(self._build_github_page())
        layout.addWidget(self._pages)

        # Inline error
        self._error_label = QLabel()
        self._error_label.setWordWrap(True)
        self._error_label.setStyleSheet("color: red;")
        layout.addWidget(self._error_label)

        self._button_box = QDialogButtonBox(QDialogButtonBox.StandardButton.Cancel)
        layout.addWidget(self._button_box)

    def _build_options_page(self) -> QWidget:
        page = QWidget()
        layout = QVBoxLayout(page)

        self._existing_btn = QPushButton(
            "From Git Repository\nSelect an existing repository from your system"
        )
        self._new_btn = QPushButton(
            "Create New Repository\nInitialize a new git repository"
        )
        self._github_btn = QPushButton(
            "Clone from GitHub\nClone a repository from GitHub"
        )
        for btn in (self._existing_btn, self._new_btn, self._github_btn):
            btn.setMinimumHeight(56)
            layout.addWidget(btn)

        layout.addStretch()
        return page

    def _build_existing_page(self) -> QWidget:
        page = QWidget()
        layout = QVBoxLayout(page)

        self._existing_back_btn = QPushButton("← Back to options")
        layout.addWidget(self._existing_back_btn, alignment=Qt.AlignmentFlag.AlignLeft)

        self._local_status_label = QLabel()
        self._local_status_label.setStyleSheet("color: gray;")
        layout.addWidget(self._local_status_label)

        self._local_hint_label = QLabel()
        self._local_hint_label.setWordWrap(True)
        self._local_hint_label.setStyleSheet("color: gray; font-size: 11px;")
        layout.addWidget(self._local_hint_label)

        self._local_list = QListWidget()
        layout.addWidget(self._local_list)

        self._toggle_more_btn = QPushButton()
        self._toggle_more_btn.setFlat(True)
        layout.addWidget(self._toggle_more_btn, alignment=Qt.AlignmentFlag.AlignLeft)

        self._browse_repo_btn = QPushButton(
            "Browse for repository\nBrowse and select any repository on your system"
        )
        layout.addWidget(self._browse_repo_btn)

        return page

    def _build_new_page(self) -> QWidget:
        page = QWidget()
        layout = QVBoxLayout(page)

        self._new_back_btn = QPushButton("← Back to options")
        layout.addWidget(self._new_back_btn, alignment=Qt.AlignmentFlag.AlignLeft)

        form = QFormLayout()
        self._name_edit = QLineEdit()
        self._name_edit.setPlaceholderText("my-project")
        form.addRow("Repository Name:", self._name_edit)

        parent_layout = QHBoxLayout()
        self._parent_edit = QLineEdit()
        self._parent_edit.setPlaceholderText("Current Directory")
        parent_layout.addWidget(self._parent_edit)
        self._parent_browse_btn = QPushButton("Browse...")
        parent_layout.addWidget(self._parent_browse_btn)
        form.addRow("Parent Directory:", parent_layout)
        layout.addLayout(form)

        hint = QLabel("Leave the parent empty to use your current working directory")
        hint.setStyleSheet("color: gray; font-size: 11px;")
        layout.addWidget(hint)

        self._create_btn = QPushButton("Create Repository")
        layout.addWidget(self._create_btn)
        layout.addStretch()
        return page

    def _build_github_page(self) -> QWidget:
        self._github_pages = QStackedWidget()

        # Browsing
        browse_page = QWidget()
        browse_layout = QVBoxLayout(browse_page)

        self._github_back_btn = QPushButton("← Back to options")
        browse_layout.addWidget(
            self._github_back_btn, alignment=Qt.AlignmentFlag.AlignLeft
        )

        self._search_edit = QLineEdit()
        self._search_edit.setPlaceholderText("Search repositories...")
        browse_layout.addWidget(self._search_edit)

        self._remote_status_label = QLabel()
        self._remote_status_label.setStyleSheet("color: gray;")
        browse_layout.addWidget(self._remote_status_label)

        self._remote_list = QListWidget()
        browse_layout.addWidget(self._remote_list)

        self._retry_btn = QPushButton("Retry")
        browse_layout.addWidget(self._retry_btn, alignment=Qt.AlignmentFlag.AlignLeft)

        self._github_pages.addWidget(browse_page)

        # Destination
        dest_page = QWidget()
        dest_layout = QVBoxLayout(dest_page)

        self._deselect_btn = QPushButton("← Back to repository list")
        dest_layout.addWidget(self._deselect_btn, alignment=Qt.AlignmentFlag.AlignLeft)

        self._selected_label = QLabel()
        self._selected_label.setWordWrap(True)
        dest_layout.addWidget(self._selected_label)

        dest_row = QHBoxLayout()
        self._destination_edit = QLineEdit()
        self._destination_edit.setPlaceholderText("Select a folder...")
        dest_row.addWidget(self._destination_edit)
        self._destination_browse_btn = QPushButton("Browse...")
        dest_row.addWidget(self._destination_browse_btn)
        dest_layout.addLayout(dest_row)

        self._target_label = QLabel()
        self._target_label.setStyleSheet("color: gray; font-size: 11px;")
        dest_layout.addWidget(self._target_label)

        self._clone_btn = QPushButton("Clone && Create Project")
        dest_layout.addWidget(self._clone_btn)
        dest_layout.addStretch()

        self._github_pages.addWidget(dest_page)
        return self._github_pages

    def _connect_signals(self) -> None:
        """Connect signals to slots."""
        controller = self._controller
        controller.changed.connect(self._refresh)
        controller.resolved.connect(self._on_resolved)

        self._existing_btn.clicked.connect(lambda: controller.choose(Stage.EXISTING_LOCAL))
        self._new_btn.clicked.connect(lambda: controller.choose(Stage.CREATE_NEW))
        self._github_btn.clicked.connect(lambda: controller.choose(Stage.GITHUB_CLONE))
        for btn in (self._existing_back_btn, self._new_back_btn, self._github_back_btn):
            btn.clicked.connect(lambda: controller.back())

        self._local_list.itemClicked.connect(self._on_local_item_clicked)
        self._toggle_more_btn.clicked.connect(
            lambda: controller.local_browser.toggle_expanded()
        )
        self._browse_repo_btn.clicked.connect(
            lambda: controller.local_browser.browse_manually()
        )

        self._name_edit.textChanged.connect(
            lambda text: controller.create_form.set_name(text)
        )
        self._parent_edit.textChanged.connect(
            lambda text: controller.create_form.set_parent_path(text)
        )
        self._parent_browse_btn.clicked.connect(
            lambda: controller.create_form.browse_parent()
        )
        self._create_btn.clicked.connect(lambda: controller.create_form.create_repo())

        self._search_edit.textChanged.connect(self._on_search_changed)
        self._remote_list.itemClicked.connect(self._on_remote_item_clicked)
        self._retry_btn.clicked.connect(self._on_retry)
        self._deselect_btn.clicked.connect(self._on_deselect)
        self._destination_edit.textChanged.connect(self._on_destination_changed)
        self._destination_browse_btn.clicked.connect(self._on_browse_destination)
        self._clone_btn.clicked.connect(self._on_clone)

        self._button_box.rejected.connect(self.reject)

    @safe_slot
    def _refresh(self) -> None:
        """Render the controller state."""
        controller = self._controller
        stage = controller.stage
        self._pages.setCurrentIndex(STAGE_PAGES[stage])

        if stage is Stage.EXISTING_LOCAL:
            self._refresh_existing()
        elif stage is Stage.CREATE_NEW:
            self._refresh_new()
        elif stage is Stage.GITHUB_CLONE and controller.remote_browser is not None:
            self._refresh_github()

        self._error_label.setText(controller.error)
        self._error_label.setVisible(bool(controller.error))

        idle = not controller.busy and not controller.is_resolved
        self._button_box.setEnabled(idle)
        for btn in (self._existing_back_btn, self._new_back_btn, self._github_back_btn):
            btn.setEnabled(idle)

    def _refresh_existing(self) -> None:
        browser = self._controller.local_browser

        if browser.is_registering:
            self._local_status_label.setText("Registering repository...")
            self._local_hint_label.setText("")
        elif browser.is_loading:
            elapsed = browser.loading_elapsed
            self._local_status_label.setText(loading_message(elapsed))
            self._local_hint_label.setText(loading_hint(elapsed) or "")
        elif browser.has_searched and not browser.entries and not browser.error:
            self._local_status_label.setText("No repositories found")
            self._local_hint_label.setText(
                "Use \"Browse for repository\" to pick one manually."
            )
        else:
            self._local_status_label.setText("")
            self._local_hint_label.setText("")

        self._local_list.clear()
        if not browser.is_loading:
            for entry in browser.visible_entries:
                item = QListWidgetItem(f"{entry.name}\n{entry.path}")
                item.setData(Qt.ItemDataRole.UserRole, entry)
                self._local_list.addItem(item)
        self._local_list.setEnabled(not browser.busy)

        if browser.can_expand and not browser.is_loading:
            if browser.expanded:
                self._toggle_more_btn.setText("Show less")
            else:
                self._toggle_more_btn.setText(
                    f"Show {browser.hidden_count} more repositories"
                )
            self._toggle_more_btn.show()
        else:
            self._toggle_more_btn.hide()

        self._browse_repo_btn.setEnabled(not browser.busy)

    def _refresh_new(self) -> None:
        form = self._controller.create_form
        _set_text_quietly(self._name_edit, form.name)
        _set_text_quietly(self._parent_edit, form.parent_path)

        for widget in (self._name_edit, self._parent_edit, self._parent_browse_btn):
            widget.setEnabled(not form.busy)
        self._create_btn.setEnabled(form.can_create)
        self._create_btn.setText("Creating..." if form.busy else "Create Repository")

    def _refresh_github(self) -> None:
        browser = self._controller.remote_browser

        if browser.phase is RemotePhase.BROWSING:
            self._github_pages.setCurrentIndex(0)
            _set_text_quietly(self._search_edit, browser.query_text)

            if browser.is_loading:
                self._remote_status_label.setText("Loading repositories...")
            elif not browser.error and not browser.repos:
                status = "No repositories found"
                if browser.query_text:
                    status += ". Try a different search term."
                self._remote_status_label.setText(status)
            else:
                self._remote_status_label.setText("")

            self._remote_list.clear()
            if not browser.is_loading and not browser.error:
                for entry in browser.repos:
                    text = entry.name
                    if entry.description:
                        text += f"\n{entry.description}"
                    item = QListWidgetItem(text)
                    item.setData(Qt.ItemDataRole.UserRole, entry)
                    self._remote_list.addItem(item)
            self._retry_btn.setVisible(bool(browser.error) and not browser.is_loading)
            return

        self._github_pages.setCurrentIndex(1)
        selected = browser.selected
        label = f"<b>{selected.name}</b>"
        if selected.description:
            label += f"<br>{selected.description}"
        self._selected_label.setText(label)

        _set_text_quietly(self._destination_edit, browser.destination)
        target = browser.target_path or "..."
        self._target_label.setText(f"The repository will be cloned to: {target}")

        cloning = browser.is_cloning
        for widget in (self._deselect_btn, self._destination_edit, self._destination_browse_btn):
            widget.setEnabled(not cloning)
        self._clone_btn.setEnabled(browser.can_clone)
        self._clone_btn.setText(
            "Cloning && Creating Project..." if cloning else "Clone && Create Project"
        )

    @safe_slot
    def _on_local_item_clicked(self, item: QListWidgetItem) -> None:
        entry = item.data(Qt.ItemDataRole.UserRole)
        if entry is not None:
            self._controller.local_browser.select(entry)

    @safe_slot
    def _on_search_changed(self, text: str) -> None:
        browser = self._controller.remote_browser
        if browser is not None:
            browser.set_query(text)

    @safe_slot
    def _on_remote_item_clicked(self, item: QListWidgetItem) -> None:
        browser = self._controller.remote_browser
        entry = item.data(Qt.ItemDataRole.UserRole)
        if browser is not None and entry is not None:
            browser.select(entry)

    @safe_slot
    def _on_retry(self) -> None:
        browser = self._controller.remote_browser
        if browser is not None:
            browser.retry()

    @safe_slot
    def _on_deselect(self) -> None:
        browser = self._controller.remote_browser
        if browser is not None:
            browser.deselect()

    @safe_slot
    def _on_destination_changed(self, text: str) -> None:
        browser = self._controller.remote_browser
        if browser is not None:
            browser.set_destination(text)

    @safe_slot
    def _on_browse_destination(self) -> None:
        browser = self._controller.remote_browser
        if browser is not None:
            browser.browse_destination()

    @safe_slot
    def _on_clone(self) -> None:
        browser = self._controller.remote_browser
        if browser is not None:
            browser.confirm_clone()

    @safe_slot
    def _on_resolved(self, result: WorkflowResult) -> None:
        """Close the dialog once the workflow has a result."""
        if isinstance(result, Cancelled):
            super().reject()
        else:
            self.accept()

    def showEvent(self, event: QShowEvent) -> None:
        """Start a fresh wizard session when the dialog is opened.

        Spontaneous show events (restoring a minimized window) keep the
        current session, and the controller refuses to reopen while a
        side-effecting call is in flight.
        """
        if not event.spontaneous() and self._controller.open():
            self._search_edit.clear()
        super().showEvent(event)

    def reject(self) -> None:
        """Handle Cancel, Escape and the close button."""
        if self._controller.is_resolved:
            super().reject()
            return
        # Refused while a registration, initialization or clone is running
        self._controller.cancel()

    def closeEvent(self, event: QCloseEvent) -> None:
        if self._controller.is_resolved or self._controller.cancel():
            event.accept()
        else:
            event.ignore()

    def get_result(self) -> WorkflowResult:
        """Get the wizard result; Cancelled if none was produced."""
        return self._controller.result or Cancelled()
