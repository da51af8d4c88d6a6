#!/usr/bin/env python3
"""Main entry point for the Seedbed repository wizard."""

import argparse
import logging
import sys
import traceback

from PySide6.QtCore import Qt
from PySide6.QtWidgets import QApplication, QMessageBox

from seedbed.core.backend import LocalBackend
from seedbed.core.scheduler import QtScheduler
from seedbed.core.workers import ThreadExecutor, wait_for_detached_workers
from seedbed.models.config import AppConfig
from seedbed.models.result import Cancelled, ProjectFromClone, RepoSelected, WorkflowResult
from seedbed.ui.dialogs import QtFolderPicker, RepoPickerDialog
from seedbed.wizard.controller import WizardController

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


def setup_exception_hook() -> None:
    """Set up global exception hook to handle uncaught exceptions.

    Exceptions raised from Qt signal handlers would otherwise only be
    printed by Qt and leave the wizard in an unknown state.
    """
    original_hook = sys.excepthook

    def exception_hook(exc_type, exc_value, exc_tb):
        """Custom exception hook that logs exceptions and shows error dialog."""
        tb_str = "".join(traceback.format_exception(exc_type, exc_value, exc_tb))
        logger.error(f"Uncaught exception:\n{tb_str}")

        app = QApplication.instance()
        if app:
            error_msg = f"{exc_type.__name__}: {exc_value}"
            QMessageBox.critical(
                None,
                "Error",
                f"An unexpected error occurred:\n\n{error_msg}\n\nSee logs for details.",
            )

        original_hook(exc_type, exc_value, exc_tb)

    sys.excepthook = exception_hook


def parse_args() -> argparse.Namespace:
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        prog="seedbed-gui",
        description="Select, create or clone a git repository for a new project",
    )
    parser.add_argument(
        "--org",
        help="GitHub organization to clone from (overrides the config file)",
    )
    parser.add_argument(
        "--title",
        default="Select Repository",
        help="Dialog title",
    )
    parser.add_argument(
        "--debug",
        action="store_true",
        help="Enable debug logging",
    )
    return parser.parse_args()


def describe_result(result: WorkflowResult) -> str:
    """Return a one-line summary of a wizard result."""
    if isinstance(result, RepoSelected):
        return f"Repository selected: {result.repo.path}"
    if isinstance(result, ProjectFromClone):
        project = result.project
        return f"Project '{project.name}' created at {project.repo_path}"
    if isinstance(result, Cancelled):
        return "Cancelled"
    raise TypeError(f"Unknown wizard result: {result!r}")


def main() -> int:
    """Main entry point."""
    args = parse_args()
    if args.debug:
        logging.getLogger().setLevel(logging.DEBUG)

    setup_exception_hook()

    QApplication.setHighDpiScaleFactorRoundingPolicy(
        Qt.HighDpiScaleFactorRoundingPolicy.PassThrough
    )

    app = QApplication(sys.argv)
    app.setApplicationName("Seedbed")
    app.setOrganizationName("Seedbed")
    app.setOrganizationDomain("seedbed.local")

    config = AppConfig.load()
    if args.org:
        config.github_org = args.org

    executor = ThreadExecutor(app)
    controller = WizardController(
        LocalBackend(config),
        config,
        executor=executor,
        scheduler=QtScheduler(app),
    )
    dialog = RepoPickerDialog(controller, title=args.title)
    controller.set_folder_picker(QtFolderPicker(dialog))

    dialog.exec()
    if not executor.shutdown():
        logger.info("Waiting for background work to finish")
        wait_for_detached_workers()

    result = dialog.get_result()
    print(describe_result(result))
    return 0 if not isinstance(result, Cancelled) else 1


if __name__ == "__main__":
    sys.exit(main())
