"""Git service for local repository discovery, registration and creation."""

import logging
import os
import subprocess
from pathlib import Path

from PySide6.QtCore import QThread

from seedbed.models.repository import DirectoryEntry, Repo

logger = logging.getLogger(__name__)

# Directories that never contain projects worth offering
SKIPPED_DIRS = {
    "node_modules",
    "__pycache__",
    "venv",
    "site-packages",
    "target",
    "Library",
    "Applications",
}


def _interruption_requested() -> bool:
    """Check if the calling worker thread was asked to stop."""
    return QThread.currentThread().isInterruptionRequested()


class GitError(Exception):
    """Exception raised for Git operation errors."""

    pass


class GitService:
    """Service for local Git repository operations."""

    def __init__(self, git_command: str = "git") -> None:
        self._git_command = git_command

    def _run_git(
        self, args: list[str], cwd: Path | None = None, check: bool = True
    ) -> subprocess.CompletedProcess:
        """Run a git command and return the result."""
        cmd = [self._git_command] + args
        try:
            result = subprocess.run(
                cmd,
                cwd=cwd,
                capture_output=True,
                text=True,
                check=check,
            )
            return result
        except subprocess.CalledProcessError as e:
            error_msg = e.stderr.strip() if e.stderr else str(e)
            raise GitError(f"Git command failed: {error_msg}")
        except FileNotFoundError:
            raise GitError("Git is not installed or not in PATH")

    def is_git_repository(self, path: Path) -> bool:
        """Check if a path is a Git repository."""
        if not path.is_dir():
            return False
        try:
            result = self._run_git(
                ["rev-parse", "--git-dir"], cwd=path, check=False
            )
            return result.returncode == 0
        except GitError:
            return False

    def get_repository(self, path: Path) -> Repo:
        """Get the repository containing path.

        Raises:
            GitError: If path is not inside a Git repository.
        """
        path = Path(path).expanduser()
        if not self.is_git_repository(path):
            raise GitError(f"Not a Git repository: {path}")

        result = self._run_git(["rev-parse", "--show-toplevel"], cwd=path)
        toplevel = Path(result.stdout.strip() or path).resolve()
        return Repo(path=toplevel, display_name=toplevel.name)

    def find_repositories(
        self, roots: list[Path], max_depth: int = 3
    ) -> list[DirectoryEntry]:
        """Find Git repositories below the given roots.

        Hidden directories are skipped and the search does not descend into
        a directory once it is identified as a repository. Results are
        ordered most recently modified first. A scan running on an
        interrupted worker thread stops early with what it found so far.

        Args:
            roots: Directories to scan
            max_depth: How many directory levels below each root to visit

        Returns:
            List of DirectoryEntry objects, one per repository
        """
        found: dict[Path, float] = {}

        for root in roots:
            if _interruption_requested():
                logger.debug("Repository scan interrupted")
                break
            root = Path(root).expanduser()
            if not root.is_dir():
                logger.debug(f"Skipping missing search root: {root}")
                continue
            self._scan(root, max_depth, found)

        ordered = sorted(found.items(), key=lambda item: item[1], reverse=True)
        return [DirectoryEntry(name=path.name, path=path) for path, _ in ordered]

    def _scan(self, directory: Path, depth: int, found: dict[Path, float]) -> None:
        """Recursively collect repositories into found."""
        if _interruption_requested():
            return

        git_marker = directory / ".git"
        if git_marker.exists():
            try:
                found[directory.resolve()] = git_marker.stat().st_mtime
            except OSError:
                found[directory.resolve()] = 0.0
            return

        if depth <= 0:
            return

        try:
            with os.scandir(directory) as entries:
                children = [
                    Path(entry.path)
                    for entry in entries
                    if entry.is_dir(follow_symlinks=False)
                    and not entry.name.startswith(".")
                    and entry.name not in SKIPPED_DIRS
                ]
        except OSError as e:
            logger.debug(f"Cannot read {directory}: {e}")
            return

        for child in children:
            self._scan(child, depth - 1, found)

    def init_repository(self, parent_path: Path, folder_name: str) -> Repo:
        """Create a new folder under parent_path and run git init in it.

        Args:
            parent_path: Existing directory that will contain the repository
            folder_name: Name of the repository folder to create

        Returns:
            The created Repo
        """
        parent = Path(parent_path).expanduser()
        if not parent.exists():
            raise GitError(f"Parent directory does not exist: {parent}")
        if not parent.is_dir():
            raise GitError(f"Parent path is not a directory: {parent}")

        name = folder_name.strip()
        if not name or name in (".", "..") or "/" in name or os.sep in name:
            raise GitError(f"Invalid repository name: {folder_name!r}")

        target = parent / name
        if target.exists():
            if not target.is_dir() or any(target.iterdir()):
                raise GitError(f"Directory already exists: {target}")
        else:
            target.mkdir()

        logger.info(f"Initializing repository at {target}")
        self._run_git(["init"], cwd=target)
        return self.get_repository(target)
