"""Persistent store of project records."""

import json
import logging
from pathlib import Path

from seedbed.models.config import get_projects_file
from seedbed.models.repository import Project

logger = logging.getLogger(__name__)


class ProjectStoreError(Exception):
    """Exception raised when a project cannot be stored."""

    pass


class DuplicateRepoPathError(ProjectStoreError):
    """A project already owns the repository path."""

    def __init__(self) -> None:
        super().__init__("A project with this repository path already exists")


class ProjectStore:
    """Keeps project records in a JSON file."""

    def __init__(self, projects_file: Path | None = None) -> None:
        self._projects_file = projects_file
        self._projects: list[Project] = []
        self._load_projects()

    @property
    def projects(self) -> list[Project]:
        """Get all projects."""
        return list(self._projects)

    def find_by_repo_path(self, repo_path: Path) -> Project | None:
        """Find the project owning a repository path."""
        resolved = Path(repo_path).resolve()
        for project in self._projects:
            if project.repo_path.resolve() == resolved:
                return project
        return None

    def create_project(self, name: str, repo_path: Path) -> Project:
        """Create and persist a project for a repository.

        Raises:
            DuplicateRepoPathError: If another project owns repo_path.
        """
        if self.find_by_repo_path(repo_path) is not None:
            raise DuplicateRepoPathError()

        project = Project(name=name, repo_path=Path(repo_path).resolve())
        self._projects.append(project)
        self._save_projects()

        logger.info(f"Created project '{project.name}' at {project.repo_path}")
        return project

    def _get_projects_file(self) -> Path:
        """Get the projects file path."""
        return self._projects_file or get_projects_file()

    def _save_projects(self) -> None:
        """Save projects to disk."""
        projects_file = self._get_projects_file()
        data = {"projects": [p.to_dict() for p in self._projects]}
        try:
            with open(projects_file, "w") as f:
                json.dump(data, f, indent=2)
        except OSError as e:
            raise ProjectStoreError(f"Failed to save projects: {e}")

    def _load_projects(self) -> None:
        """Load projects from disk."""
        projects_file = self._get_projects_file()
        if not projects_file.exists():
            return

        try:
            with open(projects_file) as f:
                data = json.load(f)

            for project_data in data.get("projects", []):
                self._projects.append(Project.from_dict(project_data))
        except (json.JSONDecodeError, KeyError, ValueError):
            logger.warning(f"Ignoring corrupted projects file: {projects_file}")
