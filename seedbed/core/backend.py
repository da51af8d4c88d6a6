"""Default collaborators for the repository wizard."""

import logging
import shutil
from pathlib import Path

from seedbed.models.config import AppConfig
from seedbed.models.repository import DirectoryEntry, Project, RemoteRepoEntry, Repo

from .git_service import GitService
from .github_service import GitHubService
from .project_store import ProjectStore, ProjectStoreError

logger = logging.getLogger(__name__)


class LocalBackend:
    """Implements the wizard collaborators on top of git, gh and the project store.

    Every method blocks; the wizard runs them on worker threads.
    """

    def __init__(
        self,
        config: AppConfig,
        git_service: GitService | None = None,
        github_service: GitHubService | None = None,
        project_store: ProjectStore | None = None,
    ) -> None:
        self._config = config
        self._git = git_service or GitService(config.git_command)
        self._github = github_service or GitHubService(
            config.gh_command, config.gh_list_limit
        )
        self._projects = project_store or ProjectStore()

    def list_local_repos(self) -> list[DirectoryEntry]:
        """List candidate repositories from the configured search roots."""
        return self._git.find_repositories(
            self._config.get_search_roots(), self._config.search_max_depth
        )

    def list_org_repos(
        self, org: str, search: str | None = None
    ) -> list[RemoteRepoEntry]:
        """List repositories of a GitHub organization."""
        return self._github.list_org_repos(org, search)

    def register_repo(self, path: str) -> Repo:
        """Validate an existing repository and remember it."""
        repo = self._git.get_repository(Path(path))
        self._config.add_repository(str(repo.path))
        logger.info(f"Registered repository {repo.path}")
        return repo

    def init_repo(self, parent_path: str, folder_name: str) -> Repo:
        """Create a new repository and remember it."""
        repo = self._git.init_repository(Path(parent_path), folder_name)
        self._config.add_repository(str(repo.path))
        return repo

    def clone_and_create_project(
        self, remote_full_name: str, destination_path: str
    ) -> Project:
        """Clone a repository and create its project in one step.

        If the project cannot be created the clone is removed again, so a
        failed call leaves nothing behind.
        """
        destination = self._github.clone(remote_full_name, Path(destination_path))
        name = remote_full_name.rsplit("/", 1)[-1]

        try:
            project = self._projects.create_project(name, destination)
        except ProjectStoreError:
            shutil.rmtree(destination, ignore_errors=True)
            raise

        self._config.add_repository(str(project.repo_path))
        logger.info(
            f"Created project '{project.name}' from GitHub repo "
            f"'{remote_full_name}' at '{destination}'"
        )
        return project
