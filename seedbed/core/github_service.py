"""GitHub CLI wrapper for listing and cloning organization repositories."""

import json
import shutil
import subprocess
from pathlib import Path

import logbook

from seedbed.models.repository import RemoteRepoEntry

log = logbook.Logger(__name__)

# stderr fragments that identify an authentication problem
AUTH_MARKERS = (
    "gh auth login",
    "authentication",
    "not logged in",
    "bad credentials",
    "http 401",
    "401 unauthorized",
    "token expired",
    "invalid token",
)


class GitHubError(Exception):
    """Base exception for GitHub CLI failures."""

    def __init__(self, message: str = "") -> None:
        super().__init__(message)
        self.message = message


class GitHubCliMissingError(GitHubError):
    """The gh executable could not be found."""

    def __init__(self, message: str = "GitHub CLI (gh) is not installed") -> None:
        super().__init__(message)


class GitHubAuthError(GitHubError):
    """gh is installed but not authenticated."""


class GitHubCommandError(GitHubError):
    """gh ran but failed or produced output that could not be parsed."""


class CloneError(GitHubError):
    """A clone could not be performed."""


class GitHubService:
    """Runs gh commands on behalf of the wizard."""

    def __init__(self, gh_command: str = "gh", list_limit: int = 1000) -> None:
        self.gh_command = gh_command
        self.list_limit = list_limit

    def _run_gh(self, args: list[str]) -> subprocess.CompletedProcess:
        """Run a gh command without raising on a non-zero exit."""
        cmd = [self.gh_command] + args
        log.debug("Running GitHub CLI: {}", " ".join(cmd))
        try:
            result = subprocess.run(cmd, capture_output=True, text=True)
        except FileNotFoundError:
            log.error("GitHub CLI not found: {}", self.gh_command)
            raise GitHubCliMissingError()

        if result.returncode != 0:
            log.debug(
                "GitHub CLI exited with {}: {}", result.returncode, result.stderr.strip()
            )
        return result

    def _is_auth_failure(self, stderr: str) -> bool:
        lowered = stderr.lower()
        return any(marker in lowered for marker in AUTH_MARKERS)

    def list_org_repos(
        self, org: str, search: str | None = None
    ) -> list[RemoteRepoEntry]:
        """List non-archived repositories of an organization.

        Args:
            org: Organization login
            search: Optional case-insensitive substring matched against names

        Raises:
            GitHubCliMissingError: gh is not installed
            GitHubAuthError: gh is not authenticated
            GitHubCommandError: gh failed or returned unexpected output
        """
        result = self._run_gh([
            "repo", "list", org,
            "--limit", str(self.list_limit),
            "--json", "name,description,url,isArchived",
        ])

        stderr = result.stderr.strip() if result.stderr else ""
        if result.returncode != 0:
            if self._is_auth_failure(stderr):
                raise GitHubAuthError(stderr or "not authenticated")
            raise GitHubCommandError(stderr or f"gh exited with code {result.returncode}")

        try:
            data = json.loads(result.stdout or "[]")
        except json.JSONDecodeError as e:
            raise GitHubCommandError(f"Unexpected output from gh: {e}")
        if not isinstance(data, list):
            raise GitHubCommandError("Unexpected output from gh: expected a list")

        repos = [
            RemoteRepoEntry(
                name=item["name"],
                description=item.get("description") or None,
                clone_url=item.get("url", ""),
            )
            for item in data
            if isinstance(item, dict) and "name" in item and not item.get("isArchived")
        ]

        needle = search.strip().lower() if search else ""
        if needle:
            repos = [r for r in repos if needle in r.name.lower()]

        log.info("Listed {} repositories for {}", len(repos), org)
        return repos

    def clone(self, full_name: str, destination: Path) -> Path:
        """Clone full_name ("org/repo") into destination.

        The parent of destination must exist and destination itself must
        not. A partial clone is removed when gh fails.
        """
        destination = Path(destination).expanduser()
        parent = destination.parent

        if not parent.exists():
            raise CloneError(f"Parent directory does not exist: {parent}")
        if not parent.is_dir():
            raise CloneError(f"Parent path is not a directory: {parent}")
        if destination.exists():
            raise CloneError(f"Destination already exists: {destination}")

        result = self._run_gh(["repo", "clone", full_name, str(destination)])
        if result.returncode != 0:
            stderr = result.stderr.strip() if result.stderr else ""
            if destination.exists():
                shutil.rmtree(destination, ignore_errors=True)
            if self._is_auth_failure(stderr):
                raise GitHubAuthError(stderr)
            raise CloneError(f"Failed to clone repository: {stderr}")

        log.info("Cloned {} into {}", full_name, destination)
        return destination
