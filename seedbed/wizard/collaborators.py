"""Interfaces the wizard consumes but does not implement."""

from typing import Protocol

from seedbed.models.repository import DirectoryEntry, Project, RemoteRepoEntry, Repo


class WizardCollaborators(Protocol):
    """Blocking backend calls used by the wizard.

    list_org_repos raises GitHubCliMissingError, GitHubAuthError or
    GitHubCommandError; the other calls raise any exception whose message
    is fit to show to the user.
    """

    def list_local_repos(self) -> list[DirectoryEntry]: ...

    def list_org_repos(
        self, org: str, search: str | None = None
    ) -> list[RemoteRepoEntry]: ...

    def register_repo(self, path: str) -> Repo: ...

    def init_repo(self, parent_path: str, folder_name: str) -> Repo: ...

    def clone_and_create_project(
        self, remote_full_name: str, destination_path: str
    ) -> Project: ...


class FolderPicker(Protocol):
    """Modal folder selection. None or "" means the user cancelled."""

    def __call__(
        self, title: str, description: str, initial_value: str = ""
    ) -> str | None: ...


def pick_folder(
    picker: FolderPicker | None,
    title: str,
    description: str,
    initial_value: str = "",
) -> str | None:
    """Run the picker and normalize cancellation to None."""
    if picker is None:
        return None
    path = picker(title, description, initial_value)
    return path or None
