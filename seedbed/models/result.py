"""Workflow result and stage models for the repository wizard."""

from dataclasses import dataclass, field
from enum import Enum

from .repository import Project, Repo


class Stage(Enum):
    """Screen currently shown by the wizard."""

    OPTIONS = "options"
    EXISTING_LOCAL = "existing"
    CREATE_NEW = "new"
    GITHUB_CLONE = "github"


class ResultKind(Enum):
    """Tag of a workflow result."""

    REPO_SELECTED = "repo_selected"
    PROJECT_FROM_CLONE = "project_from_clone"
    CANCELLED = "cancelled"


@dataclass(frozen=True)
class RepoSelected:
    """An existing or newly created repository was chosen.

    The caller is still expected to create a project for it.
    """

    repo: Repo
    kind: ResultKind = field(default=ResultKind.REPO_SELECTED, init=False)


@dataclass(frozen=True)
class ProjectFromClone:
    """A repository was cloned and its project already created.

    The caller must not create another project.
    """

    project: Project
    kind: ResultKind = field(default=ResultKind.PROJECT_FROM_CLONE, init=False)


@dataclass(frozen=True)
class Cancelled:
    """The wizard was dismissed without a selection."""

    kind: ResultKind = field(default=ResultKind.CANCELLED, init=False)


WorkflowResult = RepoSelected | ProjectFromClone | Cancelled
