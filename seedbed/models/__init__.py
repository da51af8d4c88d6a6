"""Data models for Seedbed."""

from .config import AppConfig
from .repository import DirectoryEntry, Project, RemoteRepoEntry, Repo
from .result import (
    Cancelled,
    ProjectFromClone,
    RepoSelected,
    ResultKind,
    Stage,
    WorkflowResult,
)

__all__ = [
    "AppConfig",
    "Cancelled",
    "DirectoryEntry",
    "Project",
    "ProjectFromClone",
    "RemoteRepoEntry",
    "Repo",
    "RepoSelected",
    "ResultKind",
    "Stage",
    "WorkflowResult",
]
