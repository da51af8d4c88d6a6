"""Core services for Seedbed."""

from .async_op import AsyncOperation
from .backend import LocalBackend
from .debounce import DebouncedQuery
from .git_service import GitService
from .github_service import GitHubService
from .project_store import ProjectStore
from .scheduler import QtScheduler
from .workers import ThreadExecutor

__all__ = [
    "AsyncOperation",
    "DebouncedQuery",
    "GitHubService",
    "GitService",
    "LocalBackend",
    "ProjectStore",
    "QtScheduler",
    "ThreadExecutor",
]
