"""Repository, directory and project data models."""

from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from uuid import UUID, uuid4


@dataclass(frozen=True)
class Repo:
    """A local git repository known to the backend."""

    path: Path
    display_name: str = ""

    @property
    def name(self) -> str:
        """Return display name for the repository."""
        return self.display_name or self.path.name


@dataclass(frozen=True)
class DirectoryEntry:
    """A candidate local repository found on disk."""

    name: str
    path: Path


@dataclass(frozen=True)
class RemoteRepoEntry:
    """A repository listed from a GitHub organization."""

    name: str
    description: str | None = None
    clone_url: str = ""


@dataclass
class Project:
    """A project record owning a cloned or registered repository."""

    name: str
    repo_path: Path
    id: UUID = field(default_factory=uuid4)
    created_at: datetime = field(default_factory=datetime.now)

    def to_dict(self) -> dict:
        """Convert to dictionary for serialization."""
        return {
            "id": str(self.id),
            "name": self.name,
            "repo_path": str(self.repo_path),
            "created_at": self.created_at.isoformat(),
        }

    @classmethod
    def from_dict(cls, data: dict) -> "Project":
        """Create from dictionary."""
        return cls(
            id=UUID(data["id"]),
            name=data["name"],
            repo_path=Path(data["repo_path"]),
            created_at=datetime.fromisoformat(data["created_at"]),
        )
