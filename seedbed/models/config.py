"""Application configuration management."""

import json
from dataclasses import dataclass, field
from pathlib import Path


def get_config_dir() -> Path:
    """Get the configuration directory path."""
    config_dir = Path.home() / ".config" / "seedbed"
    config_dir.mkdir(parents=True, exist_ok=True)
    return config_dir


def get_config_file() -> Path:
    """Get the main configuration file path."""
    return get_config_dir() / "config.json"


def get_projects_file() -> Path:
    """Get the projects file path."""
    return get_config_dir() / "projects.json"


@dataclass
class AppConfig:
    """Application configuration."""

    # Registered repository paths
    repositories: list[str] = field(default_factory=list)

    # GitHub settings
    github_org: str = "the-original-body"
    gh_command: str = "gh"
    gh_list_limit: int = 1000

    # Local search settings
    git_command: str = "git"
    search_roots: list[str] = field(default_factory=list)
    search_max_depth: int = 3

    # Wizard settings
    search_debounce_ms: int = 300
    local_visible_limit: int = 3

    def save(self) -> None:
        """Save configuration to file."""
        config_file = get_config_file()
        with open(config_file, "w") as f:
            json.dump(self._to_dict(), f, indent=2)

    def _to_dict(self) -> dict:
        """Convert to dictionary."""
        return {
            "repositories": self.repositories,
            "github": {
                "org": self.github_org,
                "command": self.gh_command,
                "list_limit": self.gh_list_limit,
            },
            "search": {
                "git_command": self.git_command,
                "roots": self.search_roots,
                "max_depth": self.search_max_depth,
            },
            "wizard": {
                "debounce_ms": self.search_debounce_ms,
                "visible_limit": self.local_visible_limit,
            },
        }

    @classmethod
    def load(cls) -> "AppConfig":
        """Load configuration from file."""
        config_file = get_config_file()
        if not config_file.exists():
            return cls()

        try:
            with open(config_file) as f:
                data = json.load(f)
            return cls._from_dict(data)
        except (json.JSONDecodeError, KeyError, AttributeError):
            return cls()

    @classmethod
    def _from_dict(cls, data: dict) -> "AppConfig":
        """Create from dictionary."""
        github = data.get("github", {})
        search = data.get("search", {})
        wizard = data.get("wizard", {})

        return cls(
            repositories=data.get("repositories", []),
            github_org=github.get("org", "the-original-body"),
            gh_command=github.get("command", "gh"),
            gh_list_limit=github.get("list_limit", 1000),
            git_command=search.get("git_command", "git"),
            search_roots=search.get("roots", []),
            search_max_depth=search.get("max_depth", 3),
            search_debounce_ms=wizard.get("debounce_ms", 300),
            local_visible_limit=wizard.get("visible_limit", 3),
        )

    def get_search_roots(self) -> list[Path]:
        """Return the directories scanned for local repositories."""
        if self.search_roots:
            return [Path(p).expanduser() for p in self.search_roots]
        return [Path.home()]

    def add_repository(self, path: str) -> None:
        """Add a repository path."""
        if path not in self.repositories:
            self.repositories.append(path)
            self.save()
