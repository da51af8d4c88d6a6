"""Tests for GitHubService."""

import json
import subprocess
from pathlib import Path

import pytest

from seedbed.core.github_service import (
    CloneError,
    GitHubAuthError,
    GitHubCliMissingError,
    GitHubCommandError,
    GitHubService,
)


class FakeRun:
    """Replacement for subprocess.run recording the commands it gets."""

    def __init__(self, returncode: int = 0, stdout: str = "", stderr: str = "") -> None:
        self.returncode = returncode
        self.stdout = stdout
        self.stderr = stderr
        self.commands: list[list[str]] = []
        self.side_effect = None

    def __call__(self, cmd, **kwargs) -> subprocess.CompletedProcess:
        self.commands.append(cmd)
        if self.side_effect is not None:
            self.side_effect(cmd)
        return subprocess.CompletedProcess(
            cmd, self.returncode, stdout=self.stdout, stderr=self.stderr
        )


@pytest.fixture
def fake_run(monkeypatch: pytest.MonkeyPatch) -> FakeRun:
    run = FakeRun()
    monkeypatch.setattr("seedbed.core.github_service.subprocess.run", run)
    return run


@pytest.fixture
def service() -> GitHubService:
    return GitHubService(list_limit=50)


LISTING = json.dumps([
    {"name": "infra-tools", "description": "Terraform modules", "url": "u1", "isArchived": False},
    {"name": "web", "description": "", "url": "u2", "isArchived": False},
    {"name": "legacy-infra", "description": None, "url": "u3", "isArchived": True},
])


class TestListOrgRepos:
    """Tests for GitHubService.list_org_repos()."""

    def test_command_line(self, service, fake_run) -> None:
        """Test the gh invocation."""
        fake_run.stdout = "[]"
        service.list_org_repos("acme")

        assert fake_run.commands == [[
            "gh", "repo", "list", "acme",
            "--limit", "50",
            "--json", "name,description,url,isArchived",
        ]]

    def test_parses_and_drops_archived(self, service, fake_run) -> None:
        """Test that archived repositories are not offered."""
        fake_run.stdout = LISTING

        repos = service.list_org_repos("acme")

        assert [r.name for r in repos] == ["infra-tools", "web"]
        assert repos[0].description == "Terraform modules"
        assert repos[1].description is None

    def test_search_is_case_insensitive(self, service, fake_run) -> None:
        fake_run.stdout = LISTING

        repos = service.list_org_repos("acme", search="INFRA")

        assert [r.name for r in repos] == ["infra-tools"]

    def test_cli_missing(self, service, monkeypatch) -> None:
        """Test that a missing executable is classified."""

        def missing(cmd, **kwargs):
            raise FileNotFoundError(cmd[0])

        monkeypatch.setattr("seedbed.core.github_service.subprocess.run", missing)

        with pytest.raises(GitHubCliMissingError):
            service.list_org_repos("acme")

    def test_auth_failure(self, service, fake_run) -> None:
        """Test that auth problems are recognized from stderr."""
        fake_run.returncode = 4
        fake_run.stderr = "To get started with GitHub CLI, please run:  gh auth login\n"

        with pytest.raises(GitHubAuthError, match="gh auth login"):
            service.list_org_repos("acme")

    def test_command_failure(self, service, fake_run) -> None:
        fake_run.returncode = 1
        fake_run.stderr = "Could not resolve to an Organization with the login of 'acme'"

        with pytest.raises(GitHubCommandError, match="Could not resolve"):
            service.list_org_repos("acme")

    def test_expired_token_is_auth_failure(self, service, fake_run) -> None:
        fake_run.returncode = 1
        fake_run.stderr = "error: token expired, run gh auth refresh\n"

        with pytest.raises(GitHubAuthError):
            service.list_org_repos("acme")

    def test_token_in_parse_error_is_not_auth_failure(self, service, fake_run) -> None:
        """Test that an unrelated error mentioning a token stays a command error."""
        fake_run.returncode = 1
        fake_run.stderr = "unexpected token '<' in JSON at position 0\n"

        with pytest.raises(GitHubCommandError, match="unexpected token"):
            service.list_org_repos("acme")

    def test_invalid_json(self, service, fake_run) -> None:
        fake_run.stdout = "not json"

        with pytest.raises(GitHubCommandError, match="Unexpected output"):
            service.list_org_repos("acme")

    def test_non_list_json(self, service, fake_run) -> None:
        fake_run.stdout = '{"name": "x"}'

        with pytest.raises(GitHubCommandError):
            service.list_org_repos("acme")


class TestClone:
    """Tests for GitHubService.clone()."""

    def test_clone_invocation(self, service, fake_run, temp_dir: Path) -> None:
        """Test the gh clone command and returned path."""
        target = temp_dir / "infra-tools"

        result = service.clone("acme/infra-tools", target)

        assert fake_run.commands == [["gh", "repo", "clone", "acme/infra-tools", str(target)]]
        assert result == target

    def test_existing_destination(self, service, fake_run, temp_dir: Path) -> None:
        """Test that an existing destination is refused before running gh."""
        (temp_dir / "taken").mkdir()

        with pytest.raises(CloneError, match="already exists"):
            service.clone("acme/taken", temp_dir / "taken")
        assert fake_run.commands == []

    def test_missing_parent(self, service, fake_run, temp_dir: Path) -> None:
        with pytest.raises(CloneError, match="does not exist"):
            service.clone("acme/x", temp_dir / "missing" / "x")

    def test_failure_removes_partial_clone(self, service, fake_run, temp_dir: Path) -> None:
        """Test cleanup after gh fails midway."""
        target = temp_dir / "partial"
        fake_run.returncode = 1
        fake_run.stderr = "fatal: early EOF"
        fake_run.side_effect = lambda cmd: target.mkdir()

        with pytest.raises(CloneError, match="Failed to clone repository: fatal: early EOF"):
            service.clone("acme/partial", target)
        assert not target.exists()

    def test_clone_auth_failure(self, service, fake_run, temp_dir: Path) -> None:
        fake_run.returncode = 1
        fake_run.stderr = "HTTP 401: Bad credentials"

        with pytest.raises(GitHubAuthError):
            service.clone("acme/x", temp_dir / "x")
