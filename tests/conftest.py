"""Pytest configuration and fixtures."""

import os
import subprocess
import tempfile
from collections.abc import Generator
from pathlib import Path
from typing import Any, Callable

import pytest

os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")

from PySide6.QtWidgets import QApplication  # noqa: E402

from seedbed.models.config import AppConfig  # noqa: E402
from seedbed.models.repository import (  # noqa: E402
    DirectoryEntry,
    Project,
    RemoteRepoEntry,
    Repo,
)


class ManualTimer:
    """Timer driven by ManualScheduler.advance()."""

    def __init__(
        self, due: int, interval: int | None, callback: Callable[[], None]
    ) -> None:
        self.due = due
        self.interval = interval
        self.callback = callback
        self._active = True

    @property
    def active(self) -> bool:
        return self._active

    def cancel(self) -> None:
        self._active = False


class ManualScheduler:
    """Scheduler with a virtual clock in milliseconds."""

    def __init__(self) -> None:
        self.now = 0
        self.timers: list[ManualTimer] = []

    def call_later(self, delay_ms: int, callback: Callable[[], None]) -> ManualTimer:
        timer = ManualTimer(self.now + delay_ms, None, callback)
        self.timers.append(timer)
        return timer

    def call_every(self, interval_ms: int, callback: Callable[[], None]) -> ManualTimer:
        timer = ManualTimer(self.now + interval_ms, interval_ms, callback)
        self.timers.append(timer)
        return timer

    @property
    def active_timers(self) -> list[ManualTimer]:
        return [t for t in self.timers if t.active]

    def advance(self, ms: int) -> None:
        """Move the clock forward, firing due timers in order."""
        target = self.now + ms
        while True:
            due = [t for t in self.active_timers if t.due <= target]
            if not due:
                break
            timer = min(due, key=lambda t: t.due)
            self.now = timer.due
            if timer.interval is None:
                timer.cancel()
            else:
                timer.due += timer.interval
            timer.callback()
        self.now = target


class ManualJob:
    """A submitted call waiting to be completed by the test."""

    def __init__(
        self,
        fn: Callable[..., Any],
        args: tuple,
        on_success: Callable[[Any], None],
        on_failure: Callable[[Exception], None],
    ) -> None:
        self.fn = fn
        self.args = args
        self.on_success = on_success
        self.on_failure = on_failure
        self.done = False

    def run(self) -> None:
        """Execute the call and deliver its outcome."""
        try:
            result = self.fn(*self.args)
        except Exception as e:
            self.fail(e)
            return
        self.succeed(result)

    def succeed(self, result: Any) -> None:
        self.done = True
        self.on_success(result)

    def fail(self, exc: Exception) -> None:
        self.done = True
        self.on_failure(exc)


class ManualExecutor:
    """Executor that holds calls until the test completes them."""

    def __init__(self) -> None:
        self.jobs: list[ManualJob] = []

    def submit(
        self,
        fn: Callable[..., Any],
        args: tuple,
        on_success: Callable[[Any], None],
        on_failure: Callable[[Exception], None],
    ) -> None:
        self.jobs.append(ManualJob(fn, args, on_success, on_failure))

    @property
    def pending(self) -> list[ManualJob]:
        return [j for j in self.jobs if not j.done]

    @property
    def last(self) -> ManualJob:
        return self.jobs[-1]

    def run_all(self) -> None:
        """Run pending calls in submission order."""
        for job in self.pending:
            job.run()


class FakeBackend:
    """In-memory wizard collaborators recording every call."""

    def __init__(self) -> None:
        self.local_repos: list[DirectoryEntry] = []
        self.org_repos: list[RemoteRepoEntry] = []
        self.errors: dict[str, Exception] = {}
        self.calls: list[tuple[str, tuple]] = []

    def _record(self, name: str, *args: Any) -> None:
        self.calls.append((name, args))
        if name in self.errors:
            raise self.errors[name]

    def calls_to(self, name: str) -> list[tuple]:
        return [args for call, args in self.calls if call == name]

    def list_local_repos(self) -> list[DirectoryEntry]:
        self._record("list_local_repos")
        return list(self.local_repos)

    def list_org_repos(self, org: str, search: str | None = None) -> list[RemoteRepoEntry]:
        self._record("list_org_repos", org, search)
        if not search:
            return list(self.org_repos)
        return [r for r in self.org_repos if search.lower() in r.name.lower()]

    def register_repo(self, path: str) -> Repo:
        self._record("register_repo", path)
        return Repo(path=Path(path), display_name=Path(path).name)

    def init_repo(self, parent_path: str, folder_name: str) -> Repo:
        self._record("init_repo", parent_path, folder_name)
        return Repo(path=Path(parent_path) / folder_name, display_name=folder_name)

    def clone_and_create_project(
        self, remote_full_name: str, destination_path: str
    ) -> Project:
        self._record("clone_and_create_project", remote_full_name, destination_path)
        name = remote_full_name.rsplit("/", 1)[-1]
        return Project(name=name, repo_path=Path(destination_path))


class FakeFolderPicker:
    """Folder picker returning a preset answer."""

    def __init__(self, answer: str | None = None) -> None:
        self.answer = answer
        self.calls: list[tuple[str, str, str]] = []

    def __call__(
        self, title: str, description: str, initial_value: str = ""
    ) -> str | None:
        self.calls.append((title, description, initial_value))
        return self.answer


@pytest.fixture
def qapp():
    """Create a QApplication for Qt tests."""
    app = QApplication.instance()
    if app is None:
        app = QApplication([])
    yield app


@pytest.fixture(autouse=True)
def isolated_config_dir(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Keep configuration and project files out of the real home directory."""
    config_dir = tmp_path / "config"
    config_dir.mkdir()
    monkeypatch.setattr("seedbed.models.config.get_config_dir", lambda: config_dir)
    return config_dir


@pytest.fixture
def scheduler() -> ManualScheduler:
    return ManualScheduler()


@pytest.fixture
def executor() -> ManualExecutor:
    return ManualExecutor()


@pytest.fixture
def backend() -> FakeBackend:
    return FakeBackend()


@pytest.fixture
def picker() -> FakeFolderPicker:
    return FakeFolderPicker()


@pytest.fixture
def config() -> AppConfig:
    return AppConfig(github_org="org")


@pytest.fixture
def temp_dir() -> Generator[Path]:
    """Create a temporary directory for tests."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def git_repo(temp_dir: Path) -> Generator[Path]:
    """Create a temporary git repository for testing."""
    repo_path = temp_dir / "test-repo"
    repo_path.mkdir()

    # Git environment for tests - preserve PATH so git can be found
    env = os.environ.copy()
    env.update({
        "GIT_AUTHOR_NAME": "Test User",
        "GIT_AUTHOR_EMAIL": "test@test.com",
        "GIT_COMMITTER_NAME": "Test User",
        "GIT_COMMITTER_EMAIL": "test@test.com",
    })

    subprocess.run(
        ["git", "init"], cwd=repo_path, check=True, capture_output=True, env=env
    )
    subprocess.run(
        ["git", "config", "commit.gpgsign", "false"],
        cwd=repo_path,
        check=True,
        capture_output=True,
    )

    (repo_path / "README.md").write_text("# Test Repo\n")
    subprocess.run(
        ["git", "add", "."], cwd=repo_path, check=True, capture_output=True, env=env
    )
    subprocess.run(
        ["git", "commit", "-m", "Initial commit"],
        cwd=repo_path,
        check=True,
        capture_output=True,
        env=env,
    )

    yield repo_path
