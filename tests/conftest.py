"""Common test fixtures."""

from pathlib import Path

import pytest

from batchcommit.config.settings import CategoryConfig, Settings
from batchcommit.core.git import CommitError, GitError, PushError, StageError


class FakeGit:
    """In-memory stand-in for GitOperations that records every call."""

    def __init__(self, cwd: Path, untracked: list[str] | None = None):
        self.cwd = cwd
        self.untracked = list(untracked or [])
        self.repository = True
        self.calls: list[tuple] = []
        self.push_results: list[bool] = []
        self.failing_stage: set[str] = set()
        self.failing_commits: set[str] = set()
        self.pull_fails = False
        self._staged: list[str] = []
        self.commits: list[tuple[str, list[str]]] = []

    def is_repository(self) -> bool:
        return self.repository

    def get_untracked_files(self) -> list[str]:
        self.calls.append(("untracked",))
        return list(self.untracked)

    def pull(self) -> None:
        self.calls.append(("pull",))
        if self.pull_fails:
            raise GitError("Failed to pull from remote: no upstream")

    def stage_files(self, files, on_progress=None) -> None:
        self.calls.append(("stage", list(files)))
        bad = [f for f in files if f in self.failing_stage]
        if bad:
            raise StageError(f"Failed to stage files: {', '.join(bad)}")
        self._staged.extend(files)
        if on_progress:
            on_progress(len(files), len(files))

    def create_commit(self, message: str) -> str:
        self.calls.append(("commit", message))
        if message in self.failing_commits or not self._staged:
            raise CommitError(f"Failed to create commit: {message}")
        self.commits.append((message, self._staged))
        self._staged = []
        return f"{len(self.commits):040x}"

    def reset_staged_changes(self) -> None:
        self.calls.append(("reset",))
        self._staged = []

    def push(self, remote: str = "origin", branch: str | None = None) -> None:
        self.calls.append(("push", remote, branch))
        ok = self.push_results.pop(0) if self.push_results else True
        if not ok:
            raise PushError("Failed to push to remote: connection refused")

    def count(self, name: str) -> int:
        return sum(1 for call in self.calls if call[0] == name)


@pytest.fixture
def categories():
    """Small ordered category list: source, docs, misc."""
    return (
        CategoryConfig(
            category_id="source",
            display_name="Source Code",
            extensions=frozenset({".ts", ".py"}),
            glob_patterns=("*.ts", "*.py"),
            batch_size=2,
            icon="💻",
        ),
        CategoryConfig(
            category_id="docs",
            display_name="Documentation",
            extensions=frozenset({".md"}),
            glob_patterns=("*.md",),
            batch_size=2,
            icon="📝",
        ),
        CategoryConfig(
            category_id="misc",
            display_name="Miscellaneous",
            extensions=frozenset(),
            glob_patterns=("*",),
            batch_size=10,
            icon="📄",
        ),
    )


@pytest.fixture
def settings(categories):
    return Settings(categories=categories, max_push_size=1000, push_cooldown=1.0)


@pytest.fixture
def write_files(tmp_path):
    """Create files of given sizes under tmp_path, returning their names in order."""

    def _write(sizes: dict[str, int]) -> list[str]:
        for name, size in sizes.items():
            path = tmp_path / name
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_bytes(b"x" * size)
        return list(sizes)

    return _write


@pytest.fixture
def fake_git(tmp_path):
    return FakeGit(tmp_path)


@pytest.fixture
def no_sleep():
    """Sleep replacement that records requested delays."""
    delays: list[float] = []
    return delays.append, delays
