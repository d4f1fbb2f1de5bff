"""Git operations module."""

import logging
import os
import re
import subprocess
from collections.abc import Callable
from dataclasses import dataclass
from pathlib import Path

logger = logging.getLogger(__name__)

STAGE_CHUNK_SIZE = 50  # Safe number of paths per `git add` invocation


class GitError(Exception):
    """Git operation error."""

    pass


class StageError(GitError):
    """Files could not be staged."""

    pass


class CommitError(GitError):
    """Commit was rejected or nothing was staged."""

    pass


class PushError(GitError):
    """Push to the remote failed."""

    pass


@dataclass
class RepositoryInfo:
    """Basic facts about the working repository."""

    name: str
    branch: str
    remotes: list[str]
    is_clean: bool
    untracked_files: int


def _error_message(e: subprocess.CalledProcessError) -> str:
    stderr = e.stderr
    if isinstance(stderr, bytes):
        stderr = stderr.decode(errors="replace")
    return (stderr or str(e)).strip()


class GitOperations:
    """Git client bound to one working tree."""

    def __init__(self, cwd: str | Path | None = None, chunk_size: int = STAGE_CHUNK_SIZE):
        self.cwd = Path(cwd) if cwd else Path.cwd()
        self.chunk_size = chunk_size

    def _run(self, *args: str, check: bool = True) -> subprocess.CompletedProcess:
        logger.debug("git %s", " ".join(args))
        return subprocess.run(
            ["git", *args],
            cwd=self.cwd,
            capture_output=True,
            text=True,
            check=check,
        )

    def is_repository(self) -> bool:
        """Check whether the working directory is inside a git work tree."""
        try:
            result = self._run("rev-parse", "--is-inside-work-tree")
        except (subprocess.CalledProcessError, OSError):
            return False
        return result.stdout.strip() == "true"

    def get_untracked_files(self) -> list[str]:
        """List untracked paths, honouring .gitignore."""
        try:
            result = self._run("ls-files", "--others", "--exclude-standard", "-z")
        except subprocess.CalledProcessError as e:
            raise GitError(f"Failed to get untracked files: {_error_message(e)}")
        return [path for path in result.stdout.split("\0") if path]

    def get_current_branch(self) -> str:
        try:
            result = self._run("rev-parse", "--abbrev-ref", "HEAD")
        except subprocess.CalledProcessError as e:
            raise GitError(f"Failed to get current branch: {_error_message(e)}")
        return result.stdout.strip()

    def get_remotes(self) -> dict[str, str]:
        """Map remote names to their fetch URLs."""
        try:
            result = self._run("remote", "-v")
        except subprocess.CalledProcessError as e:
            raise GitError(f"Failed to list remotes: {_error_message(e)}")

        remotes: dict[str, str] = {}
        for line in result.stdout.splitlines():
            parts = line.split()
            if len(parts) >= 2 and (len(parts) < 3 or parts[2] == "(fetch)"):
                remotes.setdefault(parts[0], parts[1])
        return remotes

    def get_repository_info(self) -> RepositoryInfo:
        """Collect the repository name, branch and cleanliness."""
        try:
            status = self._run("status", "--porcelain")
        except subprocess.CalledProcessError as e:
            raise GitError(f"Failed to get repository info: {_error_message(e)}")

        lines = [line for line in status.stdout.splitlines() if line.strip()]
        remotes = self.get_remotes()

        name = self.cwd.resolve().name
        origin_url = remotes.get("origin")
        if origin_url:
            match = re.search(r"/([^/]+?)(?:\.git)?/?$", origin_url)
            if match:
                name = match.group(1)

        try:
            branch = self.get_current_branch()
        except GitError:
            branch = "unknown"

        return RepositoryInfo(
            name=name,
            branch=branch,
            remotes=list(remotes),
            is_clean=not lines,
            untracked_files=sum(1 for line in lines if line.startswith("??")),
        )

    def reset_staged_changes(self) -> None:
        """Reset all staged changes."""
        try:
            self._run("reset")
        except subprocess.CalledProcessError as e:
            raise GitError(f"Failed to reset staged changes: {_error_message(e)}")

    def stage_files(
        self,
        files: list[str],
        on_progress: Callable[[int, int], None] | None = None,
    ) -> None:
        """
        Stage a list of files in ordered chunks.

        Args:
            files: Paths relative to the working tree
            on_progress: Called with (staged, total) after each chunk

        Raises:
            StageError: if a path is missing/unreadable or git rejects it
        """
        if not files:
            return

        missing = [f for f in files if not os.access(self.cwd / f, os.R_OK)]
        if missing:
            raise StageError(f"Failed to stage files: missing or unreadable: {', '.join(missing)}")

        staged = 0
        for i in range(0, len(files), self.chunk_size):
            chunk = files[i : i + self.chunk_size]
            try:
                self._run("add", "--", *chunk)
            except subprocess.CalledProcessError as e:
                raise StageError(f"Failed to stage files: {_error_message(e)}")
            staged += len(chunk)
            if on_progress:
                on_progress(staged, len(files))

    def create_commit(self, message: str) -> str:
        """
        Create a commit from the staged changes.

        Returns:
            The new commit id

        Raises:
            CommitError: if nothing is staged or git rejects the commit
        """
        # `git diff --cached --quiet` exits 0 when nothing is staged
        status = self._run("diff", "--cached", "--quiet", check=False)
        if status.returncode == 0:
            raise CommitError("Failed to create commit: nothing staged")

        try:
            self._run("commit", "-m", message)
            result = self._run("rev-parse", "HEAD")
        except subprocess.CalledProcessError as e:
            raise CommitError(f"Failed to create commit: {_error_message(e)}")
        return result.stdout.strip()

    def push(self, remote: str = "origin", branch: str | None = None) -> None:
        """Push a branch (the current one by default) to a remote."""
        if not branch:
            try:
                branch = self.get_current_branch()
            except GitError as e:
                raise PushError(str(e))

        try:
            self._run("push", remote, branch)
        except subprocess.CalledProcessError as e:
            raise PushError(f"Failed to push to remote: {_error_message(e)}")

    def pull(self) -> None:
        """Pull the latest changes for the current branch."""
        try:
            self._run("pull")
        except subprocess.CalledProcessError as e:
            raise GitError(f"Failed to pull from remote: {_error_message(e)}")
