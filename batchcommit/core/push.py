"""Push accounting and flush control.

Commits are cheap and local, pushes are remote and may fail. The controller
accumulates the byte size and count of committed-but-unpushed work and pushes
once the backlog reaches the configured budget or the run reaches its final
batch. A failed push leaves the backlog in place so the next flush decision
retries the same commits.
"""

import logging
import time
from collections.abc import Callable
from dataclasses import dataclass
from enum import Enum

from ..config.settings import DEFAULT_MAX_PUSH_SIZE, DEFAULT_PUSH_COOLDOWN, DEFAULT_REMOTE
from .git import GitOperations, PushError
from .progress import ProgressReporter

logger = logging.getLogger(__name__)


class PushState(Enum):
    """Flush controller states."""

    ACCUMULATING = "accumulating"
    FLUSH_PENDING = "flush_pending"
    PUSH_OK = "push_ok"
    PUSH_FAILED = "push_failed"


@dataclass
class PushAccount:
    """Committed-but-unpushed backlog for one run."""

    bytes_since_last_push: int = 0
    commits_since_last_push: int = 0
    push_count: int = 0
    failed_push_count: int = 0

    def record_commit(self, size_bytes: int) -> None:
        if size_bytes < 0:
            raise ValueError("Commit size cannot be negative")
        self.bytes_since_last_push += size_bytes
        self.commits_since_last_push += 1

    def record_push(self) -> None:
        self.bytes_since_last_push = 0
        self.commits_since_last_push = 0
        self.push_count += 1

    @property
    def has_backlog(self) -> bool:
        return self.commits_since_last_push > 0


@dataclass(frozen=True)
class PushAttempt:
    """Outcome of one push attempt."""

    number: int
    commits: int
    size_bytes: int
    reason: str
    succeeded: bool = False
    error: str | None = None


class FlushController:
    """Decides when to push and keeps the backlog consistent across failures."""

    def __init__(
        self,
        git: GitOperations,
        max_push_size: int = DEFAULT_MAX_PUSH_SIZE,
        remote: str = DEFAULT_REMOTE,
        branch: str | None = None,
        cooldown: float = DEFAULT_PUSH_COOLDOWN,
        sleep: Callable[[float], None] = time.sleep,
        reporter: ProgressReporter | None = None,
    ):
        if max_push_size <= 0:
            raise ValueError("max_push_size must be positive")
        self.git = git
        self.max_push_size = max_push_size
        self.remote = remote
        self.branch = branch
        self.cooldown = cooldown
        self.sleep = sleep
        self.reporter = reporter or ProgressReporter()
        self.account = PushAccount()
        self.state = PushState.ACCUMULATING
        self.attempts: list[PushAttempt] = []

    @property
    def size_limit_reached(self) -> bool:
        return self.account.bytes_since_last_push >= self.max_push_size

    def should_flush(self, is_last: bool) -> bool:
        return self.account.has_backlog and (self.size_limit_reached or is_last)

    def record_commit(self, size_bytes: int, is_last: bool) -> PushAttempt | None:
        """
        Account for a successful commit and flush if a trigger fired.

        Args:
            size_bytes: Total size of the committed batch
            is_last: Whether this was the final batch of the run

        Returns:
            The push attempt, or None when no flush was due
        """
        self.account.record_commit(size_bytes)
        self.reporter.push_budget(self.account, self.max_push_size)
        return self.maybe_flush(is_last)

    def maybe_flush(self, is_last: bool) -> PushAttempt | None:
        if not self.should_flush(is_last):
            return None

        self.state = PushState.FLUSH_PENDING
        reason = "size limit reached" if self.size_limit_reached else "final batch"
        attempt = self._push(reason)

        if attempt.succeeded and not is_last and self.cooldown > 0:
            self.reporter.cooldown(self.cooldown)
            self.sleep(self.cooldown)
        return attempt

    def _push(self, reason: str) -> PushAttempt:
        number = len(self.attempts) + 1
        commits = self.account.commits_since_last_push
        size = self.account.bytes_since_last_push
        self.reporter.push_started(PushAttempt(number, commits, size, reason))

        try:
            self.git.push(self.remote, self.branch)
        except PushError as e:
            self.state = PushState.PUSH_FAILED
            self.account.failed_push_count += 1
            attempt = PushAttempt(number, commits, size, reason, succeeded=False, error=str(e))
            logger.warning("Push %d failed, %d commits kept locally: %s", number, commits, e)
            self.reporter.push_failed(attempt)
        else:
            self.state = PushState.PUSH_OK
            self.account.record_push()
            attempt = PushAttempt(number, commits, size, reason, succeeded=True)
            logger.info("Push %d: %d commits (%d bytes), %s", number, commits, size, reason)
            self.reporter.push_succeeded(attempt)

        self.attempts.append(attempt)
        self.state = PushState.ACCUMULATING
        return attempt
