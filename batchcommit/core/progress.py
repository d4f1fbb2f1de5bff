"""Lifecycle events emitted while a run is processed."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from ..errors import AnalysisError
    from .batch import Batch
    from .git import GitError
    from .push import PushAccount, PushAttempt


class ProgressReporter:
    """
    Receives run events. Every hook is a no-op here.

    The CLI subclasses this to render progress; tests use it as a silent sink
    or record calls on a mock.
    """

    def file_skipped(self, error: AnalysisError) -> None:
        pass

    def pull_failed(self, error: GitError) -> None:
        pass

    def run_started(self, batches: list[Batch]) -> None:
        pass

    def batch_started(self, index: int, total: int, batch: Batch) -> None:
        pass

    def stage_progress(self, staged: int, total: int) -> None:
        pass

    def batch_committed(self, index: int, batch: Batch, commit_id: str, duration: float) -> None:
        pass

    def batch_failed(self, index: int, batch: Batch, error: GitError) -> None:
        pass

    def push_budget(self, account: PushAccount, max_push_size: int) -> None:
        pass

    def push_started(self, attempt: PushAttempt) -> None:
        pass

    def push_succeeded(self, attempt: PushAttempt) -> None:
        pass

    def push_failed(self, attempt: PushAttempt) -> None:
        pass

    def cooldown(self, seconds: float) -> None:
        pass
