"""Core modules for BatchCommit.

This module contains the core functionality including:
- Git operations
- File classification and analysis
- Batch partitioning
- Push accounting
- Run orchestration
"""

from .analyzer import FileAnalyzer, FileRecord
from .batch import Batch, BatchPartitioner, generate_commit_message
from .classifier import FileClassifier, classify
from .git import CommitError, GitError, GitOperations, PushError, StageError
from .progress import ProgressReporter
from .push import FlushController, PushAccount, PushAttempt, PushState
from .runner import BatchCommitRunner, ProcessingResult, RunOptions, run_batch_commit

__all__ = [
    "FileAnalyzer",
    "FileRecord",
    "Batch",
    "BatchPartitioner",
    "generate_commit_message",
    "FileClassifier",
    "classify",
    "GitOperations",
    "GitError",
    "StageError",
    "CommitError",
    "PushError",
    "ProgressReporter",
    "FlushController",
    "PushAccount",
    "PushAttempt",
    "PushState",
    "BatchCommitRunner",
    "ProcessingResult",
    "RunOptions",
    "run_batch_commit",
]
