"""BatchCommit - Commit untracked files in typed batches and push under a size budget."""

from .config.settings import CategoryConfig, ConfigError, Settings, load_settings
from .core.analyzer import FileRecord
from .core.batch import Batch, BatchPartitioner
from .core.classifier import FileClassifier
from .core.git import CommitError, GitError, GitOperations, PushError, StageError
from .core.push import FlushController, PushAccount
from .core.runner import BatchCommitRunner, ProcessingResult, RunOptions, run_batch_commit
from .errors import AnalysisError, SetupError

__version__ = "0.1.0"

__all__ = [
    "CategoryConfig",
    "ConfigError",
    "Settings",
    "load_settings",
    "FileRecord",
    "Batch",
    "BatchPartitioner",
    "FileClassifier",
    "GitOperations",
    "GitError",
    "StageError",
    "CommitError",
    "PushError",
    "FlushController",
    "PushAccount",
    "BatchCommitRunner",
    "ProcessingResult",
    "RunOptions",
    "run_batch_commit",
    "AnalysisError",
    "SetupError",
]
