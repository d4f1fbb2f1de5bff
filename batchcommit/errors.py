"""Run-level error types for BatchCommit."""


class SetupError(Exception):
    """Fatal error raised before any batch is processed."""

    pass


class AnalysisError(Exception):
    """A file vanished or became unreadable between listing and stat."""

    def __init__(self, path: str, reason: str):
        super().__init__(f"Could not analyze file {path}: {reason}")
        self.path = path
        self.reason = reason
