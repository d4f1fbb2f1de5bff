"""Analyzer module for untracked file discovery results."""

import logging
import os
from collections.abc import Callable, Collection
from dataclasses import dataclass
from pathlib import Path

from ..config.settings import LARGE_FILE_THRESHOLD
from ..errors import AnalysisError
from .classifier import FileClassifier, get_extension

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class FileRecord:
    """An analyzed untracked file."""

    path: str
    category: str
    size_bytes: int
    extension: str
    is_large: bool = False


@dataclass(frozen=True)
class AnalysisSummary:
    """Per-category counts and total size of an analysis."""

    counts: dict[str, int]
    total_size: int
    large_files: list[str]

    @property
    def total_files(self) -> int:
        return sum(self.counts.values())


class FileAnalyzer:
    """Turns untracked paths into classified file records."""

    def __init__(
        self,
        classifier: FileClassifier,
        root: str | Path | None = None,
        large_file_threshold: int = LARGE_FILE_THRESHOLD,
    ):
        self.classifier = classifier
        self.root = Path(root) if root else Path.cwd()
        self.large_file_threshold = large_file_threshold

    def analyze_file(self, path: str) -> FileRecord:
        """
        Stat and classify one file.

        Raises:
            AnalysisError: if the file vanished or cannot be read
        """
        try:
            size = os.stat(self.root / path).st_size
        except OSError as e:
            raise AnalysisError(path, e.strerror or str(e))

        extension = get_extension(path)
        return FileRecord(
            path=path,
            category=self.classifier.classify(path, extension),
            size_bytes=size,
            extension=extension,
            is_large=size > self.large_file_threshold,
        )

    def analyze_files(
        self,
        paths: list[str],
        category_filter: Collection[str] | None = None,
        on_skip: Callable[[AnalysisError], None] | None = None,
    ) -> list[FileRecord]:
        """
        Analyze paths in order, skipping unreadable files.

        Args:
            paths: Untracked paths relative to the repository root
            category_filter: Only keep records in these categories
            on_skip: Called for every file that could not be analyzed

        Returns:
            File records in input order
        """
        records = []
        for path in paths:
            try:
                record = self.analyze_file(path)
            except AnalysisError as e:
                logger.warning(str(e))
                if on_skip:
                    on_skip(e)
                continue

            if category_filter and record.category not in category_filter:
                logger.debug("Skipping %s (%s not selected)", path, record.category)
                continue
            records.append(record)

        return records

    @staticmethod
    def summarize(records: list[FileRecord]) -> AnalysisSummary:
        counts: dict[str, int] = {}
        for record in records:
            counts[record.category] = counts.get(record.category, 0) + 1
        return AnalysisSummary(
            counts=counts,
            total_size=sum(r.size_bytes for r in records),
            large_files=[r.path for r in records if r.is_large],
        )
