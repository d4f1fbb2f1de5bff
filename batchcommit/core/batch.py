"""Batch partitioning module."""

import logging
import os
from collections.abc import Iterable
from dataclasses import dataclass

from ..config.settings import DEFAULT_BATCH_SIZE, CategoryConfig
from .analyzer import FileRecord

logger = logging.getLogger(__name__)

DEFAULT_ICON = "📁"


@dataclass(frozen=True)
class Batch:
    """An ordered group of files destined for exactly one commit."""

    category: str
    files: tuple[FileRecord, ...]
    commit_message: str

    def __post_init__(self) -> None:
        if not self.files:
            raise ValueError("A batch must contain at least one file")

    @property
    def paths(self) -> list[str]:
        return [f.path for f in self.files]

    @property
    def total_size(self) -> int:
        return sum(f.size_bytes for f in self.files)

    def __len__(self) -> int:
        return len(self.files)


def generate_commit_message(
    category_id: str, files: list[FileRecord], category: CategoryConfig | None
) -> str:
    """Describe a batch: its icon plus the file name or the file count."""
    icon = category.icon if category and category.icon else DEFAULT_ICON
    if len(files) == 1:
        return f"{icon} Add {os.path.basename(files[0].path)}"

    label = category.display_name if category else category_id
    return f"{icon} Add {len(files)} {label.lower()}"


class BatchPartitioner:
    """Groups file records by category and slices them into batches."""

    def __init__(self, categories: Iterable[CategoryConfig]):
        self._categories = {c.category_id: c for c in categories}

    def batch_size_for(self, category_id: str, override: int | None = None) -> int:
        """Effective batch size: override, then category setting, then the default."""
        if override is not None:
            if override < 1:
                raise ValueError("Batch size override must be at least 1")
            return override
        category = self._categories.get(category_id)
        if category and category.batch_size:
            return category.batch_size
        return DEFAULT_BATCH_SIZE

    def partition(
        self, records: list[FileRecord], batch_size_override: int | None = None
    ) -> list[Batch]:
        """
        Partition records into commit batches.

        Categories come out in the order they are first seen in `records`, and
        files keep their input order inside each category. The override, when
        given, applies to every category.
        """
        groups: dict[str, list[FileRecord]] = {}
        for record in records:
            groups.setdefault(record.category, []).append(record)

        batches = []
        for category_id, files in groups.items():
            size = self.batch_size_for(category_id, batch_size_override)
            category = self._categories.get(category_id)
            for i in range(0, len(files), size):
                window = files[i : i + size]
                batches.append(
                    Batch(
                        category=category_id,
                        files=tuple(window),
                        commit_message=generate_commit_message(category_id, window, category),
                    )
                )

        logger.debug("Partitioned %d files into %d batches", len(records), len(batches))
        return batches


def partition(
    records: list[FileRecord],
    categories: Iterable[CategoryConfig],
    batch_size_override: int | None = None,
) -> list[Batch]:
    return BatchPartitioner(categories).partition(records, batch_size_override)
