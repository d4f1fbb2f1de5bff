"""File classification by extension and basename pattern."""

import os
import re
from collections.abc import Iterable
from functools import lru_cache

from ..config.settings import MISC_CATEGORY, CategoryConfig


@lru_cache(maxsize=512)
def compile_pattern(pattern: str) -> re.Pattern:
    """Compile a glob where `*` matches any run of characters and nothing else is special."""
    regex = ".*".join(re.escape(part) for part in pattern.split("*"))
    return re.compile(regex, re.IGNORECASE | re.DOTALL)


def matches_pattern(pattern: str, file_name: str) -> bool:
    """Check a pattern against the whole basename."""
    return compile_pattern(pattern).fullmatch(file_name) is not None


def get_extension(path: str) -> str:
    """Lowercased final suffix of a path, empty for dotfiles like `.env`."""
    return os.path.splitext(path)[1].lower()


class FileClassifier:
    """Maps files to categories using first-match semantics."""

    def __init__(self, categories: Iterable[CategoryConfig]):
        categories = list(categories)
        # misc is the catch-all and must be evaluated after every other rule
        self.categories = [c for c in categories if c.category_id != MISC_CATEGORY] + [
            c for c in categories if c.category_id == MISC_CATEGORY
        ]
        self._extensions = [frozenset(ext.lower() for ext in c.extensions) for c in self.categories]

    def _matches(self, index: int, file_name: str, extension: str) -> bool:
        if extension and extension in self._extensions[index]:
            return True
        return any(matches_pattern(p, file_name) for p in self.categories[index].glob_patterns)

    def classify(self, path: str, extension: str | None = None) -> str:
        """
        Return the id of the first category matching a file.

        Args:
            path: File path, only its basename is matched against patterns
            extension: Precomputed extension, derived from the path when omitted

        Returns:
            A category id, MISC_CATEGORY when no rule matches
        """
        if extension is None:
            extension = get_extension(path)
        extension = extension.lower()
        file_name = os.path.basename(path.replace("\\", "/").rstrip("/"))

        for index, category in enumerate(self.categories):
            if self._matches(index, file_name, extension):
                return category.category_id

        return MISC_CATEGORY


def classify(path: str, extension: str, categories: Iterable[CategoryConfig]) -> str:
    """Classify a single file against an ordered category list."""
    return FileClassifier(categories).classify(path, extension)
