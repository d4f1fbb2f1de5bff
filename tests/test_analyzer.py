"""Tests for file analysis."""

import pytest

from batchcommit.core.analyzer import FileAnalyzer
from batchcommit.core.classifier import FileClassifier


@pytest.fixture
def analyzer(categories, tmp_path):
    """Fixture for FileAnalyzer rooted at tmp_path."""
    return FileAnalyzer(FileClassifier(categories), root=tmp_path, large_file_threshold=150)


def test_analyze_file(analyzer, write_files):
    write_files({"src/App.TS": 120})

    record = analyzer.analyze_file("src/App.TS")

    assert record.path == "src/App.TS"
    assert record.category == "source"
    assert record.size_bytes == 120
    assert record.extension == ".ts"
    assert record.is_large is False


def test_large_file_flag(analyzer, write_files):
    write_files({"big.md": 151})
    assert analyzer.analyze_file("big.md").is_large is True


def test_missing_file_skipped(analyzer, write_files):
    write_files({"a.ts": 1, "b.md": 2})
    skipped = []

    records = analyzer.analyze_files(["a.ts", "gone.ts", "b.md"], on_skip=skipped.append)

    assert [r.path for r in records] == ["a.ts", "b.md"]
    assert [e.path for e in skipped] == ["gone.ts"]


def test_category_filter(analyzer, write_files):
    paths = write_files({"a.ts": 1, "b.md": 2, ".env": 3})

    records = analyzer.analyze_files(paths, category_filter={"docs", "misc"})

    assert [(r.path, r.category) for r in records] == [("b.md", "docs"), (".env", "misc")]


def test_summarize(analyzer, write_files):
    paths = write_files({"b.md": 10, "a.ts": 20, "c.ts": 200})
    records = analyzer.analyze_files(paths)

    summary = FileAnalyzer.summarize(records)

    assert list(summary.counts.items()) == [("docs", 1), ("source", 2)]
    assert summary.total_size == 230
    assert summary.total_files == 3
    assert summary.large_files == ["c.ts"]
