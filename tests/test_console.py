"""Tests for console output and user interaction."""

import io
from unittest.mock import patch

import pytest
from rich.console import Console

from batchcommit.cli import console
from batchcommit.config.settings import Settings
from batchcommit.core.analyzer import FileAnalyzer, FileRecord
from batchcommit.core.batch import Batch
from batchcommit.core.git import PushError, RepositoryInfo
from batchcommit.core.push import PushAccount, PushAttempt
from batchcommit.core.runner import BatchCommitRunner, ProcessingResult, RunOptions
from batchcommit.errors import AnalysisError


@pytest.fixture
def mock_console(mocker):
    """Fixture for mocked console."""
    return mocker.patch("batchcommit.cli.console.console")


@pytest.fixture
def batch():
    return Batch(
        category="source",
        files=(FileRecord("a.ts", "source", 100, ".ts"), FileRecord("[b].ts", "source", 2048, ".ts")),
        commit_message="💻 Add 2 source code",
    )


def printed(mock_console) -> str:
    return "\n".join(str(c.args[0]) for c in mock_console.print.call_args_list if c.args)


def test_format_file_size():
    assert console.format_file_size(0) == "0 B"
    assert console.format_file_size(100) == "100 B"
    assert console.format_file_size(1024) == "1.00 KB"
    assert console.format_file_size(1024 * 1024) == "1.00 MB"
    assert console.format_file_size(1024 * 1024 * 1024) == "1.00 GB"


def test_print_dry_run_preview(mock_console, batch):
    console.print_dry_run_preview([batch])

    output = printed(mock_console)
    assert "Batch 1" in output
    assert "2.00 KB" in output
    assert "1 commits would be created" in output


def test_print_analysis_summary(mock_console):
    records = [FileRecord("a.ts", "source", 10, ".ts"), FileRecord("x", "unknown", 5, "", True)]

    console.print_analysis_summary(FileAnalyzer.summarize(records), Settings())

    output = printed(mock_console)
    assert "source" in output
    assert "15 B" in output
    assert "Large file" in output


def test_print_processing_results(mock_console):
    result = ProcessingResult(
        commit_count=3,
        files_processed=4,
        errors=("Push 1: Failed to push to remote: timeout",),
        duration_ms=1500,
        failed_push_count=1,
    )

    console.print_processing_results(result)

    output = printed(mock_console)
    assert "3 commits created" in output
    assert "1.5s" in output
    assert "Push 1" in output
    assert "git push" in output


def test_print_repository_info(mock_console):
    console.print_repository_info(RepositoryInfo("widgets", "main", ["origin"], False, 2))
    assert "uncommitted changes" in printed(mock_console)


def test_print_settings():
    console.print_settings(Settings())


@patch("rich.prompt.Confirm.ask")
def test_confirm_action(mock_ask):
    """Test action confirmation."""
    mock_ask.return_value = True
    assert console.confirm_action("Test action?") is True
    mock_ask.assert_called_once()


def test_print_messages():
    console.print_success("Success message")
    console.print_error("Error message")
    console.print_info("Info message")
    console.print_warning("Warning message")


class TestConsoleReporter:
    """The reporter renders every lifecycle event."""

    def test_batch_lifecycle(self, mock_console, batch, mocker):
        mocker.patch("batchcommit.cli.console.create_progress")
        reporter = console.ConsoleReporter()

        reporter.run_started([batch])
        reporter.batch_started(1, 1, batch)
        reporter.stage_progress(2, 2)
        reporter.batch_committed(1, batch, "abcdef0123456789", 0.25)

        output = printed(mock_console)
        assert "Batch 1/1" in output
        assert "abcdef0" in output
        assert reporter._progress is None

    def test_batch_failed(self, mock_console, batch, mocker):
        mocker.patch("batchcommit.cli.console.create_progress")
        reporter = console.ConsoleReporter()
        reporter.batch_started(1, 1, batch)
        reporter.batch_failed(1, batch, PushError("boom"))

        assert "boom" in printed(mock_console)
        assert reporter._progress is None

    def test_push_events(self, mock_console):
        reporter = console.ConsoleReporter()
        attempt = PushAttempt(1, 2, 300, "final batch")

        reporter.push_budget(PushAccount(bytes_since_last_push=500), 1000)
        reporter.push_started(attempt)
        reporter.push_failed(PushAttempt(1, 2, 300, "final batch", error="denied"))
        reporter.cooldown(1.0)

        output = printed(mock_console)
        assert "50.0%" in output
        assert "final batch" in output
        assert "denied" in output

    def test_file_skipped(self, mock_console):
        console.ConsoleReporter().file_skipped(AnalysisError("gone.ts", "No such file"))
        assert "gone.ts" in printed(mock_console)

    def test_bracketed_text_is_printed_literally(self, mocker):
        output = Console(file=io.StringIO(), width=200)
        mocker.patch("batchcommit.cli.console.console", output)
        reporter = console.ConsoleReporter()

        reporter.file_skipped(AnalysisError("gone[/x].ts", "No such file"))
        reporter.pull_failed(PushError("fatal: [remote rejected]"))
        reporter.push_failed(PushAttempt(1, 1, 10, "final batch", error="! [rejected] main -> main"))

        text = output.file.getvalue()
        assert "gone[/x].ts" in text
        assert "[remote rejected]" in text
        assert "! [rejected] main -> main" in text


class TestConsoleReporterInRun:
    """Git and filesystem text never breaks a run through the reporter."""

    def test_markup_like_path_and_stderr(self, fake_git, settings, write_files, mocker):
        output = Console(file=io.StringIO(), width=200)
        mocker.patch("batchcommit.cli.console.console", output)
        mocker.patch("batchcommit.cli.console.create_progress")
        fake_git.untracked = write_files({"x[/y].md": 10, "b.ts": 10})
        fake_git.failing_stage = {"x[/y].md"}
        mocker.patch.object(
            fake_git, "push", side_effect=PushError("! [rejected] main -> main (fetch first)")
        )
        runner = BatchCommitRunner(
            fake_git,
            settings,
            reporter=console.ConsoleReporter(),
            sleep=lambda seconds: None,
            clock=lambda: 0.0,
        )

        result = runner.run(RunOptions(pull=False))
        console.print_processing_results(result)

        assert result.commit_count == 1
        assert [message for message, _ in fake_git.commits] == ["💻 Add b.ts"]
        assert result.failed_push_count == 1
        text = output.file.getvalue()
        assert "x[/y].md" in text
        assert "[rejected]" in text
