"""Batch commit orchestration."""

import logging
import time
from collections.abc import Callable, Collection
from dataclasses import dataclass, field, replace

from ..config.settings import Settings
from ..errors import SetupError
from .analyzer import FileAnalyzer, FileRecord
from .batch import Batch, BatchPartitioner
from .classifier import FileClassifier
from .git import GitError, GitOperations
from .progress import ProgressReporter
from .push import FlushController

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RunOptions:
    """Options for a single run."""

    dry_run: bool = False
    batch_size_override: int | None = None
    category_filter: Collection[str] | None = None
    pull: bool = True


@dataclass(frozen=True)
class ProcessingResult:
    """Final summary of a run."""

    commit_count: int
    files_processed: int
    errors: tuple[str, ...]
    duration_ms: int
    push_count: int = 0
    failed_push_count: int = 0
    batches: tuple[Batch, ...] = field(default=(), repr=False)
    records: tuple[FileRecord, ...] = field(default=(), repr=False)
    dry_run: bool = False

    @property
    def success(self) -> bool:
        return not self.errors


class BatchCommitRunner:
    """Commits untracked files in category batches and pushes under a size budget."""

    def __init__(
        self,
        git: GitOperations,
        settings: Settings,
        reporter: ProgressReporter | None = None,
        sleep: Callable[[float], None] = time.sleep,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.git = git
        self.settings = settings
        self.reporter = reporter or ProgressReporter()
        self.sleep = sleep
        self.clock = clock
        self.classifier = FileClassifier(settings.categories)
        self.partitioner = BatchPartitioner(settings.categories)

    def _validate_options(self, options: RunOptions) -> None:
        if options.batch_size_override is not None and options.batch_size_override < 1:
            raise SetupError("Batch size must be at least 1")
        if options.category_filter:
            unknown = sorted(set(options.category_filter) - set(self.settings.category_ids))
            if unknown:
                raise SetupError(f"Unknown file type(s): {', '.join(unknown)}")

    def plan(self, options: RunOptions) -> tuple[list[FileRecord], list[Batch]]:
        """Analyze untracked files and partition them, without touching the index."""
        paths = self.git.get_untracked_files()
        analyzer = FileAnalyzer(self.classifier, root=self.git.cwd)
        records = analyzer.analyze_files(
            paths,
            category_filter=options.category_filter,
            on_skip=self.reporter.file_skipped,
        )
        batches = self.partitioner.partition(records, options.batch_size_override)
        return records, batches

    def run(self, options: RunOptions | None = None) -> ProcessingResult:
        """
        Run the batch commit pipeline.

        Raises:
            SetupError: if the working directory is not a repository or the
                options are invalid. Every other failure is collected into
                ProcessingResult.errors.
        """
        options = options or RunOptions()
        start = self.clock()

        if not self.git.is_repository():
            raise SetupError("Not a git repository. Initialize with 'git init' first.")
        self._validate_options(options)

        if options.pull and not options.dry_run:
            self.pull()

        try:
            records, batches = self.plan(options)
        except GitError as e:
            raise SetupError(str(e))

        if options.dry_run or not batches:
            return ProcessingResult(
                commit_count=0,
                files_processed=0,
                errors=(),
                duration_ms=self._elapsed_ms(start),
                batches=tuple(batches),
                records=tuple(records),
                dry_run=options.dry_run,
            )

        return self._process_batches(records, batches, start)

    def pull(self) -> bool:
        """Pull from the remote, reporting a failure instead of raising it."""
        try:
            self.git.pull()
        except GitError as e:
            logger.warning("Pull failed, continuing with local processing: %s", e)
            self.reporter.pull_failed(e)
            return False
        return True

    def execute(self, plan: ProcessingResult) -> ProcessingResult:
        """
        Commit and push the batches of an approved dry-run plan.

        The plan is not recomputed, so what gets committed is exactly what
        was previewed.
        """
        if not plan.batches:
            return replace(plan, dry_run=False)
        return self._process_batches(list(plan.records), list(plan.batches), self.clock())

    def _process_batches(
        self, records: list[FileRecord], batches: list[Batch], start: float
    ) -> ProcessingResult:
        controller = FlushController(
            self.git,
            max_push_size=self.settings.max_push_size,
            remote=self.settings.remote,
            cooldown=self.settings.push_cooldown,
            sleep=self.sleep,
            reporter=self.reporter,
        )
        errors: list[str] = []
        commit_count = 0
        files_processed = 0
        last_committed = False

        self.reporter.run_started(batches)
        total = len(batches)
        for index, batch in enumerate(batches, start=1):
            is_last = index == total
            batch_start = self.clock()
            self.reporter.batch_started(index, total, batch)

            try:
                self.git.stage_files(batch.paths, on_progress=self.reporter.stage_progress)
                commit_id = self.git.create_commit(batch.commit_message)
            except GitError as e:
                logger.error("Batch %d failed: %s", index, e)
                errors.append(f"Batch {index}: {e}")
                self.reporter.batch_failed(index, batch, e)
                self._reset_index()
                last_committed = False
                continue

            commit_count += 1
            files_processed += len(batch)
            last_committed = True
            self.reporter.batch_committed(
                index, batch, commit_id, self.clock() - batch_start
            )

            attempt = controller.record_commit(batch.total_size, is_last)
            if attempt and not attempt.succeeded:
                errors.append(f"Push {attempt.number}: {attempt.error}")

        # The final batch failed, but earlier commits may still be waiting
        if not last_committed:
            attempt = controller.maybe_flush(is_last=True)
            if attempt and not attempt.succeeded:
                errors.append(f"Push {attempt.number}: {attempt.error}")

        return ProcessingResult(
            commit_count=commit_count,
            files_processed=files_processed,
            errors=tuple(errors),
            duration_ms=self._elapsed_ms(start),
            push_count=controller.account.push_count,
            failed_push_count=controller.account.failed_push_count,
            batches=tuple(batches),
            records=tuple(records),
        )

    def _reset_index(self) -> None:
        try:
            self.git.reset_staged_changes()
        except GitError as e:
            logger.error("Failed to reset staged changes: %s", e)

    def _elapsed_ms(self, start: float) -> int:
        return int((self.clock() - start) * 1000)


def run_batch_commit(
    git: GitOperations,
    settings: Settings,
    options: RunOptions | None = None,
    reporter: ProgressReporter | None = None,
) -> ProcessingResult:
    """Convenience wrapper around BatchCommitRunner.run."""
    return BatchCommitRunner(git, settings, reporter=reporter).run(options)
