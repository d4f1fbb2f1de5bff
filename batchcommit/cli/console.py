"""Console output formatting and user interaction."""

import logging

from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.panel import Panel
from rich.progress import (
    BarColumn,
    Progress,
    SpinnerColumn,
    TaskProgressColumn,
    TextColumn,
)
from rich.prompt import Confirm
from rich.table import Table

from ..config.settings import Settings
from ..core.analyzer import AnalysisSummary
from ..core.batch import Batch
from ..core.git import GitError, RepositoryInfo
from ..core.progress import ProgressReporter
from ..core.push import PushAccount, PushAttempt
from ..core.runner import ProcessingResult
from ..errors import AnalysisError

console = Console()


def setup_logging(debug: bool = False) -> None:
    """Route log records through rich."""
    logging.basicConfig(
        level=logging.DEBUG if debug else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=console, show_path=debug, markup=False)],
        force=True,
    )


def format_file_size(size: float) -> str:
    """Format file size in human readable format."""
    if size == 0:
        return "0 B"
    for unit in ["B", "KB", "MB", "GB"]:
        if size < 1024:
            return f"{size:.2f} {unit}" if unit != "B" else f"{int(size)} B"
        size /= 1024
    return f"{size:.2f} TB"


def create_progress() -> Progress:
    """Create a progress bar with custom styling."""
    return Progress(
        SpinnerColumn(),
        TextColumn("[progress.description]{task.description}"),
        BarColumn(),
        TaskProgressColumn(),
        console=console,
        transient=True,
    )


def print_header() -> None:
    console.print(
        Panel(
            "[bold white]🚀 BatchCommit[/bold white]\n"
            "[dim]Batch untracked files into typed commits and push under a size budget[/dim]",
            expand=False,
            border_style="cyan",
        )
    )


def print_repository_info(info: RepositoryInfo) -> None:
    console.print(f"[blue]📋 Repository:[/blue] {escape(info.name)}")
    console.print(f"[blue]🌿 Branch:[/blue] {escape(info.branch)}")
    if not info.is_clean:
        console.print("[yellow]⚠️ Repository has uncommitted changes[/yellow]")


def print_analysis_summary(summary: AnalysisSummary, settings: Settings) -> None:
    """Print per-category file counts."""
    console.print("\n[bold cyan]📊 File Analysis Summary:[/bold cyan]")
    for category_id, count in summary.counts.items():
        category = settings.category(category_id)
        icon = category.icon if category else "📁"
        console.print(f"  • {icon} {category_id}: [cyan]{count}[/cyan] files")
    console.print(f"  • Total size: [cyan]{format_file_size(summary.total_size)}[/cyan]")
    for path in summary.large_files:
        console.print(f"  [yellow]⚠️ Large file:[/yellow] {escape(path)}")


def print_dry_run_preview(batches: list[Batch]) -> None:
    """Print what a live run would commit."""
    console.print("\n[bold cyan]🔍 DRY RUN MODE - Showing what would be committed:[/bold cyan]\n")
    for index, batch in enumerate(batches, start=1):
        console.print(f"[yellow]📋 Batch {index}:[/yellow] {escape(batch.commit_message)}")
        for file in batch.files:
            console.print(f"   [dim]• {escape(file.path)} ({format_file_size(file.size_bytes)})[/dim]")
        console.print()
    console.print(f"[cyan]🎯 Total: {len(batches)} commits would be created[/cyan]")


def print_processing_results(result: ProcessingResult) -> None:
    console.print("\n[bold cyan]🎉 Processing Complete![/bold cyan]\n")
    console.print(f"[green]✅ Success:[/green] {result.commit_count} commits created")
    console.print(f"[blue]📁 Files:[/blue] {result.files_processed} files processed")
    console.print(f"[blue]🚀 Pushes:[/blue] {result.push_count} successful")
    console.print(f"[blue]⏱️ Duration:[/blue] {result.duration_ms / 1000:.1f}s")

    if result.errors:
        console.print("\n[bold red]❌ Errors:[/bold red]")
        for error in result.errors:
            console.print(f"  [red]•[/red] {escape(error)}")

    if result.failed_push_count:
        console.print("\n[dim]Commits are saved locally. Push manually later with:[/dim] [yellow]git push[/yellow]")


def print_settings(settings: Settings) -> None:
    """Print the current configuration."""
    console.print("\n[bold cyan]📋 Current Configuration:[/bold cyan]\n")
    console.print(f"   Version: {settings.version}")
    console.print(f"   Max Push Size: {format_file_size(settings.max_push_size)}")
    console.print(f"   Push Cooldown: {settings.push_cooldown}s")
    console.print(f"   Remote: {settings.remote}")

    table = Table(title="File Types & Batch Sizes", show_lines=False)
    table.add_column("Id", style="cyan")
    table.add_column("Name")
    table.add_column("Batch", justify="right", style="yellow")
    table.add_column("Extensions", style="dim")
    for category in settings.categories:
        table.add_row(
            escape(category.category_id),
            escape(f"{category.icon} {category.display_name}"),
            str(category.batch_size),
            escape(" ".join(sorted(category.extensions))),
        )
    console.print(table)

    if settings.exclude_patterns:
        console.print("\n[blue]🚫 Exclude Patterns:[/blue]")
        for pattern in settings.exclude_patterns:
            console.print(f"   • {escape(pattern)}")


def confirm_action(prompt: str) -> bool:
    """Ask user to confirm an action."""
    return Confirm.ask(f"\n{prompt}")


def print_success(message: str) -> None:
    """Print success message."""
    console.print(f"\n[bold green]✅ {message}[/bold green]")


def print_error(message: str) -> None:
    """Print error message."""
    console.print(f"\n[bold red]❌ {message}[/bold red]")


def print_info(message: str) -> None:
    """Print info message."""
    console.print(f"\n[bold blue]ℹ️ {message}[/bold blue]")


def print_warning(message: str) -> None:
    """Print warning message."""
    console.print(f"\n[bold yellow]⚠️ {message}[/bold yellow]")


class ConsoleReporter(ProgressReporter):
    """Renders run events with rich."""

    def __init__(self) -> None:
        self._progress: Progress | None = None
        self._task = None

    def file_skipped(self, error: AnalysisError) -> None:
        print_warning(f"Could not analyze file: {escape(error.path)}")

    def pull_failed(self, error: GitError) -> None:
        print_warning(f"Pull failed: {escape(str(error))}")
        console.print("[dim]   Continuing with local processing...[/dim]")

    def run_started(self, batches: list[Batch]) -> None:
        console.print(f"\n[bold cyan]🚀 Processing {len(batches)} batches...[/bold cyan]")

    def batch_started(self, index: int, total: int, batch: Batch) -> None:
        console.print(f"\n[bold blue]📦 Batch {index}/{total}:[/bold blue] {escape(batch.commit_message)}")
        self._progress = create_progress()
        self._progress.start()
        self._task = self._progress.add_task("Staging files", total=len(batch))

    def stage_progress(self, staged: int, total: int) -> None:
        if self._progress is not None:
            self._progress.update(self._task, completed=staged)

    def _stop_progress(self) -> None:
        if self._progress is not None:
            self._progress.stop()
            self._progress = None
            self._task = None

    def batch_committed(self, index: int, batch: Batch, commit_id: str, duration: float) -> None:
        self._stop_progress()
        console.print(
            f"[green]✅ Committed {len(batch)} files ({format_file_size(batch.total_size)})"
            f"[/green] [dim]{commit_id[:7]} in {duration:.1f}s[/dim]"
        )

    def batch_failed(self, index: int, batch: Batch, error: GitError) -> None:
        self._stop_progress()
        console.print(f"[red]❌ Failed: {escape(batch.commit_message)}[/red]")
        console.print(f"[dim]   Error: {escape(str(error))}[/dim]")

    def push_budget(self, account: PushAccount, max_push_size: int) -> None:
        percent = account.bytes_since_last_push / max_push_size * 100
        console.print(
            f"[dim]   Push size: {format_file_size(account.bytes_since_last_push)} / "
            f"{format_file_size(max_push_size)} ({percent:.1f}%)[/dim]"
        )

    def push_started(self, attempt: PushAttempt) -> None:
        console.print(
            f"\n[cyan]🚀 Push {attempt.number}: {attempt.commits} commits "
            f"({format_file_size(attempt.size_bytes)}) - {attempt.reason}[/cyan]"
        )

    def push_succeeded(self, attempt: PushAttempt) -> None:
        console.print(f"[green]✅ Push {attempt.number} successful![/green]")

    def push_failed(self, attempt: PushAttempt) -> None:
        console.print(f"[yellow]⚠️ Push {attempt.number} failed: {escape(str(attempt.error))}[/yellow]")
        console.print("[dim]   Commits are saved locally. You can push manually later with:[/dim] [yellow]git push[/yellow]")

    def cooldown(self, seconds: float) -> None:
        console.print(f"[dim]   Waiting {seconds:.1f}s before continuing...[/dim]")
