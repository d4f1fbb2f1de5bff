#!/usr/bin/env python3
"""Main CLI module for BatchCommit."""

import logging
from pathlib import Path

from rich.markup import escape

from ..config.settings import (
    ConfigError,
    Settings,
    config_exists,
    get_config_path,
    get_value,
    load_settings,
    parse_value,
    save_settings,
    set_value,
)
from ..core.analyzer import FileAnalyzer
from ..core.git import GitError, GitOperations
from ..core.runner import BatchCommitRunner, ProcessingResult, RunOptions
from ..errors import SetupError
from . import console

logger = logging.getLogger(__name__)


class BatchCommit:
    """Main application class."""

    def __init__(self, root: str | Path | None = None):
        """Initialize BatchCommit for a repository root."""
        self.root = Path(root) if root else Path.cwd()

    def run(
        self,
        dry_run: bool = False,
        batch_size: int | None = None,
        types: tuple[str, ...] = (),
        pull: bool = True,
        auto_confirm: bool = False,
    ) -> ProcessingResult | None:
        """
        Run batch commit automation.

        Raises:
            SetupError: if the directory is not a repository or is not initialized
        """
        settings = load_settings(self.root)
        git = GitOperations(self.root, chunk_size=settings.stage_chunk_size)
        if not git.is_repository():
            raise SetupError("Not a git repository. Initialize with 'git init' first.")

        try:
            console.print_repository_info(git.get_repository_info())
        except GitError as e:
            logger.debug("Could not read repository info: %s", e)

        runner = BatchCommitRunner(git, settings, reporter=console.ConsoleReporter())
        if pull and not dry_run:
            runner.pull()

        # The previewed plan is the one committed after confirmation
        preview = runner.run(RunOptions(
            dry_run=True,
            batch_size_override=batch_size,
            category_filter=set(types) or None,
        ))
        if not preview.batches:
            console.print_success("No untracked files found. Repository is up to date!")
            return preview

        console.print_analysis_summary(FileAnalyzer.summarize(list(preview.records)), settings)

        if dry_run:
            console.print_dry_run_preview(list(preview.batches))
            return preview

        console.print_info(f"{len(preview.batches)} commits will be created.")
        if not auto_confirm and not console.confirm_action("Proceed with batch commit?"):
            console.print_warning("Operation cancelled.")
            return None

        result = runner.execute(preview)
        console.print_processing_results(result)
        return result

    def init(self, force: bool = False) -> Path | None:
        """Write the default configuration."""
        if config_exists(self.root) and not force:
            location = escape(str(get_config_path(self.root)))
            console.print_warning(f"Already initialized ({location}). Use --force to overwrite.")
            return None

        path = save_settings(Settings(), self.root)
        console.print_success(f"Configuration written to {escape(str(path))}")
        return path

    def list_config(self) -> None:
        console.print_settings(load_settings(self.root))

    def get_config(self, key: str) -> object:
        value = get_value(load_settings(self.root).to_dict(), key)
        if value is None:
            raise ConfigError(f"Configuration key '{key}' not found")
        console.console.print_json(data=value)
        return value

    def set_config(self, assignment: str) -> Settings:
        """Apply a KEY=VALUE assignment and save the validated result."""
        key, sep, raw = assignment.partition("=")
        if not sep or not key or not raw:
            raise ConfigError("Invalid format. Use: --set key=value")

        data = load_settings(self.root, apply_env=False).to_dict()
        set_value(data, key, parse_value(raw))
        settings = Settings.from_dict(data)
        save_settings(settings, self.root)
        console.print_success(f"Set {escape(key)} = {escape(raw)}")
        return settings

    def reset_config(self, auto_confirm: bool = False) -> bool:
        if not config_exists(self.root):
            raise ConfigError("Not initialized. Run 'batchcommit init' first.")
        if not auto_confirm and not console.confirm_action(
            "Reset all configuration to defaults?"
        ):
            console.print_warning("Reset cancelled")
            return False
        save_settings(Settings(), self.root)
        console.print_success("Configuration reset to defaults")
        return True
