#!/usr/bin/env python3
"""Entry point for running batchcommit as a module."""

import sys
from typing import NoReturn

import click
from rich.markup import escape

from .cli import console
from .cli.cli_handler import BatchCommit
from .errors import SetupError


def handle_error(error: BaseException) -> NoReturn:
    """Handle errors in a consistent way."""
    if isinstance(error, KeyboardInterrupt):
        console.print_error("\nOperation cancelled by user.")
    elif isinstance(error, SetupError):
        console.print_error(escape(str(error)))
    else:
        console.print_error(f"An error occurred: {escape(str(error))}")
    sys.exit(1)


@click.group()
@click.option("-D", "--debug", is_flag=True, help="Enable debug logging")
@click.option("--no-header", is_flag=True, help="Skip header display")
@click.version_option(package_name="batchcommit")
@click.pass_context
def main(ctx: click.Context, debug: bool, no_header: bool) -> None:
    """Batch untracked files into typed commits and push under a size budget."""
    console.setup_logging(debug)
    if not no_header:
        console.print_header()
    ctx.obj = BatchCommit()


@main.command()
@click.option("-n", "--dry-run", is_flag=True, help="Preview actions without executing")
@click.option(
    "-b", "--batch-size", type=click.IntRange(min=1), help="Override batch size for every file type"
)
@click.option("-t", "--type", "types", multiple=True, help="Process only this file type (repeatable)")
@click.option("--no-pull", is_flag=True, help="Skip pulling before processing")
@click.option("-y", "--yes", is_flag=True, help="Skip confirmation prompt")
@click.pass_obj
def run(
    app: BatchCommit, dry_run: bool, batch_size: int | None, types: tuple[str, ...], no_pull: bool, yes: bool
) -> None:
    """Run batch commit automation."""
    try:
        result = app.run(
            dry_run=dry_run,
            batch_size=batch_size,
            types=types,
            pull=not no_pull,
            auto_confirm=yes,
        )
    except (KeyboardInterrupt, Exception) as e:
        handle_error(e)

    if result is not None and not result.success:
        sys.exit(1)


@main.command()
@click.option("-f", "--force", is_flag=True, help="Overwrite an existing configuration")
@click.pass_obj
def init(app: BatchCommit, force: bool) -> None:
    """Initialize BatchCommit in the current repository."""
    try:
        app.init(force=force)
    except (KeyboardInterrupt, Exception) as e:
        handle_error(e)


@main.command()
@click.option("-l", "--list", "list_", is_flag=True, help="List all configuration")
@click.option("-g", "--get", "key", help="Get a configuration value (dotted key)")
@click.option("-s", "--set", "assignment", help="Set a configuration value (key=value)")
@click.option("-r", "--reset", is_flag=True, help="Reset to default configuration")
@click.option("-y", "--yes", is_flag=True, help="Skip confirmation prompt")
@click.pass_obj
def config(
    app: BatchCommit, list_: bool, key: str | None, assignment: str | None, reset: bool, yes: bool
) -> None:
    """Manage BatchCommit configuration."""
    try:
        if key:
            app.get_config(key)
        elif assignment:
            app.set_config(assignment)
        elif reset:
            app.reset_config(auto_confirm=yes)
        else:
            app.list_config()
    except (KeyboardInterrupt, Exception) as e:
        handle_error(e)


if __name__ == "__main__":
    main()
