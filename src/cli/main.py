"""Main CLI entry point for the clickup-sync command.

This module provides the Typer application that serves as the entry point
for the clickup-sync command-line tool. It uses options on the main command
rather than subcommands for a simpler user experience.
"""

import logging
import sys
from datetime import datetime
from pathlib import Path
from typing import Optional

import typer

from src.cli.errors import InitError
from src.cli.init_command import InitCommand
from src.cli.models import ExitCode
from src.cli.output import OutputHandler
from src.cli.sync_command import SyncCommand
from src.cli.watcher import DEFAULT_DEBOUNCE_SECONDS

app = typer.Typer(
    name="clickup-sync",
    help="Sync a vault of Markdown notes with ClickUp Docs.",
    add_completion=False,
    rich_markup_mode=None,
    no_args_is_help=False,
)

logger = logging.getLogger(__name__)

VERSION = "0.1.0"


def _configure_logging(verbosity: int, logdir: Optional[str] = None) -> None:
    """Configure logging based on verbosity level.

    Configures only the 'src' namespace logger to avoid affecting third-party
    libraries. The root logger is left unchanged.

    Args:
        verbosity: Verbosity level (0=WARNING, 1=INFO, 2=DEBUG)
        logdir: Optional directory for log files (creates timestamped log file)
    """
    if verbosity <= 0:
        level = logging.WARNING
    elif verbosity == 1:
        level = logging.INFO
    else:
        level = logging.DEBUG

    app_logger = logging.getLogger("src")
    app_logger.setLevel(level)
    for handler in list(app_logger.handlers):
        app_logger.removeHandler(handler)
        handler.close()

    date_format = "%Y-%m-%d %H:%M:%S"
    formatter = logging.Formatter("%(asctime)s [%(levelname)8s] %(message)s", datefmt=date_format)

    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setLevel(level)
    console_handler.setFormatter(formatter)
    app_logger.addHandler(console_handler)

    if logdir:
        log_path = Path(logdir)
        log_path.mkdir(parents=True, exist_ok=True)

        timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
        log_file = log_path / f"clickup-sync_{timestamp}.log"

        file_formatter = logging.Formatter(
            "%(asctime)s - %(name)s - %(levelname)s - %(message)s", datefmt=date_format
        )
        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        file_handler.setLevel(level)
        file_handler.setFormatter(file_formatter)
        app_logger.addHandler(file_handler)

        logger.info(f"Logging to file: {log_file}")


def _run_init(
    vault: str,
    doc_id: str,
    local_folder: str,
    parent_page_id: Optional[str],
    output: OutputHandler,
) -> None:
    """Add a sync target and exit."""
    try:
        init_cmd = InitCommand(vault_root=vault)
        added = init_cmd.run(doc_id=doc_id, folder_path=local_folder, parent_page_id=parent_page_id)
        if added:
            output.success(f"Added sync target '{local_folder or '.'}' -> ClickUp Doc {doc_id}")
        else:
            output.warning(f"Sync target '{local_folder or '.'}' -> ClickUp Doc {doc_id} already configured")
        output.info(f"  Config file: {init_cmd.config_path}")
        raise typer.Exit(ExitCode.SUCCESS)

    except InitError as e:
        logger.error(f"Initialization failed: {e}")
        output.error(f"Initialization failed: {e}")
        raise typer.Exit(ExitCode.GENERAL_ERROR)


@app.command()
def main_command(
    file: Optional[str] = typer.Argument(
        None,
        help="Optional file path to sync (syncs only this file)",
    ),
    vault: str = typer.Option(
        ".",
        "--vault",
        help="Vault root directory",
        metavar="PATH",
    ),
    init: bool = typer.Option(
        False,
        "--init",
        help="Add a sync target (requires --doc and --local)",
    ),
    doc_id: Optional[str] = typer.Option(
        None,
        "--doc",
        help="ClickUp Doc id (used with --init)",
        metavar="ID",
    ),
    local_folder: Optional[str] = typer.Option(
        None,
        "--local",
        help="Vault folder for the target, '.' for the vault root (used with --init)",
        metavar="FOLDER",
    ),
    parent_page: Optional[str] = typer.Option(
        None,
        "--parent-page",
        help="With --init: parent of new pages. With --download: download only this page's children",
        metavar="ID",
    ),
    download: bool = typer.Option(
        False,
        "--download",
        help="Download the target's ClickUp Doc into its folder",
    ),
    target: int = typer.Option(
        0,
        "--target",
        help="Index of the sync target to download into (used with --download)",
        metavar="N",
    ),
    cleanup: bool = typer.Option(
        False,
        "--cleanup",
        help="Remove mapping entries for deleted files and removed docs",
    ),
    watch: bool = typer.Option(
        False,
        "--watch",
        help="Sync Markdown files as they are saved (runs until Ctrl+C)",
    ),
    force: bool = typer.Option(
        False,
        "--force",
        help="With --watch: watch even if sync_on_save is false in the configuration",
    ),
    logdir: Optional[str] = typer.Option(
        None,
        "--logdir",
        help="Directory for log files (creates timestamped log file)",
    ),
    verbosity: int = typer.Option(
        0,
        "--verbosity",
        "-v",
        help="Verbosity level: 0=summary, 1=info, 2=debug",
    ),
    no_color: bool = typer.Option(
        False,
        "--no-color",
        help="Disable colored output",
    ),
    version: bool = typer.Option(
        False,
        "--version",
        "-V",
        help="Show version and exit",
    ),
) -> None:
    """Sync a vault of Markdown notes with ClickUp Docs.

    \b
    QUICK START:
      clickup-sync --init --doc <doc_id> --local Notes   # Add a sync target
      clickup-sync                                       # Upload all targets
      clickup-sync Notes/plan.md                         # Upload one file
      clickup-sync --download --target 0                 # Download a doc
      clickup-sync --cleanup                             # Drop stale mappings
      clickup-sync --watch                               # Sync on save

    \b
    ENVIRONMENT:
      CLICKUP_API_KEY, CLICKUP_WORKSPACE_ID (a .env file is read if present)
    """
    if version:
        typer.echo(f"clickup-sync version {VERSION}")
        raise typer.Exit()

    modes = [name for name, flag in (
        ("--init", init), ("--download", download), ("--cleanup", cleanup), ("--watch", watch)
    ) if flag]
    if len(modes) > 1:
        typer.echo(f"Error: {' and '.join(modes)} cannot be combined", err=True)
        raise typer.Exit(ExitCode.GENERAL_ERROR)
    if file is not None and modes:
        typer.echo(f"Error: a FILE argument cannot be combined with {modes[0]}", err=True)
        raise typer.Exit(ExitCode.GENERAL_ERROR)
    if force and not watch:
        typer.echo("Error: --force is only valid with --watch", err=True)
        raise typer.Exit(ExitCode.GENERAL_ERROR)

    _configure_logging(verbosity, logdir)
    output = OutputHandler(verbosity=verbosity, no_color=no_color)

    if init or doc_id is not None or local_folder is not None:
        missing = []
        if not init:
            missing.append("--init")
        if doc_id is None:
            missing.append("--doc")
        if local_folder is None:
            missing.append("--local")
        if missing:
            typer.echo(f"Error: Missing required option(s): {', '.join(missing)}", err=True)
            typer.echo("")
            typer.echo("Example:")
            typer.echo("  clickup-sync --init --doc abc-123 --local Notes")
            raise typer.Exit(ExitCode.GENERAL_ERROR)

        _run_init(vault, doc_id, local_folder, parent_page, output)
        return

    sync_cmd = SyncCommand(vault_root=vault, output_handler=output)

    if download:
        exit_code = sync_cmd.run_download(target_index=target, parent_page_id=parent_page)
    elif cleanup:
        exit_code = sync_cmd.run_cleanup()
    elif watch:
        exit_code = sync_cmd.run_watch(debounce=DEFAULT_DEBOUNCE_SECONDS, force=force)
    else:
        exit_code = sync_cmd.run_sync(single_file=file)

    raise typer.Exit(exit_code)


def main() -> None:
    """Main entry point for the CLI application.

    This function is called when the module is executed directly or
    when the console script is invoked.
    """
    app()


# Allow running as: python -m src.cli.main
if __name__ == "__main__":
    main()
