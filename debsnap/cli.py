"""
Command line entry point.

Usage:
    debsnap backup [--dry-run] [--backup-dir PATH]
    debsnap restore [--dry-run] [--keep-going] [--backup-dir PATH]
"""

import atexit
import logging
import signal
import sys
import time
from pathlib import Path
from typing import Optional

import click

from debsnap import APP_NAME, VERSION
from debsnap.backup import run_backup
from debsnap.config import Config
from debsnap.console import console, create_header, print_error, print_summary, print_warning
from debsnap.dependencies import DependencyChecker
from debsnap.errors import SnapshotError
from debsnap.log import LOGGER_NAME, close_logger, setup_logger
from debsnap.restore import run_restore
from debsnap.steps import StepRunner, StepStatus
from debsnap.tools import SystemTools, Tools

MODES = ("backup", "restore")
USAGE = f"Usage: {APP_NAME} [backup|restore] [--dry-run]"


# ----------------------------------------------------------------
# Signal Handling and Cleanup
# ----------------------------------------------------------------
def signal_handler(signum, frame):
    sig = signal.Signals(signum).name
    print_error(f"Interrupted by {sig}. Cleaning up...")
    logging.getLogger(LOGGER_NAME).error(
        "Run interrupted; backup root and system may be partially updated."
    )
    close_logger()
    sys.exit(
        130
        if signum == signal.SIGINT
        else 143
        if signum == signal.SIGTERM
        else 128 + signum
    )


def install_signal_handlers() -> None:
    for s in (signal.SIGINT, signal.SIGTERM, signal.SIGHUP):
        signal.signal(s, signal_handler)


# ----------------------------------------------------------------
# Main Execution
# ----------------------------------------------------------------
def run(mode: str, config: Config, tools: Tools) -> int:
    """Check dependencies, then back up or restore. Returns the exit status."""
    if mode == "restore" and not config.backup_root.is_dir():
        print_error(f"Backup directory {config.backup_root} not found.")
        return 1

    # A dry run never creates the backup root just to hold its log.
    if config.dry_run and not config.backup_root.is_dir():
        log_file = None
    else:
        log_file = config.log_file
    logger = setup_logger(log_file, config.log_level)
    console.print(create_header(APP_NAME))
    start = time.time()
    logger.info(
        f"{mode.capitalize()} started (root: {config.backup_root}"
        f"{', dry run' if config.dry_run else ''})"
    )
    runner = StepRunner(tools, config)
    try:
        DependencyChecker(config, tools).ensure()
        if mode == "backup":
            run_backup(config, runner)
        else:
            run_restore(config, runner)
    except SnapshotError as e:
        print_summary(runner.outcomes, title=f"{mode.capitalize()} Summary")
        print_error(f"Fatal: {e}")
        logger.error(f"{mode.capitalize()} aborted after {time.time() - start:.1f}s")
        return 1

    print_summary(runner.outcomes, title=f"{mode.capitalize()} Summary")
    logger.info(f"{mode.capitalize()} finished in {time.time() - start:.1f}s")
    if any(o.status is StepStatus.FAILED for o in runner.outcomes):
        print_warning("Some items failed; see the summary above.")
        return 1
    return 0


@click.command(context_settings={"help_option_names": ["-h", "--help"]})
@click.argument("mode", required=False)
@click.option("--dry-run", is_flag=True, help="List planned actions without executing them.")
@click.option(
    "--keep-going",
    is_flag=True,
    help="Keep installing flatpak/snap items after one fails.",
)
@click.option(
    "--backup-dir",
    type=click.Path(file_okay=False, path_type=Path),
    default=None,
    help="Backup root (default: ~/system_backup or $DEBSNAP_BACKUP_DIR).",
)
@click.option("--verbose", "-v", is_flag=True, help="Show debug output on the console.")
@click.version_option(VERSION, prog_name=APP_NAME)
def main(
    mode: Optional[str],
    dry_run: bool,
    keep_going: bool,
    backup_dir: Optional[Path],
    verbose: bool,
) -> None:
    """Snapshot or restore packages, desktop settings and dotfiles."""
    if mode is None and dry_run:
        print_warning("--dry-run given without a mode; nothing to do.")
        return
    if mode not in MODES:
        click.echo(USAGE, err=True)
        sys.exit(1)

    config = Config.from_env(
        backup_root=backup_dir,
        dry_run=dry_run,
        keep_going=keep_going,
        log_level="DEBUG" if verbose else None,
    )
    install_signal_handlers()
    atexit.register(close_logger)
    try:
        status = run(mode, config, SystemTools())
    except Exception:
        console.print_exception()
        status = 1
    sys.exit(status)


if __name__ == "__main__":
    main()
