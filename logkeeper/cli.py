"""
Command line entry point for Log Keeper.

Usage:
    logkeeper
    logkeeper --dry-run
    logkeeper --local-dir storage/logs --remote-dir /mnt/archive --remote-path proj1-prod
    python -m logkeeper --today 2024-03-01 --continue-on-error
"""

from __future__ import annotations

import argparse
import sys
from dataclasses import replace
from datetime import date, datetime
from pathlib import Path

from loguru import logger

from logkeeper.errors import ConfigurationError
from logkeeper.retention.engine import RetentionEngine, RunReport
from logkeeper.storage.filesystem import FilesystemLogStore
from logkeeper.utils.config import LogKeeperConfig, get_config


def action_log_path(log_dir: Path, today: date) -> Path:
    """Path of the dated action log for a run."""
    return Path(log_dir) / f"log-keeper-{today.isoformat()}.log"


def _parse_date(value: str) -> date:
    try:
        return datetime.strptime(value, "%Y-%m-%d").date()
    except ValueError as e:
        raise argparse.ArgumentTypeError(f"expected YYYY-MM-DD, got {value!r}") from e


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Log Keeper - compress, upload and expire dated log files",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  Run with settings from LOG_KEEPER_* environment variables:
    logkeeper

  Show what would happen without touching any file:
    logkeeper --dry-run

  Archive to a mounted share, under a per-environment folder:
    logkeeper --remote-dir /mnt/archive --remote-path proj1-prod
""",
    )
    parser.add_argument(
        "--local-dir",
        type=str,
        help="Directory holding the raw logs (default: LOG_KEEPER_LOCAL_DIR)",
    )
    parser.add_argument(
        "--remote-dir",
        type=str,
        help="Directory used as the remote store (default: LOG_KEEPER_REMOTE_DIR)",
    )
    parser.add_argument(
        "--remote-path",
        type=str,
        help="Sub-folder inside the remote directory (default: LOG_KEEPER_REMOTE_PATH)",
    )
    parser.add_argument(
        "--today",
        type=_parse_date,
        metavar="YYYY-MM-DD",
        help="Reference date for age calculation (default: today)",
    )
    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Only report what would be done",
    )
    parser.add_argument(
        "--continue-on-error",
        action="store_true",
        help="Log a failing file and move on instead of aborting",
    )
    parser.add_argument(
        "--quiet",
        "-q",
        action="store_true",
        help="Suppress output except errors",
    )
    return parser


def _apply_overrides(config: LogKeeperConfig, args: argparse.Namespace) -> LogKeeperConfig:
    overrides = {}
    if args.local_dir:
        overrides["local_dir"] = Path(args.local_dir)
    if args.remote_dir:
        overrides["remote_dir"] = Path(args.remote_dir)
    if args.remote_path is not None:
        overrides["remote_path"] = args.remote_path
    return replace(config, **overrides)


def _print_summary(report: RunReport) -> None:
    prefix = "[dry run] " if report.dry_run else ""
    print(f"{prefix}Log Keeper run for {report.today.isoformat()}")
    print(f"  Uploaded:       {len(report.uploaded)}")
    print(f"  Deleted local:  {len(report.deleted_local)}")
    print(f"  Deleted remote: {len(report.deleted_remote)}")
    print(f"  Kept:           {len(report.kept)}")
    if report.skipped:
        print(f"  Skipped:        {len(report.skipped)}")
    if report.errors:
        print(f"  Errors:         {len(report.errors)}")
        for error in report.errors:
            print(f"    - {error}")


def main(argv: list[str] | None = None) -> int:
    """
    CLI entry point.

    Returns:
        Exit code (0 for success, 1 for failure)
    """
    parser = _build_parser()
    args = parser.parse_args(argv)

    # Configure logging
    if args.quiet:
        logger.remove()
        logger.add(sys.stderr, level="ERROR")

    sink_id = None
    try:
        config = _apply_overrides(get_config(), args)
        today = args.today or date.today()

        # A dry run must not add a dated .log file to the store it simulates
        if config.log_actions and not args.dry_run:
            log_file = action_log_path(config.action_log_dir, today)
            log_file.parent.mkdir(parents=True, exist_ok=True)
            sink_id = logger.add(log_file, level="INFO")

        remote_store = None
        if config.enabled and config.enabled_remote:
            if config.remote_dir is None:
                raise ConfigurationError(
                    "Remote operations are enabled but no remote directory is configured "
                    "(set LOG_KEEPER_REMOTE_DIR or pass --remote-dir)"
                )
            remote_store = FilesystemLogStore(config.remote_dir, prefix=config.remote_path)

        engine = RetentionEngine(
            config.policy(),
            local_store=FilesystemLogStore(config.local_dir),
            remote_store=remote_store,
            today=today,
            dry_run=args.dry_run,
            continue_on_error=args.continue_on_error,
        )
        report = engine.run()

    except Exception as e:
        logger.error(f"Log Keeper run failed: {e}")
        print(f"Error: {e}", file=sys.stderr)
        return 1

    finally:
        if sink_id is not None:
            logger.remove(sink_id)

    if not args.quiet:
        _print_summary(report)

    return 0 if report.success else 1


if __name__ == "__main__":
    sys.exit(main())
