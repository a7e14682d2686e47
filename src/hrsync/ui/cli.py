from __future__ import annotations

import argparse
import dataclasses
import logging
import sys
from pathlib import Path
from signal import SIGINT, signal
from typing import TYPE_CHECKING

from dotenv import load_dotenv

from hrsync.app import (
    extract_active_cards,
    run_daily_sync,
    sync_existing_cards,
    sync_new_employees,
)
from hrsync.config import ConfigurationError, configure_logging, get_storage_config

if TYPE_CHECKING:
    from collections.abc import Sequence
    from types import FrameType

    from hrsync.config import StorageConfig

log = logging.getLogger(__name__)


def _parse_args(argv: Sequence[str]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Keep Pipefy employee cards in line with Sinergy")
    parser.add_argument(
        "--snapshot",
        type=Path,
        help="Path of the card snapshot JSON file (defaults to the data directory)",
    )
    parser.add_argument(
        "--debug",
        action="store_true",
        help="Log at DEBUG level and save unusable HR payloads to the debug directory",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    subparsers.add_parser("extract", help="Harvest the active phase cards into the snapshot")
    subparsers.add_parser("sync-existing", help="Update snapshot cards that differ from Sinergy")
    subparsers.add_parser("sync-new", help="Create cards for active employees without one")
    subparsers.add_parser("daily", help="Run extract, sync-existing and sync-new in order")

    return parser.parse_args(list(argv))


def _storage_config(args: argparse.Namespace) -> StorageConfig:
    storage = get_storage_config()
    if args.snapshot is not None:
        storage = dataclasses.replace(storage, snapshot_override=args.snapshot)
    if args.debug:
        storage = dataclasses.replace(storage, debug=True)
    return storage


def main(argv: Sequence[str] | None = None) -> None:
    """Main application entry point."""
    args_list = list(argv) if argv is not None else list(sys.argv[1:])
    parsed_args = _parse_args(args_list)

    try:
        storage = _storage_config(parsed_args)
    except ConfigurationError:
        configure_logging()
        log.exception("Invalid configuration")
        sys.exit(2)
    configure_logging(level=logging.DEBUG if storage.debug else logging.INFO)

    try:
        if parsed_args.command == "extract":
            extraction = extract_active_cards(storage=storage)
            log.info("Saved %s cards to %s", extraction.cards, extraction.snapshot_path)
        elif parsed_args.command == "sync-existing":
            summary = sync_existing_cards(storage=storage)
            log.info("Summary: %s", summary.as_dict())
        elif parsed_args.command == "sync-new":
            creation = sync_new_employees(storage=storage)
            log.info("Summary: %s", creation.as_dict())
        elif parsed_args.command == "daily":
            result = run_daily_sync(storage=storage)
            log.info(
                "Daily sync finished: extracted=%s, reconciliation=%s, creation=%s",
                result.extraction.cards,
                result.reconciliation.as_dict(),
                result.creation.as_dict(),
            )
        else:
            raise ValueError(f"Unsupported command: {parsed_args.command}")  # noqa: TRY301

    except ConfigurationError:
        log.exception("Invalid configuration")
        sys.exit(2)
    except Exception:
        log.exception("Fatal error during sync")
        sys.exit(1)


def sigint_handler(_signal_received: int, _frame: FrameType | None) -> None:
    """Handle SIGINT (Ctrl+C) gracefully."""
    log.info("Closed by user (Ctrl+C)")
    sys.exit(0)


def run() -> None:
    load_dotenv()
    signal(SIGINT, sigint_handler)
    main()


if __name__ == "__main__":
    run()
