"""Bulk import from the command line.

Usage:
    zuq-import FILE --type TYPE --user USERNAME [--approve-duplicates] [--dry-run]

The file goes through the same parse, validate and persist steps as the
HTTP import. Duplicates are skipped unless --approve-duplicates is given;
--dry-run stops after validation and prints the preview.
"""

import argparse
import asyncio
import logging
import sys
from dataclasses import dataclass
from pathlib import Path

from zuq.config import settings
from zuq.database import close_db, init_db
from zuq.models.user import User
from zuq.repositories import Repositories, Row
from zuq.repositories.beanie import get_beanie_repositories
from zuq.services.import_service import (
    DATA_TYPES,
    ImportParseError,
    ImportRecord,
    ImportServiceError,
    approve_all_duplicates,
    parse_import_file,
    save_import_data,
    summarize,
    validate_records,
)

logger = logging.getLogger(__name__)


@dataclass
class ImportRun:
    records: list[ImportRecord]
    history: Row | None = None


async def run_import(
    path: Path,
    data_type: str,
    repos: Repositories,
    user_id: str | None,
    approve_duplicates: bool = False,
    dry_run: bool = False,
) -> ImportRun:
    """Parse, validate and (unless dry_run) persist one file."""
    rows = parse_import_file(path.read_bytes(), path.name, max_rows=settings.import_max_rows)
    records = await validate_records(
        rows,
        data_type,
        repos,
        movement_lookback_days=settings.movement_lookback_days,
        order_lookback_days=settings.order_lookback_days,
    )
    if approve_duplicates:
        approve_all_duplicates(records)

    if dry_run:
        return ImportRun(records=records)

    history = await save_import_data(records, data_type, path.name, user_id, repos)
    return ImportRun(records=records, history=history)


def print_preview(records: list[ImportRecord]) -> None:
    """Print the summary line and one line per problem row."""
    summary = summarize(records)
    print(
        f"Total: {summary.total}  Valid: {summary.valid}  Errors: {summary.errors}  "
        f"Duplicates: {summary.duplicates} ({summary.approved_duplicates} approved)  "
        f"Importable: {summary.importable}"
    )
    for index, record in enumerate(records, start=1):
        meta = record.validation
        for error in meta.errors:
            print(f"  Row {index}: ERROR {error}")
        for info in meta.duplicate_info:
            state = "approved" if meta.user_approved else "skipped"
            print(f"  Row {index}: DUPLICATE ({state}) {info}")


async def _lookup_user_id(username: str) -> str | None:
    user = await User.find_one(User.username == username)
    return str(user.id) if user else None


async def _main_async(args: argparse.Namespace) -> int:
    await init_db()
    try:
        user_id = None
        if not args.dry_run:
            user_id = await _lookup_user_id(args.user)
            if user_id is None:
                print(f"Error: User '{args.user}' not found.")
                return 1

        run = await run_import(
            Path(args.file),
            args.type,
            get_beanie_repositories(),
            user_id,
            approve_duplicates=args.approve_duplicates,
            dry_run=args.dry_run,
        )
    finally:
        await close_db()

    print_preview(run.records)
    if run.history is not None:
        print(
            f"Import {run.history['id']} {run.history['status']}: "
            f"{run.history['processed_records']} of {run.history['total_records']} records saved"
        )
    else:
        print("Dry run: nothing was saved.")
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="zuq-import",
        description="Import a CSV or XLSX spreadsheet into ZUQ",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__,
    )
    parser.add_argument("file", help="CSV or XLSX file to import")
    parser.add_argument("--type", "-t", required=True, choices=DATA_TYPES, help="Data type")
    parser.add_argument("--user", "-u", default="admin", help="Username recorded as importer")
    parser.add_argument(
        "--approve-duplicates",
        action="store_true",
        help="Import rows flagged as duplicates of stored data",
    )
    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Validate only; do not save anything",
    )
    return parser


def main(argv: list[str] | None = None) -> int:
    """Main entry point."""
    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s: %(message)s")
    args = build_parser().parse_args(argv)

    if not Path(args.file).is_file():
        print(f"Error: File not found: {args.file}")
        return 1

    try:
        return asyncio.run(_main_async(args))
    except ImportParseError as e:
        print(f"Error: Could not read {args.file}: {e}")
        return 1
    except ImportServiceError as e:
        print(f"Error: Import failed: {e}")
        return 1
    except KeyboardInterrupt:
        print("\nAborted.")
        return 1


if __name__ == "__main__":
    sys.exit(main())
