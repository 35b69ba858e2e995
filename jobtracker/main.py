"""Command-line front end for the job application tracker."""

import argparse
import logging
import sys
from pathlib import Path
from typing import Optional, Sequence

from filelock import FileLock, Timeout

from .analytics import summarize
from .config import Config, get_config, load_config
from .csv_codec import export_csv, read_csv
from .errors import FormatError, PersistenceError
from .filters import filter_records
from .models import ApplicationRecord
from .storage import SqliteSlot
from .store import RecordStore

TABLE_COLUMNS = [
    ("Company", 14),
    ("Role", 16),
    ("Status", 12),
    ("Vibe", 4),
    ("Fit", 4),
    ("Tags", 18),
    ("Applied", 10),
]

BAR_WIDTH = 40


def setup_logging() -> None:
    """Configure logging for the application."""
    config = get_config()
    config.log_dir.mkdir(parents=True, exist_ok=True)
    log_file = config.log_dir / "app.log"

    level = getattr(logging, config.log_level.upper(), logging.INFO)

    logging.basicConfig(
        level=level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        handlers=[
            logging.FileHandler(log_file),
            logging.StreamHandler(sys.stderr),
        ],
    )


def build_store(config: Config) -> RecordStore:
    """Create the record store described by config."""
    return RecordStore(
        SqliteSlot(config.db_path),
        key=config.storage_key,
        sample_size=config.sample_size,
    )


def _cell(value: str, width: int) -> str:
    if len(value) > width:
        value = value[: width - 1] + "…"
    return value.ljust(width)


def render_table(records: Sequence[ApplicationRecord]) -> str:
    """Format records as a fixed-width text table."""
    lines = ["  ".join(_cell(name, width) for name, width in TABLE_COLUMNS).rstrip()]
    for r in records:
        values = [r.company, r.role, r.status.value, r.vibe, str(r.fit), r.tags, r.applied]
        lines.append(
            "  ".join(
                _cell(value, width) for value, (_, width) in zip(values, TABLE_COLUMNS)
            ).rstrip()
        )
    return "\n".join(lines)


def render_stats(records: Sequence[ApplicationRecord]) -> str:
    """Format the status summary with one text bar per status."""
    summary = summarize(records)
    lines = [
        f"Total: {summary.total}  Active: {summary.active}  "
        f"Offers: {summary.offers}  Rejected: {summary.rejected}",
        "",
    ]
    peak = max(summary.counts.values(), default=0)
    for status, count in summary.counts.items():
        bar = "#" * (round(count / peak * BAR_WIDTH) if peak else 0)
        lines.append(f"{status:<12} {count:>4} {bar}".rstrip())
    return "\n".join(lines)


def cmd_list(store: RecordStore, args: argparse.Namespace) -> int:
    """Print the filtered applications as a table."""
    visible = filter_records(store.load(), args.query)
    print(render_table(visible))
    return 0


def cmd_stats(store: RecordStore, args: argparse.Namespace) -> int:
    """Print status counts for the filtered applications."""
    visible = filter_records(store.load(), args.query)
    print(render_stats(visible))
    return 0


def cmd_export(store: RecordStore, args: argparse.Namespace) -> int:
    """Write every application to a CSV file."""
    logger = logging.getLogger(__name__)
    output = Path(args.output or get_config().export_filename)
    records = store.load()
    try:
        export_csv(records, output)
    except OSError as e:
        logger.error(f"Cannot write {output}: {e}")
        print(f"Cannot write {output}", file=sys.stderr)
        return 1
    print(f"Exported {len(records)} applications to {output}")
    return 0


def cmd_import(store: RecordStore, args: argparse.Namespace) -> int:
    """Add applications from a CSV file ahead of the existing ones."""
    logger = logging.getLogger(__name__)
    store.load()
    try:
        text = read_csv(args.file)
        imported = store.import_csv(text)
    except OSError as e:
        logger.error(f"Cannot read {args.file}: {e}")
        print(f"Cannot read {args.file}", file=sys.stderr)
        return 1
    except (FormatError, UnicodeDecodeError) as e:
        logger.error(f"Import of {args.file} failed: {e}")
        print("Failed to import CSV. Please check the format.", file=sys.stderr)
        return 1
    print(f"Imported {len(imported)} applications ({len(store)} total)")
    return 0


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser with one subcommand per action."""
    parser = argparse.ArgumentParser(
        prog="jobtracker",
        description="Track job applications and move them in and out of CSV",
    )
    parser.add_argument(
        "--config", type=Path, default=None,
        help="Path to config YAML (default: config/config.yaml if present)",
    )
    sub = parser.add_subparsers(dest="command", required=True)

    p_list = sub.add_parser("list", help="Show applications as a table")
    p_list.add_argument("--query", "-q", default="", help="Free-text filter")
    p_list.set_defaults(handler=cmd_list)

    p_stats = sub.add_parser("stats", help="Show counts per status")
    p_stats.add_argument("--query", "-q", default="", help="Free-text filter")
    p_stats.set_defaults(handler=cmd_stats)

    p_export = sub.add_parser("export", help="Write all applications to CSV")
    p_export.add_argument(
        "--output", "-o", default=None,
        help="Output CSV path (default: job-search-data.csv)",
    )
    p_export.set_defaults(handler=cmd_export)

    p_import = sub.add_parser("import", help="Add applications from a CSV file")
    p_import.add_argument("file", type=Path, help="CSV file to import")
    p_import.set_defaults(handler=cmd_import)

    return parser


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Main entry point with concurrency protection."""
    args = build_parser().parse_args(argv)

    try:
        config = load_config(args.config)
        setup_logging()
    except FileNotFoundError as e:
        print(f"Configuration error: {e}", file=sys.stderr)
        return 1

    logger = logging.getLogger(__name__)
    store = build_store(config)

    try:
        with FileLock(str(config.lock_file), timeout=config.lock_timeout):
            logger.debug(f"Acquired lock, running {args.command}")
            return args.handler(store, args)

    except Timeout:
        logger.warning("Could not acquire lock - another instance is running")
        return 1

    except PersistenceError as e:
        logger.error(f"Could not save applications: {e}")
        return 1


if __name__ == "__main__":
    sys.exit(main())
