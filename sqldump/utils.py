"""
Utility functions for the SQL dump engine.
"""

import logging
import sys
from pathlib import Path
from typing import Any

from .models import DumpOptions, DumpStats, TableStatus


def setup_logging(log_settings: dict[str, Any]) -> None:
    """Setup logging configuration."""
    log_level = getattr(logging, log_settings.get('level', 'INFO').upper())
    log_file = log_settings.get('file')

    handlers: list[logging.Handler] = [logging.StreamHandler(sys.stdout)]

    if log_file:
        log_path = Path(log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)
        handlers.append(logging.FileHandler(log_file))

    logging.basicConfig(
        level=log_level,
        format='%(asctime)s - %(levelname)s - %(message)s',
        handlers=handlers
    )


def format_options_display(options: DumpOptions) -> list[str]:
    """Format dump options for display in dry-run mode."""
    parts = []
    if not options.dump_schema:
        parts.append("no schema")
    if not options.dump_data:
        parts.append("no data")
    if options.where_clause:
        parts.append(f"where='{options.where_clause}'")
    table_filter = options.table_filter
    if table_filter.include is not None:
        parts.append(f"include={table_filter.include}")
    if table_filter.include_regex:
        parts.append(f"include_regex={table_filter.include_regex}")
    if table_filter.exclude:
        parts.append(f"exclude={table_filter.exclude}")
    if table_filter.exclude_regex:
        parts.append(f"exclude_regex={table_filter.exclude_regex}")
    parts.append(f"on_error={options.on_error.value}")
    return parts


def print_dry_run_info(databases: list[dict[str, Any]], defaults: dict[str, Any]) -> None:
    """Print information about what would be dumped in dry-run mode."""
    for db in databases:
        logging.info(f"Would dump database: {db['name']} from instance: {db.get('instance', 'primary')}")

        options = DumpOptions.from_configs(defaults, db)
        logging.info(f"  Options: {', '.join(format_options_display(options))}")

        tables = db.get('tables', '*')
        if tables == '*':
            logging.info("  - All tables (subject to include/exclude rules)")
            continue

        for t in tables:
            name = t['name'] if isinstance(t, dict) else t
            where = options.where_for(name)
            if where:
                logging.info(f"  - {name} (where='{where}')")
            else:
                logging.info(f"  - {name}")


def print_summary(stats: DumpStats) -> None:
    """Log the run summary."""
    logging.info("=" * 50)
    logging.info("DUMP COMPLETE")
    logging.info(f"Databases: {len(stats.databases)}")
    logging.info(
        f"Tables: {stats.total_tables} "
        f"(succeeded={stats.count(TableStatus.SUCCEEDED)}, "
        f"failed={stats.count(TableStatus.FAILED)}, "
        f"skipped={stats.count(TableStatus.SKIPPED)})"
    )
    logging.info(f"Total Rows: {stats.total_rows}")
    for db in stats.databases:
        if db.file_path:
            logging.info(f"  {db.name}: {db.file_path} [{db.state.value}]")

    if stats.errors:
        logging.warning(f"Errors: {len(stats.errors)}")
        for err in stats.errors:
            logging.warning(f"  - {err['database']}/{err['table']}: {err['error']}")
