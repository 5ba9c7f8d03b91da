#!/usr/bin/env python3
"""
SQL Dump Engine - CLI Entry Point
=================================
Dumps MySQL databases into single replayable SQL files with support for:
- Multiple database instances
- Schema-only and data-only dumps
- Table include/exclude patterns
- WHERE clauses
- Fail-fast or best-effort error handling
"""

import argparse
import logging
import sys

import yaml

from .config import ConfigLoader
from .database_dumper import DatabaseDumper
from .models import ErrorPolicy
from .utils import print_dry_run_info, print_summary, setup_logging


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description='SQL Dump Engine - Replayable MySQL dump tool'
    )
    parser.add_argument(
        '-c', '--config',
        default='config.yaml',
        help='Path to configuration file (default: config.yaml)'
    )
    parser.add_argument(
        '-v', '--verbose',
        action='store_true',
        help='Enable verbose output'
    )
    parser.add_argument(
        '--dry-run',
        action='store_true',
        help='Show what would be dumped without actually dumping'
    )
    parser.add_argument(
        '-d', '--database',
        help='Dump only the specified database (must be defined in config)'
    )
    parser.add_argument(
        '-i', '--instance',
        help='Dump only databases from the specified instance'
    )
    phase = parser.add_mutually_exclusive_group()
    phase.add_argument(
        '--schema-only',
        action='store_true',
        help='Dump table definitions without data'
    )
    phase.add_argument(
        '--data-only',
        action='store_true',
        help='Dump table data without definitions'
    )
    parser.add_argument(
        '--fail-fast',
        action='store_true',
        help='Stop a database dump at the first failed table'
    )
    return parser


def cli_overrides(args: argparse.Namespace) -> dict:
    """Settings from command line flags, overriding the configuration file."""
    overrides = {}
    if args.schema_only:
        overrides['dump_data'] = False
    if args.data_only:
        overrides['dump_schema'] = False
    if args.fail_fast:
        overrides['on_error'] = ErrorPolicy.FAIL_FAST.value
    return overrides


def main(argv=None):
    """Main entry point."""
    args = build_parser().parse_args(argv)

    # Load configuration
    try:
        config = ConfigLoader(args.config)
    except FileNotFoundError:
        print(f"Error: Configuration file '{args.config}' not found")
        sys.exit(1)
    except yaml.YAMLError as e:
        print(f"Error: Invalid YAML in configuration file: {e}")
        sys.exit(1)

    problems = config.validate()
    if problems:
        for problem in problems:
            print(f"Error: {problem}")
        sys.exit(1)

    # Setup logging
    log_settings = config.get_logging_settings()
    if args.verbose:
        log_settings['level'] = 'DEBUG'
    setup_logging(log_settings)

    overrides = cli_overrides(args)

    # Dry run mode
    if args.dry_run:
        logging.info("DRY RUN MODE - No data will be dumped")
        databases = config.get_databases()
        defaults = config.get_defaults()

        # Apply filters for dry run as well
        if args.database:
            databases = [db for db in databases if db['name'] == args.database]
        if args.instance:
            databases = [db for db in databases if db.get('instance', 'primary') == args.instance]
        databases = [{**db, **overrides} for db in databases]

        print_dry_run_info(databases, defaults)
        sys.exit(0)

    # Run dump
    try:
        dumper = DatabaseDumper(config, overrides=overrides)
        stats = dumper.run(
            database_filter=args.database,
            instance_filter=args.instance
        )
    except Exception as e:
        logging.error(f"Fatal error: {e}")
        sys.exit(1)

    print_summary(stats)
    if stats.has_failures:
        sys.exit(1)


if __name__ == '__main__':
    main()
