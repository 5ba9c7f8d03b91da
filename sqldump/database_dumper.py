"""
Configuration-driven dump runs across databases and instances.
"""

import logging
from datetime import datetime
from pathlib import Path
from typing import Any, Optional

from .config import ConfigLoader
from .connection import DatabaseConnection
from .dumper import SqlDumper
from .errors import DumpError
from .models import DatabaseStats, DumpOptions, DumpStats, TableStatus
from .writer import DumpWriter


class DatabaseDumper:
    """Main class for database dumping operations."""

    def __init__(self, config: ConfigLoader, overrides: Optional[dict[str, Any]] = None):
        self.config = config
        self.output_settings = config.get_output_settings()
        self.defaults = config.get_defaults()
        self.overrides = overrides or {}
        self.stats = DumpStats()

    def run(
        self,
        database_filter: Optional[str] = None,
        instance_filter: Optional[str] = None
    ) -> DumpStats:
        """Run the dump process for all configured databases.

        Args:
            database_filter: If specified, only dump this database name
            instance_filter: If specified, only dump databases from this instance
        """
        output_dir = Path(self.output_settings.get('directory', './dumps'))
        output_dir.mkdir(parents=True, exist_ok=True)

        timestamp = datetime.now().strftime('%Y%m%d_%H%M%S')
        databases = self._filter_databases(database_filter, instance_filter)

        logging.info(f"Starting dump of {len(databases)} database(s)")

        for db_config in databases:
            self._dump_database(db_config, output_dir, timestamp)

        return self.stats

    def _filter_databases(
        self,
        database_filter: Optional[str],
        instance_filter: Optional[str]
    ) -> list[dict[str, Any]]:
        """Filter databases based on provided filters."""
        databases = self.config.get_databases()

        if database_filter:
            databases = [db for db in databases if db['name'] == database_filter]
            if not databases:
                logging.warning(f"No database named '{database_filter}' found in configuration")

        if instance_filter:
            databases = [db for db in databases if db.get('instance', 'primary') == instance_filter]
            if not databases:
                logging.warning(f"No databases found for instance '{instance_filter}'")

        return databases

    def _output_file_name(self, db_config: dict[str, Any], timestamp: str) -> str:
        if db_config.get('file_name'):
            return db_config['file_name']
        db_name = db_config['name']
        if self.output_settings.get('timestamp_suffix', True):
            return f"{db_name}_{timestamp}.sql"
        return f"{db_name}.sql"

    def build_options(self, db_config: dict[str, Any]) -> DumpOptions:
        """Merge defaults, database settings and command line overrides."""
        return DumpOptions.from_configs(self.defaults, {**db_config, **self.overrides})

    def _dump_database(
        self,
        db_config: dict[str, Any],
        output_dir: Path,
        timestamp: str
    ) -> None:
        """Dump a single database."""
        db_name = db_config['name']
        instance_name = db_config.get('instance', 'primary')

        db_stats = DatabaseStats(name=db_name, instance=instance_name)

        try:
            options = self.build_options(db_config)
            instance_config = self.config.get_instance(instance_name)
            writer = DumpWriter(output_dir, self._output_file_name(db_config, timestamp))

            with DatabaseConnection(
                host=instance_config['host'],
                port=instance_config.get('port', DatabaseConnection.DEFAULT_PORT),
                user=instance_config['user'],
                password=instance_config['password'],
                database=db_name
            ) as conn:
                db_stats = SqlDumper(conn, writer, options, instance=instance_name).dump()

        except (DumpError, ValueError, KeyError) as e:
            logging.error(f"Error dumping database '{db_name}': {e}")
            db_stats.error = str(e)

        self._collect(db_stats)

    def _collect(self, db_stats: DatabaseStats) -> None:
        self.stats.databases.append(db_stats)
        self.stats.total_rows += db_stats.total_rows

        if db_stats.error:
            self.stats.errors.append({
                'database': db_stats.name,
                'table': None,
                'error': db_stats.error
            })

        for table_stats in db_stats.tables:
            self.stats.total_tables += 1
            if table_stats.status == TableStatus.FAILED:
                self.stats.errors.append({
                    'database': db_stats.name,
                    'table': table_stats.table,
                    'error': table_stats.error
                })
