"""
Dump orchestration for a single database and artifact.
"""

import logging
from datetime import datetime

from . import __version__
from .catalog import get_create_table, get_server_version, list_tables
from .errors import ConnectionFailure, DumpAborted, DumpError, WriteFailure
from .models import (
    DatabaseStats,
    DumpOptions,
    DumpState,
    ErrorPolicy,
    TableDescriptor,
    TableStats,
    TableStatus,
    TemplateVars,
)
from .table_dumper import TableDumper
from .templates import FOOTER, HEADER, TABLE_DATA, TABLE_SCHEMA, template_context
from .writer import DumpWriter

TOOL_NAME = 'Python SQL Dump'
TIME_FORMAT = '%Y-%m-%d %H:%M:%S'

# Failures that make the artifact unusable regardless of the error policy
FATAL_ERRORS = (ConnectionFailure, WriteFailure)


class SqlDumper:
    """
    Dumps one database into one artifact.

    Sequence: header, then schema and/or data per table, then footer. Table
    failures are recorded on the returned stats and routed through the
    configured error policy: ``CONTINUE`` moves on to the next table,
    ``FAIL_FAST`` marks the remaining tables skipped and stops without a
    footer. Connection and write failures always stop the run.
    """

    def __init__(
        self,
        connection,
        writer: DumpWriter,
        options: DumpOptions,
        instance: str = 'primary'
    ):
        self.connection = connection
        self.writer = writer
        self.options = options
        self.table_dumper = TableDumper(connection)
        self.state = DumpState.START
        self.stats = DatabaseStats(
            name=options.database,
            instance=instance,
            file_path=str(writer.path)
        )

    @property
    def fail_fast(self) -> bool:
        return self.options.on_error == ErrorPolicy.FAIL_FAST

    def _transition(self, state: DumpState) -> None:
        logging.debug(f"Dump '{self.options.database}': {self.state.value} -> {state.value}")
        self.state = state
        self.stats.state = state

    def dump(self) -> DatabaseStats:
        """Run the full dump and return its statistics."""
        try:
            self.write_header()
            tables = self.get_tables_to_be_dumped()
            logging.info(f"Dumping {len(tables)} table(s) from '{self.options.database}'")

            for i, table in enumerate(tables):
                table_stats = self.dump_table(table)
                self._record(table_stats)

                if table_stats.status == TableStatus.FAILED and self.fail_fast:
                    for remaining in tables[i + 1:]:
                        self.stats.tables.append(TableStats(table=remaining.name))
                    raise DumpAborted(f"Table '{table.name}' failed: {table_stats.error}")

            self.write_footer()
            self._transition(DumpState.DONE)

        except DumpError as e:
            logging.error(f"Dump of '{self.options.database}' aborted: {e}")
            self.stats.error = self.stats.error or str(e)
            self._transition(DumpState.ABORTED)

        return self.stats

    def write_header(self) -> None:
        server_version = get_server_version(self.connection)
        logging.info(f"Server Version: {server_version}")
        self.writer.write_template(HEADER, {
            'tool': TOOL_NAME,
            'version': __version__,
            'started': datetime.now().strftime(TIME_FORMAT),
            'server_version': server_version,
        })
        self._transition(DumpState.HEADER_WRITTEN)

    def write_footer(self) -> None:
        self.writer.write_template(FOOTER, {
            'completed': datetime.now().strftime(TIME_FORMAT),
        })
        self._transition(DumpState.FOOTER_WRITTEN)

    def get_tables_to_be_dumped(self) -> list[TableDescriptor]:
        """Enumerate base tables and apply the include/exclude rules."""
        try:
            tables = list_tables(self.connection, self.options.database)
        except FATAL_ERRORS:
            raise
        except DumpError as e:
            logging.error(f"Error occurred while getting tables of '{self.options.database}': {e}")
            self.stats.error = f"Table enumeration failed: {e}"
            if self.fail_fast:
                raise DumpAborted(self.stats.error) from e
            return []

        selected = set(self.options.table_filter.apply([t.name for t in tables]))
        return [t for t in tables if t.name in selected]

    def dump_table(self, table: TableDescriptor) -> TableStats:
        """Dump the enabled phases of one table.

        A failed phase writes nothing. Under ``FAIL_FAST`` a schema failure
        also skips the data phase.
        """
        stats = TableStats(table=table.name)
        if not (self.options.dump_schema or self.options.dump_data):
            return stats

        errors = []
        if self.options.dump_schema:
            try:
                self.dump_schema(table.name)
                stats.schema_written = True
            except FATAL_ERRORS:
                raise
            except DumpError as e:
                errors.append(f"schema: {e}")

        if self.options.dump_data and not (errors and self.fail_fast):
            try:
                stats.rows_dumped = self.dump_data(table.name)
                stats.data_written = True
            except FATAL_ERRORS:
                raise
            except DumpError as e:
                errors.append(f"data: {e}")

        if errors:
            stats.status = TableStatus.FAILED
            stats.error = '; '.join(errors)
        else:
            stats.status = TableStatus.SUCCEEDED
        return stats

    def dump_schema(self, table: str) -> None:
        schema_sql = get_create_table(self.connection, table)
        self.writer.write_template(
            TABLE_SCHEMA, template_context(TemplateVars(name=table, schema_sql=schema_sql))
        )
        self._transition(DumpState.SCHEMA_WRITTEN)

    def dump_data(self, table: str) -> int:
        """Write the data section of a table and return the number of rows."""
        values, row_count = self.table_dumper.extract_values(table, self.options.where_for(table))
        self.writer.write_template(
            TABLE_DATA, template_context(TemplateVars(name=table, values=values))
        )
        self._transition(DumpState.DATA_WRITTEN)
        return row_count

    def _record(self, table_stats: TableStats) -> None:
        self.stats.tables.append(table_stats)
        self.stats.total_rows += table_stats.rows_dumped

        if table_stats.status == TableStatus.SUCCEEDED:
            logging.info(f"  ✓ {table_stats.table}: {table_stats.rows_dumped} rows")
        elif table_stats.status == TableStatus.FAILED:
            logging.error(f"  ✗ {table_stats.table}: {table_stats.error}")
        else:
            logging.info(f"  - {table_stats.table}: skipped")
