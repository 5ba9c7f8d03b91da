"""
Table data extraction for the SQL dump engine.
"""

import logging
from typing import Optional

from mysql.connector import Error as MySQLError

from .catalog import quote_identifier
from .connection import describe_columns
from .encoder import RowValue, encode_row
from .errors import EmptyTableSchema, QueryFailure, ScanFailure
from .models import ColumnDescriptor, EncodingPolicy


class TableDumper:
    """Reads all rows of a table and encodes them as INSERT tuple literals."""

    ENCODING = 'utf-8'

    def __init__(self, connection):
        self.connection = connection

    def _build_select_query(self, table: str, where_clause: Optional[str] = None) -> str:
        """Build SELECT query with options."""
        query = f"SELECT * FROM {quote_identifier(table)}"
        if where_clause:
            query += f" WHERE {where_clause}"
        return query

    def extract_rows(self, table: str, where_clause: Optional[str] = None) -> list[str]:
        """
        Encode every row of a table.

        All rows are held in memory; nothing is returned if any row fails.

        Returns:
            One tuple literal per row, e.g. ``('1',NULL,x'4865')``.

        Raises:
            QueryFailure: The SELECT could not be executed.
            EmptyTableSchema: The result set has no columns.
            ScanFailure: A row could not be read or decoded.
        """
        query = self._build_select_query(table, where_clause)
        logging.debug(f"Dumping table '{table}' with query: {query[:200]}")

        cursor = self.connection.get_cursor(raw=True)
        try:
            try:
                cursor.execute(query)
            except MySQLError as e:
                raise QueryFailure(f"Query failed: {query[:200]}: {e}") from e

            columns = describe_columns(cursor.description)
            if not columns:
                raise EmptyTableSchema(table)
            logging.debug(
                f"Column types for '{table}': "
                + ', '.join(f"{c.name}={c.declared_type}" for c in columns)
            )

            return self._encode_rows(table, cursor, columns)
        finally:
            # rows left after a failed read must be drained before close
            self.connection.consume_results()
            cursor.close()

    def extract_values(self, table: str, where_clause: Optional[str] = None) -> tuple[str, int]:
        """Comma-joined tuple literals, ready to follow ``VALUES``, and the row count."""
        rows = self.extract_rows(table, where_clause)
        return ','.join(rows), len(rows)

    def _encode_rows(self, table: str, cursor, columns: list[ColumnDescriptor]) -> list[str]:
        tuples = []
        row_number = 0
        try:
            for row in cursor:
                row_number += 1
                values = self._scan_row(row, columns)
                tuples.append(encode_row(values, columns))
        except MySQLError as e:
            raise ScanFailure(f"Failed reading row {row_number + 1} of '{table}': {e}") from e
        except (UnicodeDecodeError, ValueError) as e:
            raise ScanFailure(f"Cannot decode row {row_number} of '{table}': {e}") from e
        return tuples

    def _scan_row(self, row: tuple, columns: list[ColumnDescriptor]) -> list[RowValue]:
        """Turn raw driver values into nullable text, keeping binary payloads as bytes."""
        if len(row) != len(columns):
            raise ValueError(f"expected {len(columns)} value(s), got {len(row)}")

        values: list[RowValue] = []
        for col in columns:
            value = row[col.ordinal_position]
            if value is None or col.encoding_policy == EncodingPolicy.HEX:
                values.append(value)
            elif isinstance(value, (bytes, bytearray)):
                values.append(bytes(value).decode(self.ENCODING))
            else:
                values.append(str(value))
        return values
