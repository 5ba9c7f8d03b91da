"""
Database connection management for the SQL dump engine.
"""

import logging
from typing import Optional

import mysql.connector
from mysql.connector import Error as MySQLError
from mysql.connector.constants import FieldFlag, FieldType

from .encoder import policy_for_type
from .errors import ConnectionFailure, QueryFailure
from .models import ColumnDescriptor

# FieldType names that differ from the SQL type names used in DDL
_FIELD_TYPE_NAMES = {
    'TINY': 'TINYINT',
    'SHORT': 'SMALLINT',
    'LONG': 'INT',
    'INT24': 'MEDIUMINT',
    'LONGLONG': 'BIGINT',
    'NEWDECIMAL': 'DECIMAL',
    'NEWDATE': 'DATE',
    'VAR_STRING': 'VARCHAR',
    'STRING': 'CHAR',
    'TINY_BLOB': 'TINYBLOB',
    'MEDIUM_BLOB': 'MEDIUMBLOB',
    'LONG_BLOB': 'LONGBLOB',
}

# BLOB-family columns in a character set other than binary are TEXT columns
_TEXT_NAMES = {
    'TINYBLOB': 'TINYTEXT',
    'BLOB': 'TEXT',
    'MEDIUMBLOB': 'MEDIUMTEXT',
    'LONGBLOB': 'LONGTEXT',
}

# Character columns in the binary character set are binary strings
_BINARY_NAMES = {
    'VARCHAR': 'VARBINARY',
    'CHAR': 'BINARY',
}

# Character set id of the binary charset in column metadata
BINARY_CHARSET_ID = 63


def declared_type_name(type_code: int, flags: int = 0, charset: Optional[int] = None) -> str:
    """Translate a driver FieldType code and column metadata to a SQL type name.

    Binary and character strings share type codes. They are told apart by
    the column character set; the BINARY flag is also set for character
    columns with a binary collation, so it is only used when the charset
    is not reported.
    """
    name = FieldType.get_info(type_code) or 'UNKNOWN'
    name = _FIELD_TYPE_NAMES.get(name, name)
    if charset is not None:
        is_binary = charset == BINARY_CHARSET_ID
    else:
        is_binary = bool(flags & FieldFlag.BINARY)
    if name in _TEXT_NAMES and not is_binary:
        return _TEXT_NAMES[name]
    if name in _BINARY_NAMES and is_binary:
        return _BINARY_NAMES[name]
    return name


def describe_columns(description: Optional[list[tuple]]) -> list[ColumnDescriptor]:
    """Build column descriptors from a DB-API ``cursor.description``."""
    columns = []
    for i, col in enumerate(description or []):
        flags = col[7] if len(col) > 7 and col[7] else 0
        charset = col[8] if len(col) > 8 else None
        type_name = declared_type_name(col[1], flags, charset)
        columns.append(ColumnDescriptor(
            ordinal_position=i,
            name=col[0],
            declared_type=type_name,
            encoding_policy=policy_for_type(type_name)
        ))
    return columns


class DatabaseConnection:
    """Manages MySQL database connections with context manager support."""

    DEFAULT_PORT = 3306
    DEFAULT_CHARSET = 'utf8mb4'

    def __init__(
        self,
        host: str,
        port: int,
        user: str,
        password: str,
        database: Optional[str] = None
    ):
        self.host = host
        self.port = port
        self.user = user
        self.password = password
        self.database = database
        self.connection = None

    def __enter__(self) -> "DatabaseConnection":
        """Context manager entry - establish connection."""
        self.connect()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        """Context manager exit - close connection."""
        self.disconnect()

    def connect(self) -> None:
        """Establish database connection."""
        try:
            self.connection = mysql.connector.connect(
                host=self.host,
                port=self.port,
                user=self.user,
                password=self.password,
                database=self.database,
                charset=self.DEFAULT_CHARSET,
                use_unicode=True
            )
            logging.info(f"Connected to {self.host}:{self.port}/{self.database or 'N/A'}")
        except MySQLError as e:
            logging.error(f"Failed to connect to database: {e}")
            raise ConnectionFailure(f"Failed to connect to {self.host}:{self.port}: {e}") from e

    def disconnect(self) -> None:
        """Close database connection."""
        if self.connection and self.connection.is_connected():
            self.connection.close()
            logging.debug("Database connection closed")

    def ensure_connected(self) -> None:
        if self.connection is None or not self.connection.is_connected():
            raise ConnectionFailure(f"Not connected to {self.host}:{self.port}")

    def execute_query(self, query: str, params: Optional[tuple] = None) -> list[tuple]:
        """Execute a query and return results."""
        self.ensure_connected()
        logging.debug(f"Executing: {query}")
        try:
            cursor = self.connection.cursor()
        except MySQLError as e:
            raise ConnectionFailure(str(e)) from e
        try:
            cursor.execute(query, params)
            return cursor.fetchall()
        except MySQLError as e:
            raise QueryFailure(f"Query failed: {query[:200]}: {e}") from e
        finally:
            cursor.close()

    def get_cursor(self, buffered: bool = False, raw: bool = False):
        """Get a cursor for streaming large results.

        Args:
            buffered: If False (default), uses server-side cursor for memory-efficient
                     streaming of large result sets. If True, uses buffered cursor.
            raw: If True, values are returned as undecoded bytes (or None).
        """
        self.ensure_connected()
        return self.connection.cursor(buffered=buffered, raw=raw)

    def consume_results(self) -> None:
        """Discard rows a streaming cursor left unread on the connection.

        The driver refuses to close a cursor, or run another query, while
        rows are pending.
        """
        if self.connection is None:
            return
        try:
            self.connection.consume_results()
        except MySQLError as e:
            raise ConnectionFailure(f"Failed to discard unread rows: {e}") from e
