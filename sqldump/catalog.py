"""
Catalog queries: table enumeration, table definitions and server version.

Each function takes the connection explicitly and raises the engine's
exceptions; nothing here writes to the dump artifact.
"""

import logging

from .errors import QueryFailure, ScanFailure, SchemaMismatch
from .models import TableDescriptor

LIST_TABLES_QUERY = (
    "SELECT TABLE_NAME FROM information_schema.tables "
    "WHERE TABLE_SCHEMA = %s AND TABLE_TYPE <> 'VIEW' "
    "ORDER BY TABLE_NAME"
)


def _as_text(value) -> str:
    if isinstance(value, (bytes, bytearray)):
        return bytes(value).decode('utf-8')
    if not isinstance(value, str):
        raise TypeError(f"expected text, got {type(value).__name__}")
    return value


def quote_identifier(name: str) -> str:
    """Backtick-quote a MySQL identifier."""
    return "`" + name.replace("`", "``") + "`"


def list_tables(conn, database: str) -> list[TableDescriptor]:
    """List the base tables (views excluded) of a database."""
    if not database:
        raise ValueError("Database name must not be empty")

    rows = conn.execute_query(LIST_TABLES_QUERY, (database,))

    tables = []
    for row in rows:
        try:
            tables.append(TableDescriptor(name=_as_text(row[0])))
        except (IndexError, TypeError, UnicodeDecodeError) as e:
            raise ScanFailure(f"Cannot read table name from row {row!r}: {e}") from e

    logging.debug(f"Found {len(tables)} table(s) in '{database}'")
    return tables


def get_create_table(conn, table: str) -> str:
    """Get the CREATE TABLE statement of a table."""
    rows = conn.execute_query(f"SHOW CREATE TABLE {quote_identifier(table)}")
    if not rows:
        raise QueryFailure(f"SHOW CREATE TABLE returned no rows for '{table}'")

    try:
        returned, create_sql = _as_text(rows[0][0]), _as_text(rows[0][1])
    except (IndexError, TypeError, UnicodeDecodeError) as e:
        raise ScanFailure(f"Cannot read definition of '{table}': {e}") from e

    if returned != table:
        raise SchemaMismatch(table, returned)
    return create_sql


def get_server_version(conn) -> str:
    rows = conn.execute_query("SELECT VERSION()")
    if not rows or rows[0][0] is None:
        raise QueryFailure("Server did not report a version")
    return _as_text(rows[0][0])
