"""
Shared fixtures: an in-memory stand-in for DatabaseConnection.
"""

import re

import pytest
from mysql.connector import Error as MySQLError
from mysql.connector.constants import FieldFlag, FieldType
from mysql.connector.errors import InternalError

from sqldump.errors import ConnectionFailure, QueryFailure


def col(name, type_code, flags=0, charset=None):
    """A cursor.description entry; the charset id is appended when given."""
    entry = (name, type_code, None, None, None, None, True, flags)
    if charset is not None:
        entry += (charset,)
    return entry


INT = FieldType.LONG
VARCHAR = FieldType.VAR_STRING
BLOB = FieldType.BLOB
DATETIME = FieldType.DATETIME
BINARY_FLAG = FieldFlag.BINARY
UTF8MB4_BIN = 46
BINARY_CHARSET = 63


class FakeCursor:
    def __init__(self, db):
        self.db = db
        self.description = None
        self._rows = []
        self._fail_at = None
        self.closed = False

    def execute(self, query, params=None):
        self.db.queries.append(query)
        match = re.match(r"SELECT \* FROM `([^`]+)`", query)
        table = match.group(1) if match else None
        if table in self.db.select_errors:
            raise self.db.select_errors[table]
        if table not in self.db.tables:
            raise MySQLError(msg=f"Table '{table}' doesn't exist")
        self.description, self._rows = self.db.tables[table]
        self._fail_at = self.db.scan_errors.get(table)
        self.db.unread_result = True

    def __iter__(self):
        for i, row in enumerate(self._rows):
            if self._fail_at is not None and i == self._fail_at:
                raise MySQLError(msg="Lost connection during query")
            yield row
        self.db.unread_result = False

    def close(self):
        # same contract as the driver: pending rows must be consumed first
        if self.db.unread_result:
            raise InternalError("Unread result found")
        self.closed = True
        self.db.closed_cursors += 1


class FakeConnection:
    """Answers the catalog and data queries the dump engine issues."""

    def __init__(self, version="8.0.36"):
        self.version = version
        self.tables = {}
        self.create_sql = {}
        self.echo_names = {}
        self.select_errors = {}
        self.scan_errors = {}
        self.query_errors = {}
        self.queries = []
        self.cursors = []
        self.closed_cursors = 0
        self.unread_result = False
        self.consume_error = None

    def add_table(self, name, description, rows, create_sql=None):
        self.tables[name] = (description, rows)
        self.create_sql[name] = create_sql or f"CREATE TABLE `{name}` (...)"

    def execute_query(self, query, params=None):
        if self.unread_result:
            raise InternalError("Unread result found")
        self.queries.append(query)
        for fragment, error in self.query_errors.items():
            if fragment in query:
                raise error
        if query.startswith("SELECT VERSION()"):
            return [(self.version,)]
        if "information_schema.tables" in query:
            return [(name,) for name in sorted(self.tables)]
        match = re.match(r"SHOW CREATE TABLE `([^`]+)`", query)
        if match:
            name = match.group(1)
            if name not in self.create_sql:
                raise QueryFailure(f"Table '{name}' doesn't exist")
            return [(self.echo_names.get(name, name), self.create_sql[name])]
        raise AssertionError(f"unexpected query: {query}")

    def consume_results(self):
        if self.consume_error is not None:
            raise ConnectionFailure(str(self.consume_error))
        self.unread_result = False

    def get_cursor(self, buffered=False, raw=False):
        cursor = FakeCursor(self)
        self.cursors.append(cursor)
        return cursor


@pytest.fixture
def fake_db():
    """A connection with the table from the O'Brien example."""
    db = FakeConnection()
    db.add_table(
        "t",
        [col("id", INT), col("name", VARCHAR), col("note", BLOB, BINARY_FLAG, BINARY_CHARSET)],
        [(b"1", b"O'Brien", b"He")],
        create_sql="CREATE TABLE `t` (`id` int, `name` varchar(50), `note` blob)",
    )
    return db
