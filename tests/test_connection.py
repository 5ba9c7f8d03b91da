"""
Unit tests for connection.py
"""

from unittest import mock

import pytest
from mysql.connector import Error as MySQLError
from mysql.connector.constants import FieldFlag, FieldType

from sqldump.connection import DatabaseConnection, declared_type_name, describe_columns
from sqldump.errors import ConnectionFailure, QueryFailure
from sqldump.models import EncodingPolicy


def make_connection(database=None):
    return DatabaseConnection(
        host="localhost",
        port=3306,
        user="root",
        password="secret",
        database=database
    )


class TestDatabaseConnection:
    """Tests for DatabaseConnection class."""

    def test_init(self):
        """Test connection initialization."""
        conn = make_connection("testdb")
        assert conn.host == "localhost"
        assert conn.port == 3306
        assert conn.user == "root"
        assert conn.password == "secret"
        assert conn.database == "testdb"
        assert conn.connection is None

    def test_default_constants(self):
        """Test default constants."""
        assert DatabaseConnection.DEFAULT_PORT == 3306
        assert DatabaseConnection.DEFAULT_CHARSET == 'utf8mb4'

    @mock.patch('sqldump.connection.mysql.connector.connect')
    def test_connect(self, mock_connect):
        """Test database connection establishment."""
        mock_connection = mock.MagicMock()
        mock_connect.return_value = mock_connection

        conn = make_connection("testdb")
        conn.connect()

        mock_connect.assert_called_once_with(
            host="localhost",
            port=3306,
            user="root",
            password="secret",
            database="testdb",
            charset='utf8mb4',
            use_unicode=True
        )
        assert conn.connection == mock_connection

    @mock.patch('sqldump.connection.mysql.connector.connect')
    def test_connect_error(self, mock_connect):
        """Test driver errors become ConnectionFailure."""
        mock_connect.side_effect = MySQLError("Connection refused")

        conn = make_connection()

        with pytest.raises(ConnectionFailure) as exc_info:
            conn.connect()
        assert isinstance(exc_info.value.__cause__, MySQLError)

    @mock.patch('sqldump.connection.mysql.connector.connect')
    def test_context_manager(self, mock_connect):
        """Test context manager usage."""
        mock_connection = mock.MagicMock()
        mock_connection.is_connected.return_value = True
        mock_connect.return_value = mock_connection

        with make_connection("testdb") as conn:
            assert conn.connection == mock_connection

        mock_connection.close.assert_called_once()

    def test_disconnect_not_connected(self):
        """Test disconnect when not connected."""
        make_connection().disconnect()

    def test_query_without_connection(self):
        with pytest.raises(ConnectionFailure):
            make_connection().execute_query("SELECT 1")

    @mock.patch('sqldump.connection.mysql.connector.connect')
    def test_query_on_lost_connection(self, mock_connect):
        mock_connection = mock.MagicMock()
        mock_connection.is_connected.return_value = False
        mock_connect.return_value = mock_connection

        conn = make_connection()
        conn.connect()
        with pytest.raises(ConnectionFailure):
            conn.get_cursor()

    @mock.patch('sqldump.connection.mysql.connector.connect')
    def test_execute_query(self, mock_connect):
        """Test query execution."""
        mock_cursor = mock.MagicMock()
        mock_cursor.fetchall.return_value = [("row1",), ("row2",)]
        mock_connect.return_value.cursor.return_value = mock_cursor

        conn = make_connection()
        conn.connect()
        result = conn.execute_query("SELECT * FROM test WHERE id = %s", (1,))

        assert result == [("row1",), ("row2",)]
        mock_cursor.execute.assert_called_once_with("SELECT * FROM test WHERE id = %s", (1,))
        mock_cursor.close.assert_called_once()

    @mock.patch('sqldump.connection.mysql.connector.connect')
    def test_execute_query_error_closes_cursor(self, mock_connect):
        mock_cursor = mock.MagicMock()
        mock_cursor.execute.side_effect = MySQLError("syntax error")
        mock_connect.return_value.cursor.return_value = mock_cursor

        conn = make_connection()
        conn.connect()
        with pytest.raises(QueryFailure):
            conn.execute_query("SELEC 1")
        mock_cursor.close.assert_called_once()

    @mock.patch('sqldump.connection.mysql.connector.connect')
    def test_get_cursor(self, mock_connect):
        """Test getting a cursor."""
        mock_connection = mock.MagicMock()
        mock_connect.return_value = mock_connection

        conn = make_connection()
        conn.connect()

        conn.get_cursor()
        mock_connection.cursor.assert_called_with(buffered=False, raw=False)

        conn.get_cursor(raw=True)
        mock_connection.cursor.assert_called_with(buffered=False, raw=True)


    @mock.patch('sqldump.connection.mysql.connector.connect')
    def test_consume_results(self, mock_connect):
        conn = make_connection()
        conn.connect()
        conn.consume_results()
        mock_connect.return_value.consume_results.assert_called_once()

    @mock.patch('sqldump.connection.mysql.connector.connect')
    def test_consume_results_failure(self, mock_connect):
        mock_connect.return_value.consume_results.side_effect = MySQLError("Lost connection")

        conn = make_connection()
        conn.connect()
        with pytest.raises(ConnectionFailure):
            conn.consume_results()

    def test_consume_results_without_connection(self):
        make_connection().consume_results()

class TestDeclaredTypeName:
    """Tests for translating driver type codes to SQL type names."""

    def test_integer_types(self):
        assert declared_type_name(FieldType.LONG) == "INT"
        assert declared_type_name(FieldType.LONGLONG) == "BIGINT"

    def test_varchar(self):
        assert declared_type_name(FieldType.VAR_STRING) == "VARCHAR"

    def test_varbinary(self):
        assert declared_type_name(FieldType.VAR_STRING, FieldFlag.BINARY) == "VARBINARY"

    def test_blob_vs_text(self):
        assert declared_type_name(FieldType.BLOB, FieldFlag.BINARY) == "BLOB"
        assert declared_type_name(FieldType.BLOB) == "TEXT"

    def test_geometry(self):
        assert declared_type_name(FieldType.GEOMETRY, FieldFlag.BINARY) == "GEOMETRY"

    def test_binary_flag_ignored_for_numbers(self):
        assert declared_type_name(FieldType.LONG, FieldFlag.BINARY) == "INT"

    def test_binary_collation_is_still_text(self):
        # utf8mb4_bin (46) sets the BINARY flag on character columns
        assert declared_type_name(FieldType.VAR_STRING, FieldFlag.BINARY, 46) == "VARCHAR"
        assert declared_type_name(FieldType.STRING, FieldFlag.BINARY, 46) == "CHAR"
        assert declared_type_name(FieldType.BLOB, FieldFlag.BINARY, 46) == "TEXT"

    def test_binary_charset(self):
        assert declared_type_name(FieldType.VAR_STRING, FieldFlag.BINARY, 63) == "VARBINARY"
        assert declared_type_name(FieldType.BLOB, FieldFlag.BINARY, 63) == "BLOB"


class TestDescribeColumns:
    """Tests for describe_columns."""

    def test_descriptors_in_ordinal_order(self):
        description = [
            ("id", FieldType.LONG, None, None, None, None, False, 0),
            ("name", FieldType.VAR_STRING, None, None, None, None, True, 0),
            ("photo", FieldType.BLOB, None, None, None, None, True, FieldFlag.BINARY),
        ]
        columns = describe_columns(description)

        assert [c.ordinal_position for c in columns] == [0, 1, 2]
        assert [c.name for c in columns] == ["id", "name", "photo"]
        assert [c.encoding_policy for c in columns] == [
            EncodingPolicy.PASSTHROUGH,
            EncodingPolicy.QUOTE,
            EncodingPolicy.HEX,
        ]

    def test_bin_collated_text_columns_are_quoted(self):
        description = [
            ("code", FieldType.VAR_STRING, None, None, None, None, True, FieldFlag.BINARY, 46),
            ("body", FieldType.BLOB, None, None, None, None, True, FieldFlag.BINARY, 46),
            ("hash", FieldType.VAR_STRING, None, None, None, None, True, FieldFlag.BINARY, 63),
        ]
        columns = describe_columns(description)

        assert [c.declared_type for c in columns] == ["VARCHAR", "TEXT", "VARBINARY"]
        assert [c.encoding_policy for c in columns] == [
            EncodingPolicy.QUOTE,
            EncodingPolicy.QUOTE,
            EncodingPolicy.HEX,
        ]

    def test_short_description_without_flags(self):
        columns = describe_columns([("n", FieldType.VAR_STRING)])
        assert columns[0].declared_type == "VARCHAR"

    def test_no_description(self):
        assert describe_columns(None) == []
