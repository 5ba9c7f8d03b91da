"""
SQL Dump Engine
===============
Exports a MySQL database's structure and contents into a single replayable
SQL file:
- Table enumeration with include/exclude rules
- Table definitions via SHOW CREATE TABLE
- Row data as escaped, type-aware INSERT literals
- Append-only, lock-protected output
- Fail-fast or best-effort error handling
"""

__version__ = "1.0.0"

from .config import ConfigLoader
from .connection import DatabaseConnection
from .database_dumper import DatabaseDumper
from .dumper import SqlDumper
from .encoder import encode_row, encode_value, escape_string, policy_for_type
from .errors import (
    ConnectionFailure,
    DumpAborted,
    DumpError,
    EmptyTableSchema,
    QueryFailure,
    ScanFailure,
    SchemaMismatch,
    WriteFailure,
)
from .filters import TableFilter
from .main import main
from .models import (
    ColumnDescriptor,
    DatabaseStats,
    DumpOptions,
    DumpState,
    DumpStats,
    EncodingPolicy,
    ErrorPolicy,
    TableDescriptor,
    TableStats,
    TableStatus,
    TemplateVars,
)
from .table_dumper import TableDumper
from .utils import print_dry_run_info, print_summary, setup_logging
from .writer import DumpWriter

__all__ = [
    # Main entry point
    "main",
    # Core classes
    "ConfigLoader",
    "DatabaseConnection",
    "DatabaseDumper",
    "DumpWriter",
    "SqlDumper",
    "TableDumper",
    "TableFilter",
    # Encoding
    "encode_row",
    "encode_value",
    "escape_string",
    "policy_for_type",
    # Errors
    "ConnectionFailure",
    "DumpAborted",
    "DumpError",
    "EmptyTableSchema",
    "QueryFailure",
    "ScanFailure",
    "SchemaMismatch",
    "WriteFailure",
    # Models
    "ColumnDescriptor",
    "DatabaseStats",
    "DumpOptions",
    "DumpState",
    "DumpStats",
    "EncodingPolicy",
    "ErrorPolicy",
    "TableDescriptor",
    "TableStats",
    "TableStatus",
    "TemplateVars",
    # Utilities
    "print_dry_run_info",
    "print_summary",
    "setup_logging",
]
