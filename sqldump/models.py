"""
Data models and enums for the SQL dump engine.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Optional

from .filters import TableFilter


class EncodingPolicy(Enum):
    """How a column value is rendered as a SQL literal."""
    QUOTE = "quote"
    HEX = "hex"
    PASSTHROUGH = "passthrough"


class ErrorPolicy(Enum):
    """What to do when a table fails to dump."""
    CONTINUE = "continue"
    FAIL_FAST = "fail_fast"


class DumpState(Enum):
    """Progress of a single dump artifact."""
    START = "start"
    HEADER_WRITTEN = "header_written"
    SCHEMA_WRITTEN = "schema_written"
    DATA_WRITTEN = "data_written"
    FOOTER_WRITTEN = "footer_written"
    DONE = "done"
    ABORTED = "aborted"


class TableStatus(Enum):
    SUCCEEDED = "succeeded"
    FAILED = "failed"
    SKIPPED = "skipped"


@dataclass(frozen=True)
class TableDescriptor:
    """A base table selected for dumping."""
    name: str


@dataclass(frozen=True)
class ColumnDescriptor:
    """Result-set column metadata, computed once per table query."""
    ordinal_position: int
    name: str
    declared_type: str
    encoding_policy: EncodingPolicy


@dataclass
class TemplateVars:
    """Substitution variables for the section templates."""
    name: str = ""
    schema_sql: str = ""
    values: str = ""


@dataclass
class TableStats:
    """Statistics for a single table dump."""
    table: str
    status: TableStatus = TableStatus.SKIPPED
    rows_dumped: int = 0
    schema_written: bool = False
    data_written: bool = False
    error: Optional[str] = None


@dataclass
class DatabaseStats:
    """Statistics for a single database dump."""
    name: str
    instance: str
    file_path: str = ""
    tables: list[TableStats] = field(default_factory=list)
    total_rows: int = 0
    state: DumpState = DumpState.START
    error: Optional[str] = None

    def count(self, status: TableStatus) -> int:
        return sum(1 for t in self.tables if t.status == status)


@dataclass
class DumpStats:
    """Overall dump statistics."""
    databases: list[DatabaseStats] = field(default_factory=list)
    total_tables: int = 0
    total_rows: int = 0
    errors: list[dict[str, Any]] = field(default_factory=list)

    @property
    def has_failures(self) -> bool:
        return bool(self.errors)

    def count(self, status: TableStatus) -> int:
        return sum(db.count(status) for db in self.databases)


SETTING_KEYS = ('dump_schema', 'dump_data', 'where_clause', 'on_error')


@dataclass
class DumpOptions:
    """Effective options for dumping one database."""
    database: str
    dump_schema: bool = True
    dump_data: bool = True
    where_clause: Optional[str] = None
    on_error: ErrorPolicy = ErrorPolicy.CONTINUE
    table_filter: TableFilter = field(default_factory=TableFilter)
    table_where: dict[str, str] = field(default_factory=dict)

    def __post_init__(self):
        if not self.database:
            raise ValueError("Please specify the database name")
        if isinstance(self.on_error, str):
            self.on_error = ErrorPolicy(self.on_error.lower())

    def where_for(self, table: str) -> Optional[str]:
        """Where clause for a table: table setting wins over the database one."""
        return self.table_where.get(table, self.where_clause)

    @classmethod
    def from_configs(
        cls,
        defaults: dict[str, Any],
        db_config: dict[str, Any]
    ) -> "DumpOptions":
        """
        Create DumpOptions by merging configs with priority: table > database > defaults.
        """
        settings = {}
        for key in SETTING_KEYS:
            if key in defaults:
                settings[key] = defaults[key]
            if key in db_config:
                settings[key] = db_config[key]

        tables = db_config.get('tables', '*')
        table_where = {}
        names = None
        if tables != '*':
            names = []
            for t in tables:
                if isinstance(t, dict):
                    names.append(t['name'])
                    if t.get('where_clause'):
                        table_where[t['name']] = t['where_clause']
                else:
                    names.append(t)

        include = None
        if 'include_tables' in db_config:
            include = list(db_config['include_tables'])

        table_filter = TableFilter(
            tables=names,
            include=include,
            exclude=db_config.get('exclude_tables', []),
            include_regex=db_config.get('include_tables_regex', []),
            exclude_regex=db_config.get('exclude_tables_regex', []),
        )
        return cls(
            database=db_config['name'],
            table_filter=table_filter,
            table_where=table_where,
            **settings
        )
