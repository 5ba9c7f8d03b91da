"""
Exception hierarchy for the SQL dump engine.
"""


class DumpError(Exception):
    """Base class for all dump failures."""


class ConnectionFailure(DumpError):
    """The database connection could not be established or was lost."""


class QueryFailure(DumpError):
    """A catalog or data query could not be executed."""


class ScanFailure(DumpError):
    """A result row could not be read or decoded."""


class SchemaMismatch(DumpError):
    """SHOW CREATE TABLE echoed a different table than the one requested."""

    def __init__(self, requested: str, returned: str):
        super().__init__(
            f"Returned table '{returned}' is not the same as requested table '{requested}'"
        )
        self.requested = requested
        self.returned = returned


class EmptyTableSchema(DumpError):
    """The result set of a table reported zero columns."""

    def __init__(self, table: str):
        super().__init__(f"No columns in table '{table}'")
        self.table = table


class WriteFailure(DumpError):
    """The dump artifact could not be opened or written."""


class DumpAborted(DumpError):
    """Raised when the fail-fast policy stops a dump run."""
