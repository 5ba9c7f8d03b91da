"""
Value encoding for SQL INSERT statements.

Every column gets an encoding policy from its declared database type, once per
table query. Row values are then rendered with that policy:

- NULL values always render as ``NULL``.
- Binary and geometry values render as ``x'<hex>'``.
- Everything else renders as an escaped, single-quoted string, numerics
  included. MySQL casts quoted numerics on insert, so the output replays
  unchanged.
"""

import re
from typing import Optional, Union

from .models import ColumnDescriptor, EncodingPolicy

NULL_TOKEN = 'NULL'

HEX_TYPES = frozenset({
    'BLOB', 'TINYBLOB', 'MEDIUMBLOB', 'LONGBLOB',
    'BINARY', 'VARBINARY', 'BIT',
    'GEOMETRY', 'POINT', 'LINESTRING', 'POLYGON',
    'MULTIPOINT', 'MULTILINESTRING', 'MULTIPOLYGON', 'GEOMETRYCOLLECTION',
})

QUOTE_TYPES = frozenset({
    'VARCHAR', 'CHAR',
    'TEXT', 'TINYTEXT', 'MEDIUMTEXT', 'LONGTEXT',
    'ENUM', 'SET', 'JSON',
})

# MySQL string literal escapes (default SQL mode, backslash escapes enabled)
_ESCAPES = {
    '\\': '\\\\',
    "'": "''",
    '\0': '\\0',
    '\n': '\\n',
    '\r': '\\r',
    '\x1a': '\\Z',
}
_ESCAPE_PATTERN = re.compile('[' + re.escape(''.join(_ESCAPES)) + ']')

RowValue = Optional[Union[str, bytes, bytearray]]


def normalize_type_name(type_name: str) -> str:
    """'varchar(255)' -> 'VARCHAR', 'int unsigned' -> 'INT'."""
    return type_name.strip().split('(')[0].split(' ')[0].upper()


def policy_for_type(type_name: str) -> EncodingPolicy:
    """Map a declared database type name to its encoding policy."""
    name = normalize_type_name(type_name)
    if name in HEX_TYPES:
        return EncodingPolicy.HEX
    if name in QUOTE_TYPES:
        return EncodingPolicy.QUOTE
    return EncodingPolicy.PASSTHROUGH


def escape_string(value: str) -> str:
    return _ESCAPE_PATTERN.sub(lambda m: _ESCAPES[m.group(0)], value)


def quote_string(value: str) -> str:
    return f"'{escape_string(value)}'"


def hex_literal(payload: Union[str, bytes, bytearray]) -> str:
    if isinstance(payload, str):
        payload = payload.encode('utf-8')
    return f"x'{bytes(payload).hex()}'"


def encode_value(value: RowValue, policy: EncodingPolicy) -> str:
    """Render one column value as a SQL literal.

    Args:
        value: Raw payload, or None for SQL NULL. Text payloads may be passed
            as bytes, in which case they are decoded as UTF-8.
        policy: The column's encoding policy.
    """
    if value is None:
        return NULL_TOKEN

    if policy == EncodingPolicy.HEX:
        return hex_literal(value)

    if isinstance(value, (bytes, bytearray)):
        value = bytes(value).decode('utf-8')
    elif not isinstance(value, str):
        value = str(value)
    return quote_string(value)


def encode_row(values: list[RowValue], columns: list[ColumnDescriptor]) -> str:
    """Render one row as a parenthesized tuple literal, in ordinal order."""
    if len(values) != len(columns):
        raise ValueError(
            f"Row has {len(values)} value(s) but {len(columns)} column(s) were described"
        )
    literals = [
        encode_value(values[col.ordinal_position], col.encoding_policy)
        for col in columns
    ]
    return f"({','.join(literals)})"
