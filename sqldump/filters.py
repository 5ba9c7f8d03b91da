"""
Table inclusion/exclusion filtering for the SQL dump engine.
"""

import fnmatch
import logging
import re
from dataclasses import dataclass, field
from typing import Optional


@dataclass
class TableFilter:
    """
    Decides which enumerated tables are dumped.

    Supports:
    - Listed table names, matched exactly
    - Wildcard patterns: '*_old', 'tmp_*'
    - Regular expressions (searched anywhere in the name): '^film_', '_backup$'

    A table is dumped when it matches an include rule (or no include rules
    are configured) and matches no exclude rule. ``include=None`` means
    "all tables", while an empty list selects nothing. The same holds for
    ``tables``.
    """
    tables: Optional[list[str]] = None
    include: Optional[list[str]] = None
    exclude: list[str] = field(default_factory=list)
    include_regex: list[str] = field(default_factory=list)
    exclude_regex: list[str] = field(default_factory=list)

    def __post_init__(self):
        self._names = set(self.tables or [])
        self._include = self._compile(self.include or [], self.include_regex)
        self._exclude = self._compile(self.exclude, self.exclude_regex)

    @staticmethod
    def _compile(patterns: list[str], regexes: list[str]) -> list[tuple[str, re.Pattern]]:
        """
        Pre-compile patterns to regex for faster matching.

        Converts fnmatch patterns to compiled regex patterns anchored at the
        start of the name; raw regexes are unanchored.
        """
        compiled = [(p, re.compile('^' + fnmatch.translate(p))) for p in patterns]
        compiled.extend((r, re.compile(r)) for r in regexes)
        return compiled

    @property
    def has_includes(self) -> bool:
        return self.tables is not None or self.include is not None or bool(self.include_regex)

    def is_included(self, table_name: str) -> bool:
        if not self.has_includes or table_name in self._names:
            return True
        return any(compiled.search(table_name) for _, compiled in self._include)

    def is_excluded(self, table_name: str) -> bool:
        for pattern, compiled in self._exclude:
            if compiled.search(table_name):
                logging.debug(f"Table '{table_name}' excluded by pattern '{pattern}'")
                return True
        return False

    def accepts(self, table_name: str) -> bool:
        return self.is_included(table_name) and not self.is_excluded(table_name)

    def apply(self, table_names: list[str]) -> list[str]:
        """Filter table names, keeping the enumeration order."""
        selected = [t for t in table_names if self.accepts(t)]
        skipped = len(table_names) - len(selected)
        if skipped > 0:
            logging.info(f"Filtered out {skipped} table(s) by include/exclude rules")
        return selected
