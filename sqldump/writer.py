"""
Append-only writer for the dump artifact.
"""

import logging
import threading
from pathlib import Path
from typing import Union

from .errors import WriteFailure
from .templates import render


class DumpWriter:
    """
    Appends rendered sections to the dump file.

    Every write takes the same lock, opens the file in append mode, writes,
    flushes and closes it before the lock is released, so concurrent callers
    never interleave partial sections. Existing content is never truncated.
    """

    ENCODING = 'utf-8'

    def __init__(self, directory: Union[str, Path], file_name: str):
        self.directory = Path(directory)
        self.file_name = file_name
        self.path = self.directory / file_name
        self._lock = threading.Lock()
        logging.info(f"Writing to: {self.path}")

    def write_content(self, content: str) -> None:
        """Append raw text to the artifact.

        Raises:
            WriteFailure: The file could not be opened or written.
        """
        with self._lock:
            try:
                with open(self.path, 'a', encoding=self.ENCODING, newline='') as f:
                    f.write(content)
                    f.flush()
            except OSError as e:
                logging.error(f"Failed to write to '{self.path}': {e}")
                raise WriteFailure(f"Failed to write to '{self.path}': {e}") from e

    def write_template(self, template_name: str, variables: dict) -> str:
        """Render a named template and append it. Returns the rendered text."""
        content = render(template_name, variables)
        self.write_content(content)
        return content
