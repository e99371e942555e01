# WORKFLOW: CSV table reading and writing for price archives.
# Used by: Price transfer service (import and export pipelines)
# Classes:
# 1. TableReader - Lazily read a header row plus data rows from decoded entry bytes
# 2. TableWriter - Write a header and data rows back to a text sink
#
# Read flow: Entry bytes -> pandas chunked reader -> header -> rows (as lists of str) -> validator
# Write flow: Download rows -> DataFrame chunks -> to_csv (minimal quoting) -> text buffer
# All cells are kept as strings; typing happens in etl.validators.

"""
CSV table reading and writing for price archives.
"""

import io
import logging
from typing import Iterable, Iterator, List, Optional, Sequence, TextIO

import pandas as pd

from core.errors import MalformedTable

logger = logging.getLogger(__name__)

_READ_ERRORS = (pd.errors.ParserError, pd.errors.EmptyDataError, UnicodeDecodeError)


class TableReader:
    """Reads a CSV header and its data rows one at a time."""

    def __init__(self, content: bytes, chunk_size: int = 1000):
        self.content = content
        self.chunk_size = chunk_size
        self.line_number = 0  # data rows returned so far
        self._chunks = None
        self._rows: Iterator[tuple] = iter(())
        self._header: Optional[List[str]] = None

    def _open(self):
        try:
            self._chunks = pd.read_csv(
                io.BytesIO(self.content),
                header=None,
                dtype=str,
                na_filter=False,
                skip_blank_lines=True,
                encoding="utf-8",
                chunksize=self.chunk_size,
            )
        except _READ_ERRORS as e:
            logger.error(f"Failed to open CSV table: {e}")
            raise MalformedTable(f"Failed to read CSV header: {e}") from e

    def _next_tuple(self) -> Optional[tuple]:
        while True:
            row = next(self._rows, None)
            if row is not None:
                return row
            try:
                chunk = next(self._chunks)
            except StopIteration:
                return None
            except _READ_ERRORS as e:
                logger.error(f"Failed to read CSV rows after row {self.line_number}: {e}")
                raise MalformedTable(f"Failed to read CSV rows: {e}") from e
            self._rows = chunk.itertuples(index=False, name=None)

    def read_header(self) -> List[str]:
        """
        Read the header row.

        Returns:
            Header field names (not checked against any expected names)

        Raises:
            MalformedTable: The table is empty or cannot be parsed
        """
        if self._header is not None:
            return self._header
        self._open()
        row = self._next_tuple()
        if row is None:
            raise MalformedTable("Failed to read CSV header: table is empty")
        self._header = [str(value) for value in row]
        return self._header

    def read_row(self) -> Optional[List[str]]:
        """
        Read the next data row.

        Returns:
            Row fields, or None once the table is exhausted

        Raises:
            MalformedTable: A row cannot be parsed or has missing fields
        """
        if self._header is None:
            self.read_header()
        row = self._next_tuple()
        if row is None:
            return None
        self.line_number += 1
        if not all(isinstance(value, str) for value in row):
            raise MalformedTable("Row has missing fields", self.line_number)
        return list(row)

    def __iter__(self) -> Iterator[List[str]]:
        while True:
            row = self.read_row()
            if row is None:
                return
            yield row


class TableWriter:
    """Writes CSV rows with standard minimal quoting."""

    def __init__(self, sink: TextIO):
        self.sink = sink
        self.rows_written = 0

    def write_header(self, field_names: Sequence[str]) -> None:
        self._write([list(field_names)])

    def write_row(self, fields: Sequence[str]) -> None:
        self._write([list(fields)])
        self.rows_written += 1

    def write_rows(self, rows: Iterable[Sequence[str]]) -> None:
        """Write a chunk of rows in one DataFrame pass."""
        chunk = [list(fields) for fields in rows]
        self._write(chunk)
        self.rows_written += len(chunk)

    def _write(self, rows: List[List[str]]) -> None:
        if not rows:
            return
        pd.DataFrame(rows, dtype=object).to_csv(
            self.sink,
            header=False,
            index=False,
            lineterminator="\n",
        )
