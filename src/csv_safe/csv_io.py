"""
Streaming CSV record reader and writer.

Records are read and written one at a time so files larger than memory
can be processed. A single dialect, taken from configuration, applies to
both input and output.
"""

import csv
from collections.abc import Iterable, Iterator, Sequence
from pathlib import Path
from typing import IO

from pydantic import BaseModel, Field, ValidationError

from .config import ConfigurationError, CsvSafeConfig


class CsvDialect(BaseModel):
    """
    The CSV dialect used for a run.
    """

    delimiter: str = Field(default=",", min_length=1, max_length=1)
    quotechar: str = Field(default='"', min_length=1, max_length=1)

    # Raw lines starting with this character are skipped, quoted fields are not
    comment: str | None = Field(default="#", min_length=1, max_length=1)

    encoding: str = "utf-8"
    trim_fields: bool = True
    line_terminator: str = "\r\n"

    @classmethod
    def from_config(cls) -> "CsvDialect":
        """
        Build the dialect from the ``csv`` configuration section.

        Raises:
            ConfigurationError: If the configured values are invalid
        """
        settings = CsvSafeConfig.get_csv_settings()
        try:
            return cls(**settings)
        except ValidationError as e:
            raise ConfigurationError(f"Invalid CSV settings: {e}") from e


class CsvRecordReader:
    """
    Reads a CSV file record by record.

    Use as a context manager; call :meth:`read_header` once, then iterate
    :meth:`records`.
    """

    def __init__(self, path: str | Path, dialect: CsvDialect | None = None) -> None:
        self.path = Path(path)
        self.dialect = dialect or CsvDialect.from_config()
        self._file: IO[str] | None = None
        self._reader: Iterator[list[str]] | None = None

    def __enter__(self) -> "CsvRecordReader":
        self._file = open(self.path, "r", encoding=self.dialect.encoding, newline="")
        self._reader = csv.reader(
            self._skip_comment_lines(self._file),
            delimiter=self.dialect.delimiter,
            quotechar=self.dialect.quotechar,
            skipinitialspace=self.dialect.trim_fields,
        )
        return self

    def __exit__(self, *exc_info: object) -> None:
        if self._file is not None:
            self._file.close()
        self._file = None
        self._reader = None

    def _skip_comment_lines(self, lines: Iterable[str]) -> Iterator[str]:
        comment = self.dialect.comment
        quotechar = self.dialect.quotechar

        # Lines inside a quoted multi-line field are data, whatever they start with
        in_quotes = False
        for line in lines:
            if comment and not in_quotes and line.startswith(comment):
                continue
            if line.count(quotechar) % 2:
                in_quotes = not in_quotes
            yield line

    def _next_records(self) -> Iterator[list[str]]:
        if self._reader is None:
            raise RuntimeError("CsvRecordReader must be used as a context manager")

        for record in self._reader:
            if not record:
                continue
            if self.dialect.trim_fields:
                record = [value.strip() for value in record]
            yield record

    def read_header(self) -> list[str]:
        """
        Read the header record.

        Returns:
            The header field names

        Raises:
            ConfigurationError: If the file contains no records
        """
        header = next(self._next_records(), None)
        if header is None:
            raise ConfigurationError(f"Input file has no header record: {self.path}")

        # Spreadsheet exports often start with a byte order mark
        header[0] = header[0].lstrip("\ufeff")
        return header

    def records(self) -> Iterator[list[str]]:
        """Iterate the remaining data records."""
        yield from self._next_records()


class CsvRecordWriter:
    """
    Writes a CSV file record by record.
    """

    def __init__(self, path: str | Path, dialect: CsvDialect | None = None) -> None:
        self.path = Path(path)
        self.dialect = dialect or CsvDialect.from_config()
        self._file: IO[str] | None = None
        self._writer = None
        self._quoted_writer = None

    def _make_writer(self, quoting: int):
        return csv.writer(
            self._file,
            delimiter=self.dialect.delimiter,
            quotechar=self.dialect.quotechar,
            lineterminator=self.dialect.line_terminator,
            quoting=quoting,
        )

    def __enter__(self) -> "CsvRecordWriter":
        self._file = open(self.path, "w", encoding=self.dialect.encoding, newline="")
        self._writer = self._make_writer(csv.QUOTE_MINIMAL)
        self._quoted_writer = self._make_writer(csv.QUOTE_ALL)
        return self

    def __exit__(self, *exc_info: object) -> None:
        if self._file is not None:
            self._file.close()
        self._file = None
        self._writer = None
        self._quoted_writer = None

    def write_record(self, fields: Sequence[str]) -> None:
        """
        Write one record.

        A record whose first field starts with the comment character is
        written fully quoted so it is not read back as a comment line.
        """
        if self._writer is None or self._quoted_writer is None:
            raise RuntimeError("CsvRecordWriter must be used as a context manager")

        comment = self.dialect.comment
        if comment and fields and fields[0].startswith(comment):
            self._quoted_writer.writerow(fields)
        else:
            self._writer.writerow(fields)
