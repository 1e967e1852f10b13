# csv_safe_service.py — Encrypt/decrypt service for CSV files

"""
This module defines the file-level operations of csv-safe.

Each run makes one header-only pass over the input to build the column
identities, then a second pass that streams every record through the remap
transform into the output file. Only one record is held in memory at a time.

Configuration problems are raised as ConfigurationError before the output
file is created; per-row problems never stop a run.
"""

import sys
from collections.abc import Iterable
from dataclasses import dataclass, field
from pathlib import Path

from .config import ConfigurationError, CsvSafeConfig
from .csv_io import CsvDialect, CsvRecordReader, CsvRecordWriter
from .encryption import ValueCipher
from .models import ColumnIdentity, Direction
from .remap import RemapTransform, RowLookup, classify_columns, normalize_header, reconstruct_columns


@dataclass
class RunSummary:
    """
    Result of one encrypt or decrypt run.
    """

    direction: Direction
    input_path: Path
    output_path: Path
    rows_written: int = 0
    rows_skipped: int = 0
    protected_columns: int = 0

    # Only meaningful on decrypt, and only when a digest column was present
    integrity_checked: bool = False
    integrity_passed: int = 0
    integrity_failed: int = 0
    undecryptable_fields: int = 0

    warnings: list[str] = field(default_factory=list)


def derive_output_path(input_path: str | Path, encrypt: bool) -> Path:
    """
    Derive an output file name from the input file name.

    Encrypting ``data.csv`` gives ``data_safe.csv``; decrypting
    ``data_safe.csv`` gives ``data_decrypted.csv``. The opposite suffix is
    dropped first so repeated round trips do not pile up suffixes.

    Args:
        input_path: Path of the input file
        encrypt: True for the encrypt direction

    Returns:
        Path of the output file, beside the input
    """
    path = Path(input_path)
    suffix = CsvSafeConfig.get_output_suffix(encrypt)
    opposite = CsvSafeConfig.get_output_suffix(not encrypt)

    stem = path.stem
    if opposite and stem.lower().endswith(opposite.lower()):
        stem = stem[: -len(opposite)]

    return path.with_name(f"{stem}{suffix}.csv")


class CsvSafeService:
    """
    Encrypts and decrypts selected columns of CSV files.

    One service instance holds the password for the runs it performs.
    """

    def __init__(
        self,
        password: str,
        dialect: CsvDialect | None = None,
        cipher: ValueCipher | None = None,
    ) -> None:
        """
        Initialize the service.

        Args:
            password: The password for every run of this service
            dialect: CSV dialect, defaults to configuration
            cipher: Value cipher, defaults to configuration

        Raises:
            ConfigurationError: If the password is blank
        """
        if not password or not password.strip():
            raise ConfigurationError("A password is required")

        self.password = password
        self.dialect = dialect or CsvDialect.from_config()
        self.cipher = cipher or ValueCipher()

    def _read_header(self, input_path: Path) -> list[str]:
        with CsvRecordReader(input_path, self.dialect) as reader:
            return reader.read_header()

    def _check_paths(self, input_path: Path, output_path: Path) -> None:
        if not input_path.is_file():
            raise ConfigurationError(f"Input file not found: {input_path}")
        if input_path.resolve() == output_path.resolve():
            raise ConfigurationError("Output file must differ from the input file")

    def _stream(
        self,
        input_path: Path,
        output_path: Path,
        identities: list[ColumnIdentity],
        direction: Direction,
    ) -> RemapTransform:
        with CsvRecordReader(input_path, self.dialect) as reader, \
                CsvRecordWriter(output_path, self.dialect) as writer:
            # The header pass already validated these names
            header = normalize_header(reader.read_header())

            transform = RemapTransform(writer, identities, self.password, direction, self.cipher)
            transform.write_header()

            for record in reader.records():
                transform.write_row(RowLookup(header, record))

        return transform

    def encrypt_file(
        self,
        input_path: str | Path,
        output_path: str | Path | None,
        columns: Iterable[str],
    ) -> RunSummary:
        """
        Encrypt the selected columns of a CSV file.

        Args:
            input_path: The plaintext CSV file
            output_path: Where to write, or None to derive it from the input
            columns: Names of the columns to protect

        Returns:
            Summary of the run

        Raises:
            ConfigurationError: For invalid options or an unusable header
        """
        input_path = Path(input_path)
        output_path = Path(output_path) if output_path else derive_output_path(input_path, True)
        columns = [c for c in columns if c and c.strip()]

        if not columns:
            raise ConfigurationError("Columns must be specified for encryption")
        self._check_paths(input_path, output_path)

        classification = classify_columns(self._read_header(input_path), columns)

        summary = RunSummary(
            direction=Direction.ENCRYPT,
            input_path=input_path,
            output_path=output_path,
            protected_columns=classification.protected_count,
        )
        for column in classification.missing_columns:
            message = f"Column '{column}' not found, will be ignored."
            summary.warnings.append(message)
            print(f"WARNING: {message}", file=sys.stderr)
        for column in classification.dropped_columns:
            message = f"Column '{column}' holds an earlier integrity result and will be dropped."
            summary.warnings.append(message)
            print(f"WARNING: {message}", file=sys.stderr)

        transform = self._stream(
            input_path,
            output_path,
            classification.identities,
            Direction.ENCRYPT,
        )

        summary.rows_written = transform.stats.rows_written
        summary.rows_skipped = transform.stats.rows_skipped
        return summary

    def decrypt_file(self, input_path: str | Path, output_path: str | Path | None) -> RunSummary:
        """
        Decrypt a file produced by :meth:`encrypt_file`.

        Protected columns are restored to their original names and
        positions; a ROWCHECK column reports the integrity check per row.

        Args:
            input_path: The encrypted CSV file
            output_path: Where to write, or None to derive it from the input

        Returns:
            Summary of the run

        Raises:
            ConfigurationError: For invalid options or an unusable header
        """
        input_path = Path(input_path)
        output_path = Path(output_path) if output_path else derive_output_path(input_path, False)
        self._check_paths(input_path, output_path)

        reconstruction = reconstruct_columns(self._read_header(input_path), self.password)

        summary = RunSummary(
            direction=Direction.DECRYPT,
            input_path=input_path,
            output_path=output_path,
            protected_columns=reconstruction.protected_count,
            integrity_checked=reconstruction.has_digest,
        )
        if reconstruction.protected_count == 0:
            message = "No protected columns recognized; check the password."
            summary.warnings.append(message)
            print(f"WARNING: {message}", file=sys.stderr)
        if not reconstruction.has_digest:
            message = "No row digest column found; rows will not be integrity checked."
            summary.warnings.append(message)
            print(f"WARNING: {message}", file=sys.stderr)

        transform = self._stream(
            input_path,
            output_path,
            reconstruction.identities,
            Direction.DECRYPT,
        )

        stats = transform.stats
        summary.rows_written = stats.rows_written
        summary.rows_skipped = stats.rows_skipped
        summary.integrity_passed = stats.integrity_passed
        summary.integrity_failed = stats.integrity_failed
        summary.undecryptable_fields = stats.undecryptable_fields

        if stats.integrity_failed:
            message = f"{stats.integrity_failed} row(s) failed the integrity check (ROWCHECK=FAIL)."
            summary.warnings.append(message)
            print(f"WARNING: {message}", file=sys.stderr)

        return summary
