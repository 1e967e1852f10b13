"""
Remap transform.

Turns input records into output records using a fixed list of column
identities, in either direction. One record is handled at a time; nothing
carries over from one row to the next apart from the run counters.
"""

from collections.abc import Iterator, Mapping, Sequence
from dataclasses import dataclass
from typing import Protocol

from ..encryption import ValueCipher, digest_values, mask
from ..models import (
    ROW_CHECK_FAIL,
    ROW_CHECK_PASS,
    ColumnIdentity,
    ColumnRole,
    Direction,
    copy_identities,
)


class RecordSink(Protocol):
    """Anything that accepts one output record at a time."""

    def write_record(self, fields: Sequence[str]) -> None: ...


class RowLookup(Mapping[str, str]):
    """
    Case-insensitive, read-only view of one record by column name.

    Missing fields (short records) read as the empty string.
    """

    def __init__(self, header: Sequence[str], fields: Sequence[str]) -> None:
        self._names = list(header)
        self._values: dict[str, str] = {}
        for index, name in enumerate(self._names):
            self._values[name.casefold()] = fields[index] if index < len(fields) else ""

    def try_get(self, name: str) -> tuple[bool, str]:
        """
        Look a field up by name.

        Returns:
            Tuple of (found, value); value is "" when not found
        """
        folded = name.casefold()
        if folded in self._values:
            return True, self._values[folded]
        return False, ""

    def value(self, name: str) -> str:
        """Get a field value, or "" if the record has no such column."""
        return self.try_get(name)[1]

    def is_empty(self) -> bool:
        """True when every field of the record is blank."""
        return all(not v.strip() for v in self._values.values())

    def __getitem__(self, name: str) -> str:
        found, value = self.try_get(name)
        if not found:
            raise KeyError(name)
        return value

    def __iter__(self) -> Iterator[str]:
        return iter(self._names)

    def __len__(self) -> int:
        return len(self._names)


@dataclass
class TransformStats:
    """Counters for one run."""

    rows_written: int = 0
    rows_skipped: int = 0
    integrity_passed: int = 0
    integrity_failed: int = 0
    undecryptable_fields: int = 0


class RemapTransform:
    """
    Writes the remapped header and rows of one run.

    The identity list is copied on construction, so the caller's list is
    never touched.
    """

    def __init__(
        self,
        writer: RecordSink,
        identities: list[ColumnIdentity],
        password: str,
        direction: Direction,
        cipher: ValueCipher | None = None,
    ) -> None:
        """
        Initialize the transform.

        Args:
            writer: Destination for output records
            identities: Column identities from classification or reconstruction
            password: The run password
            direction: Whether rows are being encrypted or decrypted
            cipher: Value cipher to use, defaults to a configured ValueCipher

        Raises:
            ValueError: If the password is blank
        """
        if not password or not password.strip():
            raise ValueError("A non-blank password is required")

        self.writer = writer
        self.password = password
        self.direction = direction
        self.cipher = cipher or ValueCipher()
        self.identities = copy_identities(identities)
        self.stats = TransformStats()

        self._digest_column = next(
            (i for i in self.identities if i.role == ColumnRole.DIGEST), None
        )

    @property
    def output_columns(self) -> list[ColumnIdentity]:
        """Identities that produce a visible column, in output order."""
        return [i for i in self.identities if i.include_in_output]

    def header(self) -> list[str]:
        """
        Build the output header.

        Encrypting masks disguised names. Decrypting writes names as they
        are, since reconstruction has already recovered them.
        """
        names = []
        for identity in self.output_columns:
            if identity.header_disguised and self.direction == Direction.ENCRYPT:
                names.append(mask(identity.output_name, self.password))
            else:
                names.append(identity.output_name)
        return names

    def write_header(self) -> None:
        """Write the output header record."""
        self.writer.write_record(self.header())

    def remap_row(self, row: RowLookup) -> list[str] | None:
        """
        Transform one record.

        Args:
            row: The input record

        Returns:
            The output fields, or None if the record should be skipped
        """
        if row.is_empty():
            return None

        if self.direction == Direction.ENCRYPT:
            return self._encrypt_row(row)
        return self._decrypt_row(row)

    def write_row(self, row: RowLookup) -> bool:
        """
        Transform and write one record.

        Args:
            row: The input record

        Returns:
            True if a record was written
        """
        fields = self.remap_row(row)
        if fields is None:
            self.stats.rows_skipped += 1
            return False

        self.writer.write_record(fields)
        self.stats.rows_written += 1
        return True

    def _encrypt_row(self, row: RowLookup) -> list[str]:
        row_digest = digest_values(
            row.value(i.input_name) for i in self.identities if i.value_disguised
        )

        fields = []
        for identity in self.output_columns:
            if identity.role == ColumnRole.DIGEST:
                fields.append(row_digest)
                continue

            value = row.value(identity.input_name)
            if identity.value_disguised:
                value = self.cipher.protect(value, self.password)
            fields.append(value)

        return fields

    def _decrypt_row(self, row: RowLookup) -> list[str]:
        # Decrypt each protected field once; failures fall back to the raw text
        recovered: dict[int, str] = {}
        for identity in self.output_columns:
            if not identity.value_disguised:
                continue
            raw = row.value(identity.input_name)
            result = self.cipher.unprotect(raw, self.password)
            if result.success:
                recovered[identity.output_position] = result.value
            else:
                recovered[identity.output_position] = raw
                self.stats.undecryptable_fields += 1

        row_check = ROW_CHECK_FAIL
        if self._digest_column is not None:
            stored = row.value(self._digest_column.input_name).strip()
            if stored and stored == digest_values(recovered.values()):
                row_check = ROW_CHECK_PASS

            if row_check == ROW_CHECK_PASS:
                self.stats.integrity_passed += 1
            else:
                self.stats.integrity_failed += 1

        fields = []
        for identity in self.output_columns:
            if identity.role == ColumnRole.ROW_CHECK:
                fields.append(row_check)
            elif identity.value_disguised:
                fields.append(recovered[identity.output_position])
            else:
                fields.append(row.value(identity.input_name))

        return fields
