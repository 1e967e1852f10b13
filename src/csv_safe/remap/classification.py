"""
Column classification for the encrypt direction.

One pass over the input header splits the columns into pass-through and
protected columns and fixes the output layout for the whole run.
"""

from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field

from ..config import ConfigurationError
from ..models import (
    DIGEST_COLUMN,
    ROW_CHECK_COLUMN,
    ColumnIdentity,
    ColumnIdentityBuilder,
    ColumnRole,
    finalize_identities,
    safe_header_name,
)


@dataclass
class ClassificationResult:
    """
    Output of the encrypt-side header pass.
    """

    # Column identities in output order
    identities: list[ColumnIdentity]

    # Requested column names that matched no header, in request order
    missing_columns: list[str] = field(default_factory=list)

    # Integrity result columns left by an earlier decrypt, not carried over
    dropped_columns: list[str] = field(default_factory=list)

    @property
    def protected_count(self) -> int:
        """Number of columns selected for protection."""
        return sum(1 for identity in self.identities if identity.value_disguised)


def normalize_header(header: Sequence[str]) -> list[str]:
    """
    Trim header names and reject headers that rows cannot be addressed by.

    Args:
        header: The raw header record

    Returns:
        The trimmed header names

    Raises:
        ConfigurationError: If a name is blank or appears twice (ignoring case)
    """
    names = [name.strip() for name in header]
    seen: set[str] = set()

    for index, name in enumerate(names):
        if not name:
            raise ConfigurationError(
                f"All columns must have a header name (column {index} is blank)"
            )
        folded = name.casefold()
        if folded in seen:
            raise ConfigurationError(f"Duplicate header name '{name}'")
        seen.add(folded)

    return names


def classify_columns(header: Sequence[str], selected: Iterable[str]) -> ClassificationResult:
    """
    Classify header columns for encryption.

    Selected columns are renamed to ``SAFE:<index>:<name>`` and moved behind
    the pass-through columns, keeping their original order. The digest
    carrier column comes last. A ROWCHECK column from an earlier decrypt is
    dropped, and the original indexes count only the columns that remain.

    Args:
        header: The input header record
        selected: Names of the columns to protect, matched ignoring case

    Returns:
        ClassificationResult with the identities and any unmatched names

    Raises:
        ConfigurationError: For blank, duplicate or reserved header names
    """
    names = normalize_header(header)
    wanted = [name.strip() for name in selected if name and name.strip()]
    wanted_folded = {name.casefold() for name in wanted}

    if DIGEST_COLUMN.casefold() in {name.casefold() for name in names}:
        raise ConfigurationError(
            f"Header name '{DIGEST_COLUMN}' is reserved for the row digest column"
        )

    regular: list[ColumnIdentityBuilder] = []
    protected: list[ColumnIdentityBuilder] = []
    dropped: list[str] = []

    for position, name in enumerate(names):
        if name.casefold() == ROW_CHECK_COLUMN.casefold():
            dropped.append(name)
            continue

        index = position - len(dropped)
        if name.casefold() in wanted_folded:
            protected.append(
                ColumnIdentityBuilder(
                    input_name=name,
                    output_name=safe_header_name(index, name),
                    input_position=position,
                    header_disguised=True,
                    value_disguised=True,
                )
            )
        else:
            regular.append(
                ColumnIdentityBuilder(
                    input_name=name,
                    output_name=name,
                    input_position=position,
                )
            )

    digest_carrier = ColumnIdentityBuilder(
        input_name=DIGEST_COLUMN,
        output_name=DIGEST_COLUMN,
        header_disguised=True,
        role=ColumnRole.DIGEST,
    )

    found = {name.casefold() for name in names}
    missing: list[str] = []
    for name in wanted:
        if name.casefold() not in found and name not in missing:
            missing.append(name)

    return ClassificationResult(
        identities=finalize_identities(regular + protected + [digest_carrier]),
        missing_columns=missing,
        dropped_columns=dropped,
    )
