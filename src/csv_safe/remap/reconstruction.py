"""
Column reconstruction for the decrypt direction.

The only input is the header of the returned file. Protected columns are
recognized by unmasking each header with the password; their original
position travels inside the masked name, so they land back where they
started no matter how the other columns were moved, renamed or deleted.
"""

import re
from collections.abc import Sequence
from dataclasses import dataclass

from ..encryption import unmask
from ..models import (
    DIGEST_COLUMN,
    ROW_CHECK_COLUMN,
    ColumnIdentity,
    ColumnIdentityBuilder,
    ColumnRole,
    finalize_identities,
)
from .classification import normalize_header


_SAFE_NAME = re.compile(r"SAFE:([0-9]+):(.+)", re.DOTALL)


@dataclass
class ReconstructionResult:
    """
    Output of the decrypt-side header pass.
    """

    # Column identities in output order, including any hidden digest column
    identities: list[ColumnIdentity]

    # Number of protected columns recognized
    protected_count: int

    # Whether a digest carrier column was found
    has_digest: bool


def parse_safe_name(text: str) -> tuple[int, str] | None:
    """
    Split an unmasked ``SAFE:<index>:<name>`` header.

    Args:
        text: Unmasked header text

    Returns:
        Tuple of (original index, original name), or None if it does not match
    """
    match = _SAFE_NAME.fullmatch(text)
    if match is None:
        return None
    return int(match.group(1)), match.group(2)


def reconstruct_columns(header: Sequence[str], password: str) -> ReconstructionResult:
    """
    Recover the original column layout from a disguised header.

    Args:
        header: The header record of the encrypted file
        password: The password used to mask the protected headers

    Returns:
        ReconstructionResult with identities in original column order

    Raises:
        ConfigurationError: For blank or duplicate header names, or if two
            recovered columns share a name
    """
    names = normalize_header(header)

    regular: list[ColumnIdentityBuilder] = []
    protected: list[tuple[int, ColumnIdentityBuilder]] = []
    digest_carrier: ColumnIdentityBuilder | None = None

    for position, name in enumerate(names):
        plain = unmask(name, password)
        safe = parse_safe_name(plain) if plain else None

        if safe is not None:
            original_index, original_name = safe
            protected.append(
                (
                    original_index,
                    ColumnIdentityBuilder(
                        input_name=name,
                        output_name=original_name,
                        input_position=position,
                        header_disguised=True,
                        value_disguised=True,
                    ),
                )
            )
        elif plain == DIGEST_COLUMN and digest_carrier is None:
            digest_carrier = ColumnIdentityBuilder(
                input_name=name,
                output_name=DIGEST_COLUMN,
                input_position=position,
                include_in_output=False,
                role=ColumnRole.DIGEST,
            )
        else:
            regular.append(
                ColumnIdentityBuilder(input_name=name, output_name=name, input_position=position)
            )

    # A stale ROWCHECK column is replaced by the fresh one
    if digest_carrier is not None:
        regular = [b for b in regular if b.input_name.casefold() != ROW_CHECK_COLUMN.casefold()]

    # Ascending order keeps earlier insertions from shifting later targets
    columns = list(regular)
    for original_index, builder in sorted(protected, key=lambda item: item[0]):
        columns.insert(min(original_index, len(columns)), builder)

    if digest_carrier is not None:
        columns.append(
            ColumnIdentityBuilder(
                input_name=ROW_CHECK_COLUMN,
                output_name=ROW_CHECK_COLUMN,
                role=ColumnRole.ROW_CHECK,
            )
        )
        columns.append(digest_carrier)

    return ReconstructionResult(
        identities=finalize_identities(columns),
        protected_count=len(protected),
        has_digest=digest_carrier is not None,
    )
