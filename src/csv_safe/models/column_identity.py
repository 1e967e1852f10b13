"""
Column identity model.

A column identity describes one output column: where its value comes from,
what it is called on output, where it goes and which disguises apply to it.
Identities are assembled with :class:`ColumnIdentityBuilder` and frozen into
:class:`ColumnIdentity` once every output name is resolved.
"""

from dataclasses import dataclass
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field

from ..config import ConfigurationError


# Prefix of the plaintext behind a protected column's masked header
SAFE_PREFIX = "SAFE:"

# Header of the column carrying the per-row digest
DIGEST_COLUMN = "CRYPTOHASH"

# Header of the integrity-marker column appended on decrypt
ROW_CHECK_COLUMN = "ROWCHECK"

ROW_CHECK_PASS = "PASS"
ROW_CHECK_FAIL = "FAIL"


class Direction(str, Enum):
    """Direction of a remapping run."""

    ENCRYPT = "encrypt"
    DECRYPT = "decrypt"


class ColumnRole(str, Enum):
    """What a column carries."""

    # A column of the user's data, protected or not
    DATA = "data"

    # The reserved column holding the per-row digest
    DIGEST = "digest"

    # The integrity marker added to decrypted output
    ROW_CHECK = "row_check"


class ColumnIdentity(BaseModel):
    """
    Resolved, read-only description of one output column.
    """

    model_config = ConfigDict(frozen=True)

    # Name used to look the value up in an incoming record
    input_name: str

    # Name written to the output header
    output_name: str = Field(min_length=1)

    # -1 for columns that do not come from the input
    input_position: int = Field(default=-1, ge=-1)

    output_position: int = Field(ge=0)

    header_disguised: bool = False
    value_disguised: bool = False
    include_in_output: bool = True
    role: ColumnRole = ColumnRole.DATA


@dataclass
class ColumnIdentityBuilder:
    """
    Mutable, possibly unresolved column identity.

    The output name may be left unset while columns are being classified;
    :meth:`resolve` fills it in and :meth:`build` refuses to produce an
    identity until that has happened.
    """

    input_name: str
    output_name: str | None = None
    input_position: int = -1
    output_position: int = -1
    header_disguised: bool = False
    value_disguised: bool = False
    include_in_output: bool = True
    role: ColumnRole = ColumnRole.DATA

    def resolve(self, index: int) -> None:
        """
        Settle the output name.

        Falls back to the input name, then to ``FIELD_<index>``.

        Args:
            index: Ordinal used for the synthesized name
        """
        if self.output_name and self.output_name.strip():
            return
        if self.input_name and self.input_name.strip():
            self.output_name = self.input_name
        else:
            self.output_name = f"FIELD_{index}"

    def build(self) -> ColumnIdentity:
        """
        Freeze the builder into a column identity.

        Raises:
            ValueError: If the output name or position is unresolved
        """
        if self.output_name is None or self.output_position < 0:
            raise ValueError(f"Column '{self.input_name}' has not been resolved")

        return ColumnIdentity(
            input_name=self.input_name,
            output_name=self.output_name,
            input_position=self.input_position,
            output_position=self.output_position,
            header_disguised=self.header_disguised,
            value_disguised=self.value_disguised,
            include_in_output=self.include_in_output,
            role=self.role,
        )


def finalize_identities(builders: list[ColumnIdentityBuilder]) -> list[ColumnIdentity]:
    """
    Number, resolve and freeze an ordered list of builders.

    Output positions are assigned sequentially in list order.

    Args:
        builders: Builders in final output order

    Returns:
        Column identities in output order

    Raises:
        ConfigurationError: If two columns share an output name
    """
    identities: list[ColumnIdentity] = []
    seen: dict[str, str] = {}

    for position, builder in enumerate(builders):
        builder.output_position = position
        builder.resolve(position)

        folded = builder.output_name.casefold()
        if folded in seen:
            raise ConfigurationError(
                f"Duplicate output column name '{builder.output_name}' "
                f"(conflicts with '{seen[folded]}')"
            )
        seen[folded] = builder.output_name

        identities.append(builder.build())

    return identities


def copy_identities(identities: list[ColumnIdentity]) -> list[ColumnIdentity]:
    """Deep-copy a list of identities, ordered by output position."""
    return sorted(
        (identity.model_copy(deep=True) for identity in identities),
        key=lambda identity: identity.output_position,
    )


def safe_header_name(index: int, name: str) -> str:
    """Build the plaintext header of a protected column."""
    return f"{SAFE_PREFIX}{index}:{name}"
