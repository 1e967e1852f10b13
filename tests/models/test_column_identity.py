"""
Tests for the column identity model and builder.
"""

import pytest
from pydantic import ValidationError

from csv_safe.config import ConfigurationError
from csv_safe.models import (
    ColumnIdentity,
    ColumnIdentityBuilder,
    ColumnRole,
    copy_identities,
    finalize_identities,
    safe_header_name,
)


class TestColumnIdentity:
    """Tests for ColumnIdentity and ColumnIdentityBuilder."""

    def test_identity_is_frozen(self) -> None:
        """Test that identities cannot be changed once built."""
        identity = ColumnIdentity(input_name="Name", output_name="Name", output_position=0)

        with pytest.raises(ValidationError):
            identity.output_name = "Other"

    def test_output_name_required(self) -> None:
        """Test that an identity cannot have an empty output name."""
        with pytest.raises(ValidationError):
            ColumnIdentity(input_name="Name", output_name="", output_position=0)

    def test_unresolved_builder_refuses_to_build(self) -> None:
        """Test that a builder without an output name or position cannot be built."""
        builder = ColumnIdentityBuilder(input_name="Name")

        with pytest.raises(ValueError):
            builder.build()

    def test_resolve_defaults(self) -> None:
        """Test the output name fallbacks."""
        named = ColumnIdentityBuilder(input_name="Amount", output_name="  ")
        named.resolve(3)
        assert named.output_name == "Amount"

        unnamed = ColumnIdentityBuilder(input_name="")
        unnamed.resolve(3)
        assert unnamed.output_name == "FIELD_3"

        explicit = ColumnIdentityBuilder(input_name="SSN", output_name="SAFE:1:SSN")
        explicit.resolve(3)
        assert explicit.output_name == "SAFE:1:SSN"

    def test_finalize_assigns_positions(self) -> None:
        """Test that finalize numbers columns in list order."""
        identities = finalize_identities(
            [
                ColumnIdentityBuilder(input_name="B", input_position=1),
                ColumnIdentityBuilder(input_name="A", input_position=0),
                ColumnIdentityBuilder(input_name="HASH", role=ColumnRole.DIGEST),
            ]
        )

        assert [i.output_name for i in identities] == ["B", "A", "HASH"]
        assert [i.output_position for i in identities] == [0, 1, 2]
        assert identities[2].input_position == -1
        assert identities[2].role == ColumnRole.DIGEST

    def test_finalize_rejects_duplicate_names(self) -> None:
        """Test that output names must be unique ignoring case."""
        with pytest.raises(ConfigurationError, match="Duplicate"):
            finalize_identities(
                [
                    ColumnIdentityBuilder(input_name="name"),
                    ColumnIdentityBuilder(input_name="NAME"),
                ]
            )

    def test_copy_identities(self) -> None:
        """Test that copies are equal, separate and sorted by output position."""
        original = [
            ColumnIdentity(input_name="B", output_name="B", output_position=1),
            ColumnIdentity(input_name="A", output_name="A", output_position=0),
        ]

        copied = copy_identities(original)

        assert [i.output_name for i in copied] == ["A", "B"]
        assert copied[0] == original[1]
        assert copied[0] is not original[1]
        assert [i.output_name for i in original] == ["B", "A"]

    def test_safe_header_name(self) -> None:
        """Test the plaintext form of a protected header."""
        assert safe_header_name(1, "SSN") == "SAFE:1:SSN"
        assert safe_header_name(0, "a:b") == "SAFE:0:a:b"
