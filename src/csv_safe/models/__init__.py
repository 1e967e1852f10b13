"""
Column identity models for csv-safe.
"""

from .column_identity import (
    DIGEST_COLUMN,
    ROW_CHECK_COLUMN,
    ROW_CHECK_FAIL,
    ROW_CHECK_PASS,
    SAFE_PREFIX,
    ColumnIdentity,
    ColumnIdentityBuilder,
    ColumnRole,
    Direction,
    copy_identities,
    finalize_identities,
    safe_header_name,
)

__all__ = [
    "DIGEST_COLUMN",
    "ROW_CHECK_COLUMN",
    "ROW_CHECK_FAIL",
    "ROW_CHECK_PASS",
    "SAFE_PREFIX",
    "ColumnIdentity",
    "ColumnIdentityBuilder",
    "ColumnRole",
    "Direction",
    "copy_identities",
    "finalize_identities",
    "safe_header_name",
]
