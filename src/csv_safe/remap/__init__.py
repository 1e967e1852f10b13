"""
Column remapping for csv-safe.

This module provides the header passes that build column identities and
the per-row transform that applies them.
"""

from .classification import ClassificationResult, classify_columns, normalize_header
from .reconstruction import ReconstructionResult, parse_safe_name, reconstruct_columns
from .transform import RecordSink, RemapTransform, RowLookup, TransformStats

__all__ = [
    "ClassificationResult",
    "classify_columns",
    "normalize_header",
    "ReconstructionResult",
    "parse_safe_name",
    "reconstruct_columns",
    "RecordSink",
    "RemapTransform",
    "RowLookup",
    "TransformStats",
]
