"""
csv-safe - selective column encryption for CSV files.

This package encrypts a chosen subset of CSV columns so the file can be
shared, and restores the original columns, names and order when the file
comes back, using nothing but the password and the file itself.
"""

from .config import ConfigurationError, CsvSafeConfig
from .csv_safe_service import CsvSafeService, RunSummary, derive_output_path
from .encryption import CipherResult, ValueCipher, digest, mask, unmask
from .models import ColumnIdentity, Direction

__version__ = "0.1.0"

__all__ = [
    "ConfigurationError",
    "CsvSafeConfig",
    "CsvSafeService",
    "RunSummary",
    "derive_output_path",
    "CipherResult",
    "ValueCipher",
    "digest",
    "mask",
    "unmask",
    "ColumnIdentity",
    "Direction",
]
