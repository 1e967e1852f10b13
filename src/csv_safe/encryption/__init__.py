"""
Encryption utilities for csv-safe.

This module provides the value cipher, the header masking codec and the
row integrity digest.
"""

from .header_codec import mask, unmask
from .row_digest import EMPTY_DIGEST, digest, digest_values
from .value_cipher import CipherResult, ValueCipher

__all__ = [
    "CipherResult",
    "ValueCipher",
    "mask",
    "unmask",
    "EMPTY_DIGEST",
    "digest",
    "digest_values",
]
