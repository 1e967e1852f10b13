"""
Row integrity digest.

A short fingerprint of a row's protected values, used to detect rows whose
encrypted cells were damaged or edited between encryption and decryption.
"""

import base64
import hashlib
from collections.abc import Iterable


# Digest of a row with no protected data
EMPTY_DIGEST = "8675309"


def digest(value: str) -> str:
    """
    Fingerprint a string of concatenated values.

    MD5 is used for accidental-corruption detection only.

    Args:
        value: Concatenation of the row's trimmed protected values

    Returns:
        Base64 MD5 digest, or ``EMPTY_DIGEST`` for an empty input
    """
    if not value:
        return EMPTY_DIGEST

    hashed = hashlib.md5(value.encode("utf-8"), usedforsecurity=False).digest()
    return base64.b64encode(hashed).decode("ascii")


def digest_values(values: Iterable[str]) -> str:
    """Trim each value, concatenate in order and fingerprint the result."""
    return digest("".join(v.strip() for v in values))
