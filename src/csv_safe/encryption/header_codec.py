"""
Header name masking.

Header names are masked rather than encrypted: spreadsheet tools and other
intermediaries are free to change the case of a header, and a hex token
survives that where a base64 ciphertext would not. The mask hides the
name from casual reading; the cell values carry the real encryption.
"""

import secrets
import string


_HEX_DIGITS = frozenset(string.hexdigits)


def _key_stream(key: str, length: int) -> bytes:
    """Repeat or truncate the key bytes to the requested length."""
    key_bytes = key.encode("utf-8")
    if not key_bytes:
        raise ValueError("A non-empty masking key is required")
    repeats = length // len(key_bytes) + 1
    return (key_bytes * repeats)[:length]


def mask(name: str, key: str) -> str:
    """
    Mask a header name as a hex token.

    The name is XORed with the repeated key and then with a random 4-bit
    salt. The salt is written as the first hex digit of the token.

    Args:
        name: The header name to mask
        key: The masking key (the run password)

    Returns:
        Lowercase hex token
    """
    name_bytes = name.encode("utf-8")
    stream = _key_stream(key, len(name_bytes))
    salt = secrets.randbelow(16)

    masked = bytes(b ^ k ^ salt for b, k in zip(name_bytes, stream))
    return f"{salt:x}{masked.hex()}"


def unmask(token: str, key: str) -> str:
    """
    Recover a header name from a hex token.

    Any token that could not have come from :func:`mask` yields an empty
    string, which lets callers use this as a test for masked headers.

    Args:
        token: The hex token, in any case
        key: The masking key

    Returns:
        The original name, or "" if the token is not a valid mask
    """
    if not token or token[0] not in _HEX_DIGITS:
        return ""

    body = token[1:]
    if len(body) % 2 != 0 or not all(c in _HEX_DIGITS for c in body):
        return ""

    salt = int(token[0], 16)
    masked = bytes.fromhex(body)
    stream = _key_stream(key, len(masked))

    try:
        return bytes(b ^ salt ^ k for b, k in zip(masked, stream)).decode("utf-8")
    except UnicodeDecodeError:
        return ""
