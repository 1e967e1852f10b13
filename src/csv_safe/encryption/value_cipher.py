"""
Value cipher implementation.

This module provides symmetric encryption of individual CSV cell values
under a password. Every value carries its own random salt, so equal
plaintexts produce different tokens.
"""

import base64
import binascii
import os
from dataclasses import dataclass

from cryptography.hazmat.backends import default_backend
from cryptography.hazmat.primitives import hashes, padding
from cryptography.hazmat.primitives.ciphers import Cipher, algorithms, modes
from cryptography.hazmat.primitives.kdf.pbkdf2 import PBKDF2HMAC

from ..config import ConfigurationError, CsvSafeConfig


# AES-256 key followed by a 128-bit IV, both taken from one derivation
KEY_BYTES = 32
IV_BYTES = 16


@dataclass(frozen=True)
class CipherResult:
    """
    Outcome of an attempt to unprotect a value.

    Decryption failures are expected during reconstruction (wrong password,
    values edited by a third party), so they are reported here instead of
    being raised.
    """

    # Whether the token decrypted cleanly
    success: bool

    # The recovered plaintext, only set on success
    value: str | None = None


class ValueCipher:
    """
    Encrypts and decrypts single text values.

    Tokens have the form ``base64(salt || ciphertext)``. The key and IV are
    derived from the password and salt with PBKDF2-HMAC-SHA256 and the value
    is encrypted with AES-CBC and PKCS7 padding.
    """

    def __init__(self, key_iterations: int | None = None, salt_bytes: int | None = None) -> None:
        """
        Initialize the value cipher.

        Args:
            key_iterations: PBKDF2 iteration count, defaults to configuration
            salt_bytes: Size of the random salt, defaults to configuration

        Raises:
            ConfigurationError: If either value is less than 1
        """
        if key_iterations is None:
            key_iterations = CsvSafeConfig.get_key_iterations()
        if salt_bytes is None:
            salt_bytes = CsvSafeConfig.get_salt_bytes()

        if key_iterations < 1:
            raise ConfigurationError("key_iterations must be at least 1")
        if salt_bytes < 1:
            raise ConfigurationError("salt_bytes must be at least 1")

        self.key_iterations = key_iterations
        self.salt_bytes = salt_bytes

    def derive_key(self, password: str, salt: bytes) -> tuple[bytes, bytes]:
        """
        Derive the encryption key and IV for a password and salt.

        Args:
            password: The caller-supplied password
            salt: The per-value salt

        Returns:
            Tuple of (key, iv)
        """
        kdf = PBKDF2HMAC(
            algorithm=hashes.SHA256(),
            length=KEY_BYTES + IV_BYTES,
            salt=salt,
            iterations=self.key_iterations,
            backend=default_backend(),
        )
        material = kdf.derive(password.encode("utf-8"))
        return material[:KEY_BYTES], material[KEY_BYTES:]

    def protect(self, plaintext: str, password: str) -> str:
        """
        Encrypt a value.

        The value is trimmed before encryption; the empty string is
        encrypted like any other value.

        Args:
            plaintext: The value to encrypt
            password: The password to derive the key from

        Returns:
            The base64 token

        Raises:
            ValueError: If the password is blank
        """
        _require_password(password)

        salt = os.urandom(self.salt_bytes)
        key, iv = self.derive_key(password, salt)

        padder = padding.PKCS7(algorithms.AES.block_size).padder()
        padded = padder.update(plaintext.strip().encode("utf-8")) + padder.finalize()

        encryptor = Cipher(algorithms.AES(key), modes.CBC(iv), backend=default_backend()).encryptor()
        ciphertext = encryptor.update(padded) + encryptor.finalize()

        return base64.b64encode(salt + ciphertext).decode("ascii")

    def unprotect(self, token: str, password: str) -> CipherResult:
        """
        Decrypt a token produced by :meth:`protect`.

        Args:
            token: The base64 token
            password: The password to derive the key from

        Returns:
            CipherResult with the plaintext on success
        """
        _require_password(password)

        try:
            raw = base64.b64decode(token.strip(), validate=True)
        except (binascii.Error, ValueError):
            return CipherResult(success=False)

        if len(raw) <= self.salt_bytes:
            return CipherResult(success=False)

        salt, ciphertext = raw[: self.salt_bytes], raw[self.salt_bytes :]
        key, iv = self.derive_key(password, salt)

        try:
            decryptor = Cipher(algorithms.AES(key), modes.CBC(iv), backend=default_backend()).decryptor()
            padded = decryptor.update(ciphertext) + decryptor.finalize()

            unpadder = padding.PKCS7(algorithms.AES.block_size).unpadder()
            plaintext = unpadder.update(padded) + unpadder.finalize()

            return CipherResult(success=True, value=plaintext.decode("utf-8"))
        except ValueError:
            # Wrong password, truncated ciphertext or edited token
            return CipherResult(success=False)


def _require_password(password: str) -> None:
    if not password or not password.strip():
        raise ValueError("A non-blank password is required")
