"""
Tests for the ValueCipher class.
"""

import base64

import pytest

from csv_safe.config import ConfigurationError, CsvSafeConfig
from csv_safe.encryption import CipherResult, ValueCipher


class TestValueCipher:
    """Tests for the ValueCipher class."""

    def test_round_trip(self) -> None:
        """Test that protected values come back trimmed."""
        cipher = ValueCipher()

        test_values = [
            "simple string",
            "  padded value  ",
            "",
            "unicode: café, 日本語, emoji 🎉",
            "x" * 1000,
            "comma, \"quote\" and\nnewline",
        ]

        for value in test_values:
            token = cipher.protect(value, "p@ss")
            result = cipher.unprotect(token, "p@ss")

            assert result.success is True
            assert result.value == value.strip()

    def test_token_layout(self) -> None:
        """Test that a token is base64 of the salt followed by whole AES blocks."""
        cipher = ValueCipher()

        raw = base64.b64decode(cipher.protect("secret", "p@ss"), validate=True)

        assert len(raw) > cipher.salt_bytes
        assert (len(raw) - cipher.salt_bytes) % 16 == 0

    def test_fresh_salt_per_value(self) -> None:
        """Test that the same plaintext encrypts differently each time."""
        cipher = ValueCipher()

        tokens = {cipher.protect("same value", "p@ss") for _ in range(5)}

        assert len(tokens) == 5

    def test_wrong_password_fails(self) -> None:
        """Test that decrypting with the wrong password reports failure."""
        cipher = ValueCipher()
        token = cipher.protect("123-45-6789", "right password")

        result = cipher.unprotect(token, "wrong password")

        # A wrong key almost always breaks the padding; if it does not, the
        # plaintext is still not the original
        assert result.success is False or result.value != "123-45-6789"

    @pytest.mark.parametrize("token", ["not base64!", "", "QUJD", "QUJDRA=="])
    def test_malformed_tokens_fail(self, token: str) -> None:
        """Test that invalid base64 and short tokens fail without raising."""
        cipher = ValueCipher()

        result = cipher.unprotect(token, "p@ss")

        assert result == CipherResult(success=False, value=None)

    def test_truncated_ciphertext_fails(self) -> None:
        """Test that a ciphertext cut short of a block boundary fails."""
        cipher = ValueCipher()
        raw = base64.b64decode(cipher.protect("some secret value", "p@ss"))
        truncated = base64.b64encode(raw[:-3]).decode("ascii")

        assert cipher.unprotect(truncated, "p@ss").success is False

    def test_blank_password_rejected(self) -> None:
        """Test that a blank password is refused."""
        cipher = ValueCipher()

        with pytest.raises(ValueError):
            cipher.protect("value", "   ")
        with pytest.raises(ValueError):
            cipher.unprotect("QUJDRA==", "")

    def test_key_derivation(self) -> None:
        """Test that derivation is deterministic per password and salt."""
        cipher = ValueCipher()
        salt = b"\x01\x02\x03\x04"

        key_a, iv_a = cipher.derive_key("p@ss", salt)
        key_b, iv_b = cipher.derive_key("p@ss", salt)
        key_c, _ = cipher.derive_key("other", salt)

        assert (key_a, iv_a) == (key_b, iv_b)
        assert len(key_a) == 32
        assert len(iv_a) == 16
        assert key_a != key_c

    def test_iterations_from_config(self) -> None:
        """Test that the iteration count comes from configuration."""
        assert ValueCipher().key_iterations == CsvSafeConfig.get_key_iterations()
        assert ValueCipher(key_iterations=7).key_iterations == 7

    @pytest.mark.parametrize("kwargs", [{"key_iterations": 0}, {"salt_bytes": 0}, {"key_iterations": -5}])
    def test_invalid_explicit_settings(self, kwargs: dict) -> None:
        """Test that explicit zero or negative settings are rejected, not replaced."""
        with pytest.raises(ConfigurationError, match="at least 1"):
            ValueCipher(**kwargs)

    def test_iteration_count_must_match(self) -> None:
        """Test that a token only opens with the iteration count it was made with."""
        token = ValueCipher(key_iterations=50).protect("secret", "p@ss")

        result = ValueCipher(key_iterations=51).unprotect(token, "p@ss")

        assert result.success is False or result.value != "secret"
