"""Unit tests for password obfuscation."""

import pytest

from unirecords.credentials import MAX_PASS, SALT, obfuscate, verify_password


@pytest.mark.unit
class TestObfuscate:
    """Tests for obfuscate."""

    def test_fixed_width(self) -> None:
        assert len(obfuscate("admin123")) == MAX_PASS
        assert len(obfuscate("x" * 100)) == MAX_PASS

    def test_salt_applied_bytewise(self) -> None:
        block = obfuscate("admin123")

        assert block[0] == ord("a") ^ 0x55
        assert block[1] == ord("d") ^ 0x2A

    def test_empty_password_is_salt_pattern(self) -> None:
        assert obfuscate("") == SALT * (MAX_PASS // len(SALT))

    def test_not_plaintext(self) -> None:
        assert b"admin123" not in obfuscate("admin123")

    def test_reversible_with_salt(self) -> None:
        block = obfuscate("teacher123")
        plain = bytes(b ^ SALT[i % len(SALT)] for i, b in enumerate(block))

        assert plain.rstrip(b"\0") == b"teacher123"

    def test_long_password_truncated(self) -> None:
        assert obfuscate("y" * 40) == obfuscate("y" * MAX_PASS)


@pytest.mark.unit
class TestVerifyPassword:
    """Tests for verify_password."""

    def test_matching_password(self) -> None:
        assert verify_password(obfuscate("student123"), "student123")

    def test_wrong_password(self) -> None:
        assert not verify_password(obfuscate("student123"), "student124")

    def test_prefix_does_not_match(self) -> None:
        assert not verify_password(obfuscate("student123"), "student")
