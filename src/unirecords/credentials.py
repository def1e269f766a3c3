"""Password obfuscation for login accounts.

Passwords are XORed with a rotating 8-byte salt into a fixed 32-byte block.
This is obfuscation, not hashing: anyone holding users.dat can reverse it.
It is kept so existing user files stay readable.
"""

from __future__ import annotations

import hmac

MAX_PASS = 32
SALT = bytes([0x55, 0x2A, 0x11, 0xC3, 0x7E, 0x90, 0x04, 0xD1])


def obfuscate(password: str) -> bytes:
    """Obfuscate a password into a MAX_PASS-byte block.

    The UTF-8 password is truncated or NUL-padded to MAX_PASS bytes before
    the salt is applied.
    """
    plain = password.encode("utf-8")[:MAX_PASS].ljust(MAX_PASS, b"\0")
    return bytes(p ^ SALT[i % len(SALT)] for i, p in enumerate(plain))


def verify_password(stored: bytes, attempt: str) -> bool:
    """Check ``attempt`` against an obfuscated block."""
    return hmac.compare_digest(stored, obfuscate(attempt))
